from __future__ import annotations

from typing import Any, Mapping, Optional

from ...core.enums import EvidenceSource
from ..model import Evidence
from .base import EvidenceTranslator, pick, from_session_vocabulary, present_flag


class TeamSessionTranslator(EvidenceTranslator):
    """Team-session rosters (KIE, Doa Bersama, BBQ, ...)."""

    source = EvidenceSource.TEAM_SESSION

    def resolve_activity(self, ref: Optional[str]) -> Optional[str]:
        return from_session_vocabulary(ref)

    def translate(self, payload: Mapping[str, Any]) -> Evidence:
        return self._evidence(
            payload,
            activity_ref=pick(payload, "activityId", "sessionType", "session_type"),
            date_value=pick(payload, "date", "sessionDate", "session_date"),
            present=present_flag(payload),
        )


class ScheduledActivityTranslator(TeamSessionTranslator):
    """Scheduled-activity attendance (Kajian Selasa, Pengajian, ...)."""

    source = EvidenceSource.SCHEDULED_ACTIVITY

    def translate(self, payload: Mapping[str, Any]) -> Evidence:
        return self._evidence(
            payload,
            activity_ref=pick(payload, "activityId", "activityType", "activity_type"),
            date_value=pick(payload, "date", "activityDate"),
            present=present_flag(payload),
        )
