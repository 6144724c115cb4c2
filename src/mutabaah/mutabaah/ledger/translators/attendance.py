from __future__ import annotations

from typing import Any, Mapping, Optional

from ...core.enums import EvidenceSource
from ..model import Evidence
from .base import EvidenceTranslator, pick, canonical, date_part, present_flag


class AttendanceTranslator(EvidenceTranslator):
    """Prayer attendance capture: a `hadir` record counts as shalat berjamaah."""

    source = EvidenceSource.ATTENDANCE

    def resolve_activity(self, ref: Optional[str]) -> Optional[str]:
        if ref is None:
            return "shalat_berjamaah"
        return canonical(ref)

    def translate(self, payload: Mapping[str, Any]) -> Evidence:
        return self._evidence(
            payload,
            activity_ref=pick(payload, "activityId"),
            date_value=date_part(pick(payload, "date", "timestamp")),
            present=present_flag(payload),
        )
