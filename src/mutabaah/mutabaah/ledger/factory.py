from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import EvidenceSource, RequestKind
from .translators.attendance import AttendanceTranslator
from .translators.base import EvidenceTranslator
from .translators.manual import ManualRequestTranslator, SelfReportTranslator
from .translators.team_session import ScheduledActivityTranslator, TeamSessionTranslator


@dataclass
class EvidenceTranslatorFactory:
    """Factory Pattern: choose the translator for an evidence producer."""

    def for_source(self, source: EvidenceSource) -> EvidenceTranslator:
        if source == EvidenceSource.ATTENDANCE:
            return AttendanceTranslator()
        if source == EvidenceSource.TEAM_SESSION:
            return TeamSessionTranslator()
        if source == EvidenceSource.SCHEDULED_ACTIVITY:
            return ScheduledActivityTranslator()
        if source == EvidenceSource.SELF_REPORT:
            return SelfReportTranslator()
        return ManualRequestTranslator()

    def for_request_kind(self, kind: RequestKind) -> ManualRequestTranslator:
        return ManualRequestTranslator(kind)
