from __future__ import annotations

from typing import Any, Mapping, Optional

from ...core.enums import EvidenceSource, RequestKind
from ...core.exceptions import ValidationError
from ..catalog import prayer_activity_id
from ..model import Evidence
from .base import EvidenceTranslator, pick, canonical, from_session_vocabulary


class ManualRequestTranslator(EvidenceTranslator):
    """Approved manual requests.

    Tadarus requests carry a session category (defaults to tadarus); missed
    prayer requests carry a prayer id mapped to `<prayer>-default`.
    """

    source = EvidenceSource.MANUAL_REQUEST

    def __init__(self, kind: RequestKind = RequestKind.TADARUS):
        self.kind = kind

    def resolve_activity(self, ref: Optional[str]) -> Optional[str]:
        if self.kind == RequestKind.MISSED_PRAYER:
            return canonical(ref) or prayer_activity_id(ref or "")
        if not (ref or "").strip():
            return "tadarus"
        return from_session_vocabulary(ref)

    def translate(self, payload: Mapping[str, Any]) -> Evidence:
        # Only an approval produces evidence, so it is always `present`.
        return self._evidence(
            payload,
            activity_ref=pick(payload, "activityRef", "category", "prayerId"),
            date_value=pick(payload, "date"),
            present=True,
        )

    def for_request(self, request) -> Evidence:
        ev = self._evidence(
            {"employeeId": request.mentee_id},
            activity_ref=request.activity_ref,
            date_value=request.date,
            present=True,
        )
        if canonical(ev.activity_id) is None:
            raise ValidationError(f"Aktivitas tidak dikenal: {request.activity_ref!r}")
        return ev


class SelfReportTranslator(EvidenceTranslator):
    """Employee ticking a self-reported activity; canonical ids only."""

    source = EvidenceSource.SELF_REPORT

    def resolve_activity(self, ref: Optional[str]) -> Optional[str]:
        return canonical(ref)

    def translate(self, payload: Mapping[str, Any]) -> Evidence:
        return self._evidence(
            payload,
            activity_ref=pick(payload, "activityId"),
            date_value=pick(payload, "date"),
            present=bool(payload.get("present", True)),
        )
