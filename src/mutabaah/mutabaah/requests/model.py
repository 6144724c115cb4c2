from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Optional, Union

from ..core.enums import RequestKind, RequestStatus


@dataclass(frozen=True)
class TadarusRequest:
    """Claim of attendance at a tadarus/session that was not captured."""

    kind: ClassVar[RequestKind] = RequestKind.TADARUS

    request_id: int
    mentee_id: str
    date: date
    category: str
    status: RequestStatus
    requested_at: datetime
    mentee_name: str = ""
    mentor_id: Optional[str] = None
    notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None
    ledger_synced_at: Optional[datetime] = None

    @property
    def activity_ref(self) -> str:
        return self.category

    def to_dict(self) -> dict:
        return _to_dict(self, {"category": self.category})


@dataclass(frozen=True)
class MissedPrayerRequest:
    """Claim of a congregational prayer that was not recorded."""

    kind: ClassVar[RequestKind] = RequestKind.MISSED_PRAYER

    request_id: int
    mentee_id: str
    date: date
    prayer_id: str
    status: RequestStatus
    requested_at: datetime
    mentee_name: str = ""
    mentor_id: Optional[str] = None
    notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None
    ledger_synced_at: Optional[datetime] = None

    @property
    def activity_ref(self) -> str:
        return self.prayer_id

    def to_dict(self) -> dict:
        return _to_dict(self, {"prayerId": self.prayer_id})


ManualRequest = Union[TadarusRequest, MissedPrayerRequest]


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _to_dict(req: ManualRequest, extra: dict) -> dict:
    out = {
        "id": req.request_id,
        "kind": req.kind.value,
        "menteeId": req.mentee_id,
        "menteeName": req.mentee_name,
        "mentorId": req.mentor_id,
        "date": req.date.isoformat(),
        "status": req.status.value,
        "notes": req.notes,
        "requestedAt": _iso(req.requested_at),
        "reviewedBy": req.reviewed_by,
        "reviewedAt": _iso(req.reviewed_at),
        "reviewerNotes": req.reviewer_notes,
        "ledgerSyncedAt": _iso(req.ledger_synced_at),
    }
    out.update(extra)
    return out
