from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestKind, RequestStatus
from .model import ManualRequest


class RequestRepository(Protocol):
    """Both manual request kinds share one lifecycle; `kind` picks the table."""

    def create(
        self,
        *,
        kind: RequestKind,
        mentee_id: str,
        mentor_id: Optional[str],
        request_date: date,
        activity_ref: str,
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get(self, *, kind: RequestKind, request_id: int) -> Optional[ManualRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        kind: RequestKind,
        mentee_id: Optional[str] = None,
        mentor_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[ManualRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        kind: RequestKind,
        request_id: int,
        status: RequestStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        reviewer_notes: Optional[str] = None,
    ) -> bool:
        """Resolve a pending request; False when it was no longer pending."""

        raise NotImplementedError

    def mark_synced(self, *, kind: RequestKind, request_id: int, synced_at: datetime) -> bool:
        raise NotImplementedError
