from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Evidence, LedgerMonth, StoreMergeResult


class LedgerStore(Protocol):
    """Narrow write contract for every evidence producer.

    `merge` must be an OR-merge: implementations apply `aggregator.merge`
    under a per-(employee, month) lock so concurrent producers never lose or
    regress a cell.
    """

    def get_months(self, employee_id: str, month_keys: Optional[Sequence[str]] = None) -> Mapping[str, LedgerMonth]:
        raise NotImplementedError

    def merge(self, employee_id: str, evidence: Sequence[Evidence]) -> StoreMergeResult:
        raise NotImplementedError
