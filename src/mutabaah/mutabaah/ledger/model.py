from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Mapping, Optional, Tuple, Union

from ..core.enums import EvidenceSource

# month_key -> day_key -> activity_id -> present
DayBucket = Dict[str, bool]
MonthBucket = Dict[str, DayBucket]
Ledger = Dict[str, MonthBucket]


@dataclass(frozen=True)
class Evidence:
    """A single (employee, activity, date, present) fact from a producer.

    `date` may still be the ISO string the producer sent; it is parsed per
    item during the merge so one malformed date only drops that item.
    """

    employee_id: str
    activity_id: str
    date: Union[date, str]
    present: bool = True
    source: EvidenceSource = EvidenceSource.ATTENDANCE

    def to_dict(self) -> dict:
        d = self.date.isoformat() if isinstance(self.date, date) else str(self.date)
        return {
            "employeeId": self.employee_id,
            "activityId": self.activity_id,
            "date": d,
            "present": bool(self.present),
            "source": self.source.value,
        }


@dataclass(frozen=True)
class DroppedEvidence:
    reason: str
    detail: str
    evidence: Optional[Evidence] = None
    payload: Optional[Mapping] = None

    def to_dict(self) -> dict:
        return {
            "reason": self.reason,
            "detail": self.detail,
            "evidence": self.evidence.to_dict() if self.evidence else None,
        }


@dataclass(frozen=True)
class MergeOutcome:
    """Result of the pure merge: new per-employee ledgers plus bookkeeping."""

    ledgers: Mapping[str, Ledger]
    applied: int
    dropped: Tuple[DroppedEvidence, ...] = ()
    touched: Tuple[Tuple[str, str], ...] = ()  # (employee_id, month_key)


@dataclass(frozen=True)
class LedgerMonth:
    """One persisted month of one employee, with its cache metadata."""

    employee_id: str
    month_key: str
    days: MonthBucket = field(default_factory=dict)
    last_merged_at: Optional[datetime] = None


@dataclass(frozen=True)
class StoreMergeResult:
    employee_id: str
    months: Mapping[str, LedgerMonth]
    applied: int
    dropped: Tuple[DroppedEvidence, ...] = ()


@dataclass(frozen=True)
class IngestReport:
    applied: int
    dropped: Tuple[DroppedEvidence, ...] = ()
    last_merged_at: Mapping[Tuple[str, str], datetime] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.dropped

    def to_dict(self) -> dict:
        return {
            "applied": self.applied,
            "dropped": [d.to_dict() for d in self.dropped],
            "lastMergedAt": {
                f"{emp}/{month}": ts.isoformat() for (emp, month), ts in self.last_merged_at.items()
            },
        }


@dataclass(frozen=True)
class LedgerMonthView:
    month_key: str
    days: MonthBucket
    last_merged_at: Optional[datetime]
    changed: bool
    totals: Mapping[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "monthKey": self.month_key,
            "days": self.days,
            "lastMergedAt": self.last_merged_at.isoformat() if self.last_merged_at else None,
            "changed": self.changed,
            "totals": dict(self.totals),
        }
