"""Locking policy: may a (date, employee) pair still be edited?

Pure functions only; the trusted current time is passed in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Union

from ..common.datetime_utils import month_key_of
from ..core.enums import LockingMode, SubmissionStatus

logger = logging.getLogger(__name__)

FUTURE_DATE = "future_date"
OUTSIDE_CURRENT_MONTH = "outside_current_month"
MONTH_SUBMITTED = "month_submitted"


class SubmissionLike(Protocol):
    mentee_id: str
    month_key: str
    status: SubmissionStatus


@dataclass(frozen=True)
class LockDecision:
    editable: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.editable


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def check_editable(
    target: Union[date, datetime],
    employee_id: str,
    locking_mode: LockingMode,
    existing_submissions: Iterable[SubmissionLike],
    *,
    now: Union[date, datetime],
) -> LockDecision:
    """Evaluate the rules in order and report the first one that rejects."""

    target_day = _as_date(target)
    today = _as_date(now)

    if target_day > today:
        return LockDecision(False, FUTURE_DATE)

    # Both modes restrict edits to the running month; a per-week boundary
    # for WEEKLY is not defined yet.
    if locking_mode == LockingMode.WEEKLY:
        logger.debug("weekly locking mode evaluated as current-month-only")
    month_key = month_key_of(target_day)
    if month_key != month_key_of(today):
        return LockDecision(False, OUTSIDE_CURRENT_MONTH)

    for sub in existing_submissions:
        if str(sub.mentee_id) != str(employee_id) or sub.month_key != month_key:
            continue
        if sub.status == SubmissionStatus.APPROVED or sub.status.is_pending:
            return LockDecision(False, MONTH_SUBMITTED)

    return LockDecision(True)


def is_editable(
    target: Union[date, datetime],
    employee_id: str,
    locking_mode: LockingMode,
    existing_submissions: Iterable[SubmissionLike],
    *,
    now: Union[date, datetime],
) -> bool:
    return check_editable(target, employee_id, locking_mode, existing_submissions, now=now).editable


def is_month_frozen(employee_id: str, month_key: str, existing_submissions: Iterable[SubmissionLike]) -> bool:
    """An approved month is immutable regardless of the date rules."""

    return any(
        str(s.mentee_id) == str(employee_id) and s.month_key == month_key and s.status == SubmissionStatus.APPROVED
        for s in existing_submissions
    )
