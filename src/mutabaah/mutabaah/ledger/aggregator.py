"""Pure OR-merge of evidence into per-employee ledgers.

The merge never mutates its input and never turns a `True` cell back into
`False`, so it is idempotent and commutative: re-delivering a batch, or
delivering two producers' batches in either order, yields the same ledger.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import AbstractSet, Iterable, List, Mapping, Set, Tuple

from ..common.datetime_utils import coerce_date, day_key_of, is_day_key, month_key_of
from ..core.exceptions import ValidationError
from .catalog import KNOWN_ACTIVITY_IDS
from .model import DroppedEvidence, Evidence, Ledger, MergeOutcome, MonthBucket

logger = logging.getLogger(__name__)

UNKNOWN_ACTIVITY = "unknown_activity"
MALFORMED_DATE = "malformed_date"


def sanitize_month(bucket: Mapping) -> MonthBucket:
    """Drop every key under a month that is not a two-digit day bucket.

    Legacy merges stored aggregate fields (counters, entries, ...) next to the
    day buckets; those never belong in the ledger.
    """

    clean: MonthBucket = {}
    for key, day in (bucket or {}).items():
        if not is_day_key(key) or not isinstance(day, Mapping):
            continue
        clean[key] = {str(a): bool(v) for a, v in day.items()}
    return clean


def sanitize_ledger(ledger: Mapping) -> Ledger:
    return {month: sanitize_month(bucket) for month, bucket in (ledger or {}).items() if isinstance(bucket, Mapping)}


def merge(
    ledgers: Mapping[str, Ledger],
    events: Iterable[Evidence],
    *,
    known_activities: AbstractSet[str] = KNOWN_ACTIVITY_IDS,
) -> MergeOutcome:
    """Merge `events` into `ledgers` (keyed by employee id).

    Items are applied in the order given. An item with an unknown activity id
    or a malformed date is dropped and logged; the rest of the batch goes on.
    """

    grouped: "OrderedDict[str, List[Evidence]]" = OrderedDict()
    for ev in events:
        grouped.setdefault(str(ev.employee_id), []).append(ev)

    result = dict(ledgers)
    dropped: List[DroppedEvidence] = []
    touched: List[Tuple[str, str]] = []
    applied = 0

    for employee_id, items in grouped.items():
        # sanitize_ledger also copies, so the input is never mutated
        ledger: Ledger = sanitize_ledger(ledgers.get(employee_id) or {})
        seen_months: Set[str] = set()

        for ev in items:
            if not ev.activity_id or ev.activity_id not in known_activities:
                logger.warning(
                    "dropping evidence from %s: unknown activity %r (employee=%s)",
                    ev.source.value, ev.activity_id, employee_id,
                )
                dropped.append(DroppedEvidence(UNKNOWN_ACTIVITY, f"activity {ev.activity_id!r}", evidence=ev))
                continue
            try:
                d = coerce_date(ev.date)
            except ValidationError as e:
                logger.warning("dropping evidence from %s: %s (employee=%s)", ev.source.value, e, employee_id)
                dropped.append(DroppedEvidence(MALFORMED_DATE, str(e), evidence=ev))
                continue

            mk, dk = month_key_of(d), day_key_of(d)
            if mk not in seen_months:
                seen_months.add(mk)
                touched.append((employee_id, mk))

            day = ledger.setdefault(mk, {}).setdefault(dk, {})
            day[ev.activity_id] = bool(day.get(ev.activity_id, False)) or bool(ev.present)
            applied += 1

        if employee_id in ledgers or ledger:
            result[employee_id] = ledger

    return MergeOutcome(ledgers=result, applied=applied, dropped=tuple(dropped), touched=tuple(touched))


def merge_employee(employee_id: str, ledger: Ledger, events: Iterable[Evidence]) -> Tuple[Ledger, MergeOutcome]:
    """Single-employee convenience used by ledger stores."""

    outcome = merge({employee_id: ledger}, [e for e in events if str(e.employee_id) == str(employee_id)])
    return dict(outcome.ledgers.get(employee_id, ledger)), outcome


def month_totals(bucket: Mapping) -> dict:
    """Days with a `True` cell, per activity."""

    totals: dict = {}
    for day in sanitize_month(bucket).values():
        for activity_id, present in day.items():
            if present:
                totals[activity_id] = totals.get(activity_id, 0) + 1
    return dict(sorted(totals.items()))
