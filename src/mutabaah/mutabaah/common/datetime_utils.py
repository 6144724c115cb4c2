from __future__ import annotations

import re
from datetime import date, datetime

from ..core.constants import DAY_KEY_PATTERN, MONTH_KEY_PATTERN
from ..core.exceptions import ValidationError

_DAY_KEY_RE = re.compile(DAY_KEY_PATTERN)
_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Tanggal tidak valid (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(f"Waktu tidak valid: {value!r}")


def month_key_of(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def day_key_of(d: date) -> str:
    return f"{d.day:02d}"


def is_day_key(key: str) -> bool:
    return isinstance(key, str) and bool(_DAY_KEY_RE.match(key))


def parse_month_key(value: str) -> date:
    """Return the first day of a YYYY-MM month key."""
    v = (value or "").strip()
    if not _MONTH_KEY_RE.match(v):
        raise ValidationError(f"Bulan tidak valid (YYYY-MM): {value!r}")
    return date(int(v[:4]), int(v[5:7]), 1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def coerce_date(value) -> date:
    """Accept a date, a datetime or an ISO date string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))
