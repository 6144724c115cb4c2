from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..core.constants import DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS
from .datetime_utils import now_local

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeCheck:
    is_valid: bool
    corrected_time: datetime
    drift_seconds: float


class TrustedClock:
    """Local time corrected by its measured offset to a reference clock.

    With a `reference` (e.g. the database server time) every `validate()`
    re-measures the offset; without one the configured offset is used as is
    and validation only sanity-checks it. A clock drifting beyond the
    threshold, or one that went backwards since the last valid check, is
    untrustworthy so time-sensitive writes can be refused.
    """

    def __init__(
        self,
        *,
        offset_seconds: float = 0.0,
        drift_threshold_seconds: float = DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS,
        source: Optional[Callable[[], datetime]] = None,
        reference: Optional[Callable[[], datetime]] = None,
    ):
        self._offset = timedelta(seconds=float(offset_seconds))
        self._threshold = float(drift_threshold_seconds)
        self._source = source or now_local
        self._reference = reference
        self._last_valid: Optional[datetime] = None

    @property
    def offset_seconds(self) -> float:
        return self._offset.total_seconds()

    def now(self) -> datetime:
        return self._source() + self._offset

    def sync(self) -> None:
        """Measure the offset against the reference clock.

        A failed measurement keeps the previous offset.
        """

        if self._reference is None:
            return
        try:
            reference = self._reference()
        except Exception:
            logger.warning("time sync against reference failed; keeping offset %.3fs", self.offset_seconds, exc_info=True)
            return
        self._offset = reference - self._source()

    def validate(self) -> TimeCheck:
        self.sync()
        local = self._source()
        corrected = local + self._offset
        drift = abs(self._offset.total_seconds())

        is_valid = drift <= self._threshold
        if is_valid and self._last_valid is not None and corrected < self._last_valid:
            logger.warning("clock went backwards: %s < %s", corrected, self._last_valid)
            is_valid = False
        if is_valid:
            self._last_valid = corrected
        elif drift > self._threshold:
            logger.warning("clock drift %.1fs exceeds %.1fs", drift, self._threshold)
        return TimeCheck(is_valid=is_valid, corrected_time=corrected, drift_seconds=drift)


class FixedClock(TrustedClock):
    """Clock pinned to a single instant; used by scripts and tests."""

    def __init__(self, instant: datetime):
        super().__init__(source=lambda: instant)
