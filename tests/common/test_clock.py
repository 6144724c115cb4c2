from datetime import datetime

from src.mutabaah.mutabaah.common.clock import FixedClock, TrustedClock

LOCAL = datetime(2024, 3, 31, 23, 58)


def test_offset_corrects_now():
    clock = TrustedClock(offset_seconds=240, source=lambda: LOCAL)
    assert clock.now() == datetime(2024, 4, 1, 0, 2)


def test_drift_within_threshold_is_valid():
    check = TrustedClock(offset_seconds=-120, source=lambda: LOCAL).validate()
    assert check.is_valid
    assert check.drift_seconds == 120
    assert check.corrected_time == datetime(2024, 3, 31, 23, 56)


def test_drift_beyond_threshold_is_invalid():
    check = TrustedClock(offset_seconds=301, source=lambda: LOCAL).validate()
    assert not check.is_valid


def test_fixed_clock():
    clock = FixedClock(LOCAL)
    assert clock.now() == LOCAL
    assert clock.validate().is_valid


def test_reference_measures_the_offset():
    clock = TrustedClock(source=lambda: LOCAL, reference=lambda: datetime(2024, 4, 1, 0, 8))

    check = clock.validate()

    assert not check.is_valid
    assert check.drift_seconds == 600
    assert check.corrected_time == datetime(2024, 4, 1, 0, 8)
    assert clock.now() == datetime(2024, 4, 1, 0, 8)


def test_reference_within_threshold_overrides_configured_offset():
    clock = TrustedClock(offset_seconds=900, source=lambda: LOCAL, reference=lambda: datetime(2024, 3, 31, 23, 59))

    check = clock.validate()

    assert check.is_valid
    assert check.drift_seconds == 60


def test_failed_reference_keeps_previous_offset():
    def unreachable():
        raise ConnectionError("db down")

    check = TrustedClock(offset_seconds=30, source=lambda: LOCAL, reference=unreachable).validate()

    assert check.is_valid
    assert check.drift_seconds == 30


def test_clock_going_backwards_is_invalid():
    readings = iter([LOCAL, datetime(2024, 3, 31, 23, 50)])
    clock = TrustedClock(source=lambda: next(readings))

    assert clock.validate().is_valid
    assert not clock.validate().is_valid
