from datetime import UTC, datetime

from src.adapters.clock import FixedClock, SystemClock


def test_system_clock():
    clock = SystemClock()
    now = clock.now_utc()
    assert now.tzinfo is not None
    diff = abs((datetime.now(UTC) - now).total_seconds())
    assert diff < 1.0


def test_fixed_clock_advance():
    clock = FixedClock(datetime(2026, 3, 1, tzinfo=UTC))
    assert clock.now_utc() == datetime(2026, 3, 1, tzinfo=UTC)
    clock.advance(days=30)
    assert clock.now_utc() == datetime(2026, 3, 31, tzinfo=UTC)
