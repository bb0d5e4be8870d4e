from analysis.clock import ManualClock, MonotonicClock


def test_manual_clock_moves_only_on_advance():
    clock = ManualClock(100)
    assert clock() == 100.0
    assert clock() == 100.0
    assert clock.advance(20) == 120.0
    assert clock() == 120.0


def test_monotonic_clock_is_in_milliseconds_and_non_decreasing():
    clock = MonotonicClock()
    a = clock()
    b = clock()
    assert b >= a
    assert isinstance(a, float)
