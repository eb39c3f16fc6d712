"""Unit tests for the asymmetric slew-rate limiter."""

from __future__ import annotations

import pytest

from services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_rising_is_limited_by_up_rate() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.05, max_rate_down=0.30, initial=0.0, clock=clock)

    clock.advance(1.0)
    result = limiter.update(1.0)

    assert result == pytest.approx(0.05)


def test_falling_is_limited_by_down_rate() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.05, max_rate_down=0.30, initial=1.0, clock=clock)

    clock.advance(1.0)
    result = limiter.update(0.0)

    assert result == pytest.approx(0.7)


def test_zero_elapsed_time_yields_no_movement() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.05, max_rate_down=0.30, clock=clock)

    assert limiter.update(1.0) == 0.0


def test_small_difference_snaps_to_target() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.05, max_rate_down=0.30, initial=0.5, clock=clock)

    assert limiter.update(0.5005) == 0.5005
    assert limiter.current == 0.5005


def test_repeated_updates_converge_without_overshoot() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.2, max_rate_down=0.5, clock=clock)

    results = []
    for _ in range(40):
        clock.advance(0.37)
        results.append(limiter.update(0.83))

    assert all(0.0 <= value <= 0.83 for value in results)
    assert results == sorted(results)
    assert limiter.current == pytest.approx(0.83, abs=0.001)

    for _ in range(40):
        clock.advance(0.37)
        value = limiter.update(0.1)
        assert 0.1 <= value <= 1.0
    assert limiter.current == pytest.approx(0.1, abs=0.001)


def test_targets_outside_unit_range_are_clamped() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=10.0, max_rate_down=10.0, clock=clock)

    clock.advance(1.0)
    assert limiter.update(3.0) == 1.0
    clock.advance(1.0)
    assert limiter.update(-2.0) == 0.0


def test_irregular_intervals_scale_step_with_elapsed_time() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.1, max_rate_down=0.1, clock=clock)

    clock.advance(0.25)
    assert limiter.update(1.0) == pytest.approx(0.025)
    clock.advance(2.0)
    assert limiter.update(1.0) == pytest.approx(0.225)


def test_reset_reseeds_value_and_timestamp() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.05, max_rate_down=0.30, clock=clock)

    clock.advance(100.0)
    limiter.reset(0.4)
    assert limiter.update(1.0) == 0.4


def test_rates_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RateLimiter(max_rate_up=0.0, max_rate_down=0.3)
