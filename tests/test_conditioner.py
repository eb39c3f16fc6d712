"""Unit tests for the signal conditioning functions."""

from __future__ import annotations

import math

import pytest

from services.conditioner import (
    ConditionerConfig,
    SignalConditioner,
    VolumeCurve,
    apply_curve,
    linear_to_db,
    normalize,
)
from services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _log_formula(linear: float, db_min: float, db_max: float) -> float:
    db = db_min + (db_max - db_min) * linear
    amp_min = 10 ** (db_min / 20)
    amp_max = 10 ** (db_max / 20)
    return (10 ** (db / 20) - amp_min) / (amp_max - amp_min)


def test_normalize_is_monotonic_and_bounded() -> None:
    previous = -1.0
    for raw in range(-500, 12_000, 250):
        value = normalize(raw, 1_000, 10_000)
        assert 0.0 <= value <= 1.0
        assert value >= previous
        previous = value


def test_normalize_clamps_to_range() -> None:
    assert normalize(0, 1_000, 10_000) == 0.0
    assert normalize(50_000, 1_000, 10_000) == 1.0
    assert normalize(5_500, 1_000, 10_000) == pytest.approx(0.5)


@pytest.mark.parametrize("minimum, maximum", [(100, 100), (500, 100)])
def test_normalize_degenerate_range_returns_zero(minimum: int, maximum: int) -> None:
    for raw in (0, 100, 300, 1_000_000):
        assert normalize(raw, minimum, maximum) == 0.0


def test_logarithmic_curve_endpoints() -> None:
    assert apply_curve(0.0, VolumeCurve.logarithmic, -60.0, 0.0) == 0.0
    assert apply_curve(1.0, VolumeCurve.logarithmic, -60.0, 0.0) == pytest.approx(1.0)


def test_logarithmic_curve_matches_formula_and_stays_in_range() -> None:
    for step in range(1, 101):
        linear = step / 100
        value = apply_curve(linear, VolumeCurve.logarithmic, -60.0, 0.0)
        assert 0.0 <= value <= 1.0
        assert value == pytest.approx(_log_formula(linear, -60.0, 0.0))


def test_logarithmic_curve_with_equal_db_bounds_returns_zero() -> None:
    assert apply_curve(0.7, VolumeCurve.logarithmic, -12.0, -12.0) == 0.0


def test_exponential_curve_is_square() -> None:
    for step in range(0, 101):
        x = step / 100
        assert apply_curve(x, VolumeCurve.exponential, -60.0, 0.0) == x * x


def test_linear_curve_is_identity_and_inputs_are_clamped() -> None:
    assert apply_curve(0.42, VolumeCurve.linear, -60.0, 0.0) == 0.42
    assert apply_curve(-0.5, VolumeCurve.linear, -60.0, 0.0) == 0.0
    assert apply_curve(1.5, VolumeCurve.exponential, -60.0, 0.0) == 1.0


def test_curves_are_pure() -> None:
    for curve in VolumeCurve:
        first = apply_curve(0.37, curve, -48.0, 6.0)
        second = apply_curve(0.37, curve, -48.0, 6.0)
        assert first == second
    assert normalize(1234, 0, 5000) == normalize(1234, 0, 5000)


def test_linear_to_db_floors_near_silence() -> None:
    assert linear_to_db(0.0, -60.0, 0.0) == -60.0
    assert linear_to_db(0.00005, -60.0, 0.0) == -60.0
    assert linear_to_db(0.5, -60.0, 0.0) == pytest.approx(-30.0)
    assert linear_to_db(1.0, -60.0, 0.0) == pytest.approx(0.0)
    assert math.isfinite(linear_to_db(0.0, -90.0, 10.0))


def test_end_to_end_logarithmic_conditioning() -> None:
    conditioner = SignalConditioner(
        ConditionerConfig(raw_min=0, raw_max=100_000, curve=VolumeCurve.logarithmic, db_min=-60.0, db_max=0.0)
    )

    value = conditioner.condition(50_000)

    assert value.raw == 50_000
    assert value.linear == pytest.approx(0.5)
    assert value.curved == pytest.approx(_log_formula(0.5, -60.0, 0.0))
    assert value.output == value.curved
    assert value.db == pytest.approx(-30.0)


def test_conditioner_applies_rate_limiter() -> None:
    clock = FakeClock()
    limiter = RateLimiter(max_rate_up=0.05, max_rate_down=0.30, clock=clock)
    conditioner = SignalConditioner(
        ConditionerConfig(raw_min=0, raw_max=1_000, curve=VolumeCurve.linear),
        rate_limiter=limiter,
    )

    clock.now = 1.0
    value = conditioner.condition(1_000)

    assert value.curved == 1.0
    assert value.output == pytest.approx(0.05)
