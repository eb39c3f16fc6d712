"""Signal conditioning: normalization, perceptual curves and slew limiting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.readings import ConditionedValue
from services.rate_limiter import RateLimiter

SILENCE_EPSILON = 0.0001


class VolumeCurve(str, Enum):
    """Mapping from wiper position to perceived loudness."""

    linear = "linear"
    logarithmic = "logarithmic"
    exponential = "exponential"


@dataclass(frozen=True)
class ConditionerConfig:
    raw_min: int = 0
    raw_max: int = 100_000
    curve: VolumeCurve = VolumeCurve.logarithmic
    db_min: float = -60.0
    db_max: float = 0.0


def _clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def db_to_amplitude(db: float) -> float:
    return 10.0 ** (db / 20.0)


def normalize(raw: int, minimum: int, maximum: int) -> float:
    """Map ``raw`` onto ``[0, 1]`` within ``[minimum, maximum]``.

    An empty or inverted range yields ``0.0``.
    """
    if maximum <= minimum:
        return 0.0
    clamped = min(max(raw, minimum), maximum)
    return (clamped - minimum) / (maximum - minimum)


def apply_curve(linear: float, curve: VolumeCurve, db_min: float, db_max: float) -> float:
    """Apply a volume taper to a linear fraction; output stays within ``[0, 1]``."""
    linear = _clamp_unit(linear)

    if curve is VolumeCurve.exponential:
        return linear * linear

    if curve is VolumeCurve.logarithmic:
        if linear == 0.0:
            return 0.0
        amp_min = db_to_amplitude(db_min)
        amp_max = db_to_amplitude(db_max)
        if amp_max == amp_min:
            return 0.0
        db = db_min + (db_max - db_min) * linear
        amplitude = db_to_amplitude(db)
        return _clamp_unit((amplitude - amp_min) / (amp_max - amp_min))

    return linear


def linear_to_db(linear: float, db_min: float, db_max: float) -> float:
    """Human readable dB equivalent of a fader position; floors at ``db_min``."""
    linear = _clamp_unit(linear)
    if linear <= SILENCE_EPSILON:
        return db_min
    return db_min + (db_max - db_min) * linear


class SignalConditioner:
    """Turns raw sampler counts into a smoothed control value."""

    def __init__(
        self,
        config: ConditionerConfig,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.config = config
        self.rate_limiter = rate_limiter

    def condition(self, raw: int) -> ConditionedValue:
        config = self.config
        linear = normalize(raw, config.raw_min, config.raw_max)
        curved = apply_curve(linear, config.curve, config.db_min, config.db_max)
        if self.rate_limiter is not None:
            output = self.rate_limiter.update(curved)
        else:
            output = curved
        return ConditionedValue(
            raw=raw,
            linear=linear,
            curved=curved,
            output=output,
            db=linear_to_db(linear, config.db_min, config.db_max),
        )
