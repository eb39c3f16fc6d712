"""Asymmetric slew-rate limiting driven by wall-clock deltas."""

from __future__ import annotations

import math
import time
from typing import Callable

SNAP_EPSILON = 0.001


def _clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class RateLimiter:
    """Moves an output toward its target no faster than the configured rates.

    Rates are expressed in units per second. Rising and falling speeds are
    independent so a fader can ramp up gently and drop quickly. Not
    thread-safe; owned by the sampling loop.
    """

    def __init__(
        self,
        max_rate_up: float,
        max_rate_down: float,
        initial: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_rate_up <= 0 or max_rate_down <= 0:
            raise ValueError("Rate limits must be positive.")
        self.max_rate_up = max_rate_up
        self.max_rate_down = max_rate_down
        self._clock = clock
        self._current = _clamp_unit(initial)
        self._last_update = clock()

    @property
    def current(self) -> float:
        return self._current

    def reset(self, value: float = 0.0) -> None:
        self._current = _clamp_unit(value)
        self._last_update = self._clock()

    def update(self, target: float) -> float:
        now = self._clock()
        elapsed = max(now - self._last_update, 0.0)
        self._last_update = now

        target = _clamp_unit(target)
        delta = target - self._current
        if abs(delta) < SNAP_EPSILON:
            self._current = target
            return self._current

        max_step = (self.max_rate_up if delta > 0 else self.max_rate_down) * elapsed
        if abs(delta) <= max_step:
            self._current = target
        else:
            self._current = _clamp_unit(self._current + math.copysign(max_step, delta))
        return self._current
