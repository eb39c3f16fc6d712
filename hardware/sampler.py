"""RC charge-timing sampler for a potentiometer on two digital pins."""

from __future__ import annotations

import time
from typing import Callable, Protocol

from hardware.pins import PinLevel, PinMode, PinPair, build_default_pins
from settings import get_settings

DEFAULT_SETTLE_TIME = 0.004
DEFAULT_MAX_COUNT = 1_000_000


class AnalogSampler(Protocol):
    """Anything that yields one raw, unitless reading per call."""

    def read(self) -> int: ...


class RCTimingSampler:
    """Pseudo-ADC that counts polls until the RC network charges past threshold.

    The count is measured in loop iterations rather than seconds, so it is a
    relative figure whose scale depends on the host CPU. Normalization bounds
    have to be calibrated on the target machine.
    """

    def __init__(
        self,
        pins: PinPair,
        settle_time: float = DEFAULT_SETTLE_TIME,
        max_count: int = DEFAULT_MAX_COUNT,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_count < 1:
            raise ValueError("max_count must be at least 1.")
        self.pins = pins
        self.settle_time = settle_time
        self.max_count = max_count
        self._sleep = sleep

    def read(self) -> int:
        """Run one discharge-then-charge cycle and return the poll count."""
        self.discharge()
        return self.charge_time()

    def discharge(self) -> None:
        pins = self.pins
        pins.set_mode(pins.pin_a, PinMode.input)
        pins.set_mode(pins.pin_b, PinMode.output)
        pins.write(pins.pin_b, PinLevel.low)
        self._sleep(self.settle_time)

    def charge_time(self) -> int:
        pins = self.pins
        pin_b = pins.pin_b
        pins.set_mode(pin_b, PinMode.input)
        pins.set_mode(pins.pin_a, PinMode.output)
        pins.write(pins.pin_a, PinLevel.high)

        read = pins.read
        low = PinLevel.low
        max_count = self.max_count
        count = 0
        while count < max_count and read(pin_b) is low:
            count += 1
        return count


def build_default_sampler() -> RCTimingSampler:
    """Sampler over the configured pin backend."""
    settings = get_settings()
    return RCTimingSampler(
        build_default_pins(),
        settle_time=settings.settle_ms / 1000.0,
        max_count=settings.max_count,
    )
