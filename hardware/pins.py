"""Digital pin capability used by the RC timing sampler."""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Any, Protocol

from settings import get_settings

logger = logging.getLogger(__name__)


class PinMode(str, Enum):
    input = "input"
    output = "output"


class PinLevel(str, Enum):
    low = "low"
    high = "high"


class PinError(RuntimeError):
    """A pin could not be claimed, switched, driven or read."""


class PinPair(Protocol):
    """Two GPIO lines, each switchable between input and output."""

    pin_a: int
    pin_b: int

    def set_mode(self, pin: int, mode: PinMode) -> None: ...

    def write(self, pin: int, level: PinLevel) -> None: ...

    def read(self, pin: int) -> PinLevel: ...

    def close(self) -> None: ...


class RPiGPIOPinPair:
    """Pin pair backed by ``RPi.GPIO`` using BCM numbering."""

    def __init__(self, pin_a: int, pin_b: int) -> None:
        try:
            import RPi.GPIO as GPIO  # type: ignore
        except (ImportError, RuntimeError) as exc:
            raise PinError(f"RPi.GPIO driver is not available: {exc}") from exc

        self._GPIO: Any = GPIO
        self.pin_a = pin_a
        self.pin_b = pin_b
        try:
            self._GPIO.setwarnings(False)
            self._GPIO.setmode(GPIO.BCM)
            self._GPIO.setup(self.pin_a, GPIO.IN)
            self._GPIO.setup(self.pin_b, GPIO.IN)
        except (RuntimeError, ValueError) as exc:
            raise PinError(f"Unable to claim pins {pin_a}/{pin_b}: {exc}") from exc
        logger.info("Claimed GPIO pins", extra={"pin": f"{pin_a}/{pin_b}"})

    def set_mode(self, pin: int, mode: PinMode) -> None:
        direction = self._GPIO.OUT if mode is PinMode.output else self._GPIO.IN
        try:
            self._GPIO.setup(pin, direction)
        except (RuntimeError, ValueError) as exc:
            raise PinError(f"Unable to set pin {pin} to {mode.value}: {exc}") from exc

    def write(self, pin: int, level: PinLevel) -> None:
        try:
            self._GPIO.output(pin, self._GPIO.HIGH if level is PinLevel.high else self._GPIO.LOW)
        except (RuntimeError, ValueError) as exc:
            raise PinError(f"Unable to drive pin {pin} {level.value}: {exc}") from exc

    def read(self, pin: int) -> PinLevel:
        try:
            value = self._GPIO.input(pin)
        except (RuntimeError, ValueError) as exc:
            raise PinError(f"Unable to read pin {pin}: {exc}") from exc
        return PinLevel.high if value else PinLevel.low

    def close(self) -> None:
        try:
            self._GPIO.cleanup((self.pin_a, self.pin_b))
        except (RuntimeError, ValueError):  # pragma: no cover - hardware specific
            logger.warning("GPIO cleanup failed", extra={"pin": f"{self.pin_a}/{self.pin_b}"})


@lru_cache
def build_default_pins(backend: str | None = None) -> PinPair:
    """Factory that opens the configured pin backend."""
    settings = get_settings()
    kind = settings.gpio_backend if backend is None else backend
    if kind == "mock":
        from hardware.mock_pins import SimulatedPinPair

        return SimulatedPinPair(pin_a=settings.pin_a, pin_b=settings.pin_b)
    return RPiGPIOPinPair(pin_a=settings.pin_a, pin_b=settings.pin_b)
