from __future__ import annotations

from threading import Lock
from typing import Dict

from hardware.pins import PinError, PinLevel, PinMode


class SimulatedPinPair:
    """In-process stand-in for a potentiometer/capacitor network on two pins.

    Once pin A drives high with pin B as an input, pin B reads low for a
    number of polls proportional to the simulated wiper position and then
    reads high. Driving pin B low discharges the network again.
    """

    def __init__(
        self,
        pin_a: int,
        pin_b: int,
        position: float = 0.5,
        min_reads: int = 0,
        max_reads: int = 100_000,
    ) -> None:
        self.pin_a = pin_a
        self.pin_b = pin_b
        self.min_reads = min_reads
        self.max_reads = max_reads
        self._modes: Dict[int, PinMode] = {pin_a: PinMode.input, pin_b: PinMode.input}
        self._levels: Dict[int, PinLevel] = {pin_a: PinLevel.low, pin_b: PinLevel.low}
        self._position = 0.0
        self._charge_reads = 0
        self._closed = False
        self._lock = Lock()
        self.set_position(position)

    @property
    def position(self) -> float:
        with self._lock:
            return self._position

    def set_position(self, position: float) -> None:
        with self._lock:
            self._position = min(max(position, 0.0), 1.0)

    def set_mode(self, pin: int, mode: PinMode) -> None:
        with self._lock:
            self._check(pin)
            self._modes[pin] = mode

    def write(self, pin: int, level: PinLevel) -> None:
        with self._lock:
            self._check(pin)
            if self._modes[pin] is not PinMode.output:
                raise PinError(f"Pin {pin} is not configured as an output.")
            self._levels[pin] = level
            if pin == self.pin_b and level is PinLevel.low:
                self._charge_reads = 0
            if pin == self.pin_a and level is PinLevel.high:
                self._charge_reads = 0

    def read(self, pin: int) -> PinLevel:
        with self._lock:
            self._check(pin)
            if self._modes[pin] is PinMode.output or pin == self.pin_a:
                return self._levels[pin]
            if not self._charging():
                return PinLevel.low
            self._charge_reads += 1
            if self._charge_reads > self._threshold():
                return PinLevel.high
            return PinLevel.low

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def _charging(self) -> bool:
        return (
            self._modes[self.pin_a] is PinMode.output
            and self._levels[self.pin_a] is PinLevel.high
        )

    def _threshold(self) -> int:
        span = self.max_reads - self.min_reads
        return self.min_reads + round(self._position * span)

    def _check(self, pin: int) -> None:
        if self._closed:
            raise PinError("Simulated pin pair has been closed.")
        if pin not in self._modes:
            raise PinError(f"Pin {pin} is not part of this pin pair.")
