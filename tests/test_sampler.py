"""Tests for the RC charge-timing sampler and the simulated pin backend."""

from __future__ import annotations

from typing import List, Tuple

import pytest

from hardware.mock_pins import SimulatedPinPair
from hardware.pins import PinError, PinLevel, PinMode
from hardware.sampler import RCTimingSampler


class RecordingPinPair:
    """Fake pins that log every call and go high after ``low_reads`` polls."""

    def __init__(self, low_reads: int, pin_a: int = 18, pin_b: int = 24) -> None:
        self.pin_a = pin_a
        self.pin_b = pin_b
        self.low_reads = low_reads
        self.calls: List[Tuple[str, int, object]] = []
        self.reads = 0
        self.fail_on: str | None = None
        self.closed = False

    def set_mode(self, pin: int, mode: PinMode) -> None:
        if self.fail_on == "set_mode":
            raise PinError("mode switch rejected")
        self.calls.append(("set_mode", pin, mode))

    def write(self, pin: int, level: PinLevel) -> None:
        self.calls.append(("write", pin, level))

    def read(self, pin: int) -> PinLevel:
        if self.fail_on == "read":
            raise PinError("pin unavailable")
        self.reads += 1
        return PinLevel.high if self.reads > self.low_reads else PinLevel.low

    def close(self) -> None:
        self.closed = True


def _no_sleep(_seconds: float) -> None:
    return None


def test_read_discharges_before_charging() -> None:
    pins = RecordingPinPair(low_reads=10)
    sleeps: List[float] = []
    sampler = RCTimingSampler(pins, settle_time=0.004, max_count=1_000, sleep=sleeps.append)

    sampler.read()

    assert pins.calls == [
        ("set_mode", 18, PinMode.input),
        ("set_mode", 24, PinMode.output),
        ("write", 24, PinLevel.low),
        ("set_mode", 24, PinMode.input),
        ("set_mode", 18, PinMode.output),
        ("write", 18, PinLevel.high),
    ]
    assert sleeps == [0.004]


def test_read_counts_low_polls() -> None:
    pins = RecordingPinPair(low_reads=1234)
    sampler = RCTimingSampler(pins, max_count=1_000_000, sleep=_no_sleep)

    assert sampler.read() == 1234


def test_read_returns_ceiling_when_pin_never_rises() -> None:
    pins = RecordingPinPair(low_reads=10**9)
    sampler = RCTimingSampler(pins, max_count=5_000, sleep=_no_sleep)

    assert sampler.read() == 5_000
    assert pins.reads == 5_000


@pytest.mark.parametrize("fail_on", ["set_mode", "read"])
def test_pin_errors_propagate(fail_on: str) -> None:
    pins = RecordingPinPair(low_reads=10)
    pins.fail_on = fail_on
    sampler = RCTimingSampler(pins, sleep=_no_sleep)

    with pytest.raises(PinError):
        sampler.read()


def test_max_count_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RCTimingSampler(RecordingPinPair(low_reads=1), max_count=0)


def test_simulated_pins_track_position() -> None:
    pins = SimulatedPinPair(pin_a=18, pin_b=24, position=0.25, max_reads=10_000)
    sampler = RCTimingSampler(pins, max_count=1_000_000, sleep=_no_sleep)

    assert sampler.read() == 2_500

    pins.set_position(0.75)
    assert sampler.read() == 7_500

    pins.set_position(5.0)
    assert sampler.read() == 10_000


def test_simulated_pins_hit_ceiling_before_threshold() -> None:
    pins = SimulatedPinPair(pin_a=18, pin_b=24, position=0.5, max_reads=100_000)
    sampler = RCTimingSampler(pins, max_count=100, sleep=_no_sleep)

    assert sampler.read() == 100


def test_simulated_pin_b_stays_low_while_not_charging() -> None:
    pins = SimulatedPinPair(pin_a=18, pin_b=24, position=0.0)

    assert all(pins.read(24) is PinLevel.low for _ in range(10))


def test_simulated_pins_reject_unknown_pins_and_closed_use() -> None:
    pins = SimulatedPinPair(pin_a=18, pin_b=24)

    with pytest.raises(PinError):
        pins.set_mode(5, PinMode.output)
    with pytest.raises(PinError):
        pins.write(18, PinLevel.high)

    pins.close()
    with pytest.raises(PinError):
        pins.read(24)
