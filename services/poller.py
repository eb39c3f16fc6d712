"""Background sampling loop that feeds the latest-value cell and the push sink."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from datastore.latest_value import LatestValueCell, build_default_cell
from hardware.pins import PinError
from hardware.sampler import AnalogSampler, build_default_sampler
from models.readings import PotSnapshot
from services.conditioner import ConditionerConfig, SignalConditioner, VolumeCurve
from services.rate_limiter import RateLimiter
from settings import get_settings
from sinks.osc import PushSink, build_push_sink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollerStats:
    cycles: int
    failed_cycles: int
    push_failures: int
    push_enabled: bool
    last_error: Optional[str] = None


class PotentiometerPoller:
    """Sole writer of the latest-value cell.

    Each cycle samples, conditions, publishes and pushes. A failed sample
    skips the cycle and leaves the previously published value in place.
    """

    def __init__(
        self,
        sampler: AnalogSampler,
        conditioner: SignalConditioner,
        cell: LatestValueCell,
        sink: Optional[PushSink] = None,
        interval: float = 1.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.sampler = sampler
        self.conditioner = conditioner
        self.cell = cell
        self.sink = sink
        self.interval = interval
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._stats_lock = threading.Lock()
        self._cycles = 0
        self._failed_cycles = 0
        self._push_failures = 0
        self._last_error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="pot-poller", daemon=True)
        self._thread.start()
        logger.info("Sampling loop started (interval=%ss)", self.interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        self._thread = None

    def shutdown(self) -> None:
        """Stop the loop and release the sink and the sampler's pins."""
        self.stop()
        if self.sink is not None:
            try:
                self.sink.close()
            except Exception as exc:  # noqa: BLE001 - shutdown is best effort
                logger.warning("Push sink close failed", extra={"reason": str(exc)})
        pins = getattr(self.sampler, "pins", None)
        if pins is not None:
            pins.close()

    def stats(self) -> PollerStats:
        with self._stats_lock:
            return PollerStats(
                cycles=self._cycles,
                failed_cycles=self._failed_cycles,
                push_failures=self._push_failures,
                push_enabled=self.sink is not None,
                last_error=self._last_error,
            )

    def run_cycle(self) -> Optional[PotSnapshot]:
        """Execute one sample-condition-publish cycle."""
        cycle = self._next_cycle()
        try:
            raw = self.sampler.read()
        except PinError as exc:
            self._record_failure(str(exc))
            logger.warning(
                "Sampling failed; keeping previous value",
                extra={"cycle": cycle, "reason": str(exc)},
            )
            return None

        captured_at = self._clock()
        value = self.conditioner.condition(raw)
        snapshot = PotSnapshot(
            raw=value.raw,
            linear=value.linear,
            output=value.output,
            db=value.db,
            captured_at=captured_at,
        )
        self.cell.publish(snapshot)
        logger.debug(
            "Published reading",
            extra={
                "cycle": cycle,
                "raw_value": value.raw,
                "output": round(value.output, 4),
                "db": round(value.db, 1),
            },
        )
        self._push(snapshot.output, cycle)
        return snapshot

    def _push(self, value: float, cycle: int) -> None:
        if self.sink is None:
            return
        try:
            self.sink.push(value)
        except Exception as exc:  # noqa: BLE001 - transport errors never stop sampling
            with self._stats_lock:
                self._push_failures += 1
            logger.warning(
                "Push sink delivery failed",
                extra={"cycle": cycle, "reason": str(exc)},
            )

    def _next_cycle(self) -> int:
        with self._stats_lock:
            self._cycles += 1
            return self._cycles

    def _record_failure(self, reason: str) -> None:
        with self._stats_lock:
            self._failed_cycles += 1
            self._last_error = reason

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_cycle()
            except Exception as exc:  # noqa: BLE001 - the loop outlives any single cycle
                self._record_failure(str(exc))
                logger.exception("Unexpected sampling cycle failure")
            self._stop_event.wait(self.interval)


@lru_cache
def build_default_poller() -> PotentiometerPoller:
    """Factory that wires the poller from environment settings."""
    settings = get_settings()
    config = ConditionerConfig(
        raw_min=settings.raw_min,
        raw_max=settings.raw_max,
        curve=VolumeCurve(settings.curve),
        db_min=settings.db_min,
        db_max=settings.db_max,
    )
    rate_limiter = None
    if settings.rate_limit_enabled:
        rate_limiter = RateLimiter(settings.rate_up, settings.rate_down)
    return PotentiometerPoller(
        sampler=build_default_sampler(),
        conditioner=SignalConditioner(config, rate_limiter=rate_limiter),
        cell=build_default_cell(),
        sink=build_push_sink(settings),
        interval=settings.sample_interval,
    )
