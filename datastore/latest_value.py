from __future__ import annotations

import time
from functools import lru_cache
from threading import Lock
from typing import Callable

from models.readings import PotSnapshot
from settings import get_settings


class LatestValueCell:
    """Holds the most recent snapshot; one writer, any number of readers.

    Snapshots are immutable, so the lock only guards the reference swap.
    """

    def __init__(self, initial: PotSnapshot | None = None, clock: Callable[[], float] = time.time) -> None:
        self._snapshot = initial if initial is not None else PotSnapshot.initial(captured_at=clock())
        self._lock = Lock()

    def publish(self, snapshot: PotSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def get(self) -> PotSnapshot:
        with self._lock:
            return self._snapshot


@lru_cache
def build_default_cell() -> LatestValueCell:
    settings = get_settings()
    initial = PotSnapshot.initial(captured_at=time.time(), db_floor=settings.db_min)
    return LatestValueCell(initial=initial)
