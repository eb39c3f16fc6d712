"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConditionedValue:
    """Every intermediate stage of one conditioning pass."""

    raw: int
    linear: float
    curved: float
    output: float
    db: float


@dataclass(frozen=True, slots=True)
class PotSnapshot:
    """The latest published reading, as observed by readers."""

    raw: int
    linear: float
    output: float
    db: float
    captured_at: float

    @classmethod
    def initial(cls, captured_at: float, db_floor: float = 0.0) -> "PotSnapshot":
        return cls(raw=0, linear=0.0, output=0.0, db=db_floor, captured_at=captured_at)
