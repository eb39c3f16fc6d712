"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from services.conditioner import VolumeCurve


class PotReading(BaseModel):
    """Latest raw count and the epoch second it was captured."""

    value: int = Field(..., ge=0, description="Raw RC charge-time count.")
    timestamp: int = Field(..., ge=0, description="Capture time in seconds since the epoch.")


class PollerCounters(BaseModel):
    """Health counters of the background sampling loop."""

    cycles: int = Field(..., ge=0)
    failed_cycles: int = Field(..., ge=0)
    push_failures: int = Field(..., ge=0)
    push_enabled: bool
    last_error: Optional[str] = None


class PotStatus(BaseModel):
    """Full diagnostic view of the latest conditioned reading."""

    raw: int = Field(..., ge=0)
    linear: float = Field(..., ge=0.0, le=1.0)
    output: float = Field(..., ge=0.0, le=1.0, description="Value pushed to the mixer.")
    db: float = Field(..., description="Decibel equivalent of the fader position.")
    curve: VolumeCurve
    captured_at: datetime
    poller: PollerCounters
