"""HTTP route definitions for the service."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from app.schemas import PollerCounters, PotReading, PotStatus
from services.poller import PotentiometerPoller, build_default_poller

router = APIRouter()


def get_poller() -> PotentiometerPoller:
    return build_default_poller()


@router.get(
    "/potentiometer",
    response_model=PotReading,
    summary="Latest raw potentiometer reading.",
)
async def get_potentiometer(
    poller: PotentiometerPoller = Depends(get_poller),
) -> PotReading:
    snapshot = poller.cell.get()
    return PotReading(value=snapshot.raw, timestamp=int(snapshot.captured_at))


@router.get(
    "/potentiometer/status",
    response_model=PotStatus,
    summary="Conditioned value, dB equivalent and sampling loop counters.",
)
async def get_potentiometer_status(
    poller: PotentiometerPoller = Depends(get_poller),
) -> PotStatus:
    snapshot = poller.cell.get()
    stats = poller.stats()
    return PotStatus(
        raw=snapshot.raw,
        linear=snapshot.linear,
        output=snapshot.output,
        db=snapshot.db,
        curve=poller.conditioner.config.curve,
        captured_at=datetime.fromtimestamp(snapshot.captured_at, tz=timezone.utc),
        poller=PollerCounters(
            cycles=stats.cycles,
            failed_cycles=stats.failed_cycles,
            push_failures=stats.push_failures,
            push_enabled=stats.push_enabled,
            last_error=stats.last_error,
        ),
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /potentiometer for the latest reading."}
