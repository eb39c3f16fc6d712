from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from services.poller import PotentiometerPoller, build_default_poller


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_poller() -> PotentiometerPoller:
    return build_default_poller()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    poller: PotentiometerPoller = Depends(get_poller),
) -> HTMLResponse:
    snapshot = poller.cell.get()
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "snapshot": snapshot,
            "captured_at": datetime.fromtimestamp(snapshot.captured_at, tz=timezone.utc),
            "percent": round(snapshot.output * 100, 1),
            "curve": poller.conditioner.config.curve.value,
            "stats": poller.stats(),
            "refresh_seconds": max(1, round(poller.interval)),
        },
    )
