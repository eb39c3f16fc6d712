from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from app.web import router as web_router
from datastore.latest_value import build_default_cell
from hardware.pins import build_default_pins
from logging_config import configure_logging
from services.poller import build_default_poller


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    poller = build_default_poller()
    poller.start()
    try:
        yield
    finally:
        poller.shutdown()
        build_default_poller.cache_clear()
        build_default_pins.cache_clear()
        build_default_cell.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="RC Pot Fader",
        description="Reads a potentiometer over two GPIO pins and serves it as a fader value.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
