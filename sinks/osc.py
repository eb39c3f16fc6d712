"""Push sink that forwards fader values to a mixer over OSC/UDP."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from osc4py3 import oscbuildparse
from osc4py3.as_eventloop import (
    osc_process,
    osc_send,
    osc_startup,
    osc_terminate,
    osc_udp_client,
)

from settings import Settings

logger = logging.getLogger(__name__)


class PushSink(Protocol):
    def push(self, value: float) -> None: ...

    def close(self) -> None: ...


class OscPushSink:
    """Sends one ``,f`` message per value to a fixed OSC address."""

    def __init__(self, host: str, port: int, address: str, client_name: str = "mixer") -> None:
        self.host = host
        self.port = port
        self.address = address
        self.client_name = client_name
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        osc_startup(logger=logger)
        osc_udp_client(self.host, self.port, self.client_name)
        self._started = True
        logger.info(
            "OSC client ready on %s:%s",
            self.host,
            self.port,
            extra={"osc_address": self.address},
        )

    def push(self, value: float) -> None:
        if not self._started:
            raise RuntimeError("OSC sink has not been started.")
        message = oscbuildparse.OSCMessage(self.address, ",f", [float(value)])
        osc_send(message, self.client_name)
        osc_process()

    def close(self) -> None:
        if not self._started:
            return
        self._started = False
        osc_terminate()


def build_push_sink(settings: Settings) -> Optional[PushSink]:
    """Start the OSC sink, or return ``None`` to run in push-disabled mode."""
    if not settings.osc_enabled:
        logger.info("OSC push disabled by configuration")
        return None

    sink = OscPushSink(
        host=settings.osc_host,
        port=settings.osc_port,
        address=settings.osc_address,
    )
    try:
        sink.start()
    except Exception as exc:  # noqa: BLE001 - any start-up failure disables push
        logger.warning(
            "OSC sink failed to start; continuing without push",
            extra={"osc_address": settings.osc_address, "reason": str(exc)},
        )
        return None
    return sink
