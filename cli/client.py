from __future__ import annotations

import time
from typing import Any, Callable, Dict, Iterator

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the fader service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def get_reading(self) -> Dict[str, Any]:
        return self._get_json("/potentiometer")

    def get_status(self) -> Dict[str, Any]:
        return self._get_json("/potentiometer/status")

    def get_health(self) -> Dict[str, Any]:
        return self._get_json("/health")

    def watch_readings(
        self,
        interval: float,
        count: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Iterator[Dict[str, Any]]:
        """Yield ``/potentiometer`` payloads every ``interval`` seconds."""
        emitted = 0
        while count is None or emitted < count:
            yield self.get_reading()
            emitted += 1
            if count is not None and emitted >= count:
                return
            sleep(interval)

    def _get_json(self, path: str) -> Dict[str, Any]:
        try:
            response = self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
