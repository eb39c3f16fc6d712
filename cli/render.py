from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Sequence

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_epoch(value: Any) -> str:
    if not isinstance(value, (int, float)):
        return "unknown"
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Potentiometer Reading")
    echo_key_values(
        [
            ("value", payload.get("value")),
            ("timestamp", payload.get("timestamp")),
            ("captured_at", _format_epoch(payload.get("timestamp"))),
        ]
    )


def render_reading_line(payload: Dict[str, Any]) -> None:
    typer.echo(f"{_format_epoch(payload.get('timestamp'))}  value={payload.get('value')}")


def render_status(payload: Dict[str, Any]) -> None:
    echo_heading("Potentiometer Status")
    output = payload.get("output")
    percent = f"{output * 100:.1f}%" if isinstance(output, (int, float)) else "unknown"
    echo_key_values(
        [
            ("raw", payload.get("raw")),
            ("linear", payload.get("linear")),
            ("output", f"{output} ({percent})"),
            ("db", payload.get("db")),
            ("curve", payload.get("curve")),
            ("captured_at", payload.get("captured_at")),
        ]
    )

    poller = payload.get("poller") or {}
    typer.echo()
    echo_heading("Sampling Loop")
    echo_key_values(
        [
            ("cycles", poller.get("cycles")),
            ("failed_cycles", poller.get("failed_cycles")),
            ("push_enabled", poller.get("push_enabled")),
            ("push_failures", poller.get("push_failures")),
        ]
    )
    last_error = poller.get("last_error")
    if last_error:
        typer.secho(f"last_error: {last_error}", fg=typer.colors.YELLOW)


def render_calibration(samples: Sequence[int], max_count: int) -> None:
    echo_heading("Calibration")
    if not samples:
        typer.echo("No samples collected.")
        return
    low, high = min(samples), max(samples)
    echo_key_values(
        [
            ("samples", len(samples)),
            ("min", low),
            ("max", high),
            ("span", high - low),
        ]
    )
    if high >= max_count:
        typer.secho(
            f"Readings hit the {max_count} ceiling; check the wiring or raise POT_MAX_COUNT.",
            fg=typer.colors.YELLOW,
        )
    typer.echo()
    echo_heading("Suggested environment")
    typer.echo(f"POT_RAW_MIN={low}")
    typer.echo(f"POT_RAW_MAX={high}")
