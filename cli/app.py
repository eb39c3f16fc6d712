from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import typer
import uvicorn

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_calibration, render_reading, render_reading_line, render_status
from hardware.pins import PinError
from hardware.sampler import build_default_sampler
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for the RC potentiometer fader service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Fader API base URL (defaults to API_BASE_URL env or http://localhost:3000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, request_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("reading")
def reading_command(ctx: typer.Context) -> None:
    """Show the latest raw reading served by the pull endpoint."""
    state = _get_state(ctx)
    render_reading(state.client.get_reading())


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show the conditioned value, dB equivalent and loop counters."""
    state = _get_state(ctx)
    render_status(state.client.get_status())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between requests (defaults to CLI_POLL_INTERVAL or 1.0).",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many readings; runs until interrupted when omitted.",
    ),
) -> None:
    """Print readings continuously."""
    state = _get_state(ctx)
    poll_interval = interval if interval is not None else state.config.poll_interval
    for payload in state.client.watch_readings(poll_interval, count=count):
        render_reading_line(payload)


@app.command("calibrate")
def calibrate_command(
    samples: int = typer.Option(50, "--samples", "-s", min=1, help="Number of readings to take."),
    delay: float = typer.Option(0.1, "--delay", min=0.0, help="Seconds to wait between readings."),
) -> None:
    """Sample the local hardware and suggest a normalization range.

    Sweep the potentiometer end to end while this runs.
    """
    settings = get_settings()
    try:
        sampler = build_default_sampler()
    except PinError as exc:
        typer.secho(f"GPIO unavailable: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Sampling pins {settings.pin_a}/{settings.pin_b} {samples} times ...")
    readings: list[int] = []
    try:
        with typer.progressbar(range(samples), label="Sampling") as progress:
            for _ in progress:
                readings.append(sampler.read())
                time.sleep(delay)
    except PinError as exc:
        typer.secho(f"Sampling failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        sampler.pins.close()

    typer.echo()
    render_calibration(readings, max_count=sampler.max_count)


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (defaults to HTTP_HOST)."),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port (defaults to HTTP_PORT)."),
) -> None:
    """Run the sampling loop and HTTP server."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=host or settings.http_host,
        port=port or settings.http_port,
        log_config=None,
    )
