from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import (
    render_ingest,
    render_parameters,
    render_reminders,
    render_tasks,
    render_telemetry,
)


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the aquarium monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Monitor API base URL (defaults to AQUARIUM_API_URL env or http://localhost:4000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("push")
def push_command(
    ctx: typer.Context,
    api_key: str = typer.Argument(..., help="The sensor's API key."),
    value: str = typer.Argument(..., help="Reading to record."),
) -> None:
    """Record a reading, as a microcontroller would."""
    state = _get_state(ctx)
    render_ingest(state.client.push_reading(api_key, value))


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show the latest value and status of every sensor."""
    state = _get_state(ctx)
    render_parameters(state.client.get_parameters())


@app.command("telemetry")
def telemetry_command(
    ctx: typer.Context,
    sensor_type: str = typer.Argument(..., help="Sensor type label, e.g. Temperature."),
) -> None:
    """Show the daily summary for the past month."""
    state = _get_state(ctx)
    render_telemetry(state.client.get_telemetry(sensor_type))


@app.command("tasks")
def tasks_command(ctx: typer.Context) -> None:
    """List maintenance tasks and whether they are due."""
    state = _get_state(ctx)
    render_tasks(state.client.list_tasks())


@app.command("remind")
def remind_command(ctx: typer.Context) -> None:
    """Push reminders for due maintenance (suitable for cron)."""
    state = _get_state(ctx)
    render_reminders(state.client.send_reminders())
