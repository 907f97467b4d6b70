from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_STATUS_COLORS = {
    "Normal": typer.colors.GREEN,
    "OK": typer.colors.GREEN,
    "Active": typer.colors.CYAN,
    "Too Low": typer.colors.RED,
    "Too High": typer.colors.RED,
    "Alert": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_ingest(payload: Dict[str, Any]) -> None:
    typer.secho(
        f"Stored {payload.get('value')} for {payload.get('sensor_name')}", fg=typer.colors.GREEN
    )
    notification = payload.get("notification")
    if notification:
        outcome = "sent" if notification.get("success") else f"failed ({notification.get('error')})"
        typer.echo(f"Notification ({notification.get('transition')}): {outcome}")


def render_parameters(parameters: List[Dict[str, Any]]) -> None:
    echo_heading("Parameters")
    if not parameters:
        typer.echo("No sensors configured.")
        return
    for parameter in parameters:
        unit = parameter.get("unit") or ""
        reading = f"{parameter.get('value')} {unit}".strip()
        status = parameter.get("status", "")
        typer.echo(f"  - {parameter.get('label')}: {reading} ", nl=False)
        typer.secho(f"[{status}]", fg=_STATUS_COLORS.get(status))


def render_telemetry(payload: Dict[str, Any]) -> None:
    sensor = payload.get("sensor")
    if not sensor:
        typer.echo("No sensor of that type.")
        return
    echo_heading(f"Telemetry: {sensor.get('type')} ({sensor.get('name')})")
    days = payload.get("daily_summary") or []
    if not days:
        typer.echo("No readings in the past month.")
        return
    for day in days:
        flag = " ALERT" if day.get("has_alert") else ""
        typer.echo(
            f"  {day.get('date')}  min={day.get('min')} max={day.get('max')} "
            f"avg={day.get('avg'):.2f} n={day.get('count')}{flag}"
        )


def render_tasks(tasks: List[Dict[str, Any]]) -> None:
    echo_heading("Maintenance")
    if not tasks:
        typer.echo("No maintenance tasks.")
        return
    for task in tasks:
        if task.get("days_since_last") is None:
            when = "never done"
        else:
            when = f"{task.get('days_since_last')}d ago"
        line = f"  - {task.get('name')} (every {task.get('interval_days')}d, {when})"
        if task.get("is_due"):
            typer.secho(f"{line} DUE", fg=typer.colors.YELLOW)
        else:
            typer.echo(f"{line} due in {task.get('days_until_due')}d")


def render_reminders(report: Dict[str, Any]) -> None:
    if report.get("skipped"):
        typer.echo(f"Skipped: {report['skipped']}")
        return
    echo_key_values(
        [
            ("sent", len(report.get("sent") or [])),
            ("failed", len(report.get("failed") or [])),
        ]
    )
