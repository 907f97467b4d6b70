from __future__ import annotations

from typing import Any, Dict, List, NoReturn, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the aquarium monitor service."""

    def __init__(self, config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url, timeout=config.timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def push_reading(self, api_key: str, value: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/data/{api_key}", json={"value": value})

    def get_parameters(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/parameters")

    def get_telemetry(self, sensor_type: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/telemetry/{sensor_type}")

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/maintenance/tasks")

    def send_reminders(self) -> Dict[str, Any]:
        return self._request("POST", "/api/maintenance/reminders")

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
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
