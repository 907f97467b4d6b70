"""Push notification delivery through the Pushover messages API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Protocol

import httpx

from settings import get_settings

logger = logging.getLogger(__name__)

TOKEN_KEY = "pushover_token"
USER_KEY = "pushover_user"
ALERTS_KEY = "pushover_alerts"
ALERT_REPEAT_KEY = "pushover_alert_repeat"
MAINTENANCE_KEY = "pushover_maintenance"


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    error: Optional[str] = None


class Notifier(Protocol):
    def send(self, title: str, message: str, priority: int = 0) -> NotificationResult:
        ...


@dataclass(frozen=True)
class NotificationPreferences:
    """Notification switches as stored in the ``app_settings`` table."""

    token: str = ""
    user: str = ""
    alerts_enabled: bool = True
    alert_repeat_minutes: int = 0
    maintenance_enabled: bool = True

    @property
    def configured(self) -> bool:
        return bool(self.token and self.user)

    @classmethod
    def from_settings(cls, values: Mapping[str, str]) -> "NotificationPreferences":
        return cls(
            token=(values.get(TOKEN_KEY) or "").strip(),
            user=(values.get(USER_KEY) or "").strip(),
            alerts_enabled=values.get(ALERTS_KEY) != "0",
            alert_repeat_minutes=_parse_minutes(values.get(ALERT_REPEAT_KEY)),
            maintenance_enabled=values.get(MAINTENANCE_KEY) != "0",
        )


def _parse_minutes(value: Optional[str]) -> int:
    if value is None:
        return 0
    try:
        parsed = int(value.strip())
    except ValueError:
        return 0
    return parsed if parsed > 0 else 0


class PushoverNotifier:
    """Sends messages for one Pushover application token and user key."""

    def __init__(self, client: httpx.Client, api_url: str, token: str, user: str) -> None:
        self._client = client
        self._api_url = api_url
        self._token = token
        self._user = user

    def send(self, title: str, message: str, priority: int = 0) -> NotificationResult:
        payload = {
            "token": self._token,
            "user": self._user,
            "title": title,
            "message": message,
            "priority": str(priority),
        }
        try:
            response = self._client.post(self._api_url, data=payload)
        except httpx.HTTPError as exc:
            logger.warning("Pushover request failed", extra={"error": str(exc)})
            return NotificationResult(success=False, error=str(exc))

        body = self._json_body(response)
        if response.is_success and body.get("status") == 1:
            logger.info("Pushover notification sent", extra={"priority": priority})
            return NotificationResult(success=True)

        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            detail = "; ".join(str(error) for error in errors)
        else:
            detail = f"Pushover responded with status {response.status_code}"
        logger.warning("Pushover rejected notification", extra={"error": detail})
        return NotificationResult(success=False, error=detail)

    @staticmethod
    def _json_body(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}


class NotificationGateway:
    """Owns the outbound HTTP client and hands out configured notifiers."""

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_url = api_url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def notifier(self, preferences: NotificationPreferences) -> Optional[PushoverNotifier]:
        if not preferences.configured:
            return None
        return PushoverNotifier(
            client=self._client,
            api_url=self.api_url,
            token=preferences.token,
            user=preferences.user,
        )

    def ping(self, url: str) -> int:
        """GET an arbitrary webhook URL and return its status code."""
        response = self._client.get(url)
        return response.status_code

    def close(self) -> None:
        self._client.close()


@lru_cache
def build_default_gateway() -> NotificationGateway:
    settings = get_settings()
    return NotificationGateway(
        api_url=settings.pushover_api_url,
        timeout=settings.notification_timeout,
    )
