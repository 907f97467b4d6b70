from __future__ import annotations

from typing import Dict, Iterator, List
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.database import build_default_database
from services.alerts import build_default_evaluator
from services.maintenance import build_default_reminder_log
from services.notifier import NotificationGateway, build_default_gateway
from settings import get_settings

PUSHOVER_URL = "https://pushover.test/1/messages.json"


class PushoverStub:
    """Answers Pushover and webhook calls made through the gateway's client."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Dict[str, object] = {"status": 1, "request": "stub"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "pushover.test":
            return httpx.Response(self.status_code, json=self.body)
        if request.url.host == "unreachable.test":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(204)

    @property
    def messages(self) -> List[Dict[str, str]]:
        sent = []
        for request in self.requests:
            if request.url.host != "pushover.test":
                continue
            form = parse_qs(request.content.decode())
            sent.append({key: values[0] for key, values in form.items()})
        return sent


def _clear_caches() -> None:
    for cache in (
        get_settings,
        build_default_database,
        build_default_gateway,
        build_default_evaluator,
        build_default_reminder_log,
    ):
        cache.cache_clear()


@pytest.fixture
def pushover() -> PushoverStub:
    return PushoverStub()


@pytest.fixture
def api_client(tmp_path, monkeypatch, pushover: PushoverStub) -> Iterator[TestClient]:
    monkeypatch.setenv("AQUARIUM_DATABASE_PATH", str(tmp_path / "aquarium.db"))
    _clear_caches()

    gateway = NotificationGateway(api_url=PUSHOVER_URL, transport=httpx.MockTransport(pushover))

    def build_test_gateway() -> NotificationGateway:
        return gateway

    build_test_gateway.cache_clear = lambda: None  # type: ignore[attr-defined]

    monkeypatch.setattr("app.dependencies.build_default_gateway", build_test_gateway)
    monkeypatch.setattr("app.main.build_default_gateway", build_test_gateway)

    app = create_app()
    with TestClient(app) as client:
        yield client

    _clear_caches()


@pytest.fixture
def configure_pushover(api_client: TestClient):
    def configure(**overrides: str) -> None:
        values = {"pushover_token": "app-token-1234", "pushover_user": "user-key-5678"}
        values.update(overrides)
        for key, value in values.items():
            response = api_client.put(f"/api/settings/{key}", json={"value": value})
            assert response.status_code == 200

    return configure
