from __future__ import annotations

from fastapi.testclient import TestClient

from services.alerts import build_default_evaluator


def _create(client: TestClient, **overrides) -> dict:
    payload = {"name": "Return probe", "type": "Temperature", "unit": "°C"}
    payload.update(overrides)
    response = client.post("/api/sensors", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_issues_unique_api_keys(api_client: TestClient) -> None:
    first = _create(api_client)
    second = _create(api_client, name="Sump probe")

    assert first["api_key"] != second["api_key"]
    assert first["sensor_type"] == "value"
    assert first["alerts_enabled"] is True
    assert [sensor["id"] for sensor in api_client.get("/api/sensors").json()] == [
        first["id"],
        second["id"],
    ]


def test_create_rejects_inverted_bounds(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/sensors",
        json={"name": "Probe", "type": "pH", "min_value": 8.4, "max_value": 7.8},
    )

    assert response.status_code == 422


def test_update_can_clear_a_bound(api_client: TestClient) -> None:
    sensor = _create(api_client, min_value=24, max_value=27)

    response = api_client.put(f"/api/sensors/{sensor['id']}", json={"min_value": None})

    assert response.status_code == 200
    updated = response.json()
    assert updated["min_value"] is None
    assert updated["max_value"] == 27
    assert updated["name"] == "Return probe"


def test_update_rejects_bounds_that_cross_stored_values(api_client: TestClient) -> None:
    sensor = _create(api_client, min_value=24, max_value=27)

    response = api_client.put(f"/api/sensors/{sensor['id']}", json={"min_value": 30})

    assert response.status_code == 400
    assert api_client.get(f"/api/sensors/{sensor['id']}").json()["min_value"] == 24


def test_switching_to_float_clears_unit(api_client: TestClient) -> None:
    sensor = _create(api_client)

    updated = api_client.put(
        f"/api/sensors/{sensor['id']}", json={"sensor_type": "float", "float_ok_value": 0}
    ).json()

    assert updated["sensor_type"] == "float"
    assert updated["unit"] == ""
    assert updated["float_ok_value"] == 0


def test_regenerate_key_invalidates_old_key(api_client: TestClient) -> None:
    sensor = _create(api_client)

    renewed = api_client.post(f"/api/sensors/{sensor['id']}/regenerate-key").json()

    assert renewed["api_key"] != sensor["api_key"]
    assert api_client.get(f"/api/data/{sensor['api_key']}/25").status_code == 404
    assert api_client.get(f"/api/data/{renewed['api_key']}/25").status_code == 200


def test_delete_removes_readings_and_alert_state(api_client: TestClient) -> None:
    sensor = _create(api_client, max_value=27)
    api_client.get(f"/api/data/{sensor['api_key']}/30")
    assert build_default_evaluator().state_for(sensor["id"]).alerting is True

    response = api_client.delete(f"/api/sensors/{sensor['id']}")

    assert response.json() == {"success": True}
    assert api_client.get(f"/api/sensors/{sensor['id']}").status_code == 404
    assert build_default_evaluator().state_for(sensor["id"]).alerting is False
    assert api_client.get(f"/api/data/{sensor['api_key']}/25").status_code == 404


def test_disabling_alerts_resets_state(api_client: TestClient) -> None:
    sensor = _create(api_client, max_value=27)
    api_client.get(f"/api/data/{sensor['api_key']}/30")

    api_client.put(f"/api/sensors/{sensor['id']}", json={"alerts_enabled": False})

    assert build_default_evaluator().state_for(sensor["id"]).alerting is False


def test_unknown_sensor_is_404(api_client: TestClient) -> None:
    for response in (
        api_client.get("/api/sensors/missing"),
        api_client.put("/api/sensors/missing", json={"name": "x"}),
        api_client.delete("/api/sensors/missing"),
        api_client.post("/api/sensors/missing/regenerate-key"),
    ):
        assert response.status_code == 404
        assert response.json()["detail"] == "Sensor not found"


def test_switching_to_float_normalizes_stored_readings(api_client: TestClient) -> None:
    sensor = _create(api_client, max_value=27)
    api_client.get(f"/api/data/{sensor['api_key']}/25.3")
    api_client.get(f"/api/data/{sensor['api_key']}/0")
    api_client.get(f"/api/data/{sensor['api_key']}/30")
    assert build_default_evaluator().state_for(sensor["id"]).alerting is True

    updated = api_client.put(f"/api/sensors/{sensor['id']}", json={"sensor_type": "float"}).json()

    assert updated["latest_value"] == 1.0
    detail = api_client.get(f"/api/sensors/{sensor['id']}").json()
    assert sorted(reading["value"] for reading in detail["readings"]) == [0.0, 1.0, 1.0]
    assert build_default_evaluator().state_for(sensor["id"]).alerting is False

    card = next(c for c in api_client.get("/api/parameters").json() if c["id"] == sensor["id"])
    assert card["value"] == "OK"
    assert card["status"] == "OK"
