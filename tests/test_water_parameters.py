from __future__ import annotations

from datetime import date, timedelta

from fastapi.testclient import TestClient

from app.schemas import WaterParameter, WaterReading
from datastore.database import utcnow
from services.water import with_test_schedule


def _parameter(interval_days: int, last_reading: date | None = None) -> WaterParameter:
    now = utcnow()
    latest = None
    if last_reading is not None:
        latest = WaterReading(
            id="r1", parameter_id="no3", value=5.0, reading_date=last_reading, created_at=now
        )
    return WaterParameter(
        id="no3",
        name="Nitrate",
        unit="ppm",
        color="green",
        sort_order=4,
        interval_days=interval_days,
        created_at=now,
        latest_reading=latest,
    )


def test_unscheduled_parameter_is_never_due() -> None:
    today = date(2024, 3, 10)

    result = with_test_schedule(_parameter(0), today)

    assert result.is_due is False
    assert result.days_since_last is None


def test_scheduled_parameter_without_readings_is_due() -> None:
    assert with_test_schedule(_parameter(7), date(2024, 3, 10)).is_due is True


def test_due_once_interval_elapsed() -> None:
    today = date(2024, 3, 10)

    recent = with_test_schedule(_parameter(7, today - timedelta(days=6)), today)
    lapsed = with_test_schedule(_parameter(7, today - timedelta(days=7)), today)

    assert (recent.is_due, recent.days_since_last) == (False, 6)
    assert (lapsed.is_due, lapsed.days_since_last) == (True, 7)


def test_defaults_are_seeded_in_order(api_client: TestClient) -> None:
    names = [parameter["name"] for parameter in api_client.get("/api/water-parameters").json()]

    assert names == ["Alkalinity", "Calcium", "Magnesium"]


def test_readings_newest_first_and_latest_attached(api_client: TestClient) -> None:
    base = "/api/water-parameters/alk/readings"
    api_client.post(base, json={"value": 8.1, "reading_date": "2024-03-01"})
    api_client.post(base, json={"value": 8.4, "reading_date": "2024-03-05"})
    api_client.post(base, json={"value": 7.9, "reading_date": "2024-02-20"})

    readings = api_client.get(base).json()
    limited = api_client.get(base, params={"limit": 1}).json()
    alk = next(p for p in api_client.get("/api/water-parameters").json() if p["id"] == "alk")

    assert [reading["value"] for reading in readings] == [8.4, 8.1, 7.9]
    assert [reading["value"] for reading in limited] == [8.4]
    assert alk["latest_reading"]["value"] == 8.4


def test_reading_date_defaults_to_today(api_client: TestClient) -> None:
    reading = api_client.post("/api/water-parameters/ca/readings", json={"value": 430}).json()

    assert reading["reading_date"] == utcnow().date().isoformat()


def test_parameter_crud(api_client: TestClient) -> None:
    created = api_client.post(
        "/api/water-parameters",
        json={"name": "Nitrate", "unit": "ppm", "interval_days": 7, "target_value": "5"},
    )
    assert created.status_code == 201
    parameter = created.json()
    assert parameter["is_due"] is True

    updated = api_client.put(
        f"/api/water-parameters/{parameter['id']}", json={"target_value": "", "sort_order": 9}
    ).json()
    assert updated["target_value"] is None
    assert updated["sort_order"] == 9

    assert api_client.delete(f"/api/water-parameters/{parameter['id']}").json() == {
        "success": True
    }
    assert api_client.get(f"/api/water-parameters/{parameter['id']}/readings").status_code == 404


def test_delete_reading_checks_owner(api_client: TestClient) -> None:
    reading = api_client.post("/api/water-parameters/mg/readings", json={"value": 1350}).json()

    wrong = api_client.delete(f"/api/water-parameters/alk/readings/{reading['id']}")
    right = api_client.delete(f"/api/water-parameters/mg/readings/{reading['id']}")

    assert wrong.status_code == 404
    assert wrong.json()["detail"] == "Reading not found"
    assert right.json() == {"success": True}


def test_limit_is_bounded(api_client: TestClient) -> None:
    response = api_client.get("/api/water-parameters/alk/readings", params={"limit": 0})

    assert response.status_code == 422
