from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient


def _create(client: TestClient, **overrides) -> dict:
    payload = {"name": "Clownfish", "species": "Amphiprion ocellaris"}
    payload.update(overrides)
    response = client.post("/api/specimens", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_defaults(api_client: TestClient) -> None:
    specimen = _create(api_client)

    assert specimen["health"] == "good"
    assert specimen["acquired_at"] == date.today().isoformat()
    assert specimen["image"] is None


def test_list_is_newest_first(api_client: TestClient) -> None:
    older = _create(api_client, name="Goby")
    newer = _create(api_client, name="Tang")

    ids = [specimen["id"] for specimen in api_client.get("/api/specimens").json()]

    assert ids == [newer["id"], older["id"]]


def test_update_keeps_unspecified_fields_and_clears_image(api_client: TestClient) -> None:
    specimen = _create(api_client, image="data:image/png;base64,AAAA")

    updated = api_client.put(
        f"/api/specimens/{specimen['id']}", json={"health": "fair", "image": None}
    ).json()

    assert updated["health"] == "fair"
    assert updated["name"] == "Clownfish"
    assert updated["image"] is None


def test_notes_lifecycle(api_client: TestClient) -> None:
    specimen = _create(api_client)
    base = f"/api/specimens/{specimen['id']}/notes"

    first = api_client.post(base, json={"content": "Eating well"}).json()
    second = api_client.post(base, json={"content": "  Hosting the anemone  "}).json()

    assert second["content"] == "Hosting the anemone"
    assert [note["id"] for note in api_client.get(base).json()] == [second["id"], first["id"]]

    assert api_client.delete(f"{base}/{first['id']}").json() == {"success": True}
    assert [note["id"] for note in api_client.get(base).json()] == [second["id"]]

    assert api_client.delete(base).json() == {"success": True}
    assert api_client.get(base).json() == []


def test_blank_note_is_rejected(api_client: TestClient) -> None:
    specimen = _create(api_client)

    response = api_client.post(f"/api/specimens/{specimen['id']}/notes", json={"content": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Note content is required"


def test_note_must_belong_to_specimen(api_client: TestClient) -> None:
    owner = _create(api_client)
    other = _create(api_client, name="Goby")
    note = api_client.post(
        f"/api/specimens/{owner['id']}/notes", json={"content": "Quarantined"}
    ).json()

    response = api_client.delete(f"/api/specimens/{other['id']}/notes/{note['id']}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Note not found"


def test_deleting_specimen_removes_notes(api_client: TestClient) -> None:
    specimen = _create(api_client)
    api_client.post(f"/api/specimens/{specimen['id']}/notes", json={"content": "Arrived"})

    api_client.delete(f"/api/specimens/{specimen['id']}")

    assert api_client.get(f"/api/specimens/{specimen['id']}").status_code == 404
    assert api_client.get(f"/api/specimens/{specimen['id']}/notes").status_code == 404
