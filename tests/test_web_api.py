from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from fastapi.testclient import TestClient  # noqa: E402

from fantasycricket.sources import StaticSource  # noqa: E402
from fantasycricket.web import create_api_app  # noqa: E402

from .conftest import PRIMARY_URL, build_assistant  # noqa: E402


@pytest.fixture()
def client(now, scenario_a_body):
    second = dict(scenario_a_body["matches"][0], id="second", team1="England", team2="Pakistan")
    body = {"matches": [dict(scenario_a_body["matches"][0], id="first"), second]}
    assistant = build_assistant([StaticSource("CricAPI_Free", {PRIMARY_URL: body})], now)
    return TestClient(create_api_app(assistant))


def test_snapshot_before_acquisition(client) -> None:
    response = client.get("/snapshot")
    assert response.status_code == 200
    payload = response.json()
    assert payload["acquisition_status"] == "idle"
    assert payload["events"] == []
    assert len(payload["suggested_questions"]) == 4


def test_acquire_and_query(client) -> None:
    payload = client.post("/acquire").json()
    assert payload["acquisition_status"] == "connected"
    assert [event["id"] for event in payload["events"]] == ["first", "second"]
    assert payload["selected_event"]["league"] == "International"
    assert payload["conditions"]["pitch_type"] == "bowling-friendly"
    assert len(payload["squads"]["India"]["batsmen"]) == 5
    assert "Fantasy Cricket AI Assistant Ready" in payload["report"]

    answer = client.post("/query", json={"text": "best captain"}).json()
    assert answer["report"].startswith("🤖 **AI Captain Analysis**")
    assert answer["segments"][0] == {"text": "🤖 ", "emphasis": False}
    assert answer["segments"][1] == {"text": "AI Captain Analysis", "emphasis": True}


def test_select_event(client) -> None:
    client.post("/acquire")

    payload = client.post("/events/second/select").json()

    assert payload["selected_event"]["teams"] == ["England", "Pakistan"]
    assert set(payload["squads"]) == {"England", "Pakistan"}


def test_select_unknown_event_is_404(client) -> None:
    client.post("/acquire")
    response = client.post("/events/nope/select")
    assert response.status_code == 404
    assert "nope" in response.json()["detail"]


def test_retry(client) -> None:
    payload = client.post("/retry").json()
    assert payload["message"].startswith("🔄 **Retrying Live Data Connection**")
    assert payload["acquisition_status"] == "connected"
