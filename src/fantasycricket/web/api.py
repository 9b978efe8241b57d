"""FastAPI application exposing the assistant's inbound operations."""

from __future__ import annotations

import dataclasses

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from ..analytics import RETRY_MESSAGE, split_emphasis
from ..assistant import CricketAssistant
from ..errors import UnknownEventError
from ..models import Conditions, Event, Player, Snapshot


class QueryRequest(BaseModel):
    text: str


def create_api_app(assistant: CricketAssistant) -> FastAPI:
    """Return a FastAPI app driving ``assistant``."""

    app = FastAPI(title="Fantasy Cricket Assistant API")

    def _assistant() -> CricketAssistant:
        return assistant

    @app.post("/acquire")
    async def acquire(service: CricketAssistant = Depends(_assistant)) -> dict[str, object]:
        snapshot = await service.request_acquisition()
        return _snapshot_payload(snapshot) | {"report": service.ready_report()}

    @app.post("/retry")
    async def retry(service: CricketAssistant = Depends(_assistant)) -> dict[str, object]:
        snapshot = await service.retry()
        return _snapshot_payload(snapshot) | {
            "message": RETRY_MESSAGE,
            "report": service.ready_report(),
        }

    @app.post("/events/{event_id}/select")
    async def select(
        event_id: str, service: CricketAssistant = Depends(_assistant)
    ) -> dict[str, object]:
        try:
            snapshot = await service.select_event(event_id)
        except UnknownEventError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _snapshot_payload(snapshot)

    @app.post("/query")
    async def query(
        body: QueryRequest, service: CricketAssistant = Depends(_assistant)
    ) -> dict[str, object]:
        report = await service.submit_query(body.text)
        return {
            "report": report,
            "segments": [
                {"text": text, "emphasis": emphasis} for text, emphasis in split_emphasis(report)
            ],
        }

    @app.get("/snapshot")
    def snapshot(service: CricketAssistant = Depends(_assistant)) -> dict[str, object]:
        return _snapshot_payload(service.snapshot) | {
            "suggested_questions": service.suggested_questions()
        }

    return app


def _event_payload(event: Event) -> dict[str, object]:
    return {
        "id": event.id,
        "name": event.name,
        "teams": list(event.teams),
        "match_format": event.match_format.value,
        "league": event.league.value,
        "venue": event.venue,
        "series": event.series,
        "status": event.status,
        "status_category": event.status_category,
        "timestamp": event.timestamp,
        "source_name": event.source_name,
    }


def _player_payload(player: Player) -> dict[str, object]:
    payload = dataclasses.asdict(player)
    payload["recent_scores"] = list(player.recent_scores)
    payload["credits"] = player.credits
    return payload


def _conditions_payload(conditions: Conditions) -> dict[str, object]:
    return {
        "pitch_type": conditions.pitch_type.value,
        "weather": conditions.weather,
        "temperature": conditions.temperature,
        "humidity": conditions.humidity,
        "wind_speed": conditions.wind_speed,
        "dew_factor": conditions.dew_factor.value,
        "source": conditions.source,
    }


def _snapshot_payload(snapshot: Snapshot) -> dict[str, object]:
    payload: dict[str, object] = {
        "acquisition_status": snapshot.acquisition_status.value,
        "data_source": snapshot.data_source,
        "synthetic": snapshot.synthetic,
        "explanation": snapshot.explanation,
        "events": [_event_payload(event) for event in snapshot.events],
        "selected_event": (
            _event_payload(snapshot.selected_event) if snapshot.selected_event else None
        ),
        "squads": {
            team: {bucket: [_player_payload(p) for p in squad[bucket]] for bucket in squad}
            for team, squad in snapshot.squads_by_team.items()
        },
    }
    if snapshot.venue_conditions is not None:
        payload["conditions"] = _conditions_payload(snapshot.venue_conditions)
    return payload
