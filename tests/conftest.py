from __future__ import annotations

import copy
import datetime as dt
import random
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

import pytest

from fantasycricket.acquisition import AcquisitionPipeline
from fantasycricket.assistant import CricketAssistant
from fantasycricket.errors import TransportError
from fantasycricket.models import (
    AcquisitionStatus,
    Conditions,
    DewFactor,
    Event,
    PitchType,
    Player,
    ROLE_BUCKETS,
    Snapshot,
    Squad,
)
from fantasycricket.normalization import ResponseNormalizer
from fantasycricket.sources.base import DataSource, SourceRegistry
from fantasycricket.squads import SquadBuilder
from fantasycricket.synthesis import SyntheticGenerator


PRIMARY_URL = "https://stub/primary"
SECONDARY_URL = "https://stub/secondary"


class StubHTTPClient:
    """Answer ``get_json`` from a URL mapping; exceptions are raised."""

    def __init__(self, responses: Mapping[str, Any]) -> None:
        self._responses = dict(responses)
        self.calls: List[Tuple[str, Dict[str, Any] | None]] = []

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        del headers
        self.calls.append((url, dict(params) if params else None))
        if url not in self._responses:
            raise TransportError(url, "no stub response")
        payload = self._responses[url]
        if isinstance(payload, BaseException):
            raise payload
        return copy.deepcopy(payload)

    async def aclose(self) -> None:
        return None


class FixedRandom(random.Random):
    """``random()`` always returns ``value``; integer draws stay seeded."""

    # keeps _randbelow on getrandbits rather than on the pinned random()
    getrandbits = random.Random.getrandbits

    def __init__(self, value: float, seed: int = 0) -> None:
        super().__init__(seed)
        self._value = value

    def random(self) -> float:
        return self._value


def make_player(
    name: str,
    form: int,
    ownership: int,
    *,
    price: int = 80,
    team: str = "India",
    bucket: str = "batsmen",
    role: str = "opener",
) -> Player:
    return Player(
        name=name,
        team=team,
        role=role,
        bucket=bucket,
        form=form,
        price=price,
        ownership=ownership,
        recent_scores=(10, 20, 30, 40, 50),
        venue_avg=45,
    )


def make_event(
    now: dt.datetime,
    *,
    teams: Tuple[str, str] = ("India", "Australia"),
    event_id: str = "match-1",
    match_format: str = "T20",
    venue: str = "Eden Gardens, Kolkata",
) -> Event:
    return Event(
        id=event_id,
        name=f"{teams[0]} vs {teams[1]}",
        teams=teams,
        match_format=match_format,
        venue=venue,
        series="Test Series",
        status="Live - 15.2 overs",
        timestamp=now.isoformat(),
        source_name="CricAPI_Free",
    )


def make_snapshot(
    players: Iterable[Player],
    now: dt.datetime,
    *,
    conditions: Conditions | None = None,
    synthetic: bool = False,
    event: Event | None = None,
) -> Snapshot:
    event = event or make_event(now)
    grouped: Dict[str, Dict[str, List[Player]]] = {team: {} for team in event.teams}
    for player in players:
        grouped.setdefault(player.team, {}).setdefault(player.bucket, []).append(player)
    squads = {
        team: Squad(
            team=team,
            buckets={b: tuple(buckets[b]) for b in ROLE_BUCKETS if b in buckets},
        )
        for team, buckets in grouped.items()
    }
    return Snapshot(
        events=(event,),
        selected_event=event,
        squads_by_team=squads,
        venue_conditions=conditions,
        data_source="Simulated Data" if synthetic else "CricAPI_Free",
        acquisition_status=(
            AcquisitionStatus.SYNTHETIC if synthetic else AcquisitionStatus.CONNECTED
        ),
        synthetic=synthetic,
    )


def build_assistant(
    sources: Sequence[DataSource],
    now: dt.datetime,
    *,
    synth_rng: random.Random | None = None,
) -> CricketAssistant:
    clock = lambda: now  # noqa: E731
    pipeline = AcquisitionPipeline(
        SourceRegistry(sources),
        normalizer=ResponseNormalizer(rng=random.Random(0), clock=clock),
        clock=clock,
    )
    return CricketAssistant(
        pipeline,
        SquadBuilder(rng=random.Random(1)),
        SyntheticGenerator(synth_rng or random.Random(2), clock),
    )


@pytest.fixture()
def now() -> dt.datetime:
    # Saturday evening in September: inside the synthesis window
    return dt.datetime(2024, 9, 7, 15, tzinfo=dt.timezone.utc)


@pytest.fixture()
def off_season() -> dt.datetime:
    # Tuesday in January before dawn
    return dt.datetime(2024, 1, 9, 3, tzinfo=dt.timezone.utc)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def scenario_a_body(now: dt.datetime) -> Dict[str, Any]:
    return {
        "matches": [
            {
                "team1": "India",
                "team2": "Australia",
                "matchType": "T20I",
                "venue": "MCG",
                "dateTimeGMT": now.isoformat(),
            }
        ]
    }


@pytest.fixture()
def balanced_conditions() -> Conditions:
    return Conditions(
        pitch_type=PitchType.BALANCED,
        weather="Clear",
        temperature=25,
        humidity=50,
        wind_speed=10,
        dew_factor=DewFactor.LOW,
    )
