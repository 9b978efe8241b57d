"""Roster generation for a selected event."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import math
import random
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .errors import DecodeError, SquadGenerationPartialFailure, TransportError
from .models import Conditions, Event, MatchFormat, Player, ROLE_BUCKETS, Squad
from .sources.common import AsyncHTTPClient
from .weather import WeatherLookup

logger = logging.getLogger(__name__)

NAMES_ENDPOINT = "https://randomuser.me/api/"

SQUAD_STRUCTURES: Mapping[MatchFormat, Mapping[str, int]] = {
    MatchFormat.T20: {"batsmen": 5, "bowlers": 4, "allRounders": 3, "wicketKeepers": 2},
    MatchFormat.ODI: {"batsmen": 6, "bowlers": 5, "allRounders": 2, "wicketKeepers": 2},
    MatchFormat.TEST: {"batsmen": 6, "bowlers": 5, "allRounders": 2, "wicketKeepers": 2},
}

ROLE_LABELS: Mapping[str, Tuple[str, ...]] = {
    "batsmen": ("opener", "top-order", "middle-order", "finisher", "anchor"),
    "bowlers": ("fast bowler", "spinner", "death bowler", "swing bowler", "pace bowler"),
    "allRounders": (
        "batting allrounder",
        "bowling allrounder",
        "pace allrounder",
        "spin allrounder",
    ),
    "wicketKeepers": ("wicket-keeper batsman", "keeper", "wicket-keeper"),
}

# (form, price, ownership)
STAT_MULTIPLIERS: Mapping[str, Tuple[float, float, float]] = {
    "batsmen": (1.0, 1.1, 1.2),
    "bowlers": (1.0, 1.0, 1.0),
    "allRounders": (1.1, 1.2, 1.3),
    "wicketKeepers": (1.0, 1.1, 1.1),
}

NATIONALITY_CODES: Tuple[Tuple[str, str], ...] = (
    ("india", "in"),
    ("australia", "au"),
    ("england", "gb"),
    ("new zealand", "nz"),
    ("south africa", "za"),
    ("pakistan", "pk"),
)

FIRST_NAMES: Tuple[str, ...] = (
    "Arjun", "Rahul", "Virat", "Rohit", "Shubman", "Rishabh", "Hardik", "Jasprit",
    "Mohammed", "Yuzvendra", "Steve", "David", "Glenn", "Pat", "Mitchell", "Josh",
    "Marcus", "Travis", "Alex", "Cameron", "Joe", "Ben", "Harry", "James", "Stuart",
    "Mark", "Jonny", "Jos", "Moeen", "Adil",
)

LAST_NAMES: Tuple[str, ...] = (
    "Sharma", "Kumar", "Singh", "Patel", "Yadav", "Chahal", "Bumrah", "Pandya",
    "Kohli", "Gill", "Smith", "Warner", "Maxwell", "Cummins", "Starc", "Hazlewood",
    "Stoinis", "Head", "Carey", "Green", "Root", "Stokes", "Brook", "Anderson",
    "Broad", "Wood", "Bairstow", "Buttler", "Ali", "Rashid",
)


def squad_structure(match_format: MatchFormat) -> Mapping[str, int]:
    return SQUAD_STRUCTURES.get(match_format, SQUAD_STRUCTURES[MatchFormat.T20])


def infer_nationality(team: str) -> str:
    lowered = team.lower()
    for country, code in NATIONALITY_CODES:
        if country in lowered:
            return code
    return "us"


def role_label(bucket: str, index: int) -> str:
    labels = ROLE_LABELS.get(bucket, ("player",))
    return labels[index % len(labels)]


def player_stats(bucket: str, rng: random.Random) -> Tuple[int, int, int]:
    """Draw base form/price/ownership and apply the bucket multipliers."""

    base_form = 65 + rng.randrange(35)
    base_price = 50 + rng.randrange(50)
    base_ownership = 5 + rng.randrange(75)
    form_mult, price_mult, ownership_mult = STAT_MULTIPLIERS.get(
        bucket, STAT_MULTIPLIERS["batsmen"]
    )
    return (
        min(100, math.floor(base_form * form_mult)),
        min(100, math.floor(base_price * price_mult)),
        min(95, math.floor(base_ownership * ownership_mult)),
    )


def recent_scores(bucket: str, rng: random.Random) -> Tuple[int, ...]:
    if bucket == "bowlers":
        return tuple(rng.randrange(5) for _ in range(5))
    return tuple(rng.randrange(80) + 10 for _ in range(5))


def fallback_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def _name_from_payload(body: Any) -> str | None:
    if not isinstance(body, Mapping):
        return None
    results = body.get("results")
    if not isinstance(results, list) or not results or not isinstance(results[0], Mapping):
        return None
    name = results[0].get("name")
    if not isinstance(name, Mapping):
        return None
    first, last = name.get("first"), name.get("last")
    if not first or not last:
        return None
    return f"{first} {last}"


@dataclasses.dataclass(frozen=True, slots=True)
class _Slot:
    team: str
    bucket: str
    index: int


class SquadBuilder:
    """Build per-team squads and venue conditions for an event.

    Name lookups for the whole event are issued concurrently and collected
    before any player is assembled; random draws happen afterwards in slot
    order so a seeded ``rng`` gives the same squads whatever the lookup
    timing.
    """

    def __init__(
        self,
        client: AsyncHTTPClient | None = None,
        *,
        rng: random.Random | None = None,
        name_lookup: bool = True,
        names_endpoint: str = NAMES_ENDPOINT,
        weather: WeatherLookup | None = None,
        weather_lookup: bool = True,
    ) -> None:
        self._client = client
        self.rng = rng or random.Random()
        self.name_lookup = name_lookup and client is not None
        self.names_endpoint = names_endpoint
        self.weather = weather or WeatherLookup(
            client, rng=self.rng, enabled=weather_lookup
        )

    async def build(self, event: Event) -> Dict[str, Squad]:
        structure = squad_structure(event.match_format)
        slots = [
            _Slot(team, bucket, index)
            for team in event.teams
            for bucket in ROLE_BUCKETS
            for index in range(structure.get(bucket, 0))
        ]
        looked_up = await self._lookup_names(slots)

        grouped: Dict[str, Dict[str, List[Player]]] = {
            team: {bucket: [] for bucket in ROLE_BUCKETS if structure.get(bucket)}
            for team in event.teams
        }
        for slot, name in zip(slots, looked_up):
            grouped[slot.team][slot.bucket].append(self._player(slot, name))

        squads = {
            team: Squad(team=team, buckets={b: tuple(ps) for b, ps in buckets.items()})
            for team, buckets in grouped.items()
        }
        logger.debug(
            "Built squads for %s (%d players per team)", event.name, sum(structure.values())
        )
        return squads

    async def conditions(self, venue: str) -> Conditions:
        return await self.weather.conditions(venue)

    def _player(self, slot: _Slot, name: str | None) -> Player:
        form, price, ownership = player_stats(slot.bucket, self.rng)
        return Player(
            name=name or fallback_name(self.rng),
            team=slot.team,
            role=role_label(slot.bucket, slot.index),
            bucket=slot.bucket,
            form=form,
            price=price,
            ownership=ownership,
            recent_scores=recent_scores(slot.bucket, self.rng),
            venue_avg=self.rng.randrange(40) + 30,
        )

    async def _lookup_names(self, slots: Sequence[_Slot]) -> List[str | None]:
        if not self.name_lookup:
            return [None] * len(slots)
        return list(await asyncio.gather(*(self.fetch_name(slot.team) for slot in slots)))

    async def fetch_name(self, team: str) -> str | None:
        """Ask the person-name provider for one name; ``None`` on any failure."""

        assert self._client is not None
        params = {"results": 1, "nat": infer_nationality(team), "gender": "male"}
        try:
            body = await self._client.get_json(self.names_endpoint, params=params)
        except (TransportError, DecodeError) as err:
            logger.debug("%s", SquadGenerationPartialFailure(team, str(err)))
            return None
        name = _name_from_payload(body)
        if name is None:
            logger.debug(
                "%s", SquadGenerationPartialFailure(team, "name provider returned no usable name")
            )
        return name


__all__ = [
    "FIRST_NAMES",
    "LAST_NAMES",
    "NAMES_ENDPOINT",
    "ROLE_LABELS",
    "SQUAD_STRUCTURES",
    "STAT_MULTIPLIERS",
    "SquadBuilder",
    "fallback_name",
    "infer_nationality",
    "player_stats",
    "recent_scores",
    "role_label",
    "squad_structure",
]
