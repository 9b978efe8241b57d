"""Procedural stand-in fixtures for when every source comes back empty."""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import random
from typing import Callable, Dict, List, Sequence, Tuple

from .errors import SynthesisDeclined
from .models import Event, MatchFormat, utcnow
from .normalization import INTERNATIONAL_SIDES, infer_format

logger = logging.getLogger(__name__)

SYNTHETIC_SOURCE = "Simulated Data"

SEASON_MONTHS = range(3, 12)
EVENING_HOURS = range(14, 21)
WEEKEND = (5, 6)

RETAIN_PROBABILITY = 0.7
INCLUDE_PROBABILITY = 0.3


@dataclasses.dataclass(frozen=True, slots=True)
class Tournament:
    name: str
    format: str
    season: str


TOURNAMENT_CATALOG: Tuple[Tournament, ...] = (
    Tournament("IPL", "T20", "Mar-May"),
    Tournament("International", "ODI", "Year-round"),
    Tournament("BBL", "T20", "Dec-Feb"),
    Tournament("PSL", "T20", "Feb-Mar"),
    Tournament("County Championship", "First Class", "Apr-Sep"),
    Tournament("Women's International", "T20I", "Year-round"),
)


def _franchises(cities: Sequence[str], suffixes: Sequence[str]) -> List[str]:
    return [f"{city} {suffixes[index % len(suffixes)]}" for index, city in enumerate(cities)]


TEAM_ROSTERS: Dict[str, Tuple[str, ...]] = {
    "IPL": tuple(
        _franchises(
            ("Mumbai", "Delhi", "Bangalore", "Chennai", "Kolkata", "Punjab", "Rajasthan", "Hyderabad"),
            ("Indians", "Capitals", "Challengers", "Super Kings", "Knight Riders", "Kings", "Royals", "Titans"),
        )
    ),
    "International": INTERNATIONAL_SIDES,
    "BBL": tuple(
        _franchises(
            ("Sydney", "Melbourne", "Brisbane", "Perth", "Adelaide", "Hobart"),
            ("Sixers", "Stars", "Heat", "Scorchers", "Strikers", "Hurricanes"),
        )
    ),
    "PSL": tuple(
        _franchises(
            ("Karachi", "Lahore", "Islamabad", "Peshawar", "Quetta", "Multan"),
            ("Kings", "Qalandars", "United", "Zalmi", "Gladiators", "Sultans"),
        )
    ),
    "County Championship": (
        "Yorkshire",
        "Lancashire",
        "Surrey",
        "Essex",
        "Kent",
        "Hampshire",
        "Somerset",
        "Warwickshire",
    ),
    "Women's International": tuple(
        f"{side} Women"
        for side in ("India", "Australia", "England", "New Zealand", "South Africa", "West Indies")
    ),
}

VENUES: Dict[str, Tuple[str, ...]] = {
    "IPL": (
        "Wankhede Stadium, Mumbai",
        "Eden Gardens, Kolkata",
        "M. Chinnaswamy Stadium, Bangalore",
    ),
    "International": ("Melbourne Cricket Ground", "Lords, London", "Oval, London"),
    "BBL": ("Sydney Cricket Ground", "Melbourne Cricket Ground", "Adelaide Oval"),
    "PSL": ("National Stadium, Karachi", "Gaddafi Stadium, Lahore"),
    "County Championship": ("Headingley, Leeds", "Old Trafford, Manchester"),
    "Women's International": ("WACA Ground, Perth", "Basin Reserve, Wellington"),
}

STATUS_PHRASES: Tuple[str, ...] = (
    "Live - 15.2 overs",
    "Live - 2nd innings",
    "Match starts in 2 hours",
    "Today 7:30 PM",
    "In Progress",
    "Toss at 7:00 PM",
)

NO_MATCHES_EXPECTED = "No matches expected at this time/season"
NO_ACTIVE_MATCHES = "No active matches found in any tracked tournament"


def plausible_time(moment: dt.datetime) -> bool:
    """Season window (March to November) and a weekend or UTC evening slot."""

    moment = moment.astimezone(dt.timezone.utc)
    in_season = moment.month in SEASON_MONTHS
    return in_season and (moment.weekday() in WEEKEND or moment.hour in EVENING_HOURS)


@dataclasses.dataclass(frozen=True, slots=True)
class SynthesisResult:
    events: Tuple[Event, ...] = ()
    explanation: str | None = None
    declined: SynthesisDeclined | None = None


class SyntheticGenerator:
    """Fabricate a handful of plausible fixtures tagged as simulated."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], dt.datetime] = utcnow,
        catalog: Sequence[Tournament] = TOURNAMENT_CATALOG,
    ) -> None:
        self.rng = rng or random.Random()
        self.clock = clock
        self.catalog = tuple(catalog)

    def generate(self) -> SynthesisResult:
        now = self.clock()
        if not plausible_time(now):
            declined = SynthesisDeclined(NO_MATCHES_EXPECTED)
            logger.info("Synthesis declined: %s", declined.reason)
            return SynthesisResult(explanation=NO_MATCHES_EXPECTED, declined=declined)

        events = [
            self.build_event(tournament, now)
            for tournament in self.active_tournaments()
            if self.rng.random() < INCLUDE_PROBABILITY
        ]
        logger.info("Synthesised %d simulated events", len(events))
        if not events:
            return SynthesisResult(explanation=NO_ACTIVE_MATCHES)
        return SynthesisResult(events=tuple(events))

    def active_tournaments(self) -> List[Tournament]:
        return [t for t in self.catalog if self.rng.random() < RETAIN_PROBABILITY]

    def teams_for(self, tournament: str) -> Tuple[str, ...]:
        return TEAM_ROSTERS.get(tournament, TEAM_ROSTERS["IPL"])

    def venue_for(self, tournament: str) -> str:
        return self.rng.choice(VENUES.get(tournament, VENUES["IPL"]))

    def build_event(self, tournament: Tournament, now: dt.datetime) -> Event:
        first, second = self.rng.sample(self.teams_for(tournament.name), 2)
        epoch_ms = int(now.timestamp() * 1000)
        return Event(
            id=f"synthetic_{tournament.name}_{epoch_ms}",
            name=f"{first} vs {second}",
            teams=(first, second),
            match_format=infer_format(tournament.format) or MatchFormat.OTHER,
            venue=self.venue_for(tournament.name),
            series=f"{tournament.name} {now.year}",
            status=self.rng.choice(STATUS_PHRASES),
            timestamp=now.isoformat(),
            source_name=SYNTHETIC_SOURCE,
        )


__all__ = [
    "NO_MATCHES_EXPECTED",
    "STATUS_PHRASES",
    "SYNTHETIC_SOURCE",
    "SynthesisResult",
    "SyntheticGenerator",
    "TEAM_ROSTERS",
    "TOURNAMENT_CATALOG",
    "Tournament",
    "VENUES",
    "plausible_time",
]
