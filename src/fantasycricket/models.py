"""Canonical data model shared by acquisition, synthesis and analytics.

Every source speaks its own dialect; once a payload has been through the
normaliser it is expressed with the types below and nothing downstream
needs to know where it came from (apart from ``source_name`` provenance).
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence, Tuple

logger = logging.getLogger(__name__)

ROLE_BUCKETS: Tuple[str, ...] = ("batsmen", "bowlers", "allRounders", "wicketKeepers")


class MatchFormat(str, Enum):
    """Playing format of a contest."""

    T20 = "T20"
    ODI = "ODI"
    TEST = "Test"
    OTHER = "Other"


class League(str, Enum):
    """Competition family derived from series text and team names."""

    IPL = "IPL"
    BBL = "BBL"
    PSL = "PSL"
    COUNTY = "County"
    WOMENS = "WomensCricket"
    INTERNATIONAL = "International"
    DOMESTIC = "DomesticLeague"

    @property
    def label(self) -> str:
        return _LEAGUE_LABELS[self]


_LEAGUE_LABELS = {
    League.IPL: "IPL",
    League.BBL: "BBL",
    League.PSL: "PSL",
    League.COUNTY: "County Championship",
    League.WOMENS: "Women's Cricket",
    League.INTERNATIONAL: "International",
    League.DOMESTIC: "Domestic League",
}


class PitchType(str, Enum):
    BATTING = "batting-friendly"
    BOWLING = "bowling-friendly"
    SPIN = "spin-friendly"
    BALANCED = "balanced"


class DewFactor(str, Enum):
    HIGH = "high"
    LOW = "low"


class AcquisitionStatus(str, Enum):
    """Lifecycle of the published snapshot."""

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    SYNTHETIC = "synthetic"
    NO_MATCHES = "no_matches"
    ERROR = "error"


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def parse_timestamp(value: Any) -> dt.datetime | None:
    """Parse ISO-8601 strings or epoch numbers into aware UTC datetimes.

    Returns ``None`` when the value cannot be interpreted.  Epoch values
    above ``1e11`` are assumed to be milliseconds.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dt.datetime):
        timestamp = value
    elif isinstance(value, (int, float)):
        seconds = value / 1000.0 if value > 1e11 else float(value)
        try:
            return dt.datetime.fromtimestamp(seconds, tz=dt.timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            timestamp = dt.datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unable to parse timestamp %s", value)
            return None
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=dt.timezone.utc)
    try:
        return timestamp.astimezone(dt.timezone.utc)
    except OverflowError:
        logger.debug("Timestamp %s falls outside the representable range", value)
        return None


@dataclasses.dataclass(slots=True)
class Event:
    """A single scheduled or in-progress contest."""

    id: str
    name: str
    teams: Tuple[str, str]
    match_format: MatchFormat = MatchFormat.T20
    venue: str = "TBD"
    series: str = "Tournament"
    status: str = "Upcoming"
    timestamp: str = ""
    source_name: str = ""

    def __post_init__(self) -> None:
        teams = tuple(str(team) for team in self.teams)
        if len(teams) != 2:
            raise ValueError(f"An event needs exactly two teams, got {len(teams)}")
        self.teams = teams  # type: ignore[assignment]
        if not isinstance(self.match_format, MatchFormat):
            self.match_format = MatchFormat(self.match_format)
        parsed = parse_timestamp(self.timestamp)
        if parsed is None:
            parsed = utcnow()
        self.timestamp = parsed.isoformat()

    @property
    def starts_at(self) -> dt.datetime:
        parsed = parse_timestamp(self.timestamp)
        assert parsed is not None
        return parsed

    @property
    def league(self) -> League:
        from .normalization import classify_league  # local import to avoid cycle

        return classify_league(self.series, self.teams)

    @property
    def status_category(self) -> str:
        """Coarse display hint: ``live``, ``upcoming`` or ``other``."""

        lowered = self.status.lower()
        if "live" in lowered or "progress" in lowered:
            return "live"
        if "upcoming" in lowered or "starts" in lowered:
            return "upcoming"
        return "other"


@dataclasses.dataclass(frozen=True, slots=True)
class Player:
    name: str
    team: str
    role: str
    bucket: str
    form: int
    price: int
    ownership: int
    recent_scores: Tuple[int, ...]
    injury_status: str = "fit"
    venue_avg: int = 50

    def __post_init__(self) -> None:
        for field_name in ("form", "price", "ownership"):
            value = getattr(self, field_name)
            if not 0 <= value <= 100:
                raise ValueError(f"{field_name} must be within [0, 100], got {value}")
        if self.bucket not in ROLE_BUCKETS:
            raise ValueError(f"Unknown role bucket: {self.bucket}")

    @property
    def credits(self) -> float:
        return self.price / 10.0


@dataclasses.dataclass(frozen=True, slots=True)
class Squad:
    """Per-team roster grouped by role bucket, in bucket order."""

    team: str
    buckets: Mapping[str, Tuple[Player, ...]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "buckets", MappingProxyType(dict(self.buckets)))

    def __getitem__(self, bucket: str) -> Tuple[Player, ...]:
        return tuple(self.buckets.get(bucket, ()))

    def __iter__(self) -> Iterator[str]:
        return iter(bucket for bucket in ROLE_BUCKETS if bucket in self.buckets)

    def players(self) -> list[Player]:
        return [player for bucket in self for player in self.buckets[bucket]]


@dataclasses.dataclass(frozen=True, slots=True)
class Conditions:
    pitch_type: PitchType
    weather: str
    temperature: int
    humidity: int
    wind_speed: int
    dew_factor: DewFactor
    source: str = "generated"


@dataclasses.dataclass(frozen=True, slots=True)
class Snapshot:
    """Published, read-only application state consumed by analytics."""

    events: Tuple[Event, ...] = ()
    selected_event: Event | None = None
    squads_by_team: Mapping[str, Squad] = dataclasses.field(default_factory=dict)
    venue_conditions: Conditions | None = None
    data_source: str = ""
    acquisition_status: AcquisitionStatus = AcquisitionStatus.IDLE
    synthetic: bool = False
    explanation: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "squads_by_team", MappingProxyType(dict(self.squads_by_team)))

    @classmethod
    def empty(
        cls,
        status: AcquisitionStatus = AcquisitionStatus.IDLE,
        *,
        explanation: str | None = None,
    ) -> "Snapshot":
        return cls(acquisition_status=status, explanation=explanation)

    def all_players(self) -> list[Player]:
        players: list[Player] = []
        teams: Sequence[str] = (
            self.selected_event.teams if self.selected_event else tuple(self.squads_by_team)
        )
        for team in dict.fromkeys(teams):
            squad = self.squads_by_team.get(team)
            if squad is not None:
                players.extend(squad.players())
        return players

    def find_event(self, event_id: str) -> Event | None:
        for event in self.events:
            if event.id == event_id:
                return event
        return None


__all__ = [
    "AcquisitionStatus",
    "Conditions",
    "DewFactor",
    "Event",
    "League",
    "MatchFormat",
    "PitchType",
    "Player",
    "ROLE_BUCKETS",
    "Snapshot",
    "Squad",
    "parse_timestamp",
    "utcnow",
]
