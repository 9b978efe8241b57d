"""Schema-agnostic normalisation of cricket fixture payloads.

Feeds disagree on almost everything: where the list of fixtures lives,
what the fields are called, whether teams are strings, objects or a
``"A vs B"`` title.  Rather than a tangle of ad-hoc lookups, each canonical
field is described by a :class:`FieldRule` (an ordered tuple of candidate
paths plus an optional transform) and resolved by one shared
first-match-wins function.  Rules are plain data so they can be tested and
extended per field.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import random
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from .models import Event, League, MatchFormat, parse_timestamp, utcnow

logger = logging.getLogger(__name__)

MISSING: Any = object()

RECORD_KEYS: Tuple[str, ...] = ("matches", "data", "events", "fixtures", "results")

INTERNATIONAL_SIDES: Tuple[str, ...] = (
    "India",
    "Australia",
    "England",
    "New Zealand",
    "South Africa",
    "Pakistan",
    "Sri Lanka",
    "Bangladesh",
    "West Indies",
    "Afghanistan",
)

_INTERNATIONAL_MARKERS: Tuple[str, ...] = (
    "india",
    "australia",
    "england",
    "new zealand",
    "south africa",
    "pakistan",
    "sri lanka",
    "bangladesh",
)

_SERIES_LEAGUES: Tuple[Tuple[Tuple[str, ...], League], ...] = (
    (("ipl", "indian premier"), League.IPL),
    (("bbl", "big bash"), League.BBL),
    (("psl", "pakistan super"), League.PSL),
    (("county",), League.COUNTY),
    (("women",), League.WOMENS),
)

PAIRED_TEAM_KEYS: Tuple[Tuple[str, str], ...] = (
    ("team1", "team2"),
    ("home_team", "away_team"),
    ("localteam", "visitorteam"),
    ("teamA", "teamB"),
    # ESPN scoreboard shape
    ("competitions.0.competitors.0.team", "competitions.0.competitors.1.team"),
)

_TEAM_NAME_KEYS: Tuple[str, ...] = ("name", "fullName", "shortName", "team_name")


def lookup_path(record: Any, path: str) -> Any:
    """Return the value at dotted ``path`` or :data:`MISSING`.

    Numeric segments index into lists, so ``teams.0.name`` works on
    ``{"teams": [{"name": "India"}]}``.  A key containing a literal dot is
    matched before the path is split.
    """

    if isinstance(record, Mapping) and path in record:
        return record[path]
    current = record
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not segment.isdigit() or int(segment) >= len(current):
                return MISSING
            current = current[int(segment)]
        else:
            return MISSING
    return current


@dataclasses.dataclass(frozen=True)
class FieldRule:
    """Candidate paths for one canonical field, tried in order."""

    paths: Tuple[str, ...]
    transform: Callable[[Any], Any] | None = None

    def resolve(self, record: Any) -> Any:
        for path in self.paths:
            value = lookup_path(record, path)
            if value is MISSING or value is None:
                continue
            if self.transform is not None:
                value = self.transform(value)
                if value is None:
                    continue
            return value
        return MISSING


def resolve_first(record: Any, rule: FieldRule, default: Any = None) -> Any:
    """Resolve ``rule`` against ``record``, falling back to ``default``."""

    value = rule.resolve(record)
    return default if value is MISSING else value


def _text(value: Any) -> str | None:
    if isinstance(value, (Mapping, list, tuple)):
        return None
    text = str(value).strip()
    return text or None


def _label(value: Any) -> str | None:
    if isinstance(value, Mapping):
        for key in ("name", "fullName", "shortName", "title"):
            if value.get(key):
                return str(value[key]).strip() or None
        return None
    return _text(value)


def _scalar(value: Any) -> Any:
    if isinstance(value, (Mapping, list, tuple)) or value == "":
        return None
    return value


def infer_format(text: Any) -> MatchFormat | None:
    """Map free text to a :class:`MatchFormat` by substring, or ``None``."""

    lowered = str(text or "").lower()
    if "t20" in lowered:
        return MatchFormat.T20
    if "odi" in lowered:
        return MatchFormat.ODI
    if "test" in lowered:
        return MatchFormat.TEST
    return None


def _explicit_format(value: Any) -> MatchFormat | None:
    if not value or isinstance(value, (Mapping, list)):
        return None
    return infer_format(value) or MatchFormat.OTHER


def classify_league(series: str, teams: Sequence[str]) -> League:
    """Classify a fixture by series text first, then by team names."""

    series_lower = (series or "").lower()
    for markers, league in _SERIES_LEAGUES:
        if any(marker in series_lower for marker in markers):
            return league
    for team in teams:
        team_lower = team.lower()
        if any(marker in team_lower for marker in _INTERNATIONAL_MARKERS):
            return League.INTERNATIONAL
    return League.DOMESTIC


def team_name(value: Any) -> str:
    """Extract a display name from a string or a team object."""

    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        for key in _TEAM_NAME_KEYS:
            if value.get(key):
                return str(value[key])
        return "Team"
    if value is None:
        return "Team"
    return str(value)


def find_record_array(body: Any) -> List[Any] | None:
    """Locate the array of fixtures in ``body`` or return ``None``.

    Order: the body itself, the well-known keys, then the first non-empty
    list-valued top-level property.  A non-list ``data`` value is wrapped.
    """

    if isinstance(body, list):
        return body
    if not isinstance(body, Mapping):
        return None
    for key in RECORD_KEYS:
        value = body.get(key)
        if value is None:
            continue
        if isinstance(value, list):
            return value
        if key == "data":
            return [value]
    for value in body.values():
        if isinstance(value, list) and value:
            return value
    return None


def extract_records(body: Any) -> List[Any]:
    return find_record_array(body) or []


DEFAULT_RULES: Mapping[str, FieldRule] = {
    "id": FieldRule(("id", "match_id", "unique_id", "_id", "matchId"), _text),
    "name": FieldRule(("name", "title", "match_title", "description"), _text),
    "match_format": FieldRule(
        ("matchType", "type", "format", "match_type", "game_type"), _explicit_format
    ),
    "venue": FieldRule(("venue", "ground", "stadium", "location", "place"), _label),
    "series": FieldRule(
        ("series", "tournament", "competition", "league", "event"), _label
    ),
    "status": FieldRule(
        ("status", "matchStatus", "state", "match_status", "current_status"), _label
    ),
    "timestamp": FieldRule(
        ("date", "dateTimeGMT", "start_date", "match_date", "time"), _scalar
    ),
}

FIELD_DEFAULTS: Mapping[str, Any] = {
    "venue": "TBD",
    "series": "Tournament",
    "match_format": MatchFormat.T20,
    "status": "Upcoming",
}


@dataclasses.dataclass
class ResponseNormalizer:
    """Map arbitrary decoded payloads onto canonical :class:`Event` records."""

    rules: Mapping[str, FieldRule] = dataclasses.field(
        default_factory=lambda: dict(DEFAULT_RULES)
    )
    rng: random.Random = dataclasses.field(default_factory=random.Random)
    clock: Callable[[], dt.datetime] = utcnow

    def normalize(self, raw_body: Any, source_name: str) -> List[Event]:
        events: List[Event] = []
        for index, record in enumerate(extract_records(raw_body)):
            if not isinstance(record, Mapping):
                logger.debug(
                    "Skipping non-object record %d from %s", index, source_name
                )
                continue
            try:
                events.append(self.normalize_record(record, source_name, index))
            except (TypeError, ValueError, OverflowError) as err:
                logger.warning(
                    "Unable to normalise record %d from %s: %s", index, source_name, err
                )
        logger.debug("Normalised %d events from %s", len(events), source_name)
        return events

    def normalize_record(
        self, record: Mapping[str, Any], source_name: str, index: int = 0
    ) -> Event:
        teams = self.extract_teams(record)
        series = resolve_first(record, self.rules["series"], FIELD_DEFAULTS["series"])
        match_format = resolve_first(record, self.rules["match_format"])
        if match_format is None:
            fallback = lookup_path(record, "series")
            if fallback is MISSING or not fallback:
                fallback = lookup_path(record, "tournament")
            inferred = infer_format(_label(fallback) if fallback is not MISSING else "")
            match_format = inferred or FIELD_DEFAULTS["match_format"]
        timestamp = parse_timestamp(resolve_first(record, self.rules["timestamp"]))
        return Event(
            id=resolve_first(record, self.rules["id"], f"{source_name}_{index}"),
            name=resolve_first(record, self.rules["name"], f"{teams[0]} vs {teams[1]}"),
            teams=teams,
            match_format=match_format,
            venue=resolve_first(record, self.rules["venue"], FIELD_DEFAULTS["venue"]),
            series=series,
            status=self.extract_status(record),
            timestamp=(timestamp or self.clock()).isoformat(),
            source_name=source_name,
        )

    def extract_status(self, record: Mapping[str, Any]) -> str:
        status = resolve_first(record, self.rules["status"])
        if status is not None:
            return str(status)
        if record.get("score") or record.get("live") or record.get("isLive"):
            return "Live"
        if record.get("started") or record.get("hasStarted"):
            return "In Progress"
        return FIELD_DEFAULTS["status"]

    def extract_teams(self, record: Mapping[str, Any]) -> Tuple[str, str]:
        for first_key, second_key in PAIRED_TEAM_KEYS:
            first = lookup_path(record, first_key)
            second = lookup_path(record, second_key)
            if first is not MISSING and second is not MISSING and first and second:
                return team_name(first), team_name(second)
        for key in ("teams", "participants"):
            candidates = record.get(key)
            if isinstance(candidates, list) and len(candidates) >= 2:
                return team_name(candidates[0]), team_name(candidates[1])
        name = record.get("name")
        if isinstance(name, str) and " vs " in name:
            parts = name.split(" vs ")
            return parts[0].strip(), parts[1].strip()
        return self.random_teams()

    def random_teams(self) -> Tuple[str, str]:
        first, second = self.rng.sample(INTERNATIONAL_SIDES, 2)
        return first, second


__all__ = [
    "DEFAULT_RULES",
    "FIELD_DEFAULTS",
    "FieldRule",
    "INTERNATIONAL_SIDES",
    "MISSING",
    "PAIRED_TEAM_KEYS",
    "RECORD_KEYS",
    "ResponseNormalizer",
    "classify_league",
    "extract_records",
    "find_record_array",
    "infer_format",
    "lookup_path",
    "resolve_first",
    "team_name",
]
