from __future__ import annotations

import datetime as dt
import random

import pytest
from hypothesis import given, strategies as st

from fantasycricket.models import League, MatchFormat, parse_timestamp
from fantasycricket.normalization import (
    INTERNATIONAL_SIDES,
    MISSING,
    ResponseNormalizer,
    classify_league,
    find_record_array,
    lookup_path,
    team_name,
)


def _normalizer(now: dt.datetime, seed: int = 0) -> ResponseNormalizer:
    return ResponseNormalizer(rng=random.Random(seed), clock=lambda: now)


def test_scenario_a_international_t20(now, scenario_a_body) -> None:
    events = _normalizer(now).normalize(scenario_a_body, "CricAPI_Free")

    assert len(events) == 1
    event = events[0]
    assert event.teams == ("India", "Australia")
    assert event.match_format is MatchFormat.T20
    assert event.league is League.INTERNATIONAL
    assert event.venue == "MCG"
    assert event.name == "India vs Australia"
    assert event.id == "CricAPI_Free_0"
    assert event.source_name == "CricAPI_Free"


def test_empty_record_gets_documented_defaults(now) -> None:
    event = _normalizer(now).normalize({"matches": [{}]}, "src")[0]

    assert event.id == "src_0"
    assert event.venue == "TBD"
    assert event.series == "Tournament"
    assert event.match_format is MatchFormat.T20
    assert event.status == "Upcoming"
    assert event.starts_at == now
    assert event.teams[0] != event.teams[1]
    assert set(event.teams) <= set(INTERNATIONAL_SIDES)
    assert event.name == f"{event.teams[0]} vs {event.teams[1]}"


@given(
    record=st.dictionaries(
        st.sampled_from(["notes", "broadcast", "umpires", "attendance"]),
        st.one_of(st.integers(), st.text(max_size=8), st.none()),
        max_size=4,
    ),
    seed=st.integers(min_value=0, max_value=10_000),
)
def test_missing_fields_always_fall_back(record, seed) -> None:
    now = dt.datetime(2024, 9, 7, 15, tzinfo=dt.timezone.utc)
    event = _normalizer(now, seed).normalize([record], "feed")[0]

    assert event.venue == "TBD"
    assert event.series == "Tournament"
    assert event.match_format is MatchFormat.T20
    assert event.status == "Upcoming"
    assert event.id == "feed_0"
    assert event.timestamp == now.isoformat()


def test_paired_keys_win_over_teams_array(now) -> None:
    record = {
        "team1": "England",
        "team2": "Pakistan",
        "teams": ["Kent", "Essex"],
        "name": "Surrey vs Somerset",
    }
    event = _normalizer(now).normalize_record(record, "src")
    assert event.teams == ("England", "Pakistan")


def test_team_precedence_after_pairs(now) -> None:
    normalizer = _normalizer(now)
    assert normalizer.extract_teams(
        {"teams": [{"fullName": "Perth Scorchers"}, {"shortName": "Heat"}]}
    ) == ("Perth Scorchers", "Heat")
    assert normalizer.extract_teams(
        {"teams": ["Only one"], "participants": [{"team_name": "Kent"}, "Essex"]}
    ) == ("Kent", "Essex")
    assert normalizer.extract_teams({"name": "Lahore Qalandars vs Multan Sultans"}) == (
        "Lahore Qalandars",
        "Multan Sultans",
    )
    assert normalizer.extract_teams({"home_team": "A", "away_team": ""}) != ("A", "")


def test_espn_competitor_pair(now) -> None:
    record = {
        "competitions": [
            {
                "competitors": [
                    {"team": {"displayName": "x", "name": "Sri Lanka"}},
                    {"team": {"name": "Bangladesh"}},
                ]
            }
        ]
    }
    assert _normalizer(now).extract_teams(record) == ("Sri Lanka", "Bangladesh")


def test_team_name_from_objects() -> None:
    assert team_name({"name": "India"}) == "India"
    assert team_name({"shortName": "AUS"}) == "AUS"
    assert team_name({"logo": "x.png"}) == "Team"
    assert team_name("  Kent ") == "Kent"


def test_record_array_extraction_order() -> None:
    assert find_record_array([{"a": 1}]) == [{"a": 1}]
    assert find_record_array({"data": {"id": 1}}) == [{"id": 1}]
    assert find_record_array({"events": [1], "matches": [2]}) == [2]
    assert find_record_array({"meta": {}, "items": [], "rows": [3]}) == [3]
    assert find_record_array({"status": "ok"}) is None
    assert find_record_array("not json") is None


def test_non_object_records_are_skipped(now) -> None:
    events = _normalizer(now).normalize({"matches": ["junk", 3, {"id": "x"}]}, "src")
    assert [event.id for event in events] == ["x"]


def test_status_derivation(now) -> None:
    normalizer = _normalizer(now)
    assert normalizer.extract_status({"matchStatus": "Stumps"}) == "Stumps"
    assert normalizer.extract_status({"score": "120/3"}) == "Live"
    assert normalizer.extract_status({"hasStarted": True}) == "In Progress"
    assert normalizer.extract_status({}) == "Upcoming"


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        ({"matchType": "odi"}, MatchFormat.ODI),
        ({"format": "Test"}, MatchFormat.TEST),
        ({"type": "First Class"}, MatchFormat.OTHER),
        ({"series": "Bilateral ODI Series"}, MatchFormat.ODI),
        ({"tournament": "World Test Championship"}, MatchFormat.TEST),
        ({"series": "Friendly"}, MatchFormat.T20),
    ],
)
def test_format_inference(now, record, expected) -> None:
    assert _normalizer(now).normalize_record(record, "src").match_format is expected


def test_nested_venue_and_series(now) -> None:
    record = {
        "venue": {"name": "Eden Gardens", "city": "Kolkata"},
        "series": {"title": "Indian Premier League"},
    }
    event = _normalizer(now).normalize_record(record, "src")
    assert event.venue == "Eden Gardens"
    assert event.series == "Indian Premier League"
    assert event.league is League.IPL


def test_epoch_timestamps_are_parsed(now) -> None:
    record = {"date": int(now.timestamp() * 1000)}
    event = _normalizer(now).normalize_record(record, "src")
    assert event.starts_at == now


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-09-07T20:30:00+05:30", dt.datetime(2024, 9, 7, 15, tzinfo=dt.timezone.utc)),
        ("2024-09-07T15:00:00Z", dt.datetime(2024, 9, 7, 15, tzinfo=dt.timezone.utc)),
        ("0001-01-01T00:00:00+05:00", None),
        ("9999-12-31T23:59:59-05:00", None),
        ("not a date", None),
    ],
)
def test_parse_timestamp(value, expected) -> None:
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize(
    ("series", "teams", "expected"),
    [
        ("IPL 2024", ("Mumbai Indians", "Delhi Capitals"), League.IPL),
        ("Big Bash League", ("A", "B"), League.BBL),
        ("Pakistan Super League", ("A", "B"), League.PSL),
        ("County Championship", ("Kent", "Essex"), League.COUNTY),
        ("Women's Ashes", ("A", "B"), League.WOMENS),
        ("Tour", ("Sri Lanka", "Zimbabwe"), League.INTERNATIONAL),
        ("Tour", ("West Indies", "Afghanistan"), League.DOMESTIC),
    ],
)
def test_league_classification(series, teams, expected) -> None:
    assert classify_league(series, teams) is expected


def test_lookup_path() -> None:
    record = {"a": {"b": [{"c": 1}]}, "x.y": 2}
    assert lookup_path(record, "a.b.0.c") == 1
    assert lookup_path(record, "x.y") == 2
    assert lookup_path(record, "a.b.3.c") is MISSING
    assert lookup_path(record, "a.z") is MISSING
