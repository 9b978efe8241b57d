from __future__ import annotations

import datetime as dt
import random

import pytest
from hypothesis import given, strategies as st

from fantasycricket.models import MatchFormat
from fantasycricket.synthesis import (
    NO_ACTIVE_MATCHES,
    NO_MATCHES_EXPECTED,
    STATUS_PHRASES,
    SYNTHETIC_SOURCE,
    TEAM_ROSTERS,
    TOURNAMENT_CATALOG,
    VENUES,
    SyntheticGenerator,
    plausible_time,
)

from .conftest import FixedRandom

UTC = dt.timezone.utc


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (dt.datetime(2024, 9, 7, 3, tzinfo=UTC), True),  # Saturday night
        (dt.datetime(2024, 9, 10, 15, tzinfo=UTC), True),  # Tuesday evening
        (dt.datetime(2024, 9, 10, 3, tzinfo=UTC), False),
        (dt.datetime(2024, 9, 10, 21, tzinfo=UTC), False),
        (dt.datetime(2024, 12, 7, 15, tzinfo=UTC), False),
        (dt.datetime(2024, 2, 24, 15, tzinfo=UTC), False),
        (dt.datetime(2024, 3, 5, 14, tzinfo=UTC), True),
        (dt.datetime(2024, 11, 30, 2, tzinfo=UTC), True),
    ],
)
def test_plausibility_gate(moment, expected) -> None:
    assert plausible_time(moment) is expected


@given(
    moment=st.datetimes(
        min_value=dt.datetime(2000, 1, 1),
        max_value=dt.datetime(2100, 1, 1),
        timezones=st.just(UTC),
    ).filter(lambda m: not plausible_time(m)),
    seed=st.integers(min_value=0, max_value=2**32),
)
def test_gate_failure_never_fabricates(moment, seed) -> None:
    result = SyntheticGenerator(random.Random(seed), clock=lambda: moment).generate()

    assert result.events == ()
    assert result.explanation == NO_MATCHES_EXPECTED
    assert result.declined is not None
    assert result.declined.reason == NO_MATCHES_EXPECTED


def test_every_tournament_included_when_draws_favour_it(now) -> None:
    result = SyntheticGenerator(FixedRandom(0.0, seed=5), clock=lambda: now).generate()

    assert result.declined is None
    assert len(result.events) == len(TOURNAMENT_CATALOG)
    epoch_ms = int(now.timestamp() * 1000)
    for tournament, event in zip(TOURNAMENT_CATALOG, result.events):
        assert event.id == f"synthetic_{tournament.name}_{epoch_ms}"
        assert event.source_name == SYNTHETIC_SOURCE
        assert event.series == f"{tournament.name} 2024"
        assert event.teams[0] != event.teams[1]
        assert set(event.teams) <= set(TEAM_ROSTERS[tournament.name])
        assert event.venue in VENUES[tournament.name]
        assert event.status in STATUS_PHRASES
        assert event.starts_at == now
        assert event.name == f"{event.teams[0]} vs {event.teams[1]}"


def test_formats_follow_the_catalog(now) -> None:
    events = SyntheticGenerator(FixedRandom(0.0), clock=lambda: now).generate().events
    formats = {event.id.split("_")[1]: event.match_format for event in events}

    assert formats["IPL"] is MatchFormat.T20
    assert formats["International"] is MatchFormat.ODI
    assert formats["County Championship"] is MatchFormat.OTHER
    assert formats["Women's International"] is MatchFormat.T20


def test_no_draws_succeed_explains_absence(now) -> None:
    result = SyntheticGenerator(FixedRandom(0.99), clock=lambda: now).generate()

    assert result.events == ()
    assert result.declined is None
    assert result.explanation == NO_ACTIVE_MATCHES


def test_seeded_generation_is_reproducible(now) -> None:
    first = SyntheticGenerator(random.Random(99), clock=lambda: now).generate()
    second = SyntheticGenerator(random.Random(99), clock=lambda: now).generate()
    assert first == second


def test_unknown_tournament_falls_back_to_ipl_rosters() -> None:
    generator = SyntheticGenerator(random.Random(0))
    assert generator.teams_for("Hundred") == TEAM_ROSTERS["IPL"]
    assert generator.venue_for("Hundred") in VENUES["IPL"]
