from __future__ import annotations

import asyncio
import datetime as dt
import random

import pytest

from fantasycricket.acquisition import AcquisitionPipeline, within_window
from fantasycricket.errors import AcquisitionExhausted, DecodeError, TransportError
from fantasycricket.normalization import ResponseNormalizer
from fantasycricket.sources import (
    DEFAULT_SOURCES,
    HTTPDataSource,
    SourceDefinition,
    SourceRegistry,
    StaticSource,
)

from .conftest import PRIMARY_URL, SECONDARY_URL, StubHTTPClient


def _pipeline(sources, now: dt.datetime) -> AcquisitionPipeline:
    clock = lambda: now  # noqa: E731
    return AcquisitionPipeline(
        SourceRegistry(sources),
        normalizer=ResponseNormalizer(rng=random.Random(0), clock=clock),
        clock=clock,
    )


def _fixture(now: dt.datetime, offset: dt.timedelta, team1: str = "India") -> dict:
    return {
        "team1": team1,
        "team2": "Australia",
        "dateTimeGMT": (now + offset).isoformat(),
    }


@pytest.mark.parametrize(
    ("offset", "kept"),
    [
        (dt.timedelta(hours=47, minutes=59), True),
        (dt.timedelta(hours=48), True),
        (dt.timedelta(hours=48, minutes=1), False),
        (-dt.timedelta(hours=47, minutes=59), True),
        (-dt.timedelta(hours=48, minutes=1), False),
    ],
)
def test_window_boundaries(now, offset, kept) -> None:
    assert within_window((now + offset).isoformat(), now) is kept


def test_unparseable_timestamps_are_kept(now) -> None:
    assert within_window("yesterday-ish", now)
    assert within_window(None, now)


def test_first_usable_source_short_circuits(now, scenario_a_body) -> None:
    first = StaticSource("first", {PRIMARY_URL: scenario_a_body})
    second = StaticSource("second", {SECONDARY_URL: scenario_a_body})

    result = asyncio.run(_pipeline([first, second], now).acquire())

    assert result.ok
    assert result.source_name == "first"
    assert second.calls == []
    assert [attempt.outcome for attempt in result.attempts] == ["ok"]


def test_window_filter_drops_stale_fixtures(now) -> None:
    body = {
        "matches": [
            _fixture(now, dt.timedelta(hours=47, minutes=59), "England"),
            _fixture(now, dt.timedelta(hours=48, minutes=1), "Pakistan"),
        ]
    }
    pipeline = _pipeline([StaticSource("feed", {PRIMARY_URL: body})], now)

    result = asyncio.run(pipeline.acquire())

    assert [event.teams[0] for event in result.events] == ["England"]
    assert pipeline.metrics["requested"] == 2
    assert pipeline.metrics["kept"] == 1
    assert pipeline.metrics["discarded"] == 1
    assert pipeline.metrics["attempts"] == 1
    assert pipeline.metrics["latency_seconds"] >= 0


def test_alternatives_tried_in_order_after_primary_failure(now, scenario_a_body) -> None:
    source = StaticSource(
        "mirrored",
        {
            PRIMARY_URL: TransportError(PRIMARY_URL, "connection refused"),
            "https://alt/decode": DecodeError("https://alt/decode", "not json"),
            "https://alt/shape": {"status": "ok"},
            "https://alt/good": scenario_a_body,
            "https://alt/never": scenario_a_body,
        },
        endpoint=PRIMARY_URL,
        alternatives=(
            "https://alt/timeout",
            "https://alt/decode",
            "https://alt/shape",
            "https://alt/good",
            "https://alt/never",
        ),
    )

    result = asyncio.run(_pipeline([source], now).acquire())

    assert result.ok
    assert [(a.endpoint, a.outcome) for a in result.attempts] == [
        (PRIMARY_URL, "transport_error"),
        ("https://alt/timeout", "transport_error"),
        ("https://alt/decode", "decode_error"),
        ("https://alt/shape", "unrecognised"),
        ("https://alt/good", "ok"),
    ]
    assert "https://alt/never" not in source.calls


def test_empty_array_alternative_ends_the_source(now, scenario_a_body) -> None:
    first = StaticSource(
        "first",
        {PRIMARY_URL: TransportError(PRIMARY_URL, "down"), "https://alt/empty": {"matches": []}},
        endpoint=PRIMARY_URL,
        alternatives=("https://alt/empty", "https://alt/unused"),
    )
    second = StaticSource("second", {SECONDARY_URL: scenario_a_body})

    result = asyncio.run(_pipeline([first, second], now).acquire())

    assert result.source_name == "second"
    assert "https://alt/unused" not in first.calls
    assert result.attempts[1].outcome == "empty"


def test_out_of_window_primary_moves_to_next_source(now, scenario_a_body) -> None:
    stale = {"matches": [_fixture(now, dt.timedelta(days=5))]}
    first = StaticSource("first", {PRIMARY_URL: stale}, alternatives=("https://alt/x",))
    second = StaticSource("second", {SECONDARY_URL: scenario_a_body})

    result = asyncio.run(_pipeline([first, second], now).acquire())

    assert result.source_name == "second"
    assert result.attempts[0].outcome == "empty"
    assert first.calls == [PRIMARY_URL]


def test_unrecognised_primary_body_walks_alternatives(now, scenario_a_body) -> None:
    failure = {"status": "failure", "reason": "apikey required"}
    first = StaticSource(
        "first",
        {PRIMARY_URL: failure, "https://alt/a": scenario_a_body},
        endpoint=PRIMARY_URL,
        alternatives=("https://alt/a",),
    )

    result = asyncio.run(_pipeline([first], now).acquire())

    assert result.ok
    assert result.source_name == "first"
    assert [(a.endpoint, a.outcome) for a in result.attempts] == [
        (PRIMARY_URL, "unrecognised"),
        ("https://alt/a", "ok"),
    ]
    assert first.calls == [PRIMARY_URL, "https://alt/a"]


@pytest.mark.parametrize(
    "stamp", ["0001-01-01T00:00:00+05:00", "9999-12-31T23:59:59-05:00"]
)
def test_out_of_range_timestamp_does_not_abort_acquisition(now, stamp) -> None:
    body = {"matches": [{"team1": "A", "team2": "B", "date": stamp}]}
    first = StaticSource("first", {PRIMARY_URL: body})
    second = StaticSource("second", {SECONDARY_URL: {"matches": []}})

    result = asyncio.run(_pipeline([first, second], now).acquire())

    assert result.source_name == "first"
    (event,) = result.events
    assert event.teams == ("A", "B")
    assert event.timestamp == now.isoformat()


def test_exhaustion_reports_every_attempt(now) -> None:
    sources = [
        StaticSource("a", {}, endpoint="https://a", alternatives=("https://mirror",)),
        StaticSource("b", {"https://b": {"nothing": "here"}}),
    ]

    result = asyncio.run(_pipeline(sources, now).acquire())

    assert not result.ok
    assert isinstance(result.failure, AcquisitionExhausted)
    assert result.events == ()
    assert len(result.failure.attempts) == 3


def test_shared_mirrors_fetched_once_per_run(now) -> None:
    mirrors = ("https://mirror/1", "https://mirror/2")
    first = StaticSource("first", {}, endpoint="https://first", alternatives=mirrors)
    second = StaticSource("second", {}, endpoint="https://second", alternatives=mirrors)

    result = asyncio.run(_pipeline([first, second], now).acquire())

    assert first.calls == ["https://first", *mirrors]
    assert second.calls == ["https://second"]
    assert [a.outcome for a in result.attempts if a.source == "second"] == [
        "transport_error",
        "skipped",
        "skipped",
    ]


def test_http_source_uses_shared_client(now, scenario_a_body) -> None:
    client = StubHTTPClient(
        {PRIMARY_URL: TransportError(PRIMARY_URL, "503"), SECONDARY_URL: scenario_a_body}
    )
    definition = SourceDefinition("http", PRIMARY_URL, alternatives=(SECONDARY_URL,))
    source = HTTPDataSource(definition, client=client, timeout_seconds=2.0)

    result = asyncio.run(_pipeline([source], now).acquire())

    assert result.ok
    assert [url for url, _ in client.calls] == [PRIMARY_URL, SECONDARY_URL]


def test_slow_source_times_out(now) -> None:
    class SlowSource(StaticSource):
        async def _fetch_impl(self, endpoint):
            await asyncio.sleep(1)
            return {}

    source = SlowSource("slow", {PRIMARY_URL: {}})
    source.timeout_seconds = 0.01

    result = asyncio.run(_pipeline([source], now).acquire())

    assert result.attempts[0].outcome == "transport_error"
    assert "timed out" in (result.attempts[0].error or "")


def test_registry_rejects_duplicates_and_keeps_order() -> None:
    registry = SourceRegistry([StaticSource("a", {}), StaticSource("b", {})])
    with pytest.raises(ValueError):
        registry.register(StaticSource("a", {}))
    assert registry.names() == ["a", "b"]
    assert len(registry) == 2


def test_discover_builds_default_sources() -> None:
    registry = SourceRegistry.discover(client=StubHTTPClient({}))
    assert registry.names() == [definition.name for definition in DEFAULT_SOURCES]
    assert registry.alternatives_for("CricAPI_Free")[0] == "https://cricapi.com/api/matches"
    with pytest.raises(KeyError):
        registry.alternatives_for("missing")
