"""Sequential, short-circuiting acquisition across the source registry."""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import time
from typing import Any, Callable, Dict, List, MutableMapping, Tuple

from .errors import AcquisitionExhausted, DecodeError, TransportError
from .models import Event, parse_timestamp, utcnow
from .normalization import ResponseNormalizer, find_record_array
from .sources.base import DataSource, SourceRegistry

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = dt.timedelta(hours=48)


def within_window(
    timestamp: Any,
    now: dt.datetime,
    window: dt.timedelta = DEFAULT_WINDOW,
) -> bool:
    """Return whether ``timestamp`` lies within ``window`` of ``now``.

    The boundary is inclusive.  Timestamps that cannot be parsed are kept.
    """

    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return True
    return abs(parsed - now) <= window


@dataclasses.dataclass(slots=True)
class SourceAttempt:
    source: str
    endpoint: str
    outcome: str
    records: int = 0
    error: str | None = None


@dataclasses.dataclass(slots=True)
class AcquisitionResult:
    events: Tuple[Event, ...] = ()
    source_name: str | None = None
    attempts: Tuple[SourceAttempt, ...] = ()
    failure: AcquisitionExhausted | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None and bool(self.events)


class AcquisitionPipeline:
    """Try each registered source in priority order; first usable one wins."""

    def __init__(
        self,
        registry: SourceRegistry,
        *,
        normalizer: ResponseNormalizer | None = None,
        window: dt.timedelta = DEFAULT_WINDOW,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self.registry = registry
        self._normalizer = normalizer or ResponseNormalizer(clock=clock)
        self._window = window
        self._clock = clock
        self._metrics: Dict[str, Any] = {}

    @property
    def metrics(self) -> MutableMapping[str, Any]:
        return self._metrics

    async def acquire(self) -> AcquisitionResult:
        start = time.perf_counter()
        now = self._clock()
        attempts: List[SourceAttempt] = []
        outcomes: Dict[str, str] = {}
        self._metrics = {"requested": 0, "kept": 0, "discarded": 0, "attempts": 0}

        for source in self.registry:
            events = await self._try_source(source, now, attempts, outcomes)
            if events:
                self._finish_metrics(start, attempts)
                logger.info("Acquired %d events from %s", len(events), source.name)
                return AcquisitionResult(
                    events=tuple(events),
                    source_name=source.name,
                    attempts=tuple(attempts),
                )
            logger.warning("%s failed, trying next source", source.name)

        self._finish_metrics(start, attempts)
        failure = AcquisitionExhausted(attempts)
        logger.error("%s", failure)
        return AcquisitionResult(attempts=tuple(attempts), failure=failure)

    async def _try_source(
        self,
        source: DataSource,
        now: dt.datetime,
        attempts: List[SourceAttempt],
        outcomes: Dict[str, str],
    ) -> List[Event]:
        try:
            body = await source.fetch(source.endpoint)
        except (TransportError, DecodeError) as err:
            outcome = "decode_error" if isinstance(err, DecodeError) else "transport_error"
            attempts.append(SourceAttempt(source.name, source.endpoint, outcome, error=str(err)))
            logger.debug("Primary endpoint for %s failed: %s", source.name, err)
            return await self._try_alternatives(source, now, attempts, outcomes)
        except Exception as err:  # pragma: no cover
            attempts.append(
                SourceAttempt(source.name, source.endpoint, "transport_error", error=str(err))
            )
            logger.exception("Unexpected failure from %s", source.name)
            return await self._try_alternatives(source, now, attempts, outcomes)

        if find_record_array(body) is None:
            attempts.append(SourceAttempt(source.name, source.endpoint, "unrecognised"))
            logger.debug("Primary endpoint for %s returned no record array", source.name)
            return await self._try_alternatives(source, now, attempts, outcomes)
        events = self._usable_events(body, source.name, now)
        attempts.append(
            SourceAttempt(
                source.name,
                source.endpoint,
                "ok" if events else "empty",
                records=len(events),
            )
        )
        return events

    async def _try_alternatives(
        self,
        source: DataSource,
        now: dt.datetime,
        attempts: List[SourceAttempt],
        outcomes: Dict[str, str],
    ) -> List[Event]:
        for endpoint in source.alternatives:
            if endpoint in outcomes:
                # mirrors are shared across sources; fetched at most once per run
                attempts.append(SourceAttempt(source.name, endpoint, "skipped"))
                continue
            try:
                body = await source.fetch(endpoint)
            except (TransportError, DecodeError) as err:
                outcome = "decode_error" if isinstance(err, DecodeError) else "transport_error"
                outcomes[endpoint] = outcome
                attempts.append(SourceAttempt(source.name, endpoint, outcome, error=str(err)))
                continue
            except Exception as err:  # pragma: no cover
                outcomes[endpoint] = "transport_error"
                attempts.append(
                    SourceAttempt(source.name, endpoint, "transport_error", error=str(err))
                )
                continue
            if find_record_array(body) is None:
                outcomes[endpoint] = "unrecognised"
                attempts.append(SourceAttempt(source.name, endpoint, "unrecognised"))
                continue
            events = self._usable_events(body, source.name, now)
            outcomes[endpoint] = "ok" if events else "empty"
            attempts.append(
                SourceAttempt(source.name, endpoint, outcomes[endpoint], records=len(events))
            )
            return events
        return []

    def _usable_events(self, body: Any, source_name: str, now: dt.datetime) -> List[Event]:
        events = self._normalizer.normalize(body, source_name)
        kept = [event for event in events if within_window(event.timestamp, now, self._window)]
        self._metrics["requested"] += len(events)
        self._metrics["kept"] += len(kept)
        self._metrics["discarded"] += len(events) - len(kept)
        if len(kept) < len(events):
            logger.debug(
                "Discarded %d of %d events from %s outside the %s window",
                len(events) - len(kept),
                len(events),
                source_name,
                self._window,
            )
        return kept

    def _finish_metrics(self, start: float, attempts: List[SourceAttempt]) -> None:
        self._metrics["attempts"] = len(attempts)
        self._metrics["latency_seconds"] = time.perf_counter() - start


__all__ = [
    "AcquisitionPipeline",
    "AcquisitionResult",
    "DEFAULT_WINDOW",
    "SourceAttempt",
    "within_window",
]
