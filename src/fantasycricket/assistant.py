"""Orchestration: acquire, substitute, build squads, publish, answer."""

from __future__ import annotations

import asyncio
import dataclasses
import datetime as dt
import logging
import random
from typing import Callable, Dict, List, Tuple

from . import analytics
from .acquisition import AcquisitionPipeline
from .config import CricketSettings, get_config
from .configuration import (
    CricketConfig,
    create_http_client,
    create_registry_from_config,
    load_cricket_config,
    validate_cricket_config,
)
from .errors import UnknownEventError
from .intents import IntentRouter
from .models import AcquisitionStatus, Conditions, Event, Snapshot, Squad, utcnow
from .normalization import ResponseNormalizer
from .sources.common import AsyncHTTPClient
from .squads import SquadBuilder
from .synthesis import SYNTHETIC_SOURCE, SyntheticGenerator
from .weather import WeatherLookup

logger = logging.getLogger(__name__)


class SnapshotCell:
    """Single owner of the current :class:`Snapshot`.

    Writers hold :attr:`lock` for the whole build and then :meth:`publish`
    a finished snapshot; readers call :meth:`current` and get the frozen
    object that was last published.
    """

    def __init__(self, initial: Snapshot | None = None) -> None:
        self._snapshot = initial or Snapshot.empty()
        self.lock = asyncio.Lock()

    def current(self) -> Snapshot:
        return self._snapshot

    def publish(self, snapshot: Snapshot) -> Snapshot:
        self._snapshot = snapshot
        logger.debug(
            "Published snapshot: status=%s events=%d source=%s",
            snapshot.acquisition_status.value,
            len(snapshot.events),
            snapshot.data_source or "-",
        )
        return snapshot


class CricketAssistant:
    """Inbound interface used by the CLI and the HTTP adapter."""

    def __init__(
        self,
        pipeline: AcquisitionPipeline,
        squads: SquadBuilder,
        synthesizer: SyntheticGenerator,
        *,
        router: IntentRouter | None = None,
        cell: SnapshotCell | None = None,
        client: AsyncHTTPClient | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.squads = squads
        self.synthesizer = synthesizer
        self.router = router or IntentRouter()
        self.cell = cell or SnapshotCell()
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: CricketConfig | None = None,
        *,
        settings: CricketSettings | None = None,
        offline: bool = False,
        seed: int | None = None,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> "CricketAssistant":
        """Wire the full stack from YAML configuration and environment settings.

        Settings given explicitly through ``FANTASYCRICKET_*`` variables take
        precedence over the ``runtime`` section of the YAML file.
        """

        settings = settings or get_config()
        config = config or load_cricket_config()
        runtime_overrides = {
            target: getattr(settings, name)
            for name, target in (
                ("timeout", "timeout_seconds"),
                ("user_agent", "user_agent"),
                ("window_hours", "window_hours"),
            )
            if name in settings.model_fields_set
        }
        if runtime_overrides:
            config = config.model_copy(
                update={"runtime": config.runtime.model_copy(update=runtime_overrides)}
            )
        for warning in validate_cricket_config(config):
            logger.warning("Configuration warning: %s", warning)

        rng = random.Random(seed if seed is not None else settings.seed)
        client = create_http_client(config)
        lookups = config.lookups
        weather = WeatherLookup(
            client,
            endpoints=lookups.weather_endpoints,
            rng=rng,
            enabled=lookups.weather_enabled and settings.weather_lookup and not offline,
        )
        squads = SquadBuilder(
            client,
            rng=rng,
            name_lookup=lookups.names_enabled and settings.name_lookup and not offline,
            names_endpoint=lookups.names_endpoint,
            weather=weather,
        )
        pipeline = AcquisitionPipeline(
            create_registry_from_config(config, client=client),
            normalizer=ResponseNormalizer(rng=rng, clock=clock),
            window=dt.timedelta(hours=config.runtime.window_hours),
            clock=clock,
        )
        return cls(
            pipeline,
            squads,
            SyntheticGenerator(rng, clock),
            client=client,
        )

    @property
    def snapshot(self) -> Snapshot:
        return self.cell.current()

    async def request_acquisition(self) -> Snapshot:
        async with self.cell.lock:
            self.cell.publish(
                dataclasses.replace(
                    self.cell.current(), acquisition_status=AcquisitionStatus.CONNECTING
                )
            )
            try:
                snapshot = await self._acquire()
            except Exception as err:
                logger.exception("Acquisition cycle failed")
                snapshot = Snapshot.empty(AcquisitionStatus.ERROR, explanation=str(err))
            return self.cell.publish(snapshot)

    async def retry(self) -> Snapshot:
        logger.info("Retrying acquisition across all sources")
        return await self.request_acquisition()

    async def select_event(self, event_id: str) -> Snapshot:
        async with self.cell.lock:
            current = self.cell.current()
            event = current.find_event(event_id)
            if event is None:
                raise UnknownEventError(event_id)
            squads, conditions = await self._derive(event)
            return self.cell.publish(
                dataclasses.replace(
                    current,
                    selected_event=event,
                    squads_by_team=squads,
                    venue_conditions=conditions,
                )
            )

    async def submit_query(self, text: str) -> str:
        return self.router.route(text, self.cell.current())

    def ready_report(self) -> str:
        return analytics.ready_report(self.cell.current())

    def suggested_questions(self) -> List[str]:
        return analytics.suggested_questions(self.cell.current())

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _acquire(self) -> Snapshot:
        result = await self.pipeline.acquire()
        if result.ok:
            events = result.events
            source = result.source_name or ""
            status = AcquisitionStatus.CONNECTED
            synthetic = False
            explanation = None
        else:
            logger.info("All sources exhausted; attempting synthesis")
            synthesis = self.synthesizer.generate()
            if not synthesis.events:
                return Snapshot.empty(
                    AcquisitionStatus.NO_MATCHES, explanation=synthesis.explanation
                )
            events = synthesis.events
            source = SYNTHETIC_SOURCE
            status = AcquisitionStatus.SYNTHETIC
            synthetic = True
            explanation = "Every live source failed; showing simulated fixtures"

        selected = events[0]
        squads, conditions = await self._derive(selected)
        return Snapshot(
            events=tuple(events),
            selected_event=selected,
            squads_by_team=squads,
            venue_conditions=conditions,
            data_source=source,
            acquisition_status=status,
            synthetic=synthetic,
            explanation=explanation,
        )

    async def _derive(self, event: Event) -> Tuple[Dict[str, Squad], Conditions]:
        # sequential so a seeded rng is consumed in a fixed order
        squads = await self.squads.build(event)
        conditions = await self.squads.conditions(event.venue)
        return squads, conditions


__all__ = ["CricketAssistant", "SnapshotCell"]
