"""Keyword routing from free-text questions to analytics reports."""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Sequence, Tuple

from . import analytics
from .models import AcquisitionStatus, Snapshot

logger = logging.getLogger(__name__)

Report = Callable[[Snapshot], str]


@dataclasses.dataclass(frozen=True, slots=True)
class IntentRule:
    name: str
    keywords: Tuple[str, ...]
    report: Report

    def matches(self, lowered: str) -> bool:
        return any(keyword in lowered for keyword in self.keywords)


# Order is priority; a query matching several keyword sets takes the first.
DEFAULT_RULES: Tuple[IntentRule, ...] = (
    IntentRule("captain", ("captain", "vice-captain", "vc"), analytics.captain_analysis),
    IntentRule("conditions", ("pitch", "conditions", "weather"), analytics.conditions_analysis),
    IntentRule("players", ("form", "player", "stats"), analytics.player_analysis),
    IntentRule("strategy", ("team", "strategy", "11"), analytics.team_strategy),
    IntentRule("differential", ("differential", "ownership"), analytics.differential_picks),
    IntentRule("comparison", ("compare", "vs"), analytics.player_comparison),
)

FALLBACK_INTENT = "insights"


class IntentRouter:
    """Classify a question by substring and render the matching report."""

    def __init__(
        self,
        rules: Sequence[IntentRule] = DEFAULT_RULES,
        fallback: Report = analytics.match_insights,
    ) -> None:
        self.rules = tuple(rules)
        self.fallback = fallback

    def classify(self, query: str) -> str:
        lowered = query.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule.name
        return FALLBACK_INTENT

    def route(self, query: str, snapshot: Snapshot) -> str:
        status = self.status_message(snapshot)
        if status is not None:
            return status
        intent = self.classify(query)
        logger.debug("Routing %r to %s", query, intent)
        for rule in self.rules:
            if rule.name == intent:
                return rule.report(snapshot)
        return self.fallback(snapshot)

    @staticmethod
    def status_message(snapshot: Snapshot) -> str | None:
        """Message that pre-empts routing, or ``None`` when a report can run."""

        if snapshot.acquisition_status is AcquisitionStatus.CONNECTING:
            return analytics.CONNECTING_MESSAGE
        if not snapshot.events:
            return analytics.no_matches_report(snapshot)
        if snapshot.selected_event is None or not snapshot.all_players():
            return analytics.PROCESSING_MESSAGE
        return None


__all__ = ["DEFAULT_RULES", "FALLBACK_INTENT", "IntentRouter", "IntentRule"]
