"""Exception taxonomy for the acquisition and synthesis pipeline.

Only :class:`UnknownEventError` and :class:`ConfigurationError` ever reach
callers of the assistant; every other error is recovered where it is
raised and turned into a fallback or an explanatory report.
"""

from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .acquisition import SourceAttempt


class CricketDataError(Exception):
    """Base class for errors raised by :mod:`fantasycricket`."""


class TransportError(CricketDataError):
    """A network call failed or timed out."""

    def __init__(self, endpoint: str, message: str) -> None:
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint


class DecodeError(CricketDataError):
    """A response body could not be decoded into a recognised shape."""

    def __init__(self, endpoint: str, message: str) -> None:
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint


class AcquisitionExhausted(CricketDataError):
    """Every source and alternative endpoint failed to yield a record."""

    def __init__(self, attempts: Sequence["SourceAttempt"]) -> None:
        super().__init__(
            f"All {len(attempts)} source attempts failed to produce usable events"
        )
        self.attempts = tuple(attempts)


class SynthesisDeclined(CricketDataError):
    """The plausibility gate rejected synthesis; not a failure."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SquadGenerationPartialFailure(CricketDataError):
    """A name or weather lookup failed for one entity."""

    def __init__(self, entity: str, message: str) -> None:
        super().__init__(f"{entity}: {message}")
        self.entity = entity


class ConfigurationError(CricketDataError, ValueError):
    """Raised when source configuration validation fails."""


class UnknownEventError(CricketDataError, KeyError):
    """Raised when selecting an event id that is not in the snapshot."""

    def __init__(self, event_id: str) -> None:
        super().__init__(event_id)
        self.event_id = event_id

    def __str__(self) -> str:
        return f"Unknown event id: {self.event_id}"


__all__ = [
    "AcquisitionExhausted",
    "ConfigurationError",
    "CricketDataError",
    "DecodeError",
    "SquadGenerationPartialFailure",
    "SynthesisDeclined",
    "TransportError",
    "UnknownEventError",
]
