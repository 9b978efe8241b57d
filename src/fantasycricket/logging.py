"""Logging helpers for the cricket assistant."""

from __future__ import annotations

import logging
from typing import Iterable


def configure_logging(level: int = logging.INFO, handlers: Iterable[logging.Handler] | None = None) -> None:
    """Configure root logging for interactive sessions.

    Source fallbacks are reported at ``WARNING`` and lookup fallbacks at
    ``DEBUG``, so ``INFO`` shows which source won without the noise of every
    failed mirror.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=list(handlers) if handlers else None,
    )
