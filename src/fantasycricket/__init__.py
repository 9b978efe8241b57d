"""
fantasycricket: live cricket fixture acquisition and fantasy analytics.

Fixtures are pulled from an ordered registry of unreliable public feeds,
normalised into one schema, substituted with clearly tagged simulated data
when every feed fails, and answered over with keyword-routed reports.
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - exercised in packaging workflows
    __version__ = version("fantasycricket")
except PackageNotFoundError:  # pragma: no cover - local editable installs
    __version__ = "0.0.0"

_EXPORTS = {
    # Orchestration
    "CricketAssistant": ".assistant",
    "SnapshotCell": ".assistant",
    "AcquisitionPipeline": ".acquisition",
    "ResponseNormalizer": ".normalization",
    "SyntheticGenerator": ".synthesis",
    "SquadBuilder": ".squads",
    "IntentRouter": ".intents",
    "SourceRegistry": ".sources",
    # Data model
    "Event": ".models",
    "Player": ".models",
    "Squad": ".models",
    "Conditions": ".models",
    "Snapshot": ".models",
    # Configuration
    "get_config": ".config",
    "load_cricket_config": ".configuration",
    "configure_logging": ".logging",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> object:  # pragma: no cover - thin lazy importer
    from importlib import import_module

    target_module = _EXPORTS.get(name)
    if not target_module:
        raise AttributeError(f"module {__name__} has no attribute {name}")
    module = import_module(target_module, __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr
