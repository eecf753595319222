"""Discover session engines registered as entry points."""

import logging
from collections.abc import Mapping
from importlib.metadata import EntryPoint, entry_points

from scenario_harness.engines.manifest import EngineManifest
from scenario_harness.errors import ConfigurationError

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "scenario_harness.engines"


class EngineNotFoundError(ConfigurationError):
    """Raised when no usable engine is registered under a key."""


def registered_engines() -> Mapping[str, EntryPoint]:
    """Return the engine entry points by key."""
    return {entry.name: entry for entry in entry_points(group=ENTRY_POINT_GROUP)}


def load_engine_manifest(key: str) -> EngineManifest:
    """Load the manifest of the engine registered under ``key``.

    Raises:
        EngineNotFoundError: If the key is unknown or does not point at an
            EngineManifest

    """
    engines = registered_engines()
    entry = engines.get(key)
    if entry is None:
        available = ", ".join(sorted(engines)) or "none"
        raise EngineNotFoundError(
            f"Engine '{key}' not found. Available engines: {available}"
        )

    manifest = entry.load()
    if not isinstance(manifest, EngineManifest):
        raise EngineNotFoundError(
            f"Entry point '{key}' ({entry.value}) is not an EngineManifest"
        )

    log.debug("Loaded engine %s from %s", key, entry.value)
    return manifest
