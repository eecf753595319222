"""Engine manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from scenario_harness.engines.base import SessionEngine
from scenario_harness.models.config import HarnessSettings


@dataclass(frozen=True, kw_only=True)
class EngineManifest:
    """Manifest describing a session engine plugin.

    The factory receives the loaded harness settings, so engines are only
    constructed once the configuration has been validated.
    """

    description: str
    engine_factory: Callable[[HarnessSettings], SessionEngine]
