"""Shell engine manifest."""

from scenario_harness.engines.manifest import EngineManifest
from scenario_harness.engines.shell.engine import ShellSessionEngine

shell_engine_manifest = EngineManifest(
    description="Run scenario commands in an interactive shell session",
    engine_factory=ShellSessionEngine,
)
