"""Shell session engine module."""

from scenario_harness.engines.shell.engine import ShellSessionEngine
from scenario_harness.engines.shell.manifest import shell_engine_manifest
from scenario_harness.engines.shell.session import ShellSession

__all__ = ["ShellSession", "ShellSessionEngine", "shell_engine_manifest"]
