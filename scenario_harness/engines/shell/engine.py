"""Session engine running scenarios through an interactive shell."""

import asyncio
import logging
import shlex
import time
from collections.abc import Sequence

from scenario_harness.engines.base import SessionEngine
from scenario_harness.engines.shell.session import ShellSession
from scenario_harness.errors import ConfigurationError, SessionExitedError
from scenario_harness.models.config import HarnessSettings, RunConfig, ScenarioCommands
from scenario_harness.models.result import RawScenarioResult

log = logging.getLogger(__name__)


class ShellSessionEngine(SessionEngine):
    """Runs the configured apply/test commands in a shell session.

    The session command decides where commands run: a local shell, or a
    console or ssh connection into the guest. The VM itself is only started
    when the harness configuration provides a ``vm_command``.
    """

    def __init__(self, settings: HarnessSettings) -> None:
        self.settings = settings
        self._session: ShellSession | None = None
        self._vm: asyncio.subprocess.Process | None = None
        self._results: list[RawScenarioResult] = []

    def build_command_line(self, config: RunConfig) -> str:
        """Return the VM command line with the disk image filled in."""
        return shlex.join(self._vm_arguments(config))

    async def allocate_console(self, config: RunConfig) -> int:
        """Start the VM and attach the session command to this terminal."""
        await self._start_vm(config)
        log.info("Attaching console: %s", shlex.join(self.settings.session_command))
        process = await asyncio.create_subprocess_exec(*self.settings.session_command)
        return await process.wait()

    async def run_scenarios(
        self,
        config: RunConfig,
        names: Sequence[str] | None = None,
    ) -> Sequence[RawScenarioResult]:
        """Run each selected scenario in turn."""
        selected = self._select(names)
        self._results = []

        await self._start_vm(config)
        if self._session is None:
            self._session = await ShellSession.open(
                self.settings.session_command, self.settings.output_tail
            )

        for name in selected:
            result = await self._run_scenario(
                self._session, name, self.settings.scenarios[name]
            )
            self._results.append(result)

        return tuple(self._results)

    def get_results(self) -> Sequence[RawScenarioResult]:
        """Return the results of the latest run."""
        return tuple(self._results)

    @property
    def last_output(self) -> str:
        """Tail of the session output."""
        return self._session.output if self._session is not None else ""

    async def flush(self) -> None:
        """Read pending session output."""
        if self._session is not None:
            await self._session.flush()

    async def cleanup(self) -> None:
        """Close the session and stop the VM."""
        if self._session is not None:
            await self._session.close()
            self._session = None

        if self._vm is not None:
            if self._vm.returncode is None:
                log.info("Stopping VM (pid %d)", self._vm.pid)
                try:
                    self._vm.terminate()
                except ProcessLookupError:
                    pass
            await self._vm.wait()
            self._vm = None

    def _select(self, names: Sequence[str] | None) -> Sequence[str]:
        if names is None:
            return list(self.settings.scenarios)

        unknown = [name for name in names if name not in self.settings.scenarios]
        if unknown:
            raise ConfigurationError(
                f"Unknown scenario(s): {', '.join(unknown)}. "
                f"Known scenarios: {sorted(self.settings.scenarios)}"
            )
        return list(names)

    def _vm_arguments(self, config: RunConfig) -> list[str]:
        if self.settings.vm_command is None:
            raise ConfigurationError("The harness configuration has no vm_command")
        return [
            argument.replace("{image}", str(config.image))
            for argument in self.settings.vm_command
        ]

    async def _start_vm(self, config: RunConfig) -> None:
        if config.skip_vm:
            log.info("Skipping VM management")
            return
        if self.settings.vm_command is None:
            log.info("No vm_command configured, using the session directly")
            return
        if self._vm is not None:
            return

        arguments = self._vm_arguments(config)
        log.info("Starting VM: %s", shlex.join(arguments))
        self._vm = await asyncio.create_subprocess_exec(
            *arguments,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )

        if self.settings.boot_delay:
            log.info("Waiting %.1fs for the VM to boot", self.settings.boot_delay)
            await asyncio.sleep(self.settings.boot_delay)

        if self._vm.returncode is not None:
            raise SessionExitedError(
                f"VM exited during boot with status {self._vm.returncode}"
            )

    async def _run_scenario(
        self,
        session: ShellSession,
        name: str,
        commands: ScenarioCommands,
    ) -> RawScenarioResult:
        started = time.monotonic()

        log.info("Applying scenario %s", name)
        apply_passed = await session.execute(commands.apply) == 0

        test_passed = False
        if apply_passed:
            log.info("Testing scenario %s", name)
            test_passed = await session.execute(commands.test) == 0
        else:
            log.warning("Apply phase of %s failed, skipping its test phase", name)

        elapsed = time.monotonic() - started
        log.info(
            "Scenario %s finished: apply=%s test=%s (%.1fs)",
            name,
            apply_passed,
            test_passed,
            elapsed,
        )
        return RawScenarioResult(
            name=name,
            apply_passed=apply_passed,
            test_passed=test_passed,
            elapsed=elapsed,
        )
