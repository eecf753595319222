"""Abstract base class for session engines."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from scenario_harness.models.config import RunConfig
from scenario_harness.models.result import RawScenarioResult


class SessionEngine(ABC):
    """Drives the VM and the interactive session scenarios run in.

    Engines signal an unexpected end of the interactive session with
    ``SessionExitedError`` and faults on the session channel with ``OSError``.
    Both are translated into ``SessionFault`` by ``run_guarded``.
    """

    @abstractmethod
    def build_command_line(self, config: RunConfig) -> str:
        """Return the command line that would launch the VM, without running it."""

    @abstractmethod
    async def allocate_console(self, config: RunConfig) -> int:
        """Prepare the VM and hand its console to the user.

        Returns:
            Exit status of the console process

        """

    @abstractmethod
    async def run_scenarios(
        self,
        config: RunConfig,
        names: Sequence[str] | None = None,
    ) -> Sequence[RawScenarioResult]:
        """Run the two-phase apply/test cycle for each requested scenario.

        Args:
            config: Run configuration
            names: Scenario names to run; None runs every known scenario

        Returns:
            One raw result per scenario, each with both phases concluded

        Raises:
            ConfigurationError: If a requested scenario is unknown

        """

    @abstractmethod
    def get_results(self) -> Sequence[RawScenarioResult]:
        """Return the raw results of the latest run."""

    @property
    @abstractmethod
    def last_output(self) -> str:
        """Tail of the output captured from the session."""

    async def flush(self) -> None:
        """Drain any buffered session output into ``last_output``."""

    async def cleanup(self) -> None:
        """Release the VM and session. Safe to call more than once."""
