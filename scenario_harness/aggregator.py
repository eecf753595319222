"""Collect scenario outcomes into a results document."""

import logging
import math
import time
from collections.abc import Callable, Iterable

from scenario_harness.models.result import (
    RawScenarioResult,
    ResultsDocument,
    ScenarioOutcome,
)

log = logging.getLogger(__name__)


def parse_elapsed(value: object) -> float | None:
    """Convert a raw elapsed value to seconds.

    Returns None for absent, non-numeric, negative or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


class ResultAggregator:
    """Accumulates scenario outcomes for a single run.

    The total elapsed time is the wall-clock span between ``start`` and
    ``finish``, not the sum of the per-scenario times.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._outcomes: dict[str, ScenarioOutcome] = {}
        self._started_at: float | None = None
        self._finished_at: float | None = None

    def start(self) -> None:
        """Begin a run, discarding anything recorded before."""
        self._outcomes = {}
        self._finished_at = None
        self._started_at = self._clock()

    def record(self, raw: RawScenarioResult) -> ScenarioOutcome:
        """Add one concluded scenario to the run."""
        if self._started_at is None:
            raise RuntimeError("record() called before start()")
        if self._finished_at is not None:
            raise RuntimeError("record() called after finish()")

        elapsed = parse_elapsed(raw.elapsed)
        if elapsed is None and raw.elapsed is not None:
            log.warning(
                "Unparseable elapsed time for scenario %s: %r", raw.name, raw.elapsed
            )
        if raw.name in self._outcomes:
            log.warning("Scenario %s recorded twice, keeping the latest", raw.name)

        outcome = ScenarioOutcome(
            name=raw.name,
            apply_passed=raw.apply_passed,
            test_passed=raw.test_passed,
            elapsed_seconds=elapsed,
        )
        self._outcomes[raw.name] = outcome
        log.debug(
            "Recorded scenario %s: apply=%s test=%s elapsed=%s",
            outcome.name,
            outcome.apply_passed,
            outcome.test_passed,
            outcome.elapsed_seconds,
        )
        return outcome

    def record_all(self, raws: Iterable[RawScenarioResult]) -> None:
        """Add several concluded scenarios to the run."""
        for raw in raws:
            self.record(raw)

    def finish(self) -> None:
        """Mark the run as complete."""
        if self._started_at is None:
            raise RuntimeError("finish() called before start()")
        if self._finished_at is None:
            self._finished_at = self._clock()

    def results(self) -> ResultsDocument:
        """Return the results document of the finished run."""
        if self._started_at is None or self._finished_at is None:
            raise RuntimeError("Results are only available after finish()")

        return ResultsDocument(
            tests=dict(self._outcomes),
            total_elapsed_seconds=max(0.0, self._finished_at - self._started_at),
        )
