"""Drive a harness run against a single session engine."""

import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from scenario_harness.aggregator import ResultAggregator
from scenario_harness.engines.base import SessionEngine
from scenario_harness.guard import run_guarded
from scenario_harness.models.config import RunConfig
from scenario_harness.models.result import ResultsDocument
from scenario_harness.reporting import (
    TableFormatter,
    log_results_summary,
    render_structured,
    write_results,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class HarnessRunner:
    """Runs scenarios on one engine and reports the results."""

    engine: SessionEngine
    formatter: TableFormatter = field(default_factory=TableFormatter)

    async def run(self, config: RunConfig) -> ResultsDocument:
        """Run the requested scenarios and return the results document.

        Raises:
            SessionFault: If the session died; no document is produced

        """
        aggregator = ResultAggregator()
        names = config.scenarios

        if names is None:
            log.info("Running all scenarios")
        else:
            log.info("Running %d scenario(s): %s", len(names), ", ".join(names))

        aggregator.start()
        await run_guarded(
            self.engine, lambda: self.engine.run_scenarios(config, names)
        )
        aggregator.record_all(self.engine.get_results())
        aggregator.finish()
        log.info("Scenario execution completed")

        return aggregator.results()

    def report(
        self,
        document: ResultsDocument,
        config: RunConfig,
        stream: TextIO | None = None,
    ) -> None:
        """Persist and print the results in the configured format."""
        stream = stream if stream is not None else sys.stdout

        log_results_summary(log, document)

        if config.output_path is not None:
            log.info("Writing results to %s", config.output_path)
            write_results(document, config.output_path)

        if config.output_format == "json":
            print(render_structured(document), file=stream)
        else:
            print(self.formatter.render(document), file=stream)
