"""Render results documents as tables and structured JSON."""

import logging
from dataclasses import dataclass
from pathlib import Path

from scenario_harness.aggregator import parse_elapsed
from scenario_harness.models.result import ResultsDocument, ScenarioOutcome

UNKNOWN_DURATION = "Unknown"

STATUS_SYMBOLS = {
    True: "✅",
    False: "❌",
}


def format_duration(value: object) -> str:
    """Format seconds as zero-padded HH:MM:SS, or Unknown when invalid.

    Hours are not capped, so 90000 seconds renders as ``25:00:00``.
    """
    seconds = parse_elapsed(value)
    if seconds is None:
        return UNKNOWN_DURATION
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def fit_duration(text: str, width: int) -> str:
    """Clamp a formatted duration to a column width.

    Durations too long for the column render as the largest value that fits,
    prefixed with ``>``.
    """
    if len(text) <= width:
        return text
    return ">" + "9" * max(width - 7, 1) + ":59:59"


def format_status(passed: bool) -> str:
    """Render a phase result."""
    return "Passed" if passed else "FAILED"


def render_structured(document: ResultsDocument) -> str:
    """Serialize a results document to JSON."""
    return document.model_dump_json(indent=2)


def parse_structured(text: str | bytes) -> ResultsDocument:
    """Parse JSON produced by ``render_structured``."""
    return ResultsDocument.model_validate_json(text)


def write_results(document: ResultsDocument, path: Path) -> None:
    """Persist the structured rendering of a document to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_structured(document) + "\n")


@dataclass(frozen=True, kw_only=True)
class TableLayout:
    """Fixed column widths of the results table."""

    name_width: int = 30
    status_width: int = 7
    time_width: int = 14

    @property
    def inner_width(self) -> int:
        """Width between the outer borders, excluding their padding."""
        return self.name_width + 2 * self.status_width + self.time_width + 9


@dataclass(frozen=True, kw_only=True)
class TableFormatter:
    """Renders results as a fixed-width table for terminals and CI logs."""

    layout: TableLayout = TableLayout()

    def render(self, document: ResultsDocument) -> str:
        """Render the whole table, one row per scenario in name order."""
        border = self._border()
        label = "Total Elapsed Time: "
        elapsed = fit_duration(
            format_duration(document.total_elapsed_seconds),
            self.layout.inner_width - len(label),
        )
        total = f"{label}{elapsed}"
        lines = [
            border,
            f"| {total:<{self.layout.inner_width}} |",
            border,
            self._row("Scenario", "Apply", "Test", "Execution Time"),
            border,
        ]
        lines.extend(
            self.render_row(outcome)
            for _, outcome in sorted(document.tests.items())
        )
        lines.append(border)
        return "\n".join(lines)

    def render_row(self, outcome: ScenarioOutcome) -> str:
        """Render a single scenario row."""
        return self._row(
            outcome.name,
            format_status(outcome.apply_passed),
            format_status(outcome.test_passed),
            fit_duration(
                format_duration(outcome.elapsed_seconds), self.layout.time_width
            ),
        )

    def _row(self, name: str, apply: str, test: str, elapsed: str) -> str:
        layout = self.layout
        name = name[: layout.name_width]
        return (
            f"| {name:<{layout.name_width}} "
            f"| {apply:>{layout.status_width}} "
            f"| {test:>{layout.status_width}} "
            f"| {elapsed:>{layout.time_width}} |"
        )

    def _border(self) -> str:
        layout = self.layout
        columns = (
            layout.name_width,
            layout.status_width,
            layout.status_width,
            layout.time_width,
        )
        return "+" + "+".join("-" * (width + 2) for width in columns) + "+"


def log_results_summary(log: logging.Logger, document: ResultsDocument) -> None:
    """Log a summary line per scenario."""
    log.info("=" * 80)
    log.info(
        "Results Summary (total %s):",
        format_duration(document.total_elapsed_seconds),
    )
    log.info("=" * 80)

    for name, outcome in sorted(document.tests.items()):
        log.info(
            "%s %s: apply=%s test=%s (%s)",
            STATUS_SYMBOLS[outcome.passed],
            name,
            format_status(outcome.apply_passed),
            format_status(outcome.test_passed),
            format_duration(outcome.elapsed_seconds),
        )
