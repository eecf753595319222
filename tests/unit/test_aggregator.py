"""Tests for the result aggregator."""

import logging
from collections.abc import Iterator

import pytest

from scenario_harness.aggregator import ResultAggregator, parse_elapsed
from scenario_harness.models.result import RawScenarioResult
from scenario_harness.testing.factories import RawScenarioResultFactory


def fake_clock(*ticks: float) -> Iterator[float]:
    """Yield the given clock readings in order."""
    yield from ticks


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (243, 243.0),
        (12.5, 12.5),
        ("569", 569.0),
        (" 3.25 ", 3.25),
        (0, 0.0),
    ],
)
def test_parse_elapsed_accepts_numbers(value: object, expected: float) -> None:
    """Parses numbers and numeric strings into seconds."""
    assert parse_elapsed(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "soon", "12s", float("nan"), float("inf"), -1, True, [], {}, 10**400],
)
def test_parse_elapsed_rejects_invalid_values(value: object) -> None:
    """Returns None for absent, non-numeric, negative or non-finite values."""
    assert parse_elapsed(value) is None


class TestResultAggregator:
    """Tests for ResultAggregator."""

    def test_empty_run_has_duration(self) -> None:
        """A run without scenarios still reports its wall-clock duration."""
        clock = fake_clock(100.0, 100.5)
        aggregator = ResultAggregator(clock=lambda: next(clock))

        aggregator.start()
        aggregator.finish()
        document = aggregator.results()

        assert document.tests == {}
        assert document.total_elapsed_seconds == 0.5

    def test_total_is_wall_clock_not_sum(self) -> None:
        """Total elapsed time spans start to finish."""
        clock = fake_clock(10.0, 1010.0)
        aggregator = ResultAggregator(clock=lambda: next(clock))

        aggregator.start()
        aggregator.record_all(
            [
                RawScenarioResult(
                    name="webserver", apply_passed=True, test_passed=True, elapsed=243
                ),
                RawScenarioResult(
                    name="dbserver", apply_passed=True, test_passed=False, elapsed=569
                ),
            ]
        )
        aggregator.finish()
        document = aggregator.results()

        assert document.total_elapsed_seconds == 1000.0
        assert list(document.tests) == ["dbserver", "webserver"]
        assert document.tests["dbserver"].test_passed is False
        assert document.tests["webserver"].elapsed_seconds == 243.0

    def test_unparseable_elapsed_becomes_unknown(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Stores None for elapsed values that cannot be parsed."""
        aggregator = ResultAggregator()
        aggregator.start()

        with caplog.at_level(logging.WARNING):
            outcome = aggregator.record(
                RawScenarioResult(
                    name="web", apply_passed=True, test_passed=True, elapsed="n/a"
                )
            )

        assert outcome.elapsed_seconds is None
        assert "Unparseable elapsed time for scenario web" in caplog.text

    def test_results_is_idempotent(self) -> None:
        """Repeated reads return equal documents."""
        aggregator = ResultAggregator()
        aggregator.start()
        aggregator.record_all(RawScenarioResultFactory.batch(3))
        aggregator.finish()

        assert aggregator.results() == aggregator.results()

    def test_finish_twice_keeps_first_end(self) -> None:
        """A second finish does not move the end of the run."""
        clock = fake_clock(0.0, 5.0, 50.0)
        aggregator = ResultAggregator(clock=lambda: next(clock))

        aggregator.start()
        aggregator.finish()
        aggregator.finish()

        assert aggregator.results().total_elapsed_seconds == 5.0

    def test_duplicate_name_keeps_latest(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Recording a scenario twice keeps the latest outcome."""
        aggregator = ResultAggregator()
        aggregator.start()

        with caplog.at_level(logging.WARNING):
            aggregator.record(
                RawScenarioResult(name="web", apply_passed=False, test_passed=False)
            )
            aggregator.record(
                RawScenarioResult(name="web", apply_passed=True, test_passed=True)
            )
        aggregator.finish()

        assert aggregator.results().tests["web"].passed is True
        assert "recorded twice" in caplog.text

    def test_results_before_finish_raises(self) -> None:
        """Partial runs are not exposed as results."""
        aggregator = ResultAggregator()
        aggregator.start()
        aggregator.record(RawScenarioResultFactory.build())

        with pytest.raises(RuntimeError, match="after finish"):
            aggregator.results()

    def test_record_before_start_raises(self) -> None:
        """Outcomes can only be recorded during a run."""
        aggregator = ResultAggregator()

        with pytest.raises(RuntimeError, match="before start"):
            aggregator.record(RawScenarioResultFactory.build())

    def test_record_after_finish_raises(self) -> None:
        """A finished run does not accept further outcomes."""
        aggregator = ResultAggregator()
        aggregator.start()
        aggregator.finish()

        with pytest.raises(RuntimeError, match="after finish"):
            aggregator.record(RawScenarioResultFactory.build())

    def test_start_discards_previous_run(self) -> None:
        """Starting again begins with an empty document."""
        aggregator = ResultAggregator()
        aggregator.start()
        aggregator.record(RawScenarioResultFactory.build())
        aggregator.finish()

        aggregator.start()
        aggregator.finish()

        assert aggregator.results().tests == {}


def test_record_overflowing_elapsed_is_unknown() -> None:
    """Integers too large for a float are stored as unknown durations."""
    aggregator = ResultAggregator()
    aggregator.start()

    outcome = aggregator.record(
        RawScenarioResult(
            name="web", apply_passed=True, test_passed=True, elapsed=10**400
        )
    )

    assert outcome.elapsed_seconds is None
