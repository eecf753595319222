"""Models for scenario outcomes and run results."""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import Field, field_validator, model_validator

from scenario_harness.models.base import Model


@dataclass(frozen=True, kw_only=True)
class RawScenarioResult:
    """Outcome of one scenario as reported by a session engine.

    ``elapsed`` is whatever the engine measured and has not been validated;
    the aggregator turns it into seconds or drops it.
    """

    name: str
    apply_passed: bool
    test_passed: bool
    elapsed: object = None


class ScenarioOutcome(Model):
    """Concluded outcome of a single scenario."""

    name: str = Field(..., min_length=1, description="Scenario identifier")
    apply_passed: bool = Field(..., description="Result of the apply phase")
    test_passed: bool = Field(..., description="Result of the test phase")
    elapsed_seconds: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Scenario run time in seconds (None when unknown)",
    )

    @property
    def passed(self) -> bool:
        """A scenario passes only when both phases passed."""
        return self.apply_passed and self.test_passed


class ResultsDocument(Model):
    """Aggregate record of one harness run."""

    tests: Mapping[str, ScenarioOutcome] = Field(
        default_factory=dict, description="Outcomes keyed by scenario name"
    )
    total_elapsed_seconds: float = Field(
        default=0.0,
        ge=0,
        allow_inf_nan=False,
        description="Wall-clock duration of the whole run",
    )

    @field_validator("tests")
    @classmethod
    def sort_tests(
        cls, tests: Mapping[str, ScenarioOutcome]
    ) -> Mapping[str, ScenarioOutcome]:
        return dict(sorted(tests.items()))

    @model_validator(mode="after")
    def check_keys(self) -> "ResultsDocument":
        for key, outcome in self.tests.items():
            if key != outcome.name:
                raise ValueError(
                    f"Outcome stored under '{key}' is named '{outcome.name}'"
                )
        return self

    @property
    def failed(self) -> list[ScenarioOutcome]:
        """Outcomes where apply and test did not both pass."""
        return [outcome for outcome in self.tests.values() if not outcome.passed]
