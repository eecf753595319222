"""Models for run configuration and the harness configuration document."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator

from scenario_harness.models.base import Model

OutputFormat = Literal["table", "json"]
ScenarioName = Annotated[str, Field(min_length=1)]


class RunConfig(Model):
    """Options for a single harness run."""

    image: Path = Field(..., description="Disk image the VM boots from")
    harness_config: Path = Field(
        ..., description="Path to the harness configuration document"
    )
    scenarios: Sequence[str] | None = Field(
        default=None, description="Scenarios to run (None means all)"
    )
    output_format: OutputFormat = Field(
        default="table", description="Rendering printed to stdout"
    )
    output_path: Path | None = Field(
        default=None, description="File receiving the structured results"
    )
    skip_vm: bool = Field(
        default=False, description="Do not start or stop the VM (debugging)"
    )
    engine: str = Field(default="shell", description="Session engine key")

    @field_validator("scenarios")
    @classmethod
    def dedupe_scenarios(cls, scenarios: Sequence[str] | None) -> Sequence[str] | None:
        if scenarios is None:
            return None
        return tuple(dict.fromkeys(scenarios))


class ScenarioCommands(Model):
    """Shell commands implementing the two phases of a scenario."""

    apply: str = Field(..., min_length=1, description="Command applying the profile")
    test: str = Field(..., min_length=1, description="Command verifying the profile")


class HarnessSettings(Model):
    """Contents of the harness configuration document."""

    scenarios: Mapping[ScenarioName, ScenarioCommands] = Field(
        default_factory=dict, description="Known scenarios by name"
    )
    session_command: Sequence[str] = Field(
        default=("/bin/sh",),
        min_length=1,
        description="Command opening the interactive session",
    )
    vm_command: Sequence[str] | None = Field(
        default=None,
        description="Command starting the VM ('{image}' is substituted)",
    )
    boot_delay: float = Field(
        default=0.0, ge=0, description="Seconds to wait after starting the VM"
    )
    output_tail: int = Field(
        default=4096, gt=0, description="Characters of session output kept"
    )
