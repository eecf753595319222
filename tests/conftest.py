"""Shared fixtures."""

from pathlib import Path

import pytest

from scenario_harness.models.config import RunConfig


@pytest.fixture
def config(tmp_path: Path) -> RunConfig:
    """Run configuration pointing at temporary files."""
    return RunConfig(image=tmp_path / "vm.img", harness_config=tmp_path / "harness.json")
