"""Tests for the shell engine that do not start processes."""

from pathlib import Path

import pytest

from scenario_harness.engines.shell import ShellSessionEngine
from scenario_harness.errors import ConfigurationError
from scenario_harness.models.config import HarnessSettings, RunConfig, ScenarioCommands


@pytest.fixture
def settings() -> HarnessSettings:
    """Settings with two scenarios and a VM command."""
    return HarnessSettings(
        scenarios={
            "webserver": ScenarioCommands(apply="true", test="true"),
            "dbserver": ScenarioCommands(apply="true", test="false"),
        },
        vm_command=["qemu-system-x86_64", "-m", "1024", "-hda", "{image}"],
    )


def test_build_command_line_substitutes_image(
    settings: HarnessSettings, tmp_path: Path
) -> None:
    """Fills the image path into the VM command."""
    config = RunConfig(
        image=tmp_path / "my disk.img", harness_config=tmp_path / "harness.json"
    )

    command_line = ShellSessionEngine(settings).build_command_line(config)

    assert command_line == (
        f"qemu-system-x86_64 -m 1024 -hda '{tmp_path / 'my disk.img'}'"
    )


def test_build_command_line_requires_vm_command(config: RunConfig) -> None:
    """Without a VM command there is nothing to print."""
    engine = ShellSessionEngine(HarnessSettings())

    with pytest.raises(ConfigurationError, match="no vm_command"):
        engine.build_command_line(config)


async def test_unknown_scenarios_rejected_before_running(
    settings: HarnessSettings, config: RunConfig
) -> None:
    """Unknown names fail before any session is opened."""
    engine = ShellSessionEngine(settings)

    with pytest.raises(ConfigurationError, match="mailserver"):
        await engine.run_scenarios(config, ["webserver", "mailserver"])

    assert engine.last_output == ""
    assert engine.get_results() == ()


async def test_cleanup_without_run(settings: HarnessSettings) -> None:
    """Cleanup is safe when nothing was started."""
    engine = ShellSessionEngine(settings)

    await engine.cleanup()
    await engine.cleanup()
