"""Load run configuration and harness configuration documents."""

import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from scenario_harness.errors import ConfigurationError
from scenario_harness.models.config import HarnessSettings, OutputFormat, RunConfig

log = logging.getLogger(__name__)


def build_run_config(
    image: Path | None,
    harness_config: Path | None,
    *,
    scenarios: Sequence[str] | None = None,
    output_format: OutputFormat = "table",
    output_path: Path | None = None,
    skip_vm: bool = False,
    engine: str = "shell",
) -> RunConfig:
    """Validate run options and build a RunConfig.

    Raises:
        ConfigurationError: If the disk image or harness configuration is
            missing, does not exist, or an option is invalid

    """
    if image is None:
        raise ConfigurationError("A disk image is required (--image)")
    if harness_config is None:
        raise ConfigurationError("A harness configuration is required (--config)")
    if not image.exists():
        raise ConfigurationError(f"Disk image not found: {image}")
    if not harness_config.is_file():
        raise ConfigurationError(f"Harness configuration not found: {harness_config}")

    try:
        return RunConfig(
            image=image,
            harness_config=harness_config,
            scenarios=scenarios,
            output_format=output_format,
            output_path=output_path,
            skip_vm=skip_vm,
            engine=engine,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid run options: {exc}") from exc


def load_harness_settings(path: Path) -> HarnessSettings:
    """Load the harness configuration document (JSON).

    Raises:
        ConfigurationError: If the file cannot be read or does not validate

    """
    log.debug("Loading harness configuration from %s", path)
    try:
        content = path.read_text()
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read harness configuration {path}: {exc}"
        ) from exc

    try:
        return HarnessSettings.model_validate_json(content)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid harness configuration {path}: {exc}"
        ) from exc
