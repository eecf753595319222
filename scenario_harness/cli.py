"""CLI entry point for the scenario harness."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from scenario_harness.engines.base import SessionEngine
from scenario_harness.engines.loading import load_engine_manifest
from scenario_harness.errors import ConfigurationError, SessionFault
from scenario_harness.exit_codes import CONFIGURATION_ERROR, SESSION_FAULT, resolve
from scenario_harness.models.config import RunConfig
from scenario_harness.runner import HarnessRunner
from scenario_harness.settings_loader import build_run_config, load_harness_settings

log = logging.getLogger("scenario_harness")


def parse_scenarios(values: Sequence[str] | None) -> Sequence[str] | None:
    """Flatten repeated and comma-separated scenario names.

    Returns None when no scenario was requested, meaning all of them.
    """
    if not values:
        return None
    names = tuple(
        name.strip() for value in values for name in value.split(",") if name.strip()
    )
    return names or None


def create_engine(config: RunConfig) -> SessionEngine:
    """Load the harness settings and build the configured engine."""
    settings = load_harness_settings(config.harness_config)
    manifest = load_engine_manifest(config.engine)
    log.debug("Using engine %s: %s", config.engine, manifest.description)
    return manifest.engine_factory(settings)


async def run(config: RunConfig, stream: TextIO | None = None) -> int:
    """Run scenarios, report results and return the exit code."""
    engine = create_engine(config)
    runner = HarnessRunner(engine=engine)

    try:
        document = await runner.run(config)
        runner.report(document, config, stream)
    finally:
        await engine.cleanup()

    exit_code = resolve(document)
    log.info(
        "%d scenario(s) run, %d failed, exit code %d",
        len(document.tests),
        len(document.failed),
        exit_code,
    )
    return exit_code


async def console(config: RunConfig) -> int:
    """Hand the VM console to the user and return its exit status."""
    engine = create_engine(config)
    try:
        return await engine.allocate_console(config)
    finally:
        await engine.cleanup()


def print_command_line(config: RunConfig, stream: TextIO | None = None) -> int:
    """Print the VM command line without running it."""
    engine = create_engine(config)
    print(engine.build_command_line(config), file=stream or sys.stdout)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Apply and test configuration scenarios inside a VM"
    )
    parser.add_argument(
        "-i", "--image", type=Path, help="Disk image the VM boots from"
    )
    parser.add_argument(
        "-c", "--config", type=Path, help="Harness configuration document (JSON)"
    )
    parser.add_argument(
        "-s",
        "--scenario",
        action="append",
        dest="scenarios",
        help="Scenario to run, repeatable or comma-separated (default: all)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format printed to stdout",
    )
    parser.add_argument(
        "-o", "--output", type=Path, help="Also write JSON results to this file"
    )
    parser.add_argument(
        "--no-vm",
        action="store_true",
        help="Do not start or stop the VM (debugging)",
    )
    parser.add_argument("--engine", default="shell", help="Session engine key")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--command-line",
        action="store_true",
        help="Print the VM command line and exit",
    )
    mode.add_argument(
        "--console",
        action="store_true",
        help="Start the VM and attach to its console",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_run_config(
            args.image,
            args.config,
            scenarios=parse_scenarios(args.scenarios),
            output_format=args.format,
            output_path=args.output,
            skip_vm=args.no_vm,
            engine=args.engine,
        )
        if args.command_line:
            exit_code = print_command_line(config)
        elif args.console:
            exit_code = asyncio.run(console(config))
        else:
            exit_code = asyncio.run(run(config))
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)
        exit_code = CONFIGURATION_ERROR
    except SessionFault as exc:
        log.error("Run aborted by session failure: %s", exc)
        exit_code = SESSION_FAULT

    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
