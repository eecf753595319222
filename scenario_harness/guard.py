"""Translate session failures into harness faults."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from scenario_harness.engines.base import SessionEngine
from scenario_harness.errors import FaultKind, SessionExitedError, SessionFault

log = logging.getLogger(__name__)

R = TypeVar("R")


async def run_guarded(
    engine: SessionEngine,
    operation: Callable[[], Awaitable[R]],
) -> R:
    """Run an operation against the engine, translating session failures.

    An unexpected exit of the interactive session or an I/O fault on its
    channel is logged together with the last session output and re-raised
    as ``SessionFault``. Everything else propagates unchanged.

    Args:
        engine: Engine the operation talks to
        operation: Zero-argument callable returning an awaitable

    Returns:
        The operation's result

    Raises:
        SessionFault: If the session exited or its channel failed

    """
    kind: FaultKind
    try:
        return await operation()
    except SessionExitedError as exc:
        kind = "session-exited"
        error: Exception = exc
    except OSError as exc:
        kind = "io-fault"
        error = exc

    try:
        await engine.flush()
    except Exception as flush_error:  # noqa: BLE001
        log.debug("Ignoring error while flushing session output: %s", flush_error)

    last_output = engine.last_output
    log.error("Session failure (%s): %s", kind, error)
    log.error("Last session output:\n%s", last_output)

    raise SessionFault(kind, str(error), last_output) from error
