"""Error vocabulary of the harness."""

from typing import Literal

FaultKind = Literal["session-exited", "io-fault"]


class HarnessError(Exception):
    """Base class for errors raised by the harness."""


class ConfigurationError(HarnessError):
    """Raised when the run configuration is unusable.

    Always raised before any scenario is executed.
    """


class SessionExitedError(Exception):
    """Raised by a session engine when the interactive session exits."""


class SessionFault(HarnessError):
    """Infrastructure fault on the interactive session.

    Carries the last captured session output so the operator can see what
    the guest printed before the session died. A fault aborts the run; it is
    never counted as a scenario failure.
    """

    def __init__(self, kind: FaultKind, message: str, last_output: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind: FaultKind = kind
        self.message = message
        self.last_output = last_output
