"""Interactive shell session used to run scenario commands."""

import asyncio
import codecs
import logging
import uuid
from collections.abc import Sequence

from scenario_harness.errors import SessionExitedError

log = logging.getLogger(__name__)

FLUSH_TIMEOUT = 0.2
READ_CHUNK = 65536
MARKER_PREFIX = "__harness_done_"


class ShellSession:
    """A long-lived shell process fed commands over its stdin.

    Each command is followed by a marker line carrying its exit status, so
    the session can tell where one command's output ends. Output is kept as
    a bounded tail for diagnostics.
    """

    def __init__(self, process: asyncio.subprocess.Process, output_tail: int) -> None:
        self._process = process
        self._output_tail = output_tail
        self._output = ""
        self._pending = b""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @classmethod
    async def open(cls, command: Sequence[str], output_tail: int) -> "ShellSession":
        """Start the session process."""
        log.info("Opening session: %s", " ".join(command))
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        return cls(process, output_tail)

    @property
    def output(self) -> str:
        """Tail of everything the session printed."""
        return self._output

    async def execute(self, command: str) -> int:
        """Run a command in the session and return its exit status.

        Output is read in chunks, so commands may print lines of any length.

        Raises:
            SessionExitedError: If the session ends before the command does
            OSError: If writing to the session fails

        """
        assert self._process.stdin is not None
        assert self._process.stdout is not None

        token = uuid.uuid4().hex
        marker = f"{MARKER_PREFIX}{token}__".encode()
        script = (
            f"( {command}\n) </dev/null\n"
            f"printf '{MARKER_PREFIX}%s__ %d\\n' {token} $?\n"
        )
        log.debug("Session command: %s", command)

        self._process.stdin.write(script.encode())
        await self._process.stdin.drain()

        while (status := self._take_status(marker)) is None:
            chunk = await self._process.stdout.read(READ_CHUNK)
            if not chunk:
                self._emit(self._pending)
                self._pending = b""
                exit_status = await self._process.wait()
                raise SessionExitedError(
                    f"Session exited with status {exit_status} while running: {command}"
                )
            self._pending += chunk
        return status

    async def flush(self) -> None:
        """Collect output the session printed but nobody read yet."""
        assert self._process.stdout is not None
        self._emit(self._pending)
        self._pending = b""
        try:
            data = await asyncio.wait_for(
                self._process.stdout.read(READ_CHUNK), FLUSH_TIMEOUT
            )
        except TimeoutError:
            return
        self._emit(data)

    async def close(self) -> None:
        """Terminate the session process."""
        if self._process.returncode is None:
            try:
                self._process.terminate()
            except ProcessLookupError:
                pass
        await self._process.wait()

    def _take_status(self, marker: bytes) -> int | None:
        """Consume pending output up to the marker line, if it arrived."""
        index = self._pending.find(marker)
        if index == -1:
            # The end of the buffer may hold the start of the marker.
            cut = max(0, len(self._pending) - len(marker) + 1)
            self._emit(self._pending[:cut])
            self._pending = self._pending[cut:]
            return None

        self._emit(self._pending[:index])
        self._pending = self._pending[index:]
        end = self._pending.find(b"\n")
        if end == -1:
            return None

        status = int(self._pending[len(marker) : end].split()[0])
        self._pending = self._pending[end + 1 :]
        return status

    def _emit(self, data: bytes) -> None:
        text = self._decoder.decode(data)
        self._output = (self._output + text)[-self._output_tail :]
