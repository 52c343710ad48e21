"""Shell execution of probe commands.

A probe is an arbitrary shell command line; its exit status is the health
signal and its combined stdout/stderr is the diagnostic text. Execution sits
behind the `ProbeRunner` protocol so the health handler can be exercised
with a fake runner.
"""

import asyncio
import os
import signal
from typing import Protocol

from app.shellprobe.core.logging_config import get_logger
from app.shellprobe.core.types import ProbeResult

logger = get_logger(__name__)


class ProbeRunner(Protocol):
    """Anything that can turn a command line into a `ProbeResult`."""

    async def run(self, command: str) -> ProbeResult:
        ...


def describe_exit(returncode: int) -> str:
    """Format a non-zero return code the way process errors are usually shown.

    Args:
        returncode: Return code reported by asyncio; negative for signals.

    Returns:
        ``exit status <code>`` or ``signal: <number>``.
    """
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit status {returncode}"


class ShellProbeRunner:
    """Run probe commands through ``<shell> -c``.

    Each command runs in its own session so the whole process tree can be
    killed if the awaiting request is cancelled. No retries and no timeout
    are applied here; the request deadline is the only bound.

    Attributes:
        shell: Path of the interpreter invoked with ``-c``.
    """

    def __init__(self, shell: str = "/bin/sh") -> None:
        self.shell = shell

    async def run(self, command: str) -> ProbeResult:
        """Execute `command` and classify the outcome.

        Args:
            command: Shell command line.

        Returns:
            ProbeResult: Success with the trimmed output on exit 0, failure
            with an error description otherwise.

        Raises:
            asyncio.CancelledError: Re-raised after the process group has
                been killed and reaped.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.shell,
                "-c",
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("probe_launch_failed", command=command, error=str(e))
            return ProbeResult.failure(command, "", f"failed to start: {e}")

        try:
            raw, _ = await process.communicate()
        except asyncio.CancelledError:
            logger.warning("probe_cancelled", command=command, pid=process.pid)
            await self._kill(process)
            raise

        output = raw.decode("utf-8", errors="replace").strip()

        if process.returncode == 0:
            logger.debug("probe_succeeded", command=command)
            return ProbeResult.success(command, output)

        error = describe_exit(process.returncode)
        if output:
            error = f"{error}: {output}"
        logger.warning(
            "probe_failed",
            command=command,
            returncode=process.returncode,
            output=output,
        )
        return ProbeResult.failure(command, output, error)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        # The child leads its own process group (start_new_session=True).
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            # Already exited and reaped.
            return
        await process.wait()
