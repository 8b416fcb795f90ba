"""Run the external manifest dump command under a concurrency limit and timeout."""

import asyncio
import contextlib
import signal
from collections.abc import Sequence
from pathlib import Path

from errors import BadDump, DecodingError, DumpTimeout
from logging_setup import get_logger
from models import Package

DEFAULT_DUMP_COMMAND = ("swift", "package", "dump-package")

# A process terminated with SIGTERM exits as 128+15 -> 15 through some shells,
# while asyncio reports the signal as a negative return code.
DEFAULT_TIMEOUT_EXIT_CODES = frozenset({int(signal.SIGTERM), -int(signal.SIGTERM)})


class ManifestDumpRunner:
    """Turns a workspace holding a manifest into a decoded Package.

    Args:
        limiter: Semaphore shared by every validation in the batch; one slot
            is held per running dump process
        command: Command run with the workspace as working directory
        timeout: Seconds before the process is terminated
        timeout_exit_codes: Exit codes treated as "terminated by timeout"
        kill_grace: Seconds to wait after terminate() before kill()
    """

    def __init__(
        self,
        limiter: asyncio.Semaphore,
        command: Sequence[str] = DEFAULT_DUMP_COMMAND,
        timeout: float = 10.0,
        timeout_exit_codes: frozenset[int] = DEFAULT_TIMEOUT_EXIT_CODES,
        kill_grace: float = 1.0,
    ):
        self.limiter = limiter
        self.command = list(command)
        self.timeout = timeout
        self.timeout_exit_codes = timeout_exit_codes
        self.kill_grace = kill_grace

    async def dump(self, workspace: Path) -> Package:
        """Run the dump command in workspace and decode its output.

        Raises:
            DumpTimeout: the process outlived the timeout or was killed by it
            BadDump: non-zero exit, or the command could not be started
            DecodingError: exit 0 but stdout is not a valid package dump
        """
        logger = get_logger()

        async with self.limiter:
            logger.debug("Dumping package in %s", workspace)
            try:
                process = await self._spawn(workspace)
            except OSError as e:
                raise BadDump(f"Unable to run {self.command[0]}: {e}") from e

            try:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.debug("Dump timed out after %ss in %s", self.timeout, workspace)
                raise DumpTimeout() from None
            finally:
                await self._terminate(process)

        return self._decode(process.returncode, stdout, stderr)

    async def _spawn(self, workspace: Path) -> asyncio.subprocess.Process:
        return await asyncio.create_subprocess_exec(
            *self.command,
            cwd=str(workspace),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Stop a process that is still running, waiting at most kill_grace."""
        if process.returncode is not None:
            return

        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=self.kill_grace)
        except asyncio.TimeoutError:
            get_logger().warning("Dump process %s ignored SIGTERM, killing", process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(process.wait(), timeout=self.kill_grace)

    def _decode(self, returncode: int | None, stdout: bytes, stderr: bytes) -> Package:
        if returncode != 0:
            if returncode in self.timeout_exit_codes:
                raise DumpTimeout()
            raise BadDump(stderr.decode("utf-8", errors="replace") if stderr else None)

        try:
            return Package.from_json(stdout)
        except (ValueError, KeyError, TypeError) as e:
            raise DecodingError(e) from e
