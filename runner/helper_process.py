# runner/helper_process.py
import asyncio
from typing import List, Optional, Sequence
from . import metrics
from .errors import HelperStartError, HelperNotReadyError
from .logger import log
from .retry import async_retry

class HelperProcess:
    """
    Handle to the external helper CLI (the Playwright MCP server by default).
    The process inherits the terminal's stdio; nothing is captured.
    """

    def __init__(self, process: asyncio.subprocess.Process, command: Sequence[str], terminate_grace: float = 5.0):
        self._process = process
        self.command = list(command)
        self.terminate_grace = terminate_grace
        self._terminated = False

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def alive(self) -> bool:
        return self._process.returncode is None

    async def terminate(self) -> Optional[str]:
        """
        Stop the helper: SIGTERM, wait ``terminate_grace`` seconds, then SIGKILL.

        Returns a note when the process had already exited, otherwise None.
        Only the first call does anything.
        """
        if self._terminated:
            return None
        self._terminated = True
        metrics.HELPER_UP.set(0)

        if not self.alive:
            note = f"helper already exited with code {self._process.returncode}"
            log("WARN", "helper_already_exited", note, pid=self.pid)
            return note

        log("INFO", "helper_terminate", "Terminating helper process", pid=self.pid)
        try:
            self._process.terminate()
        except ProcessLookupError:
            note = "helper exited before it could be signalled"
            log("WARN", "helper_already_exited", note, pid=self.pid)
            return note

        try:
            await asyncio.wait_for(self._process.wait(), timeout=self.terminate_grace)
        except asyncio.TimeoutError:
            log("WARN", "helper_kill", "Helper ignored SIGTERM; killing", pid=self.pid, grace=self.terminate_grace)
            try:
                self._process.kill()
            except ProcessLookupError:
                pass
            await self._process.wait()
        log("INFO", "helper_terminated", "Helper process stopped", pid=self.pid, returncode=self._process.returncode)
        return None


class SubprocessHelperLauncher:
    """Default HelperLauncher: spawns ``command`` with inherited stdio."""

    def __init__(self, command: Sequence[str], terminate_grace: float = 5.0):
        self.command: List[str] = list(command)
        self.terminate_grace = terminate_grace

    async def start(self) -> HelperProcess:
        log("INFO", "helper_spawn", "Starting helper process", command=self.command)
        try:
            process = await asyncio.create_subprocess_exec(*self.command)
        except OSError as e:
            log("ERROR", "helper_spawn_error", "Failed to spawn helper process", command=self.command, error=str(e))
            raise HelperStartError(f"could not start {self.command[0]!r}: {e}") from e
        metrics.HELPER_UP.set(1)
        log("INFO", "helper_started", "Helper process started in a separate process", pid=process.pid)
        return HelperProcess(process, self.command, terminate_grace=self.terminate_grace)


async def wait_until_ready(host: str, port: int, timeout: float, interval: float = 0.25) -> None:
    """
    Poll ``host:port`` until it accepts a TCP connection.
    Raises HelperNotReadyError once ``timeout`` seconds have passed.
    """
    retries = max(1, int(timeout / interval))

    @async_retry(retries=retries, delay=interval, backoff=1.0, exceptions=(OSError,), jitter=False)
    async def _connect():
        reader, writer = await asyncio.open_connection(host, port)
        writer.close()
        await writer.wait_closed()

    log("INFO", "helper_wait_ready", "Waiting for helper to accept connections", host=host, port=port, timeout=timeout)
    try:
        await asyncio.wait_for(_connect(), timeout=timeout)
    except (OSError, asyncio.TimeoutError) as e:
        raise HelperNotReadyError(f"helper not listening on {host}:{port} after {timeout}s") from e
    log("INFO", "helper_ready", "Helper is accepting connections", host=host, port=port)
