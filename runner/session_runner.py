# runner/session_runner.py
import asyncio
import time
import traceback
from typing import Any, Awaitable, Callable, List, Optional, Protocol
from . import metrics
from .config import RunnerOptions
from .helper_process import SubprocessHelperLauncher, wait_until_ready
from .logger import log
from .session import PlaywrightSessionFactory
from .views import RunnerState, TaskResult, TaskStatus

Task = Callable[[Any], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[None]]


class HelperHandle(Protocol):
    @property
    def alive(self) -> bool: ...

    async def terminate(self) -> Optional[str]: ...


class HelperLauncher(Protocol):
    async def start(self) -> HelperHandle: ...


class Session(Protocol):
    page: Any

    async def close(self) -> None: ...


class SessionFactory(Protocol):
    async def open(self) -> Session: ...


class SessionRunner:
    """
    Runs one task inside a helper-process + browser-session pair.

    Lifecycle: start helper -> warm up -> open session -> run task -> linger
    -> close session -> terminate helper. The two teardown steps run on every
    exit path, session first, each exactly once, and a failure in one does
    not skip the other.

    Task and setup failures are returned in the TaskResult, never raised.
    Cancellation tears down and then propagates.
    """

    def __init__(
        self,
        options: Optional[RunnerOptions] = None,
        launcher: Optional[HelperLauncher] = None,
        session_factory: Optional[SessionFactory] = None,
        sleep: Optional[Sleep] = None,
    ):
        self.options = options or RunnerOptions()
        self.launcher = launcher or SubprocessHelperLauncher(
            self.options.helper_command, terminate_grace=self.options.terminate_grace
        )
        self.session_factory = session_factory or PlaywrightSessionFactory(
            self.options.browser_profile(), self.options.browser_type
        )
        self._sleep = sleep or asyncio.sleep
        self.state = RunnerState.IDLE
        self._states: List[RunnerState] = []
        self._running = False

    # -------------------------
    # Public API
    # -------------------------
    async def run(self, task: Task, name: Optional[str] = None) -> TaskResult:
        if self._running:
            raise RuntimeError("SessionRunner is already running a task")
        self._running = True
        name = name or getattr(task, "__name__", "task")
        self._states = []
        self._enter(RunnerState.IDLE)

        helper: Optional[HelperHandle] = None
        session: Optional[Session] = None
        status = TaskStatus.SETUP_FAILED
        value: Any = None
        error: Optional[BaseException] = None
        teardown_errors: List[str] = []
        start = time.monotonic()
        log("INFO", "run_start", f"Starting {name}", task=name)

        try:
            try:
                self._enter(RunnerState.HELPER_STARTING)
                helper = await self.launcher.start()
                self._enter(RunnerState.WARMING_UP)
                await self._warm_up()
                self._enter(RunnerState.SESSION_OPEN)
                log("INFO", "session_opening", "Launching browser with Playwright")
                session = await self.session_factory.open()
            except Exception as e:
                error = e
                log("ERROR", "setup_failed", "Setup failed; task not started", task=name,
                    state=self.state.value, error=str(e), tb=traceback.format_exc())
            else:
                self._enter(RunnerState.TASK_RUNNING)
                status, value, error = await self._execute(task, session.page, name)
                self._enter(RunnerState.LINGERING)
                log("INFO", "run_linger", f"Task finished. Closing browser in {self.options.linger_delay:g} seconds",
                    task=name, status=status.value)
                await self._sleep(self.options.linger_delay)
        except asyncio.CancelledError:
            status = TaskStatus.CANCELLED
            log("WARN", "run_cancelled", "Run cancelled; tearing down", task=name, state=self.state.value)
            raise
        except BaseException as e:
            status = TaskStatus.CANCELLED
            error = e
            log("WARN", "run_interrupted", "Run interrupted; tearing down", task=name,
                state=self.state.value, error=type(e).__name__)
            raise
        finally:
            self._enter(RunnerState.TEARING_DOWN)
            try:
                teardown_errors = await self._teardown(session, helper)
            finally:
                self._enter(RunnerState.DONE)
                self._running = False
                metrics.RUNS_TOTAL.labels(status.value).inc()

        result = TaskResult(
            status=status,
            value=value,
            error=error,
            teardown_errors=teardown_errors,
            states=list(self._states),
            duration=time.monotonic() - start,
        )
        log("INFO", "run_finished", f"{name} finished", task=name, **result.to_dict())
        return result

    # -------------------------
    # Internal helpers
    # -------------------------
    def _enter(self, state: RunnerState):
        self.state = state
        self._states.append(state)
        log("DEBUG", "runner_state", state.value)

    async def _warm_up(self):
        if self.options.helper_ready_port is not None:
            await wait_until_ready(
                self.options.helper_ready_host,
                self.options.helper_ready_port,
                self.options.helper_ready_timeout,
            )
            return
        log("INFO", "helper_warmup", f"Waiting {self.options.warmup_delay:g} seconds for the helper to initialize")
        await self._sleep(self.options.warmup_delay)

    async def _execute(self, task: Task, page: Any, name: str):
        timeout = self.options.task_timeout
        try:
            if timeout is not None:
                value = await asyncio.wait_for(task(page), timeout=timeout)
            else:
                value = await task(page)
        except asyncio.TimeoutError as e:
            if timeout is None:
                log("ERROR", "task_failed", "Error during task", task=name, error=str(e), tb=traceback.format_exc())
                return TaskStatus.FAILED, None, e
            log("ERROR", "task_timeout", f"Task exceeded {timeout:g}s", task=name)
            return TaskStatus.TIMED_OUT, None, e
        except Exception as e:
            log("ERROR", "task_failed", "Error during task", task=name, error=str(e), tb=traceback.format_exc())
            return TaskStatus.FAILED, None, e
        log("INFO", "task_succeeded", "Task completed", task=name)
        return TaskStatus.SUCCEEDED, value, None

    async def _teardown(self, session: Optional[Session], helper: Optional[HelperHandle]) -> List[str]:
        errors: List[str] = []
        if helper is not None:
            log("INFO", "teardown_start", "Tearing down session and helper", helper_alive=helper.alive)
        try:
            if session is not None:
                try:
                    await session.close()
                except Exception as e:
                    log("ERROR", "teardown_session_err", "Failed to close browser session", error=str(e))
                    metrics.TEARDOWN_FAILURES.labels("session").inc()
                    errors.append(f"session: {e}")
        finally:
            # Runs even when a cancellation lands while the session is closing
            if helper is not None:
                try:
                    note = await helper.terminate()
                    if note:
                        errors.append(f"helper: {note}")
                except Exception as e:
                    log("ERROR", "teardown_helper_err", "Failed to terminate helper process", error=str(e))
                    metrics.TEARDOWN_FAILURES.labels("helper").inc()
                    errors.append(f"helper: {e}")
        return errors


async def run(task: Task, options: Optional[RunnerOptions] = None, name: Optional[str] = None, **collaborators) -> TaskResult:
    """Run ``task`` once with a fresh SessionRunner."""
    return await SessionRunner(options, **collaborators).run(task, name=name)
