from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class RunnerState(str, Enum):
    IDLE = "idle"
    HELPER_STARTING = "helper_starting"
    WARMING_UP = "warming_up"
    SESSION_OPEN = "session_open"
    TASK_RUNNING = "task_running"
    LINGERING = "lingering"
    TEARING_DOWN = "tearing_down"
    DONE = "done"


class TaskStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    SETUP_FAILED = "setup_failed"
    CANCELLED = "cancelled"


EXIT_CODES = {
    TaskStatus.SUCCEEDED: 0,
    TaskStatus.FAILED: 1,
    TaskStatus.TIMED_OUT: 1,
    TaskStatus.SETUP_FAILED: 2,
    TaskStatus.CANCELLED: 130,
}


@dataclass
class TaskResult:
    """Outcome of a single SessionRunner.run call"""
    status: TaskStatus
    value: Any = None
    error: Optional[BaseException] = field(default=None, repr=False)
    teardown_errors: List[str] = field(default_factory=list)
    states: List[RunnerState] = field(default_factory=list)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is TaskStatus.SUCCEEDED

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.status]

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "ok": self.ok,
            "error": str(self.error) if self.error else None,
            "teardown_errors": list(self.teardown_errors),
            "states": [s.value for s in self.states],
            "duration": round(self.duration, 3),
        }
