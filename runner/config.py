# runner/config.py
import os
import shlex
from typing import Optional, List, Mapping, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator
from .profile import BrowserProfile

DEFAULT_HELPER_COMMAND = "npx @playwright/mcp"
DEFAULT_WARMUP_DELAY = 5.0
DEFAULT_LINGER_DELAY = 5.0
DEFAULT_READY_TIMEOUT = 30.0
DEFAULT_TERMINATE_GRACE = 5.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_float(env: Mapping[str, str], key: str) -> Optional[float]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


def _env_int(env: Mapping[str, str], key: str) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


class RunnerOptions(BaseModel):
    """
    Settings for one SessionRunner invocation.

    ``warmup_delay`` is the fixed wait after spawning the helper. When
    ``helper_ready_port`` is set the runner polls that port instead, failing
    setup after ``helper_ready_timeout`` seconds.
    """
    model_config = ConfigDict(extra='ignore')

    headless: bool = False
    warmup_delay: float = Field(default=DEFAULT_WARMUP_DELAY, ge=0)
    linger_delay: float = Field(default=DEFAULT_LINGER_DELAY, ge=0)
    task_timeout: Optional[float] = Field(default=None, gt=0)

    helper_command: List[str] = Field(default_factory=lambda: shlex.split(DEFAULT_HELPER_COMMAND))
    helper_ready_host: str = "127.0.0.1"
    helper_ready_port: Optional[int] = None
    helper_ready_timeout: float = Field(default=DEFAULT_READY_TIMEOUT, gt=0)
    terminate_grace: float = Field(default=DEFAULT_TERMINATE_GRACE, ge=0)

    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    profile: BrowserProfile = Field(default_factory=BrowserProfile)

    @field_validator("helper_command", mode="before")
    @classmethod
    def _split_command(cls, value):
        if isinstance(value, str):
            value = shlex.split(value)
        if not value:
            raise ValueError("helper_command must not be empty")
        return value

    def browser_profile(self) -> BrowserProfile:
        """Profile with the runner's headless flag applied."""
        return self.profile.model_copy(update={"headless": self.headless})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "RunnerOptions":
        env = os.environ if environ is None else environ
        values = {
            "headless": env.get("RUNNER_HEADLESS", "false").strip().lower() in _TRUTHY,
            "warmup_delay": _env_float(env, "RUNNER_WARMUP_DELAY"),
            "linger_delay": _env_float(env, "RUNNER_LINGER_DELAY"),
            "task_timeout": _env_float(env, "RUNNER_TASK_TIMEOUT"),
            "helper_command": env.get("RUNNER_HELPER_COMMAND"),
            "helper_ready_host": env.get("RUNNER_HELPER_READY_HOST"),
            "helper_ready_port": _env_int(env, "RUNNER_HELPER_READY_PORT"),
            "helper_ready_timeout": _env_float(env, "RUNNER_HELPER_READY_TIMEOUT"),
            "terminate_grace": _env_float(env, "RUNNER_TERMINATE_GRACE"),
            "browser_type": env.get("RUNNER_BROWSER"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        # Drop unset values so field defaults apply
        return cls(**{k: v for k, v in values.items() if v is not None})
