import traceback
from typing import Optional
from playwright.async_api import async_playwright, Playwright, Browser, BrowserContext, Page
from . import metrics
from .errors import BrowserStartError, TeardownError
from .logger import log
from .profile import BrowserProfile

class BrowserSession:
    """
    One Playwright browser plus a single context and page.
    Owned by the SessionRunner for the duration of one task.
    """

    def __init__(self, profile: Optional[BrowserProfile] = None, browser_type: str = "chromium"):
        self.profile = profile or BrowserProfile()
        self.browser_type = browser_type
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._closed = False

    async def start(self) -> "BrowserSession":
        """Starts Playwright, launches the browser and opens one page."""
        launch_kwargs = self.profile.launch_kwargs(self.browser_type)
        log("INFO", "session_launch", f"Launching {self.browser_type}",
            headless=self.profile.headless, args=launch_kwargs.get("args"))
        try:
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, self.browser_type)
            self.browser = await launcher.launch(**launch_kwargs)
            self.context = await self.browser.new_context(**self.profile.context_kwargs())
            self.page = await self.context.new_page()
        except Exception as e:
            log("ERROR", "session_launch_error", "Failed to launch browser session", error=str(e), tb=traceback.format_exc())
            raise BrowserStartError(str(e)) from e
        metrics.BROWSER_UP.set(1)
        log("INFO", "session_started", "Browser session started", browser=self.browser_type)
        return self

    async def close(self):
        """
        Closes context, browser and the Playwright driver in that order.
        Every step is attempted; failures are collected into one TeardownError.
        Calling close more than once is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        failures = []
        for step, closer in (
            ("context", self.context.close if self.context else None),
            ("browser", self.browser.close if self.browser else None),
            ("playwright", self._playwright.stop if self._playwright else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                log("WARN", "session_close_err", f"Error while closing {step}", error=str(e))
                failures.append(f"{step}: {e}")
        self.page = None
        self.context = None
        self.browser = None
        self._playwright = None
        metrics.BROWSER_UP.set(0)
        log("INFO", "session_closed", "Browser session closed", failures=len(failures))
        if failures:
            raise TeardownError("; ".join(failures))


class PlaywrightSessionFactory:
    """Default SessionFactory: opens a real BrowserSession."""

    def __init__(self, profile: Optional[BrowserProfile] = None, browser_type: str = "chromium"):
        self.profile = profile
        self.browser_type = browser_type

    async def open(self) -> BrowserSession:
        session = BrowserSession(self.profile, self.browser_type)
        try:
            return await session.start()
        except BrowserStartError:
            # Release whatever was acquired before the failing step
            try:
                await session.close()
            except TeardownError as e:
                log("WARN", "session_partial_close_err", "Error releasing partially started session", error=str(e))
            raise
