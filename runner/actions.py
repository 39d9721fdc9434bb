# runner/actions.py
import asyncio
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence
from playwright.async_api import Locator, Page
from .errors import TaskError
from .logger import log
from .paths import artifact_path

DEFAULT_LOCATE_TIMEOUT = 2000  # ms
DEFAULT_LOAD_STATE = "networkidle"

class PageActions:
    """
    Wraps a Playwright Page with the actions the demo tasks use,
    each logged as a start/success/failure event pair.
    Failures are re-raised as TaskError.
    """

    def __init__(self, page: Page, task_name: Optional[str] = None, output_dir: Optional[str] = None):
        self.page = page
        self.task_name = task_name or "task"
        self.output_dir = output_dir

    # --------------------------
    # Helpers & logging
    # --------------------------
    async def _perform(self, name: str, payload: Dict[str, Any], fn: Callable[[], Awaitable[Any]]) -> Any:
        aid = uuid.uuid4().hex
        log("INFO", "action_start", f"Action {name} start", task=self.task_name, action_id=aid, **payload)
        start = time.time()
        try:
            result = await fn()
        except Exception as e:
            log("ERROR", "action_failed", f"Action {name} failed", task=self.task_name, action_id=aid, error=str(e), **payload)
            raise TaskError(f"{name} failed: {e}") from e
        log("INFO", "action_success", f"Action {name} success", task=self.task_name, action_id=aid,
            duration_ms=int((time.time() - start) * 1000), **payload)
        return result

    def path_for(self, filename: str) -> str:
        return artifact_path(filename, self.output_dir)

    # --------------------------
    # Action primitives
    # --------------------------
    async def navigate(self, url: str, wait_until: str = DEFAULT_LOAD_STATE) -> None:
        async def _go():
            await self.page.goto(url)
            await self.page.wait_for_load_state(wait_until)
        await self._perform("navigate", {"url": url}, _go)

    async def wait_for_load(self, state: str = DEFAULT_LOAD_STATE) -> None:
        await self._perform("wait_for_load", {"state": state}, lambda: self.page.wait_for_load_state(state))

    async def title(self) -> str:
        title = await self._perform("title", {}, self.page.title)
        log("INFO", "page_title", f"Page title: {title}", task=self.task_name)
        return title

    async def click(self, locator: Locator, description: str = "element") -> None:
        await self._perform("click", {"target": description}, locator.click)

    async def fill(self, locator: Locator, value: str, description: str = "field") -> None:
        await self._perform("fill", {"target": description, "text_length": len(value)}, lambda: locator.fill(value))

    async def check(self, locator: Locator, description: str = "checkbox") -> None:
        await self._perform("check", {"target": description}, locator.check)

    async def select(self, selector: str, value: str) -> None:
        await self._perform("select", {"selector": selector, "value": value},
                            lambda: self.page.select_option(selector, value))

    async def text_of(self, locator: Locator, description: str = "element") -> str:
        text = await self._perform("text_content", {"target": description}, locator.text_content)
        return (text or "").strip()

    async def screenshot(self, filename: str) -> str:
        path = self.path_for(filename)
        await self._perform("screenshot", {"path": path}, lambda: self.page.screenshot(path=path))
        log("INFO", "artifact_saved", f"Screenshot saved to {filename}", task=self.task_name, path=path)
        return path

    async def save_pdf(self, filename: str) -> str:
        # Playwright only renders PDFs from headless Chromium
        path = self.path_for(filename)
        await self._perform("pdf", {"path": path}, lambda: self.page.pdf(path=path))
        log("INFO", "artifact_saved", f"PDF saved to {filename}", task=self.task_name, path=path)
        return path

    async def first_available(self, candidates: Sequence[Locator], timeout_ms: int = DEFAULT_LOCATE_TIMEOUT) -> Optional[Locator]:
        """
        Race the candidates and return the first one that becomes attached
        within ``timeout_ms``, or None when none does.
        """
        async def _attached(locator: Locator) -> Locator:
            await locator.wait_for(timeout=timeout_ms)
            return locator

        pending = [asyncio.ensure_future(_attached(c)) for c in candidates]
        try:
            for next_done in asyncio.as_completed(pending):
                try:
                    return await next_done
                except Exception as e:
                    log("DEBUG", "locator_miss", "Candidate locator not found", task=self.task_name, error=str(e))
            return None
        finally:
            for fut in pending:
                fut.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
