"""Simple demo plus a screenshot of the page it lands on."""

from __future__ import annotations

from typing import Dict, Optional

from playwright.async_api import Page

from runner.actions import PageActions

from .simple import follow_first_link

SCREENSHOT_NAME = "example-page.png"


async def basic_demo(page: Page) -> Dict[str, Optional[str]]:
    actions = PageActions(page, "basic")
    result = await follow_first_link(actions)
    result["screenshot"] = await actions.screenshot(SCREENSHOT_NAME)
    return result
