"""Open example.com and follow its first link."""

from __future__ import annotations

from typing import Dict, Optional

from playwright.async_api import Page

from runner.actions import PageActions
from runner.logger import log

EXAMPLE_URL = "https://example.com"


async def follow_first_link(actions: PageActions) -> Dict[str, Optional[str]]:
    """Navigate to example.com, click the first link and report both titles."""
    await actions.navigate(EXAMPLE_URL)
    title = await actions.title()

    link = actions.page.get_by_role("link").first
    link_text = None
    new_title = None
    if await link.count():
        link_text = await actions.text_of(link, "first link")
        log("INFO", "link_found", f"Found link: {link_text}", task=actions.task_name)
        await actions.click(link, "first link")
        await actions.wait_for_load()
        new_title = await actions.title()
    else:
        log("WARN", "link_missing", "No link found on the page", task=actions.task_name)

    return {"title": title, "link_text": link_text, "new_title": new_title}


async def simple_demo(page: Page) -> Dict[str, Optional[str]]:
    return await follow_first_link(PageActions(page, "simple"))
