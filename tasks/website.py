"""Search the web for Playwright MCP and capture the first matching result."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from playwright.async_api import Locator, Page

from runner.actions import PageActions
from runner.logger import log

SEARCH_URL = "https://www.google.com"
SEARCH_QUERY = "Playwright MCP GitHub"
RESULT_PATTERN = re.compile(r"playwright", re.IGNORECASE)


def search_input_candidates(page: Page) -> List[Locator]:
    # Search engines label their input differently; try the common shapes
    return [
        page.get_by_role("combobox", name="Search").first,
        page.get_by_role("searchbox").first,
        page.locator("input[type='text']").first,
        page.locator("input[name='q']").first,
        page.locator("input[aria-label*='Search']").first,
    ]


async def website_demo(page: Page) -> Dict[str, Any]:
    actions = PageActions(page, "website")
    result: Dict[str, Any] = {"query": SEARCH_QUERY, "artifacts": []}

    await actions.navigate(SEARCH_URL)
    result["title"] = await actions.title()
    result["artifacts"].append(await actions.screenshot("search-page.png"))

    search_input = await actions.first_available(search_input_candidates(page))
    if search_input is None:
        log("WARN", "search_input_missing", "Search input not found", task=actions.task_name)
        return result

    await actions.click(search_input, "search input")
    await actions.fill(search_input, SEARCH_QUERY, "search input")
    await search_input.press("Enter")
    await actions.wait_for_load()
    result["artifacts"].append(await actions.screenshot("search-results.png"))

    matches = await page.get_by_role("link").filter(has_text=RESULT_PATTERN).all()
    if not matches:
        log("WARN", "search_result_missing", "No suitable search result found", task=actions.task_name)
        return result

    await actions.click(matches[0], "first matching result")
    await actions.wait_for_load()
    result["destination_title"] = await actions.title()
    result["artifacts"].append(await actions.screenshot("destination-page.png"))
    result["artifacts"].append(await actions.save_pdf("page.pdf"))
    return result
