"""Collect the top root comments of the first Hacker News stories."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from playwright.async_api import Locator, Page

from runner.actions import PageActions
from runner.logger import log

HN_URL = "https://news.ycombinator.com/"
TOP_STORIES = 5
TOP_COMMENTS = 5
RESULTS_FILENAME = "hackernews-comments.json"
PREVIEW_CHARS = 100

CommentRecord = Dict[str, str]
StoryRecord = Dict[str, Any]


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


async def extract_root_comments(actions: PageActions, limit: int = TOP_COMMENTS) -> List[CommentRecord]:
    root_comments = await actions.page.locator(".comtr:has(.ind[indent='0'])").all()
    log("INFO", "comments_found", f"Found {len(root_comments)} root comments", task=actions.task_name)

    comments: List[CommentRecord] = []
    for index, comment in enumerate(root_comments[:limit], start=1):
        try:
            text = await comment.locator(".commtext").first.text_content()
            author = await comment.locator(".hnuser").first.text_content()
        except Exception as e:
            log("WARN", "comment_extract_err", f"Error extracting comment {index}", task=actions.task_name, error=str(e))
            continue
        text = (text or "").strip()
        author = (author or "").strip()
        log("INFO", "comment", f"Comment {index} by {author}: {preview(text)}", task=actions.task_name)
        comments.append({"author": author, "text": text})
    return comments


async def story_title(page: Page, index: int) -> str:
    try:
        title = await page.locator("tr.athing").nth(index).locator(".titleline > a").first.text_content()
    except Exception as e:
        log("WARN", "story_title_err", f"Couldn't get title for article {index + 1}", error=str(e))
        title = None
    return (title or "").strip() or f"Story {index + 1}"


def save_results(results: List[StoryRecord], path: str) -> str:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(results, handle, ensure_ascii=False, indent=2)
    log("INFO", "results_saved", f"Results saved to {path}", stories=len(results))
    return path


async def hackernews_demo(page: Page) -> List[StoryRecord]:
    actions = PageActions(page, "hackernews")
    await actions.navigate(HN_URL)
    await actions.screenshot("hackernews-home.png")

    comment_links: List[Locator] = await page.get_by_role("link", name="comments").all()
    top_links = comment_links[:TOP_STORIES]
    log("INFO", "stories_found", f"Found {len(top_links)} stories with comments to process", task=actions.task_name)

    results: List[StoryRecord] = []
    for index, link in enumerate(top_links):
        title = await story_title(page, index)
        log("INFO", "story", f"Article {index + 1}: {title}", task=actions.task_name,
            link_text=await link.text_content())

        await actions.click(link, f"comments link {index + 1}")
        await actions.wait_for_load()
        await actions.screenshot(f"hackernews-comments-{index + 1}.png")

        results.append({
            "articleTitle": title,
            "url": page.url,
            "comments": await extract_root_comments(actions),
        })

        await actions.navigate(HN_URL)

    save_results(results, actions.path_for(RESULTS_FILENAME))
    return results
