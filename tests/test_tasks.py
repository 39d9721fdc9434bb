import asyncio
import json

import pytest

from runner.actions import PageActions
from runner.errors import TaskError
from tasks import TASKS
from tasks.form import FORM_HTML, form_demo, remove_demo_form, write_demo_form
from tasks.hackernews import extract_root_comments, preview, save_results
from tasks.website import website_demo
from tasks.simple import follow_first_link


class DummyLink:
    def __init__(self, present=True):
        self.present = present
        self.clicked = False

    @property
    def first(self):
        return self

    async def count(self):
        return 1 if self.present else 0

    async def text_content(self):
        return "More information..."

    async def click(self):
        self.clicked = True


class DummyPage:
    def __init__(self, link):
        self.link = link
        self.titles = ["Example Domain", "IANA-managed Reserved Domains"]
        self.visited = []

    def get_by_role(self, role, name=None):
        assert role == "link"
        return self.link

    async def goto(self, url):
        self.visited.append(url)

    async def wait_for_load_state(self, state):
        pass

    async def title(self):
        return self.titles.pop(0) if len(self.titles) > 1 else self.titles[0]


def test_registry_lists_every_demo():
    assert sorted(TASKS) == ["basic", "form", "hackernews", "simple", "website"]


def test_follow_first_link_reports_both_titles():
    link = DummyLink()
    page = DummyPage(link)

    result = asyncio.run(follow_first_link(PageActions(page, "simple")))

    assert page.visited == ["https://example.com"]
    assert link.clicked
    assert result == {
        "title": "Example Domain",
        "link_text": "More information...",
        "new_title": "IANA-managed Reserved Domains",
    }


def test_follow_first_link_without_links():
    result = asyncio.run(follow_first_link(PageActions(DummyPage(DummyLink(present=False)), "simple")))
    assert result["link_text"] is None
    assert result["new_title"] is None


def test_demo_form_written_and_removed(tmp_path):
    path = write_demo_form(str(tmp_path / "demo-form.html"))
    with open(path, encoding="utf-8") as handle:
        assert handle.read() == FORM_HTML
    assert "Thank you for your submission!" in FORM_HTML

    assert remove_demo_form(path) is True
    assert not (tmp_path / "demo-form.html").exists()


def test_remove_missing_form_is_logged_not_raised(tmp_path, log_events):
    assert remove_demo_form(str(tmp_path / "gone.html")) is False
    assert any(e["event"] == "form_cleanup_err" for e in log_events())


def test_preview_truncates_long_comments():
    assert preview("short") == "short"
    assert preview("x" * 150) == "x" * 100 + "..."


def test_save_results_writes_json(tmp_path):
    results = [{
        "articleTitle": "Show HN: Something",
        "url": "https://news.ycombinator.com/item?id=1",
        "comments": [{"author": "pg", "text": "Nice, ship it"}],
    }]
    path = save_results(results, str(tmp_path / "hackernews-comments.json"))
    with open(path, encoding="utf-8") as handle:
        assert json.load(handle) == results


class DummyNode:
    """Locator stand-in: ``.first`` is itself, actions are recorded on the page."""

    def __init__(self, page, name, text=None, error=None, visible=True):
        self.page = page
        self.name = name
        self.text = text
        self.error = error
        self.visible = visible

    @property
    def first(self):
        return self

    async def wait_for(self, timeout=None):
        raise TimeoutError(f"{self.name} not attached")

    async def text_content(self):
        if self.error:
            raise self.error
        return self.text

    async def fill(self, value):
        self.page.actions.append(("fill", self.name, value))

    async def check(self):
        self.page.actions.append(("check", self.name))

    async def click(self):
        self.page.actions.append(("click", self.name))

    async def is_visible(self):
        return self.visible


class DummyFormPage:
    def __init__(self, fail_goto=False):
        self.fail_goto = fail_goto
        self.visited = []
        self.actions = []
        self.shots = []

    async def goto(self, url):
        if self.fail_goto:
            raise RuntimeError("net::ERR_FILE_NOT_FOUND")
        self.visited.append(url)

    async def wait_for_load_state(self, state):
        pass

    async def wait_for_timeout(self, ms):
        pass

    async def title(self):
        return "Playwright MCP Demo Form"

    async def screenshot(self, path):
        self.shots.append(path)

    async def select_option(self, selector, value):
        self.actions.append(("select", selector, value))

    def get_by_label(self, label):
        return DummyNode(self, label)

    def get_by_role(self, role, name=None):
        return DummyNode(self, f"{role}:{name}")

    def get_by_text(self, text):
        return DummyNode(self, text)


def test_form_demo_fills_submits_and_cleans_up(tmp_path, monkeypatch):
    monkeypatch.setenv("RUNNER_OUTPUT_DIR", str(tmp_path))
    page = DummyFormPage()

    result = asyncio.run(form_demo(page))

    assert result == {"title": "Playwright MCP Demo Form", "submitted": True}
    assert page.visited[0].startswith("file://") and page.visited[0].endswith("demo-form.html")
    assert page.actions == [
        ("fill", "Full Name:", "Jane Doe"),
        ("fill", "Email Address:", "jane.doe@example.com"),
        ("select", "select#country", "ca"),
        ("check", "I agree to the terms and conditions"),
        ("click", "button:Submit Form"),
    ]
    assert page.shots == [str(tmp_path / "filled-form.png"), str(tmp_path / "form-submitted.png")]
    assert not (tmp_path / "demo-form.html").exists()


def test_form_demo_removes_form_when_task_fails(tmp_path, monkeypatch):
    monkeypatch.setenv("RUNNER_OUTPUT_DIR", str(tmp_path))

    with pytest.raises(TaskError):
        asyncio.run(form_demo(DummyFormPage(fail_goto=True)))

    assert not (tmp_path / "demo-form.html").exists()


class DummyComment:
    def __init__(self, page, author, text, broken=False):
        self.page = page
        self.author = author
        self.text = text
        self.broken = broken

    def locator(self, selector):
        if selector == ".commtext":
            error = RuntimeError("detached") if self.broken else None
            return DummyNode(self.page, selector, text=f"  {self.text}  ", error=error)
        return DummyNode(self.page, selector, text=self.author)


class DummyThreadPage:
    def __init__(self):
        self.actions = []
        self.comments = [
            DummyComment(self, "alice", "First!"),
            DummyComment(self, "bob", "flagged", broken=True),
            DummyComment(self, "carol", "Great write-up"),
        ]

    def locator(self, selector):
        assert selector == ".comtr:has(.ind[indent='0'])"
        page = self

        class _All:
            async def all(self):
                return page.comments

        return _All()


def test_extract_root_comments_skips_broken_entries(log_events):
    comments = asyncio.run(extract_root_comments(PageActions(DummyThreadPage(), "hackernews")))

    assert comments == [
        {"author": "alice", "text": "First!"},
        {"author": "carol", "text": "Great write-up"},
    ]
    skipped = [e for e in log_events() if e["event"] == "comment_extract_err"]
    assert len(skipped) == 1
    assert skipped[0]["message"] == "Error extracting comment 2"


def test_extract_root_comments_respects_limit():
    comments = asyncio.run(extract_root_comments(PageActions(DummyThreadPage(), "hackernews"), limit=1))
    assert [c["author"] for c in comments] == ["alice"]


class DummySearchPage(DummyFormPage):
    async def title(self):
        return "Google"

    def locator(self, selector):
        return DummyNode(self, selector)


def test_website_demo_stops_when_no_search_input(tmp_path, monkeypatch):
    monkeypatch.setenv("RUNNER_OUTPUT_DIR", str(tmp_path))
    page = DummySearchPage()

    result = asyncio.run(website_demo(page))

    assert page.visited == ["https://www.google.com"]
    assert result["title"] == "Google"
    assert result["artifacts"] == [str(tmp_path / "search-page.png")]
    assert "destination_title" not in result
    assert page.actions == []
