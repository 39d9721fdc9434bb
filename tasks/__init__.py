"""Demo task bodies run inside a SessionRunner."""

from .basic import basic_demo
from .form import form_demo
from .hackernews import hackernews_demo
from .simple import simple_demo
from .website import website_demo

TASKS = {
    "basic": basic_demo,
    "simple": simple_demo,
    "website": website_demo,
    "form": form_demo,
    "hackernews": hackernews_demo,
}

__all__ = [
    "TASKS",
    "basic_demo",
    "form_demo",
    "hackernews_demo",
    "simple_demo",
    "website_demo",
]
