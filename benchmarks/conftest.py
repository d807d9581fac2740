"""Shared fixtures for Whisker benchmarks.

Templates live in an in-memory DictLoader so that results measure parsing
and rendering, not disk access.

Run with: pytest benchmarks/ --benchmark-only
A plain `pytest` run collects them too; add --benchmark-disable to run each once.
"""

from __future__ import annotations

import pytest

from whisker import DictLoader, Environment

from .templates import TEMPLATES


def _items(count: int) -> list[dict[str, object]]:
    return [
        {"name": f"Item <{i}>", "kind": "odd" if i % 2 else "even", "tags": ["a", "b"]}
        for i in range(count)
    ]


@pytest.fixture(scope="session")
def whisker_env() -> Environment:
    return Environment(loader=DictLoader(TEMPLATES), directory="")


@pytest.fixture(scope="session")
def cached_env() -> Environment:
    return Environment(loader=DictLoader(TEMPLATES), directory="", cache_size=64)


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return {"title": "Small", "items": _items(5)}


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return {"title": "Large", "items": _items(1000)}


@pytest.fixture(scope="session")
def page_context() -> dict[str, object]:
    return {
        "heading": "Welcome",
        "section": "Docs",
        "body": "<p>Body text</p>",
        "title": "Listing",
        "items": _items(20),
        "links": [{"url": f"/{n}", "label": n} for n in ("home", "docs", "blog")],
        "year": 2026,
    }
