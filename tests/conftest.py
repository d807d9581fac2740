"""Pytest configuration and fixtures for Whisker tests."""

import pytest

from whisker import DictLoader, Environment


@pytest.fixture
def env():
    """Create an Environment with an empty in-memory loader."""
    return Environment(loader=DictLoader({}), directory="")


@pytest.fixture
def layouts():
    """Template sources for inheritance tests (mutable on purpose)."""
    return {
        "layout.html": (
            "<html>"
            "<title>{{*title}}Default{{/title}}</title>"
            "<body>{{*body}}{{/body}}</body>"
            "<footer>{{*footer}}F{{/footer}}</footer>"
            "</html>"
        ),
        "page.html": (
            "{{<layout}}"
            "{{*title}}Home{{/title}}"
            "{{*body}}<p>{{msg}}</p>{{/body}}"
        ),
        "nav.html": "<nav>{{#links}}[{{.}}]{{/links}}</nav>",
    }


@pytest.fixture
def env_with_loader(layouts):
    """Create an Environment whose DictLoader serves the ``layouts`` templates."""
    return Environment(loader=DictLoader(layouts), directory="")


@pytest.fixture
def template_dir(tmp_path):
    """Write a small file-based template tree and return its root."""
    (tmp_path / "pages").mkdir()
    (tmp_path / "layout.html").write_text(
        "<h1>{{*title}}Untitled{{/title}}</h1>\n{{*content}}{{/content}}\n", encoding="utf-8"
    )
    (tmp_path / "pages" / "base.html").write_text(
        "[{{*content}}base{{/content}}]", encoding="utf-8"
    )
    (tmp_path / "pages" / "home.html").write_text(
        "{{<base}}{{*content}}{{>greeting}}{{/content}}", encoding="utf-8"
    )
    (tmp_path / "pages" / "greeting.html").write_text("Hello, {{name}}!", encoding="utf-8")
    return tmp_path
