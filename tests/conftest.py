"""Shared fixtures: a small site tree and page renderers."""

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from huellas import Markdown, RenderConfig, RenderContext
from huellas.printer import Printer
from huellas.tree import Entry, Header, Page, Tree, locate


def build_site() -> Tree[Entry]:
    """index.html, with a header leading to the setup guide, and an API page.

    index.html
    ├── #introduction
    │   └── guide/setup.html
    │       └── #install
    └── api.html
    """
    return Tree(
        Page("index.html", "Home"),
        (
            Tree(
                Header("index.html#introduction", "Introduction", 2),
                (
                    Tree(
                        Page("guide/setup.html", "Setup"),
                        (Tree(Header("guide/setup.html#install", "Install", 2)),),
                    ),
                ),
            ),
            Tree(Page("api.html", "API")),
        ),
    )


@pytest.fixture
def site() -> Tree[Entry]:
    return build_site()


@pytest.fixture
def printer() -> Printer:
    return Printer()


@pytest.fixture
def markdown() -> Callable[..., str]:
    """Render source as the standalone page ``test.html``."""

    def _markdown(
        source: str,
        properties: Mapping[str, str] | None = None,
        **context_args: Any,
    ) -> str:
        config = RenderConfig(properties=properties or {})
        context = RenderContext(Page("test.html", "Test"), config, **context_args)
        return Markdown(context)(source)

    return _markdown


@pytest.fixture
def site_markdown(site: Tree[Entry]) -> Callable[..., str]:
    """Render source as one of the pages of the site tree."""

    def _markdown(
        source: str,
        page: str = "index.html",
        config: RenderConfig | None = None,
    ) -> str:
        location = locate(site, page)
        assert location is not None
        return Markdown(RenderContext.for_location(location, config))(source)

    return _markdown
