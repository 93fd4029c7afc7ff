"""Table of contents rendering over the page tree.

Walks the children of a location in document order, keeping pages and/or
headers, down to a maximum depth, and prints nested lists of links:

    <ul>
    <li><a href="#introduction">Introduction</a>
    <ul>
    <li><a href="setup.html">Setup</a></li>
    </ul>
    </li>
    </ul>

Excluded headers are transparent: pages listed below them move up to the
header's level. Excluded pages take their whole subtree with them, since
a page's headers only make sense under that page.

Depth 0, or a location without children in scope, yields an empty list
container. Raising the depth never removes an entry.
"""

from __future__ import annotations

from dataclasses import dataclass

from huellas import paths
from huellas.printer import Printer
from huellas.renderers.html import html_escape
from huellas.tree import Entry, Header, Location, Page, Tree, enclosing_page


@dataclass(frozen=True, slots=True)
class TocItem:
    """An entry selected for the table of contents."""

    entry: Entry
    children: tuple[TocItem, ...] = ()


@dataclass(frozen=True, slots=True)
class TableOfContents:
    """Table of contents settings.

    Attributes:
        pages: Include page entries
        headers: Include header entries
        ordered: Use ``<ol>`` instead of ``<ul>``
        max_depth: Levels of nesting to include; 0 renders an empty list
    """

    pages: bool = True
    headers: bool = True
    ordered: bool = False
    max_depth: int = 6

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            msg = f"Table of contents depth must be >= 0, got {self.max_depth}"
            raise ValueError(msg)

    def items(self, location: Location[Entry]) -> tuple[TocItem, ...]:
        """Entries in scope below location, nested."""
        return self._collect(location.tree, self.max_depth)

    def _collect(self, tree: Tree[Entry], depth: int) -> tuple[TocItem, ...]:
        if depth <= 0:
            return ()
        items: list[TocItem] = []
        for child in tree.children:
            match child.label:
                case Page() if self.pages:
                    items.append(TocItem(child.label, self._collect(child, depth - 1)))
                case Header() if self.headers:
                    items.append(TocItem(child.label, self._collect(child, depth - 1)))
                case Header():
                    items.extend(self._collect(child, depth))
                case _:
                    pass
        return tuple(items)

    def render(self, location: Location[Entry], printer: Printer) -> None:
        """Print the table of contents for location."""
        page = enclosing_page(location)
        current = page.path if page is not None else ""
        self._print_list(self.items(location), current, printer)

    def _print_list(self, items: tuple[TocItem, ...], current: str, printer: Printer) -> None:
        tag = "ol" if self.ordered else "ul"
        printer.print_line(f"<{tag}>")
        for item in items:
            printer.print(f'<li><a href="{html_escape(_href(current, item.entry))}">')
            printer.print(html_escape(_title(item.entry)))
            printer.print("</a>")
            if item.children:
                printer.println()
                self._print_list(item.children, current, printer)
            printer.print("</li>").println()
        printer.print_line(f"</{tag}>")


def _title(entry: Entry) -> str:
    return entry.title if isinstance(entry, Page) else entry.label


def _href(current: str, entry: Entry) -> str:
    target, fragment = paths.split_fragment(entry.path)
    if fragment and target == current:
        return fragment
    return paths.relative(current, entry.path)
