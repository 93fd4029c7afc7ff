"""Page tree consumed by the table of contents and reference checks.

The tree is built by the host (from its page discovery and header
extraction) and handed over read-only. Its entries are pages and headers
interleaved in document order:

    index.html
    ├── #introduction          (header)
    │   └── setup.html         (page linked below this header)
    │       └── #install       (header of setup.html)
    └── api.html               (page)

A Location is a cursor into the tree that remembers how it got there,
so a renderer can climb to the root or find the page a header belongs to.

Thread Safety:
Trees and locations are frozen dataclasses. Safe to share.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Page:
    """A rendered page.

    Attributes:
        path: Rendered path relative to the site root (``guide/setup.html``)
        title: Page title used as TOC link text
        file: Source file, used to resolve snippet paths
    """

    path: str
    title: str
    file: Path | None = None


@dataclass(frozen=True, slots=True)
class Header:
    """A header within a page.

    Attributes:
        path: Page path plus anchor (``guide/setup.html#install``)
        label: Header text
        level: Header level (1-6)
    """

    path: str
    label: str
    level: int = 1

    @property
    def anchor(self) -> str:
        return self.path.partition("#")[2]


Entry: TypeAlias = Page | Header


@dataclass(frozen=True)
class Tree(Generic[T]):
    """Immutable rose tree."""

    label: T
    children: tuple[Tree[T], ...] = ()

    def walk(self) -> Iterator[Tree[T]]:
        """Pre-order traversal (document order)."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Location(Generic[T]):
    """Cursor into a tree, remembering the way up."""

    tree: Tree[T]
    parent: Location[T] | None = None

    @property
    def label(self) -> T:
        return self.tree.label

    @property
    def root(self) -> Location[T]:
        location = self
        while location.parent is not None:
            location = location.parent
        return location

    @property
    def path(self) -> tuple[Location[T], ...]:
        """Locations from the root down to this one."""
        return tuple(reversed(tuple(self.ancestors())))

    @property
    def children(self) -> tuple[Location[T], ...]:
        return tuple(Location(child, self) for child in self.tree.children)

    def ancestors(self) -> Iterator[Location[T]]:
        """This location and its ancestors, innermost first."""
        location: Location[T] | None = self
        while location is not None:
            yield location
            location = location.parent

    def find(self, predicate: Callable[[T], bool]) -> Location[T] | None:
        """First location at or below this one whose label matches."""
        if predicate(self.tree.label):
            return self
        for child in self.children:
            found = child.find(predicate)
            if found is not None:
                return found
        return None


def enclosing_page(location: Location[Entry]) -> Page | None:
    """Nearest page at or above a location."""
    for ancestor in location.ancestors():
        if isinstance(ancestor.label, Page):
            return ancestor.label
    return None


def page_paths(location: Location[Entry]) -> frozenset[str]:
    """Paths of every page in the tree containing location."""
    return frozenset(
        node.label.path for node in location.root.tree.walk() if isinstance(node.label, Page)
    )


def locate(root: Tree[Entry], path: str) -> Location[Entry] | None:
    """Location of the page with the given path."""
    return Location(root).find(lambda entry: isinstance(entry, Page) and entry.path == path)
