"""Per-page render context.

Everything a directive handler may consult while rendering one page: the
page itself, its position in the page tree, the shared configuration, and
the host's answers to "does this page exist" and "what is this page
called once rendered".

Hosts with their own page index pass ``exists``/``converter`` callables.
Otherwise both are derived from the page tree and the configured suffixes.

Thread Safety:
Frozen dataclass holding read-only inputs. One context per page; contexts
for different pages may be used from different threads.

Example:
    >>> context = RenderContext.for_location(location, config)
    >>> context.path_exists("guide/setup.html")
    True
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Self

from huellas import paths
from huellas.config import RenderConfig
from huellas.tree import Entry, Location, Page, enclosing_page, page_paths


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Read-only inputs for rendering one page.

    Attributes:
        page: The page being rendered
        config: Shared render configuration
        location: The page's position in the page tree, if known
        exists: Host predicate for rendered page paths
        converter: Host rewrite from source to rendered page paths
    """

    page: Page
    config: RenderConfig = field(default_factory=RenderConfig)
    location: Location[Entry] | None = None
    exists: Callable[[str], bool] | None = None
    converter: Callable[[str], str] | None = None

    @classmethod
    def for_location(
        cls,
        location: Location[Entry],
        config: RenderConfig | None = None,
        **kwargs: Callable[..., object],
    ) -> Self:
        """Build a context for the page at location.

        Raises:
            ValueError: If location is not inside a page
        """
        page = enclosing_page(location)
        if page is None:
            msg = "Location does not belong to any page"
            raise ValueError(msg)
        return cls(page=page, config=config or RenderConfig(), location=location, **kwargs)

    @property
    def path(self) -> str:
        """Rendered path of the current page."""
        return self.page.path

    @property
    def properties(self) -> Mapping[str, str]:
        return self.config.properties

    def path_exists(self, path: str) -> bool:
        """Whether a rendered page path exists."""
        if self.exists is not None:
            return self.exists(path)
        if self.location is not None:
            return path in page_paths(self.location)
        return path == self.page.path

    def convert_path(self, path: str) -> str:
        """Rewrite a source page reference to its rendered form."""
        if self.converter is not None:
            return self.converter(path)
        return paths.convert(path, self.config.source_suffix, self.config.link_suffix)
