"""Ref directive for links between pages of the same site.

Markdown:
    See @ref[the setup guide](guide/setup.md#install) first.

The source suffix is rewritten to the rendered one (``.md`` -> ``.html``)
and the target is checked against the site's pages, so a broken internal
link fails the build instead of reaching the output.

Thread Safety:
Holds a read-only RenderContext. Safe for concurrent use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from huellas import paths
from huellas.directives.protocol import InlineDirective
from huellas.errors import UnknownPageError

if TYPE_CHECKING:
    from huellas.context import RenderContext
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer


class RefDirective(InlineDirective):
    """Handler for ``@ref``: a checked link to another page."""

    names: ClassVar[tuple[str, ...]] = ("ref", "ref:")

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        source = renderer.source_text(node, self.context.path)
        href = self.check(self.context.convert_path(source))
        renderer.render_link(href, node.label_nodes, printer)

    def check(self, path: str) -> str:
        """Return path unchanged if it names an existing page.

        Raises:
            UnknownPageError: If no page exists at path
        """
        if not self.context.path_exists(paths.resolve(self.context.path, path)):
            raise UnknownPageError(path, self.context.path)
        return path
