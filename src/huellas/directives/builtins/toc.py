"""Table of contents directive.

Markdown:
    @@toc { depth=2 }
    @@toc { .sidebar pages=false ordered=true }

Renders the page and header tree below the directive's location as
nested lists, wrapped in ``<div class="toc ...">``. Extra classes are
appended to ``toc``.

Options:
depth: Levels to include (default: the configured toc_depth, 6); negative is 0
pages: Include pages (default: true)
headers: Include headers (default: true)
ordered: Use ``<ol>`` lists (default: false)

Thread Safety:
Holds a read-only RenderContext. Safe for concurrent use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from huellas.directives.protocol import LeafBlockDirective
from huellas.errors import InvalidAttributeError
from huellas.renderers.html import html_escape
from huellas.toc import TableOfContents
from huellas.tree import Location, Tree

if TYPE_CHECKING:
    from huellas.context import RenderContext
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer


class TocDirective(LeafBlockDirective):
    """Handler for ``@@toc``."""

    names: ClassVar[tuple[str, ...]] = ("toc",)

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        attrs = node.attributes
        try:
            toc = TableOfContents(
                pages=attrs.boolean_value("pages", True),
                headers=attrs.boolean_value("headers", True),
                ordered=attrs.boolean_value("ordered", False),
                # Negative depths include nothing, like depth 0
                max_depth=max(attrs.int_value("depth", self.context.config.toc_depth), 0),
            )
        except ValueError as e:
            raise InvalidAttributeError(str(e), node.name, self.context.path, node.lineno) from e
        # A page rendered outside any tree still gets a well-formed empty list
        location = self.context.location or Location(Tree(self.context.page))
        printer.print_line(f'<div class="toc {html_escape(attrs.classes_string)}">')
        toc.render(location, printer)
        printer.print_line("</div>")
