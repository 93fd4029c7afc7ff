"""HTML renderer that dispatches directive nodes to the registry.

Walks the AST depth first and prints into a Printer. Plain nodes (text,
links, paragraphs, verbatim blocks) are serialized here; directive nodes
are handed to the DirectiveRegistry, which either renders them through a
handler or drops them.

Thread Safety:
All per-render state is a Printer created for each render() call. The
document's link reference definitions are bound to a fresh renderer per
document, so a single HtmlRenderer can be shared between threads.
"""

from __future__ import annotations

import html
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from huellas.directives.protocol import DirectiveFormat
from huellas.errors import UnresolvedSourceError
from huellas.nodes import (
    Direct,
    Directive,
    Document,
    EmptySource,
    Link,
    Node,
    Paragraph,
    Ref,
    SpecialText,
    Text,
    Verbatim,
    normalize_reference,
)
from huellas.printer import Printer
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.directives.registry import DirectiveRegistry

logger = get_logger(__name__)


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    Escapes <, >, &, " but NOT single quotes.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


class HtmlRenderer:
    """Render AST to HTML.

    Usage:
        >>> from huellas.parser import Parser
        >>> doc = Parser("See @ref[setup](setup.md).").parse()
        >>> renderer = HtmlRenderer(create_default_registry(context))
        >>> renderer.render(doc)
        '<p>See <a href="setup.html">setup</a>.</p>\\n'

    Without a registry every directive is dropped.
    """

    __slots__ = ("_directive_registry", "_references")

    def __init__(
        self,
        directive_registry: DirectiveRegistry | None = None,
        *,
        references: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            directive_registry: Registry used to render directive nodes
            references: Link reference definitions for ``[key]`` sources
        """
        self._directive_registry = directive_registry
        self._references: Mapping[str, str] = MappingProxyType(
            {normalize_reference(k): v for k, v in (references or {}).items()}
        )

    @property
    def directive_registry(self) -> DirectiveRegistry | None:
        return self._directive_registry

    def render(self, node: Document) -> str:
        """Render document AST to HTML string.

        Raises:
            LinkError: If a directive cannot resolve its target
        """
        renderer = HtmlRenderer(self._directive_registry, references=node.references)
        printer = Printer()
        renderer.render_to(node, printer)
        return printer.build()

    # =========================================================================
    # Node dispatch
    # =========================================================================

    def render_to(self, node: Node, printer: Printer) -> None:
        """Render a single node of any kind into printer."""
        match node:
            case Document():
                self.render_children(node.children, printer)
            case Paragraph():
                printer.print("<p>")
                self.render_children(node.children, printer)
                printer.print("</p>").println()
            case Text():
                printer.print(html_escape(node.content))
            case SpecialText():
                printer.print(html_escape(node.content))
            case Link():
                self.render_link(node.url, node.children, printer)
            case Verbatim():
                self.render_verbatim(node.text, node.language, printer)
            case Directive():
                self._render_directive(node, printer)
            case _:
                logger.debug("Skipping unsupported node %s", type(node).__name__)

    def render_children(self, children: Iterable[Node], printer: Printer) -> None:
        for child in children:
            self.render_to(child, printer)

    def _render_directive(self, node: Directive, printer: Printer) -> None:
        if self._directive_registry is None:
            logger.debug("No directive registry, dropping %r", node.name)
            return
        rendered = self._directive_registry.render(node, self, printer)
        if rendered and node.format is not DirectiveFormat.INLINE:
            printer.println()

    # =========================================================================
    # Shared fragments
    # =========================================================================

    def render_link(self, href: str, children: Iterable[Node], printer: Printer) -> None:
        """Print ``<a href="...">children</a>``."""
        printer.print(f'<a href="{html_escape(href)}">')
        self.render_children(children, printer)
        printer.print("</a>")

    def render_verbatim(self, text: str, language: str | None, printer: Printer) -> None:
        """Print a code block."""
        lang_class = f' class="language-{html_escape(language)}"' if language else ""
        printer.println()
        printer.print(f'<pre class="prettyprint"><code{lang_class}>')
        printer.print(html_escape(text))
        printer.print("</code></pre>").println()

    def source_text(self, node: Directive, page: str) -> str:
        """Reference string of a directive, with ``[key]`` sources resolved.

        Args:
            node: Directive whose source is needed
            page: Path of the current page, for the error message

        Raises:
            UnresolvedSourceError: If the source is empty or names an
                undefined reference
        """
        match node.source:
            case Direct(value):
                return value
            case Ref(value):
                target = self._references.get(normalize_reference(value))
                if target is None:
                    msg = f"Undefined reference [{value}] referenced from [{page}]"
                    raise UnresolvedSourceError(msg, page)
                return target
            case EmptySource():
                msg = f"Directive [{node.name}] has no source, referenced from [{page}]"
                raise UnresolvedSourceError(msg, page)
