"""
huellas: named directives for Markdown documentation sites.

Directives of the form ``@name[label](source){attrs}`` expand into
validated HTML: checked links between pages, links to external projects
built from configured URL templates, source snippets, embedded fiddles,
tables of contents and property substitutions. A reference that cannot
be resolved fails the page with a message naming the target, the page
and the reason.

Zero runtime dependencies.

Quick Start:
    >>> from huellas import Page, RenderConfig, RenderContext, parse, render
    >>> config = RenderConfig(properties={"github.base_url": "https://github.com/a/b"})
    >>> context = RenderContext(Page("index.html", "Home"), config)
    >>> render(parse("Fixed in @github[#1](#1)."), context)
    '<p>Fixed in <a href="https://github.com/a/b/issues/1">#1</a>.</p>\\n'

    >>> # Or use the high-level Markdown class, one per page
    >>> md = Markdown(context)
    >>> html = md("Version @var[project.version]")

Custom Directives:
    >>> builder = create_registry_with_defaults(context)
    >>> builder.register(MyCustomDirective())
    >>> md = Markdown(context, directive_registry=builder.build())
"""

from __future__ import annotations

from huellas.config import RenderConfig
from huellas.context import RenderContext
from huellas.directives.attributes import DirectiveAttributes
from huellas.directives.protocol import DirectiveFormat, DirectiveHandler
from huellas.directives.registry import (
    DirectiveRegistry,
    DirectiveRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
)
from huellas.errors import (
    ExternalLinkError,
    InvalidAttributeError,
    HuellasError,
    LinkError,
    MissingSnippetLabelError,
    ParseError,
    SnippetFileNotFoundError,
    UnknownFiddleError,
    UnknownPageError,
    UnknownSnippetError,
    UnresolvedSourceError,
    UrlResolutionError,
)
from huellas.nodes import (
    EMPTY,
    Block,
    Direct,
    Directive,
    Document,
    Inline,
    Link,
    Node,
    Paragraph,
    Ref,
    Source,
    SpecialText,
    Text,
    Verbatim,
)
from huellas.parser import Parser
from huellas.printer import Printer
from huellas.renderers.html import HtmlRenderer
from huellas.tree import Header, Location, Page, Tree

__version__ = "0.1.0"


def parse(source: str, *, source_file: str | None = None) -> Document:
    """Parse Markdown source into a typed AST.

    Args:
        source: Markdown source text
        source_file: Optional source file path for error messages

    Raises:
        ParseError: On malformed directive syntax
    """
    return Parser(source, source_file=source_file).parse()


def render(
    doc: Document,
    context: RenderContext,
    *,
    directive_registry: DirectiveRegistry | None = None,
) -> str:
    """Render an AST Document to HTML.

    Args:
        doc: Document AST to render
        context: The page being rendered
        directive_registry: Custom registry (built-in directives if None)

    Raises:
        LinkError: If a directive cannot resolve its target
    """
    if directive_registry is None:
        directive_registry = create_default_registry(context)
    return HtmlRenderer(directive_registry).render(doc)


class Markdown:
    """Parser and renderer bound to one page.

    Usage:
        >>> md = Markdown(RenderContext.for_location(location, config))
        >>> html = md("See @ref[setup](setup.md).")

    Thread Safety:
        Holds only immutable state. Safe to call concurrently.
    """

    __slots__ = ("_context", "_renderer")

    def __init__(
        self,
        context: RenderContext,
        *,
        directive_registry: DirectiveRegistry | None = None,
    ) -> None:
        self._context = context
        if directive_registry is None:
            directive_registry = create_default_registry(context)
        self._renderer = HtmlRenderer(directive_registry)

    @property
    def context(self) -> RenderContext:
        return self._context

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call."""
        return self.render(self.parse(source))

    def parse(self, source: str) -> Document:
        file = self._context.page.file
        return parse(source, source_file=str(file) if file is not None else None)

    def render(self, doc: Document) -> str:
        return self._renderer.render(doc)


__all__ = [
    # High-level API
    "parse",
    "render",
    "Markdown",
    "__version__",
    # Configuration
    "RenderConfig",
    "RenderContext",
    # Nodes
    "Block",
    "Direct",
    "Directive",
    "Document",
    "EMPTY",
    "Inline",
    "Link",
    "Node",
    "Paragraph",
    "Ref",
    "Source",
    "SpecialText",
    "Text",
    "Verbatim",
    # Page tree
    "Header",
    "Location",
    "Page",
    "Tree",
    # Directives
    "DirectiveAttributes",
    "DirectiveFormat",
    "DirectiveHandler",
    "DirectiveRegistry",
    "DirectiveRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    # Parsing and rendering
    "HtmlRenderer",
    "Parser",
    "Printer",
    # Errors
    "ExternalLinkError",
    "InvalidAttributeError",
    "HuellasError",
    "LinkError",
    "MissingSnippetLabelError",
    "ParseError",
    "SnippetFileNotFoundError",
    "UnknownFiddleError",
    "UnknownPageError",
    "UnknownSnippetError",
    "UnresolvedSourceError",
    "UrlResolutionError",
]
