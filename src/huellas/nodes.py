"""Typed AST nodes for huellas.

Only the node types the directive engine consumes or produces are
modelled: directives, the text and link nodes they expand into, verbatim
blocks for snippets, and the paragraphs and documents that hold them.

Node Hierarchy:
Node (base)
├── Block
│   ├── Document
│   ├── Paragraph
│   ├── Verbatim
│   └── Directive (leaf and container formats)
└── Inline
    ├── Text
    ├── SpecialText
    ├── Link
    └── Directive (inline format)

All nodes are frozen dataclasses with slots. ``lineno`` is keyword-only
so hand-built nodes in hosts and tests can omit it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from huellas.directives.attributes import EMPTY_ATTRIBUTES, DirectiveAttributes
from huellas.directives.protocol import DirectiveFormat, normalize_name

# =============================================================================
# Directive sources
# =============================================================================


@dataclass(frozen=True, slots=True)
class Direct:
    """Literal reference: ``@ref[label](path/to/page.md)``."""

    value: str


@dataclass(frozen=True, slots=True)
class Ref:
    """Indirect reference through a link definition: ``@ref[label][key]``."""

    value: str


@dataclass(frozen=True, slots=True)
class EmptySource:
    """No source supplied: ``@var[name]``."""


EMPTY = EmptySource()

Source: TypeAlias = Direct | Ref | EmptySource


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes."""

    lineno: int = field(default=0, kw_only=True)


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text, HTML-escaped on output."""

    content: str


@dataclass(frozen=True, slots=True)
class SpecialText(Node):
    """A backslash-escaped character, such as ``\\@`` or ``\\[``.

    Kept apart from Text so the escape never starts a directive.
    """

    content: str


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink produced by link directives.

    HTML: <a href="url">children</a>
    """

    url: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph of inline content."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Verbatim(Node):
    """Code block, from a fenced block or a snippet.

    HTML: <pre class="prettyprint"><code class="language-x">...</code></pre>
    """

    text: str
    language: str | None = None


@dataclass(frozen=True, slots=True)
class Directive(Node):
    """Directive node.

    Markdown:
        @name[label](source){attrs}           inline
        @@name[label](source) {attrs}         leaf block
        @@@ name[label](source) {attrs}       container block
        ...
        @@@

    ``children`` holds the parsed label for inline and leaf directives and
    the parsed body for containers; ``contents`` holds the raw text of the
    same.
    """

    format: DirectiveFormat
    name: str
    label: str = ""
    source: Source = EMPTY
    attributes: DirectiveAttributes = EMPTY_ATTRIBUTES
    contents: str = ""
    children: tuple[Node, ...] = ()

    @property
    def key(self) -> str:
        """Normalised name used for registry lookup."""
        return normalize_name(self.name)

    @property
    def label_nodes(self) -> tuple[Node, ...]:
        """Parsed label, or the raw label as text for hand-built nodes."""
        if self.children or not self.label:
            return self.children
        return (Text(self.label, lineno=self.lineno),)


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node.

    ``references`` holds link reference definitions (``[key]: target``)
    used to resolve ``Ref`` sources.
    """

    children: tuple[Block, ...]
    references: Mapping[str, str] = field(default_factory=dict)


Inline: TypeAlias = Text | SpecialText | Link | Directive

Block: TypeAlias = Document | Paragraph | Verbatim | Directive


def normalize_reference(key: str) -> str:
    """Link reference keys match case-insensitively, with whitespace collapsed.

    >>> normalize_reference("  Akka   Docs ")
    'akka docs'
    """
    return " ".join(key.split()).casefold()
