"""DirectiveHandler protocol and format-specific base classes.

A handler answers to one or more names and accepts one or more syntactic
formats. The registry only dispatches a node to a handler whose formats
contain the node's format; anything else is dropped without output.

Thread Safety:
Handlers are built once per render context and hold only read-only
configuration (properties, current page, predicates). All per-render
state lives in the Printer passed to render().

Example:
    >>> class KbdDirective(InlineDirective):
    ...     names = ("kbd",)
    ...
    ...     def render(self, node, renderer, printer):
    ...         printer.print(f"<kbd>{html_escape(node.label)}</kbd>")
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer


class DirectiveFormat(Enum):
    """Syntactic shape of a directive, fixed at parse time."""

    INLINE = "inline"
    """``@name[label](source)`` inside running text."""

    LEAF_BLOCK = "leaf_block"
    """``@@name[label](source)`` on a line of its own."""

    CONTAINER_BLOCK = "container_block"
    """``@@@ name`` ... ``@@@`` wrapping block content."""


@runtime_checkable
class DirectiveHandler(Protocol):
    """Protocol for directive implementations.

    Attributes:
        names: Directive keywords this handler answers to. Matching is
            case-insensitive and a trailing ``:`` is ignored, so
            ``("github", "github:")`` and ``("github",)`` are equivalent.
        formats: Directive formats this handler accepts.
    """

    names: ClassVar[tuple[str, ...]]
    formats: ClassVar[frozenset[DirectiveFormat]]

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        """Render the directive into the printer.

        Args:
            node: Directive AST node
            renderer: Serializer driving the render, used to render child
                nodes and shared fragments (links, verbatim blocks)
            printer: Output sink owned by the current render call

        Raises:
            LinkError: If the directive references something that
                cannot be resolved. Aborts the current page render.
        """
        ...


class InlineDirective:
    """Base for directives used inside running text."""

    names: ClassVar[tuple[str, ...]] = ()
    formats: ClassVar[frozenset[DirectiveFormat]] = frozenset({DirectiveFormat.INLINE})


class LeafBlockDirective:
    """Base for directives occupying a whole line."""

    names: ClassVar[tuple[str, ...]] = ()
    formats: ClassVar[frozenset[DirectiveFormat]] = frozenset({DirectiveFormat.LEAF_BLOCK})


class ContainerBlockDirective:
    """Base for directives wrapping block content."""

    names: ClassVar[tuple[str, ...]] = ()
    formats: ClassVar[frozenset[DirectiveFormat]] = frozenset(
        {DirectiveFormat.CONTAINER_BLOCK}
    )


def normalize_name(name: str) -> str:
    """Lower-case a directive keyword and drop one trailing colon.

    >>> normalize_name("GitHub:")
    'github'
    """
    return name.strip().lower().removesuffix(":")
