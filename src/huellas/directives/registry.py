"""Directive registry for handler lookup and dispatch.

The registry maps normalised directive names to their handlers. Lookup is
case-insensitive and ignores one trailing colon, so ``@GitHub:[#1]`` and
``@github[#1]`` reach the same handler.

A directive node is rendered only when a handler is registered for its
name and accepts its format. Everything else renders as nothing; an
unrecognised ``@foo[bar]`` never reaches the output.

Thread Safety:
DirectiveRegistry is immutable after creation. Safe to share.
Use DirectiveRegistryBuilder for mutable construction.

Example:
    >>> builder = DirectiveRegistryBuilder()
    >>> builder.register(RefDirective(context))
    >>> builder.register(GitHubDirective(context))
    >>> registry = builder.build()
    >>> handler = registry.get("github")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.directives.protocol import normalize_name
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.context import RenderContext
    from huellas.directives.protocol import DirectiveHandler
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer

logger = get_logger(__name__)


class DirectiveRegistry:
    """Immutable registry of directive handlers.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_handlers", "_by_name")

    def __init__(
        self,
        handlers: tuple[DirectiveHandler, ...],
        by_name: dict[str, DirectiveHandler],
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use DirectiveRegistryBuilder to create instances.
        """
        self._handlers = handlers
        self._by_name = by_name

    def get(self, name: str) -> DirectiveHandler | None:
        """Get handler for directive name.

        Args:
            name: Directive name (e.g., "ref", "GitHub:")

        Returns:
            Handler if registered, None otherwise
        """
        return self._by_name.get(normalize_name(name))

    def has(self, name: str) -> bool:
        """Check if directive name is registered."""
        return normalize_name(name) in self._by_name

    @property
    def names(self) -> frozenset[str]:
        """Get all registered (normalised) directive names."""
        return frozenset(self._by_name.keys())

    @property
    def handlers(self) -> tuple[DirectiveHandler, ...]:
        """Get all registered handlers, in registration order."""
        return self._handlers

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> bool:
        """Dispatch a directive node to its handler.

        Args:
            node: Directive node to render
            renderer: Renderer driving the current render
            printer: Output sink

        Returns:
            True if a handler rendered the node, False if it was dropped

        Raises:
            LinkError: Propagated from the handler
        """
        handler = self._by_name.get(node.key)
        if handler is None:
            logger.debug("No handler for directive %r at line %d", node.name, node.lineno)
            return False
        if node.format not in handler.formats:
            logger.debug(
                "Directive %r does not accept %s format at line %d",
                node.name,
                node.format.value,
                node.lineno,
            )
            return False
        handler.render(node, renderer, printer)
        return True

    def __contains__(self, name: str) -> bool:
        """Support 'name in registry' syntax."""
        return self.has(name)

    def __len__(self) -> int:
        """Number of registered directive names."""
        return len(self._by_name)


class DirectiveRegistryBuilder:
    """Mutable builder for DirectiveRegistry.

    Example:
        >>> builder = DirectiveRegistryBuilder()
        >>> builder.register(VarDirective(context))
        >>> registry = builder.build()
    """

    __slots__ = ("_handlers", "_by_name")

    def __init__(self) -> None:
        """Initialize empty builder."""
        self._handlers: list[DirectiveHandler] = []
        self._by_name: dict[str, DirectiveHandler] = {}

    def register(self, handler: DirectiveHandler) -> DirectiveRegistryBuilder:
        """Register a directive handler.

        Args:
            handler: Handler implementing DirectiveHandler protocol

        Returns:
            Self for chaining

        Raises:
            TypeError: If handler does not implement the protocol
            ValueError: If a handler name conflicts with an existing
                registration, or the handler declares no names or formats
        """
        for attribute in ("names", "formats", "render"):
            if not hasattr(handler, attribute):
                msg = f"Handler {type(handler).__name__} missing '{attribute}' attribute"
                raise TypeError(msg)

        if not handler.names:
            msg = f"Handler {type(handler).__name__} declares no names"
            raise ValueError(msg)
        if not handler.formats:
            msg = f"Handler {type(handler).__name__} declares no formats"
            raise ValueError(msg)

        # Aliases of one handler may normalise to the same key ("github", "github:")
        keys = dict.fromkeys(normalize_name(name) for name in handler.names)
        for key in keys:
            if key in self._by_name:
                existing = self._by_name[key]
                msg = f"Directive '{key}' already registered by {type(existing).__name__}"
                raise ValueError(msg)

        for key in keys:
            self._by_name[key] = handler
        self._handlers.append(handler)
        return self

    def register_all(self, handlers: list[DirectiveHandler]) -> DirectiveRegistryBuilder:
        """Register multiple handlers.

        Returns:
            Self for chaining
        """
        for handler in handlers:
            self.register(handler)
        return self

    def build(self) -> DirectiveRegistry:
        """Build immutable registry from registered handlers."""
        return DirectiveRegistry(
            handlers=tuple(self._handlers),
            by_name=dict(self._by_name),
        )

    def __len__(self) -> int:
        """Number of registered handlers."""
        return len(self._handlers)


def create_registry_with_defaults(context: RenderContext) -> DirectiveRegistryBuilder:
    """Create a builder pre-populated with the built-in directives.

    Use this to extend the default set with custom directives:

        >>> builder = create_registry_with_defaults(context)
        >>> builder.register(MyCustomDirective())
        >>> registry = builder.build()

    Args:
        context: Render context the built-in handlers read from

    Returns:
        DirectiveRegistryBuilder with defaults already registered
    """
    from huellas.directives.builtins.external import (
        ExtRefDirective,
        GitHubDirective,
        ScaladocDirective,
    )
    from huellas.directives.builtins.ref import RefDirective
    from huellas.directives.builtins.snip import FiddleDirective, SnipDirective
    from huellas.directives.builtins.toc import TocDirective
    from huellas.directives.builtins.variables import VarDirective, VarsDirective

    builder = DirectiveRegistryBuilder()

    # Links
    builder.register(RefDirective(context))
    builder.register(ExtRefDirective(context))
    builder.register(ScaladocDirective(context))
    builder.register(GitHubDirective(context))

    # Snippets
    builder.register(SnipDirective(context))
    builder.register(FiddleDirective(context))

    # Navigation
    builder.register(TocDirective(context))

    # Substitution
    builder.register(VarDirective(context))
    builder.register(VarsDirective(context))

    return builder


def create_default_registry(context: RenderContext) -> DirectiveRegistry:
    """Registry with every built-in directive, bound to one page.

    Returns:
        Registry with:
        - Links: ref, extref, scaladoc, github
        - Snippets: snip, fiddle
        - Navigation: toc
        - Substitution: var, vars
    """
    return create_registry_with_defaults(context).build()
