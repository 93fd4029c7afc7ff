"""Directive system for huellas.

Directives are written in three shapes:

    @name[label](source){attrs}          inline, inside running text
    @@name[label](source) {attrs}        leaf block, a line of its own
    @@@ name[label](source) {attrs}      container block, closed by "@@@"

Key components:
- DirectiveHandler: Protocol for directive implementations
- DirectiveAttributes: Parsed ``{...}`` attribute block
- DirectiveRegistry: Handler lookup and dispatch

Thread Safety:
- Attributes are frozen dataclasses
- Registry is immutable after creation
- Handlers hold read-only per-page context only

Example:
    >>> from huellas.directives import InlineDirective
    >>>
    >>> class KbdDirective(InlineDirective):
    ...     names = ("kbd",)
    ...
    ...     def render(self, node, renderer, printer):
    ...         printer.print(f"<kbd>{html_escape(node.label)}</kbd>")
"""

from __future__ import annotations

from huellas.directives.attributes import EMPTY_ATTRIBUTES, DirectiveAttributes
from huellas.directives.protocol import (
    ContainerBlockDirective,
    DirectiveFormat,
    DirectiveHandler,
    InlineDirective,
    LeafBlockDirective,
    normalize_name,
)
from huellas.directives.registry import (
    DirectiveRegistry,
    DirectiveRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
)

__all__ = [
    # Attributes
    "DirectiveAttributes",
    "EMPTY_ATTRIBUTES",
    # Protocol
    "DirectiveFormat",
    "DirectiveHandler",
    "InlineDirective",
    "LeafBlockDirective",
    "ContainerBlockDirective",
    "normalize_name",
    # Registry
    "DirectiveRegistry",
    "DirectiveRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
]
