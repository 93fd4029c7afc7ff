"""Property substitution directives.

Markdown:
    Version @var[project.version] is out.

    @@@ vars
    ```scala
    libraryDependencies += "com.example" %% "lib" % "$project.version$"
    ```
    @@@

``var`` prints a single property as escaped text. ``vars`` rewrites
``$name$`` placeholders inside the code block it wraps; the delimiters
can be changed with the ``start-delimiter`` and ``stop-delimiter``
attributes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar

from huellas.directives.protocol import ContainerBlockDirective, InlineDirective
from huellas.nodes import SpecialText, Verbatim
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.context import RenderContext
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer

logger = get_logger(__name__)


class VarDirective(InlineDirective):
    """Handler for ``@var``: a property value, or ``<name>`` if undefined."""

    names: ClassVar[tuple[str, ...]] = ("var", "var:")

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        value = self.context.properties.get(node.label)
        if value is None:
            logger.debug(
                "Undefined property %r referenced from %s", node.label, self.context.path
            )
            value = f"<{node.label}>"
        renderer.render_to(SpecialText(value, lineno=node.lineno), printer)


class VarsDirective(ContainerBlockDirective):
    """Handler for ``@@@ vars``."""

    names: ClassVar[tuple[str, ...]] = ("vars",)

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        match node.children:
            case (Verbatim() as verbatim, *_):
                text = substitute(
                    verbatim.text,
                    self.context.properties,
                    node.attributes.value("start-delimiter", "$") or "",
                    node.attributes.value("stop-delimiter", "$") or "",
                )
                renderer.render_verbatim(text, verbatim.language, printer)
            case _:
                renderer.render_children(node.children, printer)


def substitute(text: str, properties: Mapping[str, str], start: str, stop: str) -> str:
    """Replace every ``start + key + stop`` in text with its property value.

    All keys are matched in one scan, longest first, so substituted values
    are never expanded again and the result does not depend on the order
    of properties.

    >>> substitute("v$a$ $ab$", {"a": "1", "ab": "2"}, "$", "$")
    'v1 2'
    """
    if not properties:
        return text
    keys = sorted(properties, key=len, reverse=True)
    pattern = re.compile(
        re.escape(start) + "(" + "|".join(map(re.escape, keys)) + ")" + re.escape(stop)
    )
    return pattern.sub(lambda m: properties[m.group(1)], text)
