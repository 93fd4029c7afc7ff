"""Snippet directives: source excerpts and embedded fiddles.

Markdown:
    @@snip [Hello.scala](code/Hello.scala) { #hello }
    @@snip [build.sbt](build.sbt) { #deps type=scala }
    @@fiddle [Example.scala](code/Example.scala) { #example height=300 }

Snippet paths are relative to the directory of the page's source file.
Labels are the ``#identifier`` attributes; without any, the whole file
(minus marker lines) is used.

Options (fiddle):
baseUrl: Embed endpoint (default: https://embed.scalafiddle.io/embed)
cssClass: iframe class (default: fiddle)
width, height: iframe size (default: unset)
extraParams: Query parameters placed before the source
    (default: theme=light)
cssStyle: Inline style (default: overflow: hidden;)

Thread Safety:
Handlers hold a read-only RenderContext. Files are read on each render.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar
from urllib.parse import quote_plus

from huellas import snippet
from huellas.directives.protocol import LeafBlockDirective
from huellas.errors import SnippetFileNotFoundError, UnknownFiddleError, UnknownSnippetError
from huellas.renderers.html import html_escape

if TYPE_CHECKING:
    from huellas.context import RenderContext
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer

FIDDLE_BASE_URL = "https://embed.scalafiddle.io/embed"

FIDDLE_TEMPLATE = """\
import fiddle.Fiddle, Fiddle.println
@scalajs.js.annotation.JSExport
object ScalaFiddle {{
  // $FiddleStart
{text}
  // $FiddleEnd
}}
"""


class _SnippetDirective(LeafBlockDirective):
    """Shared file lookup for directives reading page-relative snippets."""

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    def snippet_file(self, source: str) -> Path:
        page_file = self.context.page.file
        base = page_file.parent if page_file is not None else Path()
        return base / source

    def extract(self, node: Directive, file: Path) -> str:
        """Extract the labeled regions named by the node's identifiers.

        Raises:
            SnippetFileNotFoundError: If file does not exist
            MissingSnippetLabelError: In strict mode, for a missing label
        """
        labels = node.attributes.values("identifier")
        return snippet.extract(file, labels, strict=self.context.config.strict_snippets)


class SnipDirective(_SnippetDirective):
    """Handler for ``@@snip``: a labeled excerpt as a code block."""

    names: ClassVar[tuple[str, ...]] = ("snip",)

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        file = self.snippet_file(renderer.source_text(node, self.context.path))
        try:
            text = self.extract(node, file)
        except SnippetFileNotFoundError as e:
            raise UnknownSnippetError(e.path, self.context.path) from e
        language = node.attributes.value("type") or snippet.language(file)
        renderer.render_verbatim(text, language, printer)


class FiddleDirective(_SnippetDirective):
    """Handler for ``@@fiddle``: a snippet embedded as a runnable iframe."""

    names: ClassVar[tuple[str, ...]] = ("fiddle",)

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        file = self.snippet_file(renderer.source_text(node, self.context.path))
        try:
            text = self.extract(node, file)
        except SnippetFileNotFoundError as e:
            raise UnknownFiddleError(e.path, self.context.path) from e

        attrs = node.attributes
        base_url = attrs.value("baseUrl", FIDDLE_BASE_URL)
        extra_params = attrs.value("extraParams", "theme=light")
        source = quote_plus(FIDDLE_TEMPLATE.format(text=text))
        src = f"{base_url}?{extra_params}&source={source}"

        parts = [f'class="{html_escape(attrs.value("cssClass", "fiddle") or "")}"']
        for size in ("width", "height"):
            value = attrs.value(size)
            if value is not None:
                parts.append(f'{size}="{html_escape(value)}"')
        parts.append(f'src="{html_escape(src)}"')
        parts.append('frameborder="0"')
        parts.append(f'style="{html_escape(attrs.value("cssStyle", "overflow: hidden;") or "")}"')

        printer.print_line(f"<iframe {' '.join(parts)}></iframe>")
