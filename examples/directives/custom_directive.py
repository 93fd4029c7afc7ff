"""Add your own directive next to the built-ins."""

from huellas import Markdown, Page, RenderContext, create_registry_with_defaults
from huellas.directives import ContainerBlockDirective
from huellas.renderers.html import html_escape


class CalloutDirective(ContainerBlockDirective):
    """Render @@@ callout ... @@@ as a styled aside."""

    names = ("callout",)

    def render(self, node, renderer, printer) -> None:
        printer.print_line(f'<aside class="callout {html_escape(node.attributes.classes_string)}">')
        renderer.render_children(node.children, printer)
        printer.print_line("</aside>")


context = RenderContext(Page("index.html", "Home"))
builder = create_registry_with_defaults(context)
builder.register(CalloutDirective())

md = Markdown(context, directive_registry=builder.build())

source = """
@@@ callout { .warning }
This is a custom callout directive!
@@@
"""

print(md(source))
