"""huellas renderers.

Renderers convert typed AST nodes into output formats.

Available Renderers:
- HtmlRenderer: Renders AST to HTML, dispatching directives to a registry

Thread Safety:
Each render() call owns its Printer. Safe for concurrent use.
"""

from huellas.renderers.html import HtmlRenderer, html_escape

__all__ = ["HtmlRenderer", "html_escape"]
