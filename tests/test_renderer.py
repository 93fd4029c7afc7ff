"""Tests for the HTML renderer, the printer and the top-level API."""

import threading

import pytest

from huellas import (
    Direct,
    Directive,
    DirectiveFormat,
    Document,
    HtmlRenderer,
    Link,
    Markdown,
    Page,
    Paragraph,
    ParseError,
    Printer,
    Ref,
    RenderConfig,
    RenderContext,
    SpecialText,
    Text,
    UnresolvedSourceError,
    Verbatim,
    __version__,
    create_default_registry,
    parse,
    render,
)
from huellas.renderers.html import html_escape
from huellas.tree import locate


class TestPrinter:
    def test_println_only_breaks_once(self, printer: Printer) -> None:
        printer.println().print("a").println().println().print("b")
        assert printer.build() == "a\nb"

    def test_print_line(self, printer: Printer) -> None:
        printer.print("a").print_line("<hr>").print("b")
        assert printer.build() == "a\n<hr>\nb"

    def test_empty_prints_are_skipped(self, printer: Printer) -> None:
        printer.print("")
        assert not printer
        assert len(printer) == 0

    def test_text_ending_in_newline(self, printer: Printer) -> None:
        printer.print("a\n").println()
        assert printer.build() == "a\n"


class TestHtmlRenderer:
    """Rendering hand-built and parsed trees."""

    def test_escape(self) -> None:
        escaped = html_escape("<a href=\"x\">'&'</a>")
        assert escaped == "&lt;a href=&quot;x&quot;&gt;'&amp;'&lt;/a&gt;"

    def test_plain_nodes(self) -> None:
        doc = Document(
            (
                Paragraph((Text("a < b "), Link("x.html?a=1&b=2", (Text("link"),)))),
                Verbatim("if a < b:", "python"),
                Paragraph((SpecialText("@"),)),
            )
        )

        assert HtmlRenderer().render(doc) == (
            '<p>a &lt; b <a href="x.html?a=1&amp;b=2">link</a></p>\n'
            '<pre class="prettyprint"><code class="language-python">if a &lt; b:</code></pre>\n'
            "<p>@</p>\n"
        )

    def test_verbatim_without_language(self) -> None:
        html = HtmlRenderer().render(Document((Verbatim("x"),)))
        assert html == '<pre class="prettyprint"><code>x</code></pre>\n'

    def test_without_registry_directives_are_dropped(self) -> None:
        assert HtmlRenderer().render(parse("a @var[x] b")) == "<p>a  b</p>\n"

    def test_hand_built_directive(self) -> None:
        context = RenderContext(Page("index.html", "Home"))
        renderer = HtmlRenderer(create_default_registry(context))
        node = Directive(DirectiveFormat.INLINE, "ref", label="Home", source=Direct("index.md"))

        html = renderer.render(Document((Paragraph((node,)),)))

        assert html == '<p><a href="index.html">Home</a></p>\n'

    def test_references_are_bound_per_document(self) -> None:
        context = RenderContext(Page("index.html", "Home"))
        renderer = HtmlRenderer(create_default_registry(context))
        node = Directive(DirectiveFormat.INLINE, "ref", label="Home", source=Ref("Home Page"))

        with_reference = Document((Paragraph((node,)),), references={"home page": "index.md"})
        assert 'href="index.html"' in renderer.render(with_reference)

        with pytest.raises(UnresolvedSourceError):
            renderer.render(Document((Paragraph((node,)),)))

    def test_constructor_references(self) -> None:
        renderer = HtmlRenderer(references={"  Home   PAGE ": "index.md"})
        node = Directive(DirectiveFormat.INLINE, "ref", source=Ref("home page"))

        assert renderer.source_text(node, "index.html") == "index.md"


class TestApi:
    """parse(), render() and Markdown."""

    def test_version(self) -> None:
        assert __version__ == "0.1.0"

    def test_parse_and_render(self) -> None:
        config = RenderConfig(properties={"github.base_url": "https://github.com/a/b"})
        context = RenderContext(Page("index.html", "Home"), config)

        html = render(parse("Fixed in @github[#1](#1)."), context)

        assert html == '<p>Fixed in <a href="https://github.com/a/b/issues/1">#1</a>.</p>\n'

    def test_markdown_context(self) -> None:
        context = RenderContext(Page("index.html", "Home"))
        assert Markdown(context).context is context

    def test_markdown_reports_page_file_in_parse_errors(self, tmp_path) -> None:
        page = Page("index.html", "Home", file=tmp_path / "index.md")
        with pytest.raises(ParseError) as exc_info:
            Markdown(RenderContext(page))("@@@ vars\nopen")

        assert exc_info.value.source_file == str(tmp_path / "index.md")
        assert exc_info.value.lineno == 1

    def test_mixed_document(self, site_markdown) -> None:
        source = (
            "# Title\n"
            "\n"
            "See @ref[the API](api.md) and \\@ref[not a link].\n"
            "\n"
            "```\n"
            "@var[untouched]\n"
            "```\n"
        )

        assert site_markdown(source) == (
            "<p># Title</p>\n"
            '<p>See <a href="api.html">the API</a> and @ref[not a link].</p>\n'
            '<pre class="prettyprint"><code>@var[untouched]</code></pre>\n'
        )

    def test_concurrent_renders_are_independent(self, site) -> None:
        sources = {
            "index.html": "@ref[Setup](guide/setup.md)",
            "guide/setup.html": "@ref[Home](../index.md)",
            "api.html": "@ref[Setup](guide/setup.md)",
        }
        expected = {
            "index.html": '<p><a href="guide/setup.html">Setup</a></p>\n',
            "guide/setup.html": '<p><a href="../index.html">Home</a></p>\n',
            "api.html": '<p><a href="guide/setup.html">Setup</a></p>\n',
        }
        results: dict[str, list[str]] = {path: [] for path in sources}
        lock = threading.Lock()

        def worker(path: str) -> None:
            md = Markdown(RenderContext.for_location(locate(site, path)))
            for _ in range(20):
                html = md(sources[path])
                with lock:
                    results[path].append(html)

        threads = [
            threading.Thread(target=worker, args=(path,)) for path in sources for _ in range(3)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for path, rendered in results.items():
            assert rendered == [expected[path]] * 60
