"""Tests for the snip and fiddle directives."""

from pathlib import Path
from urllib.parse import unquote_plus

import pytest

from huellas import (
    Markdown,
    MissingSnippetLabelError,
    Page,
    RenderConfig,
    RenderContext,
    UnknownFiddleError,
    UnknownSnippetError,
)
from huellas.directives.builtins.snip import FIDDLE_BASE_URL, FIDDLE_TEMPLATE

HELLO = """\
object Hello {
  // #hello
  def main(args: Array[String]): Unit =
    println("Hello")
  // #hello
}
"""


@pytest.fixture
def docs(tmp_path: Path) -> Path:
    code = tmp_path / "code"
    code.mkdir()
    (code / "Hello.scala").write_text(HELLO)
    (code / "build.conf").write_text("a = 1\n")
    return tmp_path


def render_page(docs: Path, source: str, config: RenderConfig | None = None) -> str:
    page = Page("index.html", "Home", file=docs / "index.md")
    return Markdown(RenderContext(page, config or RenderConfig()))(source)


class TestSnip:
    """Labeled excerpts rendered as code blocks."""

    def test_labeled_region(self, docs: Path) -> None:
        html = render_page(docs, "@@snip [Hello.scala](code/Hello.scala) { #hello }")
        assert html == (
            '<pre class="prettyprint"><code class="language-scala">'
            "def main(args: Array[String]): Unit =\n"
            "  println(&quot;Hello&quot;)"
            "</code></pre>\n"
        )

    def test_whole_file(self, docs: Path) -> None:
        html = render_page(docs, "@@snip [Hello.scala](code/Hello.scala)")
        assert "object Hello {\n  def main" in html
        assert "#hello" not in html

    def test_type_overrides_extension(self, docs: Path) -> None:
        html = render_page(docs, "@@snip [conf](code/build.conf) { type=properties }")
        assert '<code class="language-properties">a = 1</code>' in html

    def test_language_from_extension(self, docs: Path) -> None:
        html = render_page(docs, "@@snip [conf](code/build.conf)")
        assert '<code class="language-hocon">' in html

    def test_between_paragraphs(self, docs: Path) -> None:
        html = render_page(docs, "Before\n@@snip [x](code/build.conf)\nAfter")
        assert html == (
            "<p>Before</p>\n"
            '<pre class="prettyprint"><code class="language-hocon">a = 1</code></pre>\n'
            "<p>After</p>\n"
        )

    def test_reference_style_source(self, docs: Path) -> None:
        html = render_page(docs, "@@snip [x][conf]\n\n[conf]: code/build.conf")
        assert "a = 1" in html

    def test_unknown_snippet(self, docs: Path) -> None:
        with pytest.raises(UnknownSnippetError) as exc_info:
            render_page(docs, "@@snip [Missing.scala](code/Missing.scala)")

        missing = docs / "code" / "Missing.scala"
        assert str(exc_info.value) == f"Unknown snippet [{missing}] referenced from [index.html]"
        assert exc_info.value.page == "index.html"

    def test_missing_label_strict(self, docs: Path) -> None:
        config = RenderConfig(strict_snippets=True)
        with pytest.raises(MissingSnippetLabelError):
            render_page(docs, "@@snip [x](code/Hello.scala) { #nope }", config)

    def test_missing_label_lenient(self, docs: Path) -> None:
        html = render_page(docs, "@@snip [x](code/Hello.scala) { #nope }")
        assert html == '<pre class="prettyprint"><code class="language-scala"></code></pre>\n'

    def test_inline_use_is_dropped(self, docs: Path) -> None:
        html = render_page(docs, "See @snip[x](code/build.conf) here")
        assert html == "<p>See  here</p>\n"


def iframe_source(html: str) -> str:
    src = html.split('src="', 1)[1].split('"', 1)[0].replace("&amp;", "&")
    return unquote_plus(src.split("&source=", 1)[1])


class TestFiddle:
    """Snippets embedded as fiddle iframes."""

    def test_default_iframe(self, docs: Path) -> None:
        html = render_page(docs, "@@fiddle [Hello.scala](code/Hello.scala) { #hello }")

        assert html.startswith('<iframe class="fiddle" src="')
        assert f'src="{FIDDLE_BASE_URL}?theme=light&amp;source=' in html
        assert html.endswith('" frameborder="0" style="overflow: hidden;"></iframe>\n')
        assert "width=" not in html

    def test_source_is_wrapped_in_template(self, docs: Path) -> None:
        html = render_page(docs, "@@fiddle [Hello.scala](code/Hello.scala) { #hello }")

        expected = FIDDLE_TEMPLATE.format(
            text='def main(args: Array[String]): Unit =\n  println("Hello")'
        )
        assert iframe_source(html) == expected
        assert "// $FiddleStart" in expected
        assert "object ScalaFiddle {" in expected

    def test_custom_attributes(self, docs: Path) -> None:
        source = (
            "@@fiddle [Hello.scala](code/Hello.scala) "
            '{ #hello cssClass=demo width=100% height=300 baseUrl=https://fiddle.example.com '
            'extraParams=theme=dark&layout=v75 cssStyle="border: 0;" }'
        )
        html = render_page(docs, source)

        assert html.startswith(
            '<iframe class="demo" width="100%" height="300" '
            'src="https://fiddle.example.com?theme=dark&amp;layout=v75&amp;source='
        )
        assert html.endswith('" frameborder="0" style="border: 0;"></iframe>\n')

    def test_unknown_fiddle(self, docs: Path) -> None:
        with pytest.raises(UnknownFiddleError) as exc_info:
            render_page(docs, "@@fiddle [x](code/Nope.scala)")

        missing = docs / "code" / "Nope.scala"
        assert str(exc_info.value) == f"Unknown fiddle [{missing}] referenced from [index.html]"

    def test_page_without_file_resolves_from_working_directory(
        self, docs: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(docs)
        context = RenderContext(Page("index.html", "Home"))

        html = Markdown(context)("@@fiddle [x](code/build.conf)")

        assert iframe_source(html) == FIDDLE_TEMPLATE.format(text="a = 1")
