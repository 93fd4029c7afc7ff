"""Tests for the extref and scaladoc directives."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from huellas import ExternalLinkError, Page, RenderConfig, RenderContext
from huellas.directives.builtins import ScaladocDirective
from huellas.directives.builtins.external import candidate_prefixes
from huellas.url import MissingScheme

EXTREF = {
    "extref.rfc.base_url": "https://tools.ietf.org/html/rfc%s",
    "extref.issue.base_url": "https://example.org/issues/%s/view",
}

SCALADOC = {
    "scaladoc.base_url": "https://example.org/api/default/",
    "scaladoc.akka.base_url": "https://doc.akka.io/api/akka/2.6",
    "scaladoc.akka.http.base_url": "https://doc.akka.io/api/akka-http/10.2",
}


class TestExtRef:
    """URL templates selected by scheme."""

    def test_substitutes_expression(self, markdown) -> None:
        html = markdown("@extref[RFC 2616](rfc:2616)", EXTREF)
        assert html == '<p><a href="https://tools.ietf.org/html/rfc2616">RFC 2616</a></p>\n'

    def test_placeholder_in_the_middle(self, markdown) -> None:
        html = markdown("@extref:[Bug](issue:42)", EXTREF)
        assert 'href="https://example.org/issues/42/view"' in html

    def test_reference_style_source(self, markdown) -> None:
        source = "@extref[RFC][rfc2616]\n\n[rfc2616]: rfc:2616\n"
        html = markdown(source, EXTREF)
        assert html == '<p><a href="https://tools.ietf.org/html/rfc2616">RFC</a></p>\n'

    def test_missing_scheme(self, markdown) -> None:
        with pytest.raises(ExternalLinkError) as exc_info:
            markdown("@extref[RFC](2616)", EXTREF)

        assert str(exc_info.value) == (
            "Failed to resolve [2616] referenced from [test.html] because URL has no scheme"
        )
        assert exc_info.value.error == MissingScheme("2616")

    def test_unknown_scheme(self, markdown) -> None:
        with pytest.raises(ExternalLinkError, match=r"property \[extref\.jira\.base_url\]"):
            markdown("@extref[Ticket](jira:1)", EXTREF)

    def test_expression_with_spaces_is_invalid(self, markdown) -> None:
        with pytest.raises(ExternalLinkError, match=r"invalid URL"):
            markdown("@extref[RFC](rfc:26 16)", EXTREF)


class TestScaladoc:
    """API links chosen by the longest configured package prefix."""

    def test_longest_prefix_wins(self, markdown) -> None:
        html = markdown("@scaladoc[Http](akka.http.scaladsl.Http)", SCALADOC)
        assert html == (
            '<p><a href="https://doc.akka.io/api/akka-http/10.2/#akka.http.scaladsl.Http">'
            "Http</a></p>\n"
        )

    def test_shorter_prefix(self, markdown) -> None:
        html = markdown("@scaladoc[ActorSystem](akka.actor.ActorSystem)", SCALADOC)
        assert 'href="https://doc.akka.io/api/akka/2.6/#akka.actor.ActorSystem"' in html

    def test_falls_back_to_unscoped_base_url(self, markdown) -> None:
        html = markdown("@scaladoc:[Option](scala.Option)", SCALADOC)
        assert 'href="https://example.org/api/default/#scala.Option"' in html

    def test_no_base_url(self, markdown) -> None:
        with pytest.raises(ExternalLinkError) as exc_info:
            markdown("@scaladoc[Option](scala.Option)")

        assert str(exc_info.value) == (
            "Failed to resolve [scala.Option] referenced from [test.html] "
            "because property [scaladoc.base_url] is not defined"
        )

    def test_symbol_is_not_its_own_prefix(self, markdown) -> None:
        properties = {
            **SCALADOC,
            "scaladoc.akka.actor.ActorSystem.base_url": "https://wrong.example.com/",
        }
        html = markdown("@scaladoc[ActorSystem](akka.actor.ActorSystem)", properties)
        assert 'href="https://doc.akka.io/api/akka/2.6/#akka.actor.ActorSystem"' in html

    def test_candidate_prefixes(self) -> None:
        assert candidate_prefixes("akka.http.Http") == ["akka.http", "akka"]
        assert candidate_prefixes("Http") == []
        assert candidate_prefixes("") == []


segments = st.lists(st.from_regex(r"[a-z]{1,4}", fullmatch=True), min_size=1, max_size=5)


class TestScaladocProperties:
    """Property-based tests for prefix selection."""

    @given(levels=segments, data=st.data())
    @settings(max_examples=100)
    def test_selects_longest_configured_prefix(self, levels: list[str], data) -> None:
        configured = data.draw(
            st.sets(st.integers(min_value=1, max_value=len(levels))), label="configured"
        )
        properties = {
            f"scaladoc.{'.'.join(levels[:size])}.base_url": f"https://docs.example.com/{size}"
            for size in configured
        }
        context = RenderContext(Page("test.html", "Test"), RenderConfig(properties=properties))

        chosen = ScaladocDirective(context).base_url(".".join(levels)).name

        # The full symbol is never a prefix of itself
        enclosing = {size for size in configured if size < len(levels)}
        if enclosing:
            longest = max(enclosing)
            assert chosen == f"scaladoc.{'.'.join(levels[:longest])}.base_url"
        else:
            assert chosen == "scaladoc.base_url"
