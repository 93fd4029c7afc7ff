"""External link directives built from configured URL templates.

Markdown:
    @extref[RFC 2616](rfc:2616)
    @scaladoc[Http](akka.http.scaladsl.Http)
    @github[#1](#1)
    @github[Directive.scala](core/src/main/scala/Directive.scala)

Each directive maps its source onto a UrlResolver rooted at one or more
``*.base_url`` properties. The resolver collects the first failure as a
value; it surfaces here as ExternalLinkError, naming the source, the page
and the reason:

    Failed to resolve [#1] referenced from [index.html] because
    property [github.base_url] is not defined

Thread Safety:
Handlers hold a read-only RenderContext. Safe for concurrent use.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

from huellas.directives.protocol import InlineDirective
from huellas.errors import ExternalLinkError, UrlResolutionError
from huellas.url import FailedUrl, MissingScheme, PropertyUrl, Url, UrlResolver

if TYPE_CHECKING:
    from huellas.context import RenderContext
    from huellas.nodes import Directive
    from huellas.printer import Printer
    from huellas.renderers.html import HtmlRenderer


class ExternalLinkDirective(InlineDirective):
    """Base for inline directives that link outside the site.

    Subclasses implement resolve_link(), mapping the directive source to
    a UrlResolver.
    """

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    def resolve_link(self, link: str) -> UrlResolver:
        raise NotImplementedError

    def render(self, node: Directive, renderer: HtmlRenderer, printer: Printer) -> None:
        link = renderer.source_text(node, self.context.path)
        renderer.render_link(self.resolve(link), node.label_nodes, printer)

    def resolve(self, link: str) -> str:
        """Resolve link to a validated URL.

        Raises:
            ExternalLinkError: If any resolution step failed
        """
        try:
            return self.resolve_link(link).resolve()
        except UrlResolutionError as e:
            raise ExternalLinkError(link, self.context.path, e.error) from e


class ExtRefDirective(ExternalLinkDirective):
    """Handler for ``@extref``: ``scheme:expression`` through a URL template.

    ``@extref[RFC 2616](rfc:2616)`` substitutes ``2616`` into the ``%s``
    of ``extref.rfc.base_url``.
    """

    names: ClassVar[tuple[str, ...]] = ("extref", "extref:")

    def resolve_link(self, link: str) -> UrlResolver:
        scheme, sep, expression = link.partition(":")
        if not sep:
            return FailedUrl(MissingScheme(link))
        return PropertyUrl(f"extref.{scheme}.base_url", self.context.properties).format(
            expression
        )


class ScaladocDirective(ExternalLinkDirective):
    """Handler for ``@scaladoc``: API docs chosen by longest package prefix.

    Given ``scaladoc.akka.base_url`` and ``scaladoc.akka.http.base_url``,
    ``akka.http.scaladsl.Http`` links under the latter. Symbols with no
    configured prefix fall back to ``scaladoc.base_url``.
    """

    names: ClassVar[tuple[str, ...]] = ("scaladoc", "scaladoc:")

    def resolve_link(self, link: str) -> UrlResolver:
        return (self.base_url(link) / "").with_fragment(link)

    def base_url(self, symbol: str) -> PropertyUrl:
        """Property resolver for the longest configured prefix of symbol."""
        properties = self.context.properties
        for prefix in candidate_prefixes(symbol):
            name = f"scaladoc.{prefix}.base_url"
            if name in properties:
                return PropertyUrl(name, properties)
        return PropertyUrl("scaladoc.base_url", properties)


def candidate_prefixes(symbol: str) -> list[str]:
    """Enclosing packages of symbol, longest first.

    The symbol itself is not a candidate.

    >>> candidate_prefixes("akka.http.Http")
    ['akka.http', 'akka']
    """
    levels = [level for level in symbol.split(".") if level]
    return [".".join(levels[:size]) for size in range(len(levels) - 1, 0, -1)]


class GitHubDirective(ExternalLinkDirective):
    """Handler for ``@github``: issues, commits and source files.

    Sources, tried in order:
    - ``#123`` or ``owner/repo#123``: an issue
    - ``abc1234``, ``@abc1234`` or ``owner/repo@abc1234``: a commit
    - anything else: a path in the project's source tree

    References without ``owner/repo`` use the project of the
    ``github.base_url`` property. A base URL pointing at a tree
    (``.../tree/v1.0``) is used as is for source paths; a bare project
    URL browses ``master``.
    """

    names: ClassVar[tuple[str, ...]] = ("github", "github:")

    ISSUES_LINK = re.compile(r"([^/]+/[^/]+)?#([0-9]+)")
    COMMIT_LINK = re.compile(r"(([^/]+/[^/]+)?@)?([0-9a-fA-F]{5,40})")

    def __init__(self, context: RenderContext, host: str = "github.com") -> None:
        super().__init__(context)
        self.host = host
        escaped = re.escape(host)
        self.tree_url = re.compile(rf"(.*{escaped}/[^/]+/[^/]+/tree/[^/]+)")
        self.project_url = re.compile(rf"(.*{escaped}/[^/]+/[^/]+).*")

    @property
    def base_url(self) -> PropertyUrl:
        return PropertyUrl("github.base_url", self.context.properties)

    def resolve_link(self, link: str) -> UrlResolver:
        if match := self.ISSUES_LINK.fullmatch(link):
            project, issue = match.groups()
            return self.resolve_project(project) / "issues" / issue
        if match := self.COMMIT_LINK.fullmatch(link):
            _, project, commit = match.groups()
            return self.resolve_project(project) / "commit" / commit
        return self.resolve_tree() / link

    def resolve_project(self, project: str | None) -> UrlResolver:
        if project is not None:
            return Url(f"https://{self.host}") / project
        return self.base_url.collect(
            (self.project_url, r"\1"),
            otherwise="[github.base_url] is not a project URL",
        )

    def resolve_tree(self) -> UrlResolver:
        return self.base_url.collect(
            (self.tree_url, r"\1"),
            (self.project_url, r"\1/tree/master"),
            otherwise="[github.base_url] is not a project or versioned tree URL",
        )
