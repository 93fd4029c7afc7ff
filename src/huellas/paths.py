"""Page path helpers.

Page paths are POSIX-style and relative to the site root, e.g.
``guide/install.html``. References inside a page are relative to that
page's directory unless they start with ``/``.
"""

from __future__ import annotations

import posixpath


def split_fragment(path: str) -> tuple[str, str]:
    """Split ``page.md#section`` into ``("page.md", "#section")``."""
    base, sep, fragment = path.partition("#")
    return base, sep + fragment


def resolve(current: str, ref: str) -> str:
    """Resolve ref against the directory of the current page.

    >>> resolve("guide/install.html", "../index.html")
    'index.html'
    >>> resolve("guide/install.html", "/api/index.html")
    'api/index.html'
    >>> resolve("guide/install.html", "#usage")
    'guide/install.html'
    """
    ref, _ = split_fragment(ref)
    if not ref:
        return current
    if ref.startswith("/"):
        joined = ref.lstrip("/")
    else:
        joined = posixpath.join(posixpath.dirname(current), ref)
    normalized = posixpath.normpath(joined) if joined else ""
    return "" if normalized == "." else normalized


def relative(current: str, target: str) -> str:
    """Href that leads from the current page to target.

    >>> relative("guide/install.html", "api/index.html")
    '../api/index.html'
    >>> relative("index.html", "index.html")
    'index.html'
    """
    target, fragment = split_fragment(target)
    start = posixpath.dirname(current) or "."
    return posixpath.relpath(target, start) + fragment


def convert(path: str, source_suffix: str = ".md", link_suffix: str = ".html") -> str:
    """Rewrite a source page reference to its rendered form.

    Only a trailing source suffix is replaced; fragments are preserved.

    >>> convert("readme.md#usage")
    'readme.html#usage'
    >>> convert("docs/")
    'docs/'
    """
    base, fragment = split_fragment(path)
    if base.endswith(source_suffix):
        base = base.removesuffix(source_suffix) + link_suffix
    return base + fragment
