"""Deferred, composable URLs for external link directives.

A UrlResolver is a URL under construction: a base source plus a chain of
pending steps (append a path segment, set the fragment, substitute into a
template, reshape by pattern). Nothing is evaluated until the caller asks
for the result, so a property-backed base is only looked up when a
directive actually needs it.

Failures are values, not exceptions. Each step either produces the next
string form or a UrlError; evaluation stops at the first error, so an
error once recorded is never replaced by a later one. Only resolve()
raises, wrapping the structured error in UrlResolutionError for the
directive to re-raise with page context.

Example:
    >>> base = PropertyUrl("github.base_url", {"github.base_url": "https://github.com/a/b"})
    >>> (base / "issues" / "1").resolve()
    'https://github.com/a/b/issues/1'

    >>> PropertyUrl("github.base_url", {}).error.reason
    'property [github.base_url] is not defined'

Thread Safety:
Resolvers are immutable; every operation returns a new resolver.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Self, TypeAlias
from urllib.parse import urlsplit, urlunsplit

from huellas.errors import UrlResolutionError

# =============================================================================
# Structured errors
# =============================================================================


@dataclass(frozen=True, slots=True)
class UrlError:
    """Base class for URL resolution failures."""

    @property
    def reason(self) -> str:
        """Human readable reason, used verbatim in link error messages."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PropertyUndefined(UrlError):
    """The configuration has no entry for the property."""

    name: str

    @property
    def reason(self) -> str:
        return f"property [{self.name}] is not defined"


@dataclass(frozen=True, slots=True)
class InvalidPropertyUrl(UrlError):
    """The property is defined but its value is not a valid URL."""

    name: str
    value: str

    @property
    def reason(self) -> str:
        return f"property [{self.name}] contains an invalid URL [{self.value}]"


@dataclass(frozen=True, slots=True)
class InvalidUrl(UrlError):
    """The accumulated string is not a valid URL."""

    text: str

    @property
    def reason(self) -> str:
        return f"invalid URL [{self.text}]"


@dataclass(frozen=True, slots=True)
class PatternMismatch(UrlError):
    """The current URL does not have the shape a collect() step expects."""

    message: str = "pattern did not match"

    @property
    def reason(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class MissingScheme(UrlError):
    """A scheme-prefixed reference has no scheme separator."""

    text: str

    @property
    def reason(self) -> str:
        return "URL has no scheme"


# =============================================================================
# Validation and normalisation
# =============================================================================

# RFC 3986 reserved + unreserved characters, plus '%' for escapes
_URL_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PLACEHOLDER = re.compile(r"%s")

Step: TypeAlias = Callable[[str], str | UrlError]
Case: TypeAlias = tuple[str | re.Pattern[str], str | Callable[[re.Match[str]], str]]


def is_valid_url(text: str) -> bool:
    """Check URL syntax.

    Relative references are accepted; the check is purely syntactic.

    >>> is_valid_url("https://github.com/broken/project|")
    False
    """
    if not _URL_CHARS.fullmatch(text) or _BAD_ESCAPE.search(text):
        return False
    if text.count("#") > 1:
        return False
    try:
        parts = urlsplit(text)
        parts.port  # noqa: B018 - raises ValueError for a malformed port
    except ValueError:
        return False
    return True


def _is_valid_template(text: str) -> bool:
    """Like is_valid_url, allowing unfilled ``%s`` placeholders."""
    return is_valid_url(_PLACEHOLDER.sub("s", text))


def _normalize_path(path: str) -> str:
    """Remove "." and ".." segments; empty segments are kept."""
    if not path:
        return path
    absolute = path.startswith("/")
    parts = path.split("/")
    if absolute:
        parts = parts[1:]
    segments: list[str] = []
    for segment in parts:
        if segment == ".":
            continue
        if segment == "..":
            if segments and segments[-1] != "..":
                segments.pop()
            elif not absolute:
                segments.append("..")
            continue
        segments.append(segment)
    # "a/." and "a/.." name a directory
    if parts[-1] in (".", "..") and (not segments or segments[-1] != ""):
        segments.append("")
    result = "/".join(segments)
    return "/" + result if absolute else result


def normalize_url(text: str) -> str:
    """Normalize the path component of a syntactically valid URL.

    >>> normalize_url("https://example.com/a/./b/../c//d")
    'https://example.com/a/c//d'
    """
    parts = urlsplit(text)
    return urlunsplit(parts._replace(path=_normalize_path(parts.path)))


# =============================================================================
# Resolvers
# =============================================================================


class UrlResolver:
    """A URL under construction.

    Subclasses provide the base string via _origin(). Every operation
    returns a new resolver with one more pending step; none of them raise.
    """

    __slots__ = ("_steps",)

    def __init__(self, steps: tuple[Step, ...] = ()) -> None:
        self._steps = steps

    def _origin(self) -> str | UrlError:
        raise NotImplementedError

    def _with_steps(self, steps: tuple[Step, ...]) -> Self:
        raise NotImplementedError

    def _then(self, step: Step) -> Self:
        return self._with_steps((*self._steps, step))

    # -- operations ------------------------------------------------------------

    def append(self, segment: str) -> Self:
        """Append a path segment, joined with exactly one slash.

        Appending an empty segment ensures a trailing slash.
        """

        def step(current: str) -> str:
            if not segment:
                return current if current.endswith("/") else current + "/"
            return current.rstrip("/") + "/" + segment.lstrip("/")

        return self._then(step)

    __truediv__ = append

    def with_fragment(self, fragment: str) -> Self:
        """Set or replace the fragment; an empty fragment removes it."""

        def step(current: str) -> str:
            base = current.split("#", 1)[0]
            return f"{base}#{fragment}" if fragment else base

        return self._then(step)

    def format(self, *args: str) -> Self:
        """Substitute args into ``%s`` placeholders of the current string.

        Placeholders are filled in order; surplus args are ignored and
        other percent sequences (``%20``) are left alone.

        >>> Url("https://tools.ietf.org/html/rfc%s").format("2616").evaluate()
        'https://tools.ietf.org/html/rfc2616'
        """

        def step(current: str) -> str:
            remaining = iter(args)
            return _PLACEHOLDER.sub(lambda m: next(remaining, m.group(0)), current)

        return self._then(step)

    def collect(self, *cases: Case, otherwise: str | None = None) -> Self:
        """Reshape the current string with the first matching pattern.

        Args:
            cases: ``(pattern, build)`` pairs. The pattern must match the
                whole current string; build is either a template expanded
                with the match (``r"\\1/tree/master"``) or a callable
                receiving the match.
            otherwise: Reason recorded when no pattern matches

        Example:
            >>> Url("https://github.com/a/b/blob/x").collect(
            ...     (r"(.*github\\.com/[^/]+/[^/]+).*", r"\\1")
            ... ).evaluate()
            'https://github.com/a/b'
        """
        compiled = [(re.compile(pattern), build) for pattern, build in cases]

        def step(current: str) -> str | UrlError:
            for pattern, build in compiled:
                match = pattern.fullmatch(current)
                if match is not None:
                    return build(match) if callable(build) else match.expand(build)
            return PatternMismatch(otherwise) if otherwise else PatternMismatch()

        return self._then(step)

    # -- materialisation -------------------------------------------------------

    def evaluate(self) -> str | UrlError:
        """Current string form, or the first error recorded."""
        current = self._origin()
        for step in self._steps:
            if isinstance(current, UrlError):
                break
            current = step(current)
        return current

    def _materialize(self) -> str | UrlError:
        current = self.evaluate()
        if isinstance(current, UrlError):
            return current
        if not is_valid_url(current):
            return InvalidUrl(current)
        return normalize_url(current)

    @property
    def error(self) -> UrlError | None:
        """The error resolve() would report, or None."""
        result = self._materialize()
        return result if isinstance(result, UrlError) else None

    def resolve(self) -> str:
        """Validate and normalize the accumulated URL.

        Raises:
            UrlResolutionError: Carrying the first structured error
        """
        result = self._materialize()
        if isinstance(result, UrlError):
            raise UrlResolutionError(result)
        return result


class Url(UrlResolver):
    """Resolver over a literal URL."""

    __slots__ = ("text",)

    def __init__(self, text: str, steps: tuple[Step, ...] = ()) -> None:
        super().__init__(steps)
        self.text = text

    def _origin(self) -> str | UrlError:
        if not _is_valid_template(self.text):
            return InvalidUrl(self.text)
        return self.text

    def _with_steps(self, steps: tuple[Step, ...]) -> Url:
        return Url(self.text, steps)

    def __repr__(self) -> str:
        return f"Url({self.text!r}, steps={len(self._steps)})"


class PropertyUrl(UrlResolver):
    """Resolver whose base URL is a configuration property.

    The property is read lazily, on evaluation. An absent property and a
    property holding a malformed URL are reported as different errors.

    Args:
        name: Property name, e.g. ``github.base_url``
        lookup: Property mapping, or a callable returning the value or None
    """

    __slots__ = ("name", "_lookup")

    def __init__(
        self,
        name: str,
        lookup: Mapping[str, str] | Callable[[str], str | None],
        steps: tuple[Step, ...] = (),
    ) -> None:
        super().__init__(steps)
        self.name = name
        self._lookup = lookup

    def _origin(self) -> str | UrlError:
        if isinstance(self._lookup, Mapping):
            value = self._lookup.get(self.name)
        else:
            value = self._lookup(self.name)
        if value is None:
            return PropertyUndefined(self.name)
        if not _is_valid_template(value):
            return InvalidPropertyUrl(self.name, value)
        return value

    def _with_steps(self, steps: tuple[Step, ...]) -> PropertyUrl:
        return PropertyUrl(self.name, self._lookup, steps)

    def __repr__(self) -> str:
        return f"PropertyUrl({self.name!r}, steps={len(self._steps)})"


class FailedUrl(UrlResolver):
    """Resolver that carries an error from the start.

    Used where the link itself is malformed before any base URL is
    involved, so the failure still flows through the same channel.
    """

    __slots__ = ("_error",)

    def __init__(self, error: UrlError, steps: tuple[Step, ...] = ()) -> None:
        super().__init__(steps)
        self._error = error

    def _origin(self) -> str | UrlError:
        return self._error

    def _with_steps(self, steps: tuple[Step, ...]) -> FailedUrl:
        return FailedUrl(self._error, steps)

    def __repr__(self) -> str:
        return f"FailedUrl({self._error!r})"
