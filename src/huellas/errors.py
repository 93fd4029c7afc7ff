"""Exception classes for huellas.

Link errors are raised by directive handlers at the point where a final
link is materialized. They carry a fully formatted message plus the path
of the page that referenced the broken target, so a host building many
pages can report them without re-deriving context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from huellas.url import UrlError


class HuellasError(Exception):
    """Base exception for all huellas errors."""

    pass


class ParseError(HuellasError):
    """Malformed directive syntax.

    Raised by the directive scanner, for example when a container
    directive is never closed.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where the error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class InvalidAttributeError(HuellasError):
    """A directive attribute has a value its handler cannot use.

    Attributes:
        name: Directive name
        page: Path of the page holding the directive
        lineno: Line of the directive (1-indexed, 0 if unknown)
    """

    def __init__(self, message: str, name: str, page: str, lineno: int = 0) -> None:
        self.message = message
        self.name = name
        self.page = page
        self.lineno = lineno
        where = f"line {lineno} of [{page}]" if lineno else f"[{page}]"
        super().__init__(f"Invalid attributes for [{name}] directive on {where}: {message}")


class LinkError(HuellasError):
    """A directive could not produce a valid link.

    Attributes:
        message: Complete user-facing message
        page: Path of the page holding the directive
    """

    def __init__(self, message: str, page: str) -> None:
        self.message = message
        self.page = page
        super().__init__(message)


class UnknownPageError(LinkError):
    """An internal reference points at a page that does not exist."""

    def __init__(self, path: str, page: str) -> None:
        self.path = path
        super().__init__(f"Unknown page [{path}] referenced from [{page}]", page)


class ExternalLinkError(LinkError):
    """An external reference could not be resolved to a valid URL.

    The structured cause is kept on ``error`` so callers can tell an
    undefined property from a malformed URL or a link-shape mismatch.
    """

    def __init__(self, source: str, page: str, error: UrlError) -> None:
        self.source = source
        self.error = error
        super().__init__(
            f"Failed to resolve [{source}] referenced from [{page}] because {error.reason}",
            page,
        )


class UnresolvedSourceError(LinkError):
    """A directive source could not be turned into a reference string."""

    pass


class UnknownSnippetError(LinkError):
    """A snip directive names a source file that does not exist."""

    def __init__(self, path: str, page: str) -> None:
        self.path = path
        super().__init__(f"Unknown snippet [{path}] referenced from [{page}]", page)


class UnknownFiddleError(LinkError):
    """A fiddle directive names a source file that does not exist."""

    def __init__(self, path: str, page: str) -> None:
        self.path = path
        super().__init__(f"Unknown fiddle [{path}] referenced from [{page}]", page)


class SnippetFileNotFoundError(HuellasError, FileNotFoundError):
    """Snippet source file is missing."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(path)

    def __str__(self) -> str:
        return self.path


class MissingSnippetLabelError(HuellasError):
    """A requested snippet label never appears in the source file.

    Only raised when snippets are extracted in strict mode; otherwise the
    label yields an empty region and a warning is logged.
    """

    def __init__(self, path: str, label: str) -> None:
        self.path = path
        self.label = label
        super().__init__(f"Label [{label}] not found in snippet [{path}]")


class UrlResolutionError(HuellasError):
    """Carrier for a structured URL error leaving ``UrlResolver.resolve``.

    Directive handlers catch this and re-raise it as ExternalLinkError
    with page context attached.
    """

    def __init__(self, error: UrlError) -> None:
        self.error = error
        super().__init__(error.reason)
