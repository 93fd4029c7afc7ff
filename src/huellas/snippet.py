"""Labeled snippet extraction from source files.

Regions of a source file are delimited by marker comments naming a label:

    object Hello {
      // #hello
      def main(args: Array[String]): Unit =
        println("Hello")
      // #hello
    }

Extracting ``hello`` yields the two lines between the markers, with the
indentation of the region removed. Marker lines themselves never appear
in a snippet, whether or not their label was requested.

Example:
    >>> extract("src/Hello.scala", ["hello"])
    'def main(args: Array[String]): Unit =\\n  println("Hello")'
    >>> language("src/Hello.scala")
    'scala'
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from huellas.errors import MissingSnippetLabelError, SnippetFileNotFoundError
from huellas.utils.logger import get_logger

logger = get_logger(__name__)

# A comment holding nothing but "#label", in any common comment syntax
_MARKER = re.compile(
    r"^\s*(?://|#|--|/\*|<!--|;)\s*#(?P<label>[\w\-]+)\s*(?:\*/|-->)?\s*$"
)

# File extension -> highlighting language
LANGUAGES: dict[str, str] = {
    "scala": "scala",
    "sc": "scala",
    "sbt": "scala",
    "java": "java",
    "kt": "kotlin",
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cs": "csharp",
    "sh": "bash",
    "bash": "bash",
    "sql": "sql",
    "xml": "xml",
    "html": "html",
    "css": "css",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "conf": "hocon",
    "proto": "protobuf",
    "md": "markdown",
}

DEFAULT_LANGUAGE = "text"


def language(path: str | PathLike[str]) -> str:
    """Highlighting language inferred from the file extension."""
    suffix = Path(path).suffix.lstrip(".").lower()
    return LANGUAGES.get(suffix, DEFAULT_LANGUAGE)


def extract(
    path: str | PathLike[str],
    labels: Sequence[str] = (),
    *,
    strict: bool = False,
) -> str:
    """Extract a snippet from a source file.

    Args:
        path: Source file
        labels: Region labels to include; empty means the whole file
        strict: Raise instead of warning when a label is never found

    Returns:
        Snippet text without a trailing newline

    Raises:
        SnippetFileNotFoundError: If the file does not exist
        MissingSnippetLabelError: If strict and a label is never found
    """
    file = Path(path)
    try:
        text = file.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as e:
        raise SnippetFileNotFoundError(str(path)) from e

    lines = text.splitlines()
    if not labels:
        return "\n".join(line for line in lines if not _MARKER.match(line))

    wanted = frozenset(labels)
    seen: set[str] = set()
    active: set[str] = set()
    regions: list[list[str]] = []

    for line in lines:
        marker = _MARKER.match(line)
        if marker:
            label = marker.group("label")
            if label in wanted:
                seen.add(label)
                opening = not active
                active ^= {label}
                if opening:
                    regions.append([])
            continue
        if active:
            regions[-1].append(line)

    for label in labels:
        if label not in seen:
            if strict:
                raise MissingSnippetLabelError(str(path), label)
            logger.warning("Label %r not found in snippet %s", label, path)

    if not regions:
        return ""

    indent = _indentation(regions[0])
    return "\n".join(line[_leading(line, indent) :] for region in regions for line in region)


def _indentation(lines: list[str]) -> int:
    """Smallest indentation among non-blank lines."""
    widths = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    return min(widths, default=0)


def _leading(line: str, limit: int) -> int:
    """Number of leading whitespace characters to strip, at most limit."""
    count = 0
    while count < limit and count < len(line) and line[count].isspace():
        count += 1
    return count
