"""Directive-syntax parser producing the huellas AST.

A deliberately narrow scanner: it recognises directive syntax, fenced
code blocks, link reference definitions and paragraphs, and nothing else
of Markdown. Hosts with a full Markdown tokenizer build the same node
types themselves and skip this module.

Syntax:
    Inline, inside paragraph text (the label is required, and spaces
    before the attribute block are consumed with it):
        @name[label](source){attrs}
        @name[label][reference]{attrs}

    Leaf block, a line of its own:
        @@name [label](source) { attrs }

    Container block, closed by a bare ``@@@`` line; containers nest:
        @@@ name [label](source) { attrs }
        ...
        @@@

A backslash before punctuation (``\\@``, ``\\[``) produces a SpecialText
node, so an escaped ``@`` never starts a directive.

Thread Safety:
Parser instances are single-use and not thread-safe. Create one per
parse operation. The resulting AST is immutable and thread-safe.
"""

from __future__ import annotations

import re
import string
from collections.abc import Sequence
from dataclasses import dataclass

from huellas.directives.attributes import EMPTY_ATTRIBUTES, DirectiveAttributes
from huellas.directives.protocol import DirectiveFormat
from huellas.errors import ParseError
from huellas.nodes import (
    EMPTY,
    Block,
    Direct,
    Directive,
    Document,
    Inline,
    Paragraph,
    Ref,
    Source,
    SpecialText,
    Text,
    Verbatim,
    normalize_reference,
)

_FENCE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_REFERENCE_DEF = re.compile(
    r"^ {0,3}\[(?P<key>[^\]]+)\]:\s*(?:<(?P<bracketed>[^>]*)>|(?P<target>\S+))(?:\s+.*)?$"
)
_CONTAINER_OPEN = re.compile(r"^\s*@@@\s*(?P<name>[A-Za-z][\w\-]*:?)(?P<rest>.*)$")
_CONTAINER_CLOSE = re.compile(r"^\s*@@@\s*$")
_LEAF = re.compile(r"^\s*@@(?P<name>[A-Za-z][\w\-]*:?)(?P<rest>.*)$")
_NAME = re.compile(r"[A-Za-z][\w\-]*:?")

_ESCAPABLE = frozenset(string.punctuation)


@dataclass(frozen=True, slots=True)
class _Header:
    """Everything after a directive name: label, source and attributes."""

    label: str | None
    source: Source
    attributes: str | None
    end: int


class Parser:
    """Parser for directive-flavoured Markdown.

    Usage:
        >>> doc = Parser("See @ref[setup](setup.md).").parse()
        >>> doc.children[0].children[1].name
        'ref'
    """

    __slots__ = ("_source", "_source_file", "_references")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize parser with source text.

        Args:
            source: Markdown source text
            source_file: Optional source file path for error messages
        """
        self._source = source
        self._source_file = source_file
        self._references: dict[str, str] = {}

    def parse(self) -> Document:
        """Parse source into a Document.

        Raises:
            ParseError: If a container directive is never closed, or a
                directive header or attribute block is malformed
        """
        children = self._parse_blocks(self._source.splitlines(), 1)
        return Document(children, references=dict(self._references), lineno=1)

    # =========================================================================
    # Blocks
    # =========================================================================

    def _parse_blocks(self, lines: Sequence[str], first_lineno: int) -> tuple[Block, ...]:
        blocks: list[Block] = []
        paragraph: list[str] = []
        paragraph_start = first_lineno

        def flush() -> None:
            if paragraph:
                text = "\n".join(paragraph)
                blocks.append(
                    Paragraph(self._parse_inlines(text, paragraph_start), lineno=paragraph_start)
                )
                paragraph.clear()

        index = 0
        while index < len(lines):
            line = lines[index]
            lineno = first_lineno + index

            if not line.strip():
                flush()
                index += 1
                continue

            if fence := _FENCE.match(line):
                flush()
                block, index = self._parse_fence(lines, index, first_lineno, fence)
                blocks.append(block)
                continue

            if not _CONTAINER_CLOSE.match(line):
                if container := _CONTAINER_OPEN.match(line):
                    flush()
                    block, index = self._parse_container(lines, index, first_lineno, container)
                    blocks.append(block)
                    continue

                if (leaf := _LEAF.match(line)) and (node := self._parse_leaf(leaf, lineno)):
                    flush()
                    blocks.append(node)
                    index += 1
                    continue

            if not paragraph and (definition := _REFERENCE_DEF.match(line)):
                target = definition.group("bracketed")
                if target is None:
                    target = definition.group("target")
                # First definition wins
                self._references.setdefault(normalize_reference(definition.group("key")), target)
                index += 1
                continue

            if not paragraph:
                paragraph_start = lineno
            paragraph.append(line.strip())
            index += 1

        flush()
        return tuple(blocks)

    def _parse_fence(
        self,
        lines: Sequence[str],
        index: int,
        first_lineno: int,
        fence: re.Match[str],
    ) -> tuple[Verbatim, int]:
        """Fenced code block; an unclosed fence runs to the end of input."""
        marker = fence.group("fence")
        indent = len(fence.group("indent"))
        info = fence.group("info").strip()
        language = info.split()[0] if info else None

        body: list[str] = []
        end = index + 1
        while end < len(lines) and not _closes_fence(lines[end], marker):
            body.append(_dedent(lines[end], indent))
            end += 1

        node = Verbatim("\n".join(body), language, lineno=first_lineno + index)
        return node, end + 1

    def _parse_leaf(self, match: re.Match[str], lineno: int) -> Directive | None:
        """Leaf directive, or None if the line is not one after all."""
        rest = match.group("rest")
        header = _scan_header(rest, 0, spaced=True)
        if header is None or rest[header.end :].strip():
            return None
        name = match.group("name")
        label = header.label or ""
        return Directive(
            DirectiveFormat.LEAF_BLOCK,
            name,
            label=_unescape(label),
            source=header.source,
            attributes=self._attributes(name, header.attributes, lineno),
            contents=label,
            children=self._parse_inlines(label, lineno),
            lineno=lineno,
        )

    def _parse_container(
        self,
        lines: Sequence[str],
        index: int,
        first_lineno: int,
        match: re.Match[str],
    ) -> tuple[Directive, int]:
        name = match.group("name")
        lineno = first_lineno + index
        rest = match.group("rest")
        header = _scan_header(rest, 0, spaced=True)
        if header is None or rest[header.end :].strip():
            msg = f"Malformed container directive header: @@@ {name}{rest}"
            raise ParseError(msg, lineno, self._source_file)

        depth = 1
        fence: str | None = None
        body_start = index + 1
        end = body_start
        while end < len(lines):
            line = lines[end]
            if fence is not None:
                if _closes_fence(line, fence):
                    fence = None
            elif opening := _FENCE.match(line):
                fence = opening.group("fence")
            elif _CONTAINER_CLOSE.match(line):
                depth -= 1
                if depth == 0:
                    break
            elif _CONTAINER_OPEN.match(line):
                depth += 1
            end += 1
        else:
            msg = f"Unclosed container directive '{name}'"
            raise ParseError(msg, lineno, self._source_file)

        body = lines[body_start:end]
        label = header.label or ""
        node = Directive(
            DirectiveFormat.CONTAINER_BLOCK,
            name,
            label=_unescape(label),
            source=header.source,
            attributes=self._attributes(name, header.attributes, lineno),
            contents="\n".join(body),
            children=self._parse_blocks(body, first_lineno + body_start),
            lineno=lineno,
        )
        return node, end + 1

    # =========================================================================
    # Inlines
    # =========================================================================

    def _parse_inlines(self, text: str, lineno: int) -> tuple[Inline, ...]:
        nodes: list[Inline] = []
        buffer: list[str] = []
        buffer_start = 0

        def line_at(pos: int) -> int:
            return lineno + text.count("\n", 0, pos)

        def flush() -> None:
            if buffer:
                nodes.append(Text("".join(buffer), lineno=line_at(buffer_start)))
                buffer.clear()

        pos = 0
        while pos < len(text):
            char = text[pos]

            if char == "\\" and pos + 1 < len(text) and text[pos + 1] in _ESCAPABLE:
                flush()
                nodes.append(SpecialText(text[pos + 1], lineno=line_at(pos)))
                pos += 2
                continue

            if char == "@" and _can_start_directive(text, pos):
                scanned = self._scan_inline_directive(text, pos, line_at(pos))
                if scanned is not None:
                    flush()
                    node, pos = scanned
                    nodes.append(node)
                    continue

            if not buffer:
                buffer_start = pos
            buffer.append(char)
            pos += 1

        flush()
        return tuple(nodes)

    def _scan_inline_directive(
        self, text: str, pos: int, lineno: int
    ) -> tuple[Directive, int] | None:
        name = _NAME.match(text, pos + 1)
        if name is None:
            return None
        header = _scan_header(text, name.end(), spaced=False)
        if header is None or header.label is None:
            return None
        node = Directive(
            DirectiveFormat.INLINE,
            name.group(0),
            label=_unescape(header.label),
            source=header.source,
            attributes=self._attributes(name.group(0), header.attributes, lineno),
            contents=header.label,
            children=self._parse_inlines(header.label, lineno),
            lineno=lineno,
        )
        return node, header.end

    def _attributes(self, name: str, text: str | None, lineno: int) -> DirectiveAttributes:
        if text is None:
            return EMPTY_ATTRIBUTES
        try:
            return DirectiveAttributes.parse(text)
        except ValueError as e:
            msg = f"Invalid attributes for directive '{name}': {e}"
            raise ParseError(msg, lineno, self._source_file) from e


# =============================================================================
# Scanning helpers
# =============================================================================


def _scan_header(text: str, pos: int, *, spaced: bool) -> _Header | None:
    """Scan ``[label](source){attrs}`` starting at pos.

    Every part is optional. ``spaced`` allows whitespace before the label,
    as block directives do; whitespace before the attribute block is
    always allowed and consumed. Returns None if the label or source is
    opened but never closed; an unclosed attribute block is left as text.
    """
    if spaced:
        pos = _skip_spaces(text, pos)

    label: str | None = None
    if pos < len(text) and text[pos] == "[":
        end = _match_bracket(text, pos, "[", "]")
        if end < 0:
            return None
        label = text[pos + 1 : end]
        pos = end + 1

    source: Source = EMPTY
    if pos < len(text) and text[pos] == "(":
        end = _match_bracket(text, pos, "(", ")")
        if end < 0:
            return None
        source = Direct(text[pos + 1 : end].strip())
        pos = end + 1
    elif label is not None and pos < len(text) and text[pos] == "[":
        end = _match_bracket(text, pos, "[", "]")
        if end < 0:
            return None
        # Collapsed "[label][]" uses the label as the key
        source = Ref(text[pos + 1 : end] or label)
        pos = end + 1

    attributes: str | None = None
    start = _skip_spaces(text, pos)
    if start < len(text) and text[start] == "{":
        end = _match_brace(text, start)
        if end >= 0:
            attributes = text[start + 1 : end]
            pos = end + 1

    return _Header(label, source, attributes, pos)


def _match_bracket(text: str, pos: int, opening: str, closing: str) -> int:
    """Index of the bracket closing the one at pos, or -1."""
    depth = 0
    index = pos
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return -1


def _match_brace(text: str, pos: int) -> int:
    """Index of the ``}`` closing the attribute block at pos, or -1."""
    quote: str | None = None
    for index in range(pos + 1, len(text)):
        char = text[index]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "}":
            return index
    return -1


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos


def _can_start_directive(text: str, pos: int) -> bool:
    """``@`` inside a word (``user@example.com``) is plain text."""
    if pos == 0:
        return True
    previous = text[pos - 1]
    return not (previous.isalnum() or previous in "@_")


def _unescape(text: str) -> str:
    return re.sub(r"\\([!-/:-@\[-`{-~])", r"\1", text)


def _closes_fence(line: str, marker: str) -> bool:
    stripped = line.strip()
    return (
        len(stripped) >= len(marker)
        and set(stripped) == {marker[0]}
        and len(line) - len(line.lstrip(" ")) < 4
    )


def _dedent(line: str, indent: int) -> str:
    """Strip up to indent leading spaces."""
    count = 0
    while count < indent and count < len(line) and line[count] == " ":
        count += 1
    return line[count:]
