"""Output sink for rendered HTML fragments.

Directive handlers never return HTML. They print into the Printer owned by
the current render call, the same way the serializer prints everything
else. Parts are accumulated in a list and joined once at the end.

Thread Safety:
A Printer is created per render() call and never shared.
"""

from __future__ import annotations


class Printer:
    """Append-only HTML sink.

    Usage:
        >>> printer = Printer()
        >>> printer.print("<p>").print("Hello").print("</p>")
        >>> printer.build()
        '<p>Hello</p>'

    ``println`` starts a new line only when the output does not already
    end with one, so block-level handlers can call it unconditionally.
    """

    __slots__ = ("_parts", "_at_line_start")

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._at_line_start = True

    def print(self, text: str) -> Printer:
        """Append text verbatim (empty strings are skipped)."""
        if text:
            self._parts.append(text)
            self._at_line_start = text.endswith("\n")
        return self

    def println(self) -> Printer:
        """Terminate the current line unless already at a line start."""
        if not self._at_line_start:
            self._parts.append("\n")
            self._at_line_start = True
        return self

    def print_line(self, text: str) -> Printer:
        """Print text on a line of its own."""
        return self.println().print(text).println()

    def build(self) -> str:
        """Join everything printed so far."""
        return "".join(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
