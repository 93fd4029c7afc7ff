"""Attribute bag attached to every directive node.

Attributes come from the optional ``{...}`` block after a directive:

    @@snip [Hello.scala](code/Hello.scala) { #hello type=scala }
    @@toc { depth=2 .sidebar }

Three kinds of entries are recognised:
- ``#name``: an identifier, stored under the ``identifier`` key
- ``.name``: a CSS class, stored under the ``class`` key
- ``key=value`` / ``key="quoted value"``: a named value

Bare words without ``=`` are kept as positional values.

Thread Safety:
DirectiveAttributes is a frozen dataclass. Safe to share.

Example:
    >>> attrs = DirectiveAttributes.parse('#hello .wide depth=2 title="A B"')
    >>> attrs.values("identifier")
    ('hello',)
    >>> attrs.int_value("depth", 6)
    2
    >>> attrs.classes_string
    'wide'
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Self

IDENTIFIER = "identifier"
CLASS = "class"

_TRUE_VALUES = frozenset({"true", "yes", "on", "1", ""})
_FALSE_VALUES = frozenset({"false", "no", "off", "0"})


@dataclass(frozen=True, slots=True)
class DirectiveAttributes:
    """Read-only key/value and positional-value store.

    Keys may repeat; lookups return values in declaration order.
    """

    pairs: tuple[tuple[str, str], ...] = ()
    positional: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse the inside of an attribute block.

        Args:
            text: Attribute text without the surrounding braces

        Returns:
            Parsed attributes

        Raises:
            ValueError: If quoting is unbalanced
        """
        pairs: list[tuple[str, str]] = []
        positional: list[str] = []

        for token in shlex.split(text, posix=True):
            if token.startswith("#") and len(token) > 1:
                pairs.append((IDENTIFIER, token[1:]))
            elif token.startswith(".") and len(token) > 1:
                pairs.append((CLASS, token[1:]))
            elif "=" in token:
                key, value = token.split("=", 1)
                if not key:
                    msg = f"Attribute without a name: {token!r}"
                    raise ValueError(msg)
                pairs.append((key, value))
            else:
                positional.append(token)

        return cls(pairs=tuple(pairs), positional=tuple(positional))

    def values(self, key: str) -> tuple[str, ...]:
        """All values declared for key, in order."""
        return tuple(value for name, value in self.pairs if name == key)

    def value(self, key: str, default: str | None = None) -> str | None:
        """First value declared for key, or default."""
        for name, value in self.pairs:
            if name == key:
                return value
        return default

    def int_value(self, key: str, default: int) -> int:
        """Value for key coerced to int.

        Raises:
            ValueError: If the value is not an integer
        """
        raw = self.value(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError as e:
            msg = f"Invalid integer for attribute '{key}': {raw}"
            raise ValueError(msg) from e

    def boolean_value(self, key: str, default: bool) -> bool:
        """Value for key coerced to bool.

        "true", "yes", "on", "1" and an empty value are true; "false",
        "no", "off" and "0" are false.

        Raises:
            ValueError: If the value is not a recognised boolean
        """
        raw = self.value(key)
        if raw is None:
            return default
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        msg = f"Invalid boolean for attribute '{key}': {raw}"
        raise ValueError(msg)

    @property
    def identifiers(self) -> tuple[str, ...]:
        return self.values(IDENTIFIER)

    @property
    def classes(self) -> tuple[str, ...]:
        return self.values(CLASS)

    @property
    def classes_string(self) -> str:
        """Space separated CSS classes."""
        return " ".join(self.classes)

    def __contains__(self, key: str) -> bool:
        return any(name == key for name, _ in self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs or self.positional)


EMPTY_ATTRIBUTES = DirectiveAttributes()
