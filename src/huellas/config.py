"""Render configuration for huellas.

Holds the flat property map consulted by directives (``github.base_url``,
``scaladoc.akka.base_url``, ``extref.rfc.base_url``, ...) together with a
few render switches. Configuration is immutable and shared by every page
of a build.

Properties can be written as nested TOML tables and are flattened to
dotted names on load:

    strict_snippets = true

    [properties.github]
    base_url = "https://github.com/lightbend/paradox"

    [properties.scaladoc.akka]
    base_url = "https://doc.akka.io/api/akka/2.6"

Usage:
    >>> config = RenderConfig.from_toml("site.toml")
    >>> config.properties["github.base_url"]
    'https://github.com/lightbend/paradox'
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import Any, Self

from huellas.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        properties: Flat mapping of dotted property names to values
        strict_snippets: Raise on snippet labels that are never found
            instead of logging a warning
        source_suffix: Suffix of page sources in ref directives
        link_suffix: Suffix of rendered pages
        toc_depth: Default depth of the toc directive
    """

    properties: Mapping[str, str] = field(default_factory=dict)
    strict_snippets: bool = False
    source_suffix: str = ".md"
    link_suffix: str = ".html"
    toc_depth: int = 6

    def __post_init__(self) -> None:
        # Read-only copy, shared by every page of a build
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> Self:
        """Create RenderConfig from a dictionary.

        Unknown keys are ignored. A nested ``properties`` mapping is
        flattened to dotted names.

        Example:
            >>> config = RenderConfig.from_dict({
            ...     "properties": {"github": {"base_url": "https://github.com/a/b"}},
            ...     "unknown_key": "ignored",
            ... })
            >>> dict(config.properties)
            {'github.base_url': 'https://github.com/a/b'}
        """
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        ignored = sorted(set(config_dict) - valid_fields)
        if ignored:
            logger.debug("Ignoring unknown configuration keys: %s", ", ".join(ignored))
        if "properties" in filtered:
            filtered["properties"] = flatten_properties(filtered["properties"])
        return cls(**filtered)

    @classmethod
    def from_toml(cls, path: str | PathLike[str]) -> Self:
        """Load configuration from a TOML file."""
        with Path(path).open("rb") as f:
            return cls.from_dict(tomllib.load(f))


def flatten_properties(tree: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings to dotted keys with string values.

    >>> flatten_properties({"a": {"b": 1, "c": {"d": True}}, "e": "x"})
    {'a.b': '1', 'a.c.d': 'true', 'e': 'x'}
    """
    flat: dict[str, str] = {}
    for key, value in tree.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_properties(value, f"{name}."))
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        else:
            flat[name] = str(value)
    return flat


__all__ = ["RenderConfig", "flatten_properties"]
