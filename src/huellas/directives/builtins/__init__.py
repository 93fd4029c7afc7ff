"""Built-in directive handlers.

- Links: ref (internal pages), extref, scaladoc, github
- Snippets: snip, fiddle
- Navigation: toc
- Substitution: var, vars

Every handler is constructed with the RenderContext of the page being
rendered.
"""

from __future__ import annotations

from huellas.directives.builtins.external import (
    ExternalLinkDirective,
    ExtRefDirective,
    GitHubDirective,
    ScaladocDirective,
)
from huellas.directives.builtins.ref import (
    RefDirective,
)
from huellas.directives.builtins.snip import (
    FiddleDirective,
    SnipDirective,
)
from huellas.directives.builtins.toc import (
    TocDirective,
)
from huellas.directives.builtins.variables import (
    VarDirective,
    VarsDirective,
)

__all__ = [
    # Links
    "ExternalLinkDirective",
    "ExtRefDirective",
    "GitHubDirective",
    "RefDirective",
    "ScaladocDirective",
    # Snippets
    "FiddleDirective",
    "SnipDirective",
    # Navigation
    "TocDirective",
    # Substitution
    "VarDirective",
    "VarsDirective",
]
