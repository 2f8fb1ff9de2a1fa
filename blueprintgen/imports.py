# File: blueprintgen/imports.py
"""
Blueprintgen - Import Registry
================================
Per-artifact accumulator of the fully-qualified class names a generated
PHP file must ``use``.

A registry is created empty for every artifact and passed explicitly to
each fragment builder.  Entries are claimed by an *owner* (the fragment
that needs them); ``release`` drops one owner's claim, so a fragment that
turns out not to need a class never removes an import another fragment
still relies on.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Set

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.imports")

_DEFAULT_OWNER: str = "*"


class ImportRegistry:
    """
    Set of fully-qualified class names with per-owner claims.

    Usage::

        imports = ImportRegistry()
        imports.add("Illuminate\\Http\\JsonResponse")
        imports.add("Spatie\\QueryBuilder\\AllowedFilter", owner="filters")
        imports.release("Spatie\\QueryBuilder\\AllowedFilter", owner="filters")
        print(imports.render())
    """

    __slots__ = ("_claims",)

    def __init__(self) -> None:
        self._claims: Dict[str, Set[str]] = {}

    def add(self, name: str, owner: Optional[str] = None) -> None:
        """Claim *name*; adding twice never duplicates the import."""
        name = name.lstrip("\\")
        self._claims.setdefault(name, set()).add(owner or _DEFAULT_OWNER)

    def release(self, name: str, owner: Optional[str] = None) -> None:
        """Drop *owner*'s claim on *name*; the import goes once nobody claims it."""
        name = name.lstrip("\\")
        owners: Optional[Set[str]] = self._claims.get(name)
        if owners is None:
            return
        owners.discard(owner or _DEFAULT_OWNER)
        if not owners:
            del self._claims[name]
            logger.debug("Released unused import %s.", name)

    def remove(self, name: str) -> None:
        """Remove *name* whoever claimed it; a no-op when absent."""
        self._claims.pop(name.lstrip("\\"), None)

    def names(self) -> List[str]:
        return sorted(self._claims)

    def render(self) -> str:
        """Sorted ``use`` block, one statement per line; empty string when empty."""
        return "\n".join(f"use {name};" for name in self.names())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lstrip("\\") in self._claims

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._claims)

    def __repr__(self) -> str:
        return f"<ImportRegistry {len(self._claims)} imports>"


__all__: List[str] = ["ImportRegistry"]
