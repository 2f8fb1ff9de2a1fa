# File: blueprintgen/stubs.py
"""
Blueprintgen - Stub Template Engine
=====================================
Loads named stub files and fills their ``{{ slot }}`` tokens.

Stubs are looked up in the user-supplied directories first (in order) and
then in the stubs packaged with blueprintgen, so a project can override
any stub by dropping a file of the same name into its own stubs folder.

Rendering is a single regex pass over the template: a token is replaced
only when its name is in the slot map, inserted values are never scanned
again, and unknown tokens stay in the output untouched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.stubs")

PACKAGED_STUBS_DIR: Path = Path(__file__).resolve().parent / "resources"

_SLOT_RE: re.Pattern[str] = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class TemplateNotFound(LookupError):
    """Raised when a required stub exists in none of the search paths."""

    def __init__(self, name: str, searched: Sequence[Path]) -> None:
        self.name: str = name
        self.searched: List[Path] = list(searched)
        locations: str = ", ".join(str(p) for p in self.searched) or "<none>"
        super().__init__(f"Stub '{name}' not found (searched: {locations}).")


class StubRepository:
    """
    Resolves stub names to their text.

    Usage::

        repo = StubRepository(["./stubs"])
        template = repo.load("api-controller.class.stub")
        optional = repo.find("api-controller.method.store.stub")  # may be None
    """

    def __init__(
        self,
        search_paths: Optional[Sequence[Union[str, Path]]] = None,
        *,
        include_packaged: bool = True,
    ) -> None:
        paths: List[Path] = [Path(p) for p in (search_paths or [])]
        if include_packaged:
            paths.append(PACKAGED_STUBS_DIR)
        self._search_paths: List[Path] = paths
        self._cache: Dict[str, Optional[str]] = {}

    @property
    def search_paths(self) -> List[Path]:
        return list(self._search_paths)

    def locate(self, name: str) -> Optional[Path]:
        """Return the first existing file called *name*, or None."""
        for directory in self._search_paths:
            candidate: Path = directory / name
            if candidate.is_file():
                return candidate
        return None

    def find(self, name: str) -> Optional[str]:
        """Return the stub text, or None when no search path has it."""
        if name not in self._cache:
            path: Optional[Path] = self.locate(name)
            if path is None:
                logger.debug("Stub %s not found.", name)
                self._cache[name] = None
            else:
                logger.debug("Stub %s resolved to %s.", name, path)
                self._cache[name] = path.read_text(encoding="utf-8")
        return self._cache[name]

    def load(self, name: str) -> str:
        """Return the stub text; raise ``TemplateNotFound`` when missing."""
        text: Optional[str] = self.find(name)
        if text is None:
            raise TemplateNotFound(name, self._search_paths)
        return text

    def __repr__(self) -> str:
        return f"<StubRepository {[str(p) for p in self._search_paths]}>"


def render_stub(template: str, slots: Mapping[str, str]) -> str:
    """
    Substitute ``{{ name }}`` tokens from *slots* in one pass.

    Examples:
        >>> render_stub("class {{ class }} {{ other }}", {"class": "PostData"})
        'class PostData {{ other }}'
        >>> render_stub("{{ a }}", {"a": "{{ b }}", "b": "x"})
        '{{ b }}'
    """

    def _replace(match: re.Match[str]) -> str:
        key: str = match.group(1)
        if key in slots:
            return str(slots[key])
        return match.group(0)

    return _SLOT_RE.sub(_replace, template)


__all__: List[str] = [
    "PACKAGED_STUBS_DIR",
    "TemplateNotFound",
    "StubRepository",
    "render_stub",
]

logger.debug("blueprintgen.stubs loaded.")
