# File: blueprintgen/allowlists.py
"""
Blueprintgen - Query Allow-List Builder
=========================================
Derives the three lists a generated API controller hands to the runtime
query builder:

    allowedFilters   exact match for keys and enums, partial match for text,
                     ``trashed`` for soft-deleting entities
    allowedSorts     curated temporal/text columns, ``id`` always last
    allowedIncludes  camelCased relationship names, deduplicated

Each builder has a ``*_list`` function returning plain Python values and a
``build_*`` function returning the PHP array literal for the stub.  When
the controller's model is unknown (``entity is None``) the builders fall
back to minimal defaults instead of failing.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from blueprintgen.imports import ImportRegistry
from blueprintgen.models import MANAGED_COLUMNS, EntityInfo
from blueprintgen.typemap import STRING_TYPES, is_enum_type
from blueprintgen.utils import format_php_array, php_string, to_camel_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.allowlists")

ALLOWED_FILTER_CLASS: str = "Spatie\\QueryBuilder\\AllowedFilter"
FILTERS_OWNER: str = "allowed-filters"

DEFAULT_SORTABLE_COLUMNS: tuple = ("created_at", "published_at", "updated_at", "title", "name")
FALLBACK_SORTS: tuple = ("created_at", "id")


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def allowed_filter_entries(entity: Optional[EntityInfo]) -> List[str]:
    """
    Return filter entries as PHP expressions.

    Exact-match entries (foreign keys, enums) come first, partial-match
    text columns after; each group keeps declaration order.  Soft-deleting
    entities close the exact group with ``AllowedFilter::trashed()``.
    """
    if entity is None:
        return []

    exact: List[str] = []
    partial: List[str] = []

    for column in entity.columns:
        if column.name in MANAGED_COLUMNS:
            continue
        if column.is_foreign_key or is_enum_type(column.data_type):
            exact.append(f"AllowedFilter::exact({php_string(column.name)})")
        elif column.normalized_type in STRING_TYPES:
            partial.append(php_string(column.name))

    if entity.soft_deletes:
        exact.append("AllowedFilter::trashed()")

    return exact + partial


def build_allowed_filters(entity: Optional[EntityInfo], imports: ImportRegistry) -> str:
    """
    Build the ``allowedFilters`` array literal.

    Claims the ``AllowedFilter`` import for the filter fragment and releases
    it again when no exact-match filter was produced.
    """
    imports.add(ALLOWED_FILTER_CLASS, owner=FILTERS_OWNER)
    entries: List[str] = allowed_filter_entries(entity)

    if not any(e.startswith("AllowedFilter::") for e in entries):
        imports.release(ALLOWED_FILTER_CLASS, owner=FILTERS_OWNER)

    logger.debug(
        "Filters for %s: %d entries.",
        entity.name if entity else "<no model>",
        len(entries),
    )
    return format_php_array(entries)


# ---------------------------------------------------------------------------
# Sorts
# ---------------------------------------------------------------------------


def allowed_sort_list(
    entity: Optional[EntityInfo],
    sortable: Sequence[str] = DEFAULT_SORTABLE_COLUMNS,
) -> List[str]:
    """
    Return sortable column names.

    Candidates are the declared columns plus the implicit ``created_at`` of
    timestamped entities; they are emitted in *sortable* order and ``id``
    is appended when missing.
    """
    if entity is None:
        return list(FALLBACK_SORTS)

    present: set = set(entity.column_names)
    if entity.timestamps:
        present.add("created_at")

    sorts: List[str] = [name for name in sortable if name in present]
    if "id" not in sorts:
        sorts.append("id")
    return sorts


def build_allowed_sorts(
    entity: Optional[EntityInfo],
    sortable: Sequence[str] = DEFAULT_SORTABLE_COLUMNS,
) -> str:
    return format_php_array(allowed_sort_list(entity, sortable), quoted=True)


# ---------------------------------------------------------------------------
# Includes
# ---------------------------------------------------------------------------


def allowed_include_list(entity: Optional[EntityInfo]) -> List[str]:
    """
    Return includable relationship names.

    Names are camelCased as written in the draft (no re-pluralisation) and
    deduplicated keeping the first occurrence.
    """
    if entity is None:
        return []

    includes: List[str] = []
    for _kind, related in entity.iter_relationships():
        name: str = to_camel_case(related)
        if name and name not in includes:
            includes.append(name)
    return includes


def build_allowed_includes(entity: Optional[EntityInfo]) -> str:
    return format_php_array(allowed_include_list(entity), quoted=True)


__all__: List[str] = [
    "ALLOWED_FILTER_CLASS",
    "DEFAULT_SORTABLE_COLUMNS",
    "allowed_filter_entries",
    "build_allowed_filters",
    "allowed_sort_list",
    "build_allowed_sorts",
    "allowed_include_list",
    "build_allowed_includes",
]

logger.debug("blueprintgen.allowlists loaded.")
