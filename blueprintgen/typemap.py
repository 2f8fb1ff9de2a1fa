# File: blueprintgen/typemap.py
"""
Blueprintgen - Type Mapper
============================
Maps a draft column type to the PHP type used in generated Data objects and
to the OpenAPI type tag used in documentation attributes.

The mapping is a total, table-driven function: unknown types fall back to
``string``.  Foreign-key columns (``*_id``) are always integers, whatever
type the draft declared.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, NamedTuple, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.typemap")

# ---------------------------------------------------------------------------
# Type families (lower-cased draft type names)
# ---------------------------------------------------------------------------

INTEGER_TYPES: FrozenSet[str] = frozenset({
    "id", "foreignid", "increments", "bigincrements",
    "integer", "unsignedinteger",
    "biginteger", "unsignedbiginteger",
    "tinyinteger", "unsignedtinyinteger",
    "smallinteger", "unsignedsmallinteger",
    "mediuminteger", "unsignedmediuminteger",
})
DECIMAL_TYPES: FrozenSet[str] = frozenset({"decimal", "unsigneddecimal", "float", "double"})
BOOLEAN_TYPES: FrozenSet[str] = frozenset({"boolean"})
JSON_TYPES: FrozenSet[str] = frozenset({"json", "jsonb"})
DATE_TYPES: FrozenSet[str] = frozenset({
    "date", "datetime", "datetimetz", "timestamp", "timestamptz",
})
ENUM_TYPES: FrozenSet[str] = frozenset({"enum"})
# Text columns that support partial-match filtering and name-based examples
STRING_TYPES: FrozenSet[str] = frozenset({"string", "text", "longtext"})

DATE_WRAPPER_TYPE: str = "CarbonImmutable"
DATE_DOC_FORMAT: str = "date-time"


class TypeMapping(NamedTuple):
    """Result of ``map_type``."""

    target_type: str
    doc_type: str
    doc_format: Optional[str] = None


_INTEGER: TypeMapping = TypeMapping("int", "integer")
_STRING: TypeMapping = TypeMapping("string", "string")

_FAMILY_TABLE: Dict[FrozenSet[str], TypeMapping] = {
    INTEGER_TYPES: _INTEGER,
    DECIMAL_TYPES: TypeMapping("float", "number"),
    BOOLEAN_TYPES: TypeMapping("bool", "boolean"),
    JSON_TYPES: TypeMapping("array", "object"),
    DATE_TYPES: TypeMapping(DATE_WRAPPER_TYPE, "string", DATE_DOC_FORMAT),
}


def type_family(data_type: str) -> Optional[FrozenSet[str]]:
    """Return the family set *data_type* belongs to, or None."""
    lowered: str = data_type.lower()
    for family in (INTEGER_TYPES, DECIMAL_TYPES, BOOLEAN_TYPES, JSON_TYPES,
                   DATE_TYPES, ENUM_TYPES, STRING_TYPES):
        if lowered in family:
            return family
    return None


def is_date_type(data_type: str) -> bool:
    return data_type.lower() in DATE_TYPES


def is_enum_type(data_type: str) -> bool:
    return data_type.lower() in ENUM_TYPES


def map_type(
    data_type: str,
    column_name: str = "",
    enum_class: Optional[str] = None,
) -> TypeMapping:
    """
    Map a draft data type to ``(target_type, doc_type, doc_format)``.

    Args:
        data_type: Draft type as written (matched case-insensitively).
        column_name: Column name; ``*_id`` forces an integer mapping.
        enum_class: Fully-qualified enum class for enum columns.  Its
            basename becomes the target type; without one the column maps
            like a string.

    Examples:
        >>> map_type("bigInteger")
        TypeMapping(target_type='int', doc_type='integer', doc_format=None)
        >>> map_type("string", "user_id").target_type
        'int'
    """
    if column_name.endswith("_id"):
        return _INTEGER

    lowered: str = data_type.lower()

    if lowered in ENUM_TYPES:
        if enum_class:
            return TypeMapping(enum_class.rsplit("\\", 1)[-1], "string")
        return _STRING

    for family, mapping in _FAMILY_TABLE.items():
        if lowered in family:
            return mapping

    return _STRING


__all__: List[str] = [
    "INTEGER_TYPES",
    "DECIMAL_TYPES",
    "BOOLEAN_TYPES",
    "JSON_TYPES",
    "DATE_TYPES",
    "ENUM_TYPES",
    "STRING_TYPES",
    "DATE_WRAPPER_TYPE",
    "DATE_DOC_FORMAT",
    "TypeMapping",
    "type_family",
    "is_date_type",
    "is_enum_type",
    "map_type",
]
