# File: blueprintgen/examples.py
"""
Blueprintgen - Example & Description Synthesizer
==================================================
Produces the human-readable description and the representative example
literal that accompany each documented request-body column.

Example values are PHP literals ready to drop into an attribute
(``'Example Title'``, ``99.99``, ``true`` ...).  Resolution checks a few
well-known column names first, then dispatches on the type family and
finally falls back to the generic string rule, so the result is never
blank.

Date examples and the current year come from an injectable *clock*;
passing a frozen clock makes generation byte-for-byte reproducible.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from blueprintgen.typemap import (
    BOOLEAN_TYPES,
    DATE_TYPES,
    DECIMAL_TYPES,
    ENUM_TYPES,
    INTEGER_TYPES,
    JSON_TYPES,
    STRING_TYPES,
)
from blueprintgen.utils import php_string, to_title_human

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.examples")

Clock = Callable[[], datetime]

DEFAULT_ENUM_EXAMPLE: str = "draft"

# (substring, literal) pairs, first match wins
_STRING_EXAMPLES: Tuple[Tuple[str, str], ...] = (
    ("title", "Example Title"),
    ("name", "Example Name"),
    ("content", "This is example content for the article..."),
    ("description", "This is a description..."),
    ("excerpt", "Example excerpt"),
    ("slug", "example-slug"),
    ("code", "CODE123"),
)

_INTEGER_EXAMPLES: Tuple[Tuple[Sequence[str], str], ...] = (
    (("count", "quantity", "stock"), "10"),
    (("age",), "25"),
)

_DECIMAL_EXAMPLES: Tuple[Tuple[Sequence[str], str], ...] = (
    (("price", "amount"), "99.99"),
    (("rate", "percentage"), "0.85"),
)


def default_clock() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format *moment* as ISO-8601 UTC with microseconds: ``2025-01-02T03:04:05.000006Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


def describe_column(column_name: str, operation: str = "creating") -> str:
    """
    Describe a request-body column.

    ``operation`` (``creating`` / ``updating``) is accepted for callers that
    compose longer text; it is not part of the returned sentence.

    Examples:
        >>> describe_column("published_at")
        'The Published At.'
        >>> describe_column("user_id")
        'The ID of the User.'
    """
    if column_name.endswith("_id"):
        relation: str = to_title_human(column_name[: -len("_id")])
        return f"The ID of the {relation}."
    return f"The {to_title_human(column_name)}."


# ---------------------------------------------------------------------------
# Example values
# ---------------------------------------------------------------------------


def _string_example(column_name: str) -> str:
    lowered: str = column_name.lower()
    for needle, literal in _STRING_EXAMPLES:
        if needle in lowered:
            return php_string(literal)
    return php_string(f"Example {column_name}")


def _match_substring(
    column_name: str,
    table: Tuple[Tuple[Sequence[str], str], ...],
) -> Optional[str]:
    lowered: str = column_name.lower()
    for needles, literal in table:
        if any(n in lowered for n in needles):
            return literal
    return None


def _enum_example(attributes: Mapping[str, Any]) -> str:
    values: Any = attributes.get("values")
    if isinstance(values, (list, tuple)) and values:
        return php_string(str(values[0]))
    return php_string(DEFAULT_ENUM_EXAMPLE)


def _is_blank(literal: str) -> bool:
    return literal.strip() in ("", "''", '""')


def example_value(
    column_name: str,
    data_type: str,
    attributes: Optional[Mapping[str, Any]] = None,
    clock: Clock = default_clock,
) -> str:
    """
    Return a representative PHP literal for a column.

    Examples:
        >>> example_value("email", "integer")
        "'user@example.com'"
        >>> example_value("price", "decimal")
        '99.99'
        >>> example_value("status", "enum", {"values": ["draft", "published"]})
        "'draft'"
    """
    attrs: Mapping[str, Any] = attributes or {}
    lowered_name: str = column_name.lower()
    family: str = data_type.lower()

    if lowered_name == "email":
        return php_string("user@example.com")
    if lowered_name == "password":
        return php_string("password123")
    if "url" in lowered_name:
        return php_string("https://example.com")
    if lowered_name.endswith("_id"):
        return "1"

    literal: Optional[str]
    if family in STRING_TYPES:
        literal = _string_example(column_name)
    elif family in INTEGER_TYPES:
        literal = _match_substring(column_name, _INTEGER_EXAMPLES)
        if literal is None:
            literal = str(clock().year) if "year" in lowered_name else "1"
    elif family in DECIMAL_TYPES:
        literal = _match_substring(column_name, _DECIMAL_EXAMPLES) or "1.00"
    elif family in BOOLEAN_TYPES:
        literal = "true"
    elif family in ENUM_TYPES:
        literal = _enum_example(attrs)
    elif family in DATE_TYPES:
        literal = php_string(iso_timestamp(clock()))
    elif family in JSON_TYPES:
        literal = php_string("{}")
    else:
        literal = _string_example(column_name)

    if not literal or _is_blank(literal):
        logger.debug("Blank example for %s (%s); using string rule.", column_name, data_type)
        literal = _string_example(column_name)
    return literal


__all__: List[str] = [
    "Clock",
    "DEFAULT_ENUM_EXAMPLE",
    "default_clock",
    "iso_timestamp",
    "describe_column",
    "example_value",
]
