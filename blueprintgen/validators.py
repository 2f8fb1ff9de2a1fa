# File: blueprintgen/validators.py
"""
Blueprintgen - Draft & Configuration Validators
=================================================
A **pure-function validation pipeline** over the pydantic models defined in
``blueprintgen.models``.

Pydantic already rejects structurally broken drafts (unknown relationship
kinds, duplicate columns, bad namespaces).  This module adds the semantic
checks that would otherwise surface as odd PHP output: class names that
are not StudlyCase, enum columns without values, relationships to
entities the draft never declares, controllers with no model, and
configuration that can never produce anything.

Every check returns a ``ValidationResult``; nothing here raises.

Usage::

    from blueprintgen.validators import validate_full
    result = validate_full(schema, config)
    if not result:
        print(result.format_report())
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Set

from blueprintgen.models import (
    EnumStrategy,
    GeneratorConfig,
    RelationshipKind,
    SchemaDefinition,
)
from blueprintgen.typemap import is_enum_type, type_family

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight issue descriptor (no pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationError`` items produced by the pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def codes(self) -> Set[str]:
        return {e.code for e in self._items}

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {"error": "✗", "warning": "⚠", "info": "ℹ"}.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            for k, v in item.context.items():
                lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_STUDLY_CASE_RE: re.Pattern[str] = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_SNAKE_CASE_RE: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")
_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_ENUM_KEY_RE: re.Pattern[str] = re.compile(r"^([A-Z][a-zA-Z0-9]*\.)?[a-zA-Z_][a-zA-Z0-9_]*$")

# PHP keywords that cannot be used as class names
_PHP_RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "abstract", "and", "array", "as", "break", "callable", "case", "catch",
        "class", "clone", "const", "continue", "declare", "default", "do",
        "echo", "else", "elseif", "empty", "enddeclare", "endfor",
        "endforeach", "endif", "endswitch", "endwhile", "enum", "eval",
        "exit", "extends", "final", "finally", "fn", "for", "foreach",
        "function", "global", "goto", "if", "implements", "include",
        "instanceof", "insteadof", "interface", "isset", "list", "match",
        "namespace", "new", "or", "print", "private", "protected", "public",
        "readonly", "require", "return", "static", "switch", "throw",
        "trait", "try", "unset", "use", "var", "while", "xor", "yield",
        "bool", "false", "float", "int", "iterable", "mixed", "never",
        "null", "object", "string", "true", "void",
    }
)

_KNOWN_CONTROLLER_METHODS: FrozenSet[str] = frozenset(
    {"index", "create", "store", "show", "edit", "update", "destroy"}
)


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_entity_names(schema: SchemaDefinition) -> ValidationResult:
    """
    Entity names become PHP class names (``Post``, ``PostData``,
    ``PostController``): they must be identifiers, should be StudlyCase and
    must not be PHP keywords.
    """
    result: ValidationResult = ValidationResult()

    for entity in schema.entities:
        name: str = entity.name
        ctx: Dict[str, Any] = {"entity": name}

        if not _IDENTIFIER_RE.match(name):
            result.add_error(
                "INVALID_ENTITY_NAME",
                f"Entity name '{name}' is not a valid PHP identifier.",
                ctx,
            )
            continue

        if not _STUDLY_CASE_RE.match(name):
            result.add_warning(
                "ENTITY_NAME_NOT_STUDLY_CASE",
                f"Entity name '{name}' is not StudlyCase. "
                f"Generated class names may look odd.",
                ctx,
            )

        if name.lower() in _PHP_RESERVED_WORDS:
            result.add_error(
                "ENTITY_NAME_PHP_RESERVED",
                f"Entity name '{name}' is a PHP reserved word.",
                ctx,
            )

    logger.debug(
        "validate_entity_names: checked %d entities, %d issue(s).",
        len(schema.entities),
        len(result),
    )
    return result


def validate_column_names(schema: SchemaDefinition) -> ValidationResult:
    """Column names become PHP property names; types outside the known families map to string."""
    result: ValidationResult = ValidationResult()

    for entity in schema.entities:
        for col in entity.columns:
            ctx: Dict[str, Any] = {"entity": entity.name, "column": col.name}

            if not _IDENTIFIER_RE.match(col.name):
                result.add_error(
                    "INVALID_COLUMN_NAME",
                    f"Column '{col.name}' of '{entity.name}' is not a valid identifier.",
                    ctx,
                )
                continue

            if not _SNAKE_CASE_RE.match(col.name):
                result.add_warning(
                    "COLUMN_NAME_NOT_SNAKE_CASE",
                    f"Column '{col.name}' of '{entity.name}' is not snake_case.",
                    ctx,
                )

            if type_family(col.data_type) is None:
                result.add_info(
                    "UNKNOWN_COLUMN_TYPE",
                    f"Column '{entity.name}.{col.name}' has type '{col.data_type}'; "
                    f"it will be treated as a string.",
                    ctx,
                )

    return result


def validate_enum_columns(schema: SchemaDefinition) -> ValidationResult:
    """Enum columns without declared values get a generic ``'draft'`` example."""
    result: ValidationResult = ValidationResult()

    for entity in schema.entities:
        for col in entity.columns:
            if is_enum_type(col.data_type) and not col.enum_values:
                result.add_warning(
                    "ENUM_WITHOUT_VALUES",
                    f"Enum column '{entity.name}.{col.name}' declares no values.",
                    {"entity": entity.name, "column": col.name},
                )
    return result


def validate_relationships(schema: SchemaDefinition) -> ValidationResult:
    """
    Every related name should resolve to a declared entity, otherwise the
    generated Data object references a Data class nobody generates.
    Polymorphic ``morphTo`` targets are names, not entities, and are skipped.
    """
    result: ValidationResult = ValidationResult()

    for entity in schema.entities:
        for kind, related in entity.iter_relationships():
            if kind == RelationshipKind.MORPH_TO:
                continue
            if schema.get_entity(related) is None:
                result.add_warning(
                    "UNKNOWN_RELATIONSHIP_TARGET",
                    f"'{entity.name}' {kind.value} '{related}', "
                    f"which is not a model of this draft.",
                    {"entity": entity.name, "kind": kind.value, "related": related},
                )
    return result


def validate_controllers(schema: SchemaDefinition, config: GeneratorConfig) -> ValidationResult:
    """Controllers must be unique, should map to a model and use known actions."""
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()

    for controller in schema.controllers:
        key: str = f"{controller.namespace}\\{controller.class_name}"
        ctx: Dict[str, Any] = {"controller": key}

        if key in seen:
            result.add_error(
                "DUPLICATE_CONTROLLER",
                f"Controller '{key}' is declared more than once.",
                ctx,
            )
        seen.add(key)

        if not config.in_controller_namespace(controller.namespace):
            result.add_info(
                "CONTROLLER_NOT_GENERATED",
                f"Controller '{key}' is outside the '{config.controller_namespace}' "
                f"namespace and will be skipped.",
                ctx,
            )
            continue

        if schema.get_entity(controller.model_name) is None:
            result.add_warning(
                "CONTROLLER_WITHOUT_MODEL",
                f"Controller '{key}' has no model '{controller.model_name}'; "
                f"default allow-lists will be generated.",
                ctx,
            )

        unknown: List[str] = [m for m in controller.methods if m not in _KNOWN_CONTROLLER_METHODS]
        if unknown:
            result.add_info(
                "CUSTOM_CONTROLLER_METHODS",
                f"Controller '{key}' declares non-resource actions {unknown}; "
                f"only actions with a method stub are generated.",
                ctx,
            )
    return result


def validate_generator_config(config: GeneratorConfig) -> ValidationResult:
    """Semantic checks on ``GeneratorConfig`` beyond its field validators."""
    result: ValidationResult = ValidationResult()

    if not config.generate_controllers and not config.generate_data:
        result.add_warning(
            "NOTHING_TO_GENERATE",
            "Both generate_controllers and generate_data are disabled.",
        )

    if config.enum_strategy == EnumStrategy.SUFFIX and not config.enum_suffixes:
        result.add_warning(
            "NO_ENUM_SUFFIXES",
            "enum_strategy is 'suffix' but enum_suffixes is empty; every enum "
            "class will be entity-qualified.",
        )

    for key in config.enum_classes:
        if not _ENUM_KEY_RE.match(key):
            result.add_error(
                "INVALID_ENUM_CLASS_KEY",
                f"enum_classes key '{key}' must be 'column' or 'Entity.column'.",
                {"key": key},
            )

    for stub_dir in config.stub_paths:
        if not Path(stub_dir).is_dir():
            result.add_warning(
                "STUB_PATH_MISSING",
                f"Stub directory '{stub_dir}' does not exist; packaged stubs will be used.",
                {"path": stub_dir},
            )

    if "id" in config.sortable_columns:
        result.add_info(
            "ID_IN_SORTABLE_COLUMNS",
            "'id' is always appended to allowed sorts; listing it in "
            "sortable_columns only changes its position.",
        )

    return result


# ---------------------------------------------------------------------------
# Aggregate entry points
# ---------------------------------------------------------------------------


def validate_schema(schema: SchemaDefinition) -> ValidationResult:
    """Run all schema-level validators and merge their results."""
    result: ValidationResult = ValidationResult()

    validators: List[Callable[[SchemaDefinition], ValidationResult]] = [
        validate_entity_names,
        validate_column_names,
        validate_enum_columns,
        validate_relationships,
    ]

    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(schema))

    logger.info("Schema validation complete: %s", result.summary())
    return result


def validate_full(schema: SchemaDefinition, config: GeneratorConfig) -> ValidationResult:
    """
    **Master validation entry point.**

    Runs the schema validators, the controller checks (which need the
    configured namespace) and the configuration checks.
    """
    logger.info(
        "Starting full validation: %d entities, %d controllers.",
        len(schema.entities),
        len(schema.controllers),
    )

    result: ValidationResult = ValidationResult()
    result.merge(validate_schema(schema))
    result.merge(validate_controllers(schema, config))
    result.merge(validate_generator_config(config))

    for key in config.enum_classes:
        entity_name: str = key.split(".", 1)[0] if "." in key else ""
        if entity_name and schema.get_entity(entity_name) is None:
            result.add_warning(
                "ENUM_CLASS_UNKNOWN_ENTITY",
                f"enum_classes key '{key}' refers to unknown entity '{entity_name}'.",
                {"key": key},
            )

    if result.has_errors:
        logger.error("Validation FAILED. %s", result.summary())
    else:
        logger.info("Validation PASSED. %s", result.summary())

    return result


__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_entity_names",
    "validate_column_names",
    "validate_enum_columns",
    "validate_relationships",
    "validate_controllers",
    "validate_generator_config",
    "validate_schema",
    "validate_full",
]

logger.debug("blueprintgen.validators loaded: %d public symbols.", len(__all__))
