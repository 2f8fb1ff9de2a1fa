# File: blueprintgen/drafts.py
"""
Blueprintgen - Draft Loader
=============================
Reads a Blueprint-style ``draft.yaml`` into a ``SchemaDefinition`` and a
``GeneratorConfig``.

Expected layout::

    models:
      Post:
        title: string:400
        content: longtext
        status: enum:draft,published,archived
        published_at: nullable timestamp
        user_id: id foreign
        relationships:
          hasMany: Comment
          belongsToMany: Tag
    controllers:
      Api/Post:
        resource: api
    config:                 # optional GeneratorConfig fields
      root_namespace: App

Column definitions use Blueprint's shorthand: one data type (optionally
with ``:arguments``) plus any number of modifiers, in any order.  A column
may also be given as a mapping (``{type: string, nullable: true}``).

Every failure to turn the raw document into models is raised as
``DraftError``; a missing file stays a ``FileNotFoundError``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from blueprintgen.models import (
    ColumnInfo,
    ControllerInfo,
    EntityInfo,
    GeneratorConfig,
    RelationshipKind,
    SchemaDefinition,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.drafts")

# ---------------------------------------------------------------------------
# Shorthand vocabulary
# ---------------------------------------------------------------------------

# Lower-cased modifier keywords; anything else is the data type
_COLUMN_MODIFIERS: frozenset = frozenset(
    {
        "nullable", "unique", "index", "unsigned", "primary", "autoincrement",
        "foreign", "constrained", "default", "comment", "usecurrent",
        "usecurrentonupdate", "ondelete", "onupdate", "fulltext", "always",
    }
)

_MODEL_OPTION_KEYS: frozenset = frozenset(
    {"relationships", "timestamps", "softdeletes", "softdeletestz", "meta"}
)

_IGNORED_TOP_LEVEL_KEYS: frozenset = frozenset({"seeders", "components", "policies"})

_RELATIONSHIP_KINDS: Dict[str, RelationshipKind] = {k.value.lower(): k for k in RelationshipKind}

_RESOURCE_METHODS: Dict[str, List[str]] = {
    "web": ["index", "create", "store", "show", "edit", "update", "destroy"],
}

# Blueprint allows these keywords alone on a line, which YAML rejects
_BARE_KEYWORD_RE: re.Pattern = re.compile(
    r"^([ \t]+)(id|timestamps(?:Tz)?|softDeletes(?:Tz)?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_BARE_RESOURCE_RE: re.Pattern = re.compile(r"^([ \t]+)resource[ \t]*$", re.IGNORECASE | re.MULTILINE)


class DraftError(ValueError):
    """Raised when a draft document cannot be turned into models."""


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def expand_bare_keywords(text: str) -> str:
    """
    Rewrite Blueprint's bare keyword lines into YAML mappings.

    ``softDeletes`` alone on a line becomes ``softDeletes: softDeletes``
    and a bare ``resource`` becomes ``resource: web``.
    """
    text = _BARE_KEYWORD_RE.sub(r"\1\2: \2", text)
    return _BARE_RESOURCE_RE.sub(r"\1resource: web", text)


def load_draft_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and parse a draft file (YAML, or JSON as a YAML subset).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        DraftError: If the file can't be parsed or is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Draft file not found: {path}")
    if not path.is_file():
        raise DraftError(f"Draft path is not a file: {path}")

    try:
        data: Any = yaml.safe_load(expand_bare_keywords(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as exc:
        raise DraftError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise DraftError(
            f"Expected a mapping at the top of {path}, got {type(data).__name__}."
        )
    return data


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------


def parse_column(name: str, definition: Any) -> ColumnInfo:
    """
    Parse one column definition.

    Examples:
        >>> parse_column("title", "string:400 unique").attributes
        {'length': 400, 'unique': True}
        >>> parse_column("status", "enum:draft,published").enum_values
        ['draft', 'published']
    """
    if isinstance(definition, Mapping):
        attrs: Dict[str, Any] = dict(definition)
        data_type: str = str(attrs.pop("type", "string"))
        nullable: bool = bool(attrs.pop("nullable", False))
        return ColumnInfo(name=name, data_type=data_type, nullable=nullable, attributes=attrs)

    if definition is None:
        return ColumnInfo(name=name)

    if not isinstance(definition, str):
        raise DraftError(
            f"Column '{name}' must be a string or mapping, got {type(definition).__name__}."
        )

    data_type = ""
    nullable = False
    attributes: Dict[str, Any] = {}

    for token in definition.split():
        head, _, argument = token.partition(":")
        keyword: str = head.lower()

        if keyword in _COLUMN_MODIFIERS:
            if keyword == "nullable":
                nullable = True
            else:
                attributes[keyword] = argument or True
            continue

        if data_type:
            raise DraftError(
                f"Column '{name}' declares two data types: '{data_type}' and '{head}'."
            )
        data_type = head
        if argument:
            attributes.update(_type_arguments(keyword, argument))

    return ColumnInfo(
        name=name,
        data_type=data_type or "string",
        nullable=nullable,
        attributes=attributes,
    )


def _type_arguments(keyword: str, argument: str) -> Dict[str, Any]:
    parts: List[str] = [p.strip() for p in argument.split(",") if p.strip()]
    if keyword in ("enum", "set"):
        return {"values": parts}
    if keyword in ("decimal", "unsigneddecimal", "float", "double") and parts:
        out: Dict[str, Any] = {"precision": _maybe_int(parts[0])}
        if len(parts) > 1:
            out["scale"] = _maybe_int(parts[1])
        return out
    if keyword in ("string", "char") and len(parts) == 1:
        return {"length": _maybe_int(parts[0])}
    return {"arguments": parts}


def _maybe_int(text: str) -> Union[int, str]:
    return int(text) if text.isdigit() else text


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def _parse_relationships(entity_name: str, raw: Any) -> Dict[RelationshipKind, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise DraftError(f"'relationships' of '{entity_name}' must be a mapping.")

    parsed: Dict[RelationshipKind, Any] = {}
    for raw_kind, targets in raw.items():
        kind: Optional[RelationshipKind] = _RELATIONSHIP_KINDS.get(str(raw_kind).lower())
        if kind is None:
            raise DraftError(
                f"Unknown relationship type '{raw_kind}' on '{entity_name}'. "
                f"Expected one of: {', '.join(k.value for k in RelationshipKind)}."
            )
        if targets is None:
            continue
        if not isinstance(targets, (str, list)):
            raise DraftError(
                f"Targets of '{raw_kind}' on '{entity_name}' must be a name or a list of names."
            )
        parsed[kind] = targets
    return parsed


def parse_model(name: str, definition: Any) -> EntityInfo:
    """Parse one entry of the ``models:`` section."""
    entity_name: str = str(name).split("/")[-1]
    if definition is None:
        definition = {}
    if not isinstance(definition, Mapping):
        raise DraftError(f"Model '{name}' must be a mapping of columns.")

    columns: List[ColumnInfo] = []
    relationships: Dict[RelationshipKind, Any] = {}
    timestamps: bool = True
    soft_deletes: bool = False

    try:
        for key, value in definition.items():
            key = str(key)
            option: str = key.lower()
            if option == "relationships":
                relationships = _parse_relationships(entity_name, value)
            elif option in ("timestamps", "timestampstz"):
                timestamps = value is not False
            elif option in ("softdeletes", "softdeletestz"):
                soft_deletes = value is not False
            elif option in _MODEL_OPTION_KEYS:
                logger.debug("Ignoring model option '%s' on %s.", key, entity_name)
            else:
                columns.append(parse_column(key, value))

        return EntityInfo(
            name=entity_name,
            columns=columns,
            relationships=relationships,
            timestamps=timestamps,
            soft_deletes=soft_deletes,
        )
    except ValidationError as exc:
        raise DraftError(f"Invalid model '{name}': {exc}") from exc


# ---------------------------------------------------------------------------
# Controllers
# ---------------------------------------------------------------------------


def _resource_methods(value: Any, default_methods: List[str]) -> List[str]:
    text: str = str(value).strip()
    if text.lower() == "api":
        return list(default_methods)
    if text.lower() in _RESOURCE_METHODS:
        return list(_RESOURCE_METHODS[text.lower()])
    return [m.strip() for m in text.split(",") if m.strip()]


def parse_controller(
    name: str,
    definition: Any,
    default_methods: List[str],
) -> ControllerInfo:
    """
    Parse one entry of the ``controllers:`` section.

    ``Api/Post: {resource: api}`` becomes controller ``Post`` in namespace
    ``Api`` with the default API actions; other keys are kept as explicit
    actions, in declaration order, after the resource ones.
    """
    parts: List[str] = [p for p in str(name).replace("\\", "/").split("/") if p]
    if not parts:
        raise DraftError("Controller with an empty name.")
    controller_name: str = parts[-1]
    namespace: str = "\\".join(parts[:-1])

    methods: List[str] = []
    if definition is None:
        definition = {}
    if not isinstance(definition, Mapping):
        raise DraftError(f"Controller '{name}' must be a mapping of actions.")

    for key, value in definition.items():
        key = str(key)
        if key == "resource":
            candidates: List[str] = _resource_methods(value, default_methods)
        else:
            candidates = [key]
        methods.extend(m for m in candidates if m not in methods)

    try:
        return ControllerInfo(name=controller_name, namespace=namespace, methods=methods)
    except ValidationError as exc:
        raise DraftError(f"Invalid controller '{name}': {exc}") from exc


# ---------------------------------------------------------------------------
# Whole document
# ---------------------------------------------------------------------------


def parse_draft(
    raw: Mapping[str, Any],
    *,
    config_overrides: Optional[Mapping[str, Any]] = None,
    source_file: Optional[str] = None,
) -> Tuple[SchemaDefinition, GeneratorConfig]:
    """
    Parse a raw draft mapping into validated models.

    ``config_overrides`` win over the draft's own ``config:`` section.

    Raises:
        DraftError: If any section is malformed or fails validation.
    """
    for key in raw:
        if key in _IGNORED_TOP_LEVEL_KEYS:
            logger.info("Draft section '%s' is not generated; ignoring it.", key)
        elif key not in ("models", "controllers", "config"):
            logger.warning("Unknown draft section '%s' ignored.", key)

    config_data: Dict[str, Any] = dict(raw.get("config") or {})
    config_data.update(config_overrides or {})
    try:
        config: GeneratorConfig = GeneratorConfig.model_validate(config_data)
    except ValidationError as exc:
        raise DraftError(f"Config validation failed: {exc}") from exc

    models_raw: Any = raw.get("models") or {}
    controllers_raw: Any = raw.get("controllers") or {}
    if not isinstance(models_raw, Mapping):
        raise DraftError("'models' must be a mapping of model names to columns.")
    if not isinstance(controllers_raw, Mapping):
        raise DraftError("'controllers' must be a mapping of controller names to actions.")

    entities: List[EntityInfo] = [parse_model(n, d) for n, d in models_raw.items()]
    controllers: List[ControllerInfo] = [
        parse_controller(n, d, config.default_controller_methods)
        for n, d in controllers_raw.items()
    ]

    try:
        schema: SchemaDefinition = SchemaDefinition(
            entities=entities,
            controllers=controllers,
            source_file=source_file,
        )
    except ValidationError as exc:
        raise DraftError(f"Draft validation failed: {exc}") from exc

    logger.info(
        "Parsed draft: %d models, %d controllers.",
        len(schema.entities),
        len(schema.controllers),
    )
    return schema, config


__all__: List[str] = [
    "DraftError",
    "expand_bare_keywords",
    "load_draft_file",
    "parse_column",
    "parse_model",
    "parse_controller",
    "parse_draft",
]

logger.debug("blueprintgen.drafts loaded.")
