# File: blueprintgen/models.py
"""
Blueprintgen - Core Data Models
=================================
Pydantic V2 models representing the parsed draft (entities, columns,
relationships, controllers) and the generator configuration.  These models
are the single source of truth for the pipeline:

    Draft Parsing → Validation → Fragment Building → Stub Rendering → Emission

Entities, columns and controllers are immutable once parsed; the generator
only reads them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    computed_field,
    field_validator,
    model_validator,
)

from blueprintgen.utils import to_singular, to_studly_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RelationshipKind(str, Enum):
    """
    Eloquent relationship kinds.

    Declaration order is the canonical iteration order used everywhere
    relationships are walked: to-one kinds first, then to-many kinds.
    """

    BELONGS_TO = "belongsTo"
    HAS_ONE = "hasOne"
    MORPH_TO = "morphTo"
    MORPH_ONE = "morphOne"
    HAS_MANY = "hasMany"
    BELONGS_TO_MANY = "belongsToMany"
    MORPH_MANY = "morphMany"
    MORPH_TO_MANY = "morphToMany"

    @property
    def is_to_many(self) -> bool:
        return self in _TO_MANY_KINDS


_TO_MANY_KINDS = frozenset(
    {
        RelationshipKind.HAS_MANY,
        RelationshipKind.BELONGS_TO_MANY,
        RelationshipKind.MORPH_MANY,
        RelationshipKind.MORPH_TO_MANY,
    }
)


class EnumStrategy(str, Enum):
    """How enum class names are guessed when no explicit mapping exists."""

    SUFFIX = "suffix"
    QUALIFIED = "qualified"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SCHEMA_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)

_SETTINGS_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
)

# Columns the framework manages itself; never part of a request body.
MANAGED_COLUMNS: frozenset = frozenset({"id", "created_at", "updated_at", "deleted_at"})

_PHP_NAMESPACE_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\\[A-Za-z_][A-Za-z0-9_]*)*$")


# ---------------------------------------------------------------------------
# Schema primitives
# ---------------------------------------------------------------------------


class ColumnInfo(BaseModel):
    """
    A single column of an entity.

    ``data_type`` is kept as written in the draft (``string``, ``longText``,
    ``unsignedBigInteger`` ...); type families are matched case-insensitively.
    """

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1, description="Column name.")
    data_type: str = Field(default="string", min_length=1, description="Draft data type.")
    nullable: bool = Field(default=False, description="Whether the column allows NULL.")
    attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form modifiers, e.g. enum 'values' or 'enum_class'.",
    )

    @property
    def normalized_type(self) -> str:
        return self.data_type.lower()

    @property
    def is_foreign_key(self) -> bool:
        return self.name.endswith("_id")

    @property
    def is_managed(self) -> bool:
        """True for id and timestamp columns the framework maintains."""
        return self.name in MANAGED_COLUMNS

    @property
    def is_body_column(self) -> bool:
        """True when the column belongs in a request body / Data object."""
        return not self.is_managed and not self.is_foreign_key

    @property
    def enum_values(self) -> List[str]:
        values: Any = self.attributes.get("values")
        if isinstance(values, (list, tuple)):
            return [str(v) for v in values]
        return []

    def __repr__(self) -> str:
        null_flag: str = " NULL" if self.nullable else ""
        return f"<Column {self.name} {self.data_type}{null_flag}>"


RelationshipInput = Union[str, List[str]]


class EntityInfo(BaseModel):
    """
    One draft model: the unit the generator processes.

    ``relationships`` maps a kind to the related names exactly as written in
    the draft (``comments``, ``Tag`` ...).  Groups are stored in canonical
    ``RelationshipKind`` order whatever order the draft used.
    """

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1, description="Singular StudlyCase entity name.")
    columns: List[ColumnInfo] = Field(default_factory=list)
    relationships: Dict[RelationshipKind, List[str]] = Field(default_factory=dict)
    timestamps: bool = Field(default=True, description="Entity has created_at/updated_at.")
    soft_deletes: bool = Field(default=False, description="Entity has deleted_at.")

    _column_map: Dict[str, ColumnInfo] = PrivateAttr(default_factory=dict)

    @field_validator("relationships", mode="before")
    @classmethod
    def _normalise_relationships(
        cls, value: Optional[Dict[Any, RelationshipInput]]
    ) -> Dict[RelationshipKind, List[str]]:
        if not value:
            return {}
        grouped: Dict[RelationshipKind, List[str]] = {}
        for raw_kind, targets in value.items():
            kind: RelationshipKind = RelationshipKind(raw_kind)
            if isinstance(targets, str):
                names: List[str] = [t.strip() for t in targets.split(",")]
            else:
                names = [str(t).strip() for t in targets]
            grouped.setdefault(kind, []).extend(n for n in names if n)
        return {kind: grouped[kind] for kind in RelationshipKind if kind in grouped}

    @model_validator(mode="after")
    def _unique_column_names(self) -> "EntityInfo":
        seen: set = set()
        dupes: List[str] = []
        for col in self.columns:
            if col.name in seen:
                dupes.append(col.name)
            seen.add(col.name)
        if dupes:
            raise ValueError(
                f"Entity '{self.name}' declares duplicate columns: {sorted(set(dupes))}"
            )
        return self

    def model_post_init(self, __context: Any) -> None:
        self._column_map = {c.name: c for c in self.columns}

    def get_column(self, name: str) -> Optional[ColumnInfo]:
        """O(1) column lookup by name."""
        return self._column_map.get(name)

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def iter_relationships(self) -> Iterator[Tuple[RelationshipKind, str]]:
        """Yield ``(kind, related_name)`` pairs in canonical order."""
        for kind, names in self.relationships.items():
            for name in names:
                yield kind, name

    def __repr__(self) -> str:
        rel_count: int = sum(len(v) for v in self.relationships.values())
        return f"<Entity {self.name} ({len(self.columns)} cols, {rel_count} rels)>"


class ControllerInfo(BaseModel):
    """An API controller declared in the draft (``Api/Post: {resource: api}``)."""

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1, description="Controller name, e.g. 'Post'.")
    namespace: str = Field(default="Api", description="Sub-namespace under Http\\Controllers.")
    methods: List[str] = Field(default_factory=list, description="Declared actions, in order.")

    @computed_field  # type: ignore[misc]
    @property
    def prefix(self) -> str:
        """Controller name without the ``Controller`` suffix."""
        if self.name.endswith("Controller") and self.name != "Controller":
            return self.name[: -len("Controller")]
        return self.name

    @computed_field  # type: ignore[misc]
    @property
    def class_name(self) -> str:
        return f"{to_studly_case(self.prefix)}Controller"

    @computed_field  # type: ignore[misc]
    @property
    def model_name(self) -> str:
        """Entity this controller serves: the singular of its prefix."""
        return to_studly_case(to_singular(self.prefix))

    def __repr__(self) -> str:
        return f"<Controller {self.namespace}\\{self.class_name} {self.methods}>"


class SchemaDefinition(BaseModel):
    """
    The root model: every entity and controller of one draft.

    Invariant: entity names are unique; ``get_entity`` is an O(1) lookup.
    """

    model_config = _SCHEMA_CONFIG

    entities: List[EntityInfo] = Field(default_factory=list)
    controllers: List[ControllerInfo] = Field(default_factory=list)
    source_file: Optional[str] = Field(default=None, description="Draft file path.")

    _entity_map: Dict[str, EntityInfo] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _unique_entity_names(self) -> "SchemaDefinition":
        names: List[str] = [e.name for e in self.entities]
        if len(names) != len(set(names)):
            dupes: List[str] = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate entity names: {dupes}")
        return self

    def model_post_init(self, __context: Any) -> None:
        self._entity_map = {e.name: e for e in self.entities}

    def get_entity(self, name: str) -> Optional[EntityInfo]:
        """Look an entity up by name, tolerating singular/plural and casing drift."""
        found: Optional[EntityInfo] = self._entity_map.get(name)
        if found is None:
            found = self._entity_map.get(to_studly_case(to_singular(name)))
        return found

    @property
    def entity_names(self) -> List[str]:
        return [e.name for e in self.entities]

    def __repr__(self) -> str:
        return (
            f"<SchemaDefinition {len(self.entities)} entities, "
            f"{len(self.controllers)} controllers>"
        )


# ---------------------------------------------------------------------------
# Generator configuration
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """
    Settings that control every aspect of generation.

    A single instance (combined with a ``SchemaDefinition``) is all the
    generator needs to produce its output.
    """

    model_config = _SETTINGS_CONFIG

    # -- Namespaces & paths -------------------------------------------------
    root_namespace: str = Field(default="App", description="Application root namespace.")
    app_path: str = Field(default="app", min_length=1, description="Directory for the root namespace.")
    models_namespace: str = Field(default="Models", description="Sub-namespace of Eloquent models.")
    controller_namespace: str = Field(
        default="Api",
        description="Only controllers in (or nested below) this namespace are generated.",
    )

    # -- Stubs --------------------------------------------------------------
    stub_paths: List[str] = Field(
        default_factory=list,
        description="Directories searched for stubs before the packaged ones.",
    )

    # -- What to generate ---------------------------------------------------
    generate_controllers: bool = Field(default=True)
    generate_data: bool = Field(default=True)
    controllers_for_all_models: bool = Field(
        default=False,
        description="Scaffold an API controller for models without a declared one.",
    )
    default_controller_methods: List[str] = Field(
        default_factory=lambda: ["index", "store", "show", "update", "destroy"],
    )
    method_verbs: List[str] = Field(
        default_factory=lambda: ["store", "update", "destroy"],
        description="Controller actions emitted from method stubs.",
    )

    # -- Heuristics ---------------------------------------------------------
    enum_strategy: EnumStrategy = Field(default=EnumStrategy.SUFFIX)
    enum_suffixes: List[str] = Field(default_factory=lambda: ["Status", "Type"])
    enum_classes: Dict[str, str] = Field(
        default_factory=dict,
        description="Explicit enum classes keyed by 'Entity.column' or 'column'.",
    )
    sortable_columns: List[str] = Field(
        default_factory=lambda: ["created_at", "published_at", "updated_at", "title", "name"],
        description="Columns exposed as sorts, in output order.",
    )
    document_foreign_keys: bool = Field(
        default=False,
        description="Emit BodyParameter attributes for *_id columns.",
    )

    # -- Output -------------------------------------------------------------
    atomic_writes: bool = Field(default=True)

    @field_validator("root_namespace")
    @classmethod
    def _valid_namespace(cls, v: str) -> str:
        v = v.strip("\\")
        if not _PHP_NAMESPACE_RE.match(v):
            raise ValueError(f"'{v}' is not a valid PHP namespace.")
        return v

    @field_validator("method_verbs", "default_controller_methods")
    @classmethod
    def _no_duplicate_methods(cls, v: List[str]) -> List[str]:
        if len(v) != len(set(v)):
            raise ValueError(f"Duplicate controller methods: {v}")
        return v

    def in_controller_namespace(self, namespace: str) -> bool:
        """True for ``Api`` itself and any namespace nested below it (``Api\\V1``)."""
        namespace = namespace.strip("\\")
        base: str = self.controller_namespace.strip("\\")
        return namespace == base or namespace.startswith(base + "\\")

    def qualify(self, *parts: str) -> str:
        """Join namespace parts under the root namespace: ``App\\Data\\PostData``."""
        return "\\".join([self.root_namespace, *[p.strip("\\") for p in parts if p]])


# ---------------------------------------------------------------------------
# Generation output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """One generated output file."""

    kind: str
    path: str
    content: str


__all__: List[str] = [
    "MANAGED_COLUMNS",
    "RelationshipKind",
    "EnumStrategy",
    "ColumnInfo",
    "EntityInfo",
    "ControllerInfo",
    "SchemaDefinition",
    "GeneratorConfig",
    "GeneratedArtifact",
]

logger.debug("blueprintgen.models loaded: %d public symbols.", len(__all__))
