# File: blueprintgen/templates.py
"""
Blueprintgen - Artifact Templates
===================================
Turns one controller declaration or one entity into the text of a PHP
source file.

    ControllerTemplate   ``App\\Http\\Controllers\\Api\\{Name}Controller``
    DataTemplate         ``App\\Data\\{Entity}Data``

Each ``render`` call builds its fragments (allow-lists, documentation
attributes, property declarations, method bodies) into plain strings,
threading every class it references through a fresh ``ImportRegistry``,
and then fills the class stub in a single pass.  Nothing is written to
disk here; the result is a ``GeneratedArtifact`` with a path relative to
the output directory.

Template objects hold no per-artifact state and can render any number of
artifacts.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from blueprintgen.allowlists import (
    build_allowed_filters,
    build_allowed_includes,
    build_allowed_sorts,
)
from blueprintgen.examples import Clock, default_clock, describe_column, example_value
from blueprintgen.imports import ImportRegistry
from blueprintgen.models import (
    ColumnInfo,
    ControllerInfo,
    EntityInfo,
    GeneratedArtifact,
    GeneratorConfig,
)
from blueprintgen.resolvers import ClassResolver
from blueprintgen.stubs import StubRepository, render_stub
from blueprintgen.typemap import DATE_WRAPPER_TYPE, is_date_type, is_enum_type, map_type
from blueprintgen.utils import php_string, to_camel_case, to_studly_case, to_title_human

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_INDENT: str = "    "
_DOUBLE_INDENT: str = "        "

CONTROLLER_KIND: str = "API Controller"
DATA_KIND: str = "Data"

CONTROLLER_CLASS_STUB: str = "api-controller.class.stub"
CONTROLLER_METHOD_STUB: str = "api-controller.method.{verb}.stub"
DATA_CLASS_STUB: str = "data.class.stub"

# Referenced class names
JSON_RESPONSE: str = "Illuminate\\Http\\JsonResponse"
BODY_PARAMETER: str = "Dedoc\\Scramble\\Attributes\\BodyParameter"
PATH_PARAMETER: str = "Dedoc\\Scramble\\Attributes\\PathParameter"
DATA_BASE: str = "Spatie\\LaravelData\\Data"
WITH_CAST: str = "Spatie\\LaravelData\\Attributes\\WithCast"
ENUM_CAST: str = "Spatie\\LaravelData\\Casts\\EnumCast"
DATE_CAST: str = "Spatie\\LaravelData\\Casts\\DateTimeInterfaceCast"
CARBON_IMMUTABLE: str = "Carbon\\CarbonImmutable"

# Verbs whose method receives a Data object / documents a request body
_BODY_VERBS: frozenset = frozenset({"store", "update"})
# Verbs whose route carries the model key, with the wording used in docs
_PATH_VERBS: Dict[str, str] = {"update": "to update", "destroy": "to delete"}


def _basename(fqcn: str) -> str:
    return fqcn.rsplit("\\", 1)[-1]


class _StubTemplate:
    """Shared wiring for stub-backed artifact templates."""

    def __init__(
        self,
        config: GeneratorConfig,
        stubs: Optional[StubRepository] = None,
        clock: Clock = default_clock,
    ) -> None:
        self._config: GeneratorConfig = config
        self._stubs: StubRepository = stubs or StubRepository(config.stub_paths)
        self._clock: Clock = clock
        self._resolver: ClassResolver = ClassResolver(config)


# ---------------------------------------------------------------------------
# API controllers
# ---------------------------------------------------------------------------


class ControllerTemplate(_StubTemplate):
    """
    Renders an API controller.

    When the controller's model is unknown (``entity is None``) the
    allow-lists fall back to their minimal defaults and no documentation
    attributes are emitted; the file is still produced.
    """

    def render(self, controller: ControllerInfo, entity: Optional[EntityInfo]) -> GeneratedArtifact:
        class_template: str = self._stubs.load(CONTROLLER_CLASS_STUB)

        model: str = controller.model_name
        imports: ImportRegistry = ImportRegistry()
        imports.add(JSON_RESPONSE)
        imports.add(
            self._config.qualify(
                "Http\\Controllers", self._config.controller_namespace, "BaseApiController"
            )
        )
        if entity is not None:
            imports.add(self._resolver.model_fqcn(model))
            imports.add(self._resolver.resource_fqcn(controller.namespace, model))
        else:
            logger.warning(
                "No model '%s' for %s; using default allow-lists.",
                model,
                controller.class_name,
            )

        slots: Dict[str, str] = {
            "namespace": self._resolver.controller_namespace(controller.namespace),
            "class": controller.class_name,
            "model": model,
            "modelClass": f"{to_studly_case(model)}::class",
            "resourceClass": f"{self._resolver.resource_class_name(model)}::class",
            "allowedFilters": build_allowed_filters(entity, imports),
            "allowedSorts": build_allowed_sorts(entity, self._config.sortable_columns),
            "allowedIncludes": build_allowed_includes(entity),
        }

        methods: List[str] = self._render_methods(controller, entity, imports)
        slots["methods"] = "\n" + "\n".join(methods) if methods else ""
        slots["imports"] = imports.render()

        content: str = render_stub(class_template, slots)
        path: str = self._resolver.controller_path(controller.namespace, controller.class_name)
        logger.debug(
            "Rendered %s: %d methods, %d imports.",
            controller.class_name,
            len(methods),
            len(imports),
        )
        return GeneratedArtifact(kind=CONTROLLER_KIND, path=path, content=content)

    # -- Methods ------------------------------------------------------------

    def _render_methods(
        self,
        controller: ControllerInfo,
        entity: Optional[EntityInfo],
        imports: ImportRegistry,
    ) -> List[str]:
        rendered: List[str] = []
        model: str = controller.model_name

        for verb in controller.methods:
            if verb not in self._config.method_verbs:
                continue
            template: Optional[str] = self._stubs.find(CONTROLLER_METHOD_STUB.format(verb=verb))
            if template is None:
                logger.debug("No stub for %s::%s; method skipped.", controller.class_name, verb)
                continue

            slots: Dict[str, str] = {
                "modelVariable": to_camel_case(model),
                "modelClass": to_studly_case(model),
                "modelName": to_title_human(model),
                "resourceClass": self._resolver.resource_class_name(model),
                f"{verb}Attributes": self._attribute_block(verb, model, entity, imports),
            }
            if verb in _BODY_VERBS:
                slots["dataClass"] = self._resolver.data_class_name(model)
                imports.add(self._resolver.data_fqcn(model))

            rendered.append(render_stub(template, slots))
        return rendered

    # -- Documentation attributes ------------------------------------------

    def _attribute_block(
        self,
        verb: str,
        model: str,
        entity: Optional[EntityInfo],
        imports: ImportRegistry,
    ) -> str:
        if entity is None:
            return ""

        lines: List[str] = []
        if verb in _PATH_VERBS:
            imports.add(PATH_PARAMETER)
            variable: str = to_camel_case(model)
            lines.append(
                f"#[PathParameter({php_string(variable)}, "
                f"description: {php_string(f'The {variable} {_PATH_VERBS[verb]}.')}, "
                f"type: 'integer', example: 1)]"
            )

        if verb in _BODY_VERBS:
            operation: str = "creating" if verb == "store" else "updating"
            body: List[str] = [
                self._body_parameter(column, entity, operation)
                for column in entity.columns
                if self._documents(column)
            ]
            if body:
                imports.add(BODY_PARAMETER)
                lines.extend(body)

        if not lines:
            return ""
        return _INDENT + f"\n{_INDENT}".join(lines) + "\n"

    def _documents(self, column: ColumnInfo) -> bool:
        if column.is_managed:
            return False
        if column.is_foreign_key:
            return self._config.document_foreign_keys
        return True

    def _body_parameter(self, column: ColumnInfo, entity: EntityInfo, operation: str) -> str:
        enum_class: Optional[str] = None
        if is_enum_type(column.data_type):
            enum_class = self._resolver.enum_class(column, entity)
        mapping = map_type(column.data_type, column.name, enum_class)

        parts: List[str] = [
            php_string(column.name),
            f"description: {php_string(describe_column(column.name, operation))}",
            f"type: {php_string(mapping.doc_type)}",
        ]
        if mapping.doc_format:
            parts.append(f"format: {php_string(mapping.doc_format)}")
        parts.append(f"required: {'false' if column.nullable else 'true'}")
        parts.append(
            f"example: {example_value(column.name, column.data_type, column.attributes, self._clock)}"
        )
        return f"#[BodyParameter({', '.join(parts)})]"


# ---------------------------------------------------------------------------
# Data objects
# ---------------------------------------------------------------------------


class DataTemplate(_StubTemplate):
    """Renders the ``{Entity}Data`` class for an entity."""

    def render(self, entity: EntityInfo) -> GeneratedArtifact:
        class_template: str = self._stubs.load(DATA_CLASS_STUB)

        imports: ImportRegistry = ImportRegistry()
        imports.add(DATA_BASE)

        properties: List[str] = [
            self._column_property(column, entity, imports)
            for column in entity.columns
            if column.is_body_column
        ]
        properties.extend(self._relationship_properties(entity, imports))

        class_name: str = self._resolver.data_class_name(entity.name)
        slots: Dict[str, str] = {
            "namespace": self._config.qualify("Data"),
            "class": class_name,
            "imports": imports.render(),
            "properties": f",\n{_DOUBLE_INDENT}".join(properties) + "," if properties else "",
        }

        logger.debug("Rendered %s: %d properties.", class_name, len(properties))
        return GeneratedArtifact(
            kind=DATA_KIND,
            path=self._resolver.data_path(entity.name),
            content=render_stub(class_template, slots),
        )

    def _column_property(self, column: ColumnInfo, entity: EntityInfo, imports: ImportRegistry) -> str:
        attributes: List[str] = []

        if is_enum_type(column.data_type):
            enum_class: str = self._resolver.enum_class(column, entity)
            php_type: str = _basename(enum_class)
            imports.add(WITH_CAST)
            imports.add(ENUM_CAST)
            imports.add(enum_class)
            attributes.append(f"#[WithCast(EnumCast::class, type: {php_type}::class)]")
        elif is_date_type(column.data_type):
            php_type = DATE_WRAPPER_TYPE
            imports.add(CARBON_IMMUTABLE)
            imports.add(WITH_CAST)
            imports.add(DATE_CAST)
            attributes.append("#[WithCast(DateTimeInterfaceCast::class)]")
        else:
            php_type = map_type(column.data_type, column.name).target_type

        nullable: str = "?" if column.nullable else ""
        declaration: str = f"public {nullable}{php_type} ${column.name}"
        return f"\n{_DOUBLE_INDENT}".join([*attributes, declaration])

    def _relationship_properties(self, entity: EntityInfo, imports: ImportRegistry) -> List[str]:
        properties: List[str] = []
        seen: set = set(entity.column_names)

        for kind, related in entity.iter_relationships():
            prop: str = self._resolver.relationship_property(related, kind)
            if not prop or prop in seen:
                continue
            seen.add(prop)

            data_class: str = self._resolver.data_class_name(related)
            imports.add(self._resolver.data_fqcn(related))
            if kind.is_to_many:
                properties.append(
                    f"/** @var array<{data_class}> */\n{_DOUBLE_INDENT}public array ${prop}"
                )
            else:
                properties.append(f"public {data_class} ${prop}")
        return properties


__all__: List[str] = [
    "CONTROLLER_KIND",
    "DATA_KIND",
    "CONTROLLER_CLASS_STUB",
    "CONTROLLER_METHOD_STUB",
    "DATA_CLASS_STUB",
    "ControllerTemplate",
    "DataTemplate",
]

logger.debug("blueprintgen.templates loaded.")
