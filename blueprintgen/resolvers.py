# File: blueprintgen/resolvers.py
"""
Blueprintgen - Class Name Resolution
======================================
Derives the PHP class names a generated file refers to: enum classes for
enum columns, related Data classes for relationships, API resources and
models for controllers.

Enum classes are resolved in this order, first hit wins:

    1. ``enum_class`` declared on the column in the draft;
    2. ``GeneratorConfig.enum_classes`` keyed by ``"Entity.column"``;
    3. ``GeneratorConfig.enum_classes`` keyed by ``"column"``;
    4. the ``enum_strategy`` heuristic.

The heuristic is a naming guess with no registry behind it.  A draft
whose enums do not follow ``{Entity}{Column}`` or a configured suffix
should declare them explicitly.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from blueprintgen.models import (
    ColumnInfo,
    EntityInfo,
    EnumStrategy,
    GeneratorConfig,
    RelationshipKind,
)
from blueprintgen.utils import (
    to_camel_case,
    to_plural,
    to_singular,
    to_studly_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.resolvers")


class ClassResolver:
    """Resolves fully-qualified class names for one generator configuration."""

    def __init__(self, config: GeneratorConfig) -> None:
        self._config: GeneratorConfig = config

    # -- Enums --------------------------------------------------------------

    def enum_class(self, column: ColumnInfo, entity: EntityInfo) -> str:
        """Return the fully-qualified enum class for an enum column."""
        declared: Optional[str] = column.attributes.get("enum_class")
        if declared:
            return self._qualify_enum(str(declared))

        mapping = self._config.enum_classes
        for key in (f"{entity.name}.{column.name}", column.name):
            if key in mapping:
                return self._qualify_enum(mapping[key])

        enum_name: str = to_studly_case(column.name)
        if self._config.enum_strategy == EnumStrategy.SUFFIX and any(
            enum_name.endswith(suffix) for suffix in self._config.enum_suffixes
        ):
            fqcn: str = self._config.qualify("Enums", enum_name)
        else:
            fqcn = self._config.qualify("Enums", f"{entity.name}{enum_name}")

        logger.debug(
            "Guessed enum class %s for %s.%s (strategy=%s).",
            fqcn,
            entity.name,
            column.name,
            self._config.enum_strategy,
        )
        return fqcn

    def _qualify_enum(self, name: str) -> str:
        if "\\" in name:
            return name.lstrip("\\")
        return self._config.qualify("Enums", name)

    # -- Data objects -------------------------------------------------------

    def data_class_name(self, entity_name: str) -> str:
        return f"{to_studly_case(to_singular(entity_name))}Data"

    def data_fqcn(self, entity_name: str) -> str:
        return self._config.qualify("Data", self.data_class_name(entity_name))

    @staticmethod
    def relationship_property(related: str, kind: RelationshipKind) -> str:
        """Property name for a relationship: plural for to-many, singular otherwise."""
        if kind.is_to_many:
            return to_camel_case(to_plural(related))
        return to_camel_case(to_singular(related))

    # -- Controllers --------------------------------------------------------

    def model_fqcn(self, entity_name: str) -> str:
        return self._config.qualify(self._config.models_namespace, to_studly_case(entity_name))

    def resource_class_name(self, entity_name: str) -> str:
        return f"{to_studly_case(entity_name)}Resource"

    def resource_fqcn(self, controller_namespace: str, entity_name: str) -> str:
        return self._config.qualify(
            "Http\\Resources", controller_namespace, self.resource_class_name(entity_name)
        )

    def controller_namespace(self, controller_namespace: str) -> str:
        return self._config.qualify("Http\\Controllers", controller_namespace)

    # -- Output paths -------------------------------------------------------

    def _app_path(self, *parts: str) -> str:
        return "/".join([self._config.app_path.strip("/"), *parts])

    def controller_path(self, controller_namespace: str, class_name: str) -> str:
        """``app/Http/Controllers/Api/V1/PostController.php`` for ``Api\\V1``."""
        return self._app_path(
            "Http/Controllers",
            *[p for p in controller_namespace.split("\\") if p],
            f"{class_name}.php",
        )

    def data_path(self, entity_name: str) -> str:
        return self._app_path("Data", f"{self.data_class_name(entity_name)}.php")


__all__: List[str] = ["ClassResolver"]
