# File: blueprintgen/__init__.py
"""
Blueprintgen - Laravel API Controller & Data Object Generator
===============================================================

Reads a Blueprint-style draft (``draft.yaml``) and writes, for a Laravel
application:

    * one API controller per declared ``Api/*`` controller, with Spatie
      QueryBuilder allow-lists and Scramble documentation attributes;
    * one Spatie ``Data`` class per model.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌────────────────────┐
    │  CLI / Entry │────▶│   Generator   │────▶│ Controller/Data    │
    │   (cli.py)   │     │ (generator.py)│     │ Template (stubs)   │
    └──────────────┘     └───────┬───────┘     └────────────────────┘
                                 │
                    ┌────────────┼────────────┐
                    ▼            ▼            ▼
             ┌──────────┐ ┌───────────┐ ┌───────────┐
             │  drafts  │ │validators │ │ exporters │
             │  (.py)   │ │  (.py)    │ │  (.py)    │
             └──────────┘ └───────────┘ └───────────┘

Usage::

    # As a library
    from blueprintgen import Generator
    report = Generator().generate_from_file("draft.yaml", "./my-app")

    # From the command line
    python -m blueprintgen --draft draft.yaml --output ./my-app -v
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from blueprintgen.models import (
    ColumnInfo,
    ControllerInfo,
    EntityInfo,
    EnumStrategy,
    GeneratedArtifact,
    GeneratorConfig,
    RelationshipKind,
    SchemaDefinition,
)
from blueprintgen.drafts import DraftError, load_draft_file, parse_draft
from blueprintgen.validators import ValidationResult, validate_full
from blueprintgen.stubs import StubRepository, TemplateNotFound, render_stub
from blueprintgen.templates import ControllerTemplate, DataTemplate
from blueprintgen.exporters import ExportManifest, FileEmitter, FileRecord
from blueprintgen.generator import GenerationReport, Generator

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    "__license__",
    # Orchestrator
    "Generator",
    "GenerationReport",
    # Models
    "ColumnInfo",
    "ControllerInfo",
    "EntityInfo",
    "EnumStrategy",
    "GeneratedArtifact",
    "GeneratorConfig",
    "RelationshipKind",
    "SchemaDefinition",
    # Drafts
    "DraftError",
    "load_draft_file",
    "parse_draft",
    # Validation
    "validate_full",
    "ValidationResult",
    # Templates & stubs
    "ControllerTemplate",
    "DataTemplate",
    "StubRepository",
    "TemplateNotFound",
    "render_stub",
    # Emission
    "FileEmitter",
    "ExportManifest",
    "FileRecord",
]
