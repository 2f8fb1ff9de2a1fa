# File: blueprintgen/generator.py
"""
Blueprintgen - Generation Pipeline (Orchestrator)
===================================================

Connects every phase together:

    Draft → Validation → Artifact Rendering → File Emission

Workflow::

    1. Load a draft file (or accept in-memory models).
    2. Parse into ``SchemaDefinition`` + ``GeneratorConfig`` (drafts.py).
    3. Run the semantic validation pipeline (validators.py).
    4. Render one API controller per declared API controller and one
       Data object per model (templates.py).
    5. Write every artifact through the ``FileEmitter`` (exporters.py).
    6. Return a ``GenerationReport`` with the manifest and metrics.

Error handling strategy:
    - Validation errors are collected and surfaced, not swallowed; in
      strict mode (the default) they stop the run before anything is
      written.
    - A missing class stub aborts only the artifact that needs it; the
      artifact is listed as skipped and the run goes on.
    - Filesystem errors propagate to the caller unchanged.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from blueprintgen.drafts import load_draft_file, parse_draft
from blueprintgen.examples import Clock, default_clock
from blueprintgen.exporters import ExportManifest, FileEmitter
from blueprintgen.models import (
    ControllerInfo,
    GeneratedArtifact,
    GeneratorConfig,
    SchemaDefinition,
)
from blueprintgen.resolvers import ClassResolver
from blueprintgen.stubs import StubRepository, TemplateNotFound
from blueprintgen.templates import ControllerTemplate, DataTemplate
from blueprintgen.utils import Timer
from blueprintgen.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``Generator.generate()``.

    ``created`` is the run's manifest: ``(kind, absolute path)`` for every
    class-level artifact written (or, in a dry run, that would be written).
    """

    success: bool = False
    dry_run: bool = False
    source_file: str = ""
    output_directory: str = ""

    total_entities_processed: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    manifest: Optional[ExportManifest] = None

    @property
    def created(self) -> List[Tuple[str, str]]:
        return self.manifest.created if self.manifest is not None else []

    @property
    def total_files(self) -> int:
        return len(self.manifest.files) if self.manifest is not None else 0

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        if self.dry_run:
            status += " (dry run)"
        lines.append("=" * 60)
        lines.append("  Blueprintgen - Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:           {status}")
        if self.source_file:
            lines.append(f"  Draft:            {self.source_file}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Models processed: {self.total_entities_processed}")
        lines.append(f"  Files generated:  {self.total_files}")
        if self.manifest is not None:
            lines.append(f"  Total lines:      {self.manifest.total_lines:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append("-" * 60)

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<22s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        for kind, path in self.created:
            lines.append(f"    + {kind:<16s} {path}")

        sections: List[Tuple[str, str, List[str]]] = [
            ("Validation Errors", "✗", self.validation_errors),
            ("Validation Warnings", "⚠", self.validation_warnings),
            ("Generation Errors", "✗", self.generation_errors),
            ("Skipped", "⊘", self.skipped),
        ]
        for title, icon, items in sections:
            if not items:
                continue
            lines.append("-" * 60)
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class Generator:
    """
    Pipeline orchestrator.

    Usage::

        generator = Generator(GeneratorConfig(root_namespace="App"))

        # From in-memory models
        report = generator.generate(schema, Path("./out"))

        # From a draft file (its ``config:`` section applies on top)
        report = generator.generate_from_file(Path("draft.yaml"), Path("./out"))

        print(report.summary())

        # Undo a resource's artifacts
        manifest = generator.remove_resource("Post", Path("./out"))

    The generator is reusable: create once, call generate() many times.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        *,
        clock: Clock = default_clock,
        strict_validation: bool = True,
    ) -> None:
        """
        Args:
            config: Base configuration; defaults to ``GeneratorConfig()``.
            clock: Source of "now" for date examples.  Pass a frozen clock
                for reproducible output.
            strict_validation: If True, validation errors stop the run.
        """
        self._config: Optional[GeneratorConfig] = config
        self._clock: Clock = clock
        self._strict_validation: bool = strict_validation

        logger.debug("Generator initialised: strict=%s.", strict_validation)

    @property
    def config(self) -> GeneratorConfig:
        return self._config if self._config is not None else GeneratorConfig()

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        draft_path: Union[str, Path],
        output_dir: Union[str, Path],
        *,
        config_overrides: Optional[Mapping[str, Any]] = None,
        dry_run: bool = False,
    ) -> GenerationReport:
        """
        Full pipeline: load draft → validate → render → emit.

        Configuration precedence, lowest first: the generator's own config,
        the draft's ``config:`` section, *config_overrides*.

        Raises:
            FileNotFoundError: If the draft does not exist.
            DraftError: If the draft cannot be parsed.
            OSError: If writing an artifact fails.
        """
        draft_path = Path(draft_path)

        with Timer("load_draft") as t_load:
            raw: Dict[str, Any] = load_draft_file(draft_path)
            merged: Dict[str, Any] = (
                self._config.model_dump(exclude_unset=True) if self._config is not None else {}
            )
            merged.update(raw.get("config") or {})
            merged.update(config_overrides or {})
            schema, config = parse_draft(
                {**raw, "config": merged},
                source_file=str(draft_path),
            )

        step: GenerationStepMetric = GenerationStepMetric(
            step_name="Load Draft",
            elapsed_seconds=t_load.elapsed,
            detail=f"{len(schema.entities)} models from {draft_path.name}",
        )
        report: GenerationReport = GenerationReport(source_file=str(draft_path))
        report.step_metrics.append(step)
        return self._run_pipeline(schema, config, Path(output_dir), report, dry_run)

    # -----------------------------------------------------------------
    # Public: generate from in-memory models
    # -----------------------------------------------------------------

    def generate(
        self,
        schema: SchemaDefinition,
        output_dir: Union[str, Path],
        *,
        config: Optional[GeneratorConfig] = None,
        dry_run: bool = False,
    ) -> GenerationReport:
        """
        Full pipeline from pre-parsed models.

        Raises:
            OSError: If writing an artifact fails.
        """
        report: GenerationReport = GenerationReport(source_file=schema.source_file or "")
        return self._run_pipeline(
            schema, config or self.config, Path(output_dir), report, dry_run
        )

    def render_all(
        self,
        schema: SchemaDefinition,
        config: Optional[GeneratorConfig] = None,
    ) -> List[GeneratedArtifact]:
        """
        Render every artifact in memory without touching the filesystem.

        Artifacts whose class stub is missing are left out.
        """
        report: GenerationReport = GenerationReport()
        return list(self._iter_artifacts(schema, config or self.config, report))

    # -----------------------------------------------------------------
    # Public: remove a resource's artifacts
    # -----------------------------------------------------------------

    def remove_resource(
        self,
        name: str,
        output_dir: Union[str, Path],
        *,
        config: Optional[GeneratorConfig] = None,
        dry_run: bool = False,
    ) -> ExportManifest:
        """
        Delete the Data object and API controller generated for *name*.

        Paths are the ones the templates emit under *config*.  Files that do
        not exist are listed in ``manifest.missing``; that is not an error.

        Raises:
            OSError: If an existing file cannot be deleted.
        """
        config = config or self.config
        resolver: ClassResolver = ClassResolver(config)
        controller: ControllerInfo = ControllerInfo(
            name=name, namespace=config.controller_namespace
        )
        emitter: FileEmitter = FileEmitter(output_dir, dry_run=dry_run)

        for relative_path in (
            resolver.data_path(controller.model_name),
            resolver.controller_path(controller.namespace, controller.class_name),
        ):
            emitter.remove(relative_path)

        logger.info(
            "Resource %s: %d removed, %d not found%s.",
            controller.model_name,
            len(emitter.manifest.removed),
            len(emitter.manifest.missing),
            " (dry-run)" if dry_run else "",
        )
        return emitter.manifest

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        schema: SchemaDefinition,
        config: GeneratorConfig,
        output_dir: Path,
        report: GenerationReport,
        dry_run: bool,
    ) -> GenerationReport:
        pipeline_start: float = time.perf_counter()
        report.dry_run = dry_run
        report.output_directory = str(output_dir.resolve())

        if not self._step_validate(schema, config, report) and self._strict_validation:
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        emitter: FileEmitter = FileEmitter(
            output_dir,
            atomic_writes=config.atomic_writes,
            dry_run=dry_run,
        )
        report.manifest = emitter.manifest

        with Timer("generate") as t:
            for artifact in self._iter_artifacts(schema, config, report):
                emitter.emit(artifact)

        report.total_entities_processed = len(schema.entities)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Generate & Emit",
            success=not report.generation_errors,
            elapsed_seconds=t.elapsed,
            detail=f"{len(emitter.manifest.files)} files, {len(report.skipped)} skipped",
        ))
        logger.info(
            "Generated %d files (%d skipped) in %.3fs.",
            len(emitter.manifest.files),
            len(report.skipped),
            t.elapsed,
        )

        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(
        self,
        schema: SchemaDefinition,
        config: GeneratorConfig,
        report: GenerationReport,
    ) -> bool:
        with Timer("validation") as t:
            result: ValidationResult = validate_full(schema, config)

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.errors:
            detail: str = f"{len(result.errors)} error(s)"
        elif result.warnings:
            detail = f"{len(result.warnings)} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(GenerationStepMetric(
            step_name="Validate Draft",
            success=result.is_valid,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)
        for err in result.errors:
            logger.error("  ✗ %s", err)

        return result.is_valid

    # -----------------------------------------------------------------
    # Pipeline step: Rendering
    # -----------------------------------------------------------------

    def _controllers_to_generate(
        self,
        schema: SchemaDefinition,
        config: GeneratorConfig,
    ) -> List[ControllerInfo]:
        controllers: List[ControllerInfo] = [
            c for c in schema.controllers if config.in_controller_namespace(c.namespace)
        ]
        if config.controllers_for_all_models:
            covered = {c.model_name for c in controllers}
            for entity in schema.entities:
                if entity.name not in covered:
                    controllers.append(ControllerInfo(
                        name=entity.name,
                        namespace=config.controller_namespace,
                        methods=list(config.default_controller_methods),
                    ))
        return controllers

    def _iter_artifacts(
        self,
        schema: SchemaDefinition,
        config: GeneratorConfig,
        report: GenerationReport,
    ) -> Iterator[GeneratedArtifact]:
        """Yield artifacts one at a time; missing class stubs skip only their artifact."""
        stubs: StubRepository = StubRepository(config.stub_paths)

        jobs: List[Tuple[str, Callable[[], GeneratedArtifact]]] = []
        if config.generate_controllers:
            controller_template = ControllerTemplate(config, stubs, self._clock)
            for controller in self._controllers_to_generate(schema, config):
                entity = schema.get_entity(controller.model_name)
                jobs.append((
                    controller.class_name,
                    lambda c=controller, e=entity: controller_template.render(c, e),
                ))
        if config.generate_data:
            data_template = DataTemplate(config, stubs, self._clock)
            for entity in schema.entities:
                jobs.append((
                    f"{entity.name}Data",
                    lambda e=entity: data_template.render(e),
                ))

        for label, render in jobs:
            try:
                artifact: GeneratedArtifact = render()
            except TemplateNotFound as exc:
                report.skipped.append(label)
                report.generation_errors.append(f"{label}: {exc}")
                logger.error("Skipping %s: %s", label, exc)
                continue
            yield artifact

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(self, report: GenerationReport, total_elapsed: float) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = not report.generation_errors and (
            not report.validation_errors or not self._strict_validation
        )
        if report.success:
            logger.info("Generation finished in %.3fs.", total_elapsed)
        else:
            logger.error(
                "Generation failed: %d validation error(s), %d generation error(s).",
                len(report.validation_errors),
                len(report.generation_errors),
            )
        return report


__all__: List[str] = [
    "GenerationStepMetric",
    "GenerationReport",
    "Generator",
]

logger.debug("blueprintgen.generator loaded.")
