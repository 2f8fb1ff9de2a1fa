# File: blueprintgen/cli.py
"""
Blueprintgen - Command-Line Interface
=======================================

CLI built on the standard-library ``argparse`` module.

Usage examples::

    # Generate controllers and Data objects into a Laravel project
    blueprintgen -d draft.yaml -o ./my-laravel-app

    # Verbose output, custom stubs first
    python -m blueprintgen -d draft.yaml -o ./out -vv --stubs ./stubs

    # Validate only (no file output)
    blueprintgen -d draft.yaml --validate-only

    # See what would be written
    blueprintgen -d draft.yaml -o ./out --dry-run

    # Remove the generated controller and Data object of a resource
    blueprintgen --delete Post -o ./my-laravel-app

Exit codes:
    0  success
    1  validation error
    2  generation error (an artifact was skipped)
    3  filesystem error while writing
    4  input error (missing or malformed draft, bad arguments)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``blueprintgen`` logger.

    Args:
        verbosity: -1 = errors only, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))

    root_logger: logging.Logger = logging.getLogger("blueprintgen")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    from blueprintgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="blueprintgen",
        description=(
            "Generate Laravel API controllers and Spatie Data objects "
            "from a Blueprint draft."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -d draft.yaml -o ./app\n"
            "  %(prog)s -d draft.yaml --validate-only\n"
            "  %(prog)s -d draft.yaml -o ./app --dry-run -v\n"
            "  %(prog)s --delete Post -o ./app\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"blueprintgen v{__version__}")

    parser.add_argument(
        "-d", "--draft",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to the Blueprint draft file (YAML). Required unless --delete is set.",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Laravel project root to write into. Required unless --validate-only is set.",
    )

    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the draft without generating code.",
    )
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render everything and report the files, but write nothing.",
    )
    mode_group.add_argument(
        "--delete",
        type=str,
        default=None,
        metavar="NAME",
        help="Delete the generated API controller and Data object of resource NAME.",
    )
    mode_group.add_argument(
        "--manifest",
        type=str,
        default=None,
        metavar="FILE",
        help="Also write the JSON manifest of generated files to FILE.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--stubs",
        action="append",
        default=None,
        metavar="DIR",
        help="Directory searched for stubs before the packaged ones (repeatable).",
    )
    config_group.add_argument(
        "--namespace",
        type=str,
        default=None,
        metavar="NS",
        help="Root PHP namespace (default: App).",
    )
    config_group.add_argument(
        "--enum-strategy",
        type=str,
        default=None,
        choices=["suffix", "qualified"],
        help="How enum class names are guessed when not declared.",
    )
    config_group.add_argument(
        "--all-models",
        action="store_true",
        default=False,
        help="Also scaffold API controllers for models without one in the draft.",
    )

    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--no-strict",
        action="store_true",
        default=False,
        help="Generate even if validation reports errors.",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.stubs:
        overrides["stub_paths"] = list(args.stubs)
    if args.namespace is not None:
        overrides["root_namespace"] = args.namespace
    if args.enum_strategy is not None:
        overrides["enum_strategy"] = args.enum_strategy
    if args.all_models:
        overrides["controllers_for_all_models"] = True
    return overrides


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(draft_path: Path, overrides: Dict[str, Any]) -> int:
    from blueprintgen.drafts import DraftError, load_draft_file, parse_draft
    from blueprintgen.utils import Timer
    from blueprintgen.validators import validate_full

    logger.info("Running validation-only mode for: %s", draft_path)

    try:
        raw = load_draft_file(draft_path)
        schema, config = parse_draft(raw, config_overrides=overrides, source_file=str(draft_path))
    except (FileNotFoundError, DraftError) as exc:
        logger.error("Failed to load draft: %s", exc)
        return EXIT_INPUT_ERROR

    with Timer("validation") as t:
        result = validate_full(schema, config)

    print("=" * 50)
    print("  Draft Validation Report")
    print("=" * 50)
    print(f"  File:         {draft_path.name}")
    print(f"  Models:       {len(schema.entities)}")
    print(f"  Controllers:  {len(schema.controllers)}")
    print(f"  Time:         {t.elapsed:.3f}s")
    print(f"  Valid:        {'Yes' if result.is_valid else 'No'}")
    if len(result):
        print()
        print(result.format_report())
    print("=" * 50)

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(
    draft_path: Path,
    output_dir: Path,
    args: argparse.Namespace,
    overrides: Dict[str, Any],
) -> int:
    from blueprintgen.drafts import DraftError
    from blueprintgen.exporters import FileEmitter
    from blueprintgen.generator import GenerationReport, Generator

    generator: Generator = Generator(strict_validation=not args.no_strict)

    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    try:
        report: GenerationReport = generator.generate_from_file(
            draft_path,
            output_dir,
            config_overrides=overrides,
            dry_run=args.dry_run,
        )
    except (FileNotFoundError, DraftError) as exc:
        logger.error("Failed to load draft: %s", exc)
        return EXIT_INPUT_ERROR
    except OSError as exc:
        logger.error("Failed to write generated files: %s", exc)
        return EXIT_EXPORT_ERROR

    print(report.summary())

    if args.manifest and report.manifest is not None and not args.dry_run:
        emitter: FileEmitter = FileEmitter(output_dir)
        emitter.manifest.files.extend(report.manifest.files)
        try:
            emitter.write_manifest(args.manifest)
        except OSError as exc:
            logger.error("Failed to write manifest: %s", exc)
            return EXIT_EXPORT_ERROR

    if not report.success:
        if report.validation_errors and not args.no_strict:
            return EXIT_VALIDATION_ERROR
        return EXIT_GENERATION_ERROR
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Delete mode
# ---------------------------------------------------------------------------


def _run_delete(
    name: str,
    draft_path: Optional[Path],
    output_dir: Path,
    args: argparse.Namespace,
    overrides: Dict[str, Any],
) -> int:
    from blueprintgen.drafts import DraftError, load_draft_file, parse_draft
    from blueprintgen.exporters import ExportManifest
    from blueprintgen.generator import Generator
    from blueprintgen.utils import to_plural, to_snake_case, to_studly_case

    try:
        raw: Dict[str, Any] = load_draft_file(draft_path) if draft_path is not None else {}
        _schema, config = parse_draft(
            raw,
            config_overrides=overrides,
            source_file=str(draft_path) if draft_path is not None else None,
        )
    except (FileNotFoundError, DraftError) as exc:
        logger.error("Failed to load draft: %s", exc)
        return EXIT_INPUT_ERROR

    try:
        manifest: ExportManifest = Generator(config).remove_resource(
            name, output_dir, dry_run=args.dry_run
        )
    except OSError as exc:
        logger.error("Failed to delete generated files: %s", exc)
        return EXIT_EXPORT_ERROR

    resource: str = to_studly_case(name)
    verb: str = "Would delete" if args.dry_run else "Deleted"
    print("=" * 50)
    print(f"  Resource Removal: {resource}")
    print("=" * 50)
    print(f"  {verb} ({len(manifest.removed)}):")
    for path in manifest.removed:
        print(f"    ✓ {path}")
    print(f"  Not found ({len(manifest.missing)}):")
    for path in manifest.missing:
        print(f"    ⊘ {path}")
    print("-" * 50)
    print("  Manual cleanup still required:")
    print(f"    - migration and table '{to_snake_case(to_plural(resource))}'")
    print("    - routes in routes/api.php")
    print("    - references in other models, controllers and tests")
    print("=" * 50)
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    _setup_logging(-1 if args.quiet else args.verbose)

    if args.draft is None and args.delete is None:
        parser.error("the following arguments are required: -d/--draft")
    if args.delete is not None and args.validate_only:
        parser.error("--delete cannot be combined with --validate-only")

    draft_path: Optional[Path] = Path(args.draft).resolve() if args.draft else None
    overrides: Dict[str, Any] = _build_config_overrides(args)

    if args.validate_only:
        sys.exit(_run_validate_only(draft_path, overrides))

    if args.output is None:
        logger.error(
            "Output directory is required for generation and deletion. "
            "Use -o/--output or --validate-only."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    output_dir: Path = Path(args.output).resolve()
    logger.info("Draft:   %s", draft_path)
    logger.info("Output:  %s", output_dir)

    if args.delete is not None:
        sys.exit(_run_delete(args.delete, draft_path, output_dir, args, overrides))

    exit_code: int = _run_generation(draft_path, output_dir, args, overrides)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("blueprintgen.cli loaded.")
