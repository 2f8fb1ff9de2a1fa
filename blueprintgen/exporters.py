# File: blueprintgen/exporters.py
"""
Blueprintgen - File Emitter
=============================

Responsible for:
    1. Computing the absolute destination of every generated artifact.
    2. Creating missing parent directories.
    3. Writing each file atomically (write-to-temp then ``os.replace``).
    4. Recording a manifest of ``(kind, absolute path)`` pairs with
       checksums for reproducibility checks.
    5. Removing a resource's generated files again, noting which were found.

Existing files are overwritten unconditionally, so regenerating from the
same draft is idempotent.  A failed write leaves the previous file (or no
file) behind, never a truncated one, and the ``OSError`` propagates to the
caller.  Files written earlier in the same run are kept.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from blueprintgen.models import GeneratedArtifact
from blueprintgen.utils import count_lines, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("blueprintgen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single emitted file."""

    kind: str
    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """Append-only record of the files emitted (or removed) in one run."""

    output_directory: str = ""
    files: List[FileRecord] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def created(self) -> List[Tuple[str, str]]:
        """``(kind, absolute path)`` pairs in emission order."""
        return [(f.kind, f.absolute_path) for f in self.files]

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output_directory": self.output_directory,
            "total_files": len(self.files),
            "total_bytes": self.total_bytes,
            "total_lines": self.total_lines,
            "files": [
                {
                    "kind": f.kind,
                    "relative_path": f.relative_path,
                    "absolute_path": f.absolute_path,
                    "size_bytes": f.size_bytes,
                    "line_count": f.line_count,
                    "sha256": f.sha256,
                }
                for f in self.files
            ],
            "removed": list(self.removed),
            "missing": list(self.missing),
        }

    def to_json(self, indent_size: int = 2) -> str:
        """Serialise manifest to pretty-printed JSON."""
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)


# ---------------------------------------------------------------------------
# FileEmitter
# ---------------------------------------------------------------------------


class FileEmitter:
    """
    Writes generated artifacts below an output directory.

    Usage::

        emitter = FileEmitter(Path("./out"))
        record = emitter.emit(artifact)
        print(emitter.manifest.created)

    With ``dry_run=True`` nothing touches the filesystem but the manifest
    is still filled, so callers can report what *would* be written.

    Thread-safety: NOT thread-safe.  Use one emitter per run.
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        *,
        atomic_writes: bool = True,
        dry_run: bool = False,
    ) -> None:
        self._output_dir: Path = Path(output_dir).resolve()
        self._atomic_writes: bool = atomic_writes
        self._dry_run: bool = dry_run
        self._manifest: ExportManifest = ExportManifest(output_directory=str(self._output_dir))

        logger.debug(
            "FileEmitter initialised: output_dir=%s, atomic=%s, dry_run=%s.",
            self._output_dir,
            self._atomic_writes,
            self._dry_run,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def manifest(self) -> ExportManifest:
        return self._manifest

    def target_path(self, relative_path: str) -> Path:
        return self._output_dir / relative_path

    def emit(self, artifact: GeneratedArtifact) -> FileRecord:
        """Write *artifact* and append it to the manifest."""
        full_path: Path = self.target_path(artifact.path)
        encoded: bytes = artifact.content.encode("utf-8")

        if self._dry_run:
            logger.info("[dry-run] Would write %s (%d bytes).", artifact.path, len(encoded))
        else:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            if self._atomic_writes:
                self._atomic_write(full_path, encoded)
            else:
                full_path.write_bytes(encoded)
            logger.debug(
                "Wrote file: %s (%d bytes, %d lines).",
                artifact.path,
                len(encoded),
                count_lines(artifact.content),
            )

        record: FileRecord = FileRecord(
            kind=artifact.kind,
            relative_path=artifact.path,
            absolute_path=str(full_path),
            size_bytes=len(encoded),
            line_count=count_lines(artifact.content),
            sha256=sha256_hex(artifact.content),
        )
        self._manifest.files.append(record)
        return record

    def remove(self, relative_path: str) -> bool:
        """
        Delete a previously generated file.

        Returns ``True`` and records the path under ``manifest.removed``
        when the file exists (a dry run only records it); otherwise records
        it under ``manifest.missing`` and returns ``False``.
        """
        full_path: Path = self.target_path(relative_path)
        if not full_path.is_file():
            logger.info("Not found: %s", relative_path)
            self._manifest.missing.append(relative_path)
            return False

        if self._dry_run:
            logger.info("[dry-run] Would delete %s.", relative_path)
        else:
            full_path.unlink()
            logger.info("Deleted: %s", relative_path)
        self._manifest.removed.append(relative_path)
        return True

    def write_manifest(self, path: Union[str, Path]) -> Path:
        """Write the manifest as JSON to *path* (atomically)."""
        target: Path = Path(path).resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        self._atomic_write(target, self._manifest.to_json().encode("utf-8"))
        logger.info("Manifest written to %s.", target)
        return target

    @staticmethod
    def _atomic_write(target_path: Path, data: bytes) -> None:
        """
        Write data to target_path atomically using a temporary sibling file.

        The temporary file lives in the destination directory so that
        ``os.replace`` stays on one filesystem.  On failure the temporary
        file is removed and the error is re-raised.
        """
        fd: int = -1
        tmp_path: str = ""
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target_path.parent),
                prefix=f".{target_path.name}.",
                suffix=".tmp",
            )
            os.write(fd, data)
            os.fsync(fd)
            os.close(fd)
            fd = -1

            # mkstemp creates 0600 files
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, str(target_path))
            tmp_path = ""
        finally:
            if fd >= 0:
                os.close(fd)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)


__all__: List[str] = [
    "FileEmitter",
    "ExportManifest",
    "FileRecord",
]

logger.debug("blueprintgen.exporters loaded.")
