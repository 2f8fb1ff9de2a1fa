"""
tests/test_cli.py
Tests for the command-line interface and its exit codes.
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, Callable, Dict, Iterator, List

import pytest

from blueprintgen import __version__
from blueprintgen.cli import (
    EXIT_EXPORT_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """cli_main reconfigures the package logger; put it back for other tests."""
    package_logger = logging.getLogger("blueprintgen")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


class TestGeneration:

    def test_success(
        self,
        draft_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run(["-d", str(draft_yaml_path), "-o", str(output_dir), "-q"])
        assert code == EXIT_SUCCESS
        assert (output_dir / "app/Http/Controllers/Api/PostController.php").is_file()
        assert "SUCCESS" in capsys.readouterr().out

    def test_dry_run(self, draft_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        code = _run(["-d", str(draft_yaml_path), "-o", str(output_dir), "--dry-run", "-q"])
        assert code == EXIT_SUCCESS
        assert list(output_dir.iterdir()) == []

    def test_overrides(self, draft_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        code = _run([
            "-d", str(draft_yaml_path),
            "-o", str(output_dir),
            "--namespace", "Acme",
            "--enum-strategy", "qualified",
            "--all-models",
            "-q",
        ])
        assert code == EXIT_SUCCESS
        post_data = (output_dir / "app/Data/PostData.php").read_text(encoding="utf-8")
        assert "namespace Acme\\Data;" in post_data
        assert "use Acme\\Enums\\PostStatus;" in post_data
        assert (output_dir / "app/Http/Controllers/Api/UserController.php").is_file()

    def test_manifest(
        self,
        draft_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        tmp_path: pathlib.Path,
    ) -> None:
        manifest = tmp_path / "manifest.json"
        code = _run([
            "-d", str(draft_yaml_path), "-o", str(output_dir), "--manifest", str(manifest), "-q",
        ])
        assert code == EXIT_SUCCESS
        data = json.loads(manifest.read_text(encoding="utf-8"))
        assert data["total_files"] == 6

    def test_custom_stubs_missing_class_stub(
        self,
        draft_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        tmp_path: pathlib.Path,
    ) -> None:
        stubs = tmp_path / "stubs"
        stubs.mkdir()
        (stubs / "data.class.stub").write_text("// {{ class }}\n", encoding="utf-8")
        code = _run(["-d", str(draft_yaml_path), "-o", str(output_dir), "--stubs", str(stubs), "-q"])
        assert code == EXIT_SUCCESS
        assert (output_dir / "app/Data/TagData.php").read_text(encoding="utf-8") == "// TagData\n"


class TestFailures:

    @pytest.fixture()
    def invalid_draft(
        self,
        draft_dict: Dict[str, Any],
        write_draft: Callable[..., pathlib.Path],
    ) -> pathlib.Path:
        draft_dict["models"]["Class"] = {"name": "string"}
        return write_draft(draft_dict, "invalid.yaml")

    def test_validation_error(self, invalid_draft: pathlib.Path, output_dir: pathlib.Path) -> None:
        assert _run(["-d", str(invalid_draft), "-o", str(output_dir), "-q"]) == EXIT_VALIDATION_ERROR
        assert list(output_dir.iterdir()) == []

    def test_no_strict_generates_anyway(
        self,
        invalid_draft: pathlib.Path,
        output_dir: pathlib.Path,
    ) -> None:
        code = _run(["-d", str(invalid_draft), "-o", str(output_dir), "--no-strict", "-q"])
        assert code == EXIT_SUCCESS
        assert (output_dir / "app/Data/ClassData.php").is_file()

    def test_missing_draft(self, tmp_path: pathlib.Path) -> None:
        code = _run(["-d", str(tmp_path / "missing.yaml"), "-o", str(tmp_path / "out"), "-q"])
        assert code == EXIT_INPUT_ERROR

    def test_malformed_draft(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("models: [unclosed", encoding="utf-8")
        assert _run(["-d", str(path), "-o", str(tmp_path / "out"), "-q"]) == EXIT_INPUT_ERROR

    def test_output_required(self, draft_yaml_path: pathlib.Path) -> None:
        assert _run(["-d", str(draft_yaml_path), "-q"]) == EXIT_INPUT_ERROR

    def test_unwritable_output(self, draft_yaml_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        blocker = tmp_path / "out"
        blocker.write_text("file", encoding="utf-8")
        assert _run(["-d", str(draft_yaml_path), "-o", str(blocker), "-q"]) == EXIT_EXPORT_ERROR

    def test_missing_class_stub(
        self,
        draft_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        tmp_path: pathlib.Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from blueprintgen import stubs as stubs_module

        empty = tmp_path / "no-stubs"
        empty.mkdir()
        monkeypatch.setattr(stubs_module, "PACKAGED_STUBS_DIR", empty)
        code = _run(["-d", str(draft_yaml_path), "-o", str(output_dir), "-q"])
        assert code == EXIT_GENERATION_ERROR


class TestValidateOnly:

    def test_valid_draft(
        self,
        draft_yaml_path: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(["-d", str(draft_yaml_path), "--validate-only", "-q"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Valid:        Yes" in out
        assert "Models:       4" in out

    def test_invalid_draft(
        self,
        draft_dict: Dict[str, Any],
        write_draft: Callable[..., pathlib.Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        draft_dict["models"]["Class"] = {}
        path = write_draft(draft_dict)
        assert _run(["-d", str(path), "--validate-only", "-q"]) == EXIT_VALIDATION_ERROR
        assert "ENTITY_NAME_PHP_RESERVED" in capsys.readouterr().out

    def test_missing_draft(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-d", str(tmp_path / "nope.yaml"), "--validate-only"]) == EXIT_INPUT_ERROR


class TestDelete:

    @pytest.fixture()
    def generated(self, draft_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> pathlib.Path:
        assert _run(["-d", str(draft_yaml_path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        return output_dir

    def test_deletes_generated_files(
        self,
        generated: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        capsys.readouterr()
        assert _run(["--delete", "Post", "-o", str(generated), "-q"]) == EXIT_SUCCESS
        assert not (generated / "app/Data/PostData.php").exists()
        assert not (generated / "app/Http/Controllers/Api/PostController.php").exists()
        assert (generated / "app/Http/Controllers/Api/TagController.php").is_file()

        out = capsys.readouterr().out
        assert "Deleted (2):" in out
        assert "Not found (0):" in out
        assert "table 'posts'" in out

    def test_reports_missing_files(
        self,
        generated: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        capsys.readouterr()
        assert _run(["--delete", "Comment", "-o", str(generated), "-q"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Deleted (1):" in out
        assert "Not found (1):" in out
        assert "app/Http/Controllers/Api/CommentController.php" in out

    def test_dry_run(self, generated: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
        capsys.readouterr()
        code = _run(["--delete", "Post", "-o", str(generated), "--dry-run", "-q"])
        assert code == EXIT_SUCCESS
        assert "Would delete (2):" in capsys.readouterr().out
        assert (generated / "app/Data/PostData.php").is_file()

    def test_draft_config_sets_paths(
        self,
        draft_dict: Dict[str, Any],
        write_draft: Callable[..., pathlib.Path],
        output_dir: pathlib.Path,
    ) -> None:
        draft_dict["config"] = {"app_path": "src"}
        path = write_draft(draft_dict)
        assert _run(["-d", str(path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        assert (output_dir / "src/Data/TagData.php").is_file()

        assert _run(["--delete", "Tag", "-d", str(path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        assert not (output_dir / "src/Data/TagData.php").exists()
        assert not (output_dir / "src/Http/Controllers/Api/TagController.php").exists()

    def test_output_required(self) -> None:
        assert _run(["--delete", "Post", "-q"]) == EXIT_INPUT_ERROR

    def test_missing_draft(self, tmp_path: pathlib.Path) -> None:
        code = _run([
            "--delete", "Post", "-d", str(tmp_path / "nope.yaml"), "-o", str(tmp_path), "-q",
        ])
        assert code == EXIT_INPUT_ERROR

    def test_not_combined_with_validate_only(self, draft_yaml_path: pathlib.Path) -> None:
        assert _run(["--delete", "Post", "-d", str(draft_yaml_path), "--validate-only"]) == 2


class TestParser:

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_draft_is_required(self) -> None:
        assert _run([]) == 2

    def test_enum_strategy_choices(self, draft_yaml_path: pathlib.Path) -> None:
        assert _run(["-d", str(draft_yaml_path), "--enum-strategy", "magic"]) == 2
