"""
tests/conftest.py
Shared fixtures for the blueprintgen test suite.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixtures.  Every fixture
that feeds the generator uses a frozen clock so outputs are deterministic.
"""

from __future__ import annotations

import copy
import pathlib
from datetime import datetime, timezone
from typing import Any, Callable, Dict

import pytest
import yaml

from blueprintgen.models import (
    ColumnInfo,
    ControllerInfo,
    EntityInfo,
    GeneratorConfig,
    SchemaDefinition,
)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
DRAFT_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "draft_example.yaml"

FROZEN_NOW: datetime = datetime(2025, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
FROZEN_ISO: str = "2025-01-02T03:04:05.678901Z"


# ---------------------------------------------------------------------------
# Clock & config
# ---------------------------------------------------------------------------


@pytest.fixture()
def frozen_clock() -> Callable[[], datetime]:
    return lambda: FROZEN_NOW


@pytest.fixture()
def frozen_iso() -> str:
    return FROZEN_ISO


@pytest.fixture()
def config() -> GeneratorConfig:
    return GeneratorConfig()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


@pytest.fixture()
def post_entity() -> EntityInfo:
    """The Post model used throughout the end-to-end checks."""
    return EntityInfo(
        name="Post",
        columns=[
            ColumnInfo(name="title", data_type="string"),
            ColumnInfo(name="content", data_type="text"),
            ColumnInfo(
                name="status",
                data_type="enum",
                attributes={"values": ["draft", "published", "archived"]},
            ),
            ColumnInfo(name="published_at", data_type="datetime", nullable=True),
            ColumnInfo(name="user_id", data_type="integer"),
        ],
        relationships={
            "hasMany": "comments",
            "belongsToMany": "tags",
            "belongsTo": "user",
        },
    )


@pytest.fixture()
def tag_entity() -> EntityInfo:
    return EntityInfo(
        name="Tag",
        columns=[ColumnInfo(name="title", data_type="string")],
        relationships={"hasMany": "posts"},
    )


@pytest.fixture()
def post_controller() -> ControllerInfo:
    return ControllerInfo(
        name="Post",
        namespace="Api",
        methods=["index", "store", "show", "update", "destroy"],
    )


@pytest.fixture()
def blog_schema(post_entity: EntityInfo, tag_entity: EntityInfo) -> SchemaDefinition:
    return SchemaDefinition(
        entities=[
            EntityInfo(name="User", columns=[ColumnInfo(name="name")]),
            post_entity,
            EntityInfo(name="Comment", columns=[ColumnInfo(name="body", data_type="text")]),
            tag_entity,
        ],
        controllers=[
            ControllerInfo(name="Post", methods=["index", "store", "show", "update", "destroy"]),
            ControllerInfo(name="Tag", methods=["index", "store", "show", "update", "destroy"]),
        ],
    )


# ---------------------------------------------------------------------------
# Raw draft fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_draft_dict() -> Dict[str, Any]:
    """Load the reference draft_example.yaml once per session."""
    assert DRAFT_EXAMPLE_PATH.exists(), (
        f"Reference draft not found at {DRAFT_EXAMPLE_PATH}. "
        "Make sure draft_example.yaml is in the project root."
    )
    with open(DRAFT_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def draft_dict(raw_draft_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_draft_dict)


@pytest.fixture()
def write_draft(tmp_path: pathlib.Path) -> Callable[[Dict[str, Any]], pathlib.Path]:
    """Factory writing a draft dict to a temporary YAML file."""

    def _write(data: Dict[str, Any], name: str = "draft.yaml") -> pathlib.Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            yaml.dump(data, fh, default_flow_style=False, allow_unicode=True, sort_keys=False)
        return path

    return _write


@pytest.fixture()
def draft_yaml_path(
    draft_dict: Dict[str, Any],
    write_draft: Callable[[Dict[str, Any]], pathlib.Path],
) -> pathlib.Path:
    return write_draft(draft_dict)


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    out = tmp_path / "laravel"
    out.mkdir()
    return out
