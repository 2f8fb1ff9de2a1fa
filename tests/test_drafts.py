"""
tests/test_drafts.py
Tests for the Blueprint draft loader.

Tests cover:
- Column shorthand and mapping forms
- Relationship sections
- Model options (timestamps, softDeletes)
- Blueprint bare keyword lines
- Controller resource expansion
- Whole-document parsing, config overrides and error wrapping
"""

from __future__ import annotations

import pathlib
from typing import Any, Callable, Dict

import pytest

from blueprintgen.drafts import (
    DraftError,
    expand_bare_keywords,
    load_draft_file,
    parse_column,
    parse_controller,
    parse_draft,
    parse_model,
)
from blueprintgen.models import RelationshipKind

DEFAULT_METHODS = ["index", "store", "show", "update", "destroy"]


class TestParseColumn:

    def test_type_with_length_and_modifier(self) -> None:
        column = parse_column("title", "string:400 unique")
        assert column.data_type == "string"
        assert column.attributes == {"length": 400, "unique": True}
        assert not column.nullable

    def test_nullable_modifier_before_type(self) -> None:
        column = parse_column("published_at", "nullable timestamp")
        assert column.data_type == "timestamp"
        assert column.nullable

    def test_enum_values(self) -> None:
        column = parse_column("status", "enum:draft,published,archived")
        assert column.enum_values == ["draft", "published", "archived"]

    def test_decimal_precision(self) -> None:
        column = parse_column("price", "decimal:8,2")
        assert column.attributes == {"precision": 8, "scale": 2}

    def test_foreign_key(self) -> None:
        column = parse_column("user_id", "id foreign")
        assert column.data_type == "id"
        assert column.attributes == {"foreign": True}
        assert column.is_foreign_key

    def test_modifier_arguments(self) -> None:
        column = parse_column("views", "integer default:0")
        assert column.attributes == {"default": "0"}

    def test_mapping_form(self) -> None:
        column = parse_column("body", {"type": "text", "nullable": True, "enum_class": "X"})
        assert column.data_type == "text"
        assert column.nullable
        assert column.attributes == {"enum_class": "X"}

    def test_empty_definition_is_string(self) -> None:
        assert parse_column("name", None).data_type == "string"
        assert parse_column("name", "nullable").data_type == "string"

    def test_two_types_rejected(self) -> None:
        with pytest.raises(DraftError, match="two data types"):
            parse_column("title", "string text")

    def test_non_string_rejected(self) -> None:
        with pytest.raises(DraftError):
            parse_column("count", 5)


class TestParseModel:

    def test_columns_and_relationships(self) -> None:
        entity = parse_model(
            "Post",
            {
                "title": "string",
                "user_id": "id foreign",
                "relationships": {"hasMany": "Comment", "belongsTo": "User"},
            },
        )
        assert entity.column_names == ["title", "user_id"]
        assert list(entity.relationships) == [
            RelationshipKind.BELONGS_TO,
            RelationshipKind.HAS_MANY,
        ]
        assert entity.relationships[RelationshipKind.HAS_MANY] == ["Comment"]

    def test_relationship_kind_is_case_insensitive(self) -> None:
        entity = parse_model("Post", {"relationships": {"belongstomany": "Tag, Category"}})
        assert entity.relationships[RelationshipKind.BELONGS_TO_MANY] == ["Tag", "Category"]

    def test_unknown_relationship_kind(self) -> None:
        with pytest.raises(DraftError, match="Unknown relationship type"):
            parse_model("Post", {"relationships": {"hasMagic": "Tag"}})

    def test_empty_relationship_target_is_skipped(self) -> None:
        entity = parse_model("Post", {"relationships": {"hasMany": None}})
        assert entity.relationships == {}

    def test_timestamps_and_soft_deletes(self) -> None:
        entity = parse_model("Post", {"timestamps": False, "softDeletes": None})
        assert entity.timestamps is False
        assert entity.soft_deletes is True

    def test_tz_variants(self) -> None:
        entity = parse_model("Post", {"timestampsTz": False, "softDeletesTz": "softDeletesTz"})
        assert entity.timestamps is False
        assert entity.soft_deletes is True
        assert entity.columns == []

    def test_namespaced_model_name(self) -> None:
        assert parse_model("Blog/Post", {"title": "string"}).name == "Post"

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(DraftError):
            parse_model("Post", "title string")


class TestParseController:

    def test_api_resource(self) -> None:
        controller = parse_controller("Api/Post", {"resource": "api"}, DEFAULT_METHODS)
        assert controller.namespace == "Api"
        assert controller.name == "Post"
        assert controller.methods == DEFAULT_METHODS
        assert controller.class_name == "PostController"

    def test_web_resource(self) -> None:
        controller = parse_controller("Post", {"resource": "web"}, DEFAULT_METHODS)
        assert controller.namespace == ""
        assert controller.methods == [
            "index", "create", "store", "show", "edit", "update", "destroy",
        ]

    def test_explicit_method_list(self) -> None:
        controller = parse_controller("Api/Post", {"resource": "index, show"}, DEFAULT_METHODS)
        assert controller.methods == ["index", "show"]

    def test_extra_actions_are_appended_once(self) -> None:
        controller = parse_controller(
            "Api/Post",
            {"resource": "api", "publish": {"find": "post"}, "store": {"save": "post"}},
            DEFAULT_METHODS,
        )
        assert controller.methods == DEFAULT_METHODS + ["publish"]

    def test_plural_controller_maps_to_singular_model(self) -> None:
        controller = parse_controller("Api\\Comments", None, DEFAULT_METHODS)
        assert controller.model_name == "Comment"
        assert controller.methods == []


class TestParseDraft:

    def test_reference_draft(self, draft_dict: Dict[str, Any]) -> None:
        schema, config = parse_draft(draft_dict)
        assert schema.entity_names == ["User", "Post", "Comment", "Tag"]
        assert [c.class_name for c in schema.controllers] == ["PostController", "TagController"]
        post = schema.get_entity("Post")
        assert post is not None
        assert post.get_column("published_at").nullable
        assert post.get_column("title").attributes["length"] == 400
        assert config.root_namespace == "App"

    def test_config_section_and_overrides(self, draft_dict: Dict[str, Any]) -> None:
        draft_dict["config"] = {"root_namespace": "Acme", "document_foreign_keys": True}
        _schema, config = parse_draft(draft_dict, config_overrides={"root_namespace": "Shop"})
        assert config.root_namespace == "Shop"
        assert config.document_foreign_keys is True

    def test_invalid_config(self, draft_dict: Dict[str, Any]) -> None:
        draft_dict["config"] = {"no_such_option": 1}
        with pytest.raises(DraftError, match="Config validation failed"):
            parse_draft(draft_dict)

    def test_duplicate_models_rejected(self) -> None:
        raw = {"models": {"Post": {"title": "string"}, "Blog/Post": {"title": "string"}}}
        with pytest.raises(DraftError, match="Draft validation failed"):
            parse_draft(raw)

    def test_sections_must_be_mappings(self) -> None:
        with pytest.raises(DraftError):
            parse_draft({"models": ["Post"]})
        with pytest.raises(DraftError):
            parse_draft({"controllers": "Post"})

    def test_source_file_is_recorded(self, draft_dict: Dict[str, Any]) -> None:
        schema, _ = parse_draft(draft_dict, source_file="draft.yaml")
        assert schema.source_file == "draft.yaml"


class TestLoadDraftFile:

    def test_loads_yaml(self, draft_yaml_path: pathlib.Path) -> None:
        assert "models" in load_draft_file(draft_yaml_path)

    def test_loads_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "draft.json"
        path.write_text('{"models": {"Tag": {"title": "string"}}}', encoding="utf-8")
        assert load_draft_file(path)["models"]["Tag"] == {"title": "string"}

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_draft_file(tmp_path / "missing.yaml")

    def test_directory_rejected(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(DraftError):
            load_draft_file(tmp_path)

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("models: [unclosed", encoding="utf-8")
        with pytest.raises(DraftError, match="Invalid YAML"):
            load_draft_file(path)

    def test_top_level_must_be_mapping(
        self,
        write_draft: Callable[..., pathlib.Path],
    ) -> None:
        path = write_draft(["not", "a", "mapping"])
        with pytest.raises(DraftError, match="Expected a mapping"):
            load_draft_file(path)

    def test_bare_keyword_lines(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "draft.yaml"
        path.write_text(
            "models:\n"
            "  Post:\n"
            "    id\n"
            "    title: string\n"
            "    softDeletes\n"
            "    timestampsTz\n"
            "controllers:\n"
            "  Api/Post:\n"
            "    resource\n",
            encoding="utf-8",
        )
        schema, _config = parse_draft(load_draft_file(path))
        post = schema.entities[0]
        assert post.soft_deletes is True
        assert post.timestamps is True
        assert post.column_names == ["id", "title"]
        assert schema.controllers[0].methods == [
            "index", "create", "store", "show", "edit", "update", "destroy",
        ]


class TestExpandBareKeywords:

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("    softDeletes", "    softDeletes: softDeletes"),
            ("    softDeletesTz  ", "    softDeletesTz: softDeletesTz"),
            ("    timestamps", "    timestamps: timestamps"),
            ("    id", "    id: id"),
            ("    resource", "    resource: web"),
        ],
    )
    def test_rewrites(self, line: str, expected: str) -> None:
        assert expand_bare_keywords(f"models:\n{line}\n") == f"models:\n{expected}\n"

    @pytest.mark.parametrize(
        "text",
        [
            "    softDeletes: false\n",
            "    timestamps: false\n",
            "    user_id: id foreign\n",
            "    resource: api\n",
            "softDeletes\n",
        ],
    )
    def test_leaves_mappings_and_top_level_alone(self, text: str) -> None:
        assert expand_bare_keywords(text) == text
