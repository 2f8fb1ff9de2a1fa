"""
tests/test_utils.py
Unit tests for blueprintgen.utils (inflection, PHP literals, timing).
"""

from __future__ import annotations

import pytest

from blueprintgen.utils import (
    Timer,
    count_lines,
    format_php_array,
    php_string,
    sha256_hex,
    to_camel_case,
    to_plural,
    to_singular,
    to_snake_case,
    to_studly_case,
    to_title_human,
)


class TestCaseConversion:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("BlogPost", "blog_post"),
            ("publishedAt", "published_at"),
            ("already_snake", "already_snake"),
            ("HTTPResponse", "http_response"),
            ("", ""),
        ],
    )
    def test_to_snake_case(self, value: str, expected: str) -> None:
        assert to_snake_case(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("post_status", "PostStatus"),
            ("BlogPost", "BlogPost"),
            ("user", "User"),
            ("", ""),
        ],
    )
    def test_to_studly_case(self, value: str, expected: str) -> None:
        assert to_studly_case(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("blog_posts", "blogPosts"),
            ("User", "user"),
            ("comments", "comments"),
            ("", ""),
        ],
    )
    def test_to_camel_case(self, value: str, expected: str) -> None:
        assert to_camel_case(value) == expected

    def test_to_title_human(self) -> None:
        assert to_title_human("published_at") == "Published At"
        assert to_title_human("BlogPost") == "Blog Post"
        assert to_title_human("") == ""


class TestInflection:

    @pytest.mark.parametrize(
        "singular, plural",
        [
            ("post", "posts"),
            ("Tag", "Tags"),
            ("category", "categories"),
            ("box", "boxes"),
            ("person", "people"),
            ("Status", "Statuses"),
        ],
    )
    def test_to_plural(self, singular: str, plural: str) -> None:
        assert to_plural(singular) == plural

    def test_to_plural_keeps_plural_words(self) -> None:
        assert to_plural("comments") == "comments"

    @pytest.mark.parametrize(
        "plural, singular",
        [
            ("posts", "post"),
            ("Comments", "Comment"),
            ("categories", "category"),
            ("people", "person"),
            ("addresses", "address"),
        ],
    )
    def test_to_singular(self, plural: str, singular: str) -> None:
        assert to_singular(plural) == singular

    def test_to_singular_keeps_singular_words(self) -> None:
        assert to_singular("Post") == "Post"
        assert to_singular("status") == "status"


class TestPhpLiterals:

    def test_php_string_escapes_quotes_and_backslashes(self) -> None:
        assert php_string("it's") == "'it\\'s'"
        assert php_string("A\\B") == "'A\\\\B'"

    def test_empty_array(self) -> None:
        assert format_php_array([]) == "[]"

    def test_single_item_inline(self) -> None:
        assert format_php_array(["title"], quoted=True) == "['title']"

    def test_block_form(self) -> None:
        assert format_php_array(["created_at", "id"], quoted=True) == (
            "[\n"
            "            'created_at',\n"
            "            'id',\n"
            "        ]"
        )

    def test_unquoted_items_are_verbatim(self) -> None:
        assert format_php_array(["AllowedFilter::exact('status')"]) == (
            "[AllowedFilter::exact('status')]"
        )


class TestMisc:

    def test_sha256_hex_is_stable(self) -> None:
        assert sha256_hex("abc") == sha256_hex("abc")
        assert len(sha256_hex("abc")) == 64

    def test_count_lines(self) -> None:
        assert count_lines("") == 0
        assert count_lines("a") == 1
        assert count_lines("a\nb\n") == 2

    def test_timer_measures_elapsed(self) -> None:
        with Timer("noop") as t:
            pass
        assert t.elapsed >= 0.0
        assert "noop" in repr(t)
