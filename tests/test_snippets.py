# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for snippet insert text."""

import pytest

from json_schema_completion.protocol import CompletionMode
from json_schema_completion.snippets import (
    SnippetCompiler,
    json5_property_insert_snippet,
    label_for_value,
)


@pytest.fixture
def compiler():
    return SnippetCompiler(CompletionMode.JSON)


@pytest.fixture
def json5_compiler():
    return SnippetCompiler(CompletionMode.JSON5)


class TestPropertyInsertText:
    """Value guesses in priority order."""

    def test_key_only(self, compiler):
        assert compiler.property_insert_text("name", False, "", {"default": "x"}) == '"name"'

    def test_default(self, compiler):
        text = compiler.property_insert_text("name", True, "", {"type": "string", "default": "x"})
        assert text == '"name": "${x}"'

    def test_default_wins_over_enum(self, compiler):
        schema = {"default": 2, "enum": [1, 2, 3]}
        assert compiler.property_insert_text("n", True, "", schema) == '"n": ${2}'

    def test_single_enum_member(self, compiler):
        assert compiler.property_insert_text("c", True, "", {"enum": ["red"]}) == '"c": "${red}"'

    def test_multiple_enum_members_leave_placeholder_empty(self, compiler):
        schema = {"enum": ["red", "green"]}
        assert compiler.property_insert_text("c", True, "", schema) == '"c": #{}'

    def test_const(self, compiler):
        assert compiler.property_insert_text("v", True, "", {"const": True}) == '"v": ${true}'

    def test_single_example(self, compiler):
        schema = {"type": "integer", "examples": [8080]}
        assert compiler.property_insert_text("port", True, "", schema) == '"port": ${8080}'

    def test_multiple_examples_leave_placeholder_empty(self, compiler):
        schema = {"type": "integer", "examples": [80, 443]}
        assert compiler.property_insert_text("port", True, "", schema) == '"port": #{}'

    def test_enum_and_const_are_ambiguous(self, compiler):
        schema = {"enum": ["a"], "const": "a"}
        assert compiler.property_insert_text("k", True, "", schema) == '"k": #{}'

    @pytest.mark.parametrize(
        "schema, expected",
        [
            ({"type": "string"}, '"k": "#{}"'),
            ({"type": "integer"}, '"k": #{0}'),
            ({"type": "number"}, '"k": #{0}'),
            ({"type": "boolean"}, '"k": #{}'),
            ({"type": "null"}, '"k": #{null}'),
            ({"type": "object"}, '"k": {#{}}'),
            ({"type": "array"}, '"k": [#{}]'),
            ({"properties": {"a": {}}}, '"k": {#{}}'),
            ({"items": {}}, '"k": [#{}]'),
            ({"type": ["integer", "null"]}, '"k": #{0}'),
            ({}, '"k": #{}'),
            ({"type": "unknown"}, '"k": #{}'),
        ],
    )
    def test_type_skeletons(self, compiler, schema, expected):
        assert compiler.property_insert_text("k", True, "", schema) == expected

    def test_no_schema(self, compiler):
        assert compiler.property_insert_text("k", True) == '"k": #{}'


class TestValueRendering:
    """Escaping of literal values inside snippets."""

    def test_plain_text_escapes_snippet_syntax(self, compiler):
        assert compiler.plain_text("a$b}c\\") == "a\\$b\\}c\\\\"

    def test_string_with_special_characters(self, compiler):
        text = compiler.property_insert_text("k", True, "", {"default": 'say "${hi}"'})
        assert text == '"k": "${say \\\\"\\${hi\\}\\\\"}"'

    def test_null_default(self, compiler):
        assert compiler.guessed_value_text(None) == "${null}"

    def test_empty_containers(self, compiler):
        assert compiler.guessed_value_text({}) == "{#{}}"
        assert compiler.guessed_value_text([]) == "[#{}]"

    def test_object_value_renders_full_literal(self, compiler):
        assert compiler.guessed_value_text({"a": 1}) == '{\n\t"a": 1\n\\}'

    def test_separator_suffix(self, compiler):
        assert compiler.guessed_value_text(1, ",") == "${1},"
        assert compiler.value_text([], ",") == "[#{}],"

    def test_label_for_value_is_compact(self):
        assert label_for_value({"a": [1, 2]}) == '{"a":[1,2]}'
        assert label_for_value("héllo") == '"héllo"'


class TestJSON5Quoting:
    """Keys keep the quote style the user started with."""

    @pytest.mark.parametrize(
        "raw_word, expected",
        [('"na', '"name"'), ("'na", "'name'"), ("na", "name"), ("", "name")],
    )
    def test_quote_styles(self, raw_word, expected):
        assert json5_property_insert_snippet(raw_word, "name") == expected

    def test_json5_string_skeleton_uses_single_quotes(self, json5_compiler):
        text = json5_compiler.property_insert_text("k", True, "k", {"type": "string"})
        assert text == "k: '#{}'"

    def test_strict_json_always_double_quotes(self, compiler):
        assert compiler.property_insert_text("k", False, "'k") == '"k"'
