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

"""Tests for JSON Pointer resolution against schemas."""

import pytest

from json_schema_completion.schema.resolver import (
    SchemaPointerError,
    SchemaResolver,
    UnknownPropertyError,
    parent_pointer,
    split_pointer,
)


class TestPointerHelpers:
    def test_parent_pointer(self):
        assert parent_pointer("/a/b") == "/a"
        assert parent_pointer("/a") == ""
        assert parent_pointer("/a/") == "/a"
        assert parent_pointer("/a~1b/c") == "/a~1b"
        assert parent_pointer("") == ""

    def test_split_pointer_unescapes(self):
        assert split_pointer("/a~1b/c~0d/0") == ["a/b", "c~d", "0"]
        assert split_pointer("") == []
        assert split_pointer("#/a") == ["a"]

    def test_empty_segments_are_keys(self):
        assert split_pointer("/") == [""]
        assert split_pointer("/a/") == ["a", ""]
        assert split_pointer("//a") == ["", "a"]


class TestResolvePointer:
    """Walking the schema like a validator walks the document."""

    def test_properties_and_items(self, person_schema):
        resolver = SchemaResolver(person_schema)

        assert resolver.resolve_pointer("/address/city") == {"type": "string"}
        assert resolver.resolve_pointer("/tags/3") == {"enum": ["a", "b"]}

    def test_follows_refs_at_every_step(self, ref_schema):
        resolver = SchemaResolver(ref_schema)
        assert resolver.resolve_pointer("/address/city") == {"type": "string"}

    def test_tuple_items(self):
        schema = {
            "type": "array",
            "items": [{"type": "string"}, {"type": "number"}],
            "additionalItems": {"type": "boolean"},
        }
        resolver = SchemaResolver(schema)

        assert resolver.resolve_pointer("/1") == {"type": "number"}
        assert resolver.resolve_pointer("/5") == {"type": "boolean"}

    def test_tuple_items_without_additional_items(self):
        resolver = SchemaResolver({"items": [{"type": "string"}]})
        with pytest.raises(UnknownPropertyError):
            resolver.resolve_pointer("/2")

    def test_pattern_and_additional_properties(self):
        schema = {
            "type": "object",
            "patternProperties": {"^x-": {"type": "string"}},
            "additionalProperties": {"type": "number"},
        }
        resolver = SchemaResolver(schema)

        assert resolver.resolve_pointer("/x-foo") == {"type": "string"}
        assert resolver.resolve_pointer("/other") == {"type": "number"}

    def test_forbidden_property(self):
        schema = {"type": "object", "properties": {"a": {}}, "additionalProperties": False}
        with pytest.raises(UnknownPropertyError) as exc_info:
            SchemaResolver(schema).resolve_pointer("/b")

        assert exc_info.value.segment == "b"
        assert exc_info.value.pointer == "/b"

    def test_unknown_key_of_open_object(self, person_schema):
        resolved = SchemaResolver(person_schema).resolve_pointer("/unknown")
        assert resolved == {"type": "undefined"}

    def test_primitive_has_no_children(self, person_schema):
        with pytest.raises(SchemaPointerError):
            SchemaResolver(person_schema).resolve_pointer("/age/x")

    def test_descends_into_combinator_branches(self):
        schema = {
            "anyOf": [
                {"type": "string"},
                {"type": "object", "properties": {"flag": {"type": "boolean"}}},
            ]
        }
        resolved = SchemaResolver(schema).resolve_pointer("/flag")
        assert resolved == {"type": "boolean"}


class TestGetSchemas:
    """Parent retry and union expansion."""

    def test_root_pointer_returns_root(self, person_schema):
        resolver = SchemaResolver(person_schema)

        assert resolver.get_schemas("") == [person_schema]
        assert resolver.get_schemas("/") == [person_schema]

    def test_root_pointer_expands_root_ref(self):
        schema = {
            "$ref": "#/definitions/root",
            "definitions": {"root": {"properties": {"a": {"type": "string"}}}},
        }
        schemas = SchemaResolver(schema).get_schemas("")

        assert schemas[0]["properties"] == {"a": {"type": "string"}}

    def test_plain_fragment_is_returned(self, person_schema):
        schemas = SchemaResolver(person_schema).get_schemas("/address/city")
        assert schemas == [{"type": "string"}]

    def test_enum_fragment_retries_parent(self, person_schema):
        schemas = SchemaResolver(person_schema).get_schemas("/color")
        assert schemas == [person_schema]

    def test_unknown_property_retries_parent(self, person_schema):
        schemas = SchemaResolver(person_schema).get_schemas("/address/unknown")
        assert schemas == [person_schema["properties"]["address"]]

    def test_empty_key_segment(self):
        schema = {"properties": {"": {"properties": {"z": {}}}, "q": {}}}
        schemas = SchemaResolver(schema).get_schemas("/")

        assert schemas == [{"properties": {"z": {}}}]

    def test_unresolvable_pointer_yields_nothing(self, person_schema):
        assert SchemaResolver(person_schema).get_schemas("/age/x/y") == []

    def test_union_expansion(self):
        schema = {
            "definitions": {"circle": {"properties": {"radius": {"type": "number"}}}},
            "properties": {
                "shape": {
                    "oneOf": [
                        {"$ref": "#/definitions/circle"},
                        {"properties": {"width": {"type": "number"}}},
                    ]
                }
            },
        }
        schemas = SchemaResolver(schema).get_schemas("/shape")

        assert len(schemas) == 3
        assert schemas[1] == {"properties": {"radius": {"type": "number"}}}
        assert "width" in schemas[2]["properties"]

    def test_only_first_combinator_is_expanded(self):
        schema = {
            "properties": {
                "value": {
                    "type": "object",
                    "oneOf": [{"title": "one"}],
                    "allOf": [{"title": "all"}],
                }
            }
        }
        schemas = SchemaResolver(schema).get_schemas("/value")

        assert [s.get("title") for s in schemas[1:]] == ["all"]
