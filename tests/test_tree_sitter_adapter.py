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

"""Tests for completion over tree-sitter parse trees."""

import pytest

from json_schema_completion import JSONCompletion, TreeSitterDocument
from json_schema_completion.document.nodes import pointer_for_position
from json_schema_completion.protocol import DocumentState, NodeKind


@pytest.fixture
def schema():
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string", "examples": ["x"]},
            "age": {"type": "integer"},
            "tags": {"type": "array", "items": {"enum": ["a", "b"]}},
        },
    }


class TestTreeSitterDocument:
    """Node mapping from the tree-sitter JSON grammar."""

    def test_satisfies_document_interface(self):
        assert isinstance(TreeSitterDocument("{}"), DocumentState)

    def test_key_and_value_kinds(self):
        document = TreeSitterDocument('{"name": "bob", "age": 3}')

        assert document.node_at(3).kind == NodeKind.PROPERTY_NAME
        assert document.node_at(12).kind == NodeKind.STRING
        assert document.node_at(24).kind == NodeKind.NUMBER

    def test_pointer_for_position(self):
        document = TreeSitterDocument('{"tags": ["a", "b"]}')
        assert pointer_for_position(document, 17) == "/tags/1"

    def test_literal_value(self):
        document = TreeSitterDocument('{"name": "b\\u00f6b"}')
        node = document.node_at(12)

        assert document.literal_value(node) == "böb"

    def test_character_offsets_with_multibyte_text(self):
        text = '{"héllo": 1}'
        document = TreeSitterDocument(text)
        node = document.node_at(4)

        assert node.kind == NodeKind.PROPERTY_NAME
        assert text[node.start : node.end] == '"héllo"'


class TestTreeSitterCompletion:
    def test_value_completion(self, schema):
        document = TreeSitterDocument('{"name": "", "age": 1}')
        result = JSONCompletion(schema).complete(document, 10)

        assert result.labels == ['"x"']
        assert (result.from_offset, result.to_offset) == (9, 11)

    def test_key_completion_keeps_existing_value(self, schema):
        document = TreeSitterDocument('{"na": 1}')
        result = JSONCompletion(schema).complete(document, 4)

        assert result.labels == ["name"]
        assert result.get("name").insert_text == '"name"'

    def test_key_without_colon(self, schema):
        document = TreeSitterDocument('{"na"}')
        result = JSONCompletion(schema).complete(document, 4)

        assert document.node_at(4).kind == NodeKind.PROPERTY_NAME
        assert result.labels == ["name"]
        assert result.get("name").insert_text == '"name": "${x}"'

    def test_key_without_colon_after_sibling(self, schema):
        document = TreeSitterDocument('{"name": 1, "a"}')
        result = JSONCompletion(schema).complete(document, 14)

        assert result.labels == ["age"]
        assert result.get("age").insert_text == '"age": #{0}'

    def test_array_item_completion(self, schema):
        document = TreeSitterDocument('{"tags": ["a", ""]}')
        result = JSONCompletion(schema).complete(document, 16)

        assert result.labels == ['"a"', '"b"']
