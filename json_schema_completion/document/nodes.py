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

"""Helpers over the ``SyntaxNode`` capability interface.

These work with any adapter (the built-in tolerant parser or tree-sitter),
so JSON Pointer computation and word extraction are written once.
"""

import re
from typing import Optional

from json_schema_completion.protocol import (
    PRIMITIVE_KINDS,
    VALUE_KINDS,
    DocumentState,
    NodeKind,
    SyntaxNode,
)

_SURROUNDING_DOUBLE = re.compile(r'^"(.*)"$', re.DOTALL)
_SURROUNDING_SINGLE = re.compile(r"^'(.*)'$", re.DOTALL)


def strip_surrounding_quotes(text: str) -> str:
    """Remove one pair of matching surrounding quotes, if present."""
    text = _SURROUNDING_DOUBLE.sub(r"\1", text)
    return _SURROUNDING_SINGLE.sub(r"\1", text)


def is_property_name(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind == NodeKind.PROPERTY_NAME


def is_primitive_value(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind in PRIMITIVE_KINDS


def is_value_node(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind in VALUE_KINDS


def get_word(document: DocumentState, node: Optional[SyntaxNode], strip_quotes: bool = True) -> str:
    """Source text of a node, optionally without surrounding quotes."""
    if node is None:
        return ""
    word = document.text[node.start : node.end]
    return strip_surrounding_quotes(word) if strip_quotes else word


def child_value_node(property_node: SyntaxNode) -> Optional[SyntaxNode]:
    """Value child of a ``PROPERTY`` node (anything after the name)."""
    for child in property_node.children:
        if child.kind != NodeKind.PROPERTY_NAME:
            return child
    return None


def value_children(array_node: SyntaxNode) -> list[SyntaxNode]:
    return [child for child in array_node.children if is_value_node(child)]


def find_node_index_in_array(array_node: SyntaxNode, value_node: SyntaxNode) -> int:
    """Index of ``value_node`` among the array's value children, or -1."""
    for index, child in enumerate(value_children(array_node)):
        if child.start == value_node.start and child.end == value_node.end:
            return index
    return -1


def property_keys(document: DocumentState, object_node: SyntaxNode) -> list[str]:
    """Unquoted keys of the properties of an object node."""
    keys = []
    for prop in object_node.children_of_kind(NodeKind.PROPERTY):
        name = prop.child_of_kind(NodeKind.PROPERTY_NAME)
        if name is not None:
            keys.append(get_word(document, name))
    return keys


def escape_pointer_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_pointer_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def pointer_for_node(document: DocumentState, node: Optional[SyntaxNode]) -> str:
    """JSON Pointer of the document location a node belongs to.

    A node inside a property contributes the property key (whether it is the
    key itself or the value); a value inside an array contributes its index.
    """
    path: list[str] = []
    current = node
    while current is not None and current.parent is not None:
        parent = current.parent
        if parent.kind == NodeKind.PROPERTY:
            name = parent.child_of_kind(NodeKind.PROPERTY_NAME)
            if name is not None:
                path.insert(0, escape_pointer_segment(get_word(document, name)))
        elif parent.kind == NodeKind.ARRAY and is_value_node(current):
            path.insert(0, str(find_node_index_in_array(parent, current)))
        current = parent
    return "/".join([""] + path)


def pointer_for_position(document: DocumentState, offset: int) -> str:
    return pointer_for_node(document, document.node_at(offset))
