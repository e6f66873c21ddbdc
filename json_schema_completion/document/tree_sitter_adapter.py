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

"""tree-sitter adapter for the completion syntax interface.

Wraps a ``tree_sitter_json`` parse tree so hosts that already keep a
tree-sitter tree can drive the engine without the built-in parser. Offsets
exposed to the engine are character offsets; tree-sitter works in bytes.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional

import tree_sitter_json
from tree_sitter import Language, Parser

from json_schema_completion.document.parser import decode_literal
from json_schema_completion.protocol import CompletionMode, NodeKind

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = logging.getLogger(__name__)

_NODE_KINDS = {
    "document": NodeKind.JSON_TEXT,
    "object": NodeKind.OBJECT,
    "array": NodeKind.ARRAY,
    "pair": NodeKind.PROPERTY,
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "true": NodeKind.TRUE,
    "false": NodeKind.FALSE,
    "null": NodeKind.NULL,
    "ERROR": NodeKind.INVALID,
}

_parser: Optional[Parser] = None


def get_json_parser() -> Parser:
    """Shared tree-sitter JSON parser."""
    global _parser
    if _parser is None:
        _parser = Parser(Language(tree_sitter_json.language()))
    return _parser


def _is_key(ts_node: "Node") -> bool:
    parent = ts_node.parent
    if parent is None or parent.type != "pair":
        return False
    key = parent.child_by_field_name("key")
    return key is not None and key.start_byte == ts_node.start_byte and key.end_byte == ts_node.end_byte


def _is_loose_key(ts_node: "Node") -> bool:
    """A string typed as a key before its colon.

    Without the colon the grammar has no ``pair``, so the string sits directly
    in the object or in an ``ERROR`` node inside it.
    """
    if ts_node.type != "string":
        return False
    previous = ts_node.prev_sibling
    if previous is not None and previous.type == ":":
        return False
    parent = ts_node.parent
    while parent is not None and parent.type == "ERROR":
        parent = parent.parent
    return parent is not None and parent.type == "object"


def _kind_of(ts_node: "Node") -> Optional[NodeKind]:
    if not ts_node.is_named and ts_node.type != "ERROR":
        return None
    kind = _NODE_KINDS.get(ts_node.type)
    if (
        kind is not None
        and kind != NodeKind.PROPERTY
        and (_is_key(ts_node) or _is_loose_key(ts_node))
    ):
        return NodeKind.PROPERTY_NAME
    return kind


class TreeSitterNode:
    """``SyntaxNode`` view of a tree-sitter node."""

    def __init__(self, ts_node: "Node", document: "TreeSitterDocument", kind: NodeKind):
        self._node = ts_node
        self._document = document
        self._kind = kind

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def start(self) -> int:
        return self._document.char_offset(self._node.start_byte)

    @property
    def end(self) -> int:
        return self._document.char_offset(self._node.end_byte)

    @property
    def parent(self) -> Optional["TreeSitterNode"]:
        return self._document.wrap(self._node.parent)

    @property
    def children(self) -> list["TreeSitterNode"]:
        result = []
        for child in self._node.children:
            kind = _kind_of(child)
            if kind is not None:
                result.append(TreeSitterNode(child, self._document, kind))
        return result

    def children_of_kind(self, kind: NodeKind) -> list["TreeSitterNode"]:
        return [c for c in self.children if c.kind == kind]

    def child_of_kind(self, kind: NodeKind) -> Optional["TreeSitterNode"]:
        for child in self.children:
            if child.kind == kind:
                return child
        return None

    def __repr__(self) -> str:
        return f"TreeSitterNode({self._kind.value}, {self.start}, {self.end})"


class TreeSitterDocument:
    """``DocumentState`` backed by a tree-sitter JSON parse tree.

    tree-sitter-json has no JSON5 grammar, so the mode only affects how keys
    are quoted in inserted text.
    """

    def __init__(
        self,
        text: str,
        mode: CompletionMode = CompletionMode.JSON,
        tree: Optional["Tree"] = None,
    ):
        self._text = text
        self._bytes = text.encode("utf-8")
        self._mode = CompletionMode(mode)
        self._tree = tree if tree is not None else get_json_parser().parse(self._bytes)

    @property
    def text(self) -> str:
        return self._text

    @property
    def mode(self) -> CompletionMode:
        return self._mode

    @property
    def tree(self) -> "Tree":
        return self._tree

    def byte_offset(self, char_offset: int) -> int:
        return len(self._text[:char_offset].encode("utf-8"))

    def char_offset(self, byte_offset: int) -> int:
        return len(self._bytes[:byte_offset].decode("utf-8", errors="ignore"))

    def wrap(self, ts_node: Optional["Node"]) -> Optional[TreeSitterNode]:
        """Nearest mappable node at or above ``ts_node``."""
        while ts_node is not None:
            kind = _kind_of(ts_node)
            if kind is not None:
                return TreeSitterNode(ts_node, self, kind)
            ts_node = ts_node.parent
        return None

    def node_at(self, offset: int) -> TreeSitterNode:
        root = self._tree.root_node
        position = self.byte_offset(offset)
        ts_node = root
        if position > 0:
            # Smallest node covering the character before the cursor
            ts_node = root.descendant_for_byte_range(position - 1, position) or root
        node = self.wrap(ts_node)
        if node is None:
            return TreeSitterNode(root, self, NodeKind.JSON_TEXT)
        return node

    def literal_value(self, node: TreeSitterNode) -> Any:
        raw = self._text[node.start : node.end]
        try:
            return json.loads(raw)
        except ValueError:
            logger.debug(f"Falling back to tolerant decoding for {raw!r}")
            return decode_literal(raw, node.kind)
