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

"""Completion protocol types.

Defines the proposal/result models returned to editors and the minimal
syntax-tree capability interface the engine consumes. Any parse tree can be
used as long as it is adapted to ``SyntaxNode`` and ``DocumentState``.
"""

from enum import Enum
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class CompletionMode(str, Enum):
    """Dialect of the document being completed."""

    JSON = "json"
    JSON5 = "json5"


class CompletionItemKind(str, Enum):
    """Kind of a completion proposal."""

    PROPERTY = "property"  # Object key
    VALUE = "value"  # Literal from enum/const/default/examples
    BOOLEAN = "boolean"
    NULL = "null"


class InsertTextFormat(str, Enum):
    """How ``insert_text`` is interpreted by the editor."""

    PLAIN_TEXT = "plain_text"
    SNIPPET = "snippet"  # Contains placeholder markers


class NodeKind(str, Enum):
    """Syntax node kinds understood by the engine."""

    JSON_TEXT = "JsonText"
    OBJECT = "Object"
    ARRAY = "Array"
    PROPERTY = "Property"
    PROPERTY_NAME = "PropertyName"
    STRING = "String"
    NUMBER = "Number"
    TRUE = "True"
    FALSE = "False"
    NULL = "Null"
    INVALID = "Invalid"


PRIMITIVE_KINDS = frozenset(
    {NodeKind.STRING, NodeKind.NUMBER, NodeKind.TRUE, NodeKind.FALSE, NodeKind.NULL}
)

VALUE_KINDS = PRIMITIVE_KINDS | {NodeKind.OBJECT, NodeKind.ARRAY}


class Proposal(BaseModel):
    """A single completion candidate offered to the user."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Unquoted key or JSON rendering of a value")
    insert_text: Optional[str] = Field(
        default=None, description="Snippet text with placeholder markers"
    )
    kind: CompletionItemKind = Field(description="Kind of proposal")
    insert_text_format: InsertTextFormat = Field(
        default=InsertTextFormat.PLAIN_TEXT, description="Format of insert_text"
    )
    detail: Optional[str] = Field(default=None, description="Type hint")
    documentation: Optional[str] = Field(default=None, description="Schema description")

    def get_insert_text(self) -> str:
        """Text to insert, falling back to the label."""
        return self.insert_text if self.insert_text is not None else self.label


class CompletionResult(BaseModel):
    """Proposals plus the document span they replace."""

    from_offset: int = Field(description="Start of the replaced span")
    to_offset: int = Field(description="End of the replaced span")
    proposals: list[Proposal] = Field(default_factory=list, description="Filtered proposals")

    @property
    def labels(self) -> list[str]:
        return [p.label for p in self.proposals]

    def get(self, label: str) -> Optional[Proposal]:
        for proposal in self.proposals:
            if proposal.label == label:
                return proposal
        return None


@runtime_checkable
class SyntaxNode(Protocol):
    """Capability interface for a node of the document's syntax tree."""

    @property
    def kind(self) -> NodeKind: ...

    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...

    @property
    def parent(self) -> Optional["SyntaxNode"]: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...

    def children_of_kind(self, kind: NodeKind) -> list["SyntaxNode"]: ...

    def child_of_kind(self, kind: NodeKind) -> Optional["SyntaxNode"]: ...


@runtime_checkable
class DocumentState(Protocol):
    """Capability interface for the document being edited."""

    @property
    def text(self) -> str: ...

    @property
    def mode(self) -> CompletionMode: ...

    def node_at(self, offset: int) -> SyntaxNode:
        """Innermost node with ``start < offset <= end``."""
        ...

    def literal_value(self, node: SyntaxNode) -> Any:
        """Decode a primitive value node to its Python value."""
        ...
