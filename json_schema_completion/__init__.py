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

"""JSON Schema driven completion for JSON and JSON5 editors.

Given a schema and a cursor position inside a partially typed document,
proposes property names and values:
- Schema properties and ``propertyNames`` for keys
- ``enum``/``const``/``default``/``examples`` literals for values
- Boolean and null literals from the schema's types
- Snippet text with cursor placeholders for inserted keys

Example usage:
    from json_schema_completion import json_completion, parse_document

    completion = json_completion(schema)
    document = parse_document('{"na')

    result = completion(document, offset=4)
    for proposal in result.proposals:
        print(proposal.label, proposal.insert_text)
"""

from json_schema_completion.collector import CompletionCollector
from json_schema_completion.completion import (
    JSONCompletion,
    complete,
    json5_completion,
    json_completion,
)
from json_schema_completion.config import CompletionConfig, load_config
from json_schema_completion.document.parser import JSONDocument, parse_document
from json_schema_completion.document.tree_sitter_adapter import TreeSitterDocument
from json_schema_completion.protocol import (
    CompletionItemKind,
    CompletionMode,
    CompletionResult,
    DocumentState,
    InsertTextFormat,
    NodeKind,
    Proposal,
    SyntaxNode,
)

__all__ = [
    # Engine
    "JSONCompletion",
    "complete",
    "json_completion",
    "json5_completion",
    "CompletionCollector",
    # Configuration
    "CompletionConfig",
    "load_config",
    # Documents
    "JSONDocument",
    "TreeSitterDocument",
    "parse_document",
    # Protocol types
    "CompletionItemKind",
    "CompletionMode",
    "CompletionResult",
    "DocumentState",
    "InsertTextFormat",
    "NodeKind",
    "Proposal",
    "SyntaxNode",
]
