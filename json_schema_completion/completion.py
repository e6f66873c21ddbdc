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

"""Schema-driven completion for JSON and JSON5 documents.

Provides the request entry point used by editor integrations following the
Facade pattern: locate the syntax context at the cursor, decide between key
and value completion, synthesize proposals from the schema, then filter them
against the typed prefix.
"""

import logging
import re
from typing import Any, Optional, Union

from json_schema_completion.collector import CompletionCollector
from json_schema_completion.config import CompletionConfig
from json_schema_completion.document.nodes import (
    child_value_node,
    get_word,
    is_primitive_value,
    is_property_name,
)
from json_schema_completion.document.parser import parse_document
from json_schema_completion.protocol import (
    CompletionMode,
    CompletionResult,
    DocumentState,
    NodeKind,
    SyntaxNode,
)
from json_schema_completion.schema.resolver import SchemaResolver
from json_schema_completion.snippets import SnippetCompiler
from json_schema_completion.synthesizer import ProposalSynthesizer

logger = logging.getLogger(__name__)

_LEADING_QUOTE = re.compile(r"^[\"']")


class JSONCompletion:
    """Completion engine bound to one JSON Schema.

    Example:
        completion = JSONCompletion(schema, mode="json5")
        result = completion.complete_text('{"na', offset=4)
        for proposal in result.proposals:
            print(proposal.label, proposal.insert_text)
    """

    def __init__(
        self,
        schema: Any,
        config: Optional[CompletionConfig] = None,
        **options: Any,
    ):
        """Initialize the engine.

        Args:
            schema: Root JSON Schema (a dict, or a boolean schema)
            config: Engine configuration; ``options`` build one if omitted
            **options: ``CompletionConfig`` fields, e.g. ``mode="json5"``
        """
        if config is not None and options:
            raise ValueError("Pass either a config or keyword options, not both")
        self.schema = schema
        self.config = config or CompletionConfig.from_dict(options)
        self._word_re = re.compile(f"(?:{self.config.word_pattern})$")

    @property
    def mode(self) -> CompletionMode:
        return self.config.mode

    def complete(
        self,
        document: DocumentState,
        offset: int,
        explicit: bool = False,
    ) -> CompletionResult:
        """Get completions at ``offset``.

        Args:
            document: Document to complete in
            offset: Cursor offset (characters)
            explicit: Whether the user asked for completion explicitly

        Returns:
            CompletionResult with the replaced span and filtered proposals
        """
        try:
            return self._complete(document, offset, explicit)
        except Exception as e:
            logger.warning(f"Completion failed at offset {offset}: {e}")
            return CompletionResult(from_offset=offset, to_offset=offset)

    def complete_text(self, text: str, offset: int, explicit: bool = False) -> CompletionResult:
        """Parse ``text`` in the configured mode and complete at ``offset``."""
        return self.complete(parse_document(text, self.mode), offset, explicit)

    def __call__(self, document: DocumentState, offset: int, explicit: bool = False) -> CompletionResult:
        return self.complete(document, offset, explicit)

    def _complete(self, document: DocumentState, offset: int, explicit: bool) -> CompletionResult:
        text = document.text
        node = document.node_at(offset)
        is_token = is_primitive_value(node) or is_property_name(node)

        # Only complete inside a word/after a quote, unless explicitly requested
        if not is_token and not explicit:
            return CompletionResult(from_offset=offset, to_offset=offset)

        if is_token:
            from_offset, to_offset = node.start, node.end
        else:
            from_offset, to_offset = self._word_start(text, offset), offset
        prefix = _LEADING_QUOTE.sub("", text[from_offset:offset])
        result = CompletionResult(from_offset=from_offset, to_offset=to_offset)

        collector = CompletionCollector()
        resolver = SchemaResolver(self.schema, self.config.max_depth)
        synthesizer = ProposalSynthesizer(resolver, SnippetCompiler(self.mode), self.config)

        object_node, current_property, add_value, value_node = self._slot(document, node, offset)
        if object_node is not None:
            if self.config.suppress_at_object_start and object_node.start == offset:
                return result
            raw_word = get_word(document, node, strip_quotes=False) if is_token else ""
            synthesizer.add_property_completions(
                document, object_node, collector, add_value, raw_word, current_property
            )
        else:
            synthesizer.add_value_completions(document, value_node, offset, collector)

        result.proposals = collector.filter(prefix)
        logger.debug(
            f"{len(result.proposals)}/{len(collector)} proposal(s) for prefix {prefix!r} "
            f"at offset {offset}"
        )
        return result

    def _word_start(self, text: str, offset: int) -> int:
        line_start = text.rfind("\n", 0, offset) + 1
        match = self._word_re.search(text, line_start, offset)
        return match.start() if match else offset

    @staticmethod
    def _slot(
        document: DocumentState, node: SyntaxNode, offset: int
    ) -> tuple[Optional[SyntaxNode], Optional[SyntaxNode], bool, SyntaxNode]:
        """Classify the cursor position.

        Returns ``(object_node, current_property, add_value, value_node)``;
        ``object_node`` is set for key completion, otherwise ``value_node`` is
        the node value completion starts from.
        """
        if node.kind == NodeKind.PROPERTY_NAME:
            prop = node.parent
            if prop is None:
                return None, None, True, node
            add_value = True
            if prop.kind == NodeKind.PROPERTY:
                value = child_value_node(prop)
                add_value = value is None or (
                    value.kind == NodeKind.INVALID and value.start == value.end
                )
            current = prop if prop.kind == NodeKind.PROPERTY else None
            # Error recovery may wrap a key in INVALID nodes
            container: Optional[SyntaxNode] = prop
            wrappers = (NodeKind.PROPERTY, NodeKind.INVALID)
            while container is not None and container.kind in wrappers:
                container = container.parent
            if container is not None and container.kind == NodeKind.OBJECT:
                return container, current, add_value, node
            return None, None, True, node

        if node.kind == NodeKind.OBJECT:
            before = document.text[node.start : offset].rstrip()
            if before.endswith(":"):
                # Cursor sits in the value slot of the property before it
                props = [p for p in node.children_of_kind(NodeKind.PROPERTY) if p.end <= offset]
                if props:
                    return None, None, True, props[-1]
            return node, None, True, node

        return None, None, True, node


def json_completion(schema: Any, **options: Any) -> JSONCompletion:
    """Completion callable for JSON documents.

    The returned object is called as ``completion(document, offset, explicit)``.
    """
    options["mode"] = CompletionMode.JSON
    return JSONCompletion(schema, **options)


def json5_completion(schema: Any, **options: Any) -> JSONCompletion:
    """Completion callable for JSON5 documents."""
    options["mode"] = CompletionMode.JSON5
    return JSONCompletion(schema, **options)


def complete(
    schema: Any,
    document: Union[DocumentState, str],
    offset: int,
    explicit: bool = False,
    mode: Union[CompletionMode, str] = CompletionMode.JSON,
) -> CompletionResult:
    """One-shot completion; ``document`` may be raw text."""
    completion = JSONCompletion(schema, mode=CompletionMode(mode))
    if isinstance(document, str):
        return completion.complete_text(document, offset, explicit)
    return completion.complete(document, offset, explicit)
