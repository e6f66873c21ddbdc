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

"""Property and value proposal synthesis from schema fragments."""

import logging
from typing import Any, Optional, Union

from json_schema_completion.collector import CompletionCollector, UniqueItemsCollector
from json_schema_completion.config import CompletionConfig
from json_schema_completion.document.nodes import (
    find_node_index_in_array,
    get_word,
    is_primitive_value,
    pointer_for_node,
    property_keys,
    value_children,
)
from json_schema_completion.protocol import (
    CompletionItemKind,
    DocumentState,
    InsertTextFormat,
    NodeKind,
    Proposal,
    SyntaxNode,
)
from json_schema_completion.schema.patterns import match_pattern_property
from json_schema_completion.schema.resolver import SchemaResolver
from json_schema_completion.snippets import SnippetCompiler, label_for_value

logger = logging.getLogger(__name__)

Collector = Union[CompletionCollector, UniqueItemsCollector]


def type_detail(schema: dict[str, Any]) -> Optional[str]:
    """Display form of a schema's ``type``."""
    kind = schema.get("type")
    if isinstance(kind, list):
        return ",".join(str(k) for k in kind)
    if isinstance(kind, str):
        return kind
    return None


def _name_label(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return label_for_value(value)


class ProposalSynthesizer:
    """Turns the schema fragments at a position into proposals.

    One instance serves one request: it holds no state beyond the schema,
    resolver and compiler it was built with.
    """

    def __init__(
        self,
        resolver: SchemaResolver,
        compiler: SnippetCompiler,
        config: Optional[CompletionConfig] = None,
    ):
        self.resolver = resolver
        self.compiler = compiler
        self.config = config or CompletionConfig(mode=compiler.mode)

    # Property names

    def add_property_completions(
        self,
        document: DocumentState,
        object_node: SyntaxNode,
        collector: CompletionCollector,
        add_value: bool,
        raw_word: str = "",
        current_property: Optional[SyntaxNode] = None,
    ) -> None:
        """Propose keys for ``object_node``.

        Keys of sibling properties are reserved so they are never proposed
        again; the property being typed (``current_property``) is not a
        sibling.
        """
        keys = property_keys(document, object_node)
        if current_property is not None:
            name = current_property.child_of_kind(NodeKind.PROPERTY_NAME)
            current_key = get_word(document, name)
            if current_key in keys:
                keys.remove(current_key)
        for key in keys:
            collector.reserve(key)

        pointer = pointer_for_node(document, object_node)
        schemas = self.resolver.get_schemas(pointer)
        logger.debug(f"Property completions at {pointer!r}: {len(schemas)} schema(s)")

        for schema in schemas:
            if not isinstance(schema, dict):
                continue

            properties = schema.get("properties")
            if isinstance(properties, dict):
                for key, value in properties.items():
                    if not isinstance(value, dict):
                        continue
                    value = self.resolver.expand(value)
                    collector.add(
                        Proposal(
                            label=key,
                            insert_text=self.compiler.property_insert_text(
                                key, add_value, raw_word, value
                            ),
                            insert_text_format=InsertTextFormat.SNIPPET,
                            kind=CompletionItemKind.PROPERTY,
                            detail=type_detail(value),
                            documentation=value.get("description"),
                        )
                    )

            property_names = schema.get("propertyNames")
            if isinstance(property_names, dict):
                names = list(property_names.get("enum") or [])
                if "const" in property_names:
                    names.append(property_names["const"])
                for name in names:
                    label = _name_label(name)
                    if label:
                        collector.add(self._property_name_proposal(label, add_value, raw_word))

    def _property_name_proposal(self, label: str, add_value: bool, raw_word: str) -> Proposal:
        return Proposal(
            label=label,
            insert_text=self.compiler.property_insert_text(label, add_value, raw_word),
            insert_text_format=InsertTextFormat.SNIPPET,
            kind=CompletionItemKind.PROPERTY,
        )

    # Values

    def add_value_completions(
        self,
        document: DocumentState,
        node: SyntaxNode,
        offset: int,
        collector: CompletionCollector,
    ) -> None:
        """Propose values for the value slot at ``node``."""
        value_node: Optional[SyntaxNode] = None
        parent_key: Optional[str] = None
        container: Optional[SyntaxNode] = node

        if is_primitive_value(node) or node.kind == NodeKind.INVALID:
            value_node = node
            container = node.parent

        if container is not None and container.kind == NodeKind.PROPERTY:
            key_node = container.child_of_kind(NodeKind.PROPERTY_NAME)
            if key_node is not None:
                parent_key = get_word(document, key_node)
                container = container.parent

        types: set[str] = set()

        if container is None or container.kind == NodeKind.JSON_TEXT:
            self.add_schema_value_completions(self.resolver.root, types, collector)
            self.add_type_completions(types, collector)
            return

        is_array = container.kind == NodeKind.ARRAY
        if not is_array and parent_key is None:
            return

        pointer = pointer_for_node(document, container)
        schemas = self.resolver.get_schemas(pointer)
        logger.debug(
            f"Value completions at {pointer!r} (key={parent_key!r}): {len(schemas)} schema(s)"
        )

        # Boolean/null literals go through the uniqueItems view when one applies
        literal_target: Collector = collector
        for schema in schemas:
            if not isinstance(schema, dict):
                continue
            if is_array and "items" in schema:
                target = self._item_collector(document, schema, container, value_node, collector)
                if target is not collector:
                    literal_target = target
                self._add_array_item_completions(
                    schema, container, value_node, offset, types, target
                )
            if parent_key is not None:
                self._add_property_value_completions(schema, parent_key, types, collector)

        self.add_type_completions(types, literal_target)

    def _item_collector(
        self,
        document: DocumentState,
        schema: dict[str, Any],
        array_node: SyntaxNode,
        value_node: Optional[SyntaxNode],
        collector: CompletionCollector,
    ) -> Collector:
        """Collector for item values, deduplicating for ``uniqueItems``."""
        if not schema.get("uniqueItems"):
            return collector
        return UniqueItemsCollector(
            collector, self._existing_item_labels(document, array_node, value_node)
        )

    def _add_array_item_completions(
        self,
        schema: dict[str, Any],
        array_node: SyntaxNode,
        value_node: Optional[SyntaxNode],
        offset: int,
        types: set[str],
        target: Collector,
    ) -> None:
        items = schema["items"]
        if isinstance(items, list):
            index = self._array_index(array_node, value_node, offset)
            if index < len(items):
                item_schema = items[index]
            else:
                item_schema = schema.get("additionalItems")
            if item_schema is not None:
                self.add_schema_value_completions(item_schema, types, target)
        else:
            self.add_schema_value_completions(items, types, target)

    @staticmethod
    def _array_index(array_node: SyntaxNode, value_node: Optional[SyntaxNode], offset: int) -> int:
        """Index of the element being completed."""
        if value_node is not None:
            index = find_node_index_in_array(array_node, value_node)
            if index >= 0:
                return index
        return sum(1 for child in value_children(array_node) if child.end <= offset)

    @staticmethod
    def _existing_item_labels(
        document: DocumentState, array_node: SyntaxNode, value_node: Optional[SyntaxNode]
    ) -> list[str]:
        labels = []
        for child in value_children(array_node):
            if value_node is not None and child.start == value_node.start:
                continue
            if is_primitive_value(child):
                labels.append(label_for_value(document.literal_value(child)))
        return labels

    def _add_property_value_completions(
        self,
        schema: dict[str, Any],
        parent_key: str,
        types: set[str],
        collector: CompletionCollector,
    ) -> None:
        properties = schema.get("properties")
        if isinstance(properties, dict) and parent_key in properties:
            self.add_schema_value_completions(properties[parent_key], types, collector)
            return

        matched, pattern_schema = match_pattern_property(schema, parent_key)
        if matched:
            self.add_schema_value_completions(pattern_schema, types, collector)
            return

        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            self.add_schema_value_completions(additional, types, collector)

    def add_schema_value_completions(
        self,
        schema: Any,
        types: set[str],
        collector: Collector,
        depth: int = 0,
    ) -> None:
        """Values from one fragment and, recursively, its combinator branches."""
        schema = self.resolver.expand(schema)
        if not isinstance(schema, dict):
            return

        self.add_enum_value_completions(schema, collector)
        self.add_default_value_completions(schema, collector)
        self.collect_types(schema, types)

        if depth >= self.config.max_depth:
            logger.debug("Combinator depth limit reached")
            return
        for combinator in ("allOf", "anyOf", "oneOf"):
            branches = schema.get(combinator)
            if isinstance(branches, list):
                for branch in branches:
                    self.add_schema_value_completions(branch, types, collector, depth + 1)

    def add_enum_value_completions(self, schema: dict[str, Any], collector: Collector) -> None:
        detail = type_detail(schema)
        documentation = schema.get("description")
        values = []
        if "const" in schema:
            values.append(schema["const"])
        if isinstance(schema.get("enum"), list):
            values.extend(schema["enum"])

        for value in values:
            label = label_for_value(value)
            collector.add(
                Proposal(
                    label=label,
                    insert_text=label,
                    kind=CompletionItemKind.VALUE,
                    detail=detail,
                    documentation=documentation,
                )
            )

    def add_default_value_completions(
        self,
        schema: dict[str, Any],
        collector: Collector,
        array_depth: int = 0,
    ) -> None:
        """Proposals from ``default`` and ``examples``.

        Without either, a single-schema ``items`` is searched instead and its
        values are wrapped in one list per level.
        """
        has_proposals = False

        if "default" in schema:
            label = label_for_value(self._wrap(schema["default"], array_depth))
            collector.add(
                Proposal(
                    label=label,
                    insert_text=label,
                    kind=CompletionItemKind.VALUE,
                    detail="Default value",
                )
            )
            has_proposals = True

        examples = schema.get("examples")
        if isinstance(examples, list):
            detail = "array" if array_depth else type_detail(schema)
            for example in examples:
                label = label_for_value(self._wrap(example, array_depth))
                collector.add(
                    Proposal(
                        label=label,
                        insert_text=label,
                        kind=CompletionItemKind.VALUE,
                        detail=detail,
                    )
                )
                has_proposals = True

        items = self.resolver.expand(schema.get("items"))
        if (
            not has_proposals
            and isinstance(items, dict)
            and array_depth < self.config.max_array_default_depth
        ):
            self.add_default_value_completions(items, collector, array_depth + 1)

    @staticmethod
    def _wrap(value: Any, array_depth: int) -> Any:
        for _ in range(array_depth):
            value = [value]
        return value

    @staticmethod
    def collect_types(schema: dict[str, Any], types: set[str]) -> None:
        """Record the schema's types unless enum/const pins the values."""
        if isinstance(schema.get("enum"), list) or "const" in schema:
            return
        kind = schema.get("type")
        if isinstance(kind, list):
            types.update(k for k in kind if isinstance(k, str))
        elif isinstance(kind, str):
            types.add(kind)

    @staticmethod
    def add_type_completions(types: set[str], collector: Collector) -> None:
        if "boolean" in types:
            for value in ("true", "false"):
                collector.add(
                    Proposal(
                        label=value,
                        insert_text=value,
                        kind=CompletionItemKind.BOOLEAN,
                        detail="boolean",
                    )
                )
        if "null" in types:
            collector.add(
                Proposal(label="null", insert_text="null", kind=CompletionItemKind.NULL, detail="null")
            )
