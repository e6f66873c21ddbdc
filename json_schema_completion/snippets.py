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

"""Snippet text generation for schema-driven completions.

Inserted text uses editor snippet placeholders: ``${value}`` / ``#{value}``
mark a pre-filled cursor stop and ``#{}`` an empty one. Literal ``\\``, ``$``
and ``}`` in generated text are escaped so they are not read as snippet
syntax.
"""

import json
import logging
import re
from typing import Any, Optional

from json_schema_completion.protocol import CompletionMode

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER = "#{}"

_SNIPPET_SPECIAL = re.compile(r"[\\$}]")

# Placeholder skeletons keyed by schema type
_TYPE_SKELETONS = {
    "boolean": "#{}",
    "object": "{#{}}",
    "array": "[#{}]",
    "number": "#{0}",
    "integer": "#{0}",
    "null": "#{null}",
}


def label_for_value(value: Any) -> str:
    """Compact JSON rendering used as a value proposal label."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def json5_property_insert_snippet(raw_word: str, key: str) -> str:
    """Quote ``key`` the way the user started typing it."""
    if raw_word.startswith('"'):
        return f'"{key}"'
    if raw_word.startswith("'"):
        return f"'{key}'"
    return key


class SnippetCompiler:
    """Builds insert text for property and value proposals."""

    def __init__(self, mode: CompletionMode = CompletionMode.JSON):
        self.mode = CompletionMode(mode)

    @property
    def is_json5(self) -> bool:
        return self.mode == CompletionMode.JSON5

    def plain_text(self, text: str) -> str:
        """Escape ``\\``, ``$`` and ``}``."""
        return _SNIPPET_SPECIAL.sub(lambda m: "\\" + m.group(), text)

    def value_text(self, value: Any, separator_after: str = "") -> str:
        """Full literal of an object/array value."""
        text = json.dumps(value, indent="\t", ensure_ascii=False)
        if text == "{}":
            return "{#{}}" + separator_after
        if text == "[]":
            return "[#{}]" + separator_after
        return self.plain_text(text + separator_after)

    def guessed_value_text(self, value: Any, separator_after: str = "") -> str:
        """Placeholder pre-filled with ``value``."""
        if value is None:
            return "${null}" + separator_after
        if isinstance(value, str):
            quoted = json.dumps(value, ensure_ascii=False)
            return '"${' + self.plain_text(quoted[1:-1]) + '}"' + separator_after
        if isinstance(value, (bool, int, float)):
            return "${" + json.dumps(value) + "}" + separator_after
        return self.value_text(value, separator_after)

    def quote_key(self, key: str, raw_word: str = "") -> str:
        if self.is_json5:
            return json5_property_insert_snippet(raw_word, key)
        return f'"{key}"'

    def property_insert_text(
        self,
        key: str,
        add_value: bool,
        raw_word: str = "",
        property_schema: Optional[Any] = None,
    ) -> str:
        """Insert text for a property key, plus a value placeholder if needed.

        The value guess comes from ``default``, then a single ``enum`` member,
        then ``const``, then ``examples``, then the type skeleton. When the
        schema offers more than one candidate value the placeholder is left
        empty rather than picking one.

        Args:
            key: Unquoted property name
            add_value: Whether to append ``: <value>``
            raw_word: Token text as typed, used for JSON5 quoting
            property_schema: Schema of the property, already dereferenced
        """
        result = self.quote_key(key, raw_word)
        if not add_value:
            return result
        result += ": "

        value: Optional[str] = None
        proposals = 0
        if isinstance(property_schema, dict):
            if "default" in property_schema:
                value = self.guessed_value_text(property_schema["default"])
                proposals += 1
            else:
                enum = property_schema.get("enum")
                if isinstance(enum, list):
                    if len(enum) == 1:
                        value = self.guessed_value_text(enum[0])
                    proposals += len(enum)
                if "const" in property_schema:
                    if value is None:
                        value = self.guessed_value_text(property_schema["const"])
                    proposals += 1
                examples = property_schema.get("examples")
                if isinstance(examples, list) and examples:
                    if value is None:
                        value = self.guessed_value_text(examples[0])
                    proposals += len(examples)
                if value is None and proposals == 0:
                    value = self.type_skeleton(property_schema)

        if not value or proposals > 1:
            logger.debug(f"Empty placeholder for {key!r} ({proposals} candidate values)")
            value = EMPTY_PLACEHOLDER
        return result + value

    def type_skeleton(self, schema: dict[str, Any]) -> str:
        """Placeholder shaped by the schema's (first) declared or inferred type."""
        kind = schema.get("type")
        if isinstance(kind, list):
            kind = kind[0] if kind else None
        if not kind:
            if "properties" in schema:
                kind = "object"
            elif "items" in schema:
                kind = "array"
        if not isinstance(kind, str):
            return EMPTY_PLACEHOLDER
        if kind == "string":
            return "'#{}'" if self.is_json5 else '"#{}"'
        return _TYPE_SKELETONS.get(kind, EMPTY_PLACEHOLDER)
