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

"""Resolution of document JSON Pointers to schema fragments.

``resolve_pointer`` walks the schema along the pointer the way a validator
would walk the document: object segments go through ``properties``,
``patternProperties`` and ``additionalProperties``; array segments through
``items``/``additionalItems``. ``get_schemas`` adds the parent-pointer retry
and the union expansion used by the proposal synthesizer.
"""

import logging
from typing import Any

from json_schema_completion.config import DEFAULT_MAX_DEPTH
from json_schema_completion.document.nodes import (
    escape_pointer_segment,
    unescape_pointer_segment,
)
from json_schema_completion.schema.patterns import match_pattern_property
from json_schema_completion.schema.references import expand_schema_property

logger = logging.getLogger(__name__)

COMBINATORS = ("allOf", "oneOf", "anyOf")

UNDEFINED_SCHEMA: dict[str, Any] = {"type": "undefined"}


class SchemaPointerError(LookupError):
    """A JSON Pointer could not be resolved against the schema."""

    def __init__(self, pointer: str, segment: str, message: str = "no schema"):
        self.pointer = pointer
        self.segment = segment
        super().__init__(f"{message} for segment {segment!r} of {pointer!r}")


class UnknownPropertyError(SchemaPointerError):
    """The schema forbids the property named by a pointer segment."""

    def __init__(self, pointer: str, segment: str):
        super().__init__(pointer, segment, "unknown property")


def split_pointer(pointer: str) -> list[str]:
    """Unescaped segments of a pointer; empty segments are keys too: ``/`` -> ``[""]``."""
    if not pointer or pointer == "#":
        return []
    return [unescape_pointer_segment(s) for s in pointer.lstrip("#").split("/")[1:]]


def join_pointer(segments: list[str]) -> str:
    return "".join("/" + escape_pointer_segment(s) for s in segments)


def parent_pointer(pointer: str) -> str:
    """Drop the trailing segment: ``/a/b`` -> ``/a``, ``/a`` -> ``""``."""
    return join_pointer(split_pointer(pointer)[:-1])


class SchemaResolver:
    """Maps JSON Pointers to the schema fragments that apply there."""

    def __init__(self, root: Any, max_depth: int = DEFAULT_MAX_DEPTH):
        self.root = root
        self.max_depth = max_depth

    def expand(self, fragment: Any) -> Any:
        return expand_schema_property(fragment, self.root, self.max_depth)

    def resolve_pointer(self, pointer: str) -> Any:
        """Schema fragment for ``pointer``.

        Raises:
            UnknownPropertyError: a segment names a property the schema forbids
            SchemaPointerError: a segment has no schema at all
        """
        current = self.expand(self.root)
        for segment in split_pointer(pointer):
            current = self.expand(self._step(current, segment, pointer, depth=0))
        return current

    def _step(self, schema: Any, segment: str, pointer: str, depth: int) -> Any:
        if not isinstance(schema, dict):
            raise SchemaPointerError(pointer, segment)

        properties = schema.get("properties")
        if isinstance(properties, dict) and segment in properties:
            return properties[segment]

        matched, pattern_schema = match_pattern_property(schema, segment)
        if matched:
            return pattern_schema

        items = schema.get("items")
        if isinstance(items, list):
            if segment.isdigit() and int(segment) < len(items):
                return items[int(segment)]
            additional_items = schema.get("additionalItems")
            if isinstance(additional_items, dict):
                return additional_items
            raise UnknownPropertyError(pointer, segment)
        if isinstance(items, dict):
            return items

        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            return additional

        if depth < self.max_depth:
            for combinator in COMBINATORS:
                for branch in schema.get(combinator) or []:
                    try:
                        return self._step(self.expand(branch), segment, pointer, depth + 1)
                    except SchemaPointerError:
                        continue

        if additional is False:
            raise UnknownPropertyError(pointer, segment)
        if self._is_object_schema(schema):
            return dict(UNDEFINED_SCHEMA)
        raise SchemaPointerError(pointer, segment)

    @staticmethod
    def _is_object_schema(schema: dict[str, Any]) -> bool:
        kind = schema.get("type")
        if kind == "object" or (isinstance(kind, list) and "object" in kind):
            return True
        return "properties" in schema or "patternProperties" in schema

    @staticmethod
    def _needs_parent_retry(fragment: Any) -> bool:
        if not isinstance(fragment, dict):
            return True
        return "enum" in fragment or fragment.get("type") == "undefined"

    def get_schemas(self, pointer: str) -> list[Any]:
        """Schema fragments applying at ``pointer``.

        Returns the resolved fragment followed by the expanded branches of its
        first combinator (``allOf``, then ``oneOf``, then ``anyOf``). A pointer
        with nothing usable is retried once at its parent.
        """
        try:
            resolved: Any = self.resolve_pointer(pointer)
        except SchemaPointerError as e:
            logger.debug(f"No schema at {pointer!r}: {e}")
            resolved = e

        if isinstance(resolved, SchemaPointerError) or self._needs_parent_retry(resolved):
            pointer = parent_pointer(pointer)
            try:
                resolved = self.resolve_pointer(pointer)
            except SchemaPointerError as e:
                logger.debug(f"No schema at parent pointer {pointer!r}: {e}")
                resolved = e

        if not split_pointer(pointer):
            return [self.expand(self.root)]

        if isinstance(resolved, SchemaPointerError):
            return []

        if isinstance(resolved, dict):
            for combinator in COMBINATORS:
                branches = resolved.get(combinator)
                if isinstance(branches, list):
                    return [resolved] + [self.expand(b) for b in branches]
        return [resolved]
