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

"""``patternProperties`` regular expressions."""

import logging
from functools import lru_cache
from typing import Any, Optional

import regex

logger = logging.getLogger(__name__)

CASE_INSENSITIVE_PREFIX = "(?i)"


@lru_cache(maxsize=256)
def extended_regexp(pattern: str) -> Optional["regex.Pattern"]:
    """Compile a schema pattern, or ``None`` if it cannot be compiled.

    A leading ``(?i)`` makes the pattern case-insensitive. Patterns are
    compiled with full Unicode support (``\\p{L}`` and friends, nested sets)
    first, then with the legacy non-Unicode behaviour.
    """
    flags = 0
    if pattern.startswith(CASE_INSENSITIVE_PREFIX):
        pattern = pattern[len(CASE_INSENSITIVE_PREFIX) :]
        flags |= regex.IGNORECASE

    for extra in (regex.V1 | regex.UNICODE, regex.V0 | regex.ASCII):
        try:
            return regex.compile(pattern, flags | extra)
        except regex.error as e:
            logger.debug(f"Pattern {pattern!r} failed to compile: {e}")
    return None


def pattern_matches(pattern: str, text: str) -> bool:
    compiled = extended_regexp(pattern)
    return compiled is not None and compiled.search(text) is not None


def match_pattern_property(schema: dict[str, Any], key: str) -> tuple[bool, Any]:
    """First ``patternProperties`` entry whose pattern matches ``key``.

    Returns ``(matched, property_schema)``.
    """
    pattern_properties = schema.get("patternProperties")
    if not isinstance(pattern_properties, dict):
        return False, None
    for pattern, property_schema in pattern_properties.items():
        if pattern_matches(pattern, key):
            return True, property_schema
    return False, None
