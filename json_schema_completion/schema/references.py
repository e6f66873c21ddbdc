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

"""Internal ``$ref`` resolution against the root schema document."""

import logging
from typing import Any

from json_schema_completion.config import DEFAULT_MAX_DEPTH
from json_schema_completion.document.nodes import unescape_pointer_segment

logger = logging.getLogger(__name__)


def get_reference_schema(root: Any, ref: str) -> Any:
    """Walk ``ref`` from the root schema.

    ``#`` resets to the root; every other non-empty segment descends one
    level. A missing segment yields ``None``.
    """
    current: Any = root
    for segment in ref.split("/"):
        if not segment:
            continue
        if segment == "#":
            current = root
            continue
        if isinstance(current, dict):
            current = current.get(unescape_pointer_segment(segment))
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            current = None
    return current


def expand_schema_property(fragment: Any, root: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Dereference ``fragment`` if it carries a ``$ref``.

    The referencing fragment's own keys win over the target's; ``$ref`` is
    dropped from the merged copy. Chains are followed up to ``max_depth``
    hops; a reference seen before, or an unresolvable one, stops the walk and
    the fragment reached so far is returned with its ``$ref`` intact.
    """
    seen: set[str] = set()
    current = fragment
    for _ in range(max_depth):
        if not isinstance(current, dict):
            return current
        ref = current.get("$ref")
        if not isinstance(ref, str):
            return current
        if ref in seen:
            logger.debug(f"Reference cycle detected at {ref!r}")
            return current
        seen.add(ref)

        target = get_reference_schema(root, ref)
        if not isinstance(target, dict):
            logger.debug(f"Could not resolve reference {ref!r}")
            return current

        merged = {**target, **current}
        if "$ref" in target:
            merged["$ref"] = target["$ref"]
        else:
            del merged["$ref"]
        current = merged
    return current
