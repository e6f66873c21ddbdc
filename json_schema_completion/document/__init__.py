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

"""Document adapters and syntax-node helpers."""

from json_schema_completion.document.nodes import (
    get_word,
    pointer_for_node,
    pointer_for_position,
    strip_surrounding_quotes,
)
from json_schema_completion.document.parser import JSONDocument, ParsedNode, parse_document

__all__ = [
    "JSONDocument",
    "ParsedNode",
    "get_word",
    "parse_document",
    "pointer_for_node",
    "pointer_for_position",
    "strip_surrounding_quotes",
]
