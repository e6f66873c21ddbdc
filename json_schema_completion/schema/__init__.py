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

"""Schema pointer resolution and ``$ref`` expansion."""

from json_schema_completion.schema.references import (
    expand_schema_property,
    get_reference_schema,
)
from json_schema_completion.schema.resolver import (
    SchemaPointerError,
    SchemaResolver,
    UnknownPropertyError,
    parent_pointer,
)

__all__ = [
    "SchemaPointerError",
    "SchemaResolver",
    "UnknownPropertyError",
    "expand_schema_property",
    "get_reference_schema",
    "parent_pointer",
]
