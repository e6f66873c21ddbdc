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

"""Shared schemas for completion tests."""

import pytest


@pytest.fixture
def person_schema():
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string", "default": "x", "description": "Full name"},
            "age": {"type": "integer"},
            "enabled": {"type": "boolean"},
            "color": {"type": "string", "enum": ["red", "green", "blue"]},
            "nickname": {"type": ["string", "null"]},
            "tags": {"type": "array", "items": {"enum": ["a", "b"]}},
            "address": {
                "type": "object",
                "properties": {
                    "city": {"type": "string"},
                    "zip": {"type": "string"},
                },
            },
        },
    }


@pytest.fixture
def ref_schema():
    return {
        "definitions": {
            "color": {"type": "string", "enum": ["red", "green", "blue"]},
            "address": {
                "type": "object",
                "properties": {"city": {"type": "string"}},
            },
        },
        "type": "object",
        "properties": {
            "color": {"$ref": "#/definitions/color"},
            "address": {"$ref": "#/definitions/address"},
        },
    }


@pytest.fixture
def unique_colors_schema():
    return {
        "type": "array",
        "uniqueItems": True,
        "items": {"enum": ["red", "green", "blue"]},
    }
