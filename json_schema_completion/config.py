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

"""Completion engine configuration.

Configuration can be built in code or loaded from a YAML file:

    mode: json5
    max_depth: 5
    max_array_default_depth: 5
    word_pattern: "[A-Za-z0-9._]*"
    suppress_at_object_start: true
"""

import logging
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Union

import yaml

from json_schema_completion.protocol import CompletionMode

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5
DEFAULT_WORD_PATTERN = r"[A-Za-z0-9._]*"


@dataclass
class CompletionConfig:
    """Options for a completion engine instance."""

    mode: CompletionMode = CompletionMode.JSON
    max_depth: int = DEFAULT_MAX_DEPTH  # $ref chains and combinator recursion
    max_array_default_depth: int = DEFAULT_MAX_DEPTH  # items default wrapping
    word_pattern: str = DEFAULT_WORD_PATTERN  # Word before cursor outside tokens
    suppress_at_object_start: bool = True

    def __post_init__(self):
        self.mode = CompletionMode(self.mode)
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_array_default_depth < 0:
            raise ValueError(
                f"max_array_default_depth must not be negative, got {self.max_array_default_depth}"
            )
        try:
            re.compile(self.word_pattern)
        except re.error as e:
            raise ValueError(f"Invalid word_pattern {self.word_pattern!r}: {e}") from e

    @property
    def is_json5(self) -> bool:
        return self.mode == CompletionMode.JSON5

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompletionConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown completion config keys: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Invalid completion config: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "max_depth": self.max_depth,
            "max_array_default_depth": self.max_array_default_depth,
            "word_pattern": self.word_pattern,
            "suppress_at_object_start": self.suppress_at_object_start,
        }


def load_config(path: Union[str, Path]) -> CompletionConfig:
    """Load a completion config from a YAML file.

    Args:
        path: YAML file path

    Returns:
        Parsed configuration (defaults for an empty file)
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Completion config in {path} must be a mapping")

    config = CompletionConfig.from_dict(data)
    logger.debug(f"Loaded completion config from {path}: {config.to_dict()}")
    return config
