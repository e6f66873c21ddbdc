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

"""Per-request proposal collection keyed by label."""

from typing import Iterable

from json_schema_completion.document.nodes import strip_surrounding_quotes
from json_schema_completion.protocol import Proposal


class CompletionCollector:
    """Proposal map plus a set of labels that must never be proposed.

    A reserved label always wins over a later ``add``; a later ``add`` for the
    same label replaces the earlier proposal.
    """

    def __init__(self):
        self._proposals: dict[str, Proposal] = {}
        self._reserved: set[str] = set()

    def reserve(self, label: str) -> None:
        self._reserved.add(label)

    def add(self, proposal: Proposal) -> None:
        if proposal.label in self._reserved:
            return
        self._proposals[proposal.label] = proposal

    def has(self, label: str) -> bool:
        return label in self._proposals

    @property
    def proposals(self) -> list[Proposal]:
        return list(self._proposals.values())

    def filter(self, prefix: str) -> list[Proposal]:
        """Proposals whose unquoted label starts with ``prefix``."""
        return [
            p
            for p in self._proposals.values()
            if strip_surrounding_quotes(p.label).startswith(prefix)
        ]

    def __len__(self) -> int:
        return len(self._proposals)


class UniqueItemsCollector:
    """Collector view for ``uniqueItems`` arrays.

    Skips proposals whose label was already collected, so earlier fragments
    keep their proposal instead of being overwritten, and values already
    present elsewhere in the array.
    """

    def __init__(self, collector: CompletionCollector, existing: Iterable[str] = ()):
        self._collector = collector
        self._existing = set(existing)  # Labels of items already in the array

    def add(self, proposal: Proposal) -> None:
        if proposal.label in self._existing or self._collector.has(proposal.label):
            return
        self._collector.add(proposal)
