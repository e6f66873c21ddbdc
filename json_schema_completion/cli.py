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

"""Command line entry point for inspecting completions.

    json-schema-complete schema.json document.json --offset 12
    json-schema-complete schema.json draft.json5 --json5 --explicit

Without ``--offset`` the first cursor marker (``|`` by default) in the
document gives the position and is removed before completing.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from json_schema_completion.completion import JSONCompletion
from json_schema_completion.config import CompletionConfig, load_config
from json_schema_completion.document.parser import parse_document
from json_schema_completion.document.tree_sitter_adapter import TreeSitterDocument
from json_schema_completion.protocol import CompletionMode, CompletionResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-schema-complete",
        description="Show schema-driven completion proposals at a cursor position.",
    )
    parser.add_argument("schema", type=Path, help="JSON Schema file")
    parser.add_argument("document", type=Path, help="JSON/JSON5 document being edited")
    parser.add_argument("--offset", type=int, default=None, help="Cursor offset (characters)")
    parser.add_argument("--marker", default="|", help="Cursor marker used when --offset is omitted")
    parser.add_argument("--json5", action="store_true", help="Treat the document as JSON5")
    parser.add_argument("--explicit", action="store_true", help="Explicit completion request")
    parser.add_argument("--config", type=Path, default=None, help="YAML completion config")
    parser.add_argument(
        "--parser",
        choices=("builtin", "tree-sitter"),
        default="builtin",
        help="Syntax tree used to locate the cursor",
    )
    parser.add_argument("--format", choices=("table", "json"), default="table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def locate_cursor(text: str, offset: Optional[int], marker: str) -> tuple[str, int]:
    """Resolve the cursor offset, stripping the marker when it is used."""
    if offset is not None:
        return text, max(0, min(offset, len(text)))
    index = text.find(marker) if marker else -1
    if index < 0:
        return text, len(text)
    return text[:index] + text[index + len(marker) :], index


def render_table(result: CompletionResult, console: Console) -> None:
    table = Table(title=f"Completions (replace {result.from_offset}-{result.to_offset})")
    table.add_column("Label", style="bold cyan")
    table.add_column("Kind")
    table.add_column("Insert text")
    table.add_column("Detail", style="dim")

    for proposal in result.proposals:
        table.add_row(
            Text(proposal.label),
            Text(proposal.kind.value),
            Text(proposal.get_insert_text()),
            Text(proposal.detail or ""),
        )
    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = load_config(args.config) if args.config else CompletionConfig()
        if args.json5:
            config = CompletionConfig.from_dict({**config.to_dict(), "mode": CompletionMode.JSON5})
        schema = json.loads(args.schema.read_text())
        raw_text = args.document.read_text()
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 2

    text, offset = locate_cursor(raw_text, args.offset, args.marker)
    logger.debug(f"Completing {args.document} at offset {offset} ({config.mode.value}, {args.parser})")
    if args.parser == "tree-sitter":
        document = TreeSitterDocument(text, config.mode)
    else:
        document = parse_document(text, config.mode)

    result = JSONCompletion(schema, config).complete(document, offset, explicit=args.explicit)

    if args.format == "json":
        sys.stdout.write(result.model_dump_json(indent=2) + "\n")
    else:
        render_table(result, console)
    return 0


if __name__ == "__main__":
    sys.exit(main())
