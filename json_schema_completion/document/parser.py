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

"""Tolerant JSON/JSON5 parser producing a completion syntax tree.

Documents being edited are usually incomplete, so the parser never fails:
unterminated strings run to the end of the line, unterminated containers run
to the end of the text, and unexpected tokens become ``INVALID`` nodes.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from json_schema_completion.protocol import CompletionMode, NodeKind

logger = logging.getLogger(__name__)


class TokenType(Enum):
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    STRING = "string"
    NUMBER = "number"
    IDENT = "ident"
    INVALID = "invalid"


_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

_JSON_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d*)?")
_JSON5_NUMBER = re.compile(
    r"[+-]?(?:Infinity|NaN|0[xX][0-9a-fA-F]*|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d*)?)"
)
_IDENT = re.compile(r"[A-Za-z_$][\w$]*")

_STRUCTURAL = frozenset("{}[],:")

_KEYWORDS = {"true": NodeKind.TRUE, "false": NodeKind.FALSE, "null": NodeKind.NULL}
_JSON5_NUMBER_WORDS = {"Infinity", "NaN"}


@dataclass
class Token:
    type: TokenType
    start: int
    end: int


@dataclass(eq=False)
class ParsedNode:
    """Syntax node produced by the tolerant parser."""

    kind: NodeKind
    start: int
    end: int
    parent: Optional["ParsedNode"] = field(default=None, repr=False)
    children: list["ParsedNode"] = field(default_factory=list, repr=False)

    def append(self, child: "ParsedNode") -> "ParsedNode":
        child.parent = self
        self.children.append(child)
        return child

    def children_of_kind(self, kind: NodeKind) -> list["ParsedNode"]:
        return [c for c in self.children if c.kind == kind]

    def child_of_kind(self, kind: NodeKind) -> Optional["ParsedNode"]:
        for child in self.children:
            if child.kind == kind:
                return child
        return None


def tokenize(text: str, mode: CompletionMode = CompletionMode.JSON) -> Iterator[Token]:
    """Split text into tokens, skipping whitespace (and JSON5 comments)."""
    json5 = mode == CompletionMode.JSON5
    number_re = _JSON5_NUMBER if json5 else _JSON_NUMBER
    quotes = "\"'" if json5 else '"'
    i = 0
    n = len(text)

    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
            continue

        if json5 and text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline < 0 else newline + 1
            continue
        if json5 and text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = n if close < 0 else close + 2
            continue

        if c in _PUNCTUATION:
            yield Token(_PUNCTUATION[c], i, i + 1)
            i += 1
            continue

        if c in quotes:
            end = _scan_string(text, i)
            yield Token(TokenType.STRING, i, end)
            i = end
            continue

        match = number_re.match(text, i)
        if match and match.end() > i:
            yield Token(TokenType.NUMBER, i, match.end())
            i = match.end()
            continue

        match = _IDENT.match(text, i)
        if match:
            yield Token(TokenType.IDENT, i, match.end())
            i = match.end()
            continue

        yield Token(TokenType.INVALID, i, i + 1)
        i += 1


def _scan_string(text: str, start: int) -> int:
    """End offset of the string token starting at ``start``.

    An unterminated string stops at the end of its line, or before the first
    structural character on that line so a closing brace is not swallowed.
    """
    quote = text[start]
    structural = -1
    i = start + 1
    while i < len(text):
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == quote:
            return i + 1
        if c == "\n":
            break
        if structural < 0 and c in _STRUCTURAL:
            structural = i
        i += 1
    i = min(i, len(text))
    return structural if structural >= 0 else i


class _Parser:
    def __init__(self, text: str, mode: CompletionMode):
        self.text = text
        self.mode = mode
        self.tokens = list(tokenize(text, mode))
        self.index = 0

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def next(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def parse(self) -> ParsedNode:
        root = ParsedNode(NodeKind.JSON_TEXT, 0, len(self.text))
        while self.peek() is not None:
            value = self.parse_value()
            if value is None:
                token = self.next()
                value = ParsedNode(NodeKind.INVALID, token.start, token.end)
            root.append(value)
        return root

    def parse_value(self) -> Optional[ParsedNode]:
        token = self.peek()
        if token is None:
            return None
        if token.type == TokenType.LBRACE:
            return self.parse_object()
        if token.type == TokenType.LBRACKET:
            return self.parse_array()
        if token.type == TokenType.STRING:
            self.next()
            return ParsedNode(NodeKind.STRING, token.start, token.end)
        if token.type == TokenType.NUMBER:
            self.next()
            return ParsedNode(NodeKind.NUMBER, token.start, token.end)
        if token.type == TokenType.IDENT:
            self.next()
            word = self.text[token.start : token.end]
            if word in _KEYWORDS:
                return ParsedNode(_KEYWORDS[word], token.start, token.end)
            if self.mode == CompletionMode.JSON5 and word in _JSON5_NUMBER_WORDS:
                return ParsedNode(NodeKind.NUMBER, token.start, token.end)
            return ParsedNode(NodeKind.INVALID, token.start, token.end)
        return None

    def parse_object(self) -> ParsedNode:
        brace = self.next()
        node = ParsedNode(NodeKind.OBJECT, brace.start, len(self.text))
        while True:
            token = self.peek()
            if token is None:
                break
            if token.type == TokenType.RBRACE:
                self.next()
                node.end = token.end
                break
            if token.type == TokenType.COMMA:
                self.next()
                continue
            if token.type in (TokenType.STRING, TokenType.IDENT):
                node.append(self.parse_property())
                continue

            # Stray value or punctuation where a key is expected
            value = self.parse_value()
            if value is None:
                self.next()
                node.append(ParsedNode(NodeKind.INVALID, token.start, token.end))
            else:
                node.append(ParsedNode(NodeKind.INVALID, value.start, value.end))
        return node

    def parse_property(self) -> ParsedNode:
        name = self.next()
        prop = ParsedNode(NodeKind.PROPERTY, name.start, name.end)
        prop.append(ParsedNode(NodeKind.PROPERTY_NAME, name.start, name.end))

        token = self.peek()
        if token is None or token.type != TokenType.COLON:
            return prop
        self.next()
        prop.end = token.end

        value = self.parse_value()
        if value is not None:
            prop.append(value)
            prop.end = value.end
        return prop

    def parse_array(self) -> ParsedNode:
        bracket = self.next()
        node = ParsedNode(NodeKind.ARRAY, bracket.start, len(self.text))
        while True:
            token = self.peek()
            if token is None:
                break
            if token.type == TokenType.RBRACKET:
                self.next()
                node.end = token.end
                break
            if token.type == TokenType.COMMA:
                self.next()
                continue
            value = self.parse_value()
            if value is None:
                self.next()
                value = ParsedNode(NodeKind.INVALID, token.start, token.end)
            node.append(value)
        return node


class JSONDocument:
    """A parsed document satisfying the ``DocumentState`` interface."""

    def __init__(self, text: str, mode: CompletionMode = CompletionMode.JSON):
        self._text = text
        self._mode = CompletionMode(mode)
        self._root = _Parser(text, self._mode).parse()

    @property
    def text(self) -> str:
        return self._text

    @property
    def mode(self) -> CompletionMode:
        return self._mode

    @property
    def root(self) -> ParsedNode:
        return self._root

    def node_at(self, offset: int) -> ParsedNode:
        """Innermost node with ``start < offset <= end``."""
        node = self._root
        while True:
            for child in node.children:
                if child.start < offset <= child.end:
                    node = child
                    break
            else:
                return node

    def literal_value(self, node: ParsedNode) -> Any:
        return decode_literal(self._text[node.start : node.end], node.kind)

    def __repr__(self) -> str:
        return f"JSONDocument(mode={self._mode.value!r}, length={len(self._text)})"


def decode_literal(raw: str, kind: NodeKind) -> Any:
    """Decode the source text of a primitive token."""
    if kind == NodeKind.TRUE:
        return True
    if kind == NodeKind.FALSE:
        return False
    if kind == NodeKind.NULL:
        return None
    if kind == NodeKind.STRING:
        return _decode_string(raw)
    if kind == NodeKind.NUMBER:
        return _decode_number(raw)
    return raw


def _decode_string(raw: str) -> str:
    quote = raw[:1]
    body = raw[1:-1] if len(raw) > 1 and raw.endswith(quote) else raw[1:]
    if quote == "'":
        body = re.sub(r"\\'|\"", lambda m: "'" if m.group() == "\\'" else '\\"', body)
    try:
        return json.loads(f'"{body}"')
    except ValueError:
        logger.debug(f"Could not decode string literal {raw!r}")
        return body


def _decode_number(raw: str) -> Any:
    sign = -1 if raw.startswith("-") else 1
    digits = raw.lstrip("+-")
    if digits[:2].lower() == "0x":
        try:
            return sign * int(digits, 16)
        except ValueError:
            return raw
    if digits in _JSON5_NUMBER_WORDS:
        return float(raw.lstrip("+"))
    try:
        return json.loads(digits if sign > 0 else f"-{digits}")
    except ValueError:
        try:
            return float(raw)
        except ValueError:
            return raw


def parse_document(text: str, mode: CompletionMode = CompletionMode.JSON) -> JSONDocument:
    """Parse ``text`` into a document the completion engine can query."""
    return JSONDocument(text, mode)
