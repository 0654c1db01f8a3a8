"""
Skin parser
===========
Turns skin text into the ordered list of parts the factory consumes:
literal strings and MacroTags.

Syntax
------
    <% name %>                          macro
    <% name "positional" key=value %>   parameters
    <% name | filter arg | other %>     filter chain
    <% %>                               empty placeholder (renders nothing)
    <%-- comment --%>                   dropped

Parameter values:
    "double" 'single'      strings (backslash escapes \\n \\t \\" \\' \\\\)
    42 4.2                 numbers
    true false null        constants
    word                   bare word (string)
    <% nested.macro %>     nested macro, evaluated when the handler reads it
    [a, b]                 list
    {key: value, ...}      mapping (keys: words or quoted strings)
"""

from __future__ import annotations

import re
from typing import Any, Optional

from .errors import SkinSyntaxError
from .tags import MacroTag, SkinPart

_OPEN = "<%"
_CLOSE = "%>"
_COMMENT_OPEN = "<%--"
_COMMENT_CLOSE = "--%>"

_NAME = re.compile(r"[A-Za-z_][\w.\-]*")
_KEY = re.compile(r"([A-Za-z_][\w\-]*)\s*=(?!=)")
_BARE = re.compile(r"(?:(?!%>)[^\s|,\[\]{}\"'])+")
_INT = re.compile(r"[-+]?\d+\Z")
_FLOAT = re.compile(r"[-+]?(?:\d+\.\d*|\.\d+)(?:[eE][-+]?\d+)?\Z")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'"}
_CONSTANTS = {"true": True, "false": False, "null": None}


def parse_skin(text: str, source: Optional[str] = None) -> list[SkinPart]:
    """Parse skin ``text`` into literal strings and MacroTags."""
    return _SkinParser(text, source).parse()


class _SkinParser:

    def __init__(self, text: str, source: Optional[str]) -> None:
        self.text = text
        self.source = source
        self.pos = 0

    # ----------------------------------------------------------------- parts

    def parse(self) -> list[SkinPart]:
        parts: list[SkinPart] = []
        text = self.text
        while self.pos < len(text):
            start = text.find(_OPEN, self.pos)
            if start < 0:
                parts.append(text[self.pos:])
                break
            if start > self.pos:
                parts.append(text[self.pos:start])

            if text.startswith(_COMMENT_OPEN, start):
                end = text.find(_COMMENT_CLOSE, start + len(_COMMENT_OPEN))
                if end < 0:
                    self._fail("Unterminated comment", start)
                self.pos = end + len(_COMMENT_CLOSE)
                continue

            self.pos = start + len(_OPEN)
            parts.append(self._tag(start))
        return parts

    # ------------------------------------------------------------------ tags

    def _tag(self, start: int) -> MacroTag:
        """Parse a tag body; ``self.pos`` is just after ``<%``."""
        name, positional, named = self._invocation(start)
        filters = []
        while self._peek("|"):
            self.pos += 1
            filter_start = self.pos
            f_name, f_positional, f_named = self._invocation(start)
            if not f_name:
                self._fail("Missing filter name", filter_start)
            filters.append(MacroTag(f_name, tuple(f_positional), f_named))
        if not self._peek(_CLOSE):
            self._fail("Unterminated macro tag", start)
        self.pos += len(_CLOSE)
        return MacroTag(name, tuple(positional), named, tuple(filters))

    def _invocation(self, start: int) -> tuple[str, list, dict]:
        self._skip_ws()
        name = ""
        m = _NAME.match(self.text, self.pos)
        if m and not _KEY.match(self.text, self.pos):
            name = m.group(0)
            self.pos = m.end()

        positional: list[Any] = []
        named: dict[str, Any] = {}
        while True:
            self._skip_ws()
            if self.pos >= len(self.text):
                self._fail("Unterminated macro tag", start)
            if self._peek(_CLOSE) or self._peek("|"):
                return name, positional, named
            m = _KEY.match(self.text, self.pos)
            if m:
                self.pos = m.end()
                self._skip_ws()
                named[m.group(1)] = self._value()
            else:
                positional.append(self._value())

    # ---------------------------------------------------------------- values

    def _value(self) -> Any:
        text = self.text
        if self.pos >= len(text):
            self._fail("Expected a value", self.pos)
        ch = text[self.pos]
        if ch in "\"'":
            return self._string()
        if text.startswith(_OPEN, self.pos):
            start = self.pos
            self.pos += len(_OPEN)
            return self._tag(start)
        if ch == "[":
            return self._list()
        if ch == "{":
            return self._mapping()
        m = _BARE.match(text, self.pos)
        if not m:
            self._fail(f"Unexpected character {ch!r}", self.pos)
        self.pos = m.end()
        return _convert(m.group(0))

    def _string(self) -> str:
        start = self.pos
        quote = self.text[self.pos]
        self.pos += 1
        chars: list[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == "\\" and self.pos + 1 < len(self.text):
                nxt = self.text[self.pos + 1]
                chars.append(_ESCAPES.get(nxt, "\\" + nxt))
                self.pos += 2
                continue
            if ch == quote:
                self.pos += 1
                return "".join(chars)
            chars.append(ch)
            self.pos += 1
        self._fail("Unterminated string", start)

    def _list(self) -> list:
        start = self.pos
        self.pos += 1
        items: list[Any] = []
        while True:
            self._skip_ws()
            if self.pos >= len(self.text):
                self._fail("Unterminated list", start)
            if self._peek("]"):
                self.pos += 1
                return items
            items.append(self._value())
            self._skip_ws()
            if self.pos >= len(self.text):
                self._fail("Unterminated list", start)
            if self._peek(","):
                self.pos += 1
            elif not self._peek("]"):
                self._fail("Expected ',' or ']'", self.pos)

    def _mapping(self) -> dict:
        start = self.pos
        self.pos += 1
        result: dict[str, Any] = {}
        while True:
            self._skip_ws()
            if self.pos >= len(self.text):
                self._fail("Unterminated mapping", start)
            if self._peek("}"):
                self.pos += 1
                return result
            if self.text[self.pos] in "\"'":
                key = self._string()
            else:
                m = _NAME.match(self.text, self.pos)
                if not m:
                    self._fail("Expected a mapping key", self.pos)
                key = m.group(0)
                self.pos = m.end()
            self._skip_ws()
            if not (self._peek(":") or self._peek("=")):
                self._fail("Expected ':' after mapping key", self.pos)
            self.pos += 1
            self._skip_ws()
            result[key] = self._value()
            self._skip_ws()
            if self.pos >= len(self.text):
                self._fail("Unterminated mapping", start)
            if self._peek(","):
                self.pos += 1
            elif not self._peek("}"):
                self._fail("Expected ',' or '}'", self.pos)

    # --------------------------------------------------------------- helpers

    def _peek(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _fail(self, message: str, position: int):
        line = self.text.count("\n", 0, position) + 1
        column = position - (self.text.rfind("\n", 0, position) + 1) + 1
        raise SkinSyntaxError(message, line, column, self.source)


def _convert(word: str) -> Any:
    if word in _CONSTANTS:
        return _CONSTANTS[word]
    if _INT.match(word):
        return int(word)
    if _FLOAT.match(word):
        return float(word)
    return word
