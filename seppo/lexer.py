from __future__ import annotations

import re
from typing import Iterator, Optional

from lark.lexer import Lexer, Token

from .errors import SeppoSyntaxError, UnbalancedNativeBlock

# Words that never lex as NAME. `seppo` is admitted back as a function name by
# the grammar (`fn seppo()` is the entry point), nowhere else.
KEYWORDS = {
    "fn": "_FN",
    "return": "_RETURN",
    "ceppo": "_CEPPO",
    "seppo": "SEPPO",
    "perkele": "_PERKELE",
}

HEX_PRINT = "0xseppo"

PUNCTUATION = {
    "(": "_LPAR",
    ")": "_RPAR",
    "{": "_LBRACE",
    "}": "_RBRACE",
    ",": "_COMMA",
}

COMPARISON_OPS = (">=", "<=", "==", "!=", ">", "<")
ARITH_OPS = "+-*/"

TOKEN_DESCRIPTIONS = {
    "_FN": "'fn'",
    "_RETURN": "'return'",
    "_CEPPO": "'ceppo'",
    "SEPPO": "'seppo'",
    "HEXSEPPO": "'0xseppo'",
    "_PERKELE": "'perkele'",
    "NAME": "identifier",
    "NUMBER": "number",
    "STRING": "string",
    "NATIVE_CODE": "native code",
    "ARITH_OP": "arithmetic operator",
    "COMP_OP": "comparison operator",
    "_EQUAL": "'='",
    "_LPAR": "'('",
    "_RPAR": "')'",
    "_LBRACE": "'{'",
    "_RBRACE": "'}'",
    "_COMMA": "','",
    "$END": "end of input",
}

_IDENT = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_NUMBER = re.compile(r"[0-9]+")
_IDENT_CHAR = re.compile(r"[A-Za-z0-9_]")
_WHITESPACE = " \t\r\n"


class _Scanner:
    """Cursor over the source text that tracks line/column as it advances."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.line_start = 0

    @property
    def column(self) -> int:
        return self.pos - self.line_start + 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self, count: int) -> None:
        end = self.pos + count
        newlines = self.text.count("\n", self.pos, end)
        if newlines:
            self.line += newlines
            self.line_start = self.text.rfind("\n", self.pos, end) + 1
        self.pos = end

    def token(self, ttype: str, length: int) -> Token:
        start, line, column = self.pos, self.line, self.column
        value = self.text[start : start + length]
        self.advance(length)
        return Token(ttype, value, start, line, column, self.line, self.column, self.pos)

    def skip_trivia(self) -> None:
        text = self.text
        while self.pos < len(text):
            if text[self.pos] in _WHITESPACE:
                self.advance(1)
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.advance((len(text) if end == -1 else end) - self.pos)
            else:
                return

    def _ident_char_at(self, pos: int) -> bool:
        return pos < len(self.text) and _IDENT_CHAR.match(self.text, pos) is not None

    def _error(self, message: str, found: str, expected: tuple[str, ...] = ()) -> SeppoSyntaxError:
        return SeppoSyntaxError.at(self.text, self.pos, message, expected=expected, found=found)

    def next_token(self) -> Token:
        text, pos = self.text, self.pos
        ch = text[pos]

        if text.startswith(HEX_PRINT, pos) and not self._ident_char_at(pos + len(HEX_PRINT)):
            return self.token("HEXSEPPO", len(HEX_PRINT))

        m = _IDENT.match(text, pos)
        if m:
            word = m.group()
            return self.token(KEYWORDS.get(word, "NAME"), len(word))

        m = _NUMBER.match(text, pos)
        if m:
            if self._ident_char_at(m.end()):
                raise self._error("malformed number literal", found=text[pos : m.end() + 1])
            return self.token("NUMBER", m.end() - pos)

        if ch == '"':
            return self._string()

        for op in COMPARISON_OPS:
            if text.startswith(op, pos):
                return self.token("COMP_OP", len(op))
        if ch == "=":
            return self.token("_EQUAL", 1)
        if ch in ARITH_OPS:
            return self.token("ARITH_OP", 1)
        if ch in PUNCTUATION:
            return self.token(PUNCTUATION[ch], 1)

        raise self._error(f"unexpected character {ch!r}", found=ch)

    def _string(self) -> Token:
        text = self.text
        i = self.pos + 1
        while i < len(text):
            c = text[i]
            if c == "\\":
                i += 2
                continue
            if c == '"':
                return self.token("STRING", i + 1 - self.pos)
            i += 1
        raise self._error("unterminated string literal", found="end of input", expected=("'\"'",))

    def native_code(self) -> Token:
        """
        Consume a native block body. The opening `{` has already been emitted;
        stop in front of the `}` that brings the depth back to zero.
        """
        open_pos = self.pos - 1
        text = self.text
        depth = 1
        i = self.pos
        while i < len(text):
            c = text[i]
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    return self.token("NATIVE_CODE", i - self.pos)
            i += 1
        raise UnbalancedNativeBlock.at(
            text,
            open_pos,
            f"unterminated native block: '{{' is never closed ({depth} brace(s) still open at end of input)",
        )


class SeppoLexer(Lexer):
    """
    Hand-written lexer plugged into lark's LALR frontend.

    Native blocks cannot be described by a regular terminal (their braces nest
    arbitrarily), so tokenization is done here and the grammar only `%declare`s
    the terminal names produced below.
    """

    def __init__(self, lexer_conf: Optional[object] = None) -> None:
        self.lexer_conf = lexer_conf

    def lex(self, data: str) -> Iterator[Token]:
        scanner = _Scanner(data)
        after_ceppo = False
        while True:
            scanner.skip_trivia()
            if scanner.at_end():
                return
            if after_ceppo and scanner.text[scanner.pos] == "{":
                yield scanner.token("_LBRACE", 1)
                yield scanner.native_code()
                after_ceppo = False
                continue
            token = scanner.next_token()
            after_ceppo = token.type == "_CEPPO"
            yield token


def tokenize(source: str) -> Iterator[Token]:
    """Tokenize `source` without parsing it."""
    return SeppoLexer().lex(source)


def describe(ttype: str) -> str:
    return TOKEN_DESCRIPTIONS.get(ttype, ttype)


__all__ = ["KEYWORDS", "HEX_PRINT", "SeppoLexer", "describe", "tokenize"]
