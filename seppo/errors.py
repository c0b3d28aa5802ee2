"""
Parse-time error taxonomy.

Every failure is a `ParseError` (a `ValueError` subclass) carrying the character
offset of the first construct that could not be matched plus the derived
1-based line/column. The pipeline raises exactly one of these and stops.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .diagnostics import Diagnostic, Span


def line_col(source: str, offset: int) -> Tuple[int, int]:
    """Translate a character offset into a 1-based (line, column) pair."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class ParseError(ValueError):
    code = "E-PARSE"

    def __init__(self, message: str, *, offset: int, line: int, column: int) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column

    @classmethod
    def at(cls, source: str, offset: int, message: str, **kwargs) -> "ParseError":
        line, column = line_col(source, offset)
        return cls(message, offset=offset, line=line, column=column, **kwargs)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"

    def to_diagnostic(self, file: Optional[str] = None) -> Diagnostic:
        span = Span(file=file, line=self.line, column=self.column, offset=self.offset)
        return Diagnostic(message=self.message, code=self.code, span=span)


class SeppoSyntaxError(ParseError):
    """Source text does not match the grammar at `offset`."""

    code = "E-SYNTAX"

    def __init__(
        self,
        message: str,
        *,
        offset: int,
        line: int,
        column: int,
        expected: Sequence[str] = (),
        found: str = "",
    ) -> None:
        super().__init__(message, offset=offset, line=line, column=column)
        self.expected = tuple(expected)
        self.found = found


class ReservedWordAsIdentifier(SeppoSyntaxError):
    code = "E-RESERVED"

    def __init__(self, message: str, *, word: str, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.word = word


class UnbalancedNativeBlock(ParseError):
    """A `ceppo {` region whose braces never close; `offset` is the opening brace."""

    code = "E-NATIVE-UNBALANCED"


class MissingEntryPoint(ParseError):
    code = "E-NO-ENTRY"


class AstBuildError(ParseError):
    """The CST has a shape the builder cannot lower. Indicates a grammar/builder mismatch."""

    code = "E-AST"


__all__ = [
    "AstBuildError",
    "MissingEntryPoint",
    "ParseError",
    "ReservedWordAsIdentifier",
    "SeppoSyntaxError",
    "UnbalancedNativeBlock",
    "line_col",
]
