"""
Diagnostic records handed to whatever prints them (the CLI, an editor, ...).

Parse failures are raised as exceptions; `ParseError.to_diagnostic` turns them
into one of these so reporting code does not need to know the exception types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Span:
    """Best-effort source location (file/line/column plus character offset)."""

    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    offset: Optional[int] = None

    def short(self) -> str:
        f = self.file or "<input>"
        l = self.line if self.line is not None else "?"
        c = self.column if self.column is not None else "?"
        return f"{f}:{l}:{c}"


@dataclass
class Diagnostic:
    """Represents a front-end diagnostic (error/warning)."""

    message: str
    code: str | None = None
    severity: str = "error"
    span: Span = field(default_factory=Span)
    notes: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.span is None:  # type: ignore[unreachable]
            self.span = Span()

    def render(self) -> str:
        head = f"{self.span.short()}: {self.severity}: {self.message}"
        if self.code:
            head = f"{head} [{self.code}]"
        return "\n".join([head] + [f"  note: {n}" for n in self.notes])


__all__ = ["Diagnostic", "Span"]
