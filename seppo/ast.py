from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Located:
    line: int
    column: int
    offset: int


# Expressions


@dataclass(frozen=True)
class Number:
    loc: Located
    value: int


@dataclass(frozen=True)
class String:
    loc: Located
    text: str


@dataclass(frozen=True)
class Name:
    loc: Located
    ident: str


@dataclass(frozen=True)
class BinaryOp:
    """`left op right` where both operands are atoms (Number or Name)."""

    loc: Located
    left: Union[Number, Name]
    op: str
    right: Union[Number, Name]


@dataclass(frozen=True)
class Call:
    loc: Located
    name: str
    args: Tuple["Expr", ...]


Expr = Union[Number, String, Name, BinaryOp, Call]


# Statements


@dataclass(frozen=True)
class Condition:
    loc: Located
    left: Expr
    op: str
    right: Expr


@dataclass(frozen=True)
class Print:
    """`seppo value` (hex=False) or `0xseppo value` (hex=True)."""

    loc: Located
    value: Expr
    hex: bool = False


@dataclass(frozen=True)
class Assign:
    loc: Located
    target: str
    value: Expr


@dataclass(frozen=True)
class Conditional:
    loc: Located
    test: Condition
    then_body: Tuple["Stmt", ...]
    else_body: Optional[Tuple["Stmt", ...]] = None


@dataclass(frozen=True)
class Return:
    loc: Located
    value: Expr


@dataclass(frozen=True)
class ExprStmt:
    loc: Located
    value: Expr


Stmt = Union[Print, Assign, Conditional, Return, ExprStmt]


# Top level


@dataclass(frozen=True)
class NativeBlock:
    """
    Verbatim foreign source captured from `ceppo { ... }`.

    `code` is exactly the text between the outermost braces and is never
    interpreted here. `ordinal` is the block's index in `Program.items`, so a
    code generator can emit it ahead of the functions that call into it.
    """

    loc: Located
    code: str
    ordinal: int


@dataclass(frozen=True)
class Function:
    loc: Located
    name: str
    params: Tuple[str, ...]
    body: Tuple[Stmt, ...]


Item = Union[NativeBlock, Function]


@dataclass(frozen=True)
class Program:
    items: Tuple[Item, ...]
    # Callable names declared by native blocks, as reported by the native
    # toolchain. Carried through untouched for call resolution downstream.
    native_symbols: Tuple[str, ...] = ()

    @property
    def functions(self) -> Tuple[Function, ...]:
        return tuple(item for item in self.items if isinstance(item, Function))

    @property
    def native_blocks(self) -> Tuple[NativeBlock, ...]:
        return tuple(item for item in self.items if isinstance(item, NativeBlock))

    def function(self, name: str) -> Optional[Function]:
        for fn in self.functions:
            if fn.name == name:
                return fn
        return None

    def callable_names(self) -> frozenset[str]:
        """Function names and native symbols share one namespace."""
        return frozenset(fn.name for fn in self.functions) | frozenset(self.native_symbols)


ENTRY_POINT = "seppo"
