from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from lark import Token, Tree

from .ast import (
    Assign,
    BinaryOp,
    Call,
    Condition,
    Conditional,
    Expr,
    ExprStmt,
    Function,
    Item,
    Located,
    Name,
    NativeBlock,
    Number,
    Print,
    Program,
    Return,
    Stmt,
    String,
)
from .errors import AstBuildError


def build_program(tree: Tree, native_symbols: Iterable[str] = ()) -> Program:
    """Lower a `program` CST into a `Program`, keeping source order."""
    if _name(tree) != "program":
        raise _error(tree, f"expected program, got {_name(tree)}")
    items: List[Item] = []
    for child in _trees(tree):
        kind = _name(child)
        if kind == "function":
            items.append(_build_function(child))
        elif kind == "extern_block":
            items.append(_build_extern_block(child, ordinal=len(items)))
        else:
            raise _error(child, f"unexpected top-level node {kind}")
    return Program(items=tuple(items), native_symbols=tuple(native_symbols))


def _build_extern_block(tree: Tree, ordinal: int) -> NativeBlock:
    code = next((tok for tok in _tokens(tree) if tok.type == "NATIVE_CODE"), None)
    if code is None:
        raise _error(tree, "native block without code")
    return NativeBlock(loc=_loc(tree), code=str(code), ordinal=ordinal)


def _build_function(tree: Tree) -> Function:
    name_token = next(tok for tok in _tokens(tree) if tok.type in {"NAME", "SEPPO"})
    params: Tuple[str, ...] = ()
    body_node: Optional[Tree] = None
    for child in _trees(tree):
        if _name(child) == "params":
            params = tuple(tok.value for tok in _tokens(child))
        elif _name(child) == "block":
            body_node = child
    if body_node is None:
        raise _error(tree, f"function {name_token.value} has no body")
    return Function(
        loc=_loc(tree),
        name=name_token.value,
        params=params,
        body=_build_block(body_node),
    )


def _build_block(tree: Tree) -> Tuple[Stmt, ...]:
    return tuple(_build_stmt(child) for child in _trees(tree))


def _build_stmt(tree: Tree) -> Stmt:
    kind = _name(tree)
    if kind == "print_stmt":
        return _build_print(tree)
    if kind == "conditional":
        return _build_conditional(tree)
    if kind == "assignment":
        return _build_assignment(tree)
    if kind == "return_stmt":
        return Return(loc=_loc(tree), value=_build_expr(_single_tree(tree)))
    if kind == "expr_stmt":
        return ExprStmt(loc=_loc(tree), value=_build_expr(_single_tree(tree)))
    raise _error(tree, f"unsupported statement node {kind}")


def _build_print(tree: Tree) -> Print:
    command = tree.children[0]
    if not isinstance(command, Token) or command.type not in {"SEPPO", "HEXSEPPO"}:
        raise _error(tree, "print statement missing command")
    return Print(
        loc=_loc(tree),
        value=_build_expr(_single_tree(tree)),
        hex=command.type == "HEXSEPPO",
    )


def _build_conditional(tree: Tree) -> Conditional:
    condition_node = None
    then_node = None
    else_node = None
    for child in _trees(tree):
        name = _name(child)
        if name == "condition":
            condition_node = child
        elif name == "block":
            then_node = child
        elif name == "else_clause":
            else_node = _single_tree(child)
    if condition_node is None or then_node is None:
        raise _error(tree, "malformed conditional")
    return Conditional(
        loc=_loc(tree),
        test=_build_condition(condition_node),
        then_body=_build_block(then_node),
        else_body=_build_block(else_node) if else_node is not None else None,
    )


def _build_condition(tree: Tree) -> Condition:
    if len(tree.children) != 3 or not isinstance(tree.children[1], Token):
        raise _error(tree, "condition expects `expression op expression`")
    left, op, right = tree.children
    return Condition(
        loc=_loc(tree),
        left=_build_expr(left),
        op=op.value,
        right=_build_expr(right),
    )


def _build_assignment(tree: Tree) -> Assign:
    target = next(tok for tok in _tokens(tree) if tok.type == "NAME")
    return Assign(loc=_loc(tree), target=target.value, value=_build_expr(_single_tree(tree)))


def _build_expr(node) -> Expr:
    if not isinstance(node, Tree):
        raise AstBuildError(f"expected an expression node, got {node!r}", offset=0, line=1, column=1)
    name = _name(node)
    if name == "number":
        return Number(loc=_loc(node), value=int(node.children[0].value))
    if name == "string":
        raw = node.children[0].value
        return String(loc=_loc(node), text=raw[1:-1])
    if name == "var":
        return Name(loc=_loc(node), ident=node.children[0].value)
    if name == "operation":
        if len(node.children) != 3 or not isinstance(node.children[1], Token):
            raise _error(node, "operation expects `operand op operand`")
        left, op, right = node.children
        return BinaryOp(
            loc=_loc(node),
            left=_build_operand(left),
            op=op.value,
            right=_build_operand(right),
        )
    if name == "call":
        return _build_call(node)
    raise _error(node, f"unsupported expression node {name}")


def _build_operand(node: Tree) -> Number | Name:
    expr = _build_expr(node)
    if not isinstance(expr, (Number, Name)):
        raise _error(node, "operands of a binary operation must be numbers or names")
    return expr


def _build_call(tree: Tree) -> Call:
    name_token = tree.children[0]
    args: Tuple[Expr, ...] = ()
    args_node = next((child for child in _trees(tree) if _name(child) == "args"), None)
    if args_node is not None:
        args = tuple(_build_expr(arg) for arg in _trees(args_node))
    return Call(loc=_loc(tree), name=name_token.value, args=args)


def _single_tree(tree: Tree) -> Tree:
    children = list(_trees(tree))
    if len(children) != 1:
        raise _error(tree, f"{_name(tree)} expects exactly one child node, got {len(children)}")
    return children[0]


def _trees(tree: Tree):
    return (child for child in tree.children if isinstance(child, Tree))


def _tokens(tree: Tree):
    return (child for child in tree.children if isinstance(child, Token))


def _loc(tree: Tree) -> Located:
    meta = tree.meta
    return Located(line=meta.line, column=meta.column, offset=meta.start_pos)


def _error(tree: Tree, message: str) -> AstBuildError:
    meta = tree.meta
    if getattr(meta, "empty", True):
        return AstBuildError(message, offset=0, line=1, column=1)
    return AstBuildError(message, offset=meta.start_pos, line=meta.line, column=meta.column)


def _name(node: Tree | Token) -> str:
    if isinstance(node, Tree):
        data = node.data
        if isinstance(data, Token):
            return data.value
        return data
    if isinstance(node, Token):
        return node.type
    return str(node)


__all__ = ["build_program"]
