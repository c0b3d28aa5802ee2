"""
Plain-data view of the AST.

`program_to_dict` produces JSON-serialisable dicts tagged with a `kind` field,
which is what `seppoc --dump-ast` prints and what an out-of-process code
generator can consume.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from .ast import Located, Program


def node_to_dict(node: Any, with_loc: bool = True) -> Any:
    if isinstance(node, Located):
        return {"line": node.line, "column": node.column, "offset": node.offset}
    if dataclasses.is_dataclass(node):
        out: dict[str, Any] = {"kind": type(node).__name__}
        for f in dataclasses.fields(node):
            if f.name == "loc" and not with_loc:
                continue
            out[f.name] = node_to_dict(getattr(node, f.name), with_loc)
        return out
    if isinstance(node, (tuple, list)):
        return [node_to_dict(item, with_loc) for item in node]
    return node


def program_to_dict(program: Program, with_loc: bool = True) -> dict[str, Any]:
    return node_to_dict(program, with_loc)


__all__ = ["node_to_dict", "program_to_dict"]
