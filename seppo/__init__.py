"""
Seppo front end: recognizer (lark LALR + native-block aware lexer) and AST builder.
"""

from .errors import (
    AstBuildError,
    MissingEntryPoint,
    ParseError,
    ReservedWordAsIdentifier,
    SeppoSyntaxError,
    UnbalancedNativeBlock,
)
from .parser import parse_file, parse_program, parse_tree

__version__ = "0.1.0"

__all__ = [
    "AstBuildError",
    "MissingEntryPoint",
    "ParseError",
    "ReservedWordAsIdentifier",
    "SeppoSyntaxError",
    "UnbalancedNativeBlock",
    "parse_file",
    "parse_program",
    "parse_tree",
]
