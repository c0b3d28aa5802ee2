from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from lark import Lark, Tree
from lark.exceptions import UnexpectedToken

from .ast import ENTRY_POINT, Program
from .builder import build_program
from .errors import MissingEntryPoint, ReservedWordAsIdentifier, SeppoSyntaxError
from .lexer import KEYWORDS, SeppoLexer, describe

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_RESERVED_TYPES = {ttype: word for word, ttype in KEYWORDS.items()}

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    lexer=SeppoLexer,
    start="program",
    propagate_positions=True,
    maybe_placeholders=False,
)


def parse_tree(source: str) -> Tree:
    """
    Recognize `source` and return the concrete syntax tree rooted at `program`.

    Raises `SeppoSyntaxError` (or `ReservedWordAsIdentifier`) on the first
    token the grammar cannot accept, and `UnbalancedNativeBlock` when a
    `ceppo { ... }` region runs off the end of the input.
    """
    try:
        return _PARSER.parse(source)
    except UnexpectedToken as err:
        raise _syntax_error(source, err) from None


def parse_program(
    source: str,
    native_symbols: Iterable[str] = (),
    require_entry: bool = False,
) -> Program:
    tree = parse_tree(source)
    program = build_program(tree, native_symbols=native_symbols)
    if require_entry and program.function(ENTRY_POINT) is None:
        raise MissingEntryPoint.at(source, 0, f"no `{ENTRY_POINT}` function found")
    logger.debug(
        "parsed %d function(s) and %d native block(s)",
        len(program.functions),
        len(program.native_blocks),
    )
    return program


def parse_file(path: Path | str, **kwargs) -> Program:
    path = Path(path)
    logger.debug("parsing %s", path)
    raw = path.read_bytes()
    try:
        source = raw.decode("utf-8")
    except UnicodeDecodeError as err:
        # Offsets count characters, so measure the valid prefix.
        prefix = raw[: err.start].decode("utf-8")
        raise SeppoSyntaxError.at(
            prefix,
            len(prefix),
            f"source is not valid UTF-8 (byte 0x{raw[err.start]:02x})",
            expected=("UTF-8 text",),
            found=f"byte 0x{raw[err.start]:02x}",
        ) from None
    return parse_program(source, **kwargs)


def _syntax_error(source: str, err: UnexpectedToken) -> SeppoSyntaxError:
    token = err.token
    expected = tuple(sorted(describe(t) for t in (err.expected or ())))
    if token.type == "$END":
        offset = len(source)
        found = "end of input"
    else:
        offset = token.start_pos
        found = repr(token.value)
    message = f"unexpected {found}"
    if expected:
        message = f"{message}, expected {' or '.join(expected)}"
    word = _RESERVED_TYPES.get(token.type)
    if word is not None and "NAME" in (err.expected or ()):
        return ReservedWordAsIdentifier.at(
            source,
            offset,
            f"reserved word {word!r} cannot be used as an identifier",
            word=word,
            expected=expected,
            found=found,
        )
    return SeppoSyntaxError.at(source, offset, message, expected=expected, found=found)


__all__ = ["parse_file", "parse_program", "parse_tree"]
