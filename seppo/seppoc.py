#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .dump import program_to_dict
from .errors import ParseError
from .parser import parse_file

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str | None) -> None:
    level_name = (level_name or os.environ.get("SEPPO_LOG_LEVEL") or "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise SystemExit(f"seppoc: unknown log level {level_name!r}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def check_file(
    source_path: Path,
    dump_ast: bool,
    require_entry: bool,
    native_symbols: list[str],
    with_loc: bool = True,
) -> int:
    try:
        program = parse_file(source_path, native_symbols=native_symbols, require_entry=require_entry)
    except ParseError as err:
        print(err.to_diagnostic(file=str(source_path)).render(), file=sys.stderr)
        return 1
    except OSError as err:
        print(f"seppoc: cannot read {source_path}: {err.strerror or err}", file=sys.stderr)
        return 1
    if dump_ast:
        print(json.dumps(program_to_dict(program, with_loc=with_loc), indent=2))
    else:
        print(
            f"{source_path}: ok ({len(program.functions)} function(s), "
            f"{len(program.native_blocks)} native block(s))"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="seppoc", description="seppoc: parse a Seppo source file into an AST")
    ap.add_argument("source", type=Path, help="Seppo source file")
    ap.add_argument("--dump-ast", action="store_true", help="Print the AST as JSON to stdout")
    ap.add_argument("--no-loc", action="store_true", help="With --dump-ast: omit source locations")
    ap.add_argument(
        "--no-entry-check",
        action="store_true",
        help="Do not require a `fn seppo()` entry point",
    )
    ap.add_argument(
        "--native-symbol",
        action="append",
        default=[],
        metavar="NAME",
        help="Callable name exported by a native block (repeatable)",
    )
    ap.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $SEPPO_LOG_LEVEL or WARNING)",
    )
    args = ap.parse_args(argv)
    _configure_logging(args.log_level)
    logger.debug("seppoc %s", args.source)

    return check_file(
        args.source,
        dump_ast=args.dump_ast,
        require_entry=not args.no_entry_check,
        native_symbols=args.native_symbol,
        with_loc=not args.no_loc,
    )


if __name__ == "__main__":
    raise SystemExit(main())
