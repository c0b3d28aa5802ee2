import pytest

from seppo.diagnostics import Diagnostic, Span
from seppo.errors import (
    MissingEntryPoint,
    ParseError,
    SeppoSyntaxError,
    UnbalancedNativeBlock,
    line_col,
)
from seppo.parser import parse_program


def test_line_col() -> None:
    text = "ab\ncd\n"
    assert line_col(text, 0) == (1, 1)
    assert line_col(text, 2) == (1, 3)
    assert line_col(text, 3) == (2, 1)
    assert line_col(text, 4) == (2, 2)
    assert line_col(text, 100) == (3, 1)


def test_all_failures_are_parse_errors() -> None:
    for cls in (SeppoSyntaxError, UnbalancedNativeBlock, MissingEntryPoint):
        assert issubclass(cls, ParseError)
    assert issubclass(ParseError, ValueError)


def test_syntax_error_position_on_later_line() -> None:
    source = "fn seppo() {\n x = \n}"
    with pytest.raises(SeppoSyntaxError) as excinfo:
        parse_program(source)
    err = excinfo.value
    assert err.offset == 19
    assert (err.line, err.column) == (3, 1)
    assert str(err).startswith("3:1: unexpected '}'")


def test_to_diagnostic() -> None:
    with pytest.raises(UnbalancedNativeBlock) as excinfo:
        parse_program("\n\nceppo { {")
    diag = excinfo.value.to_diagnostic(file="prog.seppo")
    assert diag.severity == "error"
    assert diag.code == "E-NATIVE-UNBALANCED"
    assert diag.span == Span(file="prog.seppo", line=3, column=7, offset=8)
    assert diag.render().startswith("prog.seppo:3:7: error: unterminated native block")


def test_diagnostic_render_with_notes_and_unknown_span() -> None:
    diag = Diagnostic(message="boom", span=None, notes=["first", "second"])
    assert diag.span == Span()
    assert diag.render() == "<input>:?:?: error: boom\n  note: first\n  note: second"


def test_first_failure_wins() -> None:
    # The syntax error precedes the unterminated native block.
    with pytest.raises(SeppoSyntaxError):
        parse_program("fn seppo( { }\nceppo {")
