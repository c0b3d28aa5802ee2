import pytest
from lark import Tree

from seppo.errors import SeppoSyntaxError
from seppo.parser import parse_tree


def test_empty_source_is_an_empty_program() -> None:
    tree = parse_tree("")
    assert isinstance(tree, Tree)
    assert tree.data == "program"
    assert tree.children == []


def test_comments_only_source() -> None:
    assert parse_tree("// nothing here\n\n").children == []


def test_top_level_items_in_order() -> None:
    tree = parse_tree(
        """
ceppo { int one() { return 1; } }
fn seppo() { return one() }
ceppo { }
"""
    )
    assert [child.data for child in tree.children] == ["extern_block", "function", "extern_block"]


def test_trailing_garbage_fails() -> None:
    with pytest.raises(SeppoSyntaxError) as excinfo:
        parse_tree("fn seppo() { } }")
    err = excinfo.value
    assert err.offset == 15
    assert (err.line, err.column) == (1, 16)
    assert err.found == "'}'"


def test_unknown_top_level_construct() -> None:
    with pytest.raises(SeppoSyntaxError) as excinfo:
        parse_tree("x = 1")
    assert excinfo.value.offset == 0
    assert "'fn'" in excinfo.value.expected
    assert "'ceppo'" in excinfo.value.expected


def test_missing_closing_brace_reports_end_of_input() -> None:
    source = "fn seppo() {\n  x = 1\n"
    with pytest.raises(SeppoSyntaxError) as excinfo:
        parse_tree(source)
    err = excinfo.value
    assert err.found == "end of input"
    assert err.offset == len(source)
    assert "'}'" in err.expected


def test_missing_expression_after_assignment() -> None:
    with pytest.raises(SeppoSyntaxError) as excinfo:
        parse_tree("fn f() { x = }")
    err = excinfo.value
    assert err.offset == 13
    assert "identifier" in err.expected
    assert "number" in err.expected
    assert "expected" in err.message


@pytest.mark.parametrize(
    "header",
    [
        "fn f(a,) {}",
        "fn f(a b) {}",
        "fn f(1) {}",
        "fn f a) {}",
        "fn (a) {}",
    ],
)
def test_malformed_parameter_lists(header: str) -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree(header)


@pytest.mark.parametrize(
    "call",
    [
        "f(1,)",
        "f(,1)",
        "f(1 2)",
        "f(1",
    ],
)
def test_malformed_argument_lists(call: str) -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree(f"fn seppo() {{ return {call} }}")


def test_nested_operation_is_not_representable() -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree("fn seppo() { x = a + b * c }")
    with pytest.raises(SeppoSyntaxError):
        parse_tree("fn seppo() { x = (a + b) }")


def test_call_is_not_an_operand() -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree("fn seppo() { x = f(1) + 2 }")


def test_compound_conditions_are_rejected() -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree("fn seppo() { seppo x > 1 > 2 { } }")


def test_hex_print_cannot_start_a_conditional() -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree("fn seppo() { 0xseppo x > 1 { y = 1 } }")


def test_perkele_without_conditional_fails() -> None:
    with pytest.raises(SeppoSyntaxError):
        parse_tree("fn seppo() { perkele { y = 1 } }")


def test_statements_need_no_separators() -> None:
    tree = parse_tree("fn seppo() { x = 1 y = 2 seppo x return y }")
    block = tree.children[0].children[-1]
    assert [stmt.data for stmt in block.children] == [
        "assignment",
        "assignment",
        "print_stmt",
        "return_stmt",
    ]


def test_host_comment_may_contain_braces() -> None:
    tree = parse_tree("fn seppo() { // } {\n return 1 }")
    assert tree.children[0].data == "function"
