from __future__ import annotations

import pytest
from lark import Token, Tree

from glass_ref import __version__
from glass_ref.evaluator import eval_expr
from glass_ref.runner import run
from glass_ref.token_types import SourceSpan
from tests.support.harness import (
    GlassError,
    InvalidOperation,
    InvalidUnaryOperation,
    UnclosedString,
    UndefinedName,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnknownError,
    UnknownEscapeSequence,
    UnknownToken,
    Unsupported,
    raised,
)


RENDER_CASES = [
    pytest.param(
        "1 + true",
        InvalidOperation,
        "Cannot use operation '+' on type 'number' and 'boolean'\n"
        "1 + true\n"
        "^^^^^^^^\n"
        "[test.gls(Ln:1, Col:0..8)]",
        id="invalid-operation",
    ),
    pytest.param(
        '"abc',
        UnclosedString,
        "Unclosed string literal\n"
        '"abc\n'
        "^^^^\n"
        "[test.gls(Ln:1, Col:0..4)]",
        id="unclosed-string",
    ),
    pytest.param(
        "1 +\n2 + @",
        UnknownToken,
        "Unknown token '@' encountered\n"
        "2 + @\n"
        "    ^\n"
        "[test.gls(Ln:2, Col:4..5)]",
        id="unknown-token-second-line",
    ),
    pytest.param(
        "(1 2",
        UnexpectedToken,
        "Expected ')' but found '2' instead\n"
        "(1 2\n"
        "   ^\n"
        "[test.gls(Ln:1, Col:3..4)]",
        id="expected-token",
    ),
    pytest.param(
        "1 2",
        UnexpectedToken,
        "Unexpected token '2'\n"
        "1 2\n"
        "  ^\n"
        "[test.gls(Ln:1, Col:2..3)]",
        id="unexpected-token",
    ),
    pytest.param(
        "1 +",
        UnexpectedEndOfInput,
        "Unexpected end of input in source file 'test.gls'\n"
        "1 +\n"
        "   ^\n"
        "[test.gls(Ln:1, Col:3..3)]",
        id="end-of-input",
    ),
    pytest.param(
        '"a\\qb"',
        UnknownEscapeSequence,
        "Unknown escape sequence '\\q'\n"
        '"a\\qb"\n'
        "  ^^\n"
        "[test.gls(Ln:1, Col:2..4)]",
        id="unknown-escape",
    ),
    pytest.param(
        "\t1 + true",
        InvalidOperation,
        "Cannot use operation '+' on type 'number' and 'boolean'\n"
        "\t1 + true\n"
        "\t^^^^^^^^\n"
        "[test.gls(Ln:1, Col:1..9)]",
        id="tab-aligned-carets",
    ),
    pytest.param(
        "1;\n  not 2;\n3",
        InvalidUnaryOperation,
        "Unary operator 'not' cannot be applied to type 'number'\n"
        "  not 2;\n"
        "  ^^^^^\n"
        "[test.gls(Ln:2, Col:2..7)]",
        id="unary-in-block",
    ),
]


@pytest.mark.parametrize("source, expected_exc, rendered", RENDER_CASES)
def test_render(source: str, expected_exc: type, rendered: str) -> None:
    err = raised(source)

    assert isinstance(err, expected_exc)
    assert err.render() == rendered


def test_innermost_node_is_reported() -> None:
    source = '1 + (2 - "a")'
    err = raised(source)

    assert isinstance(err, InvalidOperation)
    assert err.span == SourceSpan(5, 12)
    assert err.offending_text() == '2 - "a"'


def test_undefined_name_points_at_identifier() -> None:
    err = raised("1 + foo")

    assert isinstance(err, UndefinedName)
    assert err.name == "foo"
    assert err.span == SourceSpan(4, 7)


def test_line_and_column_are_one_based() -> None:
    err = raised("1 +\n2 + @")

    assert (err.line, err.column) == (2, 5)
    assert str(err) == "Unknown token '@' encountered (line 2, col 5)"


def test_default_filename_in_locator() -> None:
    with pytest.raises(GlassError) as exc_info:
        run("1 +")

    assert exc_info.value.render().endswith("[<input>(Ln:1, Col:3..3)]")


def test_unlocated_error_renders_message_only() -> None:
    err = InvalidOperation("-", "string", "string")

    assert not err.located
    assert err.line is None
    assert err.render() == "Cannot use operation '-' on type 'string' and 'string'"
    assert err.offending_text() == ""


def test_attach_keeps_first_location() -> None:
    err = UndefinedName("x")
    err.attach("x + y", SourceSpan(0, 1), "a.gls")
    err.attach("x + y", SourceSpan(0, 5), "b.gls")

    assert err.span == SourceSpan(0, 1)
    assert err.filename == "a.gls"


def test_attach_ignores_missing_source() -> None:
    err = UndefinedName("x")
    err.attach(None, SourceSpan(0, 1), "a.gls")

    assert not err.located
    assert err.filename is None


def test_unknown_error_mentions_version() -> None:
    err = UnknownError("boom")

    assert err.error_message == "boom"
    assert "boom" in err.message
    assert f"Glass Version = '{__version__}'" in err.message


def test_invalid_operator_node_is_an_internal_error() -> None:
    ast = Tree("binary_op", [Token("COMMA", ","), Tree("number", [1.0]), Tree("number", [2.0])])

    with pytest.raises(UnknownError):
        eval_expr(ast)


def test_unknown_node_kind_is_an_internal_error() -> None:
    with pytest.raises(UnknownError):
        eval_expr(Tree("mystery", []))


@pytest.mark.parametrize("kind", ["if", "while", "for", "return", "function_definition"])
def test_declared_statements_are_unsupported(kind: str) -> None:
    with pytest.raises(Unsupported) as exc_info:
        eval_expr(Tree(kind, []))

    assert "not supported" in exc_info.value.message


def test_unexpected_token_keeps_tokens() -> None:
    err = raised("(1 2")

    assert isinstance(err, UnexpectedToken)
    assert err.actual.value == 2.0
    assert err.actual.span == SourceSpan(3, 4)


def test_deep_nesting_is_reported() -> None:
    err = raised("(" * 5000 + "1" + ")" * 5000)

    assert isinstance(err, UnknownError)
    assert "maximum nesting depth exceeded" in err.message
