from __future__ import annotations

import math

import pytest

from glass_ref.evaluator import eval_expr, evaluate
from glass_ref.types import Frame
from glass_ref.utils import format_number, ieee_div, ieee_pow, ieee_rem, values_equal
from tests.support.harness import (
    GlsBool,
    GlsDict,
    GlsList,
    GlsNumber,
    GlsString,
    GlsVoid,
    InvalidOperation,
    InvalidUnaryOperation,
    UndefinedName,
    parse_source,
)

INF = math.inf


@pytest.mark.parametrize(
    "value, type_name",
    [
        (GlsNumber(1.0), "number"),
        (GlsString(""), "string"),
        (GlsBool(True), "boolean"),
        (GlsList([]), "list"),
        (GlsDict({}), "dictionary"),
        (GlsVoid(), "void"),
    ],
    ids=["number", "string", "boolean", "list", "dictionary", "void"],
)
def test_type_names(value, type_name: str) -> None:
    assert value.type_name == type_name


@pytest.mark.parametrize(
    "value, text",
    [
        (GlsNumber(3.0), "3"),
        (GlsNumber(-0.5), "-0.5"),
        (GlsNumber(1e20), "100000000000000000000"),
        (GlsNumber(INF), "inf"),
        (GlsNumber(math.nan), "NaN"),
        (GlsString('say "hi"\n'), '"say \\"hi\\"\\n"'),
        (GlsBool(False), "false"),
        (GlsVoid(), "void"),
        (GlsList([GlsNumber(1.0), GlsString("x")]), '[1, "x"]'),
        (GlsDict({"a": GlsNumber(1.0), "b": GlsList([])}), '{"a": 1, "b": []}'),
    ],
    ids=["int", "fraction", "large", "inf", "nan", "string", "bool", "void", "list", "dict"],
)
def test_repr(value, text: str) -> None:
    assert repr(value) == text


@pytest.mark.parametrize(
    "value, text",
    [
        pytest.param(0.0, "0", id="zero"),
        pytest.param(-0.0, "-0", id="negative-zero"),
        pytest.param(42.0, "42", id="integral"),
        pytest.param(2.5, "2.5", id="fraction"),
        pytest.param(0.1, "0.1", id="shortest-digits"),
        pytest.param(123.456, "123.456", id="mixed"),
        pytest.param(1e-05, "0.00001", id="small-positional"),
        pytest.param(-1.5e-07, "-0.00000015", id="small-negative"),
        pytest.param(1e21, "1000000000000000000000", id="large-positional"),
        pytest.param(math.nan, "NaN", id="nan"),
        pytest.param(INF, "inf", id="inf"),
        pytest.param(-INF, "-inf", id="negative-inf"),
    ],
)
def test_format_number(value: float, text: str) -> None:
    assert format_number(value) == text


def test_division_never_raises() -> None:
    assert ieee_div(1.0, 0.0) == INF
    assert ieee_div(-1.0, 0.0) == -INF
    assert ieee_div(1.0, -0.0) == -INF
    assert math.isnan(ieee_div(0.0, 0.0))
    assert math.isnan(ieee_div(math.nan, 0.0))
    assert ieee_div(9.0, 3.0) == 3.0


def test_remainder_never_raises() -> None:
    assert math.isnan(ieee_rem(5.0, 0.0))
    assert math.isnan(ieee_rem(INF, 2.0))
    assert ieee_rem(5.0, INF) == 5.0
    assert ieee_rem(-7.0, 3.0) == -1.0


def test_power_never_raises() -> None:
    assert ieee_pow(10.0, 400.0) == INF
    assert ieee_pow(-10.0, 401.0) == -INF
    assert ieee_pow(-10.0, 400.0) == INF
    assert ieee_pow(0.0, -1.0) == INF
    assert ieee_pow(-0.0, -1.0) == -INF
    assert ieee_pow(-0.0, -2.0) == INF
    assert math.isnan(ieee_pow(-8.0, 1.0 / 3.0))
    assert ieee_pow(2.0, 10.0) == 1024.0
    assert ieee_pow(0.0, 0.0) == 1.0


def test_number_ops_follow_ieee() -> None:
    assert GlsNumber(1.0).div(GlsNumber(0.0)) == GlsNumber(INF)
    assert math.isnan(GlsNumber(0.0).div(GlsNumber(0.0)).value)
    assert math.isnan(GlsNumber(1.0).rem(GlsNumber(0.0)).value)
    assert GlsNumber(2.0).pow(GlsNumber(0.5)).value == pytest.approx(math.sqrt(2.0))


def test_nan_is_not_equal_to_itself() -> None:
    nan = GlsNumber(math.nan)

    assert nan.eq(nan) == GlsBool(False)
    assert nan.ne(nan) == GlsBool(True)
    assert not values_equal(GlsList([nan]), GlsList([nan]))


@pytest.mark.parametrize(
    "lhs, rhs, expected",
    [
        (GlsNumber(1.0), GlsNumber(1.0), True),
        (GlsNumber(0.0), GlsNumber(-0.0), True),
        (GlsNumber(1.0), GlsString("1"), False),
        (GlsBool(True), GlsNumber(1.0), False),
        (GlsVoid(), GlsVoid(), True),
        (GlsVoid(), GlsBool(False), False),
        (GlsList([GlsNumber(1.0)]), GlsList([GlsNumber(1.0)]), True),
        (GlsList([GlsNumber(1.0)]), GlsList([GlsNumber(1.0), GlsNumber(1.0)]), False),
        (GlsList([GlsList([])]), GlsList([GlsList([])]), True),
        (GlsDict({"a": GlsBool(True)}), GlsDict({"a": GlsBool(True)}), True),
        (GlsDict({"a": GlsBool(True)}), GlsDict({"b": GlsBool(True)}), False),
        (GlsDict({}), GlsList([]), False),
    ],
    ids=[
        "numbers", "signed-zero", "number-string", "bool-number", "voids", "void-bool",
        "lists", "list-lengths", "nested-lists", "dicts", "dict-keys", "dict-list",
    ],
)
def test_values_equal(lhs, rhs, expected: bool) -> None:
    assert values_equal(lhs, rhs) is expected
    assert values_equal(rhs, lhs) is expected


def test_concat_leaves_operands_untouched() -> None:
    xs = GlsList([GlsNumber(1.0)])
    ys = GlsList([GlsNumber(2.0)])
    joined = xs.add(ys)

    assert joined == GlsList([GlsNumber(1.0), GlsNumber(2.0)])
    assert xs == GlsList([GlsNumber(1.0)])
    assert ys == GlsList([GlsNumber(2.0)])


def test_merge_leaves_operands_untouched() -> None:
    left = GlsDict({"a": GlsNumber(1.0), "keep": GlsVoid()})
    right = GlsDict({"a": GlsNumber(2.0)})
    merged = left.add(right)

    assert merged == GlsDict({"a": GlsNumber(2.0), "keep": GlsVoid()})
    assert list(merged.slots) == ["a", "keep"]
    assert left.slots["a"] == GlsNumber(1.0)
    assert right.slots == {"a": GlsNumber(2.0)}


def test_repeat_rejects_infinite_count() -> None:
    with pytest.raises(InvalidOperation):
        GlsString("a").mul(GlsNumber(INF))


def test_repeat_nan_count_is_empty() -> None:
    assert GlsString("a").mul(GlsNumber(math.nan)) == GlsString("")


def test_invalid_operation_records_operands() -> None:
    with pytest.raises(InvalidOperation) as exc_info:
        GlsNumber(1.0).add(GlsBool(True))

    err = exc_info.value
    assert (err.operation, err.left, err.right) == ("+", "number", "boolean")
    assert str(err) == "Cannot use operation '+' on type 'number' and 'boolean'"


def test_invalid_unary_records_operand() -> None:
    with pytest.raises(InvalidUnaryOperation) as exc_info:
        GlsDict({}).neg()

    assert (exc_info.value.operation, exc_info.value.operand) == ("-", "dictionary")


def test_evaluation_is_repeatable() -> None:
    ast = parse_source('"x" * 2 + "y"')

    first = eval_expr(ast)
    second = evaluate(ast)

    assert first == second == GlsString("xxy")


def test_frame_lookup_walks_parents() -> None:
    root = Frame(vars={"a": GlsNumber(1.0)}, source="a + b", filename="f.gls")
    child = Frame(parent=root, name="inner", vars={"b": GlsNumber(2.0)})

    assert child.get("a") == GlsNumber(1.0)
    assert child.get("b") == GlsNumber(2.0)
    assert child.filename == "f.gls"
    with pytest.raises(UndefinedName):
        child.get("c")


def test_evaluate_in_given_frame() -> None:
    frame = Frame(vars={"n": GlsNumber(4.0)})

    assert eval_expr(parse_source("n * n"), frame=frame) == GlsNumber(16.0)
