from __future__ import annotations

import math
from decimal import Decimal

from .types import (
    GlsValue,
    GlsNumber,
    GlsString,
    GlsBool,
    GlsList,
    GlsDict,
    GlsVoid,
)


def values_equal(lhs: GlsValue, rhs: GlsValue) -> bool:
    """Structural equality. Values of different kinds are never equal."""
    match (lhs, rhs):
        case (GlsNumber(value=a), GlsNumber(value=b)):
            return a == b
        case (GlsString(value=a), GlsString(value=b)):
            return a == b
        case (GlsBool(value=a), GlsBool(value=b)):
            return a == b
        case (GlsVoid(), GlsVoid()):
            return True
        case (GlsList(items=a), GlsList(items=b)):
            if len(a) != len(b):
                return False
            return all(values_equal(x, y) for x, y in zip(a, b))
        case (GlsDict(slots=a), GlsDict(slots=b)):
            if a.keys() != b.keys():
                return False
            return all(values_equal(a[k], b[k]) for k in a)
        case _:
            return False


def format_number(value: float) -> str:
    """
    Positional notation with the shortest digits that round-trip.

    Integral numbers print without a fraction. Zero keeps its sign.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def ieee_div(a: float, b: float) -> float:
    if b != 0.0:
        return a / b

    if a == 0.0 or math.isnan(a):
        return math.nan

    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def ieee_rem(a: float, b: float) -> float:
    """Remainder with the sign of the dividend, like C fmod."""
    try:
        return math.fmod(a, b)
    except ValueError:
        # fmod(x, 0) and fmod(inf, y)
        return math.nan


def _odd_integer(x: float) -> bool:
    return x.is_integer() and int(x) % 2 == 1


def ieee_pow(a: float, b: float) -> float:
    """math.pow without exceptions: overflow gives inf, domain errors give nan."""
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0.0 and _odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0.0:
            # zero to a negative power
            if _odd_integer(b):
                return math.copysign(math.inf, a)
            return math.inf
        # negative base with a fractional exponent
        return math.nan
