from __future__ import annotations

from typing import Any, Callable, Dict

from lark import Tree

from ..types import Frame, GlsValue, UnknownError
from .common import token_kind

EvalFunc = Callable[[Any, Frame], GlsValue]

# operator token type -> value method
BINARY_METHODS: Dict[str, str] = {
    'PLUS': 'add',
    'MINUS': 'sub',
    'STAR': 'mul',
    'SLASH': 'div',
    'MOD': 'rem',
    'POW': 'pow',
    'EQ': 'eq',
    'NEQ': 'ne',
    'LT': 'lt',
    'GT': 'gt',
    'LTE': 'le',
    'GTE': 'ge',
    'AND': 'and_',
    'OR': 'or_',
}

def eval_unary(op: Any, operand: Tree, frame: Frame, eval_func: EvalFunc) -> GlsValue:
    match token_kind(op):
        case 'MINUS':
            return eval_func(operand, frame).neg()
        case 'NOT':
            return eval_func(operand, frame).not_()
        case 'PLUS':
            return eval_func(operand, frame)
        case _:
            raise UnknownError("Parsed invalid unary expression")

def eval_binary(op: Any, left: Tree, right: Tree, frame: Frame, eval_func: EvalFunc) -> GlsValue:
    """Both operands are always evaluated, `and`/`or` included."""
    method = BINARY_METHODS.get(token_kind(op) or '')
    if method is None:
        raise UnknownError("Parsed invalid binary operation expression")

    lhs = eval_func(left, frame)
    rhs = eval_func(right, frame)
    return getattr(lhs, method)(rhs)
