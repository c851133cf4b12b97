from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional

from .types import Frame, GlassError, GlsValue, UnknownError
from .tree import (
    ASSIGNMENT,
    BINARY_OP,
    BLOCK,
    BOOLEAN,
    FOR,
    FUNCTION_CALL,
    FUNCTION_DEFINITION,
    IDENTIFIER,
    IF,
    NUMBER,
    RETURN,
    STRING,
    UNARY_OP,
    VOID,
    WHILE,
    Node,
    is_tree,
    node_span,
)

from .eval.blocks import eval_block
from .eval.common import eval_unsupported
from .eval.expr import eval_binary, eval_unary
from .eval.literals import eval_boolean, eval_identifier, eval_number, eval_string, eval_void

EvalFunc = Callable[[Node, Frame], GlsValue]


def _maybe_attach_location(exc: GlassError, node: Node, frame: Frame) -> None:
    exc.attach(frame.source, node_span(node), frame.filename)

# ---------------- Public API ----------------

def eval_expr(ast: Node, frame: Optional[Frame]=None, source: Optional[str]=None,
              filename: Optional[str]=None, variables: Optional[Mapping[str, GlsValue]]=None) -> GlsValue:
    """
    Evaluate an AST to a value.

    `source` and `filename` let diagnostics point into the text the tree
    was parsed from. `variables` seeds the names identifiers resolve to.
    """
    if frame is None:
        frame = Frame(vars=dict(variables or {}), source=source, filename=filename)
    else:
        if source is not None:
            frame.source = source
        if filename is not None:
            frame.filename = filename
        if variables:
            frame.vars.update(variables)

    try:
        return eval_node(ast, frame)
    except GlassError as e:
        _maybe_attach_location(e, ast, frame)
        raise

evaluate = eval_expr

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> GlsValue:
    try:
        return _eval_node_inner(n, frame)
    except GlassError as e:
        _maybe_attach_location(e, n, frame)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> GlsValue:
    if not is_tree(n):
        raise UnknownError(f"Cannot evaluate {type(n).__name__} outside of a node")

    handler = _NODE_DISPATCH.get(n.data)
    if handler is None:
        raise UnknownError(f"Unknown node kind '{n.data}'")

    return handler(n, frame)


def _eval_unary_op(n: Node, frame: Frame) -> GlsValue:
    op, operand = n.children
    return eval_unary(op, operand, frame, eval_node)


def _eval_binary_op(n: Node, frame: Frame) -> GlsValue:
    op, left, right = n.children
    return eval_binary(op, left, right, frame, eval_node)


def _eval_block(n: Node, frame: Frame) -> GlsValue:
    return eval_block(n.children, frame, eval_node)


_NODE_DISPATCH: Dict[str, EvalFunc] = {
    NUMBER: eval_number,
    STRING: eval_string,
    BOOLEAN: eval_boolean,
    VOID: eval_void,
    IDENTIFIER: eval_identifier,
    UNARY_OP: _eval_unary_op,
    BINARY_OP: _eval_binary_op,
    BLOCK: _eval_block,
    ASSIGNMENT: eval_unsupported,
    FUNCTION_CALL: eval_unsupported,
    FUNCTION_DEFINITION: eval_unsupported,
    RETURN: eval_unsupported,
    IF: eval_unsupported,
    WHILE: eval_unsupported,
    FOR: eval_unsupported,
}
