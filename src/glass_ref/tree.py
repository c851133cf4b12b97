"""AST node kinds, builders and helpers for working with Tree/Token nodes.

Nodes are `lark.Tree` instances. `Tree.data` names the node kind and the
node's source position lives in `Tree.meta` (start_pos/end_pos/line/column),
the same fields Lark fills in with propagate_positions. Operator and name
children are `lark.Token`s carrying their own positions.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence
from typing_extensions import TypeAlias, TypeGuard

from lark import Token, Tree
from lark.tree import Meta

from .token_types import Tok, SourceSpan

Node: TypeAlias = Tree | Token

# Expression nodes, all evaluated
NUMBER = 'number'
STRING = 'string'
BOOLEAN = 'boolean'
VOID = 'void'
IDENTIFIER = 'identifier'
UNARY_OP = 'unary_op'
BINARY_OP = 'binary_op'

# Statement nodes; only `block` has evaluation semantics
ASSIGNMENT = 'assignment'
FUNCTION_CALL = 'function_call'
FUNCTION_DEFINITION = 'function_definition'
RETURN = 'return'
IF = 'if'
WHILE = 'while'
FOR = 'for'
BLOCK = 'block'

EXPRESSION_KINDS = frozenset({NUMBER, STRING, BOOLEAN, VOID, IDENTIFIER, UNARY_OP, BINARY_OP})
STATEMENT_KINDS = frozenset({
    ASSIGNMENT, FUNCTION_CALL, FUNCTION_DEFINITION, RETURN, IF, WHILE, FOR, BLOCK,
})
NODE_KINDS = EXPRESSION_KINDS | STATEMENT_KINDS

# ---------------- Positions ----------------

def make_meta(span: SourceSpan, line: int, column: int) -> Meta:
    meta = Meta()
    meta.empty = False
    meta.start_pos = span.start
    meta.end_pos = span.end
    meta.line = line
    meta.column = column
    return meta

def to_token(tok: Tok) -> Token:
    """Convert a lexer token into a positioned lark Token."""
    return Token(
        tok.type.name,
        tok.value,
        start_pos=tok.span.start,
        line=tok.line,
        column=tok.column,
        end_pos=tok.span.end,
    )

def node_span(node: Any) -> Optional[SourceSpan]:
    if is_token(node):
        start, end = node.start_pos, node.end_pos
    else:
        meta = node_meta(node)
        start = getattr(meta, 'start_pos', None)
        end = getattr(meta, 'end_pos', None)

    if start is None or end is None:
        return None

    return SourceSpan(start, end)

def _position(node: Node) -> tuple[int, int]:
    if is_token(node):
        return node.line, node.column

    meta = node_meta(node)
    return getattr(meta, 'line', 0), getattr(meta, 'column', 0)

def _build(kind: str, children: List[Any], first: Node, last: Node) -> Tree:
    start, end = node_span(first), node_span(last)
    if start is None or end is None:
        return Tree(kind, children)

    line, column = _position(first)
    return Tree(kind, children, make_meta(start.cover(end), line, column))

# ---------------- Builders ----------------

def literal(kind: str, value: Any, tok: Tok) -> Tree:
    """number / string / boolean / void leaf built from its token"""
    children = [] if kind == VOID else [value]
    return Tree(kind, children, make_meta(tok.span, tok.line, tok.column))

def identifier(tok: Tok) -> Tree:
    name = to_token(tok)
    return _build(IDENTIFIER, [name], name, name)

def unary_op(op: Token, operand: Tree) -> Tree:
    return _build(UNARY_OP, [op, operand], op, operand)

def binary_op(op: Token, left: Tree, right: Tree) -> Tree:
    return _build(BINARY_OP, [op, left, right], left, right)

def assignment(op: Token, target: Tree, value: Tree) -> Tree:
    return _build(ASSIGNMENT, [op, target, value], target, value)

def function_call(name: Token, args: Sequence[Tree], closer: Token) -> Tree:
    return _build(FUNCTION_CALL, [name, *args], name, closer)

def block(statements: Sequence[Tree]) -> Tree:
    if not statements:
        return Tree(BLOCK, [])
    return _build(BLOCK, list(statements), statements[0], statements[-1])

# ---------------- Inspection ----------------

def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Any]:
    if not is_tree(node):
        return []

    return list(node.children)

def node_meta(node: Any) -> Optional[Meta]:
    if not is_tree(node):
        return None

    # Tree.meta creates an empty Meta on access; read the backing slot instead
    return getattr(node, '_meta', None)

def find_tree_by_label(node: Any, labels: Iterable[str]) -> Optional[Tree]:
    lookup = set(labels)

    if is_tree(node) and tree_label(node) in lookup:
        return node

    for child in tree_children(node):
        found = find_tree_by_label(child, lookup)
        if found is not None:
            return found

    return None
