"""
Recursive Descent Parser for Glass

Structure:
- Lexer: lazy token stream from source
- Parser: pull-based recursive descent, precedence climbing for binary
  operators, one token of lookahead and no backtracking
- AST: lark Tree nodes (see tree.py)
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional

from lark import Tree

from .token_types import TT, Tok
from .tree import (
    BOOLEAN,
    IDENTIFIER,
    NUMBER,
    STRING,
    VOID,
    assignment,
    binary_op,
    block,
    function_call,
    identifier,
    literal,
    to_token,
    tree_label,
    unary_op,
)
from .types import (
    GlassError,
    UnclosedString,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnknownError,
    UnknownEscapeSequence,
    UnknownToken,
    Unsupported,
)

ASSIGN_OPS = (TT.ASSIGN, TT.PLUSEQ, TT.MINUSEQ, TT.STAREQ, TT.SLASHEQ, TT.MODEQ, TT.POWEQ)

# Statement keywords with no parsing support
UNSUPPORTED_STATEMENTS = (
    TT.IF, TT.ELSE, TT.WHILE, TT.FOR, TT.IN, TT.RETURN, TT.BREAK,
    TT.CONTINUE, TT.IMPORT, TT.MATCH, TT.FUNC,
)

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Glass.

    Expression precedence (lowest to highest):
    1. or
    2. and
    3. equality (==, !=)
    4. comparison (<, >, <=, >=)
    5. term (+, -)
    6. factor (*, /, %)
    7. power (**), left associative like every other level
    8. unary (-, +, not)
    9. atom (literals, identifiers, calls, parens)
    """

    def __init__(self, tokens: Iterable[Tok], source: str, filename: Optional[str] = None):
        self.tokens: Iterator[Tok] = iter(tokens)
        self.source = source
        self.filename = filename
        self._lookahead: Optional[Tok] = None
        self._peeked = False

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Optional[Tok]:
        """Look at the next token without consuming it; None at end of input"""
        if not self._peeked:
            self._lookahead = next(self.tokens, None)
            self._peeked = True
        return self._lookahead

    def advance(self) -> Tok:
        """Consume the next token. Lexical error tokens are reported here."""
        tok = self.peek()
        if tok is None:
            raise UnexpectedEndOfInput(self.filename, self.source)

        self._lookahead = None
        self._peeked = False

        if tok.is_error:
            raise self.lex_error(tok)
        return tok

    def check(self, *types: TT) -> bool:
        """Check if the next token matches any of the given types"""
        tok = self.peek()
        return tok is not None and tok.type in types

    def match(self, *types: TT) -> Optional[Tok]:
        """Consume and return the next token if it matches"""
        if self.check(*types):
            return self.advance()
        return None

    def expect(self, token_type: TT) -> Tok:
        """Consume token of expected type or raise error"""
        tok = self.peek()
        if tok is None:
            raise UnexpectedEndOfInput(self.filename, self.source)

        if tok.type != token_type and not tok.is_error:
            raise UnexpectedToken(token_type, tok, self.source, self.filename)

        return self.advance()

    def lex_error(self, tok: Tok) -> GlassError:
        match tok.type:
            case TT.UNKNOWN_TOKEN:
                return UnknownToken(self.source, tok.span, self.filename)
            case TT.UNCLOSED_STRING:
                return UnclosedString(self.source, tok.span, self.filename)
            case TT.INVALID_ESCAPE:
                return UnknownEscapeSequence(tok.value, self.source, tok.span, self.filename)
            case _:
                return UnknownError(f"{tok.type.name} is not a lexical error")

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """
        Parse entire program.

        A single expression without semicolons parses to itself; anything
        else becomes a block of statements.
        """
        statements: List[Tree] = []
        saw_semi = False

        while True:
            statements.append(self.parse_statement())

            if self.match(TT.SEMI):
                saw_semi = True
                if self.peek() is None:
                    break
                continue

            if self.peek() is not None:
                tok = self.advance()
                raise UnexpectedToken(None, tok, self.source, self.filename)
            break

        if len(statements) == 1 and not saw_semi:
            return statements[0]

        return block(statements)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """
        Parse a single statement: an assignment or an expression.

        Control flow and declarations are recognized by keyword and refused.
        """
        if self.check(*UNSUPPORTED_STATEMENTS):
            tok = self.advance()
            raise Unsupported(
                f"'{tok.value}' statements are not supported",
                source=self.source, span=tok.span, filename=self.filename,
            )

        expr = self.parse_expr()

        if self.check(*ASSIGN_OPS):
            op = self.advance()
            if tree_label(expr) != IDENTIFIER:
                raise UnexpectedToken(None, op, self.source, self.filename)

            value = self.parse_expr()
            return assignment(to_token(op), expr, value)

        return expr

    # ========================================================================
    # Expressions - Precedence Climbing
    # ========================================================================

    def parse_expr(self) -> Tree:
        """Parse expression (top level)"""
        return self.parse_or_expr()

    def _fold_left(self, operand: Callable[[], Tree], *ops: TT) -> Tree:
        """operand (op operand)*, folded into left-associative binary_op nodes"""
        left = operand()

        while self.check(*ops):
            op = self.advance()
            right = operand()
            left = binary_op(to_token(op), left, right)

        return left

    def parse_or_expr(self) -> Tree:
        """Parse logical OR: expr or expr"""
        return self._fold_left(self.parse_and_expr, TT.OR)

    def parse_and_expr(self) -> Tree:
        """Parse logical AND: expr and expr"""
        return self._fold_left(self.parse_equality_expr, TT.AND)

    def parse_equality_expr(self) -> Tree:
        """Parse equality: expr == expr, expr != expr"""
        return self._fold_left(self.parse_comparison_expr, TT.EQ, TT.NEQ)

    def parse_comparison_expr(self) -> Tree:
        """Parse comparison: expr < expr, etc."""
        return self._fold_left(self.parse_term_expr, TT.LT, TT.GT, TT.LTE, TT.GTE)

    def parse_term_expr(self) -> Tree:
        """Parse addition/subtraction: expr + expr"""
        return self._fold_left(self.parse_factor_expr, TT.PLUS, TT.MINUS)

    def parse_factor_expr(self) -> Tree:
        """Parse multiplication/division/remainder: expr * expr"""
        return self._fold_left(self.parse_pow_expr, TT.STAR, TT.SLASH, TT.MOD)

    def parse_pow_expr(self) -> Tree:
        """Parse exponentiation: expr ** expr (left associative, 2 ** 3 ** 2 == 64)"""
        return self._fold_left(self.parse_unary_expr, TT.POW)

    def parse_unary_expr(self) -> Tree:
        """Parse unary operators: -expr, +expr, not expr"""
        if self.check(TT.MINUS, TT.PLUS, TT.NOT):
            op = self.advance()
            operand = self.parse_unary_expr()
            return unary_op(to_token(op), operand)

        return self.parse_atom()

    def parse_atom(self) -> Tree:
        """
        Parse atoms:
        - Literals (numbers, strings, true, false, void)
        - Identifiers and calls
        - Parenthesized expressions
        """
        tok = self.advance()

        match tok.type:
            case TT.NUMBER:
                return literal(NUMBER, tok.value, tok)
            case TT.STRING:
                return literal(STRING, tok.value, tok)
            case TT.TRUE:
                return literal(BOOLEAN, True, tok)
            case TT.FALSE:
                return literal(BOOLEAN, False, tok)
            case TT.VOID:
                return literal(VOID, None, tok)
            case TT.IDENTIFIER:
                if self.match(TT.LPAR):
                    return self.parse_call(tok)
                return identifier(tok)
            case TT.LPAR:
                expr = self.parse_expr()
                self.expect(TT.RPAR)
                return expr
            case _:
                raise UnexpectedToken(None, tok, self.source, self.filename)

    def parse_call(self, name: Tok) -> Tree:
        """Parse call arguments after `name(`"""
        args: List[Tree] = []

        if not self.check(TT.RPAR):
            args.append(self.parse_expr())
            while self.match(TT.COMMA):
                args.append(self.parse_expr())

        closer = self.expect(TT.RPAR)
        return function_call(to_token(name), args, to_token(closer))

# ============================================================================
# Usage
# ============================================================================

def parse(tokens: Iterable[Tok], source: str, filename: Optional[str] = None) -> Tree:
    """Parse a token stream produced from `source`"""
    return Parser(tokens, source, filename).parse()


def parse_source(source: str, filename: Optional[str] = None) -> Tree:
    """
    Parse Glass source code to AST.

    Args:
        source: Source code to parse
        filename: Name reported in diagnostics
    """
    from .lexer_rd import tokenize

    return parse(tokenize(source), source, filename)
