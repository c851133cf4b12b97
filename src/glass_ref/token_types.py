"""
Token Types for the Glass tokenizer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    NUMBER = auto()
    IDENTIFIER = auto()
    STRING = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    POW = auto()
    SLASH = auto()
    MOD = auto()

    # Assignment
    ASSIGN = auto()  # =
    PLUSEQ = auto()
    MINUSEQ = auto()
    STAREQ = auto()
    SLASHEQ = auto()
    MODEQ = auto()
    POWEQ = auto()

    # Comparison
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()

    # Keywords
    NOT = auto()
    AND = auto()
    OR = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    IN = auto()
    RETURN = auto()
    BREAK = auto()
    CONTINUE = auto()
    IMPORT = auto()
    MATCH = auto()
    TRUE = auto()
    FALSE = auto()
    VOID = auto()
    FUNC = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    LSQB = auto()
    RSQB = auto()
    SEMI = auto()
    COMMA = auto()
    DOT = auto()
    DOTDOT = auto()  # ..
    DOTDOTEQ = auto()  # ..=
    ELLIPSIS = auto()  # ...
    HASH = auto()

    # Lexical errors, emitted in place and reported by the parser
    UNKNOWN_TOKEN = auto()
    UNCLOSED_STRING = auto()
    INVALID_ESCAPE = auto()


# Source text for fixed tokens, used when rendering diagnostics
TOKEN_TEXT = {
    TT.PLUS: '+', TT.MINUS: '-', TT.STAR: '*', TT.POW: '**',
    TT.SLASH: '/', TT.MOD: '%',
    TT.ASSIGN: '=', TT.PLUSEQ: '+=', TT.MINUSEQ: '-=', TT.STAREQ: '*=',
    TT.SLASHEQ: '/=', TT.MODEQ: '%=', TT.POWEQ: '**=',
    TT.EQ: '==', TT.NEQ: '!=', TT.LT: '<', TT.LTE: '<=', TT.GT: '>', TT.GTE: '>=',
    TT.NOT: 'not', TT.AND: 'and', TT.OR: 'or', TT.IF: 'if', TT.ELSE: 'else',
    TT.WHILE: 'while', TT.FOR: 'for', TT.IN: 'in', TT.RETURN: 'return',
    TT.BREAK: 'break', TT.CONTINUE: 'continue', TT.IMPORT: 'import',
    TT.MATCH: 'match', TT.TRUE: 'true', TT.FALSE: 'false', TT.VOID: 'void',
    TT.FUNC: 'func',
    TT.LPAR: '(', TT.RPAR: ')', TT.LBRACE: '{', TT.RBRACE: '}',
    TT.LSQB: '[', TT.RSQB: ']', TT.SEMI: ';', TT.COMMA: ',', TT.DOT: '.',
    TT.DOTDOT: '..', TT.DOTDOTEQ: '..=', TT.ELLIPSIS: '...', TT.HASH: '#',
}

ERROR_TOKENS = frozenset({TT.UNKNOWN_TOKEN, TT.UNCLOSED_STRING, TT.INVALID_ESCAPE})


def describe(token_type: TT) -> str:
    """Human-readable representation of a token category"""
    return TOKEN_TEXT.get(token_type, token_type.name.lower())


@dataclass(frozen=True)
class SourceSpan:
    """Half-open range [start, end) of offsets into the source text"""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, source: str) -> str:
        return source[self.start:self.end]

    def cover(self, other: SourceSpan) -> SourceSpan:
        return SourceSpan(min(self.start, other.start), max(self.end, other.end))

    def __repr__(self):
        return f"{self.start}..{self.end}"


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    span: SourceSpan
    line: int = 0
    column: int = 0

    @property
    def is_error(self) -> bool:
        return self.type in ERROR_TOKENS

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
