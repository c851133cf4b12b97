"""
Lexer for Glass

Tokenizes Glass source code into a stream of tokens.

Features:
- Lazy, single-pass tokenization (a generator; re-iterating restarts)
- Position tracking (span, line, column)
- Prefixed integer literals (0x, 0o, 0b)
- No error recovery: lexical errors are emitted in place as error tokens
  and left to the parser to report
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from .token_types import TT, Tok, SourceSpan

DIGITS = frozenset('0123456789')
IDENT_START = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_')
IDENT_CHARS = IDENT_START | DIGITS
WHITESPACE = frozenset(' \t\r\n')

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Glass lexer.

    peek() returns '' past the end of input, so membership tests against
    the character sets above are safe at EOF.
    """

    # Keyword mapping
    KEYWORDS = {
        'not': TT.NOT,
        'and': TT.AND,
        'or': TT.OR,
        'if': TT.IF,
        'else': TT.ELSE,
        'while': TT.WHILE,
        'for': TT.FOR,
        'in': TT.IN,
        'return': TT.RETURN,
        'break': TT.BREAK,
        'continue': TT.CONTINUE,
        'import': TT.IMPORT,
        'match': TT.MATCH,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'void': TT.VOID,
        'func': TT.FUNC,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Three-character operators
        ('**=', TT.POWEQ),
        ('..=', TT.DOTDOTEQ),
        ('...', TT.ELLIPSIS),

        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),
        ('+=', TT.PLUSEQ),
        ('-=', TT.MINUSEQ),
        ('*=', TT.STAREQ),
        ('/=', TT.SLASHEQ),
        ('%=', TT.MODEQ),
        ('**', TT.POW),
        ('..', TT.DOTDOT),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('%', TT.MOD),
        ('=', TT.ASSIGN),
        ('<', TT.LT),
        ('>', TT.GT),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        (';', TT.SEMI),
        (',', TT.COMMA),
        ('.', TT.DOT),
        ('#', TT.HASH),
    ]

    # Supported backslash escapes inside string literals
    ESCAPES = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '0': '\0',
        '\\': '\\',
        '"': '"',
        "'": "'",
    }

    # Integer prefixes: letter after the leading 0 -> (base, valid digits)
    PREFIXES = {
        'x': (16, frozenset('0123456789abcdefABCDEF')),
        'o': (8, frozenset('01234567')),
        'b': (2, frozenset('01')),
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

        # Start of the token being scanned
        self.start = 0
        self.start_line = 1
        self.start_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> Iterator[Tok]:
        """Yield tokens until the end of input. Each call starts over."""
        self.pos = 0
        self.line = 1
        self.column = 1

        while True:
            self.skip_trivia()
            if self.pos >= len(self.source):
                return
            yield self.scan_token()

    def scan_token(self) -> Tok:
        """Scan next token"""
        self.mark()
        ch = self.peek()

        # String literals
        if ch == '"':
            return self.scan_string()

        # Numbers
        if ch in DIGITS:
            return self.scan_number()

        # Identifiers and keywords
        if ch in IDENT_START:
            return self.scan_identifier()

        # Operators and punctuation
        return self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self) -> Tok:
        """
        Scan string literal: "..."

        A literal may not cross a line break. The first unsupported escape
        wins over a missing closing quote, since it comes first in the text.
        """
        self.advance()  # opening quote
        chars: List[str] = []
        bad_escape: Optional[Tuple[int, int, int, int]] = None

        while True:
            ch = self.peek()

            if ch in ('', '\n'):
                if bad_escape is not None:
                    return self._invalid_escape(bad_escape)
                return self.emit(TT.UNCLOSED_STRING, self.source[self.start:self.pos])

            if ch == '"':
                self.advance()
                break

            if ch == '\\':
                esc_start, esc_line, esc_col = self.pos, self.line, self.column
                self.advance()
                code = self.peek()

                if code in self.ESCAPES:
                    chars.append(self.ESCAPES[code])
                    self.advance()
                    continue

                if code not in ('', '\n'):
                    self.advance()
                if bad_escape is None:
                    bad_escape = (esc_start, self.pos, esc_line, esc_col)
                continue

            chars.append(self.advance())

        if bad_escape is not None:
            return self._invalid_escape(bad_escape)

        return self.emit(TT.STRING, ''.join(chars))

    def _invalid_escape(self, where: Tuple[int, int, int, int]) -> Tok:
        start, end, line, col = where
        return Tok(TT.INVALID_ESCAPE, self.source[start:end], SourceSpan(start, end), line, col)

    def scan_number(self) -> Tok:
        """Scan number literal: decimal or 0x / 0o / 0b integer"""
        if self.peek() == '0':
            prefix = self.PREFIXES.get(self.peek(1).lower())
            if prefix is not None and self.peek(2) in prefix[1]:
                return self.scan_prefixed_number(*prefix)

        # Integer part
        while self.peek() in DIGITS:
            self.advance()

        # Decimal part
        if self.peek() == '.' and self.peek(1) in DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()

        # Scientific notation, only when digits follow
        if self.peek() in ('e', 'E'):
            sign = 1 if self.peek(1) in ('+', '-') else 0
            if self.peek(1 + sign) in DIGITS:
                self.advance(1 + sign)
                while self.peek() in DIGITS:
                    self.advance()

        return self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_prefixed_number(self, base: int, digits: frozenset) -> Tok:
        self.advance(2)  # 0x / 0o / 0b
        digits_start = self.pos

        while self.peek() in digits:
            self.advance()

        as_int = int(self.source[digits_start:self.pos], base)
        try:
            value = float(as_int)
        except OverflowError:
            value = float('inf')

        return self.emit(TT.NUMBER, value)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        while self.peek() in IDENT_CHARS:
            self.advance()

        value = self.source[self.start:self.pos]

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENTIFIER)
        return self.emit(token_type, value)

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return self.emit(op_type, op_str)

        ch = self.advance()
        return self.emit(TT.UNKNOWN_TOKEN, ch)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ''

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        for ch in result:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(result)
        return result

    def mark(self):
        self.start = self.pos
        self.start_line = self.line
        self.start_column = self.column

    def skip_trivia(self):
        """Skip whitespace and // comments"""
        while True:
            if self.peek() in WHITESPACE:
                self.advance()
            elif self.source.startswith('//', self.pos):
                while self.peek() not in ('\n', ''):
                    self.advance()
            else:
                return

    def emit(self, token_type: TT, value) -> Tok:
        """Build a token spanning from the last mark to the current position"""
        return Tok(
            type=token_type,
            value=value,
            span=SourceSpan(self.start, self.pos),
            line=self.start_line,
            column=self.start_column,
        )


def tokenize(source: str) -> Iterator[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()


_REVERSE_ESCAPES: Dict[str, str] = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
    '\0': '\\0',
}


def escape_string(text: str) -> str:
    """Inverse of string escape processing: body text for a string literal."""
    return ''.join(_REVERSE_ESCAPES.get(ch, ch) for ch in text)
