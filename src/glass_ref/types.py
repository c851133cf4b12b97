from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional
from typing_extensions import TypeAlias

from .token_types import TT, Tok, SourceSpan, describe

# ---------- Value Model ----------

class GlsOps:
    """
    Operator methods shared by every value kind.

    Each binary method is total over the accepted operand pairs and raises
    InvalidOperation for everything else; operands are never mutated.
    """

    type_name: ClassVar[str] = "value"

    def add(self, other: GlsValue) -> GlsValue:
        from .utils import format_number

        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsNumber(a + b)
            case (GlsString(a), GlsString(b)):
                return GlsString(a + b)
            case (GlsString(a), GlsNumber(b)):
                return GlsString(a + format_number(b))
            case (GlsNumber(a), GlsString(b)):
                return GlsString(format_number(a) + b)
            case (GlsList(a), GlsList(b)):
                return GlsList([*a, *b])
            case (GlsDict(a), GlsDict(b)):
                return GlsDict({**a, **b})
        raise InvalidOperation("+", self.type_name, other.type_name)

    def sub(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsNumber(a - b)
        raise InvalidOperation("-", self.type_name, other.type_name)

    def mul(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsNumber(a * b)
            case (GlsString(text), GlsNumber(count)) | (GlsNumber(count), GlsString(text)):
                if math.isinf(count):
                    raise InvalidOperation("*", self.type_name, other.type_name)
                # truncated toward zero; negative and nan counts repeat zero times
                if math.isnan(count) or count <= 0:
                    return GlsString("")
                try:
                    return GlsString(text * int(count))
                except (OverflowError, MemoryError):
                    # count past what a str can hold
                    raise InvalidOperation("*", self.type_name, other.type_name) from None
        raise InvalidOperation("*", self.type_name, other.type_name)

    def div(self, other: GlsValue) -> GlsValue:
        from .utils import ieee_div

        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsNumber(ieee_div(a, b))
        raise InvalidOperation("/", self.type_name, other.type_name)

    def rem(self, other: GlsValue) -> GlsValue:
        from .utils import ieee_rem

        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsNumber(ieee_rem(a, b))
        raise InvalidOperation("%", self.type_name, other.type_name)

    def pow(self, other: GlsValue) -> GlsValue:
        from .utils import ieee_pow

        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsNumber(ieee_pow(a, b))
        raise InvalidOperation("**", self.type_name, other.type_name)

    def eq(self, other: GlsValue) -> GlsValue:
        from .utils import values_equal

        return GlsBool(values_equal(self, other))

    def ne(self, other: GlsValue) -> GlsValue:
        from .utils import values_equal

        return GlsBool(not values_equal(self, other))

    def lt(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsBool(a < b)
        raise InvalidOperation("<", self.type_name, other.type_name)

    def gt(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsBool(a > b)
        raise InvalidOperation(">", self.type_name, other.type_name)

    def le(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsBool(a <= b)
        raise InvalidOperation("<=", self.type_name, other.type_name)

    def ge(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsNumber(a), GlsNumber(b)):
                return GlsBool(a >= b)
        raise InvalidOperation(">=", self.type_name, other.type_name)

    def and_(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsBool(a), GlsBool(b)):
                return GlsBool(a and b)
        raise InvalidOperation("and", self.type_name, other.type_name)

    def or_(self, other: GlsValue) -> GlsValue:
        match (self, other):
            case (GlsBool(a), GlsBool(b)):
                return GlsBool(a or b)
        raise InvalidOperation("or", self.type_name, other.type_name)

    def neg(self) -> GlsValue:
        match self:
            case GlsNumber(a):
                return GlsNumber(-a)
        raise InvalidUnaryOperation("-", self.type_name)

    def not_(self) -> GlsValue:
        match self:
            case GlsBool(a):
                return GlsBool(not a)
        raise InvalidUnaryOperation("not", self.type_name)

@dataclass
class GlsNumber(GlsOps):
    value: float
    type_name: ClassVar[str] = "number"
    def __repr__(self) -> str:
        from .utils import format_number
        return format_number(self.value)

@dataclass
class GlsString(GlsOps):
    value: str
    type_name: ClassVar[str] = "string"
    def __repr__(self) -> str:
        from .lexer_rd import escape_string
        return f'"{escape_string(self.value)}"'

@dataclass
class GlsBool(GlsOps):
    value: bool
    type_name: ClassVar[str] = "boolean"
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class GlsList(GlsOps):
    items: List['GlsValue']
    type_name: ClassVar[str] = "list"
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass
class GlsDict(GlsOps):
    slots: Dict[str, 'GlsValue']
    type_name: ClassVar[str] = "dictionary"
    def __repr__(self) -> str:
        pairs = []

        for k, v in self.slots.items():
            pairs.append(f"{GlsString(k)!r}: {v!r}")

        return "{" + ", ".join(pairs) + "}"

@dataclass
class GlsVoid(GlsOps):
    type_name: ClassVar[str] = "void"
    def __repr__(self) -> str:
        return "void"

GlsValue: TypeAlias = (
    GlsNumber
    | GlsString
    | GlsBool
    | GlsList
    | GlsDict
    | GlsVoid
)

class Frame:
    """Read-only name scope. Lookups walk the parent chain."""

    def __init__(self, parent: Optional['Frame']=None, name: str="global",
                 vars: Optional[Dict[str, GlsValue]]=None,
                 source: Optional[str]=None, filename: Optional[str]=None):
        self.parent = parent
        self.name = name
        self.vars: Dict[str, GlsValue] = dict(vars or {})

        if parent is not None:
            source = source if source is not None else parent.source
            filename = filename if filename is not None else parent.filename

        self.source: Optional[str] = source
        self.filename: Optional[str] = filename

    def get(self, name: str) -> GlsValue:
        if name in self.vars:
            return self.vars[name]

        if self.parent is not None:
            return self.parent.get(name)

        raise UndefinedName(name)

# ---------- Diagnostics ----------

DEFAULT_FILENAME = "<input>"

class GlassError(Exception):
    """
    Base of every diagnostic.

    A diagnostic is located once it knows its source text and span; only
    then can it render the offending line. Lexical and syntactic errors are
    located when raised, evaluation errors get the span of the failing node
    attached by the evaluator.
    """

    source: Optional[str]
    span: Optional[SourceSpan]
    filename: Optional[str]

    def __init__(self, message: str, *, source: Optional[str]=None,
                 span: Optional[SourceSpan]=None, filename: Optional[str]=None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.span = span
        self.filename = filename

    @property
    def located(self) -> bool:
        return self.source is not None and self.span is not None

    def attach(self, source: Optional[str], span: Optional[SourceSpan], filename: Optional[str]) -> None:
        """Record where the error happened, unless already known."""
        if self.located or source is None or span is None:
            return

        self.source = source
        self.span = span
        if self.filename is None:
            self.filename = filename

    @property
    def line(self) -> Optional[int]:
        if not self.located:
            return None
        return self.source.count("\n", 0, self.span.start) + 1

    @property
    def column(self) -> Optional[int]:
        """1-based column of the span start"""
        if not self.located:
            return None
        return self.span.start - (self.source.rfind("\n", 0, self.span.start) + 1) + 1

    def offending_text(self) -> str:
        if not self.located:
            return ""
        return self.span.slice(self.source).strip()

    def render(self) -> str:
        """Summary, offending line, caret underline and locator."""
        if not self.located:
            return self.message

        source, span = self.source, self.span
        line_start = source.rfind("\n", 0, span.start) + 1
        line_end = source.find("\n", span.start)
        if line_end == -1:
            line_end = len(source)

        text = source[line_start:line_end].rstrip("\r")
        col_start = span.start - line_start
        col_end = max(col_start, min(span.end, line_end) - line_start)

        # keep tabs so the carets line up under the source
        pad = "".join("\t" if ch == "\t" else " " for ch in text[:col_start])
        carets = "^" * max(1, col_end - col_start)
        filename = self.filename or DEFAULT_FILENAME

        return "\n".join([
            self.message,
            text,
            pad + carets,
            f"[{filename}(Ln:{self.line}, Col:{col_start}..{col_end})]",
        ])

    def __str__(self) -> str:
        if not self.located:
            return self.message

        return f"{self.message} (line {self.line}, col {self.column})"

class UnknownError(GlassError):
    """Internal fault. Never raised for valid input."""
    def __init__(self, error_message: str, **where):
        from . import __version__
        super().__init__(
            f"Unknown error '{error_message}'. Please report this bug with the "
            f"following information: Glass Version = '{__version__}'",
            **where,
        )
        self.error_message = error_message

class UnknownToken(GlassError):
    def __init__(self, source: str, span: SourceSpan, filename: Optional[str]=None):
        super().__init__(
            f"Unknown token '{span.slice(source).strip()}' encountered",
            source=source, span=span, filename=filename,
        )

class UnclosedString(GlassError):
    def __init__(self, source: str, span: SourceSpan, filename: Optional[str]=None):
        super().__init__("Unclosed string literal", source=source, span=span, filename=filename)

class UnknownEscapeSequence(GlassError):
    def __init__(self, escape_sequence: str, source: str, span: SourceSpan, filename: Optional[str]=None):
        super().__init__(
            f"Unknown escape sequence '{escape_sequence}'",
            source=source, span=span, filename=filename,
        )
        self.escape_sequence = escape_sequence

class UnexpectedToken(GlassError):
    def __init__(self, expected: Optional[TT], actual: Tok, source: str, filename: Optional[str]=None):
        found = actual.span.slice(source).strip()

        if expected is not None:
            message = f"Expected '{describe(expected)}' but found '{found}' instead"
        else:
            message = f"Unexpected token '{found}'"

        super().__init__(message, source=source, span=actual.span, filename=filename)
        self.expected = expected
        self.actual = actual

class UnexpectedEndOfInput(GlassError):
    def __init__(self, filename: Optional[str], source: Optional[str]=None):
        filename = filename or DEFAULT_FILENAME
        span = None

        if source is not None:
            span = SourceSpan(len(source), len(source))

        super().__init__(
            f"Unexpected end of input in source file '{filename}'",
            source=source, span=span, filename=filename,
        )

class InvalidOperation(GlassError):
    def __init__(self, operation: str, left: str, right: str):
        super().__init__(f"Cannot use operation '{operation}' on type '{left}' and '{right}'")
        self.operation = operation
        self.left = left
        self.right = right

class InvalidUnaryOperation(GlassError):
    def __init__(self, operation: str, operand: str):
        super().__init__(f"Unary operator '{operation}' cannot be applied to type '{operand}'")
        self.operation = operation
        self.operand = operand

class Unsupported(GlassError):
    """Language feature that exists in the syntax but is not implemented."""

class UndefinedName(GlassError):
    def __init__(self, name: str):
        super().__init__(f"Name '{name}' not found")
        self.name = name

class FileNotFound(GlassError):
    def __init__(self, filename: str):
        super().__init__(f"Could not read source file '{filename}'", filename=filename)
