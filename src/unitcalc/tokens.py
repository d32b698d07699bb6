"""
Token types for the unitcalc lexer.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the calculator lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, 3.14, 1e-9, 0xff, 0b1010

    # --- Identifiers ---
    IDENTIFIER = auto()         # names, units, builtins: x, kg, sin, π, °

    # --- Keywords ---
    TO = auto()                 # to (conversion)
    AS = auto()                 # as (conversion)

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # * or ×
    SLASH = auto()              # / or ÷
    CARET = auto()              # ^ or **

    # --- Other operators and delimiters ---
    ASSIGN = auto()             # =
    ARROW = auto()              # ->
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    BACKSLASH = auto()          # \ (lambda)
    DOT = auto()                # . (lambda body separator)
    COLON = auto()              # : (named lambda)

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class NumberLiteral:
    """
    Value of a NUMBER token.

    ``digits`` is the integer part and ``fraction`` the digits after the
    point, both in ``base``; ``exponent`` is a decimal power of ten and only
    appears on base-10 literals. ``prefix`` is the ``0x``-style prefix, if any.
    """
    digits: str
    fraction: str = ""
    exponent: int = 0
    base: int = 10
    prefix: Optional[str] = None


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # NumberLiteral for numbers, the name for identifiers
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.lexeme!r})"
        return self.type.name


KEYWORDS: dict[str, TokenType] = {
    "to": TokenType.TO,
    "as": TokenType.AS,
}

# Single-character operators, including the typographic aliases
OPERATORS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "−": TokenType.MINUS,
    "*": TokenType.STAR,
    "×": TokenType.STAR,
    "·": TokenType.STAR,
    "/": TokenType.SLASH,
    "÷": TokenType.SLASH,
    "^": TokenType.CARET,
    "=": TokenType.ASSIGN,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "\\": TokenType.BACKSLASH,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
}

# Characters that form a complete identifier on their own
SYMBOL_IDENTIFIERS = {"°", "%", "π"}

