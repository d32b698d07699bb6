"""
Lexer for calculator expressions.

Converts source text into a stream of tokens for the parser.
Supports:
- Decimal literals with an optional fraction and exponent (1.5e-3)
- Prefixed integer literals (0x, 0o, 0b), which select the display base
- Digit separators (1_000_000)
- Identifiers, including Unicode letters and the symbols π, ° and %
- Typographic operator aliases (×, ÷, −)
- The conversion keywords 'to' and 'as'
"""

from typing import Iterator, List, Optional

from .errors import (
    error_exponent_too_large,
    error_invalid_digit,
    error_invalid_number_literal,
    error_unexpected_character,
)
from .num.base import PREFIXES
from .num.bigrat import MAX_EXPONENT
from .num.biguint import DIGITS
from .tokens import (
    KEYWORDS,
    OPERATORS,
    SYMBOL_IDENTIFIERS,
    NumberLiteral,
    SourceLocation,
    SourceSpan,
    Token,
    TokenType,
)

# Longer exponents are out of range whatever their digits
MAX_EXPONENT_DIGITS = len(str(MAX_EXPONENT))


class Lexer:
    """
    Tokenizer for calculator expressions.

    Usage:
        lexer = Lexer(source)
        tokens = lexer.tokenize()

    Or for streaming:
        for token in Lexer(source):
            process(token)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _make_token(self, token_type: TokenType, value, start: SourceLocation,
                    lexeme: str) -> Token:
        return Token(token_type, value, lexeme, self._span(start))

    def _scan_digits(self, base: int) -> str:
        """Consume a run of digits valid in ``base``; separators are dropped."""
        digits = []
        while True:
            ch = self._peek().lower()
            if ch == '_' and self._is_digit(self._peek(1), base):
                self._advance()
                continue
            if not self._is_digit(ch, base):
                break
            digits.append(self._advance().lower())
        return "".join(digits)

    @staticmethod
    def _is_digit(ch: str, base: int) -> bool:
        idx = DIGITS.find(ch.lower()) if ch != '\0' else -1
        return 0 <= idx < base

    def _scan_number(self) -> Token:
        """Scan a numeric literal."""
        start = self._location()
        prefix = (self._peek() + self._peek(1)).lower()
        if prefix in PREFIXES:
            self._advance()
            self._advance()
            base = PREFIXES[prefix]
            digits = self._scan_digits(base)
            if not digits:
                lexeme = self.source[start.offset:self.pos]
                raise error_invalid_number_literal(lexeme, self._span(start))
            if self._is_digit(self._peek(), 10):
                bad = self._location()
                raise error_invalid_digit(self._advance(), base, self._span(bad))
            lexeme = self.source[start.offset:self.pos]
            literal = NumberLiteral(digits, base=base, prefix=prefix)
            return self._make_token(TokenType.NUMBER, literal, start, lexeme)

        digits = self._scan_digits(10)
        fraction = ""
        if self._peek() == '.' and self._is_digit(self._peek(1), 10):
            self._advance()  # consume '.'
            fraction = self._scan_digits(10)

        exponent = 0
        # 'e' only starts an exponent when digits follow; "2e" is 2 times e
        if self._peek() in 'eE':
            sign_offset = 1 if self._peek(1) in '+-' else 0
            if self._is_digit(self._peek(1 + sign_offset), 10):
                self._advance()  # consume 'e'
                negative = sign_offset and self._advance() == '-'
                exponent_digits = self._scan_digits(10).lstrip("0") or "0"
                if len(exponent_digits) > MAX_EXPONENT_DIGITS:
                    raise error_exponent_too_large()
                exponent = int(exponent_digits)
                if negative:
                    exponent = -exponent

        lexeme = self.source[start.offset:self.pos]
        literal = NumberLiteral(digits, fraction, exponent)
        return self._make_token(TokenType.NUMBER, literal, start, lexeme)

    def _scan_identifier_or_keyword(self) -> Token:
        start = self._location()
        while True:
            ch = self._peek()
            if ch in SYMBOL_IDENTIFIERS:
                break
            if not (ch.isalnum() or ch == '_'):
                break
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        return self._make_token(token_type, lexeme, start, lexeme)

    def _scan_token(self) -> Token:
        while self._peek().isspace():
            self._advance()

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, start, "")

        ch = self._peek()

        if self._is_digit(ch, 10):
            return self._scan_number()

        if ch in SYMBOL_IDENTIFIERS:
            self._advance()
            return self._make_token(TokenType.IDENTIFIER, ch, start, ch)

        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword()

        # Two-character operators
        if ch in '-−' and self._peek(1) == '>':
            self._advance()
            self._advance()
            return self._make_token(TokenType.ARROW, None, start, "->")
        if ch == '*' and self._peek(1) == '*':
            self._advance()
            self._advance()
            return self._make_token(TokenType.CARET, None, start, "**")

        if ch in OPERATORS:
            self._advance()
            return self._make_token(OPERATORS[ch], None, start, ch)

        self._advance()
        raise error_unexpected_character(ch, self._span(start))

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, ending with an EOF token."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self._scan_token()
            yield token
            if token.type == TokenType.EOF:
                return


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """Convenience function to tokenize source code."""
    return Lexer(source, filename).tokenize()
