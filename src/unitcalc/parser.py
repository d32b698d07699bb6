"""
Recursive descent parser for calculator expressions.

Converts a token stream into an expression tree (see ``ast``).
"""

from typing import List, Optional

from .ast import (
    Add, Apply, ApplyFunctionCall, Assign, Convert, Div, Expr, Fn, Ident,
    Mul, Num, Parens, Pow, Sub, UnaryMinus, UnaryPlus,
)
from .errors import (
    error_exponent_too_large,
    error_invalid_assignment,
    error_unexpected_eof,
    error_unexpected_token,
)
from .lexer import tokenize
from .num.base import Base
from .num.bigrat import BigRat, MAX_EXPONENT
from .num.biguint import BigUint
from .num.unit import Number
from .tokens import NumberLiteral, Token, TokenType


class Parser:
    """
    Recursive descent parser for calculator expressions.

    Usage:
        parser = Parser(tokens)
        expr = parser.parse()

    Precedence, lowest to highest:
        Lowest:  name = expr            (assignment, top level only)
                 -> / to / as           (conversion, left-associative)
                 + -
                 * /
                 unary - +
                 juxtaposition          (2 x, sin x, 3 kg)
                 ^ **                   (power, right-associative)
        Highest: f(x)                   (call, '(' directly after the callee)

    Lambdas (``\\x.body`` and ``x:body``) extend as far right as possible.
    """

    # Tokens that can begin an operand of juxtaposition
    OPERAND_START = {TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.LPAREN}

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at token at current position + offset."""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _error(self, expected: str) -> None:
        """Raise a parser error."""
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.span)
        raise error_unexpected_token(expected, f"'{token.lexeme}'", token.span)

    # =========================================================================
    # Expressions
    # =========================================================================

    def parse(self) -> Expr:
        """Parse a complete input, which must be a single expression."""
        expr = self._parse_statement()
        if not self._is_at_end():
            self._error("end of input")
        return expr

    def _parse_statement(self) -> Expr:
        if self._check(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.ASSIGN:
            name = self._advance().value
            self._advance()  # consume '='
            return Assign(name, self._parse_conversion())
        expr = self._parse_conversion()
        if self._check(TokenType.ASSIGN):
            raise error_invalid_assignment(self._current().span)
        return expr

    def _parse_conversion(self) -> Expr:
        expr = self._parse_additive()
        while self._match(TokenType.ARROW, TokenType.TO, TokenType.AS):
            expr = Convert(expr, self._parse_additive())
        return expr

    def _parse_additive(self) -> Expr:
        expr = self._parse_multiplicative()
        while True:
            if self._match(TokenType.PLUS):
                expr = Add(expr, self._parse_multiplicative())
            elif self._match(TokenType.MINUS):
                expr = Sub(expr, self._parse_multiplicative())
            else:
                return expr

    def _parse_multiplicative(self) -> Expr:
        expr = self._parse_unary()
        while True:
            if self._match(TokenType.STAR):
                expr = Mul(expr, self._parse_unary())
            elif self._match(TokenType.SLASH):
                expr = Div(expr, self._parse_unary())
            else:
                return expr

    def _parse_unary(self) -> Expr:
        if self._match(TokenType.MINUS):
            return UnaryMinus(self._parse_unary())
        if self._match(TokenType.PLUS):
            return UnaryPlus(self._parse_unary())
        return self._parse_juxtaposition()

    def _parse_juxtaposition(self) -> Expr:
        """Left-associative application by adjacency: ``2 sin x`` is ``(2 sin) x``."""
        expr = self._parse_power()
        while self._current().type in self.OPERAND_START and not self._starts_lambda():
            # a bare number cannot be followed by another number
            only_apply = self._check(TokenType.NUMBER)
            expr = Apply(expr, self._parse_power(), only_apply)
        return expr

    def _parse_power(self) -> Expr:
        base = self._parse_call()
        if self._match(TokenType.CARET):
            return Pow(base, self._parse_exponent())
        return base

    def _parse_exponent(self) -> Expr:
        if self._match(TokenType.MINUS):
            return UnaryMinus(self._parse_exponent())
        if self._match(TokenType.PLUS):
            return self._parse_exponent()
        return self._parse_power()

    def _parse_call(self) -> Expr:
        """Parse ``f(x)``: a parenthesis directly adjacent to its callee."""
        expr = self._parse_primary()
        while self._check(TokenType.LPAREN) and self._adjacent():
            self._advance()  # consume '('
            argument = self._parse_conversion()
            self._consume(TokenType.RPAREN, "')'")
            expr = ApplyFunctionCall(expr, argument)
        return expr

    def _adjacent(self) -> bool:
        previous = self.tokens[self.pos - 1]
        return previous.span.end.offset == self._current().span.start.offset

    def _starts_lambda(self) -> bool:
        return self._check(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.COLON

    def _parse_primary(self) -> Expr:
        token = self._current()
        if token.type == TokenType.NUMBER:
            self._advance()
            return Num(number_from_literal(token.value))
        if token.type == TokenType.IDENTIFIER:
            if self._starts_lambda():
                return self._parse_lambda()
            self._advance()
            return Ident(token.value)
        if token.type == TokenType.BACKSLASH:
            return self._parse_lambda()
        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_conversion()
            self._consume(TokenType.RPAREN, "')'")
            return Parens(inner)
        self._error("an expression")

    def _parse_lambda(self) -> Fn:
        """Parse ``\\x.body`` or ``x:body``."""
        if self._match(TokenType.BACKSLASH):
            param = self._consume(TokenType.IDENTIFIER, "a parameter name").value
            self._consume(TokenType.DOT, "'.'")
        else:
            param = self._advance().value
            self._advance()  # consume ':'
        return Fn(param, self._parse_conversion())


def number_from_literal(literal: NumberLiteral) -> Number:
    """Build the exact value of a numeric literal."""
    digits = literal.digits + literal.fraction
    value = BigRat(
        False,
        BigUint.parse(digits, literal.base),
        BigUint(literal.base ** len(literal.fraction)),
    )
    if literal.exponent:
        if abs(literal.exponent) > MAX_EXPONENT:
            raise error_exponent_too_large()
        value = value.mul(BigRat.from_int(10).pow(BigRat.from_int(literal.exponent)))
    if literal.prefix:
        return Number.from_rational(value, Base.from_prefix(literal.prefix))
    return Number.from_rational(value)


def parse(source: str) -> Expr:
    """
    Convenience function to tokenize and parse an expression.

    Raises:
        LexerError: If tokenizing fails
        ParserError: If parsing fails
    """
    return Parser(tokenize(source)).parse()
