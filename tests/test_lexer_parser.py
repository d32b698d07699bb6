"""
Unit tests for the calculator lexer and parser.
"""

import pytest

from unitcalc import tokenize, parse, Lexer
from unitcalc.ast import (
    Add, Apply, ApplyFunctionCall, Assign, Convert, Div, Fn, Ident, Mul,
    Num, Parens, Pow, UnaryMinus,
)
from unitcalc.errors import LexerError, NumericError, ParserError
from unitcalc.num.bigrat import BigRat
from unitcalc.num.complex import Complex
from unitcalc.parser import number_from_literal
from unitcalc.tokens import NumberLiteral, TokenType


def types(source):
    return [t.type for t in tokenize(source)]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_simple_expression(self):
        """Numbers, identifiers and operators."""
        assert types("3 kg + 2") == [
            TokenType.NUMBER,
            TokenType.IDENTIFIER,
            TokenType.PLUS,
            TokenType.NUMBER,
            TokenType.EOF,
        ]

    def test_position_tracking(self):
        """Token spans carry columns and offsets."""
        tokens = tokenize("12 + x")
        assert tokens[0].span.start.column == 1
        assert tokens[0].span.end.offset == 2
        assert tokens[2].span.start.column == 6

    def test_streaming(self):
        """Iterating a Lexer yields the same tokens."""
        assert [t.type for t in Lexer("1+2")] == types("1+2")


class TestNumbers:
    """Test numeric literal scanning."""

    def test_decimal_with_exponent(self):
        """Fraction and exponent are split out."""
        literal = tokenize("1.5e-3")[0].value
        assert literal == NumberLiteral("1", "5", -3)

    def test_separators(self):
        """Underscores between digits are dropped."""
        assert tokenize("1_000")[0].value.digits == "1000"

    def test_prefixed(self):
        """0x, 0o and 0b select the base."""
        assert tokenize("0xFF")[0].value == NumberLiteral("ff", base=16, prefix="0x")
        assert tokenize("0b101")[0].value.base == 2
        assert tokenize("0o17")[0].value.base == 8

    def test_trailing_e_is_identifier(self):
        """'2e' is the number 2 followed by the identifier e."""
        tokens = tokenize("2e")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[1].type == TokenType.IDENTIFIER
        assert tokens[1].value == "e"

    def test_invalid_digit_for_base(self):
        """A decimal digit outside the base is an error."""
        with pytest.raises(LexerError) as exc:
            tokenize("0b102")
        assert exc.value.code == "E003"

    def test_exponent_leading_zeros(self):
        """Leading zeros in an exponent do not count against its size."""
        assert tokenize("1e0003")[0].value == NumberLiteral("1", "", 3)
        assert tokenize("1e" + "0" * 5000 + "2")[0].value.exponent == 2

    def test_exponent_with_too_many_digits(self):
        """An exponent far beyond the bound is rejected while scanning."""
        with pytest.raises(NumericError) as exc:
            tokenize("1e" + "1" * 5000)
        assert exc.value.code == "E203"

    def test_prefix_without_digits(self):
        """A bare prefix is not a number."""
        with pytest.raises(LexerError) as exc:
            tokenize("0x")
        assert exc.value.code == "E002"


class TestOperatorsAndIdentifiers:
    """Test operators, aliases, keywords and symbols."""

    def test_two_character_operators(self):
        """-> and ** are single tokens."""
        assert types("a -> b")[1] == TokenType.ARROW
        assert types("2**3")[1] == TokenType.CARET

    def test_typographic_aliases(self):
        """×, ÷ and − are accepted."""
        assert types("2×3÷4−1")[1::2][:3] == [
            TokenType.STAR, TokenType.SLASH, TokenType.MINUS,
        ]

    def test_keywords(self):
        """'to' and 'as' are conversion keywords."""
        assert types("1 m to cm")[2] == TokenType.TO
        assert types("1 m as cm")[2] == TokenType.AS

    def test_symbol_identifiers(self):
        """°, % and π stand alone."""
        tokens = tokenize("45°")
        assert tokens[1].type == TokenType.IDENTIFIER
        assert tokens[1].value == "°"
        assert tokenize("2π")[1].value == "π"

    def test_unicode_identifier(self):
        """Letters such as Ω continue an identifier."""
        tokens = tokenize("kΩ")
        assert tokens[0].value == "kΩ"

    def test_unexpected_character(self):
        """Unknown characters are reported with E001."""
        with pytest.raises(LexerError) as exc:
            tokenize("3 $")
        assert exc.value.code == "E001"
        assert exc.value.diagnostic.span.start.column == 3


class TestParserPrecedence:
    """Test operator precedence and associativity."""

    def test_mul_over_add(self):
        """* binds tighter than +."""
        expr = parse("1 + 2 * 3")
        assert isinstance(expr, Add)
        assert isinstance(expr.right, Mul)

    def test_power_right_associative(self):
        """2^3^2 is 2^(3^2)."""
        expr = parse("2^3^2")
        assert isinstance(expr, Pow)
        assert isinstance(expr.right, Pow)

    def test_unary_minus_below_power(self):
        """-2^2 is -(2^2)."""
        expr = parse("-2^2")
        assert isinstance(expr, UnaryMinus)
        assert isinstance(expr.operand, Pow)

    def test_negative_exponent(self):
        """The exponent may be negated."""
        expr = parse("sin^-1")
        assert isinstance(expr, Pow)
        assert isinstance(expr.right, UnaryMinus)

    def test_juxtaposition_over_division(self):
        """100 km/h is (100 km)/h."""
        expr = parse("100 km/h")
        assert isinstance(expr, Div)
        assert isinstance(expr.left, Apply)

    def test_juxtaposition_left_associative(self):
        """2 sin x is (2 sin) x."""
        expr = parse("2 sin x")
        assert isinstance(expr, Apply)
        assert isinstance(expr.function, Apply)
        assert expr.argument == Ident("x")

    def test_number_after_operand_only_applies(self):
        """A number on the right of juxtaposition cannot multiply."""
        assert parse("f 2").only_apply
        assert not parse("2 x").only_apply

    def test_call_requires_adjacency(self):
        """f(x) is a call, f (x) is juxtaposition."""
        assert isinstance(parse("sin(x)"), ApplyFunctionCall)
        spaced = parse("sin (x)")
        assert isinstance(spaced, Apply)
        assert isinstance(spaced.argument, Parens)

    def test_conversion_lowest(self):
        """-> binds looser than arithmetic."""
        expr = parse("3 m + 2 cm -> mm")
        assert isinstance(expr, Convert)
        assert isinstance(expr.value, Add)


class TestParserForms:
    """Test assignments, lambdas and error reporting."""

    def test_assignment(self):
        """name = expr at the top level."""
        expr = parse("x = 5 kg")
        assert isinstance(expr, Assign)
        assert expr.name == "x"

    def test_invalid_assignment(self):
        """Only names can be assigned."""
        with pytest.raises(ParserError) as exc:
            parse("1 = 2")
        assert exc.value.code == "E103"

    def test_backslash_lambda(self):
        """\\x.body extends to the right."""
        expr = parse("\\x.x + 1")
        assert isinstance(expr, Fn)
        assert expr.param == "x"
        assert isinstance(expr.body, Add)

    def test_colon_lambda(self):
        """x: body is a lambda too."""
        expr = parse("f = x: x^2")
        assert isinstance(expr.value, Fn)
        assert isinstance(expr.value.body, Pow)

    def test_unclosed_paren(self):
        """Missing ')' at the end of input."""
        with pytest.raises(ParserError) as exc:
            parse("(1 + 2")
        assert exc.value.code == "E102"

    def test_trailing_operator(self):
        """An operator without an operand."""
        with pytest.raises(ParserError) as exc:
            parse("1 +")
        assert exc.value.code == "E102"

    def test_unexpected_token(self):
        """Extra input after a complete expression."""
        with pytest.raises(ParserError) as exc:
            parse("1 )")
        assert exc.value.code == "E101"

    def test_format_round_trip(self):
        """Expressions render back to surface syntax."""
        assert str(parse("sin(x) + 2")) == "sin(x) + 2"
        assert str(parse("\\x.x^2")) == "\\x.x^2"
        assert str(parse("1 m -> cm")) == "1 m -> cm"


class TestNumberLiterals:
    """Test conversion of literals to exact values."""

    def test_decimal_value(self):
        """1.5e-3 is exactly 3/2000."""
        number = number_from_literal(NumberLiteral("1", "5", -3))
        assert number.value.exact
        assert number.value.value == Complex.from_rational(BigRat.from_fraction(3, 2000))

    def test_prefixed_value_keeps_base(self):
        """A prefixed literal carries its display base."""
        expr = parse("0x1f")
        assert isinstance(expr, Num)
        assert expr.number.base.base == 16
        assert expr.number.base.prefix == "0x"

    def test_exponent_bound(self):
        """Huge decimal exponents are rejected."""
        with pytest.raises(NumericError) as exc:
            parse("1e2000000")
        assert exc.value.code == "E203"
