"""
Unit tests for the unsigned integer and exact rational layers.
"""

import mpmath
import pytest

from unitcalc.errors import LexerError, NumericError
from unitcalc.num.biguint import BigUint, USIZE_MAX
from unitcalc.num.bigrat import BigRat, MAX_EXPONENT
from unitcalc.num.exact import Exact, approx


def rat(n, d=1):
    return BigRat.from_fraction(n, d)


SAMPLE_RATIONALS = [
    (1, 1),
    (-3, 1),
    (5, 7),
    (-22, 6),
    (10 ** 30 + 1, 10 ** 20 + 7),
    (-123456789012345678901234567890, 97),
    (2 ** 64 - 1, 3 ** 40),
]


class TestBigUint:
    """Test arbitrary-precision unsigned integers."""

    def test_negative_rejected(self):
        """A BigUint cannot hold a negative value."""
        with pytest.raises(ValueError):
            BigUint(-1)

    def test_limbs_round_trip(self):
        """Little-endian limbs reconstruct the same value."""
        value = BigUint.from_limbs([1, 1])
        assert value.value == 2 ** 64 + 1
        assert value.limbs() == [1, 1]
        assert BigUint(0).limbs() == []

    def test_format_bases(self):
        """Digits render in any base up to 36."""
        assert BigUint(10).format(2) == "1010"
        assert BigUint(255).format(16) == "ff"
        assert BigUint(35).format(36) == "z"
        assert BigUint(0).format(10) == "0"

    def test_format_large_value(self):
        """Values spanning several word-sized chunks keep inner zeros."""
        text = "100000000000000000000000000000000000000001"
        assert BigUint(int(text)).format(10) == text

    def test_parse(self):
        """Parsing accepts digits of the base and skips separators."""
        assert BigUint.parse("ff", 16).value == 255
        assert BigUint.parse("1_000").value == 1000

    def test_parse_invalid_digit(self):
        """A digit outside the base is reported as E003."""
        with pytest.raises(LexerError) as exc:
            BigUint.parse("12", 2)
        assert exc.value.code == "E003"

    def test_subtraction_underflow(self):
        """Subtracting a larger value fails."""
        with pytest.raises(NumericError) as exc:
            BigUint(2).sub(BigUint(3))
        assert exc.value.code == "E205"

    def test_divide_by_zero(self):
        """divmod by zero fails with E201."""
        with pytest.raises(NumericError) as exc:
            BigUint(2).divmod(BigUint(0))
        assert exc.value.code == "E201"

    def test_pow_and_gcd(self):
        """Powers and gcd on plain values."""
        assert BigUint(3).pow(BigUint(4)).value == 81
        assert BigUint(0).pow(BigUint(0)).value == 1
        assert BigUint(48).gcd(BigUint(36)).value == 12

    def test_nth_root(self):
        """Integer roots report whether they are exact."""
        assert BigUint(27).nth_root(3) == (BigUint(3), True)
        assert BigUint(28).nth_root(3) == (BigUint(3), False)
        assert BigUint(10 ** 40).nth_root(2) == (BigUint(10 ** 20), True)

    def test_try_as_usize(self):
        """Narrowing fails above the 64-bit maximum."""
        assert BigUint(USIZE_MAX).try_as_usize() == USIZE_MAX
        with pytest.raises(NumericError) as exc:
            BigUint(USIZE_MAX + 1).try_as_usize()
        assert exc.value.code == "E202"


class TestBigRatNormalization:
    """Test the canonical form of rationals."""

    def test_lowest_terms(self):
        """Equal fractions have equal stored forms."""
        assert rat(2, 4) == rat(1, 2)
        assert rat(2, 4).num.value == 1
        assert rat(2, 4).den.value == 2

    def test_sign_on_numerator(self):
        """The sign is carried separately from a positive denominator."""
        assert rat(1, -2) == rat(-1, 2)
        assert rat(1, -2).negative

    def test_zero_is_not_negative(self):
        """Negative zero normalizes to zero."""
        assert not rat(0, -5).negative
        assert rat(0, -5) == rat(0)

    def test_zero_denominator(self):
        """A zero denominator is a division by zero."""
        with pytest.raises(NumericError) as exc:
            rat(1, 0)
        assert exc.value.code == "E201"

    def test_from_mpf_exact(self):
        """Binary floats convert exactly."""
        assert BigRat.from_mpf(mpmath.mpf(0.5)) == rat(1, 2)
        assert BigRat.from_mpf(mpmath.mpf(-3)) == rat(-3)

    @pytest.mark.parametrize("n,d", SAMPLE_RATIONALS + [(0, 5), (12, -18)])
    def test_normalizing_twice_changes_nothing(self, n, d):
        """Rebuilding a normalized value from its parts gives the same parts."""
        value = rat(n, d)
        again = BigRat(value.negative, value.num, value.den)
        assert again == value
        assert (again.negative, again.num, again.den) == (value.negative, value.num, value.den)
        assert again.den.value > 0


class TestBigRatArithmetic:
    """Test exact rational arithmetic."""

    def test_add_sub(self):
        """Addition and subtraction stay in lowest terms."""
        assert rat(1, 2).add(rat(1, 3)) == rat(5, 6)
        assert rat(1, 2).sub(rat(1, 2)) == rat(0)

    def test_mul_div(self):
        """Multiplication and division."""
        assert rat(2, 3).mul(rat(3, 4)) == rat(1, 2)
        assert rat(1, 2).div(rat(-1, 4)) == rat(-2)

    @pytest.mark.parametrize("a", SAMPLE_RATIONALS)
    @pytest.mark.parametrize("b", SAMPLE_RATIONALS)
    def test_divide_then_multiply_recovers_value(self, a, b):
        """(a / b) * b is exactly a for non-zero b."""
        lhs, rhs = rat(*a), rat(*b)
        assert lhs.div(rhs).mul(rhs) == lhs

    def test_ordering(self):
        """Comparison is numeric."""
        assert rat(1, 3) < rat(1, 2)
        assert rat(-1, 2) < rat(1, 3)
        assert rat(2, 4).compare(rat(1, 2)) == 0

    def test_pow(self):
        """Integer powers, including negative exponents."""
        assert rat(2, 3).pow(rat(2)) == rat(4, 9)
        assert rat(2, 3).pow(rat(-2)) == rat(9, 4)
        assert rat(-2).pow(rat(3)) == rat(-8)

    def test_zero_to_the_zero(self):
        """0^0 is undefined."""
        with pytest.raises(NumericError) as exc:
            rat(0).pow(rat(0))
        assert exc.value.code == "E204"

    def test_pow_requires_integer(self):
        """Fractional exponents belong to a higher layer."""
        with pytest.raises(NumericError) as exc:
            rat(2).pow(rat(1, 2))
        assert exc.value.code == "E208"

    def test_pow_exponent_bound(self):
        """Exponents beyond the bound are rejected before computing."""
        with pytest.raises(NumericError) as exc:
            rat(2).pow(rat(MAX_EXPONENT + 1))
        assert exc.value.code == "E203"

    def test_root(self):
        """Roots are exact only for perfect powers."""
        assert rat(4, 9).root(2) == (rat(2, 3), True)
        assert rat(2).root(2)[1] is False

    def test_try_as_usize(self):
        """Only non-negative integers narrow."""
        assert rat(7).try_as_usize() == 7
        with pytest.raises(NumericError) as exc:
            rat(1, 2).try_as_usize()
        assert exc.value.code == "E208"
        with pytest.raises(NumericError) as exc:
            rat(-1).try_as_usize()
        assert exc.value.code == "E209"


class TestBigRatFormatting:
    """Test rational rendering."""

    def test_fraction(self):
        """n/d form, integers without a denominator."""
        assert rat(-3, 4).format_fraction() == "-3/4"
        assert rat(6, 3).format_fraction() == "2"
        assert rat(1, 2).format_fraction(2) == "1/10"

    def test_terminating(self):
        """Termination depends on the base."""
        assert rat(1, 8).is_terminating()
        assert not rat(1, 3).is_terminating()
        assert rat(1, 3).is_terminating(3)

    def test_full_decimal(self):
        """A terminating value expands completely."""
        assert rat(1, 8).format_decimal(None) == ("0.125", True)
        assert rat(-5, 2).format_decimal(None) == ("-2.5", True)

    def test_rounding_half_away_from_zero(self):
        """Rounding at a fixed number of places."""
        assert rat(2, 3).format_decimal(3) == ("0.667", False)
        assert rat(1, 8).format_decimal(2) == ("0.13", False)
        assert rat(-1, 2).format_decimal(0) == ("-1", False)

    def test_trim(self):
        """Trailing zeros can be dropped."""
        assert rat(1, 2).format_decimal(4, trim=True) == ("0.5", True)
        assert rat(3).format_decimal(4, trim=True) == ("3", True)

    def test_scientific(self):
        """d.ddd...eN rendering."""
        assert rat(12345).format_scientific(3) == ("1.23e4", False)
        assert rat(1, 1000).format_scientific(3) == ("1e-3", True)
        assert rat(-25, 10).format_scientific(5) == ("-2.5e0", True)
        assert rat(0).format_scientific(3) == ("0", True)


class TestExact:
    """Test exactness tracking."""

    def test_map_keeps_flag(self):
        """map preserves exactness."""
        assert Exact(2).map(lambda v: v * 3) == Exact(6, True)
        assert approx(2).map(lambda v: v * 3) == Exact(6, False)

    def test_map2_conjunction(self):
        """Combining with an approximate value is approximate."""
        result = Exact(2).map2(approx(3), lambda a, b: a + b)
        assert result.value == 5
        assert not result.exact

    def test_then_uses_result_flag(self):
        """then folds in the exactness reported by the function."""
        result = Exact(2).then(lambda v: approx(v + 1))
        assert result == Exact(3, False)
        result = Exact(2).then2(Exact(3), lambda a, b: Exact(a * b))
        assert result == Exact(6, True)

    def test_make_approximate(self):
        """make_approximate clears the flag only."""
        assert Exact(1).make_approximate() == Exact(1, False)
