"""
Exact signed rationals over ``BigUint``.

A ``BigRat`` is always stored in lowest terms with a positive denominator and
a non-negative zero, so structurally equal values are mathematically equal
and vice versa (1/2 and 2/4 normalize to the same stored form).
"""

from dataclasses import dataclass
from functools import total_ordering
import math
from typing import Optional, Tuple

import mpmath

from ..errors import (
    error_divide_by_zero,
    error_exponent_too_large,
    error_negative_value,
    error_not_an_integer,
    error_zero_to_the_power_of_zero,
)
from ..interrupt import NEVER, Interrupt, check_interrupt
from .biguint import BigUint

# Largest exponent magnitude accepted by BigRat.pow
MAX_EXPONENT = 1_000_000

# Largest binary exponent accepted when converting an approximation back
MAX_FLOAT_EXPONENT = 1 << 20


@total_ordering
@dataclass(frozen=True)
class BigRat:
    """
    An immutable exact fraction.

    Construct with ``BigRat(negative, num, den)`` or the ``from_*`` helpers;
    the constructor reduces by the gcd and rejects a zero denominator.
    """
    negative: bool
    num: BigUint
    den: BigUint

    def __post_init__(self):
        if self.den.is_zero():
            raise error_divide_by_zero()
        g = math.gcd(self.num.value, self.den.value)
        if g != 1:
            object.__setattr__(self, "num", BigUint(self.num.value // g))
            object.__setattr__(self, "den", BigUint(self.den.value // g))
        if self.num.is_zero():
            object.__setattr__(self, "negative", False)

    # --- Construction ---

    @classmethod
    def from_int(cls, n: int) -> "BigRat":
        return cls(n < 0, BigUint(abs(n)), BigUint(1))

    @classmethod
    def from_fraction(cls, n: int, d: int) -> "BigRat":
        """Build ``n/d`` from signed host integers."""
        return cls((n < 0) != (d < 0), BigUint(abs(n)), BigUint(abs(d)))

    @classmethod
    def from_mpf(cls, x: mpmath.mpf) -> "BigRat":
        """Convert a finite binary float exactly."""
        if not mpmath.isfinite(x):
            raise ValueError(f"cannot convert non-finite value {x}")
        sign, man, exp, _ = x._mpf_
        man = int(man)
        if abs(exp) > MAX_FLOAT_EXPONENT:
            raise error_exponent_too_large()
        if exp >= 0:
            return cls(bool(sign), BigUint(man << exp), BigUint(1))
        return cls(bool(sign), BigUint(man), BigUint(1 << -exp))

    def to_mpf(self) -> mpmath.mpf:
        """Approximate at the current mpmath working precision."""
        value = mpmath.mpf(self.num.value) / self.den.value
        return -value if self.negative else value

    def signed_parts(self) -> Tuple[int, int]:
        """Return (signed numerator, denominator) as host integers."""
        n = self.num.value
        return (-n if self.negative else n), self.den.value

    # --- Predicates ---

    def is_zero(self) -> bool:
        return self.num.is_zero()

    def is_integer(self) -> bool:
        return self.den.value == 1

    def is_negative(self) -> bool:
        return self.negative

    def is_one(self) -> bool:
        return not self.negative and self.num.value == 1 and self.den.value == 1

    # --- Comparison ---

    def compare(self, other: "BigRat") -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        a, b = self.signed_parts()
        c, d = other.signed_parts()
        lhs, rhs = a * d, c * b
        return (lhs > rhs) - (lhs < rhs)

    def __lt__(self, other: "BigRat") -> bool:
        if not isinstance(other, BigRat):
            return NotImplemented
        return self.compare(other) < 0

    # --- Arithmetic ---

    def neg(self) -> "BigRat":
        return BigRat(not self.negative, self.num, self.den)

    def abs(self) -> "BigRat":
        return BigRat(False, self.num, self.den)

    def add(self, other: "BigRat") -> "BigRat":
        a, b = self.signed_parts()
        c, d = other.signed_parts()
        return BigRat.from_fraction(a * d + c * b, b * d)

    def sub(self, other: "BigRat") -> "BigRat":
        return self.add(other.neg())

    def mul(self, other: "BigRat") -> "BigRat":
        return BigRat(
            self.negative != other.negative,
            self.num.mul(other.num),
            self.den.mul(other.den),
        )

    def div(self, other: "BigRat") -> "BigRat":
        if other.is_zero():
            raise error_divide_by_zero()
        return BigRat(
            self.negative != other.negative,
            self.num.mul(other.den),
            self.den.mul(other.num),
        )

    def reciprocal(self) -> "BigRat":
        return BigRat.from_int(1).div(self)

    def pow(self, exponent: "BigRat", interrupt: Interrupt = NEVER) -> "BigRat":
        """Raise to an integer power."""
        if not exponent.is_integer():
            raise error_not_an_integer("Exponent")
        if self.is_zero() and exponent.is_zero():
            raise error_zero_to_the_power_of_zero()
        if exponent.num.value > MAX_EXPONENT:
            raise error_exponent_too_large()
        num = self.num.pow(exponent.num, interrupt)
        den = self.den.pow(exponent.num, interrupt)
        negative = self.negative and not exponent.num.is_even()
        if exponent.negative:
            if num.is_zero():
                raise error_divide_by_zero()
            return BigRat(negative, den, num)
        return BigRat(negative, num, den)

    def root(self, n: int, interrupt: Interrupt = NEVER) -> Tuple["BigRat", bool]:
        """
        n-th root of a non-negative value.

        Returns (root, exact); when the numerator and denominator are not both
        perfect n-th powers the root is truncated and ``exact`` is False.
        """
        if self.negative:
            raise error_negative_value("Radicand")
        num, num_exact = self.num.nth_root(n, interrupt)
        den, den_exact = self.den.nth_root(n, interrupt)
        if num_exact and den_exact:
            return BigRat(False, num, den), True
        return self, False

    def floor(self) -> int:
        n, d = self.signed_parts()
        return n // d

    def try_as_usize(self, interrupt: Interrupt = NEVER) -> int:
        """Narrow a non-negative integral value to a 64-bit host integer."""
        if not self.is_integer():
            raise error_not_an_integer()
        if self.negative:
            raise error_negative_value()
        return self.num.try_as_usize(interrupt)

    # --- Formatting ---

    def is_terminating(self, base: int = 10) -> bool:
        """Whether the expansion in ``base`` has finitely many digits."""
        den = self.den.value
        g = math.gcd(den, base)
        while g != 1:
            while den % g == 0:
                den //= g
            g = math.gcd(den, base)
        return den == 1

    def format_fraction(self, base: int = 10, interrupt: Interrupt = NEVER) -> str:
        """Render as ``n/d`` (or just ``n`` for integers)."""
        text = self.num.format(base, interrupt)
        if not self.is_integer():
            text = f"{text}/{self.den.format(base, interrupt)}"
        return f"-{text}" if self.negative else text

    def terminating_places(self, base: int = 10, interrupt: Interrupt = NEVER) -> int:
        """Number of digits after the point of a terminating expansion."""
        if not self.is_terminating(base):
            raise ValueError("expansion does not terminate")
        places = 0
        scale = 1
        while scale % self.den.value:
            check_interrupt(interrupt)
            scale *= base
            places += 1
        return places

    def format_decimal(
        self,
        places: Optional[int],
        base: int = 10,
        trim: bool = False,
        interrupt: Interrupt = NEVER,
    ) -> Tuple[str, bool]:
        """
        Render with ``places`` digits after the point, rounding half away from zero.

        ``places=None`` expands a terminating value completely. With ``trim``
        trailing zeros are dropped. Returns the text and whether it
        represents the value exactly.
        """
        if places is None:
            places = self.terminating_places(base, interrupt)
        scale = base ** places
        rounded, rem = divmod(self.num.value * scale, self.den.value)
        if 2 * rem >= self.den.value:
            rounded += 1
        int_part, frac_part = divmod(rounded, scale)
        text = BigUint(int_part).format(base, interrupt)
        if places:
            frac = BigUint(frac_part).format(base, interrupt).rjust(places, "0")
            if trim:
                frac = frac.rstrip("0")
            if frac:
                text = f"{text}.{frac}"
        if self.negative and rounded:
            text = f"-{text}"
        return text, rem == 0

    def format_scientific(
        self,
        significant: int,
        interrupt: Interrupt = NEVER,
    ) -> Tuple[str, bool]:
        """Render as ``d.ddd…eN`` in base 10 with ``significant`` digits."""
        if self.is_zero():
            return "0", True
        n, d = self.num.value, self.den.value
        # exponent such that 10**exp <= n/d < 10**(exp+1)
        exp = len(BigUint(n).format(10, interrupt)) - len(BigUint(d).format(10, interrupt))
        if exp >= 0:
            scaled_n, scaled_d = n, d * 10 ** exp
        else:
            scaled_n, scaled_d = n * 10 ** -exp, d
        if scaled_n < scaled_d:
            exp -= 1
            scaled_n *= 10
        mantissa = BigRat(False, BigUint(scaled_n), BigUint(scaled_d))
        text, exact = mantissa.format_decimal(significant - 1, trim=True, interrupt=interrupt)
        if text.startswith("10"):
            # rounding carried into a new digit
            exp += 1
            text = "1"
        if self.negative:
            text = f"-{text}"
        return f"{text}e{exp}", exact

    def __str__(self) -> str:
        return self.format_fraction()


ZERO = BigRat.from_int(0)
ONE = BigRat.from_int(1)
