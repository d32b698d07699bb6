"""
Real numbers: exact rationals, optionally multiplied by a named constant.

A ``Real`` is ``coefficient * constant`` where the constant is either absent
(a plain rational) or one of a small fixed set of symbols (currently π).
Terms with the same constant combine exactly; anything else falls back to a
numeric approximation at the mpmath working precision and is flagged inexact
through ``Exact``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import mpmath

from ..errors import (
    error_divide_by_zero,
    error_domain,
    error_not_an_integer,
    error_not_exact,
    error_zero_to_the_power_of_zero,
)
from ..interrupt import NEVER, Interrupt, check_interrupt
from . import series
from .base import DECIMAL, Base
from .bigrat import BigRat, ONE as RAT_ONE, ZERO as RAT_ZERO
from .exact import Exact, approx
from .formatting_style import FormattingStyle, StyleKind


PI = "pi"

CONSTANT_SYMBOLS = {
    PI: "π",
}

# Rational exponents p/q with q above this are approximated instead of
# attempting an exact integer root
MAX_ROOT_DEGREE = 1000


def _constant_value(constant: str) -> mpmath.mpf:
    if constant == PI:
        return +mpmath.pi
    raise ValueError(f"unknown constant {constant!r}")


@dataclass(frozen=True)
class Real:
    coefficient: BigRat
    constant: Optional[str] = None

    def __post_init__(self):
        if self.constant is not None and self.constant not in CONSTANT_SYMBOLS:
            raise ValueError(f"unknown constant {self.constant!r}")
        if self.coefficient.is_zero():
            object.__setattr__(self, "constant", None)

    # --- Construction ---

    @classmethod
    def from_int(cls, n: int) -> "Real":
        return cls(BigRat.from_int(n))

    @classmethod
    def from_fraction(cls, n: int, d: int) -> "Real":
        return cls(BigRat.from_fraction(n, d))

    @classmethod
    def pi(cls, coefficient: BigRat = RAT_ONE) -> "Real":
        return cls(coefficient, PI)

    @classmethod
    def from_mpf(cls, x: mpmath.mpf) -> "Real":
        return cls(BigRat.from_mpf(x))

    def to_mpf(self) -> mpmath.mpf:
        value = self.coefficient.to_mpf()
        if self.constant is not None:
            value *= _constant_value(self.constant)
        return value

    # --- Predicates ---

    def is_zero(self) -> bool:
        return self.coefficient.is_zero()

    def is_negative(self) -> bool:
        # every supported constant is positive
        return self.coefficient.is_negative()

    def is_rational(self) -> bool:
        return self.constant is None

    def is_integer(self) -> bool:
        return self.constant is None and self.coefficient.is_integer()

    def is_one(self) -> bool:
        return self.constant is None and self.coefficient.is_one()

    def compare(self, other: "Real") -> int:
        if self.constant == other.constant:
            return self.coefficient.compare(other.coefficient)
        a, b = self.to_mpf(), other.to_mpf()
        return (a > b) - (a < b)

    def try_as_usize(self, interrupt: Interrupt = NEVER) -> int:
        if self.constant is not None:
            raise error_not_an_integer()
        return self.coefficient.try_as_usize(interrupt)

    # --- Arithmetic ---

    def neg(self) -> "Real":
        return Real(self.coefficient.neg(), self.constant)

    def abs(self) -> "Real":
        return Real(self.coefficient.abs(), self.constant)

    def add(self, other: "Real") -> Exact["Real"]:
        if other.is_zero():
            return Exact(self)
        if self.is_zero():
            return Exact(other)
        if self.constant == other.constant:
            return Exact(Real(self.coefficient.add(other.coefficient), self.constant))
        return approx(Real.from_mpf(self.to_mpf() + other.to_mpf()))

    def sub(self, other: "Real") -> Exact["Real"]:
        return self.add(other.neg())

    def mul(self, other: "Real") -> Exact["Real"]:
        coefficient = self.coefficient.mul(other.coefficient)
        if other.constant is None:
            return Exact(Real(coefficient, self.constant))
        if self.constant is None:
            return Exact(Real(coefficient, other.constant))
        if coefficient.is_zero():
            return Exact(Real(RAT_ZERO))
        return approx(Real.from_mpf(self.to_mpf() * other.to_mpf()))

    def div(self, other: "Real") -> Exact["Real"]:
        if other.is_zero():
            raise error_divide_by_zero()
        coefficient = self.coefficient.div(other.coefficient)
        if other.constant is None:
            return Exact(Real(coefficient, self.constant))
        if self.constant == other.constant:
            return Exact(Real(coefficient))
        if self.is_zero():
            return Exact(self)
        return approx(Real.from_mpf(self.to_mpf() / other.to_mpf()))

    def pow(self, exponent: "Real", interrupt: Interrupt = NEVER) -> Exact["Real"]:
        """
        Raise to a real power.

        Integer powers of rationals and rational powers whose root is a
        perfect power stay exact. A negative base is only accepted with an
        integer exponent; the complex layer handles the other cases.
        """
        if exponent.is_zero():
            if self.is_zero():
                raise error_zero_to_the_power_of_zero()
            return Exact(Real(RAT_ONE))
        if self.is_zero():
            if exponent.is_negative():
                raise error_divide_by_zero()
            return Exact(self)
        if exponent.is_one():
            return Exact(self)
        if exponent.is_integer():
            if self.constant is None:
                return Exact(Real(self.coefficient.pow(exponent.coefficient, interrupt)))
            check_interrupt(interrupt)
            n = exponent.coefficient.floor()
            return approx(Real.from_mpf(mpmath.power(self.to_mpf(), n)))
        if self.is_negative():
            raise error_domain("pow", "a negative base requires an integer exponent")
        if exponent.constant is None and self.constant is None:
            p, q = exponent.coefficient.signed_parts()
            if q <= MAX_ROOT_DEGREE:
                root, exact = self.coefficient.root(q, interrupt)
                if exact:
                    return Exact(Real(root.pow(BigRat.from_int(p), interrupt)))
        log = series.ln(self.to_mpf(), interrupt)
        return approx(Real.from_mpf(series.exp(exponent.to_mpf() * log, interrupt)))

    # --- Formatting ---

    def format(
        self,
        style: FormattingStyle,
        exact: bool,
        base: Base = DECIMAL,
        auto_places: int = 10,
        interrupt: Interrupt = NEVER,
    ) -> Tuple[str, bool]:
        """
        Render this value.

        Returns the text and whether the text denotes the value exactly; the
        caller decides how to mark approximate output.
        """
        if style.kind == StyleKind.EXACT_FRACTION and not exact:
            raise error_not_exact()
        symbolic = exact and style.kind in (StyleKind.AUTO, StyleKind.EXACT_FRACTION)
        if self.constant is not None and symbolic:
            return self._format_symbolic(base, interrupt), True
        value = self.coefficient
        if self.constant is not None:
            value = BigRat.from_mpf(self.to_mpf())
            exact = False
        if style.kind == StyleKind.EXACT_FRACTION:
            return value.format_fraction(base.base, interrupt), exact
        if style.kind == StyleKind.DECIMAL_PLACES:
            text, represented = value.format_decimal(style.places, base.base, interrupt=interrupt)
            return text, exact and represented
        if style.kind == StyleKind.SCIENTIFIC:
            text, represented = value.format_scientific(auto_places, interrupt)
            return text, exact and represented
        if exact:
            if value.is_terminating(base.base):
                text, _ = value.format_decimal(None, base.base, interrupt=interrupt)
                return text, True
            return value.format_fraction(base.base, interrupt), True
        text, _ = value.format_decimal(auto_places, base.base, trim=True, interrupt=interrupt)
        return text, False

    def _format_symbolic(self, base: Base, interrupt: Interrupt) -> str:
        symbol = CONSTANT_SYMBOLS[self.constant]
        coefficient = self.coefficient
        num = coefficient.num.format(base.base, interrupt)
        text = symbol if num == "1" else f"{num}{symbol}"
        if not coefficient.is_integer():
            text = f"{text}/{coefficient.den.format(base.base, interrupt)}"
        return f"-{text}" if coefficient.is_negative() else text

    def __str__(self) -> str:
        text, _ = self.format(FormattingStyle(), True)
        return text


ZERO = Real(RAT_ZERO)
ONE = Real(RAT_ONE)
