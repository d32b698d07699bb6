"""
Complex numbers over ``Real`` and the transcendental function library.

Arithmetic follows the usual component formulas on the ``Real`` layer, so
exact inputs give exact outputs wherever the real parts allow it. The
transcendental functions first look for a recognized closed form (sin(0),
cos(π/3), log2(8), ...), which stays exact; otherwise they evaluate the polled
series kernels from ``series`` on an mpmath approximation and mark the result
inexact.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import mpmath

from ..errors import (
    error_divide_by_zero,
    error_domain,
    error_exponent_too_large,
    error_zero_to_the_power_of_zero,
)
from ..interrupt import NEVER, Interrupt, check_interrupt
from . import series
from .base import DECIMAL, Base
from .bigrat import BigRat, MAX_EXPONENT
from .exact import Exact, approx
from .formatting_style import FormattingStyle
from .real import ONE as REAL_ONE, ZERO as REAL_ZERO, Real


def _rat(n: int, d: int = 1) -> BigRat:
    return BigRat.from_fraction(n, d)


@dataclass(frozen=True)
class Complex:
    re: Real
    im: Real = REAL_ZERO

    # --- Construction ---

    @classmethod
    def from_int(cls, n: int) -> "Complex":
        return cls(Real.from_int(n))

    @classmethod
    def from_rational(cls, value: BigRat) -> "Complex":
        return cls(Real(value))

    @classmethod
    def i(cls) -> "Complex":
        return cls(REAL_ZERO, REAL_ONE)

    @classmethod
    def from_mpc(cls, z: mpmath.mpc) -> "Complex":
        z = mpmath.mpmathify(z)
        if isinstance(z, mpmath.mpf):
            return cls(Real.from_mpf(z))
        return cls(Real.from_mpf(z.real), Real.from_mpf(z.imag))

    def to_mpc(self) -> mpmath.mpc:
        return mpmath.mpc(self.re.to_mpf(), self.im.to_mpf())

    # --- Predicates ---

    def is_real(self) -> bool:
        return self.im.is_zero()

    def is_zero(self) -> bool:
        return self.re.is_zero() and self.im.is_zero()

    def try_as_usize(self, interrupt: Interrupt = NEVER) -> int:
        if not self.is_real():
            raise error_domain("integer conversion", "value is not real")
        return self.re.try_as_usize(interrupt)

    # --- Arithmetic ---

    def neg(self) -> "Complex":
        return Complex(self.re.neg(), self.im.neg())

    def add(self, other: "Complex") -> Exact["Complex"]:
        re = self.re.add(other.re)
        im = self.im.add(other.im)
        return re.map2(im, Complex)

    def sub(self, other: "Complex") -> Exact["Complex"]:
        return self.add(other.neg())

    def mul(self, other: "Complex") -> Exact["Complex"]:
        if self.is_real() and other.is_real():
            return self.re.mul(other.re).map(Complex)
        a, b, c, d = self.re, self.im, other.re, other.im
        re = a.mul(c).then2(b.mul(d), Real.sub)
        im = a.mul(d).then2(b.mul(c), Real.add)
        return re.map2(im, Complex)

    def div(self, other: "Complex") -> Exact["Complex"]:
        if other.is_zero():
            raise error_divide_by_zero()
        if other.is_real():
            re = self.re.div(other.re)
            im = self.im.div(other.re)
            return re.map2(im, Complex)
        a, b, c, d = self.re, self.im, other.re, other.im
        denom = c.mul(c).then2(d.mul(d), Real.add)
        re = a.mul(c).then2(b.mul(d), Real.add).then2(denom, Real.div)
        im = b.mul(c).then2(a.mul(d), Real.sub).then2(denom, Real.div)
        return re.map2(im, Complex)

    def abs(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        if self.is_real():
            return Exact(Complex(self.re.abs()))
        squared = self.re.mul(self.re).then2(self.im.mul(self.im), Real.add)
        half = Real(_rat(1, 2))
        return squared.then(lambda s: s.pow(half, interrupt)).map(Complex)

    def pow(self, other: "Complex", interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        if other.is_zero():
            if self.is_zero():
                raise error_zero_to_the_power_of_zero()
            return Exact(Complex(REAL_ONE))
        if other.is_real() and other.re.is_rational():
            exponent = other.re.coefficient
            if self.is_real():
                if not self.re.is_negative() or exponent.is_integer():
                    return self.re.pow(other.re, interrupt).map(Complex)
                p, q = exponent.signed_parts()
                if q == 2:
                    # (-x)^(p/2) = x^(p/2) * i^p
                    magnitude = self.re.neg().pow(other.re, interrupt)
                    return magnitude.map(lambda m: _times_i_power(m, p))
            elif exponent.is_integer():
                return self._integer_pow(exponent, interrupt)
        if self.is_zero():
            if other.re.is_negative() or other.re.is_zero():
                raise error_divide_by_zero()
            return Exact(self)
        z = self.to_mpc()
        w = other.to_mpc()
        return approx(Complex.from_mpc(_c_exp(w * _c_ln(z, interrupt), interrupt)))

    def _integer_pow(self, exponent: BigRat, interrupt: Interrupt) -> Exact["Complex"]:
        n = exponent.num.value
        if n > MAX_EXPONENT:
            raise error_exponent_too_large()
        result = Exact(Complex(REAL_ONE))
        base = Exact(self)
        while n:
            check_interrupt(interrupt)
            if n & 1:
                result = result.then2(base, Complex.mul)
            n >>= 1
            if n:
                base = base.then2(base, Complex.mul)
        if exponent.is_negative():
            return Exact(Complex(REAL_ONE)).then2(result, Complex.div)
        return result

    # --- Transcendental functions ---

    def _closed_form(self, table: Callable[[Real], Optional[Real]]) -> Optional[Exact["Complex"]]:
        if not self.is_real():
            return None
        result = table(self.re)
        if result is None:
            return None
        return Exact(Complex(result))

    def exp(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        if self.is_zero():
            return Exact(Complex(REAL_ONE))
        return approx(Complex.from_mpc(_c_exp(self.to_mpc(), interrupt)))

    def sin(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_sin_table)
        if closed is not None:
            return closed
        if self.is_real():
            return _approx_real(series.sin(self.re.to_mpf(), interrupt))
        return approx(Complex.from_mpc(_c_sin(self.to_mpc(), interrupt)))

    def cos(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_cos_table)
        if closed is not None:
            return closed
        if self.is_real():
            return _approx_real(series.cos(self.re.to_mpf(), interrupt))
        return approx(Complex.from_mpc(_c_cos(self.to_mpc(), interrupt)))

    def tan(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_tan_table)
        if closed is not None:
            return closed
        if self.is_real():
            x = self.re.to_mpf()
            return _approx_real(series.sin(x, interrupt) / series.cos(x, interrupt))
        z = self.to_mpc()
        return approx(Complex.from_mpc(_c_sin(z, interrupt) / _c_cos(z, interrupt)))

    def asin(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_asin_table)
        if closed is not None:
            return closed
        if self.is_real() and abs(self.re.to_mpf()) <= 1:
            x = self.re.to_mpf()
            return _approx_real(series.atan2(x, mpmath.sqrt(1 - x * x), interrupt))
        return approx(Complex.from_mpc(_c_asin(self.to_mpc(), interrupt)))

    def acos(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_acos_table)
        if closed is not None:
            return closed
        if self.is_real() and abs(self.re.to_mpf()) <= 1:
            x = self.re.to_mpf()
            return _approx_real(series.atan2(mpmath.sqrt(1 - x * x), x, interrupt))
        z = self.to_mpc()
        return approx(Complex.from_mpc(mpmath.pi / 2 - _c_asin(z, interrupt)))

    def atan(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_atan_table)
        if closed is not None:
            return closed
        if self.is_real():
            return _approx_real(series.atan(self.re.to_mpf(), interrupt))
        z = self.to_mpc()
        if z == 1j or z == -1j:
            raise error_domain("atan", "undefined at ±i")
        iz = mpmath.mpc(0, 1) * z
        result = mpmath.mpc(0, 0.5) * (_c_ln(1 - iz, interrupt) - _c_ln(1 + iz, interrupt))
        return approx(Complex.from_mpc(result))

    def sinh(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_zero_at_zero)
        if closed is not None:
            return closed
        z = self.to_mpc()
        return approx(Complex.from_mpc(_c_sinh(z, interrupt)))

    def cosh(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        if self.is_zero():
            return Exact(Complex(REAL_ONE))
        z = self.to_mpc()
        return approx(Complex.from_mpc(_c_cosh(z, interrupt)))

    def tanh(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_zero_at_zero)
        if closed is not None:
            return closed
        z = self.to_mpc()
        return approx(Complex.from_mpc(_c_sinh(z, interrupt) / _c_cosh(z, interrupt)))

    def asinh(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_zero_at_zero)
        if closed is not None:
            return closed
        if self.is_real():
            x = self.re.to_mpf()
            magnitude = series.ln(abs(x) + mpmath.sqrt(x * x + 1), interrupt)
            return _approx_real(magnitude if x > 0 else -magnitude)
        z = self.to_mpc()
        return approx(Complex.from_mpc(_c_ln(z + mpmath.sqrt(z * z + 1), interrupt)))

    def acosh(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        if self.is_real() and self.re.is_one():
            return Exact(Complex(REAL_ZERO))
        if self.is_real() and self.re.to_mpf() >= 1:
            x = self.re.to_mpf()
            return _approx_real(series.ln(x + mpmath.sqrt(x * x - 1), interrupt))
        z = self.to_mpc()
        inner = z + mpmath.sqrt(z + 1) * mpmath.sqrt(z - 1)
        return approx(Complex.from_mpc(_c_ln(inner, interrupt)))

    def atanh(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(_zero_at_zero)
        if closed is not None:
            return closed
        z = self.to_mpc()
        if z == 1 or z == -1:
            raise error_domain("atanh", "undefined at ±1")
        if self.is_real() and abs(self.re.to_mpf()) < 1:
            x = self.re.to_mpf()
            return _approx_real((series.ln(1 + x, interrupt) - series.ln(1 - x, interrupt)) / 2)
        result = (_c_ln(1 + z, interrupt) - _c_ln(1 - z, interrupt)) / 2
        return approx(Complex.from_mpc(result))

    def ln(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        if self.is_real() and self.re.is_one():
            return Exact(Complex(REAL_ZERO))
        return self._log(interrupt)

    def log2(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(lambda r: _log_table(r, 2))
        if closed is not None:
            return closed
        return self._log(interrupt, 2)

    def log10(self, interrupt: Interrupt = NEVER) -> Exact["Complex"]:
        closed = self._closed_form(lambda r: _log_table(r, 10))
        if closed is not None:
            return closed
        return self._log(interrupt, 10)

    def _log(self, interrupt: Interrupt, base: int = None) -> Exact["Complex"]:
        if self.is_zero():
            raise error_domain("ln", "the logarithm of zero is undefined")
        if self.is_real() and not self.re.is_negative():
            result = series.ln(self.re.to_mpf(), interrupt)
            if base is not None:
                result /= series.ln(mpmath.mpf(base), interrupt)
            return _approx_real(result)
        result = _c_ln(self.to_mpc(), interrupt)
        if base is not None:
            result /= series.ln(mpmath.mpf(base), interrupt)
        return approx(Complex.from_mpc(result))

    # --- Formatting ---

    def format(
        self,
        style: FormattingStyle,
        exact: bool,
        base: Base = DECIMAL,
        auto_places: int = 10,
        interrupt: Interrupt = NEVER,
    ) -> Tuple[str, bool]:
        """Render as ``a``, ``bi`` or ``a + bi``; returns (text, represented exactly)."""
        if self.is_real():
            return self.re.format(style, exact, base, auto_places, interrupt)
        im_text, im_exact = self.im.abs().format(style, exact, base, auto_places, interrupt)
        if im_text == "1":
            im_text = ""
        im_text = f"{im_text}i"
        if self.re.is_zero():
            sign = "-" if self.im.is_negative() else ""
            return f"{sign}{im_text}", im_exact
        re_text, re_exact = self.re.format(style, exact, base, auto_places, interrupt)
        sign = "-" if self.im.is_negative() else "+"
        return f"{re_text} {sign} {im_text}", re_exact and im_exact

    def __str__(self) -> str:
        text, _ = self.format(FormattingStyle(), True)
        return text


ZERO = Complex(REAL_ZERO)
ONE = Complex(REAL_ONE)


def _approx_real(x: mpmath.mpf) -> Exact[Complex]:
    return approx(Complex(Real.from_mpf(x)))


def _times_i_power(magnitude: Real, p: int) -> Complex:
    quadrant = p % 4
    if quadrant == 0:
        return Complex(magnitude)
    if quadrant == 1:
        return Complex(REAL_ZERO, magnitude)
    if quadrant == 2:
        return Complex(magnitude.neg())
    return Complex(REAL_ZERO, magnitude.neg())


# --- Closed forms ---

def _pi_multiple(r: Real, modulus: int) -> Optional[BigRat]:
    """Return c mod ``modulus`` when ``r`` is exactly c·π (or zero)."""
    if r.is_zero():
        return BigRat.from_int(0)
    if r.constant is None:
        return None
    c = r.coefficient
    m = BigRat.from_int(modulus)
    return c.sub(m.mul(BigRat.from_int(c.div(m).floor())))


_SIN_VALUES = {
    _rat(0): _rat(0),
    _rat(1): _rat(0),
    _rat(1, 2): _rat(1),
    _rat(3, 2): _rat(-1),
    _rat(1, 6): _rat(1, 2),
    _rat(5, 6): _rat(1, 2),
    _rat(7, 6): _rat(-1, 2),
    _rat(11, 6): _rat(-1, 2),
}

_TAN_VALUES = {
    _rat(0): _rat(0),
    _rat(1, 4): _rat(1),
    _rat(3, 4): _rat(-1),
}


def _sin_table(r: Real) -> Optional[Real]:
    c = _pi_multiple(r, 2)
    if c is None or c not in _SIN_VALUES:
        return None
    return Real(_SIN_VALUES[c])


def _cos_table(r: Real) -> Optional[Real]:
    if r.constant is None and not r.is_zero():
        return None
    # cos(x) = sin(x + π/2)
    shifted = r.add(Real.pi(_rat(1, 2))).value
    return _sin_table(shifted)


def _tan_table(r: Real) -> Optional[Real]:
    c = _pi_multiple(r, 1)
    if c is None:
        return None
    if c == _rat(1, 2):
        raise error_domain("tan", "undefined at odd multiples of π/2")
    if c not in _TAN_VALUES:
        return None
    return Real(_TAN_VALUES[c])


def _asin_table(r: Real) -> Optional[Real]:
    if r.constant is not None:
        return None
    values = {
        _rat(0): Real.from_int(0),
        _rat(1): Real.pi(_rat(1, 2)),
        _rat(-1): Real.pi(_rat(-1, 2)),
        _rat(1, 2): Real.pi(_rat(1, 6)),
        _rat(-1, 2): Real.pi(_rat(-1, 6)),
    }
    return values.get(r.coefficient)


def _acos_table(r: Real) -> Optional[Real]:
    if r.constant is not None:
        return None
    values = {
        _rat(1): Real.from_int(0),
        _rat(0): Real.pi(_rat(1, 2)),
        _rat(-1): Real.pi(),
        _rat(1, 2): Real.pi(_rat(1, 3)),
        _rat(-1, 2): Real.pi(_rat(2, 3)),
    }
    return values.get(r.coefficient)


def _atan_table(r: Real) -> Optional[Real]:
    if r.constant is not None:
        return None
    values = {
        _rat(0): Real.from_int(0),
        _rat(1): Real.pi(_rat(1, 4)),
        _rat(-1): Real.pi(_rat(-1, 4)),
    }
    return values.get(r.coefficient)


def _zero_at_zero(r: Real) -> Optional[Real]:
    return r if r.is_zero() else None


def _log_table(r: Real, base: int) -> Optional[Real]:
    """log_base(r) when r is an exact integer power of ``base``."""
    if r.constant is not None or r.is_negative() or r.is_zero():
        return None
    c = r.coefficient
    if c.den.value == 1:
        value, sign = c.num.value, 1
    elif c.num.value == 1:
        value, sign = c.den.value, -1
    else:
        return None
    k = 0
    while value % base == 0:
        value //= base
        k += 1
    if value != 1:
        return None
    return Real.from_int(sign * k)


# --- Complex kernels on mpmath values ---

def _c_exp(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    z = mpmath.mpc(z)
    magnitude = series.exp(z.real, interrupt)
    if z.imag == 0:
        return mpmath.mpc(magnitude, 0)
    return mpmath.mpc(
        magnitude * series.cos(z.imag, interrupt),
        magnitude * series.sin(z.imag, interrupt),
    )


def _c_ln(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    z = mpmath.mpc(z)
    if z == 0:
        raise error_domain("ln", "the logarithm of zero is undefined")
    modulus = mpmath.hypot(z.real, z.imag)
    return mpmath.mpc(series.ln(modulus, interrupt), series.atan2(z.imag, z.real, interrupt))


def _cosh_sinh(x: mpmath.mpf, interrupt: Interrupt) -> Tuple[mpmath.mpf, mpmath.mpf]:
    e_pos = series.exp(x, interrupt)
    e_neg = 1 / e_pos
    return (e_pos + e_neg) / 2, (e_pos - e_neg) / 2


def _c_sin(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    z = mpmath.mpc(z)
    cosh_b, sinh_b = _cosh_sinh(z.imag, interrupt)
    return mpmath.mpc(
        series.sin(z.real, interrupt) * cosh_b,
        series.cos(z.real, interrupt) * sinh_b,
    )


def _c_cos(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    z = mpmath.mpc(z)
    cosh_b, sinh_b = _cosh_sinh(z.imag, interrupt)
    return mpmath.mpc(
        series.cos(z.real, interrupt) * cosh_b,
        -series.sin(z.real, interrupt) * sinh_b,
    )


def _c_sinh(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    e_pos = _c_exp(z, interrupt)
    return (e_pos - 1 / e_pos) / 2


def _c_cosh(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    e_pos = _c_exp(z, interrupt)
    return (e_pos + 1 / e_pos) / 2


def _c_asin(z: mpmath.mpc, interrupt: Interrupt) -> mpmath.mpc:
    # asin(z) = -i ln(iz + sqrt(1 - z^2))
    i = mpmath.mpc(0, 1)
    return -i * _c_ln(i * z + mpmath.sqrt(1 - z * z), interrupt)
