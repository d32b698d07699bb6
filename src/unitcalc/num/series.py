"""
Iterative real transcendental kernels.

Each kernel refines a power series at the current mpmath working precision
(plus a few guard bits) and polls the interrupt on every term, so a long
computation can always be cancelled. Only bounded-time mpmath primitives
(field arithmetic, ``sqrt``, the ``pi``/``ln2`` constants) are used directly.
"""

import mpmath

from ..interrupt import Interrupt, check_interrupt


GUARD_BITS = 16


def _epsilon() -> mpmath.mpf:
    return mpmath.ldexp(mpmath.mpf(1), -(mpmath.mp.prec + 4))


def exp(x: mpmath.mpf, interrupt: Interrupt) -> mpmath.mpf:
    """e**x by argument halving, Taylor series and repeated squaring."""
    x = mpmath.mpf(x)
    if x == 0:
        return mpmath.mpf(1)
    # squaring doubles the relative error, so carry one guard bit per halving
    halvings = max(0, int(mpmath.mag(x)) + 1)
    with mpmath.extraprec(GUARD_BITS + halvings):
        x = mpmath.ldexp(x, -halvings)
        eps = _epsilon()
        total = mpmath.mpf(1)
        term = mpmath.mpf(1)
        k = 0
        while abs(term) > eps:
            check_interrupt(interrupt)
            k += 1
            term = term * x / k
            total += term
        for _ in range(halvings):
            check_interrupt(interrupt)
            total *= total
    return +total


def ln(x: mpmath.mpf, interrupt: Interrupt) -> mpmath.mpf:
    """Natural logarithm of a positive value via the atanh series."""
    if x <= 0:
        raise ValueError("ln requires a positive argument")
    with mpmath.extraprec(GUARD_BITS):
        mantissa, exponent = mpmath.frexp(mpmath.mpf(x))
        z = (mantissa - 1) / (mantissa + 1)
        z2 = z * z
        eps = _epsilon()
        total = mpmath.mpf(0)
        power = z
        k = 0
        while True:
            check_interrupt(interrupt)
            term = power / (2 * k + 1)
            total += term
            if abs(term) <= eps:
                break
            power *= z2
            k += 1
        result = 2 * total + exponent * mpmath.ln2
    return +result


def _reduce_angle(x: mpmath.mpf) -> mpmath.mpf:
    two_pi = 2 * mpmath.pi
    x = x - two_pi * mpmath.floor(x / two_pi)
    if x > mpmath.pi:
        x -= two_pi
    return x


def sin(x: mpmath.mpf, interrupt: Interrupt) -> mpmath.mpf:
    with mpmath.extraprec(GUARD_BITS + max(0, int(mpmath.log(abs(x) + 1, 2)))):
        x = _reduce_angle(mpmath.mpf(x))
        eps = _epsilon()
        x2 = x * x
        term = x
        total = x
        k = 1
        while abs(term) > eps:
            check_interrupt(interrupt)
            term = -term * x2 / ((k + 1) * (k + 2))
            total += term
            k += 2
    return +total


def cos(x: mpmath.mpf, interrupt: Interrupt) -> mpmath.mpf:
    with mpmath.extraprec(GUARD_BITS + max(0, int(mpmath.log(abs(x) + 1, 2)))):
        x = _reduce_angle(mpmath.mpf(x))
        eps = _epsilon()
        x2 = x * x
        term = mpmath.mpf(1)
        total = term
        k = 0
        while abs(term) > eps:
            check_interrupt(interrupt)
            term = -term * x2 / ((k + 1) * (k + 2))
            total += term
            k += 2
    return +total


def atan(x: mpmath.mpf, interrupt: Interrupt) -> mpmath.mpf:
    """Arctangent with reciprocal and half-angle reduction before the series."""
    with mpmath.extraprec(GUARD_BITS):
        x = mpmath.mpf(x)
        if x == 0:
            return mpmath.mpf(0)
        if abs(x) > 1:
            half_pi = mpmath.pi / 2
            inner = atan(1 / x, interrupt)
            return +((half_pi if x > 0 else -half_pi) - inner)
        # atan(x) = 2 atan(x / (1 + sqrt(1 + x^2))), applied twice
        for _ in range(2):
            check_interrupt(interrupt)
            x = x / (1 + mpmath.sqrt(1 + x * x))
        eps = _epsilon()
        x2 = x * x
        power = x
        total = mpmath.mpf(0)
        k = 0
        while True:
            check_interrupt(interrupt)
            term = power / (2 * k + 1)
            total += -term if k % 2 else term
            if abs(term) <= eps:
                break
            power *= x2
            k += 1
        result = 4 * total
    return +result


def atan2(y: mpmath.mpf, x: mpmath.mpf, interrupt: Interrupt) -> mpmath.mpf:
    """Angle of the point (x, y) in (-pi, pi]."""
    if x > 0:
        return atan(y / x, interrupt)
    if x < 0:
        base = atan(y / x, interrupt)
        return base + mpmath.pi if y >= 0 else base - mpmath.pi
    if y > 0:
        return +(mpmath.pi / 2)
    if y < 0:
        return -(mpmath.pi / 2)
    return mpmath.mpf(0)
