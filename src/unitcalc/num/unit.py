"""
Units, dimensions and dimensioned numbers.

A ``Number`` is an exactness-tracked complex value expressed in a product of
named units, each raised to a rational exponent (``m s^-2``). Every named
unit knows its dimension vector (exponents over the SI base dimensions plus
information) and its exact scale relative to the coherent SI unit of that
dimension, so conversions are exact multiplications wherever the scales are.

Unit lookup
-----------
``lookup_unit`` resolves plain names (``kg``, ``inch``, ``°``) and SI or
binary prefixes applied to prefixable units (``km``, ``µs``, ``KiB``).
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from ..errors import (
    error_expected_unitless,
    error_incompatible_units,
    error_unit_exponent,
)
from ..interrupt import NEVER, Interrupt
from .base import DECIMAL, Base
from .bigrat import BigRat
from .complex import Complex, ONE as COMPLEX_ONE
from .exact import Exact
from .formatting_style import AUTO, FormattingStyle, StyleKind
from .real import Real


# Dimension vectors are sorted (dimension, exponent) pairs without zeros
Dimensions = Tuple[Tuple[str, BigRat], ...]

BASE_DIMENSIONS = (
    "length", "mass", "time", "current", "temperature",
    "amount", "luminosity", "information",
)


def make_dimensions(exponents: Dict[str, BigRat]) -> Dimensions:
    for name in exponents:
        if name not in BASE_DIMENSIONS:
            raise ValueError(f"unknown dimension {name!r}")
    return tuple(sorted((k, v) for k, v in exponents.items() if not v.is_zero()))


def combine_dimensions(lhs: Dimensions, rhs: Dimensions, factor: BigRat) -> Dimensions:
    """Return ``lhs + factor * rhs``."""
    result = dict(lhs)
    for name, exponent in rhs:
        result[name] = result.get(name, BigRat.from_int(0)).add(exponent.mul(factor))
    return make_dimensions(result)


@dataclass(frozen=True)
class NamedUnit:
    """A unit symbol with its dimension vector and scale to the SI unit."""
    name: str
    dimensions: Dimensions
    scale: Real


@dataclass(frozen=True)
class UnitExponent:
    unit: NamedUnit
    exponent: BigRat


# --- Registry ---

def _d(**exponents: int) -> Dimensions:
    return make_dimensions({k: BigRat.from_int(v) for k, v in exponents.items()})


def _r(n: int, d: int = 1) -> Real:
    return Real.from_fraction(n, d)


LENGTH = _d(length=1)
MASS = _d(mass=1)
TIME = _d(time=1)
VOLUME = _d(length=3)
FORCE = _d(mass=1, length=1, time=-2)
ENERGY = _d(mass=1, length=2, time=-2)
POWER = _d(mass=1, length=2, time=-3)
PRESSURE = _d(mass=1, length=-1, time=-2)
CHARGE = _d(current=1, time=1)
VOLTAGE = _d(mass=1, length=2, time=-3, current=-1)
RESISTANCE = _d(mass=1, length=2, time=-3, current=-2)
INFORMATION = _d(information=1)

_UNIT_TABLE = [
    # (names, dimensions, scale, prefixable)
    (("m", "meter", "metre"), LENGTH, _r(1), True),
    (("g", "gram"), MASS, _r(1, 1000), True),
    (("s", "second"), TIME, _r(1), True),
    (("A", "ampere"), _d(current=1), _r(1), True),
    (("K", "kelvin"), _d(temperature=1), _r(1), True),
    (("mol",), _d(amount=1), _r(1), True),
    (("cd", "candela"), _d(luminosity=1), _r(1), True),
    (("bit",), INFORMATION, _r(1), True),
    (("B", "byte"), INFORMATION, _r(8), True),
    (("N", "newton"), FORCE, _r(1), True),
    (("J", "joule"), ENERGY, _r(1), True),
    (("W", "watt"), POWER, _r(1), True),
    (("Pa", "pascal"), PRESSURE, _r(1), True),
    (("Hz", "hertz"), _d(time=-1), _r(1), True),
    (("C", "coulomb"), CHARGE, _r(1), True),
    (("V", "volt"), VOLTAGE, _r(1), True),
    (("Ω", "ohm"), RESISTANCE, _r(1), True),
    (("L", "l", "litre", "liter"), VOLUME, _r(1, 1000), True),
    (("eV",), ENERGY, _r(1602176634, 10 ** 28), True),
    (("t", "tonne"), MASS, _r(1000), False),
    (("min", "minute"), TIME, _r(60), False),
    (("h", "hr", "hour"), TIME, _r(3600), False),
    (("day",), TIME, _r(86400), False),
    (("week",), TIME, _r(604800), False),
    (("year",), TIME, _r(31557600), False),
    (("in", "inch"), LENGTH, _r(254, 10000), False),
    (("ft", "foot", "feet"), LENGTH, _r(3048, 10000), False),
    (("yd", "yard"), LENGTH, _r(9144, 10000), False),
    (("mi", "mile"), LENGTH, _r(1609344, 1000), False),
    (("lb", "pound"), MASS, _r(45359237, 100000000), False),
    (("oz", "ounce"), MASS, _r(45359237, 1600000000), False),
    (("cal", "calorie"), ENERGY, _r(4184, 1000), False),
    (("kcal",), ENERGY, _r(4184), False),
    (("rad", "radian"), (), _r(1), False),
    (("°", "deg", "degree"), (), Real.pi(BigRat.from_fraction(1, 180)), False),
    (("%", "percent"), (), _r(1, 100), False),
]

SI_PREFIXES = {
    "Y": _r(10 ** 24), "Z": _r(10 ** 21), "E": _r(10 ** 18), "P": _r(10 ** 15),
    "T": _r(10 ** 12), "G": _r(10 ** 9), "M": _r(10 ** 6), "k": _r(1000),
    "h": _r(100), "da": _r(10), "d": _r(1, 10), "c": _r(1, 100),
    "m": _r(1, 1000), "µ": _r(1, 10 ** 6), "μ": _r(1, 10 ** 6), "u": _r(1, 10 ** 6),
    "n": _r(1, 10 ** 9), "p": _r(1, 10 ** 12), "f": _r(1, 10 ** 15),
    "a": _r(1, 10 ** 18),
}

BINARY_PREFIXES = {
    "Ki": _r(2 ** 10), "Mi": _r(2 ** 20), "Gi": _r(2 ** 30),
    "Ti": _r(2 ** 40), "Pi": _r(2 ** 50), "Ei": _r(2 ** 60),
}

UNITS: Dict[str, NamedUnit] = {}
PREFIXABLE = set()

for _names, _dims, _scale, _prefixable in _UNIT_TABLE:
    for _name in _names:
        UNITS[_name] = NamedUnit(_name, _dims, _scale)
        if _prefixable:
            PREFIXABLE.add(_name)

# Preferred names for derived dimensions, in lookup order
CANONICAL_UNITS = [UNITS[name] for name in ("N", "J", "W", "Pa", "C", "V")]

# Rendered directly after the number without a space
NO_SPACE_UNITS = {"°", "%"}


def lookup_unit(name: str) -> Optional[NamedUnit]:
    """Resolve a unit name, with an optional SI or binary prefix."""
    if name in UNITS:
        return UNITS[name]
    for prefixes in (BINARY_PREFIXES, SI_PREFIXES):
        for prefix, factor in sorted(prefixes.items(), key=lambda p: -len(p[0])):
            rest = name[len(prefix):]
            if name.startswith(prefix) and rest in PREFIXABLE:
                if prefixes is BINARY_PREFIXES and UNITS[rest].dimensions != INFORMATION:
                    continue
                unit = UNITS[rest]
                return NamedUnit(name, unit.dimensions, unit.scale.mul(factor).value)
    return None


# --- Formatting helpers ---

def _format_component(component: UnitExponent, negate: bool = False) -> str:
    exponent = component.exponent.neg() if negate else component.exponent
    if exponent.is_one():
        return component.unit.name
    text = exponent.format_fraction()
    if not exponent.is_integer():
        text = f"({text})"
    return f"{component.unit.name}^{text}"


def format_units(units: Tuple[UnitExponent, ...]) -> str:
    """Render ``kg m/s^2`` style unit text; empty for unitless values."""
    positive = [u for u in units if not u.exponent.is_negative()]
    negative = [u for u in units if u.exponent.is_negative()]
    if not positive:
        return " ".join(_format_component(u) for u in negative)
    text = " ".join(_format_component(u) for u in positive)
    if negative:
        denominator = " ".join(_format_component(u, negate=True) for u in negative)
        if len(negative) > 1:
            denominator = f"({denominator})"
        text = f"{text}/{denominator}"
    return text


@dataclass
class FormattedNumber:
    """Rendered text of a ``Number`` plus alternative renderings."""
    text: str
    exact: bool
    other_info: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.text


# --- Numbers ---

def _real_factor(value: Exact[Real]) -> Exact[Complex]:
    return value.map(Complex)


@dataclass(frozen=True)
class Number:
    """
    A dimensioned, exactness-tracked complex number.

    ``value`` is expressed in ``units``; ``base`` and ``style`` only affect
    rendering and are carried through arithmetic from the left operand.
    """
    value: Exact[Complex]
    units: Tuple[UnitExponent, ...] = ()
    base: Base = DECIMAL
    style: FormattingStyle = AUTO

    # --- Construction ---

    @classmethod
    def from_int(cls, n: int) -> "Number":
        return cls(Exact(Complex.from_int(n)))

    @classmethod
    def from_rational(cls, value: BigRat, base: Base = DECIMAL) -> "Number":
        return cls(Exact(Complex.from_rational(value)), base=base)

    @classmethod
    def from_unit(cls, unit: NamedUnit) -> "Number":
        return cls(Exact(COMPLEX_ONE), (UnitExponent(unit, BigRat.from_int(1)),))

    def with_value(self, value: Exact[Complex]) -> "Number":
        return replace(self, value=value)

    def with_base(self, base: Base) -> "Number":
        return replace(self, base=base)

    def with_style(self, style: FormattingStyle) -> "Number":
        return replace(self, style=style)

    def make_approximate(self) -> "Number":
        return replace(self, value=self.value.make_approximate())

    # --- Dimensions ---

    def dimensions(self) -> Dimensions:
        dims: Dimensions = ()
        for component in self.units:
            dims = combine_dimensions(dims, component.unit.dimensions, component.exponent)
        return dims

    def unit_string(self) -> str:
        return format_units(self.units)

    def is_unitless(self) -> bool:
        return not self.units

    def _scale(self, interrupt: Interrupt) -> Exact[Real]:
        """Factor converting a value in these units to coherent SI units."""
        return _units_scale(self.units, interrupt)

    def expect_unitless(self, interrupt: Interrupt = NEVER) -> Exact[Complex]:
        """Return the plain value, scaling away dimensionless units such as degrees."""
        if not self.units:
            return self.value
        if self.dimensions():
            raise error_expected_unitless(self.unit_string())
        return self.value.then2(_real_factor(self._scale(interrupt)), Complex.mul)

    def try_as_usize(self, interrupt: Interrupt = NEVER) -> int:
        return self.expect_unitless(interrupt).value.try_as_usize(interrupt)

    def _in_units(self, units: Tuple[UnitExponent, ...], interrupt: Interrupt) -> Exact[Complex]:
        factor = self._scale(interrupt).then2(_units_scale(units, interrupt), Real.div)
        return self.value.then2(_real_factor(factor), Complex.mul)

    def convert_to(self, target: "Number", interrupt: Interrupt = NEVER) -> "Number":
        """Express this value in the units of ``target``."""
        if self.dimensions() != target.dimensions():
            raise error_incompatible_units(self.unit_string(), target.unit_string())
        return replace(self, value=self._in_units(target.units, interrupt), units=target.units)

    # --- Arithmetic ---

    def neg(self) -> "Number":
        return self.with_value(self.value.map(Complex.neg))

    def abs(self, interrupt: Interrupt = NEVER) -> "Number":
        return self.with_value(self.value.then(lambda v: v.abs(interrupt)))

    def add(self, other: "Number", interrupt: Interrupt = NEVER) -> "Number":
        if self.dimensions() != other.dimensions():
            raise error_incompatible_units(self.unit_string(), other.unit_string())
        units = self.units or other.units
        lhs = self._in_units(units, interrupt)
        rhs = other._in_units(units, interrupt)
        return replace(self, value=lhs.then2(rhs, Complex.add), units=units)

    def sub(self, other: "Number", interrupt: Interrupt = NEVER) -> "Number":
        return self.add(other.neg(), interrupt)

    def mul(self, other: "Number", interrupt: Interrupt = NEVER) -> "Number":
        value = self.value.then2(other.value, Complex.mul)
        return self._combine(other.units, value, interrupt)

    def div(self, other: "Number", interrupt: Interrupt = NEVER) -> "Number":
        value = self.value.then2(other.value, Complex.div)
        inverted = tuple(UnitExponent(u.unit, u.exponent.neg()) for u in other.units)
        return self._combine(inverted, value, interrupt)

    def pow(self, other: "Number", interrupt: Interrupt = NEVER) -> "Number":
        exponent = other.expect_unitless(interrupt)
        value = self.value.then2(exponent, lambda a, b: a.pow(b, interrupt))
        if not self.units:
            return self.with_value(value)
        power = exponent.value
        if not exponent.exact or not power.is_real() or not power.re.is_rational():
            raise error_unit_exponent(self.unit_string())
        factor = power.re.coefficient
        if factor.is_zero():
            return replace(self, value=value, units=())
        units = tuple(UnitExponent(u.unit, u.exponent.mul(factor)) for u in self.units)
        return replace(self, value=value, units=units)

    def _combine(self, extra: Tuple[UnitExponent, ...], value: Exact[Complex],
                 interrupt: Interrupt) -> "Number":
        """Multiply the unit product by ``extra``, merging units of equal dimension."""
        units = list(self.units)
        for component in extra:
            for idx, existing in enumerate(units):
                same = existing.unit == component.unit or (
                    existing.unit.dimensions
                    and existing.unit.dimensions == component.unit.dimensions
                )
                if same:
                    ratio = component.unit.scale.div(existing.unit.scale)
                    factor = ratio.then(
                        lambda r: r.pow(Real(component.exponent), interrupt))
                    value = value.then2(_real_factor(factor), Complex.mul)
                    units[idx] = UnitExponent(
                        existing.unit, existing.exponent.add(component.exponent))
                    break
            else:
                units.append(component)
        units = tuple(u for u in units if not u.exponent.is_zero())
        result = replace(self, value=value, units=units)
        if len(units) > 1:
            dims = result.dimensions()
            if not dims:
                return replace(result, value=result.expect_unitless(interrupt), units=())
            for canonical in CANONICAL_UNITS:
                if canonical.dimensions == dims:
                    target = (UnitExponent(canonical, BigRat.from_int(1)),)
                    return replace(result, value=result._in_units(target, interrupt),
                                   units=target)
        return result

    # --- Functions of dimensionless values ---

    def apply_function(self, name: str, interrupt: Interrupt = NEVER) -> "Number":
        """Apply a transcendental ``Complex`` method such as ``sin`` or ``log10``."""
        argument = self.expect_unitless(interrupt)
        method = getattr(Complex, name)
        return replace(self, value=argument.then(lambda v: method(v, interrupt)), units=())

    # --- Formatting ---

    def format(self, interrupt: Interrupt = NEVER, auto_places: int = 10) -> FormattedNumber:
        """
        Render the number in its base and style.

        Approximate results are prefixed with ``approx.``. In the automatic
        style, exact fractions and symbolic values also get a decimal
        approximation, and non-decimal numbers their decimal value, as
        secondary information.
        """
        value = self.value.value
        text, exact = value.format(self.style, self.value.exact, self.base,
                                   auto_places, interrupt)
        formatted = FormattedNumber(self._decorate(text, exact, self.base), exact)
        if self.style.kind != StyleKind.AUTO:
            return formatted
        if exact and ("/" in text or "π" in text):
            approx_text, _ = value.format(AUTO, False, self.base, auto_places, interrupt)
            formatted.other_info.append(self._decorate(approx_text, False, self.base))
        if not self.base.is_decimal():
            decimal_text, decimal_exact = value.format(
                self.style, self.value.exact, DECIMAL, auto_places, interrupt)
            formatted.other_info.append(self._decorate(decimal_text, decimal_exact, DECIMAL))
        return formatted

    def _decorate(self, text: str, exact: bool, base: Base) -> str:
        if base.prefix and self.value.value.is_real():
            if text.startswith("-"):
                text = f"-{base.prefix}{text[1:]}"
            else:
                text = f"{base.prefix}{text}"
        if self.units:
            if not self.value.value.is_real() and not self.value.value.re.is_zero():
                text = f"({text})"
            unit_text = self.unit_string()
            if len(self.units) == 1 and unit_text in NO_SPACE_UNITS:
                text = f"{text}{unit_text}"
            else:
                text = f"{text} {unit_text}"
        if not exact:
            text = f"approx. {text}"
        return text


def _units_scale(units: Tuple[UnitExponent, ...], interrupt: Interrupt) -> Exact[Real]:
    scale = Exact(Real.from_int(1))
    for component in units:
        factor = component.unit.scale.pow(Real(component.exponent), interrupt)
        scale = scale.then2(factor, Real.mul)
    return scale
