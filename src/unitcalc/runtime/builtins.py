"""
Built-in identifier registry.

Maps names that are not user variables to values: the native functions,
constants (pi, e, i), formatting directives, named bases and units.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..interrupt import NEVER, Interrupt
from ..num.base import Base
from ..num.complex import Complex
from ..num.exact import Exact
from ..num.formatting_style import AUTO, EXACT_FRACTION, SCIENTIFIC
from ..num.real import Real
from ..num.unit import Number, lookup_unit
from .values import (
    BaseValue,
    BuiltInFunction,
    BuiltinValue,
    DpValue,
    FormatValue,
    NumValue,
    Value,
    VersionValue,
)


@dataclass
class BuiltinName:
    """A builtin name and the factory producing its value."""
    name: str
    factory: Callable[[Interrupt], Value]
    doc: str = ""


class BuiltinRegistry:
    """
    Registry of all built-in names.

    Names are registered once; ``resolve`` falls back to the unit table for
    anything not registered explicitly.
    """

    def __init__(self):
        self._names: Dict[str, BuiltinName] = {}
        self._register_all()

    def get(self, name: str) -> Optional[BuiltinName]:
        return self._names.get(name)

    def register(self, entry: BuiltinName) -> None:
        self._names[entry.name] = entry

    def resolve(self, name: str, interrupt: Interrupt = NEVER) -> Optional[Value]:
        """Return the value of a builtin name or unit, or None if unknown."""
        entry = self._names.get(name)
        if entry is not None:
            return entry.factory(interrupt)
        unit = lookup_unit(name)
        if unit is not None:
            return NumValue(Number.from_unit(unit))
        return None

    def _register_all(self) -> None:
        self._register_functions()
        self._register_constants()
        self._register_directives()

    def _register_functions(self) -> None:
        for function in BuiltInFunction:
            self.register(BuiltinName(
                function.value,
                lambda interrupt, f=function: BuiltinValue(f),
                f"builtin function {function.value}",
            ))
        for alias, function in (("arcsin", BuiltInFunction.ASIN),
                                ("arccos", BuiltInFunction.ACOS),
                                ("arctan", BuiltInFunction.ATAN),
                                ("log", BuiltInFunction.LN)):
            self.register(BuiltinName(alias, lambda interrupt, f=function: BuiltinValue(f)))

    def _register_constants(self) -> None:
        def _pi(interrupt: Interrupt) -> Value:
            return NumValue(Number(Exact(Complex(Real.pi()))))

        def _e(interrupt: Interrupt) -> Value:
            return NumValue(Number(Complex.from_int(1).exp(interrupt)))

        def _i(interrupt: Interrupt) -> Value:
            return NumValue(Number(Exact(Complex.i())))

        self.register(BuiltinName("pi", _pi, "π, exact"))
        self.register(BuiltinName("π", _pi, "π, exact"))
        self.register(BuiltinName("e", _e, "Euler's number, approximate"))
        self.register(BuiltinName("i", _i, "imaginary unit"))

    def _register_directives(self) -> None:
        self.register(BuiltinName("dp", lambda interrupt: DpValue(), "decimal places marker: 5 dp"))
        self.register(BuiltinName("version", lambda interrupt: VersionValue()))
        for name, style in (("auto", AUTO),
                            ("fraction", EXACT_FRACTION),
                            ("exact", EXACT_FRACTION),
                            ("sci", SCIENTIFIC),
                            ("scientific", SCIENTIFIC)):
            self.register(BuiltinName(name, lambda interrupt, s=style: FormatValue(s)))
        for name, base in (("binary", 2),
                           ("octal", 8),
                           ("decimal", 10),
                           ("hex", 16),
                           ("hexadecimal", 16)):
            self.register(BuiltinName(name, lambda interrupt, b=base: BaseValue(Base(b))))


# Global singleton registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def resolve_identifier(name: str, interrupt: Interrupt = NEVER) -> Optional[Value]:
    return get_builtin_registry().resolve(name, interrupt)
