"""
Numeric tower for unitcalc.

Layers, bottom up:
- biguint: unsigned arbitrary-precision integers
- bigrat: exact reduced fractions
- exact: exactness tracking
- real / complex: symbolic-constant-aware values and transcendental functions
- unit: dimensioned numbers, conversion and formatting
"""

from .base import Base, DECIMAL
from .bigrat import BigRat
from .biguint import BigUint
from .complex import Complex
from .exact import Exact, approx
from .formatting_style import FormattingStyle, StyleKind
from .real import Real
from .unit import FormattedNumber, NamedUnit, Number, lookup_unit

__all__ = [
    "Base",
    "DECIMAL",
    "BigRat",
    "BigUint",
    "Complex",
    "Exact",
    "approx",
    "FormattingStyle",
    "StyleKind",
    "Real",
    "FormattedNumber",
    "NamedUnit",
    "Number",
    "lookup_unit",
]
