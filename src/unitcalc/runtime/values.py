"""
Runtime values for the evaluator.

A ``Value`` is anything an expression can evaluate to: a number, a builtin
function, a formatting directive, a base, a user-defined closure or the
version marker. Consumers dispatch on the concrete class.

Arithmetic on functions is lazy: ``2 sin`` or ``-cos`` do not fail, they
build a new closure ``\\x.2 * sin(x)``. ``handle_num`` and
``handle_two_nums`` implement that rule for unary and binary operators.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, List

from ..ast import ApplyFunctionCall, Expr, Fn, Ident, Num
from ..errors import error_cannot_invert, error_expected_number
from ..interrupt import NEVER, Interrupt
from ..num.base import Base
from ..num.formatting_style import FormattingStyle
from ..num.unit import Number

if TYPE_CHECKING:
    from .context import Scope


VERSION = "1.0.0"


class MulHandling(Enum):
    """Whether applying a number to a value may mean multiplication."""
    ONLY_APPLY = "only_apply"
    BOTH = "both"


class BuiltInFunction(Enum):
    """The native functions, by the name they are called with."""
    APPROXIMATELY = "approximately"
    ABS = "abs"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    SINH = "sinh"
    COSH = "cosh"
    TANH = "tanh"
    ASINH = "asinh"
    ACOSH = "acosh"
    ATANH = "atanh"
    LN = "ln"
    LOG2 = "log2"
    LOG10 = "log10"
    BASE = "base"

    def invert(self) -> "BuiltInFunction":
        """Return the inverse function, e.g. ``asin`` for ``sin``."""
        inverse = _INVERSES.get(self)
        if inverse is None:
            raise error_cannot_invert(self.value)
        return inverse

    def wrap_with_expr(self, lazy_fn: Callable[[Expr], Expr], scope: "Scope") -> "FnValue":
        """Build ``\\x.lazy_fn(self(x))``."""
        body = lazy_fn(ApplyFunctionCall(Ident(self.value), Ident("x")))
        return FnValue("x", body, scope.snapshot())

    def __str__(self) -> str:
        return self.value


_PAIRS = [
    (BuiltInFunction.SIN, BuiltInFunction.ASIN),
    (BuiltInFunction.COS, BuiltInFunction.ACOS),
    (BuiltInFunction.TAN, BuiltInFunction.ATAN),
    (BuiltInFunction.SINH, BuiltInFunction.ASINH),
    (BuiltInFunction.COSH, BuiltInFunction.ACOSH),
    (BuiltInFunction.TANH, BuiltInFunction.ATANH),
]

_INVERSES = {}
for _fn, _inverse in _PAIRS:
    _INVERSES[_fn] = _inverse
    _INVERSES[_inverse] = _fn


# =============================================================================
# Value variants
# =============================================================================

@dataclass(frozen=True)
class Value:
    """Base class for runtime values."""


@dataclass(frozen=True)
class NumValue(Value):
    number: Number


@dataclass(frozen=True)
class BuiltinValue(Value):
    function: BuiltInFunction


@dataclass(frozen=True)
class FormatValue(Value):
    style: FormattingStyle


@dataclass(frozen=True)
class DpValue(Value):
    """The ``dp`` marker; ``5 dp`` turns into a formatting style."""


@dataclass(frozen=True)
class BaseValue(Value):
    base: Base


@dataclass(frozen=True)
class FnValue(Value):
    """A closure over a detached snapshot of its defining scope."""
    param: str
    body: Expr
    scope: "Scope" = field(compare=False)

    def as_expr(self) -> Fn:
        return Fn(self.param, self.body)


@dataclass(frozen=True)
class VersionValue(Value):
    pass


@dataclass
class FormattedValue:
    """Rendered value: the main text and any secondary representations."""
    text: str
    other_info: List[str] = field(default_factory=list)
    exact: bool = True

    def __str__(self) -> str:
        return self.text


def get_version() -> str:
    return VERSION


# =============================================================================
# Helpers
# =============================================================================

def expect_num(value: Value) -> Number:
    if isinstance(value, NumValue):
        return value.number
    raise error_expected_number()


def as_expr(value: Value) -> Expr:
    """Expression that evaluates to ``value``, for building lazy closures."""
    if isinstance(value, NumValue):
        return Num(value.number)
    if isinstance(value, BuiltinValue):
        return Ident(value.function.value)
    if isinstance(value, FnValue):
        return value.as_expr()
    raise error_expected_number()


def handle_num(
    value: Value,
    eval_fn: Callable[[Number], Number],
    lazy_fn: Callable[[Expr], Expr],
    scope: "Scope",
) -> Value:
    """
    Apply a numeric operation, or defer it if ``value`` is a function.

    For a function ``f`` the result is the closure ``\\x.lazy_fn(f(x))``.
    """
    if isinstance(value, NumValue):
        return NumValue(eval_fn(value.number))
    if isinstance(value, BuiltinValue):
        return value.function.wrap_with_expr(lazy_fn, scope)
    if isinstance(value, FnValue):
        return FnValue(value.param, lazy_fn(value.body), value.scope)
    raise error_expected_number()


def handle_two_nums(
    lhs: Value,
    rhs: Value,
    eval_fn: Callable[[Number, Number], Number],
    lazy_fn: Callable[[Expr, Expr], Expr],
    scope: "Scope",
) -> Value:
    """
    Apply a binary numeric operation, deferring it when an operand is a function.

    ``lazy_fn(a, b)`` builds the expression for the deferred operation.
    """
    if isinstance(lhs, NumValue) and isinstance(rhs, NumValue):
        return NumValue(eval_fn(lhs.number, rhs.number))
    if isinstance(lhs, (BuiltinValue, FnValue)) and isinstance(rhs, NumValue):
        rhs_expr = as_expr(rhs)
        return handle_num(lhs, lambda n: n, lambda e: lazy_fn(e, rhs_expr), scope)
    if isinstance(lhs, NumValue) and isinstance(rhs, (BuiltinValue, FnValue)):
        lhs_expr = as_expr(lhs)
        return handle_num(rhs, lambda n: n, lambda e: lazy_fn(lhs_expr, e), scope)
    raise error_expected_number()


# =============================================================================
# Formatting
# =============================================================================

def format_value(value: Value, interrupt: Interrupt = NEVER, auto_places: int = 10) -> FormattedValue:
    """Render any value for display."""
    if isinstance(value, NumValue):
        formatted = value.number.format(interrupt, auto_places)
        return FormattedValue(formatted.text, formatted.other_info, formatted.exact)
    if isinstance(value, BuiltinValue):
        return FormattedValue(value.function.value)
    if isinstance(value, FormatValue):
        return FormattedValue(str(value.style))
    if isinstance(value, DpValue):
        return FormattedValue("dp")
    if isinstance(value, BaseValue):
        return FormattedValue(str(value.base))
    if isinstance(value, FnValue):
        return FormattedValue(value.as_expr().format())
    if isinstance(value, VersionValue):
        return FormattedValue(get_version())
    raise TypeError(f"cannot format {value!r}")
