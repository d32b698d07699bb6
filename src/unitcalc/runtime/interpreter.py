"""
Tree-walking interpreter for calculator expressions.

Evaluates expression trees to runtime values, and provides the top-level
``evaluate`` entry point that parses, evaluates and formats an input line.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import mpmath

from ..ast import (
    Add, Apply, ApplyFunctionCall, Assign, Convert, Div, Expr, Fn, Ident,
    Mul, Num, ParseOptions, Parens, Pow, Sub, UnaryMinus, UnaryPlus,
)
from ..config import CalcConfig
from ..errors import (
    CalcError,
    Interrupted,
    error_config_invalid_value,
    error_invalid_base_value,
    error_invalid_conversion,
    error_not_a_function,
    error_not_a_function_or_number,
    error_recursion_limit,
    error_unknown_identifier,
    error_value_too_large,
)
from ..interrupt import NEVER, Interrupt, check_interrupt
from ..num.base import Base
from ..num.complex import Complex
from ..num.formatting_style import FormattingStyle
from ..num.unit import Number
from ..parser import parse
from .builtins import resolve_identifier
from .context import Scope
from .values import (
    BaseValue,
    BuiltInFunction,
    BuiltinValue,
    DpValue,
    FnValue,
    FormatValue,
    MulHandling,
    NumValue,
    Value,
    expect_num,
    format_value,
    handle_num,
    handle_two_nums,
)

logger = logging.getLogger(__name__)

# Upper bound for ``n dp``
MAX_DECIMAL_PLACES = 1000


@dataclass
class EvaluationResult:
    """Result of evaluating one input line."""
    success: bool
    main_result: str = ""
    other_info: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    interrupted: bool = False
    value: Optional[Value] = None


class Interpreter:
    """
    Tree-walking evaluator.

    Evaluates expressions by dispatching on the node class. The interrupt is
    polled once per node, so deep or recursive evaluations can be cancelled.
    """

    def __init__(self, options: ParseOptions = ParseOptions(), interrupt: Interrupt = NEVER):
        self.options = options
        self.interrupt = interrupt

    def evaluate(self, expr: Expr, scope: Scope) -> Value:
        """Evaluate an expression in a scope."""
        check_interrupt(self.interrupt)
        if isinstance(expr, Num):
            return NumValue(expr.number)
        elif isinstance(expr, Ident):
            return self._eval_identifier(expr.name, scope)
        elif isinstance(expr, Parens):
            return self.evaluate(expr.inner, scope)
        elif isinstance(expr, UnaryMinus):
            return handle_num(self.evaluate(expr.operand, scope), Number.neg, UnaryMinus, scope)
        elif isinstance(expr, UnaryPlus):
            return handle_num(self.evaluate(expr.operand, scope), lambda n: n, UnaryPlus, scope)
        elif isinstance(expr, Add):
            return self._eval_arithmetic(expr, scope, Number.add)
        elif isinstance(expr, Sub):
            return self._eval_arithmetic(expr, scope, Number.sub)
        elif isinstance(expr, Mul):
            return self._eval_arithmetic(expr, scope, Number.mul)
        elif isinstance(expr, Div):
            return self._eval_arithmetic(expr, scope, Number.div)
        elif isinstance(expr, Pow):
            return self._eval_pow(expr, scope)
        elif isinstance(expr, Apply):
            handling = MulHandling.ONLY_APPLY if expr.only_apply else MulHandling.BOTH
            return self.apply(self.evaluate(expr.function, scope), expr.argument, handling, scope)
        elif isinstance(expr, ApplyFunctionCall):
            handling = (MulHandling.BOTH if self.options.implicit_multiplication
                        else MulHandling.ONLY_APPLY)
            return self.apply(self.evaluate(expr.function, scope), expr.argument, handling, scope)
        elif isinstance(expr, Convert):
            return self._eval_convert(expr, scope)
        elif isinstance(expr, Fn):
            return FnValue(expr.param, expr.body, scope.snapshot())
        elif isinstance(expr, Assign):
            value = self.evaluate(expr.value, scope)
            scope.set(expr.name, value)
            return value
        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _eval_identifier(self, name: str, scope: Scope) -> Value:
        value = scope.get(name, self.interrupt)
        if value is None:
            value = resolve_identifier(name, self.interrupt)
        if value is None:
            raise error_unknown_identifier(name)
        return value

    def _eval_arithmetic(self, expr, scope: Scope, operation) -> Value:
        lhs = self.evaluate(expr.left, scope)
        rhs = self.evaluate(expr.right, scope)
        return handle_two_nums(
            lhs, rhs,
            lambda a, b: operation(a, b, self.interrupt),
            type(expr),
            scope,
        )

    def _eval_pow(self, expr: Pow, scope: Scope) -> Value:
        lhs = self.evaluate(expr.left, scope)
        rhs = self.evaluate(expr.right, scope)
        if isinstance(lhs, BuiltinValue) and _is_minus_one(rhs):
            # sin^-1 is asin
            return BuiltinValue(lhs.function.invert())
        return handle_two_nums(
            lhs, rhs,
            lambda a, b: a.pow(b, self.interrupt),
            Pow,
            scope,
        )

    def _eval_convert(self, expr: Convert, scope: Scope) -> Value:
        lhs = self.evaluate(expr.value, scope)
        target = self.evaluate(expr.target, scope)
        if isinstance(target, FormatValue):
            return NumValue(expect_num(lhs).with_style(target.style))
        if isinstance(target, BaseValue):
            return NumValue(expect_num(lhs).with_base(target.base))
        if isinstance(target, NumValue):
            return NumValue(expect_num(lhs).convert_to(target.number, self.interrupt))
        raise error_invalid_conversion(format_value(target, self.interrupt).text)

    # =========================================================================
    # Application
    # =========================================================================

    def apply(self, value: Value, argument: Expr, handling: MulHandling, scope: Scope) -> Value:
        """
        Apply ``value`` to the unevaluated ``argument``.

        - Number: ``5 dp`` becomes a formatting style; otherwise multiplication,
          unless ``handling`` forbids it
        - Builtin function: evaluates the argument and calls the function
        - Closure: binds the argument lazily in a child of the captured scope
        """
        if isinstance(value, NumValue):
            other = self.evaluate(argument, scope)
            if isinstance(other, DpValue):
                places = value.number.try_as_usize(self.interrupt)
                if places > MAX_DECIMAL_PLACES:
                    raise error_value_too_large(MAX_DECIMAL_PLACES)
                return FormatValue(FormattingStyle.decimal_places(places))
            if handling == MulHandling.ONLY_APPLY:
                raise error_not_a_function(format_value(value, self.interrupt).text)
            return handle_two_nums(
                value, other,
                lambda a, b: a.mul(b, self.interrupt),
                Mul,
                scope,
            )
        if isinstance(value, BuiltinValue):
            return self._apply_builtin(value.function, self.evaluate(argument, scope))
        if isinstance(value, FnValue):
            nested = value.scope.create_nested_scope(value.param)
            options = self.options
            arg_scope = scope.snapshot()
            nested.insert_variable(
                value.param,
                lambda interrupt: Interpreter(options, interrupt).evaluate(argument, arg_scope),
            )
            return self.evaluate(value.body, nested)
        raise error_not_a_function_or_number(format_value(value, self.interrupt).text)

    def _apply_builtin(self, function: BuiltInFunction, argument: Value) -> Value:
        if function == BuiltInFunction.BASE:
            number = expect_num(argument)
            try:
                base = number.try_as_usize(self.interrupt)
            except CalcError as e:
                raise error_invalid_base_value() from e
            return BaseValue(Base.from_plain_base(base))
        return NumValue(self._call_builtin(function, expect_num(argument)))

    def _call_builtin(self, function: BuiltInFunction, number: Number) -> Number:
        if function == BuiltInFunction.APPROXIMATELY:
            return number.make_approximate()
        if function == BuiltInFunction.ABS:
            return number.abs(self.interrupt)
        return number.apply_function(function.value, self.interrupt)


def _is_minus_one(value: Value) -> bool:
    if not isinstance(value, NumValue) or not value.number.is_unitless():
        return False
    exact = value.number.value
    return exact.exact and exact.value == Complex.from_int(-1)


def evaluate_expr(
    expr: Expr,
    scope: Scope,
    options: ParseOptions = ParseOptions(),
    interrupt: Interrupt = NEVER,
) -> Value:
    """
    Evaluate an already-built expression tree.

    Raises:
        CalcError: for user-facing failures
        Interrupted: if the interrupt is signaled during evaluation
    """
    return Interpreter(options, interrupt).evaluate(expr, scope)


class Context:
    """
    A calculator session.

    Holds the top-level scope, so assignments persist between evaluations,
    together with the configuration and parse options.

    Usage:
        ctx = Context()
        ctx.evaluate("x = 3 kg")
        ctx.evaluate("x + 500 g").main_result   # '3.5 kg'
    """

    def __init__(self, config: Optional[CalcConfig] = None,
                 options: Optional[ParseOptions] = None):
        self.config = config or CalcConfig()
        self.options = options or ParseOptions()
        self.scope = Scope(name="global")
        self._load_variables()

    def _load_variables(self) -> None:
        for name, source in self.config.variables.items():
            try:
                with mpmath.workdps(self.config.working_precision):
                    value = evaluate_expr(parse(source), self.scope, self.options)
            except CalcError as e:
                raise error_config_invalid_value(f"variables.{name}", e.message) from e
            self.scope.set(name, value)

    def evaluate(self, source: str, interrupt: Optional[Interrupt] = None) -> EvaluationResult:
        """
        Parse, evaluate and format one input.

        Never raises for user errors or interruption; both are reported
        through the returned EvaluationResult.
        """
        interrupt = interrupt or NEVER
        logger.debug("evaluating %r", source)
        if not source.strip():
            return EvaluationResult(success=True)
        try:
            with mpmath.workdps(self.config.working_precision):
                value = evaluate_expr(parse(source), self.scope, self.options, interrupt)
                formatted = format_value(value, interrupt, self.config.auto_decimal_places)
        except Interrupted:
            logger.info("evaluation interrupted: %r", source)
            return EvaluationResult(success=False, interrupted=True)
        except RecursionError:
            error = error_recursion_limit()
            logger.debug("evaluation failed [%s]: %s", error.code, error.message)
            return EvaluationResult(success=False, error_message=error.message,
                                    error_code=error.code)
        except CalcError as e:
            logger.debug("evaluation failed [%s]: %s", e.code, e.message)
            return EvaluationResult(success=False, error_message=e.message, error_code=e.code)

        logger.debug("result %r", formatted.text)
        return EvaluationResult(
            success=True,
            main_result=formatted.text,
            other_info=formatted.other_info,
            value=value,
        )


def evaluate(source: str, context: Optional[Context] = None,
             interrupt: Optional[Interrupt] = None) -> EvaluationResult:
    """Evaluate ``source`` in ``context`` (a fresh one by default)."""
    if context is None:
        context = Context()
    return context.evaluate(source, interrupt)
