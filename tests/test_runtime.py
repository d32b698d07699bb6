"""
Tests for runtime values, scopes and the builtin registry.
"""

import pytest

from unitcalc.ast import Ident, Num, UnaryMinus
from unitcalc.errors import EvaluationError
from unitcalc.interrupt import NEVER
from unitcalc.num.base import Base
from unitcalc.num.formatting_style import SCIENTIFIC
from unitcalc.num.unit import Number
from unitcalc.runtime import (
    BaseValue,
    BuiltInFunction,
    BuiltinValue,
    DpValue,
    FnValue,
    FormatValue,
    NumValue,
    Scope,
    VersionValue,
    expect_num,
    format_value,
    get_builtin_registry,
    get_version,
    handle_num,
    handle_two_nums,
)
from unitcalc.ast import Add


def num(n):
    return NumValue(Number.from_int(n))


class TestBuiltinFunctions:
    """Test the builtin function enumeration."""

    def test_invert_pairs(self):
        """Trigonometric and hyperbolic functions invert both ways."""
        assert BuiltInFunction.SIN.invert() is BuiltInFunction.ASIN
        assert BuiltInFunction.ASIN.invert() is BuiltInFunction.SIN
        assert BuiltInFunction.TANH.invert() is BuiltInFunction.ATANH

    def test_invert_unsupported(self):
        """Functions without an inverse fail with E405."""
        with pytest.raises(EvaluationError) as exc:
            BuiltInFunction.LN.invert()
        assert exc.value.code == "E405"
        assert exc.value.message == "Unable to invert function ln"

    def test_wrap_with_expr(self):
        """Wrapping builds a closure over x."""
        fn = BuiltInFunction.COS.wrap_with_expr(UnaryMinus, Scope())
        assert isinstance(fn, FnValue)
        assert fn.param == "x"
        assert format_value(fn).text == "\\x.-cos(x)"


class TestHandleNum:
    """Test lazy arithmetic on functions."""

    def test_number(self):
        """Numbers are operated on directly."""
        result = handle_num(num(2), Number.neg, UnaryMinus, Scope())
        assert format_value(result).text == "-2"

    def test_builtin_becomes_closure(self):
        """Negating a builtin defers the operation."""
        result = handle_num(BuiltinValue(BuiltInFunction.SIN), Number.neg, UnaryMinus, Scope())
        assert isinstance(result, FnValue)
        assert format_value(result).text == "\\x.-sin(x)"

    def test_closure_body_is_wrapped(self):
        """Operating on a closure wraps its body."""
        fn = FnValue("y", Ident("y"), Scope())
        result = handle_num(fn, Number.neg, UnaryMinus, Scope())
        assert result.param == "y"
        assert result.body == UnaryMinus(Ident("y"))

    def test_two_numbers(self):
        """Two numbers combine directly."""
        result = handle_two_nums(num(2), num(3), lambda a, b: a.add(b), Add, Scope())
        assert format_value(result).text == "5"

    def test_number_plus_function(self):
        """A number and a function build a closure."""
        fn = BuiltinValue(BuiltInFunction.SIN)
        result = handle_two_nums(num(1), fn, lambda a, b: a.add(b), Add, Scope())
        assert format_value(result).text == "\\x.1 + sin(x)"

    def test_non_numeric_operand(self):
        """Directives cannot take part in arithmetic."""
        with pytest.raises(EvaluationError) as exc:
            handle_num(DpValue(), Number.neg, UnaryMinus, Scope())
        assert exc.value.code == "E403"

    def test_expect_num(self):
        """expect_num unwraps numbers only."""
        assert expect_num(num(4)) == Number.from_int(4)
        with pytest.raises(EvaluationError):
            expect_num(BuiltinValue(BuiltInFunction.ABS))


class TestFormatValue:
    """Test rendering of non-numeric values."""

    def test_directives(self):
        """Formatting directives render by name."""
        assert format_value(DpValue()).text == "dp"
        assert format_value(FormatValue(SCIENTIFIC)).text == "scientific"
        assert format_value(BaseValue(Base(16))).text == "base 16"

    def test_builtin_and_version(self):
        """Builtins render by name and the version marker as the version."""
        assert format_value(BuiltinValue(BuiltInFunction.LOG10)).text == "log10"
        assert format_value(VersionValue()).text == get_version()


class TestScope:
    """Test lexical scopes and lazy bindings."""

    def test_lookup_through_parent(self):
        """Children see parent bindings, parents do not see children."""
        parent = Scope(name="global")
        parent.set("a", num(1))
        child = parent.create_nested_scope("call")
        child.set("b", num(2))
        assert child.get("a", NEVER) == num(1)
        assert parent.get("b", NEVER) is None
        assert child.contains("b")

    def test_shadowing(self):
        """A child binding hides the parent's."""
        parent = Scope()
        parent.set("a", num(1))
        child = parent.create_nested_scope()
        child.set("a", num(5))
        assert child.get("a", NEVER) == num(5)
        assert parent.get("a", NEVER) == num(1)

    def test_lazy_binding_forced_once(self):
        """A deferred binding is computed on first read only."""
        calls = []

        def thunk(interrupt):
            calls.append(interrupt)
            return num(7)

        scope = Scope()
        scope.insert_variable("x", thunk)
        assert calls == []
        assert scope.get("x", NEVER) == num(7)
        assert scope.get("x", NEVER) == num(7)
        assert len(calls) == 1

    def test_snapshot_is_detached(self):
        """Later assignments are not visible in a snapshot."""
        scope = Scope()
        scope.set("a", num(1))
        snapshot = scope.snapshot()
        scope.set("a", num(2))
        scope.set("b", num(3))
        assert snapshot.get("a", NEVER) == num(1)
        assert not snapshot.contains("b")


class TestBuiltinRegistry:
    """Test name resolution for builtins and units."""

    def test_singleton(self):
        """The registry is shared."""
        assert get_builtin_registry() is get_builtin_registry()

    def test_functions_and_aliases(self):
        """Functions resolve by name and alias."""
        registry = get_builtin_registry()
        assert registry.resolve("sin") == BuiltinValue(BuiltInFunction.SIN)
        assert registry.resolve("arcsin") == BuiltinValue(BuiltInFunction.ASIN)
        assert registry.resolve("log") == BuiltinValue(BuiltInFunction.LN)

    def test_constants(self):
        """π is exact, e is approximate."""
        registry = get_builtin_registry()
        assert format_value(registry.resolve("pi")).text == "π"
        assert registry.resolve("π") == registry.resolve("pi")
        assert not registry.resolve("e").number.value.exact

    def test_directives(self):
        """Bases and styles resolve to directive values."""
        registry = get_builtin_registry()
        assert registry.resolve("hex") == BaseValue(Base(16))
        assert registry.resolve("sci") == FormatValue(SCIENTIFIC)
        assert isinstance(registry.resolve("dp"), DpValue)

    def test_units_fall_back(self):
        """Unit names resolve to one of that unit."""
        value = get_builtin_registry().resolve("km")
        assert isinstance(value, NumValue)
        assert format_value(value).text == "1 km"

    def test_unknown(self):
        """Unknown names resolve to None."""
        assert get_builtin_registry().resolve("nosuchname") is None
