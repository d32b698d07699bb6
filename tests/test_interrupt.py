"""
Tests for cooperative cancellation.
"""

import mpmath
import pytest

from unitcalc import Context, InterruptFlag, NeverInterrupt, evaluate
from unitcalc.errors import Interrupted
from unitcalc.interrupt import Interrupt, check_interrupt
from unitcalc.num import series
from unitcalc.num.biguint import BigUint
from unitcalc.runtime.builtins import get_builtin_registry


class CountingInterrupt:
    """Signals after a fixed number of polls."""

    def __init__(self, limit):
        self.limit = limit
        self.polls = 0

    def should_interrupt(self):
        self.polls += 1
        return self.polls > self.limit


class TestInterruptPrimitives:
    """Test the interrupt implementations."""

    def test_protocol(self):
        """All implementations satisfy the Interrupt protocol."""
        assert isinstance(NeverInterrupt(), Interrupt)
        assert isinstance(InterruptFlag(), Interrupt)
        assert isinstance(CountingInterrupt(1), Interrupt)

    def test_flag_set_and_reset(self):
        """The flag is reset by its owner."""
        flag = InterruptFlag()
        assert not flag.should_interrupt()
        flag.set()
        assert flag.should_interrupt()
        flag.reset()
        assert not flag.should_interrupt()

    def test_check_interrupt(self):
        """check_interrupt raises only when signaled."""
        check_interrupt(NeverInterrupt())
        flag = InterruptFlag()
        flag.set()
        with pytest.raises(Interrupted):
            check_interrupt(flag)


class TestKernelsPoll:
    """Long-running loops observe the interrupt."""

    def test_biguint_pow(self):
        """Exponentiation by squaring polls every step."""
        with pytest.raises(Interrupted):
            BigUint(3).pow(BigUint(10 ** 6), CountingInterrupt(5))

    def test_series_exp(self):
        """Series kernels poll every term."""
        with mpmath.workdps(40):
            with pytest.raises(Interrupted):
                series.exp(mpmath.mpf(1), CountingInterrupt(5))

    def test_constant_e_polls(self):
        """Looking up e runs an interruptible series."""
        with mpmath.workdps(40):
            with pytest.raises(Interrupted):
                get_builtin_registry().resolve("e", CountingInterrupt(5))

    def test_series_completes_without_interrupt(self):
        """An unsignaled interrupt lets the kernel finish."""
        with mpmath.workdps(40):
            value = series.ln(mpmath.mpf(2), NeverInterrupt())
            assert abs(value - mpmath.ln(2)) < mpmath.mpf(10) ** -35


class TestInterruptedEvaluation:
    """Interrupted evaluations are reported distinctly from failures."""

    def test_interrupted_result(self):
        """An interrupt during evaluation yields interrupted, not an error."""
        result = evaluate("2^(1/3) + sin(1)", interrupt=CountingInterrupt(3))
        assert result.interrupted
        assert not result.success
        assert result.error_message is None
        assert result.error_code is None

    def test_constant_e_interrupted(self):
        """An interrupt while computing e ends the evaluation."""
        result = evaluate("e", interrupt=CountingInterrupt(5))
        assert result.interrupted

    def test_preset_flag(self):
        """A flag set before evaluation stops it immediately."""
        flag = InterruptFlag()
        flag.set()
        result = evaluate("1 + 1", interrupt=flag)
        assert result.interrupted

    def test_context_survives_interrupt(self):
        """A context remains usable after an interrupted evaluation."""
        context = Context()
        flag = InterruptFlag()
        flag.set()
        assert context.evaluate("x = 5", flag).interrupted
        flag.reset()
        result = context.evaluate("x = 5", flag)
        assert result.success
        assert context.evaluate("x * 2", flag).main_result == "10"
