"""
unitcalc - an arbitrary-precision calculator with units.

Numbers stay exact (rationals and rational multiples of π) until an
operation forces an approximation, and physical units are checked and
converted as part of the arithmetic.

Usage:
    from unitcalc import evaluate, Context

    evaluate("1/2 + 1/3").main_result          # '5/6'
    evaluate("3 kg + 2 m").error_message       # "Units 'kg' and 'm' are incompatible"

    ctx = Context()
    ctx.evaluate("v = 100 km/h")
    ctx.evaluate("v to m/s").main_result        # '250/9 m/s'

Long computations can be cancelled from another thread or a signal handler
through an ``InterruptFlag`` passed to ``evaluate``.
"""

from .ast import ParseOptions
from .config import CalcConfig, load_config
from .errors import CalcError, Diagnostic, Interrupted
from .interrupt import Interrupt, InterruptFlag, NeverInterrupt
from .lexer import Lexer, tokenize
from .parser import Parser, parse
from .runtime import (
    Context,
    EvaluationResult,
    Scope,
    Value,
    evaluate,
    evaluate_expr,
    get_version,
)

__version__ = get_version()

__all__ = [
    "ParseOptions",
    "CalcConfig",
    "load_config",
    "CalcError",
    "Diagnostic",
    "Interrupted",
    "Interrupt",
    "InterruptFlag",
    "NeverInterrupt",
    "Lexer",
    "tokenize",
    "Parser",
    "parse",
    "Context",
    "EvaluationResult",
    "Scope",
    "Value",
    "evaluate",
    "evaluate_expr",
    "get_version",
]
