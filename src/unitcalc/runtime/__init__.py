"""
Calculator runtime - tree-walking evaluator for expression trees.

This module provides:
- Interpreter / evaluate_expr: evaluate an expression tree in a scope
- Context / evaluate: parse, evaluate and format an input line
- Value: runtime values (numbers, functions, closures, directives)
- Scope: lexical binding chain with lazy bindings
- BuiltinRegistry: builtin functions, constants and units
"""

from .values import (
    Value,
    NumValue,
    BuiltinValue,
    FormatValue,
    DpValue,
    BaseValue,
    FnValue,
    VersionValue,
    FormattedValue,
    BuiltInFunction,
    MulHandling,
    expect_num,
    format_value,
    get_version,
    handle_num,
    handle_two_nums,
)

from .context import (
    Binding,
    Scope,
)

from .builtins import (
    BuiltinRegistry,
    get_builtin_registry,
    resolve_identifier,
)

from .interpreter import (
    Context,
    EvaluationResult,
    Interpreter,
    evaluate,
    evaluate_expr,
)

__all__ = [
    "Value",
    "NumValue",
    "BuiltinValue",
    "FormatValue",
    "DpValue",
    "BaseValue",
    "FnValue",
    "VersionValue",
    "FormattedValue",
    "BuiltInFunction",
    "MulHandling",
    "expect_num",
    "format_value",
    "get_version",
    "handle_num",
    "handle_two_nums",
    "Binding",
    "Scope",
    "BuiltinRegistry",
    "get_builtin_registry",
    "resolve_identifier",
    "Context",
    "EvaluationResult",
    "Interpreter",
    "evaluate",
    "evaluate_expr",
]
