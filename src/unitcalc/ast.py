"""
Abstract Syntax Tree (AST) node definitions for calculator expressions.

The tree is produced by the parser (or built directly by an embedding
application) and consumed by the evaluator. Every node can render itself
back to surface syntax with ``format()``, which is how closures are
displayed.
"""

from dataclasses import dataclass

from .num.unit import Number


@dataclass(frozen=True)
class ParseOptions:
    """
    Options that change how ambiguous input is interpreted.

    With ``implicit_multiplication`` disabled, ``f(x)`` only ever means
    function application and never multiplication.
    """
    implicit_multiplication: bool = True


# =============================================================================
# Base Class
# =============================================================================

@dataclass(frozen=True)
class Expr:
    """Base class for all expressions."""

    def format(self) -> str:
        raise NotImplementedError(f"No formatter for {self.__class__.__name__}")

    def __str__(self) -> str:
        return self.format()


# =============================================================================
# Leaves
# =============================================================================

@dataclass(frozen=True)
class Num(Expr):
    """A numeric literal."""
    number: Number

    def format(self) -> str:
        return self.number.format().text


@dataclass(frozen=True)
class Ident(Expr):
    """A variable, constant, unit or builtin function name."""
    name: str

    def format(self) -> str:
        return self.name


@dataclass(frozen=True)
class Parens(Expr):
    inner: Expr

    def format(self) -> str:
        return f"({self.inner.format()})"


# =============================================================================
# Operators
# =============================================================================

@dataclass(frozen=True)
class UnaryMinus(Expr):
    operand: Expr

    def format(self) -> str:
        return f"-{self.operand.format()}"


@dataclass(frozen=True)
class UnaryPlus(Expr):
    operand: Expr

    def format(self) -> str:
        return f"+{self.operand.format()}"


@dataclass(frozen=True)
class BinaryExpr(Expr):
    """Base class for infix arithmetic."""
    left: Expr
    right: Expr

    symbol = "?"

    def format(self) -> str:
        return f"{self.left.format()} {self.symbol} {self.right.format()}"


@dataclass(frozen=True)
class Add(BinaryExpr):
    symbol = "+"


@dataclass(frozen=True)
class Sub(BinaryExpr):
    symbol = "-"


@dataclass(frozen=True)
class Mul(BinaryExpr):
    symbol = "*"


@dataclass(frozen=True)
class Div(BinaryExpr):
    symbol = "/"


@dataclass(frozen=True)
class Pow(BinaryExpr):
    symbol = "^"

    def format(self) -> str:
        return f"{self.left.format()}^{self.right.format()}"


# =============================================================================
# Application
# =============================================================================

@dataclass(frozen=True)
class Apply(Expr):
    """
    Juxtaposition: ``2 x``, ``sin x``, ``3 kg``.

    With ``only_apply`` the left side must be a function; a number on the
    left is then an error instead of a multiplication.
    """
    function: Expr
    argument: Expr
    only_apply: bool = False

    def format(self) -> str:
        return f"{self.function.format()} {self.argument.format()}"


@dataclass(frozen=True)
class ApplyFunctionCall(Expr):
    """Call syntax: ``f(x)``."""
    function: Expr
    argument: Expr

    def format(self) -> str:
        argument = self.argument
        if isinstance(argument, Parens):
            argument = argument.inner
        return f"{self.function.format()}({argument.format()})"


@dataclass(frozen=True)
class Convert(Expr):
    """``value -> target``, also written with ``to`` or ``as``."""
    value: Expr
    target: Expr

    def format(self) -> str:
        return f"{self.value.format()} -> {self.target.format()}"


@dataclass(frozen=True)
class Fn(Expr):
    """A single-parameter lambda: ``\\x.body``."""
    param: str
    body: Expr

    def format(self) -> str:
        if "." in self.param:
            return f"{self.param}:{self.body.format()}"
        return f"\\{self.param}.{self.body.format()}"


@dataclass(frozen=True)
class Assign(Expr):
    """``name = value``; evaluates to the assigned value."""
    name: str
    value: Expr

    def format(self) -> str:
        return f"{self.name} = {self.value.format()}"
