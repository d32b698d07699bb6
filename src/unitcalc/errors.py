"""
Calculator-specific exceptions and error handling.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Numeric kernel errors
- E3xx: Unit and dimension errors
- E4xx: Evaluation errors
- E5xx: Formatting errors
- E6xx: Configuration errors

Every user-facing failure is a ``CalcError``. Cancellation is reported with
``Interrupted``, which deliberately sits outside that hierarchy so callers
can tell "the computation was stopped" apart from "the computation failed".
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .tokens import SourceSpan


@dataclass
class Diagnostic:
    """A single error message with an optional source location."""
    code: str                       # E001, E201, etc.
    message: str                    # Human-readable message
    span: Optional[SourceSpan] = None
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        parts = []
        if self.span is not None:
            parts.append(f"{self.span.start}: error[{self.code}]: {self.message}")
        else:
            parts.append(f"error[{self.code}]: {self.message}")
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        result = {
            "code": self.code,
            "message": self.message,
            "hints": self.hints,
        }
        if self.span is not None:
            result["range"] = {
                "start": self.span.start.offset,
                "end": self.span.end.offset,
            }
        return result


class CalcError(Exception):
    """Base exception for user-facing calculator errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return self.diagnostic.message


class LexerError(CalcError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(CalcError):
    """Error during parsing (E1xx)."""
    pass


class NumericError(CalcError):
    """Error raised by the bignum, rational or real/complex layers (E2xx)."""
    pass


class UnitError(CalcError):
    """Error raised by the unit and dimension system (E3xx)."""
    pass


class EvaluationError(CalcError):
    """Error raised while evaluating an expression tree (E4xx)."""
    pass


class FormattingError(CalcError):
    """Error raised while rendering a value (E5xx)."""
    pass


class ConfigError(CalcError):
    """Error raised while loading configuration (E6xx)."""
    pass


class Interrupted(Exception):
    """
    Raised when the interrupt signal is observed mid-computation.

    Not a ``CalcError``: an interrupted evaluation has no user-facing error
    message and must never be reported as a failed computation.
    """

    def __init__(self) -> None:
        super().__init__("Interrupted")


def _error(cls: type, code: str, message: str, span: SourceSpan = None,
           hints: List[str] = None) -> CalcError:
    return cls(Diagnostic(code=code, message=message, span=span, hints=hints or []))


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan) -> LexerError:
    """E001: Unexpected character."""
    return _error(LexerError, "E001", f"Unexpected character '{char}'", span)


def error_invalid_number_literal(text: str, span: SourceSpan) -> LexerError:
    """E002: Invalid number literal."""
    return _error(LexerError, "E002", f"Invalid number literal '{text}'", span)


def error_invalid_digit(digit: str, base: int, span: SourceSpan) -> LexerError:
    """E003: Digit is not valid in the literal's base."""
    return _error(LexerError, "E003", f"Digit '{digit}' is not valid in base {base}", span)


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan) -> ParserError:
    """E101: Unexpected token."""
    return _error(ParserError, "E101", f"Expected {expected}, found {found}", span)


def error_unexpected_eof(expected: str, span: SourceSpan) -> ParserError:
    """E102: Unexpected end of input."""
    return _error(ParserError, "E102", f"Unexpected end of input, expected {expected}", span)


def error_invalid_assignment(span: SourceSpan) -> ParserError:
    """E103: Assignment to something other than a name."""
    return _error(ParserError, "E103", "Can only assign to a variable name", span)


# --- Numeric kernel error codes ---

def error_divide_by_zero() -> NumericError:
    """E201: Division by zero."""
    return _error(NumericError, "E201", "Division by zero")


def error_value_too_large(max_allowed: Any) -> NumericError:
    """E202: Value exceeds a fixed-width host integer."""
    return _error(NumericError, "E202",
                  f"Value must be less than or equal to {max_allowed}")


def error_exponent_too_large() -> NumericError:
    """E203: Exponent magnitude beyond the supported bound."""
    return _error(NumericError, "E203", "Exponent too large")


def error_zero_to_the_power_of_zero() -> NumericError:
    """E204: 0^0."""
    return _error(NumericError, "E204", "Zero to the power of zero is undefined")


def error_subtraction_underflow() -> NumericError:
    """E205: Unsigned subtraction with a larger subtrahend."""
    return _error(NumericError, "E205",
                  "Subtraction underflow: result would be negative")


def error_base_out_of_range(base: Any) -> NumericError:
    """E206: Numeral base outside 2..=36."""
    return _error(NumericError, "E206",
                  f"Base must be at least 2 and at most 36 (got {base})")


def error_invalid_base_prefix(prefix: str) -> NumericError:
    """E207: Unknown base prefix."""
    return _error(NumericError, "E207",
                  f"Invalid base prefix '{prefix}': expected one of 0x, 0o or 0b")


def error_not_an_integer(what: str = "Value") -> NumericError:
    """E208: An integer was required."""
    return _error(NumericError, "E208", f"{what} must be an integer")


def error_negative_value(what: str = "Value") -> NumericError:
    """E209: A non-negative value was required."""
    return _error(NumericError, "E209", f"{what} must not be negative")


def error_domain(function: str, reason: str) -> NumericError:
    """E210: Argument outside a function's domain."""
    return _error(NumericError, "E210", f"{function}: {reason}")


# --- Unit error codes ---

def error_incompatible_units(lhs: str, rhs: str) -> UnitError:
    """E301: Dimension mismatch."""
    lhs = lhs or "unitless"
    rhs = rhs or "unitless"
    return _error(UnitError, "E301", f"Units '{lhs}' and '{rhs}' are incompatible")


def error_expected_unitless(unit: str) -> UnitError:
    """E302: Operation requires a dimensionless value."""
    return _error(UnitError, "E302", f"Expected a unitless number, found '{unit}'")


def error_unit_exponent(unit: str) -> UnitError:
    """E303: Non-rational exponent applied to a dimensioned value."""
    return _error(UnitError, "E303",
                  f"Cannot raise '{unit}' to a non-rational or inexact power")


# --- Evaluation error codes ---

def error_not_a_function(text: str) -> EvaluationError:
    """E401: Implicit multiplication is not allowed here."""
    return _error(EvaluationError, "E401", f"{text} is not a function")


def error_not_a_function_or_number(text: str) -> EvaluationError:
    """E402: Receiver cannot be applied to anything."""
    return _error(EvaluationError, "E402", f"'{text}' is not a function or a number")


def error_expected_number() -> EvaluationError:
    """E403: A numeric value was required."""
    return _error(EvaluationError, "E403", "Expected a number")


def error_unknown_identifier(name: str) -> EvaluationError:
    """E404: Identifier is neither bound nor built in."""
    return _error(EvaluationError, "E404", f"Unknown identifier '{name}'")


def error_cannot_invert(name: str) -> EvaluationError:
    """E405: Function has no defined inverse."""
    return _error(EvaluationError, "E405", f"Unable to invert function {name}")


def error_invalid_base_value() -> EvaluationError:
    """E406: Base argument is not a small integer."""
    return _error(EvaluationError, "E406", "Unable to convert number to a valid base")


def error_invalid_conversion(target: str) -> EvaluationError:
    """E407: Right-hand side of '->' is not a conversion target."""
    return _error(EvaluationError, "E407", f"Cannot convert to '{target}'")


def error_recursion_limit() -> EvaluationError:
    """E408: Expression nests or recurses too deeply."""
    return _error(EvaluationError, "E408", "Maximum recursion depth exceeded")


# --- Formatting error codes ---

def error_not_exact() -> FormattingError:
    """E501: Exact fraction requested for an approximate value."""
    return _error(FormattingError, "E501",
                  "Cannot format an approximate value as an exact fraction")


# --- Configuration error codes ---

def error_config_unknown_key(key: str) -> ConfigError:
    """E601: Unknown configuration key."""
    return _error(ConfigError, "E601", f"Unknown configuration key '{key}'")


def error_config_invalid_value(key: str, reason: str) -> ConfigError:
    """E602: Configuration value has the wrong type or range."""
    return _error(ConfigError, "E602", f"Invalid value for '{key}': {reason}")


def error_config_unreadable(path: str, reason: str) -> ConfigError:
    """E603: Configuration file could not be parsed."""
    return _error(ConfigError, "E603", f"Unable to read configuration '{path}': {reason}")
