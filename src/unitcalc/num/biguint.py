"""
Unsigned arbitrary-precision integers.

``BigUint`` is the bottom layer of the numeric tower. Python's ``int`` is the
limb storage, so the canonical-form invariant (no leading zero limbs, a unique
representation per value) holds by construction; ``limbs()`` exposes the
little-endian 64-bit view when one is needed.

Operations that loop (powers, gcd, roots, digit conversion) poll the
interrupt on every step.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..errors import (
    error_divide_by_zero,
    error_invalid_digit,
    error_subtraction_underflow,
    error_value_too_large,
)
from ..interrupt import NEVER, Interrupt, check_interrupt


LIMB_BITS = 64
LIMB_MASK = (1 << LIMB_BITS) - 1

# Largest value accepted by try_as_usize (a 64-bit host integer)
USIZE_MAX = (1 << 64) - 1

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True, order=True)
class BigUint:
    """An immutable non-negative integer of any size."""
    value: int = 0

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"BigUint requires an int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError("BigUint cannot hold a negative value")

    @classmethod
    def from_limbs(cls, limbs: Sequence[int]) -> "BigUint":
        """Build a value from little-endian 64-bit limbs."""
        value = 0
        for limb in reversed(limbs):
            if not 0 <= limb <= LIMB_MASK:
                raise ValueError(f"limb out of range: {limb}")
            value = (value << LIMB_BITS) | limb
        return cls(value)

    def limbs(self) -> List[int]:
        """Return the little-endian 64-bit limbs, without trailing zero limbs."""
        result = []
        value = self.value
        while value:
            result.append(value & LIMB_MASK)
            value >>= LIMB_BITS
        return result

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.format(10)

    def is_zero(self) -> bool:
        return self.value == 0

    def is_even(self) -> bool:
        return self.value & 1 == 0

    def bit_length(self) -> int:
        return self.value.bit_length()

    # --- Arithmetic ---

    def add(self, other: "BigUint") -> "BigUint":
        return BigUint(self.value + other.value)

    def sub(self, other: "BigUint") -> "BigUint":
        """Subtract, failing if ``other`` is larger than ``self``."""
        if other.value > self.value:
            raise error_subtraction_underflow()
        return BigUint(self.value - other.value)

    def mul(self, other: "BigUint") -> "BigUint":
        return BigUint(self.value * other.value)

    def divmod(self, other: "BigUint") -> Tuple["BigUint", "BigUint"]:
        if other.is_zero():
            raise error_divide_by_zero()
        q, r = divmod(self.value, other.value)
        return BigUint(q), BigUint(r)

    def pow(self, exponent: "BigUint", interrupt: Interrupt = NEVER) -> "BigUint":
        """Exponentiation by squaring. ``0 ** 0`` is 1 at this layer."""
        result = 1
        base = self.value
        exp = exponent.value
        while exp:
            check_interrupt(interrupt)
            if exp & 1:
                result *= base
            exp >>= 1
            if exp:
                base *= base
        return BigUint(result)

    def gcd(self, other: "BigUint", interrupt: Interrupt = NEVER) -> "BigUint":
        """Greatest common divisor by Euclid's algorithm."""
        a, b = self.value, other.value
        while b:
            check_interrupt(interrupt)
            a, b = b, a % b
        return BigUint(a)

    def nth_root(self, n: int, interrupt: Interrupt = NEVER) -> Tuple["BigUint", bool]:
        """
        Integer n-th root.

        Returns (floor(self ** (1/n)), exact) where ``exact`` tells whether the
        root is a perfect n-th power.
        """
        if n < 1:
            raise ValueError("root degree must be positive")
        value = self.value
        if value < 2 or n == 1:
            return self, True
        # Newton iteration from an over-estimate
        x = 1 << -(-value.bit_length() // n)
        while True:
            check_interrupt(interrupt)
            y = ((n - 1) * x + value // x ** (n - 1)) // n
            if y >= x:
                break
            x = y
        return BigUint(x), x ** n == value

    def try_as_usize(self, interrupt: Interrupt = NEVER) -> int:
        """Narrow to a 64-bit host integer, failing with the maximum allowed value."""
        check_interrupt(interrupt)
        if self.value > USIZE_MAX:
            raise error_value_too_large(USIZE_MAX)
        return self.value

    # --- Digit conversion ---

    def format(self, base: int = 10, interrupt: Interrupt = NEVER) -> str:
        """Render the digits of this value in ``base`` (2..=36), lowercase."""
        if not 2 <= base <= 36:
            raise ValueError(f"base out of range: {base}")
        value = self.value
        if value == 0:
            return "0"
        # Peel off chunks of digits that fit in a machine word, then expand
        # each chunk digit by digit.
        chunk_digits = 1
        while base ** (chunk_digits + 1) <= LIMB_MASK:
            chunk_digits += 1
        chunk = base ** chunk_digits
        chunks = []
        while value:
            check_interrupt(interrupt)
            value, rem = divmod(value, chunk)
            chunks.append(rem)
        out = []
        for idx, rem in enumerate(reversed(chunks)):
            digits = []
            while rem:
                rem, d = divmod(rem, base)
                digits.append(DIGITS[d])
            text = "".join(reversed(digits))
            out.append(text if idx == 0 else text.rjust(chunk_digits, "0"))
        return "".join(out)

    @classmethod
    def parse(cls, text: str, base: int = 10, interrupt: Interrupt = NEVER) -> "BigUint":
        """Parse digits in ``base``; underscores are ignored."""
        value = 0
        for ch in text:
            if ch == "_":
                continue
            check_interrupt(interrupt)
            digit = DIGITS.find(ch.lower())
            if digit < 0 or digit >= base:
                raise error_invalid_digit(ch, base, None)
            value = value * base + digit
        return cls(value)


ZERO = BigUint(0)
ONE = BigUint(1)
