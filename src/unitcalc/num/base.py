"""
Numeral bases for input and output.
"""

from dataclasses import dataclass
from typing import Optional

from ..errors import error_base_out_of_range, error_invalid_base_prefix


PREFIXES = {
    "0x": 16,
    "0o": 8,
    "0b": 2,
}


@dataclass(frozen=True)
class Base:
    """A base between 2 and 36, optionally displayed with its ``0x``-style prefix."""
    base: int = 10
    prefix: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.base, bool) or not isinstance(self.base, int) or not 2 <= self.base <= 36:
            raise error_base_out_of_range(self.base)

    @classmethod
    def from_plain_base(cls, base: int) -> "Base":
        return cls(base)

    @classmethod
    def from_prefix(cls, prefix: str) -> "Base":
        prefix = prefix.lower()
        if prefix not in PREFIXES:
            raise error_invalid_base_prefix(prefix)
        return cls(PREFIXES[prefix], prefix)

    def is_decimal(self) -> bool:
        return self.base == 10

    def __str__(self) -> str:
        return f"base {self.base}"


DECIMAL = Base(10)
