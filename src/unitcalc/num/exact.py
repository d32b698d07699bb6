"""
Exactness tracking.

``Exact`` pairs a value with a flag saying whether it is guaranteed to equal
the mathematically precise result. Combinators take the conjunction of the
operand flags, so call sites never branch on exactness themselves.
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


@dataclass(frozen=True)
class Exact(Generic[T]):
    value: T
    exact: bool = True

    def map(self, fn: Callable[[T], U]) -> "Exact[U]":
        """Apply an exactness-preserving function."""
        return Exact(fn(self.value), self.exact)

    def map2(self, other: "Exact[U]", fn: Callable[[T, U], V]) -> "Exact[V]":
        """Combine with another value through an exactness-preserving function."""
        return Exact(fn(self.value, other.value), self.exact and other.exact)

    def then(self, fn: Callable[[T], "Exact[U]"]) -> "Exact[U]":
        """Apply a function that reports its own exactness."""
        result = fn(self.value)
        return Exact(result.value, self.exact and result.exact)

    def then2(self, other: "Exact[U]", fn: Callable[[T, U], "Exact[V]"]) -> "Exact[V]":
        result = fn(self.value, other.value)
        return Exact(result.value, self.exact and other.exact and result.exact)

    def make_approximate(self) -> "Exact[T]":
        return Exact(self.value, False)


def approx(value: T) -> Exact[T]:
    return Exact(value, False)
