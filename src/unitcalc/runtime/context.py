"""
Lexical scopes for the evaluator.

Manages variable bindings. Function arguments are bound lazily: the argument
expression is stored with the scope it came from and only evaluated the
first time the parameter is read (and at most once).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ..interrupt import Interrupt
from .values import Value


@dataclass
class Binding:
    """
    A variable binding, either already evaluated or deferred.

    ``thunk`` computes the value on first use; the result is cached so
    later reads (and every scope sharing the binding) see the same value.
    """
    value: Optional[Value] = None
    thunk: Optional[Callable[[Interrupt], Value]] = None

    def force(self, interrupt: Interrupt) -> Value:
        if self.value is None:
            self.value = self.thunk(interrupt)
            self.thunk = None
        return self.value


@dataclass
class Scope:
    """
    A single scope containing variable bindings.

    Scopes form a chain via the `parent` field for lexical scoping. A child
    never modifies its parent.
    """
    variables: Dict[str, Binding] = field(default_factory=dict)
    parent: Optional["Scope"] = None
    name: str = "anonymous"  # For debugging

    def lookup(self, name: str) -> Optional[Binding]:
        """Find the binding for a name in this scope or parent scopes."""
        scope = self
        while scope is not None:
            if name in scope.variables:
                return scope.variables[name]
            scope = scope.parent
        return None

    def get(self, name: str, interrupt: Interrupt) -> Optional[Value]:
        """Look up and force a variable in this scope or parent scopes."""
        binding = self.lookup(name)
        if binding is None:
            return None
        return binding.force(interrupt)

    def contains(self, name: str) -> bool:
        return self.lookup(name) is not None

    def set(self, name: str, value: Value) -> None:
        """Bind an evaluated value in this scope (shadowing parent if exists)."""
        self.variables[name] = Binding(value=value)

    def insert_variable(self, name: str, thunk: Callable[[Interrupt], Value]) -> None:
        """Bind a value that is computed on first use."""
        self.variables[name] = Binding(thunk=thunk)

    def create_nested_scope(self, name: str = "call") -> "Scope":
        return Scope(parent=self, name=name)

    def snapshot(self) -> "Scope":
        """
        Return a detached copy of the visible bindings.

        Later changes to this chain (for example new top-level assignments)
        are not seen by the copy.
        """
        chain = []
        scope = self
        while scope is not None:
            chain.append(scope)
            scope = scope.parent
        variables: Dict[str, Binding] = {}
        for scope in reversed(chain):
            variables.update(scope.variables)
        return Scope(variables=variables, name=f"{self.name}-snapshot")
