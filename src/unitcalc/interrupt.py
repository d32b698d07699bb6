"""
Cooperative cancellation.

Every potentially unbounded loop in the calculator polls an ``Interrupt``
and raises ``Interrupted`` as soon as it has been signaled. The host (the CLI,
a GUI, a server) owns the interrupt: it resets it before each top-level
evaluation and may set it from another thread or a signal handler. The core
never resets or clears it.
"""

import threading
from typing import Protocol, runtime_checkable

from .errors import Interrupted


@runtime_checkable
class Interrupt(Protocol):
    """Anything that can report whether the current computation should stop."""

    def should_interrupt(self) -> bool:
        ...


class NeverInterrupt:
    """An interrupt that is never signaled."""

    def should_interrupt(self) -> bool:
        return False


class InterruptFlag:
    """
    A resettable, thread-safe interrupt backed by ``threading.Event``.

    Usage:
        flag = InterruptFlag()
        flag.reset()
        # from a signal handler or another thread:
        flag.set()
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    def should_interrupt(self) -> bool:
        return self._event.is_set()


NEVER = NeverInterrupt()


def check_interrupt(interrupt: Interrupt) -> None:
    """Raise ``Interrupted`` if the interrupt has been signaled."""
    if interrupt.should_interrupt():
        raise Interrupted()
