"""Data structures describing rules and transition outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable, Optional

from .display import describe

State = Hashable
Trigger = Hashable
Guard = Callable[[Any], bool]
Action = Callable[[State, Trigger, State], None]
EntryHook = Callable[[State, Trigger, State], None]


class DuplicatePolicy(Enum):
    """How the builder treats a second rule for the same (state, trigger)."""

    REJECT = "reject"
    GUARDED = "guarded"
    REPLACE = "replace"


@dataclass(frozen=True)
class Symbol:
    """Named state or trigger for machines defined in files.

    Equality and hashing use ``name`` only; ``label`` is display text.
    """

    name: str
    label: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Rule:
    """One row of the transition table."""

    source: State
    trigger: Trigger
    target: State
    guard: Optional[Guard] = None
    action: Optional[Action] = None

    @property
    def guarded(self) -> bool:
        return self.guard is not None

    def allows(self, context: Any) -> bool:
        """Evaluate the guard against ``context``; unguarded rules always pass."""
        if self.guard is None:
            return True
        return bool(self.guard(context))

    def __str__(self) -> str:
        return f"{describe(self.source)} --{describe(self.trigger)}--> {describe(self.target)}"


@dataclass(frozen=True)
class TransitionResult:
    """Result of dispatching one trigger."""

    previous_state: State
    trigger: Trigger
    next_state: State
    accepted: bool
    error: Optional[Exception] = None
    message: str = ""

    @property
    def changed(self) -> bool:
        """Return True if the state was committed to a different value."""
        return self.accepted and self.previous_state != self.next_state

    @property
    def ok(self) -> bool:
        """Return True if the transition committed and its hooks succeeded."""
        return self.accepted and self.error is None


__all__ = [
    "Action",
    "DuplicatePolicy",
    "EntryHook",
    "Guard",
    "Rule",
    "State",
    "Symbol",
    "TransitionResult",
    "Trigger",
]
