"""Exceptions raised while building tables and firing triggers."""

from __future__ import annotations

from typing import Hashable, Optional

from .display import describe


class FsmError(Exception):
    """Base class for every error raised by the engine."""


class TableBuildError(FsmError):
    """Transition table could not be built."""


class DuplicateRuleError(TableBuildError):
    """A second rule for the same (state, trigger) pair would be ambiguous."""

    def __init__(self, state: Hashable, trigger: Hashable) -> None:
        self.state = state
        self.trigger = trigger
        super().__init__(
            f"Duplicate rule for state '{describe(state)}' on trigger '{describe(trigger)}'."
        )


class TableSealedError(TableBuildError):
    """The builder was already finalized."""


class UnknownStateError(TableBuildError):
    def __init__(self, state: Hashable) -> None:
        self.state = state
        super().__init__(f"Unknown state '{describe(state)}'.")


class UnknownTriggerError(TableBuildError):
    def __init__(self, trigger: Hashable) -> None:
        self.trigger = trigger
        super().__init__(f"Unknown trigger '{describe(trigger)}'.")


class TransitionError(FsmError):
    """A trigger could not be applied cleanly."""


class NoTransitionError(TransitionError):
    """No rule (or no guard-passing rule) matched the trigger.

    The machine state is left unchanged. ``halted`` is set when the machine
    already sits in a terminal state.
    """

    def __init__(self, state: Hashable, trigger: Hashable, halted: bool = False) -> None:
        self.state = state
        self.trigger = trigger
        self.halted = halted
        reason = " (machine halted)" if halted else ""
        super().__init__(
            f"No transition from state '{describe(state)}' on trigger '{describe(trigger)}'{reason}."
        )


class ActionError(TransitionError):
    """An action or entry hook failed after the transition was committed.

    The machine is already in ``target``; the original exception is kept in
    ``original`` and chained as ``__cause__``.
    """

    def __init__(
        self,
        source: Hashable,
        trigger: Hashable,
        target: Hashable,
        original: Optional[BaseException] = None,
    ) -> None:
        self.source = source
        self.trigger = trigger
        self.target = target
        self.original = original
        super().__init__(
            f"Action failed on '{describe(source)}' -> '{describe(target)}' "
            f"via '{describe(trigger)}': {original}"
        )


__all__ = [
    "ActionError",
    "DuplicateRuleError",
    "FsmError",
    "NoTransitionError",
    "TableBuildError",
    "TableSealedError",
    "TransitionError",
    "UnknownStateError",
    "UnknownTriggerError",
]
