"""Trigger-driven machine instance."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Iterable, MutableSequence, Optional

from .display import describe
from .errors import ActionError, NoTransitionError, TransitionError
from .lifecycle import EngineLifecycle
from .model import Rule, State, TransitionResult, Trigger
from .table import TransitionTable

logger = logging.getLogger("fsm.machine")

Listener = Callable[[TransitionResult], None]


class Machine:
    """Holds the current state of one instance and applies triggers to it.

    The table is shared and read-only; the machine exclusively owns its
    current state. ``fire`` calls on one machine must be serialized by the
    caller, the machine does no locking of its own.

    Transition order on success: the state is committed, the rule action
    runs, then the target's entry hooks, then listeners are notified. Hooks
    always observe the machine in its new state, and a failing hook cannot
    roll the transition back. When the action raises, the entry hooks are
    skipped and the failure is reported as :class:`ActionError`. Listener
    exceptions are logged and never reach the caller.
    """

    def __init__(
        self,
        table: TransitionTable,
        initial: State,
        context: Any = None,
        history_size: int = 64,
        name: str = "machine",
    ) -> None:
        if not isinstance(table, TransitionTable):
            raise TypeError("Machine requires a finalized TransitionTable")
        if not table.knows_state(initial):
            raise ValueError(f"Unknown initial state '{describe(initial)}'")

        self.name = name
        self.context = context
        self._table = table
        self._initial = initial
        self._current = initial
        self._listeners: MutableSequence[Listener] = []
        self._history: Deque[TransitionResult] = deque(maxlen=history_size)
        self._lifecycle = self._start_lifecycle()

    @property
    def table(self) -> TransitionTable:
        return self._table

    @property
    def current_state(self) -> State:
        """Return the state of the last committed transition."""
        return self._current

    @property
    def initial_state(self) -> State:
        return self._initial

    @property
    def halted(self) -> bool:
        """Return True once a terminal state was entered."""
        return self._lifecycle.has_halted

    @property
    def lifecycle(self) -> str:
        """Return the engine lifecycle state id: ``idle``, ``ready`` or ``halted``."""
        return self._lifecycle.state_id

    def add_listener(self, listener: Listener) -> None:
        """Register a listener that receives TransitionResult notifications."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Remove a previously registered listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def fire(self, trigger: Trigger) -> State:
        """Apply ``trigger`` and return the new current state.

        Raises :class:`NoTransitionError` (state unchanged) when no rule
        matches, and :class:`ActionError` (state already changed) when the
        action or an entry hook fails. Exceptions raised by guards propagate
        untouched.
        """
        result = self._apply(trigger)
        if result.error is not None:
            raise result.error
        return result.next_state

    def dispatch(self, trigger: Trigger) -> TransitionResult:
        """Apply ``trigger`` and report the outcome as a value instead of raising.

        Rejections and action failures land in ``result.error``. Guard
        exceptions still propagate.
        """
        return self._apply(trigger)

    def can_fire(self, trigger: Trigger) -> bool:
        """Return True if ``fire(trigger)`` would be accepted right now."""
        if self.halted:
            return False
        return self._select(self._current, trigger) is not None

    def available_triggers(self) -> tuple:
        """Return the triggers that have at least one rule out of the current state."""
        if self.halted:
            return ()
        return self._table.triggers_for(self._current)

    def history(self) -> Iterable[TransitionResult]:
        """Return an iterable snapshot of the transition history."""
        return tuple(self._history)

    def reset(self) -> None:
        """Return to the initial state, clearing a previous halt."""
        self._current = self._initial
        self._lifecycle = self._start_lifecycle()
        logger.info("%s reset to '%s'", self.name, describe(self._initial))

    # Internal helpers ------------------------------------------------------

    def _start_lifecycle(self) -> EngineLifecycle:
        lifecycle = EngineLifecycle(self.name)
        lifecycle.activate()
        if self._table.is_terminal(self._current):
            lifecycle.halt()
        return lifecycle

    def _select(self, state: State, trigger: Trigger) -> Optional[Rule]:
        for rule in self._table.match(state, trigger):
            if rule.allows(self.context):
                return rule
        return None

    def _apply(self, trigger: Trigger) -> TransitionResult:
        source = self._current

        if self.halted:
            return self._reject(NoTransitionError(source, trigger, halted=True))

        rule = self._select(source, trigger)
        if rule is None:
            return self._reject(NoTransitionError(source, trigger))

        self._current = rule.target
        logger.info(
            "%s: %s -> %s on %s",
            self.name,
            describe(source),
            describe(rule.target),
            describe(trigger),
        )
        if self._table.is_terminal(rule.target):
            self._lifecycle.halt()

        error: Optional[TransitionError] = None
        try:
            self._run_hooks(rule)
        except Exception as exc:
            logger.exception("%s: action failed after entering '%s'", self.name, describe(rule.target))
            error = ActionError(source, trigger, rule.target, original=exc)
            error.__cause__ = exc

        message = f"{describe(source)} -> {describe(rule.target)} on {describe(trigger)}"
        result = TransitionResult(
            previous_state=source,
            trigger=trigger,
            next_state=rule.target,
            accepted=True,
            error=error,
            message=message,
        )
        self._record(result)
        return result

    def _run_hooks(self, rule: Rule) -> None:
        if rule.action is not None:
            rule.action(rule.source, rule.trigger, rule.target)
        for hook in self._table.entry_hooks(rule.target):
            hook(rule.source, rule.trigger, rule.target)

    def _reject(self, error: NoTransitionError) -> TransitionResult:
        logger.warning("%s: %s", self.name, error)
        result = TransitionResult(
            previous_state=error.state,
            trigger=error.trigger,
            next_state=error.state,
            accepted=False,
            error=error,
            message=str(error),
        )
        self._record(result)
        return result

    def _record(self, result: TransitionResult) -> None:
        self._history.append(result)
        for listener in tuple(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("%s: listener failed", self.name)

    def __repr__(self) -> str:
        return f"Machine(name={self.name!r}, state={describe(self._current)!r}, lifecycle={self.lifecycle!r})"


__all__ = ["Listener", "Machine"]
