"""Transition table and its builder."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .display import describe
from .errors import (
    DuplicateRuleError,
    TableBuildError,
    TableSealedError,
    UnknownStateError,
    UnknownTriggerError,
)
from .model import Action, DuplicatePolicy, EntryHook, Guard, Rule, State, Trigger

logger = logging.getLogger("fsm.table")


class TransitionTable:
    """Immutable mapping from state to its ordered rules.

    Built once by :class:`TransitionTableBuilder` and shared read-only by any
    number of machines.
    """

    __slots__ = ("_rules", "_states", "_triggers", "_terminal", "_entry_hooks")

    def __init__(
        self,
        rules: Mapping[State, Sequence[Rule]],
        states: Sequence[State],
        triggers: Sequence[Trigger],
        terminal: Iterable[State] = (),
        entry_hooks: Optional[Mapping[State, Sequence[EntryHook]]] = None,
    ) -> None:
        self._rules = MappingProxyType({state: tuple(items) for state, items in rules.items()})
        self._states = tuple(states)
        self._triggers = tuple(triggers)
        self._terminal = frozenset(terminal)
        self._entry_hooks = MappingProxyType(
            {state: tuple(hooks) for state, hooks in (entry_hooks or {}).items()}
        )

    @property
    def states(self) -> tuple:
        """Every known state, in declaration or first-use order."""
        return self._states

    @property
    def triggers(self) -> tuple:
        return self._triggers

    @property
    def terminal_states(self) -> frozenset:
        return self._terminal

    def rules_for(self, state: State) -> tuple[Rule, ...]:
        return self._rules.get(state, ())

    def match(self, state: State, trigger: Trigger) -> tuple[Rule, ...]:
        """Return the rules of ``state`` listening to ``trigger``, in order."""
        return tuple(rule for rule in self.rules_for(state) if rule.trigger == trigger)

    def triggers_for(self, state: State) -> tuple:
        seen: List[Trigger] = []
        for rule in self.rules_for(state):
            if rule.trigger not in seen:
                seen.append(rule.trigger)
        return tuple(seen)

    def has_rule(self, state: State, trigger: Trigger) -> bool:
        return any(rule.trigger == trigger for rule in self.rules_for(state))

    def is_terminal(self, state: State) -> bool:
        return state in self._terminal

    def knows_state(self, state: State) -> bool:
        return state in self._states

    def entry_hooks(self, state: State) -> tuple[EntryHook, ...]:
        return self._entry_hooks.get(state, ())

    def __iter__(self) -> Iterator[Rule]:
        for state in self._states:
            yield from self.rules_for(state)

    def __len__(self) -> int:
        return sum(len(items) for items in self._rules.values())

    def __repr__(self) -> str:
        return f"TransitionTable(states={len(self._states)}, rules={len(self)})"


class TransitionTableBuilder:
    """Collects rules and produces a :class:`TransitionTable`.

    ``states`` and ``triggers`` optionally close the set of valid values (an
    ``Enum`` class or any iterable). ``policy`` decides what happens when a
    second rule is added for an existing (state, trigger) pair:

    * ``REJECT``: always an error.
    * ``GUARDED``: allowed while every earlier rule for the pair is guarded;
      at fire time the first guard-passing rule in insertion order wins.
    * ``REPLACE``: the new rule replaces the earlier ones.

    Any build error aborts the builder; ``finalize`` then refuses to produce
    a table.
    """

    def __init__(
        self,
        states: Optional[Iterable[State]] = None,
        triggers: Optional[Iterable[Trigger]] = None,
        policy: DuplicatePolicy = DuplicatePolicy.GUARDED,
    ) -> None:
        self._declared_states = tuple(states) if states is not None else None
        self._declared_triggers = tuple(triggers) if triggers is not None else None
        self._policy = policy
        self._rules: Dict[State, List[Rule]] = {}
        self._seen_states: List[State] = list(self._declared_states or ())
        self._seen_triggers: List[Trigger] = list(self._declared_triggers or ())
        self._terminal: List[State] = []
        self._entry_hooks: Dict[State, List[EntryHook]] = {}
        self._sealed = False
        self._failure: Optional[TableBuildError] = None

    @property
    def policy(self) -> DuplicatePolicy:
        return self._policy

    def add_rule(
        self,
        source: State,
        trigger: Trigger,
        target: State,
        guard: Optional[Guard] = None,
        action: Optional[Action] = None,
        replace: bool = False,
    ) -> "TransitionTableBuilder":
        """Append a rule for ``source``; returns the builder for chaining."""
        self._ensure_open()
        self._validate(self._check_state, source)
        self._validate(self._check_state, target)
        self._validate(self._check_trigger, trigger)

        rule = Rule(source=source, trigger=trigger, target=target, guard=guard, action=action)
        rules = self._rules.setdefault(source, [])
        positions = [index for index, existing in enumerate(rules) if existing.trigger == trigger]

        if positions and (replace or self._policy is DuplicatePolicy.REPLACE):
            first = positions[0]
            for index in reversed(positions):
                del rules[index]
            rules.insert(first, rule)
            self._remember(source, trigger, target)
            logger.debug("Replaced rule %s", rule)
            return self

        if positions:
            shadowing = any(not rules[index].guarded for index in positions)
            if self._policy is DuplicatePolicy.REJECT or shadowing:
                self._abort(DuplicateRuleError(source, trigger))

        rules.append(rule)
        self._remember(source, trigger, target)
        logger.debug("Added rule %s", rule)
        return self

    def declare_terminal(self, *states: State) -> "TransitionTableBuilder":
        """Mark states that permanently halt a machine once entered."""
        self._ensure_open()
        for state in states:
            self._validate(self._check_state, state)
            if state not in self._terminal:
                self._terminal.append(state)
            self._remember_state(state)
        return self

    def on_enter(self, state: State, hook: EntryHook) -> "TransitionTableBuilder":
        """Run ``hook(source, trigger, target)`` after each transition into ``state``."""
        self._ensure_open()
        self._validate(self._check_state, state)
        self._entry_hooks.setdefault(state, []).append(hook)
        self._remember_state(state)
        return self

    def finalize(self) -> TransitionTable:
        """Seal the builder and return the immutable table."""
        self._ensure_open()
        for state in self._terminal:
            if self._rules.get(state):
                self._abort(
                    TableBuildError(f"Terminal state '{describe(state)}' cannot have outgoing rules.")
                )

        self._sealed = True
        table = TransitionTable(
            rules=self._rules,
            states=self._seen_states,
            triggers=self._seen_triggers,
            terminal=self._terminal,
            entry_hooks=self._entry_hooks,
        )
        logger.info("Transition table finalized: %d states, %d rules", len(table.states), len(table))
        return table

    # Internal helpers ------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._failure is not None:
            raise TableBuildError("Table construction was aborted.") from self._failure
        if self._sealed:
            raise TableSealedError("Transition table already finalized.")

    def _abort(self, error: TableBuildError) -> None:
        self._failure = error
        logger.error("Table construction aborted: %s", error)
        raise error

    def _validate(self, check, value) -> None:
        try:
            check(value)
        except TableBuildError as exc:
            self._abort(exc)

    def _check_state(self, state: State) -> None:
        if self._declared_states is not None and state not in self._declared_states:
            raise UnknownStateError(state)

    def _check_trigger(self, trigger: Trigger) -> None:
        if self._declared_triggers is not None and trigger not in self._declared_triggers:
            raise UnknownTriggerError(trigger)

    def _remember(self, source: State, trigger: Trigger, target: State) -> None:
        self._remember_state(source)
        self._remember_state(target)
        if trigger not in self._seen_triggers:
            self._seen_triggers.append(trigger)

    def _remember_state(self, state: State) -> None:
        if state not in self._seen_states:
            self._seen_states.append(state)


def build_table(
    states: Optional[Iterable[State]] = None,
    triggers: Optional[Iterable[Trigger]] = None,
    policy: DuplicatePolicy = DuplicatePolicy.GUARDED,
) -> TransitionTableBuilder:
    """Start building a transition table."""
    return TransitionTableBuilder(states=states, triggers=triggers, policy=policy)


__all__ = ["TransitionTable", "TransitionTableBuilder", "build_table"]
