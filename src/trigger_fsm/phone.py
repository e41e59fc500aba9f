"""Telephone call model used by the demo driver and the tests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .state_machine import HookRegistry, Machine, TransitionTable, build_table

logger = logging.getLogger("fsm.phone")


class PhoneState(Enum):
    OFF_HOOK = "off the hook"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ON_HOLD = "on hold"
    DESTROYED = "destroyed"

    @property
    def label(self) -> str:
        return self.value


class PhoneTrigger(Enum):
    CALL_DIALED = "call dialed"
    HUNG_UP = "hung up"
    CALL_CONNECTED = "call connected"
    PLACED_ON_HOLD = "placed on hold"
    TAKEN_OFF_HOLD = "taken off hold"
    LEFT_MESSAGE = "left message"
    PHONE_THROWN_INTO_WALL = "phone thrown into wall"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class PhoneContext:
    """Mutable caller mood consulted by the destruction guard."""

    angry: bool = False


def is_angry(context: object) -> bool:
    return bool(getattr(context, "angry", False))


def smash_phone(source: PhoneState, trigger: PhoneTrigger, target: PhoneState) -> None:
    logger.info("Phone breaks into a million pieces")


def announce_connecting(source: PhoneState, trigger: PhoneTrigger, target: PhoneState) -> None:
    logger.info("We are connecting...")


def build_phone_table(with_destruction: bool = True) -> TransitionTable:
    """Return the telephone transition table.

    ``with_destruction`` adds the guarded OnHold -> Destroyed rule, which only
    applies while the context is angry; Destroyed is terminal.
    """
    P, T = PhoneState, PhoneTrigger
    builder = (
        build_table(states=PhoneState, triggers=PhoneTrigger)
        .add_rule(P.OFF_HOOK, T.CALL_DIALED, P.CONNECTING)
        .add_rule(P.CONNECTING, T.HUNG_UP, P.OFF_HOOK)
        .add_rule(P.CONNECTING, T.CALL_CONNECTED, P.CONNECTED)
        .add_rule(P.CONNECTED, T.LEFT_MESSAGE, P.OFF_HOOK)
        .add_rule(P.CONNECTED, T.HUNG_UP, P.OFF_HOOK)
        .add_rule(P.CONNECTED, T.PLACED_ON_HOLD, P.ON_HOLD)
        .add_rule(P.ON_HOLD, T.TAKEN_OFF_HOLD, P.CONNECTED)
        .add_rule(P.ON_HOLD, T.HUNG_UP, P.OFF_HOOK)
        .on_enter(P.CONNECTING, announce_connecting)
    )
    if with_destruction:
        builder.add_rule(
            P.ON_HOLD,
            T.PHONE_THROWN_INTO_WALL,
            P.DESTROYED,
            guard=is_angry,
            action=smash_phone,
        )
        builder.declare_terminal(P.DESTROYED)
    return builder.finalize()


def phone_hooks(registry: HookRegistry | None = None) -> HookRegistry:
    """Register the telephone guard and actions for file-based definitions."""
    registry = registry if registry is not None else HookRegistry()
    registry.guards.register("angry", is_angry)
    registry.actions.register("smash_phone", smash_phone)
    registry.actions.register("announce_connecting", announce_connecting)
    return registry


def new_phone(context: PhoneContext | None = None, table: TransitionTable | None = None) -> Machine:
    """Create a phone machine starting off the hook."""
    return Machine(
        table if table is not None else build_phone_table(),
        PhoneState.OFF_HOOK,
        context=context if context is not None else PhoneContext(),
        name="phone",
    )


__all__ = [
    "PhoneContext",
    "PhoneState",
    "PhoneTrigger",
    "build_phone_table",
    "is_angry",
    "new_phone",
    "phone_hooks",
]
