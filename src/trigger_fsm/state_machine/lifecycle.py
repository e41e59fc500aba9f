"""Meta-level lifecycle of a running machine."""

from __future__ import annotations

import logging

from statemachine import State, StateMachine

logger = logging.getLogger("fsm.lifecycle")


class EngineLifecycle(StateMachine):
    """Tracks whether a machine is idle, ready to accept triggers, or halted."""

    idle = State("Idle", initial=True)
    ready = State("Ready")
    halted = State("Halted", final=True)

    activate = idle.to(ready)
    halt = ready.to(halted)

    def __init__(self, owner: str = "machine") -> None:
        self.owner = owner
        super().__init__()

    def on_enter_ready(self) -> None:
        logger.debug("%s: ready", self.owner)

    def on_enter_halted(self) -> None:
        logger.info("%s: halted in terminal state", self.owner)

    @property
    def state_id(self) -> str:
        return self.current_state.id

    @property
    def accepts_triggers(self) -> bool:
        return self.state_id == "ready"

    @property
    def has_halted(self) -> bool:
        return self.state_id == "halted"


__all__ = ["EngineLifecycle"]
