"""Single consumer thread serializing triggers into one machine."""

from __future__ import annotations

import logging
import queue
import threading
from typing import List, Optional

from trigger_fsm.state_machine import Machine, TransitionResult, describe

from .event_bus import TriggerBus
from .events import StopEvent, TriggerEvent

logger = logging.getLogger("fsm.runner")


class MachineRunner:
    """Drains a :class:`TriggerBus` and dispatches each trigger into ``machine``.

    Any number of producer threads may publish to the bus; only the runner
    thread touches the machine, which keeps its ``fire`` calls serialized.
    """

    def __init__(self, machine: Machine, bus: Optional[TriggerBus] = None, poll_interval: float = 0.5) -> None:
        self.machine = machine
        self.bus = bus if bus is not None else TriggerBus()
        self.poll_interval = poll_interval
        self._results: List[TransitionResult] = []
        self._results_lock = threading.Lock()
        self._loop_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return self._loop_thread is not None and self._loop_thread.is_alive()

    @property
    def results(self) -> list[TransitionResult]:
        with self._results_lock:
            return list(self._results)

    def start(self) -> None:
        if self.running:
            raise RuntimeError("Runner already started")
        self._stop_event.clear()
        self._loop_thread = threading.Thread(
            target=self._event_loop, name=f"{self.machine.name}-runner", daemon=True
        )
        self._loop_thread.start()
        logger.info("Runner started for %s in state %s", self.machine.name, describe(self.machine.current_state))

    def submit(self, trigger) -> bool:
        return self.bus.publish_trigger(trigger)

    def stop(self, reason: str | None = None, timeout: float = 2.0) -> None:
        """Request a stop after already queued triggers and wait for the loop."""
        self.bus.stop(reason)
        self.join(timeout)
        logger.info("Runner stopped for %s", self.machine.name)

    def abort(self) -> None:
        """Exit the loop without draining queued triggers."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._loop_thread:
            self._loop_thread.join(timeout=timeout)

    def _event_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                event = self.bus.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

            if isinstance(event, StopEvent):
                logger.info("Runner received stop event: %s", event.reason)
                break

            self._dispatch_event(event)

    def _dispatch_event(self, event: object) -> None:
        if not isinstance(event, TriggerEvent):
            logger.debug("Unhandled event type: %s", type(event).__name__)
            return
        try:
            result = self.machine.dispatch(event.trigger)
        except Exception:
            logger.exception("Error while dispatching trigger: %s", describe(event.trigger))
            return
        with self._results_lock:
            self._results.append(result)
