"""Thread-safe bus feeding triggers to a machine runner."""

from __future__ import annotations

import logging
import queue
from typing import Hashable, Optional

from .events import StopEvent, TriggerEvent

logger = logging.getLogger("fsm.trigger_bus")


class TriggerBus:
    """Simple publish/consume queue of trigger and stop events."""

    def __init__(self, maxsize: int = 256) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)

    def publish(self, event: object) -> bool:
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.warning("Trigger bus queue full; dropping event %s", event)
            return False
        return True

    def publish_trigger(self, trigger: Hashable) -> bool:
        return self.publish(TriggerEvent(trigger=trigger))

    def get(self, timeout: Optional[float] = None) -> object:
        return self._queue.get(timeout=timeout)

    def get_nowait(self) -> object:
        return self._queue.get_nowait()

    def stop(self, reason: str | None = None) -> None:
        # Blocks when full so a stop request is never dropped.
        self._queue.put(StopEvent(reason=reason))

    def __len__(self) -> int:
        return self._queue.qsize()
