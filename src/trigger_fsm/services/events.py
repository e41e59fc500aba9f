"""Events carried on the trigger bus."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Hashable


class EventType(Enum):
    TRIGGER = auto()
    STOP = auto()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TriggerEvent:
    """Request to fire ``trigger`` into the runner's machine."""

    trigger: Hashable
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.TRIGGER)


@dataclass(frozen=True)
class StopEvent:
    """Asks the runner loop to exit, with an optional reason."""

    reason: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    type: EventType = field(init=False, default=EventType.STOP)
