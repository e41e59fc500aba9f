"""Services feeding triggers into machines."""

from .event_bus import TriggerBus
from .events import EventType, StopEvent, TriggerEvent
from .runner import MachineRunner

__all__ = [
    "EventType",
    "MachineRunner",
    "StopEvent",
    "TriggerBus",
    "TriggerEvent",
]
