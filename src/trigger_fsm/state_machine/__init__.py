"""State machine engine."""

from .display import describe, render_table
from .errors import (
    ActionError,
    DuplicateRuleError,
    FsmError,
    NoTransitionError,
    TableBuildError,
    TableSealedError,
    TransitionError,
    UnknownStateError,
    UnknownTriggerError,
)
from .hooks import HookRegistry
from .lifecycle import EngineLifecycle
from .machine import Machine
from .model import DuplicatePolicy, Rule, Symbol, TransitionResult
from .table import TransitionTable, TransitionTableBuilder, build_table

__all__ = [
    "ActionError",
    "DuplicatePolicy",
    "DuplicateRuleError",
    "EngineLifecycle",
    "FsmError",
    "HookRegistry",
    "Machine",
    "NoTransitionError",
    "Rule",
    "Symbol",
    "TableBuildError",
    "TableSealedError",
    "TransitionError",
    "TransitionResult",
    "TransitionTable",
    "TransitionTableBuilder",
    "UnknownStateError",
    "UnknownTriggerError",
    "build_table",
    "describe",
    "render_table",
]
