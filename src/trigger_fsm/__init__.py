"""Trigger-driven finite state machine engine."""

from __future__ import annotations

from .state_machine import (
    ActionError,
    DuplicatePolicy,
    DuplicateRuleError,
    FsmError,
    HookRegistry,
    Machine,
    NoTransitionError,
    Rule,
    Symbol,
    TableBuildError,
    TransitionError,
    TransitionResult,
    TransitionTable,
    TransitionTableBuilder,
    build_table,
    describe,
    render_table,
)

__version__ = "0.1.0"

__all__ = [
    "ActionError",
    "DuplicatePolicy",
    "DuplicateRuleError",
    "FsmError",
    "HookRegistry",
    "Machine",
    "NoTransitionError",
    "Rule",
    "Symbol",
    "TableBuildError",
    "TransitionError",
    "TransitionResult",
    "TransitionTable",
    "TransitionTableBuilder",
    "build_table",
    "describe",
    "render_table",
]
