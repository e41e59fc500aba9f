"""Text rendering for states, triggers and transition tables."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Hashable

if TYPE_CHECKING:
    from .table import TransitionTable


def describe(value: Hashable) -> str:
    """Return the display text for a state or trigger."""
    label = getattr(value, "label", None)
    if isinstance(label, str) and label:
        return label
    if isinstance(value, Enum):
        return value.name
    return str(value)


def render_table(table: "TransitionTable") -> str:
    """Render every rule of ``table`` as one line per rule."""
    lines: list[str] = []
    for state in table.states:
        marker = " [terminal]" if table.is_terminal(state) else ""
        lines.append(f"{describe(state)}{marker}")
        for rule in table.rules_for(state):
            flags = []
            if rule.guard is not None:
                flags.append("guarded")
            if rule.action is not None:
                flags.append("action")
            suffix = f" ({', '.join(flags)})" if flags else ""
            lines.append(f"  {describe(rule.trigger)} -> {describe(rule.target)}{suffix}")
    return "\n".join(lines)


__all__ = ["describe", "render_table"]
