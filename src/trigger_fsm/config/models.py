"""Dataclass definitions for application configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Mapping, Optional, Sequence


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    filepath: Path = Path("logs/trigger_fsm.log")
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    console: bool = False

    def resolved_path(self) -> Path:
        path = self.filepath if isinstance(self.filepath, Path) else Path(self.filepath)
        return path.expanduser().resolve()


@dataclass(frozen=True)
class RuleConfig:
    """One transition rule, hooks referenced by registry name."""

    source: str
    trigger: str
    target: str
    guard: Optional[str] = None
    action: Optional[str] = None


@dataclass(frozen=True)
class MachineConfig:
    """File-based machine definition."""

    name: str = "machine"
    initial: str = ""
    states: Sequence[str] = ()
    triggers: Sequence[str] = ()
    terminal: Sequence[str] = ()
    labels: Mapping[str, str] = field(default_factory=dict)
    rules: Sequence[RuleConfig] = ()
    duplicate_policy: Literal["reject", "guarded", "replace"] = "guarded"

    def label_for(self, value: str) -> str:
        return self.labels.get(value, value)


@dataclass(frozen=True)
class Config:
    """Root configuration object."""

    machine: Optional[MachineConfig] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)
