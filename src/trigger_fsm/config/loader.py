"""Configuration loader utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from trigger_fsm.state_machine import (
    DuplicatePolicy,
    HookRegistry,
    Machine,
    Symbol,
    TransitionTable,
    build_table,
)

from .models import Config, LoggingConfig, MachineConfig, RuleConfig

logger = logging.getLogger("fsm.config")


def _normalize_path(path: Path | str) -> Path:
    return path if isinstance(path, Path) else Path(path)


def _load_raw_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    suffix = config_path.suffix.lower()
    with config_path.open("r", encoding="utf-8") as stream:
        if suffix in {".yaml", ".yml"}:
            raw = yaml.safe_load(stream)
        elif suffix == ".json":
            raw = json.load(stream)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping, got {type(raw).__name__}")
    return raw


def load_config(config_path: Path | str) -> Config:
    """Load configuration file and construct Config dataclass."""

    config_path = _normalize_path(config_path)
    raw = _load_raw_config(config_path)

    logging_raw = dict(raw.get("logging") or {})
    log_path = logging_raw.get("filepath")
    if log_path:
        # Relative log paths follow the config file, not the working directory.
        logging_raw["filepath"] = (config_path.parent / log_path).resolve()
    logging_config = LoggingConfig(**logging_raw)

    machine_raw = raw.get("machine")
    machine = parse_machine_config(machine_raw) if machine_raw is not None else None

    logger.debug("Loaded configuration from %s", config_path)
    return Config(machine=machine, logging=logging_config)


def parse_machine_config(raw: Any) -> MachineConfig:
    """Validate a raw ``machine`` mapping and build a MachineConfig."""
    if not isinstance(raw, dict):
        raise ValueError("Machine definition must be a mapping.")

    data = dict(raw)
    rules_raw = data.pop("rules", None) or []
    if not isinstance(rules_raw, list):
        raise ValueError("Machine 'rules' must be a list.")

    initial = data.get("initial")
    if not initial:
        raise ValueError("Machine definition requires an 'initial' state.")

    policy = str(data.get("duplicate_policy", "guarded")).lower()
    if policy not in {item.value for item in DuplicatePolicy}:
        raise ValueError(f"Unknown duplicate_policy: {policy}")

    return MachineConfig(
        name=str(data.get("name", "machine")),
        initial=str(initial),
        states=tuple(str(item) for item in data.get("states") or ()),
        triggers=tuple(str(item) for item in data.get("triggers") or ()),
        terminal=tuple(str(item) for item in data.get("terminal") or ()),
        labels={str(key): str(value) for key, value in (data.get("labels") or {}).items()},
        rules=tuple(_parse_rule(item, index) for index, item in enumerate(rules_raw)),
        duplicate_policy=policy,  # type: ignore[arg-type]
    )


def _parse_rule(raw: Any, index: int) -> RuleConfig:
    if isinstance(raw, (list, tuple)):
        if len(raw) not in (3, 4, 5):
            raise ValueError(f"Rule #{index} must be [from, trigger, to, guard?, action?].")
        values = [None if item is None else str(item) for item in raw]
        values += [None] * (5 - len(values))
        return RuleConfig(*values)  # type: ignore[arg-type]

    if isinstance(raw, dict):
        try:
            source = raw.get("from", raw.get("source"))
            target = raw.get("to", raw.get("target"))
            trigger = raw["trigger"]
        except KeyError as exc:
            raise ValueError(f"Rule #{index} is missing 'trigger'.") from exc
        if source is None or target is None:
            raise ValueError(f"Rule #{index} must include 'from' and 'to' states.")
        guard = raw.get("guard")
        action = raw.get("action")
        return RuleConfig(
            source=str(source),
            trigger=str(trigger),
            target=str(target),
            guard=str(guard) if guard is not None else None,
            action=str(action) if action is not None else None,
        )

    raise ValueError(f"Rule #{index} has unsupported type {type(raw).__name__}.")


def build_table_from_config(
    config: MachineConfig, hooks: Optional[HookRegistry] = None
) -> TransitionTable:
    """Build a transition table, resolving hook names through ``hooks``."""
    hooks = hooks if hooks is not None else HookRegistry()

    def _symbol(name: str) -> Symbol:
        return Symbol(name, config.label_for(name))

    states = [_symbol(name) for name in config.states] if config.states else None
    triggers = [_symbol(name) for name in config.triggers] if config.triggers else None
    builder = build_table(states=states, triggers=triggers, policy=DuplicatePolicy(config.duplicate_policy))

    for rule in config.rules:
        builder.add_rule(
            _symbol(rule.source),
            _symbol(rule.trigger),
            _symbol(rule.target),
            guard=hooks.guards.get(rule.guard) if rule.guard else None,
            action=hooks.actions.get(rule.action) if rule.action else None,
        )
    if config.terminal:
        builder.declare_terminal(*(_symbol(name) for name in config.terminal))
    return builder.finalize()


def build_machine(
    config: MachineConfig,
    hooks: Optional[HookRegistry] = None,
    context: Any = None,
) -> Machine:
    """Build a table from ``config`` and return a machine at its initial state."""
    table = build_table_from_config(config, hooks)
    initial = Symbol(config.initial, config.label_for(config.initial))
    return Machine(table, initial, context=context, name=config.name)
