"""Configuration package for trigger-fsm."""

from .loader import build_machine, build_table_from_config, load_config, parse_machine_config
from .models import Config, LoggingConfig, MachineConfig, RuleConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "MachineConfig",
    "RuleConfig",
    "build_machine",
    "build_table_from_config",
    "load_config",
    "parse_machine_config",
]
