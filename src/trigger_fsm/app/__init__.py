"""Command line application."""

from .cli import main, parse_args, resolve_trigger, run_interactive, run_script

__all__ = ["main", "parse_args", "resolve_trigger", "run_interactive", "run_script"]
