"""Console driver feeding triggers into a machine."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Hashable, Iterable, Optional, Sequence, TextIO

import yaml

from trigger_fsm.config import build_machine, load_config
from trigger_fsm.infra import configure_logging, install_exception_hook
from trigger_fsm.phone import PhoneContext, new_phone, phone_hooks
from trigger_fsm.state_machine import (
    FsmError,
    Machine,
    NoTransitionError,
    TransitionError,
    describe,
    render_table,
)

logger = logging.getLogger("fsm.cli")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_REJECTED = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="trigger-fsm",
        description="Fire triggers into a table-driven state machine.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML/JSON file with a 'machine' definition (default: built-in telephone).",
    )
    parser.add_argument(
        "--context",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a context attribute read by guards, e.g. --context angry=true.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override the configured log level.",
    )
    parser.add_argument(
        "--show-table",
        action="store_true",
        help="Print the transition table before running.",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Choose triggers from a numbered menu.",
    )
    parser.add_argument("triggers", nargs="*", help="Trigger names to fire in order.")
    return parser.parse_args(argv)


def parse_context(pairs: Iterable[str]) -> dict[str, object]:
    """Parse KEY=VALUE pairs; values use YAML scalars (true, 3, 1.5, text)."""
    values: dict[str, object] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Context entry must be KEY=VALUE: {pair!r}")
        values[key.strip()] = yaml.safe_load(raw) if raw else None
    return values


def resolve_trigger(machine: Machine, text: str) -> Hashable:
    """Find the table trigger named ``text`` (name or label, case-insensitive)."""
    wanted = text.strip().casefold()
    for trigger in machine.table.triggers:
        names = {describe(trigger).casefold(), str(trigger).casefold()}
        name = getattr(trigger, "name", None)
        if isinstance(name, str):
            names.add(name.casefold())
        if wanted in names:
            return trigger
    raise ValueError(f"Unknown trigger '{text}'")


def run_script(machine: Machine, names: Sequence[str], out: TextIO) -> int:
    """Fire each named trigger in order, printing the state after every step."""
    exit_code = EXIT_OK
    print(f"The {machine.name} is currently {describe(machine.current_state)}", file=out)
    for name in names:
        try:
            trigger = resolve_trigger(machine, name)
            state = machine.fire(trigger)
        except ValueError as exc:
            print(f"error: {exc}", file=out)
            exit_code = EXIT_REJECTED
            continue
        except TransitionError as exc:
            print(f"error: {exc}", file=out)
            exit_code = EXIT_REJECTED
            state = machine.current_state
        print(f"{describe(trigger)}: the {machine.name} is currently {describe(state)}", file=out)
    return exit_code


def run_interactive(machine: Machine, stdin: TextIO, out: TextIO) -> int:
    """Menu loop: list available triggers by number and fire the chosen one."""
    while True:
        print(f"The {machine.name} is currently {describe(machine.current_state)}", file=out)
        options = machine.available_triggers()
        if not options:
            print(f"No triggers available; we are done using the {machine.name}.", file=out)
            return EXIT_OK

        choice = _select_trigger(options, stdin, out)
        if choice is None:
            print(f"We are done using the {machine.name}.", file=out)
            return EXIT_OK

        try:
            machine.fire(choice)
        except NoTransitionError as exc:
            print(str(exc), file=out)
        except TransitionError as exc:
            print(f"error: {exc}", file=out)


def _select_trigger(options: Sequence[Hashable], stdin: TextIO, out: TextIO) -> Optional[Hashable]:
    while True:
        print("Select a trigger:", file=out)
        for index, trigger in enumerate(options):
            print(f"{index}. {describe(trigger)}", file=out)
        out.flush()

        line = stdin.readline()
        if not line or line.strip().lower() in {"q", "quit", "exit"}:
            return None
        try:
            selected = int(line.strip())
        except ValueError:
            selected = -1
        if 0 <= selected < len(options):
            return options[selected]
        print("Incorrect option. Please try again.", file=out)


def _build_machine(args: argparse.Namespace) -> Machine:
    context_values = parse_context(args.context)

    if args.config is None:
        logging.basicConfig(level=(args.log_level or "WARNING").upper())
        context = PhoneContext(**context_values)  # type: ignore[arg-type]
        return new_phone(context=context)

    config = load_config(args.config)
    configure_logging(config.logging, level_override=args.log_level)
    logger.info("Configuration loaded from %s", args.config)
    if config.machine is None:
        raise ValueError(f"No 'machine' section in {args.config}")
    return build_machine(config.machine, hooks=phone_hooks(), context=SimpleNamespace(**context_values))


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    args = parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    hook = install_exception_hook()
    try:
        try:
            machine = _build_machine(args)
        except (OSError, ValueError, TypeError, KeyError, FsmError, yaml.YAMLError) as exc:
            print(f"Cannot load machine definition: {exc}", file=sys.stderr)
            return EXIT_CONFIG_ERROR

        if args.show_table:
            print(render_table(machine.table), file=stdout)

        if args.interactive:
            return run_interactive(machine, stdin, stdout)
        return run_script(machine, args.triggers, stdout)
    finally:
        hook.uninstall()
