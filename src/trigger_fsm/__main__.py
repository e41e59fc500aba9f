"""Entry point for ``python -m trigger_fsm``."""

import sys

from .app.cli import main


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
