# src/todo_cli/cli/main.py

"""
CLI entrypoint.

One invocation = one command:
settings -> logging -> load task file -> run handler -> save (if changed) -> exit code.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from datetime import date

from ..config import Settings, get_settings
from ..errors import TodoError
from ..logging_setup import level_from_name, setup_logging
from .bootstrap import create_initial_state, persist_state
from .commands import CommandEmitter, registry

logger = logging.getLogger(__name__)


def _print_error(text: str) -> None:
    print(text, file=sys.stderr)


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    today: date | None = None,
    emit: CommandEmitter = print,
) -> int:
    """
    Run one command and return the process exit status.

    0 on success, 1 on any reported failure. argparse usage errors raise
    SystemExit(2) before anything is loaded.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(
        log_dir=settings.log_dir if settings.log_to_file else None,
        console_level=level_from_name(settings.log_level),
    )

    parser = registry.build_parser(prog=settings.app_name)
    args = parser.parse_args(argv)
    logger.debug("Command %s args=%s data_file=%s", args.command, vars(args), settings.data_file)

    try:
        state = create_initial_state(settings=settings, today=today)
        result = registry.dispatch(state, args, emit)
        if result.changed:
            persist_state(state)
    except TodoError as exc:
        logger.debug("Command %s failed: %r", args.command, exc)
        _print_error(f"Error: {exc}")
        return 1
    except Exception:
        logger.exception("Unexpected failure in command %s", args.command)
        return 1

    for line in result.errors:
        _print_error(line)
    return result.exit_code


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
