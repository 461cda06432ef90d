# src/todo_cli/cli/commands.py

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import shtab

from .. import __version__
from ..tasks.task_models import Priority
from .bootstrap import AppState
from .render import due_text, search_line, task_line

CommandEmitter = Callable[[str], None]
ArgumentConfigurer = Callable[[argparse.ArgumentParser], None]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandResult:
    """What a handler did: whether the store must be saved, and how to exit."""

    changed: bool = False
    exit_code: int = 0
    errors: list[str] = field(default_factory=list)


CommandHandler = Callable[[AppState, argparse.Namespace, CommandEmitter], CommandResult]


@dataclass(slots=True)
class _Command:
    name: str
    handler: CommandHandler
    help_text: str
    aliases: list[str]
    configure: ArgumentConfigurer | None


class CommandRegistry:
    """Subcommand registry; builds the argparse parser and routes parsed args to handlers."""

    def __init__(self) -> None:
        self._commands: dict[str, _Command] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        configure: ArgumentConfigurer | None = None,
    ) -> None:
        self._commands[name] = _Command(name, handler, help_text, list(aliases or []), configure)

    def names(self) -> list[str]:
        return list(self._commands)

    def build_parser(self, prog: str = "todo") -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog=prog, description="A simple CLI todo manager")
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
        sub = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
        for cmd in self._commands.values():
            p = sub.add_parser(cmd.name, help=cmd.help_text, aliases=cmd.aliases)
            if cmd.configure is not None:
                cmd.configure(p)
            # argparse stores the alias as typed; keep the canonical name separately.
            p.set_defaults(command_name=cmd.name)
        return parser

    def dispatch(
        self, state: AppState, args: argparse.Namespace, emit: CommandEmitter = print
    ) -> CommandResult:
        name = getattr(args, "command_name", None) or args.command
        cmd = self._commands.get(name)
        if cmd is None:
            raise KeyError(f"unknown command: {name}")
        logger.debug("Dispatching %s", name)
        return cmd.handler(state, args, emit)


registry = CommandRegistry()


# ---- handlers ----


def cmd_add(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> CommandResult:
    description = " ".join(args.description)
    task_id = state.store.add(description, args.due, priority=args.priority, tags=args.tags)
    task = state.store.get(task_id)
    emit(f"Added task #{task_id}: {task.description}")
    return CommandResult(changed=True)


def cmd_edit(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> CommandResult:
    description = " ".join(args.description) if args.description else None
    if not state.store.edit(args.id, description, args.due):
        emit(f"Nothing to change for task #{args.id}. Give a new description and/or --due.")
        return CommandResult()
    task = state.store.get(args.id)
    emit(f"Edited task #{task.id}: {task.description}. Due - {due_text(task)}")
    return CommandResult(changed=True)


def cmd_list(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> CommandResult:
    rows = state.store.list_tasks(urgent_only=args.urgent, today=state.today)
    if not rows:
        emit("No urgent tasks due within the next 3 days!" if args.urgent else "No tasks found!")
        return CommandResult()

    emit("Urgent tasks:" if args.urgent else "Your tasks:")
    for task, category in rows:
        emit(task_line(task, category, state.today))
    return CommandResult()


def cmd_search(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> CommandResult:
    matches = state.store.search(args.keyword)
    if not matches:
        emit(f"No tasks found matching '{args.keyword}'")
        return CommandResult()

    emit(f"Tasks matching '{args.keyword}':")
    for task in matches:
        emit(search_line(task))
    return CommandResult()


def cmd_complete(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> CommandResult:
    state.store.complete(args.id)
    emit(f"Completed task #{args.id}")
    return CommandResult(changed=True)


def cmd_complete_tasks(
    state: AppState, args: argparse.Namespace, emit: CommandEmitter
) -> CommandResult:
    """Complete several ids; successes are kept even when some ids fail."""
    report = state.store.complete_many(args.ids)
    for task_id in report.completed:
        emit(f"Completed task #{task_id}")

    result = CommandResult(changed=bool(report.completed))
    if report.failures:
        result.exit_code = 1
        for _, exc in report.failures:
            result.errors.append(f"Error: {exc} ({type(exc).__name__})")
        emit(f"Completed {len(report.completed)} of {len(args.ids)} tasks.")
    return result


def cmd_remove(state: AppState, args: argparse.Namespace, emit: CommandEmitter) -> CommandResult:
    state.store.remove(args.id)
    emit(f"Removed task #{args.id}")
    return CommandResult(changed=True)


def cmd_remove_all(
    state: AppState, args: argparse.Namespace, emit: CommandEmitter
) -> CommandResult:
    count = state.store.remove_all()
    emit(f"All tasks have been removed ({count}).")
    return CommandResult(changed=count > 0)


def cmd_completions(
    state: AppState, args: argparse.Namespace, emit: CommandEmitter
) -> CommandResult:
    """Print a shell completion script built from the current parser."""
    parser = registry.build_parser(prog=state.settings.app_name)
    emit(shtab.complete(parser, shell=args.shell))
    return CommandResult()


# ---- argument definitions ----


def _due_option(p: argparse.ArgumentParser, help_text: str) -> None:
    p.add_argument("-d", "--due", metavar="YYYY-MM-DD", help=help_text)


def _args_add(p: argparse.ArgumentParser) -> None:
    p.add_argument("description", nargs="+", help="Task description")
    _due_option(p, "Optional due date")
    p.add_argument(
        "-p", "--priority", choices=[x.value for x in Priority], help="Optional priority"
    )
    p.add_argument("-t", "--tags", help="Optional tags, comma-separated")


def _args_edit(p: argparse.ArgumentParser) -> None:
    p.add_argument("id", type=int, help="Task ID")
    p.add_argument("description", nargs="*", help="New task description")
    _due_option(p, "New due date")


def _args_list(p: argparse.ArgumentParser) -> None:
    p.add_argument("-u", "--urgent", action="store_true", help="Show only tasks due within 3 days")


def _args_search(p: argparse.ArgumentParser) -> None:
    p.add_argument("keyword", help="Keyword to search for in task descriptions")


def _args_id(p: argparse.ArgumentParser) -> None:
    p.add_argument("id", type=int, help="Task ID")


def _args_ids(p: argparse.ArgumentParser) -> None:
    p.add_argument("ids", type=int, nargs="+", metavar="ID", help="Task IDs to complete")


def _args_completions(p: argparse.ArgumentParser) -> None:
    p.add_argument("shell", choices=shtab.SUPPORTED_SHELLS, help="Shell to generate completions for")


registry.register("add", cmd_add, "Add a new task", aliases=["a", "+"], configure=_args_add)
registry.register(
    "list", cmd_list, "List all tasks, most urgent first", aliases=["ls"], configure=_args_list
)
registry.register(
    "edit", cmd_edit, "Change a task's description and/or due date", configure=_args_edit
)
registry.register("search", cmd_search, "Search tasks by keyword", configure=_args_search)
registry.register("complete", cmd_complete, "Mark a task as complete", configure=_args_id)
registry.register(
    "complete-tasks", cmd_complete_tasks, "Mark several tasks as complete", configure=_args_ids
)
registry.register(
    "remove", cmd_remove, "Remove a task by ID", aliases=["rm", "del"], configure=_args_id
)
registry.register("remove-all", cmd_remove_all, "Remove all tasks permanently")
registry.register(
    "completions",
    cmd_completions,
    "Generate shell completions",
    aliases=["comp"],
    configure=_args_completions,
)
