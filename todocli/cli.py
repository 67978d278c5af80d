"""Command-line interface for the todo list."""

from __future__ import annotations

import argparse
import os
import re
import sys
from typing import Callable, Iterable, Sequence

from .tasks import (
    Task,
    TaskError,
    add_task,
    list_tasks,
    mark_done,
    remove_task,
    set_priority,
)

_FAILURES = (TaskError, OSError, ValueError)
_INT_RE = re.compile(r"[+-]?\d+")
_PRIORITY_NAMES = {
    "high": 3,
    "3": 3,
    "medium": 2,
    "med": 2,
    "2": 2,
    "low": 1,
    "1": 1,
}
_PRIORITY_LABELS = {3: "(high)", 2: "(med)", 1: "(low)"}


def _parse_int(value: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise ValueError(f"invalid integer: {value!r}")
    return int(value)


def parse_priority(value: str) -> int:
    """Turn 'high'/'medium'/'med'/'low' or 1-3 into a priority number."""
    text = value.lower()
    if text in _PRIORITY_NAMES:
        return _PRIORITY_NAMES[text]
    try:
        number = _parse_int(text)
    except ValueError:
        number = 0
    if not 1 <= number <= 3:
        raise ValueError("invalid priority, use high|medium|low or 3|2|1")
    return number


def select_tasks(tasks: Iterable[Task], show_all: bool, top: int, by_priority: bool) -> list[Task]:
    """Filter out done tasks unless show_all; sort by priority and trim to top N."""
    selected = [task for task in tasks if show_all or not task.done]
    if by_priority or top > 0:
        selected.sort(key=lambda task: (-task.priority, task.created))
        if 0 < top < len(selected):
            selected = selected[:top]
    return selected


def format_task(task: Task) -> str:
    """Render one task as a listing line."""
    mark = "x" if task.done else " "
    label = _PRIORITY_LABELS.get(task.priority, "")
    return f"[{mark}] {task.id}: {task.text} {label}"


def usage(prog: str) -> str:
    """Return the help text for the given program name."""
    return (
        "Usage:\n"
        f"  {prog} add <task text>       Add a new task\n"
        f"  {prog} list [--all] [--top N] List tasks (default: pending only)\n"
        f"  {prog} done <id>            Mark task <id> done\n"
        f"  {prog} rm <id>              Remove task <id>\n"
        f"  {prog} reprioritize <id> <high|medium|low|3|2|1>  Manually set task priority\n"
        f"  {prog} help                 Show this help\n"
    )


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _cmd_add(args: list[str], prog: str) -> int:
    if not args:
        _err("add: missing task text")
        return 1
    try:
        task = add_task("", " ".join(args))
    except _FAILURES as exc:
        _err(f"add error: {exc}")
        return 1
    print(f"added {task.id}: {task.text}")
    return 0


def _list_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="list", allow_abbrev=False)
    parser.add_argument("-all", "--all", dest="all", action="store_true",
                        help="show all tasks, including done ones")
    parser.add_argument("-top", "--top", dest="top", type=int, default=0,
                        help="show top N tasks by priority")
    parser.add_argument("-n", "--n", dest="n", type=int, default=0, help="alias for --top")
    parser.add_argument("-priority", "--priority", dest="priority", action="store_true",
                        help="sort tasks by priority high->low")
    parser.add_argument("rest", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def _cmd_list(args: list[str], prog: str) -> int:
    try:
        opts = _list_parser().parse_args(args)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 2
    try:
        tasks = list_tasks("")
    except _FAILURES as exc:
        _err(f"list error: {exc}")
        return 1
    top = opts.n if opts.n > 0 else opts.top
    for task in select_tasks(tasks, opts.all, top, opts.priority):
        print(format_task(task))
    return 0


def _id_command(name: str, action: Callable[[str, int], None], done_message: str) -> Callable[[list[str], str], int]:
    def run(args: list[str], prog: str) -> int:
        if not args:
            _err(f"{name}: missing id")
            return 1
        try:
            task_id = _parse_int(args[0])
        except ValueError:
            _err(f"{name}: invalid id")
            return 1
        try:
            action("", task_id)
        except _FAILURES as exc:
            _err(f"{name} error: {exc}")
            return 1
        print(done_message.format(id=task_id))
        return 0

    return run


def _cmd_reprioritize(args: list[str], prog: str) -> int:
    if len(args) < 2:
        _err("reprioritize: missing id or priority")
        return 1
    try:
        task_id = _parse_int(args[0])
    except ValueError:
        _err("reprioritize: invalid id")
        return 1
    try:
        priority = parse_priority(args[1])
    except ValueError:
        _err("reprioritize: invalid priority, use high|medium|low or 3|2|1")
        return 1
    try:
        set_priority("", task_id, priority)
    except _FAILURES as exc:
        _err(f"reprioritize error: {exc}")
        return 1
    print(f"set {task_id} priority to {priority}")
    return 0


def _cmd_help(args: list[str], prog: str) -> int:
    print(usage(prog), end="")
    return 0


_COMMANDS: dict[str, Callable[[list[str], str], int]] = {
    "add": _cmd_add,
    "list": _cmd_list,
    "done": _id_command("done", mark_done, "marked {id} done"),
    "rm": _id_command("rm", remove_task, "removed {id}"),
    "reprioritize": _cmd_reprioritize,
    "help": _cmd_help,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the todo command line and return its exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "todo"
    if not args:
        print(usage(prog), end="")
        return 1
    command, rest = args[0], args[1:]
    handler = _COMMANDS.get(command)
    if handler is None:
        _err(f"unknown command: {command}")
        print(usage(prog), end="")
        return 1
    return handler(rest, prog)


if __name__ == "__main__":
    sys.exit(main())