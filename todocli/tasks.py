"""Task model and JSON-file storage for the todo list."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Union

PathArg = Union[str, "os.PathLike[str]", None]

MIN_PRIORITY = 1
MAX_PRIORITY = 3

_TMP_NAME = ".todo.json.tmp"
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(
    r"^(?P<base>\d{4,}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|z|[+-]\d{2}:\d{2})?$"
)


class TaskError(Exception):
    """Raised when a task operation cannot be carried out."""


class TaskNotFoundError(TaskError):
    """Raised when no task has the requested id."""

    def __init__(self, message: str = "task not found") -> None:
        super().__init__(message)


def _parse_time(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, accepting 'Z' and nanosecond fractions."""
    match = _TIME_RE.match(value)
    if match:
        text = match["base"]
        if match["frac"]:
            text += "." + match["frac"][:6].ljust(6, "0")
        tz = match["tz"]
        if tz:
            text += "+00:00" if tz in ("Z", "z") else tz
    else:
        text = value
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


@dataclass
class Task:
    """A single todo item. Priority is 3 (high), 2 (medium), 1 (low) or 0 (unset)."""

    id: int
    text: str
    done: bool = False
    created: datetime = field(default_factory=lambda: _ZERO_TIME)
    priority: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping; an unset priority is left out."""
        data: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "done": self.done,
            "created": _format_time(self.created),
        }
        if self.priority:
            data["priority"] = self.priority
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Build a task from a stored mapping; missing fields take zero values."""
        if not isinstance(data, dict):
            raise TaskError(f"invalid task record: {data!r}")
        created = data.get("created")
        return cls(
            id=int(data.get("id", 0)),
            text=str(data.get("text", "")),
            done=bool(data.get("done", False)),
            created=_parse_time(created) if created else _ZERO_TIME,
            priority=int(data.get("priority", 0) or 0),
        )


def todo_file_path() -> str:
    """Return the default storage path, honouring the TODO_FILE variable."""
    explicit = os.environ.get("TODO_FILE")
    if explicit:
        return explicit
    cwd = os.environ.get("PWD")
    if cwd:
        return os.path.join(cwd, ".todos.json")
    try:
        home = Path.home()
    except (RuntimeError, KeyError, OSError):
        return ".todo.json"
    return os.path.join(str(home), ".todo.json")


def _resolve(path: PathArg) -> str:
    if path is None or os.fspath(path) == "":
        return todo_file_path()
    return os.fspath(path)


def load_tasks(path: PathArg) -> list[Task]:
    """Read tasks from a JSON file; a missing or empty file holds no tasks."""
    file_path = Path(_resolve(path))
    try:
        raw = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    if not raw:
        return []
    records = json.loads(raw)
    if records is None:
        return []
    if not isinstance(records, list):
        raise TaskError("task file does not hold a list")
    return [Task.from_dict(record) for record in records]


def save_tasks(path: PathArg, tasks: Iterable[Task]) -> None:
    """Write tasks as indented JSON, replacing the file atomically."""
    file_path = _resolve(path)
    data = json.dumps([task.to_dict() for task in tasks], indent=2, ensure_ascii=False)
    tmp = os.path.join(os.path.dirname(file_path), _TMP_NAME)
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(data)
    os.replace(tmp, file_path)


def add_task(path: PathArg, text: str) -> Task:
    """Append a new pending task and return it."""
    if not text:
        raise TaskError("empty task")
    tasks = load_tasks(path)
    next_id = max((task.id for task in tasks), default=0) + 1
    task = Task(id=next_id, text=text, created=datetime.now().astimezone())
    tasks.append(task)
    save_tasks(path, tasks)
    return task


def list_tasks(path: PathArg) -> list[Task]:
    """Return every stored task."""
    return load_tasks(path)


def _find(tasks: list[Task], task_id: int) -> Task:
    for task in tasks:
        if task.id == task_id:
            return task
    raise TaskNotFoundError()


def mark_done(path: PathArg, task_id: int) -> None:
    """Mark the task with the given id as done."""
    tasks = load_tasks(path)
    _find(tasks, task_id).done = True
    save_tasks(path, tasks)


def remove_task(path: PathArg, task_id: int) -> None:
    """Delete the task with the given id."""
    tasks = load_tasks(path)
    remaining = [task for task in tasks if task.id != task_id]
    if len(remaining) == len(tasks):
        raise TaskNotFoundError()
    save_tasks(path, remaining)


def set_priority(path: PathArg, task_id: int, priority: int) -> None:
    """Set a task's priority (3 high, 2 medium, 1 low)."""
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise TaskError("invalid priority")
    tasks = load_tasks(path)
    _find(tasks, task_id).priority = priority
    save_tasks(path, tasks)