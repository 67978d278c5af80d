# todocli

A small command-line todo list. Tasks are kept in a JSON file. Each task has
an id, its text, a done flag, the time it was created, and an optional priority
(3 = high, 2 = medium, 1 = low, 0 = not set).

## Installation

```
pip install .
```

This installs the `todo` command.

## Usage

```
todo add <task text>                 Add a new task
todo list [--all] [--top N]          List tasks (default: pending only)
todo done <id>                       Mark task <id> done
todo rm <id>                         Remove task <id>
todo reprioritize <id> <priority>    Set a task's priority
todo help                            Show help
```

Examples:

```
$ todo add buy milk
added 1: buy milk
$ todo add write report
added 2: write report
$ todo reprioritize 2 high
set 2 priority to 3
$ todo list --priority
[ ] 2: write report (high)
[ ] 1: buy milk
$ todo done 1
marked 1 done
$ todo list --all
[x] 1: buy milk
[ ] 2: write report (high)
```

All the words after `add` are joined with single spaces to form the task text.
A new task gets an id one higher than the largest id in the file.

Errors are printed to standard error and the command exits with status 1, for
example when an id is not a whole number, no task has that id, or the command
is unknown. Running `todo` with no command prints the help and exits with
status 1.

### Listing options

- `--all` (or `-all`) shows finished tasks as well as pending ones.
- `--priority` (or `-priority`) sorts tasks from high to low priority; among
  tasks with the same priority, older ones come first.
- `--top N` (or `-top N`, `-n N`) sorts by priority and shows only the first
  `N` tasks. When both are given, `-n` wins.

Without `--priority` or `--top`, tasks are listed in the order they are stored.

### Priorities

`reprioritize` takes `high`, `medium` (or `med`), or `low`, in any letter case,
or the numbers `3`, `2` and `1`. Anything else is rejected.

## Where tasks are stored

The task file is picked in this order:

1. the path in the `TODO_FILE` environment variable, if it is set;
2. `.todos.json` in the directory given by `PWD`, if it is set;
3. `.todo.json` in your home directory.

A missing or empty file counts as an empty list. The file is a JSON array of
objects with the keys `id`, `text`, `done`, `created` (an RFC 3339 timestamp)
and `priority`; `priority` is left out when it is not set. Writes are atomic:
the list is written to `.todo.json.tmp` in the same directory, with mode 0600,
and then renamed into place.

## Using it from Python

```python
from todocli.tasks import add_task, list_tasks, mark_done, remove_task, set_priority

task = add_task("todos.json", "first task")
set_priority("todos.json", task.id, 3)
mark_done("todos.json", task.id)
for t in list_tasks("todos.json"):
    print(t.id, t.text, t.done, t.priority)
remove_task("todos.json", task.id)
```

Pass an empty path (or `None`) to use the default file. `TaskNotFoundError` is
raised when an id does not exist, and `TaskError` (its base class) is raised
for other problems, such as empty task text or a priority outside 1 to 3.

`todocli.tasks` also offers `load_tasks`, `save_tasks`, `todo_file_path`, and
the `Task` dataclass with `to_dict()` and `Task.from_dict()`. `todocli.cli`
offers `parse_priority`, `select_tasks`, `format_task`, `usage` and `main`,
which are the parts the `todo` command is built from.

## What it does not do

Priorities are only ever set by hand with `reprioritize`. There is no command
that ranks or prioritizes tasks automatically.