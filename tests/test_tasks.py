import json
from datetime import datetime, timezone

import pytest

from todocli.tasks import (
    Task,
    TaskError,
    TaskNotFoundError,
    add_task,
    list_tasks,
    load_tasks,
    mark_done,
    remove_task,
    save_tasks,
    set_priority,
    todo_file_path,
)


@pytest.fixture
def store(tmp_path):
    return str(tmp_path / "todos.json")


def test_add_list_mark_remove(store):
    t1 = add_task(store, "first task")
    t2 = add_task(store, "second task")

    tasks = list_tasks(store)
    assert len(tasks) == 2

    mark_done(store, t1.id)
    tasks = list_tasks(store)
    assert sum(1 for t in tasks if t.done) == 1

    remove_task(store, t2.id)
    tasks = list_tasks(store)
    assert len(tasks) == 1
    assert tasks[0].id == t1.id


def test_add_task_empty_text_fails(store):
    with pytest.raises(TaskError, match="empty task"):
        add_task(store, "")


def test_add_task_normal_text(store):
    task = add_task(store, "something todo")
    assert task.text == "something todo"
    assert task.done is False
    assert task.id == 1


def test_list_tasks_two(store):
    add_task(store, "first")
    add_task(store, "second")
    tasks = list_tasks(store)
    assert [t.text for t in tasks] == ["first", "second"]


@pytest.mark.parametrize("use_existing, should_fail", [(True, False), (False, True)])
def test_mark_done(store, use_existing, should_fail):
    t1 = add_task(store, "do task")
    task_id = t1.id if use_existing else 9999
    if should_fail:
        with pytest.raises(TaskNotFoundError):
            mark_done(store, task_id)
    else:
        mark_done(store, task_id)
        assert list_tasks(store)[0].done is True


@pytest.mark.parametrize("use_existing, should_fail", [(True, False), (False, True)])
def test_remove_task(store, use_existing, should_fail):
    t1 = add_task(store, "remove me")
    task_id = t1.id if use_existing else 555
    if should_fail:
        with pytest.raises(TaskNotFoundError):
            remove_task(store, task_id)
        assert len(list_tasks(store)) == 1
    else:
        remove_task(store, task_id)
        assert list_tasks(store) == []


@pytest.mark.parametrize(
    "use_existing, priority, error",
    [
        (True, 3, None),
        (True, 1, None),
        (False, 2, TaskNotFoundError),
        (True, 99, TaskError),
    ],
    ids=["valid-high", "valid-low", "invalid-id", "invalid-priority"],
)
def test_set_priority(store, use_existing, priority, error):
    t1 = add_task(store, "prio me")
    task_id = t1.id if use_existing else 999
    if error is not None:
        with pytest.raises(error):
            set_priority(store, task_id, priority)
        assert list_tasks(store)[0].priority == 0
    else:
        set_priority(store, task_id, priority)
        assert list_tasks(store)[0].priority == priority


def test_invalid_priority_is_not_not_found(store):
    t1 = add_task(store, "x")
    with pytest.raises(TaskError) as info:
        set_priority(store, t1.id, 0)
    assert not isinstance(info.value, TaskNotFoundError)
    assert str(info.value) == "invalid priority"


def test_ids_continue_from_max(store):
    add_task(store, "a")
    second = add_task(store, "b")
    third = add_task(store, "c")
    remove_task(store, second.id)
    fourth = add_task(store, "d")
    assert fourth.id == third.id + 1


def test_load_missing_file_is_empty(tmp_path):
    assert load_tasks(str(tmp_path / "nope.json")) == []


def test_load_empty_and_null_file(tmp_path):
    empty = tmp_path / "empty.json"
    empty.write_text("")
    null = tmp_path / "null.json"
    null.write_text("null")
    assert load_tasks(str(empty)) == []
    assert load_tasks(str(null)) == []


def test_load_invalid_json_raises(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ValueError):
        load_tasks(str(bad))


def test_load_non_list_raises(tmp_path):
    bad = tmp_path / "obj.json"
    bad.write_text('{"id": 1}')
    with pytest.raises(TaskError):
        load_tasks(str(bad))


def test_saved_file_format(store):
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    save_tasks(store, [Task(id=1, text="a", created=created), Task(id=2, text="b", done=True, created=created, priority=3)])
    with open(store, encoding="utf-8") as handle:
        raw = json.load(handle)
    assert raw == [
        {"id": 1, "text": "a", "done": False, "created": "2024-01-02T03:04:05Z"},
        {"id": 2, "text": "b", "done": True, "created": "2024-01-02T03:04:05Z", "priority": 3},
    ]


def test_round_trip_preserves_tasks(store):
    created = datetime(2023, 6, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
    tasks = [Task(id=7, text="write report", done=True, created=created, priority=2)]
    save_tasks(store, tasks)
    assert load_tasks(store) == tasks


def test_from_dict_parses_nanosecond_timestamps():
    task = Task.from_dict(
        {"id": 4, "text": "t", "done": False, "created": "2024-03-05T10:11:12.123456789+02:00"}
    )
    assert task.created.microsecond == 123456
    assert task.created.utcoffset().total_seconds() == 7200
    assert task.priority == 0


def test_from_dict_missing_fields_use_zero_values():
    task = Task.from_dict({"id": 1})
    assert task.text == ""
    assert task.done is False
    assert task.created == datetime(1, 1, 1, tzinfo=timezone.utc)


def test_to_dict_omits_unset_priority():
    task = Task(id=1, text="x", created=datetime(2020, 1, 1, tzinfo=timezone.utc))
    assert "priority" not in task.to_dict()


def test_no_temp_file_left(store, tmp_path):
    task = add_task(store, "a")
    assert task.id == 1
    assert [t.text for t in list_tasks(store)] == ["a"]
    assert not (tmp_path / ".todo.json.tmp").exists()
    assert (tmp_path / "todos.json").exists()


def test_default_path_used_when_empty(tmp_path, monkeypatch):
    target = tmp_path / "env.json"
    monkeypatch.setenv("TODO_FILE", str(target))
    add_task("", "via env")
    add_task(None, "via env too")
    assert [t.text for t in list_tasks(str(target))] == ["via env", "via env too"]


def test_todo_file_path_env(monkeypatch):
    monkeypatch.setenv("TODO_FILE", "/tmp/custom.json")
    assert todo_file_path() == "/tmp/custom.json"


def test_todo_file_path_pwd(monkeypatch, tmp_path):
    monkeypatch.delenv("TODO_FILE", raising=False)
    monkeypatch.setenv("PWD", str(tmp_path))
    assert todo_file_path() == str(tmp_path / ".todos.json")


def test_todo_file_path_home(monkeypatch, tmp_path):
    monkeypatch.delenv("TODO_FILE", raising=False)
    monkeypatch.delenv("PWD", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert todo_file_path() == str(tmp_path / ".todo.json")