import pytest
from pydantic import ValidationError

from focusloop.schemas.task import Priority, TaskCategory, TaskFilter


def test_add_task_defaults(store, now):
    task = store.add_task({"title": "  Write tests  "})
    assert task.title == "Write tests"
    assert task.category == TaskCategory.PERSONAL
    assert task.priority == Priority.MEDIUM
    assert task.completed is False
    assert task.pomodoros_completed == 0
    assert task.pomodoros_estimated == 1
    assert task.created_at == now
    assert task.id
    assert store.tasks == [task]


def test_add_task_ids_are_unique(store):
    ids = {store.add_task({"title": f"Task {i}"}).id for i in range(10)}
    assert len(ids) == 10


@pytest.mark.parametrize(
    "data",
    [{"title": ""}, {"title": "   "}, {"title": "x", "category": "chores"}, {"title": "x", "priority": "urgent"}],
)
def test_add_task_rejects_invalid_input(store, storage, data):
    with pytest.raises(ValidationError):
        store.add_task(data)
    assert store.tasks == []
    assert storage.load(store.key) is None


def test_update_task(store):
    task = store.add_task({"title": "Draft", "description": "first pass"})
    updated = store.update_task(task.id, {"title": "Final", "priority": "high"})

    assert updated.title == "Final"
    assert updated.priority == Priority.HIGH
    assert updated.description == "first pass"
    assert updated.id == task.id
    assert updated.created_at == task.created_at


def test_update_task_can_clear_optional_fields(store):
    task = store.add_task({"title": "Draft", "description": "notes"})
    updated = store.update_task(task.id, {"description": None})
    assert updated.description is None


def test_update_unknown_task_is_noop(store, storage):
    assert store.update_task("missing", {"title": "Nope"}) is None
    assert storage.load(store.key) is None


def test_toggle_task_complete(store):
    task = store.add_task({"title": "Toggle"})
    assert store.toggle_task_complete(task.id).completed is True
    assert store.toggle_task_complete(task.id).completed is False
    assert store.toggle_task_complete("missing") is None


def test_delete_task(store):
    keep = store.add_task({"title": "Keep"})
    drop = store.add_task({"title": "Drop"})
    assert store.delete_task(drop.id) is True
    assert store.delete_task(drop.id) is False
    assert store.tasks == [keep]


def test_subtasks(store):
    task = store.add_task({"title": "Parent"})
    first = store.add_subtask(task.id, "Outline")
    second = store.add_subtask(task.id, "Draft")

    toggled = store.toggle_subtask(task.id, first.id)
    assert toggled.completed is True

    assert store.delete_subtask(task.id, second.id) is True
    assert store.delete_subtask(task.id, second.id) is False

    subtasks = store.get_task(task.id).subtasks
    assert [(s.title, s.completed) for s in subtasks] == [("Outline", True)]


def test_subtask_on_unknown_task(store):
    assert store.add_subtask("missing", "Nope") is None
    assert store.toggle_subtask("missing", "x") is None
    assert store.delete_subtask("missing", "x") is False


def test_toggle_unknown_subtask(store):
    task = store.add_task({"title": "Parent"})
    assert store.toggle_subtask(task.id, "missing") is None


def test_filtered_tasks(store):
    work = store.add_task({"title": "Work", "category": "work", "priority": "high"})
    study = store.add_task({"title": "Study", "category": "study", "priority": "low"})
    done = store.add_task({"title": "Done", "category": "work", "priority": "high"})
    store.toggle_task_complete(done.id)

    assert [t.id for t in store.filtered_tasks()] == [work.id, study.id]
    assert [t.id for t in store.filtered_tasks({"category": "work"})] == [work.id]
    assert [t.id for t in store.filtered_tasks(TaskFilter(priority=Priority.LOW))] == [study.id]
    assert [t.id for t in store.filtered_tasks({"showCompleted": True, "category": "work"})] == [
        work.id,
        done.id,
    ]


def test_filtered_tasks_puts_active_first(store):
    first = store.add_task({"title": "First"})
    second = store.add_task({"title": "Second"})
    store.toggle_task_complete(first.id)
    assert [t.id for t in store.filtered_tasks({"show_completed": True})] == [second.id, first.id]
