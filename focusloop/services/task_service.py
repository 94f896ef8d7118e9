from collections.abc import Sequence
from datetime import datetime

from focusloop.schemas.task import SubTask, Task, TaskCreate, TaskFilter, TaskUpdate
from focusloop.services.time_service import local_now

NULLABLE_FIELDS = {"description", "deadline"}


def find_task(tasks: Sequence[Task], task_id: str | None) -> Task | None:
    if task_id is None:
        return None
    return next((t for t in tasks if t.id == task_id), None)


def create_task(data: TaskCreate, now: datetime | None = None) -> Task:
    return Task(**data.model_dump(), created_at=now or local_now())


def update_task(tasks: list[Task], task_id: str, data: TaskUpdate) -> Task | None:
    """Replace the task with a copy carrying the explicitly set fields.

    An explicit None only clears fields that are optional on Task.
    """
    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    for index, task in enumerate(tasks):
        if task.id == task_id:
            updated = task.model_copy(update=changes)
            tasks[index] = updated
            return updated
    return None


def delete_task(tasks: list[Task], task_id: str) -> bool:
    remaining = [t for t in tasks if t.id != task_id]
    if len(remaining) == len(tasks):
        return False
    tasks[:] = remaining
    return True


def toggle_complete(tasks: list[Task], task_id: str) -> Task | None:
    task = find_task(tasks, task_id)
    if task is None:
        return None
    return update_task(tasks, task_id, TaskUpdate(completed=not task.completed))


def increment_pomodoros(tasks: list[Task], task_id: str) -> Task | None:
    task = find_task(tasks, task_id)
    if task is None:
        return None
    return update_task(
        tasks, task_id, TaskUpdate(pomodoros_completed=task.pomodoros_completed + 1)
    )


def add_subtask(tasks: list[Task], task_id: str, title: str) -> SubTask | None:
    task = find_task(tasks, task_id)
    if task is None:
        return None
    subtask = SubTask(title=title.strip())
    _replace(tasks, task.model_copy(update={"subtasks": [*task.subtasks, subtask]}))
    return subtask


def toggle_subtask(tasks: list[Task], task_id: str, subtask_id: str) -> SubTask | None:
    task = find_task(tasks, task_id)
    if task is None:
        return None
    toggled = None
    subtasks = []
    for sub in task.subtasks:
        if sub.id == subtask_id:
            sub = toggled = sub.model_copy(update={"completed": not sub.completed})
        subtasks.append(sub)
    if toggled is not None:
        _replace(tasks, task.model_copy(update={"subtasks": subtasks}))
    return toggled


def delete_subtask(tasks: list[Task], task_id: str, subtask_id: str) -> bool:
    task = find_task(tasks, task_id)
    if task is None:
        return False
    subtasks = [sub for sub in task.subtasks if sub.id != subtask_id]
    if len(subtasks) == len(task.subtasks):
        return False
    _replace(tasks, task.model_copy(update={"subtasks": subtasks}))
    return True


def filter_tasks(tasks: Sequence[Task], criteria: TaskFilter | None = None) -> list[Task]:
    """Tasks matching the filter, active ones first, each group in insertion order."""
    criteria = criteria or TaskFilter()
    matched = [
        t
        for t in tasks
        if (criteria.show_completed or not t.completed)
        and (criteria.category is None or t.category == criteria.category)
        and (criteria.priority is None or t.priority == criteria.priority)
    ]
    return [t for t in matched if not t.completed] + [t for t in matched if t.completed]


def _replace(tasks: list[Task], task: Task) -> None:
    for index, existing in enumerate(tasks):
        if existing.id == task.id:
            tasks[index] = task
            return
