"""In-memory task store for the open board."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..workflow.models import (
    PLACEMENT_FIELDS,
    FieldChange,
    SprintContext,
    Task,
    TaskPriority,
    TaskStatus,
    TaskType,
    normalize_sprint_id,
)
from .classifier import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Remembered placement value used to undo an optimistic write."""

    task_id: int
    field: str
    value: TaskStatus | int | None


class TaskStore:
    """Tasks of the open project keyed by id. For the board to render from."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: dict[int, Task] = {}
        self._listeners: list[Callable[[int | None], None]] = []
        for task in tasks:
            self._tasks[task.id] = task

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self._tasks

    def subscribe(self, callback: Callable[[int | None], None]) -> None:
        """Call ``callback(task_id)`` after each change; None means everything."""
        self._listeners.append(callback)

    def _changed(self, task_id: int | None) -> None:
        for callback in list(self._listeners):
            callback(task_id)

    # -- Reads --

    def get(self, task_id: int) -> Task:
        if task_id not in self._tasks:
            raise KeyError(f"Task not found: {task_id}")
        return self._tasks[task_id]

    def find(self, task_id: int) -> Task | None:
        return self._tasks.get(task_id)

    def all(self) -> list[Task]:
        return list(self._tasks.values())

    def in_container(self, container, context: SprintContext) -> list[Task]:
        return [t for t in self._tasks.values() if classify(t, context) == container]

    def search(self, query: str) -> list[Task]:
        """Match title, description, assignee or labels, case-insensitively."""
        needle = query.lower()
        if not needle:
            return self.all()
        return [
            t
            for t in self._tasks.values()
            if needle in t.title.lower()
            or needle in (t.description or "").lower()
            or needle in t.assignee.lower()
            or any(needle in label.lower() for label in t.labels)
        ]

    def filter(
        self,
        assignees: Iterable[str] | None = None,
        priorities: Iterable[TaskPriority] | None = None,
        types: Iterable[TaskType] | None = None,
        statuses: Iterable[TaskStatus] | None = None,
    ) -> list[Task]:
        """Keep tasks matching every given criterion; empty criteria match all."""
        tasks = self.all()
        if assignees:
            wanted = set(assignees)
            tasks = [t for t in tasks if t.assignee in wanted]
        if priorities:
            wanted = set(priorities)
            tasks = [t for t in tasks if t.priority in wanted]
        if types:
            wanted = set(types)
            tasks = [t for t in tasks if t.type in wanted]
        if statuses:
            wanted = set(statuses)
            tasks = [t for t in tasks if t.status in wanted]
        return tasks

    # -- Full-record writes (external collaborators) --

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the whole collection, e.g. after a list refresh."""
        self._tasks = {task.id: task for task in tasks}
        logger.debug("Loaded %d tasks", len(self._tasks))
        self._changed(None)

    def add(self, task: Task) -> None:
        if task.id in self._tasks:
            raise ValueError(f"Task already loaded: {task.id}")
        self._tasks[task.id] = task
        self._changed(task.id)

    def replace(self, task: Task) -> None:
        if task.id not in self._tasks:
            raise KeyError(f"Task not found: {task.id}")
        self._tasks[task.id] = task
        self._changed(task.id)

    def remove(self, task_id: int) -> Task:
        if task_id not in self._tasks:
            raise KeyError(f"Task not found: {task_id}")
        task = self._tasks.pop(task_id)
        self._changed(task_id)
        return task

    def clear(self) -> None:
        self._tasks.clear()
        self._changed(None)

    # -- Placement writes (optimistic updater) --

    def snapshot(self, task_id: int, field: str) -> Snapshot:
        if field not in PLACEMENT_FIELDS:
            raise ValueError(f"Unknown placement field: {field}")
        return Snapshot(task_id, field, getattr(self.get(task_id), field))

    def apply(self, task_id: int, change: FieldChange) -> None:
        task = self.get(task_id)
        value = change.value
        if change.field == "sprint_id":
            value = normalize_sprint_id(value)
        setattr(task, change.field, value)
        self._changed(task_id)

    def restore(self, snapshot: Snapshot) -> bool:
        """Put a snapshot back. Returns False if the task has since been removed."""
        task = self._tasks.get(snapshot.task_id)
        if task is None:
            logger.info("Task %s left the board before rollback", snapshot.task_id)
            return False
        setattr(task, snapshot.field, snapshot.value)
        self._changed(snapshot.task_id)
        return True

    def touch(self, task_id: int) -> None:
        """Notify listeners about a task without changing it."""
        if task_id in self._tasks:
            self._changed(task_id)

    def confirm(self, task: Task) -> bool:
        """Adopt the server's record. Returns False if the task has been removed."""
        if task.id not in self._tasks:
            logger.info("Task %s left the board before confirmation", task.id)
            return False
        self._tasks[task.id] = task
        self._changed(task.id)
        return True
