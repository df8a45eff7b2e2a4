"""Derive which container a task belongs to from its attributes."""

from __future__ import annotations

from collections.abc import Iterable

from ..workflow.models import (
    BoardView,
    Container,
    SprintContext,
    Task,
    TaskStatus,
    TaskType,
)

DEFAULT_COLUMNS: tuple[TaskStatus, ...] = (
    TaskStatus.BACKLOG,
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.REVIEW,
    TaskStatus.DONE,
)


def in_active_sprint(task: Task, context: SprintContext) -> bool:
    return task.sprint_id is not None and task.sprint_id == context.active_sprint_id


def classify(task: Task, context: SprintContext) -> Container | None:
    """Return the container ``task`` is shown in, or None when the view hides it."""
    if task.type is TaskType.EPIC:
        return Container.epic()
    if task.type is TaskType.APPROVAL:
        return Container.approvals()

    if context.view is BoardView.KANBAN:
        return Container.column(task.status)
    if context.view is BoardView.STATUS_BOARD:
        if not in_active_sprint(task, context):
            return None
        return Container.column(task.status)

    if task.sprint_id is None:
        return Container.backlog()
    if task.sprint_id == context.active_sprint_id:
        return Container.sprint()
    # Planned into some other sprint; hidden from the drop surface.
    return None


def board_containers(
    view: BoardView, columns: Iterable[TaskStatus] = DEFAULT_COLUMNS
) -> list[Container]:
    """Containers of a view in display order."""
    if view is BoardView.BACKLOG:
        middle = [Container.backlog(), Container.sprint()]
    else:
        middle = [Container.column(status) for status in columns]
    return [Container.epic(), *middle, Container.approvals()]


def group_by_container(
    tasks: Iterable[Task],
    context: SprintContext,
    columns: Iterable[TaskStatus] = DEFAULT_COLUMNS,
) -> dict[Container, list[Task]]:
    """Bucket tasks by container, keeping every container of the view.

    Tasks whose status has no column in ``columns`` are left out the same
    way as tasks the view excludes.
    """
    groups: dict[Container, list[Task]] = {
        container: [] for container in board_containers(context.view, columns)
    }
    for task in tasks:
        container = classify(task, context)
        if container in groups:
            groups[container].append(task)
    return groups
