"""In-memory sync backend for tests and demos."""

from __future__ import annotations

import asyncio
import copy

from ..workflow.exceptions import NotFound, SyncError
from ..workflow.models import Sprint, Task, TaskStatus, TaskType


class InMemorySyncBackend:
    """SyncBackend backed by dicts.

    ``fail_next`` queues errors that the next placement updates raise, and
    ``pause``/``resume`` hold placement updates in flight so tests can
    interleave gestures while a request is outstanding.
    """

    def __init__(
        self,
        tasks: list[Task] | None = None,
        sprints: list[Sprint] | None = None,
        echo_records: bool = True,
    ):
        self._tasks: dict[int, Task] = {t.id: copy.deepcopy(t) for t in tasks or []}
        self._sprints: list[Sprint] = list(sprints or [])
        self._failures: list[SyncError] = []
        self._gate = asyncio.Event()
        self._gate.set()
        self.echo_records = echo_records
        self.calls: list[tuple] = []

    # -- Test controls --

    def fail_next(self, error: SyncError, times: int = 1) -> None:
        self._failures.extend([error] * times)

    def pause(self) -> None:
        self._gate.clear()

    def resume(self) -> None:
        self._gate.set()

    def add_task(self, task: Task) -> None:
        self._tasks[task.id] = copy.deepcopy(task)

    def delete_task(self, task_id: int) -> None:
        self._tasks.pop(task_id, None)

    def add_sprint(self, sprint: Sprint) -> None:
        self._sprints.append(sprint)

    def server_task(self, task_id: int) -> Task:
        if task_id not in self._tasks:
            raise KeyError(f"Task not found: {task_id}")
        return self._tasks[task_id]

    # -- SyncBackend --

    async def _placement(self, task_id: int, field: str, value) -> Task | None:
        await self._gate.wait()
        if self._failures:
            error = self._failures.pop(0)
            raise error
        if task_id not in self._tasks:
            raise NotFound(f"Task not found: {task_id}", task_id=task_id, status_code=404)
        task = self._tasks[task_id]
        setattr(task, field, value)
        return copy.deepcopy(task) if self.echo_records else None

    async def update_status(
        self,
        project_id: int,
        task_id: int,
        status: TaskStatus,
        template_type: str = "scrum",
    ) -> Task | None:
        self.calls.append(("update_status", project_id, task_id, status, template_type))
        return await self._placement(task_id, "status", status)

    async def update_sprint_assignment(
        self,
        project_id: int,
        task_id: int,
        sprint_id: int | None,
        template_type: str = "scrum",
    ) -> Task | None:
        self.calls.append(
            ("update_sprint_assignment", project_id, task_id, sprint_id, template_type)
        )
        return await self._placement(task_id, "sprint_id", sprint_id)

    async def list_tasks(self, project_id: int, template_type: str = "scrum") -> list[Task]:
        self.calls.append(("list_tasks", project_id, template_type))
        return [copy.deepcopy(t) for t in self._tasks.values()]

    async def get_latest_sprint(
        self, project_id: int, template_type: str = "scrum"
    ) -> Sprint | None:
        self.calls.append(("get_latest_sprint", project_id, template_type))
        if not self._sprints:
            return None
        return copy.deepcopy(self._sprints[-1])


def demo_backend() -> InMemorySyncBackend:
    """A small seeded project for --mock runs and the demo board."""
    sprint = Sprint(id=9, name="Sprint 9", goal="Ship drag-and-drop planning")
    tasks = [
        Task(1, "Set up CI", type=TaskType.TASK, status=TaskStatus.TODO, sprint_id=9,
             story_points=3, assignee="ana"),
        Task(2, "Planning epic", type=TaskType.EPIC, status=TaskStatus.IN_PROGRESS),
        Task(3, "Sign off release", type=TaskType.APPROVAL, status=TaskStatus.REVIEW,
             sprint_id=9),
        Task(4, "Login page bug", type=TaskType.BUG, status=TaskStatus.BACKLOG,
             story_points=2, labels=["frontend"]),
        Task(5, "Board filters", type=TaskType.STORY, status=TaskStatus.IN_PROGRESS,
             sprint_id=9, story_points=5, assignee="li"),
        Task(6, "Sprint report", type=TaskType.STORY, status=TaskStatus.DONE, sprint_id=9,
             story_points=1),
    ]
    return InMemorySyncBackend(tasks=tasks, sprints=[sprint])
