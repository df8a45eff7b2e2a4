"""Abstract sync backend protocol."""

from typing import Protocol

from .models import Sprint, Task, TaskStatus


class SyncBackend(Protocol):
    """Interface that any remote system of record must implement.

    Placement updates return the server's version of the task, or None
    when the server acknowledged the change without a body.
    """

    async def update_status(
        self,
        project_id: int,
        task_id: int,
        status: TaskStatus,
        template_type: str = "scrum",
    ) -> Task | None: ...

    async def update_sprint_assignment(
        self,
        project_id: int,
        task_id: int,
        sprint_id: int | None,
        template_type: str = "scrum",
    ) -> Task | None: ...

    async def list_tasks(self, project_id: int, template_type: str = "scrum") -> list[Task]: ...

    async def get_latest_sprint(
        self, project_id: int, template_type: str = "scrum"
    ) -> Sprint | None: ...
