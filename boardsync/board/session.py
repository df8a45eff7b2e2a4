"""One open board: store, rules, gestures and sync wired together."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..sync.guard import PlacementGuard
from ..sync.surface import ErrorSurface
from ..sync.types import MoveResult
from ..sync.updater import OptimisticUpdater
from ..workflow.interface import SyncBackend
from ..workflow.models import (
    BoardView,
    Container,
    Sprint,
    SprintContext,
    Task,
    TaskStatus,
)
from .classifier import DEFAULT_COLUMNS, group_by_container, in_active_sprint
from .drag import DragCoordinator
from .store import TaskStore

logger = logging.getLogger(__name__)


class BoardSession:
    def __init__(
        self,
        backend: SyncBackend,
        project_id: int,
        template_type: str = "scrum",
        view: BoardView = BoardView.STATUS_BOARD,
        columns: Iterable[TaskStatus] = DEFAULT_COLUMNS,
        enforce_approvals: bool = True,
    ):
        self.backend = backend
        self.project_id = project_id
        self.template_type = template_type
        self.columns = list(columns)
        self.sprint: Sprint | None = None
        self.store = TaskStore()
        self.guard = PlacementGuard()
        self.surface = ErrorSurface()
        self.updater = OptimisticUpdater(
            self.store,
            backend,
            project_id,
            template_type,
            guard=self.guard,
            surface=self.surface,
        )
        self.coordinator = DragCoordinator(
            self.store,
            self.updater,
            SprintContext(view=view),
            enforce_approvals=enforce_approvals,
        )

    @classmethod
    def from_config(cls, config, backend: SyncBackend) -> BoardSession:
        return cls(
            backend,
            config.project_id,
            template_type=config.template_type,
            view=config.view,
            columns=config.columns,
            enforce_approvals=config.enforce_approvals,
        )

    @property
    def context(self) -> SprintContext:
        return self.coordinator.context

    @property
    def view(self) -> BoardView:
        return self.context.view

    def set_view(self, view: BoardView) -> None:
        self.coordinator.context = SprintContext(view, self.context.active_sprint_id)

    def _set_sprint(self, sprint: Sprint | None) -> None:
        self.sprint = sprint
        self.coordinator.context = SprintContext(
            self.context.view, sprint.id if sprint else None
        )

    async def load(self) -> None:
        """Fetch the task list and latest sprint, replacing local state."""
        sprint = await self.backend.get_latest_sprint(self.project_id, self.template_type)
        tasks = await self.backend.list_tasks(self.project_id, self.template_type)
        self._set_sprint(sprint)
        self.store.load(tasks)
        logger.info(
            "Loaded %d tasks for project %s (sprint %s)",
            len(tasks),
            self.project_id,
            sprint.id if sprint else None,
        )

    async def refresh(self) -> None:
        await self.load()
        self.surface.clear()

    def close(self) -> None:
        """Drop local state when the board unmounts."""
        self.coordinator.cancel()
        self.store.clear()

    # -- Gestures --

    async def move(
        self, task_id: int | str, source: str, destination: str | None
    ) -> MoveResult:
        return await self.coordinator.drag(task_id, source, destination)

    def is_updating(self, task_id: int) -> bool:
        return self.guard.is_busy(task_id)

    # -- Views over the store --

    def containers(self, tasks: Iterable[Task] | None = None) -> dict[Container, list[Task]]:
        source = self.store.all() if tasks is None else tasks
        return group_by_container(source, self.context, self.columns)

    def sprint_tasks(self) -> list[Task]:
        return [t for t in self.store.all() if in_active_sprint(t, self.context)]

    def summary(self) -> dict:
        """Column counts plus progress of the active sprint."""
        groups = self.containers()
        sprint_tasks = self.sprint_tasks()
        done = [t for t in sprint_tasks if t.status is TaskStatus.DONE]
        points_total = sum(t.story_points or 0 for t in sprint_tasks)
        points_done = sum(t.story_points or 0 for t in done)
        return {
            "project_id": self.project_id,
            "view": self.view.value,
            "sprint": self.sprint.name if self.sprint else None,
            "total_tasks": len(self.store),
            "columns": {c.droppable_id: len(tasks) for c, tasks in groups.items()},
            "sprint_tasks": len(sprint_tasks),
            "sprint_done": len(done),
            "progress_pct": (
                round(len(done) / len(sprint_tasks) * 100, 1) if sprint_tasks else 0.0
            ),
            "story_points_total": points_total,
            "story_points_done": points_done,
            "updating": sorted(self.guard.in_flight),
        }
