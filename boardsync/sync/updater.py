"""Optimistic placement updates with rollback on failure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..workflow.exceptions import GuardRefused, SyncError
from ..workflow.interface import SyncBackend
from ..workflow.models import FieldChange, Task
from .guard import PlacementGuard
from .surface import ErrorSurface
from .types import MoveOutcome, MoveRequest, MoveResult

if TYPE_CHECKING:
    from ..board.store import TaskStore

logger = logging.getLogger(__name__)


class OptimisticUpdater:
    """Apply a move to the store at once, then reconcile with the server.

    Order of a move: acquire the guard, snapshot the field, write the new
    value, send the request, then keep the value (or the server's record)
    on success or restore the snapshot on failure. The guard is released
    on every path.
    """

    def __init__(
        self,
        store: TaskStore,
        backend: SyncBackend,
        project_id: int,
        template_type: str = "scrum",
        guard: PlacementGuard | None = None,
        surface: ErrorSurface | None = None,
    ):
        self.store = store
        self.backend = backend
        self.project_id = project_id
        self.template_type = template_type
        self.guard = guard or PlacementGuard()
        self.surface = surface or ErrorSurface()

    async def apply(self, request: MoveRequest) -> MoveResult:
        if request.change is None:
            return MoveResult(MoveOutcome.NOOP, task_id=request.task_id)

        held = False
        try:
            with self.guard.hold(request.task_id):
                held = True
                return await self._commit(request.task_id, request.change)
        except GuardRefused as exc:
            logger.debug("Dropped move of task %s: request in flight", request.task_id)
            notice = self.surface.report(exc)
            return MoveResult(
                MoveOutcome.DROPPED, task_id=request.task_id, error=exc, notice=notice
            )
        finally:
            # Runs after the guard is released so listeners see the task idle.
            if held:
                self.store.touch(request.task_id)

    async def _commit(self, task_id: int, change: FieldChange) -> MoveResult:
        snapshot = self.store.snapshot(task_id, change.field)
        self.store.apply(task_id, change)
        logger.info(
            "Moving task %s: %s %r -> %r", task_id, change.field, snapshot.value, change.value
        )

        try:
            updated = await self._send(task_id, change)
        except SyncError as exc:
            self.store.restore(snapshot)
            if exc.task_id is None:
                exc.task_id = task_id
            logger.warning(
                "Rolled back task %s to %s=%r: %s", task_id, change.field, snapshot.value, exc
            )
            notice = self.surface.report(exc)
            return MoveResult(
                MoveOutcome.ROLLED_BACK,
                task_id=task_id,
                task=self.store.find(task_id),
                error=exc,
                notice=notice,
            )
        except BaseException:
            self.store.restore(snapshot)
            raise

        if updated is not None:
            self.store.confirm(updated)
        return MoveResult(MoveOutcome.CONFIRMED, task_id=task_id, task=self.store.find(task_id))

    async def _send(self, task_id: int, change: FieldChange) -> Task | None:
        if change.field == "status":
            return await self.backend.update_status(
                self.project_id, task_id, change.value, self.template_type
            )
        return await self.backend.update_sprint_assignment(
            self.project_id, task_id, change.value, self.template_type
        )
