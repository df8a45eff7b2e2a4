"""Turn drag-and-drop gestures into placement requests."""

from __future__ import annotations

import logging
import re
from enum import Enum

from ..sync.types import MoveOutcome, MoveRequest, MoveResult
from ..sync.updater import OptimisticUpdater
from ..workflow.exceptions import InvalidDragPayload, ValidationRejected
from ..workflow.models import Container, SprintContext
from ..workflow.transitions import Verdict, evaluate_move
from .classifier import classify
from .store import TaskStore

logger = logging.getLogger(__name__)

_DRAGGABLE_RE = re.compile(r"^(?:task-)?(\d+)$")


def parse_draggable_id(draggable_id: str | int) -> int:
    """Read the task id out of ``"task-<id>"`` or a bare id."""
    if isinstance(draggable_id, int):
        return draggable_id
    match = _DRAGGABLE_RE.match(str(draggable_id).strip())
    if match is None:
        raise InvalidDragPayload(str(draggable_id))
    return int(match.group(1))


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVING = "resolving"


class DragCoordinator:
    """Tracks one gesture at a time and hands legal moves to the updater."""

    def __init__(
        self,
        store: TaskStore,
        updater: OptimisticUpdater,
        context: SprintContext,
        enforce_approvals: bool = True,
    ):
        self.store = store
        self.updater = updater
        self.context = context
        self.enforce_approvals = enforce_approvals
        self.state = DragState.IDLE
        self.task_id: int | None = None
        self.source: Container | None = None
        self.hovered: Container | None = None
        self.last_rejection: ValidationRejected | None = None

    def _container(self, droppable_id: str) -> Container:
        return Container.from_droppable_id(droppable_id, self.context.view)

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.task_id = None
        self.source = None
        self.hovered = None

    def start(self, draggable_id: str | int, source_droppable_id: str) -> None:
        if self.state is not DragState.IDLE:
            raise RuntimeError(f"A drag of task {self.task_id} is already in progress")
        task_id = parse_draggable_id(draggable_id)
        source = self._container(source_droppable_id)
        self.task_id = task_id
        self.source = source
        self.hovered = source
        self.last_rejection = None
        self.state = DragState.DRAGGING
        logger.debug("Drag started: task %s from %s", task_id, source)

    def hover(self, droppable_id: str | None) -> Container | None:
        if self.state is not DragState.DRAGGING:
            return None
        self.hovered = self._container(droppable_id) if droppable_id else None
        return self.hovered

    def cancel(self) -> None:
        if self.state is DragState.DRAGGING:
            logger.debug("Drag of task %s cancelled", self.task_id)
        self._reset()

    def resolve(self, destination_droppable_id: str | None) -> MoveRequest | None:
        """Finish the gesture and return the move to perform, if any.

        Always leaves the coordinator IDLE. A rejected move is reported to
        the error surface and returns None so the card snaps back.
        """
        if self.state is not DragState.DRAGGING:
            raise RuntimeError("No drag in progress")
        if not destination_droppable_id:
            self.cancel()
            return None

        self.state = DragState.RESOLVING
        task_id, source = self.task_id, self.source
        try:
            destination = self._container(destination_droppable_id)
            task = self.store.find(task_id)
            if task is None:
                self._reject(ValidationRejected(task_id, f"Task {task_id} not found", source, destination))
                return None

            actual = classify(task, self.context)
            if actual is None:
                self._reject(ValidationRejected(
                    task_id, f"Task {task_id} is not on the {self.context.view.value} board.",
                    source, destination,
                ))
                return None
            if actual == destination:
                # Already there; a stale source must not turn this into an error.
                return MoveRequest(task_id, actual, destination)
            if actual != source:
                self._reject(ValidationRejected(
                    task_id, f"Task {task_id} is in {actual}, not {source}; refresh the board.",
                    source, destination,
                ))
                return None

            decision = evaluate_move(
                task, source, destination, self.context, self.enforce_approvals
            )
            if decision.verdict is Verdict.REJECTED:
                self._reject(ValidationRejected(task_id, decision.reason, source, destination))
                return None
            return MoveRequest(task_id, source, destination, decision.change)
        finally:
            self._reset()

    def _reject(self, error: ValidationRejected) -> None:
        logger.info("Rejected move of task %s: %s", error.task_id, error.reason)
        self.last_rejection = error
        self.updater.surface.report(error)

    async def end(self, destination_droppable_id: str | None) -> MoveResult:
        """Resolve the gesture, then run the move through the updater."""
        task_id = self.task_id
        request = self.resolve(destination_droppable_id)
        if request is None:
            if destination_droppable_id and self.last_rejection is not None:
                return MoveResult(
                    MoveOutcome.REJECTED,
                    task_id=task_id,
                    error=self.last_rejection,
                    notice=self.updater.surface.latest,
                )
            return MoveResult(MoveOutcome.CANCELLED, task_id=task_id)
        return await self.updater.apply(request)

    async def drag(
        self, draggable_id: str | int, source_droppable_id: str, destination_droppable_id: str | None
    ) -> MoveResult:
        """Run a whole gesture in one call."""
        self.start(draggable_id, source_droppable_id)
        return await self.end(destination_droppable_id)
