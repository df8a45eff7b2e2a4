"""Task placement rules defined as data plus a few type checks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import ValidationRejected
from .models import (
    Container,
    ContainerKind,
    FieldChange,
    SprintContext,
    Task,
    TaskType,
)

EPIC_READ_ONLY = "Epic tasks are read-only placement."
EPIC_CONTAINER_RESERVED = "Only Epic-type tasks may occupy the Epic container."
APPROVALS_RESERVED = "Only Approval-type tasks may enter Approvals."
APPROVAL_STAYS = "Approval tasks must stay in Approvals."
NO_ACTIVE_SPRINT = "There is no active sprint to plan into."

VALID_MOVES: frozenset[tuple[ContainerKind, ContainerKind]] = frozenset(
    {
        (ContainerKind.STATUS, ContainerKind.STATUS),        # change status
        (ContainerKind.BACKLOG, ContainerKind.SPRINT),       # plan into sprint
        (ContainerKind.SPRINT, ContainerKind.BACKLOG),       # return to backlog
        (ContainerKind.STATUS, ContainerKind.APPROVALS),     # approval re-homed
        (ContainerKind.BACKLOG, ContainerKind.APPROVALS),
        (ContainerKind.SPRINT, ContainerKind.APPROVALS),
        (ContainerKind.APPROVALS, ContainerKind.STATUS),     # guarded by APPROVAL_STAYS
    }
)


class Verdict(Enum):
    ALLOWED = "allowed"
    NOOP = "noop"
    REJECTED = "rejected"


@dataclass(frozen=True)
class MoveDecision:
    verdict: Verdict
    change: FieldChange | None = None
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.ALLOWED

    @classmethod
    def noop(cls) -> MoveDecision:
        return cls(Verdict.NOOP)

    @classmethod
    def rejected(cls, reason: str) -> MoveDecision:
        return cls(Verdict.REJECTED, reason=reason)


def _proposed_change(
    destination: Container, context: SprintContext
) -> FieldChange | None:
    if destination.kind is ContainerKind.STATUS:
        return FieldChange("status", destination.status)
    if destination.kind is ContainerKind.SPRINT:
        return FieldChange("sprint_id", context.active_sprint_id)
    if destination.kind is ContainerKind.BACKLOG:
        return FieldChange("sprint_id", None)
    return None


def evaluate_move(
    task: Task,
    source: Container,
    destination: Container,
    context: SprintContext,
    enforce_approvals: bool = True,
) -> MoveDecision:
    """Decide whether moving ``task`` from ``source`` to ``destination`` is legal.

    Rules run in order and the first that applies wins. An allowed move
    whose target value is already the task's value collapses to NOOP so
    repeating a move never reaches the network. Entering Approvals is
    allowed without a field change: membership there follows the type.
    """
    if source == destination:
        return MoveDecision.noop()
    if task.type is TaskType.EPIC:
        return MoveDecision.rejected(EPIC_READ_ONLY)
    if destination.kind is ContainerKind.EPIC:
        return MoveDecision.rejected(EPIC_CONTAINER_RESERVED)
    if destination.kind is ContainerKind.APPROVALS and task.type is not TaskType.APPROVAL:
        return MoveDecision.rejected(APPROVALS_RESERVED)
    if (
        destination.is_status_column
        and task.type is TaskType.APPROVAL
        and enforce_approvals
        and context.view.has_status_columns
    ):
        return MoveDecision.rejected(APPROVAL_STAYS)
    if (source.kind, destination.kind) not in VALID_MOVES:
        return MoveDecision.rejected(f"Cannot move a task from {source} to {destination}.")
    if destination.kind is ContainerKind.SPRINT and context.active_sprint_id is None:
        return MoveDecision.rejected(NO_ACTIVE_SPRINT)

    change = _proposed_change(destination, context)
    if change is not None and getattr(task, change.field) == change.value:
        return MoveDecision.noop()
    return MoveDecision(Verdict.ALLOWED, change=change)


def validate_move(
    task: Task,
    source: Container,
    destination: Container,
    context: SprintContext,
    enforce_approvals: bool = True,
) -> FieldChange | None:
    """Return the field change for a move, or raise ValidationRejected."""
    decision = evaluate_move(task, source, destination, context, enforce_approvals)
    if decision.verdict is Verdict.REJECTED:
        raise ValidationRejected(task.id, decision.reason, source, destination)
    return decision.change
