"""Data types passed between the drag coordinator and the updater."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..workflow.exceptions import PlacementError
from ..workflow.models import Container, FieldChange, Task
from .surface import Notice


@dataclass(frozen=True)
class MoveRequest:
    task_id: int
    source: Container
    destination: Container
    change: FieldChange | None = None


class MoveOutcome(Enum):
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"
    DROPPED = "dropped"        # refused by the guard
    REJECTED = "rejected"      # refused by the placement rules
    NOOP = "noop"
    CANCELLED = "cancelled"    # gesture ended outside any container


@dataclass
class MoveResult:
    outcome: MoveOutcome
    task_id: int | None = None
    task: Task | None = None
    error: PlacementError | None = None
    notice: Notice | None = None

    @property
    def settled_ok(self) -> bool:
        return self.outcome in (MoveOutcome.CONFIRMED, MoveOutcome.NOOP)
