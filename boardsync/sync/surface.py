"""User-facing notices for failed or refused moves."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..workflow.exceptions import ErrorCategory, PlacementError

SEVERITIES = {
    ErrorCategory.VALIDATION_REJECTED: "warning",
    ErrorCategory.GUARD_REFUSED: "information",
    ErrorCategory.TRANSPORT_FAILURE: "error",
    ErrorCategory.NOT_FOUND: "error",
    ErrorCategory.SERVER_ERROR: "error",
}


@dataclass(frozen=True)
class Notice:
    category: ErrorCategory
    message: str
    task_id: int | None = None
    severity: str = "error"
    refresh_suggested: bool = False

    @property
    def is_error(self) -> bool:
        return self.category is not ErrorCategory.GUARD_REFUSED


def describe(error: PlacementError) -> str:
    """Human-readable text for a placement failure."""
    task = f"task {error.task_id}" if error.task_id is not None else "the task"
    category = error.category
    if category is ErrorCategory.VALIDATION_REJECTED:
        return error.message
    if category is ErrorCategory.GUARD_REFUSED:
        return f"{task.capitalize()} is already updating; wait for it to finish."
    if category is ErrorCategory.NOT_FOUND:
        return (
            f"Could not find {task} on the server. It may have been removed; "
            "refresh the board."
        )
    if category is ErrorCategory.SERVER_ERROR:
        return (
            f"The server had a temporary problem moving {task}. "
            "The move was undone; try again shortly."
        )
    return f"Could not move {task}: {error.message}. The move was undone; try again."


class ErrorSurface:
    """Collects notices and fans them out to the UI."""

    def __init__(self, max_notices: int = 50) -> None:
        self.max_notices = max_notices
        self._notices: list[Notice] = []
        self._listeners: list[Callable[[Notice], None]] = []

    def subscribe(self, callback: Callable[[Notice], None]) -> None:
        self._listeners.append(callback)

    def report(self, error: PlacementError) -> Notice:
        notice = Notice(
            category=error.category,
            message=describe(error),
            task_id=error.task_id,
            severity=SEVERITIES[error.category],
            refresh_suggested=error.category is ErrorCategory.NOT_FOUND,
        )
        self._notices.append(notice)
        excess = len(self._notices) - self.max_notices
        if excess > 0:
            del self._notices[:excess]
        for callback in list(self._listeners):
            callback(notice)
        return notice

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    @property
    def errors(self) -> list[Notice]:
        return [n for n in self._notices if n.is_error]

    @property
    def latest(self) -> Notice | None:
        return self._notices[-1] if self._notices else None

    @property
    def refresh_suggested(self) -> bool:
        return any(n.refresh_suggested for n in self._notices)

    def dismiss(self, notice: Notice) -> None:
        if notice in self._notices:
            self._notices.remove(notice)

    def clear(self) -> None:
        self._notices.clear()
