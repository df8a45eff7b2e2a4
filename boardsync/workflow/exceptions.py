"""Placement exception types."""

from __future__ import annotations

from enum import Enum


class ErrorCategory(Enum):
    VALIDATION_REJECTED = "validation_rejected"
    GUARD_REFUSED = "guard_refused"
    TRANSPORT_FAILURE = "transport_failure"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"


class PlacementError(Exception):
    """Base class for every failure of a placement move."""

    category: ErrorCategory = ErrorCategory.TRANSPORT_FAILURE

    def __init__(self, message: str, task_id: int | None = None):
        self.message = message
        self.task_id = task_id
        super().__init__(message)


class ValidationRejected(PlacementError):
    """Raised when a proposed move breaks a placement rule."""

    category = ErrorCategory.VALIDATION_REJECTED

    def __init__(self, task_id: int | None, reason: str, source=None, destination=None):
        self.reason = reason
        self.source = source
        self.destination = destination
        super().__init__(reason, task_id)


class GuardRefused(PlacementError):
    """Raised when a task already has a placement request in flight."""

    category = ErrorCategory.GUARD_REFUSED

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} is already updating", task_id)


class SyncError(PlacementError):
    """A remote placement request failed."""

    def __init__(
        self,
        message: str,
        task_id: int | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message, task_id)


class TransportFailure(SyncError):
    """Network unreachable, timeout, or an unexpected non-2xx response."""

    category = ErrorCategory.TRANSPORT_FAILURE


class NotFound(SyncError):
    """The task no longer exists on the server."""

    category = ErrorCategory.NOT_FOUND


class ServerError(SyncError):
    """The server answered with a 5xx status."""

    category = ErrorCategory.SERVER_ERROR


class InvalidDragPayload(ValueError):
    """Raised when a draggable id does not carry a task id."""

    def __init__(self, draggable_id: str):
        self.draggable_id = draggable_id
        super().__init__(f"Not a task draggable id: {draggable_id!r}")
