from .models import (
    BoardView,
    Container,
    ContainerKind,
    FieldChange,
    Sprint,
    SprintContext,
    Task,
    TaskPriority,
    TaskStatus,
    TaskType,
)
from .interface import SyncBackend

__all__ = [
    "Task",
    "Sprint",
    "TaskType",
    "TaskStatus",
    "TaskPriority",
    "BoardView",
    "Container",
    "ContainerKind",
    "FieldChange",
    "SprintContext",
    "SyncBackend",
]
