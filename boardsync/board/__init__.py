from .store import Snapshot, TaskStore
from .classifier import classify, group_by_container
from .drag import DragCoordinator, DragState, parse_draggable_id
from .session import BoardSession

__all__ = [
    "TaskStore",
    "Snapshot",
    "classify",
    "group_by_container",
    "DragCoordinator",
    "DragState",
    "parse_draggable_id",
    "BoardSession",
]
