from .guard import PlacementGuard
from .surface import ErrorSurface, Notice
from .types import MoveOutcome, MoveRequest, MoveResult
from .updater import OptimisticUpdater

__all__ = [
    "PlacementGuard",
    "ErrorSurface",
    "Notice",
    "MoveOutcome",
    "MoveRequest",
    "MoveResult",
    "OptimisticUpdater",
]
