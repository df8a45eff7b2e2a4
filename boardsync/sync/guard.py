"""Per-task guard allowing one in-flight placement request."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from ..workflow.exceptions import GuardRefused


class PlacementGuard:
    def __init__(self) -> None:
        self._in_flight: set[int] = set()

    def try_acquire(self, task_id: int) -> bool:
        if task_id in self._in_flight:
            return False
        self._in_flight.add(task_id)
        return True

    def release(self, task_id: int) -> None:
        self._in_flight.discard(task_id)

    def is_busy(self, task_id: int) -> bool:
        return task_id in self._in_flight

    __contains__ = is_busy

    @property
    def in_flight(self) -> frozenset[int]:
        return frozenset(self._in_flight)

    @contextmanager
    def hold(self, task_id: int) -> Iterator[int]:
        """Own ``task_id`` for the body of a ``with`` block.

        Raises GuardRefused without entering the body if another request
        owns the task. Release happens on every exit path.
        """
        if not self.try_acquire(task_id):
            raise GuardRefused(task_id)
        try:
            yield task_id
        finally:
            self.release(task_id)
