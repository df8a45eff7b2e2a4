"""Tests for the per-task placement guard."""

import pytest

from boardsync.sync.guard import PlacementGuard
from boardsync.workflow.exceptions import GuardRefused


@pytest.fixture
def guard():
    return PlacementGuard()


class TestTryAcquire:
    def test_first_acquire_wins(self, guard):
        assert guard.try_acquire(1)
        assert not guard.try_acquire(1)

    def test_independent_tasks(self, guard):
        assert guard.try_acquire(1)
        assert guard.try_acquire(2)
        assert guard.in_flight == frozenset({1, 2})

    def test_release_allows_reacquire(self, guard):
        guard.try_acquire(1)
        guard.release(1)
        assert guard.try_acquire(1)

    def test_release_unknown_is_harmless(self, guard):
        guard.release(5)
        assert not guard.is_busy(5)

    def test_contains(self, guard):
        guard.try_acquire(3)
        assert 3 in guard
        assert 4 not in guard


class TestHold:
    def test_releases_on_success(self, guard):
        with guard.hold(1):
            assert guard.is_busy(1)
        assert not guard.is_busy(1)

    def test_releases_on_exception(self, guard):
        with pytest.raises(RuntimeError):
            with guard.hold(1):
                raise RuntimeError("boom")
        assert not guard.is_busy(1)

    def test_refuses_when_busy(self, guard):
        with guard.hold(1):
            with pytest.raises(GuardRefused) as info:
                with guard.hold(1):
                    pass  # pragma: no cover
            assert info.value.task_id == 1
            # The refused attempt must not release the outer hold.
            assert guard.is_busy(1)
        assert not guard.is_busy(1)
