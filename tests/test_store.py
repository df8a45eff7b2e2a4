"""Tests for the in-memory task store."""

import pytest

from conftest import ACTIVE_SPRINT_ID, make_task

from boardsync.board.store import TaskStore
from boardsync.workflow.models import (
    BoardView,
    Container,
    FieldChange,
    SprintContext,
    TaskPriority,
    TaskStatus,
    TaskType,
)


@pytest.fixture
def store(board_tasks):
    return TaskStore(board_tasks)


class TestReads:
    def test_get_missing_raises(self, store):
        with pytest.raises(KeyError, match="Task not found"):
            store.get(999)

    def test_find_missing_is_none(self, store):
        assert store.find(999) is None

    def test_contains_and_len(self, store):
        assert 1 in store
        assert len(store) == 5

    def test_in_container(self, store):
        context = SprintContext(BoardView.BACKLOG, ACTIVE_SPRINT_ID)
        ids = [t.id for t in store.in_container(Container.backlog(), context)]
        assert ids == [4]


class TestSearchAndFilter:
    def test_search_matches_title_assignee_labels(self):
        store = TaskStore([
            make_task(1, title="Login page", assignee="ana"),
            make_task(2, title="Report", labels=["Frontend"]),
            make_task(3, title="Other", description="touches LOGIN flow"),
        ])
        assert {t.id for t in store.search("login")} == {1, 3}
        assert {t.id for t in store.search("frontend")} == {2}
        assert {t.id for t in store.search("ANA")} == {1}

    def test_empty_search_returns_all(self, store):
        assert len(store.search("")) == 5

    def test_filter_combines_criteria(self):
        store = TaskStore([
            make_task(1, type=TaskType.BUG, priority=TaskPriority.HIGH),
            make_task(2, type=TaskType.BUG, priority=TaskPriority.LOW),
            make_task(3, type=TaskType.STORY, priority=TaskPriority.HIGH),
        ])
        result = store.filter(types=[TaskType.BUG], priorities=[TaskPriority.HIGH])
        assert [t.id for t in result] == [1]

    def test_filter_by_status(self, store):
        assert {t.id for t in store.filter(statuses=[TaskStatus.BACKLOG])} == {3, 4}


class TestPlacementWrites:
    def test_snapshot_apply_restore(self, store):
        snap = store.snapshot(1, "status")
        store.apply(1, FieldChange("status", TaskStatus.DONE))
        assert store.get(1).status is TaskStatus.DONE
        assert store.restore(snap)
        assert store.get(1).status is TaskStatus.TODO

    def test_apply_normalizes_sprint(self, store):
        store.apply(4, FieldChange("sprint_id", 0))
        assert store.get(4).sprint_id is None

    def test_snapshot_rejects_other_fields(self, store):
        with pytest.raises(ValueError, match="Unknown placement field"):
            store.snapshot(1, "title")

    def test_restore_after_removal_is_skipped(self, store):
        snap = store.snapshot(1, "status")
        store.remove(1)
        assert store.restore(snap) is False
        assert 1 not in store

    def test_confirm_replaces_record(self, store):
        server = make_task(1, title="Renamed", status=TaskStatus.DONE)
        assert store.confirm(server)
        assert store.get(1).title == "Renamed"

    def test_confirm_after_removal_does_not_resurrect(self, store):
        store.remove(1)
        assert store.confirm(make_task(1)) is False
        assert 1 not in store


class TestRecordWrites:
    def test_add_duplicate_raises(self, store):
        with pytest.raises(ValueError, match="already loaded"):
            store.add(make_task(1))

    def test_replace_missing_raises(self, store):
        with pytest.raises(KeyError):
            store.replace(make_task(99))

    def test_load_replaces_everything(self, store):
        store.load([make_task(10)])
        assert [t.id for t in store.all()] == [10]

    def test_clear(self, store):
        store.clear()
        assert len(store) == 0

    def test_listeners_see_changes(self, store):
        seen = []
        store.subscribe(seen.append)
        store.apply(1, FieldChange("status", TaskStatus.DONE))
        store.remove(2)
        store.clear()
        assert seen == [1, 2, None]

    def test_touch_notifies_without_change(self, store):
        seen = []
        store.subscribe(seen.append)
        store.touch(1)
        store.touch(999)
        assert seen == [1]
        assert store.get(1).status is TaskStatus.TODO
