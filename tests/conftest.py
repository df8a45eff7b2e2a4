"""Shared test configuration."""

from __future__ import annotations

import pytest

from boardsync.adapters.memory import InMemorySyncBackend
from boardsync.board.session import BoardSession
from boardsync.workflow.models import BoardView, Sprint, Task, TaskStatus, TaskType

ACTIVE_SPRINT_ID = 9


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def make_task(task_id: int = 1, **fields) -> Task:
    fields.setdefault("title", f"Task {task_id}")
    return Task(id=task_id, **fields)


@pytest.fixture
def sprint():
    return Sprint(id=ACTIVE_SPRINT_ID, name="Sprint 9", goal="Ship it")


@pytest.fixture
def board_tasks():
    return [
        make_task(1, type=TaskType.TASK, status=TaskStatus.TODO, sprint_id=ACTIVE_SPRINT_ID),
        make_task(2, type=TaskType.EPIC, status=TaskStatus.IN_PROGRESS),
        make_task(3, type=TaskType.APPROVAL, status=TaskStatus.BACKLOG, sprint_id=ACTIVE_SPRINT_ID),
        make_task(4, type=TaskType.STORY, status=TaskStatus.BACKLOG, sprint_id=None),
        make_task(5, type=TaskType.BUG, status=TaskStatus.DONE, sprint_id=3),
    ]


@pytest.fixture
def backend(board_tasks, sprint):
    return InMemorySyncBackend(tasks=board_tasks, sprints=[sprint])


@pytest.fixture
def session(backend):
    return BoardSession(backend, project_id=42)


@pytest.fixture
def backlog_session(backend):
    return BoardSession(backend, project_id=42, view=BoardView.BACKLOG)
