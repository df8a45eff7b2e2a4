"""Domain models for task placement."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TaskType(Enum):
    STORY = "Story"
    BUG = "Bug"
    TASK = "Task"
    EPIC = "Epic"
    ISSUE = "Issue"
    APPROVAL = "Approval"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str | None) -> TaskType:
        """Map a wire value to a TaskType; unknown values become OTHER."""
        for member in cls:
            if member.value == value:
                return member
        return cls.OTHER


class TaskStatus(Enum):
    BACKLOG = "Backlog"
    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    DONE = "Done"

    @classmethod
    def parse(cls, value: str | None) -> TaskStatus:
        """Map a wire value to a TaskStatus.

        "Approvals" is what the web board stores for tasks dropped in its
        Approvals column; those tasks are awaiting sign-off, so Review.
        Unknown values land in Backlog.
        """
        for member in cls:
            if member.value == value:
                return member
        if value == "Approvals":
            return cls.REVIEW
        return cls.BACKLOG


class TaskPriority(Enum):
    HIGHEST = "Highest"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    LOWEST = "Lowest"

    @classmethod
    def parse(cls, value: str | None) -> TaskPriority:
        for member in cls:
            if member.value == value:
                return member
        return cls.MEDIUM


class BoardView(Enum):
    STATUS_BOARD = "status"   # scrum board, scoped to the active sprint
    BACKLOG = "backlog"       # backlog / sprint split
    KANBAN = "kanban"         # status board without sprint scoping

    @property
    def has_status_columns(self) -> bool:
        return self is not BoardView.BACKLOG


class ContainerKind(Enum):
    STATUS = "status"
    EPIC = "epic"
    APPROVALS = "approvals"
    BACKLOG = "backlog"
    SPRINT = "sprint"


EPIC_DROPPABLE_ID = "Epic"
APPROVALS_DROPPABLE_ID = "Approvals"
BACKLOG_DROPPABLE_ID = "Backlog"
SPRINT_DROPPABLE_ID = "Sprint"


@dataclass(frozen=True)
class Container:
    """A logical drop target. Computed from task attributes, never stored."""

    kind: ContainerKind
    status: TaskStatus | None = None

    @classmethod
    def column(cls, status: TaskStatus) -> Container:
        return cls(ContainerKind.STATUS, status)

    @classmethod
    def epic(cls) -> Container:
        return cls(ContainerKind.EPIC)

    @classmethod
    def approvals(cls) -> Container:
        return cls(ContainerKind.APPROVALS)

    @classmethod
    def backlog(cls) -> Container:
        return cls(ContainerKind.BACKLOG)

    @classmethod
    def sprint(cls) -> Container:
        return cls(ContainerKind.SPRINT)

    @property
    def droppable_id(self) -> str:
        if self.kind is ContainerKind.STATUS:
            return self.status.value
        return {
            ContainerKind.EPIC: EPIC_DROPPABLE_ID,
            ContainerKind.APPROVALS: APPROVALS_DROPPABLE_ID,
            ContainerKind.BACKLOG: BACKLOG_DROPPABLE_ID,
            ContainerKind.SPRINT: SPRINT_DROPPABLE_ID,
        }[self.kind]

    @property
    def is_status_column(self) -> bool:
        return self.kind is ContainerKind.STATUS

    @classmethod
    def from_droppable_id(cls, value: str, view: BoardView) -> Container:
        """Parse a droppable id in the context of a board view.

        "Backlog" is the Backlog status column on a status board and the
        backlog region in the split view.
        """
        if value == EPIC_DROPPABLE_ID:
            return cls.epic()
        if value == APPROVALS_DROPPABLE_ID:
            return cls.approvals()
        if view is BoardView.BACKLOG:
            if value == BACKLOG_DROPPABLE_ID:
                return cls.backlog()
            if value == SPRINT_DROPPABLE_ID:
                return cls.sprint()
        else:
            for status in TaskStatus:
                if status.value == value:
                    return cls.column(status)
        raise ValueError(f"Unknown container for {view.value} view: {value!r}")

    def __str__(self) -> str:
        return self.droppable_id


@dataclass(frozen=True)
class SprintContext:
    """Which view is showing and which sprint is the active one."""

    view: BoardView = BoardView.STATUS_BOARD
    active_sprint_id: int | None = None


PLACEMENT_FIELDS = ("status", "sprint_id")


@dataclass(frozen=True)
class FieldChange:
    field: str
    value: TaskStatus | int | None

    def __post_init__(self) -> None:
        if self.field not in PLACEMENT_FIELDS:
            raise ValueError(f"Not a placement field: {self.field}")


def normalize_sprint_id(value) -> int | None:
    """Collapse the "no sprint" sentinels (None, 0, "") to None."""
    if value in (None, 0, "", "0"):
        return None
    return int(value)


@dataclass
class Task:
    id: int
    title: str
    type: TaskType = TaskType.TASK
    status: TaskStatus = TaskStatus.TODO
    sprint_id: int | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: str = ""
    reporter: str = ""
    description: str | None = None
    due_date: str | None = None
    story_points: int | None = None
    labels: list[str] = field(default_factory=list)
    epic: str | None = None
    project_id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def __post_init__(self) -> None:
        self.sprint_id = normalize_sprint_id(self.sprint_id)

    @property
    def draggable_id(self) -> str:
        return f"task-{self.id}"

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            type=TaskType.parse(data.get("type")),
            status=TaskStatus.parse(data.get("status") or TaskStatus.TODO.value),
            sprint_id=normalize_sprint_id(data.get("sprintId")),
            priority=TaskPriority.parse(data.get("priority")),
            assignee=data.get("assignee") or "",
            reporter=data.get("reporter") or "",
            description=data.get("description"),
            due_date=data.get("dueDate"),
            story_points=data.get("storyPoints"),
            labels=list(data.get("labels") or []),
            epic=data.get("epic"),
            project_id=data.get("projectId"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "status": self.status.value,
            "sprintId": self.sprint_id,
            "priority": self.priority.value,
            "assignee": self.assignee,
            "reporter": self.reporter,
            "description": self.description,
            "dueDate": self.due_date,
            "storyPoints": self.story_points,
            "labels": list(self.labels),
            "epic": self.epic,
            "projectId": self.project_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Sprint:
    id: int
    name: str
    start_date: str | None = None
    end_date: str | None = None
    goal: str | None = None
    status: str | None = None
    project_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Sprint:
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            goal=data.get("goal"),
            status=data.get("status"),
            project_id=data.get("projectId"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "goal": self.goal,
            "status": self.status,
            "projectId": self.project_id,
        }
