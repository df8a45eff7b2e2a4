"""Board sync configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from .board.classifier import DEFAULT_COLUMNS
from .workflow.models import BoardView, TaskStatus

ENV_PREFIX = "BOARDSYNC_"
TEMPLATE_TYPES = ("scrum", "kanban", "traditional")


@dataclass
class SyncConfig:
    """Where the backend lives and how the board behaves."""

    base_url: str = "http://localhost:8080/api"
    project_id: int = 1
    template_type: str = "scrum"
    timeout_seconds: float = 10.0
    view: BoardView = BoardView.STATUS_BOARD
    columns: list[TaskStatus] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    enforce_approvals: bool = True
    token: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.view, str):
            self.view = BoardView(self.view)
        self.columns = [TaskStatus(c) if isinstance(c, str) else c for c in self.columns]
        self.project_id = int(self.project_id)
        self.timeout_seconds = float(self.timeout_seconds)
        if self.template_type not in TEMPLATE_TYPES:
            raise ValueError(f"Unknown template type: {self.template_type}")

    @classmethod
    def from_dict(cls, data: dict) -> SyncConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SyncConfig:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must hold a mapping: {path}")
        return cls.from_dict(data)

    def with_env(self, environ: dict[str, str] | None = None) -> SyncConfig:
        """Return a copy overridden by BOARDSYNC_* environment variables."""
        environ = os.environ if environ is None else environ
        overrides: dict = {}
        for name in ("base_url", "project_id", "template_type", "timeout_seconds", "view", "token"):
            value = environ.get(ENV_PREFIX + name.upper())
            if value:
                overrides[name] = value
        enforce = environ.get(ENV_PREFIX + "ENFORCE_APPROVALS")
        if enforce:
            overrides["enforce_approvals"] = enforce.lower() in ("1", "true", "yes", "on")
        return replace(self, **overrides)

    @classmethod
    def load(cls, path: str | Path | None = None, environ: dict[str, str] | None = None) -> SyncConfig:
        config = cls.from_yaml(path) if path else cls()
        return config.with_env(environ)
