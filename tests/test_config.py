"""Tests for board sync configuration."""

import pytest

from boardsync.config import SyncConfig
from boardsync.workflow.models import BoardView, TaskStatus


class TestSyncConfig:
    def test_defaults(self):
        config = SyncConfig()
        assert config.template_type == "scrum"
        assert config.timeout_seconds == 10.0
        assert config.view is BoardView.STATUS_BOARD
        assert config.columns[0] is TaskStatus.BACKLOG
        assert config.enforce_approvals

    def test_coerces_strings(self):
        config = SyncConfig(project_id="7", view="backlog", columns=["Todo", "Done"])
        assert config.project_id == 7
        assert config.view is BoardView.BACKLOG
        assert config.columns == [TaskStatus.TODO, TaskStatus.DONE]

    def test_unknown_template_type(self):
        with pytest.raises(ValueError, match="Unknown template type"):
            SyncConfig(template_type="waterfall")

    def test_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown config keys: colour"):
            SyncConfig.from_dict({"colour": "blue"})


class TestFromYaml:
    def test_reads_mapping(self, tmp_path):
        path = tmp_path / "boardsync.yaml"
        path.write_text(
            "base_url: https://pm.example.com/api\n"
            "project_id: 12\n"
            "template_type: kanban\n"
            "view: kanban\n"
            "enforce_approvals: false\n"
        )
        config = SyncConfig.from_yaml(path)
        assert config.base_url == "https://pm.example.com/api"
        assert config.project_id == 12
        assert config.view is BoardView.KANBAN
        assert not config.enforce_approvals

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert SyncConfig.from_yaml(path) == SyncConfig()

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="must hold a mapping"):
            SyncConfig.from_yaml(path)


class TestEnvironment:
    def test_env_overrides(self):
        config = SyncConfig().with_env({
            "BOARDSYNC_PROJECT_ID": "5",
            "BOARDSYNC_VIEW": "backlog",
            "BOARDSYNC_TOKEN": "abc",
            "BOARDSYNC_ENFORCE_APPROVALS": "no",
        })
        assert config.project_id == 5
        assert config.view is BoardView.BACKLOG
        assert config.token == "abc"
        assert not config.enforce_approvals

    def test_empty_env_changes_nothing(self):
        assert SyncConfig().with_env({}) == SyncConfig()

    def test_load_without_file(self):
        config = SyncConfig.load(None, environ={"BOARDSYNC_TIMEOUT_SECONDS": "2.5"})
        assert config.timeout_seconds == 2.5

    def test_load_file_then_env(self, tmp_path):
        path = tmp_path / "boardsync.yaml"
        path.write_text("project_id: 3\ntemplate_type: kanban\n")
        config = SyncConfig.load(path, environ={"BOARDSYNC_PROJECT_ID": "4"})
        assert config.project_id == 4
        assert config.template_type == "kanban"
