"""Tests for the boardsync CLI."""

import sys
from unittest import mock

import pytest

from boardsync.cli import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BOARDSYNC_PROJECT_ID", "BOARDSYNC_VIEW", "BOARDSYNC_TEMPLATE_TYPE"):
        monkeypatch.delenv(name, raising=False)


class TestCLIModuleImports:
    def test_main_module_exits_without_command(self):
        sys.modules.pop("boardsync.__main__", None)
        with mock.patch("sys.argv", ["boardsync"]):
            with pytest.raises(SystemExit) as info:
                import boardsync.__main__  # noqa: F401
        assert info.value.code == 1

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestShow:
    def test_show_mock_board(self, capsys):
        assert main(["--mock", "show"]) == 0
        out = capsys.readouterr().out
        assert "Sprint 9" in out
        assert "task-1" in out
        assert "Sprint progress: 1/4" in out

    def test_show_backlog_view(self, capsys):
        assert main(["--mock", "--view", "backlog", "show"]) == 0
        out = capsys.readouterr().out
        assert "Backlog (1)" in out
        assert "task-4" in out

    def test_bad_config_file(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("nonsense: 1\n")
        assert main(["--config", str(path), "--mock", "show"]) == 1
        assert "Unknown config keys" in capsys.readouterr().err


class TestMove:
    def test_move_confirmed(self, capsys):
        assert main(["--mock", "move", "task-1", "Todo", "Review"]) == 0
        assert "Moved task-1 to Review" in capsys.readouterr().out

    def test_move_same_place(self, capsys):
        assert main(["--mock", "move", "1", "Todo", "Todo"]) == 0
        assert "Nothing to do" in capsys.readouterr().out

    def test_move_rejected(self, capsys):
        assert main(["--mock", "move", "task-2", "Epic", "Done"]) == 1
        assert "read-only" in capsys.readouterr().err

    def test_move_from_wrong_container(self, capsys):
        assert main(["--mock", "move", "task-1", "Approvals", "Done"]) == 1
        assert "refresh the board" in capsys.readouterr().err

    def test_move_unknown_container(self, capsys):
        assert main(["--mock", "move", "task-1", "Todo", "Nowhere"]) == 1
        assert "Unknown container" in capsys.readouterr().err

    def test_move_bad_task_id(self, capsys):
        assert main(["--mock", "move", "card-1", "Todo", "Done"]) == 1
        assert "Not a task draggable id" in capsys.readouterr().err
