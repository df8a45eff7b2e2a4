"""CLI entry point for inspecting and rearranging a board.

Usage:
  boardsync show [--config PATH] [--view status|backlog|kanban] [--mock]
  boardsync move <task_id> <source> <destination> [--config PATH] [--mock]
  boardsync board [--config PATH] [--mock]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from boardsync.config import SyncConfig
from boardsync.workflow.models import BoardView


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Task board sync CLI")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--mock", action="store_true", help="Use the in-memory demo backend")
    parser.add_argument("--view", choices=[v.value for v in BoardView], default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("show", help="Print the board's containers")

    move_parser = subparsers.add_parser("move", help="Move a task between containers")
    move_parser.add_argument("task_id", help="Task id, e.g. 7 or task-7")
    move_parser.add_argument("source", help="Container the task is in, e.g. Todo")
    move_parser.add_argument("destination", help="Container to move it to, e.g. Done")

    subparsers.add_parser("board", help="Open the interactive terminal board")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SyncConfig.load(args.config)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.view:
        config.view = BoardView(args.view)

    if args.command == "show":
        return asyncio.run(_show_command(config, args.mock))
    if args.command == "move":
        return asyncio.run(_move_command(config, args.mock, args.task_id, args.source, args.destination))
    if args.command == "board":
        from board_tui.app import run_board

        run_board(config, mock=args.mock)
    return 0


def _backend(config: SyncConfig, mock: bool):
    if mock:
        from boardsync.adapters.memory import demo_backend

        return demo_backend()
    from boardsync.adapters.http import HttpSyncClient

    return HttpSyncClient(config.base_url, token=config.token, timeout=config.timeout_seconds)


async def _open_session(config: SyncConfig, mock: bool):
    from boardsync.board.session import BoardSession

    backend = _backend(config, mock)
    session = BoardSession.from_config(config, backend)
    await session.load()
    return session


async def _close(session) -> None:
    aclose = getattr(session.backend, "aclose", None)
    if aclose is not None:
        await aclose()


async def _show_command(config: SyncConfig, mock: bool) -> int:
    from boardsync.workflow.exceptions import SyncError

    try:
        session = await _open_session(config, mock)
    except SyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    try:
        summary = session.summary()
        sprint = summary["sprint"] or "no active sprint"
        print(f"Project {config.project_id} ({config.view.value} view, {sprint})")
        for container, tasks in session.containers().items():
            print(f"\n{container.droppable_id} ({len(tasks)})")
            for task in tasks:
                print(f"  {task.draggable_id:<10} [{task.type.value}] {task.title}")
        if summary["sprint_tasks"]:
            print(
                f"\nSprint progress: {summary['sprint_done']}/{summary['sprint_tasks']} "
                f"({summary['progress_pct']}%), "
                f"{summary['story_points_done']}/{summary['story_points_total']} points"
            )
    finally:
        await _close(session)
    return 0


async def _move_command(
    config: SyncConfig, mock: bool, task_id: str, source: str, destination: str
) -> int:
    from boardsync.sync.types import MoveOutcome
    from boardsync.workflow.exceptions import InvalidDragPayload, SyncError

    try:
        session = await _open_session(config, mock)
    except SyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    try:
        result = await session.move(task_id, source, destination)
    except (InvalidDragPayload, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await _close(session)

    if result.outcome is MoveOutcome.CONFIRMED:
        print(f"Moved task-{result.task_id} to {destination}")
        return 0
    if result.outcome is MoveOutcome.NOOP:
        print("Nothing to do")
        return 0
    message = result.notice.message if result.notice else result.outcome.value
    print(f"Error: {message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
