"""Board TUI application: an interactive terminal board over a BoardSession."""

from __future__ import annotations

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from boardsync.board.session import BoardSession
from boardsync.sync.surface import Notice
from boardsync.sync.types import MoveOutcome, MoveResult
from boardsync.workflow.models import BoardView, Container, Task, TaskType

TYPE_COLORS = {
    TaskType.STORY: "green",
    TaskType.BUG: "red",
    TaskType.TASK: "cyan",
    TaskType.EPIC: "yellow",
    TaskType.ISSUE: "blue",
    TaskType.APPROVAL: "magenta",
    TaskType.OTHER: "white",
}


def card_label(task: Task, updating: bool = False) -> str:
    color = TYPE_COLORS.get(task.type, "white")
    points = f" [dim]{task.story_points}pt[/]" if task.story_points else ""
    busy = " [italic dim]updating…[/]" if updating else ""
    return f"[bold {color}]#{task.id}[/] {task.title} [dim]{task.type.value}[/]{points}{busy}"


def column_title(container: Container, count: int) -> str:
    name = container.droppable_id
    if container == Container.epic():
        name = "Epics (read-only)"
    return f"[bold underline]{name}[/] [dim]({count})[/]"


def task_details(task: Task) -> str:
    lines = [
        f"# {task.title}",
        "",
        f"Type: {task.type.value}",
        f"Status: {task.status.value}",
        f"Sprint: {task.sprint_id if task.sprint_id is not None else 'backlog'}",
        f"Priority: {task.priority.value}",
        f"Assignee: {task.assignee or '-'}",
        f"Reporter: {task.reporter or '-'}",
        f"Due: {task.due_date or '-'}",
        f"Story points: {task.story_points if task.story_points is not None else '-'}",
        f"Labels: {', '.join(task.labels) or '-'}",
    ]
    if task.description:
        lines += ["", task.description]
    return "\n".join(lines)


class CardSelected(Message):
    def __init__(self, task: Task) -> None:
        super().__init__()
        self.item = task


class TaskCard(Static):
    can_focus = True

    def __init__(self, task: Task, container: Container, col_index: int, updating: bool, **kwargs) -> None:
        super().__init__(card_label(task, updating), **kwargs)
        self.item = task
        self.placement = container
        self.col_index = col_index

    def on_focus(self) -> None:
        self.post_message(CardSelected(self.item))


class BoardColumn(VerticalScroll):
    def __init__(self, container: Container, tasks: list[Task], col_index: int, session: BoardSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self.placement = container
        self.items = tasks
        self.col_index = col_index
        self.session = session

    def compose(self) -> ComposeResult:
        yield Static(column_title(self.placement, len(self.items)), classes="column-header")
        if not self.items:
            yield Static("[dim]empty[/]", classes="empty-label")
            return
        for task in self.items:
            yield TaskCard(
                task, self.placement, self.col_index,
                updating=self.session.is_updating(task.id), classes="card",
            )


class DetailPanel(VerticalScroll):
    content_text: reactive[str] = reactive("")
    title_text: reactive[str] = reactive("Details")

    def compose(self) -> ComposeResult:
        yield Static("[dim]Select a card to view details[/]", id="detail-content")

    def watch_content_text(self, value: str) -> None:
        if self.is_mounted:
            self.query_one("#detail-content", Static).update(value)

    def watch_title_text(self, value: str) -> None:
        self.border_title = value


class MoveScreen(ModalScreen[str | None]):
    CSS = """
    MoveScreen { align: center middle; }
    #move-dialog {
        width: 40; height: auto; max-height: 20;
        border: solid $primary; background: $surface; padding: 1 2;
    }
    #move-title { text-align: center; padding-bottom: 1; }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, task: Task, current: Container, containers: list[Container]) -> None:
        super().__init__()
        self.moving = task
        self.current = current
        self.targets = containers

    def compose(self) -> ComposeResult:
        with Vertical(id="move-dialog"):
            yield Static(f"[bold]Move #{self.moving.id} to:[/]", id="move-title")
            options = []
            for container in self.targets:
                name = container.droppable_id
                if container == self.current:
                    options.append(Option(f"{name} [dim](current)[/]", id=name, disabled=True))
                else:
                    options.append(Option(name, id=name))
            yield OptionList(*options, id="move-options")

    @on(OptionList.OptionHighlighted, "#move-options")
    def _on_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        self.app.hover_destination(event.option.id)

    @on(OptionList.OptionSelected, "#move-options")
    def _on_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is None or event.option.id == self.current.droppable_id:
            return
        self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)


class BoardApp(App):
    TITLE = "Task Board"

    CSS = """
    #main-layout { height: 1fr; width: 100%; }
    #board { width: 1fr; height: 100%; }

    BoardColumn {
        width: 1fr;
        height: 100%;
        border-right: solid $surface-lighten-2;
        padding: 0;
    }

    BoardColumn.active-col {
        border-right: solid $accent;
        border-left: solid $accent;
    }

    .column-header {
        text-align: center;
        background: $surface-lighten-1;
        margin-bottom: 1;
        height: 1;
    }

    .empty-label { text-align: center; color: $text-muted; }
    .card { padding: 0 1; margin: 0; }
    TaskCard:focus { background: $surface-lighten-1; }

    #detail-panel {
        width: 50;
        height: 100%;
        border-left: solid $primary;
        padding: 1 1;
        display: none;
    }

    #detail-panel.visible { display: block; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("m", "move_card", "Move"),
        Binding("v", "toggle_view", "Board/Backlog"),
        Binding("d", "toggle_detail", "Detail"),
        Binding("left", "col_left", "< Col", show=True),
        Binding("right", "col_right", "Col >", show=True),
        Binding("up", "card_up", "", show=False),
        Binding("down", "card_down", "", show=False),
        Binding("question_mark", "help_screen", "?=Help"),
    ]

    def __init__(self, session: BoardSession) -> None:
        super().__init__()
        self.session = session
        self.active_col_index: int = 0
        self.board = Horizontal(id="board")
        self.session.surface.subscribe(self._on_notice)
        self.session.store.subscribe(self._on_store_changed)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with self.board:
                yield from self._columns()
            yield DetailPanel(id="detail-panel")
        yield Footer()

    async def on_mount(self) -> None:
        self.run_worker(self.action_refresh(), exclusive=True, group="load")

    def _columns(self) -> list[BoardColumn]:
        return [
            BoardColumn(container, tasks, i, self.session)
            for i, (container, tasks) in enumerate(self.session.containers().items())
        ]

    # -- Session callbacks --

    def _on_notice(self, notice: Notice) -> None:
        self.notify(notice.message, severity=notice.severity)

    def _on_store_changed(self, task_id: int | None) -> None:
        if self.is_running:
            self._schedule_render()

    def _schedule_render(self) -> None:
        # One render at a time; a newer one cancels the pending one.
        self.run_worker(self._render_board(), exclusive=True, group="render")

    async def _render_board(self) -> None:
        await self.board.remove_children()
        await self.board.mount_all(self._columns())
        self.sub_title = self._subtitle()
        self._highlight_active_column()

    def _subtitle(self) -> str:
        sprint = self.session.sprint.name if self.session.sprint else "no active sprint"
        return f"{self.session.view.value} view · {sprint}"

    @on(CardSelected)
    def _on_card_selected(self, event: CardSelected) -> None:
        panel = self.query_one("#detail-panel", DetailPanel)
        panel.title_text = f"Task #{event.item.id}"
        panel.content_text = task_details(event.item)

    # -- Column navigation --

    def _get_column_widgets(self) -> list[BoardColumn]:
        return list(self.board.query(BoardColumn))

    def _highlight_active_column(self) -> None:
        for i, col in enumerate(self._get_column_widgets()):
            col.set_class(i == self.active_col_index, "active-col")

    def _cards_in_column(self, col_index: int) -> list[TaskCard]:
        cols = self._get_column_widgets()
        if col_index < 0 or col_index >= len(cols):
            return []
        return list(cols[col_index].query(TaskCard))

    def _focus_first_in_active_col(self) -> None:
        cards = self._cards_in_column(self.active_col_index)
        if cards:
            cards[0].focus()

    def action_col_left(self) -> None:
        if self.active_col_index > 0:
            self.active_col_index -= 1
            self._highlight_active_column()
            self._focus_first_in_active_col()

    def action_col_right(self) -> None:
        if self.active_col_index < len(self._get_column_widgets()) - 1:
            self.active_col_index += 1
            self._highlight_active_column()
            self._focus_first_in_active_col()

    def action_card_up(self) -> None:
        cards = self._cards_in_column(self.active_col_index)
        if not cards:
            return
        try:
            idx = cards.index(self.focused)
            if idx > 0:
                cards[idx - 1].focus()
        except ValueError:
            cards[-1].focus()

    def action_card_down(self) -> None:
        cards = self._cards_in_column(self.active_col_index)
        if not cards:
            return
        try:
            idx = cards.index(self.focused)
            if idx < len(cards) - 1:
                cards[idx + 1].focus()
        except ValueError:
            cards[0].focus()

    def watch_focused(self, focused) -> None:
        if isinstance(focused, TaskCard):
            self.active_col_index = focused.col_index
            self._highlight_active_column()

    # -- Refresh / view --

    async def action_refresh(self) -> None:
        try:
            await self.session.refresh()
        except Exception as exc:
            self.notify(f"Could not load the board: {exc}", severity="error")
            return
        self.notify("Board refreshed")

    def action_toggle_view(self) -> None:
        view = BoardView.BACKLOG if self.session.view.has_status_columns else BoardView.STATUS_BOARD
        self.session.set_view(view)
        self.active_col_index = 0
        self._schedule_render()

    # -- Move (keyboard drag) --

    def hover_destination(self, droppable_id: str | None) -> None:
        self.session.coordinator.hover(droppable_id)

    def action_move_card(self) -> None:
        card = self.focused
        if not isinstance(card, TaskCard):
            self.notify("Select a card first", severity="warning")
            return
        task = card.item

        coordinator = self.session.coordinator
        coordinator.start(task.draggable_id, card.placement.droppable_id)

        def _on_move_result(destination: str | None) -> None:
            if destination is None:
                coordinator.cancel()
                return
            self.run_worker(self._finish_move(destination))

        containers = list(self.session.containers())
        self.push_screen(MoveScreen(task, card.placement, containers), callback=_on_move_result)

    async def _finish_move(self, destination: str) -> MoveResult:
        result = await self.session.coordinator.end(destination)
        if result.outcome is MoveOutcome.CONFIRMED:
            self.notify(f"Moved #{result.task_id} to {destination}")
        return result

    # -- Detail toggle --

    def action_toggle_detail(self) -> None:
        self.query_one("#detail-panel", DetailPanel).toggle_class("visible")

    def action_help_screen(self) -> None:
        self.notify(
            "[bold]Keys:[/] m=move  v=board/backlog  Left/Right=cols  Up/Down=cards  d=detail  r=refresh  q=quit",
            timeout=6,
        )


def run_board(config=None, mock: bool = False) -> None:
    """Entry point for the boardsync-board CLI."""
    from boardsync.adapters.http import HttpSyncClient
    from boardsync.adapters.memory import demo_backend
    from boardsync.config import SyncConfig

    config = config or SyncConfig.load()
    if mock:
        backend = demo_backend()
    else:
        backend = HttpSyncClient(config.base_url, token=config.token, timeout=config.timeout_seconds)
    app = BoardApp(BoardSession.from_config(config, backend))
    app.run()
