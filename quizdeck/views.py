"""flet screens for the three study modes.

The views only translate engine state into controls; every decision
(what is selected, matched, correct, finished) comes from the session
objects.  Match sessions are driven on the page's asyncio loop, so click
handlers forward input to the loop and re-render from an immutable
snapshot.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, List, Optional

import flet as ft
import structlog

from quizdeck.config import SessionConfig
from quizdeck.flashcard_engine import FlashcardSession, Side
from quizdeck.learn_engine import LearnResult, LearnSession, OptionStatus
from quizdeck.match_engine import ItemState, MatchResult, MatchSession, MatchSnapshot
from quizdeck.study_set import StudySet
from quizdeck.timers import AsyncioScheduler

logger = structlog.get_logger(__name__)

ExitHandler = Optional[Callable[[], None]]

TILE_COLORS: Dict[ItemState, str] = {
    ItemState.UNMATCHED: ft.Colors.WHITE,
    ItemState.SELECTED: ft.Colors.INDIGO_50,
    ItemState.WRONG: ft.Colors.RED_50,
    ItemState.MATCHED: ft.Colors.TRANSPARENT,
}

OPTION_COLORS: Dict[OptionStatus, str] = {
    OptionStatus.IDLE: ft.Colors.BLUE_200,
    OptionStatus.CORRECT: ft.Colors.GREEN_200,
    OptionStatus.INCORRECT: ft.Colors.RED_200,
    OptionStatus.DIMMED: ft.Colors.BLUE_100,
}


def _header(title: str, exit_label: str, on_exit) -> ft.Container:
    return ft.Container(
        padding=20,
        border_radius=20,
        bgcolor=ft.Colors.AMBER_100,
        content=ft.Row(
            controls=[
                ft.Text(value=title, size=35, weight=ft.FontWeight.BOLD),
                ft.ElevatedButton(text=exit_label, on_click=on_exit, width=140),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        ),
    )


class FlashcardView(ft.Container):
    def __init__(self, study_set: StudySet, config: SessionConfig, on_exit: ExitHandler = None):
        super().__init__()
        self.session = FlashcardSession(study_set, on_exit=on_exit)

        self.counter = ft.Text(size=16, weight=ft.FontWeight.BOLD)
        self.progress_bar = ft.ProgressBar(value=0, height=10, border_radius=5)

        # Swaps the card face with a short transition before the next card shows.
        self.card_face = ft.AnimatedSwitcher(
            content=ft.Container(),
            transition=ft.AnimatedSwitcherTransition.FADE,
            duration=int(config.flip_delay * 1000),
        )
        self.card_area = ft.Container(
            content=self.card_face,
            expand=True,
            padding=30,
            border_radius=20,
            bgcolor=ft.Colors.WHITE,
            alignment=ft.alignment.center,
            on_click=lambda e: self._run(self.session.flip),
        )

        self.content = ft.Column(
            controls=[
                _header(study_set.title, "Back to Set", lambda e: self.session.exit()),
                ft.Row(controls=[self.counter], alignment=ft.MainAxisAlignment.END),
                self.card_area,
                ft.Row(
                    controls=[
                        ft.FloatingActionButton(icon=ft.Icons.ARROW_LEFT, on_click=lambda e: self._run(self.session.prev)),
                        ft.FloatingActionButton(icon=ft.Icons.ROTATE_RIGHT, on_click=lambda e: self._run(self.session.flip)),
                        ft.FloatingActionButton(icon=ft.Icons.ARROW_RIGHT, on_click=lambda e: self._run(self.session.next)),
                    ],
                    alignment=ft.MainAxisAlignment.CENTER,
                    spacing=30,
                ),
                self.progress_bar,
            ],
            expand=True,
            spacing=20,
        )
        self.expand = True
        self.bgcolor = ft.Colors.GREY_100
        self.border_radius = 20
        self.padding = 10
        self._render()

    def handle_key(self, key: str) -> None:
        if self.session.handle_key(key):
            self._refresh()

    def _run(self, action: Callable[[], None]) -> None:
        action()
        self._refresh()

    def _render(self) -> None:
        snapshot = self.session.snapshot()
        self.counter.value = snapshot.counter
        # Each face gets its own controls; the old face is still fading out.
        self.card_face.content = ft.Column(
            key=f"{snapshot.card.id}-{snapshot.side.value}",
            controls=[
                ft.Text("Term" if snapshot.side is Side.TERM else "Definition", size=14, color=ft.Colors.GREY),
                ft.Text(snapshot.visible_text, size=40, weight=ft.FontWeight.BOLD, text_align=ft.TextAlign.CENTER),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            alignment=ft.MainAxisAlignment.CENTER,
        )
        self.progress_bar.value = snapshot.progress

    def _refresh(self) -> None:
        self._render()
        if self.page:
            self.update()


class MatchView(ft.Container):
    def __init__(self, study_set: StudySet, config: SessionConfig, on_exit: ExitHandler = None):
        super().__init__()
        self.study_set = study_set
        self.config = config
        self.on_exit = on_exit
        self.session: Optional[MatchSession] = None
        self._loop = None
        self._render_lock = threading.Lock()
        self._issued = 0
        self._drawn = 0

        self.clock = ft.Text(value="0.0s", size=28, weight=ft.FontWeight.BOLD, color=ft.Colors.INDIGO)
        self.grid = ft.Row(wrap=True, spacing=16, run_spacing=16, expand=True)
        self.board = ft.Column(
            controls=[
                _header("Match", "End Game", self._request_exit),
                ft.Row(controls=[self.clock], alignment=ft.MainAxisAlignment.END),
                self.grid,
            ],
            expand=True,
            scroll=ft.ScrollMode.AUTO,
        )
        self.summary = ft.Text(size=24)
        self.finished = ft.Column(
            controls=[
                ft.Text("Great Job!", size=50, weight=ft.FontWeight.BOLD),
                self.summary,
                ft.Row(
                    controls=[
                        ft.ElevatedButton("Play Again", on_click=lambda e: self._submit(self._play_again)),
                        ft.ElevatedButton("Back to Set", on_click=self._request_exit),
                    ],
                    alignment=ft.MainAxisAlignment.CENTER,
                ),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            alignment=ft.MainAxisAlignment.CENTER,
            visible=False,
            expand=True,
        )

        self.content = ft.Stack(controls=[self.board, self.finished], expand=True)
        self.expand = True
        self.bgcolor = ft.Colors.GREY_100
        self.border_radius = 20
        self.padding = 10

    # Engine calls are marshalled onto the page loop, where the timers run.
    def did_mount(self):
        self._loop = self.page.loop
        self._submit(self._start)

    def will_unmount(self):
        self._submit(self._dispose)

    def _submit(self, callback: Callable[..., None], *args) -> None:
        self._loop.call_soon_threadsafe(callback, *args)

    def _start(self) -> None:
        self.session = MatchSession(
            self.study_set,
            AsyncioScheduler(self._loop),
            config=self.config,
            on_change=self._on_change,
            on_complete=self._on_complete,
            on_exit=self._exit_on_ui_thread,
        )
        self._on_change(self.session)

    def _dispose(self) -> None:
        if self.session is not None:
            self.session.dispose()

    def _play_again(self) -> None:
        if self.session is not None:
            self.session.play_again()

    def _select(self, item_id: str) -> None:
        if self.session is not None:
            self.session.select(item_id)

    def _request_exit(self, e=None) -> None:
        self._submit(self._exit)

    def _exit(self) -> None:
        if self.session is not None:
            self.session.exit()
        elif self.on_exit:
            self._exit_on_ui_thread()

    def _exit_on_ui_thread(self) -> None:
        if self.on_exit and self.page:
            self.page.run_thread(self.on_exit)

    def _on_complete(self, result: MatchResult) -> None:
        logger.info("match_result", set_id=self.study_set.id, elapsed_seconds=result.elapsed_seconds)

    def _on_change(self, session: MatchSession) -> None:
        # Numbered on the loop thread so renders can be ordered on the pool.
        self._issued += 1
        if self.page:
            self.page.run_thread(self._render, self._issued, session.snapshot())

    def _on_tile_click(self, e) -> None:
        self._submit(self._select, e.control.data)

    def _render(self, sequence: int, snapshot: MatchSnapshot) -> None:
        with self._render_lock:
            if sequence <= self._drawn:
                logger.debug("match_render_skipped", sequence=sequence, drawn=self._drawn)
                return
            self._drawn = sequence
            self._draw(snapshot)

    def _draw(self, snapshot: MatchSnapshot) -> None:
        tiles: List[ft.Control] = []
        for tile in snapshot.tiles:
            tiles.append(
                ft.Container(
                    content=ft.Text(tile.item.content, size=16, weight=ft.FontWeight.W_600, text_align=ft.TextAlign.CENTER),
                    data=tile.item.id,
                    width=220,
                    height=120,
                    padding=15,
                    border_radius=16,
                    alignment=ft.alignment.center,
                    bgcolor=TILE_COLORS[tile.state],
                    border=ft.border.all(2, ft.Colors.RED_400 if tile.state is ItemState.WRONG else ft.Colors.GREY_300),
                    # Matched tiles keep their slot so the grid does not reflow.
                    opacity=1.0 if tile.visible else 0.0,
                    on_click=self._on_tile_click if tile.visible else None,
                )
            )
        self.grid.controls = tiles
        self.clock.value = snapshot.elapsed_label
        self.board.visible = not snapshot.complete
        self.finished.visible = snapshot.complete
        self.summary.value = f"You cleared the deck in {snapshot.elapsed_label}"
        if self.page:
            self.update()


class LearnView(ft.Container):
    def __init__(self, study_set: StudySet, config: SessionConfig, on_exit: ExitHandler = None):
        super().__init__()
        self.session = LearnSession(
            study_set,
            config=config,
            on_complete=self._on_complete,
            on_exit=on_exit,
        )

        self.position = ft.Text(size=16, weight=ft.FontWeight.BOLD)
        self.progress_bar = ft.ProgressBar(value=0, height=10, border_radius=5)
        self.prompt = ft.Text(size=26, weight=ft.FontWeight.W_500)
        self.choices = ft.Column(spacing=12)
        self.next_button = ft.ElevatedButton(text="Next Question", on_click=self._advance, visible=False)

        self.question_display = ft.Column(
            controls=[
                ft.Row(controls=[self.position], alignment=ft.MainAxisAlignment.END),
                self.progress_bar,
                ft.Container(
                    content=ft.Column(
                        controls=[ft.Text("Definition", size=12, color=ft.Colors.GREY), self.prompt],
                    ),
                    padding=30,
                    border_radius=20,
                    bgcolor=ft.Colors.WHITE,
                ),
                ft.Text("Choose the matching term", size=12, color=ft.Colors.GREY),
                self.choices,
                self.next_button,
            ],
            expand=True,
            spacing=16,
            scroll=ft.ScrollMode.AUTO,
        )
        self.score_text = ft.Text(size=60, weight=ft.FontWeight.BOLD, color=ft.Colors.INDIGO)
        self.finished = ft.Column(
            controls=[
                ft.Text("Session Complete!", size=40, weight=ft.FontWeight.BOLD),
                ft.Text("You scored", size=18, color=ft.Colors.GREY),
                self.score_text,
                ft.ElevatedButton("Back to Set", on_click=lambda e: self.session.exit()),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            alignment=ft.MainAxisAlignment.CENTER,
            visible=False,
            expand=True,
        )

        self.content = ft.Column(
            controls=[
                _header(study_set.title, "Quit", lambda e: self.session.exit()),
                ft.Stack(controls=[self.question_display, self.finished], expand=True),
            ],
            expand=True,
        )
        self.expand = True
        self.bgcolor = ft.Colors.GREY_100
        self.border_radius = 20
        self.padding = 10
        self._render()

    def _on_complete(self, result: LearnResult) -> None:
        logger.info("learn_result", set_id=self.session.study_set.id, score=result.score, total=result.total)

    def _answer(self, e) -> None:
        if self.session.answer(e.control.data):
            self._refresh()

    def _advance(self, e) -> None:
        if self.session.advance():
            self._refresh()

    def _render(self) -> None:
        session = self.session
        self.question_display.visible = not session.complete
        self.finished.visible = session.complete
        if session.complete:
            self.score_text.value = f"{session.score} / {session.total}"
            return

        question = session.question
        self.position.value = question.position_label
        self.progress_bar.value = (question.number - 1) / question.total
        self.prompt.value = question.prompt
        self.choices.controls = [
            ft.Container(
                content=ft.Text(option.term, size=18, weight=ft.FontWeight.BOLD),
                data=option.id,
                padding=20,
                border_radius=20,
                bgcolor=OPTION_COLORS[session.option_status(option.id)],
                opacity=0.3 if session.option_status(option.id) is OptionStatus.DIMMED else 1.0,
                alignment=ft.alignment.center_left,
                on_click=None if session.answered else self._answer,
            )
            for option in question.options
        ]
        self.next_button.visible = session.answered
        self.next_button.text = session.advance_label

    def _refresh(self) -> None:
        self._render()
        if self.page:
            self.update()


__all__ = ["FlashcardView", "LearnView", "MatchView"]
