"""Host application: pick a study set and a mode, return here on exit."""

from __future__ import annotations

from typing import List, Optional

import flet as ft
import structlog

from quizdeck.config import SessionConfig
from quizdeck.study_set import StudySet
from quizdeck.views import FlashcardView, LearnView, MatchView

logger = structlog.get_logger(__name__)

MODES = (
    ("Flashcards", "Flip through terms and definitions", ft.Icons.STYLE),
    ("Match", "Pair every term with its definition", ft.Icons.GRID_VIEW),
    ("Learn", "Multiple choice, one question per card", ft.Icons.SCHOOL),
)


class StudyApp(ft.Container):
    def __init__(self, page: ft.Page, study_sets: List[StudySet], config: SessionConfig):
        super().__init__()
        self.page = page
        self.study_sets = study_sets
        self.config = config
        self.active_set = study_sets[0]
        self.active_view: Optional[ft.Control] = None

        self.title = ft.Container(
            content=ft.Text(value="Select a set to study...", size=50, weight=ft.FontWeight.BOLD),
            bgcolor=ft.Colors.AMBER_100,
            padding=10,
            border_radius=20,
        )
        self.set_picker = ft.Dropdown(
            label="Study set",
            value=self.active_set.id,
            options=[ft.dropdown.Option(key=s.id, text=s.title) for s in study_sets],
            on_change=self.select_set,
            width=400,
        )
        self.set_details = ft.Text(size=16, color=ft.Colors.GREY)
        self.mode_area = ft.Row(
            controls=[self._mode_tile(name, hint, icon) for name, hint, icon in MODES],
            spacing=20,
            expand=True,
        )
        self.home = ft.Column(
            controls=[self.title, self.set_picker, self.set_details, self.mode_area],
            expand=True,
            spacing=20,
        )
        self.mainpage = ft.Column(controls=[self.home], expand=True)

        self.content = self.mainpage
        self.expand = True
        self._describe_set()

    def _mode_tile(self, name: str, hint: str, icon: str) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(icon, size=40),
                    ft.Text(name, size=30, weight=ft.FontWeight.BOLD),
                    ft.Text(hint, size=14, color=ft.Colors.GREY),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                alignment=ft.MainAxisAlignment.CENTER,
            ),
            data=name,
            expand=True,
            height=220,
            border_radius=20,
            bgcolor=ft.Colors.GREY_50,
            alignment=ft.alignment.center,
            on_click=self.start_mode,
        )

    def _describe_set(self) -> None:
        study_set = self.active_set
        details = f"{len(study_set)} cards"
        if study_set.description:
            details = f"{study_set.description} · {details}"
        self.set_details.value = details

    def select_set(self, e) -> None:
        for study_set in self.study_sets:
            if study_set.id == e.control.value:
                self.active_set = study_set
        self._describe_set()
        self.content.update()

    def start_mode(self, e) -> None:
        view_class = {"Flashcards": FlashcardView, "Match": MatchView, "Learn": LearnView}[e.control.data]
        logger.info("study_mode_opened", mode=e.control.data, set_id=self.active_set.id)
        self.home.visible = False
        self.active_view = view_class(self.active_set, self.config, on_exit=self.end_mode)
        self.mainpage.controls.append(self.active_view)
        self.content.update()

    def end_mode(self) -> None:
        if self.active_view is None:
            return
        self.mainpage.controls.remove(self.active_view)
        self.active_view = None
        self.home.visible = True
        self.content.update()

    def on_key(self, e: ft.KeyboardEvent) -> None:
        if isinstance(self.active_view, FlashcardView):
            self.active_view.handle_key(e.key)


__all__ = ["StudyApp"]
