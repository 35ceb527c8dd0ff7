from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import structlog

from quizdeck.study_set import Card, StudySet

logger = structlog.get_logger(__name__)


class Side(str, Enum):
    TERM = "term"
    DEFINITION = "definition"


# Key names as reported by browsers and by flet keyboard events.
KEY_BINDINGS: Dict[str, str] = {
    "ArrowRight": "next",
    "Arrow Right": "next",
    "ArrowLeft": "prev",
    "Arrow Left": "prev",
    " ": "flip",
    "Space": "flip",
    "Enter": "flip",
}


@dataclass(frozen=True)
class FlashcardSnapshot:
    index: int
    total: int
    side: Side
    card: Card

    @property
    def progress(self) -> float:
        return (self.index + 1) / self.total

    @property
    def counter(self) -> str:
        return f"{self.index + 1} / {self.total}"

    @property
    def visible_text(self) -> str:
        return self.card.term if self.side is Side.TERM else self.card.definition


class FlashcardSession:
    """Circular cursor over a study set with a flip toggle.

    The session has no terminal state: ``next`` and ``prev`` wrap around
    forever and always show the term side of the card they land on.
    """

    def __init__(
        self,
        study_set: StudySet,
        *,
        on_exit: Optional[Callable[[], None]] = None,
    ) -> None:
        self.study_set = study_set
        self.on_exit = on_exit
        self.index = 0
        self.side = Side.TERM
        logger.debug("flashcard_session_started", set_id=study_set.id, card_count=self.total)

    @property
    def total(self) -> int:
        return len(self.study_set.cards)

    @property
    def current_card(self) -> Card:
        return self.study_set.cards[self.index]

    @property
    def progress(self) -> float:
        return (self.index + 1) / self.total

    def next(self) -> None:
        self.side = Side.TERM
        self.index = (self.index + 1) % self.total

    def prev(self) -> None:
        self.side = Side.TERM
        self.index = (self.index - 1 + self.total) % self.total

    def flip(self) -> None:
        self.side = Side.DEFINITION if self.side is Side.TERM else Side.TERM

    def handle_key(self, key: str) -> bool:
        """Dispatch a keyboard key; returns ``False`` for unbound keys."""

        action = KEY_BINDINGS.get(key)
        if action is None:
            return False
        getattr(self, action)()
        return True

    def snapshot(self) -> FlashcardSnapshot:
        return FlashcardSnapshot(
            index=self.index,
            total=self.total,
            side=self.side,
            card=self.current_card,
        )

    def exit(self) -> None:
        logger.debug("flashcard_session_exited", set_id=self.study_set.id, index=self.index)
        if self.on_exit:
            self.on_exit()


__all__ = ["FlashcardSession", "FlashcardSnapshot", "KEY_BINDINGS", "Side"]
