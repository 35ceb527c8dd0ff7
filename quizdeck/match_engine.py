"""Pairing game over the term and definition halves of every card.

Each card contributes two :class:`MatchItem` objects to a shuffled pool.
The player selects two items at a time: a pair with the same parent card
is cleared, any other pair is flagged as wrong and reverts after a short
cooldown during which further selections are ignored.  The game ends when
every item has been matched; a running clock measures the attempt.

Time is driven by a :class:`~quizdeck.timers.Scheduler`.  Every task the
session schedules carries the generation it was created in, so ticks or
cooldowns that fire after :meth:`MatchSession.play_again` or
:meth:`MatchSession.dispose` are ignored.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import structlog

from quizdeck.config import SessionConfig
from quizdeck.shuffle import shuffle
from quizdeck.study_set import Card, StudySet
from quizdeck.timers import Scheduler, TaskHandle

logger = structlog.get_logger(__name__)


class ItemSide(str, Enum):
    TERM = "term"
    DEF = "def"


class ItemState(str, Enum):
    UNMATCHED = "unmatched"
    SELECTED = "selected"
    MATCHED = "matched"
    WRONG = "wrong"


@dataclass(frozen=True)
class MatchItem:
    id: str
    content: str
    side: ItemSide
    parent_id: str


@dataclass(frozen=True)
class MatchResult:
    elapsed_seconds: float


@dataclass(frozen=True)
class MatchTile:
    """An item together with its state, in grid order."""

    item: MatchItem
    state: ItemState

    @property
    def visible(self) -> bool:
        # Matched tiles keep their grid slot but render as empty placeholders.
        return self.state is not ItemState.MATCHED


@dataclass(frozen=True)
class MatchSnapshot:
    tiles: Tuple[MatchTile, ...]
    elapsed: float
    complete: bool

    @property
    def elapsed_label(self) -> str:
        return f"{self.elapsed:.1f}s"


def build_items(cards: Iterable[Card]) -> List[MatchItem]:
    """Split every card into its term and definition items."""

    items: List[MatchItem] = []
    for card in cards:
        items.append(MatchItem(f"{card.id}-term", card.term, ItemSide.TERM, card.id))
        items.append(MatchItem(f"{card.id}-def", card.definition, ItemSide.DEF, card.id))
    return items


class MatchSession:
    def __init__(
        self,
        study_set: StudySet,
        scheduler: Scheduler,
        *,
        config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
        on_change: Optional[Callable[["MatchSession"], None]] = None,
        on_complete: Optional[Callable[[MatchResult], None]] = None,
        on_exit: Optional[Callable[[], None]] = None,
    ) -> None:
        self.study_set = study_set
        self.scheduler = scheduler
        self.config = config or SessionConfig()
        self.rng = rng or self.config.make_rng()
        self.on_change = on_change
        self.on_complete = on_complete
        self.on_exit = on_exit

        self.items: List[MatchItem] = []
        self.selected: List[str] = []
        self.matched: Set[str] = set()
        self.wrong: Tuple[str, ...] = ()
        self.complete = False
        self.disposed = False

        self._by_id: Dict[str, MatchItem] = {}
        self._generation = 0
        self._started_at = 0.0
        self._elapsed = 0.0
        self._tick_handle: Optional[TaskHandle] = None
        self._cooldown_handle: Optional[TaskHandle] = None

        self._reset()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def elapsed(self) -> float:
        """Elapsed seconds, one decimal of precision."""
        return round(self._elapsed, 1)

    @property
    def cooldown_pending(self) -> bool:
        return len(self.wrong) == 2

    @property
    def result(self) -> Optional[MatchResult]:
        if not self.complete:
            return None
        return MatchResult(elapsed_seconds=self.elapsed)

    def state_of(self, item_id: str) -> ItemState:
        if item_id in self.matched:
            return ItemState.MATCHED
        if item_id in self.wrong:
            return ItemState.WRONG
        if item_id in self.selected:
            return ItemState.SELECTED
        return ItemState.UNMATCHED

    def snapshot(self) -> MatchSnapshot:
        return MatchSnapshot(
            tiles=tuple(MatchTile(item, self.state_of(item.id)) for item in self.items),
            elapsed=self.elapsed,
            complete=self.complete,
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def select(self, item_id: str) -> bool:
        """Handle a click on *item_id*; returns ``False`` when ignored."""

        if self.disposed or self.complete or self.cooldown_pending:
            logger.debug("match_click_ignored", item_id=item_id, reason="inactive")
            return False
        if item_id not in self._by_id or item_id in self.matched or item_id in self.selected:
            logger.debug("match_click_ignored", item_id=item_id, reason="unavailable")
            return False

        self.selected.append(item_id)
        if len(self.selected) == 2:
            self._resolve_pair()
        self._notify()
        return True

    def _resolve_pair(self) -> None:
        first, second = (self._by_id[item_id] for item_id in self.selected)
        if first.parent_id == second.parent_id:
            self.matched.update((first.id, second.id))
            self.selected.clear()
            logger.debug("match_pair_matched", card_id=first.parent_id, matched=len(self.matched))
            if len(self.matched) == len(self.items):
                self._finish()
            return

        self.wrong = (first.id, second.id)
        generation = self._generation
        self._cooldown_handle = self.scheduler.call_later(
            self.config.wrong_pair_cooldown, lambda: self._clear_wrong_pair(generation)
        )
        logger.debug("match_pair_mismatched", first=first.id, second=second.id)

    def _clear_wrong_pair(self, generation: int) -> None:
        if generation != self._generation or self.disposed:
            logger.debug("match_stale_callback_ignored", callback="cooldown")
            return
        self.wrong = ()
        self.selected.clear()
        self._cooldown_handle = None
        self._notify()

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def _tick(self, generation: int) -> None:
        if generation != self._generation or self.disposed or self.complete:
            logger.debug("match_stale_callback_ignored", callback="tick")
            return
        self._elapsed = self.scheduler.now() - self._started_at
        self._notify()

    def _finish(self) -> None:
        self._elapsed = self.scheduler.now() - self._started_at
        self.complete = True
        self._cancel_tasks()
        logger.info(
            "match_completed",
            set_id=self.study_set.id,
            elapsed_seconds=self.elapsed,
            item_count=len(self.items),
        )
        if self.on_complete:
            self.on_complete(MatchResult(elapsed_seconds=self.elapsed))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _cancel_tasks(self) -> None:
        for handle in (self._tick_handle, self._cooldown_handle):
            if handle is not None:
                handle.cancel()
        self._tick_handle = None
        self._cooldown_handle = None

    def _reset(self) -> None:
        self._cancel_tasks()
        self._generation += 1
        self.items = shuffle(build_items(self.study_set.cards), self.rng)
        self._by_id = {item.id: item for item in self.items}
        self.selected = []
        self.matched = set()
        self.wrong = ()
        self.complete = False
        self._started_at = self.scheduler.now()
        self._elapsed = 0.0

        generation = self._generation
        self._tick_handle = self.scheduler.call_every(
            self.config.clock_interval, lambda: self._tick(generation)
        )
        logger.info("match_session_started", set_id=self.study_set.id, item_count=len(self.items))

    def play_again(self) -> bool:
        """Start over with a new shuffle and clock; only offered once complete."""

        if self.disposed or not self.complete:
            return False
        self._reset()
        self._notify()
        return True

    def dispose(self) -> None:
        if self.disposed:
            return
        self._cancel_tasks()
        self._generation += 1
        self.disposed = True
        logger.debug("match_session_disposed", set_id=self.study_set.id)

    def exit(self) -> None:
        self.dispose()
        if self.on_exit:
            self.on_exit()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)


__all__ = [
    "ItemSide",
    "ItemState",
    "MatchItem",
    "MatchResult",
    "MatchSession",
    "MatchSnapshot",
    "MatchTile",
    "build_items",
]
