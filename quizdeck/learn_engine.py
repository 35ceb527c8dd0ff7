"""Multiple-choice quiz over a study set.

The definition of each card is the prompt and the player picks the
matching term among the card itself and up to ``distractor_count`` other
cards.  Every card is asked exactly once, in a shuffled order fixed at
session start.  The first answer to a question is final; advancing is an
explicit action once the question has been answered.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Optional, Tuple

import structlog

from quizdeck.config import SessionConfig
from quizdeck.shuffle import sample, shuffle
from quizdeck.study_set import Card, StudySet

logger = structlog.get_logger(__name__)


class OptionStatus(str, Enum):
    IDLE = "idle"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    DIMMED = "dimmed"


@dataclass(frozen=True)
class Question:
    card: Card
    options: Tuple[Card, ...]
    number: int
    total: int

    @property
    def prompt(self) -> str:
        return self.card.definition

    @property
    def choices(self) -> Tuple[str, ...]:
        return tuple(option.term for option in self.options)

    @property
    def position_label(self) -> str:
        return f"{self.number} / {self.total}"


@dataclass(frozen=True)
class LearnResult:
    score: int
    total: int


class LearnSession:
    def __init__(
        self,
        study_set: StudySet,
        *,
        config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
        on_complete: Optional[Callable[[LearnResult], None]] = None,
        on_exit: Optional[Callable[[], None]] = None,
    ) -> None:
        self.study_set = study_set
        self.config = config or SessionConfig()
        self.rng = rng or self.config.make_rng()
        self.on_complete = on_complete
        self.on_exit = on_exit

        self.queue: Deque[Card] = deque(shuffle(study_set.cards, self.rng))
        self.question: Optional[Question] = None
        self.selected: Optional[Card] = None
        self.correct: Optional[bool] = None
        self.score = 0
        self.complete = False

        self._load_question()
        logger.info("learn_session_started", set_id=study_set.id, card_count=self.total)

    @property
    def total(self) -> int:
        return len(self.study_set.cards)

    @property
    def answered(self) -> bool:
        return self.selected is not None

    @property
    def is_last_question(self) -> bool:
        return len(self.queue) == 1

    @property
    def advance_label(self) -> str:
        return "Finish" if self.is_last_question else "Next Question"

    @property
    def result(self) -> Optional[LearnResult]:
        if not self.complete:
            return None
        return LearnResult(score=self.score, total=self.total)

    def _load_question(self) -> None:
        current = self.queue[0]
        others = [card for card in self.study_set.cards if card.id != current.id]
        distractors = sample(others, self.config.distractor_count, self.rng)
        options = shuffle([current, *distractors], self.rng)
        self.question = Question(
            card=current,
            options=tuple(options),
            number=self.total - len(self.queue) + 1,
            total=self.total,
        )
        self.selected = None
        self.correct = None

    def answer(self, option_id: str) -> bool:
        """Record the first answer to the current question."""

        if self.complete or self.question is None or self.answered:
            logger.debug("learn_answer_ignored", option_id=option_id)
            return False
        option = next((card for card in self.question.options if card.id == option_id), None)
        if option is None:
            logger.debug("learn_answer_ignored", option_id=option_id, reason="unknown option")
            return False

        self.selected = option
        self.correct = option.id == self.question.card.id
        if self.correct:
            self.score += 1
        logger.debug(
            "learn_answer_recorded",
            card_id=self.question.card.id,
            correct=self.correct,
            score=self.score,
        )
        return True

    def option_status(self, option_id: str) -> OptionStatus:
        """How an option is highlighted; the right answer is always revealed."""

        if self.question is None or not self.answered:
            return OptionStatus.IDLE
        if option_id == self.question.card.id:
            return OptionStatus.CORRECT
        if self.selected is not None and option_id == self.selected.id:
            return OptionStatus.INCORRECT
        return OptionStatus.DIMMED

    def advance(self) -> bool:
        """Move to the next question, or finish after the last one."""

        if self.complete or not self.answered:
            return False
        if len(self.queue) > 1:
            self.queue.popleft()
            self.question = None
            self._load_question()
            return True

        self.complete = True
        logger.info("learn_completed", set_id=self.study_set.id, score=self.score, total=self.total)
        if self.on_complete:
            self.on_complete(LearnResult(score=self.score, total=self.total))
        return True

    def exit(self) -> None:
        logger.debug("learn_session_exited", set_id=self.study_set.id, complete=self.complete)
        if self.on_exit:
            self.on_exit()


__all__ = ["LearnResult", "LearnSession", "OptionStatus", "Question"]
