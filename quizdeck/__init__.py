"""Study session engines for term/definition flashcard sets."""

from .flashcard_engine import FlashcardSession, Side
from .learn_engine import LearnResult, LearnSession, OptionStatus, Question
from .match_engine import ItemState, MatchItem, MatchResult, MatchSession
from .shuffle import sample, shuffle
from .study_set import Card, StudySet, StudySetError, build_study_set

__all__ = [
    "Card",
    "FlashcardSession",
    "ItemState",
    "LearnResult",
    "LearnSession",
    "MatchItem",
    "MatchResult",
    "MatchSession",
    "OptionStatus",
    "Question",
    "Side",
    "StudySet",
    "StudySetError",
    "build_study_set",
    "sample",
    "shuffle",
]
