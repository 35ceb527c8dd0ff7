import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizdeck.config import SessionConfig
from quizdeck.match_engine import MatchSession
from quizdeck.study_set import sample_study_set
from quizdeck.timers import ManualScheduler
from quizdeck.views import FlashcardView, MatchView


def match_snapshots():
    """A mid-game snapshot followed by the completion snapshot."""

    study_set = sample_study_set()
    session = MatchSession(study_set, ManualScheduler(), rng=random.Random(4))
    session.select(f"{study_set.cards[0].id}-term")
    during = session.snapshot()
    for card in study_set.cards:
        session.select(f"{card.id}-term")
        session.select(f"{card.id}-def")
    assert session.complete
    return during, session.snapshot()


def test_match_view_draws_snapshots_in_order():
    view = MatchView(sample_study_set(), SessionConfig())
    during, done = match_snapshots()

    view._render(1, during)
    assert view.board.visible
    view._render(2, done)

    assert view.finished.visible
    assert not view.board.visible


def test_match_view_drops_snapshot_older_than_the_last_drawn():
    view = MatchView(sample_study_set(), SessionConfig())
    during, done = match_snapshots()

    view._render(2, done)
    view._render(1, during)

    assert view.finished.visible
    assert not view.board.visible
    assert view.clock.value == done.elapsed_label


def test_flashcard_faces_do_not_share_controls():
    view = FlashcardView(sample_study_set(), SessionConfig())
    front = view.card_face.content

    view._run(view.session.flip)
    back = view.card_face.content

    assert front is not back
    assert not any(new is old for new in back.controls for old in front.controls)
    assert front.controls[1].value == "Mitochondria"
    assert back.controls[1].value == "The powerhouse of the cell; generates ATP."
    assert back.controls[0].value == "Definition"
