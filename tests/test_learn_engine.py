import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizdeck.config import SessionConfig
from quizdeck.learn_engine import LearnResult, LearnSession, OptionStatus
from quizdeck.study_set import Card, StudySet


def make_set(size: int) -> StudySet:
    cards = [Card(f"c{i}", f"term {i}", f"definition {i}") for i in range(size)]
    return StudySet(id="s", title="Deck", cards=cards)


def wrong_option(session: LearnSession) -> str:
    question = session.question
    return next(option.id for option in question.options if option.id != question.card.id)


def run_to_end(session: LearnSession, pick_correct: bool = True) -> list:
    asked = []
    while not session.complete:
        question = session.question
        asked.append(question.card.id)
        choice = question.card.id if pick_correct else wrong_option(session)
        assert session.answer(choice)
        assert session.advance()
    return asked


@pytest.mark.parametrize("size", [2, 3, 4, 5, 10])
def test_questions_have_one_answer_and_up_to_three_distractors(size):
    session = LearnSession(make_set(size), rng=random.Random(size))
    while not session.complete:
        question = session.question
        ids = [option.id for option in question.options]
        assert 2 <= len(ids) <= 4
        assert len(ids) == min(size, 4)
        assert len(set(ids)) == len(ids)
        assert ids.count(question.card.id) == 1
        assert question.prompt == question.card.definition
        assert question.choices == tuple(option.term for option in question.options)
        session.answer(question.card.id)
        session.advance()


def test_distractor_count_is_configurable():
    session = LearnSession(make_set(6), config=SessionConfig(distractor_count=1))
    assert len(session.question.options) == 2


@pytest.mark.parametrize("size", [2, 4, 7])
def test_every_card_is_asked_exactly_once(size):
    session = LearnSession(make_set(size))
    asked = run_to_end(session)
    assert sorted(asked) == sorted(f"c{i}" for i in range(size))


def test_wrong_first_answer_reveals_the_right_term():
    session = LearnSession(make_set(4), rng=random.Random(9))
    question = session.question
    assert question.position_label == "1 / 4"
    assert all(session.option_status(o.id) is OptionStatus.IDLE for o in question.options)

    picked = wrong_option(session)
    assert session.answer(picked)
    assert session.score == 0
    assert session.correct is False
    assert session.option_status(question.card.id) is OptionStatus.CORRECT
    assert session.option_status(picked) is OptionStatus.INCORRECT
    others = [o.id for o in question.options if o.id not in (picked, question.card.id)]
    assert all(session.option_status(o) is OptionStatus.DIMMED for o in others)

    assert session.advance()
    assert session.question.number == 2
    assert session.question.position_label == "2 / 4"

    run_to_end(session)
    assert session.complete
    assert 0 <= session.score <= 4


def test_first_answer_is_final():
    session = LearnSession(make_set(3))
    correct_id = session.question.card.id

    assert session.answer(correct_id)
    assert session.answer(wrong_option(session)) is False
    assert session.correct is True
    assert session.score == 1
    assert session.selected.id == correct_id


def test_unknown_option_is_ignored():
    session = LearnSession(make_set(3))
    assert session.answer("nope") is False
    assert not session.answered


def test_cannot_advance_before_answering():
    session = LearnSession(make_set(3))
    first = session.question
    assert session.advance() is False
    assert session.question is first


def test_score_is_monotonic_and_bounded():
    rng = random.Random(5)
    session = LearnSession(make_set(6), rng=rng)
    previous = 0
    while not session.complete:
        question = session.question
        session.answer(rng.choice(question.options).id)
        assert previous <= session.score <= 6
        previous = session.score
        session.advance()


def test_perfect_run_reports_full_score():
    results = []
    session = LearnSession(make_set(5), on_complete=results.append)
    run_to_end(session)

    assert session.score == 5
    assert session.result == LearnResult(score=5, total=5)
    assert results == [LearnResult(score=5, total=5)]


def test_completion_happens_only_after_last_advance():
    session = LearnSession(make_set(2))
    session.answer(session.question.card.id)
    assert session.advance_label == "Next Question"
    session.advance()

    assert session.is_last_question
    assert session.advance_label == "Finish"
    session.answer(session.question.card.id)
    assert not session.complete
    assert session.result is None

    session.advance()
    assert session.complete
    assert session.answer(session.question.card.id) is False
    assert session.advance() is False


def test_seeded_sessions_are_reproducible():
    config = SessionConfig(seed=7)
    first = run_to_end(LearnSession(make_set(8), config=config))
    second = run_to_end(LearnSession(make_set(8), config=config))
    assert first == second


def test_exit_notifies_host():
    calls = []
    session = LearnSession(make_set(2), on_exit=lambda: calls.append("exit"))
    session.exit()
    assert calls == ["exit"]
