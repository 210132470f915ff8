from datetime import datetime, timedelta, timezone

from quizi.models.quiz_sessions import TriviaQuestion
from quizi.models.submit_answers import AnswerItem
from quizi.services.scoring import (
    fallback_score,
    format_time_used,
    merge_answers,
    round_half_up,
    score_answers,
)

QUESTIONS = [
    TriviaQuestion(question="Q0", correct_answer="A", incorrect_answers=["B", "C", "D"]),
    TriviaQuestion(question="Q1", type="boolean", correct_answer="True", incorrect_answers=["False"]),
    TriviaQuestion(question="Q2", correct_answer="X", incorrect_answers=["Y", "Z", "W"]),
]


def test_merge_answers_returns_new_map():
    existing = {"0": "A"}
    merged = merge_answers(existing, [AnswerItem(questionIndex=1, answer="False")])
    assert merged == {"0": "A", "1": "False"}
    assert existing == {"0": "A"}


def test_merge_answers_overwrites_and_keeps():
    merged = merge_answers(
        {"0": "B", "2": "X"},
        [AnswerItem(questionIndex=0, answer="A"), AnswerItem(questionIndex=0, answer="C")]
    )
    assert merged == {"0": "C", "2": "X"}


def test_score_answers_covers_all_questions():
    score, per_question = score_answers(QUESTIONS, {"0": "A", "2": "Y"})
    assert score == 1
    assert per_question == [True, False, False]


def test_score_answers_with_no_answers():
    assert score_answers(QUESTIONS, {}) == (0, [False, False, False])


def test_fallback_score_ignores_bad_keys():
    answers = {"0": "A", "1": "True", "7": "A", "x": "X"}
    assert fallback_score(QUESTIONS, answers) == 2


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
    assert round_half_up(0.5) == 1


def test_format_time_used():
    started = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert format_time_used(started, None) == "approx 30m"
    assert format_time_used(started, started + timedelta(seconds=61, milliseconds=500)) == "62s"
    assert format_time_used(started, started + timedelta(seconds=61, milliseconds=499)) == "61s"
