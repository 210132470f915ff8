"""
Scoring helpers
Pure functions used by the session lifecycle; none of them touch the store
"""
import math
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from quizi.models.quiz_sessions import TriviaQuestion
from quizi.models.submit_answers import AnswerItem

UNFINISHED_TIME_USED = "approx 30m"


def merge_answers(existing: Mapping[str, str], incoming: Iterable[AnswerItem]) -> Dict[str, str]:
    """
    Return a new answer map: existing entries overwritten/extended by incoming

    Entries are never removed. Neither argument is modified.
    """
    merged = {str(k): v for k, v in existing.items()}
    for item in incoming:
        merged[str(item.questionIndex)] = item.answer
    return merged


def score_answers(
    questions: List[TriviaQuestion],
    answers: Mapping[str, str]
) -> Tuple[int, List[bool]]:
    """
    Score the whole question set against an answer map

    A missing answer is simply not correct.

    Returns:
        (score, perQuestionCorrect) with one flag per question, in order
    """
    per_question = [
        answers.get(str(i)) == q.correct_answer
        for i, q in enumerate(questions)
    ]
    return sum(per_question), per_question


def fallback_score(questions: List[TriviaQuestion], answers: Mapping[str, str]) -> int:
    """Score from stored answers only, ignoring keys that are not valid indexes"""
    score = 0
    for key, answer in answers.items():
        try:
            idx = int(key)
        except (TypeError, ValueError):
            continue
        if 0 <= idx < len(questions) and questions[idx].correct_answer == answer:
            score += 1
    return score


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_time_used(started_at: datetime, finished_at: Optional[datetime]) -> str:
    """"<N>s" for a finished attempt, a fixed placeholder otherwise"""
    if finished_at is None:
        return UNFINISHED_TIME_USED
    seconds = (finished_at - started_at).total_seconds()
    return f"{round_half_up(seconds)}s"
