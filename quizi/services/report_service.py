"""
Report Service
Derives summary analytics from a report payload. Works on the serialized
payload, so userAnswers keys may be strings or integers.
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from quizi.models.report import ReportSummary
from quizi.services.scoring import round_half_up

DIFFICULTY_LEVELS = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"

SECONDS_PATTERN = re.compile(r"(\d+)\s*s")
MINUTES_PATTERN = re.compile(r"(\d+)\s*m")


def _lookup_answer(answers: Mapping[Any, Any], index: int) -> Optional[str]:
    answer = answers.get(index)
    if answer is None:
        answer = answers.get(str(index))
    return answer


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def parse_time_used(time_used: Optional[str]) -> Optional[int]:
    """
    Seconds from a timeUsed string: "123s" -> 123, "approx 30m" -> 1800
    """
    if not time_used:
        return None
    match = SECONDS_PATTERN.search(time_used)
    if match:
        return int(match.group(1))
    match = MINUTES_PATTERN.search(time_used)
    if match:
        return int(match.group(1)) * 60
    return None


def estimate_total_seconds(report: Mapping[str, Any]) -> Optional[int]:
    """Elapsed seconds from timeUsed, falling back to the timestamps"""
    total_seconds = parse_time_used(report.get("timeUsed"))
    if not total_seconds:
        started = _parse_timestamp(report.get("startedAt"))
        finished = _parse_timestamp(report.get("finishedAt"))
        if started and finished:
            total_seconds = max(0, round_half_up((finished - started).total_seconds()))
    return total_seconds


def per_question_seconds(
    per_question_time: Optional[List[Any]],
    total: int,
    total_seconds: Optional[int]
) -> List[Optional[Union[int, float]]]:
    """
    Real per-question timings when present, otherwise an even split of the
    total, otherwise all None. The even split is a display estimate only.
    """
    if per_question_time and len(per_question_time) == total and any(per_question_time):
        return [
            t if isinstance(t, (int, float)) and not isinstance(t, bool) else None
            for t in per_question_time
        ]
    if total_seconds:
        average = total_seconds // max(1, total)
        return [average] * total
    return [None] * total


def summarize_report(report: Mapping[str, Any]) -> ReportSummary:
    """
    Derive counts, per-difficulty accuracy, percentage and timing from a
    report payload

    Args:
        report: Report payload as returned by the report endpoint

    Returns:
        ReportSummary
    """
    questions = report.get("questions") or []
    total = report.get("total") or len(questions)
    score = report.get("score") or 0
    answers = report.get("userAnswers") or {}

    correct = incorrect = unanswered = 0
    difficulty_counts: Dict[str, int] = {level: 0 for level in DIFFICULTY_LEVELS}
    difficulty_correct: Dict[str, int] = {level: 0 for level in DIFFICULTY_LEVELS}

    for i in range(min(total, len(questions))):
        question = questions[i]
        answer = _lookup_answer(answers, i)
        is_correct = answer is not None and answer == question.get("correct_answer")

        if answer is None:
            unanswered += 1
        elif is_correct:
            correct += 1
        else:
            incorrect += 1

        difficulty = (question.get("difficulty") or DEFAULT_DIFFICULTY).lower()
        difficulty_counts[difficulty] = difficulty_counts.get(difficulty, 0) + 1
        difficulty_correct.setdefault(difficulty, 0)
        if is_correct:
            difficulty_correct[difficulty] += 1

    total_seconds = estimate_total_seconds(report)

    return ReportSummary(
        total=total,
        score=score,
        correct=correct,
        incorrect=incorrect,
        unanswered=unanswered,
        percent=round_half_up(score / total * 100) if total else 0,
        difficultyCounts=difficulty_counts,
        difficultyCorrect=difficulty_correct,
        totalSeconds=total_seconds,
        perQuestionSeconds=per_question_seconds(
            report.get("perQuestionTime"), total, total_seconds
        )
    )
