"""
Quiz Session Service
Session lifecycle: start (fetch -> sanitize -> shuffle -> persist), submit
(merge -> score -> expiry check -> persist) and report assembly
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
import logging
import uuid

from quizi.db.session_store import SessionStore
from quizi.models.quiz_sessions import QuizSession, SubmissionRecord, TriviaQuestion
from quizi.models.report import ReportQuestion, ReportResponse, ReportSummary
from quizi.models.start_session import SafeQuestion, StartSessionResponse
from quizi.models.submit_answers import SubmitAnswersRequest, SubmitAnswersResponse
from quizi.services.report_service import summarize_report
from quizi.services.scoring import (
    fallback_score,
    format_time_used,
    merge_answers,
    score_answers,
)
from quizi.services.trivia_client import TriviaClient
from quizi.utils.seeded_shuffle import seeded_shuffle

logger = logging.getLogger(__name__)

QUESTION_COUNT = 15
QUIZ_DURATION = timedelta(minutes=30)


class QuizSessionError(Exception):
    """Base exception for quiz session errors"""
    pass


class SessionNotFoundError(QuizSessionError):
    """Raised when a sessionId does not exist"""
    pass


class SessionValidationError(QuizSessionError):
    """Raised when a payload is well-formed but does not fit the session"""
    pass


def utc_now() -> datetime:
    """Current UTC time at MongoDB (millisecond) precision"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def build_safe_questions(session_id: str, questions: List[TriviaQuestion]) -> List[SafeQuestion]:
    """
    Client view of the questions: all answers pooled and shuffled with the
    seed "<sessionId>-<index>", correct answer not identified
    """
    return [
        SafeQuestion(
            category=q.category,
            type=q.type,
            difficulty=q.difficulty,
            question=q.question,
            choices=seeded_shuffle(
                [q.correct_answer, *q.incorrect_answers],
                f"{session_id}-{idx}"
            )
        )
        for idx, q in enumerate(questions)
    ]


class QuizSessionService:
    """Service for the quiz session lifecycle"""

    def __init__(
        self,
        store: SessionStore,
        trivia_client: TriviaClient,
        question_count: int = QUESTION_COUNT,
        quiz_duration: timedelta = QUIZ_DURATION,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Args:
            store: Session persistence
            trivia_client: Question provider client
            question_count: Questions requested per session
            quiz_duration: Time allowed between start and expiry
            clock: Source of the current UTC time
        """
        self.store = store
        self.trivia_client = trivia_client
        self.question_count = question_count
        self.quiz_duration = quiz_duration
        self.clock = clock

    async def start_session(self, email: str) -> StartSessionResponse:
        """
        Create a session for an already validated email

        Raises:
            TriviaProviderError: Provider unreachable or nothing usable
            StoreError: Session could not be persisted
        """
        questions = await self.trivia_client.fetch_questions(self.question_count)

        now = self.clock()
        session = QuizSession(
            sessionId=str(uuid.uuid4()),
            email=email,
            questions=questions,
            createdAt=now,
            startedAt=now,
            expiresAt=now + self.quiz_duration
        )
        await self.store.insert_session(session)

        logger.info(
            f"🎬 Started quiz session {session.sessionId} for {email} "
            f"with {session.total} questions"
        )

        return StartSessionResponse(
            sessionId=session.sessionId,
            questions=build_safe_questions(session.sessionId, session.questions),
            startedAt=session.startedAt,
            expiresAt=session.expiresAt
        )

    async def submit_answers(self, request: SubmitAnswersRequest) -> SubmitAnswersResponse:
        """
        Merge answers into the session and rescore the full question set

        Late submissions are accepted and only flagged via
        expiredAtSubmission. finishedAt and the flag are fixed by the first
        submission.

        Raises:
            SessionNotFoundError: Unknown sessionId
            SessionValidationError: Answer index outside the question range
            StoreError: Read or write failed
        """
        session = await self._require_session(request.sessionId)

        out_of_range = [
            item.questionIndex for item in request.answers
            if item.questionIndex >= session.total
        ]
        if out_of_range:
            raise SessionValidationError(
                f"questionIndex out of range (0-{session.total - 1}): {out_of_range}"
            )

        merged = merge_answers(session.userAnswers, request.answers)
        score, per_question_correct = score_answers(session.questions, merged)

        if session.finishedAt is not None:
            finished_at = session.finishedAt
            expired = session.expiredAtSubmission
        else:
            finished_at = request.finishedAt or self.clock()
            expired = session.expiresAt < finished_at

        record = SubmissionRecord(
            userAnswers=merged,
            finishedAt=finished_at,
            score=score,
            perQuestionCorrect=per_question_correct,
            expiredAtSubmission=expired,
            updatedAt=self.clock()
        )
        if not await self.store.record_submission(session.sessionId, record):
            raise SessionNotFoundError(f"Session not found: {session.sessionId}")

        if expired:
            logger.warning(f"⏰ Session {session.sessionId} submitted after expiry")
        logger.info(
            f"📝 Submission for {session.sessionId}: "
            f"{len(request.answers)} answers, score {score}/{session.total}"
        )

        return SubmitAnswersResponse(
            sessionId=session.sessionId,
            score=score,
            total=session.total
        )

    async def get_report(self, session_id: str) -> ReportResponse:
        """
        Full answer-revealing report

        Raises:
            SessionNotFoundError: Unknown sessionId
            StoreError: Read failed
        """
        session = await self._require_session(session_id)

        score = session.score
        if score is None:
            score = fallback_score(session.questions, session.userAnswers)

        return ReportResponse(
            sessionId=session.sessionId,
            email=session.email,
            startedAt=session.startedAt,
            finishedAt=session.finishedAt,
            expiredAtSubmission=session.expiredAtSubmission,
            total=session.total,
            score=score,
            questions=[
                ReportQuestion(
                    question=q.question,
                    correct_answer=q.correct_answer,
                    incorrect_answers=q.incorrect_answers,
                    category=q.category,
                    difficulty=q.difficulty
                )
                for q in session.questions
            ],
            userAnswers=session.userAnswers,
            perQuestionTime=[None] * session.total,
            timeUsed=format_time_used(session.startedAt, session.finishedAt)
        )

    async def get_report_summary(self, session_id: str) -> ReportSummary:
        """Report analytics for a session"""
        report = await self.get_report(session_id)
        return summarize_report(report.model_dump())

    async def _require_session(self, session_id: str) -> QuizSession:
        session = await self.store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session
