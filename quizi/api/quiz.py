"""
Quiz API Routes
Start a session, submit answers, and fetch the report
"""
import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, Depends, Request, status

from quizi.core.config import settings
from quizi.db.mongodb import StoreError, StoreNotConnectedError
from quizi.db.session_store import SessionStore
from quizi.models.report import ReportResponse, ReportSummary
from quizi.models.start_session import StartSessionRequest, StartSessionResponse
from quizi.models.submit_answers import SubmitAnswersRequest, SubmitAnswersResponse
from quizi.services.quiz_session_service import (
    QuizSessionService,
    SessionNotFoundError,
    SessionValidationError
)
from quizi.services.trivia_client import TriviaClient, TriviaProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Quiz"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def get_session_store(request: Request) -> SessionStore:
    """Dependency to get the session store bound to the app's MongoDB client"""
    mongodb = getattr(request.app.state, "mongodb", None)
    if mongodb is None:
        raise StoreNotConnectedError("MongoDB not connected")
    return SessionStore(mongodb.get_database())


def get_trivia_client(request: Request) -> TriviaClient:
    """Dependency to get the trivia provider client"""
    return request.app.state.trivia_client


def get_quiz_session_service(
    store: SessionStore = Depends(get_session_store),
    trivia_client: TriviaClient = Depends(get_trivia_client)
) -> QuizSessionService:
    """Dependency to get QuizSessionService instance"""
    return QuizSessionService(
        store=store,
        trivia_client=trivia_client,
        question_count=settings.trivia_question_count,
        quiz_duration=timedelta(minutes=settings.quiz_duration_minutes)
    )


def _store_failure(e: StoreError) -> HTTPException:
    if isinstance(e, StoreNotConnectedError):
        logger.error(f"❌ Session store unavailable: {e}")
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store unavailable"
        )
    logger.error(f"❌ Store error: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server error"
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/start",
    response_model=StartSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid email"},
        502: {"description": "Question provider failed"},
        500: {"description": "Internal server error"}
    },
    summary="Start a new quiz session"
)
async def start_quiz(
    request: StartSessionRequest,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> StartSessionResponse:
    """
    Start a timed quiz session

    Fetches 15 questions, stores them with their answers, and returns the
    questions with shuffled choices. The correct answer is not included.

    Example:
        POST /api/start
        {"email": "student@example.com"}
    """
    try:
        return await service.start_session(request.email)

    except TriviaProviderError as e:
        logger.error(f"Question provider failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    except StoreError as e:
        raise _store_failure(e)

    except Exception as e:
        logger.error(f"Unexpected error starting session: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )


@router.post(
    "/submit",
    response_model=SubmitAnswersResponse,
    responses={
        400: {"description": "Malformed submission"},
        404: {"description": "Session not found"}
    },
    summary="Submit answers and get the score"
)
async def submit_answers(
    request: SubmitAnswersRequest,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> SubmitAnswersResponse:
    """
    Merge answers into the session and rescore it

    Submissions after expiresAt are accepted and flagged.
    """
    try:
        return await service.submit_answers(request)

    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

    except SessionValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except StoreError as e:
        raise _store_failure(e)

    except Exception as e:
        logger.error(f"Unexpected error submitting answers: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )


@router.get(
    "/report/{session_id}",
    response_model=ReportResponse,
    responses={404: {"description": "Session not found"}},
    summary="Get the full report for a session"
)
async def get_report(
    session_id: str,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ReportResponse:
    """Report with correct answers, user answers and time used"""
    try:
        return await service.get_report(session_id)

    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

    except StoreError as e:
        raise _store_failure(e)

    except Exception as e:
        logger.error(f"Unexpected error building report: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )


@router.get(
    "/report/{session_id}/summary",
    response_model=ReportSummary,
    responses={404: {"description": "Session not found"}},
    summary="Get report analytics for a session"
)
async def get_report_summary(
    session_id: str,
    service: QuizSessionService = Depends(get_quiz_session_service)
) -> ReportSummary:
    """Correct/incorrect/unanswered counts, per-difficulty accuracy and timing"""
    try:
        return await service.get_report_summary(session_id)

    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

    except StoreError as e:
        raise _store_failure(e)

    except Exception as e:
        logger.error(f"Unexpected error building report summary: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )
