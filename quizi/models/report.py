"""
Report Models
Full answer-revealing view of a session plus derived analytics
"""
from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ReportQuestion(BaseModel):
    question: str
    correct_answer: str
    incorrect_answers: List[str]
    category: str
    difficulty: str


class ReportResponse(BaseModel):
    """Report for a session, the only payload that reveals answers"""
    sessionId: str
    email: str
    startedAt: datetime
    finishedAt: Optional[datetime] = None
    expiredAtSubmission: bool = False
    total: int
    score: int
    questions: List[ReportQuestion]
    userAnswers: Dict[str, str]
    perQuestionTime: List[Optional[Union[int, float]]] = Field(
        ...,
        description="Not tracked server-side, always one null per question"
    )
    timeUsed: str = Field(..., description='"<N>s" once finished, otherwise "approx 30m"')


class ReportSummary(BaseModel):
    """Analytics derived from a report payload"""
    total: int
    score: int
    correct: int
    incorrect: int
    unanswered: int
    percent: int = Field(..., description="Score percentage, rounded half-up")
    difficultyCounts: Dict[str, int]
    difficultyCorrect: Dict[str, int]
    totalSeconds: Optional[int] = None
    perQuestionSeconds: List[Optional[Union[int, float]]]
