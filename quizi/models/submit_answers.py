from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator


class AnswerItem(BaseModel):
    """A single submitted answer"""
    questionIndex: StrictInt = Field(..., ge=0, description="0-based question index")
    answer: StrictStr = Field(..., description="Answer text as shown in choices")


class SubmitAnswersRequest(BaseModel):
    """Request model for answer submission"""
    sessionId: str = Field(..., min_length=1, description="Quiz session ID")
    answers: List[AnswerItem] = Field(..., description="Answers to merge into the session")
    finishedAt: Optional[datetime] = Field(
        default=None,
        description="Client finish time, defaults to server time"
    )

    @field_validator("finishedAt")
    @classmethod
    def assume_utc(cls, v):
        """Naive timestamps are taken as UTC; precision is cut to milliseconds"""
        if v is None:
            return v
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v.replace(microsecond=v.microsecond // 1000 * 1000)

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "550e8400-e29b-41d4-a716-446655440000",
                "answers": [
                    {"questionIndex": 0, "answer": "Central Processing Unit"},
                    {"questionIndex": 3, "answer": "False"}
                ],
                "finishedAt": "2024-01-15T10:21:07.000Z"
            }
        }


class SubmitAnswersResponse(BaseModel):
    """Response model for a recorded submission"""
    sessionId: str
    score: int = Field(..., ge=0, description="Number of correct answers")
    total: int = Field(..., ge=0, description="Number of questions in the session")
