"""
Quiz Session Models
Persisted session document; correct answers live here and only leave the
server through the report endpoint
"""
from datetime import datetime
from typing import Dict, List, Optional
import uuid

from pydantic import BaseModel, Field, field_validator


class TriviaQuestion(BaseModel):
    """
    Question as issued to the session, already HTML-decoded
    SECURITY: correct_answer is PRIVATE until the report
    """
    category: str = Field(default="", description="Provider category")
    type: str = Field(default="multiple", description="multiple or boolean")
    difficulty: str = Field(default="medium", description="easy, medium or hard (not validated)")
    question: str = Field(..., min_length=1, description="Question text")
    correct_answer: str = Field(..., description="Correct answer text - PRIVATE")
    incorrect_answers: List[str] = Field(default_factory=list, description="Wrong answer texts")

    @field_validator("incorrect_answers", mode="before")
    @classmethod
    def coerce_incorrect_answers(cls, v):
        """Anything other than a list is treated as no distractors"""
        if not isinstance(v, list):
            return []
        return [a for a in v if isinstance(a, str)]

    class Config:
        json_schema_extra = {
            "example": {
                "category": "Science: Computers",
                "type": "multiple",
                "difficulty": "easy",
                "question": "What does CPU stand for?",
                "correct_answer": "Central Processing Unit",
                "incorrect_answers": [
                    "Central Process Unit",
                    "Computer Personal Unit",
                    "Central Processor Unit"
                ]
            }
        }


class QuizSession(BaseModel):
    """One user's quiz attempt, stored in the `sessions` collection"""
    sessionId: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique session identifier"
    )
    email: str = Field(..., description="Email captured at start")
    questions: List[TriviaQuestion] = Field(..., description="Issued questions, fixed order")

    createdAt: datetime = Field(..., description="Document creation timestamp")
    startedAt: datetime = Field(..., description="Attempt start")
    expiresAt: datetime = Field(..., description="startedAt + quiz duration")

    # Keys are stringified question indexes
    userAnswers: Dict[str, str] = Field(default_factory=dict)
    finishedAt: Optional[datetime] = None
    score: Optional[int] = None
    perQuestionCorrect: Optional[List[bool]] = None
    expiredAtSubmission: bool = False
    updatedAt: Optional[datetime] = None

    @field_validator("userAnswers", mode="before")
    @classmethod
    def stringify_answer_keys(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            return v
        return {str(k): a for k, a in v.items()}

    @property
    def total(self) -> int:
        return len(self.questions)

    def to_document(self) -> dict:
        """Document shape written to MongoDB"""
        return self.model_dump()


class SubmissionRecord(BaseModel):
    """Fields written by a submission, in one atomic update"""
    userAnswers: Dict[str, str]
    finishedAt: datetime
    score: int
    perQuestionCorrect: List[bool]
    expiredAtSubmission: bool
    updatedAt: datetime
