"""
Start Session Request/Response Models
"""
import re
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator

# local@domain.tld, nothing more
EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


class StartSessionRequest(BaseModel):
    """Request model for starting a new quiz session"""
    email: str = Field(..., description="Email recorded with the attempt")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        if not isinstance(v, str) or not EMAIL_PATTERN.fullmatch(v):
            raise ValueError("Invalid email")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "email": "student@example.com"
            }
        }


class SafeQuestion(BaseModel):
    """Client-safe question view, the correct answer is never included"""
    category: str
    type: str
    difficulty: str
    question: str
    choices: List[str] = Field(..., description="All answers, deterministically shuffled")


class StartSessionResponse(BaseModel):
    """Response model for a started quiz session"""
    sessionId: str = Field(..., description="Unique session identifier")
    questions: List[SafeQuestion]
    startedAt: datetime
    expiresAt: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "550e8400-e29b-41d4-a716-446655440000",
                "questions": [
                    {
                        "category": "Science: Computers",
                        "type": "boolean",
                        "difficulty": "easy",
                        "question": "Linux was first created as an alternative to Windows XP.",
                        "choices": ["True", "False"]
                    }
                ],
                "startedAt": "2024-01-15T10:00:00.000Z",
                "expiresAt": "2024-01-15T10:30:00.000Z"
            }
        }
