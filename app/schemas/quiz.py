"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import Annotated, List, Optional
from datetime import datetime
from uuid import UUID

QUESTION_COUNT = 10
ANSWERS_PER_QUESTION = 4
QUESTION_TIME_LIMIT_SECONDS = 30  # enforced client-side only

UNANSWERED = -1

AnswerIndex = Annotated[int, Field(ge=UNANSWERED, le=ANSWERS_PER_QUESTION - 1)]


class QuizQuestion(BaseModel):
    """Single multiple-choice question"""
    question: str = Field(..., min_length=1)
    answers: List[str] = Field(..., min_length=ANSWERS_PER_QUESTION, max_length=ANSWERS_PER_QUESTION)
    correct_index: int = Field(..., ge=0, le=ANSWERS_PER_QUESTION - 1, strict=True)
    rationale: Optional[str] = None
    
    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question text must not be empty")
        return value
    
    @field_validator("answers")
    @classmethod
    def answers_not_blank(cls, value: List[str]) -> List[str]:
        for i, answer in enumerate(value):
            if not answer.strip():
                raise ValueError(f"answer {i} must not be empty")
        return value


class Quiz(BaseModel):
    """
    A generated quiz. Never stored server-side: the client holds it and
    sends it back unchanged with the answers.
    """
    questions: List[QuizQuestion] = Field(..., min_length=QUESTION_COUNT, max_length=QUESTION_COUNT)


class StartQuizResponse(BaseModel):
    """Response containing a freshly generated quiz"""
    material_id: UUID
    quiz: Quiz
    total_questions: int = QUESTION_COUNT
    question_time_limit_seconds: int = QUESTION_TIME_LIMIT_SECONDS


class QuizSubmission(BaseModel):
    """Answer indexes (-1 = unanswered) plus the quiz that was shown"""
    answers: List[AnswerIndex]
    quiz: Quiz


class QuizResult(BaseModel):
    """Outcome of a scored submission"""
    score: int
    total_questions: int = QUESTION_COUNT
    passed: bool
    reward_minutes: int = 0  # granted by this call only


class CooldownStatus(BaseModel):
    """Whether a new attempt may start right now"""
    allowed: bool
    remaining_seconds: Optional[int] = None
    last_attempt: Optional[datetime] = None


class PassedStatus(BaseModel):
    material_id: UUID
    passed: bool
