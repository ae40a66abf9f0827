"""
Quiz lifecycle API endpoints: cooldown, start, submit
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from app.database import get_db
from app.schemas.quiz import (
    CooldownStatus,
    PassedStatus,
    QuizResult,
    QuizSubmission,
    StartQuizResponse,
)
from app.services.cooldown_service import cooldown_service
from app.services.quiz_session_service import quiz_session_service, QuizSessionService
from app.utils.rate_limiter import rate_limiter


router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


def get_quiz_session_service() -> QuizSessionService:
    return quiz_session_service


@router.get("/{material_id}/cooldown", response_model=CooldownStatus)
async def get_cooldown(material_id: UUID, db: Session = Depends(get_db)):
    """
    Current cooldown status, polled by the client while blocked
    """
    return cooldown_service.check_cooldown(db, material_id)


@router.get("/{material_id}/passed", response_model=PassedStatus)
async def get_passed(material_id: UUID, db: Session = Depends(get_db)):
    """Whether the material has been passed at least once"""
    return PassedStatus(
        material_id=material_id,
        passed=cooldown_service.check_passed(db, material_id)
    )


@router.post(
    "/{material_id}/start",
    response_model=StartQuizResponse,
    dependencies=[Depends(rate_limiter.limit_quiz_generation)]
)
async def start_quiz(
    material_id: UUID,
    db: Session = Depends(get_db),
    service: QuizSessionService = Depends(get_quiz_session_service),
):
    """
    Generate a fresh quiz for a material

    - 429 with remaining seconds while a failed attempt is cooling down
    - 502 when the generator fails or returns a malformed quiz
    - Nothing is recorded: starting repeatedly costs nothing
    """
    quiz = await service.start_quiz(db, material_id)

    return StartQuizResponse(material_id=material_id, quiz=quiz)


@router.post("/{material_id}/submit", response_model=QuizResult)
async def submit_quiz(
    material_id: UUID,
    submission: QuizSubmission,
    db: Session = Depends(get_db),
    service: QuizSessionService = Depends(get_quiz_session_service),
):
    """
    Score answers against the quiz the student was shown

    Returns:
    - Score out of 10 and pass flag (9+ passes)
    - Reward minutes granted by this submission (first pass only)
    """
    logger.info(f"Scoring submission for material {material_id}")

    return service.submit_quiz(db, material_id, submission.answers, submission.quiz)
