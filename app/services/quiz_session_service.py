"""
Quiz session controller
Gate check -> generation -> client-held quiz -> scoring -> attempt -> reward

Nothing is stored when a quiz starts; only submissions are recorded.
Scoring uses the quiz the client sends back, because generation is
non-deterministic and a regenerated quiz would not match what the student saw.
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Attempt, Material
from app.schemas.quiz import Quiz, QuizResult
from app.services.cooldown_service import cooldown_service, CooldownService
from app.services.estimator_service import estimator_service, EstimatorService
from app.services.exceptions import (
    AnswerCountMismatch,
    AttemptStorageError,
    CooldownActive,
    MaterialNotFound,
    QuizGenerationFailed,
)
from app.services.gemini_service import gemini_service
from app.services.material_service import material_service, MaterialService
from app.services.reward_service import reward_service, RewardService

logger = logging.getLogger(__name__)


class QuizSessionService:
    """
    Orchestrates quiz attempts for a material
    
    - Pass: at least 9 of 10 correct
    - Unanswered questions (-1) count as wrong
    - First pass grants the reward, later passes grant 0
    """
    
    PASSING_SCORE = 9
    
    def __init__(
        self,
        generator=gemini_service,
        cooldown: CooldownService = cooldown_service,
        materials: MaterialService = material_service,
        rewards: RewardService = reward_service,
        estimator: EstimatorService = estimator_service,
    ):
        self.generator = generator
        self.cooldown = cooldown
        self.materials = materials
        self.rewards = rewards
        self.estimator = estimator
    
    def _require_material(self, db: Session, material_id: UUID) -> Material:
        material = self.materials.get_material(db, material_id)
        if material is None:
            raise MaterialNotFound(material_id)
        return material
    
    async def start_quiz(
        self,
        db: Session,
        material_id: UUID,
        now: Optional[datetime] = None
    ) -> Quiz:
        """
        Generate a fresh quiz if the cooldown allows it
        
        Args:
            db: Database session
            material_id: Material UUID
            now: Reference time for the cooldown check
            
        Returns:
            Validated quiz for the client to hold
            
        Raises:
            CooldownActive: a failed attempt is still within the window
            MaterialNotFound: unknown material
            QuizGenerationFailed: generator error or malformed quiz
        """
        status = self.cooldown.check_cooldown(db, material_id, now=now)
        if not status.allowed:
            raise CooldownActive(status.remaining_seconds, status.last_attempt)
        
        material = self._require_material(db, material_id)
        
        logger.info(f"Generating quiz for material {material_id}")
        
        try:
            raw_quiz = await self.generator.generate_quiz(material.content_text)
        except Exception as e:
            logger.error(f"Quiz generation failed for material {material_id}: {str(e)}")
            raise QuizGenerationFailed(str(e)) from e
        
        if raw_quiz is None:
            logger.error(f"Quiz generator returned nothing for material {material_id}")
            raise QuizGenerationFailed("generator returned no quiz")
        
        return self.validate_quiz(raw_quiz, material_id)
    
    def validate_quiz(self, raw_quiz, material_id: Optional[UUID] = None) -> Quiz:
        """Re-validate every field of generator output"""
        try:
            if isinstance(raw_quiz, Quiz):
                return Quiz.model_validate(raw_quiz.model_dump())
            return Quiz.model_validate(raw_quiz)
        except ValidationError as e:
            logger.warning(
                f"Generator returned a malformed quiz for material {material_id}: "
                f"{e.error_count()} errors, first: {e.errors()[0]['msg']}"
            )
            raise QuizGenerationFailed(f"malformed quiz: {e.error_count()} validation errors") from e
    
    def score_answers(self, answers: List[int], quiz: Quiz) -> int:
        """
        Count answers equal to the correct index
        
        Raises:
            AnswerCountMismatch: answers do not line up with questions
        """
        if len(answers) != len(quiz.questions):
            raise AnswerCountMismatch(len(quiz.questions), len(answers))
        
        return sum(
            1 for answer, question in zip(answers, quiz.questions)
            if answer == question.correct_index
        )
    
    def submit_quiz(
        self,
        db: Session,
        material_id: UUID,
        answers: List[int],
        quiz: Quiz
    ) -> QuizResult:
        """
        Score a submission against the quiz the student was shown
        
        Args:
            db: Database session
            material_id: Material UUID
            answers: Selected answer index per question (-1 = unanswered)
            quiz: Quiz previously returned by start_quiz
            
        Returns:
            Score, pass flag and minutes granted by this call
            
        Raises:
            MaterialNotFound: unknown material
            AnswerCountMismatch: wrong number of answers
            AttemptStorageError: the attempt could not be recorded
        """
        material = self._require_material(db, material_id)
        
        score = self.score_answers(answers, quiz)
        passed = score >= self.PASSING_SCORE
        
        self.record_attempt(db, material_id, score, passed)
        
        reward_minutes = 0
        if passed:
            minutes = self.estimator.reward_for_material(material)
            reward_minutes = self.rewards.grant_once(db, material_id, minutes)
        
        logger.info(
            f"Quiz submitted for material {material_id}: "
            f"{score}/{len(quiz.questions)}, passed={passed}, reward={reward_minutes}min"
        )
        
        return QuizResult(
            score=score,
            total_questions=len(quiz.questions),
            passed=passed,
            reward_minutes=reward_minutes if passed else 0,
        )
    
    def record_attempt(self, db: Session, material_id: UUID, score: int, passed: bool) -> Attempt:
        """Insert the attempt; failures propagate so the result is not treated as final"""
        attempt = Attempt(material_id=material_id, score=score, passed=passed)
        
        try:
            db.add(attempt)
            db.commit()
            db.refresh(attempt)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Failed to save attempt for material {material_id} "
                f"(score={score}, passed={passed}): {str(e)}"
            )
            raise AttemptStorageError(material_id) from e
        
        return attempt


# Global instance
quiz_session_service = QuizSessionService()
