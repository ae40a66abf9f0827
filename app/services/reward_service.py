"""
Reward ledger - append-only grants of bonus screen-time minutes
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Reward
from app.utils.policies import fail_open

logger = logging.getLogger(__name__)


class RewardService:
    """
    At most one reward per material, ever
    
    The unique index on rewards.material_id closes the check-then-insert
    race between concurrent passing submissions.
    """
    
    def get_reward(self, db: Session, material_id: UUID) -> Optional[Reward]:
        return db.query(Reward).filter(Reward.material_id == material_id).first()
    
    def grant_once(self, db: Session, material_id: UUID, minutes: int) -> int:
        """
        Insert a reward unless one already exists for the material
        
        Write failures are logged and swallowed: the attempt record is the
        source of truth, the reward is a best-effort bonus.
        
        Returns:
            Minutes granted by this call (0 if already rewarded or on error)
        """
        try:
            if self.get_reward(db, material_id) is not None:
                logger.info(f"Material {material_id} already rewarded, granting 0 minutes")
                return 0
            
            db.add(Reward(material_id=material_id, minutes=minutes, claimed=False))
            db.commit()
            
        except IntegrityError:
            # A concurrent submission inserted the reward first
            db.rollback()
            logger.info(f"Reward for material {material_id} inserted concurrently, granting 0 minutes")
            return 0
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to write reward for material {material_id} ({minutes} min): {str(e)}")
            return 0
        
        logger.info(f"Reward granted: {minutes} min for material {material_id}")
        return minutes
    
    @fail_open(int, "Failed to sum rewards, reporting 0")
    def get_total_rewards(self, db: Session) -> int:
        """Sum of minutes over all reward rows"""
        total = db.query(func.coalesce(func.sum(Reward.minutes), 0)).scalar()
        return int(total or 0)


# Global instance
reward_service = RewardService()
