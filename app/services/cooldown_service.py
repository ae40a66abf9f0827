"""
Cooldown gate: decides whether a new quiz attempt may start
State is reconstructed from the append-only attempt log on every call
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models import Attempt
from app.schemas.quiz import CooldownStatus
from app.utils.policies import fail_open
from app.utils.timeutils import utcnow, to_naive_utc

logger = logging.getLogger(__name__)


class CooldownService:
    """
    Attempt history queries that gate the quiz
    
    - Cooldown: 10 minutes after the most recent failed attempt
    - Storage errors fail open: the student is never locked out by an outage
    """
    
    COOLDOWN_SECONDS = 600
    
    @fail_open(lambda: CooldownStatus(allowed=True), "Cooldown check failed, allowing attempt")
    def check_cooldown(
        self,
        db: Session,
        material_id: UUID,
        now: Optional[datetime] = None
    ) -> CooldownStatus:
        """
        Check whether an attempt is allowed right now
        
        Args:
            db: Database session
            material_id: Material UUID
            now: Reference time (defaults to current UTC time)
            
        Returns:
            CooldownStatus with remaining seconds when blocked
        """
        last_failed = self.latest_failed_attempt(db, material_id)
        if last_failed is None:
            return CooldownStatus(allowed=True)
        
        now = to_naive_utc(now) if now is not None else utcnow()
        elapsed = int((now - last_failed.created_at).total_seconds())
        
        if elapsed >= self.COOLDOWN_SECONDS:
            return CooldownStatus(allowed=True)
        
        # A failed attempt timestamped in the future (clock skew) blocks for the full window
        remaining = min(self.COOLDOWN_SECONDS - elapsed, self.COOLDOWN_SECONDS)
        
        logger.info(f"Cooldown active for material {material_id}: {remaining}s remaining")
        
        return CooldownStatus(
            allowed=False,
            remaining_seconds=remaining,
            last_attempt=last_failed.created_at
        )
    
    @fail_open(bool, "Passed check failed, reporting not passed")
    def check_passed(self, db: Session, material_id: UUID) -> bool:
        """True iff any passing attempt exists for the material"""
        passed_id = (
            db.query(Attempt.id)
            .filter(Attempt.material_id == material_id, Attempt.passed.is_(True))
            .limit(1)
            .scalar()
        )
        return passed_id is not None
    
    def latest_failed_attempt(self, db: Session, material_id: UUID) -> Optional[Attempt]:
        return (
            db.query(Attempt)
            .filter(Attempt.material_id == material_id, Attempt.passed.is_(False))
            .order_by(Attempt.created_at.desc())
            .first()
        )
    
    @fail_open(frozenset, "Passed materials query failed")
    def passed_material_ids(self, db: Session) -> frozenset:
        """Material ids with at least one passing attempt (dashboard rendering)"""
        rows = (
            db.query(Attempt.material_id)
            .filter(Attempt.passed.is_(True))
            .distinct()
            .all()
        )
        return frozenset(row[0] for row in rows)


# Global instance
cooldown_service = CooldownService()
