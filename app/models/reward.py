"""
Reward model - one-time grant of bonus screen-time minutes
"""
from sqlalchemy import Column, Integer, Boolean, DateTime, Uuid, CheckConstraint
from app.database import Base
from app.utils.timeutils import utcnow
import uuid


class Reward(Base):
    """
    Rewards table - at most one row per material, enforced by the unique index
    """
    __tablename__ = "rewards"
    __table_args__ = (
        CheckConstraint("minutes > 0", name="ck_rewards_minutes_positive"),
    )
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    material_id = Column(Uuid, nullable=False, unique=True, index=True)
    minutes = Column(Integer, nullable=False)
    claimed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    
    def __repr__(self):
        return f"<Reward(material_id={self.material_id}, minutes={self.minutes})>"
