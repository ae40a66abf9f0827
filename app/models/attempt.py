"""
Attempt model - one scored quiz submission
"""
from sqlalchemy import Column, Integer, Boolean, DateTime, Uuid, CheckConstraint, Index
from app.database import Base
from app.utils.timeutils import utcnow
import uuid


class Attempt(Base):
    """
    Attempts table - append-only log, never updated or deleted.

    material_id is deliberately not a foreign key: deleting a material
    leaves its attempts orphaned.
    """
    __tablename__ = "attempts"
    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 10", name="ck_attempts_score_range"),
        Index("ix_attempts_material_passed_created", "material_id", "passed", "created_at"),
    )
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    material_id = Column(Uuid, nullable=False, index=True)
    score = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    
    def __repr__(self):
        return f"<Attempt(material_id={self.material_id}, score={self.score}, passed={self.passed})>"
