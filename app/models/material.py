"""
Material model - a learning unit (video or document) with extracted text
"""
from sqlalchemy import Column, String, Integer, Text, DateTime, Enum, Uuid, CheckConstraint
from app.database import Base
from app.utils.timeutils import utcnow
import enum
import uuid


class MaterialType(str, enum.Enum):
    VIDEO = "video"
    DOCUMENT = "document"


class Material(Base):
    """
    Materials table - text content is used for duration estimation and quiz generation
    """
    __tablename__ = "materials"
    __table_args__ = (
        CheckConstraint("length(content_text) > 0", name="ck_materials_content_not_empty"),
        CheckConstraint("start_offset >= 0", name="ck_materials_start_offset"),
        CheckConstraint(
            "end_offset IS NULL OR end_offset > start_offset",
            name="ck_materials_end_offset",
        ),
        CheckConstraint(
            "reward_minutes IS NULL OR reward_minutes > 0",
            name="ck_materials_reward_minutes",
        ),
    )
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    type = Column(
        Enum(MaterialType, name="material_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    content_text = Column(Text, nullable=False)
    source_url = Column(String(2048), nullable=True)  # hosted video or PDF
    start_offset = Column(Integer, nullable=False, default=0)  # seconds
    end_offset = Column(Integer, nullable=True)  # seconds
    reward_minutes = Column(Integer, nullable=True)  # overrides computed reward
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    
    def __repr__(self):
        return f"<Material(id={self.id}, title={self.title}, type={self.type})>"
