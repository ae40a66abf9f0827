"""
Material store: lookups for the quiz core and admin ingestion of pasted text
"""
import logging
import re
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models import Material, MaterialType
from app.schemas.material import MaterialCreate, MaterialSummary
from app.services.estimator_service import estimator_service
from app.services.exceptions import InvalidMaterialContent
from app.utils.cache import cache_service

logger = logging.getLogger(__name__)

_YOUTUBE_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/watch\?.*v=([^&\n?#]+)"),
]
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]")
_WHITESPACE = re.compile(r"\s+")


def extract_video_id(url: str) -> Optional[str]:
    """Extract the YouTube video id from watch, short and embed URLs"""
    for pattern in _YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1)
    return None


class MaterialService:
    """
    CRUD over materials
    
    Manual text rules:
    - At least 100 characters after trimming
    - Whitespace runs collapsed, control characters removed
    - Truncated to 500,000 characters
    """
    
    MIN_TEXT_LENGTH = 100
    MAX_TEXT_LENGTH = 500_000
    
    def clean_text(self, text: str) -> str:
        """
        Validate and normalize manually pasted material text
        
        Raises:
            InvalidMaterialContent: nothing usable left after cleaning, or too
                short to build a quiz from
        """
        cleaned = _CONTROL_CHARS.sub("", text or "")
        cleaned = _WHITESPACE.sub(" ", cleaned).strip()
        
        if len(cleaned) < self.MIN_TEXT_LENGTH:
            logger.warning(f"Text too short: {len(cleaned)} chars (minimum: {self.MIN_TEXT_LENGTH})")
            raise InvalidMaterialContent(
                f"Text is too short ({len(cleaned)} characters, minimum {self.MIN_TEXT_LENGTH})"
            )
        
        if len(cleaned) > self.MAX_TEXT_LENGTH:
            logger.warning(f"Text too long: {len(cleaned)} chars, truncating to {self.MAX_TEXT_LENGTH}")
            cleaned = cleaned[:self.MAX_TEXT_LENGTH]
        
        return cleaned
    
    def list_materials(self, db: Session) -> List[Material]:
        """All materials, newest first"""
        return db.query(Material).order_by(Material.created_at.desc()).all()
    
    def get_material(self, db: Session, material_id: UUID) -> Optional[Material]:
        return db.query(Material).filter(Material.id == material_id).first()
    
    def to_summary(self, material: Material) -> MaterialSummary:
        return MaterialSummary(
            id=material.id,
            title=material.title,
            type=material.type,
            source_url=material.source_url,
            start_offset=material.start_offset,
            end_offset=material.end_offset,
            fixed_reward_minutes=material.reward_minutes,
            estimated_minutes=estimator_service.estimate_duration(material.content_text, material.type),
            reward_minutes=estimator_service.reward_for_material(material),
            created_at=material.created_at,
            updated_at=material.updated_at,
        )
    
    def list_summaries(self, db: Session) -> List[Dict[str, Any]]:
        """
        Material summaries for listings, served from cache when possible
        
        Returns:
            JSON-compatible summary dictionaries, newest first
        """
        cached = cache_service.get(cache_service.MATERIALS_KEY)
        if cached is not None:
            return cached
        
        summaries = [
            self.to_summary(material).model_dump(mode="json")
            for material in self.list_materials(db)
        ]
        cache_service.set(cache_service.MATERIALS_KEY, summaries)
        
        return summaries
    
    def create_material(self, db: Session, data: MaterialCreate) -> Material:
        """
        Persist a material ingested from pasted text
        
        Raises:
            InvalidMaterialContent: text or source URL rejected
        """
        content_text = self.clean_text(data.content_text)
        
        source_url = data.source_url.strip() if data.source_url else None
        if data.type == MaterialType.VIDEO and source_url and not extract_video_id(source_url):
            raise InvalidMaterialContent(f"Not a recognised YouTube URL: {source_url}")
        
        material = Material(
            title=data.title.strip(),
            type=data.type,
            content_text=content_text,
            source_url=source_url,
            start_offset=data.start_offset,
            end_offset=data.end_offset,
            reward_minutes=data.reward_minutes,
        )
        
        try:
            db.add(material)
            db.commit()
            db.refresh(material)
        except Exception:
            db.rollback()
            raise
        
        cache_service.invalidate_materials()
        logger.info(f"Material created: {material.id} ({material.type.value}, {len(content_text)} chars)")
        
        return material
    
    def delete_material(self, db: Session, material_id: UUID) -> bool:
        """
        Delete a material; its attempts and rewards stay behind as orphans
        
        Returns:
            False if the material did not exist
        """
        material = self.get_material(db, material_id)
        if material is None:
            return False
        
        try:
            db.delete(material)
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        cache_service.invalidate_materials()
        logger.info(f"Material deleted: {material_id}")
        
        return True


# Global instance
material_service = MaterialService()
