"""
Pydantic schemas for material-related requests and responses
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.material import MaterialType
from app.schemas.quiz import CooldownStatus


class MaterialCreate(BaseModel):
    """Admin ingestion of a material from manually pasted text"""
    title: str = Field(..., min_length=1, max_length=255)
    type: MaterialType
    content_text: str = Field(..., description="Transcript or document text")
    source_url: Optional[str] = Field(None, max_length=2048)
    start_offset: int = Field(0, ge=0, description="Start offset in seconds")
    end_offset: Optional[int] = Field(None, ge=0, description="End offset in seconds")
    reward_minutes: Optional[int] = Field(None, gt=0, description="Fixed reward, overrides computed value")
    
    @model_validator(mode="after")
    def check_offsets(self):
        if self.end_offset is not None and self.end_offset <= self.start_offset:
            raise ValueError("end_offset must be greater than start_offset")
        return self


class MaterialSummary(BaseModel):
    """Material metadata without the full text"""
    id: UUID
    title: str
    type: MaterialType
    source_url: Optional[str] = None
    start_offset: int = 0
    end_offset: Optional[int] = None
    fixed_reward_minutes: Optional[int] = None
    estimated_minutes: int
    reward_minutes: int  # effective reward for a first pass
    created_at: datetime
    updated_at: datetime


class MaterialListItem(MaterialSummary):
    passed: bool = False


class MaterialDetail(MaterialSummary):
    content_text: str
    passed: bool = False
    cooldown: CooldownStatus


class MaterialCreatedResponse(BaseModel):
    material_id: UUID
    title: str
    estimated_minutes: int
    reward_minutes: int


class MaterialList(BaseModel):
    materials: List[MaterialListItem]
    total: int
