"""
Pydantic schemas for reward and dashboard responses
"""
from pydantic import BaseModel
from typing import List

from app.schemas.material import MaterialListItem


class RewardTotal(BaseModel):
    total_minutes: int


class DashboardResponse(BaseModel):
    """Everything the student dashboard renders"""
    total_reward_minutes: int
    materials: List[MaterialListItem]
    completed_count: int
    total_materials: int
