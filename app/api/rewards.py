"""
Reward ledger and dashboard API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.schemas.reward import DashboardResponse, RewardTotal
from app.api.materials import list_with_status
from app.services.reward_service import reward_service

router = APIRouter(prefix="/api", tags=["rewards"])
logger = logging.getLogger(__name__)


@router.get("/rewards/total", response_model=RewardTotal)
async def get_total_rewards(db: Session = Depends(get_db)):
    """Total screen-time minutes earned so far"""
    return RewardTotal(total_minutes=reward_service.get_total_rewards(db))


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(db: Session = Depends(get_db)):
    """
    Student dashboard data
    
    - Accumulated reward minutes
    - Every material with its completion flag
    """
    materials = list_with_status(db)
    
    return DashboardResponse(
        total_reward_minutes=reward_service.get_total_rewards(db),
        materials=materials,
        completed_count=sum(1 for m in materials if m.passed),
        total_materials=len(materials),
    )
