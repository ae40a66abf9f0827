"""
Material listing and admin ingestion API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from uuid import UUID
import logging
from typing import List

from app.database import get_db
from app.schemas.material import (
    MaterialCreate, MaterialCreatedResponse, MaterialDetail,
    MaterialList, MaterialListItem
)
from app.services.cooldown_service import cooldown_service
from app.services.material_service import material_service
from app.utils.admin_auth import require_admin

router = APIRouter(prefix="/api/materials", tags=["materials"])
logger = logging.getLogger(__name__)


def list_with_status(db: Session) -> List[MaterialListItem]:
    """Material summaries flagged with whether each has been passed"""
    passed_ids = {str(material_id) for material_id in cooldown_service.passed_material_ids(db)}
    
    return [
        MaterialListItem(**summary, passed=str(summary["id"]) in passed_ids)
        for summary in material_service.list_summaries(db)
    ]


@router.get("/", response_model=MaterialList)
async def list_materials(db: Session = Depends(get_db)):
    """
    List all materials, newest first, with completion status
    """
    items = list_with_status(db)
    
    return MaterialList(materials=items, total=len(items))


@router.get("/{material_id}", response_model=MaterialDetail)
async def get_material(material_id: UUID, db: Session = Depends(get_db)):
    """
    Material with full text, completion status and current cooldown
    """
    material = material_service.get_material(db, material_id)
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    
    summary = material_service.to_summary(material)
    
    return MaterialDetail(
        **summary.model_dump(),
        content_text=material.content_text,
        passed=cooldown_service.check_passed(db, material_id),
        cooldown=cooldown_service.check_cooldown(db, material_id),
    )


@router.post(
    "/",
    response_model=MaterialCreatedResponse,
    status_code=201,
    dependencies=[Depends(require_admin)]
)
async def create_material(data: MaterialCreate, db: Session = Depends(get_db)):
    """
    Add a material from manually pasted text (admin)
    
    - Cleans whitespace and control characters
    - Rejects texts under 100 characters
    - Validates YouTube URLs for video materials
    """
    material = material_service.create_material(db, data)
    summary = material_service.to_summary(material)
    
    return MaterialCreatedResponse(
        material_id=material.id,
        title=material.title,
        estimated_minutes=summary.estimated_minutes,
        reward_minutes=summary.reward_minutes,
    )


@router.delete("/{material_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_material(material_id: UUID, db: Session = Depends(get_db)):
    """
    Delete a material (admin); its attempts and rewards are kept
    """
    if not material_service.delete_material(db, material_id):
        raise HTTPException(status_code=404, detail="Material not found")
