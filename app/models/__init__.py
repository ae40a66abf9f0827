"""
Database models package
"""
from app.models.material import Material, MaterialType
from app.models.attempt import Attempt
from app.models.reward import Reward

__all__ = ["Material", "MaterialType", "Attempt", "Reward"]
