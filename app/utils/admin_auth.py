"""
Shared-secret check for admin panel routes
"""
import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from app.config import settings

logger = logging.getLogger(__name__)


def require_admin(x_admin_secret: Optional[str] = Header(None)) -> None:
    """
    FastAPI dependency guarding admin routes
    
    Raises:
        HTTPException: 503 when no secret is configured, 403 on mismatch
    """
    if not settings.ADMIN_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured"
        )
    
    if not x_admin_secret or not secrets.compare_digest(x_admin_secret, settings.ADMIN_SECRET):
        logger.warning("Rejected admin request with invalid secret")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin secret"
        )
