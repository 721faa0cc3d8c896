"""
Health check API route
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import Stores, get_stores
from utils.errors import StoreError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(stores: Stores = Depends(get_stores)):
    """Report database connectivity"""
    try:
        await stores.posts.ping()
    except StoreError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Health check failed: database unreachable")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected",
    }
