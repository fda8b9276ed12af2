# app/routers/reference.py
# -----------------------------------------------------------------------------
# Reference lookups (read-only): /business-types, /regions
# -----------------------------------------------------------------------------
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import LocationServiceError, with_deadline
from app.db import crud
from app.db.session import get_session
from app.routers.deps import get_app_settings
from app.schemas.location import BusinessType, Region

router = APIRouter(tags=["reference"])


@router.get("/business-types", response_model=List[BusinessType])
async def get_business_types(
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    try:
        return await with_deadline(
            crud.list_business_types(db),
            settings.REQUEST_DEADLINE_S,
            operation="list_business_types",
            target="business_types",
        )
    except LocationServiceError as e:
        logger.error(f"[DB] {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/regions", response_model=List[Region])
async def get_regions(
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    """Flat list; build the tree from parent_region_id on the client."""
    try:
        return await with_deadline(
            crud.list_regions(db),
            settings.REQUEST_DEADLINE_S,
            operation="list_regions",
            target="regions",
        )
    except LocationServiceError as e:
        logger.error(f"[DB] {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
