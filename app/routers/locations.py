# app/routers/locations.py
# -----------------------------------------------------------------------------
# /locations/recommend : ranked locations for region + business type
# /locations/{id}      : single location document
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from app.core.config import Settings
from app.core.errors import InvalidRequest, LocationServiceError, NotFound
from app.routers.deps import get_app_settings, get_index
from app.schemas.location import Location, RecommendRequest, RecommendResponse
from app.services.recommender import recommend
from app.services.search_index import LocationIndex

router = APIRouter(prefix="/locations", tags=["locations"])


@router.post(
    "/recommend",
    response_model=RecommendResponse,
    response_model_exclude_none=True,
    responses={400: {"description": "Invalid request"}, 500: {"description": "Storage error"}},
)
async def recommend_locations(
    req: RecommendRequest,
    index: LocationIndex = Depends(get_index),
    settings: Settings = Depends(get_app_settings),
):
    """
    Locations suitable for `business_type` in `region` (optionally `city`),
    ranked by relevance, then traffic score, then competition density.
    """
    try:
        return await recommend(index, req, deadline=settings.REQUEST_DEADLINE_S)
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=e.message)
    except LocationServiceError as e:
        logger.error(f"[Recommend] {e} (cause: {e.__cause__})")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/{location_id}",
    response_model=Location,
    response_model_exclude_none=True,
    responses={404: {"description": "Location not found"}, 500: {"description": "Storage error"}},
)
async def get_location(
    location_id: str,
    index: LocationIndex = Depends(get_index),
    settings: Settings = Depends(get_app_settings),
):
    try:
        return await index.get_location(location_id, deadline=settings.REQUEST_DEADLINE_S)
    except NotFound:
        raise HTTPException(status_code=404, detail="Location not found")
    except LocationServiceError as e:
        logger.error(f"[Search] {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
