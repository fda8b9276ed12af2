# app/services/recommender.py
from __future__ import annotations

from typing import Optional

from loguru import logger

from app.core.errors import (
    InternalError,
    InvalidRequest,
    QueryError,
    SchemaError,
    StorageUnavailable,
)
from app.schemas.location import RecommendRequest, RecommendResponse
from app.services.query_builder import build_recommend_query, effective_limit
from app.services.search_index import LocationIndex


def validate_request(req: RecommendRequest) -> RecommendRequest:
    """Reject missing region/business type; returns a copy with the limit defaulted."""
    if not req.region.strip() or not req.business_type.strip():
        raise InvalidRequest(
            "region and business_type are required", operation="recommend"
        )
    return req.model_copy(update={"limit": effective_limit(req.limit)})


async def recommend(
    index: LocationIndex,
    req: RecommendRequest,
    *,
    deadline: Optional[float] = None,
) -> RecommendResponse:
    """
    Ranked locations for a request.
    - validation happens before any I/O
    - storage/query failures come back as InternalError (single attempt)
    - total is the number of returned locations, not the full match count
    """
    req = validate_request(req)
    query = build_recommend_query(req)

    try:
        hits = await index.search(query, req.limit, deadline=deadline)
    except (StorageUnavailable, QueryError, SchemaError) as e:
        logger.error(f"[Recommend] search failed: {e}")
        raise InternalError(
            "recommendation search failed", operation="recommend", target=index.index
        ) from e

    locations = [loc.model_copy(update={"score": score}) for loc, score in hits]
    logger.info(
        f"[Recommend] region={req.region!r} city={req.city!r} "
        f"type={req.business_type!r} -> {len(locations)} results"
    )
    return RecommendResponse(locations=locations, total=len(locations))
