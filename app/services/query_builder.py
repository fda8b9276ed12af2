# app/services/query_builder.py
# -----------------------------------------------------------------------------
# Recommend request -> structured search query
# - must: exact term filters (region / city / business type)
# - should: two range boosts (high traffic, low competition), never exclusive
# - sort: _score desc, traffic_score desc, competition_density asc
# Pure: no I/O, serialized to the engine's JSON body only via to_body().
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from app.schemas.location import DEFAULT_LIMIT, RecommendRequest

HIGH_TRAFFIC_MIN = 7.0
HIGH_TRAFFIC_BOOST = 2.0
LOW_COMPETITION_MAX = 3.0
LOW_COMPETITION_BOOST = 1.5


@dataclass(frozen=True)
class TermFilter:
    field: str
    value: str

    def to_body(self) -> dict:
        return {"term": {self.field: self.value}}


@dataclass(frozen=True)
class RangeBoost:
    field: str
    boost: float
    gte: Optional[float] = None
    lte: Optional[float] = None

    def to_body(self) -> dict:
        cond: dict = {}
        if self.gte is not None:
            cond["gte"] = self.gte
        if self.lte is not None:
            cond["lte"] = self.lte
        cond["boost"] = self.boost
        return {"range": {self.field: cond}}


@dataclass(frozen=True)
class SortField:
    field: str
    order: str = "desc"  # "asc" | "desc"

    def to_body(self) -> dict:
        return {self.field: {"order": self.order}}


@dataclass(frozen=True)
class StructuredQuery:
    filters: List[TermFilter] = field(default_factory=list)
    boosts: List[RangeBoost] = field(default_factory=list)
    sort: List[SortField] = field(default_factory=list)
    size: int = DEFAULT_LIMIT

    def to_body(self) -> dict:
        return {
            "query": {
                "bool": {
                    "must": [f.to_body() for f in self.filters],
                    "should": [b.to_body() for b in self.boosts],
                    "minimum_should_match": 0,
                }
            },
            "sort": [s.to_body() for s in self.sort],
        }


RECOMMEND_BOOSTS = [
    RangeBoost("traffic_score", boost=HIGH_TRAFFIC_BOOST, gte=HIGH_TRAFFIC_MIN),
    RangeBoost("competition_density", boost=LOW_COMPETITION_BOOST, lte=LOW_COMPETITION_MAX),
]

RECOMMEND_SORT = [
    SortField("_score", "desc"),
    SortField("traffic_score", "desc"),
    SortField("competition_density", "asc"),
]


def effective_limit(limit: Optional[int]) -> int:
    return limit if limit and limit > 0 else DEFAULT_LIMIT


def build_recommend_query(req: RecommendRequest) -> StructuredQuery:
    """
    Empty fields drop their clause entirely; whether region/business type
    are mandatory is the recommender's call, not ours.
    """
    filters: List[TermFilter] = []
    if req.region:
        filters.append(TermFilter("region", req.region))
    if req.city:
        filters.append(TermFilter("city", req.city))
    if req.business_type:
        filters.append(TermFilter("business_types_suitable", req.business_type))

    return StructuredQuery(
        filters=filters,
        boosts=list(RECOMMEND_BOOSTS),
        sort=list(RECOMMEND_SORT),
        size=effective_limit(req.limit),
    )
