# app/schemas/location.py
# -----------------------------------------------------------------------------
# Location documents, reference rows and the recommend request/response
# -----------------------------------------------------------------------------
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LIMIT = 20


class GeoPoint(BaseModel):
    lat: float
    lon: float


class Demographics(BaseModel):
    age_group: str = ""
    average_income: float = 0.0
    interests: List[str] = Field(default_factory=list)
    population_density: float = 0.0


class Location(BaseModel):
    # stored documents decode leniently: only the id is mandatory, anything
    # missing takes its zero value
    id: str = Field(..., min_length=1)
    name: str = ""
    address: str = ""
    coordinates: Optional[GeoPoint] = None
    region: str = ""
    city: str = ""
    description: str = ""
    business_types_suitable: List[str] = Field(default_factory=list)
    traffic_score: float = 0.0  # 0-10, higher is better
    competition_density: float = 0.0  # 0-10, lower is better
    demographics: Demographics = Field(default_factory=Demographics)
    embedding: Optional[List[float]] = None  # reserved for similarity search
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # ranking score, only set on search results
    score: Optional[float] = None

    def to_document(self) -> dict:
        """Index body: JSON-safe, without the transient score."""
        return self.model_dump(mode="json", exclude={"score"}, exclude_none=True)


class BusinessType(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Region(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    parent_region_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class RecommendRequest(BaseModel):
    # region/business_type are required, but checked by the recommender so
    # that a missing value is reported as a 400 like any other bad request
    region: str = ""
    city: str = ""
    business_type: str = ""
    limit: int = 0  # <= 0 means DEFAULT_LIMIT


class RecommendResponse(BaseModel):
    locations: List[Location]
    total: int
