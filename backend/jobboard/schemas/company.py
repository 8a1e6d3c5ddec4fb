"""Company-related Pydantic schemas."""
import json
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobboard.models.company import CompanySize
from jobboard.schemas.common import Pagination


class CompanyLocation(BaseModel):
    """One office location."""
    name: str
    address: Optional[str] = None
    map_link: Optional[str] = None


def _coerce_location(value: Any) -> Any:
    # Older rows stored locations as plain strings or JSON-encoded strings
    if isinstance(value, str):
        if value.startswith("{"):
            try:
                return json.loads(value)
            except ValueError:
                pass
        return {"name": value}
    return value


class CompanyProfileRequest(BaseModel):
    """Create or update the current poster's company."""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None  # Unknown values are stored as empty
    founded_year: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    headquarters: Optional[str] = None
    locations: list[CompanyLocation] = []
    benefits: list[str] = []
    logo: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None

    @field_validator("locations", mode="before")
    @classmethod
    def parse_locations(cls, value):
        if value is None:
            return []
        return [_coerce_location(item) for item in value]


class CompanyResponse(BaseModel):
    """Full company profile."""
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[CompanySize] = None
    founded_year: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    headquarters: Optional[str] = None
    locations: list[CompanyLocation] = []
    benefits: list[str] = []
    logo: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    is_verified: bool = False
    owner_id: UUID
    active_job_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("locations", mode="before")
    @classmethod
    def parse_locations(cls, value):
        if value is None:
            return []
        return [_coerce_location(item) for item in value]


class CompanyListResponse(BaseModel):
    companies: list[CompanyResponse]
    pagination: Pagination
