"""Pydantic schemas for guide profiles."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field, field_validator

from tourism.models import GuideAvailability
from tourism.schemas.base import CamelModel, PaginationMeta

Rate = Annotated[float, Field(gt=0)]


class GuideLocation(CamelModel):
    district: Annotated[str, Field(min_length=1, max_length=100)]
    state: Annotated[str, Field(min_length=1, max_length=100)]


class GuidePricing(CamelModel):
    """Rates per engagement type; half and full day are mandatory."""

    half_day: Rate
    full_day: Rate
    multi_day: Rate | None = None
    workshop: Rate | None = None


class GuideCreate(CamelModel):
    """Schema for creating a guide profile."""

    name: Annotated[str, Field(min_length=1, max_length=100)]
    bio: Annotated[str, Field(min_length=1, max_length=5000)]
    specializations: list[Annotated[str, Field(min_length=1, max_length=100)]] = Field(
        default_factory=list
    )
    languages: list[str] = Field(default_factory=list)
    experience: Annotated[str, Field(max_length=255)] = ""
    location: GuideLocation
    pricing: GuidePricing
    certifications: list[str] | None = None
    availability: GuideAvailability = GuideAvailability.AVAILABLE


class GuideUpdate(CamelModel):
    """Schema for partial guide updates. Nested objects are replaced whole."""

    name: Annotated[str, Field(min_length=1, max_length=100)] | None = None
    bio: Annotated[str, Field(min_length=1, max_length=5000)] | None = None
    specializations: list[Annotated[str, Field(min_length=1, max_length=100)]] | None = None
    languages: list[str] | None = None
    experience: Annotated[str, Field(max_length=255)] | None = None
    location: GuideLocation | None = None
    pricing: GuidePricing | None = None
    certifications: list[str] | None = None
    availability: GuideAvailability | None = None


class GuideResponse(CamelModel):
    """Schema for guide response."""

    id: UUID
    name: str
    bio: str
    specializations: list[str]
    languages: list[str]
    experience: str
    location: GuideLocation
    pricing: GuidePricing
    certifications: list[str] | None = None
    availability: GuideAvailability
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def ensure_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure datetime fields are timezone-aware."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class GuideListResponse(CamelModel):
    guides: list[GuideResponse]
    pagination: PaginationMeta
