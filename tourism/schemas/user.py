"""Pydantic schemas for users."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import field_validator

from tourism.models import UserRole
from tourism.schemas.base import CamelModel


class UserResponse(CamelModel):
    """Sanitized user view. Credential material has no field here."""

    id: UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None

    @field_validator("created_at", "updated_at", "last_login", mode="before")
    @classmethod
    def ensure_timezone_aware(cls, v: datetime | None) -> datetime | None:
        """Ensure datetime fields are timezone-aware."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v
