"""SQLAlchemy models package."""

from tourism.models.base import RecordValidationError, assign_validated
from tourism.models.guide import Guide, GuideAvailability, GuideSpecialization
from tourism.models.user import User, UserRole, normalize_email

__all__ = [
    "Guide",
    "GuideAvailability",
    "GuideSpecialization",
    "RecordValidationError",
    "assign_validated",
    "User",
    "UserRole",
    "normalize_email",
]
