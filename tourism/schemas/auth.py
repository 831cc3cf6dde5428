"""Pydantic schemas for authentication."""

from typing import Annotated

from pydantic import AfterValidator, EmailStr, Field, field_validator

from tourism.models import UserRole, normalize_email
from tourism.schemas.base import CamelModel
from tourism.schemas.user import UserResponse
from tourism.security import BCRYPT_MAX_BYTES, password_too_long


def _fits_bcrypt(value: str) -> str:
    if password_too_long(value):
        raise ValueError(f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=8, max_length=128), AfterValidator(_fits_bcrypt)]
Name = Annotated[str, Field(min_length=1, max_length=100)]

SELF_SERVICE_ROLES = (UserRole.CUSTOMER, UserRole.GUIDE, UserRole.HOST)


class RegisterRequest(CamelModel):
    """Schema for user registration."""

    email: EmailStr
    password: Password
    name: Name
    role: UserRole | None = None

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("role")
    @classmethod
    def self_service_role(cls, v: UserRole | None) -> UserRole | None:
        if v is not None and v not in SELF_SERVICE_ROLES:
            raise ValueError(f"Role '{v.value}' cannot be self-assigned")
        return v


class LoginRequest(CamelModel):
    """Schema for user login."""

    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=128)]

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class UpdateProfileRequest(CamelModel):
    """Schema for profile updates.

    A password change needs both ``currentPassword`` and ``newPassword``.
    """

    name: Name | None = None
    current_password: Annotated[str, Field(min_length=1, max_length=128)] | None = None
    new_password: Password | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip() if v is not None else v


class AuthSession(CamelModel):
    """Sanitized user plus a freshly issued session token."""

    user: UserResponse
    token: str
    token_type: str = "bearer"
