"""Pydantic schemas package."""

from tourism.schemas.auth import AuthSession, LoginRequest, RegisterRequest, UpdateProfileRequest
from tourism.schemas.base import ApiResponse, CamelModel, ErrorResponse, FieldError, PaginationMeta
from tourism.schemas.guide import (
    GuideCreate,
    GuideListResponse,
    GuideLocation,
    GuidePricing,
    GuideResponse,
    GuideUpdate,
)
from tourism.schemas.user import UserResponse

__all__ = [
    "ApiResponse",
    "AuthSession",
    "CamelModel",
    "ErrorResponse",
    "FieldError",
    "GuideCreate",
    "GuideListResponse",
    "GuideLocation",
    "GuidePricing",
    "GuideResponse",
    "GuideUpdate",
    "LoginRequest",
    "PaginationMeta",
    "RegisterRequest",
    "UpdateProfileRequest",
    "UserResponse",
]
