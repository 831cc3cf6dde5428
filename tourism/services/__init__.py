"""Services package."""

from tourism.services.auth_service import (
    IssuedSession,
    get_profile,
    login_user,
    register_user,
    update_profile,
)
from tourism.services.errors import ErrorKind, ServiceError
from tourism.services.guide_repository import GuideRepository

__all__ = [
    "ErrorKind",
    "GuideRepository",
    "IssuedSession",
    "ServiceError",
    "get_profile",
    "login_user",
    "register_user",
    "update_profile",
]
