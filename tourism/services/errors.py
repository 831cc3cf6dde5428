"""Error values returned by the service layer.

Services hand these back instead of raising; routers turn them into the
failure envelope with the status code of their kind.
"""

import enum
from dataclasses import dataclass

from fastapi import status

from tourism.schemas.base import FieldError


class ErrorKind(str, enum.Enum):
    VALIDATION_FAILED = "validation_failed"
    UNAUTHORIZED = "unauthorized"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_DEACTIVATED = "account_deactivated"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_CURRENT_PASSWORD = "invalid_current_password"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_DEACTIVATED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CURRENT_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str
    errors: list[FieldError] | None = None

    @property
    def status_code(self) -> int:
        return self.kind.status_code


def validation_failed(errors: dict[str, str]) -> ServiceError:
    return ServiceError(
        ErrorKind.VALIDATION_FAILED,
        "Validation failed",
        [FieldError(field=field, message=message) for field, message in errors.items()],
    )
