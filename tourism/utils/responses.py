"""Builders for the {success: false, message, errors} failure envelope."""

from typing import Any

from fastapi.responses import JSONResponse

from tourism.schemas.base import ErrorResponse, FieldError
from tourism.services.errors import ServiceError


def error_response(
    status_code: int,
    message: str,
    errors: list[FieldError] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def service_error_response(error: ServiceError) -> JSONResponse:
    return error_response(error.status_code, error.message, error.errors)


def validation_errors(raw_errors: list[dict[str, Any]]) -> list[FieldError]:
    """Convert FastAPI/pydantic error dicts into field-level messages."""
    field_errors = []
    for error in raw_errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field_errors.append(
            FieldError(field=".".join(location) or "body", message=error.get("msg", "Invalid value"))
        )
    return field_errors
