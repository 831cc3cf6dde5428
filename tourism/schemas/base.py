"""Base schema classes and the response envelope."""

from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Schemas exchanged with the frontend use camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(BaseModel):
    """Validation message for a single input field."""

    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):  # noqa: UP046
    """Success envelope: {success, data, message}."""

    success: bool = True
    data: T | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Failure envelope: {success: false, message, errors?}."""

    success: bool = False
    message: str
    errors: list[FieldError] | None = None


class PaginationMeta(CamelModel):
    """Page bookkeeping returned alongside paginated lists."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
