"""Base model mixins for common patterns."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class RecordValidationError(ValueError):
    """Raised when a model attribute is assigned a value the schema rejects.

    Carries field-level messages so callers can report them per field.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


class UUIDMixin:
    """Mixin for UUID primary key."""

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)


class TimestampMixin:
    """Mixin for created_at/updated_at timestamps with UTC timezone."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


def assign_validated(instance: object, values: dict[str, Any]) -> None:
    """Set every value on ``instance`` and report all rejected fields at once."""
    errors: dict[str, str] = {}
    for field, value in values.items():
        try:
            setattr(instance, field, value)
        except RecordValidationError as exc:
            errors.update(exc.errors)
    if errors:
        raise RecordValidationError(errors)
