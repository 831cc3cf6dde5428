"""User model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from tourism.database import Base
from tourism.models.base import RecordValidationError, TimestampMixin, UUIDMixin

EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100


class UserRole(str, enum.Enum):
    """Platform roles. New roles only need a member here."""

    CUSTOMER = "customer"
    GUIDE = "guide"
    HOST = "host"
    ADMIN = "admin"


def normalize_email(email: str) -> str:
    """Canonical form used for every lookup and insert."""
    return email.strip().lower()


class User(UUIDMixin, TimestampMixin, Base):
    """Platform account with credential material.

    ``hashed_password`` only ever holds a bcrypt digest; hashing happens in the
    service layer before assignment.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False
    )
    # Deferred: only loaded when a query asks for it with undefer()
    hashed_password: Mapped[str] = mapped_column(
        String(255), nullable=False, deferred=True, deferred_raiseload=True
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            native_enum=False,
            length=20,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @validates("email")
    def _validate_email(self, key: str, value: str) -> str:
        email = normalize_email(value or "")
        local, _, domain = email.partition("@")
        if not local or "." not in domain:
            raise RecordValidationError({key: "Please provide a valid email"})
        if len(email) > EMAIL_MAX_LENGTH:
            raise RecordValidationError({key: f"Email cannot exceed {EMAIL_MAX_LENGTH} characters"})
        return email

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        name = (value or "").strip()
        if not name:
            raise RecordValidationError({key: "Name is required"})
        if len(name) > NAME_MAX_LENGTH:
            raise RecordValidationError({key: f"Name cannot exceed {NAME_MAX_LENGTH} characters"})
        return name

    @validates("hashed_password")
    def _validate_hashed_password(self, key: str, value: str) -> str:
        # bcrypt digests always carry a $2a$/$2b$/$2y$ prefix
        if not value or not value.startswith("$2"):
            raise RecordValidationError({"password": "Password must be hashed before storage"})
        return value

    @validates("role")
    def _validate_role(self, key: str, value: UserRole | str) -> UserRole:
        try:
            return UserRole(value)
        except ValueError:
            raise RecordValidationError({key: f"'{value}' is not a valid role"}) from None

    def __repr__(self) -> str:
        return f"<User {self.email}>"
