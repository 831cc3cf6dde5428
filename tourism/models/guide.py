"""Guide profile models."""

from __future__ import annotations

import enum
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourism.database import Base
from tourism.models.base import TimestampMixin, UUIDMixin


class GuideAvailability(str, enum.Enum):
    """Booking availability of a guide."""

    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"


class Guide(UUIDMixin, TimestampMixin, Base):
    """Local expert offering tours and experiences.

    Location and pricing are small fixed-shape documents and are stored as JSON.
    Specializations live in their own table so listings can filter on them in SQL.
    """

    __tablename__ = "guides"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False)
    languages: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    experience: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    location: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    pricing: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    certifications: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    availability: Mapped[GuideAvailability] = mapped_column(
        Enum(
            GuideAvailability,
            native_enum=False,
            length=20,
            values_callable=lambda states: [state.value for state in states],
        ),
        nullable=False,
        default=GuideAvailability.AVAILABLE,
    )

    specialization_rows: Mapped[list[GuideSpecialization]] = relationship(
        back_populates="guide",
        cascade="all, delete-orphan",
        order_by="GuideSpecialization.position",
        lazy="selectin",
    )

    @property
    def specializations(self) -> list[str]:
        return [row.name for row in self.specialization_rows]

    @specializations.setter
    def specializations(self, names: list[str]) -> None:
        self.specialization_rows = [
            GuideSpecialization(name=name, position=position) for position, name in enumerate(names)
        ]

    def __repr__(self) -> str:
        return f"<Guide {self.name}>"


class GuideSpecialization(Base):
    """One specialization tag of a guide, e.g. "trekking" or "tribal culture"."""

    __tablename__ = "guide_specializations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guide_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("guides.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    guide: Mapped[Guide] = relationship(back_populates="specialization_rows")
