"""Guide profile persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tourism.logger import get_logger
from tourism.models import Guide, GuideSpecialization
from tourism.schemas.guide import GuideCreate, GuideUpdate

logger = get_logger(__name__)


# May be cleared on update by sending an explicit null
NULLABLE_FIELDS = frozenset({"certifications"})


def _column_values(data: GuideCreate | GuideUpdate, *, exclude_unset: bool) -> dict[str, Any]:
    """Flatten a schema into model attribute values; nested objects become JSON dicts."""
    values = data.model_dump(exclude_unset=exclude_unset)
    if exclude_unset:
        values = {k: v for k, v in values.items() if v is not None or k in NULLABLE_FIELDS}
    for nested in ("location", "pricing"):
        if nested in values and values[nested] is not None:
            values[nested] = {k: v for k, v in values[nested].items() if v is not None}
    return values


class GuideRepository:
    """Get/list/create/update/delete guides by id within one session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, guide_id: UUID) -> Guide | None:
        result = await self.db.execute(select(Guide).where(Guide.id == guide_id))
        return result.scalar_one_or_none()

    async def list(
        self,
        *,
        specialization: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Guide], int]:
        """Return one page of guides in creation order and the filtered total."""
        base_query = select(Guide)
        if specialization:
            base_query = base_query.where(
                Guide.specialization_rows.any(
                    func.lower(GuideSpecialization.name) == specialization.strip().lower()
                )
            )

        count_query = select(func.count()).select_from(base_query.subquery())
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = base_query.order_by(Guide.created_at, Guide.id).limit(limit).offset(offset)
        result = await self.db.execute(query)
        guides = list(result.scalars().all())

        return guides, total

    async def create(self, data: GuideCreate) -> Guide:
        guide = Guide(**_column_values(data, exclude_unset=False))
        self.db.add(guide)
        await self.db.commit()
        logger.info("Guide created", guide_id=str(guide.id))
        return guide

    async def update(self, guide_id: UUID, data: GuideUpdate) -> Guide | None:
        """Shallow merge: supplied top-level fields replace the stored ones."""
        guide = await self.get(guide_id)
        if guide is None:
            return None

        for field, value in _column_values(data, exclude_unset=True).items():
            setattr(guide, field, value)
        guide.updated_at = datetime.now(UTC)

        await self.db.commit()
        logger.info("Guide updated", guide_id=str(guide_id))
        return guide

    async def delete(self, guide_id: UUID) -> bool:
        guide = await self.get(guide_id)
        if guide is None:
            return False

        await self.db.delete(guide)
        await self.db.commit()
        logger.info("Guide deleted", guide_id=str(guide_id))
        return True
