"""Guide profile API router."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from tourism.config import settings
from tourism.deps import DbSession
from tourism.schemas import (
    ApiResponse,
    ErrorResponse,
    GuideCreate,
    GuideListResponse,
    GuideResponse,
    GuideUpdate,
    PaginationMeta,
)
from tourism.services.guide_repository import GuideRepository
from tourism.utils.exceptions import raise_not_found

router = APIRouter(prefix="/guides", tags=["guides"])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("", response_model=ApiResponse[GuideListResponse])
async def list_guides(
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
    specialization: str | None = Query(None, max_length=100, description="Case-insensitive match"),
) -> ApiResponse[GuideListResponse]:
    """List guides in creation order, optionally filtered by specialization."""
    guides, total = await GuideRepository(db).list(
        specialization=specialization,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return ApiResponse(
        data=GuideListResponse(
            guides=[GuideResponse.model_validate(guide) for guide in guides],
            pagination=PaginationMeta.build(page, limit, total),
        )
    )


@router.get("/{guide_id}", response_model=ApiResponse[GuideResponse], responses=NOT_FOUND)
async def get_guide(guide_id: UUID, db: DbSession) -> ApiResponse[GuideResponse]:
    guide = await GuideRepository(db).get(guide_id)
    if guide is None:
        raise_not_found("Guide")
    return ApiResponse(data=GuideResponse.model_validate(guide))


@router.post("", response_model=ApiResponse[GuideResponse], status_code=status.HTTP_201_CREATED)
async def create_guide(data: GuideCreate, db: DbSession) -> ApiResponse[GuideResponse]:
    guide = await GuideRepository(db).create(data)
    return ApiResponse(
        data=GuideResponse.model_validate(guide),
        message="Guide profile created successfully",
    )


@router.put("/{guide_id}", response_model=ApiResponse[GuideResponse], responses=NOT_FOUND)
async def update_guide(guide_id: UUID, data: GuideUpdate, db: DbSession) -> ApiResponse[GuideResponse]:
    """Partial update; id and createdAt never change."""
    guide = await GuideRepository(db).update(guide_id, data)
    if guide is None:
        raise_not_found("Guide")
    return ApiResponse(
        data=GuideResponse.model_validate(guide),
        message="Guide profile updated successfully",
    )


@router.delete("/{guide_id}", response_model=ApiResponse[None], responses=NOT_FOUND)
async def delete_guide(guide_id: UUID, db: DbSession) -> ApiResponse[None]:
    if not await GuideRepository(db).delete(guide_id):
        raise_not_found("Guide")
    return ApiResponse(data=None, message="Guide profile deleted successfully")
