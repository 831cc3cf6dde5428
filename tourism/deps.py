"""Common FastAPI dependencies for consistent type annotations.

Usage:
    from tourism.deps import CurrentIdentity, DbSession

    async def my_endpoint(db: DbSession, identity: CurrentIdentity):
        # db is AsyncSession with get_db dependency injected
        # identity is the TokenPayload of a verified bearer token
        ...
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tourism.auth import get_current_identity
from tourism.database import get_db
from tourism.security import TokenPayload

DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentIdentity = Annotated[TokenPayload, Depends(get_current_identity)]

__all__ = ["CurrentIdentity", "DbSession"]
