"""Authentication helpers for request-scoped user context."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tourism.security import TokenPayload, decode_access_token
from tourism.utils.exceptions import raise_unauthorized

# auto_error=False so a missing header gets the same 401 envelope as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenPayload:
    """Resolve the caller's identity from a verified bearer token.

    Existence and activity of the account are checked by the handler, not here.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise_unauthorized("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise_unauthorized("Could not validate credentials")

    return payload
