"""Security utilities for JWT session tokens and password hashing."""

import asyncio
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

import bcrypt
import jwt

from tourism.config import settings
from tourism.logger import get_logger

logger = get_logger(__name__)

# bcrypt only consumes the first 72 bytes of its input; longer passwords are rejected
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenPayload:
    """Identity carried by a verified session token."""

    user_id: UUID
    role: str


def create_access_token(
    user_id: UUID | str,
    role: str,
    *,
    secret: str | None = None,
    algorithm: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed session token for ``user_id`` with ``role``."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user_id),
        "role": str(role),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(
        to_encode,
        secret or settings.secret_key,
        algorithm=algorithm or settings.jwt_algorithm,
    )


def decode_access_token(
    token: str,
    *,
    secret: str | None = None,
    algorithm: str | None = None,
) -> TokenPayload | None:
    """Verify signature and expiry; return the identity or None."""
    try:
        payload = jwt.decode(
            token,
            secret or settings.secret_key,
            algorithms=[algorithm or settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("JWT token expired")
        return None
    except jwt.PyJWTError as exc:
        logger.warning(
            "JWT decode failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return None

    try:
        user_id = UUID(payload["sub"])
    except (TypeError, ValueError):
        logger.warning("JWT subject is not a user id")
        return None

    return TokenPayload(user_id=user_id, role=str(payload.get("role", "")))


def password_too_long(password: str) -> bool:
    """True when ``password`` is longer than bcrypt can hash."""
    return len(password.encode("utf-8")) > BCRYPT_MAX_BYTES


def hash_password_sync(password: str, rounds: int | None = None) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    if password_too_long(password):
        raise ValueError(f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password_sync(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against its bcrypt hash."""
    # No stored hash can come from such an input
    if password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


async def hash_password(password: str) -> str:
    """Hash in a worker thread so the event loop keeps serving requests."""
    return await asyncio.to_thread(hash_password_sync, password)


async def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify in a worker thread so the event loop keeps serving requests."""
    return await asyncio.to_thread(verify_password_sync, plain_password, hashed_password)


_dummy_hash: str | None = None


async def dummy_password_hash() -> str:
    """Throwaway hash at the configured cost, verified against when no account matches."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = await hash_password(secrets.token_urlsafe(16))
    return _dummy_hash
