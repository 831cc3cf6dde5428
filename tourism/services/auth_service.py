"""Registration, login and profile management.

Every operation returns either its result or a ``ServiceError``. Plaintext
passwords are hashed here, explicitly, at the two places they enter the
system (registration and password change) and are never logged.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from tourism.logger import async_log_timing, get_logger, log_exception
from tourism.models import RecordValidationError, User, UserRole, assign_validated, normalize_email
from tourism.schemas.auth import LoginRequest, RegisterRequest, UpdateProfileRequest
from tourism.security import create_access_token, dummy_password_hash, hash_password, verify_password
from tourism.services.errors import ErrorKind, ServiceError, validation_failed

logger = get_logger(__name__)

EMAIL_TAKEN = "Email already registered"
# Shared by unknown-email and wrong-password failures so they are indistinguishable
INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DEACTIVATED = "Account is deactivated"
USER_NOT_FOUND = "User not found"
WRONG_CURRENT_PASSWORD = "Current password is incorrect"


@dataclass(frozen=True)
class IssuedSession:
    """A user together with the session token just issued for it."""

    user: User
    token: str


def _email_domain(email: str) -> str:
    return email.rpartition("@")[2]


async def find_user(
    db: AsyncSession,
    *,
    email: str | None = None,
    user_id: UUID | None = None,
    with_password: bool = False,
) -> User | None:
    """Look a user up by email or id.

    The password hash stays unloaded unless ``with_password`` is set.
    """
    query = select(User)
    if email is not None:
        query = query.where(User.email == normalize_email(email))
    if user_id is not None:
        query = query.where(User.id == user_id)
    if with_password:
        query = query.options(undefer(User.hashed_password)).execution_options(populate_existing=True)

    result = await db.execute(query)
    return result.scalar_one_or_none()


def issue_session(user: User) -> IssuedSession:
    return IssuedSession(user=user, token=create_access_token(user.id, user.role.value))


async def register_user(db: AsyncSession, data: RegisterRequest) -> IssuedSession | ServiceError:
    email = normalize_email(data.email)

    try:
        # Advisory only: the unique index on users.email is what closes the race
        if await find_user(db, email=email) is not None:
            logger.info("Registration rejected, email in use", email_domain=_email_domain(email))
            return ServiceError(ErrorKind.CONFLICT, EMAIL_TAKEN)

        async with async_log_timing("hash_password", logger=logger):
            hashed = await hash_password(data.password)

        user = User()
        assign_validated(
            user,
            {
                "email": email,
                "name": data.name,
                "role": data.role or UserRole.CUSTOMER,
                "hashed_password": hashed,
                "is_active": True,
            },
        )
        db.add(user)
        await db.commit()
    except RecordValidationError as exc:
        await db.rollback()
        return validation_failed(exc.errors)
    except IntegrityError:
        await db.rollback()
        logger.info("Registration lost insert race, email in use", email_domain=_email_domain(email))
        return ServiceError(ErrorKind.CONFLICT, EMAIL_TAKEN)
    except SQLAlchemyError as exc:
        await db.rollback()
        log_exception(logger, exc, "Registration failed", email_domain=_email_domain(email))
        return ServiceError(ErrorKind.INTERNAL, "Registration failed")

    logger.info("User registered", user_id=str(user.id), role=user.role.value)
    return issue_session(user)


async def login_user(db: AsyncSession, data: LoginRequest) -> IssuedSession | ServiceError:
    try:
        user = await find_user(db, email=data.email, with_password=True)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Login failed")
        return ServiceError(ErrorKind.INTERNAL, "Login failed")

    if user is None:
        # Same bcrypt cost as a known account, so timing does not reveal existence
        await verify_password(data.password, await dummy_password_hash())
        logger.warning("Failed login attempt", reason="unknown_email")
        return ServiceError(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

    # Checked only once the account is known to exist
    if not user.is_active:
        logger.warning("Login attempt on deactivated account", user_id=str(user.id))
        return ServiceError(ErrorKind.ACCOUNT_DEACTIVATED, ACCOUNT_DEACTIVATED)

    if not await verify_password(data.password, user.hashed_password):
        logger.warning("Failed login attempt", reason="wrong_password", user_id=str(user.id))
        return ServiceError(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

    await _record_login(db, user)
    logger.info("Successful login", user_id=str(user.id))
    return issue_session(user)


async def _record_login(db: AsyncSession, user: User) -> None:
    """Best-effort last-login write; a failure never fails the login."""
    login_at = datetime.now(UTC)
    # Detach first so a rollback below cannot expire the loaded user
    db.expunge(user)
    user.last_login = login_at
    user.updated_at = login_at
    try:
        await db.execute(
            update(User).where(User.id == user.id).values(last_login=login_at, updated_at=login_at)
        )
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        log_exception(
            logger,
            exc,
            "Failed to record last login",
            level="warning",
            include_traceback=False,
            user_id=str(user.id),
        )


async def get_profile(db: AsyncSession, user_id: UUID) -> User | ServiceError:
    try:
        user = await find_user(db, user_id=user_id)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Get profile failed", user_id=str(user_id))
        return ServiceError(ErrorKind.INTERNAL, "Failed to get profile")

    if user is None:
        return ServiceError(ErrorKind.NOT_FOUND, USER_NOT_FOUND)
    if not user.is_active:
        return ServiceError(ErrorKind.ACCOUNT_DEACTIVATED, ACCOUNT_DEACTIVATED)
    return user


async def update_profile(
    db: AsyncSession, user_id: UUID, data: UpdateProfileRequest
) -> User | ServiceError:
    """Apply a name change and/or a confirmed password change.

    A password change needs both the current and the new password; with only
    one of them the stored hash is left alone.
    """
    try:
        user = await find_user(db, user_id=user_id, with_password=True)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Update profile failed", user_id=str(user_id))
        return ServiceError(ErrorKind.INTERNAL, "Failed to update profile")

    if user is None:
        return ServiceError(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

    changes: dict[str, str] = {}
    if data.name is not None:
        changes["name"] = data.name

    if data.current_password and data.new_password:
        if not await verify_password(data.current_password, user.hashed_password):
            logger.warning("Password change rejected, wrong current password", user_id=str(user_id))
            return ServiceError(ErrorKind.INVALID_CURRENT_PASSWORD, WRONG_CURRENT_PASSWORD)
        async with async_log_timing("hash_password", logger=logger):
            changes["hashed_password"] = await hash_password(data.new_password)

    try:
        assign_validated(user, changes)
        await db.commit()
    except RecordValidationError as exc:
        await db.rollback()
        return validation_failed(exc.errors)
    except SQLAlchemyError as exc:
        await db.rollback()
        log_exception(logger, exc, "Update profile failed", user_id=str(user_id))
        return ServiceError(ErrorKind.INTERNAL, "Failed to update profile")

    logger.info(
        "Profile updated",
        user_id=str(user_id),
        name_changed="name" in changes,
        password_changed="hashed_password" in changes,
    )
    return user
