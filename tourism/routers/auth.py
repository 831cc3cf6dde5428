"""Authentication API router."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from tourism.deps import CurrentIdentity, DbSession
from tourism.rate_limit import auth_rate_limiter, register_rate_limiter
from tourism.schemas import (
    ApiResponse,
    AuthSession,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)
from tourism.services import auth_service
from tourism.services.auth_service import IssuedSession
from tourism.services.errors import ServiceError
from tourism.utils.responses import service_error_response

router = APIRouter(prefix="/auth", tags=["auth"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _session_body(session: IssuedSession) -> AuthSession:
    return AuthSession(user=UserResponse.model_validate(session.user), token=session.token)


@router.post(
    "/register",
    response_model=ApiResponse[AuthSession],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def register(
    request: Request,
    data: RegisterRequest,
    db: DbSession,
) -> ApiResponse[AuthSession] | JSONResponse:
    """Register a new account and issue a session token."""
    register_rate_limiter.check(request, "Too many registration attempts. Please try again later.")

    outcome = await auth_service.register_user(db, data)
    if isinstance(outcome, ServiceError):
        return service_error_response(outcome)

    return ApiResponse(data=_session_body(outcome), message="Registration successful")


@router.post("/login", response_model=ApiResponse[AuthSession], responses=ERROR_RESPONSES)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
) -> ApiResponse[AuthSession] | JSONResponse:
    """Login with email and password."""
    # Keyed per (client, account) so one account's success cannot reset another's attempts
    client_key = auth_rate_limiter.check(
        request, "Too many login attempts. Please try again later.", scope=data.email
    )

    outcome = await auth_service.login_user(db, data)
    if isinstance(outcome, ServiceError):
        return service_error_response(outcome)

    auth_rate_limiter.reset(client_key)
    return ApiResponse(data=_session_body(outcome), message="Login successful")


@router.get("/me", response_model=ApiResponse[UserResponse], responses=ERROR_RESPONSES)
async def get_me(identity: CurrentIdentity, db: DbSession) -> ApiResponse[UserResponse] | JSONResponse:
    """Get the authenticated user's profile."""
    outcome = await auth_service.get_profile(db, identity.user_id)
    if isinstance(outcome, ServiceError):
        return service_error_response(outcome)

    return ApiResponse(data=UserResponse.model_validate(outcome))


@router.put("/me", response_model=ApiResponse[UserResponse], responses=ERROR_RESPONSES)
async def update_me(
    data: UpdateProfileRequest,
    identity: CurrentIdentity,
    db: DbSession,
) -> ApiResponse[UserResponse] | JSONResponse:
    """Update name and/or password of the authenticated user."""
    outcome = await auth_service.update_profile(db, identity.user_id, data)
    if isinstance(outcome, ServiceError):
        return service_error_response(outcome)

    return ApiResponse(data=UserResponse.model_validate(outcome), message="Profile updated successfully")
