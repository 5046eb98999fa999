from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import UnitOfWork, get_current_user, get_uow
from app.api.openapi_responses import (
    ErrorExample,
    error_responses,
    merge_responses,
    rate_limited_response,
    unauthorized_response,
)
from app.api.schemas.auth_request_models import LoginUserRequest, RegisterUserRequest
from app.api.schemas.auth_response_models import (
    AccessTokenResponse,
    DeleteUserResponse,
    UserResponse,
)
from app.core.auth import create_access_token
from app.core.errors import http_error_from
from app.core.rate_limit import (
    AUTH_DELETE_RATE_LIMIT,
    AUTH_LOGIN_RATE_LIMIT,
    AUTH_REGISTER_RATE_LIMIT,
    limit,
    rate_limit_ip_key,
    rate_limit_user_or_ip_key,
)
from app.db.models.user import User
from app.services.auth_service import (
    AuthenticationError,
    InvalidCredentialsError,
    PasswordTooLongError,
    UserAlreadyExistsError,
)

router = APIRouter()

_PASSWORD_TOO_LONG = ErrorExample(
    status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
    error="password_too_long",
    message="Password must not exceed 72 bytes when UTF-8 encoded",
    description="Invalid input",
    summary="Password too long",
)


def _status_for(error: AuthenticationError) -> int:
    if isinstance(error, UserAlreadyExistsError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, InvalidCredentialsError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(error, PasswordTooLongError):
        return status.HTTP_422_UNPROCESSABLE_CONTENT
    return status.HTTP_400_BAD_REQUEST


@router.post(
    "/register",
    summary="Register user",
    description="Create a new user account with email, username and password.",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=merge_responses(
        error_responses(
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="user_exists",
                message="Email or username already registered",
                description="Email or username already registered",
                summary="User already exists",
            ),
            _PASSWORD_TOO_LONG,
        ),
        rate_limited_response(),
    ),
)
@limit(AUTH_REGISTER_RATE_LIMIT, key_func=rate_limit_ip_key)
async def register(
    request: Request,
    user_data: RegisterUserRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> UserResponse:
    """Register a new user."""
    try:
        new_user = await uow.auth_service.register_user(
            user_data.email, user_data.username, user_data.password
        )
    except AuthenticationError as e:
        raise http_error_from(e, _status_for(e)) from e
    return UserResponse.model_validate(new_user)


@router.post(
    "/login",
    summary="Log in",
    description="Authenticate credentials and return a bearer access token.",
    response_model=AccessTokenResponse,
    responses=merge_responses(
        error_responses(
            ErrorExample(
                status_code=status.HTTP_401_UNAUTHORIZED,
                error="invalid_credentials",
                message="Incorrect email or password",
                description="Invalid credentials",
                summary="Invalid email or password",
            ),
            _PASSWORD_TOO_LONG,
        ),
        rate_limited_response(),
    ),
)
@limit(AUTH_LOGIN_RATE_LIMIT, key_func=rate_limit_ip_key)
async def login(
    request: Request,
    credentials: LoginUserRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> AccessTokenResponse:
    """Authenticate user and return JWT token."""
    try:
        user = await uow.auth_service.authenticate_user(credentials.email, credentials.password)
    except AuthenticationError as e:
        status_code = _status_for(e)
        headers = (
            {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        )
        raise http_error_from(e, status_code, headers=headers) from e

    return AccessTokenResponse(access_token=create_access_token(data={"sub": str(user.id)}))


@router.get(
    "/me",
    summary="Get current user",
    description="Return the user for the provided bearer token.",
    response_model=UserResponse,
    responses=merge_responses(unauthorized_response(), rate_limited_response()),
)
async def get_me(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Get current authenticated user information."""
    return UserResponse.model_validate(current_user)


@router.delete(
    "/me",
    summary="Delete current user",
    description="Delete the current user, their linked TikTok accounts and stored videos.",
    response_model=DeleteUserResponse,
    responses=merge_responses(unauthorized_response(), rate_limited_response()),
)
@limit(AUTH_DELETE_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def delete_me(
    request: Request,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> DeleteUserResponse:
    """Delete the current authenticated user and all associated data."""
    deleted_id = await uow.auth_service.delete_user(current_user.id)
    return DeleteUserResponse(deleted_user_id=deleted_id)
