"""API request and response schemas.

Import request/response models from the submodules (e.g. auth_request_models,
account_response_models) or from this package for a single entry point.
"""

from __future__ import annotations

from app.api.schemas.account_request_models import LinkAccountRequest
from app.api.schemas.account_response_models import (
    AccountResponse,
    AccountSummaryResponse,
    IngestionReportResponse,
    LinkAccountResponse,
    VideoResponse,
)
from app.api.schemas.auth_request_models import LoginUserRequest, RegisterUserRequest
from app.api.schemas.auth_response_models import (
    AccessTokenResponse,
    DeleteUserResponse,
    UserResponse,
)
from app.api.schemas.meta_response_models import HealthResponse

__all__ = [
    "AccessTokenResponse",
    "AccountResponse",
    "AccountSummaryResponse",
    "DeleteUserResponse",
    "HealthResponse",
    "IngestionReportResponse",
    "LinkAccountRequest",
    "LinkAccountResponse",
    "LoginUserRequest",
    "RegisterUserRequest",
    "UserResponse",
    "VideoResponse",
]
