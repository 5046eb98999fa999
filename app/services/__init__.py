from app.services.account_service import (
    AccountNotFoundError,
    AccountService,
    account_service_factory_provider,
)
from app.services.auth_service import (
    AuthService,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    auth_service_factory_provider,
)
from app.services.ingestion_service import IngestionReport, IngestionService
from app.services.video_service import VideoReplaceError, VideoService

__all__ = [
    "AccountNotFoundError",
    "AccountService",
    "AuthService",
    "IngestionReport",
    "IngestionService",
    "InvalidCredentialsError",
    "UserAlreadyExistsError",
    "VideoReplaceError",
    "VideoService",
    "account_service_factory_provider",
    "auth_service_factory_provider",
]
