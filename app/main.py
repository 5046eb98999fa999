from __future__ import annotations

import logging
import sys
import types
from importlib.metadata import PackageNotFoundError, version
from typing import cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ExceptionHandler

from app.core.settings_errors import InvalidSettingsError, MissingRequiredSettingsError

# Import settings - this may raise MissingRequiredSettingsError
try:
    from app.core.config import settings
except MissingRequiredSettingsError as e:
    print("ERROR: Missing required environment variables:", file=sys.stderr)
    for field in e.missing_fields:
        print(f"  - {field}", file=sys.stderr)
    print(
        "\nPlease set these in your .env file (see env.example for reference)",
        file=sys.stderr,
    )
    sys.exit(1)
except InvalidSettingsError as e:
    print("ERROR: Invalid environment variable values:", file=sys.stderr)
    for field, message in e.invalid_fields:
        print(f"  - {field}: {message}", file=sys.stderr)
    print(
        "\nPlease update these in your .env file (see env.example for reference)",
        file=sys.stderr,
    )
    sys.exit(1)

from app.api.router import router as api_router  # noqa: E402
from app.core.errors import (  # noqa: E402
    http_exception_handler,
    rate_limit_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
)
from app.core.lifespan import lifespan  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.services.account_service import account_service_factory_provider  # noqa: E402
from app.services.auth_service import auth_service_factory_provider  # noqa: E402
from app.tiktok.client import RapidAPITikTokClient, TikTokClient  # noqa: E402

PACKAGE_NAME = "tiktok-analytics-api"


def create_app(tiktok_client: TikTokClient | None = None) -> FastAPI:
    """Build the application; ``tiktok_client`` replaces the RapidAPI client when given."""
    configure_logging()

    try:
        api_version = version(PACKAGE_NAME)
    except PackageNotFoundError:
        api_version = "0.1.0"  # Fallback if package not installed
        logging.warning(f"{PACKAGE_NAME} package not found, using fallback version 0.1.0")

    is_debug_mode = settings.environment == "local"
    app = FastAPI(
        title=settings.app_name,
        version=api_version,
        debug=is_debug_mode,
        lifespan=lifespan,
    )
    app.add_exception_handler(
        StarletteHTTPException, cast(ExceptionHandler, http_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast(ExceptionHandler, request_validation_exception_handler)
    )
    app.add_exception_handler(
        RateLimitExceeded, cast(ExceptionHandler, rate_limit_exception_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, unhandled_exception_handler))
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.include_router(api_router, prefix="/api")

    # One provider client per app; its connection pool is closed in lifespan shutdown.
    client = tiktok_client or RapidAPITikTokClient()
    app.state.tiktok_client = client

    _services = {
        "auth_service": auth_service_factory_provider(),
        "account_service": account_service_factory_provider(client),
    }
    app.state.services = types.MappingProxyType(_services)

    return app


app = create_app()
