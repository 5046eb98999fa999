from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.tiktok.schemas import TikTokProfile

logger = logging.getLogger(__name__)


class TikTokServiceError(Exception):
    """Base error raised when the TikTok provider cannot fulfill a request."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class TikTokUnavailableError(TikTokServiceError):
    """Provider is unavailable (timeout, rate limit, connection failure, or upstream outage)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "tiktok_unavailable")


class TikTokAuthenticationError(TikTokServiceError):
    """Provider rejected the configured credentials (or none are configured)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "tiktok_auth_failed")


class TikTokNotFoundError(TikTokServiceError):
    """Provider does not know the requested handle."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "tiktok_not_found")


class TikTokInvalidResponseError(TikTokServiceError):
    """Provider returned a body that could not be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "tiktok_response_invalid")


class TikTokClient(ABC):
    """Abstract base class for TikTok data providers."""

    @abstractmethod
    async def fetch_profile(self, handle: str) -> TikTokProfile:
        """Fetch profile information for a handle."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_videos(self, handle: str, limit: int) -> Any:
        """Fetch the raw, provider-shaped video payload for a handle."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any network resources held by the client."""
        return None


class RapidAPITikTokClient(TikTokClient):
    """TikTok client backed by the RapidAPI TikTok wrapper."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        host: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = settings.tiktok_api_key if api_key is None else api_key
        host = host or settings.tiktok_api_host
        self.client = httpx.AsyncClient(
            base_url=base_url or settings.tiktok_api_base_url,
            timeout=httpx.Timeout(timeout_seconds or settings.tiktok_api_timeout_seconds),
            headers={"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": host},
            transport=transport,
        )
        if not self.api_key:
            logger.warning("TIKTOK_API_KEY is not set; accounts will use placeholder videos")

    def _handle_errors(self, error: Exception) -> TikTokServiceError:
        """Log error with appropriate message based on error type."""
        if isinstance(error, TikTokServiceError):
            return error
        elif isinstance(error, httpx.TimeoutException):
            logger.error(f"TikTok API request timed out. Error: {error}")
            return TikTokUnavailableError("TikTok request timed out.")
        elif isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            logger.error(f"TikTok API returned HTTP {status_code}. Error: {error}")
            if status_code in (401, 403):
                return TikTokAuthenticationError("TikTok API authentication failed.")
            if status_code == 404:
                return TikTokNotFoundError("TikTok profile not found.")
            if status_code == 429:
                return TikTokUnavailableError("TikTok API rate limit exceeded.")
            return TikTokUnavailableError("TikTok API error. Try again later.")
        elif isinstance(error, httpx.RequestError):
            logger.error(f"TikTok API connection failed. Error: {error}")
            return TikTokUnavailableError("TikTok API unreachable.")
        elif isinstance(error, ValidationError):
            logger.error(f"TikTok profile did not match expected format. Error: {error}")
            return TikTokInvalidResponseError("TikTok profile did not match expected format.")
        elif isinstance(error, ValueError):
            logger.error(f"Invalid JSON response from TikTok API. Error: {error}")
            return TikTokInvalidResponseError("TikTok API returned invalid JSON.")
        else:
            logger.error(f"Unexpected error calling TikTok API. Error: {error}")
            return TikTokServiceError("TikTok request failed.", "tiktok_error")

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        if not self.api_key:
            raise TikTokAuthenticationError("TikTok API key is not configured.")
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except Exception as e:
            raise self._handle_errors(e) from e

    async def fetch_profile(self, handle: str) -> TikTokProfile:
        """Fetch profile information for a handle."""
        payload = await self._get(f"/user/{handle}")
        # Some wrapper versions nest the profile under "user".
        if isinstance(payload, Mapping) and isinstance(payload.get("user"), Mapping):
            payload = payload["user"]
        try:
            return TikTokProfile.model_validate(payload)
        except ValidationError as e:
            raise self._handle_errors(e) from e

    async def fetch_videos(self, handle: str, limit: int) -> Any:
        """Fetch the raw video payload for a handle; shape is provider-defined."""
        return await self._get(f"/user/videos/{handle}", params={"count": limit})

    async def aclose(self) -> None:
        await self.client.aclose()
