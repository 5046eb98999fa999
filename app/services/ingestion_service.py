"""Fetch-normalize-store pipeline for an account's videos."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum

from app.core.config import settings
from app.services.fallback_videos import generate_fallback_videos
from app.services.video_service import VideoService
from app.tiktok.client import TikTokClient, TikTokServiceError, TikTokUnavailableError
from app.tiktok.normalizer import UnrecognizedPayloadError, normalize_payload
from app.tiktok.schemas import CanonicalVideo

logger = logging.getLogger(__name__)

NO_VIDEOS_REASON = "no_videos"


class VideoSource(StrEnum):
    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FetchSucceeded:
    videos: list[CanonicalVideo] = field(default_factory=list)


@dataclass(frozen=True)
class FetchEmpty:
    """The provider answered, but yielded no usable videos."""

    reason: str


@dataclass(frozen=True)
class FetchFailed:
    """The provider could not be reached or rejected the request."""

    error: TikTokServiceError


FetchOutcome = FetchSucceeded | FetchEmpty | FetchFailed


@dataclass(frozen=True)
class IngestionReport:
    """What an ingestion stored for an account and where it came from."""

    account_id: int
    source: VideoSource
    video_count: int
    reason: str | None = None


class IngestionService:
    """Fetch an account's videos from the provider and replace the stored set.

    Every ingestion ends with a replace-all of the account's videos: live
    videos when the provider returns any, placeholder videos when it fails
    or returns nothing usable. With ``empty_result_fallback`` disabled a
    recognized empty list is stored as-is instead.
    """

    def __init__(
        self,
        tiktok_client: TikTokClient,
        video_service: VideoService,
        fetch_limit: int | None = None,
        empty_result_fallback: bool | None = None,
        fetch_timeout_seconds: float | None = None,
    ) -> None:
        self._tiktok_client = tiktok_client
        self._video_service = video_service
        self._fetch_limit = (
            settings.tiktok_video_fetch_limit if fetch_limit is None else fetch_limit
        )
        self._empty_result_fallback = (
            settings.empty_result_fallback
            if empty_result_fallback is None
            else empty_result_fallback
        )
        self._fetch_timeout_seconds = (
            settings.tiktok_api_timeout_seconds
            if fetch_timeout_seconds is None
            else fetch_timeout_seconds
        )

    async def fetch_videos(self, handle: str) -> FetchOutcome:
        """Fetch and normalize a handle's videos without touching storage."""
        try:
            payload = await asyncio.wait_for(
                self._tiktok_client.fetch_videos(handle, self._fetch_limit),
                timeout=self._fetch_timeout_seconds,
            )
        except TimeoutError:
            logger.warning("TikTok video fetch timed out", extra={"handle": handle})
            return FetchFailed(TikTokUnavailableError("TikTok request timed out."))
        except TikTokServiceError as e:
            logger.warning(
                "TikTok video fetch failed", extra={"handle": handle, "error_code": e.error_code}
            )
            return FetchFailed(e)

        try:
            videos = normalize_payload(payload)
        except UnrecognizedPayloadError as e:
            logger.warning(
                "Unrecognized TikTok video payload",
                extra={"handle": handle, "payload_type": e.payload_type},
            )
            return FetchEmpty(e.error_code)

        if not videos:
            return FetchEmpty(NO_VIDEOS_REASON)
        return FetchSucceeded(videos)

    async def ingest(self, account_id: int, handle: str) -> IngestionReport:
        """Fetch the handle's videos and store them as the account's full video set.

        Raises:
            VideoReplaceError: If storing fails; the previous videos are kept.
        """
        outcome = await self.fetch_videos(handle)

        if isinstance(outcome, FetchSucceeded):
            videos, source, reason = outcome.videos, VideoSource.LIVE, None
        elif isinstance(outcome, FetchEmpty) and (
            outcome.reason == NO_VIDEOS_REASON and not self._empty_result_fallback
        ):
            videos, source, reason = [], VideoSource.LIVE, outcome.reason
        elif isinstance(outcome, FetchEmpty):
            videos, source, reason = (
                generate_fallback_videos(account_id),
                VideoSource.FALLBACK,
                outcome.reason,
            )
        else:
            videos, source, reason = (
                generate_fallback_videos(account_id),
                VideoSource.FALLBACK,
                outcome.error.error_code,
            )

        count = await self._video_service.replace_account_videos(account_id, videos)
        logger.info(
            "Ingested account videos",
            extra={
                "account_id": account_id,
                "source": source.value,
                "video_count": count,
                "reason": reason,
            },
        )
        return IngestionReport(
            account_id=account_id, source=source, video_count=count, reason=reason
        )
