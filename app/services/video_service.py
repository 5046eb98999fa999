"""Video storage service: atomic replace-all and ranked queries for an account's videos."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.tiktok_account import TikTokAccount
from app.db.models.video import Video
from app.tiktok.schemas import CanonicalVideo

logger = logging.getLogger(__name__)


class VideoMetric(StrEnum):
    """Engagement counters videos can be ranked by."""

    VIEWS = "views"
    LIKES = "likes"
    COMMENTS = "comments"
    SHARES = "shares"


class VideoServiceError(Exception):
    """Base error for video storage failures."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class VideoReplaceError(VideoServiceError):
    """Raised when an account's videos could not be replaced; prior videos are kept."""

    def __init__(self, message: str = "Could not store account videos. Try again later.") -> None:
        super().__init__(message, "storage_unavailable")


@dataclass(frozen=True)
class AccountVideoSummary:
    """Aggregate engagement for all videos of an account."""

    video_count: int
    total_views: int
    total_likes: int
    total_comments: int
    total_shares: int

    @property
    def engagement_rate(self) -> float:
        """Interactions per view, as a percentage rounded to one decimal."""
        if self.total_views == 0:
            return 0.0
        interactions = self.total_likes + self.total_comments + self.total_shares
        return round(interactions / self.total_views * 100, 1)


class VideoService:
    """Session-scoped access to the videos table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def replace_account_videos(
        self, account_id: int, videos: Sequence[CanonicalVideo]
    ) -> int:
        """Replace every video of an account with ``videos`` as one unit.

        The account row is locked first so concurrent replacements for the same
        account serialize; the delete and insert run in the caller's transaction
        and become visible together on commit. An empty sequence leaves the
        account with no videos.

        Returns:
            Number of videos inserted.

        Raises:
            VideoReplaceError: If storage fails. The session is rolled back, so
                the previously stored videos remain.
        """
        rows = [{"account_id": account_id, **video.model_dump()} for video in videos]
        try:
            await self._session.execute(
                select(TikTokAccount.id).where(TikTokAccount.id == account_id).with_for_update()
            )
            await self._session.execute(delete(Video).where(Video.account_id == account_id))
            if rows:
                await self._session.execute(insert(Video), rows)
            await self._session.flush()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Replacing videos for account {account_id} failed. Error: {e}")
            raise VideoReplaceError() from e

        logger.info(
            "Replaced account videos", extra={"account_id": account_id, "video_count": len(rows)}
        )
        return len(rows)

    async def list_videos(self, account_id: int) -> list[Video]:
        result = await self._session.execute(
            select(Video).where(Video.account_id == account_id).order_by(Video.id)
        )
        return list(result.scalars().all())

    async def top_videos(
        self, account_id: int, limit: int, metric: VideoMetric = VideoMetric.VIEWS
    ) -> list[Video]:
        """Highest-ranked videos of an account by ``metric``, best first."""
        return await self._ranked(account_id, limit, metric, descending=True)

    async def bottom_videos(
        self, account_id: int, limit: int, metric: VideoMetric = VideoMetric.VIEWS
    ) -> list[Video]:
        """Lowest-ranked videos of an account by ``metric``, worst first."""
        return await self._ranked(account_id, limit, metric, descending=False)

    async def _ranked(
        self, account_id: int, limit: int, metric: VideoMetric, *, descending: bool
    ) -> list[Video]:
        column = getattr(Video, metric.value)
        order = column.desc() if descending else column.asc()
        result = await self._session.execute(
            select(Video)
            .where(Video.account_id == account_id)
            .order_by(order, Video.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def summarize(self, account_id: int) -> AccountVideoSummary:
        result = await self._session.execute(
            select(
                func.count(Video.id),
                func.coalesce(func.sum(Video.views), 0),
                func.coalesce(func.sum(Video.likes), 0),
                func.coalesce(func.sum(Video.comments), 0),
                func.coalesce(func.sum(Video.shares), 0),
            ).where(Video.account_id == account_id)
        )
        count, views, likes, comments, shares = result.one()
        return AccountVideoSummary(
            video_count=int(count),
            total_views=int(views),
            total_likes=int(likes),
            total_comments=int(comments),
            total_shares=int(shares),
        )
