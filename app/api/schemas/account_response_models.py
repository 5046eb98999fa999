"""Response models for TikTok account endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.services.ingestion_service import VideoSource


class AccountResponse(BaseModel):
    """A linked TikTok account."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    profile_url: str
    created_at: datetime | None = None


class VideoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: int
    title: str
    thumbnail_url: str
    video_url: str
    views: int
    likes: int
    comments: int
    shares: int
    hashtags: list[str] = Field(default_factory=list)


class IngestionReportResponse(BaseModel):
    """Outcome of fetching and storing an account's videos."""

    model_config = ConfigDict(from_attributes=True)

    account_id: int
    source: VideoSource = Field(
        ..., description="'live' for provider data, 'fallback' for placeholder videos"
    )
    video_count: int
    reason: str | None = Field(
        default=None, description="Why live data was not used, when applicable"
    )


class LinkAccountResponse(BaseModel):
    account: AccountResponse
    ingestion: IngestionReportResponse


class AccountSummaryResponse(BaseModel):
    """Aggregate engagement across all stored videos of an account."""

    model_config = ConfigDict(from_attributes=True)

    video_count: int
    total_views: int
    total_likes: int
    total_comments: int
    total_shares: int
    engagement_rate: float = Field(
        ..., description="(likes + comments + shares) / views as a percentage, one decimal"
    )
