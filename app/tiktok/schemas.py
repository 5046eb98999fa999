from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CanonicalVideo(BaseModel):
    """Provider-independent video record, ready to be stored for an account."""

    model_config = ConfigDict(frozen=True)

    title: str
    thumbnail_url: str = ""
    video_url: str = ""
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    hashtags: list[str] = Field(default_factory=list)


class TikTokProfile(BaseModel):
    """Subset of the provider's user profile that the service cares about."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = None
    unique_id: str | None = Field(default=None, alias="uniqueId")
    nickname: str | None = None
    avatar_thumb: str | None = Field(default=None, alias="avatarThumb")
    signature: str | None = None
