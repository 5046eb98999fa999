"""Request models for TikTok account endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LinkAccountRequest(BaseModel):
    """Request model for linking a TikTok profile."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"profile_url": "https://www.tiktok.com/@creator"}]}
    )

    profile_url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Public TikTok profile URL, e.g. https://www.tiktok.com/@username",
    )
