"""Deterministic placeholder videos for accounts whose live data is unavailable."""

from __future__ import annotations

from typing import Final

from app.tiktok.schemas import CanonicalVideo

_PLACEHOLDER_VIDEO_URL: Final[str] = (
    "https://www.tiktok.com/@placeholder/video/{account_id}{index:03d}"
)

# (title, thumbnail, views, likes, comments, shares, hashtags): three high-,
# two medium- and three low-engagement videos.
_TEMPLATES: Final[tuple[tuple[str, str, int, int, int, int, tuple[str, ...]], ...]] = (
    (
        "Morning routine: 5 steps to kickstart productivity",
        "https://images.unsplash.com/photo-1640271443625-3276ed8f62b5",
        1_200_000,
        253_000,
        14_200,
        76_300,
        ("morningroutine", "productivity"),
    ),
    (
        "3 quick smoothie recipes for busy mornings",
        "https://images.unsplash.com/photo-1606787366850-de6330128bfc",
        890_000,
        189_000,
        8_700,
        42_100,
        ("smoothies", "healthyrecipes"),
    ),
    (
        "How I saved $10K in 6 months (finance tips)",
        "https://images.unsplash.com/photo-1588854337115-1c67d9247e4d",
        750_000,
        165_000,
        11_200,
        31_500,
        ("finance", "moneytips"),
    ),
    (
        "5 minute ab workout you can do anywhere",
        "https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b",
        450_000,
        95_000,
        5_600,
        18_200,
        ("fitness", "workout"),
    ),
    (
        "Easy dinner recipe: 15-minute pasta",
        "https://images.unsplash.com/photo-1473093295043-cdd812d0e601",
        320_000,
        68_000,
        3_400,
        12_800,
        ("recipe", "easymeals"),
    ),
    (
        "My thoughts on the new sustainable fashion trend",
        "https://images.unsplash.com/photo-1554774853-aae0a22c8aa4",
        15_700,
        2_100,
        245,
        86,
        ("fashion", "sustainability"),
    ),
    (
        "Book review: The Silent Patient",
        "https://images.unsplash.com/photo-1594633312681-425c7b97ccd1",
        12_300,
        1_800,
        142,
        53,
        ("bookreview", "reading"),
    ),
    (
        "My thoughts on the latest tech gadgets",
        "https://images.unsplash.com/photo-1606144042614-b2417e99c4e3",
        10_500,
        1_400,
        98,
        25,
        ("tech", "gadgets"),
    ),
)


def generate_fallback_videos(account_id: int) -> list[CanonicalVideo]:
    """Return the placeholder video set for an account.

    The output depends only on ``account_id``, so repeated calls produce
    identical videos.
    """
    return [
        CanonicalVideo(
            title=title,
            thumbnail_url=thumbnail_url,
            video_url=_PLACEHOLDER_VIDEO_URL.format(account_id=account_id, index=index),
            views=views,
            likes=likes,
            comments=comments,
            shares=shares,
            hashtags=list(hashtags),
        )
        for index, (title, thumbnail_url, views, likes, comments, shares, hashtags) in enumerate(
            _TEMPLATES, start=1
        )
    ]
