"""Normalization of loosely-typed TikTok provider payloads into CanonicalVideo records.

Provider responses differ between API versions: counters may be flat
(``views``), snake_case (``play_count``) or nested under ``stats``; the list of
videos may be returned bare or wrapped under one of several keys. Each canonical
field is described by a FieldRule listing its alias paths in priority order, and
a single resolver walks those rules.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from app.tiktok.schemas import CanonicalVideo

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE: Final[str] = "No description"

# Keys a provider may wrap the video list under, tried in order.
WRAPPER_KEYS: Final[tuple[str, ...]] = ("videos", "itemList", "items", "aweme_list", "data")

TAG_LIST_KEYS: Final[tuple[str, ...]] = ("challenges", "textExtra", "text_extra")
TAG_NAME_KEYS: Final[tuple[str, ...]] = ("title", "hashtagName", "hashtag_name", "name")

_HASHTAG_PATTERN = re.compile(r"#(\w+)", re.ASCII)
_MISSING = object()


class UnrecognizedPayloadError(ValueError):
    """Raised when a provider payload contains no recognizable list of videos."""

    error_code: str = "unrecognized_payload"

    def __init__(self, payload_type: str) -> None:
        super().__init__(f"Provider payload of type {payload_type} has no recognizable video list")
        self.payload_type = payload_type


@dataclass(frozen=True)
class FieldRule:
    """A canonical field and the provider paths it may be read from, best first."""

    field: str
    aliases: tuple[str, ...]


COUNTER_RULES: Final[tuple[FieldRule, ...]] = (
    FieldRule("views", ("views", "play_count", "playCount", "stats.playCount", "stats.play_count")),
    FieldRule("likes", ("likes", "digg_count", "diggCount", "stats.diggCount", "stats.digg_count")),
    FieldRule(
        "comments",
        ("comments", "comment_count", "commentCount", "stats.commentCount", "stats.comment_count"),
    ),
    FieldRule(
        "shares", ("shares", "share_count", "shareCount", "stats.shareCount", "stats.share_count")
    ),
)

TEXT_RULES: Final[tuple[FieldRule, ...]] = (
    FieldRule("title", ("title", "desc", "description")),
    FieldRule("thumbnail_url", ("thumbnail_url", "cover", "video.cover", "origin_cover")),
    FieldRule(
        "video_url", ("video_url", "play", "video.playAddr", "video.play_addr", "playAddr")
    ),
)

# Free-text caption scanned for #hashtags; the title may come from a separate field.
DESCRIPTION_RULE: Final[FieldRule] = FieldRule("description", ("desc", "description"))

# Upper bound of the BIGINT counter columns.
MAX_COUNTER: Final[int] = 2**63 - 1


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def as_counter(value: Any) -> int | None:
    """Coerce a provider counter to a non-negative int, or None when unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= MAX_COUNTER else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return None
        return as_counter(int(value))
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return as_counter(parsed)
    return None


def as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve(record: Mapping[str, Any], rule: FieldRule, coerce: Callable[[Any], Any]) -> Any:
    """Return the first alias value that coerces successfully, else None."""
    for path in rule.aliases:
        raw = _lookup(record, path)
        if raw is _MISSING:
            continue
        value = coerce(raw)
        if value is not None:
            return value
    return None


def extract_hashtags(record: Mapping[str, Any], description: str) -> list[str]:
    """Tag names from a structured tag list, falling back to #words in the description."""
    for key in TAG_LIST_KEYS:
        entries = record.get(key)
        if not isinstance(entries, list):
            continue
        names: list[str] = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            for name_key in TAG_NAME_KEYS:
                name = as_text(entry.get(name_key))
                if name is not None:
                    names.append(name)
                    break
        if names:
            return names
    return _HASHTAG_PATTERN.findall(description)


def normalize_video(record: Mapping[str, Any]) -> CanonicalVideo:
    """Map a single provider record onto the canonical video shape."""
    counters = {rule.field: resolve(record, rule, as_counter) or 0 for rule in COUNTER_RULES}
    texts = {rule.field: resolve(record, rule, as_text) or "" for rule in TEXT_RULES}
    description = resolve(record, DESCRIPTION_RULE, as_text) or ""
    return CanonicalVideo(
        title=texts["title"] or PLACEHOLDER_TITLE,
        thumbnail_url=texts["thumbnail_url"],
        video_url=texts["video_url"],
        hashtags=extract_hashtags(record, description),
        **counters,
    )


def extract_records(payload: Any) -> list[Any]:
    """Locate the list of video records in a provider payload.

    Raises:
        UnrecognizedPayloadError: If the payload is neither a list nor a mapping
            wrapping a list under one of WRAPPER_KEYS.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in WRAPPER_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
            if key == "data" and isinstance(value, Mapping):
                return extract_records(value)
    raise UnrecognizedPayloadError(type(payload).__name__)


def normalize_payload(payload: Any) -> list[CanonicalVideo]:
    """Normalize every usable record of a provider payload.

    A recognized but empty list yields an empty result; records that are not
    objects are skipped rather than failing the batch.
    """
    videos: list[CanonicalVideo] = []
    for index, record in enumerate(extract_records(payload)):
        if not isinstance(record, Mapping):
            logger.warning(
                "Skipping malformed video record",
                extra={"index": index, "record_type": type(record).__name__},
            )
            continue
        videos.append(normalize_video(record))
    return videos
