from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Matches the length of tiktok_accounts.username.
MAX_HANDLE_LENGTH = 100
_HANDLE_PATTERN = re.compile(rf"@([A-Za-z0-9_.]{{1,{MAX_HANDLE_LENGTH}}})(?![A-Za-z0-9_.])")
_CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1F\x7F]")
_TIKTOK_HOST = "tiktok.com"


class ProfileUrlError(ValueError):
    """Raised when a TikTok profile URL cannot be parsed."""

    error_code: str = "invalid_profile_url"


def parse_profile_handle(profile_url: str) -> str:
    """Return the TikTok handle (without ``@``) from a profile URL."""
    url = profile_url.strip()
    if _CONTROL_CHARS_PATTERN.search(url):
        raise ProfileUrlError("Profile URL contains unsupported control characters.")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ProfileUrlError("Please enter a valid URL.")

    hostname = parsed.hostname.lower()
    if hostname != _TIKTOK_HOST and not hostname.endswith(f".{_TIKTOK_HOST}"):
        raise ProfileUrlError("Please enter a valid TikTok profile URL.")

    match = _HANDLE_PATTERN.search(parsed.path)
    if match is None:
        raise ProfileUrlError("Invalid TikTok profile URL format. Expected tiktok.com/@username.")

    handle = match.group(1)
    if url != profile_url:
        logger.info("Trimmed profile URL input", extra={"handle": handle})
    return handle
