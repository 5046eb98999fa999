from app.tiktok.client import RapidAPITikTokClient, TikTokClient
from app.tiktok.schemas import CanonicalVideo, TikTokProfile

__all__ = ["RapidAPITikTokClient", "TikTokClient", "CanonicalVideo", "TikTokProfile"]
