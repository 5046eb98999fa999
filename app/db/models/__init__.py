from app.db.models.tiktok_account import TikTokAccount
from app.db.models.user import User
from app.db.models.video import Video

__all__ = ["User", "TikTokAccount", "Video"]
