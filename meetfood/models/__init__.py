from meetfood.models.account import Account
from meetfood.models.user import User
from meetfood.models.video_post import VideoPost

__all__ = ["Account", "User", "VideoPost"]
