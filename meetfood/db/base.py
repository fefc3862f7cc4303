"""SQLAlchemy declarative base and model imports for Alembic."""
from meetfood.db.session import Base  # noqa: F401
from meetfood.models.account import Account  # noqa: F401
from meetfood.models.user import User  # noqa: F401
from meetfood.models.video_post import VideoPost  # noqa: F401

__all__ = ["Base", "Account", "User", "VideoPost"]
