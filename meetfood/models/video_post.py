"""VideoPost model: a food-review video with embedded likes and comments."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid

from meetfood.db.session import Base
from meetfood.db.types import JSONList


class VideoPost(Base):
    __tablename__ = "video_posts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_title = Column(String(255), nullable=False)
    video_url = Column(Text, nullable=False)
    cover_image_url = Column(Text, nullable=False)
    restaurant_name = Column(String(255), nullable=False)
    restaurant_address = Column(Text, nullable=True)
    ordered_via = Column(String(255), nullable=True)
    post_time = Column(DateTime, default=datetime.utcnow)

    likes = Column(JSONList, nullable=False, default=list)  # [{"user": "<user id>"}], newest first
    count_like = Column(Integer, nullable=False, default=0)
    comments = Column(JSONList, nullable=False, default=list)  # [{"id", "user", "text", "date"}], newest first
    count_comment = Column(Integer, nullable=False, default=0)
    count_collections = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def find_like(self, user_id: str) -> dict | None:
        return next((like for like in self.likes or [] if like.get("user") == user_id), None)

    def find_comment(self, comment_id: str) -> dict | None:
        return next((c for c in self.comments or [] if c.get("id") == comment_id), None)
