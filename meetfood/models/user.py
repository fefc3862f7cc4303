"""User model."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid

from meetfood.db.session import Base
from meetfood.db.types import JSONList


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), unique=True, nullable=False, index=True)  # identity provider subject
    email = Column(String(255), nullable=False)
    user_name = Column(String(150), unique=True, nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    profile_photo = Column(Text, nullable=True)

    # Membership lists of {"videoPostId": "<post id>"}
    videos = Column(JSONList, nullable=False, default=list)
    collections = Column(JSONList, nullable=False, default=list)
    liked_videos = Column(JSONList, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def has_collected(self, post_id: str) -> bool:
        return any(entry.get("videoPostId") == post_id for entry in self.collections or [])

    def has_liked(self, post_id: str) -> bool:
        return any(entry.get("videoPostId") == post_id for entry in self.liked_videos or [])
