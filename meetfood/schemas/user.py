"""Pydantic schemas for User."""
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from meetfood.schemas.base import CamelModel, RequestModel
from meetfood.schemas.video_post import VideoPostView


class UserCreate(RequestModel):
    email: EmailStr


class UserUpdate(RequestModel):
    user_name: str | None = Field(None, min_length=1, max_length=150)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class UserDelete(RequestModel):
    email: EmailStr


class VideoRef(CamelModel):
    video_post_id: str


class UserResponse(CamelModel):
    id: UUID
    user_id: str
    email: str
    user_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_photo: str | None = None
    videos: list[VideoRef] = []
    collections: list[VideoRef] = []
    liked_videos: list[VideoRef] = []
    created_at: datetime | None = None


class UserProfile(CamelModel):
    """Own profile with every membership list resolved to post views."""

    id: UUID
    user_id: str
    email: str
    user_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_photo: str | None = None
    videos: list[VideoPostView] = []
    collections: list[VideoPostView] = []
    liked_videos: list[VideoPostView] = []


class UserEnvelope(CamelModel):
    message: str
    user: UserResponse
