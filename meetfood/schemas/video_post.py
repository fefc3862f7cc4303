"""Pydantic schemas for VideoPost and its embedded likes and comments."""
from datetime import datetime
from uuid import UUID

from pydantic import Field

from meetfood.schemas.base import CamelModel, RequestModel


class VideoPostCreate(RequestModel):
    post_title: str = Field(..., min_length=1, max_length=255)
    image_url: str = Field(..., min_length=1)
    video_url: str = Field(..., min_length=1)
    restaurant_name: str = Field(..., min_length=1, max_length=255)
    restaurant_address: str | None = None
    ordered_via: str | None = Field(None, max_length=255)


class LikeEntry(CamelModel):
    user: str


class CommentEntry(CamelModel):
    id: str
    user: str
    text: str
    date: datetime


class CommentView(CamelModel):
    """Comment with the commenter resolved; ``name`` is "Deleted Account" once they are gone."""

    id: str
    user: str
    text: str
    name: str
    avatar: str
    date: datetime


class PostAuthor(CamelModel):
    id: UUID
    user_id: str
    user_name: str | None = None
    profile_photo: str | None = None


class VideoPostBase(CamelModel):
    id: UUID
    user_id: UUID
    post_title: str
    video_url: str
    cover_image_url: str
    restaurant_name: str
    restaurant_address: str | None = None
    ordered_via: str | None = None
    post_time: datetime | None = None
    likes: list[LikeEntry] = []
    count_like: int = 0
    count_comment: int = 0
    count_collections: int = 0


class VideoPostResponse(VideoPostBase):
    comments: list[CommentEntry] = []


class VideoPostView(VideoPostBase):
    author: PostAuthor | None = None
    comments: list[CommentView] = []
    popularity: float = 0.0


class VideoPostEnvelope(CamelModel):
    message: str
    video_post: VideoPostResponse


class CollectionsResponse(CamelModel):
    message: str
    collections: list[VideoPostResponse]
    post: VideoPostResponse


class CommentCreate(RequestModel):
    text: str = Field(..., min_length=1, max_length=2000)


class CoverImageUploadResponse(CamelModel):
    message: str
    image_url: str


class VideoUploadResponse(CamelModel):
    message: str
    video_url: str
