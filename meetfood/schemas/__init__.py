from meetfood.schemas.base import MessageResponse
from meetfood.schemas.user import UserCreate, UserUpdate, UserDelete, UserResponse, UserProfile, UserEnvelope
from meetfood.schemas.video_post import (
    VideoPostCreate,
    VideoPostResponse,
    VideoPostView,
    VideoPostEnvelope,
    CollectionsResponse,
    CommentCreate,
)
