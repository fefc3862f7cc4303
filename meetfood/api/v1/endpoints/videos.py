"""Video post endpoints: feed, single post, comments, likes, uploads, create and delete."""
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.api.deps import get_blob_store, get_current_user, get_db, get_subject
from meetfood.api.uploads import IMAGE_TYPES, VIDEO_TYPES, read_and_validate_size, validate_file
from meetfood.core.config import settings
from meetfood.models.user import User
from meetfood.schemas.base import MessageResponse
from meetfood.schemas.video_post import (
    CommentCreate,
    CoverImageUploadResponse,
    VideoPostCreate,
    VideoPostEnvelope,
    VideoPostView,
    VideoUploadResponse,
)
from meetfood.services.engagement_service import (
    delete_comment,
    delete_video_post,
    like_video_post,
    post_comment,
    unlike_video_post,
)
from meetfood.services.feed_service import fetch_video_posts, get_video_post
from meetfood.services.storage_service import ContentClass, StorageBackend
from meetfood.services.video_service import create_video_post, post_to_response

router = APIRouter(prefix="/video", tags=["video"])


@router.get("/videos", response_model=list[VideoPostView])
async def list_video_posts(
    page: int = Query(0, ge=0),
    size: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=50),
    sort_by: str = Query("popularity", alias="sortBy"),
    sort_order: int = Query(-1, alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    return await fetch_video_posts(db, page=page, size=size, sort_by=sort_by, sort_order=sort_order)


@router.post("/comment/{video_post_id}", response_model=VideoPostEnvelope)
async def post_comment_endpoint(
    video_post_id: UUID,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_comment(db, current_user.id, video_post_id, data.text)
    await db.commit()
    return VideoPostEnvelope(message="Comment added successfully", video_post=post_to_response(post))


@router.delete("/comment/{video_post_id}/{comment_id}", response_model=MessageResponse)
async def delete_comment_endpoint(
    video_post_id: UUID,
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await delete_comment(db, current_user.id, video_post_id, comment_id)
    await db.commit()
    return MessageResponse(message="Comment deleted successfully")


@router.put("/like/{video_post_id}", response_model=VideoPostEnvelope)
async def like_video_post_endpoint(
    video_post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await like_video_post(db, current_user.id, video_post_id)
    await db.commit()
    return VideoPostEnvelope(message="Post liked", video_post=post_to_response(post))


@router.put("/unlike/{video_post_id}", response_model=VideoPostEnvelope)
async def unlike_video_post_endpoint(
    video_post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await unlike_video_post(db, current_user.id, video_post_id)
    await db.commit()
    return VideoPostEnvelope(message="Post unliked", video_post=post_to_response(post))


@router.post("/coverImage", response_model=CoverImageUploadResponse)
async def upload_cover_image(
    cover_image: UploadFile = File(..., alias="cover-image"),
    current_user: User = Depends(get_current_user),
    storage: StorageBackend = Depends(get_blob_store),
):
    """Upload a cover image. Returns the URL to pass as imageUrl to /video/new."""
    ext = validate_file(cover_image, IMAGE_TYPES)
    data = await read_and_validate_size(cover_image, settings.MAX_IMAGE_SIZE_MB)
    image_url = storage.put(data, ContentClass.COVER_IMAGE, ext)
    return CoverImageUploadResponse(message="Image is uploaded successfully", image_url=image_url)


@router.post("/upload", response_model=VideoUploadResponse)
async def upload_video(
    video_content: UploadFile = File(..., alias="video-content"),
    current_user: User = Depends(get_current_user),
    storage: StorageBackend = Depends(get_blob_store),
):
    """Upload a video file. Returns the URL to pass as videoUrl to /video/new."""
    ext = validate_file(video_content, VIDEO_TYPES)
    data = await read_and_validate_size(video_content, settings.MAX_VIDEO_SIZE_MB)
    video_url = storage.put(data, ContentClass.VIDEO, ext)
    return VideoUploadResponse(message="Video is uploaded successfully", video_url=video_url)


@router.post("/new", response_model=VideoPostEnvelope)
async def create_video_post_endpoint(
    data: VideoPostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await create_video_post(db, current_user, data)
    await db.commit()
    return VideoPostEnvelope(message="Video post is created successfully", video_post=post_to_response(post))


@router.delete("/customer/{video_post_id}", response_model=MessageResponse)
async def delete_video_post_endpoint(
    video_post_id: UUID,
    current_user: User = Depends(get_current_user),
    storage: StorageBackend = Depends(get_blob_store),
    db: AsyncSession = Depends(get_db),
):
    await delete_video_post(db, current_user.id, video_post_id, storage)
    return MessageResponse(
        message="The video post is deleted successfully and its corresponding user record updated as well."
    )


# Declared last so the literal paths above are matched first
@router.get("/{video_post_id}", response_model=VideoPostView)
async def get_video_post_endpoint(
    video_post_id: UUID,
    subject: str = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
):
    return await get_video_post(db, video_post_id)
