"""Video Catalog: post records, their creation and wire conversion."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.core.exceptions import NotFound
from meetfood.models.user import User
from meetfood.models.video_post import VideoPost
from meetfood.schemas.video_post import CommentEntry, LikeEntry, VideoPostCreate, VideoPostResponse


def parse_id(value: str | UUID | None) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


async def get_post(db: AsyncSession, post_id: UUID) -> VideoPost | None:
    return await db.get(VideoPost, post_id)


async def require_post(db: AsyncSession, post_id: UUID, message: str = "Video post does not exist.") -> VideoPost:
    post = await get_post(db, post_id)
    if not post:
        raise NotFound(message)
    return post


async def load_posts_by_ids(db: AsyncSession, post_ids: list[str]) -> dict[str, VideoPost]:
    """Map post id string -> post. Ids that are malformed or no longer exist are left out."""
    ids = {pid for pid in (parse_id(p) for p in post_ids) if pid}
    if not ids:
        return {}
    result = await db.execute(select(VideoPost).where(VideoPost.id.in_(ids)))
    return {str(p.id): p for p in result.scalars().all()}


async def get_posts_by_author(db: AsyncSession, author_id: UUID) -> list[VideoPost]:
    result = await db.execute(select(VideoPost).where(VideoPost.user_id == author_id))
    return list(result.scalars().all())


async def create_video_post(db: AsyncSession, author: User, data: VideoPostCreate) -> VideoPost:
    """Insert the post and append it to the author's videos; the caller commits both together."""
    post = VideoPost(
        user_id=author.id,
        post_title=data.post_title,
        video_url=data.video_url,
        cover_image_url=data.image_url,
        restaurant_name=data.restaurant_name,
        restaurant_address=data.restaurant_address,
        ordered_via=data.ordered_via,
        post_time=datetime.utcnow(),
        likes=[],
        count_like=0,
        comments=[],
        count_comment=0,
        count_collections=0,
    )
    db.add(post)
    await db.flush()
    author.videos.append({"videoPostId": str(post.id)})
    await db.flush()
    await db.refresh(post)
    return post


def post_to_response(post: VideoPost) -> VideoPostResponse:
    return VideoPostResponse(
        id=post.id,
        user_id=post.user_id,
        post_title=post.post_title,
        video_url=post.video_url,
        cover_image_url=post.cover_image_url,
        restaurant_name=post.restaurant_name,
        restaurant_address=post.restaurant_address,
        ordered_via=post.ordered_via,
        post_time=post.post_time,
        likes=[LikeEntry(**like) for like in post.likes or []],
        count_like=post.count_like or 0,
        comments=[CommentEntry(**c) for c in post.comments or []],
        count_comment=post.count_comment or 0,
        count_collections=post.count_collections or 0,
    )
