"""Feed ranking: popularity scoring, sorting, pagination and read-time enrichment.

popularity = 0.7 * countCollections + 0.3 * countLike (weights from settings).
Every sort ends with ``id`` descending so pages over equal scores stay stable.
"""
from uuid import UUID

from loguru import logger
from sqlalchemy import Float, cast, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.core.config import settings
from meetfood.core.exceptions import BadRequest, ServerError
from meetfood.models.user import User
from meetfood.models.video_post import VideoPost
from meetfood.schemas.video_post import CommentView, LikeEntry, PostAuthor, VideoPostView
from meetfood.services.video_service import parse_id, require_post

DELETED_ACCOUNT = "Deleted Account"

SORT_FIELDS = {
    "popularity": None,
    "countLike": VideoPost.count_like,
    "countCollections": VideoPost.count_collections,
    "countComment": VideoPost.count_comment,
    "postTime": VideoPost.post_time,
}


def popularity_expr():
    return cast(
        settings.POPULARITY_COLLECTION_WEIGHT * VideoPost.count_collections
        + settings.POPULARITY_LIKE_WEIGHT * VideoPost.count_like,
        Float,
    )


def popularity_of(post: VideoPost) -> float:
    return (
        settings.POPULARITY_COLLECTION_WEIGHT * (post.count_collections or 0)
        + settings.POPULARITY_LIKE_WEIGHT * (post.count_like or 0)
    )


def get_pagination(page: int | None, size: int | None) -> tuple[int, int]:
    """Return (limit, offset) for a zero-based page."""
    limit = size if size else settings.FEED_PAGE_SIZE
    offset = page * limit if page else 0
    return limit, offset


def get_sort_option(sort_by: str | None, sort_order: int | None, popularity):
    field = sort_by or "popularity"
    if field not in SORT_FIELDS:
        raise BadRequest(f"Unsupported sortBy '{field}'. Allowed: {', '.join(SORT_FIELDS)}")
    order = -1 if sort_order is None else sort_order
    if order not in (1, -1):
        raise BadRequest("sortOrder must be 1 (ascending) or -1 (descending)")
    column = popularity if SORT_FIELDS[field] is None else SORT_FIELDS[field]
    primary = column.asc() if order == 1 else column.desc()
    return [primary, VideoPost.id.desc()]


async def load_users_by_ids(db: AsyncSession, user_ids: set[UUID]) -> dict[UUID, User]:
    if not user_ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(user_ids)))
    return {u.id: u for u in result.scalars().all()}


def comment_to_view(comment: dict, users: dict[UUID, User]) -> CommentView:
    commenter = users.get(parse_id(comment.get("user")))
    if commenter is None:
        return CommentView(
            id=comment["id"],
            user="",
            text=comment["text"],
            name=DELETED_ACCOUNT,
            avatar="",
            date=comment["date"],
        )
    return CommentView(
        id=comment["id"],
        user=str(commenter.id),
        text=comment["text"],
        name=commenter.user_name or "",
        avatar=commenter.profile_photo or "",
        date=comment["date"],
    )


def post_to_view(post: VideoPost, users: dict[UUID, User], popularity: float | None = None) -> VideoPostView:
    author = users.get(post.user_id)
    author_public = PostAuthor(
        id=author.id,
        user_id=author.user_id,
        user_name=author.user_name,
        profile_photo=author.profile_photo,
    ) if author else None
    return VideoPostView(
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
        comments=[comment_to_view(c, users) for c in post.comments or []],
        count_comment=post.count_comment or 0,
        count_collections=post.count_collections or 0,
        author=author_public,
        popularity=popularity_of(post) if popularity is None else popularity,
    )


async def enrich_posts(
    db: AsyncSession,
    posts: list[VideoPost],
    popularity: dict[UUID, float] | None = None,
) -> list[VideoPostView]:
    """Attach author projections and resolve comment senders with one user lookup."""
    user_ids: set[UUID] = {p.user_id for p in posts}
    for p in posts:
        user_ids.update(uid for uid in (parse_id(c.get("user")) for c in p.comments or []) if uid)
    users = await load_users_by_ids(db, user_ids)
    popularity = popularity or {}
    return [post_to_view(p, users, popularity.get(p.id)) for p in posts]


async def fetch_video_posts(
    db: AsyncSession,
    page: int = 0,
    size: int | None = None,
    sort_by: str | None = None,
    sort_order: int | None = None,
) -> list[VideoPostView]:
    limit, offset = get_pagination(page, size)
    popularity = popularity_expr().label("popularity")
    q = (
        select(VideoPost, popularity)
        .order_by(*get_sort_option(sort_by, sort_order, popularity))
        .offset(offset)
        .limit(limit)
    )
    try:
        rows = (await db.execute(q)).all()
        posts = [row[0] for row in rows]
        return await enrich_posts(db, posts, {row[0].id: float(row[1]) for row in rows})
    except SQLAlchemyError as e:
        logger.error(f"Error loading videoPosts (page={page}, size={limit}): {e}")
        raise ServerError("Error loading videoPosts.") from e


async def get_video_post(db: AsyncSession, post_id: UUID) -> VideoPostView:
    post = await require_post(db, post_id, "Cannot find the post with this videoPostId.")
    views = await enrich_posts(db, [post])
    return views[0]
