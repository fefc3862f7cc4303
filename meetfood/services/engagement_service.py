"""Engagement rules across users and video posts.

Keeps the denormalised counters in step with the lists they summarise:

* ``countLike == len(likes)`` and each user appears at most once in ``likes``;
  the liker's ``likedVideos`` holds the post id at most once.
* ``countComment == len(comments)``.
* ``countCollections`` tracks how many users hold the post in ``collections``
  and never goes below zero.

Like/unlike and collect/uncollect change both records inside the request's
session, so they commit together. Deletes commit the database steps before
touching blob storage (see ``delete_video_post``).
"""
import uuid
from datetime import datetime, timezone
from uuid import UUID

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.core.exceptions import (
    AlreadyCollected,
    AlreadyLiked,
    NotCollected,
    NotFound,
    NotLiked,
    Unauthorized,
)
from meetfood.models.user import User
from meetfood.models.video_post import VideoPost
from meetfood.services.identity_service import IdentityProvider
from meetfood.services.storage_service import ContentClass, StorageBackend
from meetfood.services.user_service import require_user
from meetfood.services.video_service import get_posts_by_author, load_posts_by_ids, require_post


async def like_video_post(db: AsyncSession, caller_id: UUID, post_id: UUID) -> VideoPost:
    user = await require_user(db, caller_id)
    post = await require_post(db, post_id, "Post does not exist.")
    uid, pid = str(user.id), str(post.id)

    if post.find_like(uid):
        logger.info(f"User {uid} already liked post {pid}")
        raise AlreadyLiked()

    post.likes.insert(0, {"user": uid})
    post.count_like = len(post.likes)
    if not user.has_liked(pid):
        user.liked_videos.append({"videoPostId": pid})
    await db.flush()
    logger.info(f"User {uid} liked post {pid} (countLike={post.count_like})")
    return post


async def unlike_video_post(db: AsyncSession, caller_id: UUID, post_id: UUID) -> VideoPost:
    user = await require_user(db, caller_id)
    post = await require_post(db, post_id, "Post does not exist.")
    uid, pid = str(user.id), str(post.id)

    like = post.find_like(uid)
    if like is None:
        raise NotLiked()

    post.likes.remove(like)
    post.count_like = len(post.likes)
    user.liked_videos = [v for v in user.liked_videos if v.get("videoPostId") != pid]
    await db.flush()
    logger.info(f"User {uid} unliked post {pid} (countLike={post.count_like})")
    return post


async def _collected_posts(db: AsyncSession, user: User) -> list[VideoPost]:
    ids = [c.get("videoPostId") for c in user.collections or []]
    posts = await load_posts_by_ids(db, ids)
    return [posts[i] for i in ids if i in posts]


async def collect_video(db: AsyncSession, caller_id: UUID, post_id: UUID) -> tuple[list[VideoPost], VideoPost]:
    """Save a post to the caller's collections. Returns (collected posts, updated post)."""
    user = await require_user(db, caller_id)
    post = await require_post(db, post_id)
    pid = str(post.id)

    if user.has_collected(pid):
        raise AlreadyCollected()

    user.collections.append({"videoPostId": pid})
    post.count_collections = (post.count_collections or 0) + 1
    await db.flush()
    logger.info(f"User {user.id} collected post {pid} (countCollections={post.count_collections})")
    return await _collected_posts(db, user), post


async def delete_from_collections(
    db: AsyncSession, caller_id: UUID, post_id: UUID
) -> tuple[list[VideoPost], VideoPost]:
    user = await require_user(db, caller_id)
    post = await require_post(db, post_id)
    pid = str(post.id)

    if not user.has_collected(pid):
        raise NotCollected()
    if not post.count_collections or post.count_collections <= 0:
        logger.warning(f"Post {pid} is in user {user.id} collections but countCollections is {post.count_collections}")
        raise NotCollected()

    user.collections = [c for c in user.collections if c.get("videoPostId") != pid]
    post.count_collections -= 1
    await db.flush()
    logger.info(f"User {user.id} removed post {pid} from collections (countCollections={post.count_collections})")
    return await _collected_posts(db, user), post


async def post_comment(db: AsyncSession, caller_id: UUID, post_id: UUID, text: str) -> VideoPost:
    post = await require_post(db, post_id, "Cannot find the post.")
    comment = {
        "id": uuid.uuid4().hex,
        "user": str(caller_id),
        "text": text,
        "date": datetime.now(timezone.utc).isoformat(),
    }
    post.comments.insert(0, comment)
    post.count_comment = len(post.comments)
    await db.flush()
    logger.info(f"User {caller_id} commented on post {post.id} (countComment={post.count_comment})")
    return post


async def delete_comment(db: AsyncSession, caller_id: UUID, post_id: UUID, comment_id: str) -> VideoPost:
    post = await require_post(db, post_id, "Post does not exist.")
    comment = post.find_comment(comment_id)
    if comment is None:
        raise NotFound("Comment does not exist.")
    if comment.get("user") != str(caller_id):
        raise Unauthorized()

    post.comments.remove(comment)
    post.count_comment = len(post.comments)
    await db.flush()
    logger.info(f"User {caller_id} deleted comment {comment_id} on post {post.id}")
    return post


async def delete_video_post(
    db: AsyncSession,
    caller_id: UUID,
    post_id: UUID,
    storage: StorageBackend,
) -> None:
    """Delete a post owned by the caller, then its cover image and video blobs.

    The database deletion is committed before the blob requests, so a
    StorageError reports the failed cleanup without restoring the post.
    Other users' collections/likedVideos entries are left as they are.
    """
    post = await require_post(db, post_id, "Post does not exist.")
    user = await require_user(db, caller_id)
    if post.user_id != user.id:
        raise Unauthorized("No matching video found under user record.")

    pid = str(post.id)
    video_url, cover_image_url = post.video_url, post.cover_image_url

    await db.delete(post)
    user.videos = [v for v in user.videos if v.get("videoPostId") != pid]
    await db.commit()
    logger.info(f"Video post {pid} deleted by user {user.id}")

    storage.delete(cover_image_url, ContentClass.COVER_IMAGE)
    storage.delete(video_url, ContentClass.VIDEO)


async def delete_user(
    db: AsyncSession,
    caller_id: UUID,
    email: str,
    storage: StorageBackend,
    identity: IdentityProvider,
) -> bool:
    """Cascade an account deletion. Returns whether the identity account was removed.

    Order: profile photo blob, every authored post's video and cover blobs,
    the posts, the user record, then the identity account. A StorageError in
    the blob steps aborts before any database change.
    Likes and collections the user made on other posts are left in place.
    """
    user = await require_user(db, caller_id)
    if email.lower() != user.email.lower():
        raise Unauthorized("Email does not match the signed-in account.")

    account_email = user.email
    posts = await get_posts_by_author(db, user.id)

    if user.profile_photo:
        storage.delete(user.profile_photo, ContentClass.PROFILE_PHOTO)
    for post in posts:
        storage.delete(post.video_url, ContentClass.VIDEO)
        storage.delete(post.cover_image_url, ContentClass.COVER_IMAGE)

    await db.execute(delete(VideoPost).where(VideoPost.user_id == user.id))
    await db.delete(user)
    await db.commit()
    logger.info(f"User {caller_id} deleted with {len(posts)} video posts")

    identity_deleted = await identity.delete_account(account_email)
    if not identity_deleted:
        logger.warning(f"Identity account for {account_email} was not deleted")
    return identity_deleted
