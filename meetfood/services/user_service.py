"""User Directory: account records keyed by identity subject, profile and membership lists."""
import uuid
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.core.exceptions import AlreadyExists, BadRequest, NotFound, StorageError
from meetfood.models.user import User
from meetfood.schemas.user import UserProfile, UserResponse, UserUpdate, VideoRef
from meetfood.services.feed_service import enrich_posts
from meetfood.services.storage_service import ContentClass, StorageBackend
from meetfood.services.video_service import load_posts_by_ids

USER_NAME_TAKEN = "User name already exists, Please try an another name."


async def get_user_by_subject(db: AsyncSession, subject: str) -> User | None:
    result = await db.execute(select(User).where(User.user_id == subject))
    return result.scalar_one_or_none()


async def get_user_by_user_name(db: AsyncSession, user_name: str) -> User | None:
    result = await db.execute(select(User).where(User.user_name == user_name))
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("Cannot find the user.")
    return user


async def available_user_name(db: AsyncSession, email_prefix: str, subject: str) -> str:
    """Email local part, else local part + subject, else that plus a random suffix."""
    for candidate in (email_prefix, email_prefix + subject):
        if not await get_user_by_user_name(db, candidate):
            return candidate
    return f"{email_prefix}{subject}-{uuid.uuid4().hex[:8]}"


async def create_user(db: AsyncSession, subject: str, email: str) -> User:
    if await get_user_by_subject(db, subject):
        raise AlreadyExists("The user already registered, Please sign in.")
    user = User(
        user_id=subject,
        email=email,
        user_name=await available_user_name(db, email[: email.rfind("@")], subject),
        videos=[],
        collections=[],
        liked_videos=[],
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        raise AlreadyExists("The user already registered, Please sign in.") from e
    await db.refresh(user)
    logger.info(f"User created: {user.id} ({user.user_name})")
    return user


async def update_profile(db: AsyncSession, user: User, data: UserUpdate) -> User:
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise BadRequest("Nothing to update. Accepted parameters: userName, firstName, lastName")
    new_name = fields.get("user_name")
    if new_name is not None:
        holder = await get_user_by_user_name(db, new_name)
        if holder and holder.id != user.id:
            raise AlreadyExists(USER_NAME_TAKEN)
    for key, value in fields.items():
        setattr(user, key, value)
    try:
        await db.flush()
    except IntegrityError as e:
        raise AlreadyExists(USER_NAME_TAKEN) from e
    await db.refresh(user)
    return user


async def update_profile_photo(
    db: AsyncSession,
    user: User,
    storage: StorageBackend,
    data: bytes,
    ext: str,
) -> User:
    url = storage.put(data, ContentClass.PROFILE_PHOTO, ext)
    previous = user.profile_photo
    if previous:
        try:
            storage.delete(previous, ContentClass.PROFILE_PHOTO)
        except StorageError:
            # Drop the new object so the failed update leaves nothing behind
            storage.delete(url, ContentClass.PROFILE_PHOTO)
            raise
    user.profile_photo = url
    await db.flush()
    await db.refresh(user)
    logger.info(f"Profile photo updated for user {user.id}")
    return user


async def get_user_profile(db: AsyncSession, user: User) -> UserProfile:
    """Resolve all three membership lists; entries whose post is gone are skipped."""
    entries = [*(user.videos or []), *(user.collections or []), *(user.liked_videos or [])]
    posts = await load_posts_by_ids(db, [e.get("videoPostId") for e in entries])
    views = {str(v.id): v for v in await enrich_posts(db, list(posts.values()))}

    def resolve(refs: list[dict] | None):
        return [views[r["videoPostId"]] for r in refs or [] if r.get("videoPostId") in views]

    return UserProfile(
        id=user.id,
        user_id=user.user_id,
        email=user.email,
        user_name=user.user_name,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_photo=user.profile_photo,
        videos=resolve(user.videos),
        collections=resolve(user.collections),
        liked_videos=resolve(user.liked_videos),
    )


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        user_id=user.user_id,
        email=user.email,
        user_name=user.user_name,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_photo=user.profile_photo,
        videos=[VideoRef(**v) for v in user.videos or []],
        collections=[VideoRef(**c) for c in user.collections or []],
        liked_videos=[VideoRef(**lv) for lv in user.liked_videos or []],
        created_at=user.created_at,
    )
