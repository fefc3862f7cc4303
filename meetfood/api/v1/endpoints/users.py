"""User endpoints: account creation, profile, deletion and video collections."""
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.api.deps import get_blob_store, get_current_user, get_db, get_identity, get_subject
from meetfood.api.uploads import IMAGE_TYPES, read_and_validate_size, validate_file
from meetfood.core.config import settings
from meetfood.core.exceptions import BadRequest, Unauthorized
from meetfood.models.user import User
from meetfood.schemas.base import MessageResponse
from meetfood.schemas.user import UserCreate, UserDelete, UserEnvelope, UserProfile, UserUpdate
from meetfood.schemas.video_post import CollectionsResponse
from meetfood.services.engagement_service import collect_video, delete_from_collections, delete_user
from meetfood.services.identity_service import IdentityProvider
from meetfood.services.storage_service import StorageBackend
from meetfood.services.user_service import (
    create_user,
    get_user_profile,
    update_profile,
    update_profile_photo,
    user_to_response,
)
from meetfood.services.video_service import post_to_response

router = APIRouter(prefix="/user", tags=["user"])


@router.post("/create", response_model=UserEnvelope)
async def create_user_endpoint(
    data: UserCreate,
    subject: str = Depends(get_subject),
    identity: IdentityProvider = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    # user.email is always the identity account's email
    email = await identity.get_email(subject)
    if email is None:
        raise Unauthorized("No identity account found for this token.")
    if data.email.lower() != email.lower():
        raise BadRequest("Email does not match the signed-in account.")
    user = await create_user(db, subject, email)
    await db.commit()
    return UserEnvelope(message="User account created successfully.", user=user_to_response(user))


@router.get("/profile/me", response_model=UserProfile)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_user_profile(db, current_user)


@router.post("/profile/me", response_model=UserEnvelope)
async def update_profile_endpoint(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await update_profile(db, current_user, data)
    await db.commit()
    return UserEnvelope(message="User profile is updated", user=user_to_response(user))


@router.post("/profile/photo", response_model=UserEnvelope)
async def update_profile_photo_endpoint(
    image_content: UploadFile = File(..., alias="imageContent"),
    current_user: User = Depends(get_current_user),
    storage: StorageBackend = Depends(get_blob_store),
    db: AsyncSession = Depends(get_db),
):
    ext = validate_file(image_content, IMAGE_TYPES)
    data = await read_and_validate_size(image_content, settings.MAX_IMAGE_SIZE_MB)
    user = await update_profile_photo(db, current_user, storage, data, ext)
    await db.commit()
    return UserEnvelope(message="User profile photo is updated", user=user_to_response(user))


@router.delete("/delete", response_model=MessageResponse)
async def delete_user_endpoint(
    data: UserDelete,
    current_user: User = Depends(get_current_user),
    storage: StorageBackend = Depends(get_blob_store),
    identity: IdentityProvider = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    identity_deleted = await delete_user(db, current_user.id, data.email, storage, identity)
    if not identity_deleted:
        return MessageResponse(message="User account deleted successfully. Identity account was not found.")
    return MessageResponse(message="User account deleted successfully.")


@router.post("/videos/videoCollection/{video_post_id}", response_model=CollectionsResponse)
async def collect_video_endpoint(
    video_post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    collections, post = await collect_video(db, current_user.id, video_post_id)
    await db.commit()
    return CollectionsResponse(
        message="User add video in collection successfully",
        collections=[post_to_response(p) for p in collections],
        post=post_to_response(post),
    )


@router.delete("/videos/videoCollection/{video_post_id}", response_model=CollectionsResponse)
async def delete_from_collections_endpoint(
    video_post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    collections, post = await delete_from_collections(db, current_user.id, video_post_id)
    await db.commit()
    return CollectionsResponse(
        message="User delete video from collection successfully",
        collections=[post_to_response(p) for p in collections],
        post=post_to_response(post),
    )
