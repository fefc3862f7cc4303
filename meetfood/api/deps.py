"""API dependencies: identity, db session, external collaborators."""
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.core.exceptions import NotFound, Unauthorized
from meetfood.db.session import get_db
from meetfood.models.user import User
from meetfood.services.identity_service import IdentityProvider, get_identity_provider
from meetfood.services.storage_service import StorageBackend, get_storage
from meetfood.services.user_service import get_user_by_subject

security = HTTPBearer(auto_error=False)

def get_identity() -> IdentityProvider:
    return get_identity_provider()


def get_blob_store() -> StorageBackend:
    return get_storage()


async def get_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    identity: IdentityProvider = Depends(get_identity),
) -> str:
    if not credentials:
        raise Unauthorized("Access Token not found")
    return await identity.verify(credentials.credentials)


async def get_current_user_optional(
    subject: str = Depends(get_subject),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Verified caller's user record, or None before /user/create has run."""
    return await get_user_by_subject(db, subject)


async def get_current_user(
    user: User | None = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise NotFound("Cannot find the user.")
    return user
