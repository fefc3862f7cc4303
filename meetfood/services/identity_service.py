"""Identity provider: verifies bearer credentials and owns account credentials.

The User Directory only ever sees the subject identifier returned by
``verify``. LocalIdentityProvider keeps accounts in the ``accounts`` table and
issues JWT access tokens whose ``sub`` claim is that identifier.
"""
from typing import Protocol

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from meetfood.core.exceptions import AlreadyExists, Unauthorized
from meetfood.core.security import create_access_token, decode_token, get_password_hash, verify_password
from meetfood.db.session import async_session_maker
from meetfood.models.account import Account


class IdentityProvider(Protocol):
    async def verify(self, credential: str) -> str:
        """Return the subject identifier for a credential or raise Unauthorized."""
        ...

    async def get_email(self, subject: str) -> str | None:
        """Email registered for a subject, or None if the account is gone."""
        ...

    async def delete_account(self, email: str) -> bool:
        """Administrative account removal. True if an account was deleted."""
        ...


class LocalIdentityProvider:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession] | None = None):
        self._session_maker = session_maker or async_session_maker

    async def verify(self, credential: str) -> str:
        payload = decode_token(credential)
        if not payload or payload.get("type") != "access":
            raise Unauthorized("Invalid or expired access token")
        sub = payload.get("sub")
        if not sub:
            raise Unauthorized("Invalid or expired access token")
        return sub

    async def get_email(self, subject: str) -> str | None:
        async with self._session_maker() as session:
            result = await session.execute(select(Account.email).where(Account.subject == subject))
            return result.scalar_one_or_none()

    async def delete_account(self, email: str) -> bool:
        # Runs in its own transaction, like a call to a separate service.
        async with self._session_maker() as session:
            result = await session.execute(delete(Account).where(Account.email == email))
            await session.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Identity account deleted: {email}")
        else:
            logger.warning(f"No identity account to delete for {email}")
        return deleted


async def get_account_by_email(db: AsyncSession, email: str) -> Account | None:
    result = await db.execute(select(Account).where(Account.email == email))
    return result.scalar_one_or_none()


async def register_account(db: AsyncSession, email: str, password: str) -> Account:
    if await get_account_by_email(db, email):
        raise AlreadyExists("Email already registered")
    account = Account(email=email, password_hash=get_password_hash(password))
    db.add(account)
    await db.flush()
    await db.refresh(account)
    return account


async def authenticate_account(db: AsyncSession, email: str, password: str) -> Account | None:
    account = await get_account_by_email(db, email)
    if not account or not verify_password(password, account.password_hash):
        return None
    return account


def create_token_for_account(account: Account) -> str:
    return create_access_token(account.subject)


_identity: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    global _identity
    if _identity is None:
        _identity = LocalIdentityProvider()
    return _identity
