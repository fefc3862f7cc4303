"""Identity endpoints: register and sign in against the local identity provider."""
from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from meetfood.api.deps import get_db
from meetfood.core.exceptions import Unauthorized
from meetfood.schemas.auth import LoginRequest, RegisterRequest, Token
from meetfood.services.identity_service import authenticate_account, create_token_for_account, register_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info(f"Register attempt: {data.email}")
    account = await register_account(db, data.email, data.password)
    await db.commit()
    logger.info(f"Register success: {account.subject}")
    return Token(access_token=create_token_for_account(account), subject=account.subject)


@router.post("/login", response_model=Token)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    account = await authenticate_account(db, data.email, data.password)
    if not account:
        logger.info(f"Login failed for {data.email}")
        raise Unauthorized("Invalid email or password")
    return Token(access_token=create_token_for_account(account), subject=account.subject)
