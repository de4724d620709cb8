import logging
from typing import Optional
from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from store_rating.core.auth_utils import normalize_email
from store_rating.core.enums import UserRole
from store_rating.core.metrics import track_db_operation
from store_rating.core.security import hash_password, verify_password
from store_rating.models.user import User
from store_rating.schemas.user import AccountCreate

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Email already in use"


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(func.lower(User.email) == normalize_email(email)))
    return res.scalars().first()


@track_db_operation("insert", "users")
async def create_account(db: AsyncSession, payload: AccountCreate, role: UserRole) -> User:
    """Create a user of the given role; duplicate emails are rejected with 400."""
    email = normalize_email(payload.email)
    if await get_user_by_email(db, email):
        raise HTTPException(status_code=400, detail=EMAIL_IN_USE)

    user = User(
        name=payload.name,
        email=email,
        password_hash=hash_password(payload.password),
        address=payload.address,
        role=role,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration with the same email
        await db.rollback()
        raise HTTPException(status_code=400, detail=EMAIL_IN_USE)
    await db.refresh(user)
    logger.info(f"Created {role} account {user.id}")
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


@track_db_operation("update", "users")
async def change_password(db: AsyncSession, user: User, current_password: str, new_password: str) -> bool:
    """Replace the password hash; returns False when ``current_password`` is wrong."""
    if not verify_password(current_password, user.password_hash):
        return False
    user.password_hash = hash_password(new_password)
    db.add(user)
    await db.commit()
    return True
