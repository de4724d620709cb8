from datetime import datetime, timezone, timedelta
from typing import Iterable
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from passlib.context import CryptContext
from sqlalchemy.future import select
from store_rating.db.session import get_db
from store_rating.models.user import User
from store_rating.core.config import settings
from store_rating.core.enums import UserRole
import logging

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")


pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception:
        return False

def create_access_token(subject: str, role: str, expires_minutes: int | None = None) -> str:
    expires = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire_dt = datetime.now(timezone.utc) + timedelta(minutes=expires)
    to_encode = {"sub": str(subject), "role": str(role), "exp": expire_dt}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(token: str = Depends(oauth2_scheme), db: AsyncSession = Depends(get_db)) -> User:
    """Resolve the bearer token to a live user.

    The user is looked up on every request instead of trusting the token's
    claims, so removed accounts and role changes take effect immediately.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise _unauthenticated("Invalid token")
    res = await db.execute(select(User).where(User.id == user_id))
    user = res.scalars().first()
    if not user:
        logger.warning(f"Token for unknown user {user_id} rejected")
        raise _unauthenticated("Invalid token. User not found")
    return user


def allowed(role, required_roles: Iterable) -> bool:
    try:
        return UserRole(role) in {UserRole(r) for r in required_roles}
    except ValueError:
        return False


def require_roles(*roles: UserRole):
    names = ", ".join(str(r) for r in roles)

    def _checker(user: User = Depends(get_current_user)) -> User:
        if not allowed(user.role, roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. {names.capitalize()} role required",
            )
        return user
    return _checker


require_admin = require_roles(UserRole.ADMIN)
require_user = require_roles(UserRole.USER)
require_store_owner = require_roles(UserRole.STORE)
