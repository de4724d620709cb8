import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from store_rating.schemas.auth import RegisterIn, LoginIn, TokenOut, ChangePasswordIn
from store_rating.schemas.base import CreatedOut, MessageOut
from store_rating.schemas.user import UserOut
from store_rating.models.user import User
from store_rating.db.session import get_db
from store_rating.core.security import create_access_token, get_current_user
from store_rating.core.enums import UserRole, AuditAction
from store_rating.core.audit_log import log_audit
from store_rating.core.response_builders import build_user_response
from store_rating.services import accounts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=CreatedOut, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_db)):
    new_user = await accounts.create_account(db, payload, UserRole.USER)
    out = CreatedOut(message="User registered successfully", id=new_user.id)

    await log_audit(db, out.id, AuditAction.REGISTER, payload)
    return out


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db)):
    user = await accounts.authenticate(db, payload.email, payload.password)
    if not user:
        logger.warning(f"Failed login attempt for {payload.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = create_access_token(str(user.id), user.role)
    out = TokenOut(token=token, user=build_user_response(user))

    await log_audit(db, out.user.id, AuditAction.LOGIN, {"email": out.user.email})
    return out


@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return build_user_response(current_user)


@router.put("/change-password", response_model=MessageOut)
async def change_password(
    payload: ChangePasswordIn,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user_id = current_user.id
    changed = await accounts.change_password(db, current_user, payload.current_password, payload.new_password)
    if not changed:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )

    await log_audit(db, user_id, AuditAction.CHANGE_PASSWORD)
    return MessageOut(message="Password updated successfully")
