from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from store_rating.db.session import get_db
from store_rating.models.user import User
from store_rating.schemas.base import CreatedOut
from store_rating.schemas.store import StoreCreate, StoreAdminItem, DashboardStatsOut
from store_rating.schemas.user import UserCreate, UserListItem
from store_rating.core.security import require_admin
from store_rating.core.enums import UserRole, SortDirection, StoreSortField, UserSortField, AuditAction
from store_rating.core.audit_log import log_audit
from store_rating.core.auth_utils import check_not_found
from store_rating.core.response_builders import build_store_admin_list, build_user_list, build_user_list_item
from store_rating.services import accounts, directory, ratings

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard-stats", response_model=DashboardStatsOut)
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    total_users, total_stores, total_ratings = await ratings.dashboard_counts(db)
    return DashboardStatsOut(
        total_users=total_users,
        total_stores=total_stores,
        total_ratings=total_ratings,
    )


@router.get("/stores", response_model=List[StoreAdminItem])
async def list_stores(
    sort_field: StoreSortField = Query(StoreSortField.NAME, alias="sortField"),
    sort_direction: SortDirection = Query(SortDirection.ASC, alias="sortDirection"),
    name: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    address: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    rows = await directory.list_stores_for_admin(
        db, sort_field, sort_direction, name=name, email=email, address=address
    )
    return build_store_admin_list(rows)


@router.post("/stores", response_model=CreatedOut, status_code=status.HTTP_201_CREATED)
async def create_store(
    payload: StoreCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    admin_id = current_user.id
    store = await accounts.create_account(db, payload, UserRole.STORE)
    out = CreatedOut(message="Store added successfully", id=store.id)

    await log_audit(db, admin_id, AuditAction.CREATE_STORE, payload)
    return out


@router.get("/users", response_model=List[UserListItem])
async def list_users(
    sort_field: UserSortField = Query(UserSortField.NAME, alias="sortField"),
    sort_direction: SortDirection = Query(SortDirection.ASC, alias="sortDirection"),
    name: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    address: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    rows = await directory.list_users_for_admin(
        db, sort_field, sort_direction, name=name, email=email, address=address, role=role
    )
    return build_user_list(rows)


@router.post("/users", response_model=CreatedOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    admin_id = current_user.id
    user = await accounts.create_account(db, payload, payload.role)
    out = CreatedOut(message="User added successfully", id=user.id)

    await log_audit(db, admin_id, AuditAction.CREATE_USER, payload)
    return out


@router.get("/users/{user_id}", response_model=UserListItem)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    row = await directory.get_user_detail(db, user_id)
    check_not_found(row, "User", user_id)
    return build_user_list_item(row)
