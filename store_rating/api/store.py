from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from store_rating.db.session import get_db
from store_rating.models.user import User
from store_rating.schemas.store import StoreDashboardOut, RaterOut
from store_rating.core.security import require_store_owner
from store_rating.core.enums import SortDirection, RaterSortField
from store_rating.core.response_builders import build_rater_list
from store_rating.services import directory, ratings

router = APIRouter(prefix="/store", tags=["store"])


@router.get("/dashboard", response_model=StoreDashboardOut)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_store_owner)
):
    average, count = await ratings.store_summary(db, int(current_user.id))
    return StoreDashboardOut(
        name=current_user.name,
        address=current_user.address,
        rating=average,
        total_ratings=count,
    )


@router.get("/users", response_model=List[RaterOut])
async def list_raters(
    sort_field: RaterSortField = Query(RaterSortField.NAME, alias="sortField"),
    sort_direction: SortDirection = Query(SortDirection.ASC, alias="sortDirection"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_store_owner)
):
    rows = await directory.list_raters(db, int(current_user.id), sort_field, sort_direction)
    return build_rater_list(rows)
