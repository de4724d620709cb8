from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from store_rating.db.session import get_db
from store_rating.models.user import User
from store_rating.schemas.rating import RatingIn, RatingOut
from store_rating.schemas.store import StoreBrowseItem
from store_rating.core.security import require_user
from store_rating.core.enums import SortDirection, BrowseSortField, RatingOutcome, AuditAction
from store_rating.core.audit_log import log_audit
from store_rating.core.response_builders import build_store_browse_list, build_rating_response
from store_rating.services import directory, ratings

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/stores", response_model=List[StoreBrowseItem])
async def list_stores(
    sort_field: BrowseSortField = Query(BrowseSortField.NAME, alias="sortField"),
    sort_direction: SortDirection = Query(SortDirection.ASC, alias="sortDirection"),
    name: Optional[str] = Query(None),
    address: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user)
):
    rows = await directory.list_stores_for_user(
        db, int(current_user.id), sort_field, sort_direction, name=name, address=address
    )
    return build_store_browse_list(rows)


@router.post("/ratings", response_model=RatingOut)
async def submit_rating(
    payload: RatingIn,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_user)
):
    """Create the caller's rating of a store, or replace it if one exists.

    Answers 201 for a first rating and 200 when an earlier one was updated.
    """
    user_id = int(current_user.id)
    outcome = await ratings.upsert_rating(db, user_id, payload.store_id, payload.rating)
    if outcome == RatingOutcome.CREATED:
        response.status_code = status.HTTP_201_CREATED

    await log_audit(db, user_id, AuditAction.SUBMIT_RATING, payload)
    return build_rating_response(payload.store_id, payload.rating, outcome)
