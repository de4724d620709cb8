"""Filtered and sorted listings of users, stores and raters.

Sorting only ever goes through the closed ``*SortField`` enums below, each
member mapped to a fixed column expression; request values are never
interpolated into SQL.
"""
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from store_rating.core.enums import (
    BrowseSortField,
    RaterSortField,
    SortDirection,
    StoreSortField,
    UserRole,
    UserSortField,
)
from store_rating.models.rating import Rating
from store_rating.models.user import User
from store_rating.services.ratings import average_rating, own_rating


def apply_sort(query, column, direction: SortDirection):
    # unrated stores (NULL average) sort as the lowest value on every dialect
    if direction == SortDirection.DESC:
        ordering = column.desc().nulls_last()
    else:
        ordering = column.asc().nulls_first()
    return query.order_by(ordering, User.id.asc())


def apply_text_filters(query, filters: Dict[str, Optional[str]]):
    """Case-insensitive substring match for every non-empty filter."""
    for column_name, value in filters.items():
        if value:
            query = query.where(getattr(User, column_name).icontains(value, autoescape=True))
    return query


async def list_stores_for_admin(
    db: AsyncSession,
    sort_field: StoreSortField = StoreSortField.NAME,
    sort_direction: SortDirection = SortDirection.ASC,
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
):
    rating = average_rating().label("rating")
    sort_map = {
        StoreSortField.NAME: User.name,
        StoreSortField.EMAIL: User.email,
        StoreSortField.ADDRESS: User.address,
        StoreSortField.RATING: rating,
    }
    q = select(User.id, User.name, User.email, User.address, rating).where(User.role == UserRole.STORE)
    q = apply_text_filters(q, {"name": name, "email": email, "address": address})
    q = apply_sort(q, sort_map[sort_field], sort_direction)
    res = await db.execute(q)
    return res.all()


async def list_users_for_admin(
    db: AsyncSession,
    sort_field: UserSortField = UserSortField.NAME,
    sort_direction: SortDirection = SortDirection.ASC,
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
    role: Optional[UserRole] = None,
):
    rating = average_rating().label("rating")
    sort_map = {
        UserSortField.NAME: User.name,
        UserSortField.EMAIL: User.email,
        UserSortField.ADDRESS: User.address,
        UserSortField.ROLE: User.role,
    }
    q = select(User.id, User.name, User.email, User.address, User.role, rating)
    q = apply_text_filters(q, {"name": name, "email": email, "address": address})
    if role:
        q = q.where(User.role == role)
    q = apply_sort(q, sort_map[sort_field], sort_direction)
    res = await db.execute(q)
    return res.all()


async def get_user_detail(db: AsyncSession, user_id: int):
    rating = average_rating().label("rating")
    res = await db.execute(
        select(User.id, User.name, User.email, User.address, User.role, rating).where(User.id == user_id)
    )
    return res.first()


async def list_stores_for_user(
    db: AsyncSession,
    user_id: int,
    sort_field: BrowseSortField = BrowseSortField.NAME,
    sort_direction: SortDirection = SortDirection.ASC,
    name: Optional[str] = None,
    address: Optional[str] = None,
):
    rating = average_rating().label("rating")
    user_rating = own_rating(user_id).label("user_rating")
    sort_map = {
        BrowseSortField.NAME: User.name,
        BrowseSortField.ADDRESS: User.address,
        BrowseSortField.RATING: rating,
    }
    q = select(User.id, User.name, User.address, rating, user_rating).where(User.role == UserRole.STORE)
    q = apply_text_filters(q, {"name": name, "address": address})
    q = apply_sort(q, sort_map[sort_field], sort_direction)
    res = await db.execute(q)
    return res.all()


async def list_raters(
    db: AsyncSession,
    store_id: int,
    sort_field: RaterSortField = RaterSortField.NAME,
    sort_direction: SortDirection = SortDirection.ASC,
):
    sort_map = {
        RaterSortField.NAME: User.name,
        RaterSortField.EMAIL: User.email,
        RaterSortField.RATING: Rating.rating,
        RaterSortField.DATE: Rating.created_at,
    }
    q = (
        select(User.id, User.name, User.email, Rating.rating, Rating.created_at.label("rating_date"))
        .join(Rating, Rating.user_id == User.id)
        .where(Rating.store_id == store_id)
    )
    q = apply_sort(q, sort_map[sort_field], sort_direction)
    res = await db.execute(q)
    return res.all()
