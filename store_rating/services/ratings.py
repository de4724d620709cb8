"""Rating writes and the aggregates derived from them.

A user holds at most one rating per store. Submissions go through a single
``INSERT ... ON CONFLICT (user_id, store_id) DO UPDATE`` statement backed by
the ``uq_ratings_user_store`` constraint, so concurrent resubmissions from the
same user can never leave two rows behind. Averages are never stored; they
are computed with ``AVG(rating)`` whenever they are read.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from store_rating.core.auth_utils import check_not_found
from store_rating.core.enums import RatingOutcome, UserRole
from store_rating.core.metrics import ratings_submitted, track_db_operation
from store_rating.models.rating import Rating
from store_rating.models.user import User

logger = logging.getLogger(__name__)

UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def average_rating(store_id_column=User.id):
    """Correlated ``AVG(rating)`` for the store referenced by ``store_id_column``."""
    return (
        select(func.avg(Rating.rating))
        .where(Rating.store_id == store_id_column)
        .scalar_subquery()
    )


def own_rating(user_id: int, store_id_column=User.id):
    return (
        select(Rating.rating)
        .where(Rating.store_id == store_id_column, Rating.user_id == user_id)
        .scalar_subquery()
    )


def as_average(value) -> Optional[float]:
    return float(value) if value is not None else None


async def get_store(db: AsyncSession, store_id: int) -> Optional[User]:
    res = await db.execute(
        select(User).where(User.id == store_id, User.role == UserRole.STORE)
    )
    return res.scalars().first()


def _upsert_insert(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return UPSERT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Rating upsert is not supported on the {dialect} dialect")


@track_db_operation("upsert", "ratings")
async def upsert_rating(db: AsyncSession, user_id: int, store_id: int, value: int) -> RatingOutcome:
    store = await get_store(db, store_id)
    check_not_found(store, "Store", store_id)

    insert = _upsert_insert(db)
    stmt = insert(Rating).values(user_id=user_id, store_id=store_id, rating=value)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "store_id"],
        set_={"rating": stmt.excluded.rating, "updated_at": func.now()},
    ).returning(Rating.updated_at)

    res = await db.execute(stmt)
    # a fresh row has never been updated
    updated_at = res.scalar_one()
    await db.commit()

    outcome = RatingOutcome.CREATED if updated_at is None else RatingOutcome.UPDATED
    ratings_submitted.labels(outcome=str(outcome)).inc()
    logger.info(f"Rating {outcome} for user {user_id} on store {store_id}")
    return outcome


async def store_summary(db: AsyncSession, store_id: int) -> Tuple[Optional[float], int]:
    """Return ``(average, count)``; the average is None when nobody rated the store."""
    res = await db.execute(
        select(func.avg(Rating.rating), func.count(Rating.id)).where(Rating.store_id == store_id)
    )
    avg, count = res.one()
    return as_average(avg), int(count or 0)


async def dashboard_counts(db: AsyncSession) -> Tuple[int, int, int]:
    total_users = await db.scalar(select(func.count(User.id)))
    total_stores = await db.scalar(select(func.count(User.id)).where(User.role == UserRole.STORE))
    total_ratings = await db.scalar(select(func.count(Rating.id)))
    return int(total_users or 0), int(total_stores or 0), int(total_ratings or 0)
