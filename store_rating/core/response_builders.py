from typing import List
from store_rating.models.user import User
from store_rating.core.enums import RatingOutcome
from store_rating.schemas.user import UserOut, UserListItem
from store_rating.schemas.store import StoreAdminItem, StoreBrowseItem, RaterOut
from store_rating.schemas.rating import RatingOut
from store_rating.services.ratings import as_average


def build_user_response(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        address=user.address,
        role=user.role,
    )


def build_user_list_item(row) -> UserListItem:
    return UserListItem(
        id=row.id,
        name=row.name,
        email=row.email,
        address=row.address,
        role=row.role,
        rating=as_average(row.rating),
    )


def build_store_admin_item(row) -> StoreAdminItem:
    return StoreAdminItem(
        id=row.id,
        name=row.name,
        email=row.email,
        address=row.address,
        rating=as_average(row.rating),
    )


def build_store_browse_item(row) -> StoreBrowseItem:
    return StoreBrowseItem(
        id=row.id,
        name=row.name,
        address=row.address,
        rating=as_average(row.rating),
        user_rating=row.user_rating,
    )


def build_rater_response(row) -> RaterOut:
    return RaterOut(
        id=row.id,
        name=row.name,
        email=row.email,
        rating=row.rating,
        rating_date=row.rating_date,
    )


def build_rating_response(store_id: int, rating: int, outcome: RatingOutcome) -> RatingOut:
    message = "Rating submitted successfully" if outcome == RatingOutcome.CREATED else "Rating updated successfully"
    return RatingOut(message=message, store_id=store_id, rating=rating, outcome=outcome)


def build_user_list(rows) -> List[UserListItem]:
    return [build_user_list_item(row) for row in rows]


def build_store_admin_list(rows) -> List[StoreAdminItem]:
    return [build_store_admin_item(row) for row in rows]


def build_store_browse_list(rows) -> List[StoreBrowseItem]:
    return [build_store_browse_item(row) for row in rows]


def build_rater_list(rows) -> List[RaterOut]:
    return [build_rater_response(row) for row in rows]
