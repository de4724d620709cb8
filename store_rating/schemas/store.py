from datetime import datetime
from typing import Optional
from store_rating.schemas.base import CamelModel
from store_rating.schemas.user import AccountCreate


class StoreCreate(AccountCreate):
    pass


class StoreAdminItem(CamelModel):
    id: int
    name: str
    email: str
    address: str
    rating: Optional[float] = None


class StoreBrowseItem(CamelModel):
    id: int
    name: str
    address: str
    rating: Optional[float] = None
    user_rating: Optional[int] = None


class StoreDashboardOut(CamelModel):
    name: str
    address: str
    # None while the store has no ratings yet
    rating: Optional[float] = None
    total_ratings: int


class RaterOut(CamelModel):
    id: int
    name: str
    email: str
    rating: int
    rating_date: datetime


class DashboardStatsOut(CamelModel):
    total_users: int
    total_stores: int
    total_ratings: int
