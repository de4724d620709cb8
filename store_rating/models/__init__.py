from store_rating.models.base import Base
from store_rating.models.user import User
from store_rating.models.rating import Rating
from store_rating.models.audit import Audit

__all__ = ["Base", "User", "Rating", "Audit"]
