from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from store_rating.models.base import BaseModel


class Rating(BaseModel):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_ratings_user_store"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_ratings_range"),
    )

    user_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    store_id = Column(ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", foreign_keys=[user_id], backref="ratings_given")
    store = relationship("User", foreign_keys=[store_id], backref="ratings_received")

    rating = Column(Integer, nullable=False)
