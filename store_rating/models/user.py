from sqlalchemy import Column, String, Enum
from store_rating.models.base import BaseModel
from store_rating.core.enums import UserRole


class User(BaseModel):
    __tablename__ = "users"
    name = Column(String(60), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    address = Column(String(400), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER, index=True)
