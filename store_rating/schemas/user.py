from pydantic import EmailStr
from typing import Optional
from store_rating.core.enums import UserRole
from store_rating.schemas.base import CamelModel
from store_rating.schemas.validators import Name, Address, Password


class AccountCreate(CamelModel):
    name: Name
    email: EmailStr
    password: Password
    address: Address


class UserCreate(AccountCreate):
    role: UserRole


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    address: str
    role: UserRole


class UserListItem(UserOut):
    # average rating, only set for store users
    rating: Optional[float] = None
