from pydantic import EmailStr
from store_rating.schemas.base import CamelModel
from store_rating.schemas.user import AccountCreate, UserOut
from store_rating.schemas.validators import Password


class RegisterIn(AccountCreate):
    pass


class LoginIn(CamelModel):
    email: EmailStr
    password: str


class TokenOut(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class ChangePasswordIn(CamelModel):
    current_password: str
    new_password: Password
