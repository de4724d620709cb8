import re
from typing import Annotated

from pydantic import AfterValidator

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400

PASSWORD_PATTERN = re.compile(r"(?=.*[A-Z])(?=.*[!@#$%^&*])[A-Za-z0-9!@#$%^&*]{8,16}")


def validate_name(value: str) -> str:
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise ValueError(f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters")
    return value


def validate_address(value: str) -> str:
    if not value:
        raise ValueError("Address is required")
    if len(value) > ADDRESS_MAX_LENGTH:
        raise ValueError(f"Address must not exceed {ADDRESS_MAX_LENGTH} characters")
    return value


def validate_password(value: str) -> str:
    if not PASSWORD_PATTERN.fullmatch(value):
        raise ValueError(
            "Password must be 8-16 characters with at least one uppercase letter "
            "and one special character (!@#$%^&*)"
        )
    return value


Name = Annotated[str, AfterValidator(validate_name)]
Address = Annotated[str, AfterValidator(validate_address)]
Password = Annotated[str, AfterValidator(validate_password)]
