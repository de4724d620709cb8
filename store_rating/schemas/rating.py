from pydantic import Field, field_validator
from store_rating.core.enums import RatingOutcome
from store_rating.schemas.base import CamelModel

RATING_MIN = 1
RATING_MAX = 5
# largest id a 32-bit integer primary key can hold
STORE_ID_MAX = 2**31 - 1


class RatingIn(CamelModel):
    store_id: int = Field(gt=0, le=STORE_ID_MAX)
    rating: int

    @field_validator("rating")
    @classmethod
    def check_range(cls, value: int) -> int:
        if not RATING_MIN <= value <= RATING_MAX:
            raise ValueError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
        return value


class RatingOut(CamelModel):
    message: str
    store_id: int
    rating: int
    outcome: RatingOutcome
