from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    STORE = "store"

    def __str__(self):
        return self.value


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def __str__(self):
        return self.value


class StoreSortField(str, Enum):
    """Sortable columns of the admin store listing."""
    NAME = "name"
    EMAIL = "email"
    ADDRESS = "address"
    RATING = "rating"

    def __str__(self):
        return self.value


class UserSortField(str, Enum):
    NAME = "name"
    EMAIL = "email"
    ADDRESS = "address"
    ROLE = "role"

    def __str__(self):
        return self.value


class BrowseSortField(str, Enum):
    """Sortable columns of the store listing shown to normal users."""
    NAME = "name"
    ADDRESS = "address"
    RATING = "rating"

    def __str__(self):
        return self.value


class RaterSortField(str, Enum):
    NAME = "name"
    EMAIL = "email"
    RATING = "rating"
    DATE = "date"

    def __str__(self):
        return self.value


class RatingOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"

    def __str__(self):
        return self.value


class AuditAction(str, Enum):
    REGISTER = "register"
    LOGIN = "login"
    CHANGE_PASSWORD = "change_password"
    CREATE_STORE = "create_store"
    CREATE_USER = "create_user"
    SUBMIT_RATING = "submit_rating"

    def __str__(self):
        return self.value
