from decimal import Decimal
from types import SimpleNamespace

import pytest

from store_rating.core.response_builders import build_store_admin_item, build_store_browse_item
from store_rating.services.ratings import as_average


def store_row(**overrides):
    data = {
        "id": 7,
        "name": "Corner Grocery Store One",
        "email": "store@example.com",
        "address": "1 Market Square",
        "rating": None,
        "user_rating": None,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


@pytest.mark.unit
class TestAverages:

    @pytest.mark.parametrize("value,expected", [
        (None, None),
        (Decimal("3.5000"), 3.5),
        (4, 4.0),
    ])
    def test_as_average(self, value, expected):
        assert as_average(value) == expected

    def test_builders_share_average_conversion(self):
        row = store_row(rating=Decimal("4.2500"), user_rating=5)
        assert build_store_admin_item(row).rating == 4.25
        browse = build_store_browse_item(row)
        assert browse.rating == 4.25
        assert browse.user_rating == 5

    def test_unrated_store_keeps_null(self):
        assert build_store_admin_item(store_row()).rating is None
