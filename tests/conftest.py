"""Shared pytest fixtures and configuration for all tests."""

import os
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest

# main.py and lambda_handler.py skip wiring real AWS clients in test mode
os.environ.setdefault("ENVIRONMENT", "test")

from qr_menu_service.models.menu_models import Category, Product, Restaurant  # noqa: E402
from qr_menu_service.repositories.menu_repository import MenuRepository  # noqa: E402

MAIN_SLUG = "lezzet-sofrasi"


def _product_item(
    product_id: str,
    category_id: str,
    order: int,
    price: str = "120.00",
    available: bool = True,
) -> dict[str, Any]:
    return {
        "id": product_id,
        "category_id": category_id,
        "name": f"Product {product_id}",
        "price": Decimal(price),
        "is_available": available,
        "order": Decimal(order),
        "created_at": f"2024-01-{order % 28 + 1:02d}T10:00:00+00:00",
    }


@pytest.fixture
def restaurant_items() -> list[dict[str, Any]]:
    """Restaurants as stored in DynamoDB."""
    return [
        {
            "id": "rest_1",
            "slug": MAIN_SLUG,
            "name": "Lezzet Sofrası",
            "address": "Kadıköy, İstanbul",
            "theme_color": "#c0392b",
            "is_active": True,
        },
        {"id": "rest_2", "slug": "closed-cafe", "name": "Closed Cafe", "is_active": False},
        {"id": "rest_3", "slug": "other-place", "name": "Other Place", "is_active": True},
    ]


@pytest.fixture
def category_items() -> list[dict[str, Any]]:
    """Categories as stored in DynamoDB.

    rest_1 has two visible categories with the same order (drinks created
    before desserts), a first category with ten available products and an
    inactive category that must never be served.
    """
    return [
        {
            "id": "cat_desserts",
            "restaurant_id": "rest_1",
            "name": "Tatlılar",
            "order": Decimal(2),
            "created_at": "2024-02-01T10:00:00+00:00",
            "is_active": True,
        },
        {
            "id": "cat_mains",
            "restaurant_id": "rest_1",
            "name": "Ana Yemekler",
            "order": Decimal(1),
            "created_at": "2024-01-01T10:00:00+00:00",
            "is_active": True,
        },
        {
            "id": "cat_drinks",
            "restaurant_id": "rest_1",
            "name": "İçecekler",
            "order": Decimal(2),
            "created_at": "2024-01-15T10:00:00+00:00",
            "is_active": True,
        },
        {
            "id": "cat_hidden",
            "restaurant_id": "rest_1",
            "name": "Hidden",
            "order": Decimal(0),
            "is_active": False,
        },
        {
            "id": "cat_other",
            "restaurant_id": "rest_3",
            "name": "Other Mains",
            "order": Decimal(1),
            "is_active": True,
        },
    ]


@pytest.fixture
def product_items() -> list[dict[str, Any]]:
    """Products as stored in DynamoDB, deliberately out of display order."""
    mains = [_product_item(f"main_{i}", "cat_mains", order=i) for i in reversed(range(10))]
    return [
        *mains,
        _product_item("main_sold_out", "cat_mains", order=99, available=False),
        _product_item("drink_1", "cat_drinks", order=1, price="30.00"),
        _product_item("drink_2", "cat_drinks", order=2, price="35.00"),
        _product_item("drink_3", "cat_drinks", order=3, price="40.00"),
        _product_item("hidden_1", "cat_hidden", order=1),
        _product_item("hidden_2", "cat_hidden", order=2),
        _product_item("other_1", "cat_other", order=1),
    ]


@pytest.fixture
def menu_repository(
    restaurant_items: list[dict[str, Any]],
    category_items: list[dict[str, Any]],
    product_items: list[dict[str, Any]],
) -> MagicMock:
    """MenuRepository mock answering from the item fixtures."""
    restaurants = {item["slug"]: Restaurant.from_dynamodb_item(item) for item in restaurant_items}
    categories = [Category.from_dynamodb_item(item) for item in category_items]
    products = [Product.from_dynamodb_item(item) for item in product_items]

    def get_category(restaurant_id: str, category_id: str) -> Category | None:
        return next(
            (c for c in categories if c.restaurant_id == restaurant_id and c.id == category_id),
            None,
        )

    repository = MagicMock(spec=MenuRepository)
    repository.get_restaurant_by_slug.side_effect = restaurants.get
    repository.list_categories.side_effect = lambda rid: [
        c for c in categories if c.restaurant_id == rid
    ]
    repository.get_category.side_effect = get_category
    repository.get_category_by_id.side_effect = lambda cid: next(
        (c for c in categories if c.id == cid), None
    )
    repository.list_products.side_effect = lambda cid: [p for p in products if p.category_id == cid]
    repository.get_product.side_effect = lambda pid: next(
        (p for p in products if p.id == pid), None
    )
    return repository


@pytest.fixture
def main_slug() -> str:
    """Slug of the fixture restaurant with a full menu."""
    return MAIN_SLUG
