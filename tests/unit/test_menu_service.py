"""Unit tests for MenuService and the query helpers."""

from unittest.mock import MagicMock

import pytest

from qr_menu_service.exceptions import (
    CategoryNotFoundError,
    InvalidMenuRequestError,
    ProductNotFoundError,
    RestaurantNotFoundError,
)
from qr_menu_service.models.menu_models import CategoryProductsData, MenuData, MenuMode, Restaurant
from qr_menu_service.services.menu_service import (
    LITE_PRODUCTS_PER_CATEGORY,
    MenuService,
    lazy_load_endpoint,
    parse_flag,
    parse_limit,
    select_mode,
)


@pytest.mark.unit
class TestQueryHelpers:
    """Tests for flag, limit and mode parsing."""

    @pytest.mark.parametrize("value", ["true", "TRUE", " True "])
    def test_parse_flag_true(self, value: str) -> None:
        assert parse_flag(value) is True

    @pytest.mark.parametrize("value", [None, "", "false", "1", "yes"])
    def test_parse_flag_false(self, value: str | None) -> None:
        assert parse_flag(value) is False

    def test_parse_limit_absent(self) -> None:
        assert parse_limit(None) is None
        assert parse_limit("") is None

    def test_parse_limit_valid(self) -> None:
        assert parse_limit("3") == 3

    @pytest.mark.parametrize("value", ["abc", "0", "-2", "2.5"])
    def test_parse_limit_invalid(self, value: str) -> None:
        with pytest.raises(InvalidMenuRequestError):
            parse_limit(value)

    def test_lazy_with_category_wins_over_lite(self) -> None:
        assert select_mode(lite=True, lazy=True, category_id="cat_1") is MenuMode.LAZY

    def test_lazy_without_category_falls_back_to_lite(self) -> None:
        assert select_mode(lite=True, lazy=True, category_id=None) is MenuMode.LITE

    def test_lazy_without_category_or_lite_is_full(self) -> None:
        assert select_mode(lite=False, lazy=True, category_id="") is MenuMode.FULL

    def test_no_flags_is_full(self) -> None:
        assert select_mode(lite=False, lazy=False, category_id=None) is MenuMode.FULL

    def test_category_id_without_lazy_is_ignored(self) -> None:
        assert select_mode(lite=True, lazy=False, category_id="cat_1") is MenuMode.LITE

    def test_lazy_load_endpoint_template(self) -> None:
        assert (
            lazy_load_endpoint("my-cafe")
            == "/api/public/menu/my-cafe?lazy=true&categoryId={categoryId}"
        )


@pytest.mark.unit
class TestMenuServiceInit:
    """Tests for MenuService construction."""

    def test_default_lite_cap(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)
        assert service.lite_products_per_category == LITE_PRODUCTS_PER_CATEGORY

    def test_rejects_non_positive_cap(self, menu_repository: MagicMock) -> None:
        with pytest.raises(ValueError):
            MenuService(menu_repository=menu_repository, lite_products_per_category=0)


@pytest.mark.unit
class TestFullMenu:
    """Tests for full mode."""

    @pytest.fixture
    def service(self, menu_repository: MagicMock) -> MenuService:
        return MenuService(menu_repository=menu_repository)

    @pytest.mark.asyncio
    async def test_full_menu_contains_every_available_product(
        self, service: MenuService, main_slug: str
    ) -> None:
        """Full mode serializes the true total with no caps."""
        menu = await service.get_full_menu(main_slug)

        assert isinstance(menu, MenuData)
        assert sum(len(c.products) for c in menu.categories) == 13
        assert menu.meta is None

    @pytest.mark.asyncio
    async def test_full_menu_orders_categories_and_breaks_ties_by_insertion(
        self, service: MenuService, main_slug: str
    ) -> None:
        menu = await service.get_full_menu(main_slug)

        assert [c.id for c in menu.categories] == ["cat_mains", "cat_drinks", "cat_desserts"]

    @pytest.mark.asyncio
    async def test_full_menu_orders_products(self, service: MenuService, main_slug: str) -> None:
        menu = await service.get_full_menu(main_slug)

        assert [p.id for p in menu.categories[0].products] == [f"main_{i}" for i in range(10)]

    @pytest.mark.asyncio
    async def test_full_menu_skips_inactive_categories_and_unavailable_products(
        self, service: MenuService, main_slug: str
    ) -> None:
        menu = await service.get_full_menu(main_slug)

        product_ids = {p.id for c in menu.categories for p in c.products}
        assert "cat_hidden" not in {c.id for c in menu.categories}
        assert "main_sold_out" not in product_ids
        assert "hidden_1" not in product_ids

    @pytest.mark.asyncio
    async def test_full_menu_echoes_table_number(self, service: MenuService, main_slug: str) -> None:
        menu = await service.get_full_menu(main_slug, table_number="12")

        assert menu.table_number == "12"

    @pytest.mark.asyncio
    async def test_unknown_slug(self, service: MenuService) -> None:
        with pytest.raises(RestaurantNotFoundError) as exc_info:
            await service.get_full_menu("does-not-exist")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_inactive_restaurant_is_not_found(self, service: MenuService) -> None:
        with pytest.raises(RestaurantNotFoundError):
            await service.get_full_menu("closed-cafe")

    @pytest.mark.asyncio
    async def test_full_menu_is_idempotent(self, service: MenuService, main_slug: str) -> None:
        first = await service.get_full_menu(main_slug)
        second = await service.get_full_menu(main_slug)

        assert first.to_wire()["categories"] == second.to_wire()["categories"]


@pytest.mark.unit
class TestLiteMenu:
    """Tests for lite mode."""

    @pytest.mark.asyncio
    async def test_lite_menu_caps_products_per_category(
        self, menu_repository: MagicMock, main_slug: str
    ) -> None:
        service = MenuService(menu_repository=menu_repository, lite_products_per_category=4)

        menu = await service.get_lite_menu(main_slug)

        assert all(len(c.products) <= 4 for c in menu.categories)
        assert menu.meta is not None
        assert menu.meta.total_products_shown <= len(menu.categories) * 4

    @pytest.mark.asyncio
    async def test_lite_menu_meta(self, menu_repository: MagicMock, main_slug: str) -> None:
        service = MenuService(menu_repository=menu_repository)

        menu = await service.get_lite_menu(main_slug)

        assert menu.meta is not None
        assert menu.meta.is_lite_mode is True
        assert menu.meta.supports_lazy_load is True
        assert menu.meta.total_products_shown == 6 + 3 + 0
        assert menu.meta.products_per_category == 6
        assert menu.meta.lazy_load_endpoint == lazy_load_endpoint(main_slug)

    @pytest.mark.asyncio
    async def test_lite_menu_marks_partially_shown_categories(
        self, menu_repository: MagicMock, main_slug: str
    ) -> None:
        service = MenuService(menu_repository=menu_repository)

        menu = await service.get_lite_menu(main_slug)
        by_id = {c.id: c for c in menu.categories}

        assert by_id["cat_mains"].has_more is True
        assert by_id["cat_mains"].product_count == 10
        assert [p.id for p in by_id["cat_mains"].products] == [f"main_{i}" for i in range(6)]
        assert by_id["cat_drinks"].has_more is False
        assert by_id["cat_desserts"].products == []

    @pytest.mark.asyncio
    async def test_lite_menu_unknown_slug(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)

        with pytest.raises(RestaurantNotFoundError):
            await service.get_lite_menu("does-not-exist")


@pytest.mark.unit
class TestCategoryProducts:
    """Tests for lazy mode."""

    @pytest.fixture
    def service(self, menu_repository: MagicMock) -> MenuService:
        return MenuService(menu_repository=menu_repository)

    @pytest.mark.asyncio
    async def test_returns_only_that_category(self, service: MenuService, main_slug: str) -> None:
        data = await service.get_category_products(main_slug, "cat_drinks")

        assert isinstance(data, CategoryProductsData)
        assert [p.id for p in data.products] == ["drink_1", "drink_2", "drink_3"]
        assert all(p.category_id == "cat_drinks" for p in data.products)

    @pytest.mark.asyncio
    async def test_limit_truncates(self, service: MenuService, main_slug: str) -> None:
        data = await service.get_category_products(main_slug, "cat_mains", limit=3)

        assert [p.id for p in data.products] == ["main_0", "main_1", "main_2"]
        assert data.meta is not None
        assert data.meta.total_products_shown == 3
        assert data.meta.total_products == 10
        assert data.meta.has_more is True
        assert data.meta.is_lite_mode is False

    @pytest.mark.asyncio
    async def test_limit_larger_than_category(self, service: MenuService, main_slug: str) -> None:
        data = await service.get_category_products(main_slug, "cat_drinks", limit=10)

        assert len(data.products) == 3
        assert data.meta is not None
        assert data.meta.has_more is False

    @pytest.mark.asyncio
    async def test_no_limit_returns_all(self, service: MenuService, main_slug: str) -> None:
        data = await service.get_category_products(main_slug, "cat_mains")

        assert len(data.products) == 10

    @pytest.mark.asyncio
    async def test_category_of_another_restaurant_is_not_found(
        self, service: MenuService, main_slug: str
    ) -> None:
        with pytest.raises(CategoryNotFoundError):
            await service.get_category_products(main_slug, "cat_other")

    @pytest.mark.asyncio
    async def test_inactive_category_is_not_found(
        self, service: MenuService, main_slug: str
    ) -> None:
        with pytest.raises(CategoryNotFoundError):
            await service.get_category_products(main_slug, "cat_hidden")

    @pytest.mark.asyncio
    async def test_non_positive_limit_rejected(self, service: MenuService, main_slug: str) -> None:
        with pytest.raises(InvalidMenuRequestError):
            await service.get_category_products(main_slug, "cat_mains", limit=0)


@pytest.mark.unit
class TestGetMenuDispatch:
    """Tests for get_menu mode dispatch."""

    @pytest.fixture
    def service(self, menu_repository: MagicMock) -> MenuService:
        return MenuService(menu_repository=menu_repository)

    @pytest.mark.asyncio
    async def test_dispatch_lite(self, service: MenuService, main_slug: str) -> None:
        data = await service.get_menu(main_slug, MenuMode.LITE)

        assert isinstance(data, MenuData)
        assert data.meta is not None and data.meta.is_lite_mode

    @pytest.mark.asyncio
    async def test_dispatch_lazy(self, service: MenuService, main_slug: str) -> None:
        data = await service.get_menu(main_slug, MenuMode.LAZY, category_id="cat_mains", limit=2)

        assert isinstance(data, CategoryProductsData)
        assert len(data.products) == 2

    @pytest.mark.asyncio
    async def test_dispatch_lazy_requires_category(self, service: MenuService, main_slug: str) -> None:
        with pytest.raises(InvalidMenuRequestError):
            await service.get_menu(main_slug, MenuMode.LAZY)


@pytest.mark.unit
class TestProductDetail:
    """Tests for product detail."""

    @pytest.mark.asyncio
    async def test_product_detail(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)

        detail = await service.get_product_detail("drink_2")

        assert detail.id == "drink_2"
        assert detail.category.id == "cat_drinks"
        assert detail.category.restaurant_id == "rest_1"

    @pytest.mark.asyncio
    async def test_unknown_product(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)

        with pytest.raises(ProductNotFoundError):
            await service.get_product_detail("nope")


@pytest.mark.unit
class TestSlugAvailability:
    """Tests for slug availability checks."""

    @pytest.mark.asyncio
    async def test_free_slug(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)

        result = await service.check_slug_availability("Yeni Şube Çay Evi")

        assert result.slug == "yeni-sube-cay-evi"
        assert result.available is True
        assert result.suggestion is None

    @pytest.mark.asyncio
    async def test_taken_slug_suggests_next_free_variant(self) -> None:
        repository = MagicMock()
        taken = {"cafe": "rest_a", "cafe-2": "rest_b"}
        repository.get_restaurant_by_slug.side_effect = lambda slug: (
            Restaurant(id=taken[slug], slug=slug, name=slug) if slug in taken else None
        )
        service = MenuService(menu_repository=repository)

        result = await service.check_slug_availability("Cafe")

        assert result.available is False
        assert result.suggestion == "cafe-3"

    @pytest.mark.asyncio
    async def test_excluded_restaurant_does_not_clash(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)

        result = await service.check_slug_availability("lezzet sofrasi", exclude_id="rest_1")

        assert result.available is True

    @pytest.mark.asyncio
    async def test_empty_slug_rejected(self, menu_repository: MagicMock) -> None:
        service = MenuService(menu_repository=menu_repository)

        with pytest.raises(InvalidMenuRequestError):
            await service.check_slug_availability("!!!")
