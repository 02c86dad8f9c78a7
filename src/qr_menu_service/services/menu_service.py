"""Public menu service: shapes full, lite and lazy menu responses."""

import logging

from qr_menu_service.exceptions import (
    CategoryNotFoundError,
    InvalidMenuRequestError,
    ProductNotFoundError,
    RestaurantNotFoundError,
)
from qr_menu_service.models.menu_models import (
    Category,
    CategoryProductsData,
    CategorySummary,
    MenuCategory,
    MenuData,
    MenuMeta,
    MenuMode,
    Product,
    ProductDetail,
    Restaurant,
    SlugCheckData,
)
from qr_menu_service.observability import traced
from qr_menu_service.observability.metrics import record_menu_request
from qr_menu_service.repositories.menu_repository import MenuRepository
from qr_menu_service.slugs import slugify, suggestion_candidates

logger = logging.getLogger(__name__)

LITE_PRODUCTS_PER_CATEGORY = 6


def parse_flag(value: str | None) -> bool:
    """Query flags are on only for the string "true", in any case."""
    return value is not None and value.strip().lower() == "true"


def parse_limit(value: str | None) -> int | None:
    """Parse the optional lazy-mode ``limit`` query parameter.

    Args:
        value: Raw query string value

    Returns:
        Positive limit, or None when absent

    Raises:
        InvalidMenuRequestError: If the value is not a positive integer
    """
    if value is None or value.strip() == "":
        return None

    try:
        limit = int(value)
    except ValueError as e:
        raise InvalidMenuRequestError(f"limit must be an integer, got '{value}'") from e

    if limit < 1:
        raise InvalidMenuRequestError(f"limit must be positive, got {limit}")

    return limit


def select_mode(lite: bool, lazy: bool, category_id: str | None) -> MenuMode:
    """Pick the response mode.

    Lazy wins when a category id accompanies it, then lite, then full.
    """
    if lazy and category_id:
        return MenuMode.LAZY
    if lite:
        return MenuMode.LITE
    return MenuMode.FULL


def lazy_load_endpoint(slug: str) -> str:
    """Template a client fills in to fetch the rest of one category."""
    return f"/api/public/menu/{slug}?lazy=true&categoryId={{categoryId}}"


def _display_key(entry: Category | Product) -> tuple[int, float, str]:
    created = entry.created_at.timestamp() if entry.created_at else 0.0
    return (entry.order, created, entry.id)


class MenuService:
    """Read-side projection of a restaurant's menu.

    Only active categories and available products are ever served, ordered
    by display order with insertion time breaking ties.
    """

    def __init__(
        self,
        menu_repository: MenuRepository,
        lite_products_per_category: int = LITE_PRODUCTS_PER_CATEGORY,
    ) -> None:
        """Initialize the MenuService.

        Args:
            menu_repository: Repository for menu reads
            lite_products_per_category: Products kept per category in lite mode

        Raises:
            ValueError: If the lite cap is not positive
        """
        if lite_products_per_category < 1:
            raise ValueError("lite_products_per_category must be positive")

        self.menu_repository = menu_repository
        self.lite_products_per_category = lite_products_per_category

    def _get_restaurant(self, slug: str) -> Restaurant:
        restaurant = self.menu_repository.get_restaurant_by_slug(slug)
        if restaurant is None or not restaurant.is_active:
            raise RestaurantNotFoundError(slug)
        return restaurant

    def _visible_categories(self, restaurant: Restaurant) -> list[Category]:
        categories = self.menu_repository.list_categories(restaurant.id)
        return sorted((c for c in categories if c.is_active), key=_display_key)

    def _visible_products(self, category_id: str) -> list[Product]:
        products = self.menu_repository.list_products(category_id)
        return sorted((p for p in products if p.is_available), key=_display_key)

    @traced("menu.full")
    async def get_full_menu(self, slug: str, table_number: str | None = None) -> MenuData:
        """Every active category with every available product, no ``_meta``.

        Raises:
            RestaurantNotFoundError: If the slug is unknown or inactive
        """
        restaurant = self._get_restaurant(slug)

        categories = []
        for category in self._visible_categories(restaurant):
            products = self._visible_products(category.id)
            categories.append(
                MenuCategory(**category.model_dump(), products=products, product_count=len(products))
            )

        total = sum(len(c.products) for c in categories)
        record_menu_request(MenuMode.FULL.value, total)
        logger.info(f"Full menu for {slug}: {len(categories)} categories, {total} products")

        return MenuData(restaurant=restaurant, categories=categories, table_number=table_number)

    @traced("menu.lite")
    async def get_lite_menu(self, slug: str, table_number: str | None = None) -> MenuData:
        """Every active category with at most the lite cap of products each.

        Raises:
            RestaurantNotFoundError: If the slug is unknown or inactive
        """
        restaurant = self._get_restaurant(slug)
        cap = self.lite_products_per_category

        categories = []
        for category in self._visible_categories(restaurant):
            # Each category is read in full: productCount and hasMore need the
            # real count, and the store sorts by id rather than display order,
            # so a query Limit could not pick the first products shown.
            products = self._visible_products(category.id)
            categories.append(
                MenuCategory(
                    **category.model_dump(),
                    products=products[:cap],
                    product_count=len(products),
                    has_more=len(products) > cap,
                )
            )

        shown = sum(len(c.products) for c in categories)
        record_menu_request(MenuMode.LITE.value, shown)
        logger.info(f"Lite menu for {slug}: {len(categories)} categories, {shown} products shown")

        meta = MenuMeta(
            is_lite_mode=True,
            supports_lazy_load=True,
            total_products_shown=shown,
            lazy_load_endpoint=lazy_load_endpoint(slug),
            products_per_category=cap,
        )
        return MenuData(
            restaurant=restaurant,
            categories=categories,
            table_number=table_number,
            meta=meta,
        )

    @traced("menu.lazy")
    async def get_category_products(
        self, slug: str, category_id: str, limit: int | None = None
    ) -> CategoryProductsData:
        """Available products of one category, optionally truncated.

        Args:
            slug: Restaurant slug
            category_id: Category that must belong to that restaurant
            limit: Optional maximum number of products

        Raises:
            RestaurantNotFoundError: If the slug is unknown or inactive
            CategoryNotFoundError: If the category is not an active category of the restaurant
            InvalidMenuRequestError: If limit is not positive
        """
        if limit is not None and limit < 1:
            raise InvalidMenuRequestError(f"limit must be positive, got {limit}")

        restaurant = self._get_restaurant(slug)

        category = self.menu_repository.get_category(restaurant.id, category_id)
        if category is None or not category.is_active:
            raise CategoryNotFoundError(slug, category_id)

        products = self._visible_products(category.id)
        selected = products[:limit] if limit else products

        record_menu_request(MenuMode.LAZY.value, len(selected))
        logger.info(
            f"Lazy load for {slug}/{category_id}: {len(selected)} of {len(products)} products"
        )

        meta = MenuMeta(
            is_lite_mode=False,
            supports_lazy_load=True,
            total_products_shown=len(selected),
            lazy_load_endpoint=lazy_load_endpoint(slug),
            category_id=category.id,
            total_products=len(products),
            has_more=len(selected) < len(products),
        )
        return CategoryProductsData(products=selected, meta=meta)

    async def get_menu(
        self,
        slug: str,
        mode: MenuMode,
        category_id: str | None = None,
        limit: int | None = None,
        table_number: str | None = None,
    ) -> MenuData | CategoryProductsData:
        """Dispatch to the shaping method for ``mode``."""
        if mode is MenuMode.LAZY:
            if not category_id:
                raise InvalidMenuRequestError("categoryId is required in lazy mode")
            return await self.get_category_products(slug, category_id, limit)
        if mode is MenuMode.LITE:
            return await self.get_lite_menu(slug, table_number)
        return await self.get_full_menu(slug, table_number)

    @traced("menu.product_detail")
    async def get_product_detail(self, product_id: str) -> ProductDetail:
        """Product with its owning category.

        Raises:
            ProductNotFoundError: If no product or owning category exists
        """
        product = self.menu_repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        category = self.menu_repository.get_category_by_id(product.category_id)
        if category is None:
            logger.warning(f"Product {product_id} references missing category {product.category_id}")
            raise ProductNotFoundError(product_id)

        return ProductDetail(
            **product.model_dump(),
            category=CategorySummary(
                id=category.id, name=category.name, restaurant_id=category.restaurant_id
            ),
        )

    async def check_slug_availability(
        self, raw_slug: str, exclude_id: str | None = None
    ) -> SlugCheckData:
        """Normalise a proposed slug and report whether it is free.

        When taken, the first free numbered variant up to ``-50`` is
        suggested; the restaurant ``exclude_id`` never counts as a clash.

        Raises:
            InvalidMenuRequestError: If nothing is left after normalisation
        """
        slug = slugify(raw_slug)
        if not slug:
            raise InvalidMenuRequestError("Invalid slug")

        if not self._slug_taken(slug, exclude_id):
            return SlugCheckData(slug=slug, available=True)

        suggestion = next(
            (c for c in suggestion_candidates(slug) if not self._slug_taken(c, exclude_id)),
            None,
        )
        return SlugCheckData(slug=slug, available=False, suggestion=suggestion)

    def _slug_taken(self, slug: str, exclude_id: str | None) -> bool:
        restaurant = self.menu_repository.get_restaurant_by_slug(slug)
        return restaurant is not None and restaurant.id != exclude_id
