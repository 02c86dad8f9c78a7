"""Menu data models.

Restaurants, categories and products as stored in DynamoDB, plus the
envelopes served by the public menu endpoint. Stored items use snake_case
attribute names; the public JSON contract uses camelCase and the literal
``_meta`` key, so every wire model carries a camelCase alias.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MenuMode(str, Enum):
    """Shape of a public menu response."""

    FULL = "full"
    LITE = "lite"
    LAZY = "lazy"


class WireModel(BaseModel):
    """Base for models serialized over the public API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Restaurant(WireModel):
    """Restaurant header shown above the menu."""

    id: str = Field(..., description="Unique identifier for the restaurant")
    slug: str = Field(..., description="URL-safe public lookup key", min_length=1)
    name: str = Field(..., description="Display name")
    description: str | None = Field(None, description="Short description")
    logo: str | None = Field(None, description="URL to logo image")
    header_image: str | None = Field(None, description="URL to header image")
    address: str | None = Field(None, description="Street address")
    phone: str | None = Field(None, description="Contact phone number")
    working_hours: str | None = Field(None, description="Opening hours text")
    theme_color: str | None = Field(None, description="Primary theme color")
    is_active: bool = Field(default=True, description="Whether the public menu is published")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Restaurant":
        """Create Restaurant from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Restaurant: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "slug": item["slug"],
            "name": item["name"],
            "is_active": item.get("is_active", True),
        }

        for key in (
            "description",
            "logo",
            "header_image",
            "address",
            "phone",
            "working_hours",
            "theme_color",
        ):
            if key in item:
                data[key] = item[key]

        return cls(**data)


class Category(WireModel):
    """Menu category belonging to exactly one restaurant."""

    id: str = Field(..., description="Unique identifier for the category")
    restaurant_id: str = Field(..., description="Restaurant this category belongs to")
    name: str = Field(..., description="Category name")
    description: str | None = Field(None, description="Category description")
    order: int = Field(default=0, description="Display order of category")
    created_at: datetime | None = Field(None, description="Insertion time, breaks order ties")
    is_active: bool = Field(default=True, description="Whether category is shown publicly")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Category":
        """Create Category from DynamoDB item."""
        data: dict[str, Any] = {
            "id": item["id"],
            "restaurant_id": item["restaurant_id"],
            "name": item["name"],
            "order": int(item.get("order", 0)),
            "is_active": item.get("is_active", True),
        }

        if "description" in item:
            data["description"] = item["description"]

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        return cls(**data)


class Product(WireModel):
    """Menu product belonging to exactly one category."""

    id: str = Field(..., description="Unique identifier for the product")
    category_id: str = Field(..., description="Category this product belongs to")
    name: str = Field(..., description="Product name")
    description: str | None = Field(None, description="Product description")
    price: Decimal = Field(..., description="Product price", ge=0)
    is_available: bool = Field(default=True, description="Whether product can be ordered")
    image_url: str | None = Field(None, description="URL to product image")
    order: int = Field(default=0, description="Display order within the category")
    created_at: datetime | None = Field(None, description="Insertion time, breaks order ties")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Product":
        """Create Product from DynamoDB item."""
        data: dict[str, Any] = {
            "id": item["id"],
            "category_id": item["category_id"],
            "name": item["name"],
            # DynamoDB numbers come back as Decimal already; strings are accepted too
            "price": Decimal(str(item["price"])),
            "is_available": item.get("is_available", True),
            "order": int(item.get("order", 0)),
        }

        if "description" in item:
            data["description"] = item["description"]

        if "image_url" in item:
            data["image_url"] = item["image_url"]

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        return cls(**data)


class MenuMeta(WireModel):
    """Transient ``_meta`` block describing how a response was shaped."""

    is_lite_mode: bool = Field(..., description="True only for lite responses")
    supports_lazy_load: bool = Field(default=True, description="Whether lazy requests are served")
    total_products_shown: int = Field(..., description="Products actually serialized", ge=0)
    lazy_load_endpoint: str = Field(..., description="Template for follow-up lazy requests")
    products_per_category: int | None = Field(None, description="Lite cap applied", ge=1)
    category_id: str | None = Field(None, description="Category served by a lazy response")
    total_products: int | None = Field(None, description="Available products in that category")
    has_more: bool | None = Field(None, description="Whether a lazy limit truncated the list")


class MenuCategory(Category):
    """Category with the products selected for one response."""

    products: list[Product] = Field(default_factory=list)
    product_count: int | None = Field(None, description="Available products in the category")
    has_more: bool | None = Field(None, description="Whether lite mode left products out")


class MenuData(WireModel):
    """Payload of a full or lite menu response."""

    restaurant: Restaurant
    categories: list[MenuCategory] = Field(default_factory=list)
    table_number: str | None = None
    meta: MenuMeta | None = Field(None, alias="_meta")


class CategoryProductsData(WireModel):
    """Payload of a lazy per-category response."""

    products: list[Product] = Field(default_factory=list)
    meta: MenuMeta | None = Field(None, alias="_meta")


class CategorySummary(WireModel):
    """Category reference embedded in a product detail."""

    id: str
    name: str
    restaurant_id: str


class ProductDetail(Product):
    """Product detail with its owning category."""

    category: CategorySummary


class SlugCheckData(WireModel):
    """Result of a slug availability check."""

    slug: str
    available: bool
    suggestion: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize keeping ``suggestion: null`` when no free variant was found."""
        return self.model_dump(by_alias=True, mode="json")


class ErrorDetail(WireModel):
    """Failure description inside an error envelope."""

    code: str
    message: str


class MenuResponse(WireModel):
    """Envelope of a full or lite menu response."""

    success: bool
    data: MenuData | None = None
    error: ErrorDetail | None = None


class CategoryProductsResponse(WireModel):
    """Envelope of a lazy per-category response."""

    success: bool
    data: CategoryProductsData | None = None
    error: ErrorDetail | None = None
