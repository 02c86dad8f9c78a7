"""DynamoDB repository for restaurants, categories and products.

Menu data is written by the admin dashboard; this repository only reads it.
Unlike the write-side repositories, read failures raise MenuStoreError so a
storage outage is never served as an empty menu.
"""

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from qr_menu_service.exceptions import MenuStoreError
from qr_menu_service.models.menu_models import Category, Product, Restaurant

logger = logging.getLogger(__name__)


def query_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Run a query and follow LastEvaluatedKey until every page is read.

    Args:
        table: DynamoDB table to query
        **kwargs: Arguments passed to Table.query

    Returns:
        list: All items across pages
    """
    items: list[dict[str, Any]] = []
    response = table.query(**kwargs)
    items.extend(response.get("Items", []))

    while "LastEvaluatedKey" in response:
        response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


class MenuRepository:
    """Read-only access to the menu tables.

    Tables:
        restaurants: partition key ``slug``
        categories: partition key ``restaurant_id``, sort key ``id``
        products: partition key ``category_id``, sort key ``id``, GSI ``id-index``
    """

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        restaurants_table: str,
        categories_table: str,
        products_table: str,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            restaurants_table: Name of the restaurants table
            categories_table: Name of the categories table
            products_table: Name of the products table
        """
        self.dynamodb = dynamodb_resource
        self.restaurants: Table = dynamodb_resource.Table(restaurants_table)
        self.categories: Table = dynamodb_resource.Table(categories_table)
        self.products: Table = dynamodb_resource.Table(products_table)

    def get_restaurant_by_slug(self, slug: str) -> Restaurant | None:
        """Retrieve a restaurant by its public slug.

        Args:
            slug: Restaurant slug

        Returns:
            Restaurant if found, None otherwise

        Raises:
            MenuStoreError: If DynamoDB could not be read
        """
        try:
            response = self.restaurants.get_item(Key={"slug": slug})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get restaurant {slug}: {e}")
            raise MenuStoreError("Restaurant lookup failed") from e

        if "Item" not in response:
            return None

        return Restaurant.from_dynamodb_item(response["Item"])

    def list_categories(self, restaurant_id: str) -> list[Category]:
        """List every category of a restaurant, active or not.

        Raises:
            MenuStoreError: If DynamoDB could not be read
        """
        try:
            items = query_all(
                self.categories,
                KeyConditionExpression="restaurant_id = :rid",
                ExpressionAttributeValues={":rid": restaurant_id},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list categories for restaurant {restaurant_id}: {e}")
            raise MenuStoreError("Category lookup failed") from e

        return [Category.from_dynamodb_item(item) for item in items]

    def get_category(self, restaurant_id: str, category_id: str) -> Category | None:
        """Retrieve one category, scoped to its restaurant.

        A category id belonging to another restaurant is not found.

        Raises:
            MenuStoreError: If DynamoDB could not be read
        """
        try:
            response = self.categories.get_item(
                Key={"restaurant_id": restaurant_id, "id": category_id}
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get category {category_id}: {e}")
            raise MenuStoreError("Category lookup failed") from e

        if "Item" not in response:
            return None

        return Category.from_dynamodb_item(response["Item"])

    def list_products(self, category_id: str) -> list[Product]:
        """List every product of a category, available or not.

        Raises:
            MenuStoreError: If DynamoDB could not be read
        """
        try:
            items = query_all(
                self.products,
                KeyConditionExpression="category_id = :cid",
                ExpressionAttributeValues={":cid": category_id},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list products for category {category_id}: {e}")
            raise MenuStoreError("Product lookup failed") from e

        return [Product.from_dynamodb_item(item) for item in items]

    def get_product(self, product_id: str) -> Product | None:
        """Retrieve a product by id through the ``id-index`` GSI.

        Raises:
            MenuStoreError: If DynamoDB could not be read
        """
        try:
            response = self.products.query(
                IndexName="id-index",
                KeyConditionExpression="id = :id",
                ExpressionAttributeValues={":id": product_id},
                Limit=1,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get product {product_id}: {e}")
            raise MenuStoreError("Product lookup failed") from e

        items = response.get("Items", [])
        if not items:
            return None

        return Product.from_dynamodb_item(items[0])

    def get_category_by_id(self, category_id: str) -> Category | None:
        """Retrieve a category by id alone through the ``id-index`` GSI.

        Raises:
            MenuStoreError: If DynamoDB could not be read
        """
        try:
            response = self.categories.query(
                IndexName="id-index",
                KeyConditionExpression="id = :id",
                ExpressionAttributeValues={":id": category_id},
                Limit=1,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get category {category_id}: {e}")
            raise MenuStoreError("Category lookup failed") from e

        items = response.get("Items", [])
        if not items:
            return None

        return Category.from_dynamodb_item(items[0])
