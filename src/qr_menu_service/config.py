"""Environment-driven construction of the service's collaborators.

Shared by the uvicorn entry point, the Lambda entry point and the
migration CLI so all three read the same variables.
"""

import logging
import os

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

from qr_menu_service.auth.api_keys import parse_api_keys
from qr_menu_service.database import DynamoDBHandle
from qr_menu_service.migrations.runner import MigrationRunner, build_migration_runner
from qr_menu_service.repositories.menu_repository import MenuRepository
from qr_menu_service.services.menu_service import LITE_PRODUCTS_PER_CATEGORY, MenuService

logger = logging.getLogger(__name__)

DEVELOPMENT_API_KEY = "dummy-key-for-development"


def create_dynamodb_handle() -> DynamoDBHandle:
    """DynamoDB handle for AWS, or for DYNAMODB_ENDPOINT when set (local development)."""
    return DynamoDBHandle(
        region=os.getenv("AWS_REGION", "us-east-1"),
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT") or None,
        access_key=os.getenv("AWS_ACCESS_KEY_ID"),
        secret_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
    )


def create_menu_service(dynamodb_resource: DynamoDBServiceResource) -> MenuService:
    """Menu service over the tables named by DYNAMODB_*_TABLE."""
    restaurants_table = os.getenv("DYNAMODB_RESTAURANTS_TABLE", "qr-menu-restaurants")
    categories_table = os.getenv("DYNAMODB_CATEGORIES_TABLE", "qr-menu-categories")
    products_table = os.getenv("DYNAMODB_PRODUCTS_TABLE", "qr-menu-products")

    repository = MenuRepository(
        dynamodb_resource=dynamodb_resource,
        restaurants_table=restaurants_table,
        categories_table=categories_table,
        products_table=products_table,
    )
    logger.info(
        f"Menu repository configured - restaurants: {restaurants_table}, "
        f"categories: {categories_table}, products: {products_table}"
    )

    lite_cap = int(
        os.getenv("MENU_LITE_PRODUCTS_PER_CATEGORY", str(LITE_PRODUCTS_PER_CATEGORY))
    )
    return MenuService(menu_repository=repository, lite_products_per_category=lite_cap)


def create_migration_runner(dynamodb_resource: DynamoDBServiceResource) -> MigrationRunner:
    """Migration runner over DYNAMODB_DEMO_REQUESTS_TABLE and DYNAMODB_MIGRATIONS_TABLE."""
    return build_migration_runner(
        dynamodb_resource=dynamodb_resource,
        demo_requests_table=os.getenv("DYNAMODB_DEMO_REQUESTS_TABLE", "qr-menu-demo-requests"),
        migrations_table=os.getenv("DYNAMODB_MIGRATIONS_TABLE", "qr-menu-migration-ledger"),
    )


def admin_api_keys() -> list[str]:
    """Keys from ADMIN_API_KEY, or a development key when none are set."""
    api_keys = parse_api_keys(os.getenv("ADMIN_API_KEY", ""))

    if not api_keys:
        logger.warning("No ADMIN_API_KEY configured - using development key")
        api_keys = [DEVELOPMENT_API_KEY]

    return api_keys
