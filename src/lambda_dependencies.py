"""Cached dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across warm
invocations.
"""

import logging
import os

from fastapi import FastAPI

from qr_menu_service.config import (
    admin_api_keys,
    create_dynamodb_handle,
    create_menu_service,
    create_migration_runner,
)
from qr_menu_service.database import DynamoDBHandle
from qr_menu_service.handlers.api_handler import create_app
from qr_menu_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_database: DynamoDBHandle | None = None
_fastapi_app: FastAPI | None = None


def get_database() -> DynamoDBHandle:
    """Create or retrieve the connected DynamoDB handle."""
    global _database

    if _database is None:
        _database = create_dynamodb_handle()
        _database.connect()

    return _database


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    database = get_database()

    _fastapi_app = create_app(
        menu_service=create_menu_service(database.resource),
        migration_runner=create_migration_runner(database.resource),
        database=database,
        api_keys=admin_api_keys(),
    )
    setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Configure logging; called once during Lambda cold start."""
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
