"""Main application entry point for the QR menu service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
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
from qr_menu_service.handlers.api_handler import create_app
from qr_menu_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Connects and warms up the DynamoDB handle
    3. Creates the menu service and migration runner
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing QR menu service...")

    database = create_dynamodb_handle()
    dynamodb_resource = database.connect()
    database.warmup()

    menu_service = create_menu_service(dynamodb_resource)
    migration_runner = create_migration_runner(dynamodb_resource)

    logger.info(
        f"Menu service initialized - lite cap: {menu_service.lite_products_per_category} "
        "products per category"
    )

    app = create_app(
        menu_service=menu_service,
        migration_runner=migration_runner,
        database=database,
        api_keys=admin_api_keys(),
    )

    setup_observability(app)

    logger.info("QR menu service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
