"""FastAPI application serving the public menu, health and admin endpoints."""

import logging
import os
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qr_menu_service.auth.api_keys import APIKeyValidator, api_key_dependency
from qr_menu_service.database import DynamoDBHandle
from qr_menu_service.exceptions import MenuError, MigrationError
from qr_menu_service.handlers.middleware import performance_logger
from qr_menu_service.migrations.runner import MigrationRunner
from qr_menu_service.models.menu_models import (
    CategoryProductsData,
    CategoryProductsResponse,
    MenuMode,
    MenuResponse,
)
from qr_menu_service.observability.metrics import record_menu_failure
from qr_menu_service.services.menu_service import (
    MenuService,
    parse_flag,
    parse_limit,
    select_mode,
)

logger = logging.getLogger(__name__)

SERVICE_VERSION = "1.0.0"


def failure(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the ``{success: false, error: {...}}`` envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": code, "message": message}},
    )


def success(data: dict[str, Any]) -> JSONResponse:
    """Build the ``{success: true, data: ...}`` envelope."""
    return JSONResponse(status_code=200, content={"success": True, "data": data})


def create_app(
    menu_service: MenuService,
    migration_runner: MigrationRunner,
    database: DynamoDBHandle,
    api_keys: list[str],
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service shaping public menu responses
        migration_runner: Runner behind the admin migration endpoints
        database: DynamoDB handle pinged by the readiness check
        api_keys: List of valid API keys for the admin endpoints

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="QR Menu Service",
        description="Public restaurant menus for QR-scanned links",
        version=SERVICE_VERSION,
    )

    app.state.menu_service = menu_service
    app.state.migration_runner = migration_runner
    app.state.database = database
    app.state.started_at = time.monotonic()

    require_api_key = api_key_dependency(APIKeyValidator(api_keys=api_keys))

    app.middleware("http")(performance_logger)

    @app.exception_handler(MenuError)
    async def handle_menu_error(request: Request, exc: MenuError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
        record_menu_failure(exc.code)
        return failure(exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return failure(400, "INVALID_REQUEST", str(exc.errors()))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"{request.method} {request.url.path} failed unexpectedly: {exc}")
        record_menu_failure("INTERNAL_ERROR")
        return failure(500, "INTERNAL_ERROR", "Internal server error")

    @app.get("/api/health", tags=["Health"])
    async def health_check() -> dict[str, Any]:
        """Liveness check; never touches DynamoDB so it stays fast on cold start."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
            "version": SERVICE_VERSION,
            "environment": os.getenv("ENVIRONMENT", "development"),
        }

    @app.get("/api/health/ready", tags=["Health"])
    async def readiness_check() -> JSONResponse:
        """Readiness check; pings DynamoDB."""
        start = time.monotonic()
        ready = app.state.database.ping()
        body = {
            "status": "ready" if ready else "not ready",
            "timestamp": datetime.now(UTC).isoformat(),
            "database": "connected" if ready else "disconnected",
            "responseTime": int((time.monotonic() - start) * 1000),
        }
        return JSONResponse(status_code=200 if ready else 503, content=body)

    @app.get("/api/public/menu/{slug}", tags=["Public Menu"])
    async def get_public_menu(
        slug: str,
        lite: str | None = None,
        lazy: str | None = None,
        category_id: str | None = Query(None, alias="categoryId"),
        limit: str | None = None,
        table: str | None = None,
    ) -> JSONResponse:
        """Menu for a restaurant slug in full, lite or lazy mode.

        ``lazy=true&categoryId=...`` returns one category's products,
        ``lite=true`` caps products per category, anything else is the full menu.
        """
        mode = select_mode(parse_flag(lite), parse_flag(lazy), category_id)
        # limit only applies to lazy responses and is ignored otherwise
        data = await app.state.menu_service.get_menu(
            slug,
            mode,
            category_id=category_id,
            limit=parse_limit(limit) if mode is MenuMode.LAZY else None,
            table_number=table,
        )

        if isinstance(data, CategoryProductsData):
            return JSONResponse(CategoryProductsResponse(success=True, data=data).to_wire())
        return JSONResponse(MenuResponse(success=True, data=data).to_wire())

    @app.get("/api/public/product/{product_id}", tags=["Public Menu"])
    async def get_product_detail(product_id: str) -> JSONResponse:
        """Product detail with its owning category."""
        product = await app.state.menu_service.get_product_detail(product_id)
        return success(product.to_wire())

    @app.get("/api/public/slug-check", tags=["Public Menu"])
    async def check_slug(
        slug: str = "",
        exclude_id: str | None = Query(None, alias="excludeId"),
    ) -> JSONResponse:
        """Normalise a proposed slug and report whether it is free."""
        result = await app.state.menu_service.check_slug_availability(
            slug.strip(), exclude_id.strip() if exclude_id else None
        )
        return success(result.to_wire())

    @app.get("/admin/migrations", tags=["Migrations"])
    async def list_migrations(_api_key: str = Depends(require_api_key)) -> JSONResponse:
        """Applied and pending migrations."""
        runner: MigrationRunner = app.state.migration_runner
        try:
            applied = runner.applied()
            pending = runner.pending()
        except MigrationError as e:
            logger.error(str(e))
            return failure(500, "MIGRATION_LEDGER_UNAVAILABLE", str(e))

        return JSONResponse(
            {
                "applied": [entry.model_dump(mode="json") for entry in applied],
                "pending": [{"version": m.version, "description": m.description} for m in pending],
            }
        )

    @app.post("/admin/migrations/apply", tags=["Migrations"])
    async def apply_migrations(_api_key: str = Depends(require_api_key)) -> JSONResponse:
        """Apply every pending migration."""
        logger.info("Migration run triggered via admin API")
        try:
            recorded = app.state.migration_runner.apply_pending()
        except MigrationError as e:
            logger.error(str(e))
            return failure(500, "MIGRATION_FAILED", str(e))

        return success({"applied": [entry.model_dump(mode="json") for entry in recorded]})

    return app
