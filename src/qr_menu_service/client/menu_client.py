"""Async client for the public menu endpoint.

Front ends call ``get_menu_lite`` for a fast first paint, then either
``get_menu_full`` or ``get_category_products`` for the categories the
visitor opens. Each call is an independent GET; the client holds no
mutable state between calls and is safe to share between tasks.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from qr_menu_service.exceptions import (
    MalformedMenuResponseError,
    MenuClientError,
    MenuNotFoundError,
    MenuRequestRejectedError,
    MenuServerError,
)
from qr_menu_service.models.menu_models import CategoryProductsData, MenuData
from qr_menu_service.observability import traced
from qr_menu_service.observability.metrics import record_client_call

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT_SECONDS = 10.0

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class MenuResult(Generic[T]):
    """Outcome of a menu call that reached the server.

    Exactly one of ``payload`` and ``error`` is set.

    Attributes:
        payload: Parsed ``data`` of a successful response
        error: Typed failure for a ``success: false`` or non-2xx response
    """

    payload: T | None = None
    error: MenuClientError | None = None

    @classmethod
    def success(cls, payload: T) -> "MenuResult[T]":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: MenuClientError) -> "MenuResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the payload or raise the typed failure."""
        if self.error is not None:
            raise self.error
        return self.payload  # type: ignore[return-value]


def resolve_base_url(base_url: str | None = None) -> str:
    """Explicit URL first, then NEXT_PUBLIC_API_URL, QR_MENU_API_URL, localhost."""
    url = (
        base_url
        or os.getenv("NEXT_PUBLIC_API_URL")
        or os.getenv("QR_MENU_API_URL")
        or DEFAULT_BASE_URL
    )
    return url.rstrip("/")


def failure_from_body(status_code: int, body: dict[str, Any]) -> MenuClientError:
    """Build the typed error for a failed response body.

    Both ``{"error": {"code", "message"}}`` and a flat ``{"message"}`` body
    are understood.
    """
    error = body.get("error")
    code = None
    message = None

    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message")
    elif isinstance(error, str):
        message = error

    # bodies from proxies or other servers may carry non-string fields
    if not isinstance(code, str):
        code = None
    if not isinstance(message, str):
        message = body.get("message") if isinstance(body.get("message"), str) else None

    message = message or f"Menu request failed with HTTP {status_code}"

    if status_code == 404 or (code and code.endswith("NOT_FOUND")):
        return MenuNotFoundError(message, status_code=status_code, code=code)
    if status_code >= 500:
        return MenuServerError(message, status_code=status_code, code=code)
    return MenuRequestRejectedError(message, status_code=status_code, code=code)


class QRMenuClient:
    """HTTP client for the public menu endpoint.

    Transport errors (including timeouts) and unparseable JSON are logged
    and re-raised unchanged. Responses that reach the server come back as
    a MenuResult decided by both the HTTP status and the ``success`` field.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL; see resolve_base_url for the fallbacks
            timeout: Seconds before a request fails with httpx.TimeoutException
            transport: Optional httpx transport, e.g. an ASGITransport in tests
        """
        self.base_url = resolve_base_url(base_url)
        if timeout is None:
            timeout = float(os.getenv("QR_MENU_CLIENT_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)))
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "QRMenuClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _menu_url(self, slug: str) -> str:
        return f"{self.base_url}/api/public/menu/{quote(slug, safe='')}"

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, params=params)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.get(url, params=params)

    async def _fetch(
        self,
        operation: str,
        label: str,
        url: str,
        params: dict[str, str],
        model: type[ModelT],
    ) -> MenuResult[ModelT]:
        start = time.monotonic()

        try:
            response = await self._get(url, params)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[QR-CLIENT] {label} load failed: {e}")
            raise
        finally:
            duration = time.monotonic() - start
            record_client_call(operation, duration)

        logger.info(f"[QR-CLIENT] {label} loaded in {int(duration * 1000)}ms")

        if not isinstance(body, dict):
            raise MalformedMenuResponseError(
                f"Expected a JSON object, got {type(body).__name__}",
                status_code=response.status_code,
            )

        if not response.is_success or body.get("success") is not True:
            error = failure_from_body(response.status_code, body)
            logger.warning(f"[QR-CLIENT] {label} rejected: {error.message}")
            return MenuResult.failure(error)

        try:
            payload = model.model_validate(body.get("data"))
        except ValidationError as e:
            logger.error(f"[QR-CLIENT] {label} response did not match schema: {e}")
            raise MalformedMenuResponseError(
                f"Malformed {label.lower()} response", status_code=response.status_code
            ) from e

        return MenuResult.success(payload)

    @traced("menu_client.get_menu_lite")
    async def get_menu_lite(self, slug: str) -> MenuResult[MenuData]:
        """Fetch the lite menu: every category with a capped product slice.

        Args:
            slug: Restaurant slug

        Returns:
            MenuResult with MenuData whose ``meta.is_lite_mode`` is True

        Raises:
            ValueError: If slug is empty
            httpx.HTTPError: On transport failure or timeout
            MalformedMenuResponseError: If a success body does not parse
        """
        if not slug:
            raise ValueError("slug must not be empty")

        logger.info(f"[QR-CLIENT] Loading lite menu for {slug}...")
        result = await self._fetch(
            "get_menu_lite", "Lite menu", self._menu_url(slug), {"lite": "true"}, MenuData
        )

        if result.ok and (result.payload.meta is None or not result.payload.meta.is_lite_mode):
            logger.warning(f"[QR-CLIENT] Lite menu for {slug} was not served in lite mode")

        return result

    @traced("menu_client.get_menu_full")
    async def get_menu_full(self, slug: str) -> MenuResult[MenuData]:
        """Fetch the full menu with every product of every category.

        Raises:
            ValueError: If slug is empty
            httpx.HTTPError: On transport failure or timeout
            MalformedMenuResponseError: If a success body does not parse
        """
        if not slug:
            raise ValueError("slug must not be empty")

        logger.info(f"[QR-CLIENT] Loading full menu for {slug}...")
        return await self._fetch("get_menu_full", "Full menu", self._menu_url(slug), {}, MenuData)

    @traced("menu_client.get_category_products")
    async def get_category_products(
        self, slug: str, category_id: str, limit: int | None = None
    ) -> MenuResult[CategoryProductsData]:
        """Fetch one category's products, optionally limited.

        ``limit`` is sent only when truthy.

        Raises:
            ValueError: If slug or category_id is empty
            httpx.HTTPError: On transport failure or timeout
            MalformedMenuResponseError: If a success body does not parse
        """
        if not slug:
            raise ValueError("slug must not be empty")
        if not category_id:
            raise ValueError("category_id must not be empty")

        params = {"lazy": "true", "categoryId": category_id}
        if limit:
            params["limit"] = str(limit)

        logger.info(f"[QR-CLIENT] Loading category {category_id} products...")
        return await self._fetch(
            "get_category_products",
            "Category products",
            self._menu_url(slug),
            params,
            CategoryProductsData,
        )
