"""API key authentication for the admin endpoints.

Admin endpoints expect an ``X-API-Key`` header matching one of the keys
configured through ``ADMIN_API_KEY`` (comma separated).
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import Header, HTTPException


class APIKeyValidator:
    """Validates API keys against a fixed set."""

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with list of valid API keys.

        Args:
            api_keys: List of valid API key strings

        Raises:
            ValueError: If api_keys list is empty
        """
        if not api_keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = set(api_keys)

    def validate(self, api_key: str) -> bool:
        """Whether ``api_key`` is one of the configured keys."""
        return api_key in self.api_keys


def parse_api_keys(raw: str) -> list[str]:
    """Split a comma separated key list, dropping blanks."""
    return [key.strip() for key in raw.split(",") if key.strip()]


def api_key_dependency(validator: APIKeyValidator) -> Callable[..., str]:
    """Build a FastAPI dependency that enforces ``validator``.

    Returns:
        Dependency returning the validated key, raising 401 otherwise
    """

    def require_api_key(x_api_key: Annotated[str | None, Header()] = None) -> str:
        if not x_api_key:
            raise HTTPException(status_code=401, detail="Missing API key")

        if not validator.validate(x_api_key):
            raise HTTPException(status_code=401, detail="Invalid API key")

        return x_api_key

    return require_api_key
