"""Exceptions raised by the QR menu service and its client."""


class MenuError(Exception):
    """Base exception for public menu errors.

    Carries the failure code and HTTP status used to build the
    ``{success: false, error: {...}}`` envelope.
    """

    code = "MENU_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RestaurantNotFoundError(MenuError):
    """No active restaurant exists for the requested slug."""

    code = "RESTAURANT_NOT_FOUND"
    status_code = 404

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Restaurant '{slug}' not found")


class CategoryNotFoundError(MenuError):
    """The category does not exist under the requested restaurant."""

    code = "CATEGORY_NOT_FOUND"
    status_code = 404

    def __init__(self, slug: str, category_id: str) -> None:
        self.slug = slug
        self.category_id = category_id
        super().__init__(f"Category '{category_id}' not found for restaurant '{slug}'")


class ProductNotFoundError(MenuError):
    """No product exists for the requested id."""

    code = "PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product '{product_id}' not found")


class InvalidMenuRequestError(MenuError):
    """Query parameters could not be interpreted."""

    code = "INVALID_REQUEST"
    status_code = 400


class MenuStoreError(MenuError):
    """The backing store could not be read."""

    code = "STORE_UNAVAILABLE"
    status_code = 503


class MenuClientError(Exception):
    """Base exception for failures reported to menu client callers."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class MenuNotFoundError(MenuClientError):
    """The server reported an unknown restaurant, category or product."""


class MenuRequestRejectedError(MenuClientError):
    """The server rejected the request as invalid."""


class MenuServerError(MenuClientError):
    """The server reported a failure of its own."""


class MalformedMenuResponseError(MenuClientError):
    """A success body did not match the menu response schema."""


class MigrationError(Exception):
    """A data migration failed and its records were restored."""

    def __init__(self, version: str, message: str) -> None:
        self.version = version
        self.message = message
        super().__init__(f"Migration {version} failed: {message}")
