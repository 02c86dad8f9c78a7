"""Custom metrics for the QR menu service."""

from opentelemetry import metrics

meter = metrics.get_meter("qr-menu-svc")

menu_requests_counter = meter.create_counter(
    name="menu_requests_total",
    description="Public menu requests served, by mode",
    unit="1",
)

menu_failures_counter = meter.create_counter(
    name="menu_failures_total",
    description="Public menu requests that failed, by error code",
    unit="1",
)

products_served_histogram = meter.create_histogram(
    name="menu_products_served",
    description="Products serialized per public menu response, by mode",
    unit="1",
)

client_duration_histogram = meter.create_histogram(
    name="menu_client_duration_seconds",
    description="Duration of menu client calls, by operation",
    unit="s",
)


def record_menu_request(mode: str, products_shown: int) -> None:
    """Record a served menu response.

    Args:
        mode: Response mode ("full", "lite" or "lazy")
        products_shown: Products serialized in the response
    """
    menu_requests_counter.add(1, {"mode": mode})
    products_served_histogram.record(products_shown, {"mode": mode})


def record_menu_failure(error_code: str) -> None:
    """Record a failed menu request.

    Args:
        error_code: Failure code returned in the envelope
    """
    menu_failures_counter.add(1, {"error_code": error_code})


def record_client_call(operation: str, duration_seconds: float) -> None:
    """Record a menu client call.

    Args:
        operation: Client operation (e.g., "get_menu_lite")
        duration_seconds: Duration in seconds
    """
    client_duration_histogram.record(duration_seconds, {"operation": operation})
