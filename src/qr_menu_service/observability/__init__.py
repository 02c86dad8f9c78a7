"""OpenTelemetry instrumentation and logging setup."""

from qr_menu_service.observability.config import configure_logging, setup_observability
from qr_menu_service.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
