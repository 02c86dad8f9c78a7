"""AWS Lambda handler for API Gateway requests and scheduled warm-ups.

API Gateway requests go to the FastAPI app through the Mangum ASGI
adapter. EventBridge scheduled events keep the container warm: they open
the DynamoDB connection and return without touching FastAPI.
"""

import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_database, get_fastapi_app, initialize_lambda_environment

# Initialize Lambda environment during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    app = get_fastapi_app()
    mangum_handler = Mangum(app, lifespan="off")
else:
    app = None  # type: ignore
    mangum_handler = None  # type: ignore


def is_warmup_event(event: dict[str, Any]) -> bool:
    """Whether the event is an EventBridge scheduled warm-up ping.

    Args:
        event: The Lambda event payload

    Returns:
        True for ``aws.events`` scheduled events, False otherwise
    """
    return event.get("source") == "aws.events" and event.get("detail-type") == "Scheduled Event"


def handle_warmup_event() -> dict[str, Any]:
    """Warm the DynamoDB connection.

    Returns:
        Response dict with statusCode and body
    """
    if get_database().warmup():
        return {"statusCode": 200, "body": "warm"}

    return {"statusCode": 503, "body": "DynamoDB warmup failed"}


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point.

    Args:
        event: The Lambda event payload (API Gateway or scheduled event)
        context: The Lambda context object

    Returns:
        Response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        if is_warmup_event(event):
            logger.info("Processing scheduled warm-up event")
            return handle_warmup_event()

        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": '{"success": false, "error": {"code": "INTERNAL_ERROR", '
            '"message": "Internal server error"}}',
        }
