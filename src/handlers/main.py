"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One function serves the webhook handshake, inbound events and health check so
the customer-state and geocoding caches stay warm across all of them.
"""

from typing import Callable, Tuple

from utils.error_handling import NotFoundError, to_response
from utils.logging_config import get_logger

from . import health_check, webhook

logger = get_logger(__name__)


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event carries the HTTP method and path; exact route keys are matched
    against the table below.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path.rstrip('/') or '/'}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("GET /webhook", webhook.verify_handler),
        ("POST /webhook", webhook.lambda_handler),
    )

    for key, handler in route_table:
        if route_key == key:
            return handler(event, context)

    logger.info("No route matched", extra={"route": route_key})
    return to_response(NotFoundError("Route not found"))
