"""AWS Lambda handler for the storefront behind API Gateway.

The FastAPI application is wrapped with the Mangum ASGI adapter and built
once per cold start.
"""

import logging
import os
from typing import Any

from mangum import Mangum

from main import create_application

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    mangum_handler = Mangum(create_application(), lifespan="off")
else:
    mangum_handler = None  # type: ignore


def is_api_gateway_event(event: dict[str, Any]) -> bool:
    """Determine if the event is an API Gateway HTTP request.

    Args:
        event: The Lambda event payload

    Returns:
        True if this is an API Gateway REST or HTTP API event, False otherwise
    """
    request_context = event.get("requestContext")
    if not isinstance(request_context, dict):
        return False
    return "http" in request_context or "httpMethod" in event


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point routing API Gateway requests to the storefront.

    Args:
        event: The Lambda event payload
        context: The Lambda context object

    Returns:
        Response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {getattr(context, 'aws_request_id', None)}")

    if not is_api_gateway_event(event):
        logger.warning("Unsupported Lambda event, expected an API Gateway request")
        return {"statusCode": 400, "body": "Unsupported event type"}

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": "Internal server error",
        }
