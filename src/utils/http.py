"""Helpers for API Gateway HTTP API proxy events and responses."""

import json
import uuid
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from utils.error_handling import AppError, ValidationError, to_response


def _jsonable(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True)
    if isinstance(body, list):
        return [_jsonable(item) for item in body]
    return body


def json_response(status: int, body: Any) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(_jsonable(body), default=str),
    }


def parse_json_body(event: Dict) -> Dict:
    """Decode the JSON body, rejecting anything that is not an object."""
    try:
        payload = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Malformed JSON body: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def path_param(event: Dict, name: str) -> Optional[str]:
    """Read a path parameter, tolerating a null pathParameters block."""
    return (event.get("pathParameters") or {}).get(name)


def query_param(event: Dict, name: str) -> Optional[str]:
    """Read a query string parameter."""
    return (event.get("queryStringParameters") or {}).get(name)


def first_error_message(exc) -> str:
    """Turn a pydantic ValidationError into a single human-readable reason."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    message = errors[0].get("msg", "Invalid request")
    # pydantic prefixes messages raised from validators.
    return message.removeprefix("Value error, ")


def http_method(event: Dict) -> str:
    return event.get("requestContext", {}).get("http", {}).get("method", "").upper()


def run_handler(operation: str, action: Callable[[], Dict], logger) -> Dict:
    """
    Shared error boundary for handlers.

    Known failures carry their own status and reason; anything else is logged
    with a correlation id and reported as a generic 500.
    """
    try:
        return action()
    except AppError as exc:
        return to_response(exc)
    except PydanticValidationError as exc:
        return json_response(400, {"error": first_error_message(exc), "status": "error"})
    except Exception:
        correlation_id = str(uuid.uuid4())
        logger.exception(f"Failed to {operation}", extra={"correlation_id": correlation_id})
        return json_response(
            500,
            {"error": f"Failed to {operation}", "status": "error", "correlation_id": correlation_id},
        )
