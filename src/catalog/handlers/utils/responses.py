"""
API Gateway response helpers.

All handlers build their responses here so that JSON encoding (including
Decimal values coming from the stores) and the error body shape stay uniform.
"""

import json
from decimal import Decimal
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import Response, content_types

from catalog.handlers.utils.errors import format_error_response, get_http_status_code


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(payload: Any) -> str:
    return json.dumps(payload, default=_json_default)


def json_response(status_code: int, payload: Any, headers: Optional[Dict[str, str]] = None) -> Response:
    """Create a JSON API Gateway response."""
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=to_json(payload),
        headers=headers,
    )


def empty_response(status_code: int = 204) -> Response:
    """Create a response without a body (204 No Content)."""
    return Response(status_code=status_code, content_type=None, body='')


def error_response(error: Exception) -> Response:
    """Map an exception to its canonical error response."""
    return json_response(get_http_status_code(error), format_error_response(error))
