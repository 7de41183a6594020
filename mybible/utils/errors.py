# mybible/utils/errors.py
"""
Standardized API error responses.

All errors follow the format: {"error": "error_code", "detail": "optional message"}

Error codes should be:
- snake_case
- descriptive but concise
- machine-parseable (no spaces or special chars)
"""

from flask import jsonify
from typing import Optional


def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# Validation (400)
def missing_parameter(name: str):
    """Required query parameter is missing."""
    return error_response("missing_parameter", 400, f"Missing required parameter: {name}", parameter=name)


def invalid_reference(error):
    """Citation could not be parsed. `error` is a ParseError."""
    return error_response(
        "invalid_reference",
        400,
        str(error),
        kind=error.kind.value,
        token=error.token,
        position=error.position,
    )


# Not Found (404)
def not_found(resource: str = "resource", detail: str = None):
    """Requested resource does not exist."""
    return error_response("not_found", 404, detail or f"{resource} not found")


# Unavailable (503)
def index_unavailable(detail: str = None):
    """Module could not be indexed."""
    return error_response("index_unavailable", 503, detail)
