"""Helpers to parse Images API outputs and errors."""

from typing import Any, Dict, Mapping, Optional

from exceptions.exceptions import ImageServiceError

MALFORMED_RESPONSE_MESSAGE = "Invalid response format from image API"


def extract_b64_image(response: Any) -> str:
    """Return `data[0].b64_json` from an images response.

    Raises:
        ImageServiceError: If the response carries no base64 image payload.
    """
    data = getattr(response, "data", None)
    if not data:
        raise ImageServiceError(MALFORMED_RESPONSE_MESSAGE)
    b64_json = getattr(data[0], "b64_json", None)
    if not b64_json:
        raise ImageServiceError(MALFORMED_RESPONSE_MESSAGE)
    return b64_json


def extract_usage(response: Any) -> Optional[Dict[str, Any]]:
    """Return the usage record as a plain dict, if present."""
    usage = getattr(response, "usage", None)
    if usage is None:
        return None
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    if isinstance(usage, Mapping):
        return dict(usage)
    return {
        "input_tokens": getattr(usage, "input_tokens", None),
        "output_tokens": getattr(usage, "output_tokens", None),
        "total_tokens": getattr(usage, "total_tokens", None),
        "input_tokens_details": getattr(usage, "input_tokens_details", None),
    }


def extract_error_message(body: Any, status_code: Optional[int]) -> str:
    """Return the service's structured error message, or a generic HTTP error.

    The SDK hands over either the full `{"error": {...}}` body or the inner
    error object, so both shapes are accepted.
    """
    if isinstance(body, Mapping):
        nested = body.get("error")
        if isinstance(nested, Mapping) and nested.get("message"):
            return str(nested["message"])
        if body.get("message"):
            return str(body["message"])
    if status_code is not None:
        return f"HTTP error! status: {status_code}"
    return "HTTP error!"
