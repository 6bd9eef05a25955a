"""Decode the Prometheus API response envelope."""

import json
from dataclasses import dataclass, field
from typing import Any

from prometheus_metrics.errors import ServerError, TransportError

PREVIEW_CHARS = 200


@dataclass
class ApiResponse:
    status: str
    data: Any = None
    error_type: str | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)


def preview(text: str) -> str:
    return text[:PREVIEW_CHARS]


def parse_envelope(body: str) -> ApiResponse:
    """Parse a body into an ApiResponse without judging its status.

    Raises:
        TransportError: Body is not JSON or not an API envelope.
    """
    try:
        payload = json.loads(body)
    except ValueError:
        raise TransportError(
            f"failed to parse response as JSON: {preview(body)}", body=body
        ) from None

    if not isinstance(payload, dict) or not isinstance(payload.get("status"), str):
        raise TransportError(
            f"malformed response body, missing status: {preview(body)}", body=body
        )

    warnings = payload.get("warnings") or []
    if not isinstance(warnings, list):
        warnings = [warnings]

    return ApiResponse(
        status=payload["status"],
        data=payload.get("data"),
        error_type=payload.get("errorType"),
        error=payload.get("error"),
        warnings=[str(w) for w in warnings],
    )


def raise_for_api_error(response: ApiResponse) -> ApiResponse:
    """Turn a non-success envelope into a ServerError, verbatim."""
    if response.status != "success":
        error_type = response.error_type or "unknown"
        error = response.error or "unknown error"
        raise ServerError(f"API error ({error_type}): {error}", error_type=error_type)
    return response


def decode_response(body: str) -> ApiResponse:
    """Parse a 2xx body and require ``status: "success"``.

    Returns:
        The decoded envelope; ``data`` is left as plain JSON values.
    """
    return raise_for_api_error(parse_envelope(body))
