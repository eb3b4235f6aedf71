"""Shared utilities for FastAPI routes."""

from collections.abc import Mapping

from fastapi import status
from fastapi.responses import JSONResponse

SENSITIVE_HEADERS = {"x-api-key", "authorization"}


def error_response(
    error: str, details: str | None = None, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
) -> JSONResponse:
    """Uniform `{error, details}` failure body."""
    content: dict[str, str] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def redact_sensitive_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Redact auth-bearing headers before logging.
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and value:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted
