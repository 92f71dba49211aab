"""
Error types for the review scoring pipeline.

Each error carries a user-facing message that never includes the raw
upstream payload. Upstream HTTP failures are classified by status code.
"""

import json
from typing import Optional


class ReviewAnalysisError(Exception):
    """Base exception for review analysis failures."""

    transient = False


class ConfigurationError(ReviewAnalysisError):
    """Missing or invalid configuration (raised at construction time)."""


class TransportError(ReviewAnalysisError):
    """Network failure: connection refused, DNS failure, or timeout."""

    transient = True


class UpstreamError(ReviewAnalysisError):
    """Non-2xx response from the language model API."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class QuotaExceededError(UpstreamError):
    """429 caused by an exhausted billing quota."""


class RateLimitError(UpstreamError):
    transient = True


class AuthenticationError(UpstreamError):
    pass


class BadRequestError(UpstreamError):
    pass


class ServiceUnavailableError(UpstreamError):
    transient = True


class UpstreamServerError(UpstreamError):
    """500, 502 or 504 from the upstream service."""

    transient = True


def _upstream_error_message(body: Optional[str]) -> str:
    """Pull error.message out of an OpenAI-style error body, if any."""
    if not body:
        return ""
    try:
        details = json.loads(body)
    except ValueError:
        return body
    if isinstance(details, dict) and isinstance(details.get("error"), dict):
        return str(details["error"].get("message") or "")
    return ""


def error_for_status(
    status_code: int,
    body: Optional[str] = None,
    provider: str = "OpenAI"
) -> UpstreamError:
    """
    Build the classified error for an upstream HTTP status.

    Args:
        status_code: HTTP status returned by the API
        body: Raw response body (only inspected, never included in the message)
        provider: Vendor name used in the user-facing message

    Returns:
        UpstreamError subclass matching the status
    """
    upstream_message = _upstream_error_message(body).lower()

    if status_code == 429:
        if "quota" in upstream_message:
            return QuotaExceededError(
                f"{provider} quota exceeded. Please check your billing and usage limits.",
                status_code
            )
        return RateLimitError(
            f"{provider} rate limit exceeded. Please try again in a few moments.",
            status_code
        )

    if status_code == 401:
        return AuthenticationError(
            f"{provider} authentication failed. Please check your API key configuration.",
            status_code
        )

    if status_code == 400:
        return BadRequestError(
            f"Invalid request to {provider} API. Please contact support if this persists.",
            status_code
        )

    if status_code == 503:
        return ServiceUnavailableError(
            f"{provider} service is temporarily unavailable. Please try again later.",
            status_code
        )

    if status_code in (500, 502, 504):
        return UpstreamServerError(
            f"{provider} service error. Please try again in a few moments.",
            status_code
        )

    return UpstreamError(
        f"{provider} API error (HTTP {status_code}). "
        "Please try again or contact support if this persists.",
        status_code
    )


def classify_error(error: BaseException) -> str:
    """Short classification label used in log events."""
    if isinstance(error, QuotaExceededError):
        return "quota"
    if isinstance(error, RateLimitError):
        return "rate_limit"
    if isinstance(error, AuthenticationError):
        return "auth"
    if isinstance(error, BadRequestError):
        return "bad_request"
    if isinstance(error, ServiceUnavailableError):
        return "service_unavailable"
    if isinstance(error, UpstreamServerError):
        return "server_error"
    if isinstance(error, UpstreamError):
        return "upstream"
    if isinstance(error, TransportError):
        return "transport"
    if isinstance(error, ConfigurationError):
        return "configuration"
    return "unexpected"
