"""
Unit tests for upstream error classification.
"""

import json

import pytest

from nullfake.errors import (
    AuthenticationError,
    BadRequestError,
    QuotaExceededError,
    RateLimitError,
    ServiceUnavailableError,
    TransportError,
    UpstreamError,
    UpstreamServerError,
    classify_error,
    error_for_status,
)


@pytest.mark.parametrize("status,error_type,transient", [
    (400, BadRequestError, False),
    (401, AuthenticationError, False),
    (429, RateLimitError, True),
    (500, UpstreamServerError, True),
    (502, UpstreamServerError, True),
    (503, ServiceUnavailableError, True),
    (504, UpstreamServerError, True),
])
def test_status_mapping(status, error_type, transient):
    error = error_for_status(status)

    assert type(error) is error_type
    assert error.status_code == status
    assert error.transient is transient


def test_unknown_status_is_generic_upstream_error():
    error = error_for_status(418)

    assert type(error) is UpstreamError
    assert "HTTP 418" in str(error)
    assert classify_error(error) == "upstream"


def test_quota_detected_from_error_body():
    body = json.dumps({"error": {"message": "You exceeded your current quota, please check your plan"}})

    error = error_for_status(429, body)

    assert isinstance(error, QuotaExceededError)
    assert not error.transient
    assert "quota exceeded" in str(error)
    assert "check your plan" not in str(error)


def test_provider_name_in_message():
    assert str(error_for_status(401, provider="Gemini")).startswith("Gemini authentication failed")


def test_classify_error_labels():
    assert classify_error(TransportError("x")) == "transport"
    assert classify_error(error_for_status(429)) == "rate_limit"
    assert classify_error(error_for_status(401)) == "auth"
    assert classify_error(ValueError("x")) == "unexpected"


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
