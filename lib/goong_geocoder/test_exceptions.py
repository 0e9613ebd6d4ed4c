"""
Tests for Goong Geocoder errors and descriptive HTTP error building, dood!
"""

import datetime

import httpx
import pytest

from .exceptions import (
    APIStatusError,
    ConfigurationError,
    DecodingError,
    GeocoderError,
    HTTPError,
    TransportError,
    descriptiveError,
    unexpectedError,
)


def testErrorHierarchy():
    """Test every error is a GeocoderError."""
    for errorClass in (ConfigurationError, TransportError, DecodingError):
        error = errorClass("message", 7)
        assert isinstance(error, GeocoderError)
        assert str(error) == "message"
        assert error.code == 7
        assert error.underlyingError is None


def testApiStatusError():
    """Test status is kept verbatim with code -1."""
    error = APIStatusError("REQUEST_DENIED")

    assert str(error) == "REQUEST_DENIED"
    assert error.status == "REQUEST_DENIED"
    assert error.code == -1


def testUnexpectedError():
    """Test empty response error code."""
    error = unexpectedError()

    assert isinstance(error, TransportError)
    assert error.code == -1024


def testRateLimitError():
    """Test 429 with full rate limit headers."""
    headers = httpx.Headers(
        {
            "X-Rate-Limit-Limit": "600",
            "X-Rate-Limit-Interval": "60",
            "X-Rate-Limit-Reset": "1700000000",
        }
    )

    error = descriptiveError(429, headers)

    assert isinstance(error, HTTPError)
    assert error.statusCode == 429
    assert error.code == 429
    assert error.rateLimit == 600
    assert error.rateLimitInterval == 60.0
    assert error.rateLimitReset == datetime.datetime(2023, 11, 14, 22, 13, 20, tzinfo=datetime.timezone.utc)
    assert error.failureReason == (
        "More than 600 requests have been made with this access token within a period of 1 minute."
    )
    assert error.recoverySuggestion == "Wait until November 14, 2023 at 22:13:20 UTC before retrying."
    assert str(error) == f"{error.failureReason} {error.recoverySuggestion}"


def testRateLimitThousandsSeparator():
    """Test large limits are grouped and interval is spelled out."""
    headers = httpx.Headers({"x-rate-limit-limit": "100000", "x-rate-limit-interval": "5400"})

    error = descriptiveError(429, headers)

    assert error.failureReason == (
        "More than 100,000 requests have been made with this access token within a period of 1 hour, 30 minutes."
    )
    assert error.recoverySuggestion is None
    assert error.rateLimitReset is None


def testRateLimitWithoutHeaders():
    """Test 429 without headers falls back to reason phrase."""
    error = descriptiveError(429, httpx.Headers({"X-Rate-Limit-Limit": "abc"}))

    assert error.failureReason == "Too Many Requests"
    assert error.rateLimit is None
    assert str(error) == "Too Many Requests"


def testBodyMessage():
    """Test message from response body is used for other codes."""
    error = descriptiveError(401, httpx.Headers(), {"message": "Invalid API key"})

    assert error.failureReason == "Invalid API key"
    assert error.responseData == {"message": "Invalid API key"}
    assert error.recoverySuggestion is None


def testReasonPhraseFallback():
    """Test reason phrase is used when body has no message."""
    assert descriptiveError(404, httpx.Headers(), {"message": 1}).failureReason == "Not Found"
    assert descriptiveError(500, httpx.Headers()).failureReason == "Internal Server Error"
    assert descriptiveError(599, httpx.Headers()).failureReason == "HTTP error 599"


@pytest.mark.parametrize("interval", ["inf", "-inf", "nan", "-60"])
def testRateLimitInvalidInterval(interval):
    """Test non-finite or negative interval is ignored."""
    headers = httpx.Headers({"X-Rate-Limit-Limit": "600", "X-Rate-Limit-Interval": interval})

    error = descriptiveError(429, headers)

    assert error.rateLimit == 600
    assert error.rateLimitInterval is None
    assert error.failureReason == "Too Many Requests"


@pytest.mark.parametrize("reset", ["inf", "nan", "-1", "1e300"])
def testRateLimitInvalidReset(reset):
    """Test unusable reset timestamp gives no recovery suggestion."""
    error = descriptiveError(429, httpx.Headers({"X-Rate-Limit-Reset": reset}))

    assert error.rateLimitReset is None
    assert error.recoverySuggestion is None
