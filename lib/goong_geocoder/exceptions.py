"""
Goong Geocoder Exceptions

This module contains the exception classes surfaced by the Goong geocoding
client and the helper that turns a non-2xx HTTP response into a descriptive error.
"""

import datetime
import logging
import math
from typing import Any, Dict, Mapping, Optional

import httpx

from lib import utils

from .constants import (
    ERROR_CODE_API_STATUS,
    ERROR_CODE_UNEXPECTED,
    HEADER_RATE_LIMIT,
    HEADER_RATE_LIMIT_INTERVAL,
    HEADER_RATE_LIMIT_RESET,
)

logger = logging.getLogger(__name__)


class GeocoderError(Exception):
    """Base exception class for all Goong geocoder errors, dood!

    Attributes:
        message: Human-readable error message
        code: Numeric error code (if available)
        underlyingError: Original exception that caused this one (if any)
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        underlyingError: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.underlyingError = underlyingError
        logger.debug(f"{type(self).__name__}: {message} (code: {code})")

    def __str__(self) -> str:
        return self.message


class ConfigurationError(GeocoderError):
    """Raised when the client is misconfigured, e.g. no access token is given.

    Raised from the constructor, never from a request.
    """


class TransportError(GeocoderError):
    """Raised when no HTTP response was obtained.

    This covers connectivity failures, timeouts, cancelled requests and
    responses that carried no body at all.
    """


class DecodingError(GeocoderError):
    """Raised when a response body can't be decoded into the expected result."""


class APIStatusError(GeocoderError):
    """Raised when the response body carries a status other than ``"OK"``.

    The message is the status string exactly as sent by the server.
    """

    def __init__(self, status: str) -> None:
        super().__init__(status, ERROR_CODE_API_STATUS)
        self.status = status


class HTTPError(GeocoderError):
    """Raised for non-2xx HTTP responses.

    Attributes:
        statusCode: HTTP status code
        failureReason: Why the request failed
        recoverySuggestion: What the caller may do about it (if known)
        rateLimit: Maximum number of requests per interval (429 only)
        rateLimitInterval: Rate limit interval in seconds (429 only)
        rateLimitReset: Moment the rate limit resets (429 only)
        responseData: Parsed JSON body of the response (if any)
    """

    def __init__(
        self,
        statusCode: int,
        failureReason: str,
        recoverySuggestion: Optional[str] = None,
        *,
        rateLimit: Optional[int] = None,
        rateLimitInterval: Optional[float] = None,
        rateLimitReset: Optional[datetime.datetime] = None,
        responseData: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(failureReason, statusCode)
        self.statusCode = statusCode
        self.failureReason = failureReason
        self.recoverySuggestion = recoverySuggestion
        self.rateLimit = rateLimit
        self.rateLimitInterval = rateLimitInterval
        self.rateLimitReset = rateLimitReset
        self.responseData = responseData

    def __str__(self) -> str:
        if self.recoverySuggestion:
            return f"{self.failureReason} {self.recoverySuggestion}"
        return self.failureReason


def unexpectedError() -> TransportError:
    """Error for a response that arrived without any data and without an error."""
    return TransportError("unexpected error: response carried no data", ERROR_CODE_UNEXPECTED)


def _getRateLimit(headers: Mapping[str, str]) -> Optional[int]:
    value = headers.get(HEADER_RATE_LIMIT)
    if value is None:
        return None
    try:
        limit = int(value)
    except ValueError:
        return None
    return limit if limit >= 0 else None


def _getRateLimitInterval(headers: Mapping[str, str]) -> Optional[float]:
    value = headers.get(HEADER_RATE_LIMIT_INTERVAL)
    if value is None:
        return None
    try:
        interval = float(value)
    except ValueError:
        return None
    return interval if math.isfinite(interval) and interval >= 0 else None


def _getRateLimitReset(headers: Mapping[str, str]) -> Optional[datetime.datetime]:
    value = headers.get(HEADER_RATE_LIMIT_RESET)
    if value is None:
        return None
    try:
        timestamp = float(value)
    except ValueError:
        return None
    if not math.isfinite(timestamp) or timestamp < 0:
        return None
    try:
        return datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def descriptiveError(
    statusCode: int,
    headers: Mapping[str, str],
    responseData: Optional[Dict[str, Any]] = None,
) -> HTTPError:
    """Build an HTTPError with a human-readable reason for a non-2xx response, dood!

    For 429 the rate limit headers are used to explain the limit and to suggest
    when to retry. For other codes the ``message`` field of the body is used.
    The standard HTTP reason phrase is the fallback.

    Args:
        statusCode: HTTP status code
        headers: Response headers (case-insensitive mapping, e.g. httpx.Headers)
        responseData: Parsed JSON body (if it was a JSON object)

    Returns:
        HTTPError instance describing the failure
    """
    failureReason: Optional[str] = None
    recoverySuggestion: Optional[str] = None
    rateLimit: Optional[int] = None
    rateLimitInterval: Optional[float] = None
    rateLimitReset: Optional[datetime.datetime] = None

    if statusCode == 429:
        rateLimit = _getRateLimit(headers)
        rateLimitInterval = _getRateLimitInterval(headers)
        rateLimitReset = _getRateLimitReset(headers)
        if rateLimit is not None and rateLimitInterval is not None:
            failureReason = (
                f"More than {rateLimit:,} requests have been made with this access token "
                f"within a period of {utils.formatDuration(rateLimitInterval)}."
            )
        if rateLimitReset is not None:
            recoverySuggestion = f"Wait until {rateLimitReset.strftime('%B %d, %Y at %H:%M:%S %Z')} before retrying."
    elif responseData is not None:
        message = responseData.get("message")
        if isinstance(message, str):
            failureReason = message

    if failureReason is None:
        failureReason = httpx.codes.get_reason_phrase(statusCode) or f"HTTP error {statusCode}"

    return HTTPError(
        statusCode,
        failureReason,
        recoverySuggestion,
        rateLimit=rateLimit,
        rateLimitInterval=rateLimitInterval,
        rateLimitReset=rateLimitReset,
        responseData=responseData,
    )
