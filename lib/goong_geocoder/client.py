"""
Goong Geocoder Async Client

This module provides the main GoongGeocoder class for interacting with the
Goong Geocoding and Autocomplete APIs (rsapi.goong.io): forward geocoding,
reverse geocoding and place details.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Coroutine, Dict, Optional, Set, TypeVar

import httpx

from .constants import (
    API_SCHEME,
    DEFAULT_HOST,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    ENDPOINT_PLACE_DETAIL,
    ERROR_CODE_UNEXPECTED,
    PARAM_API_KEY,
    PARAM_PLACE_ID,
    STATUS_OK,
)
from .exceptions import (
    APIStatusError,
    ConfigurationError,
    DecodingError,
    GeocoderError,
    TransportError,
    descriptiveError,
    unexpectedError,
)
from .models import GeocodeResult, PlaceDetailResult
from .options import GeocodeOptions

logger = logging.getLogger(__name__)

R = TypeVar("R")

CompletionHandler = Callable[[Optional[R], Optional[GeocoderError]], None]
"""Called once with either ``(result, None)`` or ``(None, error)``"""


class GoongGeocoder:
    """Async client for Goong Geocoding and Autocomplete APIs, dood!

    Configuration is read-only after construction, so one instance may be
    shared by any number of concurrent requests. A new HTTP session is
    created for each request.

    Example:
        >>> from lib.goong_geocoder import ForwardGeocodeOptions, GoongGeocoder, ReverseGeocodeOptions
        >>>
        >>> geocoder = GoongGeocoder(accessToken="your_api_key")
        >>>
        >>> # Forward geocoding (autocomplete)
        >>> result = await geocoder.geocode(ForwardGeocodeOptions("91 Trung Kinh"))
        >>>
        >>> # Reverse geocoding
        >>> result = await geocoder.geocode(ReverseGeocodeOptions((21.0137, 105.7983)))
        >>>
        >>> # Place details
        >>> detail = await geocoder.fetchPlace(result.predictions[0].placeID)

    Attributes:
        accessToken: Goong API key
        host: API host name (default: rsapi.goong.io)
        apiEndpoint: Base URL all request paths are appended to
        requestTimeout: HTTP request timeout in seconds (default: 10)
        userAgent: Value of User-Agent header
        transport: Optional httpx transport used for requests
    """

    __slots__ = (
        "accessToken",
        "host",
        "apiEndpoint",
        "requestTimeout",
        "userAgent",
        "transport",
        "_pendingTasks",
    )

    def __init__(
        self,
        accessToken: Optional[str],
        host: Optional[str] = None,
        *,
        requestTimeout: float = DEFAULT_TIMEOUT,
        userAgent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize Goong geocoder.

        Args:
            accessToken: Goong API key (required)
            host: API host name, or full base URL with scheme (default: rsapi.goong.io)
            requestTimeout: HTTP request timeout in seconds (default: 10)
            userAgent: Value of User-Agent header
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)

        Raises:
            ConfigurationError: If accessToken is missing or empty
        """
        if not accessToken or not accessToken.strip():
            raise ConfigurationError(
                "A Goong API key is required. Get one at https://account.goong.io "
                "and set it in [goong] api-key config option or pass it to GoongGeocoder."
            )

        self.accessToken = accessToken.strip()
        self.host = host or DEFAULT_HOST
        if "://" in self.host:
            self.apiEndpoint = self.host.rstrip("/")
        else:
            self.apiEndpoint = f"{API_SCHEME}://{self.host}"
        self.requestTimeout = requestTimeout
        self.userAgent = userAgent
        self.transport = transport
        # Event loop keeps only weak references to tasks
        self._pendingTasks: Set["asyncio.Task[Any]"] = set()

        logger.debug(f"GoongGeocoder initialized for {self.apiEndpoint}")

    @classmethod
    def fromConfig(
        cls,
        config: Dict[str, Any],
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GoongGeocoder":
        """Create geocoder from ``[goong]`` config section.

        Recognized keys: ``api-key`` (required), ``host``, ``request-timeout``,
        ``user-agent``.

        Raises:
            ConfigurationError: If api-key is missing or empty
        """
        return cls(
            config.get("api-key"),
            config.get("host"),
            requestTimeout=config.get("request-timeout", DEFAULT_TIMEOUT),
            userAgent=config.get("user-agent", DEFAULT_USER_AGENT),
            transport=transport,
        )

    def buildGeocodeUrl(self, options: GeocodeOptions) -> httpx.URL:
        """URL used to geocode given options.

        The access token is always appended after the options' own parameters.
        """
        params = options.params + [(PARAM_API_KEY, self.accessToken)]
        return httpx.URL(self.apiEndpoint + options.queryPath, params=params)

    def buildPlaceDetailUrl(self, placeID: str) -> httpx.URL:
        """URL used to fetch details of place with given identifier."""
        params = [(PARAM_API_KEY, self.accessToken), (PARAM_PLACE_ID, placeID)]
        return httpx.URL(self.apiEndpoint + ENDPOINT_PLACE_DETAIL, params=params)

    async def geocode(self, options: GeocodeOptions) -> GeocodeResult:
        """Forward or reverse geocoding depending on options type, dood!

        Args:
            options: ForwardGeocodeOptions or ReverseGeocodeOptions

        Returns:
            GeocodeResult with ``predictions`` for forward and ``placemarks``
            for reverse geocoding

        Raises:
            TransportError: No response was obtained
            HTTPError: Server replied with non-2xx status
            DecodingError: Response body couldn't be decoded
            APIStatusError: Response status isn't "OK"
        """
        data = await self._makeRequest(self.buildGeocodeUrl(options))
        return GeocodeResult.fromDict(data)

    async def fetchPlace(self, placeID: str) -> PlaceDetailResult:
        """Fetch place details by place identifier.

        Args:
            placeID: Place identifier (prediction ``placeID`` or child ``pid``)

        Returns:
            PlaceDetailResult holding the resolved Placemark

        Raises:
            Same errors as geocode()
        """
        data = await self._makeRequest(self.buildPlaceDetailUrl(placeID))
        return PlaceDetailResult.fromDict(data)

    def geocodeWithCompletion(
        self,
        options: GeocodeOptions,
        completionHandler: CompletionHandler[GeocodeResult],
    ) -> "asyncio.Task[GeocodeResult]":
        """Schedule geocode() and report its outcome to completionHandler.

        Must be called from a running event loop, the handler is invoked on
        that loop. The returned task may be dropped, the client keeps it alive
        until the handler has run. Cancel it if the result is no longer needed:
        the handler then receives TransportError.
        """
        return self._runWithCompletion(self.geocode(options), completionHandler)

    def fetchPlaceWithCompletion(
        self,
        placeID: str,
        completionHandler: CompletionHandler[PlaceDetailResult],
    ) -> "asyncio.Task[PlaceDetailResult]":
        """Schedule fetchPlace() and report its outcome to completionHandler.

        Same delivery rules as geocodeWithCompletion().
        """
        return self._runWithCompletion(self.fetchPlace(placeID), completionHandler)

    def _runWithCompletion(
        self,
        coro: Coroutine[Any, Any, R],
        completionHandler: CompletionHandler[R],
    ) -> "asyncio.Task[R]":
        task = asyncio.get_running_loop().create_task(coro)
        self._pendingTasks.add(task)
        task.add_done_callback(functools.partial(self._deliverCompletion, completionHandler))
        task.add_done_callback(self._pendingTasks.discard)
        return task

    @staticmethod
    def _deliverCompletion(completionHandler: CompletionHandler[R], task: "asyncio.Task[R]") -> None:
        result: Optional[R] = None
        error: Optional[GeocoderError] = None

        if task.cancelled():
            error = TransportError("Request was cancelled", underlyingError=asyncio.CancelledError())
        else:
            exc = task.exception()
            if exc is None:
                result = task.result()
            elif isinstance(exc, GeocoderError):
                error = exc
            else:
                logger.error(f"Unexpected error during API request: {type(exc).__name__}#{exc}", exc_info=exc)
                error = GeocoderError(f"Unexpected error: {type(exc).__name__}#{exc}", ERROR_CODE_UNEXPECTED, exc)

        try:
            completionHandler(result, error)
        except Exception as e:
            logger.error(f"Completion handler failed: {type(e).__name__}#{e}")
            logger.exception(e)

    def _redactUrl(self, url: httpx.URL) -> httpx.URL:
        return url.copy_set_param(PARAM_API_KEY, "***")

    async def _makeRequest(self, url: httpx.URL) -> Dict[str, Any]:
        """Make GET request to Goong API and return parsed body, dood!

        Single point for all HTTP requests. Creates new session per request.

        Args:
            url: Full request URL, access token included

        Returns:
            Response body parsed as JSON object, with status "OK" or without status

        Raises:
            TransportError: Timeout, network error or empty body
            HTTPError: Non-2xx response
            DecodingError: Body isn't a JSON object
            APIStatusError: Body status isn't "OK"
        """
        logger.debug(f"Making request to {self._redactUrl(url)}")

        try:
            async with httpx.AsyncClient(timeout=self.requestTimeout, transport=self.transport) as session:
                response = await session.get(url, headers={"User-Agent": self.userAgent})
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {e}")
            raise TransportError(f"Request timeout: {e}", underlyingError=e)
        except httpx.RequestError as e:
            logger.error(f"Network error: {type(e).__name__}#{e}")
            raise TransportError(f"Network error: {e}", underlyingError=e)
        except httpx.HTTPError as e:
            logger.error(f"HTTP transport error: {type(e).__name__}#{e}")
            raise TransportError(f"HTTP transport error: {e}", underlyingError=e)

        if not response.is_success:
            responseData: Optional[Dict[str, Any]] = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    responseData = body
            except ValueError:
                pass
            error = descriptiveError(response.status_code, response.headers, responseData)
            logger.error(f"API request failed: {response.status_code} {error}")
            raise error

        if not response.content:
            logger.error(f"Empty response body, status: {response.status_code}")
            raise unexpectedError()

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            raise DecodingError(f"Failed to parse JSON response: {e}", underlyingError=e)

        if not isinstance(data, dict):
            logger.error(f"Unexpected response type: {type(data).__name__}")
            raise DecodingError(f"Response must be a JSON object, got {type(data).__name__}")

        status = data.get("status")
        if isinstance(status, str):
            if status != STATUS_OK:
                logger.warning(f"API returned status {status}")
                raise APIStatusError(status)
        elif status is not None:
            logger.warning(f"API returned non-string status {status!r}, treating response as successful")

        logger.debug(f"API request successful: {response.status_code}")
        return data
