"""
Goong Geocoder Query Options

Options describe what to search for and turn into the API path and the
ordered list of query parameters. There are two kinds of options:

- ForwardGeocodeOptions: free-text query resolved via ``/Place/AutoComplete``
- ReverseGeocodeOptions: coordinate resolved via ``/Geocode``

Building path and parameters has no side effects.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Union

from .constants import (
    DEFAULT_RADIUS,
    ENDPOINT_AUTOCOMPLETE,
    ENDPOINT_GEOCODE,
    FORWARD_RESULT_COUNT,
    PARAM_INPUT,
    PARAM_LATLNG,
    PARAM_LIMIT,
    PARAM_LOCATION,
    PARAM_RADIUS,
    REVERSE_RESULT_COUNT,
)
from .models import Coordinate

QueryParams = List[Tuple[str, str]]
CoordinateLike = Union[Coordinate, Tuple[float, float]]


def _toCoordinate(value: CoordinateLike) -> Coordinate:
    latitude, longitude = value
    return Coordinate(float(latitude), float(longitude))


class GeocodeOptions(ABC):
    """Criteria for results returned by the Goong geocoding API, dood!

    Don't instantiate it directly, use ForwardGeocodeOptions or
    ReverseGeocodeOptions instead.

    Attributes:
        focalLocation: Location to prioritize results around (default: None)
        radius: Distance around focalLocation, sent only with focalLocation (default: 2500)
        maximumResultCount: Result limit, not sent when 0
    """

    def __init__(
        self,
        *,
        focalLocation: Optional[CoordinateLike] = None,
        radius: int = DEFAULT_RADIUS,
        maximumResultCount: int = 0,
    ) -> None:
        if maximumResultCount < 0:
            raise ValueError(f"maximumResultCount must be non-negative, got {maximumResultCount}")
        self.focalLocation: Optional[Coordinate] = _toCoordinate(focalLocation) if focalLocation is not None else None
        self.radius = radius
        self.maximumResultCount = maximumResultCount
        self._query = ""

    @property
    def query(self) -> str:
        """Query string sent to the API"""
        return self._query

    @property
    @abstractmethod
    def queryPath(self) -> str:
        """API path of the request"""
        raise NotImplementedError

    @property
    def params(self) -> QueryParams:
        """Ordered query parameters, without the access token."""
        params: QueryParams = []
        if self.focalLocation is not None:
            params.append((PARAM_LOCATION, f"{self.focalLocation.latitude},{self.focalLocation.longitude}"))
            params.append((PARAM_RADIUS, str(self.radius)))

        if self.maximumResultCount > 0:
            params.append((PARAM_LIMIT, str(self.maximumResultCount)))
        if self._query:
            params.append((PARAM_INPUT, self._query))

        return params

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.queryPath!r}, params={self.params!r})"


class ForwardGeocodeOptions(GeocodeOptions):
    """Forward geocoding: place name or address to place candidates.

    An empty query produces no ``input`` parameter; callers should not
    submit such requests.
    """

    def __init__(
        self,
        query: str,
        *,
        focalLocation: Optional[CoordinateLike] = None,
        radius: int = DEFAULT_RADIUS,
        maximumResultCount: int = FORWARD_RESULT_COUNT,
    ) -> None:
        super().__init__(focalLocation=focalLocation, radius=radius, maximumResultCount=maximumResultCount)
        self._query = query

    @property
    def queryPath(self) -> str:
        return ENDPOINT_AUTOCOMPLETE


class ReverseGeocodeOptions(GeocodeOptions):
    """Reverse geocoding: coordinate to place/address hierarchy.

    Only the ``latlng`` parameter is sent, focalLocation, radius and
    maximumResultCount are ignored.
    """

    def __init__(
        self,
        coordinate: CoordinateLike,
        *,
        focalLocation: Optional[CoordinateLike] = None,
        radius: int = DEFAULT_RADIUS,
        maximumResultCount: int = REVERSE_RESULT_COUNT,
    ) -> None:
        super().__init__(focalLocation=focalLocation, radius=radius, maximumResultCount=maximumResultCount)
        self.coordinate = _toCoordinate(coordinate)
        self._query = "%f,%f" % (self.coordinate.latitude, self.coordinate.longitude)

    @property
    def queryPath(self) -> str:
        return ENDPOINT_GEOCODE

    @property
    def params(self) -> QueryParams:
        return [(PARAM_LATLNG, self._query)]
