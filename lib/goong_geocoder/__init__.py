"""
Goong Geocoder Client Library

This module provides a Python async client for the Goong Geocoding and
Autocomplete APIs (rsapi.goong.io) with typed result models and
classified errors.

Example usage:
    from lib.goong_geocoder import ForwardGeocodeOptions, GoongGeocoder, ReverseGeocodeOptions

    geocoder = GoongGeocoder(accessToken="your_api_key")

    # Forward geocoding (autocomplete predictions)
    result = await geocoder.geocode(ForwardGeocodeOptions("91 Trung Kinh"))

    # Reverse geocoding
    result = await geocoder.geocode(ReverseGeocodeOptions((21.0137, 105.7983)))

    # Place details
    detail = await geocoder.fetchPlace(result.placemarks[0].placeID)
"""

from .autocomplete import AutocompleteDelegate, AutocompleteSession
from .client import CompletionHandler, GoongGeocoder
from .exceptions import (
    APIStatusError,
    ConfigurationError,
    DecodingError,
    GeocoderError,
    HTTPError,
    TransportError,
    descriptiveError,
)
from .json_value import JSONKind, JSONValue
from .models import (
    Child,
    Coordinate,
    GeocodeResult,
    PlaceDetailResult,
    Placemark,
    Prediction,
    StructuredFormatting,
)
from .options import ForwardGeocodeOptions, GeocodeOptions, ReverseGeocodeOptions

__all__ = [
    "GoongGeocoder",
    "CompletionHandler",
    "AutocompleteSession",
    "AutocompleteDelegate",
    "GeocodeOptions",
    "ForwardGeocodeOptions",
    "ReverseGeocodeOptions",
    "Coordinate",
    "Placemark",
    "PlaceDetailResult",
    "GeocodeResult",
    "Prediction",
    "Child",
    "StructuredFormatting",
    "JSONValue",
    "JSONKind",
    "GeocoderError",
    "ConfigurationError",
    "TransportError",
    "DecodingError",
    "APIStatusError",
    "HTTPError",
    "descriptiveError",
]
