"""
Goong Geocoder Data Models

This module defines the typed records decoded from Goong API responses:
autocomplete predictions with their child suggestions, placemarks and the
top-level result envelopes.

Decoding is best-effort: an optional field that is missing or has the wrong
type becomes ``None`` without affecting its siblings. Only required fields
(``Placemark.name``) raise DecodingError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

from .exceptions import DecodingError
from .json_value import JSONValue, decodeJSONValueList

logger = logging.getLogger(__name__)


def _optionalStr(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _optionalFloat(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _optionalBool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    return value if isinstance(value, bool) else None


def _optionalStrList(data: Dict[str, Any], key: str) -> Optional[List[str]]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return list(value)


def _optionalDict(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = data.get(key)
    return value if isinstance(value, dict) else None


def _dropNone(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


class Coordinate(NamedTuple):
    """Latitude/longitude pair, dood!"""

    latitude: float
    longitude: float

    @classmethod
    def fromGeometry(cls, geometry: Dict[str, Any]) -> "Coordinate":
        """Read ``{"location": {"lat": _, "lng": _}}``, (0, 0) if location is incomplete."""
        location = _optionalDict(geometry, "location")
        if location is not None:
            lat = _optionalFloat(location, "lat")
            lng = _optionalFloat(location, "lng")
            if lat is not None and lng is not None:
                return cls(lat, lng)
        return cls(0.0, 0.0)


@dataclass(frozen=True, slots=True, eq=False)
class Placemark:
    """
    Resolved place: name, address and geographic center.

    Two placemarks are equal when their ``placeID`` is equal, other fields
    are not compared.
    """

    name: str
    """Common name of the place"""
    placeID: str = ""
    """Identifier of the place"""
    formattedAddress: Optional[str] = None
    """Full human-readable address"""
    location: Optional[Coordinate] = None
    """Geographic center of the place"""

    @classmethod
    def fromDict(cls, data: Any) -> "Placemark":
        """Create Placemark from API response dictionary.

        Raises:
            DecodingError: If data isn't an object or has no string ``name``
        """
        if not isinstance(data, dict):
            raise DecodingError(f"Placemark must be an object, got {type(data).__name__}")
        name = data.get("name")
        if not isinstance(name, str):
            raise DecodingError("Placemark has no valid 'name' field")

        geometry = _optionalDict(data, "geometry")
        return cls(
            name=name,
            placeID=_optionalStr(data, "place_id") or "",
            formattedAddress=_optionalStr(data, "formatted_address"),
            location=Coordinate.fromGeometry(geometry) if geometry is not None else None,
        )

    def toDict(self) -> Dict[str, Any]:
        ret: Dict[str, Any] = {
            "place_id": self.placeID,
            "name": self.name,
        }
        if self.formattedAddress is not None:
            ret["formatted_address"] = self.formattedAddress
        if self.location is not None:
            ret["geometry"] = {"location": {"lat": self.location.latitude, "lng": self.location.longitude}}
        return ret

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Placemark):
            return NotImplemented
        return self.placeID == other.placeID

    def __hash__(self) -> int:
        return hash(self.placeID)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class StructuredFormatting:
    """Prediction text split into main and secondary parts"""

    mainText: Optional[str] = None
    secondaryText: Optional[str] = None

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "StructuredFormatting":
        return cls(
            mainText=_optionalStr(data, "main_text"),
            secondaryText=_optionalStr(data, "secondary_text"),
        )

    def toDict(self) -> Dict[str, Any]:
        return _dropNone({"main_text": self.mainText, "secondary_text": self.secondaryText})


@dataclass(frozen=True, slots=True)
class Child:
    """Sub-suggestion of a prediction, resolvable to a place by its ``pid``"""

    pid: Optional[str] = None
    content: Optional[str] = None
    address: Optional[str] = None
    lon: Optional[float] = None
    lat: Optional[float] = None

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "Child":
        return cls(
            pid=_optionalStr(data, "pid"),
            content=_optionalStr(data, "content"),
            address=_optionalStr(data, "address"),
            lon=_optionalFloat(data, "lon"),
            lat=_optionalFloat(data, "lat"),
        )

    def toDict(self) -> Dict[str, Any]:
        return _dropNone(
            {"pid": self.pid, "content": self.content, "address": self.address, "lon": self.lon, "lat": self.lat}
        )


@dataclass(frozen=True, slots=True)
class Prediction:
    """Autocomplete suggestion, possibly expandable into child suggestions"""

    description: Optional[str] = None
    matchedSubstrings: Optional[List[JSONValue]] = None
    placeID: Optional[str] = None
    structuredFormatting: Optional[StructuredFormatting] = None
    terms: Optional[List[JSONValue]] = None
    types: Optional[List[str]] = None
    hasChildren: Optional[bool] = None
    children: Optional[List[Child]] = None

    # Holds lists, so compared by value but not hashable
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "Prediction":
        formatting = _optionalDict(data, "structured_formatting")

        children: Optional[List[Child]] = None
        rawChildren = data.get("children")
        if isinstance(rawChildren, list):
            children = [Child.fromDict(item) for item in rawChildren if isinstance(item, dict)]
            if len(children) != len(rawChildren):
                logger.debug(f"Dropped {len(rawChildren) - len(children)} malformed children")

        return cls(
            description=_optionalStr(data, "description"),
            matchedSubstrings=decodeJSONValueList(data.get("matched_substrings")),
            placeID=_optionalStr(data, "place_id"),
            structuredFormatting=StructuredFormatting.fromDict(formatting) if formatting is not None else None,
            terms=decodeJSONValueList(data.get("terms")),
            types=_optionalStrList(data, "types"),
            hasChildren=_optionalBool(data, "has_children"),
            children=children,
        )

    def toDict(self) -> Dict[str, Any]:
        return _dropNone(
            {
                "description": self.description,
                "matched_substrings": (
                    [item.encode() for item in self.matchedSubstrings] if self.matchedSubstrings is not None else None
                ),
                "place_id": self.placeID,
                "structured_formatting": (
                    self.structuredFormatting.toDict() if self.structuredFormatting is not None else None
                ),
                "terms": [item.encode() for item in self.terms] if self.terms is not None else None,
                "types": self.types,
                "has_children": self.hasChildren,
                "children": [child.toDict() for child in self.children] if self.children is not None else None,
            }
        )


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    """Result of forward (``predictions``) or reverse (``placemarks``) geocoding"""

    status: Optional[str] = None
    predictions: Optional[List[Prediction]] = None
    placemarks: Optional[List[Placemark]] = None

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def fromDict(cls, data: Any) -> "GeocodeResult":
        """Create GeocodeResult from API response dictionary.

        Raises:
            DecodingError: If data isn't an object or a placemark is malformed
        """
        if not isinstance(data, dict):
            raise DecodingError(f"Geocode response must be an object, got {type(data).__name__}")

        predictions: Optional[List[Prediction]] = None
        rawPredictions = data.get("predictions")
        if isinstance(rawPredictions, list):
            predictions = [Prediction.fromDict(item) for item in rawPredictions if isinstance(item, dict)]

        placemarks: Optional[List[Placemark]] = None
        rawResults = data.get("results")
        if isinstance(rawResults, list):
            placemarks = [Placemark.fromDict(item) for item in rawResults]

        return cls(
            status=_optionalStr(data, "status"),
            predictions=predictions,
            placemarks=placemarks,
        )

    def toDict(self) -> Dict[str, Any]:
        return _dropNone(
            {
                "status": self.status,
                "predictions": (
                    [prediction.toDict() for prediction in self.predictions] if self.predictions is not None else None
                ),
                "results": (
                    [placemark.toDict() for placemark in self.placemarks] if self.placemarks is not None else None
                ),
            }
        )


@dataclass(frozen=True, slots=True)
class PlaceDetailResult:
    """Result of place detail request"""

    status: Optional[str] = None
    placemark: Optional[Placemark] = field(default=None)

    @classmethod
    def fromDict(cls, data: Any) -> "PlaceDetailResult":
        """Create PlaceDetailResult from API response dictionary.

        Raises:
            DecodingError: If data isn't an object or the placemark is malformed
        """
        if not isinstance(data, dict):
            raise DecodingError(f"Place detail response must be an object, got {type(data).__name__}")

        rawResult = data.get("result")
        return cls(
            status=_optionalStr(data, "status"),
            placemark=Placemark.fromDict(rawResult) if isinstance(rawResult, dict) else None,
        )

    def toDict(self) -> Dict[str, Any]:
        return _dropNone(
            {
                "status": self.status,
                "result": self.placemark.toDict() if self.placemark is not None else None,
            }
        )
