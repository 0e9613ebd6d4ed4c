"""
Dynamic JSON value for Goong API fields whose shape is not modelled.

``JSONValue`` is a tagged union over bool, 64-bit integer, double, string,
null, array and object. Decoding discriminates scalars in a fixed order
(bool, integer, double, string, null) before recursing into arrays and
objects, so ``true`` is never taken for ``1``, ``1`` stays an integer and
the string ``"true"`` stays a string. Encoding gives back the original shape.

Example:
    >>> value = JSONValue.fromJson('{"offset": 0, "length": 3}')
    >>> value.kind
    <JSONKind.OBJECT: 'object'>
    >>> value.get("length")
    JSONValue(kind=<JSONKind.INTEGER: 'integer'>, value=3)
    >>> value.encode()
    {'offset': 0, 'length': 3}
"""

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, List, Optional

from .exceptions import DecodingError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class JSONKind(StrEnum):
    """Kind of value held by JSONValue"""

    BOOL = "bool"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True, slots=True)
class JSONValue:
    """Arbitrary JSON value, dood!

    ``value`` holds a Python scalar for scalar kinds, ``None`` for null,
    ``List[JSONValue]`` for arrays and ``Dict[str, JSONValue]`` for objects.
    """

    kind: JSONKind
    value: Any = None

    # Arrays and objects are mutable containers
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def decode(cls, raw: Any) -> "JSONValue":
        """Build JSONValue from already parsed JSON data (as returned by json.loads).

        Raises:
            DecodingError: If raw contains something that is not JSON data
        """
        # bool is a subclass of int, so it must be checked strictly and first
        if type(raw) is bool:
            return cls(JSONKind.BOOL, raw)
        if isinstance(raw, int) and not isinstance(raw, bool):
            if INT64_MIN <= raw <= INT64_MAX:
                return cls(JSONKind.INTEGER, int(raw))
            return cls(JSONKind.DOUBLE, float(raw))
        if isinstance(raw, float):
            return cls(JSONKind.DOUBLE, raw)
        if isinstance(raw, str):
            return cls(JSONKind.STRING, raw)
        if raw is None:
            return cls(JSONKind.NULL, None)
        if isinstance(raw, (list, tuple)):
            return cls(JSONKind.ARRAY, [cls.decode(item) for item in raw])
        if isinstance(raw, dict):
            ret: Dict[str, JSONValue] = {}
            for key, item in raw.items():
                if not isinstance(key, str):
                    raise DecodingError(f"Cannot decode JSONValue: object key {key!r} is not a string")
                ret[key] = cls.decode(item)
            return cls(JSONKind.OBJECT, ret)

        raise DecodingError(f"Cannot decode JSONValue from {type(raw).__name__}")

    @classmethod
    def fromJson(cls, text: str | bytes) -> "JSONValue":
        """Parse JSON text into JSONValue.

        Raises:
            DecodingError: If text is not valid JSON
        """
        try:
            raw = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodingError(f"Invalid JSON: {e}", underlyingError=e)
        return cls.decode(raw)

    def encode(self) -> Any:
        """Convert back to plain Python JSON data."""
        match self.kind:
            case JSONKind.ARRAY:
                return [item.encode() for item in self.value]
            case JSONKind.OBJECT:
                return {key: item.encode() for key, item in self.value.items()}
            case _:
                return self.value

    def toJson(self, **kwargs) -> str:
        """Serialize to JSON text. Keyword arguments are passed to json.dumps."""
        return json.dumps(self.encode(), ensure_ascii=False, **kwargs)

    @property
    def isNull(self) -> bool:
        return self.kind == JSONKind.NULL

    def get(self, key: str, default: Optional["JSONValue"] = None) -> Optional["JSONValue"]:
        """Get member of an object value, default for missing key or non-object value."""
        if self.kind != JSONKind.OBJECT:
            return default
        return self.value.get(key, default)

    def __getitem__(self, index: int | str) -> "JSONValue":
        if self.kind == JSONKind.ARRAY and isinstance(index, int):
            return self.value[index]
        if self.kind == JSONKind.OBJECT and isinstance(index, str):
            return self.value[index]
        raise TypeError(f"JSONValue of kind {self.kind} can't be indexed by {type(index).__name__}")


def decodeJSONValueList(raw: Any) -> Optional[List[JSONValue]]:
    """Decode a JSON array into list of JSONValue, None if raw is not an array."""
    if not isinstance(raw, list):
        return None
    return [JSONValue.decode(item) for item in raw]
