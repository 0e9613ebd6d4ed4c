"""
Goong Geocoder Constants

This module contains the constants used by the Goong geocoding client:
endpoint host and paths, query parameter names, defaults and error codes.
"""

from typing import Final

VERSION: Final[str] = "0.1.0"

# API Configuration
DEFAULT_HOST: Final[str] = "rsapi.goong.io"
API_SCHEME: Final[str] = "https"
DEFAULT_TIMEOUT: Final[int] = 10
DEFAULT_USER_AGENT: Final[str] = f"GoongGeocoder/{VERSION}"

# API Endpoints
ENDPOINT_AUTOCOMPLETE: Final[str] = "/Place/AutoComplete"
ENDPOINT_GEOCODE: Final[str] = "/Geocode"
ENDPOINT_PLACE_DETAIL: Final[str] = "/Place/Detail"

# Query parameters
PARAM_API_KEY: Final[str] = "api_key"
PARAM_INPUT: Final[str] = "input"
PARAM_LIMIT: Final[str] = "limit"
PARAM_LOCATION: Final[str] = "location"
PARAM_RADIUS: Final[str] = "radius"
PARAM_LATLNG: Final[str] = "latlng"
PARAM_PLACE_ID: Final[str] = "placeid"

# Option defaults
DEFAULT_RADIUS: Final[int] = 2500
FORWARD_RESULT_COUNT: Final[int] = 5
REVERSE_RESULT_COUNT: Final[int] = 1

# Status marker returned in response body on success
STATUS_OK: Final[str] = "OK"

# Rate limit headers
HEADER_RATE_LIMIT: Final[str] = "X-Rate-Limit-Limit"
HEADER_RATE_LIMIT_INTERVAL: Final[str] = "X-Rate-Limit-Interval"
HEADER_RATE_LIMIT_RESET: Final[str] = "X-Rate-Limit-Reset"

# Error codes
ERROR_CODE_API_STATUS: Final[int] = -1
ERROR_CODE_UNEXPECTED: Final[int] = -1024
