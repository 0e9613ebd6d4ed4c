"""
Pytest configuration and common fixtures for Goong geocoder tests.

Fixtures follow camelCase naming convention. Network is never touched:
requests go to httpx.MockTransport backed by canned Goong responses.
"""

from typing import Any, Callable, Dict, List

import httpx
import pytest

from lib.goong_geocoder import GoongGeocoder

# ============================================================================
# Canned API Responses
# ============================================================================

AUTOCOMPLETE_RESPONSE: Dict[str, Any] = {
    "status": "OK",
    "predictions": [
        {
            "description": "91 Trung Kính, Trung Hòa, Cầu Giấy, Hà Nội",
            "matched_substrings": [],
            "place_id": "autocomplete-91",
            "structured_formatting": {
                "main_text": "91 Trung Kính",
                "secondary_text": "Trung Hòa, Cầu Giấy, Hà Nội",
            },
            "terms": [],
            "has_children": True,
            "types": ["house_number"],
            "children": [
                {
                    "pid": "child-91a",
                    "content": "Ngõ 91 Trung Kính",
                    "address": "Trung Hòa, Cầu Giấy, Hà Nội",
                    "lon": 105.7983,
                    "lat": 21.0137,
                }
            ],
        }
    ],
}

GEOCODE_RESPONSE: Dict[str, Any] = {
    "status": "OK",
    "results": [
        {
            "place_id": "reverse-1",
            "name": "91 Trung Kính",
            "formatted_address": "91 Trung Kính, Trung Hòa, Cầu Giấy, Hà Nội",
            "geometry": {"location": {"lat": 21.0137, "lng": 105.7983}},
        }
    ],
}

PLACE_DETAIL_RESPONSE: Dict[str, Any] = {
    "status": "OK",
    "result": {
        "place_id": "child-91a",
        "name": "Ngõ 91 Trung Kính",
        "formatted_address": "Ngõ 91 Trung Kính, Trung Hòa, Cầu Giấy, Hà Nội",
        "geometry": {"location": {"lat": 21.0137, "lng": 105.7983}},
    },
}


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sentRequests() -> List[httpx.Request]:
    """
    Requests received by the mocked Goong API.

    Returns:
        List[httpx.Request]: Filled by goongTransport in order of arrival
    """
    return []


@pytest.fixture
def goongTransport(sentRequests) -> httpx.MockTransport:
    """
    Mock transport imitating Goong API endpoints.

    Requests without valid api_key get REQUEST_DENIED status, unknown paths get 404.

    Returns:
        httpx.MockTransport: Transport for GoongGeocoder
    """

    def handler(request: httpx.Request) -> httpx.Response:
        sentRequests.append(request)
        if request.url.params.get("api_key") != "test_key":
            return httpx.Response(200, json={"status": "REQUEST_DENIED"})

        routes: Dict[str, Callable[[], Dict[str, Any]]] = {
            "/Place/AutoComplete": lambda: AUTOCOMPLETE_RESPONSE,
            "/Geocode": lambda: GEOCODE_RESPONSE,
            "/Place/Detail": lambda: PLACE_DETAIL_RESPONSE,
        }
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {request.url.path}"})
        return httpx.Response(200, json=route())

    return httpx.MockTransport(handler)


@pytest.fixture
def geocoder(goongTransport) -> GoongGeocoder:
    """
    GoongGeocoder talking to the mocked Goong API.

    Returns:
        GoongGeocoder: Client with valid test key
    """
    return GoongGeocoder("test_key", transport=goongTransport)


@pytest.fixture
def configToml(tmp_path):
    """
    Write config.toml for the mocked API and return its path.

    Returns:
        pathlib.Path: Path to config file
    """
    configPath = tmp_path / "config.toml"
    configPath.write_text(
        """
[goong]
api-key = "test_key"
host = "rsapi.goong.io"
request-timeout = 5

[logging]
level = "WARNING"
"""
    )
    return configPath
