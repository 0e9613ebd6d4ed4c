"""
Goong Geocoder - command line client for Goong Geocoding and Autocomplete APIs.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from internal.config.manager import ConfigError, ConfigManager
from lib import utils
from lib.goong_geocoder import (
    Coordinate,
    ForwardGeocodeOptions,
    GeocoderError,
    GoongGeocoder,
    ReverseGeocodeOptions,
)
from lib.goong_geocoder.constants import DEFAULT_RADIUS, FORWARD_RESULT_COUNT
from lib.logging_utils import initLogging

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
# set higher logging level for httpx to avoid all GET requests being logged
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def parseCoordinate(value: str) -> Coordinate:
    """Parse "LAT,LON" into Coordinate (argparse type)."""
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Expected LAT,LON, got {value!r}")
    try:
        return Coordinate(float(parts[0]), float(parts[1]))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected LAT,LON, got {value!r}")


def parseArguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Goong Geocoder - query Goong geocoding API, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    searchParser = subparsers.add_parser("search", help="Forward geocoding (autocomplete)")
    searchParser.add_argument("query", help="Place name or address")
    searchParser.add_argument("--limit", type=int, default=FORWARD_RESULT_COUNT, help="Maximum number of results")
    searchParser.add_argument("--near", type=parseCoordinate, help="Prioritize results around LAT,LON")
    searchParser.add_argument("--radius", type=int, default=DEFAULT_RADIUS, help="Radius around --near location")

    reverseParser = subparsers.add_parser("reverse", help="Reverse geocoding")
    reverseParser.add_argument("lat", type=float, help="Latitude")
    reverseParser.add_argument("lon", type=float, help="Longitude")

    placeParser = subparsers.add_parser("place", help="Place details")
    placeParser.add_argument("placeID", help="Place identifier")

    args = parser.parse_args(argv)
    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    if not args.print_config and args.command is None:
        parser.error("one of search, reverse, place commands is required")

    return args


def prettyPrintConfig(configManager: ConfigManager) -> None:
    """Pretty-print the loaded configuration, API key masked."""
    config: Dict[str, Any] = dict(configManager.config)
    goongConfig = dict(config.get("goong", {}))
    if goongConfig.get("api-key"):
        goongConfig["api-key"] = "***"
        config["goong"] = goongConfig

    print(utils.jsonDumps(config, indent=2))


async def runCommand(geocoder: GoongGeocoder, args: argparse.Namespace) -> Dict[str, Any]:
    """Run selected command and return decoded result as dict."""
    match args.command:
        case "search":
            options = ForwardGeocodeOptions(
                args.query,
                focalLocation=args.near,
                radius=args.radius,
                maximumResultCount=args.limit,
            )
            return (await geocoder.geocode(options)).toDict()
        case "reverse":
            return (await geocoder.geocode(ReverseGeocodeOptions((args.lat, args.lon)))).toDict()
        case "place":
            return (await geocoder.fetchPlace(args.placeID)).toDict()
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parseArguments(argv)

    try:
        configManager = ConfigManager(args.config, args.config_dir)
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    if args.print_config:
        prettyPrintConfig(configManager)
        return 0

    initLogging(configManager.getLoggingConfig())

    try:
        geocoder = GoongGeocoder.fromConfig(
            {**configManager.getGoongConfig(), "api-key": configManager.getAccessToken()}
        )
        result = asyncio.run(runCommand(geocoder, args))
    except GeocoderError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 1

    print(utils.jsonDumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
