"""
Common utilities for Goong geocoder.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

_DURATION_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def formatDuration(seconds: float) -> str:
    """
    Spell out duration in full units.

    Args:
        seconds: Duration in seconds

    Returns:
        Human-readable duration, e.g. "1 minute" or "1 hour, 30 minutes".
        Fractions of second are dropped, zero is "0 seconds".
    """
    remaining = int(seconds)
    parts: List[str] = []
    for unitName, unitSecs in _DURATION_UNITS:
        count, remaining = divmod(remaining, unitSecs)
        if count:
            parts.append(f"{count} {unitName}{'' if count == 1 else 's'}")

    if not parts:
        return "0 seconds"
    return ", ".join(parts)


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # If indent is passed, then user want pretty-printed JSON,
        #  no need to use compact separators
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Just read file line by line and put key-value pairs into dictionary.
    Variables already present in environment are not overridden.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True)

    Returns:
        Dictionary of key-value pairs from .env file, empty if file doesn't exist
    """
    ret: Dict[str, str] = {}
    if not os.path.isfile(path):
        logger.debug(f"No dotenv file at {path}")
        return ret

    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            splitted_line = line.split("=", 1)
            if len(splitted_line) == 2:
                key, value = splitted_line
                ret[key.strip()] = value.strip().strip('"')

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    return ret
