"""
Logging setup for Goong geocoder.

Handlers are built from the ``[logging]`` config section. Every handler
installed here masks Goong API keys (``api_key=...`` query parameters) in
emitted records.
"""

import logging
import re
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROTATE_BACKUP_COUNT = 7

API_KEY_RE = re.compile(r"(api_key=)[^&\s\"']+")


class ApiKeyRedactingFilter(logging.Filter):
    """Replace API key values in log messages with ``***``."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = API_KEY_RE.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Map level name (case-insensitive) to logging level, default for unknown names."""
    level = logging.getLevelName(levelStr.upper())
    if not isinstance(level, int):
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def _handlerLevel(config: Dict[str, Any], key: str, fallback: int) -> int:
    if key not in config:
        return fallback
    level = getLogLevelByStr(config[key])
    return fallback if level is None else level


def _makeConsoleHandler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(ApiKeyRedactingFilter())
    return handler


def _makeFileHandler(logFile: str, rotate: bool, level: int, formatter: logging.Formatter) -> logging.Handler:
    """Create file handler, daily rotated if requested. Parent directories are created.

    Raises:
        OSError: If log file can't be opened
    """
    Path(logFile).parent.mkdir(parents=True, exist_ok=True)
    handler: logging.Handler
    if rotate:
        handler = TimedRotatingFileHandler(
            filename=logFile,
            when="midnight",
            interval=1,
            backupCount=ROTATE_BACKUP_COUNT,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(logFile, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(ApiKeyRedactingFilter())
    return handler


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """Apply one logging config section to a logger, replacing its handlers.

    Recognized keys: ``level``, ``propagate``, ``format``, ``console``,
    ``console-level``, ``file``, ``file-level``, ``rotate``.
    """
    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])

    if "level" in config:
        level = getLogLevelByStr(config["level"])
        if level is not None:
            localLogger.setLevel(level)
    effectiveLevel = localLogger.getEffectiveLevel()

    formatter = logging.Formatter(config.get("format", DEFAULT_LOG_FORMAT))

    for handler in list(localLogger.handlers):
        localLogger.removeHandler(handler)

    if config.get("console", False):
        consoleLevel = _handlerLevel(config, "console-level", effectiveLevel)
        localLogger.addHandler(_makeConsoleHandler(consoleLevel, formatter))
        logger.info(f"Logging {localLogger.name} to console, logLevel: {consoleLevel}")

    logFile = config.get("file")
    if logFile:
        fileLevel = _handlerLevel(config, "file-level", effectiveLevel)
        try:
            localLogger.addHandler(_makeFileHandler(logFile, bool(config.get("rotate", False)), fileLevel, formatter))
        except OSError as e:
            logger.error(f"Failed to setup file logging for {localLogger.name}: {e}")
        else:
            logger.info(f"Logging {localLogger.name} to file: {logFile}, logLevel: {fileLevel}")


def initLogging(config: Dict[str, Any]) -> None:
    """Configure root logger and per-logger overrides (``[logging.logger.<name>]``)."""
    rootLogger = logging.getLogger()
    rootLogger.setLevel(logging.INFO)
    configureLogger(rootLogger, config)
    rootLevel = rootLogger.getEffectiveLevel()

    # httpx logs every request URL at INFO
    if rootLevel < logging.WARNING:
        for noisyLogger in ("httpx", "httpcore"):
            logging.getLogger(noisyLogger).setLevel(logging.WARNING)

    for loggerName, loggerConfig in config.get("logger", {}).items():
        logger.debug(f"Configuring logger '{loggerName}' with config {loggerConfig}")
        configureLogger(logging.getLogger(loggerName), loggerConfig)

    logger.info(f"Logging configured: root level={rootLevel}")
