"""
Configuration management for Goong geocoder.

Config is assembled from a main TOML file and optional directories of TOML
files merged on top of it. ``${VAR}`` placeholders are resolved from the
environment, which may be pre-filled from a dotenv file.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")
API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Value of ``${VAR}`` from environment, the placeholder itself if VAR isn't set."""
    return os.getenv(match.group(1), match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Resolve ``${VAR}`` placeholders in strings nested in dicts and lists.

    Non-string scalars are returned as is.
    """
    if isinstance(value, str):
        return ENV_PLACEHOLDER_RE.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def mergeConfigs(baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge newConfig into a copy of baseConfig, dood!

    Tables are merged key by key, any other value (arrays included) is replaced.
    """
    merged = dict(baseConfig)
    for key, value in newConfig.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = mergeConfigs(current, value)
        else:
            merged[key] = value
    return merged


class ConfigError(Exception):
    """Raised when configuration can't be loaded."""


class ConfigManager:
    """Loads Goong geocoder configuration.

    Explicitly loads what the client needs (API key, host, timeouts, logging)
    from TOML files, environment and optional dotenv file. Nothing is read
    implicitly by the client itself.

    Attributes:
        configPath: Main config file
        configDirs: Directories with extra ``.toml`` files, merged in order
        config: Resulting configuration
    """

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """
        Raises:
            ConfigError: If neither config file nor config directories exist, or main config is invalid TOML
        """
        self.configPath = configPath
        self.configDirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Sorted list of ``.toml`` files under directory, empty if it isn't a directory."""
        dirPath = Path(directory)
        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or isn't a directory, skipping, dood!")
            return []

        tomlFiles = sorted(path for path in dirPath.rglob("*.toml") if path.is_file())
        logger.debug(f"Found config files: {[str(path) for path in tomlFiles]}")
        return tomlFiles

    def _readMainConfig(self) -> Dict[str, Any]:
        try:
            with open(self.configPath, "rb") as f:
                config = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            logger.error(f"Failed to parse config file {self.configPath}: {e}")
            raise ConfigError(f"Failed to parse config file {self.configPath}: {e}") from e
        logger.info(f"Loaded main config from {self.configPath}")
        return config

    def _loadConfig(self) -> Dict[str, Any]:
        """Load main config and merge config directories on top of it.

        A broken file in a config directory is logged and skipped, a broken
        main config file is an error.
        """
        hasConfigFile = Path(self.configPath).exists()
        if not hasConfigFile and not self.configDirs:
            logger.error(f"Configuration file {self.configPath} not found!")
            raise ConfigError(f"Configuration file {self.configPath} not found")

        config = self._readMainConfig() if hasConfigFile else {}

        for configDir in self.configDirs:
            for tomlFile in self._findTomlFilesRecursive(configDir):
                try:
                    with open(tomlFile, "rb") as f:
                        config = mergeConfigs(config, tomli.load(f))
                except (OSError, tomli.TOMLDecodeError) as e:
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue
                logger.info(f"Merged config from {tomlFile}")

        return config

    def get(self, key: str, default=None) -> Any:
        """Top-level config section or value."""
        return self.config.get(key, default)

    def getGoongConfig(self) -> Dict[str, Any]:
        """``[goong]`` section: api-key, host, request-timeout, user-agent."""
        return self.get("goong", {})

    def getLoggingConfig(self) -> Dict[str, Any]:
        return self.get("logging", {})

    def getAutocompleteConfig(self) -> Dict[str, Any]:
        """``[autocomplete]`` section: debounce-delay, limit."""
        return self.get("autocomplete", {})

    def getAccessToken(self) -> Optional[str]:
        """Goong API key, None if it isn't configured.

        Placeholders left unsubstituted (env variable is not set) count as not configured.
        """
        token = self.getGoongConfig().get("api-key")
        if not isinstance(token, str) or not token.strip():
            return None
        token = token.strip()
        if ENV_PLACEHOLDER_RE.fullmatch(token) or token == API_KEY_PLACEHOLDER:
            logger.error("Goong API key is not set, put it into [goong] api-key of config.toml or .env")
            return None
        return token
