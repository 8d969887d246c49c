"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Dot notation path access
    - Typed timeout settings for page objects and the login flow

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.base_url", "http://localhost:4200")
        'https://tuel.example.com'  # From YAML or env var

    Environment Variable Mapping:
        - ui.base_url -> UI_BASE_URL
        - auth.idp_host -> AUTH_IDP_HOST
        - timeouts.default_seconds -> TIMEOUTS_DEFAULT_SECONDS
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton: configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def require(self, key: str) -> Any:
        """
        Get a configuration value that must be present and non-empty.

        Raises:
            ConfigurationError: When the key resolves to None or ""
        """
        value = self.get(key)
        if value is None or value == "":
            env_key = key.upper().replace(".", "_")
            raise ConfigurationError(
                f"Required configuration '{key}' is not set "
                f"(config file or {env_key} environment variable)"
            )
        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "ui", "auth")

        Returns:
            Section dictionary or empty dict if not found
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value
        if isinstance(reference, (list, tuple)):
            return [item.strip() for item in value.split(",") if item.strip()]

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


@dataclass(frozen=True)
class TimeoutSettings:
    """
    Timeouts (seconds) shared by page objects.

    Attributes:
        default: Page load / unique locator wait
        page_transition: document ready / URL change wait
        element_visibility: Element visibility wait
        retry_delay: Delay between generic retries
        max_retry_attempts: Attempts for generic retries
    """
    default: float = 30.0
    page_transition: float = 10.0
    element_visibility: float = 15.0
    retry_delay: float = 0.5
    max_retry_attempts: int = 3

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "TimeoutSettings":
        config = config or ConfigLoader()
        return cls(
            default=float(config.get("timeouts.default_seconds", 30)),
            page_transition=float(config.get("timeouts.page_transition_seconds", 10)),
            element_visibility=float(config.get("timeouts.element_visibility_seconds", 15)),
            retry_delay=int(config.get("timeouts.retry_delay_ms", 500)) / 1000.0,
            max_retry_attempts=int(config.get("timeouts.max_retry_attempts", 3)),
        )


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "TimeoutSettings",
]
