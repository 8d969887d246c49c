"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the TUEL application.

Components:
    - config_loader: YAML configuration with environment overrides
    - waits: Bounded polling and grid row-count stabilization
    - smart_locator: Element location with fallback strategies
    - driver: Narrow browser capability used by the login flow
    - authentication: Sign-in state classifier and bounded-retry login
    - page_base: Base page object for the application's tab pages
    - browser_manager: Browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError, TimeoutSettings
from .waits import WaitTimeoutError, poll_until, wait_for_stable_count
from .smart_locator import SmartLocator, ElementNotFoundError
from .driver import BrowserDriver, PlaywrightDriver
from .authentication import (
    AuthenticationState,
    AuthenticationStateClassifier,
    LoginConfigurationError,
    LoginError,
    LoginFailedError,
    LoginTimings,
)
from .page_base import BasePage, PageActionError, PageStatus, SearchOutcome
from .browser_manager import BrowserManager

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "TimeoutSettings",
    "WaitTimeoutError",
    "poll_until",
    "wait_for_stable_count",
    "SmartLocator",
    "ElementNotFoundError",
    "BrowserDriver",
    "PlaywrightDriver",
    "AuthenticationState",
    "AuthenticationStateClassifier",
    "LoginConfigurationError",
    "LoginError",
    "LoginFailedError",
    "LoginTimings",
    "BasePage",
    "PageActionError",
    "PageStatus",
    "SearchOutcome",
    "BrowserManager",
]
