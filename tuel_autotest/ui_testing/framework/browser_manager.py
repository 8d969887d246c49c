"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser per manager, one isolated context per page
    - Signed-in storage state reuse, so later tests skip the IdP flow
    - Browser settings from `ui.*` configuration

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from .config_loader import ConfigLoader, ConfigurationError


# Signed-in cookies and localStorage written after a successful IdP sign-in
AUTH_STATE_FILE = Path(__file__).parent.parent / ".auth_state.json"

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Manages the browser and its contexts for UI testing.

    Usage:
        async with BrowserManager.from_config() as manager:
            page = await manager.new_page()
            await LoginPage(page).ensure_logged_in()
            await manager.save_auth_state(page.context)
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "args": [
            "--ignore-certificate-errors",
            "--disable-dev-shm-usage",
        ],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        reuse_auth_state: bool = False,
        auth_state_file: Optional[Path] = None,
    ):
        """
        Args:
            headless: Run browser in headless mode
            browser_type: 'chromium', 'firefox' or 'webkit'
            reuse_auth_state: Start new contexts from the saved sign-in state
            auth_state_file: Storage state path (defaults to AUTH_STATE_FILE)

        Raises:
            ConfigurationError: Unsupported browser type
        """
        browser_type = (browser_type or "chromium").lower()
        if browser_type not in SUPPORTED_BROWSERS:
            raise ConfigurationError(
                f"Unsupported browser '{browser_type}' (expected one of {', '.join(SUPPORTED_BROWSERS)})"
            )
        self.headless = headless
        self.browser_type = browser_type
        self.reuse_auth_state = reuse_auth_state
        self.auth_state_file = Path(auth_state_file) if auth_state_file else AUTH_STATE_FILE

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "BrowserManager":
        """Build from `ui.browser`, `ui.headless`, `ui.reuse_auth_state` and `ui.auth_state_file`."""
        config = config or ConfigLoader()
        return cls(
            headless=config.get("ui.headless", True),
            browser_type=config.get("ui.browser", "chromium"),
            reuse_auth_state=config.get("ui.reuse_auth_state", False),
            auth_state_file=config.get("ui.auth_state_file") or None,
        )

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch the configured browser."""
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        self._browser = await launcher.launch(
            headless=self.headless,
            **self.DEFAULT_LAUNCH_OPTIONS,
        )
        logger.debug(f"Browser started: {self.browser_type} (headless={self.headless})")

    async def close(self) -> None:
        """Close all contexts, the browser and Playwright."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    @property
    def has_saved_auth_state(self) -> bool:
        return self.auth_state_file.is_file()

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create an isolated context.

        When `reuse_auth_state` is on and a saved state exists, the context
        starts with the saved cookies and localStorage.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        if self.reuse_auth_state and self.has_saved_auth_state:
            context_options.setdefault("storage_state", str(self.auth_state_file))
            logger.debug(f"Context starts from saved sign-in: {self.auth_state_file}")

        context = await self._browser.new_context(**context_options)
        self._contexts.append(context)
        return context

    async def new_page(self, **context_options: Any) -> Page:
        """Create a page in a fresh context."""
        context = await self.new_context(**context_options)
        return await context.new_page()

    async def save_auth_state(self, context: BrowserContext) -> Optional[Path]:
        """Persist a signed-in context; a no-op unless `reuse_auth_state` is on."""
        if not self.reuse_auth_state:
            return None
        self.auth_state_file.parent.mkdir(parents=True, exist_ok=True)
        await context.storage_state(path=str(self.auth_state_file))
        logger.info(f"Sign-in state saved to: {self.auth_state_file}")
        return self.auth_state_file


__all__ = [
    "AUTH_STATE_FILE",
    "BrowserManager",
    "SUPPORTED_BROWSERS",
]
