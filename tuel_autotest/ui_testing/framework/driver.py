"""
================================================================================
Browser Driver Capability
================================================================================

The narrow browser surface consumed by the login flow and page objects.

`BrowserDriver` is a structural Protocol, so any object with these coroutines
works (the unit tests use a scripted fake). `PlaywrightDriver` adapts a
Playwright `Page` to it.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .smart_locator import ElementNotFoundError, LocatorTarget, SmartLocator


class BrowserDriver(Protocol):
    """Browser operations the framework relies on. Timeouts are in seconds."""

    async def current_url(self) -> str:
        ...

    async def current_title(self) -> str:
        ...

    async def find_visible(self, locator: LocatorTarget, timeout: float = 5.0) -> Optional[Any]:
        """Return the visible element, or None. timeout=0 checks once."""
        ...

    async def click(self, element: Any) -> None:
        ...

    async def type_text(self, element: Any, text: str) -> None:
        ...

    async def navigate(self, url: str) -> None:
        ...

    async def wait_for_transition(self, timeout: float = 10.0) -> bool:
        ...


class PlaywrightDriver:
    """
    BrowserDriver backed by a Playwright async Page.

    Usage:
        driver = PlaywrightDriver(page)
        email = await driver.find_visible("email_input", timeout=10)
        if email is not None:
            await driver.type_text(email, "user@example.com")
    """

    def __init__(self, page: Page, smart: Optional[SmartLocator] = None):
        self.page = page
        self.smart = smart or SmartLocator(page)

    async def current_url(self) -> str:
        return self.page.url or ""

    async def current_title(self) -> str:
        return await self.page.title()

    async def find_visible(self, locator: LocatorTarget, timeout: float = 5.0) -> Optional[Any]:
        try:
            return await self.smart.locate(locator, timeout=int(timeout * 1000))
        except ElementNotFoundError:
            return None

    async def click(self, element: Any) -> None:
        await element.click()

    async def type_text(self, element: Any, text: str) -> None:
        # fill() clears existing content first
        await element.fill(text)

    async def navigate(self, url: str) -> None:
        await self.page.goto(url, wait_until="domcontentloaded")

    async def wait_for_transition(self, timeout: float = 10.0) -> bool:
        """
        Wait for the current document to finish loading.

        Returns:
            True when the load state was reached, False on timeout
        """
        try:
            await self.page.wait_for_load_state("load", timeout=int(timeout * 1000))
            return True
        except PlaywrightTimeoutError:
            logger.warning(f"Page transition timeout after {timeout} seconds")
            return False
        except PlaywrightError as e:
            # Navigation in flight destroys the execution context
            logger.debug(f"Page transition check interrupted: {e}")
            return False

    async def wait_for_url_change(self, previous_url: str, timeout: float = 10.0) -> bool:
        """Wait until the URL differs (case-insensitive) from previous_url."""
        try:
            await self.page.wait_for_url(
                lambda url: url.lower() != previous_url.lower(),
                timeout=int(timeout * 1000),
            )
            return True
        except PlaywrightTimeoutError:
            logger.warning(f"URL change timeout after {timeout} seconds")
            return False


__all__ = [
    "BrowserDriver",
    "PlaywrightDriver",
]
