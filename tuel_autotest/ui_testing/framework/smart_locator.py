"""
================================================================================
Smart Locator
================================================================================

Element location with ordered fallback selectors.

    - Multiple selector strategies per named element
    - Automatic degradation when the primary selector fails
    - Fallback usage tracking for locator maintenance

Kendo grids, the IdP sign-in pages and the application shell expose few stable
ids, so most entries carry two or three fallbacks.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger
from playwright.async_api import Locator, Page


LocatorMap = Dict[str, str]
LocatorTarget = Union[str, LocatorMap]


class ElementNotFoundError(Exception):
    """Raised when all locator strategies fail to find element."""
    pass


@dataclass
class LocatorHealth:
    """
    Tracks locator health and usage statistics.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_name: Name of fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Smart element locator with fallback strategies.

    Usage:
        >>> smart = SmartLocator(page)
        >>> await smart.click("export_csv_button")
        >>> await smart.fill("search_input", "ACME")

    Configuration:
        Locators are defined in the LOCATORS dictionary. Each element
        can have multiple fallback strategies, tried in insertion order.
    """

    LOCATORS: Dict[str, LocatorMap] = {
        # Identity provider sign-in
        "email_input": {
            "primary": "input[type='email']",
            "fallback_1": "input[name='loginfmt']",
        },
        "next_button": {
            "primary": "input[type='submit']",
            "fallback_1": "#idSIButton9",
        },
        "password_input": {
            "primary": "input[name='passwd']",
            "fallback_1": "input[type='password']",
        },
        "sign_in_button": {
            "primary": "#idSIButton9",
            "fallback_1": "input[type='submit']",
        },
        "stay_signed_in_no": {
            "primary": "#idBtn_Back",
            "fallback_1": "input[value='No']",
        },
        "login_container": {
            "primary": "div.login-paginated-page",
            "fallback_1": "div.sign-in-box",
            "fallback_2": "form[action*='login']",
        },
        "login_error": {
            "primary": "#usernameError",
            "fallback_1": "#passwordError",
            "fallback_2": "[role='alert']",
        },

        # Application shell
        "main_header": {
            "primary": "h1:has-text('Application')",
            "fallback_1": "[title='Application']",
            "fallback_2": ".title:has-text('Application')",
        },
        "navigation_tabs": {
            "primary": "nav a",
            "fallback_1": "div.nav a",
            "fallback_2": "[class*='tab']",
        },

        # Grid
        "data_table": {
            "primary": "kendo-grid",
            "fallback_1": "app-data-grid",
            "fallback_2": "table",
            "fallback_3": "[class*='k-grid']",
        },
        "no_records_message": {
            "primary": "text=No records available",
            "fallback_1": "text=No records",
            "fallback_2": "text=No data",
            "fallback_3": "text=No results",
        },

        # Pager
        "pagination": {
            "primary": "kendo-pager",
            "fallback_1": "[class*='k-pager']",
            "fallback_2": "[class*='pagination']",
        },
        "page_info": {
            "primary": "kendo-pager-info",
            "fallback_1": ".k-pager-info",
            "fallback_2": "[class*='pager-info']",
        },
        "items_per_page": {
            "primary": "kendo-pager-page-sizes",
            "fallback_1": "kendo-numerictextbox.page-size-input",
            "fallback_2": "[class*='pager'] select",
        },

        # Toolbar
        "search_input": {
            "primary": "input[placeholder='Search']",
            "fallback_1": "input[class*='search']",
            "fallback_2": "input[placeholder*='earch']",
        },
        "export_csv_button": {
            "primary": "button:has-text('Export to CSV')",
            "fallback_1": "a:has-text('Export to CSV')",
        },
    }

    # Seconds between visibility sweeps while waiting
    POLL_INTERVAL: float = 0.1

    def __init__(self, page: Page):
        """
        Initialize SmartLocator with Playwright page.

        Args:
            page: Playwright Page object
        """
        self.page = page
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def resolve(
        self,
        target: LocatorTarget,
        element_name: Optional[str] = None,
    ) -> Tuple[LocatorMap, str]:
        """Return (locator map, display name) for a registry key or inline map."""
        if isinstance(target, dict):
            return target, element_name or "custom_element"
        return self.LOCATORS.get(target, {}), element_name or target

    async def _first_visible(
        self,
        locators: LocatorMap,
        errors: Dict[str, str],
    ) -> Optional[Tuple[str, Locator]]:
        """One sweep over the strategies in order, without waiting."""
        for strategy_name, selector in locators.items():
            try:
                locator = self.page.locator(selector).first
                if await locator.is_visible():
                    return strategy_name, locator
                errors[strategy_name] = f"{selector} -> not visible"
            except Exception as e:
                errors[strategy_name] = f"{selector} -> {str(e)[:50]}"
        return None

    async def locate(
        self,
        target: LocatorTarget,
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> Locator:
        """
        Locate the first visible element using the fallback strategy.

        All strategies share one deadline: each sweep checks every strategy
        in order, and sweeps repeat until one is visible or `timeout` expires.
        The primary strategy wins whenever it is visible in the same sweep as
        a fallback.

        Args:
            target: Element key (str) in `LOCATORS` or a locator map (dict).
            timeout: Total milliseconds to wait. 0 runs a single sweep.
            element_name: Optional human-readable name for logging.

        Returns:
            Playwright Locator for the found element

        Raises:
            ElementNotFoundError: When no strategy matched before the deadline
        """
        locators, display_name = self.resolve(target, element_name)

        if not locators:
            raise ElementNotFoundError(
                f"No locators defined for element: {display_name}"
            )

        deadline = time.monotonic() + max(timeout, 0) / 1000
        errors: Dict[str, str] = {}

        while True:
            found = await self._first_visible(locators, errors)
            if found is not None:
                strategy_name, locator = found
                self._record(display_name, locators, strategy_name)
                return locator

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            await asyncio.sleep(min(self.POLL_INTERVAL, remaining))

        error_msg = (
            f"All locators failed for '{display_name}' within {timeout} ms:\n" +
            "\n".join(f"  - {name}: {err}" for name, err in errors.items())
        )
        logger.debug(error_msg)
        raise ElementNotFoundError(error_msg)

    def _record(self, display_name: str, locators: LocatorMap, strategy_name: str) -> None:
        selector = locators[strategy_name]
        if strategy_name == "primary":
            logger.debug(f"Element '{display_name}' found: {selector}")
            return
        logger.warning(
            f"Element '{display_name}' used fallback: "
            f"{strategy_name} -> {selector}"
        )
        self._fallback_used[display_name] = LocatorHealth(
            element_name=display_name,
            primary_selector=locators.get("primary", selector),
            used_fallback=True,
            fallback_name=strategy_name,
            fallback_selector=selector,
        )

    async def locate_all(self, target: LocatorTarget) -> List[Locator]:
        """
        Return every element matched by the first strategy that matches anything.

        Never waits and never raises; an empty list means nothing matched.
        """
        locators, _ = self.resolve(target)
        for selector in locators.values():
            try:
                found = await self.page.locator(selector).all()
            except Exception:
                continue
            if found:
                return found
        return []

    async def click(
        self,
        target: LocatorTarget,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Click element using smart location."""
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        await locator.click(**kwargs)

    async def fill(
        self,
        target: LocatorTarget,
        value: str,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Fill input element using smart location."""
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        await locator.fill(value, **kwargs)

    async def get_text(
        self,
        target: LocatorTarget,
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> str:
        """
        Get text content of element.

        Returns:
            Text content of element
        """
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        return await locator.text_content() or ""

    async def is_visible(
        self,
        target: LocatorTarget,
        timeout: int = 2000,
        element_name: Optional[str] = None,
    ) -> bool:
        """
        Check if element is visible.

        Returns:
            True if element is visible, False otherwise
        """
        try:
            await self.locate(target, timeout=timeout, element_name=element_name)
            return True
        except ElementNotFoundError:
            return False

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback (maintenance candidates).
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: {health.fallback_name} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "ElementNotFoundError",
    "LocatorHealth",
    "LocatorMap",
    "LocatorTarget",
]
