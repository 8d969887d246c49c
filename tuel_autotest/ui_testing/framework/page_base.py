"""
================================================================================
Base Page Object
================================================================================

Foundation class for the application's tab pages (Dashboard, Customers,
Members, Fees, Completed, ...). Every tab shares the same shell: a header,
navigation tabs, a Kendo grid with a pager, a search box and an
"Export to CSV" button.

Provides:
    - Navigation and page-load detection via a unique locator
    - Boolean verifications for the shared shell and grid
    - Grid reading (headers, rows, pager status)
    - Search with row-count stabilization

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .config_loader import ConfigLoader, ConfigurationError, TimeoutSettings
from .driver import PlaywrightDriver
from .smart_locator import ElementNotFoundError, LocatorMap, LocatorTarget, SmartLocator
from .waits import wait_for_stable_count


ACTIVE_CLASS_MARKERS = ("active", "selected", "current")

_PAGE_OF_PATTERN = re.compile(r"Page\s+(\d+)\s+of\s+(\d+)", re.IGNORECASE)
_ITEMS_PATTERN = re.compile(r"(\d+)\s*-\s*(\d+)\s+of\s+(\d+)\s+items?", re.IGNORECASE)


class PageActionError(Exception):
    """Raised when a page action (tab click, search, export) cannot be performed."""
    pass


# =============================================================================
# Grid helpers
# =============================================================================

@dataclass(frozen=True)
class PageStatus:
    """Parsed pager text ("Page 2 of 5" or "1 - 10 of 57 items")."""
    current_page: Optional[int] = None
    total_pages: Optional[int] = None
    first_item: Optional[int] = None
    last_item: Optional[int] = None
    total_items: Optional[int] = None

    @property
    def has_item_summary(self) -> bool:
        return None not in (self.first_item, self.last_item, self.total_items)

    @property
    def is_multi_page(self) -> bool:
        if self.total_pages is not None:
            return self.total_pages > 1
        if self.has_item_summary:
            page_size = self.last_item - self.first_item + 1
            return self.first_item == 1 and self.total_items > page_size
        return False


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a strict search."""
    has_match: bool
    empty_state: bool
    row_count: int


def parse_page_status(text: Optional[str]) -> PageStatus:
    """Parse pager text. Unrecognized text yields an empty PageStatus."""
    if not text:
        return PageStatus()

    current_page = total_pages = None
    page_match = _PAGE_OF_PATTERN.search(text)
    if page_match:
        current_page, total_pages = int(page_match.group(1)), int(page_match.group(2))

    first = last = total = None
    items_match = _ITEMS_PATTERN.search(text)
    if items_match:
        first, last, total = (int(g) for g in items_match.groups())

    return PageStatus(
        current_page=current_page,
        total_pages=total_pages,
        first_item=first,
        last_item=last,
        total_items=total,
    )


def extract_first_token(row_text: Optional[str]) -> Optional[str]:
    """First whitespace-delimited token of a row, or None."""
    if not row_text or not row_text.strip():
        return None
    return row_text.split()[0]


def extract_first_status(row_text: Optional[str], *keywords: str) -> Optional[str]:
    """First keyword (e.g. Active/Inactive) contained in the row, or None."""
    if not row_text or not row_text.strip():
        return None
    lowered = row_text.lower()
    for keyword in keywords:
        if keyword and keyword.strip() and keyword.lower() in lowered:
            return keyword
    return None


def headers_match_in_order(actual: Sequence[str], expected: Sequence[str]) -> bool:
    """Same length, and each actual header contains the expected one (case-insensitive)."""
    if len(actual) != len(expected):
        return False
    return all(e.lower() in a.lower() for a, e in zip(actual, expected))


def headers_match_exact(
    actual: Sequence[str],
    expected: Sequence[str],
    allow_trailing_blank: bool = True,
) -> bool:
    """
    Exact, case-sensitive header comparison.

    A single extra blank header at the end (Kendo command column) is ignored
    when allow_trailing_blank is set.
    """
    headers = list(actual)
    if (
        allow_trailing_blank
        and len(headers) == len(expected) + 1
        and not headers[-1]
    ):
        headers = headers[:-1]
    return headers == list(expected)


def headers_match_ratio(
    actual: Sequence[str],
    expected: Sequence[str],
    threshold: float = 0.7,
) -> bool:
    """True when at least `threshold` of the expected headers appear in actual."""
    if not actual or not expected:
        return False
    lowered = [a.lower() for a in actual if a]
    matched = sum(1 for e in expected if any(e.lower() in a for a in lowered))
    return matched >= len(expected) * threshold


def is_active_marker(class_attr: Optional[str], aria_current: Optional[str]) -> bool:
    """Navigation item styling that marks the current tab."""
    classes = (class_attr or "").lower()
    if any(marker in classes for marker in ACTIVE_CLASS_MARKERS):
        return True
    return (aria_current or "").lower() in ("page", "true")


def _tab_locator(label: str) -> LocatorMap:
    return {
        "primary": f"nav a:has-text('{label}')",
        "fallback_1": f"a:has-text('{label}')",
        "fallback_2": f"button:has-text('{label}')",
    }


# =============================================================================
# Base page
# =============================================================================

class BasePage:
    """
    Base class for all page objects.

    Usage:
        class FeesPage(BasePage):
            URL_PATH = "/fees"
            UNIQUE_LOCATOR = {"primary": "text=Fee Activity"}

            async def verify_fee_activity_header(self) -> bool:
                return await self.is_visible(self.UNIQUE_LOCATOR)
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""
    UNIQUE_LOCATOR: LocatorMap = {"primary": "h1:has-text('Application')"}

    NAV_TABS: Dict[str, LocatorMap] = {
        "dashboard": _tab_locator("Dashboard"),
        "transactions": _tab_locator("Transactions"),
        "completed": _tab_locator("Completed"),
        "customers": _tab_locator("Customers"),
        "members": _tab_locator("Members"),
        "beneficiaries": _tab_locator("Beneficiaries"),
        "templates": _tab_locator("Templates"),
        "fees": _tab_locator("Fees"),
        "pricing": _tab_locator("Pricing"),
        "health check": _tab_locator("Health Check"),
    }

    TABLE_HEADERS: LocatorMap = {
        "primary": "kendo-grid thead th",
        "fallback_1": "thead tr th",
    }
    TABLE_ROWS: LocatorMap = {
        "primary": "kendo-grid tbody tr.k-master-row",
        "fallback_1": "[class*='data-row']",
        "fallback_2": "tbody tr:not(.k-grid-norecords)",
    }
    SECOND_PAGE_CANDIDATES: Tuple[str, ...] = (
        "button[title='Page 2']",
        "a[title='Page 2']",
        "kendo-pager button:text-is('2')",
        "kendo-pager a:text-is('2')",
    )

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        config: Optional[ConfigLoader] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Application base URL (defaults to `ui.base_url`)
            config: Configuration source (defaults to the ConfigLoader singleton)

        Raises:
            ConfigurationError: When no base URL is configured
        """
        self.page = page
        self.config = config or ConfigLoader()
        base_url = base_url or self.config.get("ui.base_url", "")
        if not base_url:
            raise ConfigurationError(
                "The UI base URL is not configured (ui.base_url / UI_BASE_URL)"
            )
        self.base_url = base_url.rstrip("/")
        self.app_title = self.config.get("ui.app_title", "Application")
        self.timeouts = TimeoutSettings.from_config(self.config)
        self.smart = SmartLocator(page)
        self.driver = PlaywrightDriver(page, smart=self.smart)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    def _ms(self, seconds: float) -> int:
        return int(seconds * 1000)

    # =========================================================================
    # Navigation and load state
    # =========================================================================

    async def navigate(self, wait_for: str = "domcontentloaded") -> None:
        """
        Navigate to this page.

        Retries up to `timeouts.max_retry_attempts` times, pausing
        `timeouts.retry_delay` between attempts.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'

        Raises:
            PageActionError: Every attempt failed
        """
        attempts = max(1, self.timeouts.max_retry_attempts)
        with allure.step(f"Navigate to {self.URL_PATH}"):
            for attempt in range(1, attempts + 1):
                try:
                    await self.page.goto(self.url, wait_until=wait_for)
                    break
                except PlaywrightError as e:
                    if attempt == attempts:
                        raise PageActionError(
                            f"Navigation to {self.url} failed after {attempts} attempts: {e}"
                        ) from e
                    logger.warning(f"Navigation attempt {attempt}/{attempts} failed: {e}")
                    await asyncio.sleep(self.timeouts.retry_delay)
            logger.debug(f"Navigated to: {self.url}")

    async def open(self) -> "BasePage":
        """Navigate to the page and wait for its unique locator."""
        await self.navigate()
        await self.wait_until_loaded()
        return self

    async def wait_until_loaded(self, timeout: Optional[float] = None) -> None:
        """
        Wait until the page's unique locator is visible.

        Raises:
            ElementNotFoundError: When the page did not load in time
        """
        timeout = self.timeouts.default if timeout is None else timeout
        await self.smart.locate(
            self.UNIQUE_LOCATOR,
            timeout=self._ms(timeout),
            element_name=f"{type(self).__name__} unique locator",
        )

    async def is_loaded(self, timeout: float = 5.0) -> bool:
        try:
            await self.wait_until_loaded(timeout)
            return True
        except ElementNotFoundError:
            return False

    async def get_page_title(self) -> str:
        return await self.page.title()

    async def verify_page_title(self) -> bool:
        """Browser title mentions the application (or PAGE_TITLE when set)."""
        try:
            title = await self.page.title()
        except Exception as e:
            logger.debug(f"Title read failed: {e}")
            return False
        expected = self.PAGE_TITLE or self.app_title
        return bool(title) and expected.lower() in title.lower()

    async def wait_for_page_transition(self, timeout: Optional[float] = None) -> bool:
        """Wait for the document to finish loading; False on timeout."""
        timeout = self.timeouts.page_transition if timeout is None else timeout
        return await self.driver.wait_for_transition(timeout)

    async def click_navigation_tab(self, tab_name: str) -> None:
        """
        Click a top navigation tab and wait for the route change.

        Raises:
            ValueError: Unknown tab name
            PageActionError: The tab could not be clicked
        """
        locator = self.NAV_TABS.get(tab_name.lower())
        if locator is None:
            raise ValueError(f"Unknown tab: {tab_name}")

        with allure.step(f"Click navigation tab: {tab_name}"):
            previous_url = self.page.url
            try:
                await self.smart.click(locator, timeout=self._ms(self.timeouts.element_visibility),
                                       element_name=f"{tab_name} tab")
            except Exception as e:
                raise PageActionError(f"Failed to click {tab_name} tab: {e}") from e

            if not await self.driver.wait_for_url_change(previous_url, timeout=5):
                await self.wait_for_page_transition(5)

    async def verify_tab_active(self, tab_name: str) -> bool:
        """True when the named tab carries an active/selected/current marker."""
        locator = self.NAV_TABS.get(tab_name.lower())
        if locator is None:
            return False
        try:
            element = await self.smart.locate(locator, timeout=2000, element_name=f"{tab_name} tab")
            return is_active_marker(
                await element.get_attribute("class"),
                await element.get_attribute("aria-current"),
            )
        except Exception as e:
            logger.debug(f"Tab state check failed for {tab_name}: {e}")
            return False

    # =========================================================================
    # Visibility checks
    # =========================================================================

    async def is_visible(self, target: LocatorTarget, timeout: float = 2.0) -> bool:
        return await self.smart.is_visible(target, timeout=self._ms(timeout))

    async def verify_main_header(self) -> bool:
        return await self.is_visible("main_header", timeout=self.timeouts.element_visibility)

    async def verify_navigation_tabs_present(self) -> bool:
        return await self.is_visible("navigation_tabs", timeout=self.timeouts.element_visibility)

    async def verify_data_table_present(self) -> bool:
        return await self.is_visible("data_table", timeout=self.timeouts.element_visibility)

    async def verify_no_records_message(self, timeout: float = 2.0) -> bool:
        return await self.is_visible("no_records_message", timeout=timeout)

    async def verify_no_records_message_when_empty(self) -> bool:
        """An empty grid must show the empty-state message."""
        if await self.get_data_row_count() > 0:
            return True
        return await self.verify_no_records_message()

    async def verify_pagination_controls(self) -> bool:
        return await self.is_visible("pagination")

    async def verify_page_status_display(self) -> bool:
        return await self.is_visible("page_info")

    async def verify_items_per_page_selector(self) -> bool:
        return await self.is_visible("items_per_page")

    async def verify_search_input(self) -> bool:
        return await self.is_visible("search_input")

    async def verify_export_to_csv_button(self) -> bool:
        return await self.is_visible("export_csv_button")

    # =========================================================================
    # Grid reading
    # =========================================================================

    async def _texts(self, target: LocatorTarget) -> List[str]:
        texts = []
        for element in await self.smart.locate_all(target):
            try:
                texts.append((await element.inner_text()).strip())
            except Exception as e:
                logger.debug(f"Skipping detached element: {e}")
        return texts

    async def get_column_headers(
        self,
        include_empty: bool = False,
        empty_placeholder: str = "",
    ) -> List[str]:
        """
        Column header texts in display order.

        Args:
            include_empty: Keep blank headers (e.g. a command column)
            empty_placeholder: Text used for kept blank headers
        """
        headers = []
        for text in await self._texts(self.TABLE_HEADERS):
            if text:
                headers.append(text)
            elif include_empty:
                headers.append(empty_placeholder)
        return headers

    async def get_data_row_count(self) -> int:
        return len(await self.smart.locate_all(self.TABLE_ROWS))

    async def verify_table_has_data(self) -> bool:
        return await self.get_data_row_count() > 0

    async def get_all_row_texts(self) -> List[str]:
        return [text for text in await self._texts(self.TABLE_ROWS) if text]

    async def get_page_status(self) -> str:
        try:
            return (await self.smart.get_text("page_info", timeout=2000)).strip()
        except ElementNotFoundError:
            return ""

    async def get_page_status_info(self) -> PageStatus:
        return parse_page_status(await self.get_page_status())

    async def verify_multi_page_data_set(self) -> bool:
        return (await self.get_page_status_info()).is_multi_page

    async def verify_item_count_summary(self) -> bool:
        return (await self.get_page_status_info()).has_item_summary

    # =========================================================================
    # Search and paging
    # =========================================================================

    async def wait_for_search_results(self, timeout: float = 5.0) -> bool:
        """Wait for the grid to settle after a search or page change."""

        async def empty_state() -> bool:
            return await self.smart.is_visible("no_records_message", timeout=0)

        return await wait_for_stable_count(
            self.get_data_row_count,
            empty_state,
            timeout=timeout,
        )

    async def search(self, text: str, timeout: float = 5.0) -> None:
        """
        Type into the grid search box and wait for the grid to settle.

        Raises:
            PageActionError: The search box is not available
        """
        with allure.step(f"Search: {text}"):
            try:
                field = await self.smart.locate(
                    "search_input", timeout=self._ms(self.timeouts.element_visibility)
                )
                await field.fill(text or "")
                await field.press("Enter")
            except Exception as e:
                raise PageActionError(f"Failed to search for '{text}': {e}") from e
            await self.wait_for_search_results(timeout)

    async def clear_search(self, timeout: float = 5.0) -> None:
        await self.search("", timeout)

    async def strict_search(self, term: str) -> SearchOutcome:
        """Search, then report whether any row contains the term."""
        await self.search(term)
        rows = await self.get_all_row_texts()
        empty_state = await self.verify_no_records_message(timeout=0.5)
        has_match = any(term.lower() in row.lower() for row in rows)
        return SearchOutcome(has_match=has_match, empty_state=empty_state, row_count=len(rows))

    async def verify_search_has_match(self, term: str) -> bool:
        """
        True only if at least one row contains the term.

        An empty grid fails this check even when the empty-state message is
        shown, so a wrongly empty result cannot pass as "search applied".
        """
        rows = await self.get_all_row_texts()
        if not rows:
            return False
        return any(term.lower() in row.lower() for row in rows)

    async def get_first_row_token_and_status(
        self, *status_keywords: str
    ) -> Tuple[Optional[str], Optional[str]]:
        """First token of the first row and the first status keyword it contains."""
        rows = await self.get_all_row_texts()
        if not rows:
            return None, None
        return extract_first_token(rows[0]), extract_first_status(rows[0], *status_keywords)

    async def click_second_page_if_available(self) -> bool:
        """Click the pager's "2" button if present."""
        for selector in self.SECOND_PAGE_CANDIDATES:
            try:
                candidate = self.page.locator(selector)
                if await candidate.count() == 0:
                    continue
                await candidate.first.click()
            except Exception as e:
                logger.debug(f"Page 2 candidate {selector} failed: {e}")
                continue
            await self.wait_for_search_results()
            return True
        return False

    async def click_export_to_csv(self) -> None:
        with allure.step("Click Export to CSV"):
            try:
                await self.smart.click("export_csv_button",
                                       timeout=self._ms(self.timeouts.element_visibility))
            except Exception as e:
                raise PageActionError(f"Failed to click Export to CSV: {e}") from e
            await self.wait_for_page_transition(2)


__all__ = [
    "BasePage",
    "PageBase",
    "PageActionError",
    "PageStatus",
    "SearchOutcome",
    "extract_first_status",
    "extract_first_token",
    "headers_match_exact",
    "headers_match_in_order",
    "headers_match_ratio",
    "is_active_marker",
    "parse_page_status",
]

# Page objects use either name
PageBase = BasePage
