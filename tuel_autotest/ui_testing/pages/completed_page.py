"""
================================================================================
Completed Page Object (Async / Playwright)
================================================================================

Completed Items grid: finished orders with their documents and status.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from tuel_autotest.ui_testing.framework.page_base import PageBase, headers_match_in_order


EXPECTED_COLUMNS: List[str] = [
    "View", "Account", "Customer", "Order Date", "Delivery Date", "Customer",
    "Amount", "Product #", "Product Type", "Document", "Status",
]


class CompletedPage(PageBase):
    """Completed page object (async)."""

    URL_PATH = "/completed"
    UNIQUE_LOCATOR = {
        "primary": "div:text-is('Completed Items')",
        "fallback_1": "h2:has-text('Completed Items')",
        "fallback_2": "h3:has-text('Completed Items')",
    }

    async def verify_completed_items_header(self) -> bool:
        return await self.is_visible(self.UNIQUE_LOCATOR, timeout=self.timeouts.element_visibility)

    async def verify_completed_tab_active(self) -> bool:
        return await self.verify_tab_active("completed")

    async def verify_column_headers_in_order(self) -> bool:
        return headers_match_in_order(await self.get_column_headers(), EXPECTED_COLUMNS)

    @allure.step("Open Completed tab")
    async def click_completed_tab(self) -> None:
        await self.click_navigation_tab("completed")
        await self.wait_until_loaded(self.timeouts.page_transition)

    @allure.step("Search completed items: {text}")
    async def search_completed_items(self, text: str) -> None:
        await self.search(text)
