"""
================================================================================
Transactions Page Object (Async / Playwright)
================================================================================

Transaction Items grid with two sub-tabs: the default order list and
Transaction Details (one row per account and member with effective and
expiration dates). A Product Records sub-tab sits beside them.

================================================================================
"""

from __future__ import annotations

from typing import List, Sequence

import allure

from tuel_autotest.ui_testing.framework.page_base import PageActionError, PageBase, headers_match_in_order


EXPECTED_COLUMNS: List[str] = [
    "View", "Account", "Customer", "Order Date", "Delivery Date", "Amount",
    "Product #", "Product Type", "Document", "Status",
]

DETAIL_COLUMNS: List[str] = [
    "View", "Account", "Member", "Effective Date", "Expiration Date", "Amount", "Status",
]


def headers_equal_ignore_case(actual: Sequence[str], expected: Sequence[str]) -> bool:
    return [a.strip().lower() for a in actual] == [e.lower() for e in expected]


class TransactionsPage(PageBase):
    """Transactions page object (async)."""

    URL_PATH = "/transactions"
    UNIQUE_LOCATOR = {
        "primary": "h3:has-text('Transaction Items')",
        "fallback_1": "div:text-is('Transaction Items')",
        "fallback_2": "text=Transaction Items",
    }

    DETAILS_SUB_TAB = {
        "primary": "span:has-text('Transaction Details')",
        "fallback_1": "[class*='tab']:has-text('Transaction Details')",
    }
    PRODUCT_RECORDS_SUB_TAB = {
        "primary": "span:has-text('Product Records')",
        "fallback_1": "[class*='tab']:has-text('Product Records')",
    }

    async def verify_transaction_items_header(self) -> bool:
        return await self.is_visible(self.UNIQUE_LOCATOR, timeout=self.timeouts.element_visibility)

    async def verify_transactions_tab_active(self) -> bool:
        return await self.verify_tab_active("transactions")

    async def verify_column_headers_in_order(self) -> bool:
        return headers_match_in_order(await self.get_column_headers(), EXPECTED_COLUMNS)

    async def verify_product_records_sub_tab(self) -> bool:
        return await self.is_visible(self.PRODUCT_RECORDS_SUB_TAB)

    async def verify_transaction_details_headers(self) -> bool:
        """Transaction Details columns, exact order, case-insensitive."""
        return headers_equal_ignore_case(await self.get_column_headers(), DETAIL_COLUMNS)

    @allure.step("Open Transactions tab")
    async def click_transactions_tab(self) -> None:
        await self.click_navigation_tab("transactions")
        await self.wait_until_loaded(self.timeouts.page_transition)

    @allure.step("Open Transaction Details sub-tab")
    async def click_transaction_details_sub_tab(self) -> None:
        """
        Raises:
            PageActionError: The sub-tab is missing or did not render a grid
        """
        try:
            await self.smart.click(self.DETAILS_SUB_TAB, element_name="transaction details sub-tab")
        except Exception as e:
            raise PageActionError(f"Failed to click Transaction Details sub-tab: {e}") from e
        if not await self.wait_for_page_transition(5):
            if not await self.is_visible("data_table", timeout=5):
                raise PageActionError("Transaction Details grid did not load")

    @allure.step("Search transactions: {text}")
    async def search_transactions(self, text: str) -> None:
        await self.search(text)
