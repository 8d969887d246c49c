"""
================================================================================
Dashboard Page Object (Async / Playwright)
================================================================================

Landing tab after sign-in. Two grids share the page:
    - Approval Queue (items awaiting approval)
    - Send Items (approved items waiting to be sent)

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from tuel_autotest.ui_testing.framework.page_base import PageBase, headers_match_ratio


EXPECTED_COLUMNS: List[str] = [
    "View", "Account", "Customer", "Order Date", "Delivery Date", "Customer",
    "Amount", "Product #", "Product Type", "Created On", "Created By",
    "Comments", "Status", "Priority",
]


class DashboardPage(PageBase):
    """Dashboard page object (async)."""

    URL_PATH = "/dashboard"
    UNIQUE_LOCATOR = {
        "primary": "div:has-text('Approval Queue')",
        "fallback_1": "h1:has-text('Application')",
    }

    APPROVAL_QUEUE_HEADER = {
        "primary": "div:text-is('Approval Queue')",
        "fallback_1": "h2:has-text('Approval Queue')",
        "fallback_2": "h3:has-text('Approval Queue')",
    }
    APPROVAL_QUEUE_SEARCH = {
        "primary": "app-approval-q input[placeholder='Search']",
        "fallback_1": "app-approval-q input",
    }
    APPROVAL_QUEUE_TABLE = {
        "primary": "app-approval-q kendo-grid",
        "fallback_1": "app-approval-q table",
        "fallback_2": "kendo-grid",
    }
    SEND_ITEMS_HEADER = {
        "primary": "div:text-is('Send Items')",
        "fallback_1": "h2:has-text('Send Items')",
        "fallback_2": "h3:has-text('Send Items')",
    }
    SEND_ITEMS_SEARCH = {
        "primary": "app-send-q input[placeholder='Search']",
        "fallback_1": "app-send-q input",
    }
    SEND_ITEMS_TABLE = {
        "primary": "app-send-q kendo-grid",
        "fallback_1": "app-send-q table",
        "fallback_2": "app-send-q app-data-grid",
    }

    @allure.step("Open dashboard")
    async def open(self) -> "DashboardPage":
        await super().open()
        return self

    async def verify_dashboard_tab_active(self) -> bool:
        return await self.verify_tab_active("dashboard")

    # Approval Queue

    async def verify_approval_queue_section(self) -> bool:
        return await self.is_visible(self.APPROVAL_QUEUE_HEADER, timeout=self.timeouts.element_visibility)

    async def verify_approval_queue_table(self) -> bool:
        return await self.is_visible(self.APPROVAL_QUEUE_TABLE)

    async def verify_approval_queue_search(self) -> bool:
        return await self.is_visible(self.APPROVAL_QUEUE_SEARCH)

    @allure.step("Search Approval Queue: {text}")
    async def search_approval_queue(self, text: str) -> None:
        await self.smart.fill(self.APPROVAL_QUEUE_SEARCH, text, element_name="approval queue search")
        await self.wait_for_search_results()

    # Send Items

    async def verify_send_items_section(self) -> bool:
        return await self.is_visible(self.SEND_ITEMS_HEADER, timeout=self.timeouts.element_visibility)

    async def verify_send_items_table(self) -> bool:
        return await self.is_visible(self.SEND_ITEMS_TABLE)

    async def verify_send_items_search(self) -> bool:
        return await self.is_visible(self.SEND_ITEMS_SEARCH)

    @allure.step("Search Send Items: {text}")
    async def search_send_items(self, text: str) -> None:
        await self.smart.fill(self.SEND_ITEMS_SEARCH, text, element_name="send items search")
        await self.wait_for_search_results()

    # Grid

    async def verify_table_columns(self) -> bool:
        """At least 70% of the expected columns are present."""
        return headers_match_ratio(await self.get_column_headers(), EXPECTED_COLUMNS, threshold=0.7)

    async def click_transactions_tab(self) -> None:
        await self.click_navigation_tab("transactions")
