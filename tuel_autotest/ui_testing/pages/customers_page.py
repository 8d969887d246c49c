"""
================================================================================
Customers Page Object (Async / Playwright)
================================================================================

Customer list: Kendo grid with a View link per row, a pager, search,
"Add New Customer" and "Export to CSV".

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from tuel_autotest.ui_testing.framework.page_base import PageActionError, PageBase, headers_match_in_order


EXPECTED_COLUMNS: List[str] = [
    "View", "Customer", "Address", "Address 2", "City", "State", "Zip Code",
]


class CustomersPage(PageBase):
    """Customers page object (async)."""

    URL_PATH = "/customers"
    UNIQUE_LOCATOR = {
        "primary": "h3:has-text('Customers')",
        "fallback_1": "h2:has-text('Customers')",
        "fallback_2": "div:text-is('Customers')",
    }

    ADD_NEW_CUSTOMER_BUTTON = {
        "primary": "button:has-text('Add New Customer')",
        "fallback_1": "text=Add New Customer",
    }
    VIEW_LINKS = {
        "primary": "a.grid-link:has-text('View')",
        "fallback_1": "a[title*='View this customer']",
    }

    async def verify_customers_header(self) -> bool:
        return await self.is_visible(self.UNIQUE_LOCATOR, timeout=self.timeouts.element_visibility)

    async def verify_customers_tab_active(self) -> bool:
        return await self.verify_tab_active("customers")

    async def verify_column_headers_in_order(self) -> bool:
        return headers_match_in_order(await self.get_column_headers(), EXPECTED_COLUMNS)

    async def verify_add_new_customer_button(self) -> bool:
        return await self.is_visible(self.ADD_NEW_CUSTOMER_BUTTON)

    async def verify_view_links_in_rows(self) -> bool:
        """Every data row carries a View link."""
        rows = await self.get_data_row_count()
        if rows == 0:
            return False
        return len(await self.smart.locate_all(self.VIEW_LINKS)) >= rows

    @allure.step("Search customers: {text}")
    async def search_customers(self, text: str) -> None:
        await self.search(text)

    @allure.step("Click Add New Customer")
    async def click_add_new_customer(self) -> None:
        try:
            await self.smart.click(self.ADD_NEW_CUSTOMER_BUTTON, element_name="add new customer")
        except Exception as e:
            raise PageActionError(f"Failed to click Add New Customer: {e}") from e
        await self.wait_for_page_transition()

    @allure.step("Open first customer")
    async def click_first_view_link(self) -> None:
        try:
            await self.smart.click(self.VIEW_LINKS, element_name="first view link")
        except Exception as e:
            raise PageActionError(f"Failed to open first customer: {e}") from e
        await self.wait_for_page_transition()
