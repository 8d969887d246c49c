"""
================================================================================
Fees Page Object (Async / Playwright)
================================================================================

Fee activity grid plus the Fee Parameters sub-page reached through
"View Fee Parameters".

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure

from tuel_autotest.ui_testing.framework.page_base import PageActionError, PageBase, headers_match_exact


# The Kendo grid renders a trailing command column with an empty header
EXPECTED_COLUMNS: List[str] = [
    "Account", "Customer", "Product #", "Amount", "Order Date", "Delivery Date",
    "Fee", "Charge Date", "Fee Start Date", "Fee End Date", "Status", "",
]

STATUS_KEYWORDS = ("Active", "Inactive", "Pending", "Completed")


class FeesPage(PageBase):
    """Fees page object (async)."""

    URL_PATH = "/fees"
    UNIQUE_LOCATOR = {
        "primary": "text=Fee Activity",
        "fallback_1": "h2:has-text('Fee Activity')",
        "fallback_2": "h3:has-text('Fee Activity')",
    }

    VIEW_FEE_PARAMETERS_BUTTON = {
        "primary": "button:has-text('View Fee Parameters')",
        "fallback_1": "a:has-text('View Fee Parameters')",
    }
    FEE_PARAMETERS_HEADER = {
        "primary": "h1:text-is('Fee Parameters')",
    }

    async def verify_fee_activity_sub_header(self) -> bool:
        return await self.is_visible(self.UNIQUE_LOCATOR, timeout=self.timeouts.element_visibility)

    async def verify_fees_tab_active(self) -> bool:
        return await self.verify_tab_active("fees")

    async def verify_view_fee_parameters_button(self) -> bool:
        return await self.is_visible(self.VIEW_FEE_PARAMETERS_BUTTON)

    async def verify_fee_parameters_header(self) -> bool:
        return await self.is_visible(self.FEE_PARAMETERS_HEADER, timeout=self.timeouts.element_visibility)

    async def verify_column_headers_in_exact_order(self) -> bool:
        headers = await self.get_column_headers(include_empty=True)
        return headers_match_exact(headers, EXPECTED_COLUMNS)

    @allure.step("Search fees: {text}")
    async def search_fees(self, text: str) -> None:
        await self.search(text)

    async def clear_fees_search(self) -> None:
        await self.clear_search()

    async def get_first_fee_token_and_status(self):
        return await self.get_first_row_token_and_status(*STATUS_KEYWORDS)

    @allure.step("Open Fee Parameters")
    async def click_view_fee_parameters(self) -> None:
        try:
            await self.smart.click(self.VIEW_FEE_PARAMETERS_BUTTON, element_name="view fee parameters")
        except Exception as e:
            raise PageActionError(f"Failed to open Fee Parameters: {e}") from e
        await self.wait_for_fee_parameters_page()

    async def wait_for_fee_parameters_page(self, timeout: Optional[float] = None) -> None:
        timeout = self.timeouts.default if timeout is None else timeout
        await self.smart.locate(self.FEE_PARAMETERS_HEADER, timeout=self._ms(timeout),
                                element_name="fee parameters header")

    @allure.step("Navigate back to Fees")
    async def navigate_back_to_fees(self) -> None:
        await self.page.go_back()
        await self.wait_until_loaded(self.timeouts.page_transition)
