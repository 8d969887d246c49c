"""
================================================================================
Beneficiaries Page Object (Async / Playwright)
================================================================================

Beneficiaries grid: payees with up to three address lines, View links per
row and an "Add New Beneficiary" action.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from tuel_autotest.ui_testing.framework.page_base import PageActionError, PageBase, headers_match_in_order


EXPECTED_COLUMNS: List[str] = [
    "View", "Beneficiary", "Address", "Address 2", "Address 3", "City", "State", "Zip Code",
]


class BeneficiariesPage(PageBase):
    """Beneficiaries page object (async)."""

    URL_PATH = "/beneficiaries"
    UNIQUE_LOCATOR = {
        "primary": "h3:has-text('Beneficiaries')",
        "fallback_1": "h2:has-text('Beneficiaries')",
        "fallback_2": "div:text-is('Beneficiaries')",
    }

    ADD_NEW_BENEFICIARY_BUTTON = {
        "primary": "button:has-text('Add New Beneficiary')",
        "fallback_1": "text=Add New Beneficiary",
    }
    VIEW_LINKS = {
        "primary": "a.grid-link:has-text('View')",
        "fallback_1": "a[title*='View this beneficiary']",
    }

    async def verify_beneficiaries_header(self) -> bool:
        return await self.is_visible(self.UNIQUE_LOCATOR, timeout=self.timeouts.element_visibility)

    async def verify_beneficiaries_tab_active(self) -> bool:
        return await self.verify_tab_active("beneficiaries")

    async def verify_column_headers_in_order(self) -> bool:
        return headers_match_in_order(await self.get_column_headers(), EXPECTED_COLUMNS)

    async def verify_add_new_beneficiary_button(self) -> bool:
        return await self.is_visible(self.ADD_NEW_BENEFICIARY_BUTTON)

    async def verify_view_links_in_rows(self) -> bool:
        """Every data row carries a View link."""
        links = await self.smart.locate_all(self.VIEW_LINKS)
        rows = await self.get_data_row_count()
        return rows > 0 and len(links) >= rows

    @allure.step("Search beneficiaries: {text}")
    async def search_beneficiaries(self, text: str) -> None:
        await self.search(text)

    @allure.step("Click Add New Beneficiary")
    async def click_add_new_beneficiary(self) -> None:
        try:
            await self.smart.click(self.ADD_NEW_BENEFICIARY_BUTTON, element_name="add new beneficiary")
        except Exception as e:
            raise PageActionError(f"Failed to click Add New Beneficiary: {e}") from e
        await self.wait_for_page_transition()

    @allure.step("Open first beneficiary")
    async def click_first_view_link(self) -> None:
        try:
            await self.smart.click(self.VIEW_LINKS, element_name="first view link")
        except Exception as e:
            raise PageActionError(f"Failed to click first View link: {e}") from e
        await self.wait_for_page_transition()
