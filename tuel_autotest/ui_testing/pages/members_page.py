"""
================================================================================
Members Page Object (Async / Playwright)
================================================================================

Member institutions: grid of banks and credit unions with their addresses.

================================================================================
"""

from __future__ import annotations

import re
from typing import List

import allure

from tuel_autotest.ui_testing.framework.page_base import PageActionError, PageBase, headers_match_in_order


EXPECTED_COLUMNS: List[str] = [
    "View", "Account", "Member", "Address", "Address 2", "City", "State",
    "Zip Code", "Address Override in Place?",
]

FINANCIAL_KEYWORDS = ("bank", "credit union", "savings", "loan", "financial", "federal", "national")

_ADDRESS_HINTS = (re.compile(r"\d{5}"), re.compile(r"\b[A-Z]{2}\b"), re.compile(r"\d+"))


class MembersPage(PageBase):
    """Members page object (async)."""

    URL_PATH = "/members"
    PAGE_TITLE = "Members"
    UNIQUE_LOCATOR = {
        "primary": "app-members h3:has-text('Members')",
        "fallback_1": "h3:has-text('Members')",
    }

    VIEW_BUTTONS = {
        "primary": "tbody tr a:has-text('View')",
        "fallback_1": "tbody tr .grid-link",
    }
    PAGER_ARROWS = {
        "primary": "kendo-pager button.k-pager-nav",
        "fallback_1": "[aria-label*='next page']",
    }

    async def verify_page_header(self) -> bool:
        return await self.is_visible(self.UNIQUE_LOCATOR, timeout=self.timeouts.element_visibility)

    async def verify_members_tab_active(self) -> bool:
        return await self.verify_tab_active("members")

    async def verify_members_page_layout(self) -> bool:
        """Header, search, grid and export button all present."""
        return (
            await self.verify_page_header()
            and await self.verify_search_input()
            and await self.verify_data_table_present()
            and await self.verify_export_to_csv_button()
        )

    async def verify_table_column_headers(self) -> bool:
        return headers_match_in_order(await self.get_column_headers(), EXPECTED_COLUMNS)

    async def verify_view_buttons_in_rows(self) -> bool:
        return bool(await self.smart.locate_all(self.VIEW_BUTTONS))

    async def verify_pagination_arrow_buttons(self) -> bool:
        return await self.is_visible(self.PAGER_ARROWS)

    async def verify_member_data_content(self) -> bool:
        """One of the first three rows names a financial institution."""
        rows = (await self.get_all_row_texts())[:3]
        return any(keyword in row.lower() for row in rows for keyword in FINANCIAL_KEYWORDS)

    async def verify_address_information(self) -> bool:
        """First row looks like it holds an address (zip, state or street number)."""
        rows = await self.get_all_row_texts()
        if not rows:
            return False
        return any(pattern.search(rows[0]) for pattern in _ADDRESS_HINTS)

    async def verify_search_results_update(self, term: str) -> bool:
        """Row count changes after searching, or the empty-state message shows."""
        before = await self.get_data_row_count()
        await self.search(term)
        after = await self.get_data_row_count()
        return after != before or await self.verify_no_records_message()

    @allure.step("Open member row {row_index}")
    async def click_view_button(self, row_index: int = 0) -> None:
        buttons = await self.smart.locate_all(self.VIEW_BUTTONS)
        if row_index >= len(buttons):
            raise PageActionError(f"No View button for row {row_index} ({len(buttons)} rows)")
        await buttons[row_index].click()
        await self.wait_for_page_transition()
