"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for live UI tests: browser and page lifecycle, sign-in through the
identity provider, and page objects for every tab.

Key Features:
- One browser per test, isolated context
- Signed-in page via LoginPage (credentials from AUTH_USERNAME / AUTH_PASSWORD)
- Signed-in state saved after the first sign-in and reused by later tests
- Screenshot and URL attached to Allure on failure

================================================================================
"""

from typing import AsyncGenerator

import allure
import pytest
import pytest_asyncio
from loguru import logger
from playwright.async_api import Page

from tuel_autotest.ui_testing.framework.browser_manager import BrowserManager
from tuel_autotest.ui_testing.pages import (
    BeneficiariesPage,
    CompletedPage,
    CustomersPage,
    DashboardPage,
    FeesPage,
    HealthCheckPage,
    LoginPage,
    MembersPage,
    TransactionsPage,
)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item so fixtures can react to failures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest_asyncio.fixture
async def browser_manager() -> AsyncGenerator[BrowserManager, None]:
    """Browser configured from the `ui.*` settings."""
    manager = BrowserManager.from_config()
    await manager.start()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def page(request, browser_manager: BrowserManager) -> AsyncGenerator[Page, None]:
    """
    Function-scoped page in a fresh context.

    Tests marked `auth` always start signed out. Attaches a screenshot to the
    Allure report when the test body failed.
    """
    options = {"storage_state": None} if request.node.get_closest_marker("auth") else {}
    page = await browser_manager.new_page(**options)
    yield page

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            allure.attach(
                await page.screenshot(full_page=True),
                name="failure_screenshot",
                attachment_type=allure.attachment_type.PNG,
            )
            allure.attach(
                page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )
        except Exception as e:
            logger.warning(f"Failed to capture screenshot on failure: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page) -> LoginPage:
    return LoginPage(page)


@pytest_asyncio.fixture
async def authenticated_page(
    login_page: LoginPage,
    browser_manager: BrowserManager,
) -> AsyncGenerator[Page, None]:
    """Page signed in to the application."""
    if await login_page.ensure_logged_in():
        await browser_manager.save_auth_state(login_page.page.context)
    yield login_page.page


@pytest_asyncio.fixture
async def dashboard_page(authenticated_page: Page) -> DashboardPage:
    return await DashboardPage(authenticated_page).open()


@pytest_asyncio.fixture
async def customers_page(authenticated_page: Page) -> CustomersPage:
    page = CustomersPage(authenticated_page)
    await page.open()
    return page


@pytest_asyncio.fixture
async def members_page(authenticated_page: Page) -> MembersPage:
    page = MembersPage(authenticated_page)
    await page.open()
    return page


@pytest_asyncio.fixture
async def fees_page(authenticated_page: Page) -> FeesPage:
    page = FeesPage(authenticated_page)
    await page.open()
    return page


@pytest_asyncio.fixture
async def completed_page(authenticated_page: Page) -> CompletedPage:
    page = CompletedPage(authenticated_page)
    await page.open()
    return page


@pytest_asyncio.fixture
async def transactions_page(authenticated_page: Page) -> TransactionsPage:
    page = TransactionsPage(authenticated_page)
    await page.open()
    return page


@pytest_asyncio.fixture
async def beneficiaries_page(authenticated_page: Page) -> BeneficiariesPage:
    page = BeneficiariesPage(authenticated_page)
    await page.open()
    return page


@pytest_asyncio.fixture
async def health_check_page(authenticated_page: Page) -> HealthCheckPage:
    page = HealthCheckPage(authenticated_page)
    await page.open()
    await page.wait_for_health_data_ready()
    return page
