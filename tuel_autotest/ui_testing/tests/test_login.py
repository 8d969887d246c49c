"""
================================================================================
Login UI Tests (Async / Playwright)
================================================================================

Signs in through the identity provider and lands in the application.

================================================================================
"""

import allure
import pytest

from tuel_autotest.ui_testing.framework.authentication import AuthenticationState
from tuel_autotest.ui_testing.pages.login_page import LoginPage


@allure.epic("UI Testing")
@allure.feature("Login")
class TestLogin:
    """Sign-in test suite (async)."""

    @allure.story("Redirect")
    @allure.title("Unauthenticated browser is sent to the sign-in page")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_redirects_to_sign_in(self, login_page: LoginPage):
        await login_page.open()

        assert await login_page.is_login_page_displayed(), "Sign-in page should be displayed"

    @allure.story("Sign in")
    @allure.title("Configured user signs in and reaches the application")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_sign_in_reaches_application(self, login_page: LoginPage):
        await login_page.ensure_logged_in()

        assert await login_page.get_authentication_state() == AuthenticationState.LOGGED_IN
        assert await login_page.verify_page_title(), "Browser title should name the application"
