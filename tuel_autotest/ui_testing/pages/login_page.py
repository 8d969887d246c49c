"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

The application redirects unauthenticated browsers to the identity provider
(IdP). This page object opens the application and hands the IdP flow to
`AuthenticationStateClassifier`, which detects each screen and drives it.

Credentials come from `auth.username` / `auth.password` (or the
AUTH_USERNAME / AUTH_PASSWORD environment variables) and are never logged.

================================================================================
"""

from __future__ import annotations

from typing import Optional, Tuple

import allure
from loguru import logger

from tuel_autotest.ui_testing.framework.authentication import (
    AuthenticationState,
    AuthenticationStateClassifier,
)
from tuel_autotest.ui_testing.framework.page_base import PageBase


SIGN_IN_STATES = (
    AuthenticationState.USERNAME_REQUIRED,
    AuthenticationState.PASSWORD_REQUIRED,
    AuthenticationState.STAY_SIGNED_IN_PROMPT,
    AuthenticationState.ON_LOGIN_PAGE,
)


class LoginPage(PageBase):
    """IdP sign-in page object (async)."""

    URL_PATH = "/"
    UNIQUE_LOCATOR = {
        "primary": "input[type='email']",
        "fallback_1": "div.login-paginated-page",
        "fallback_2": "div.sign-in-box",
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.classifier = AuthenticationStateClassifier.from_config(self.driver, self.config)

    def credentials(self) -> Tuple[str, str]:
        """Configured (username, password); empty strings when unset."""
        return (
            self.config.get("auth.username", "") or "",
            self.config.get("auth.password", "") or "",
        )

    @allure.step("Open application")
    async def open(self) -> "LoginPage":
        """Navigate to the application root; unauthenticated browsers land on the IdP."""
        await self.navigate()
        await self.wait_for_page_transition()
        return self

    async def get_authentication_state(self) -> AuthenticationState:
        return await self.classifier.classify()

    async def is_login_page_displayed(self, timeout: float = 5.0) -> bool:
        """Email field, IdP container, or an IdP URL."""
        if await self.is_visible("email_input", timeout=timeout):
            return True
        if await self.is_visible("login_container", timeout=timeout):
            return True
        return await self.get_authentication_state() in SIGN_IN_STATES

    async def verify_login_error_displayed(self) -> bool:
        return await self.is_visible("login_error", timeout=3)

    async def login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """
        Sign in through the IdP.

        Args:
            username: Defaults to the configured username
            password: Defaults to the configured password

        Raises:
            LoginConfigurationError: No credentials available
            LoginFailedError: Every attempt failed
        """
        default_username, default_password = self.credentials()
        # Credentials must not reach the report as step parameters
        with allure.step("Login"):
            await self.classifier.login(
                username if username is not None else default_username,
                password if password is not None else default_password,
            )

    async def ensure_logged_in(self) -> bool:
        """
        Open the application and sign in unless already signed in.

        Returns:
            True when the IdP flow ran, False when the session was already
            authenticated
        """
        await self.open()
        if await self.get_authentication_state() == AuthenticationState.LOGGED_IN:
            logger.info("Session already authenticated")
            return False
        await self.login()
        return True
