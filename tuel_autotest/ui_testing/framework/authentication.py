"""
================================================================================
Authentication State Classifier
================================================================================

Tracks a browser's progress through the identity-provider (IdP) sign-in flow
that guards the application, and drives that flow to a signed-in state.

State detection is a pure function of the current URL and the visibility of a
few IdP elements, recomputed on every call:

    1. application URL without "login"/"auth"      -> LOGGED_IN
    2. IdP host, then by visible element:
         password field                              -> PASSWORD_REQUIRED
         email field                                 -> USERNAME_REQUIRED
         "stay signed in?" No button                 -> STAY_SIGNED_IN_PROMPT
         none of the above                           -> ON_LOGIN_PAGE
    3. data: / about:blank / empty                   -> TRANSITIONING
    4. anything else                                 -> UNKNOWN

The IdP decides which screen comes next; the classifier only observes.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence
from urllib.parse import urlparse

import allure
from loguru import logger

from tuel_autotest.common import mask_sensitive

from .config_loader import ConfigLoader
from .driver import BrowserDriver
from .smart_locator import ElementNotFoundError
from .waits import poll_until


class AuthenticationState(str, Enum):
    """Where the browser currently is in the sign-in flow."""

    UNKNOWN = "Unknown"
    TRANSITIONING = "Transitioning"
    USERNAME_REQUIRED = "UsernameRequired"
    PASSWORD_REQUIRED = "PasswordRequired"
    STAY_SIGNED_IN_PROMPT = "StaySignedInPrompt"
    ON_LOGIN_PAGE = "OnLoginPage"
    LOGGED_IN = "LoggedIn"


class LoginError(Exception):
    """Base class for login flow failures."""
    pass


class LoginConfigurationError(LoginError):
    """Raised when credentials are missing; never retried."""
    pass


class LoginFailedError(LoginError):
    """Raised when every attempt is used up without reaching LOGGED_IN."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


DEFAULT_IDP_HOST = "login.microsoftonline.com"
DEFAULT_APP_MARKERS: Sequence[str] = ("application", "dashboard")
LOGIN_URL_MARKERS: Sequence[str] = ("login", "auth")


@dataclass(frozen=True)
class LoginTimings:
    """
    Bounds for the login flow, in seconds.

    Attributes:
        max_attempts: Full passes through the flow before giving up
        retry_backoff: Pause after a failed pass
        transition_timeout: Wait for a blank/data: page to resolve
        completion_timeout: Wait for LOGGED_IN at the end of a pass
        poll_interval: Pause between state checks
        element_timeout: Wait for an input or button to become visible
        settle: Pause after submitting the password or dismissing the prompt
    """
    max_attempts: int = 3
    retry_backoff: float = 2.0
    transition_timeout: float = 5.0
    completion_timeout: float = 10.0
    poll_interval: float = 1.0
    element_timeout: float = 10.0
    settle: float = 2.0

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "LoginTimings":
        config = config or ConfigLoader()
        return cls(
            max_attempts=int(config.get("login.max_attempts", 3)),
            retry_backoff=float(config.get("login.retry_backoff_seconds", 2.0)),
            transition_timeout=float(config.get("login.transition_timeout_seconds", 5.0)),
            completion_timeout=float(config.get("login.completion_timeout_seconds", 10.0)),
            poll_interval=float(config.get("login.poll_interval_seconds", 1.0)),
            element_timeout=float(config.get("login.element_timeout_seconds", 10.0)),
            settle=float(config.get("login.settle_seconds", 2.0)),
        )


@dataclass(frozen=True)
class LoginLocators:
    """Smart-locator names (or inline maps) for the IdP elements."""
    email_input: str = "email_input"
    next_button: str = "next_button"
    password_input: str = "password_input"
    sign_in_button: str = "sign_in_button"
    stay_signed_in_no: str = "stay_signed_in_no"


class AuthenticationStateClassifier:
    """
    Classifies and drives the IdP sign-in flow.

    Usage:
        classifier = AuthenticationStateClassifier(
            PlaywrightDriver(page),
            app_markers=["application", "dashboard", "tuel.example.com"],
        )
        state = await classifier.classify()
        await classifier.login("user@example.com", "secret")
    """

    def __init__(
        self,
        driver: BrowserDriver,
        idp_host: str = DEFAULT_IDP_HOST,
        app_markers: Optional[Iterable[str]] = None,
        timings: Optional[LoginTimings] = None,
        locators: Optional[LoginLocators] = None,
    ):
        self.driver = driver
        self.idp_host = idp_host.lower()
        markers = DEFAULT_APP_MARKERS if app_markers is None else app_markers
        self.app_markers = tuple(m.lower() for m in markers if m)
        self.timings = timings or LoginTimings()
        self.locators = locators or LoginLocators()

    @classmethod
    def from_config(
        cls,
        driver: BrowserDriver,
        config: Optional[ConfigLoader] = None,
    ) -> "AuthenticationStateClassifier":
        """Build a classifier from `auth.*`, `ui.*` and `login.*` settings."""
        config = config or ConfigLoader()
        markers = list(config.get("ui.app_markers", list(DEFAULT_APP_MARKERS)))
        base_host = urlparse(config.get("ui.base_url", "") or "").hostname
        if base_host and base_host not in ("localhost", "127.0.0.1"):
            markers.append(base_host)
        return cls(
            driver,
            idp_host=config.get("auth.idp_host", DEFAULT_IDP_HOST),
            app_markers=markers,
            timings=LoginTimings.from_config(config),
        )

    # =========================================================================
    # Classification
    # =========================================================================

    def _is_application_url(self, url: str) -> bool:
        if self.idp_host in url:
            return False
        if any(marker in url for marker in LOGIN_URL_MARKERS):
            return False
        return any(marker in url for marker in self.app_markers)

    async def _displayed(self, locator: str) -> bool:
        return await self.driver.find_visible(locator, timeout=0) is not None

    async def classify(self) -> AuthenticationState:
        """
        Report the current sign-in state. Never raises.

        Reads the URL once and checks element visibility without waiting.
        """
        try:
            url = (await self.driver.current_url() or "").strip().lower()

            if self._is_application_url(url):
                return AuthenticationState.LOGGED_IN

            if self.idp_host in url:
                if await self._displayed(self.locators.password_input):
                    return AuthenticationState.PASSWORD_REQUIRED
                if await self._displayed(self.locators.email_input):
                    return AuthenticationState.USERNAME_REQUIRED
                if await self._displayed(self.locators.stay_signed_in_no):
                    return AuthenticationState.STAY_SIGNED_IN_PROMPT
                return AuthenticationState.ON_LOGIN_PAGE

            if not url or url.startswith("data:") or url == "about:blank":
                return AuthenticationState.TRANSITIONING

            return AuthenticationState.UNKNOWN
        except Exception as e:
            logger.warning(f"Auth state detection error: {e}")
            return AuthenticationState.UNKNOWN

    async def _log_state(self, label: str) -> AuthenticationState:
        state = await self.classify()
        try:
            url = await self.driver.current_url()
            title = await self.driver.current_title()
        except Exception as e:
            url, title = "<unavailable>", f"<unavailable: {e}>"
        logger.info(f"{label}: state={state.value} url={url} title={title!r}")
        return state

    # =========================================================================
    # Login flow
    # =========================================================================

    async def login(self, username: str, password: str) -> None:
        """
        Drive the sign-in flow until the application is reached.

        Raises:
            LoginConfigurationError: username or password is empty
            LoginFailedError: max_attempts passes failed; chained to the last error
        """
        if not username or not password:
            raise LoginConfigurationError(
                "Username or password not configured "
                "(set AUTH_USERNAME / AUTH_PASSWORD or auth.username / auth.password)"
            )

        state = await self._log_state("Initial authentication state")
        if state == AuthenticationState.LOGGED_IN:
            logger.info("Already logged in, no authentication needed")
            return

        if state == AuthenticationState.TRANSITIONING:
            await self._wait_out_transition()

        attempts = self.timings.max_attempts
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            try:
                with allure.step(f"Login attempt {attempt}/{attempts}"):
                    await self._perform_pass(username, password)
                logger.info(f"Authentication completed successfully on attempt {attempt}")
                return
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Login attempt {attempt}/{attempts} failed: "
                    f"{mask_sensitive(str(e), [password])}"
                )
                if attempt < attempts:
                    await asyncio.sleep(self.timings.retry_backoff)
                    await self._log_state(f"State before attempt {attempt + 1}")

        raise LoginFailedError(
            f"Login failed after {attempts} attempts", attempts=attempts
        ) from last_error

    async def _wait_out_transition(self) -> None:
        async def resolved() -> bool:
            return await self.classify() != AuthenticationState.TRANSITIONING

        settled = await poll_until(
            resolved,
            interval=self.timings.poll_interval,
            timeout=self.timings.transition_timeout,
            description="redirect to the sign-in page",
            raise_on_timeout=False,
        )
        if not settled:
            logger.info("Page still transitioning, continuing with login attempts")

    async def _perform_pass(self, username: str, password: str) -> None:
        state = await self._log_state("Pass start")
        if state in (AuthenticationState.USERNAME_REQUIRED, AuthenticationState.ON_LOGIN_PAGE):
            await self._enter_username(username)

        state = await self._log_state("After username step")
        if state == AuthenticationState.PASSWORD_REQUIRED:
            await self._enter_password(password)

        state = await self._log_state("After password step")
        if state == AuthenticationState.STAY_SIGNED_IN_PROMPT:
            await self._dismiss_stay_signed_in()

        await self._wait_for_logged_in()

    async def _require(self, locator: str):
        element = await self.driver.find_visible(locator, timeout=self.timings.element_timeout)
        if element is None:
            raise ElementNotFoundError(
                f"'{locator}' not visible within {self.timings.element_timeout}s"
            )
        return element

    async def _enter_username(self, username: str) -> None:
        with allure.step("Enter username"):
            email = await self._require(self.locators.email_input)
            await self.driver.type_text(email, username)
            next_button = await self._require(self.locators.next_button)
            await self.driver.click(next_button)
            await self.driver.wait_for_transition(self.timings.transition_timeout)

    async def _enter_password(self, password: str) -> None:
        with allure.step("Enter password"):
            field = await self._require(self.locators.password_input)
            await self.driver.type_text(field, password)
            sign_in = await self._require(self.locators.sign_in_button)
            await self.driver.click(sign_in)
            await asyncio.sleep(self.timings.settle)

    async def _dismiss_stay_signed_in(self) -> None:
        with allure.step("Dismiss 'Stay signed in?' prompt"):
            try:
                button = await self._require(self.locators.stay_signed_in_no)
                await self.driver.click(button)
                await asyncio.sleep(self.timings.settle)
            except Exception as e:
                # The completion poll decides whether the pass succeeded
                logger.warning(f"Stay signed in prompt handling failed: {e}")

    async def _wait_for_logged_in(self) -> None:
        async def logged_in() -> bool:
            state = await self.classify()
            logger.debug(f"Current auth state: {state.value}")
            if state == AuthenticationState.STAY_SIGNED_IN_PROMPT:
                await self._dismiss_stay_signed_in()
                state = await self.classify()
            return state == AuthenticationState.LOGGED_IN

        await poll_until(
            logged_in,
            interval=self.timings.poll_interval,
            timeout=self.timings.completion_timeout,
            description="authentication to complete",
        )


__all__ = [
    "AuthenticationState",
    "AuthenticationStateClassifier",
    "LoginError",
    "LoginConfigurationError",
    "LoginFailedError",
    "LoginLocators",
    "LoginTimings",
]
