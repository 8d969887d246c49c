"""
================================================================================
Health Check Page Object (Async / Playwright)
================================================================================

System Health page: an overall status badge plus one accordion per backend
component (storage, domain APIs, queues), each with a Healthy / Unhealthy
badge and an expandable detail panel.

The page reports live system state, so checks that depend on the outcome
(all healthy, mixed, all unhealthy) classify the scenario instead of assuming
one. The module-level helpers hold that logic and need no browser.

================================================================================
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Mapping, Optional

import allure
from loguru import logger

from tuel_autotest.ui_testing.framework.page_base import PageActionError, PageBase
from tuel_autotest.ui_testing.framework.waits import poll_until


VALID_HEALTH_STATUSES = ("Healthy", "Unhealthy")

EXPECTED_COMPONENTS: List[str] = [
    "Azure Blob Storage",
    "Domain API",
    "Account Domain Api",
    "Product Domain API",
    "Queues",
]

MIN_COMPONENTS = 5
MEANINGFUL_DETAIL_LENGTH = 10

SCENARIO_ALL_HEALTHY = "All Healthy"
SCENARIO_ALL_UNHEALTHY = "All Unhealthy"
SCENARIO_MIXED = "Mixed Health Status"
SCENARIO_UNKNOWN = "Unknown Status"


def is_valid_health_status(text: Optional[str]) -> bool:
    """Badge text mentions Healthy or Unhealthy (case-insensitive)."""
    if not text:
        return False
    lowered = text.lower()
    return any(status.lower() in lowered for status in VALID_HEALTH_STATUSES)


def summarize_health_statuses(statuses: Mapping[str, str]) -> Dict[str, int]:
    """Count components per exact status; anything else is Unknown."""
    summary = {"Healthy": 0, "Unhealthy": 0, "Unknown": 0}
    for status in statuses.values():
        normalized = (status or "").strip().lower()
        if normalized == "healthy":
            summary["Healthy"] += 1
        elif normalized == "unhealthy":
            summary["Unhealthy"] += 1
        else:
            summary["Unknown"] += 1
    return summary


def classify_health_scenario(statuses: Mapping[str, str]) -> str:
    summary = summarize_health_statuses(statuses)
    healthy, unhealthy = summary["Healthy"], summary["Unhealthy"]
    if healthy and not unhealthy:
        return SCENARIO_ALL_HEALTHY
    if unhealthy and not healthy:
        return SCENARIO_ALL_UNHEALTHY
    if healthy and unhealthy:
        return SCENARIO_MIXED
    return SCENARIO_UNKNOWN


def has_meaningful_detail(text: Optional[str]) -> bool:
    return bool(text) and len(text.strip()) > MEANINGFUL_DETAIL_LENGTH


def enough_valid_statuses(statuses: Mapping[str, str], ratio: float = 0.8) -> bool:
    """At least `ratio` of the badges (and at least one) show a valid status."""
    valid = sum(1 for status in statuses.values() if is_valid_health_status(status))
    return valid >= max(1, len(statuses) * ratio)


def enough_meaningful_details(details: Mapping[str, str], ratio: float = 0.6) -> bool:
    meaningful = sum(1 for detail in details.values() if has_meaningful_detail(detail))
    return meaningful >= max(1, len(details) * ratio)


def detail_quality(details: Mapping[str, str]) -> Dict[str, bool]:
    """Per expected component: does its detail panel say something useful."""
    return {name: has_meaningful_detail(details.get(name)) for name in EXPECTED_COMPONENTS}


class HealthCheckPage(PageBase):
    """Health Check page object (async)."""

    URL_PATH = "/healthcheck"
    PAGE_TITLE = "System Health"
    UNIQUE_LOCATOR = {
        "primary": "h1.summit-page-container-title-text",
        "fallback_1": ".summit-health--header-title",
        "fallback_2": "h1:has-text('System Health')",
    }

    SYSTEM_HEALTH_HEADER = {
        "primary": ".summit-health--header-title",
        "fallback_1": "text=System Health",
    }
    NAV_ACTIVE = {
        "primary": "a[href='/healthcheck'].active",
        "fallback_1": "a[href*='healthcheck'][aria-current='page']",
    }
    OVERALL_SECTION = {"primary": ".summit-health--header"}
    OVERALL_STATUS = {"primary": ".summit-health--header .summit-badge"}
    EXPAND_COLLAPSE_BUTTON = {
        "primary": "button.summit-pill-button.summit-pill-button--link",
        "fallback_1": "button:has-text('Expand all')",
        "fallback_2": "button:has-text('Collapse all')",
    }

    ACCORDIONS = "summit-accordion"
    ACCORDION_TITLE = ".summit-accordion--title"
    ACCORDION_CONTENT = ".summit-accordion--content-wrapper"
    ACCORDION_BADGE = ".summit-badge"
    ACCORDION_TOGGLE = "summit-icon"

    # =========================================================================
    # Page state
    # =========================================================================

    async def verify_page_title(self) -> bool:
        """The page heading reads "System Health"."""
        try:
            heading = await self.smart.get_text(self.UNIQUE_LOCATOR, timeout=2000)
        except Exception as e:
            logger.debug(f"Health heading not readable: {e}")
            return False
        return self.PAGE_TITLE.lower() in heading.lower()

    async def verify_system_health_header(self) -> bool:
        return await self.is_visible(self.SYSTEM_HEALTH_HEADER)

    async def verify_health_check_nav_active(self) -> bool:
        if await self.is_visible(self.NAV_ACTIVE):
            return True
        return await self.verify_tab_active("health check")

    async def verify_overall_health_section(self) -> bool:
        return await self.is_visible(self.OVERALL_SECTION)

    async def verify_overall_health_status(self) -> bool:
        return await self.is_visible(self.OVERALL_STATUS)

    async def get_overall_health_status(self) -> str:
        try:
            return (await self.smart.get_text(self.OVERALL_STATUS, timeout=2000)).strip()
        except Exception:
            return ""

    # =========================================================================
    # Components
    # =========================================================================

    async def _accordion_texts(self, part: str) -> Dict[str, str]:
        """Component title -> text of `part` inside the same accordion."""
        texts: Dict[str, str] = {}
        for accordion in await self.page.locator(self.ACCORDIONS).all():
            try:
                name = (await accordion.locator(self.ACCORDION_TITLE).first.inner_text()).strip()
                value = (await accordion.locator(part).first.inner_text()).strip()
            except Exception as e:
                logger.debug(f"Skipping accordion without {part}: {e}")
                continue
            if name:
                texts[name] = value
        return texts

    async def get_component_names(self) -> List[str]:
        names = []
        for title in await self.page.locator(self.ACCORDION_TITLE).all():
            text = (await title.inner_text()).strip()
            if text:
                names.append(text)
        return names

    async def get_component_statuses(self) -> Dict[str, str]:
        return await self._accordion_texts(self.ACCORDION_BADGE)

    async def get_component_details(self) -> Dict[str, str]:
        return await self._accordion_texts(self.ACCORDION_CONTENT)

    async def verify_all_system_components_present(self) -> bool:
        return await self.page.locator(self.ACCORDION_TITLE).count() >= MIN_COMPONENTS

    async def verify_component_health_statuses(self) -> bool:
        badges = self.page.locator(f"{self.ACCORDIONS} {self.ACCORDION_BADGE}")
        return await badges.count() >= MIN_COMPONENTS

    async def verify_expected_components(self) -> bool:
        names = [name.lower() for name in await self.get_component_names()]
        return all(any(expected.lower() in name for name in names) for expected in EXPECTED_COMPONENTS)

    async def verify_valid_health_statuses_displayed(self) -> bool:
        return enough_valid_statuses(await self.get_component_statuses())

    async def verify_component_details_meaningful(self) -> bool:
        return enough_meaningful_details(await self.get_component_details())

    async def analyze_component_detail_quality(self) -> Dict[str, bool]:
        return detail_quality(await self.get_component_details())

    async def get_health_scenario(self) -> str:
        return classify_health_scenario(await self.get_component_statuses())

    async def get_health_status_summary(self) -> Dict[str, int]:
        return summarize_health_statuses(await self.get_component_statuses())

    # =========================================================================
    # Expand / collapse
    # =========================================================================

    async def verify_expand_collapse_toggle(self) -> bool:
        return await self.is_visible(self.EXPAND_COLLAPSE_BUTTON)

    async def get_expand_collapse_button_text(self) -> str:
        try:
            return (await self.smart.get_text(self.EXPAND_COLLAPSE_BUTTON, timeout=2000)).strip()
        except Exception:
            return ""

    async def verify_expand_all_button(self) -> bool:
        return "expand all" in (await self.get_expand_collapse_button_text()).lower()

    async def verify_collapse_all_button(self) -> bool:
        return "collapse all" in (await self.get_expand_collapse_button_text()).lower()

    @allure.step("Toggle expand/collapse all")
    async def click_expand_collapse_button(self) -> str:
        """
        Click the toggle and return the label it showed before the click.

        Raises:
            PageActionError: The toggle is not available
        """
        label = await self.get_expand_collapse_button_text()
        if not label:
            raise PageActionError("Expand/Collapse toggle is not available")
        try:
            await self.smart.click(self.EXPAND_COLLAPSE_BUTTON)
        except Exception as e:
            raise PageActionError(f"Failed to click '{label}': {e}") from e
        await self.wait_for_page_transition(3)
        return label

    @allure.step("Expand component: {name}")
    async def expand_component(self, name: str) -> None:
        """
        Open one component's detail panel by its title (case-insensitive).

        Raises:
            PageActionError: No such component, or its toggle could not be clicked
        """
        for accordion in await self.page.locator(self.ACCORDIONS).all():
            title = (await accordion.locator(self.ACCORDION_TITLE).first.inner_text()).strip()
            if title.lower() != name.lower():
                continue
            try:
                await accordion.locator(self.ACCORDION_TOGGLE).first.click()
            except Exception as e:
                raise PageActionError(f"Failed to expand component '{name}': {e}") from e
            await self.wait_for_page_transition(2)
            return
        raise PageActionError(f"Component '{name}' not found")

    # =========================================================================
    # Readiness
    # =========================================================================

    async def _has_valid_badge(self) -> bool:
        statuses = await self.get_component_statuses()
        return any(is_valid_health_status(status) for status in statuses.values())

    async def wait_for_health_data_ready(self, timeout: float = 10.0) -> bool:
        """
        Wait until at least one component shows a valid status.

        The page is reloaded once if the first wait expires.
        """
        for attempt in (1, 2):
            if await poll_until(
                self._has_valid_badge,
                interval=0.5,
                timeout=timeout,
                description="health badges",
                raise_on_timeout=False,
            ):
                return True
            if attempt == 1:
                logger.info("Health data not ready, reloading the page")
                await self.page.reload(wait_until="domcontentloaded")
                await asyncio.sleep(self.timeouts.retry_delay)
        return False
