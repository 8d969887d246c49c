import time

import allure
import pytest

from tuel_autotest.ui_testing.framework.driver import PlaywrightDriver
from tuel_autotest.ui_testing.framework.page_base import BasePage
from tuel_autotest.ui_testing.framework.smart_locator import ElementNotFoundError, SmartLocator
from tuel_autotest.unit.conftest import FakePage


DATA_TABLE = SmartLocator.LOCATORS["data_table"]


@allure.epic("Framework")
@allure.feature("Smart Locator")
@allure.story("Timeout budget")
@pytest.mark.asyncio
async def test_missing_element_waits_one_timeout_for_all_fallbacks():
    page = FakePage()

    start = time.monotonic()
    with pytest.raises(ElementNotFoundError):
        await SmartLocator(page).locate("data_table", timeout=200)
    elapsed = time.monotonic() - start

    assert len(DATA_TABLE) == 4
    assert 0.2 <= elapsed < 0.35


@pytest.mark.asyncio
async def test_find_visible_returns_none_within_its_timeout():
    driver = PlaywrightDriver(FakePage())

    start = time.monotonic()
    assert await driver.find_visible("data_table", timeout=0.2) is None
    assert time.monotonic() - start < 0.35


@pytest.mark.asyncio
async def test_zero_timeout_checks_each_strategy_once():
    page = FakePage()

    with pytest.raises(ElementNotFoundError):
        await SmartLocator(page).locate("data_table", timeout=0)

    assert page.checks == list(DATA_TABLE.values())


@pytest.mark.asyncio
async def test_late_fallback_is_found_before_the_deadline():
    page = FakePage(appear_after={DATA_TABLE["fallback_2"]: 0.1})
    smart = SmartLocator(page)

    start = time.monotonic()
    found = await smart.locate("data_table", timeout=2000)

    assert found.selector == DATA_TABLE["fallback_2"]
    assert time.monotonic() - start < 1.0
    assert "fallback_2" in smart.get_health_report()


@pytest.mark.asyncio
async def test_primary_wins_when_several_strategies_match():
    page = FakePage(visible=[DATA_TABLE["primary"], DATA_TABLE["fallback_2"]])
    smart = SmartLocator(page)

    found = await smart.locate("data_table", timeout=1000)

    assert found.selector == DATA_TABLE["primary"]
    assert "No maintenance needed" in smart.get_health_report()


@pytest.mark.asyncio
async def test_unknown_element_name_raises_immediately():
    with pytest.raises(ElementNotFoundError, match="No locators defined"):
        await SmartLocator(FakePage()).locate("no_such_element", timeout=5000)


@allure.story("Grid rows")
@pytest.mark.asyncio
async def test_empty_grid_placeholder_row_is_not_a_data_row():
    page = FakePage(rows=["k-grid-norecords"])

    assert await SmartLocator(page).locate_all(BasePage.TABLE_ROWS) == []


@pytest.mark.asyncio
async def test_grid_rows_come_from_the_primary_selector():
    page = FakePage(rows=["k-master-row", "k-master-row k-alt", "k-master-row"])

    rows = await SmartLocator(page).locate_all(BasePage.TABLE_ROWS)

    assert len(rows) == 3
    assert {row.selector for row in rows} == {BasePage.TABLE_ROWS["primary"]}


@pytest.mark.asyncio
async def test_plain_table_rows_use_the_fallback():
    page = FakePage(rows=["", ""])

    assert len(await SmartLocator(page).locate_all(BasePage.TABLE_ROWS)) == 2
