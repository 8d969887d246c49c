import allure
import pytest

from tuel_autotest.ui_testing.framework.page_base import BasePage
from tuel_autotest.ui_testing.pages.beneficiaries_page import EXPECTED_COLUMNS as BENEFICIARY_COLUMNS
from tuel_autotest.ui_testing.pages.health_check_page import (
    EXPECTED_COMPONENTS,
    SCENARIO_ALL_HEALTHY,
    SCENARIO_ALL_UNHEALTHY,
    SCENARIO_MIXED,
    SCENARIO_UNKNOWN,
    classify_health_scenario,
    detail_quality,
    enough_meaningful_details,
    enough_valid_statuses,
    is_valid_health_status,
    summarize_health_statuses,
)
from tuel_autotest.ui_testing.pages.login_page import LoginPage
from tuel_autotest.ui_testing.pages.transactions_page import (
    DETAIL_COLUMNS,
    EXPECTED_COLUMNS as TRANSACTION_COLUMNS,
    headers_equal_ignore_case,
)
from tuel_autotest.unit.conftest import FakePage


NO_RECORDS = "text=No records available"


@allure.epic("Pages")
@allure.feature("Grid")
class TestEmptyGrid:
    @pytest.mark.asyncio
    async def test_placeholder_row_does_not_count_as_data(self, page_config):
        grid = BasePage(FakePage(rows=["k-grid-norecords"], visible=[NO_RECORDS]), config=page_config)

        assert await grid.get_data_row_count() == 0
        assert not await grid.verify_table_has_data()

    @pytest.mark.asyncio
    async def test_empty_grid_must_show_the_message(self, page_config):
        page = FakePage(rows=["k-grid-norecords"], visible=[NO_RECORDS])

        assert await BasePage(page, config=page_config).verify_no_records_message_when_empty()
        assert NO_RECORDS in page.checks

    @pytest.mark.asyncio
    async def test_search_wait_settles_on_the_empty_state(self, page_config):
        grid = BasePage(FakePage(rows=["k-grid-norecords"], visible=[NO_RECORDS]), config=page_config)

        assert await grid.wait_for_search_results(timeout=1)

    @pytest.mark.asyncio
    async def test_search_wait_times_out_on_a_blank_grid(self, page_config):
        grid = BasePage(FakePage(rows=["k-grid-norecords"]), config=page_config)

        assert not await grid.wait_for_search_results(timeout=0.3)

    @pytest.mark.asyncio
    async def test_data_rows_are_read(self, page_config):
        selector = BasePage.TABLE_ROWS["primary"]
        page = FakePage(rows=["k-master-row", "k-master-row"], texts={selector: " View ACME Bank  Active "})
        grid = BasePage(page, config=page_config)

        assert await grid.get_data_row_count() == 2
        assert await grid.get_all_row_texts() == ["View ACME Bank  Active"] * 2
        assert await grid.get_first_row_token_and_status("Inactive", "Active") == ("View", "Active")


@allure.epic("Pages")
@allure.feature("Login")
def test_credentials_come_from_auth_environment(monkeypatch, page_config):
    monkeypatch.setenv("AUTH_USERNAME", "ci-user@example.com")
    monkeypatch.setenv("AUTH_PASSWORD", "ci-secret")

    assert LoginPage(FakePage(), config=page_config).credentials() == ("ci-user@example.com", "ci-secret")


def test_credentials_default_to_empty(monkeypatch, page_config):
    monkeypatch.delenv("AUTH_USERNAME", raising=False)
    monkeypatch.delenv("AUTH_PASSWORD", raising=False)

    assert LoginPage(FakePage(), config=page_config).credentials() == ("", "")


@allure.epic("Pages")
@allure.feature("Health Check")
class TestHealthStatus:
    @pytest.mark.parametrize(
        "text, expected",
        [("Healthy", True), ("UNHEALTHY", True), ("Status: healthy", True),
         ("Degraded", False), ("", False), (None, False)],
    )
    def test_valid_status_text(self, text, expected):
        assert is_valid_health_status(text) is expected

    @pytest.mark.parametrize(
        "statuses, expected",
        [
            ({"Queues": "Healthy", "Domain API": "healthy"}, SCENARIO_ALL_HEALTHY),
            ({"Queues": "Unhealthy"}, SCENARIO_ALL_UNHEALTHY),
            ({"Queues": "Healthy", "Domain API": "Unhealthy"}, SCENARIO_MIXED),
            ({"Queues": "Pending"}, SCENARIO_UNKNOWN),
            ({}, SCENARIO_UNKNOWN),
        ],
    )
    def test_scenario(self, statuses, expected):
        assert classify_health_scenario(statuses) == expected

    def test_summary_counts_anything_else_as_unknown(self):
        statuses = {"A": "Healthy", "B": " Unhealthy ", "C": "Healthy", "D": "n/a"}

        assert summarize_health_statuses(statuses) == {"Healthy": 2, "Unhealthy": 1, "Unknown": 1}

    def test_valid_status_ratio(self):
        five = {f"C{i}": "Healthy" for i in range(4)}
        assert enough_valid_statuses({**five, "C4": "Unhealthy"})
        assert enough_valid_statuses({**five, "C4": "??"})
        assert not enough_valid_statuses({"A": "Healthy", "B": "??", "C": "??"})
        assert not enough_valid_statuses({})

    def test_detail_quality(self):
        details = {
            "Queues": "All 4 queues reachable, 0 dead letters",
            "Domain API": "OK",
            "Azure Blob Storage": "Container tuel-docs reachable",
        }

        quality = detail_quality(details)

        assert set(quality) == set(EXPECTED_COMPONENTS)
        assert quality["Queues"] and quality["Azure Blob Storage"]
        assert not quality["Domain API"]
        assert not quality["Product Domain API"]
        assert enough_meaningful_details(details)
        assert not enough_meaningful_details({"A": "OK", "B": "", "C": "fine"})


@allure.epic("Pages")
@allure.feature("Transactions")
def test_transaction_detail_headers_match_exactly_ignoring_case():
    assert headers_equal_ignore_case([h.upper() for h in DETAIL_COLUMNS], DETAIL_COLUMNS)
    assert headers_equal_ignore_case([f" {h} " for h in DETAIL_COLUMNS], DETAIL_COLUMNS)
    assert not headers_equal_ignore_case(DETAIL_COLUMNS[:-1], DETAIL_COLUMNS)
    assert not headers_equal_ignore_case(TRANSACTION_COLUMNS, DETAIL_COLUMNS)


def test_beneficiary_columns_include_three_address_lines():
    assert BENEFICIARY_COLUMNS[:2] == ["View", "Beneficiary"]
    assert [c for c in BENEFICIARY_COLUMNS if c.startswith("Address")] == ["Address", "Address 2", "Address 3"]
