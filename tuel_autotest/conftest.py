"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers project-wide markers, tags tests by directory and keeps live UI
tests out of offline runs.

================================================================================
"""

import os

import pytest


LIVE_ENV_FLAG = "TUEL_RUN_LIVE"


def live_tests_enabled(config) -> bool:
    """--run-live flag or TUEL_RUN_LIVE=1/true/yes."""
    if config.getoption("--run-live", default=False):
        return True
    return os.environ.get(LIVE_ENV_FLAG, "").lower() in ("1", "true", "yes")


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI tests driving a real browser"
    )
    config.addinivalue_line(
        "markers", "unit: Offline tests of the framework"
    )
    config.addinivalue_line(
        "markers", "live: Needs a deployed application (--run-live)"
    )
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag collected tests by location and skip live tests unless enabled.
    """
    run_live = live_tests_enabled(config)
    skip_live = pytest.mark.skip(reason="live UI test: pass --run-live or set TUEL_RUN_LIVE=1")

    for item in items:
        path = str(item.fspath)

        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.live)

        if "unit" in path.replace("\\", "/").split("/"):
            item.add_marker(pytest.mark.unit)

        if "live" in item.keywords and not run_live:
            item.add_marker(skip_live)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    mode = "live + offline" if live_tests_enabled(config) else "offline only"
    return [
        "",
        "=" * 60,
        f"TUEL UI Automation Suite ({mode})",
        "=" * 60,
        "",
    ]
