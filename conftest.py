"""
Repository-level pytest configuration.

  - Registers the --run-live option for tests that need a deployed application
  - Initializes loguru once per session from config/config.yaml

Credentials are never stored in the repository. Live runs read them from
AUTH_USERNAME / AUTH_PASSWORD (or a local, untracked config file).
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from tuel_autotest.common import init_logger


def pytest_addoption(parser):
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run live UI tests against ui.base_url (or set TUEL_RUN_LIVE=1)",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _session_logger() -> Generator[None, None, None]:
    """Configure logging before any test runs."""
    init_logger()
    yield
