"""
Unit test fixtures.

`FakeDriver` scripts a browser for the login flow: it holds a URL, a title
and the set of locator names currently visible, records every type/click,
and runs per-element callbacks on click to move the "page" forward.
Steps queued in `on_url_read` run one per URL read, which lets a test change
the page while the flow is polling.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import pytest
import yaml

from tuel_autotest.ui_testing.framework.authentication import LoginTimings
from tuel_autotest.ui_testing.framework.config_loader import ConfigLoader


IDP_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/authorize?client_id=abc"
APP_URL = "https://tuel.example.com/application/dashboard"


class FakeElement:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeDriver:
    """Scripted BrowserDriver."""

    def __init__(
        self,
        url: str = "",
        title: str = "",
        visible: Iterable[str] = (),
    ):
        self.url = url
        self.title = title
        self.visible = set(visible)
        self.calls: List[Tuple[Any, ...]] = []
        self.on_click: Dict[str, Callable[["FakeDriver"], None]] = {}
        self.url_error: Optional[Exception] = None
        self.type_failures = 0
        self.on_url_read: List[Callable[["FakeDriver"], None]] = []

    async def current_url(self) -> str:
        if self.on_url_read:
            self.on_url_read.pop(0)(self)
        if self.url_error is not None:
            raise self.url_error
        return self.url

    async def current_title(self) -> str:
        return self.title

    async def find_visible(self, locator, timeout: float = 5.0):
        if locator in self.visible:
            return FakeElement(locator)
        return None

    async def click(self, element: FakeElement) -> None:
        self.calls.append(("click", element.name))
        action = self.on_click.get(element.name)
        if action is not None:
            action(self)

    async def type_text(self, element: FakeElement, text: str) -> None:
        self.calls.append(("type", element.name, text))
        if self.type_failures > 0:
            self.type_failures -= 1
            raise RuntimeError(f"element {element.name} is stale")

    async def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))
        self.url = url

    async def wait_for_transition(self, timeout: float = 10.0) -> bool:
        return True

    def actions(self, kind: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == kind]


class FakeLocator:
    """The slice of a Playwright Locator that SmartLocator touches."""

    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def is_visible(self) -> bool:
        self.page.checks.append(self.selector)
        return self.page.count(self.selector) > 0

    async def all(self) -> List["FakeLocator"]:
        return [FakeLocator(self.page, self.selector) for _ in range(self.page.count(self.selector))]

    async def inner_text(self) -> str:
        return self.page.texts.get(self.selector, "")


class FakePage:
    """
    Playwright Page stand-in.

    `visible` selectors match one element; `appear_after` maps a selector to
    the seconds after creation at which it starts matching. `rows` holds the
    class attribute of each grid body row, so the row selectors see the same
    grid a browser would (including Kendo's "no records" placeholder row).
    """

    def __init__(
        self,
        visible: Iterable[str] = (),
        appear_after: Optional[Dict[str, float]] = None,
        rows: Iterable[str] = (),
        texts: Optional[Dict[str, str]] = None,
    ):
        self.visible = set(visible)
        self.appear_after = dict(appear_after or {})
        self.rows = list(rows)
        self.texts = dict(texts or {})
        self.checks: List[str] = []
        self.created = time.monotonic()

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def count(self, selector: str) -> int:
        if selector in self.visible:
            return 1
        delay = self.appear_after.get(selector)
        if delay is not None and time.monotonic() - self.created >= delay:
            return 1
        if selector.endswith("tr.k-master-row"):
            return sum(1 for row in self.rows if "k-master-row" in row)
        if selector == "tbody tr:not(.k-grid-norecords)":
            return sum(1 for row in self.rows if "k-grid-norecords" not in row)
        if selector == "tbody tr":
            return len(self.rows)
        return 0


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def page_config(write_config) -> ConfigLoader:
    """Config with a base URL and short, fixed timeouts."""
    return write_config({
        "ui": {"base_url": "https://tuel.example.com"},
        "timeouts": {"element_visibility_seconds": 1, "retry_delay_ms": 0},
    })


@pytest.fixture
def fast_timings() -> LoginTimings:
    """Login bounds shrunk so failure paths finish in well under a second."""
    return LoginTimings(
        max_attempts=3,
        retry_backoff=0,
        transition_timeout=0.05,
        completion_timeout=0.05,
        poll_interval=0.01,
        element_timeout=0,
        settle=0,
    )


@pytest.fixture(autouse=True)
def _fresh_config():
    """Each test starts and ends with an unloaded configuration singleton."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML config and return a ConfigLoader bound to it."""

    def _write(data: dict) -> ConfigLoader:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump(data), encoding="utf-8")
        ConfigLoader.reset()
        return ConfigLoader(config_path=config_path)

    return _write
