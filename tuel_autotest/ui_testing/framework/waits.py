# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Bounded polling utilities shared by page objects and the login flow.
#
# Key Features:
#   - One retry-with-timeout combinator (poll_until) for sync or async checks
#   - Row-count stabilization for search and pagination refreshes
#   - Named wait scenarios with fixed intervals and timeouts
#   - Allure step integration
#
# Usage:
#   await poll_until(lambda: page.is_ready(), scenario="page_transition")
#   await wait_for_stable_count(get_row_count, no_records_visible, timeout=5)
#
# ================================================================================

import asyncio
import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union

import allure
from loguru import logger


T = TypeVar("T")

Check = Callable[[], Union[T, Awaitable[T]]]


@dataclass(frozen=True)
class WaitConfig:
    """
    Configuration for a fixed-interval wait.

    Attributes:
        interval: Seconds to sleep between checks
        timeout: Total timeout in seconds
    """
    interval: float = 1.0
    timeout: float = 10.0


# Pre-configured wait strategies for common scenarios
WAIT_SCENARIOS: Dict[str, WaitConfig] = {
    "default": WaitConfig(),

    # Grid refresh after typing into a search box or paging
    "search_results": WaitConfig(interval=0.1, timeout=5.0),

    # document.readyState / URL change after navigation
    "page_transition": WaitConfig(interval=0.5, timeout=10.0),

    # Redirect from data:/about:blank to the login page
    "login_transition": WaitConfig(interval=1.0, timeout=5.0),

    # IdP hand-back to the application
    "login_completion": WaitConfig(interval=1.0, timeout=10.0),
}


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""
    pass


def get_wait_config(scenario: str) -> WaitConfig:
    """
    Get wait configuration for a specific scenario.

    Returns:
        WaitConfig for the scenario, or default if not found
    """
    return WAIT_SCENARIOS.get(scenario, WAIT_SCENARIOS["default"])


async def _evaluate(check: Check) -> Any:
    result = check()
    if inspect.isawaitable(result):
        result = await result
    return result


async def poll_until(
    predicate: Check,
    interval: Optional[float] = None,
    timeout: Optional[float] = None,
    description: str = "condition",
    scenario: str = "default",
    raise_on_timeout: bool = True,
) -> Any:
    """
    Re-evaluate predicate at a fixed interval until it returns a truthy value.

    The predicate may be a plain function or a coroutine function. Exceptions
    raised by the predicate are logged and treated as "not yet".

    Args:
        predicate: Check to evaluate
        interval: Seconds between checks (overrides scenario)
        timeout: Total seconds before giving up (overrides scenario)
        description: Human-readable description for logging
        scenario: Named WAIT_SCENARIOS entry supplying defaults
        raise_on_timeout: Raise WaitTimeoutError instead of returning None

    Returns:
        The first truthy predicate result, or None on timeout when
        raise_on_timeout is False

    Raises:
        WaitTimeoutError: If timeout is reached and raise_on_timeout is True
    """
    config = get_wait_config(scenario)
    interval = config.interval if interval is None else interval
    timeout = config.timeout if timeout is None else timeout

    start_time = time.monotonic()
    attempt = 0
    last_result: Any = None
    last_error: Optional[str] = None

    while True:
        attempt += 1
        try:
            last_result = await _evaluate(predicate)
            if last_result:
                logger.debug(
                    f"Wait satisfied after {attempt} checks "
                    f"({time.monotonic() - start_time:.1f}s): {description}"
                )
                return last_result
        except Exception as e:
            last_error = str(e)
            logger.debug(f"Check {attempt} for '{description}' raised: {e}")

        elapsed = time.monotonic() - start_time
        if elapsed >= timeout:
            break
        await asyncio.sleep(min(interval, max(timeout - elapsed, 0)))

    message = (
        f"Timeout after {time.monotonic() - start_time:.1f}s waiting for: {description}. "
        f"Last result: {last_result}, Last error: {last_error}"
    )
    if raise_on_timeout:
        logger.warning(message)
        raise WaitTimeoutError(message)
    logger.debug(message)
    return None


async def wait_for_stable_count(
    count_fn: Callable[[], Union[int, Awaitable[int]]],
    empty_state_fn: Optional[Check] = None,
    timeout: float = 5.0,
    settle_interval: float = 0.15,
    poll_interval: float = 0.1,
) -> bool:
    """
    Wait until a grid's row count stops changing.

    A changed count restarts the settle window. An unchanged count is accepted
    once there is at least one row or the empty-state message is visible.

    Args:
        count_fn: Returns the current number of rows
        empty_state_fn: Returns True when the "no records" message is shown
        timeout: Total seconds to wait
        settle_interval: Extra pause after a count change
        poll_interval: Pause between checks

    Returns:
        True when the grid settled, False on timeout
    """
    with allure.step("Wait for search results"):
        deadline = time.monotonic() + timeout
        last_count = -1

        while time.monotonic() < deadline:
            try:
                count = await _evaluate(count_fn)
                if count != last_count:
                    last_count = count
                    await asyncio.sleep(settle_interval)
                    continue
                if count > 0:
                    return True
                if empty_state_fn is not None and await _evaluate(empty_state_fn):
                    return True
            except Exception as e:
                logger.debug(f"Row count check failed: {e}")
            await asyncio.sleep(poll_interval)

        logger.debug(f"Search results did not settle within {timeout}s (last count: {last_count})")
        return False


__all__ = [
    "WaitConfig",
    "WAIT_SCENARIOS",
    "WaitTimeoutError",
    "get_wait_config",
    "poll_until",
    "wait_for_stable_count",
]
