"""
Browser driver seam used by the resolver and generated page objects.

BrowserDriver is the handful of primitives the rest of the package needs from
an automation engine. PlaywrightDriver implements it over a Playwright sync
``Page``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

if TYPE_CHECKING:
    from playwright.sync_api import Page

logger = structlog.get_logger(__name__)


@runtime_checkable
class BrowserDriver(Protocol):
    """Primitives consumed from the browser automation engine."""

    def exists(self, selector: str) -> int:
        """Number of elements currently matching, without waiting."""
        ...

    def wait_visible(self, selector: str, timeout_ms: int) -> bool:
        """
        Wait up to ``timeout_ms`` for the first match to be visible.

        Returns False when the element is not visible on a zero-wait check.

        Raises:
            TimeoutError: If a bounded wait expires before the element shows
        """
        ...

    def click(self, selector: str) -> None: ...

    def fill(self, selector: str, value: str) -> None: ...

    def select_option(self, selector: str, value: str) -> None: ...

    def press_key(self, selector: str, key: str) -> None: ...

    def check(self, selector: str) -> None: ...

    def navigate(self, url: str) -> None: ...

    def wait_for_load(self) -> None:
        """Block until the current document has finished loading."""
        ...


class PlaywrightDriver:
    """
    BrowserDriver over a Playwright sync Page.

    Selector expressions are Playwright selectors (CSS, ``text=``, ``role=``,
    ``xpath=``) and are passed through unchanged.
    """

    def __init__(self, page: Page, action_timeout_ms: int | None = None) -> None:
        self._page = page
        self._action_timeout_ms = action_timeout_ms
        self._log = logger.bind(component="playwright_driver")

    @property
    def page(self) -> Page:
        return self._page

    def exists(self, selector: str) -> int:
        return self._page.locator(selector).count()

    def wait_visible(self, selector: str, timeout_ms: int) -> bool:
        first = self._page.locator(selector).first
        if timeout_ms <= 0:
            return first.is_visible()
        try:
            first.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise TimeoutError(f"{selector} not visible after {timeout_ms}ms") from e
        return True

    def click(self, selector: str) -> None:
        self._page.locator(selector).first.click(timeout=self._action_timeout_ms)

    def fill(self, selector: str, value: str) -> None:
        self._page.locator(selector).first.fill(value, timeout=self._action_timeout_ms)

    def select_option(self, selector: str, value: str) -> None:
        self._page.locator(selector).first.select_option(
            value, timeout=self._action_timeout_ms
        )

    def press_key(self, selector: str, key: str) -> None:
        self._page.locator(selector).first.press(key, timeout=self._action_timeout_ms)

    def check(self, selector: str) -> None:
        self._page.locator(selector).first.check(timeout=self._action_timeout_ms)

    def navigate(self, url: str) -> None:
        self._log.debug("Navigating", url=url)
        self._page.goto(url)

    def wait_for_load(self) -> None:
        self._page.wait_for_load_state()
