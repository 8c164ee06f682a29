"""
Base class for generated page objects.

Each interaction resolves its candidate list through the LocatorResolver and
hands the winning selector to the browser driver.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from bddgen.locators.driver import BrowserDriver
from bddgen.locators.models import LocatorStrategy
from bddgen.locators.resolver import LocatorResolver

logger = structlog.get_logger(__name__)


def join_url(base_url: str, path: str) -> str:
    """Join a base URL and a page path; absolute paths pass through."""
    if "://" in path or not base_url:
        return path
    if not path:
        return base_url
    return base_url.rstrip("/") + "/" + path.lstrip("/")


class BasePage:
    """
    Shared behaviour of generated page objects.

    Subclasses define ``PAGE_PATH`` and ``ELEMENT_<n>`` candidate tuples.
    """

    PAGE_PATH: str = ""

    def __init__(self, resolver: LocatorResolver, base_url: str = "") -> None:
        self._resolver = resolver
        self._base_url = base_url
        self._log = logger.bind(component="page", page=type(self).__name__)

    @property
    def driver(self) -> BrowserDriver:
        return self._resolver.driver

    @property
    def resolver(self) -> LocatorResolver:
        return self._resolver

    @property
    def url(self) -> str:
        return join_url(self._base_url, self.PAGE_PATH)

    def locate(self, candidates: Sequence[LocatorStrategy]) -> str:
        """Selector of the first candidate that resolves."""
        return self._resolver.resolve(candidates).selector

    def is_present(self, candidates: Sequence[LocatorStrategy]) -> bool:
        return self._resolver.element_exists(candidates)

    def open(self, path: str = "") -> None:
        url = join_url(self._base_url, path)
        self._log.info("Opening page", url=url)
        self.driver.navigate(url)

    def click(self, candidates: Sequence[LocatorStrategy]) -> None:
        self.driver.click(self.locate(candidates))

    def fill(self, candidates: Sequence[LocatorStrategy], value: str) -> None:
        self.driver.fill(self.locate(candidates), value)

    def select_option(self, candidates: Sequence[LocatorStrategy], value: str) -> None:
        self.driver.select_option(self.locate(candidates), value)

    def check(self, candidates: Sequence[LocatorStrategy]) -> None:
        self.driver.check(self.locate(candidates))

    def press_key(self, candidates: Sequence[LocatorStrategy], key: str) -> None:
        self.driver.press_key(self.locate(candidates), key)

    def verify_page_updated(self) -> None:
        """Closing step of every generated scenario: wait for the page to settle."""
        self.driver.wait_for_load()
