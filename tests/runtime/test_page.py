"""Tests for BasePage and the pytest plugin fixtures."""

from __future__ import annotations

import pytest

from bddgen.config import ResolverConfig
from bddgen.locators.cache import StrategyCache
from bddgen.locators.models import LocatorStrategy, StrategyType
from bddgen.locators.resolver import LocatorNotFoundError, LocatorResolver
from bddgen.runtime.page import BasePage, join_url


class SearchPage(BasePage):
    PAGE_PATH = "/search"

    ELEMENT_1 = (
        LocatorStrategy(StrategyType.TEST_ID, '[data-testid="q"]', 100),
        LocatorStrategy(StrategyType.ID, '[id="q"]', 200),
    )


class TestJoinUrl:
    @pytest.mark.parametrize(
        ("base", "path", "expected"),
        [
            ("https://app.test", "/login", "https://app.test/login"),
            ("https://app.test/", "login", "https://app.test/login"),
            ("https://app.test", "", "https://app.test"),
            ("", "/login", "/login"),
            ("https://app.test", "https://other.test/x", "https://other.test/x"),
        ],
    )
    def test_join(self, base: str, path: str, expected: str) -> None:
        assert join_url(base, path) == expected


class TestBasePage:
    """Test that page primitives resolve before acting."""

    def test_open_uses_base_url(self, fake_driver) -> None:
        page = SearchPage(LocatorResolver(fake_driver), base_url="https://app.test")

        page.open(page.PAGE_PATH)

        assert page.url == "https://app.test/search"
        assert fake_driver.actions == [("navigate", "https://app.test/search")]

    def test_actions_use_resolved_selector(self, fake_driver) -> None:
        fake_driver.add('[id="q"]')
        page = SearchPage(LocatorResolver(fake_driver))

        page.fill(page.ELEMENT_1, "tea")
        page.press_key(page.ELEMENT_1, "Enter")
        page.select_option(page.ELEMENT_1, "all")
        page.check(page.ELEMENT_1)
        page.click(page.ELEMENT_1)

        assert fake_driver.actions == [
            ("fill", '[id="q"]', "tea"),
            ("press_key", '[id="q"]', "Enter"),
            ("select_option", '[id="q"]', "all"),
            ("check", '[id="q"]'),
            ("click", '[id="q"]'),
        ]

    def test_missing_element_raises(self, fake_driver) -> None:
        page = SearchPage(LocatorResolver(fake_driver))

        with pytest.raises(LocatorNotFoundError):
            page.click(page.ELEMENT_1)
        assert fake_driver.actions == []

    def test_is_present(self, fake_driver) -> None:
        page = SearchPage(LocatorResolver(fake_driver))

        assert page.is_present(page.ELEMENT_1) is False
        fake_driver.add('[data-testid="q"]')
        assert page.is_present(page.ELEMENT_1) is True

    def test_verify_page_updated_waits_for_load(self, fake_driver) -> None:
        SearchPage(LocatorResolver(fake_driver)).verify_page_updated()

        assert fake_driver.actions == [("wait_for_load",)]


class TestPluginFixtures:
    """Test the fixtures the plugin contributes to generated step modules."""

    @pytest.fixture
    def browser_driver(self, fake_driver):
        return fake_driver

    def test_resolver_wiring(
        self,
        locator_resolver: LocatorResolver,
        strategy_cache: StrategyCache,
        resolver_config: ResolverConfig,
        fake_driver,
    ) -> None:
        assert locator_resolver.driver is fake_driver
        assert locator_resolver.cache is strategy_cache
        assert isinstance(resolver_config.visibility_timeout_ms, int)
