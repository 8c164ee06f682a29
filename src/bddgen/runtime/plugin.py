"""
pytest plugin wiring generated step modules to a LocatorResolver.

Registered through the ``pytest11`` entry point. The browser page itself comes
from elsewhere: by default the ``page`` fixture of pytest-playwright, or any
project fixture overriding ``browser_driver``.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from bddgen.config import ResolverConfig
from bddgen.locators.cache import StrategyCache
from bddgen.locators.driver import BrowserDriver, PlaywrightDriver
from bddgen.locators.resolver import LocatorResolver

logger = structlog.get_logger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("bddgen", "self-healing locators")
    group.addoption(
        "--bddgen-base-url",
        default=None,
        help="Base URL prepended to generated page paths (env BDDGEN_BASE_URL)",
    )
    group.addoption(
        "--bddgen-visibility-timeout",
        type=int,
        default=None,
        help="Per-candidate visibility wait in ms (env BDDGEN_VISIBILITY_TIMEOUT_MS)",
    )
    group.addoption(
        "--bddgen-no-cache",
        action="store_true",
        default=False,
        help="Disable the strategy cache",
    )


@pytest.fixture(scope="session")
def resolver_config(request: pytest.FixtureRequest) -> ResolverConfig:
    """Resolver settings from command line options, then environment."""
    options = request.config.option
    return ResolverConfig(
        visibility_timeout_ms=getattr(options, "bddgen_visibility_timeout", None),
        cache_enabled=False if getattr(options, "bddgen_no_cache", False) else None,
        base_url=getattr(options, "bddgen_base_url", None) or "",
    )


@pytest.fixture(scope="session")
def strategy_cache(resolver_config: ResolverConfig) -> Iterator[StrategyCache]:
    """One strategy cache per test session, shared by every resolver."""
    cache = StrategyCache(enabled=bool(resolver_config.cache_enabled))
    yield cache
    stats = cache.stats()
    logger.info(
        "Strategy cache summary",
        hits=stats.hits,
        misses=stats.misses,
        invalidations=stats.invalidations,
        size=stats.size,
    )


@pytest.fixture
def browser_driver(request: pytest.FixtureRequest) -> BrowserDriver:
    """BrowserDriver over the pytest-playwright ``page`` fixture."""
    try:
        page = request.getfixturevalue("page")
    except pytest.FixtureLookupError:
        pytest.fail(
            "No 'page' fixture available: install pytest-playwright "
            "or override the 'browser_driver' fixture",
            pytrace=False,
        )
    return PlaywrightDriver(page)


@pytest.fixture
def locator_resolver(
    browser_driver: BrowserDriver,
    strategy_cache: StrategyCache,
    resolver_config: ResolverConfig,
) -> LocatorResolver:
    return LocatorResolver(
        browser_driver,
        cache=strategy_cache,
        visibility_timeout_ms=resolver_config.visibility_timeout_ms or 0,
    )
