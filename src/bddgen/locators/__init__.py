"""
Locator module with ranked fallback strategies and self-healing resolution.

Provides:
- Candidate generation per element kind with dynamic class/id rejection
- Thread-safe cache of winning strategies
- Resolver with bounded visibility waits and per-strategy diagnostics
- Playwright driver adapter
"""

from bddgen.locators.cache import CacheStats, StrategyCache
from bddgen.locators.catalog import LocatorCatalog, candidates_for
from bddgen.locators.driver import BrowserDriver, PlaywrightDriver
from bddgen.locators.models import (
    ElementKind,
    LocatorStrategy,
    StrategyType,
    cache_key,
)
from bddgen.locators.resolver import (
    AttemptOutcome,
    LocatorNotFoundError,
    LocatorResolver,
    ResolvedLocator,
    StrategyAttempt,
)

__all__ = [
    "AttemptOutcome",
    "BrowserDriver",
    "CacheStats",
    "ElementKind",
    "LocatorCatalog",
    "LocatorNotFoundError",
    "LocatorResolver",
    "LocatorStrategy",
    "PlaywrightDriver",
    "ResolvedLocator",
    "StrategyAttempt",
    "StrategyCache",
    "StrategyType",
    "cache_key",
    "candidates_for",
]
