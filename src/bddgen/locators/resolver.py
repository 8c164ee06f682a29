"""
Self-healing locator resolution.

LocatorResolver walks an ordered candidate list against a live page and
returns the first strategy whose element is visible. Winners are remembered
in a shared StrategyCache; a cached winner that stops matching is dropped and
the full search runs again.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

import structlog
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from bddgen.locators.cache import StrategyCache
from bddgen.locators.driver import BrowserDriver
from bddgen.locators.models import LocatorStrategy, cache_key

logger = structlog.get_logger(__name__)

DEFAULT_VISIBILITY_TIMEOUT_MS = 500


class AttemptOutcome(StrEnum):
    """Why a candidate did not resolve."""

    NOT_FOUND = "not found"
    NOT_VISIBLE = "not visible"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True)
class StrategyAttempt:
    """One failed candidate in a full search."""

    strategy: LocatorStrategy
    outcome: AttemptOutcome
    detail: str | None = None

    def annotation(self) -> str:
        if self.outcome is AttemptOutcome.ERROR:
            return f"(error: {self.detail})"
        return f"({self.outcome.value})"

    def describe(self) -> str:
        return f"{self.strategy.describe()} {self.annotation()}"


@dataclass(frozen=True)
class ResolvedLocator:
    """Outcome of a successful resolution.

    Attributes:
        strategy: Winning candidate
        index: Position of the winner in the candidate list
        elapsed_ms: Wall time spent resolving
        from_cache: True when the cached winner was reused
    """

    strategy: LocatorStrategy
    index: int
    elapsed_ms: float
    from_cache: bool = False

    @property
    def selector(self) -> str:
        return self.strategy.selector_expression


class LocatorNotFoundError(Exception):
    """Raised when no candidate strategy resolves to a visible element."""

    def __init__(self, attempts: Sequence[StrategyAttempt], elapsed_ms: float) -> None:
        self.attempts = list(attempts)
        self.elapsed_ms = elapsed_ms
        lines = [
            f"Element not found with any of {len(self.attempts)} strategies "
            f"(took {elapsed_ms:.0f}ms). Failed strategies:"
        ]
        lines.extend(f"  • {attempt.describe()}" for attempt in self.attempts)
        super().__init__("\n".join(lines))


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class LocatorResolver:
    """
    Resolves candidate lists to a working selector.

    Args:
        driver: Browser driver used for probes
        cache: Shared strategy cache; a private one is created when omitted
        visibility_timeout_ms: Bound on each candidate's visibility wait
    """

    def __init__(
        self,
        driver: BrowserDriver,
        cache: StrategyCache | None = None,
        visibility_timeout_ms: int = DEFAULT_VISIBILITY_TIMEOUT_MS,
    ) -> None:
        self._driver = driver
        self._cache = cache if cache is not None else StrategyCache()
        self._visibility_timeout_ms = visibility_timeout_ms
        self._log = logger.bind(component="locator_resolver")

    @property
    def cache(self) -> StrategyCache:
        return self._cache

    @property
    def driver(self) -> BrowserDriver:
        return self._driver

    def resolve(self, candidates: Sequence[LocatorStrategy]) -> ResolvedLocator:
        """
        Find the first candidate whose element is visible.

        Args:
            candidates: Ordered candidate list

        Returns:
            ResolvedLocator for the winning candidate

        Raises:
            ValueError: If the candidate list is empty
            LocatorNotFoundError: If every candidate fails
        """
        if not candidates:
            raise ValueError("At least one locator strategy is required")

        start = time.perf_counter()
        key = cache_key(candidates)

        cached = self._cache.lookup(key)
        if cached is not None:
            hit = self._try_cached(candidates, key, cached, start)
            if hit is not None:
                return hit

        attempts: list[StrategyAttempt] = []
        for index, strategy in enumerate(candidates):
            outcome, detail = self._probe(strategy, self._visibility_timeout_ms)
            if outcome is None:
                self._cache.store(key, index)
                elapsed = _elapsed_ms(start)
                self._log.info(
                    "Resolved locator",
                    strategy=strategy.describe(),
                    index=index,
                    duration_ms=round(elapsed, 1),
                )
                return ResolvedLocator(strategy, index, elapsed)

            attempt = StrategyAttempt(strategy, outcome, detail)
            attempts.append(attempt)
            self._log.debug("Candidate failed", strategy=strategy.describe(), outcome=outcome.value)

        elapsed = _elapsed_ms(start)
        error = LocatorNotFoundError(attempts, elapsed)
        self._log.error(
            "Locator exhausted",
            candidates=len(candidates),
            duration_ms=round(elapsed, 1),
        )
        raise error

    def element_exists(self, candidates: Sequence[LocatorStrategy]) -> bool:
        """
        Read-only probe: does any candidate match a visible element right now.

        Uses zero-wait checks and never touches the cache.
        """
        for strategy in candidates:
            outcome, _ = self._probe(strategy, 0)
            if outcome is None:
                return True
        return False

    def clear_cache(self) -> None:
        self._cache.clear()

    def _try_cached(
        self,
        candidates: Sequence[LocatorStrategy],
        key: str,
        index: int,
        start: float,
    ) -> ResolvedLocator | None:
        if index >= len(candidates):
            self._cache.invalidate(key, index)
            return None

        strategy = candidates[index]
        try:
            found = self._driver.exists(strategy.selector_expression) > 0
        except Exception as e:
            self._log.debug("Cached strategy probe failed", strategy=strategy.describe(), error=str(e))
            found = False

        if found:
            self._log.debug("Cache hit", strategy=strategy.describe(), index=index)
            return ResolvedLocator(strategy, index, _elapsed_ms(start), from_cache=True)

        self._cache.invalidate(key, index)
        self._log.debug("Stale cache entry removed", cache_key=key, index=index)
        return None

    def _probe(
        self, strategy: LocatorStrategy, timeout_ms: int
    ) -> tuple[AttemptOutcome | None, str | None]:
        """Existence check, then a bounded visibility wait. None outcome means success."""
        selector = strategy.selector_expression
        try:
            if self._driver.exists(selector) <= 0:
                return AttemptOutcome.NOT_FOUND, None
            if not self._driver.wait_visible(selector, timeout_ms):
                return AttemptOutcome.NOT_VISIBLE, None
        except (TimeoutError, PlaywrightTimeoutError):
            return AttemptOutcome.TIMEOUT, None
        except Exception as e:
            return AttemptOutcome.ERROR, str(e)
        return None, None
