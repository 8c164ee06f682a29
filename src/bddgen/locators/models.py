"""
Locator strategy model shared by the catalog, the resolver and generated page objects.

A LocatorStrategy is a tagged value: the strategy type says how the
expression was derived, the expression is handed to the browser driver as-is.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

# ASCII unit separator; never appears in a CSS, XPath or Playwright selector
CACHE_KEY_SEPARATOR = "\x1f"


class ElementKind(StrEnum):
    """Element families with kind-specific candidate templates."""

    INPUT = "input"
    BUTTON = "button"
    LINK = "link"

    @property
    def aria_role(self) -> str:
        """Accessibility role used by role+name candidates."""
        match self:
            case ElementKind.INPUT:
                return "textbox"
            case ElementKind.BUTTON:
                return "button"
            case ElementKind.LINK:
                return "link"


class StrategyType(StrEnum):
    """Ways of locating an element, most stable first."""

    TEST_ID = "test_id"
    ID = "id"
    NAME = "name"
    PLACEHOLDER = "placeholder"
    PLACEHOLDER_CONTAINS = "placeholder_contains"
    ARIA_LABEL = "aria_label"
    ROLE_NAME = "role_name"
    RAW_CSS = "raw_css"
    TEXT_EXACT = "text_exact"
    TEXT_CONTAINS = "text_contains"
    CLASS_NAME = "class_name"
    XPATH = "xpath"

    @property
    def tier(self) -> int:
        """Priority tier; candidates of lower tiers are tried first."""
        return _TIERS[self]

    @property
    def is_stable(self) -> bool:
        """Attribute-based strategies survive UI rebuilds; text/class/xpath do not."""
        return self not in _UNSTABLE


_TIERS: dict[StrategyType, int] = {
    StrategyType.TEST_ID: 10,
    StrategyType.ID: 20,
    StrategyType.NAME: 30,
    StrategyType.PLACEHOLDER: 40,
    StrategyType.PLACEHOLDER_CONTAINS: 45,
    StrategyType.ARIA_LABEL: 50,
    StrategyType.ROLE_NAME: 60,
    # type-specific CSS and autocomplete candidates sit right after role+name
    StrategyType.RAW_CSS: 65,
    StrategyType.TEXT_EXACT: 70,
    StrategyType.TEXT_CONTAINS: 75,
    StrategyType.CLASS_NAME: 80,
    StrategyType.XPATH: 90,
}

_UNSTABLE: frozenset[StrategyType] = frozenset({
    StrategyType.TEXT_EXACT,
    StrategyType.TEXT_CONTAINS,
    StrategyType.CLASS_NAME,
    StrategyType.XPATH,
})


@dataclass(frozen=True)
class LocatorStrategy:
    """One candidate way to find an element.

    Attributes:
        strategy_type: How the expression was derived
        selector_expression: Selector handed to the browser driver
        priority: Lower is tried first; strictly increasing within a list
        is_stable: False for class, text and xpath based candidates
    """

    strategy_type: StrategyType
    selector_expression: str
    priority: int
    is_stable: bool = True

    def describe(self) -> str:
        return f"{self.strategy_type.value}: {self.selector_expression}"


def cache_key(candidates: Sequence[LocatorStrategy]) -> str:
    """Order-preserving identity of a candidate list."""
    return CACHE_KEY_SEPARATOR.join(c.selector_expression for c in candidates)
