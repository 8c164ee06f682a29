"""
Locator strategy catalog.

Provides:
- slugify: element name to lowercase word list
- xpath_literal: XPath string literal quoting (concat() when both quote kinds occur)
- css_string: CSS attribute value quoting
- LocatorCatalog: ranked candidate generation per element kind

The catalog is a pure function of its inputs. Its output is serialized into
generated page objects and joined into the resolver's cache key, so the same
inputs must always yield the same list.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

import structlog

from bddgen.locators.heuristics import (
    first_class_token,
    is_overly_generic_selector,
    looks_dynamic_class,
    looks_dynamic_id,
)
from bddgen.locators.models import ElementKind, LocatorStrategy, StrategyType

logger = structlog.get_logger(__name__)

_WORD = re.compile(r"[A-Za-z0-9]+")
_CAMEL = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Semantic hints for input fields: field-name keyword -> (input type, autocomplete values)
_INPUT_SEMANTICS: dict[str, tuple[str | None, tuple[str, ...]]] = {
    "password": ("password", ("current-password", "new-password")),
    "username": (None, ("username",)),
    "email": ("email", ("email", "username")),
}

# Tag used by XPath fallbacks per element kind
_KIND_TAGS: dict[ElementKind, str] = {
    ElementKind.INPUT: "input",
    ElementKind.BUTTON: "button",
    ElementKind.LINK: "a",
}


def slugify(element_name: str) -> list[str]:
    """Lowercase words of an element name; ``"userName"`` -> ``["user", "name"]``."""
    return [word.lower() for word in _WORD.findall(_CAMEL.sub(" ", element_name))]


def xpath_literal(text: str) -> str:
    """Quote text as an XPath 1.0 string literal."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts: list[str] = []
    for part in text.split("'"):
        parts.append(f"'{part}'")
        parts.append("\"'\"")
    parts.pop()
    return "concat(" + ", ".join(parts) + ")"


def css_string(text: str) -> str:
    """Quote text as a double-quoted CSS string."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _semantic_hint(words: list[str], observed_type: str | None) -> str | None:
    joined = "".join(words)
    for keyword in _INPUT_SEMANTICS:
        if keyword in joined or observed_type == keyword:
            return keyword
    if "user" in words:
        return "username"
    return None


class _CandidateList:
    """Accumulates (type, expression) pairs; numbering happens in ``build``."""

    def __init__(self) -> None:
        self._entries: list[tuple[StrategyType, str, bool]] = []

    def add(
        self,
        strategy_type: StrategyType,
        expression: str,
        is_stable: bool | None = None,
    ) -> None:
        if not expression:
            return
        stable = strategy_type.is_stable if is_stable is None else is_stable
        self._entries.append((strategy_type, expression, stable))

    def build(self) -> list[LocatorStrategy]:
        # stable sort keeps insertion order inside a tier
        ordered = sorted(self._entries, key=lambda entry: entry[0].tier)
        seen: set[str] = set()
        counts: dict[StrategyType, int] = {}
        result: list[LocatorStrategy] = []
        for strategy_type, expression, stable in ordered:
            if expression in seen:
                continue
            seen.add(expression)
            index = counts.get(strategy_type, 0)
            counts[strategy_type] = index + 1
            result.append(
                LocatorStrategy(
                    strategy_type=strategy_type,
                    selector_expression=expression,
                    priority=strategy_type.tier * 10 + index,
                    is_stable=stable,
                )
            )
        return result


class LocatorCatalog:
    """
    Produces ordered candidate locator strategies for a named element.

    Order: test id, id variants, name variants, placeholder, aria-label,
    role+name, type-specific CSS (with autocomplete variants and the recorded
    selector), visible text, a static class, XPath fallbacks. XPath is always
    present so the list is never empty.
    """

    def __init__(self) -> None:
        self._log = logger.bind(component="locator_catalog")

    def candidates_for(
        self,
        element_name: str,
        element_kind: ElementKind,
        observed_attributes: Mapping[str, str] | None = None,
        recorded_selector: str | None = None,
    ) -> list[LocatorStrategy]:
        """
        Build the ordered candidate list for an element.

        Args:
            element_name: Readable element name, e.g. ``Sign In``
            element_kind: Input, button or link
            observed_attributes: Attributes seen on the element (id, name,
                placeholder, aria-label, text, class, data-testid, type, ...)
            recorded_selector: Selector from the recording, kept as a candidate

        Returns:
            Candidates with strictly increasing priority and unique expressions
        """
        attrs = dict(observed_attributes or {})
        words = slugify(element_name)
        compact = "".join(words)
        hyphen = "-".join(words)
        underscore = "_".join(words)
        variants = [v for v in (compact, hyphen, underscore) if v]
        display = element_name.strip()
        text = attrs.get("text", "").strip() or display

        out = _CandidateList()

        self._add_test_ids(out, element_kind, attrs, hyphen)
        self._add_ids(out, attrs, variants)

        observed_name = attrs.get("name")
        if observed_name:
            out.add(StrategyType.NAME, f"[name={css_string(observed_name)}]")
        for variant in variants:
            out.add(StrategyType.NAME, f"[name={css_string(variant)}]")
        if element_kind is ElementKind.INPUT:
            self._add_placeholders(out, attrs, display, words)

        aria = attrs.get("aria-label", "").strip() or display
        if aria:
            out.add(StrategyType.ARIA_LABEL, f"[aria-label={css_string(aria)}]")

        role_name = text if element_kind is not ElementKind.INPUT else aria
        if role_name:
            out.add(
                StrategyType.ROLE_NAME,
                f"role={element_kind.aria_role}[name={css_string(role_name)}]",
            )

        if element_kind is ElementKind.INPUT:
            self._add_input_semantics(out, attrs, words)

        if recorded_selector:
            out.add(
                StrategyType.RAW_CSS,
                recorded_selector,
                is_stable=self._recorded_is_stable(recorded_selector, attrs),
            )

        if element_kind is not ElementKind.INPUT and text:
            out.add(StrategyType.TEXT_EXACT, f"text={css_string(text)}")
            out.add(StrategyType.TEXT_CONTAINS, f"text={text}")

        token = first_class_token(attrs.get("class"))
        if token and not looks_dynamic_class(token):
            out.add(StrategyType.CLASS_NAME, f".{token}")
        elif token:
            self._log.debug("Rejected dynamic class", token=token)

        self._add_xpaths(out, element_kind, attrs, text, words)
        return out.build()

    @staticmethod
    def _add_test_ids(
        out: _CandidateList,
        element_kind: ElementKind,
        attrs: Mapping[str, str],
        hyphen: str,
    ) -> None:
        observed = attrs.get("data-testid")
        if observed:
            out.add(StrategyType.TEST_ID, f"[data-testid={css_string(observed)}]")
        if not hyphen:
            return
        out.add(StrategyType.TEST_ID, f"[data-testid={css_string(hyphen)}]")
        if element_kind is ElementKind.BUTTON:
            out.add(StrategyType.TEST_ID, f"[data-testid={css_string(hyphen + '-button')}]")
            out.add(StrategyType.TEST_ID, f"[data-testid={css_string(hyphen + '-btn')}]")
        elif element_kind is ElementKind.LINK:
            out.add(StrategyType.TEST_ID, f"[data-testid={css_string(hyphen + '-link')}]")

    def _add_ids(
        self, out: _CandidateList, attrs: Mapping[str, str], variants: list[str]
    ) -> None:
        observed = attrs.get("id")
        if observed and looks_dynamic_id(observed):
            self._log.debug("Skipped dynamic id", element_id=observed)
        elif observed:
            out.add(StrategyType.ID, f"[id={css_string(observed)}]")
        for variant in variants:
            out.add(StrategyType.ID, f"[id={css_string(variant)}]")

    @staticmethod
    def _add_placeholders(
        out: _CandidateList,
        attrs: Mapping[str, str],
        display: str,
        words: list[str],
    ) -> None:
        observed = attrs.get("placeholder")
        if observed:
            out.add(StrategyType.PLACEHOLDER, f"[placeholder={css_string(observed)}]")
        if not display:
            return
        out.add(StrategyType.PLACEHOLDER, f"[placeholder={css_string(display)}]")
        out.add(StrategyType.PLACEHOLDER_CONTAINS, f"[placeholder*={css_string(display)} i]")
        out.add(
            StrategyType.PLACEHOLDER_CONTAINS,
            f"[placeholder*={css_string('Enter ' + display)} i]",
        )
        if len(words) > 1:
            out.add(StrategyType.PLACEHOLDER_CONTAINS, f"[placeholder*={css_string(words[0])} i]")

    @staticmethod
    def _add_input_semantics(
        out: _CandidateList, attrs: Mapping[str, str], words: list[str]
    ) -> None:
        observed_type = attrs.get("type")
        hint = _semantic_hint(words, observed_type)
        input_type = observed_type
        autocomplete: tuple[str, ...] = ()
        if hint is not None:
            semantic_type, autocomplete = _INPUT_SEMANTICS[hint]
            input_type = input_type or semantic_type
        if input_type:
            out.add(StrategyType.RAW_CSS, f"input[type={css_string(input_type)}]")
        for value in autocomplete:
            out.add(StrategyType.RAW_CSS, f"[autocomplete={css_string(value)}]")

    @staticmethod
    def _add_xpaths(
        out: _CandidateList,
        element_kind: ElementKind,
        attrs: Mapping[str, str],
        text: str,
        words: list[str],
    ) -> None:
        tag = _KIND_TAGS[element_kind]
        added = False
        if element_kind is ElementKind.INPUT:
            name = attrs.get("name") or "_".join(words)
            placeholder = attrs.get("placeholder") or text
            if name:
                out.add(StrategyType.XPATH, f"xpath=//input[@name={xpath_literal(name)}]")
                added = True
            if placeholder:
                out.add(
                    StrategyType.XPATH,
                    f"xpath=//input[contains(@placeholder, {xpath_literal(placeholder)})]",
                )
                out.add(
                    StrategyType.XPATH,
                    f"xpath=//label[contains(normalize-space(), {xpath_literal(placeholder)})]"
                    "/following::input[1]",
                )
                added = True
        elif text:
            out.add(
                StrategyType.XPATH,
                f"xpath=//{tag}[normalize-space()={xpath_literal(text)}]",
            )
            out.add(
                StrategyType.XPATH,
                f"xpath=//*[contains(text(), {xpath_literal(text)})]",
            )
            if element_kind is ElementKind.LINK and words:
                out.add(
                    StrategyType.XPATH,
                    f"xpath=//a[contains(@href, {xpath_literal('-'.join(words))})]",
                )
            added = True
        if not added:
            out.add(StrategyType.XPATH, f"xpath=(//{tag})[1]")

    @staticmethod
    def _recorded_is_stable(selector: str, attrs: Mapping[str, str]) -> bool:
        if selector.startswith(("//", "(//", "xpath=", "text=")):
            return False
        if is_overly_generic_selector(selector):
            return False
        observed_id = attrs.get("id")
        if observed_id and looks_dynamic_id(observed_id):
            return False
        token = first_class_token(attrs.get("class"))
        return not (token and looks_dynamic_class(token))


_default_catalog = LocatorCatalog()


def candidates_for(
    element_name: str,
    element_kind: ElementKind,
    observed_attributes: Mapping[str, str] | None = None,
    recorded_selector: str | None = None,
) -> list[LocatorStrategy]:
    """Candidate list from the module-level catalog."""
    return _default_catalog.candidates_for(
        element_name, element_kind, observed_attributes, recorded_selector
    )
