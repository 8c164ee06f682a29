"""
Predicates for spotting generated class names, ids and bare tag selectors.

Framework build tools (CSS modules, styled-components, emotion, Angular view
encapsulation, ...) rename classes on every build. A locator built from such a
token works once and then poisons the strategy cache, so the catalog rejects
them outright.
"""

from __future__ import annotations

import re

MIN_DIGIT_RUN = 4
MIN_HEX_SUFFIX = 8

# Prefixes and fragments emitted by CSS-in-JS and scoped-style tooling
GENERATED_CLASS_MARKERS: tuple[str, ...] = (
    "css-",
    "sc-",
    "jsx-",
    "emotion-",
    "_ngcontent",
    "_nghost",
    "ng-tns-",
    "svelte-",
    "makeStyles-",
    "jss",
    "MuiBox-root-",
)

# CSS modules: Component_name__hash or name___hash
_CSS_MODULE = re.compile(r"__[A-Za-z0-9_-]{5,}$")
_DIGIT_RUN = re.compile(r"\d{%d,}" % MIN_DIGIT_RUN)
_HEX_SUFFIX = re.compile(r"-[0-9a-fA-F]{%d,}$" % MIN_HEX_SUFFIX)

_GUID = re.compile(
    r"[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}", re.IGNORECASE
)
_RANDOM_TOKEN = re.compile(r"[a-zA-Z0-9]{20,}")
_TIMESTAMP = re.compile(r"\d{13,}")
_NUMERIC_SUFFIX = re.compile(r"[_-]\d{8,}$")


def has_long_digit_run(token: str) -> bool:
    """True when the token contains 4+ consecutive digits."""
    return _DIGIT_RUN.search(token) is not None


def has_hex_suffix(token: str) -> bool:
    """True when the token ends in a hyphen followed by 8+ hex characters."""
    return _HEX_SUFFIX.search(token) is not None


def has_generated_marker(token: str) -> bool:
    """True when the token carries a known generated-class marker."""
    if _CSS_MODULE.search(token):
        return True
    return any(token.startswith(marker) for marker in GENERATED_CLASS_MARKERS)


def looks_dynamic_class(token: str) -> bool:
    """Whether a class token is likely regenerated by the build."""
    if not token:
        return True
    return (
        has_long_digit_run(token)
        or has_hex_suffix(token)
        or has_generated_marker(token)
    )


def looks_dynamic_id(value: str) -> bool:
    """Whether an id looks session-specific (GUID, timestamp, random hash)."""
    if not value:
        return False
    return bool(
        _GUID.search(value)
        or _RANDOM_TOKEN.fullmatch(value)
        or _TIMESTAMP.search(value)
        or _NUMERIC_SUFFIX.search(value)
    )


def first_class_token(class_attr: str | None) -> str | None:
    """First whitespace-separated token of a class attribute."""
    if not class_attr:
        return None
    tokens = class_attr.split()
    return tokens[0] if tokens else None


# Bare structural tags that match many elements on any page
GENERIC_TAGS: frozenset[str] = frozenset(
    {
        "div", "span", "a", "p", "li", "ul", "ol", "td", "tr", "th",
        "section", "article", "aside", "nav", "header", "footer", "main",
    }
)

_GENERIC_XPATH = re.compile(r"^\(?//([a-z]+)\s*[\[/]?\s*\)?$", re.IGNORECASE)


def is_overly_generic_selector(selector: str) -> bool:
    """Whether a selector is just a structural tag (``div``, ``//span``).

    Such selectors match the first of many elements, so they pass during
    recording and then point at the wrong node once the page changes.
    """
    candidate = selector.strip()
    if candidate.startswith("xpath="):
        candidate = candidate[len("xpath="):].strip()
    if candidate.lower() in GENERIC_TAGS:
        return True
    match = _GENERIC_XPATH.match(candidate)
    return bool(match and match.group(1).lower() in GENERIC_TAGS)
