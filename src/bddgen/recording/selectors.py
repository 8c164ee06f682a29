"""
Selector analysis for recorded locators.

Turns a raw selector from a recording (``#login-btn``, ``text=Sign In``,
``input[name="email"]``, ``role=button[name="Save"]``, an XPath, ...) into the
readable element name, element kind and observed attributes the locator
catalog builds its candidates from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bddgen.locators.models import ElementKind
from bddgen.recording.models import ActionKind

DEFAULT_ELEMENT_NAME = "Element"

# Attributes worth carrying over to the catalog
OBSERVED_ATTRIBUTES: tuple[str, ...] = (
    "data-testid",
    "id",
    "name",
    "placeholder",
    "aria-label",
    "title",
    "value",
    "type",
    "class",
    "href",
)

# Readable-name precedence when several attributes are present
_NAME_SOURCES: tuple[str, ...] = (
    "text",
    "placeholder",
    "aria-label",
    "id",
    "name",
    "title",
    "value",
    "data-testid",
    "class",
)

_NAME_SUFFIX = re.compile(r"[-_](btn|button|input|field|link|txt|id)$", re.IGNORECASE)
_ATTR = re.compile(r"""\[\s*([\w-]+)\s*[*^$~|]?=\s*(?:"([^"]*)"|'([^']*)'|([^\]\s]+))\s*(?:[is]\s*)?\]""")
_ID = re.compile(r"#([\w-]+)")
_CLASS = re.compile(r"\.([A-Za-z_-][\w-]*)")
_TAG = re.compile(r"^([a-zA-Z][\w-]*)")
_HAS_TEXT = re.compile(r""":(?:has-text|text-is)\(\s*["']?(.*?)["']?\s*\)""")
_ROLE = re.compile(r"""^role=(\w+)(?:\[\s*name\s*=\s*["']?(.*?)["']?\s*[is]?\s*\])?""")
_XPATH_ATTR = re.compile(r"""@([\w-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_XPATH_TEXT = re.compile(
    r"""(?:text\(\)|normalize-space\(\s*\.?\s*\))\s*=\s*(?:"([^"]*)"|'([^']*)')"""
    r"""|contains\(\s*(?:text\(\)|\.)\s*,\s*(?:"([^"]*)"|'([^']*)')\s*\)"""
)
_XPATH_TAG = re.compile(r"^/{1,2}([a-zA-Z][\w-]*)")
_CAMEL = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_WORD_SPLIT = re.compile(r"[\s_\-]+")

_INPUT_TAGS = frozenset({"input", "textarea", "select"})
_LINK_ROLES = frozenset({"link"})


@dataclass(frozen=True)
class SelectorHints:
    """What a recorded selector says about its element.

    Attributes:
        element_name: Human-readable name, e.g. ``Sign In`` or ``user name``
        element_kind: Input, button or link
        attributes: Observed attributes, plus ``text`` for visible text
        tag: Tag name when the selector pins one
    """

    element_name: str
    element_kind: ElementKind
    attributes: dict[str, str] = field(default_factory=dict)
    tag: str | None = None


def _first(match: re.Match[str], *groups: int) -> str:
    for group in groups:
        value = match.group(group)
        if value is not None:
            return value
    return ""


def humanize(token: str) -> str:
    """Split an identifier such as ``userName`` or ``user_name`` into words."""
    spaced = _CAMEL.sub(" ", token)
    return " ".join(part for part in _WORD_SPLIT.split(spaced) if part)


def _collect_css(selector: str, attrs: dict[str, str]) -> str | None:
    tag_match = _TAG.match(selector)
    tag = tag_match.group(1).lower() if tag_match else None

    for match in _ATTR.finditer(selector):
        attrs.setdefault(match.group(1).lower(), _first(match, 2, 3, 4))

    # strip bracketed parts so ids and classes inside values are not picked up
    bare = _ATTR.sub("", selector)
    bare = _HAS_TEXT.sub("", bare)

    id_match = _ID.search(bare)
    if id_match:
        attrs.setdefault("id", id_match.group(1))

    classes = _CLASS.findall(bare)
    if classes:
        attrs.setdefault("class", " ".join(classes))

    text_match = _HAS_TEXT.search(selector)
    if text_match:
        attrs.setdefault("text", text_match.group(1))
    return tag


def _collect_xpath(selector: str, attrs: dict[str, str]) -> str | None:
    body = selector[len("xpath="):] if selector.startswith("xpath=") else selector
    tag_match = _XPATH_TAG.match(body)
    tag = tag_match.group(1).lower() if tag_match else None

    for match in _XPATH_ATTR.finditer(body):
        attrs.setdefault(match.group(1).lower(), _first(match, 2, 3))
    text_match = _XPATH_TEXT.search(body)
    if text_match:
        attrs.setdefault("text", _first(text_match, 1, 2, 3, 4))
    return tag


def _readable_name(attrs: dict[str, str]) -> str:
    for source in _NAME_SOURCES:
        raw = attrs.get(source, "").strip()
        if not raw:
            continue
        if source == "class":
            raw = raw.split()[0]
        if source in ("id", "name", "data-testid", "class"):
            raw = humanize(_NAME_SUFFIX.sub("", raw))
        if raw:
            return raw
    return DEFAULT_ELEMENT_NAME


def _element_kind(
    action_kind: ActionKind, tag: str | None, attrs: dict[str, str]
) -> ElementKind:
    if action_kind is not ActionKind.CLICK:
        return ElementKind.INPUT
    if tag == "a" or attrs.get("role") in _LINK_ROLES or "href" in attrs:
        return ElementKind.LINK
    if tag in _INPUT_TAGS and attrs.get("type") not in ("submit", "button"):
        return ElementKind.INPUT
    return ElementKind.BUTTON


def describe_selector(selector_text: str | None, kind: ActionKind) -> SelectorHints:
    """
    Extract element name, kind and attributes from a recorded selector.

    Args:
        selector_text: Selector as recorded; None or empty yields a generic hint
        kind: Action the selector was recorded with

    Returns:
        SelectorHints for the locator catalog
    """
    attrs: dict[str, str] = {}
    tag: str | None = None
    selector = (selector_text or "").strip()

    if selector.startswith("text="):
        attrs["text"] = selector[5:].strip().strip("\"'")
    elif selector.startswith("placeholder="):
        attrs["placeholder"] = selector[12:].strip().strip("\"'")
    elif selector.startswith("label="):
        attrs["aria-label"] = selector[6:].strip().strip("\"'")
    elif selector.startswith("role="):
        match = _ROLE.match(selector)
        if match:
            attrs["role"] = match.group(1)
            if match.group(2):
                attrs["text"] = match.group(2)
    elif selector.startswith(("//", "(//", "xpath=")):
        tag = _collect_xpath(selector, attrs)
    elif selector:
        tag = _collect_css(selector, attrs)

    element_kind = _element_kind(kind, tag, attrs)
    if element_kind is ElementKind.INPUT and "text" in attrs and "aria-label" not in attrs:
        # an input has no text content; its accessible name plays that role
        attrs["aria-label"] = attrs.pop("text")

    name = _readable_name(attrs)
    observed = {k: v for k, v in attrs.items() if k in OBSERVED_ATTRIBUTES or k == "text"}
    return SelectorHints(
        element_name=name,
        element_kind=element_kind,
        attributes=observed,
        tag=tag,
    )
