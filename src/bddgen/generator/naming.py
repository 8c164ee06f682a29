"""
Naming and literal helpers shared by every generated artifact.

escape_literal is the only escaping routine used when embedding recorded
text in generated sources. The runtime step matcher undoes it with
unescape_literal, so a value survives feature file -> step binding unchanged.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_UNESCAPES: dict[str, str] = {v[1]: k for k, v in _ESCAPES.items()}

_SPECIAL = re.compile(r'[\\"\n\r\t]')
_ESCAPE_SEQ = re.compile(r"\\(.)", re.DOTALL)
_SNAKE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_WORD = re.compile(r"[^0-9a-zA-Z]+")
_ELEMENT_CONSTANT = re.compile(r"^\s*ELEMENT_(\d+)\s*[:=]", re.MULTILINE)


def escape_literal(text: str) -> str:
    """
    Escape text for a double-quoted literal in Python or Gherkin.

    Handles backslash, double quote, newline, carriage return and tab. Text
    without those characters is returned unchanged.
    """
    return _SPECIAL.sub(lambda m: _ESCAPES[m.group(0)], text)


def unescape_literal(text: str) -> str:
    """Inverse of escape_literal; unknown escapes are kept verbatim."""
    return _ESCAPE_SEQ.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), text)


def quote_literal(text: str | None) -> str:
    """Escaped text wrapped in double quotes; None renders as ``""``."""
    return '"' + escape_literal(text or "") + '"'


def derive_class_name(feature_name: str) -> str:
    """
    Class name for a feature: first letter upper-cased, nothing else touched.

    Raises:
        ValueError: If the feature name is empty
    """
    if not feature_name:
        raise ValueError("Feature name must not be empty")
    return feature_name[0].upper() + feature_name[1:]


def to_snake_case(name: str) -> str:
    """``LoginPage`` -> ``login_page``; used for file and fixture names."""
    spaced = _SNAKE_BOUNDARY.sub("_", name)
    return _NON_WORD.sub("_", spaced).strip("_").lower()


def next_element_index(existing_source: str | None) -> int:
    """First free ELEMENT_<n> index given an existing page object source."""
    if not existing_source:
        return 1
    indices = [int(n) for n in _ELEMENT_CONSTANT.findall(existing_source)]
    return max(indices, default=0) + 1


def extract_page_path(url: str | None) -> str:
    """
    Page path for a navigation target.

    Absolute URLs are reduced to path plus query (a bare origin gives ``""``);
    anything else is returned as recorded.
    """
    if not url:
        return ""
    parts = urlsplit(url)
    if not (parts.scheme and parts.netloc):
        return url
    path = parts.path if parts.path not in ("", "/") else ""
    if parts.query:
        path = (path or "/") + "?" + parts.query
    return path
