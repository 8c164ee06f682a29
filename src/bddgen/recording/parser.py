"""
Recording parser turning a line-oriented action log into RecordedAction values.

Recognises both the plain call form used by hand-written recordings
(``click("#submit")``) and the locator-chain form emitted by Playwright
codegen (``page.get_by_role("button", name="Save").click()``). Each line is
tested against the action patterns in a fixed precedence order; the first
match wins and unrecognised lines are skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import structlog

from bddgen.recording.models import ActionKind, RecordedAction

logger = structlog.get_logger(__name__)


# A single- or double-quoted string literal with backslash escapes
_LIT = r"""(?:"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')"""

# page.locator(...) / page.get_by_*(...) / camelCase variants
_TARGET = (
    r"(?:\bpage\.)?"
    r"(?:locator\(\s*(?P<loc>" + _LIT + r")\s*\)"
    r"|(?:get_by_|getBy)(?P<by>text|Text|label|Label|placeholder|Placeholder|test_id|TestId|role|Role)"
    r"\(\s*(?P<by_arg>" + _LIT + r")"
    r"(?:\s*,\s*(?:name\s*=\s*|\{\s*name\s*:\s*)(?P<by_name>" + _LIT + r")\s*\}?)?[^)]*\))"
)

# .first, .last and .nth(n) narrow a chain; the resolver already acts on the first match
_NARROW = r"(?:\.(?:first|last)(?:\(\s*\))?|\.nth\(\s*\d+\s*\))?"
_PLAIN = r"(?:\bpage\.|(?<![\w.]))"


def _plain(names: str, arity: int) -> str:
    args = r"\s*(?P<a1>" + _LIT + r")"
    if arity == 2:
        args += r"\s*,\s*(?P<a2>" + _LIT + r")"
    # trailing keyword options such as timeout=... are ignored
    return _PLAIN + r"(?:" + names + r")\(" + args + r"\s*(?:,[^)]*)?\)"


def _chain(method: str, with_value: bool) -> str:
    tail = r"\(\s*(?P<cv>" + _LIT + r")" if with_value else r"\("
    return _TARGET + _NARROW + r"\.(?:" + method + r")" + tail


@dataclass(frozen=True)
class _ActionPattern:
    kind: ActionKind
    plain: re.Pattern[str]
    chain: re.Pattern[str] | None


# Fixed precedence: navigate, click, fill, select, check, press
_PATTERNS: tuple[_ActionPattern, ...] = (
    _ActionPattern(
        ActionKind.NAVIGATE,
        re.compile(_PLAIN + r"(?:navigate|goto)\(\s*(?P<a1>" + _LIT + r")"),
        None,
    ),
    _ActionPattern(
        ActionKind.CLICK,
        re.compile(_plain("click", 1)),
        re.compile(_chain("click", False)),
    ),
    _ActionPattern(
        ActionKind.FILL,
        re.compile(_plain("fill", 2)),
        re.compile(_chain("fill", True)),
    ),
    _ActionPattern(
        ActionKind.SELECT,
        re.compile(_plain("selectOption|select_option", 2)),
        re.compile(_chain("selectOption|select_option", True)),
    ),
    _ActionPattern(
        ActionKind.CHECK,
        re.compile(_plain("check", 1)),
        re.compile(_chain("check", False)),
    ),
    _ActionPattern(
        ActionKind.PRESS_KEY,
        re.compile(_plain("press", 2)),
        re.compile(_chain("press", True)),
    ),
)

# Lines that are never actions even if they mention one
_NOISE_PREFIXES: tuple[str, ...] = ("#", "//", "import ", "from ", "package ")

_UNESCAPES: dict[str, str] = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def _literal_value(literal: str) -> str:
    """Decode a quoted literal from the recording into its string value."""
    body = literal[1:-1]
    if "\\" not in body:
        return body
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_UNESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _chain_selector(match: re.Match[str]) -> str:
    """Normalise a locator-chain target into a single selector string."""
    if match.group("loc") is not None:
        return _literal_value(match.group("loc"))

    by = match.group("by").lower()
    arg = _literal_value(match.group("by_arg"))
    if by == "text":
        return f"text={arg}"
    if by == "label":
        return f"label={arg}"
    if by == "placeholder":
        return f"placeholder={arg}"
    if by in ("test_id", "testid"):
        return f'[data-testid="{arg}"]'
    # role
    name = match.group("by_name")
    if name is not None:
        return f'role={arg}[name="{_literal_value(name)}"]'
    return f"role={arg}"


@dataclass
class ParseResult:
    """Parsed actions plus anything the caller should be told about."""

    actions: list[RecordedAction] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped_lines: int = 0
    synthesized: bool = False

    def __iter__(self) -> Iterator[RecordedAction]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def __getitem__(self, index: int) -> RecordedAction:
        return self.actions[index]


class RecordingParser:
    """
    Parses raw recording text into an ordered sequence of RecordedAction.

    Sequence ids are assigned over matched lines only. A recording that yields
    no actions degrades to a single empty Navigate action and reports a
    warning instead of failing.
    """

    def __init__(self) -> None:
        self._log = logger.bind(component="recording_parser")

    def parse(self, raw_log: str) -> ParseResult:
        """
        Parse a recording.

        Args:
            raw_log: Recording text, one action expression per line at most

        Returns:
            ParseResult with actions in recording order
        """
        result = ParseResult()
        next_id = 1

        for line in raw_log.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(_NOISE_PREFIXES):
                if stripped:
                    result.skipped_lines += 1
                continue

            action = self._match_line(stripped, next_id)
            if action is None:
                result.skipped_lines += 1
                continue

            result.actions.append(action)
            next_id += 1

        if not result.actions:
            warning = (
                "No recognised actions in recording; "
                "generated a navigation-only skeleton"
            )
            self._log.warning(warning, skipped_lines=result.skipped_lines)
            result.warnings.append(warning)
            result.actions.append(
                RecordedAction(sequence_id=1, kind=ActionKind.NAVIGATE, value="")
            )
            result.synthesized = True
        else:
            self._log.debug(
                "Parsed recording",
                actions=len(result.actions),
                skipped_lines=result.skipped_lines,
            )

        return result

    def _match_line(self, line: str, sequence_id: int) -> RecordedAction | None:
        for pattern in _PATTERNS:
            match = pattern.plain.search(line)
            if match is not None:
                return self._from_plain(pattern.kind, match, sequence_id)
            if pattern.chain is not None:
                match = pattern.chain.search(line)
                if match is not None:
                    return self._from_chain(pattern.kind, match, sequence_id)
        return None

    @staticmethod
    def _from_plain(
        kind: ActionKind, match: re.Match[str], sequence_id: int
    ) -> RecordedAction:
        first = _literal_value(match.group("a1"))
        if kind is ActionKind.NAVIGATE:
            return RecordedAction(sequence_id=sequence_id, kind=kind, value=first)

        second = match.groupdict().get("a2")
        return RecordedAction(
            sequence_id=sequence_id,
            kind=kind,
            selector_text=first,
            value=_literal_value(second) if second is not None else None,
        )

    @staticmethod
    def _from_chain(
        kind: ActionKind, match: re.Match[str], sequence_id: int
    ) -> RecordedAction:
        value = match.groupdict().get("cv")
        return RecordedAction(
            sequence_id=sequence_id,
            kind=kind,
            selector_text=_chain_selector(match),
            value=_literal_value(value) if value is not None else None,
        )


def parse_recording(raw_log: str) -> ParseResult:
    """Parse a recording with a default parser."""
    return RecordingParser().parse(raw_log)


def actions_of(result: ParseResult | Sequence[RecordedAction]) -> list[RecordedAction]:
    """Return the action list from a ParseResult or a plain sequence."""
    if isinstance(result, ParseResult):
        return list(result.actions)
    return list(result)
