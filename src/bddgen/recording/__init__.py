"""
Recording module turning captured browser interactions into structured actions.

Provides:
- Line-oriented parsing of plain call recordings and locator-chain recordings
- Derived method names, step texts and Gherkin keywords per action
- Readable element names and observed attributes from recorded selectors
"""

from bddgen.recording.models import ActionKind, RecordedAction, navigate_step_text
from bddgen.recording.parser import ParseResult, RecordingParser, parse_recording
from bddgen.recording.selectors import SelectorHints, describe_selector

__all__ = [
    "ActionKind",
    "ParseResult",
    "RecordedAction",
    "RecordingParser",
    "SelectorHints",
    "describe_selector",
    "navigate_step_text",
    "parse_recording",
]
