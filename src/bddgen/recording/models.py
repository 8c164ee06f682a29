"""
Data model for recorded browser interactions.

A recording is parsed into an ordered list of RecordedAction values. Method
names, step texts and Gherkin keywords are derived from kind and sequence id
so every generated artifact agrees on them without a shared registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ActionKind(StrEnum):
    """Kinds of user-observable interactions a recording can contain."""

    NAVIGATE = "navigate"
    CLICK = "click"
    FILL = "fill"
    SELECT = "select"
    CHECK = "check"
    PRESS_KEY = "press"

    @property
    def carries_value(self) -> bool:
        """Whether the action captures a typed text, option or key."""
        return self in (ActionKind.FILL, ActionKind.SELECT, ActionKind.PRESS_KEY)


# Step text templates; "{n}" is the sequence id, "{string}" stays as a
# Cucumber expression parameter.
_STEP_TEMPLATES: dict[ActionKind, str] = {
    ActionKind.CLICK: "user clicks on element {n}",
    ActionKind.FILL: "user enters {{string}} into element {n}",
    ActionKind.SELECT: "user selects {{string}} from element {n}",
    ActionKind.CHECK: "user checks element {n}",
    ActionKind.PRESS_KEY: "user presses key on element {n}",
}

_METHOD_PREFIXES: dict[ActionKind, str] = {
    ActionKind.CLICK: "click_element",
    ActionKind.FILL: "fill_element",
    ActionKind.SELECT: "select_element",
    ActionKind.CHECK: "check_element",
    ActionKind.PRESS_KEY: "press_element",
}

NAVIGATE_METHOD = "navigate_to"
NAVIGATE_STEP_TEMPLATE = "user navigates to {class_name} page"
CLOSING_STEP = "page should be updated"
CLOSING_METHOD = "verify_page_updated"


@dataclass(frozen=True)
class RecordedAction:
    """One interaction extracted from a recording line.

    Attributes:
        sequence_id: 1-based position among matched lines
        kind: Interaction kind
        selector_text: Raw locator text as recorded (None for navigation)
        value: Typed text, selected option, key name or navigation target
    """

    sequence_id: int
    kind: ActionKind
    selector_text: str | None = None
    value: str | None = None

    @property
    def method_name(self) -> str:
        """Page object method name, e.g. ``click_element_3``."""
        if self.kind is ActionKind.NAVIGATE:
            return NAVIGATE_METHOD
        return f"{_METHOD_PREFIXES[self.kind]}_{self.sequence_id}"

    @property
    def step_text(self) -> str:
        """Step expression bound in the step module, e.g. ``user clicks on element 3``.

        Navigation steps depend on the generated class name and are produced by
        ``navigate_step_text`` instead.
        """
        if self.kind is ActionKind.NAVIGATE:
            return NAVIGATE_STEP_TEMPLATE
        return _STEP_TEMPLATES[self.kind].format(n=self.sequence_id)

    @property
    def keyword(self) -> str:
        """Gherkin keyword used for this action's feature line."""
        match self.kind:
            case ActionKind.NAVIGATE:
                return "Given"
            case ActionKind.CLICK:
                return "When"
            case _:
                return "And"

    @property
    def has_selector(self) -> bool:
        return self.selector_text is not None


def navigate_step_text(class_name: str) -> str:
    """Opening step text for a generated scenario."""
    return NAVIGATE_STEP_TEMPLATE.format(class_name=class_name)
