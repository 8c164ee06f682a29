"""
Intermediate representation for one generation run.

build_plan walks the recorded actions once and produces every record the
three templates need. Page methods, feature steps and step bindings are all
derived from the same RecordedAction, so the artifacts cannot disagree on a
name or a step text.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from bddgen.generator.naming import (
    derive_class_name,
    extract_page_path,
    quote_literal,
    to_snake_case,
)
from bddgen.locators.catalog import LocatorCatalog
from bddgen.locators.heuristics import is_overly_generic_selector, looks_dynamic_id
from bddgen.locators.models import LocatorStrategy
from bddgen.recording.models import (
    CLOSING_METHOD,
    CLOSING_STEP,
    NAVIGATE_METHOD,
    ActionKind,
    RecordedAction,
    navigate_step_text,
)
from bddgen.recording.selectors import describe_selector

logger = structlog.get_logger(__name__)

# BasePage primitive each page method delegates to
_DISPATCH: dict[ActionKind, str] = {
    ActionKind.CLICK: "click",
    ActionKind.FILL: "fill",
    ActionKind.SELECT: "select_option",
    ActionKind.CHECK: "check",
    ActionKind.PRESS_KEY: "press_key",
}

_STEP_TYPES: dict[str, str] = {"Given": "given", "When": "when", "Then": "then"}


@dataclass(frozen=True)
class LocatorConstant:
    """An ``ELEMENT_<n>`` constant on the page object."""

    name: str
    element_name: str
    recorded_selector: str
    candidates: tuple[LocatorStrategy, ...]


@dataclass(frozen=True)
class PageMethod:
    """A page object method for one non-navigation action."""

    name: str
    kind: ActionKind
    sequence_id: int
    constant: str
    primitive: str
    # key name baked into press methods
    fixed_value: str | None = None

    @property
    def takes_value(self) -> bool:
        return self.kind in (ActionKind.FILL, ActionKind.SELECT)


@dataclass(frozen=True)
class FeatureStep:
    """One line of the scenario."""

    keyword: str
    text: str

    @property
    def line(self) -> str:
        return f"{self.keyword} {self.text}"


@dataclass(frozen=True)
class StepBinding:
    """One step function in the step module."""

    step_type: str
    expression: str
    function_name: str
    method_name: str
    takes_value: bool = False


@dataclass
class ArtifactPlan:
    """Everything the page object, feature and step templates render from."""

    class_name: str
    snake_name: str
    page_path: str
    story_id: str
    constants: list[LocatorConstant] = field(default_factory=list)
    methods: list[PageMethod] = field(default_factory=list)
    feature_steps: list[FeatureStep] = field(default_factory=list)
    bindings: list[StepBinding] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def sequence_ids(self) -> list[int]:
        return [method.sequence_id for method in self.methods]


def _feature_text(action: RecordedAction) -> str:
    """Step text with ``{string}`` instantiated by the recorded value."""
    if action.kind.carries_value and "{string}" in action.step_text:
        return action.step_text.replace("{string}", quote_literal(action.value), 1)
    return action.step_text


def build_plan(
    actions: Sequence[RecordedAction],
    feature_name: str,
    page_path: str = "",
    story_id: str = "",
    first_element_index: int = 1,
    catalog: LocatorCatalog | None = None,
) -> ArtifactPlan:
    """
    Build the artifact plan for a recording.

    Args:
        actions: Recorded actions in order
        feature_name: Requested feature name; its first letter is upper-cased
        page_path: Page path; defaults to the first navigation target's path
        story_id: Optional story tag for the feature
        first_element_index: Number of the first ELEMENT_<n> constant
        catalog: Locator catalog (a default one when omitted)

    Returns:
        ArtifactPlan shared by all three renders
    """
    log = logger.bind(component="plan_builder")
    catalog = catalog or LocatorCatalog()
    class_name = derive_class_name(feature_name)

    if not page_path:
        first_nav = next(
            (a for a in actions if a.kind is ActionKind.NAVIGATE and a.value), None
        )
        page_path = extract_page_path(first_nav.value if first_nav else None)

    plan = ArtifactPlan(
        class_name=class_name,
        snake_name=to_snake_case(class_name),
        page_path=page_path,
        story_id=story_id,
    )

    plan.feature_steps.append(FeatureStep("Given", navigate_step_text(class_name)))
    plan.bindings.append(
        StepBinding(
            step_type="given",
            expression=navigate_step_text(class_name),
            function_name="navigate_step",
            method_name=NAVIGATE_METHOD,
        )
    )

    element_index = first_element_index
    current_type = "given"

    for action in actions:
        if action.kind is ActionKind.NAVIGATE:
            # every navigation maps onto the opening Given line
            continue
        if not action.has_selector:
            warning = f"Action {action.sequence_id} ({action.kind}) has no selector; skipped"
            log.warning("Skipped action without selector", sequence_id=action.sequence_id)
            plan.warnings.append(warning)
            continue

        hints = describe_selector(action.selector_text, action.kind)
        observed_id = hints.attributes.get("id")
        if observed_id and looks_dynamic_id(observed_id):
            warning = f"Dynamic id '{observed_id}' in action {action.sequence_id}"
            log.warning("Dynamic id in recording", element_id=observed_id, sequence_id=action.sequence_id)
            plan.warnings.append(warning)
        if is_overly_generic_selector(action.selector_text):
            warning = f"Generic selector '{action.selector_text}' in action {action.sequence_id}"
            log.warning(
                "Generic selector in recording",
                selector=action.selector_text,
                sequence_id=action.sequence_id,
            )
            plan.warnings.append(warning)

        constant = LocatorConstant(
            name=f"ELEMENT_{element_index}",
            element_name=hints.element_name,
            recorded_selector=action.selector_text or "",
            candidates=tuple(
                catalog.candidates_for(
                    hints.element_name,
                    hints.element_kind,
                    hints.attributes,
                    recorded_selector=action.selector_text,
                )
            ),
        )
        element_index += 1
        plan.constants.append(constant)

        method = PageMethod(
            name=action.method_name,
            kind=action.kind,
            sequence_id=action.sequence_id,
            constant=constant.name,
            primitive=_DISPATCH[action.kind],
            fixed_value=(action.value or "") if action.kind is ActionKind.PRESS_KEY else None,
        )
        plan.methods.append(method)

        keyword = action.keyword
        if keyword in _STEP_TYPES:
            current_type = _STEP_TYPES[keyword]
        plan.feature_steps.append(FeatureStep(keyword, _feature_text(action)))
        plan.bindings.append(
            StepBinding(
                step_type=current_type,
                expression=action.step_text,
                function_name=f"{action.kind.value}_step_{action.sequence_id}",
                method_name=method.name,
                takes_value=method.takes_value,
            )
        )

    plan.feature_steps.append(FeatureStep("Then", CLOSING_STEP))
    plan.bindings.append(
        StepBinding(
            step_type="then",
            expression=CLOSING_STEP,
            function_name="page_updated_step",
            method_name=CLOSING_METHOD,
        )
    )

    log.debug(
        "Built artifact plan",
        class_name=class_name,
        constants=len(plan.constants),
        steps=len(plan.feature_steps),
    )
    return plan
