"""Tests for the shared artifact plan."""

from __future__ import annotations

from bddgen.generator.plan import build_plan
from bddgen.recording.models import ActionKind, RecordedAction
from bddgen.recording.parser import parse_recording


class TestBuildPlan:
    """Test how recorded actions become methods, steps and bindings."""

    def test_sample_recording(self, sample_recording: str) -> None:
        plan = build_plan(parse_recording(sample_recording).actions, "login")

        assert plan.class_name == "Login"
        assert plan.snake_name == "login"
        assert plan.page_path == "/login"
        assert [m.name for m in plan.methods] == ["fill_element_2", "click_element_3"]
        assert plan.sequence_ids == [2, 3]
        assert [c.name for c in plan.constants] == ["ELEMENT_1", "ELEMENT_2"]
        assert [s.line for s in plan.feature_steps] == [
            "Given user navigates to Login page",
            'And user enters "alice" into element 2',
            "When user clicks on element 3",
            "Then page should be updated",
        ]

    def test_bindings_follow_keywords(self, sample_recording: str) -> None:
        """``And`` bindings take the type of the step before them."""
        plan = build_plan(parse_recording(sample_recording).actions, "login")

        assert [(b.step_type, b.expression, b.method_name) for b in plan.bindings] == [
            ("given", "user navigates to Login page", "navigate_to"),
            ("given", "user enters {string} into element 2", "fill_element_2"),
            ("when", "user clicks on element 3", "click_element_3"),
            ("then", "page should be updated", "verify_page_updated"),
        ]
        assert plan.bindings[1].takes_value is True
        assert plan.bindings[2].takes_value is False

    def test_every_constant_has_candidates(self, sample_recording: str) -> None:
        plan = build_plan(parse_recording(sample_recording).actions, "login")

        for constant in plan.constants:
            assert constant.candidates
            priorities = [c.priority for c in constant.candidates]
            assert priorities == sorted(set(priorities))

    def test_recorded_selector_is_a_candidate(self, sample_recording: str) -> None:
        plan = build_plan(parse_recording(sample_recording).actions, "login")

        expressions = [c.selector_expression for c in plan.constants[0].candidates]
        assert "#user" in expressions

    def test_explicit_page_path_wins(self, sample_recording: str) -> None:
        plan = build_plan(parse_recording(sample_recording).actions, "login", page_path="/sign-in")

        assert plan.page_path == "/sign-in"

    def test_absolute_url_reduced_to_path(self, codegen_recording: str) -> None:
        plan = build_plan(parse_recording(codegen_recording).actions, "cart")

        assert plan.page_path == "/cart?step=1"

    def test_press_key_bakes_in_key(self, codegen_recording: str) -> None:
        plan = build_plan(parse_recording(codegen_recording).actions, "cart")
        press = plan.methods[-1]

        assert press.kind is ActionKind.PRESS_KEY
        assert press.primitive == "press_key"
        assert press.fixed_value == "Enter"
        assert press.takes_value is False

    def test_first_element_index(self, sample_recording: str) -> None:
        plan = build_plan(
            parse_recording(sample_recording).actions, "login", first_element_index=5
        )

        assert [c.name for c in plan.constants] == ["ELEMENT_5", "ELEMENT_6"]
        assert [m.name for m in plan.methods] == ["fill_element_2", "click_element_3"]

    def test_navigation_only(self) -> None:
        plan = build_plan([RecordedAction(1, ActionKind.NAVIGATE, value="")], "home")

        assert plan.methods == []
        assert [s.keyword for s in plan.feature_steps] == ["Given", "Then"]

    def test_action_without_selector_skipped_with_warning(self) -> None:
        actions = [
            RecordedAction(1, ActionKind.NAVIGATE, value="/"),
            RecordedAction(2, ActionKind.CLICK),
            RecordedAction(3, ActionKind.CLICK, "#ok"),
        ]

        plan = build_plan(actions, "home")

        assert [m.name for m in plan.methods] == ["click_element_3"]
        assert any("Action 2" in w for w in plan.warnings)

    def test_dynamic_id_warning(self) -> None:
        actions = [RecordedAction(1, ActionKind.CLICK, "#ember-12345678")]

        plan = build_plan(actions, "home")

        assert any("ember-12345678" in w for w in plan.warnings)

    def test_generic_selector_warning(self) -> None:
        """A bare tag selector is flagged and never trusted as a stable candidate."""
        actions = [RecordedAction(1, ActionKind.CLICK, "div")]

        plan = build_plan(actions, "home")

        assert "Generic selector 'div' in action 1" in plan.warnings
        raw = [c for c in plan.constants[0].candidates if c.selector_expression == "div"]
        assert raw[0].is_stable is False

    def test_specific_selector_not_flagged(self, sample_recording: str) -> None:
        plan = build_plan(parse_recording(sample_recording).actions, "login")

        assert not any("Generic selector" in w for w in plan.warnings)

    def test_story_id(self, sample_recording: str) -> None:
        plan = build_plan(parse_recording(sample_recording).actions, "login", story_id="ST-12")

        assert plan.story_id == "ST-12"
