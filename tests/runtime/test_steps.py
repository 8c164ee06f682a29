"""Tests for step expressions and the step registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from bddgen.runtime.feature import parse_feature
from bddgen.runtime.steps import (
    StepDefinitionError,
    StepNotFoundError,
    StepRegistry,
    compile_expression,
)


class TestCompileExpression:
    """Test Cucumber parameter handling."""

    def test_string_parameter_is_unescaped(self) -> None:
        parser = compile_expression("user enters {string} into element 2")

        result = parser.parse('user enters "say \\"hi\\"\\tnow" into element 2')

        assert result.fixed == ('say "hi"\tnow',)

    def test_empty_string(self) -> None:
        result = compile_expression("user enters {string} into element 2").parse(
            'user enters "" into element 2'
        )

        assert result.fixed == ("",)

    def test_int_float_word(self) -> None:
        parser = compile_expression("wait {int} times {float} for {word}")

        result = parser.parse("wait 3 times 1.5 for login")

        assert result.fixed == (3, 1.5, "login")

    def test_anonymous_parameter(self) -> None:
        result = compile_expression("open {}").parse("open the menu")

        assert result.fixed == ("the menu",)

    def test_literal_text_must_match_exactly(self) -> None:
        parser = compile_expression("user clicks on element 3")

        assert parser.parse("user clicks on element 3") is not None
        assert parser.parse("user clicks on element 31") is None
        assert parser.parse("User clicks on element 3") is None

    def test_unknown_parameter_type(self) -> None:
        with pytest.raises(StepDefinitionError):
            compile_expression("pick {color}")


class TestStepRegistry:
    """Test registration, lookup and scenario execution."""

    def test_decorators_register(self) -> None:
        steps = StepRegistry()

        @steps.given("a page")
        def given_page(context) -> None:
            pass

        @steps.when("user clicks on element {int}")
        def click(context, n) -> None:
            pass

        assert [d.expression for d in steps.definitions()] == [
            "a page",
            "user clicks on element {int}",
        ]
        assert steps.definitions("then") == []

    def test_duplicate_rejected(self) -> None:
        steps = StepRegistry()
        steps.register("when", "x", lambda context: None)

        with pytest.raises(StepDefinitionError):
            steps.register("when", "x", lambda context: None)

    def test_same_text_different_types_allowed(self) -> None:
        steps = StepRegistry()
        steps.register("given", "x", lambda context: None)
        steps.register("then", "x", lambda context: None)

        assert len(steps.definitions()) == 2

    def test_unknown_step_type(self) -> None:
        with pytest.raises(StepDefinitionError):
            StepRegistry().register("maybe", "x", lambda context: None)

    def test_find_is_type_scoped(self) -> None:
        steps = StepRegistry()
        steps.register("given", "a page", lambda context: None)

        with pytest.raises(StepNotFoundError):
            steps.find("when", "a page")

    def test_run_feature(self, temp_dir: Path) -> None:
        calls: list[tuple] = []
        steps = StepRegistry()

        @steps.given("user navigates to Login page")
        def navigate(context) -> None:
            calls.append(("navigate", context))

        @steps.given("user enters {string} into element 2")
        def enter(context, value) -> None:
            calls.append(("enter", value))

        @steps.then("page should be updated")
        def updated(context) -> None:
            calls.append(("updated",))

        path = temp_dir / "login.feature"
        path.write_text(
            "Feature: Login Test\n"
            "  Scenario: Complete Login workflow\n"
            "    Given user navigates to Login page\n"
            '    And user enters "a\\\\b" into element 2\n'
            "    Then page should be updated\n",
            encoding="utf-8",
        )

        steps.run_feature(path, "ctx")

        assert calls == [("navigate", "ctx"), ("enter", "a\\b"), ("updated",)]

    def test_missing_step_fails(self) -> None:
        steps = StepRegistry()
        feature = parse_feature("Feature: f\n  Scenario: s\n    Given nothing bound\n")

        with pytest.raises(StepNotFoundError, match="nothing bound"):
            steps.run_feature(feature, None)

    def test_named_scenario(self) -> None:
        seen: list[str] = []
        steps = StepRegistry()
        steps.register("given", "{word}", lambda context, word: seen.append(word))
        feature = parse_feature(
            "Feature: f\n"
            "  Scenario: one\n    Given first\n"
            "  Scenario: two\n    Given second\n"
        )

        steps.run_feature(feature, None, scenario="two")

        assert seen == ["second"]
        with pytest.raises(LookupError):
            steps.run_feature(feature, None, scenario="three")

    def test_background_runs_first(self) -> None:
        seen: list[str] = []
        steps = StepRegistry()
        steps.register("given", "{word}", lambda context, word: seen.append(word))
        feature = parse_feature(
            "Feature: f\n  Background:\n    Given setup\n  Scenario: s\n    Given body\n"
        )

        steps.run_feature(feature, None)

        assert seen == ["setup", "body"]
