"""
Step registry for generated step modules.

Step expressions use Cucumber expression parameters (``{string}``, ``{int}``,
``{float}``, ``{word}`` and anonymous ``{}``) and are matched with the
``parse`` library. ``{string}`` values are unquoted and unescaped with the
same rules the generator used to write them into the feature file.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import parse
import structlog

from bddgen.generator.naming import unescape_literal
from bddgen.runtime.feature import Feature, Scenario, Step, load_feature

logger = structlog.get_logger(__name__)

STEP_TYPES: tuple[str, ...] = ("given", "when", "then")


class StepDefinitionError(Exception):
    """Raised for invalid or duplicate step definitions."""

    pass


class StepNotFoundError(Exception):
    """Raised when no step definition matches a scenario step."""

    pass


@parse.with_pattern(r'"(?:[^"\\]|\\.)*"')
def _parse_string(text: str) -> str:
    return unescape_literal(text[1:-1])


@parse.with_pattern(r"-?\d+")
def _parse_int(text: str) -> int:
    return int(text)


@parse.with_pattern(r"-?(?:\d+\.\d*|\.?\d+)")
def _parse_float(text: str) -> float:
    return float(text)


@parse.with_pattern(r"[^\s]+")
def _parse_word(text: str) -> str:
    return text


# Cucumber parameter name -> parse type name
_PARAMETER_TYPES: dict[str, str] = {
    "string": "CucumberString",
    "int": "CucumberInt",
    "float": "CucumberFloat",
    "word": "CucumberWord",
}
_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "CucumberString": _parse_string,
    "CucumberInt": _parse_int,
    "CucumberFloat": _parse_float,
    "CucumberWord": _parse_word,
}
_PARAMETER = re.compile(r"\{(\w*)\}")


def compile_expression(expression: str) -> parse.Parser:
    """
    Translate a Cucumber expression into a case-sensitive parse.Parser.

    Raises:
        StepDefinitionError: If the expression uses an unknown parameter type
    """
    pieces: list[str] = []
    position = 0
    for match in _PARAMETER.finditer(expression):
        literal = expression[position:match.start()]
        pieces.append(literal.replace("{", "{{").replace("}", "}}"))
        name = match.group(1)
        if not name:
            pieces.append("{}")
        elif name in _PARAMETER_TYPES:
            pieces.append("{:" + _PARAMETER_TYPES[name] + "}")
        else:
            raise StepDefinitionError(
                f"Unknown parameter type {{{name}}} in step expression {expression!r}"
            )
        position = match.end()
    tail = expression[position:]
    pieces.append(tail.replace("{", "{{").replace("}", "}}"))
    return parse.compile("".join(pieces), extra_types=_CONVERTERS, case_sensitive=True)


@dataclass(frozen=True)
class StepDefinition:
    """A step function bound to one step type and expression."""

    step_type: str
    expression: str
    func: Callable[..., Any]
    parser: parse.Parser

    def match(self, text: str) -> tuple[Any, ...] | None:
        result = self.parser.parse(text)
        if result is None:
            return None
        return tuple(result.fixed)


class StepRegistry:
    """
    Holds the step definitions of one step module and runs scenarios with them.

    Step functions receive the scenario context (a page object for generated
    modules) followed by the converted expression parameters.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, list[StepDefinition]] = {t: [] for t in STEP_TYPES}
        self._log = logger.bind(component="step_registry")

    def given(self, expression: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self._decorator("given", expression)

    def when(self, expression: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self._decorator("when", expression)

    def then(self, expression: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self._decorator("then", expression)

    def _decorator(
        self, step_type: str, expression: str
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def register(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(step_type, expression, func)
            return func

        return register

    def register(self, step_type: str, expression: str, func: Callable[..., Any]) -> None:
        """
        Add a step definition.

        Raises:
            StepDefinitionError: On an unknown step type or a duplicate expression
        """
        if step_type not in self._definitions:
            raise StepDefinitionError(f"Unknown step type: {step_type}")
        if any(d.expression == expression for d in self._definitions[step_type]):
            raise StepDefinitionError(f"Duplicate {step_type} step: {expression!r}")
        self._definitions[step_type].append(
            StepDefinition(step_type, expression, func, compile_expression(expression))
        )

    def definitions(self, step_type: str | None = None) -> list[StepDefinition]:
        if step_type is not None:
            return list(self._definitions.get(step_type, []))
        return [d for t in STEP_TYPES for d in self._definitions[t]]

    def find(self, step_type: str, text: str) -> tuple[StepDefinition, tuple[Any, ...]]:
        """
        First definition of ``step_type`` whose expression matches ``text``.

        Raises:
            StepNotFoundError: If nothing matches
        """
        for definition in self._definitions.get(step_type, []):
            args = definition.match(text)
            if args is not None:
                return definition, args
        raise StepNotFoundError(f"No {step_type} step matches {text!r}")

    def run_scenario(
        self, scenario: Scenario, context: Any, background: list[Step] | None = None
    ) -> None:
        """Run background steps then scenario steps in order."""
        self._log.info("Running scenario", scenario=scenario.name)
        for step in [*(background or []), *scenario.steps]:
            definition, args = self.find(step.step_type, step.text)
            self._log.debug("Running step", keyword=step.keyword, text=step.text)
            definition.func(context, *args)

    def run_feature(
        self,
        feature: Feature | str | Path,
        context: Any,
        scenario: str | None = None,
    ) -> None:
        """
        Run every scenario of a feature (or the one named ``scenario``).

        Raises:
            StepNotFoundError: If a step has no definition
            FeatureParseError: If the feature file cannot be read
            LookupError: If ``scenario`` names no scenario in the feature
        """
        if not isinstance(feature, Feature):
            feature = load_feature(feature)
        selected = [s for s in feature.scenarios if scenario is None or s.name == scenario]
        if scenario is not None and not selected:
            raise LookupError(f"No scenario named {scenario!r} in {feature.name}")
        for item in selected:
            self.run_scenario(item, context, feature.background)
