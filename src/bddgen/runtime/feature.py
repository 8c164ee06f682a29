"""
Reader for the Gherkin subset bddgen emits.

Supports tags, Feature, Background, Scenario and the step keywords
Given/When/Then/And/But/``*``. ``And``/``But``/``*`` take the type of the
step before them. Tables, doc strings and Scenario Outline are not supported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

_PRIMARY = {"Given": "given", "When": "when", "Then": "then"}
_CONTINUATION = ("And", "But", "*")


class FeatureParseError(Exception):
    """Raised when a feature file uses unsupported or malformed syntax."""

    pass


@dataclass(frozen=True)
class Step:
    """A scenario step with its effective type."""

    keyword: str
    step_type: str
    text: str
    line_number: int


@dataclass
class Scenario:
    name: str
    tags: list[str] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)


@dataclass
class Feature:
    name: str
    tags: list[str] = field(default_factory=list)
    scenarios: list[Scenario] = field(default_factory=list)
    background: list[Step] = field(default_factory=list)
    path: Path | None = None


def _split_keyword(line: str) -> tuple[str, str] | None:
    for keyword in (*_PRIMARY, *_CONTINUATION):
        if line == keyword or line.startswith(keyword + " "):
            return keyword, line[len(keyword):].strip()
    return None


def parse_feature(text: str, path: Path | None = None) -> Feature:
    """
    Parse feature text.

    Args:
        text: Feature file contents
        path: Source path, used in error messages

    Returns:
        Feature with background steps kept separate from scenario steps

    Raises:
        FeatureParseError: On unsupported or malformed syntax
    """
    where = str(path) if path else "<feature>"
    feature: Feature | None = None
    pending_tags: list[str] = []
    target: list[Step] | None = None
    previous_type: str | None = None

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("@"):
            pending_tags.extend(tag.lstrip("@") for tag in line.split())
            continue

        if line.startswith("Feature:"):
            if feature is not None:
                raise FeatureParseError(f"{where}:{number}: second Feature")
            feature = Feature(name=line[8:].strip(), tags=pending_tags, path=path)
            pending_tags = []
            continue

        if feature is None:
            raise FeatureParseError(f"{where}:{number}: expected Feature:")

        if line.startswith("Background:"):
            target = feature.background
            previous_type = None
            continue

        if line.startswith(("Scenario Outline:", "Scenario Template:", "Examples:")):
            raise FeatureParseError(f"{where}:{number}: Scenario Outline is not supported")

        if line.startswith(("Scenario:", "Example:")):
            scenario = Scenario(name=line.split(":", 1)[1].strip(), tags=pending_tags)
            pending_tags = []
            feature.scenarios.append(scenario)
            target = scenario.steps
            previous_type = None
            continue

        split = _split_keyword(line)
        if split is None:
            if target is None:
                # free-form feature description
                continue
            raise FeatureParseError(f"{where}:{number}: unsupported line {line!r}")
        if target is None:
            raise FeatureParseError(f"{where}:{number}: step outside a scenario")

        keyword, step_text = split
        if keyword in _PRIMARY:
            step_type = _PRIMARY[keyword]
        elif previous_type is None:
            raise FeatureParseError(f"{where}:{number}: '{keyword}' cannot start a scenario")
        else:
            step_type = previous_type
        previous_type = step_type
        target.append(Step(keyword, step_type, step_text, number))

    if feature is None:
        raise FeatureParseError(f"{where}: no Feature found")
    return feature


def load_feature(path: str | Path) -> Feature:
    path = Path(path)
    return parse_feature(path.read_text(encoding="utf-8"), path)
