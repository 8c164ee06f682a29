"""
Runtime support for generated page objects and step modules.

Provides:
- BasePage with resolver-backed interactions
- StepRegistry matching Cucumber-style step expressions
- Feature file reader for the generated Gherkin subset
"""

from bddgen.runtime.feature import (
    Feature,
    FeatureParseError,
    Scenario,
    Step,
    load_feature,
    parse_feature,
)
from bddgen.runtime.page import BasePage, join_url
from bddgen.runtime.steps import (
    StepDefinition,
    StepDefinitionError,
    StepNotFoundError,
    StepRegistry,
    compile_expression,
)

__all__ = [
    "BasePage",
    "Feature",
    "FeatureParseError",
    "Scenario",
    "Step",
    "StepDefinition",
    "StepDefinitionError",
    "StepNotFoundError",
    "StepRegistry",
    "compile_expression",
    "join_url",
    "load_feature",
    "parse_feature",
]
