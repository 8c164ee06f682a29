"""
Jinja2 templates for the three generated artifacts.

Every free-text value goes through the ``lit`` filter (quote_literal) or the
``esc`` filter (escape_literal); no template escapes text on its own.
"""

from __future__ import annotations

from jinja2 import Environment, StrictUndefined

from bddgen.generator.naming import escape_literal, quote_literal

PAGE_OBJECT_TEMPLATE = '''"""Page object for the {{ plan.class_name }} page."""

from bddgen.locators import LocatorStrategy, StrategyType
from bddgen.runtime import BasePage


class {{ plan.class_name }}(BasePage):
    """Locators and actions recorded on the {{ plan.class_name }} page."""

    PAGE_PATH = {{ plan.page_path | lit }}
{% for constant in plan.constants %}

    # {{ constant.element_name | esc }}: recorded as {{ constant.recorded_selector | lit }}
    {{ constant.name }} = (
{% for strategy in constant.candidates %}
        LocatorStrategy(StrategyType.{{ strategy.strategy_type.name }}, {{ strategy.selector_expression | lit }}, {{ strategy.priority }}{% if not strategy.is_stable %}, is_stable=False{% endif %}),
{% endfor %}
    )
{% endfor %}

    def navigate_to(self) -> None:
        self.open(self.PAGE_PATH)
{% for method in plan.methods %}

    def {{ method.name }}(self{% if method.takes_value %}, value: str{% endif %}) -> None:
        self.{{ method.primitive }}(self.{{ method.constant }}{% if method.takes_value %}, value{% elif method.fixed_value is not none %}, {{ method.fixed_value | lit }}{% endif %})
{% endfor %}
'''

FEATURE_TEMPLATE = '''{% if plan.story_id %}@{{ plan.story_id | replace(" ", "-") }} {% endif %}@{{ plan.class_name }}
Feature: {{ plan.class_name }} Test

  Scenario: Complete {{ plan.class_name }} workflow
{% for step in plan.feature_steps %}
    {{ step.line }}
{% endfor %}
'''

STEP_MODULE_TEMPLATE = '''"""Step bindings for {{ feature_file | esc }}."""

from pathlib import Path

import pytest

from bddgen.runtime import StepRegistry
{% if pages_package %}
from {{ pages_package }}.{{ plan.snake_name }} import {{ plan.class_name }}
{% else %}
from {{ plan.snake_name }} import {{ plan.class_name }}
{% endif %}

FEATURE_PATH = Path(__file__).resolve().parent / {{ feature_relpath | lit }}

steps = StepRegistry()


@pytest.fixture
def {{ plan.snake_name }}_page(locator_resolver, resolver_config) -> {{ plan.class_name }}:
    return {{ plan.class_name }}(locator_resolver, base_url=resolver_config.base_url)
{% for binding in plan.bindings %}


@steps.{{ binding.step_type }}({{ binding.expression | lit }})
def {{ binding.function_name }}(page: {{ plan.class_name }}{% if binding.takes_value %}, value: str{% endif %}) -> None:
    page.{{ binding.method_name }}({% if binding.takes_value %}value{% endif %})
{% endfor %}


def test_{{ plan.snake_name }}_scenario({{ plan.snake_name }}_page: {{ plan.class_name }}) -> None:
    steps.run_feature(FEATURE_PATH, {{ plan.snake_name }}_page)
'''


def create_environment() -> Environment:
    """Jinja2 environment for Python and Gherkin output (no HTML autoescape)."""
    env = Environment(
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["lit"] = quote_literal
    env.filters["esc"] = escape_literal
    return env
