"""
Generator module emitting page object, feature and step module from a recording.

Provides:
- Shared literal escaping and naming rules
- A single plan that drives all three templates
- All-or-nothing writing of the artifact set
"""

from bddgen.generator.artifacts import (
    ArtifactGenerator,
    GeneratedArtifactSet,
    GenerationError,
    OutputLayout,
    validate_artifacts,
    write_all_or_nothing,
)
from bddgen.generator.naming import (
    derive_class_name,
    escape_literal,
    extract_page_path,
    next_element_index,
    quote_literal,
    to_snake_case,
    unescape_literal,
)
from bddgen.generator.plan import ArtifactPlan, build_plan

__all__ = [
    "ArtifactGenerator",
    "ArtifactPlan",
    "GeneratedArtifactSet",
    "GenerationError",
    "OutputLayout",
    "build_plan",
    "derive_class_name",
    "escape_literal",
    "extract_page_path",
    "next_element_index",
    "quote_literal",
    "to_snake_case",
    "unescape_literal",
    "validate_artifacts",
    "write_all_or_nothing",
]
