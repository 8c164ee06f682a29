"""
Artifact generator: recorded actions in, page object + feature + step module out.

Provides:
- GeneratedArtifactSet: the three rendered sources of one run
- OutputLayout: where the three files go
- ArtifactGenerator: pure rendering plus all-or-nothing writing
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from bddgen.config import GeneratorConfig
from bddgen.generator.naming import next_element_index
from bddgen.generator.plan import ArtifactPlan, build_plan
from bddgen.generator.templates import (
    FEATURE_TEMPLATE,
    PAGE_OBJECT_TEMPLATE,
    STEP_MODULE_TEMPLATE,
    create_environment,
)
from bddgen.locators.catalog import LocatorCatalog
from bddgen.recording.models import RecordedAction
from bddgen.recording.parser import ParseResult, actions_of

logger = structlog.get_logger(__name__)


class GenerationError(Exception):
    """Raised when an artifact set cannot be validated or written."""

    pass


@dataclass(frozen=True)
class GeneratedArtifactSet:
    """The three sources produced by one generation run."""

    class_name: str
    snake_name: str
    page_object_source: str
    feature_source: str
    step_definition_source: str
    warnings: tuple[str, ...] = ()

    @property
    def page_object_filename(self) -> str:
        return f"{self.snake_name}.py"

    @property
    def feature_filename(self) -> str:
        return f"{self.snake_name}.feature"

    @property
    def step_definition_filename(self) -> str:
        return f"test_{self.snake_name}_steps.py"


@dataclass(frozen=True)
class OutputLayout:
    """Target directories for the three artifacts, relative to ``root``."""

    root: Path = field(default_factory=Path.cwd)
    pages_dir: str = "pages"
    features_dir: str = "features"
    steps_dir: str = "step_defs"
    pages_package: str = "pages"

    @classmethod
    def from_config(cls, config: GeneratorConfig, root: Path | None = None) -> OutputLayout:
        return cls(
            root=root or Path.cwd(),
            pages_dir=config.pages_dir,
            features_dir=config.features_dir,
            steps_dir=config.steps_dir,
            pages_package=config.pages_package,
        )

    def paths_for(self, artifacts: GeneratedArtifactSet) -> tuple[Path, Path, Path]:
        """(page object, feature, step module) paths."""
        return (
            self.root / self.pages_dir / artifacts.page_object_filename,
            self.root / self.features_dir / artifacts.feature_filename,
            self.root / self.steps_dir / artifacts.step_definition_filename,
        )

    def feature_relpath(self, feature_filename: str) -> str:
        """Feature file path as seen from the steps directory."""
        rel = os.path.relpath(
            Path(self.features_dir) / feature_filename, start=Path(self.steps_dir)
        )
        return rel.replace(os.sep, "/")


class ArtifactGenerator:
    """
    Renders and writes the three artifacts for a recording.

    render() is pure. generate() validates the rendered sources and writes all
    three files or none.
    """

    def __init__(
        self,
        layout: OutputLayout | None = None,
        catalog: LocatorCatalog | None = None,
    ) -> None:
        self._layout = layout or OutputLayout()
        self._catalog = catalog or LocatorCatalog()
        self._env = create_environment()
        self._log = logger.bind(component="artifact_generator")

    @property
    def layout(self) -> OutputLayout:
        return self._layout

    def plan(
        self,
        actions: ParseResult | Sequence[RecordedAction],
        feature_name: str,
        page_path: str = "",
        story_id: str = "",
        existing_page_object: str | None = None,
    ) -> ArtifactPlan:
        """Build the shared plan without rendering it."""
        return build_plan(
            actions_of(actions),
            feature_name,
            page_path=page_path,
            story_id=story_id,
            first_element_index=next_element_index(existing_page_object),
            catalog=self._catalog,
        )

    def render(
        self,
        actions: ParseResult | Sequence[RecordedAction],
        feature_name: str,
        page_path: str = "",
        story_id: str = "",
        existing_page_object: str | None = None,
    ) -> GeneratedArtifactSet:
        """
        Render the three artifacts in memory.

        Args:
            actions: Parsed recording or action sequence
            feature_name: Feature name; its first letter is upper-cased for the class
            page_path: Page path; falls back to the first navigation target
            story_id: Optional story tag
            existing_page_object: Source of a previous page object for this
                class; ELEMENT_<n> numbering continues after its highest index

        Returns:
            GeneratedArtifactSet
        """
        plan = self.plan(actions, feature_name, page_path, story_id, existing_page_object)
        warnings = list(plan.warnings)
        if isinstance(actions, ParseResult):
            warnings = list(actions.warnings) + warnings

        feature_filename = f"{plan.snake_name}.feature"
        page_source = self._env.from_string(PAGE_OBJECT_TEMPLATE).render(plan=plan)
        feature_source = self._env.from_string(FEATURE_TEMPLATE).render(plan=plan)
        step_source = self._env.from_string(STEP_MODULE_TEMPLATE).render(
            plan=plan,
            pages_package=self._layout.pages_package,
            feature_file=feature_filename,
            feature_relpath=self._layout.feature_relpath(feature_filename),
        )

        self._log.info(
            "Rendered artifacts",
            class_name=plan.class_name,
            methods=len(plan.methods),
            constants=len(plan.constants),
        )
        return GeneratedArtifactSet(
            class_name=plan.class_name,
            snake_name=plan.snake_name,
            page_object_source=page_source,
            feature_source=feature_source,
            step_definition_source=step_source,
            warnings=tuple(warnings),
        )

    def generate(
        self,
        actions: ParseResult | Sequence[RecordedAction],
        feature_name: str,
        page_path: str = "",
        story_id: str = "",
        existing_page_object: str | None = None,
    ) -> GeneratedArtifactSet:
        """
        Render, validate and write the three artifacts.

        Raises:
            GenerationError: If validation fails or any file cannot be written;
                no file is left changed in that case
        """
        try:
            artifacts = self.render(
                actions, feature_name, page_path, story_id, existing_page_object
            )
        except ValueError as e:
            raise GenerationError(str(e)) from e

        validate_artifacts(artifacts)
        paths = self._layout.paths_for(artifacts)
        contents = (
            artifacts.page_object_source,
            artifacts.feature_source,
            artifacts.step_definition_source,
        )
        write_all_or_nothing(list(zip(paths, contents)))

        self._log.info(
            "Generated artifacts",
            class_name=artifacts.class_name,
            files=[str(p) for p in paths],
        )
        return artifacts


def validate_artifacts(artifacts: GeneratedArtifactSet) -> None:
    """
    Check the rendered sources before anything is written.

    Raises:
        GenerationError: If a Python artifact does not compile or the feature
            file lacks a Feature or Scenario line
    """
    for filename, source in (
        (artifacts.page_object_filename, artifacts.page_object_source),
        (artifacts.step_definition_filename, artifacts.step_definition_source),
    ):
        try:
            compile(source, filename, "exec")
        except (SyntaxError, ValueError) as e:
            raise GenerationError(f"Generated {filename} is not valid Python: {e}") from e

    feature = artifacts.feature_source
    if "Feature:" not in feature or "Scenario:" not in feature:
        raise GenerationError(
            f"Generated {artifacts.feature_filename} has no Feature/Scenario line"
        )


def write_all_or_nothing(files: Sequence[tuple[Path, str]]) -> None:
    """
    Write several files so that either all are replaced or none are.

    Contents go to temporary files beside their targets first; targets are
    then swapped in with os.replace. If any step fails, targets already
    swapped are restored from their previous contents (or removed if they
    did not exist) and every temporary file is deleted.

    Raises:
        GenerationError: If any file cannot be written or encoded
    """
    log = logger.bind(component="artifact_writer")
    backups: dict[Path, bytes | None] = {}
    temps: list[tuple[Path, Path]] = []
    replaced: list[Path] = []

    try:
        for target, content in files:
            backups[target] = (
                target.read_bytes() if target.exists() else None
            )
            handle = tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            )
            temps.append((Path(handle.name), target))
            with handle:
                handle.write(content)

        for temp, target in temps:
            os.replace(temp, target)
            replaced.append(target)
    except (OSError, ValueError) as e:
        # ValueError covers UnicodeEncodeError from unpaired surrogates
        log.error("Artifact write failed; rolling back", error=str(e), replaced=len(replaced))
        for target in replaced:
            _restore(target, backups.get(target))
        for temp, _ in temps:
            temp.unlink(missing_ok=True)
        raise GenerationError(f"Could not write generated artifacts: {e}") from e


def _restore(target: Path, previous: bytes | None) -> None:
    try:
        if previous is None:
            target.unlink(missing_ok=True)
        else:
            target.write_bytes(previous)
    except OSError as e:
        logger.error("Rollback failed", path=str(target), error=str(e))
