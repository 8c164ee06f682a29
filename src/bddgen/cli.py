"""
bddgen command line.

Commands:
  bddgen generate RECORDING --name Login     page object, feature and step module
  bddgen candidates "Sign In" --kind button  ranked locator candidates for an element
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog
from dotenv import load_dotenv

from bddgen import __version__
from bddgen.config import ConfigError, load_config
from bddgen.generator.artifacts import ArtifactGenerator, GenerationError, OutputLayout
from bddgen.generator.naming import derive_class_name, to_snake_case
from bddgen.locators.catalog import LocatorCatalog
from bddgen.locators.models import ElementKind
from bddgen.logging import configure_logging
from bddgen.recording.parser import RecordingParser

logger = structlog.get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="bddgen",
        description="Generate BDD tests with self-healing locators from browser recordings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bddgen generate recording.txt --name login
  bddgen generate recording.txt --name checkout --page-path /cart --story SHOP-12
  bddgen candidates "Email" --kind input --attr placeholder="Your email"
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with resolver/generator settings",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate artifacts from a recording")
    generate.add_argument("recording", type=Path, help="Recording file, one action per line")
    generate.add_argument("--name", required=True, help="Feature name; becomes the class name")
    generate.add_argument("--page-path", default="", help="Page path (default: first navigation)")
    generate.add_argument("--story", default="", help="Story id tag for the feature")
    generate.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Project root the output directories are relative to (default: .)",
    )
    generate.add_argument(
        "--continue-numbering",
        action="store_true",
        help="Number ELEMENT_<n> constants after those in an existing page object",
    )
    generate.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the rendered artifacts instead of writing them",
    )

    candidates = subparsers.add_parser("candidates", help="Show locator candidates for an element")
    candidates.add_argument("element_name", help="Readable element name")
    candidates.add_argument(
        "--kind",
        choices=[k.value for k in ElementKind],
        default=ElementKind.INPUT.value,
        help="Element kind (default: input)",
    )
    candidates.add_argument(
        "--attr",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Observed attribute, repeatable (id, name, placeholder, text, class, ...)",
    )
    candidates.add_argument("--selector", default=None, help="Recorded selector to keep as a candidate")
    candidates.add_argument("--json", action="store_true", help="Print JSON")

    return parser


def _parse_attributes(pairs: list[str]) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Attribute must be KEY=VALUE, got {pair!r}")
        attributes[key.strip()] = value
    return attributes


def run_generate(args: argparse.Namespace) -> int:
    """Parse a recording and write (or print) its artifacts."""
    _, generator_config = load_config(args.config)
    layout = OutputLayout.from_config(generator_config, root=args.root)

    raw = args.recording.read_text(encoding="utf-8")
    parsed = RecordingParser().parse(raw)

    generator = ArtifactGenerator(layout=layout)

    existing = None
    if args.continue_numbering:
        snake = to_snake_case(derive_class_name(args.name))
        page_file = layout.root / layout.pages_dir / f"{snake}.py"
        if page_file.exists():
            existing = page_file.read_text(encoding="utf-8")

    if args.dry_run:
        artifacts = generator.render(
            parsed, args.name, args.page_path, args.story, existing
        )
        for title, source in (
            (artifacts.page_object_filename, artifacts.page_object_source),
            (artifacts.feature_filename, artifacts.feature_source),
            (artifacts.step_definition_filename, artifacts.step_definition_source),
        ):
            print(f"# ---- {title} ----")
            print(source)
        return 0

    # output directories are the caller's to create
    for directory in (layout.pages_dir, layout.features_dir, layout.steps_dir):
        (layout.root / directory).mkdir(parents=True, exist_ok=True)
    if layout.pages_package:
        init = layout.root / layout.pages_dir / "__init__.py"
        if not init.exists():
            init.touch()

    artifacts = generator.generate(parsed, args.name, args.page_path, args.story, existing)
    for warning in artifacts.warnings:
        logger.warning("Generation warning", detail=warning)
    for path in layout.paths_for(artifacts):
        print(path)
    return 0


def run_candidates(args: argparse.Namespace) -> int:
    """Print the ranked candidate list for one element."""
    attributes = _parse_attributes(args.attr)
    candidates = LocatorCatalog().candidates_for(
        args.element_name,
        ElementKind(args.kind),
        attributes,
        recorded_selector=args.selector,
    )
    if args.json:
        print(json.dumps(
            [
                {
                    "strategy": c.strategy_type.value,
                    "selector": c.selector_expression,
                    "priority": c.priority,
                    "stable": c.is_stable,
                }
                for c in candidates
            ],
            indent=2,
        ))
    else:
        for c in candidates:
            marker = " " if c.is_stable else "~"
            print(f"{c.priority:>4} {marker} {c.strategy_type.value:<20} {c.selector_expression}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    load_dotenv()
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)

    try:
        if args.command == "generate":
            return run_generate(args)
        return run_candidates(args)
    except (GenerationError, FileNotFoundError, ConfigError, ValueError) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        if args.debug:
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
