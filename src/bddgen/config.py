"""Configuration for locator resolution and artifact generation."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

DEFAULT_VISIBILITY_TIMEOUT_MS = 500

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""

    pass


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


# ── Resolver config ───────────────────────────────────────────────────────────

@dataclass
class ResolverConfig:
    """Settings for LocatorResolver and the pytest plugin."""

    visibility_timeout_ms: int | None = None
    cache_enabled: bool | None = None
    base_url: str = ""

    def __post_init__(self):
        if self.visibility_timeout_ms is None:
            raw = os.environ.get("BDDGEN_VISIBILITY_TIMEOUT_MS", "")
            self.visibility_timeout_ms = (
                int(raw) if raw.strip() else DEFAULT_VISIBILITY_TIMEOUT_MS
            )
        if self.cache_enabled is None:
            self.cache_enabled = _env_flag("BDDGEN_CACHE_ENABLED", True)
        if not self.base_url:
            self.base_url = os.environ.get("BDDGEN_BASE_URL", "")


# ── Generator config ──────────────────────────────────────────────────────────

@dataclass
class GeneratorConfig:
    """Output layout for generated artifacts, relative to the project root."""

    pages_dir: str = ""
    features_dir: str = ""
    steps_dir: str = ""
    pages_package: str = ""

    def __post_init__(self):
        if not self.pages_dir:
            self.pages_dir = os.environ.get("BDDGEN_PAGES_DIR", "pages")
        if not self.features_dir:
            self.features_dir = os.environ.get("BDDGEN_FEATURES_DIR", "features")
        if not self.steps_dir:
            self.steps_dir = os.environ.get("BDDGEN_STEPS_DIR", "step_defs")
        if not self.pages_package:
            self.pages_package = os.environ.get(
                "BDDGEN_PAGES_PACKAGE", self.pages_dir.replace("/", ".").strip(".")
            )


def _section(data: dict[str, Any], name: str, cls: type) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(section) - known
    if unknown:
        raise ConfigError(f"Unknown {name} option(s): {', '.join(sorted(unknown))}")
    return section


def load_config(path: str | Path | None = None) -> tuple[ResolverConfig, GeneratorConfig]:
    """
    Load resolver and generator settings.

    Args:
        path: Optional YAML file with ``resolver:`` and ``generator:`` sections.
            Values not given fall back to environment variables, then defaults.

    Returns:
        (ResolverConfig, GeneratorConfig)

    Raises:
        ConfigError: If the file is not a mapping or has unknown keys
        FileNotFoundError: If the file does not exist
    """
    if path is None:
        return ResolverConfig(), GeneratorConfig()

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    resolver = ResolverConfig(**_section(data, "resolver", ResolverConfig))
    generator = GeneratorConfig(**_section(data, "generator", GeneratorConfig))
    return resolver, generator
