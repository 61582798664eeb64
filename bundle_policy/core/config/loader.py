"""
Configuration loader — reads bundles.yml into domain models.

This is the primary entry point for loading the bundle manifest.
It reads YAML, validates against Pydantic schemas, and returns
typed domain objects.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from bundle_policy.core.models.bundle import BundleManifest
from bundle_policy.core.models.layout import ProjectLayout

logger = logging.getLogger(__name__)

# Default manifest filename
MANIFEST_FILE = "bundles.yml"
_ALT_MANIFEST_FILE = "bundles.yaml"


class ConfigError(Exception):
    """Raised when the bundle manifest is invalid or missing."""


def find_manifest_file(start_dir: Path | None = None) -> Path | None:
    """Search for bundles.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the manifest, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        for filename in (MANIFEST_FILE, _ALT_MANIFEST_FILE):
            candidate = current / filename
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_manifest(path: Path | None = None) -> BundleManifest:
    """Load and validate the bundle manifest.

    Args:
        path: Explicit path to bundles.yml. If None, searches upward.

    Returns:
        Validated BundleManifest model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_manifest_file()

    if path is None:
        raise ConfigError(f"No {MANIFEST_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading bundle manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        manifest = BundleManifest.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid bundle manifest: {e}") from e

    logger.info("Loaded manifest %s with %d bundles", path, len(manifest.bundles))
    return manifest


def manifest_root(config_path: Path) -> Path:
    """Get the project root directory from a manifest path."""
    return config_path.parent.resolve()


def manifest_layout(manifest: BundleManifest, config_path: Path) -> ProjectLayout:
    """Anchor the manifest's layout at the manifest's directory."""
    return ProjectLayout(root=manifest_root(config_path), paths=manifest.layout)
