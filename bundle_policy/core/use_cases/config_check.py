"""
Config check use case — validate bundles.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bundle_policy.core.config.loader import ConfigError, find_manifest_file, load_manifest
from bundle_policy.core.models.bundle import BundleManifest


@dataclass
class ConfigCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest: BundleManifest | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "bundle_count": len(self.manifest.bundles) if self.manifest else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the bundle manifest and report issues.

    Args:
        config_path: Optional explicit path to bundles.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_manifest_file()
    if config_path is None:
        result.errors.append("No bundles.yml found.")
        return result
    result.config_path = config_path

    try:
        manifest = load_manifest(config_path)
        result.manifest = manifest
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if not manifest.bundles:
        result.warnings.append("No bundles defined. Nothing will be built.")

    names = manifest.bundle_names
    dupes = {n for n in names if names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate bundle names: {', '.join(sorted(dupes))}")

    root = config_path.parent
    for bundle in manifest.bundles:
        if not bundle.variants:
            result.errors.append(f"Bundle '{bundle.name}' declares no variants")

        variants = [v.value for v in bundle.variants]
        repeated = {v for v in variants if variants.count(v) > 1}
        if repeated:
            result.warnings.append(
                f"Bundle '{bundle.name}' repeats variants: {', '.join(sorted(repeated))}"
            )

        if not bundle.paths:
            result.warnings.append(
                f"Bundle '{bundle.name}' has no source paths; its module map will be empty"
            )

        if bundle.feature_flags and not (root / bundle.feature_flags).is_file():
            result.warnings.append(
                f"Bundle '{bundle.name}' feature flags file does not exist: "
                f"{bundle.feature_flags}"
            )

    result.valid = len(result.errors) == 0
    return result
