"""
Resolve use case — build the full policy for one bundle variant.

Ties together manifest loading and the four policy services
(aliases, externals, replacements, ignored modules).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from bundle_policy.core.config.loader import (
    ConfigError,
    find_manifest_file,
    load_manifest,
    manifest_layout,
)
from bundle_policy.core.models.bundle import BuildPolicy, BundleManifest, BundleSpec
from bundle_policy.core.models.layout import ProjectLayout
from bundle_policy.core.models.variant import BundleVariant, UnhandledVariantError
from bundle_policy.core.services.aliases import get_aliases
from bundle_policy.core.services.externals import get_external_modules, get_ignored_modules
from bundle_policy.core.services.replacements import get_default_replace_modules

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """Result of the resolve use case."""

    policy: BuildPolicy | None = None
    manifest: BundleManifest | None = None
    config_path: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        result: dict = {"config_path": str(self.config_path)}
        if self.policy:
            result["policy"] = self.policy.to_dict()
        return result


def build_policy(
    bundle: BundleSpec,
    variant: BundleVariant,
    layout: ProjectLayout,
    extract_errors: bool = False,
) -> BuildPolicy:
    """Compute every table for ``bundle`` built as ``variant``.

    Raises:
        UnhandledVariantError: If ``variant`` is outside the registry.
        OSError: If file discovery or error extraction fails.
    """
    aliases = get_aliases(
        bundle.paths, variant, bundle.role, extract_errors=extract_errors, layout=layout
    )
    return BuildPolicy(
        bundle=bundle.name,
        variant=variant,
        role=bundle.role,
        aliases=aliases,
        externals=get_external_modules(bundle.externals, variant, bundle.role),
        replacements=get_default_replace_modules(
            variant, bundle.modules_to_stub, bundle.feature_flags, layout=layout
        ),
        ignored=get_ignored_modules(variant),
    )


def resolve_policy(
    bundle_name: str,
    variant: str | BundleVariant,
    config_path: Path | None = None,
    extract_errors: bool = False,
) -> ResolveResult:
    """Resolve the build policy for a bundle declared in bundles.yml.

    Args:
        bundle_name: Name of the bundle in the manifest.
        variant: Variant name; must be one the bundle declares.
        config_path: Optional explicit path to bundles.yml.
        extract_errors: Update the error code registry during the scan.

    Returns:
        ResolveResult with the policy, or an error message.
    """
    result = ResolveResult()

    try:
        if config_path is None:
            config_path = find_manifest_file()
        if config_path is None:
            result.error = "No bundles.yml found."
            return result
        result.config_path = config_path
        manifest = load_manifest(config_path)
        result.manifest = manifest
    except ConfigError as e:
        result.error = str(e)
        return result

    bundle = manifest.get_bundle(bundle_name)
    if bundle is None:
        known = ", ".join(manifest.bundle_names) or "none"
        result.error = f"Unknown bundle '{bundle_name}'. Declared: {known}"
        return result

    try:
        parsed = BundleVariant.parse(variant)
    except UnhandledVariantError as e:
        result.error = str(e)
        return result

    if not bundle.supports(parsed):
        declared = ", ".join(v.value for v in bundle.variants) or "none"
        result.error = (
            f"Bundle '{bundle.name}' is not built as {parsed}. Declared: {declared}"
        )
        return result

    layout = manifest_layout(manifest, config_path)
    result.policy = build_policy(bundle, parsed, layout, extract_errors=extract_errors)
    logger.info(
        "Resolved %s/%s: %d aliases, %d externals, %d replacements",
        bundle.name, parsed,
        len(result.policy.aliases),
        len(result.policy.externals),
        len(result.policy.replacements),
    )
    return result
