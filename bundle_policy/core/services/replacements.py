"""
Replacement service — literal module references rewritten before bundling.

Keys and values are raw source text *including* the surrounding quotes:
the bundler substitutes them textually, it does not rewrite imports.

Merge order (later wins on the same key):

    1. casing rewrite     FB: 'react' → 'React', 'react-dom' → 'ReactDOM'
    2. dev-only stubs     UMD_PROD, NODE_PROD, FB_PROD
    3. legacy redirects   UMD: create-react-class, prop-types
    4. caller stubs       per-bundle modules_to_stub
    5. feature flags      'ReactFeatureFlags' → the given file
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bundle_policy.core.data import (
    DOM_RENDERER_MODULE,
    FEATURE_FLAGS_MODULE,
    FRAMEWORK_MODULE,
    PLATFORM_DOM_RENDERER_MODULE,
    PLATFORM_FRAMEWORK_MODULE,
    get_registry,
)
from bundle_policy.core.models.layout import ProjectLayout
from bundle_policy.core.models.variant import BundleVariant, unhandled_variant
from bundle_policy.core.services.aliases import merge_tables

logger = logging.getLogger(__name__)

DEV_ONLY_STUB_SHIM = "DevOnlyStubShim.js"


def quote(name: str) -> str:
    """Wrap a module name in single quotes unless it is already quoted."""
    if len(name) >= 2 and name[0] == name[-1] and name[0] in "'\"":
        return name
    return f"'{name}'"


def dev_only_stub(layout: ProjectLayout) -> str:
    """Quoted absolute path of the shared no-op stub module."""
    return quote(layout.shim(DEV_ONLY_STUB_SHIM))


def replace_fbjs_module_aliases(variant: BundleVariant) -> dict[str, str]:
    """FB Haste names are case-insensitive and product code expects 'React'."""
    match variant:
        case BundleVariant.FB_DEV | BundleVariant.FB_PROD:
            return {
                quote(FRAMEWORK_MODULE): quote(PLATFORM_FRAMEWORK_MODULE),
                quote(DOM_RENDERER_MODULE): quote(PLATFORM_DOM_RENDERER_MODULE),
            }
        case (
            BundleVariant.UMD_DEV
            | BundleVariant.UMD_PROD
            | BundleVariant.NODE_DEV
            | BundleVariant.NODE_PROD
            | BundleVariant.RN_DEV
            | BundleVariant.RN_PROD
        ):
            return {}
        case _:
            unhandled_variant(variant)


def replace_dev_only_stubbed_modules(
    variant: BundleVariant, layout: ProjectLayout
) -> dict[str, str]:
    """Point development-only diagnostics at the stub in production builds.

    RN_PROD is exempt.
    """
    match variant:
        case BundleVariant.UMD_PROD | BundleVariant.NODE_PROD | BundleVariant.FB_PROD:
            stub = dev_only_stub(layout)
            return {name: stub for name in get_registry().dev_only_modules}
        case (
            BundleVariant.UMD_DEV
            | BundleVariant.NODE_DEV
            | BundleVariant.FB_DEV
            | BundleVariant.RN_DEV
            | BundleVariant.RN_PROD
        ):
            return {}
        case _:
            unhandled_variant(variant)


def replace_legacy_module_aliases(
    variant: BundleVariant, layout: ProjectLayout
) -> dict[str, str]:
    """Redirect legacy packages to node_modules so UMD bundles inline them."""
    match variant:
        case BundleVariant.UMD_DEV | BundleVariant.UMD_PROD:
            aliases = {}
            for name in get_registry().legacy_modules:
                module_path = name if "/" in name else f"{name}/index"
                aliases[quote(name)] = quote(layout.node_module(module_path))
            return aliases
        case (
            BundleVariant.NODE_DEV
            | BundleVariant.NODE_PROD
            | BundleVariant.FB_DEV
            | BundleVariant.FB_PROD
            | BundleVariant.RN_DEV
            | BundleVariant.RN_PROD
        ):
            return {}
        case _:
            unhandled_variant(variant)


def replace_bundle_stub_modules(
    modules_to_stub: Sequence[str] | None, layout: ProjectLayout
) -> dict[str, str]:
    """Stub every caller-listed module, whatever the variant."""
    if not modules_to_stub:
        return {}
    stub = dev_only_stub(layout)
    return {quote(name): stub for name in modules_to_stub}


def replace_feature_flags(feature_flags: str | None, layout: ProjectLayout) -> dict[str, str]:
    """Point the feature flag module at a bundle-specific file, if given."""
    if not feature_flags:
        return {}
    return {quote(FEATURE_FLAGS_MODULE): quote(layout.resolve(feature_flags))}


def get_default_replace_modules(
    variant: BundleVariant,
    modules_to_stub: Sequence[str] | None = None,
    feature_flags: str | None = None,
    *,
    layout: ProjectLayout | None = None,
) -> dict[str, str]:
    """Build the literal replacement table for one build.

    Args:
        variant: Bundle variant.
        modules_to_stub: Extra module names to replace with the stub.
            Bare names are quoted; already-quoted literals are used as is.
        feature_flags: Path (relative to the root, or absolute) of a
            feature flag module to substitute.
        layout: Project layout (default: context root).
    """
    layout = layout or ProjectLayout()
    variant = BundleVariant.parse(variant)
    replacements = merge_tables(
        replace_fbjs_module_aliases(variant),
        replace_dev_only_stubbed_modules(variant, layout),
        replace_legacy_module_aliases(variant, layout),
        replace_bundle_stub_modules(modules_to_stub, layout),
        replace_feature_flags(feature_flags, layout),
    )
    logger.debug("Replacements for %s: %d", variant, len(replacements))
    return replacements
