"""
Alias service — logical module name → physical file for one build.

Four sources are merged, later winning on collision:

    1. module map        discovered sources (module_map.create_module_map)
    2. internal modules  shared package files the bundler would otherwise
                         assume are external
    3. node modules      UMD only: object-assign and the ART submodules,
                         inlined instead of pulling in a node resolver
    4. fbjs aliases      UMD only: shared utilities bundled in place;
                         every other variant keeps them external
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from bundle_policy.core.data import (
    OBJECT_ASSIGN_MODULE,
    PROD_INVARIANT_MODULE,
    RECONCILER_MODULE,
    get_registry,
)
from bundle_policy.core.models.layout import ProjectLayout
from bundle_policy.core.models.variant import BundleVariant, ModuleRole, unhandled_variant
from bundle_policy.core.services.error_codes import open_error_code_registry
from bundle_policy.core.services.module_map import FileDiscovery, create_module_map

logger = logging.getLogger(__name__)


def merge_tables(*tables: Mapping[str, str]) -> dict[str, str]:
    """Merge tables left to right into a fresh dict; later keys win."""
    merged: dict[str, str] = {}
    for table in tables:
        merged.update(table)
    return merged


def get_internal_modules(role: ModuleRole, layout: ProjectLayout) -> dict[str, str]:
    """Package files the bundler must find on disk rather than treat as external."""
    aliases = {
        PROD_INVARIANT_MODULE: layout.package_file("shared/reactProdInvariant.js"),
    }
    if ModuleRole.parse(role) == ModuleRole.RENDERER:
        # Renderers bundle the whole reconciler.
        aliases[RECONCILER_MODULE] = layout.package_file("react-reconciler/index.js")
    return aliases


def get_node_modules(
    variant: BundleVariant, role: ModuleRole, layout: ProjectLayout
) -> dict[str, str]:
    """Vendored node_modules aliases (UMD only)."""
    match variant:
        case BundleVariant.UMD_DEV | BundleVariant.UMD_PROD:
            # object-assign is bundled once, in the core UMD; renderer UMDs
            # get a shim that reads it back from the core global.
            if ModuleRole.parse(role) == ModuleRole.CORE:
                assign = layout.node_module("object-assign/index.js")
            else:
                assign = layout.shim("assign.js")
            aliases = {OBJECT_ASSIGN_MODULE: assign}
            for name in get_registry().art_modules:
                aliases[name] = layout.node_module(f"{name}.js")
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


def get_fbjs_module_aliases(variant: BundleVariant, layout: ProjectLayout) -> dict[str, str]:
    """Shared utility aliases (UMD only); other variants require them at runtime."""
    match variant:
        case BundleVariant.UMD_DEV | BundleVariant.UMD_PROD:
            return {
                name: layout.node_module(name)
                for name in get_registry().shared_utility_modules
            }
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


def get_aliases(
    paths: Sequence[str],
    variant: BundleVariant,
    role: ModuleRole,
    *,
    extract_errors: bool = False,
    layout: ProjectLayout | None = None,
    discover: FileDiscovery | None = None,
) -> dict[str, str]:
    """Build the complete alias table for one (variant, role, paths) build.

    Args:
        paths: Glob patterns of source files.
        variant: Bundle variant.
        role: Module role of the bundle.
        extract_errors: Register invariant messages from every scanned file
            in the layout's error code registry.
        layout: Project layout (default: context root).
        discover: File discovery collaborator for the module map.

    Returns:
        Fresh flat dict; no partial result on failure.
    """
    layout = layout or ProjectLayout()
    variant = BundleVariant.parse(variant)
    role = ModuleRole.parse(role)

    if extract_errors:
        with open_error_code_registry(layout.error_codes_path) as registry:
            module_map = create_module_map(
                paths, variant, extract_errors=registry, layout=layout, discover=discover
            )
    else:
        module_map = create_module_map(paths, variant, layout=layout, discover=discover)

    aliases = merge_tables(
        module_map,
        get_internal_modules(role, layout),
        get_node_modules(variant, role, layout),
        get_fbjs_module_aliases(variant, layout),
    )
    logger.debug(
        "Aliases for %s/%s: %d (%d discovered)",
        variant, role, len(aliases), len(module_map),
    )
    return aliases
