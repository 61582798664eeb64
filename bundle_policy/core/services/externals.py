"""
External modules service — what the bundler must leave as imports.

External modules are not inlined: CommonJS bundles get a
``require("name")`` at the top, UMD bundles a require plus a global
check.  The classifier only ever appends to the caller's list, and the
order of appended names is the order of the emitted requires.

Ignored modules are a separate, stronger notion: the bundler drops them
from the graph entirely.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bundle_policy.core.data import (
    DOM_RENDERER_MODULE,
    FRAMEWORK_MODULE,
    OBJECT_ASSIGN_MODULE,
    PLATFORM_DOM_RENDERER_MODULE,
    PLATFORM_FRAMEWORK_MODULE,
    get_registry,
)
from bundle_policy.core.models.variant import BundleVariant, ModuleRole, unhandled_variant

logger = logging.getLogger(__name__)


def _framework_for(role: ModuleRole, name: str) -> list[str]:
    # The core bundle *is* the framework; everything else imports it.
    return [] if role == ModuleRole.CORE else [name]


def _shared_utilities() -> list[str]:
    return [*get_registry().shared_utility_modules, OBJECT_ASSIGN_MODULE]


def _platform_additions(base: Sequence[str], role: ModuleRole) -> list[str]:
    additions = [*_shared_utilities(), *get_registry().platform_reserved_modules]
    if role != ModuleRole.CORE:
        additions.append(PLATFORM_FRAMEWORK_MODULE)
        if DOM_RENDERER_MODULE in base:
            additions.append(PLATFORM_DOM_RENDERER_MODULE)
    return additions


def external_additions(
    externals: Sequence[str],
    variant: BundleVariant,
    role: ModuleRole,
) -> list[str]:
    """Names a variant appends to the caller's external list, in order."""
    role = ModuleRole.parse(role)
    variant = BundleVariant.parse(variant)
    match variant:
        case BundleVariant.UMD_DEV | BundleVariant.UMD_PROD:
            return _framework_for(role, FRAMEWORK_MODULE)
        case (
            BundleVariant.NODE_DEV
            | BundleVariant.NODE_PROD
            | BundleVariant.RN_DEV
            | BundleVariant.RN_PROD
        ):
            return [*_shared_utilities(), *_framework_for(role, FRAMEWORK_MODULE)]
        case BundleVariant.FB_DEV | BundleVariant.FB_PROD:
            return _platform_additions(externals, role)
        case _:
            unhandled_variant(variant)


def get_external_modules(
    externals: Sequence[str],
    variant: BundleVariant,
    role: ModuleRole,
) -> list[str]:
    """Return the caller's externals followed by the variant's additions.

    The input sequence is copied, never mutated.  Duplicates are kept.
    """
    result = [*externals, *external_additions(externals, variant, role)]
    logger.debug(
        "Externals for %s/%s: %d caller + %d added",
        variant, role, len(externals), len(result) - len(externals),
    )
    return result


# ── Ignored modules ──────────────────────────────────────────────


def ignore_platform_modules() -> list[str]:
    """Names the FB platform provides at runtime under its own aliases.

    Includes the case-renamed framework names, the runtime feature flags,
    and the inline-required owner registry and priority warning helpers.
    """
    return list(get_registry().platform_ignored_modules)


def ignore_mobile_modules() -> list[str]:
    """Names the RN renderer must not bundle (View imports back into it)."""
    return list(get_registry().mobile_ignored_modules)


def get_ignored_modules(variant: BundleVariant) -> list[str]:
    """Ignored modules for a variant."""
    variant = BundleVariant.parse(variant)
    match variant:
        case BundleVariant.FB_DEV | BundleVariant.FB_PROD:
            return ignore_platform_modules()
        case BundleVariant.RN_DEV | BundleVariant.RN_PROD:
            return ignore_mobile_modules()
        case (
            BundleVariant.UMD_DEV
            | BundleVariant.UMD_PROD
            | BundleVariant.NODE_DEV
            | BundleVariant.NODE_PROD
        ):
            return []
        case _:
            unhandled_variant(variant)
