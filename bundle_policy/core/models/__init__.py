"""
Domain models — variants, layout, and bundle policy types.

All models are re-exported here for convenient access:

    from bundle_policy.core.models import BundleVariant, ModuleRole, BuildPolicy
"""

from bundle_policy.core.models.bundle import BuildPolicy, BundleManifest, BundleSpec
from bundle_policy.core.models.layout import LayoutPaths, ProjectLayout
from bundle_policy.core.models.variant import (
    BundleVariant,
    ModuleRole,
    Optimization,
    OutputFormat,
    UnhandledVariantError,
)

__all__ = [
    # bundle.py
    "BuildPolicy",
    "BundleManifest",
    "BundleSpec",
    # variant.py
    "BundleVariant",
    # layout.py
    "LayoutPaths",
    "ModuleRole",
    "Optimization",
    "OutputFormat",
    "ProjectLayout",
    "UnhandledVariantError",
]
