"""
Variant model — the closed set of bundle variants and module roles.

A bundle variant is an output format crossed with an optimization level:

    UMD   universal module, loadable from a <script> tag or a loader
    NODE  CommonJS for Node and npm consumers
    FB    internal platform (Haste module naming, runtime feature flags)
    RN    mobile platform

    DEV / PROD  development or production build

Every policy branch matches all eight members explicitly.  Anything
else reaching a branch is a configuration error, surfaced as
``UnhandledVariantError`` instead of silently producing an empty table.
"""

from __future__ import annotations

from enum import StrEnum
from typing import NoReturn


class UnhandledVariantError(ValueError):
    """Raised when a value outside the variant registry reaches a policy branch."""


class OutputFormat(StrEnum):
    """Output format half of a bundle variant."""

    UMD = "UMD"
    NODE = "NODE"
    FB = "FB"
    RN = "RN"


class Optimization(StrEnum):
    """Optimization half of a bundle variant."""

    DEV = "DEV"
    PROD = "PROD"


class BundleVariant(StrEnum):
    """One build flavour: output format × optimization level."""

    UMD_DEV = "UMD_DEV"
    UMD_PROD = "UMD_PROD"
    NODE_DEV = "NODE_DEV"
    NODE_PROD = "NODE_PROD"
    FB_DEV = "FB_DEV"
    FB_PROD = "FB_PROD"
    RN_DEV = "RN_DEV"
    RN_PROD = "RN_PROD"

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat(self.value.split("_", 1)[0])

    @property
    def optimization(self) -> Optimization:
        return Optimization(self.value.rsplit("_", 1)[1])

    @property
    def is_production(self) -> bool:
        return self.optimization == Optimization.PROD

    @classmethod
    def parse(cls, value: str | BundleVariant) -> BundleVariant:
        """Look up a variant by name (case-insensitive).

        Raises:
            UnhandledVariantError: If the name is not a declared variant.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            valid = ", ".join(v.value for v in cls)
            raise UnhandledVariantError(
                f"Unknown bundle variant '{value}'. Valid: {valid}"
            ) from None


class ModuleRole(StrEnum):
    """Whether a bundle is the shared core or a platform renderer."""

    CORE = "core"
    RENDERER = "renderer"

    @classmethod
    def parse(cls, value: str | ModuleRole) -> ModuleRole:
        """Look up a role by name; ``isomorphic`` is accepted for ``core``.

        Raises:
            UnhandledVariantError: If the name is not a declared role.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "isomorphic":
            return cls.CORE
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(r.value for r in cls)
            raise UnhandledVariantError(
                f"Unknown module role '{value}'. Valid: {valid}"
            ) from None


def unhandled_variant(variant: object) -> NoReturn:
    """Fail a variant match that fell through every declared case."""
    raise UnhandledVariantError(f"No policy defined for bundle variant {variant!r}")
