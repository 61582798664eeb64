"""
Bundle models — declared bundles and the resolved build policy.

``BundleSpec`` is a declaration loaded from bundles.yml.  ``BuildPolicy``
is what the bundler consumes for one (bundle, variant) build: the alias
table, the external list, the literal replacement table, and the
ignored modules.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bundle_policy.core.models.layout import LayoutPaths
from bundle_policy.core.models.variant import BundleVariant, ModuleRole


class BundleSpec(BaseModel):
    """A bundle declared in bundles.yml."""

    name: str
    label: str = ""
    entry: str = ""
    global_name: str = Field(default="", alias="global")
    role: ModuleRole = ModuleRole.CORE
    variants: list[BundleVariant] = Field(default_factory=list)
    paths: list[str] = Field(default_factory=list)
    externals: list[str] = Field(default_factory=list)
    modules_to_stub: list[str] = Field(default_factory=list)
    feature_flags: str | None = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> ModuleRole:
        return ModuleRole.parse(value)

    @field_validator("variants", mode="before")
    @classmethod
    def _parse_variants(cls, value: Any) -> list[BundleVariant]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [BundleVariant.parse(v) for v in value]

    def supports(self, variant: BundleVariant) -> bool:
        return variant in self.variants


class BundleManifest(BaseModel):
    """Root of bundles.yml."""

    layout: LayoutPaths = Field(default_factory=LayoutPaths)
    bundles: list[BundleSpec] = Field(default_factory=list)

    def get_bundle(self, name: str) -> BundleSpec | None:
        """Look up a bundle by name."""
        for bundle in self.bundles:
            if bundle.name == name:
                return bundle
        return None

    @property
    def bundle_names(self) -> list[str]:
        return [b.name for b in self.bundles]


class BuildPolicy(BaseModel):
    """Resolution policy for a single build invocation."""

    model_config = ConfigDict(frozen=True)

    bundle: str = ""
    variant: BundleVariant
    role: ModuleRole
    aliases: dict[str, str] = Field(default_factory=dict)
    externals: list[str] = Field(default_factory=list)
    replacements: dict[str, str] = Field(default_factory=dict)
    ignored: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
