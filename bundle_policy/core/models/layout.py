"""
Layout model — where the physical files behind aliases live.

Paths in the layout are relative to the project root unless absolute.
All resolution goes through ``ProjectLayout.resolve`` so aliases and
replacement literals always carry absolute paths.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from bundle_policy.core.context import get_project_root


class LayoutPaths(BaseModel):
    """Directory layout as declared in bundles.yml (all keys optional)."""

    node_modules: str = "node_modules"
    packages_dir: str = "packages"
    shims_dir: str = "scripts/rollup/shims/rollup"
    error_codes: str = "scripts/error-codes/codes.json"


class ProjectLayout(BaseModel):
    """A layout anchored at a concrete project root."""

    root: Path = Field(default_factory=lambda: get_project_root() or Path.cwd())
    paths: LayoutPaths = Field(default_factory=LayoutPaths)

    def resolve(self, *parts: str) -> str:
        """Join ``parts`` onto the root and return an absolute path string.

        Normalisation is lexical; symlinks are kept as written.
        """
        return os.path.abspath(self.root.joinpath(*parts))

    def node_module(self, name: str) -> str:
        return self.resolve(self.paths.node_modules, name)

    def package_file(self, name: str) -> str:
        return self.resolve(self.paths.packages_dir, name)

    def shim(self, name: str) -> str:
        return self.resolve(self.paths.shims_dir, name)

    @property
    def error_codes_path(self) -> Path:
        return Path(self.resolve(self.paths.error_codes))
