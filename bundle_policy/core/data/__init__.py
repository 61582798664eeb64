"""
Central data registry for the fixed module catalogs.

Loads ``catalogs/modules.json`` once at first access and caches it for
the process lifetime.  Every policy function reads its fixed name
lists from here, never from literals scattered across services.

Usage::

    from bundle_policy.core.data import get_registry

    registry = get_registry()
    registry.shared_utility_modules   # tuple[str, ...]
    registry.dev_only_modules         # quoted literals
"""

from __future__ import annotations

import json
import logging
from functools import cached_property
from pathlib import Path

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent
_MODULES_CATALOG = "catalogs/modules.json"

# Module names the policy tables reference by identity
FRAMEWORK_MODULE = "react"
DOM_RENDERER_MODULE = "react-dom"
PLATFORM_FRAMEWORK_MODULE = "React"
PLATFORM_DOM_RENDERER_MODULE = "ReactDOM"
OBJECT_ASSIGN_MODULE = "object-assign"
FEATURE_FLAGS_MODULE = "ReactFeatureFlags"
PROD_INVARIANT_MODULE = "reactProdInvariant"
RECONCILER_MODULE = "react-reconciler"


def _load_json(relative_path: str) -> dict:
    """Load a JSON catalog relative to the data directory.

    Raises:
        FileNotFoundError: If the catalog is missing from the install.
    """
    path = _DATA_DIR / relative_path
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class DataRegistry:
    """Registry for the static module catalogs.

    Each property returns an immutable tuple so that callers building
    policy tables cannot alter the shared catalog.
    """

    @cached_property
    def _modules(self) -> dict:
        data = _load_json(_MODULES_CATALOG)
        logger.debug("Loaded module catalog with %d lists", len(data))
        return data

    # ── Third-party shared utilities ─────────────────────────────

    @cached_property
    def shared_utility_modules(self) -> tuple[str, ...]:
        """fbjs helpers used across every bundle."""
        return tuple(self._modules["shared_utility_modules"])

    @cached_property
    def art_modules(self) -> tuple[str, ...]:
        """Graphics library submodules inlined into UMD bundles."""
        return tuple(self._modules["art_modules"])

    @cached_property
    def legacy_modules(self) -> tuple[str, ...]:
        """Legacy compatibility packages (and subpaths) redirected in UMD bundles."""
        return tuple(self._modules["legacy_modules"])

    # ── Stubs ────────────────────────────────────────────────────

    @cached_property
    def dev_only_modules(self) -> tuple[str, ...]:
        """Quoted literals of development-only modules stubbed in PROD."""
        return tuple(self._modules["dev_only_modules"])

    # ── Platform names ───────────────────────────────────────────

    @cached_property
    def platform_reserved_modules(self) -> tuple[str, ...]:
        """Owner registry and priority warning helpers the FB platform provides."""
        return tuple(self._modules["platform_reserved_modules"])

    @cached_property
    def platform_ignored_modules(self) -> tuple[str, ...]:
        return tuple(self._modules["platform_ignored_modules"])

    @cached_property
    def mobile_ignored_modules(self) -> tuple[str, ...]:
        return tuple(self._modules["mobile_ignored_modules"])

    # ── Discovery ────────────────────────────────────────────────

    @cached_property
    def excluded_globs(self) -> tuple[str, ...]:
        """Test, mock, and benchmark sources never aliased."""
        return tuple(self._modules["excluded_globs"])


# ── Module-level singleton ───────────────────────────────────────

_registry: DataRegistry | None = None


def get_registry() -> DataRegistry:
    """Return the process-level DataRegistry singleton."""
    global _registry  # noqa: PLW0603
    if _registry is None:
        _registry = DataRegistry()
    return _registry
