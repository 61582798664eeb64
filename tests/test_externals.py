"""
Tests for the externals service — append-only classification and ignored modules.
"""

import itertools

import pytest

from bundle_policy.core.data import get_registry
from bundle_policy.core.models import BundleVariant, ModuleRole, UnhandledVariantError
from bundle_policy.core.services.externals import (
    get_external_modules,
    get_ignored_modules,
    ignore_mobile_modules,
    ignore_platform_modules,
)

FBJS = list(get_registry().shared_utility_modules)


class TestAppendOnly:
    """The caller's list is always a preserved prefix."""

    @pytest.mark.parametrize(
        "variant, role", list(itertools.product(BundleVariant, ModuleRole))
    )
    def test_prefix_preserved(self, variant: BundleVariant, role: ModuleRole):
        base = ["react-dom", "custom-lib", "custom-lib"]
        result = get_external_modules(base, variant, role)
        assert result[: len(base)] == base
        assert len(result) >= len(base)

    def test_input_not_mutated(self):
        base = ["react-dom"]
        get_external_modules(base, BundleVariant.FB_DEV, ModuleRole.RENDERER)
        assert base == ["react-dom"]

    def test_duplicates_kept(self):
        result = get_external_modules(["react"], BundleVariant.UMD_DEV, ModuleRole.RENDERER)
        assert result == ["react", "react"]


class TestUmd:
    """UMD variants only add the framework for renderers."""

    @pytest.mark.parametrize("variant", [BundleVariant.UMD_DEV, BundleVariant.UMD_PROD])
    def test_core_adds_nothing(self, variant):
        assert get_external_modules(["x"], variant, ModuleRole.CORE) == ["x"]

    @pytest.mark.parametrize("variant", [BundleVariant.UMD_DEV, BundleVariant.UMD_PROD])
    def test_renderer_adds_framework(self, variant):
        assert get_external_modules([], variant, ModuleRole.RENDERER) == ["react"]


class TestNodeAndMobile:
    """NODE and RN variants keep shared utilities external."""

    def test_node_dev_core_exact_order(self):
        base = ["a", "b"]
        result = get_external_modules(base, BundleVariant.NODE_DEV, ModuleRole.CORE)
        assert result == base + FBJS + ["object-assign"]
        assert "react" not in result

    @pytest.mark.parametrize(
        "variant",
        [
            BundleVariant.NODE_DEV,
            BundleVariant.NODE_PROD,
            BundleVariant.RN_DEV,
            BundleVariant.RN_PROD,
        ],
    )
    def test_renderer_appends_framework_last(self, variant):
        result = get_external_modules([], variant, ModuleRole.RENDERER)
        assert result == FBJS + ["object-assign", "react"]

    def test_shared_utility_list(self):
        assert "fbjs/lib/warning" in FBJS
        assert "fbjs/lib/invariant" in FBJS
        assert len(FBJS) == len(set(FBJS))


class TestPlatform:
    """FB variants use the platform's own names."""

    def test_core(self):
        result = get_external_modules([], BundleVariant.FB_PROD, ModuleRole.CORE)
        assert result == FBJS + ["object-assign", "ReactCurrentOwner", "lowPriorityWarning"]

    def test_renderer_without_dom(self):
        result = get_external_modules(["react-art"], BundleVariant.FB_DEV, ModuleRole.RENDERER)
        assert result[-1] == "React"
        assert "ReactDOM" not in result

    def test_renderer_with_dom(self):
        result = get_external_modules(["react-dom"], BundleVariant.FB_DEV, ModuleRole.RENDERER)
        assert result[-2:] == ["React", "ReactDOM"]
        assert "react" not in result

    def test_core_with_dom_adds_no_platform_dom(self):
        result = get_external_modules(["react-dom"], BundleVariant.FB_DEV, ModuleRole.CORE)
        assert "ReactDOM" not in result


class TestErrors:
    """Unregistered variants and roles fail loudly."""

    def test_unknown_variant(self):
        with pytest.raises(UnhandledVariantError):
            get_external_modules([], "SSR_PROD", ModuleRole.CORE)

    def test_unknown_role(self):
        with pytest.raises(UnhandledVariantError):
            get_external_modules([], BundleVariant.UMD_DEV, "plugin")

    def test_unknown_variant_ignored(self):
        with pytest.raises(UnhandledVariantError):
            get_ignored_modules("SSR_PROD")


class TestIgnoredModules:
    """Ignored modules are a separate query from externals."""

    def test_platform_list(self):
        assert ignore_platform_modules() == [
            "React",
            "ReactDOM",
            "ReactFeatureFlags",
            "ReactCurrentOwner",
            "lowPriorityWarning",
        ]

    def test_mobile_list(self):
        assert ignore_mobile_modules() == ["View"]

    @pytest.mark.parametrize("variant", [BundleVariant.FB_DEV, BundleVariant.FB_PROD])
    def test_fb(self, variant):
        assert get_ignored_modules(variant) == ignore_platform_modules()

    @pytest.mark.parametrize("variant", [BundleVariant.RN_DEV, BundleVariant.RN_PROD])
    def test_rn(self, variant):
        assert get_ignored_modules(variant) == ["View"]

    @pytest.mark.parametrize(
        "variant",
        [
            BundleVariant.UMD_DEV,
            BundleVariant.UMD_PROD,
            BundleVariant.NODE_DEV,
            BundleVariant.NODE_PROD,
        ],
    )
    def test_none(self, variant):
        assert get_ignored_modules(variant) == []

    def test_returns_fresh_lists(self):
        first = ignore_platform_modules()
        first.append("mutated")
        assert "mutated" not in ignore_platform_modules()


class TestVariantNames:
    """Variant names are accepted case-insensitively at every entry point."""

    def test_externals(self):
        by_name = get_external_modules([], "umd_dev", "renderer")
        assert by_name == get_external_modules([], BundleVariant.UMD_DEV, ModuleRole.RENDERER)
        assert by_name == ["react"]

    def test_ignored(self):
        assert get_ignored_modules("rn_prod") == ["View"]
