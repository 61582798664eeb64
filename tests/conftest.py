"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from bundle_policy.core.context import set_project_root
from bundle_policy.core.models.layout import ProjectLayout


@pytest.fixture(autouse=True)
def _reset_project_root():
    """Every test starts without a process-wide project root."""
    set_project_root(None)
    yield
    set_project_root(None)


@pytest.fixture
def js_tree(tmp_path: Path) -> Path:
    """Create a small JS source tree with tests, mocks, and benchmarks."""
    files = {
        "src/isomorphic/React.js": (
            "invariant(isValidElement(child), 'React.Children.only expected to receive "
            "' + 'a single React element child.');\n"
        ),
        "src/isomorphic/ReactElement.js": "module.exports = {};\n",
        "src/shared/ReactCurrentOwner.js": "module.exports = {current: null};\n",
        "src/shared/lowPriorityWarning.js": "module.exports = function() {};\n",
        "src/shared/utils/shallowCompare.js": "module.exports = function() {};\n",
        "src/shared/utils/__benchmarks__/bench.js": "// bench\n",
        "src/renderers/dom/ReactDOM.js": (
            "invariant(container, \"Target container is not a DOM element.\");\n"
        ),
        "src/renderers/dom/__tests__/ReactDOM-test.js": "// test\n",
        "src/renderers/dom/__mocks__/ReactDOMMock.js": "// mock\n",
        "src/renderers/dom/shared/__tests__/deep/Nested-test.js": "// test\n",
        "src/renderers/native/ReactElement.js": "module.exports = {native: true};\n",
    }
    for rel, content in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return tmp_path


@pytest.fixture
def layout(js_tree: Path) -> ProjectLayout:
    """Layout anchored at the JS source tree."""
    return ProjectLayout(root=js_tree)


@pytest.fixture
def manifest_file(js_tree: Path) -> Path:
    """Write a bundles.yml next to the JS source tree."""
    content = textwrap.dedent("""\
        bundles:
          - name: react
            label: core
            entry: src/isomorphic/React.js
            global: React
            role: core
            variants: [UMD_DEV, UMD_PROD, NODE_DEV, NODE_PROD, FB_DEV, FB_PROD, RN_DEV, RN_PROD]
            paths:
              - "src/isomorphic/**/*.js"
              - "src/shared/**/*.js"
          - name: react-dom
            label: dom
            global: ReactDOM
            role: renderer
            variants: [UMD_DEV, UMD_PROD, NODE_DEV, FB_PROD]
            paths:
              - "src/renderers/dom/**/*.js"
              - "src/shared/**/*.js"
            externals: [react-dom]
            modules_to_stub: [ReactDebugTools]
            feature_flags: src/renderers/dom/ReactDOMFeatureFlags.js
    """)
    path = js_tree / "bundles.yml"
    path.write_text(content)
    return path
