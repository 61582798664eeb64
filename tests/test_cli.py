"""
Tests for CLI commands — plan, policy tables, config check, and global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from bundle_policy.core.data import get_registry
from bundle_policy.core.services.error_codes import ErrorCodeError
from bundle_policy.main import cli


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Bundle Policy" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_variants_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["variants", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert len(rows) == 8
        assert rows[0] == {"variant": "UMD_DEV", "format": "UMD", "optimization": "DEV"}

    def test_variants_text(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["variants"])
        assert result.exit_code == 0
        assert "RN_PROD" in result.output


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_json(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--config", str(manifest_file), "plan", "react-dom", "--variant", "UMD_PROD", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        policy = data["policy"]
        assert policy["bundle"] == "react-dom"
        assert policy["externals"] == ["react-dom", "react"]
        assert "'ReactDebugTools'" in policy["replacements"]

    def test_plan_text(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--config", str(manifest_file), "plan", "react", "--variant", "NODE_DEV"]
        )
        assert result.exit_code == 0
        assert "react [NODE_DEV] (core)" in result.output
        assert "Externals: 17" in result.output

    def test_plan_verbose_lists_entries(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--config", str(manifest_file), "-v", "plan", "react", "--variant", "FB_DEV"]
        )
        assert result.exit_code == 0
        assert "ReactCurrentOwner" in result.output

    def test_plan_unknown_bundle(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--config", str(manifest_file), "plan", "nope", "--variant", "UMD_DEV"]
        )
        assert result.exit_code == 1
        assert "Unknown bundle" in result.output

    def test_plan_unknown_bundle_json(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--config", str(manifest_file), "plan", "nope", "--variant", "UMD_DEV", "--json"],
        )
        assert result.exit_code == 1
        assert "error" in json.loads(result.output)

    def test_plan_missing_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        result = runner.invoke(cli, ["plan", "react", "--variant", "UMD_DEV"])
        assert result.exit_code == 1
        assert "No bundles.yml" in result.output


class TestPolicyCommands:
    """Tests for the policy command group."""

    def test_externals_json(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["policy", "externals", "--variant", "node_dev", "--external", "a", "--json"],
        )
        assert result.exit_code == 0
        expected = ["a", *get_registry().shared_utility_modules, "object-assign"]
        assert json.loads(result.output) == expected

    def test_externals_bad_variant(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["policy", "externals", "--variant", "SSR_DEV"])
        assert result.exit_code == 2

    def test_replacements_json(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["policy", "replacements", "--variant", "FB_DEV", "--stub", "ReactDebugTools", "--json"],
        )
        assert result.exit_code == 0
        table = json.loads(result.output)
        assert table["'react'"] == "'React'"
        assert table["'ReactDebugTools'"].endswith("DevOnlyStubShim.js'")
        assert table["'ReactDebugTools'"].startswith(f"'{tmp_path.resolve()}")

    def test_replacements_empty_text(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        result = runner.invoke(cli, ["policy", "replacements", "--variant", "RN_PROD"])
        assert result.exit_code == 0
        assert "(empty)" in result.output

    def test_ignored(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["policy", "ignored", "--variant", "RN_DEV"])
        assert result.exit_code == 0
        assert "View" in result.output

    def test_aliases_uses_manifest_root(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "--config", str(manifest_file),
                "policy", "aliases",
                "--variant", "FB_DEV",
                "--role", "renderer",
                "--path", "src/shared/**/*.js",
                "--json",
            ],
        )
        assert result.exit_code == 0
        table = json.loads(result.output)
        assert "shallowCompare" in table
        assert "ReactCurrentOwner" not in table
        assert "react-reconciler" in table

    def test_aliases_no_matches(self, tmp_path: Path):
        config = tmp_path / "bundles.yml"
        config.write_text("layout: {}\nbundles: []\n")
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--config", str(config), "policy", "aliases", "--variant", "UMD_DEV", "--path", "x/*.js"],
        )
        assert result.exit_code == 0
        assert "reactProdInvariant" in result.output


class TestConfigCheckCommand:
    """Tests for the config check command."""

    def test_valid_config(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(manifest_file), "config", "check"])
        assert result.exit_code == 0
        assert "valid" in result.output.lower()

    def test_valid_config_json(self, manifest_file: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(manifest_file), "config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["bundle_count"] == 2

    def test_invalid_config(self, tmp_path: Path):
        config = tmp_path / "bundles.yml"
        config.write_text("bundles:\n  - name: a\n  - name: a\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "Duplicate bundle names" in result.output


class TestErrorCodeFailures:
    """Registry failures exit cleanly instead of raising."""

    def test_aliases_corrupt_error_codes(self, manifest_file: Path):
        codes = manifest_file.parent / "scripts" / "error-codes" / "codes.json"
        codes.parent.mkdir(parents=True, exist_ok=True)
        codes.write_text("{not json")
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "--config", str(manifest_file),
                "policy", "aliases",
                "--variant", "UMD_DEV",
                "--path", "src/isomorphic/*.js",
                "--extract-errors",
            ],
        )
        assert result.exit_code == 1
        assert "Corrupt error code registry" in result.output
        assert not isinstance(result.exception, ErrorCodeError)
