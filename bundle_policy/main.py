"""
Bundle Policy — CLI entrypoint.

Usage:
    python -m bundle_policy.main --help
    python -m bundle_policy.main plan react-dom --variant UMD_PROD
    python -m bundle_policy.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from bundle_policy import __version__
from bundle_policy.core.observability.logging_config import setup_logging_from_flags


@click.group()
@click.version_option(version=__version__, prog_name="bundle-policy")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to bundles.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Bundle Policy — module resolution tables for JS bundle variants."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # Relative paths in every table resolve against the manifest directory
    from bundle_policy.core.config.loader import find_manifest_file
    from bundle_policy.core.context import set_project_root

    manifest = ctx.obj["config_path"] or find_manifest_file()
    set_project_root(manifest.parent.resolve() if manifest else Path.cwd())

    setup_logging_from_flags(debug=debug, verbose=verbose, quiet=quiet)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def variants(as_json: bool) -> None:
    """List the bundle variants every policy covers."""
    from bundle_policy.core.models.variant import BundleVariant

    rows = [
        {
            "variant": v.value,
            "format": v.output_format.value,
            "optimization": v.optimization.value,
        }
        for v in BundleVariant
    ]
    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    for row in rows:
        click.echo(f"   {row['variant']:<10} {row['format']:<5} {row['optimization']}")


@cli.command()
@click.argument("bundle")
@click.option("--variant", required=True, help="Bundle variant (e.g. UMD_PROD).")
@click.option("--extract-errors", is_flag=True, help="Update the error code registry.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(
    ctx: click.Context,
    bundle: str,
    variant: str,
    extract_errors: bool,
    as_json: bool,
) -> None:
    """Resolve the full policy for a bundle declared in bundles.yml."""
    from bundle_policy.core.services.error_codes import ErrorCodeError
    from bundle_policy.core.use_cases.resolve import resolve_policy

    try:
        result = resolve_policy(
            bundle,
            variant,
            config_path=ctx.obj.get("config_path"),
            extract_errors=extract_errors,
        )
    except (OSError, ErrorCodeError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    policy = result.policy
    assert policy is not None  # guaranteed after error check above

    click.secho(f"\n📦 {policy.bundle} [{policy.variant}] ({policy.role})", fg="cyan", bold=True)

    sections: list[tuple[str, dict[str, str] | list[str]]] = [
        ("Aliases", policy.aliases),
        ("Externals", policy.externals),
        ("Replacements", policy.replacements),
        ("Ignored", policy.ignored),
    ]
    for title, table in sections:
        click.echo()
        click.secho(f"   {title}: {len(table)}", fg="white", bold=True)
        if not ctx.obj.get("verbose"):
            continue
        if isinstance(table, dict):
            for key, value in table.items():
                click.echo(f"     • {key} → {value}")
        else:
            for name in table:
                click.echo(f"     • {name}")

    click.echo()


@cli.group()
def config() -> None:
    """Bundle manifest commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate bundles.yml."""
    from bundle_policy.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.manifest is not None  # guaranteed when valid
        click.secho("✅ Manifest is valid", fg="green", bold=True)
        click.echo(f"   Bundles: {len(result.manifest.bundles)}")
    else:
        click.secho("❌ Manifest errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(1)


# ── Register sub-command groups from bundle_policy/ui/cli/ ─────────

from bundle_policy.ui.cli.policy import policy

cli.add_command(policy)


if __name__ == "__main__":
    cli()
