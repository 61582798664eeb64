"""
CLI commands for individual policy tables.

Thin wrappers over ``bundle_policy.core.services``: each command prints
one table for ad hoc inputs, without requiring a bundle in bundles.yml.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from bundle_policy.core.models.variant import BundleVariant, ModuleRole

_VARIANT_CHOICE = click.Choice([v.value for v in BundleVariant], case_sensitive=False)
_ROLE_CHOICE = click.Choice([r.value for r in ModuleRole], case_sensitive=False)


def _resolve_layout(ctx: click.Context):
    """Layout from bundles.yml when one is found, else the context root."""
    from bundle_policy.core.config.loader import (
        ConfigError,
        find_manifest_file,
        load_manifest,
        manifest_layout,
    )
    from bundle_policy.core.models.layout import ProjectLayout

    config_path: Path | None = ctx.obj.get("config_path") or find_manifest_file()
    if config_path is None:
        return ProjectLayout()
    try:
        return manifest_layout(load_manifest(config_path), config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _emit_table(table: dict[str, str], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(table, indent=2))
        return
    if not table:
        click.secho("   (empty)", fg="yellow")
        return
    width = max(len(k) for k in table)
    for key, value in table.items():
        click.echo(f"   {key.ljust(width)}  → {value}")


def _emit_list(items: list[str], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(items, indent=2))
        return
    if not items:
        click.secho("   (empty)", fg="yellow")
        return
    for item in items:
        click.echo(f"   • {item}")


@click.group()
def policy() -> None:
    """Policy — print single resolution tables for ad hoc inputs."""


@policy.command()
@click.option("--variant", "variant", type=_VARIANT_CHOICE, required=True, help="Bundle variant.")
@click.option("--role", "role", type=_ROLE_CHOICE, default="core", help="Module role.")
@click.option("--path", "paths", multiple=True, help="Source glob pattern (repeatable).")
@click.option("--extract-errors", is_flag=True, help="Update the error code registry.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def aliases(
    ctx: click.Context,
    variant: str,
    role: str,
    paths: tuple[str, ...],
    extract_errors: bool,
    as_json: bool,
) -> None:
    """Show the alias table (module name → file)."""
    from bundle_policy.core.services.aliases import get_aliases
    from bundle_policy.core.services.error_codes import ErrorCodeError

    layout = _resolve_layout(ctx)
    try:
        table = get_aliases(
            list(paths),
            BundleVariant.parse(variant),
            ModuleRole.parse(role),
            extract_errors=extract_errors,
            layout=layout,
        )
    except (OSError, ErrorCodeError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    _emit_table(table, as_json)


@policy.command()
@click.option("--variant", "variant", type=_VARIANT_CHOICE, required=True, help="Bundle variant.")
@click.option("--role", "role", type=_ROLE_CHOICE, default="core", help="Module role.")
@click.option("--external", "externals", multiple=True, help="Base external module (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def externals(
    variant: str,
    role: str,
    externals: tuple[str, ...],
    as_json: bool,
) -> None:
    """Show the external module list, in require order."""
    from bundle_policy.core.services.externals import get_external_modules

    result = get_external_modules(
        list(externals), BundleVariant.parse(variant), ModuleRole.parse(role)
    )
    _emit_list(result, as_json)


@policy.command()
@click.option("--variant", "variant", type=_VARIANT_CHOICE, required=True, help="Bundle variant.")
@click.option("--stub", "stubs", multiple=True, help="Module to stub out (repeatable).")
@click.option("--feature-flags", default=None, help="Feature flag module file.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def replacements(
    ctx: click.Context,
    variant: str,
    stubs: tuple[str, ...],
    feature_flags: str | None,
    as_json: bool,
) -> None:
    """Show the literal replacement table."""
    from bundle_policy.core.services.replacements import get_default_replace_modules

    table = get_default_replace_modules(
        BundleVariant.parse(variant),
        list(stubs),
        feature_flags,
        layout=_resolve_layout(ctx),
    )
    _emit_table(table, as_json)


@policy.command()
@click.option("--variant", "variant", type=_VARIANT_CHOICE, required=True, help="Bundle variant.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def ignored(variant: str, as_json: bool) -> None:
    """Show modules omitted from the bundle graph entirely."""
    from bundle_policy.core.services.externals import get_ignored_modules

    _emit_list(get_ignored_modules(BundleVariant.parse(variant)), as_json)
