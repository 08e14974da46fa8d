"""List the assets found in a plugin tree."""

from pathlib import Path

import click

from plugin_lint.cli.commands.run_helpers import (
    handle_run_errors,
    resolve_config,
    scan_options_from_config,
)
from plugin_lint.core.models import Agent, AssetKind, Skill
from plugin_lint.core.pipeline import FileResult, run_validation
from plugin_lint.gateway.asset_store.abc import AssetStore


def _describe(result: FileResult, verbose: bool) -> list[str]:
    asset = result.asset
    assert asset is not None
    marker = click.style(" (parse error)", fg="red") if asset.parse_failed else ""
    lines = [f"  {asset.name}{marker}"]
    if not verbose:
        return lines

    lines.append(click.style(f"    Path: {asset.source}", dim=True))
    if asset.description:
        lines.append(click.style(f"    Description: {asset.description}", dim=True))
    if isinstance(asset, Agent) and asset.referenced_skills:
        skills = ", ".join(sorted(asset.referenced_skills))
        lines.append(click.style(f"    Skills: {skills}", dim=True))
    if isinstance(asset, Skill) and asset.trigger_keywords:
        keywords = ", ".join(sorted(asset.trigger_keywords))
        lines.append(click.style(f"    Triggers: {keywords}", dim=True))
    return lines


@click.command(name="list")
@click.argument("root", type=click.Path(path_type=Path, file_okay=False))
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in AssetKind]),
    help="Filter by asset kind",
)
@click.option("--verbose", "-v", is_flag=True, help="Show additional details")
@click.pass_obj
def list_cmd(store: AssetStore, root: Path, kind: str | None, verbose: bool) -> None:
    """List commands, agents and skills under ROOT.

    Examples:

    \b
      # List all assets
      plugin-lint list .

    \b
      # List only skills, with details
      plugin-lint list . --kind skill --verbose
    """
    with handle_run_errors():
        config = resolve_config(root, commands_dir=None, agents_dir=None, skills_dir=None)
        run = run_validation(store, root, scan_options_from_config(config))

    results = [result for result in run.results if result.asset is not None]
    if kind is not None:
        results = [result for result in results if result.asset.kind.value == kind]

    unparsed = [result.path for result in run.results if result.asset is None]

    if not results and not unparsed:
        click.echo(f"No {kind} assets found" if kind else "No assets found")
        return

    for asset_kind in AssetKind:
        group = [result for result in results if result.asset.kind is asset_kind]
        if not group:
            continue
        click.echo(click.style(f"{asset_kind.value.upper()}S:", bold=True))
        for result in sorted(group, key=lambda r: r.asset.name):
            for line in _describe(result, verbose):
                click.echo(line)
        click.echo("")

    if unparsed and kind is None:
        click.echo(click.style("UNPARSEABLE:", bold=True, fg="red"))
        for path in unparsed:
            click.echo(f"  {path}")
