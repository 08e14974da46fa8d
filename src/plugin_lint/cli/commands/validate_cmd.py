"""Validate a plugin's commands, agents and skills."""

from dataclasses import replace
from pathlib import Path

import click

from plugin_lint.cli.commands.run_helpers import (
    handle_run_errors,
    resolve_config,
    scan_options_from_config,
    use_color,
)
from plugin_lint.core.models import Severity
from plugin_lint.core.pipeline import run_validation
from plugin_lint.core.report import render_json, render_text
from plugin_lint.gateway.asset_store.abc import AssetStore


@click.command(name="validate")
@click.argument("root", type=click.Path(path_type=Path, file_okay=False))
@click.option("--commands-dir", help="Commands root, relative to ROOT (default: commands)")
@click.option("--agents-dir", help="Agents root, relative to ROOT (default: agents)")
@click.option("--skills-dir", help="Skills root, relative to ROOT (default: skills)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format",
)
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"]),
    default=None,
    help="Lowest severity that fails the run (default: error)",
)
@click.option(
    "--orphans-as-errors",
    is_flag=True,
    help="Report skills that no agent references as errors",
)
@click.option("--jobs", "-j", type=click.IntRange(min=1), help="Worker threads for parsing")
@click.option("--no-color", is_flag=True, help="Disable colored output (also: NO_COLOR)")
@click.pass_obj
def validate_cmd(
    store: AssetStore,
    root: Path,
    commands_dir: str | None,
    agents_dir: str | None,
    skills_dir: str | None,
    output_format: str,
    fail_on: str | None,
    orphans_as_errors: bool,
    jobs: int | None,
    no_color: bool,
) -> None:
    """Validate plugin assets under ROOT.

    ROOT contains commands/, agents/ and skills/ subdirectories, or use the
    --*-dir options for other layouts. Settings can also come from
    .plugin-lint.toml or [tool.plugin-lint] in ROOT/pyproject.toml.

    Exit codes:
    - 0: No issues at or above the --fail-on severity
    - 1: Validation issues found
    - 2: Environmental or internal error
    - 130: Interrupted

    Examples:

    \b
      # Validate a plugin checkout
      plugin-lint validate .

    \b
      # Machine-readable report, failing on warnings too
      plugin-lint validate . --format json --fail-on warning
    """
    with handle_run_errors():
        config = resolve_config(
            root, commands_dir=commands_dir, agents_dir=agents_dir, skills_dir=skills_dir
        )
        if fail_on is not None:
            config = replace(config, fail_on=Severity(fail_on))
        if orphans_as_errors:
            config = replace(config, orphaned_skill_severity=Severity.ERROR)
        if jobs is not None:
            config = replace(config, jobs=jobs)

        run = run_validation(store, root, scan_options_from_config(config))

    if output_format == "json":
        click.echo(render_json(run.report), nl=False)
    else:
        click.echo(render_text(run.report, color=use_color(no_color)), nl=False)

    exit_code = run.report.exit_code(config.fail_on)
    if exit_code != 0:
        raise SystemExit(exit_code)
