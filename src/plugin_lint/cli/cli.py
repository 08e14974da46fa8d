import logging

import click

from plugin_lint.cli.commands.list_cmd import list_cmd
from plugin_lint.cli.commands.validate_cmd import validate_cmd
from plugin_lint.gateway.asset_store.real import RealAssetStore

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="plugin-lint")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Validate Claude Code plugin commands, agents and skills."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create the store if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = RealAssetStore()


cli.add_command(list_cmd)
cli.add_command(validate_cmd)
