"""Helpers shared by commands that scan an asset tree."""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path

import click

from plugin_lint.cli.config import LintConfig, load_config
from plugin_lint.cli.constants import (
    EXIT_ENVIRONMENT_ERROR,
    EXIT_INTERRUPTED,
    NO_COLOR_ENV,
)
from plugin_lint.core.builder import AssetRoots
from plugin_lint.core.errors import AssetTreeError, ConfigError
from plugin_lint.core.pipeline import ScanOptions
from plugin_lint.core.schema import SchemaRules

logger = logging.getLogger(__name__)


def resolve_config(
    root: Path,
    *,
    commands_dir: str | None,
    agents_dir: str | None,
    skills_dir: str | None,
) -> LintConfig:
    """Load config for the scan root and apply directory flag overrides.

    Raises:
        ConfigError: If the config file is invalid.
    """
    config = load_config(root)
    if commands_dir is not None:
        config = replace(config, commands_dir=commands_dir)
    if agents_dir is not None:
        config = replace(config, agents_dir=agents_dir)
    if skills_dir is not None:
        config = replace(config, skills_dir=skills_dir)
    return config


def scan_options_from_config(config: LintConfig) -> ScanOptions:
    return ScanOptions(
        roots=AssetRoots(
            commands=_normalize_dir(config.commands_dir),
            agents=_normalize_dir(config.agents_dir),
            skills=_normalize_dir(config.skills_dir),
        ),
        rules=SchemaRules(command_required_sections=config.command_required_sections),
        orphan_severity=config.orphaned_skill_severity,
        ignore=config.ignore,
        jobs=config.jobs,
    )


def _normalize_dir(rel_dir: str) -> str:
    cleaned = Path(rel_dir).as_posix().strip("/")
    return "" if cleaned == "." else cleaned


def use_color(no_color_flag: bool) -> bool:
    """Return False if color is disabled by flag or the NO_COLOR variable."""
    if no_color_flag:
        return False
    return not os.environ.get(NO_COLOR_ENV)


@contextmanager
def handle_run_errors() -> Iterator[None]:
    """Map failures outside validation itself to distinct exit codes.

    - AssetTreeError, ConfigError: exit 2, message on stderr
    - KeyboardInterrupt: exit 130
    - Any other exception: exit 2 as an internal error
    """
    try:
        yield
    except (AssetTreeError, ConfigError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(EXIT_ENVIRONMENT_ERROR) from e
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        raise SystemExit(EXIT_INTERRUPTED) from None
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        message = f"Internal error: {type(e).__name__}: {e}"
        click.echo(click.style(message, fg="red"), err=True)
        click.echo("Run with --debug for a traceback.", err=True)
        raise SystemExit(EXIT_ENVIRONMENT_ERROR) from e
