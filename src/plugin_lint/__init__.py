"""plugin-lint CLI entry point.

This package provides a Click-based static validator for the declarative
assets of a Claude Code plugin (commands, agents and skills). See
`plugin-lint --help` for details.
"""

from plugin_lint.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `plugin-lint` console script."""
    cli()
