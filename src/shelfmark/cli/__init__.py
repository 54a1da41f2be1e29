# ABOUTME: CLI package for shelfmark, built on Click.
# ABOUTME: Defines the root command group, the --verbose logging switch, and registers subcommands.

import logging

import click

from shelfmark.cli.commands import build_cmd, identify_cmd, lookup_cmd, resolve_cmd


@click.group()
@click.version_option(package_name="shelfmark")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """shelfmark - Library of Congress subjects and reconciled metadata for ebooks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


cli.add_command(build_cmd.build_schedules)
cli.add_command(lookup_cmd.lookup)
cli.add_command(identify_cmd.identify)
cli.add_command(resolve_cmd.resolve)
