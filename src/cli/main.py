"""CLI entry point for breadcrumb."""

import click

from cli.commands import (
    add,
    check,
    claim,
    coverage,
    edit,
    guard,
    init,
    ls,
    overlaps,
    prune,
    release,
    rm,
    search,
    session_end,
    show,
    status,
    verify,
    wait,
)
from cli.config import load_config_model, setup_logging
from cli.output import fail


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """breadcrumb - Warnings and notes attached to paths in a codebase."""
    try:
        config = load_config_model()
    except ValueError as e:
        fail("INVALID_SETTINGS", str(e))
    setup_logging(config, verbose)


for command in (
    init,
    add,
    edit,
    rm,
    show,
    ls,
    check,
    guard,
    overlaps,
    search,
    status,
    coverage,
    verify,
    prune,
    claim,
    release,
    wait,
    session_end,
):
    cli.add_command(command)


if __name__ == "__main__":
    cli()
