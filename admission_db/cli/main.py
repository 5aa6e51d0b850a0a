"""
Command-line entry point: ``admission-db``.

This module is part of ADMISSION_DB.
"""

import logging

import click

from .commands.snapshot import backup_command, export_command, import_command
from .commands.status import status_command


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Admission database maintenance commands."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


cli.add_command(export_command)
cli.add_command(import_command)
cli.add_command(backup_command)
cli.add_command(status_command)


if __name__ == "__main__":
    cli()
