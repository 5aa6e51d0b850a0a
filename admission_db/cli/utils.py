"""
Utility functions for CLI commands.

This module is part of ADMISSION_DB.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

import click

from ..config import AdmissionDBConfig
from ..core.engine import AdmissionDatabase
from ..exceptions import AdmissionDBError

T = TypeVar("T")

uri_option = click.option("--uri", "mongo_uri", help="MongoDB URI (default: ADMISSION_DB_URI)")
db_option = click.option("--db-name", help="Database name (default: ADMISSION_DB_NAME)")


def build_config(mongo_uri: Optional[str], db_name: Optional[str]) -> AdmissionDBConfig:
    """Config from the environment, overridden by command-line options."""
    return AdmissionDBConfig(mongo_uri=mongo_uri, db_name=db_name)


def run_with_database(
    config: AdmissionDBConfig, action: Callable[[AdmissionDatabase], Awaitable[T]]
) -> T:
    """
    Open the database, run ``action`` against it, and close it.

    Raises:
        click.ClickException: If the database cannot be opened
    """

    async def runner() -> T:
        async with AdmissionDatabase(config) as db:
            return await action(db)

    try:
        return asyncio.run(runner())
    except AdmissionDBError as e:
        raise click.ClickException(str(e)) from e


def report(result: dict[str, Any], success_message: str) -> None:
    """Echo the outcome of a domain operation; exit 1 on failure."""
    if result["success"]:
        click.echo(click.style(f"✅ {success_message}", fg="green"))
        return
    click.echo(click.style(f"❌ {result['error']}", fg="red"), err=True)
    raise SystemExit(1)
