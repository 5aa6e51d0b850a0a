"""
Status command for CLI.

This module is part of ADMISSION_DB.
"""

import json
from typing import Optional

import click

from ..utils import build_config, db_option, run_with_database, uri_option


@click.command("status")
@uri_option
@db_option
def status_command(mongo_uri: Optional[str], db_name: Optional[str]):
    """Open the database and print its status and record counts."""

    async def collect(db):
        counts = {}
        for name in db.store.collection_names:
            counts[name] = len(await db.store.get_all(name))
        return {"status": db.status.value, "collections": counts}

    summary = run_with_database(build_config(mongo_uri, db_name), collect)
    click.echo(json.dumps(summary, indent=2))
