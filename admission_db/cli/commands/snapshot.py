"""
Snapshot commands for CLI: export, import and backup.

This module is part of ADMISSION_DB.
"""

from pathlib import Path
from typing import Optional

import click

from ...exceptions import SerializationError
from ...snapshot_format import dump_snapshot, load_snapshot_file
from ..utils import build_config, db_option, report, run_with_database, uri_option


@click.command("export")
@uri_option
@db_option
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the snapshot to this file instead of stdout",
)
def export_command(mongo_uri: Optional[str], db_name: Optional[str], output: Optional[Path]):
    """
    Export applications, documents, students and notifications as JSON.

    Examples:
        admission-db export
        admission-db export -o snapshot.json
    """
    result = run_with_database(
        build_config(mongo_uri, db_name), lambda db: db.snapshots.export_data()
    )
    if not result["success"]:
        report(result, "")
    payload = dump_snapshot(result["data"])
    if output is None:
        click.echo(payload.decode("utf-8"))
        return
    output.write_bytes(payload)
    click.echo(click.style(f"✅ Snapshot written to {output}", fg="green"))


@click.command("import")
@uri_option
@db_option
@click.argument("snapshot_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_command(mongo_uri: Optional[str], db_name: Optional[str], snapshot_file: Path):
    """
    Import a snapshot or backup file.

    Records are added in batches; a failed import leaves earlier batches in
    place.

    SNAPSHOT_FILE: Path to a snapshot/backup JSON file
    """
    try:
        snapshot = load_snapshot_file(snapshot_file)
    except SerializationError as e:
        raise click.ClickException(str(e)) from e

    result = run_with_database(
        build_config(mongo_uri, db_name), lambda db: db.snapshots.import_data(snapshot)
    )
    counts = ", ".join(f"{name}={count}" for name, count in result.get("imported", {}).items())
    report(result, f"Imported {counts or 'nothing'}")


@click.command("backup")
@uri_option
@db_option
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write the backup to (default: ADMISSION_DB_BACKUP_DIR or cwd)",
)
def backup_command(mongo_uri: Optional[str], db_name: Optional[str], directory: Optional[Path]):
    """
    Write a dated backup file.

    Examples:
        admission-db backup --dir backups/
    """
    result = run_with_database(
        build_config(mongo_uri, db_name), lambda db: db.snapshots.backup_database(directory)
    )
    report(result, f"Backup written to {result.get('path')}")

