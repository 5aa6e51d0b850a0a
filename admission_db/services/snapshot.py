"""
Snapshot import/export and backups

Export reads applications, documents, students and notifications verbatim.
Streams, analytics and merit lists are not part of a snapshot, and backups
reuse the same export, so a backup does not capture them either.

Import writes records one ``add`` at a time in fixed-size batches and pauses
after every batch so a large import does not monopolise the event loop or the
engine. An import that fails part-way is not rolled back: every batch written
before the failure stays in the store.

This module is part of ADMISSION_DB.
"""

import asyncio
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..config import AdmissionDBConfig
from ..constants import BACKUP_FILE_PREFIX, SNAPSHOT_COLLECTIONS
from ..core.status import DatabaseStatus, StatusTracker
from ..database.store import RecordStore
from ..exceptions import AdmissionDBError
from ..observability import get_logger, log_operation, operation_scope, store_context
from ..records import now_iso, today_iso
from ..snapshot_format import dump_snapshot, validate_snapshot
from .results import OPERATION_ERRORS, failure, success

logger = get_logger(__name__)


class SnapshotService:
    def __init__(
        self, store: RecordStore, config: AdmissionDBConfig, status: StatusTracker
    ) -> None:
        self._store = store
        self._config = config
        self._status = status

    async def export_data(self) -> dict[str, Any]:
        """
        Read the snapshot collections. Pure read.

        Returns:
            ``{"success": True, "data": {<collection>: [...], "exportDate": ...}}``
        """
        try:
            data: dict[str, Any] = {}
            for name in SNAPSHOT_COLLECTIONS:
                data[name] = await self._store.get_all(name)
            data["exportDate"] = now_iso()
        except OPERATION_ERRORS as e:
            logger.error(f"Error exporting data: {e}")
            return failure(e)
        return success(data=data)

    async def import_data(self, snapshot: Mapping[str, Any]) -> dict[str, Any]:
        """
        Add every record in ``snapshot`` to the store.

        Collections missing from the snapshot are skipped (not cleared).
        Records keep their ids, so importing into a store that already holds
        one of them fails with a constraint violation at that record.

        Returns:
            ``{"success": True, "imported": {<collection>: count}}`` or a
            failure result; status ends ``connected`` or ``error``
        """
        batch_size = self._config.import_batch_size
        with operation_scope("snapshot.import", batch_size=batch_size):
            self._status.set(DatabaseStatus.SYNCING)
            start_time = time.time()
            imported: dict[str, int] = {}
            try:
                validate_snapshot(snapshot)
                for name in SNAPSHOT_COLLECTIONS:
                    records = snapshot.get(name)
                    if records is None:
                        continue
                    with store_context(collection=name):
                        imported[name] = await self._import_collection(name, records)
            except OPERATION_ERRORS as e:
                self._status.set(DatabaseStatus.ERROR)
                log_operation(
                    logger,
                    "snapshot.import",
                    level=logging.ERROR,
                    success=False,
                    duration_ms=(time.time() - start_time) * 1000,
                    imported=imported,
                    error=str(e),
                )
                return failure(e)
            except Exception:
                self._status.set(DatabaseStatus.ERROR)
                raise

            self._status.set(DatabaseStatus.CONNECTED)
            log_operation(
                logger,
                "snapshot.import",
                duration_ms=(time.time() - start_time) * 1000,
                imported=imported,
            )
            return success(imported=imported)

    async def _import_collection(self, name: str, records: list[Any]) -> int:
        batch_size = self._config.import_batch_size
        delay = self._config.import_batch_delay_seconds
        count = 0
        for offset in range(0, len(records), batch_size):
            for record in records[offset : offset + batch_size]:
                await self._store.add(name, record)
                count += 1
            await asyncio.sleep(delay)
        logger.info(f"Imported {count} record(s) into '{name}'")
        return count

    async def build_backup(self) -> dict[str, Any]:
        """
        Export data stamped with ``backupDate`` and the schema ``version``.

        Raises:
            AdmissionDBError: If the export fails
        """
        exported = await self.export_data()
        if not exported["success"]:
            raise AdmissionDBError(f"Export failed: {exported['error']}")
        return {
            **exported["data"],
            "backupDate": now_iso(),
            "version": self._config.schema_version,
        }

    async def backup_database(self, directory: str | Path | None = None) -> dict[str, Any]:
        """
        Write a backup file named with today's date.

        Returns:
            ``{"success": True, "path": <file path>}``
        """
        target_dir = Path(directory) if directory is not None else self._config.backup_dir
        path = target_dir / f"{BACKUP_FILE_PREFIX}{today_iso()}.json"
        with operation_scope("snapshot.backup", path=str(path)):
            try:
                payload = dump_snapshot(await self.build_backup())
                target_dir.mkdir(parents=True, exist_ok=True)
                path.write_bytes(payload)
            except (*OPERATION_ERRORS, OSError) as e:
                logger.error(f"Error backing up database: {e}")
                return failure(e)
            logger.info(f"Backup written to {path}")
        return success(path=str(path))

