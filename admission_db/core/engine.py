"""
Admission Database

The context object that owns one record store and the services built on it.
It replaces a process-wide singleton: callers create it, initialize it, pass
it to whatever needs it, and shut it down.

This module is part of ADMISSION_DB.
"""

import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from ..config import AdmissionDBConfig
from ..database.schema import ADMISSION_SCHEMA, CollectionSchema
from ..database.store import RecordStore
from ..observability import get_logger as get_contextual_logger
from ..observability import clear_store_context, get_metrics_collector, set_store_context
from ..services import AdmissionService, ApplicationSearch, SnapshotService
from .status import DatabaseStatus, StatusListener, StatusTracker

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class AdmissionDatabase:
    """
    Admission store with its domain operations.

    Example:
        async with AdmissionDatabase(AdmissionDBConfig()) as db:
            student = await db.admissions.register_student({"email": "a@example.com"})
            await db.admissions.create_application(
                {"studentId": student["id"], "stream": "Computer Science"}
            )
            matches = await db.search.search_applications("computer")
            backup = await db.snapshots.backup_database()
    """

    def __init__(
        self,
        config: Optional[AdmissionDBConfig] = None,
        client: Optional[AsyncIOMotorClient] = None,
        schema: tuple[CollectionSchema, ...] = ADMISSION_SCHEMA,
    ) -> None:
        """
        Args:
            config: Configuration (read from the environment if None)
            client: Pre-built Motor client, mainly for tests
            schema: Collections to declare
        """
        self.config = config or AdmissionDBConfig()
        self.config.validate()

        self.status_tracker = StatusTracker()
        self.store = RecordStore(
            self.config, status=self.status_tracker, client=client, schema=schema
        )
        self.admissions = AdmissionService(self.store)
        self.search = ApplicationSearch(self.store)
        self.snapshots = SnapshotService(self.store, self.config, self.status_tracker)

    async def initialize(self) -> None:
        """
        Open the store.

        Raises:
            InitializationError: If the store cannot be opened. The status is
                then ``error`` and every store call raises NotInitializedError
                until a later ``initialize`` succeeds.
        """
        set_store_context(db_name=self.config.db_name)
        await self.store.open()

    async def shutdown(self) -> None:
        """Close the store. Idempotent."""
        await self.store.close()
        clear_store_context()

    @property
    def initialized(self) -> bool:
        return self.store.initialized

    @property
    def status(self) -> DatabaseStatus:
        return self.status_tracker.status

    def subscribe_status(self, listener: StatusListener):
        """Push status changes to ``listener``; returns an unsubscribe callable."""
        return self.status_tracker.subscribe(listener)

    def get_metrics(self) -> dict[str, Any]:
        """Summary of store operation metrics."""
        return get_metrics_collector().get_summary()

    async def __aenter__(self) -> "AdmissionDatabase":
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        await self.shutdown()
