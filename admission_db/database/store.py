"""
Record Store

The storage engine adapter: opens the MongoDB database, applies the schema
registry, and exposes single-record primitives per collection.

Records are plain dictionaries keyed by their ``id`` field. The id is also
used as the MongoDB ``_id`` so point lookups and uniqueness come from the
primary index; ``_id`` itself never leaves this module.

Every primitive is atomic on its own. Nothing here spans two calls, so a
read-modify-write done by a caller is last-writer-wins.

This module is part of ADMISSION_DB.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..config import AdmissionDBConfig
from ..constants import SCHEMA_META_COLLECTION, SCHEMA_META_ID
from ..core.status import DatabaseStatus, StatusTracker
from ..exceptions import (
    ConstraintViolation,
    EngineError,
    InitializationError,
    NotInitializedError,
    SerializationError,
)
from ..indexes import ensure_schema
from ..observability import get_logger as get_contextual_logger
from ..observability import record_operation, timed_operation
from ..records.identifiers import generate_id
from ..records.timestamps import now_iso
from .schema import ADMISSION_SCHEMA, CollectionSchema, schema_by_name

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)

Record = dict[str, Any]


class RecordStore:
    """
    Collection-oriented record store on top of MongoDB.

    Example:
        store = RecordStore(AdmissionDBConfig())
        await store.open()
        student_id = await store.add("students", {"email": "a@example.com"})
        student = await store.get("students", student_id)
        await store.close()
    """

    def __init__(
        self,
        config: AdmissionDBConfig,
        status: StatusTracker | None = None,
        client: AsyncIOMotorClient | None = None,
        schema: tuple[CollectionSchema, ...] = ADMISSION_SCHEMA,
    ) -> None:
        """
        Args:
            config: Store configuration
            status: Status tracker to report to (a private one is created if None)
            client: Pre-built Motor client; when None one is created on open and
                closed on close
            schema: Collections to declare
        """
        self.config = config
        self.status = status or StatusTracker()
        self._client = client
        self._owns_client = client is None
        self._schema = schema
        self._collections = schema_by_name(schema)
        self._db: AsyncIOMotorDatabase | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def collection_names(self) -> list[str]:
        """Collections declared by the schema, in declaration order."""
        return [collection.name for collection in self._schema]

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if not self._initialized:
            raise NotInitializedError()
        return self._db

    async def open(self, schema: tuple[CollectionSchema, ...] | None = None) -> None:
        """
        Open the database and apply the schema if the stored version is older.

        Opening an already-open store is a no-op.

        Raises:
            InitializationError: If the engine cannot be reached or the stored
                schema version is newer than the configured one
        """
        if self._initialized:
            logger.warning("RecordStore already open. Skipping re-initialization.")
            return

        if schema is not None:
            self._schema = schema
            self._collections = schema_by_name(schema)

        start_time = time.time()
        contextual_logger.info(
            "Opening admission store",
            extra={
                "db_name": self.config.db_name,
                "schema_version": self.config.schema_version,
            },
        )

        try:
            if self._client is None:
                self._client = AsyncIOMotorClient(
                    self.config.mongo_uri,
                    serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
                    appname="ADMISSION_DB",
                )
            db = self._client[self.config.db_name]
            await self._upgrade_schema(db)
        except (InitializationError, PyMongoError) as e:
            duration_ms = (time.time() - start_time) * 1000
            record_operation("store.open", duration_ms, success=False)
            self.status.set(DatabaseStatus.ERROR)
            self._release_client()
            contextual_logger.critical(
                "Admission store failed to open",
                extra={"error_type": type(e).__name__, "error": str(e)},
                exc_info=True,
            )
            if isinstance(e, InitializationError):
                raise
            raise InitializationError(
                f"Failed to open database: {e}",
                mongo_uri=self.config.mongo_uri,
                db_name=self.config.db_name,
                context={"error_type": type(e).__name__},
            ) from e

        self._db = db
        self._initialized = True
        duration_ms = (time.time() - start_time) * 1000
        record_operation("store.open", duration_ms, success=True)
        self.status.set(DatabaseStatus.CONNECTED)
        contextual_logger.info(
            "Admission store opened",
            extra={"db_name": self.config.db_name, "duration_ms": round(duration_ms, 2)},
        )

    async def _upgrade_schema(self, db: AsyncIOMotorDatabase) -> None:
        target = self.config.schema_version
        meta = db[SCHEMA_META_COLLECTION]
        marker = await meta.find_one({"_id": SCHEMA_META_ID})
        stored = marker.get("version", 0) if marker else 0

        if stored > target:
            raise InitializationError(
                f"Stored schema version {stored} is newer than requested version {target}",
                db_name=self.config.db_name,
                context={"stored_version": stored, "requested_version": target},
            )

        if stored == target:
            logger.debug(f"Schema already at version {target}")
            return

        logger.info(f"Upgrading schema from version {stored} to {target}")
        await ensure_schema(db, self._schema)
        await meta.replace_one(
            {"_id": SCHEMA_META_ID},
            {"_id": SCHEMA_META_ID, "version": target, "upgradedAt": now_iso()},
            upsert=True,
        )

    async def close(self) -> None:
        """Release the engine handle. Safe to call more than once."""
        if not self._initialized:
            return
        self._release_client()
        self._db = None
        self._initialized = False
        self.status.set(DatabaseStatus.NOT_INITIALIZED)
        contextual_logger.info("Admission store closed")

    def _release_client(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _collection(self, name: str) -> tuple[Any, CollectionSchema]:
        if not self._initialized:
            raise NotInitializedError()
        schema = self._collections.get(name)
        if schema is None:
            raise EngineError(f"Unknown collection '{name}'", context={"collection": name})
        return self._db[name], schema

    @staticmethod
    def _to_document(schema: CollectionSchema, record: Mapping[str, Any]) -> tuple[Record, Any]:
        doc = dict(record)
        key = doc.get(schema.key_path)
        if key is None:
            if not schema.auto_key:
                raise EngineError(
                    f"Record for '{schema.name}' has no '{schema.key_path}'",
                    context={"collection": schema.name},
                )
            key = generate_id()
            doc[schema.key_path] = key
        doc["_id"] = key
        return doc, key

    @staticmethod
    def _to_record(doc: Mapping[str, Any]) -> Record:
        record = dict(doc)
        record.pop("_id", None)
        return record

    @staticmethod
    def _unencodable(collection: str, error: Exception) -> SerializationError:
        return SerializationError(
            f"Value for '{collection}' cannot be encoded as BSON: {error}"
        )

    @staticmethod
    def _constraint_violation(collection: str, error: DuplicateKeyError) -> ConstraintViolation:
        details = error.details or {}
        key = details.get("keyValue")
        return ConstraintViolation(
            f"Unique constraint violated in '{collection}'", collection=collection, key=key
        )

    @timed_operation("store.add")
    async def add(self, collection: str, record: Mapping[str, Any]) -> Any:
        """
        Insert a new record.

        Returns:
            The record id (generated if the record had none)

        Raises:
            ConstraintViolation: If the id or a unique index value already exists
            EngineError: On engine failure
            SerializationError: If a field value cannot be encoded as BSON (e.g. a
                set, or an int wider than 64 bits)
        """
        coll, schema = self._collection(collection)
        doc, key = self._to_document(schema, record)
        try:
            await coll.insert_one(doc)
        except DuplicateKeyError as e:
            raise self._constraint_violation(collection, e) from e
        except (BSONError, OverflowError) as e:
            raise self._unencodable(collection, e) from e
        except PyMongoError as e:
            raise EngineError(
                f"Failed to add record to '{collection}': {e}",
                context={"collection": collection},
            ) from e
        logger.debug(f"Added record {key!r} to '{collection}'")
        return key

    @timed_operation("store.get")
    async def get(self, collection: str, record_id: Any) -> Record | None:
        """Point lookup. Returns None when the record does not exist."""
        coll, _ = self._collection(collection)
        try:
            doc = await coll.find_one({"_id": record_id})
        except (BSONError, OverflowError) as e:
            raise self._unencodable(collection, e) from e
        except PyMongoError as e:
            raise EngineError(
                f"Failed to read record from '{collection}': {e}",
                context={"collection": collection, "record_id": record_id},
            ) from e
        return self._to_record(doc) if doc is not None else None

    @timed_operation("store.get_all")
    async def get_all(
        self, collection: str, index: str | None = None, value: Any = None
    ) -> list[Record]:
        """
        Return every record, or those whose indexed field equals ``value``.

        ``value=None`` is not a lookup for records whose field is null: with
        no value the index is only checked to exist and the whole collection
        is returned. Callers that mean "no key, no results" must test for
        None themselves. Order is unspecified.

        Raises:
            EngineError: If ``index`` is not declared on the collection, or on
                engine failure
            SerializationError: If ``value`` cannot be encoded as BSON
        """
        coll, schema = self._collection(collection)
        query: dict[str, Any] = {}
        if index is not None:
            if schema.get_index(index) is None:
                raise EngineError(
                    f"Collection '{collection}' has no index '{index}'",
                    context={"collection": collection, "index": index},
                )
            if value is not None:
                query = {index: value}
        try:
            docs = await coll.find(query).to_list(length=None)
        except (BSONError, OverflowError) as e:
            raise self._unencodable(collection, e) from e
        except PyMongoError as e:
            raise EngineError(
                f"Failed to read records from '{collection}': {e}",
                context={"collection": collection},
            ) from e
        return [self._to_record(doc) for doc in docs]

    @timed_operation("store.update")
    async def update(self, collection: str, record: Mapping[str, Any]) -> Any:
        """
        Upsert a whole record by id. There is no partial update: callers pass
        the full record.

        Raises:
            ConstraintViolation: If a unique index rejects the new values
            EngineError: On engine failure
            SerializationError: If a field value cannot be encoded as BSON
        """
        coll, schema = self._collection(collection)
        doc, key = self._to_document(schema, record)
        try:
            await coll.replace_one({"_id": key}, doc, upsert=True)
        except DuplicateKeyError as e:
            raise self._constraint_violation(collection, e) from e
        except (BSONError, OverflowError) as e:
            raise self._unencodable(collection, e) from e
        except PyMongoError as e:
            raise EngineError(
                f"Failed to update record in '{collection}': {e}",
                context={"collection": collection, "record_id": key},
            ) from e
        return key

    @timed_operation("store.delete")
    async def delete(self, collection: str, record_id: Any) -> None:
        """Remove a record. Deleting an absent id is not an error."""
        coll, _ = self._collection(collection)
        try:
            await coll.delete_one({"_id": record_id})
        except (BSONError, OverflowError) as e:
            raise self._unencodable(collection, e) from e
        except PyMongoError as e:
            raise EngineError(
                f"Failed to delete record from '{collection}': {e}",
                context={"collection": collection, "record_id": record_id},
            ) from e
