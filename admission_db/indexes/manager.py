"""
Schema setup

Creates the collections and secondary indexes declared in the schema
registry. Setup is additive only: existing collections and indexes are never
dropped, renamed or redefined.
"""

import logging
from typing import Any

from pymongo.errors import CollectionInvalid, OperationFailure

from ..database.schema import CollectionSchema, IndexSpec

logger = logging.getLogger(__name__)


async def _ensure_index(collection: Any, schema_name: str, index: IndexSpec) -> bool:
    """Create one index. Returns False when a conflicting definition already exists."""
    try:
        await collection.create_index(
            index.field, name=index.name, unique=index.unique, sparse=index.sparse
        )
        return True
    except OperationFailure as e:
        # 85 IndexOptionsConflict / 86 IndexKeySpecsConflict: keep what is there
        if e.code in (85, 86):
            logger.warning(
                f"Index '{index.name}' on '{schema_name}' exists with a different "
                f"definition; leaving it unchanged: {e}"
            )
            return False
        raise


async def ensure_schema(db: Any, schema: tuple[CollectionSchema, ...]) -> dict[str, list[str]]:
    """
    Create missing collections and indexes.

    Args:
        db: Motor database
        schema: Collections to ensure

    Returns:
        Mapping of collection name to the index names that were ensured

    Raises:
        pymongo.errors.PyMongoError: On engine failures (callers translate)
    """
    existing = set(await db.list_collection_names())
    ensured: dict[str, list[str]] = {}

    for collection_schema in schema:
        name = collection_schema.name
        if name not in existing:
            try:
                await db.create_collection(name)
                logger.info(f"Created collection '{name}'")
            except CollectionInvalid:
                logger.debug(f"Collection '{name}' was created concurrently")

        collection = db[name]
        ensured[name] = []
        for index in collection_schema.indexes:
            if await _ensure_index(collection, name, index):
                ensured[name].append(index.name)

    logger.info(
        f"Schema ensured for {len(ensured)} collection(s): "
        + ", ".join(f"{name}({len(idx)})" for name, idx in ensured.items())
    )
    return ensured
