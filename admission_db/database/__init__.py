"""
Database layer: schema registry and the record store.
"""

from .schema import ADMISSION_SCHEMA, CollectionSchema, IndexSpec, schema_by_name
from .store import RecordStore

__all__ = [
    "ADMISSION_SCHEMA",
    "CollectionSchema",
    "IndexSpec",
    "RecordStore",
    "schema_by_name",
]
