"""
Collection Schema Registry

Static declaration of every collection in the admission store, its key
policy and its secondary indexes. Only consulted when the store is opened.
"""

from dataclasses import dataclass, field

from ..constants import (
    ANALYTICS,
    APPLICATIONS,
    DOCUMENTS,
    MERIT_LISTS,
    NOTIFICATIONS,
    STREAMS,
    STUDENTS,
)


@dataclass(frozen=True)
class IndexSpec:
    """
    A single-field secondary index. The index name equals the field name.

    Unique indexes are sparse: records without the field do not take part in
    the uniqueness check.
    """

    field: str
    unique: bool = False

    @property
    def sparse(self) -> bool:
        return self.unique

    @property
    def name(self) -> str:
        return self.field


@dataclass(frozen=True)
class CollectionSchema:
    """
    Declaration of one collection.

    Attributes:
        name: Collection name
        key_path: Record field holding the identifier
        auto_key: Whether the store generates an identifier for records without one
        indexes: Secondary indexes
    """

    name: str
    key_path: str = "id"
    auto_key: bool = True
    indexes: tuple[IndexSpec, ...] = field(default_factory=tuple)

    def get_index(self, name: str) -> IndexSpec | None:
        for index in self.indexes:
            if index.name == name:
                return index
        return None


def _indexes(*fields: str, unique: tuple[str, ...] = ()) -> tuple[IndexSpec, ...]:
    return tuple(IndexSpec(field=f, unique=f in unique) for f in fields)


ADMISSION_SCHEMA: tuple[CollectionSchema, ...] = (
    CollectionSchema(APPLICATIONS, indexes=_indexes("studentId", "status", "stream", "date")),
    CollectionSchema(
        DOCUMENTS, indexes=_indexes("applicationId", "type", "status", "uploadDate")
    ),
    CollectionSchema(
        STUDENTS,
        indexes=_indexes("email", "phone", "registrationDate", unique=("email",)),
    ),
    CollectionSchema(MERIT_LISTS, indexes=_indexes("stream", "year", "rank")),
    CollectionSchema(ANALYTICS, indexes=_indexes("metric", "date")),
    CollectionSchema(NOTIFICATIONS, indexes=_indexes("studentId", "type", "date", "read")),
    CollectionSchema(STREAMS, indexes=_indexes("name", "code", "createdAt", unique=("name",))),
)
"""Schema version 2 of the admission store."""


def schema_by_name(
    schema: tuple[CollectionSchema, ...] = ADMISSION_SCHEMA,
) -> dict[str, CollectionSchema]:
    """Index a schema tuple by collection name."""
    return {collection.name: collection for collection in schema}
