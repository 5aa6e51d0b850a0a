"""
Constants for ADMISSION_DB.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# STORE CONSTANTS
# ============================================================================

DEFAULT_MONGO_URI: Final[str] = "mongodb://localhost:27017"
"""Default MongoDB connection URI."""

DEFAULT_DB_NAME: Final[str] = "IntelligentCollege_Admission_System"
"""Default database name."""

SCHEMA_VERSION: Final[int] = 2
"""Current schema version. Version 2 added the streams collection."""

SCHEMA_META_COLLECTION: Final[str] = "schema_meta"
"""Collection holding the schema version last applied to the store."""

SCHEMA_META_ID: Final[str] = "schema"
"""Document id of the schema version marker."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

# ============================================================================
# COLLECTION NAMES
# ============================================================================

APPLICATIONS: Final[str] = "applications"
DOCUMENTS: Final[str] = "documents"
STUDENTS: Final[str] = "students"
MERIT_LISTS: Final[str] = "meritlists"
ANALYTICS: Final[str] = "analytics"
NOTIFICATIONS: Final[str] = "notifications"
STREAMS: Final[str] = "streams"

SNAPSHOT_COLLECTIONS: Final[tuple[str, ...]] = (
    APPLICATIONS,
    DOCUMENTS,
    STUDENTS,
    NOTIFICATIONS,
)
"""Collections carried by export/import snapshots, in import order."""

# ============================================================================
# IMPORT / BACKUP CONSTANTS
# ============================================================================

DEFAULT_IMPORT_BATCH_SIZE: Final[int] = 50
"""Number of records written per import batch."""

DEFAULT_IMPORT_BATCH_DELAY_MS: Final[int] = 100
"""Pause after each import batch (milliseconds)."""

BACKUP_FILE_PREFIX: Final[str] = "intelligent_college_backup_"
"""Backup file names are this prefix followed by the ISO date and .json."""

# ============================================================================
# RECORD DEFAULTS
# ============================================================================

STATUS_PENDING: Final[str] = "pending"
STATUS_VERIFIED: Final[str] = "verified"
STATUS_ACTIVE: Final[str] = "active"

COLLEGE_ID_PREFIX: Final[str] = "IC"
"""College ids are IC + 4-digit year + 4-digit serial."""

COLLEGE_ID_SERIAL_MAX: Final[int] = 9999

DEFAULT_STUDENT_PREFERENCES: Final[dict] = {
    "notifications": True,
    "language": "en",
    "theme": "light",
}
"""Preferences assigned to every newly registered student."""

# Notification types
NOTIFICATION_APPLICATION_SUBMITTED: Final[str] = "application_submitted"
NOTIFICATION_DOCUMENT_UPLOADED: Final[str] = "document_uploaded"
NOTIFICATION_DOCUMENT_VERIFIED: Final[str] = "document_verified"
