"""
ADMISSION_DB - Admission Record Store

Embedded document store for a college-admission workflow: applications,
documents, students, notifications, streams and analytics on MongoDB, with
batched snapshot import/export.
"""

from .config import AdmissionDBConfig
from .core import DatabaseStatus, StatusTracker
from .core.engine import AdmissionDatabase
from .database import ADMISSION_SCHEMA, RecordStore
from .exceptions import (
    AdmissionDBError,
    ConfigurationError,
    ConstraintViolation,
    EngineError,
    InitializationError,
    NotFound,
    NotInitializedError,
    SerializationError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "AdmissionDatabase",
    "AdmissionDBConfig",
    "DatabaseStatus",
    "StatusTracker",
    # Database
    "ADMISSION_SCHEMA",
    "RecordStore",
    # Errors
    "AdmissionDBError",
    "ConfigurationError",
    "ConstraintViolation",
    "EngineError",
    "InitializationError",
    "NotFound",
    "NotInitializedError",
    "SerializationError",
]
