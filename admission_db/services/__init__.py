"""
Operations built on the record store: admission workflows, search and
snapshots.
"""

from .admissions import AdmissionService
from .results import OPERATION_ERRORS, failure, success
from .search import ApplicationSearch
from .snapshot import SnapshotService

__all__ = [
    "AdmissionService",
    "ApplicationSearch",
    "OPERATION_ERRORS",
    "SnapshotService",
    "failure",
    "success",
]
