"""
Core: process-wide status tracking and the database context object
(``admission_db.core.engine.AdmissionDatabase``).
"""

from .status import DatabaseStatus, StatusListener, StatusTracker

__all__ = ["DatabaseStatus", "StatusListener", "StatusTracker"]
