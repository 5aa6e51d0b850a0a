"""
Record construction: identifiers, timestamps and per-entity factories.
"""

from .factory import (
    Record,
    build_analytics_entry,
    build_application,
    build_comment,
    build_document,
    build_notification,
    build_stream,
    build_student,
)
from .identifiers import generate_college_id, generate_id
from .timestamps import now_iso, parse_timestamp, to_iso, today_iso

__all__ = [
    "Record",
    "build_analytics_entry",
    "build_application",
    "build_comment",
    "build_document",
    "build_notification",
    "build_stream",
    "build_student",
    "generate_college_id",
    "generate_id",
    "now_iso",
    "parse_timestamp",
    "to_iso",
    "today_iso",
]
