"""
Application search

Free-text search over applications joined to their students. Both
collections are loaded in full and joined with a linear scan, so the cost is
O(applications x students) per query. That is fine for a single college's
intake; an indexed join would change memory use and result ordering.
"""

import logging
from typing import Any

from ..constants import APPLICATIONS, STUDENTS
from ..database.store import RecordStore
from ..records import Record
from .results import OPERATION_ERRORS

logger = logging.getLogger(__name__)


def _searchable_text(student: Record, application: Record) -> str:
    parts = (
        student.get("name"),
        student.get("email"),
        application.get("stream"),
        application.get("collegeId"),
    )
    return " ".join("" if part is None else str(part) for part in parts).lower()


class ApplicationSearch:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def search_applications(self, query: str) -> list[Record]:
        """
        Applications whose student name/email or own stream/college id
        contains ``query``, case-insensitively.

        Applications whose student record is missing are left out. Returns an
        empty list on failure.
        """
        try:
            applications = await self._store.get_all(APPLICATIONS)
            students = await self._store.get_all(STUDENTS)
            needle = query.lower()
        except OPERATION_ERRORS as e:
            logger.error(f"Error searching applications: {e}")
            return []

        results = []
        for application in applications:
            student = _find_student(students, application.get("studentId"))
            if student is None:
                continue
            if needle in _searchable_text(student, application):
                results.append(application)
        return results


def _find_student(students: list[Record], student_id: Any) -> Record | None:
    for student in students:
        if student.get("id") == student_id:
            return student
    return None
