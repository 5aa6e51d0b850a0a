"""
Admission workflows

Composes the record factory and the record store into the operations the
admission flows call: applications, documents, students, notifications,
streams and analytics.

Create-like operations that represent a business event also write a
notification for the student. That write is best-effort: if it fails the
failure is logged and the primary operation still reports success. The two
writes are not in one transaction, so a crash between them leaves the
primary record without its notification.

Read-modify-write operations (verifying a document, marking a notification
read) are not isolated. Two concurrent updates of the same record race and
the last ``update`` wins.

This module is part of ADMISSION_DB.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from ..constants import (
    ANALYTICS,
    APPLICATIONS,
    DOCUMENTS,
    NOTIFICATION_APPLICATION_SUBMITTED,
    NOTIFICATION_DOCUMENT_UPLOADED,
    NOTIFICATION_DOCUMENT_VERIFIED,
    NOTIFICATIONS,
    STATUS_VERIFIED,
    STREAMS,
    STUDENTS,
)
from ..database.store import RecordStore
from ..exceptions import NotFound
from ..records import (
    Record,
    build_analytics_entry,
    build_application,
    build_comment,
    build_document,
    build_notification,
    build_stream,
    build_student,
    now_iso,
    parse_timestamp,
)
from .results import OPERATION_ERRORS, failure, success

logger = logging.getLogger(__name__)

NotificationListener = Callable[[Any], None]


class AdmissionService:
    """Domain operations over one record store."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._notification_listeners: list[NotificationListener] = []

    def add_notification_listener(self, listener: NotificationListener) -> Callable[[], None]:
        """
        Register a callback invoked with a student id whenever that student's
        notifications change (created or marked read).

        Returns:
            A callable that removes the listener
        """
        self._notification_listeners.append(listener)

        def remove() -> None:
            if listener in self._notification_listeners:
                self._notification_listeners.remove(listener)

        return remove

    def _notifications_changed(self, student_id: Any) -> None:
        for listener in list(self._notification_listeners):
            try:
                listener(student_id)
            except Exception:
                logger.exception("Notification listener failed")

    async def _notify(self, student_id: Any, notification_type: str, message: str) -> None:
        """Fire-and-forget notification. Failures are logged, never raised."""
        result = await self.create_notification(
            {"studentId": student_id, "type": notification_type, "message": message}
        )
        if not result["success"]:
            logger.warning(
                f"Best-effort '{notification_type}' notification for student "
                f"{student_id!r} failed: {result['error']}"
            )

    # ------------------------------------------------------------------
    # Applications and documents
    # ------------------------------------------------------------------

    async def create_application(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Submit an application. It starts ``pending`` with a fresh college id.

        Returns:
            ``{"success": True, "id": ..., "collegeId": ...}``
        """
        try:
            application = build_application(data)
            application_id = await self._store.add(APPLICATIONS, application)
        except OPERATION_ERRORS as e:
            logger.error(f"Error creating application: {e}")
            return failure(e)

        await self._notify(
            application.get("studentId"),
            NOTIFICATION_APPLICATION_SUBMITTED,
            "Your Intelligent college application has been submitted successfully",
        )
        return success(id=application_id, collegeId=application["collegeId"])

    async def upload_document(self, data: Mapping[str, Any]) -> dict[str, Any]:
        try:
            document = build_document(data)
            document_id = await self._store.add(DOCUMENTS, document)
        except OPERATION_ERRORS as e:
            logger.error(f"Error uploading document: {e}")
            return failure(e)

        await self._notify(
            document.get("studentId"),
            NOTIFICATION_DOCUMENT_UPLOADED,
            f"Document {document.get('type')} uploaded successfully",
        )
        return success(id=document_id)

    async def verify_document(
        self, document_id: Any, admin_id: Any, comment: str = ""
    ) -> dict[str, Any]:
        """
        Mark a document verified by ``admin_id`` and append the admin's comment.

        Fails with ``NotFound`` (as a result, not an exception) when the
        document does not exist; no notification is written in that case.
        """
        try:
            document = await self._store.get(DOCUMENTS, document_id)
            if document is None:
                raise NotFound("Document not found", collection=DOCUMENTS, record_id=document_id)

            document["status"] = STATUS_VERIFIED
            document["verificationDate"] = now_iso()
            document["verifiedBy"] = admin_id
            document["comments"] = [
                *(document.get("comments") or []),
                build_comment(admin_id, comment),
            ]
            await self._store.update(DOCUMENTS, document)
        except OPERATION_ERRORS as e:
            logger.error(f"Error verifying document: {e}")
            return failure(e)

        await self._notify(
            document.get("studentId"),
            NOTIFICATION_DOCUMENT_VERIFIED,
            f"Document {document.get('type')} has been verified",
        )
        return success()

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    async def register_student(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Register a student. The email index is unique, so a second
        registration with the same email fails with ``ConstraintViolation``.
        """
        try:
            student = build_student(data)
            student_id = await self._store.add(STUDENTS, student)
        except OPERATION_ERRORS as e:
            logger.error(f"Error registering student: {e}")
            return failure(e)
        return success(id=student_id, collegeId=student["collegeId"])

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def create_notification(self, data: Mapping[str, Any]) -> dict[str, Any]:
        try:
            notification = build_notification(data)
            notification_id = await self._store.add(NOTIFICATIONS, notification)
        except OPERATION_ERRORS as e:
            logger.error(f"Error creating notification: {e}")
            return failure(e)

        self._notifications_changed(notification.get("studentId"))
        return success(id=notification_id)

    async def get_unread_notifications(self, student_id: Any) -> list[Record]:
        """Unread notifications for one student, in no particular order."""
        if student_id is None:
            return []
        try:
            notifications = await self._store.get_all(NOTIFICATIONS, "studentId", student_id)
        except OPERATION_ERRORS as e:
            logger.error(f"Error getting notifications: {e}")
            return []
        return [n for n in notifications if not n.get("read")]

    async def mark_notification_as_read(self, notification_id: Any) -> dict[str, Any]:
        """Idempotent. An unknown id is a successful no-op."""
        try:
            notification = await self._store.get(NOTIFICATIONS, notification_id)
            if notification is None:
                return success()
            notification["read"] = True
            await self._store.update(NOTIFICATIONS, notification)
        except OPERATION_ERRORS as e:
            logger.error(f"Error marking notification as read: {e}")
            return failure(e)

        self._notifications_changed(notification.get("studentId"))
        return success()

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    async def add_stream(self, data: Mapping[str, Any]) -> dict[str, Any]:
        try:
            stream = build_stream(data)
            stream_id = await self._store.add(STREAMS, stream)
        except OPERATION_ERRORS as e:
            logger.error(f"Error adding stream: {e}")
            return failure(e)
        return success(id=stream_id)

    async def get_all_streams(self) -> list[Record]:
        try:
            return await self._store.get_all(STREAMS)
        except OPERATION_ERRORS as e:
            logger.error(f"Error getting streams: {e}")
            return []

    async def delete_stream(self, stream_id: Any) -> dict[str, Any]:
        try:
            await self._store.delete(STREAMS, stream_id)
        except OPERATION_ERRORS as e:
            logger.error(f"Error deleting stream: {e}")
            return failure(e)
        return success()

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    async def update_analytics(self, metric: str, data: Any) -> dict[str, Any]:
        """Append an analytics entry; earlier entries for the metric are kept."""
        try:
            entry = build_analytics_entry(metric, data)
            entry_id = await self._store.add(ANALYTICS, entry)
        except OPERATION_ERRORS as e:
            logger.error(f"Error updating analytics: {e}")
            return failure(e)
        return success(id=entry_id)

    async def get_analytics_data(
        self, metric: str, date_range: Mapping[str, str | datetime] | None = None
    ) -> list[Record]:
        """
        Entries recorded for ``metric``, optionally limited to
        ``date_range["start"] <= date <= date_range["end"]`` (both inclusive).
        Entries whose date cannot be parsed fall outside every range.
        """
        if metric is None:
            return []
        try:
            entries = await self._store.get_all(ANALYTICS, "metric", metric)
            if not date_range:
                return entries
            start = parse_timestamp(date_range["start"])
            end = parse_timestamp(date_range["end"])
        except OPERATION_ERRORS as e:
            logger.error(f"Error getting analytics: {e}")
            return []
        return [entry for entry in entries if _within(entry.get("date"), start, end)]


def _within(value: Any, start: datetime, end: datetime) -> bool:
    try:
        moment = parse_timestamp(value)
    except (TypeError, ValueError):
        return False
    return start <= moment <= end
