"""
Unit tests for the admission workflows.

Covers applications, documents, students, notifications, streams and
analytics against an in-memory MongoDB.
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from admission_db.exceptions import EngineError


@pytest.fixture
def admissions(admission_db):
    return admission_db.admissions


async def _notifications_for(admission_db, student_id):
    return await admission_db.store.get_all("notifications", "studentId", student_id)


class TestApplications:
    @pytest.mark.asyncio
    async def test_create_application(self, admission_db, admissions):
        result = await admissions.create_application({"studentId": "s1", "stream": "Science"})

        assert result["success"] is True
        stored = await admission_db.store.get("applications", result["id"])
        assert stored["status"] == "pending"
        assert stored["collegeId"] == result["collegeId"]
        assert stored["stream"] == "Science"

    @pytest.mark.asyncio
    async def test_create_application_notifies_student(self, admission_db, admissions):
        await admissions.create_application({"studentId": "s1"})

        notifications = await _notifications_for(admission_db, "s1")
        assert len(notifications) == 1
        assert notifications[0]["type"] == "application_submitted"
        assert notifications[0]["read"] is False
        assert "submitted successfully" in notifications[0]["message"]

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_application(
        self, admission_db, admissions, caplog
    ):
        original_add = admission_db.store.add

        async def add(collection, record):
            if collection == "notifications":
                raise EngineError("notifications unavailable")
            return await original_add(collection, record)

        with patch.object(admission_db.store, "add", side_effect=add):
            with caplog.at_level(logging.WARNING):
                result = await admissions.create_application({"studentId": "s1"})

        assert result["success"] is True
        assert await admission_db.store.get("applications", result["id"]) is not None
        assert await _notifications_for(admission_db, "s1") == []
        assert "notification" in caplog.text

    @pytest.mark.asyncio
    async def test_store_failure_becomes_result(self, admissions):
        with patch.object(
            admissions._store, "add", AsyncMock(side_effect=EngineError("disk full"))
        ):
            result = await admissions.create_application({"studentId": "s1"})

        assert result == {"success": False, "error": "disk full", "errorType": "EngineError"}

    @pytest.mark.asyncio
    async def test_not_initialized_becomes_result(self, admission_config, mongo_client):
        from admission_db.core.engine import AdmissionDatabase

        db = AdmissionDatabase(admission_config, client=mongo_client)

        result = await db.admissions.create_application({"studentId": "s1"})

        assert result["success"] is False
        assert result["errorType"] == "NotInitializedError"


class TestDocuments:
    @pytest.mark.asyncio
    async def test_upload_document(self, admission_db, admissions):
        result = await admissions.upload_document(
            {"applicationId": "a1", "studentId": "s1", "type": "marksheet"}
        )

        assert result["success"] is True
        stored = await admission_db.store.get("documents", result["id"])
        assert stored["status"] == "pending"
        assert stored["comments"] == []
        notifications = await _notifications_for(admission_db, "s1")
        assert notifications[0]["message"] == "Document marksheet uploaded successfully"

    @pytest.mark.asyncio
    async def test_verify_document(self, admission_db, admissions):
        uploaded = await admissions.upload_document(
            {"applicationId": "a1", "studentId": "s1", "type": "photo"}
        )

        result = await admissions.verify_document(uploaded["id"], "admin-7", "Clear photo")

        assert result == {"success": True}
        stored = await admission_db.store.get("documents", uploaded["id"])
        assert stored["status"] == "verified"
        assert stored["verifiedBy"] == "admin-7"
        assert stored["verificationDate"].endswith("Z")
        assert len(stored["comments"]) == 1
        assert stored["comments"][0]["adminId"] == "admin-7"
        assert stored["comments"][0]["comment"] == "Clear photo"

        types = sorted(n["type"] for n in await _notifications_for(admission_db, "s1"))
        assert types == ["document_uploaded", "document_verified"]

    @pytest.mark.asyncio
    async def test_verify_twice_appends_comments(self, admission_db, admissions):
        uploaded = await admissions.upload_document(
            {"applicationId": "a1", "studentId": "s1", "type": "photo"}
        )

        await admissions.verify_document(uploaded["id"], "admin-1", "first")
        await admissions.verify_document(uploaded["id"], "admin-2", "second")

        stored = await admission_db.store.get("documents", uploaded["id"])
        assert [c["comment"] for c in stored["comments"]] == ["first", "second"]
        assert stored["verifiedBy"] == "admin-2"

    @pytest.mark.asyncio
    async def test_verify_missing_document(self, admission_db, admissions):
        result = await admissions.verify_document("missing", "admin-1")

        assert result["success"] is False
        assert result["error"] == "Document not found"
        assert result["errorType"] == "NotFound"
        assert await admission_db.store.get_all("notifications") == []


class TestStudents:
    @pytest.mark.asyncio
    async def test_register_student(self, admission_db, admissions, student_data):
        result = await admissions.register_student(student_data)

        assert result["success"] is True
        stored = await admission_db.store.get("students", result["id"])
        assert stored["email"] == "alice@example.com"
        assert stored["status"] == "active"
        assert stored["collegeId"] == result["collegeId"]
        assert stored["preferences"]["language"] == "en"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, admission_db, admissions, student_data):
        await admissions.register_student(student_data)

        result = await admissions.register_student({**student_data, "name": "Other"})

        assert result["success"] is False
        assert result["errorType"] == "ConstraintViolation"
        assert len(await admission_db.store.get_all("students")) == 1


class TestNotifications:
    @pytest.mark.asyncio
    async def test_unread_notifications(self, admissions):
        first = await admissions.create_notification({"studentId": "s1", "message": "one"})
        await admissions.create_notification({"studentId": "s1", "message": "two"})
        await admissions.create_notification({"studentId": "s2", "message": "other"})

        await admissions.mark_notification_as_read(first["id"])
        unread = await admissions.get_unread_notifications("s1")

        assert [n["message"] for n in unread] == ["two"]

    @pytest.mark.asyncio
    async def test_unread_for_unknown_student(self, admissions):
        assert await admissions.get_unread_notifications("nobody") == []

    @pytest.mark.asyncio
    async def test_unread_for_none_student(self, admissions):
        await admissions.create_notification({"message": "orphan"})
        assert await admissions.get_unread_notifications(None) == []

    @pytest.mark.asyncio
    async def test_mark_as_read_is_idempotent(self, admission_db, admissions):
        created = await admissions.create_notification({"studentId": "s1"})

        assert (await admissions.mark_notification_as_read(created["id"]))["success"]
        assert (await admissions.mark_notification_as_read(created["id"]))["success"]
        stored = await admission_db.store.get("notifications", created["id"])
        assert stored["read"] is True

    @pytest.mark.asyncio
    async def test_mark_unknown_as_read(self, admission_db, admissions):
        result = await admissions.mark_notification_as_read("missing")

        assert result == {"success": True}
        assert await admission_db.store.get_all("notifications") == []

    @pytest.mark.asyncio
    async def test_listeners(self, admissions):
        listener = MagicMock()
        remove = admissions.add_notification_listener(listener)

        created = await admissions.create_notification({"studentId": "s1"})
        await admissions.mark_notification_as_read(created["id"])
        remove()
        await admissions.create_notification({"studentId": "s1"})

        assert listener.call_count == 2
        listener.assert_called_with("s1")

    @pytest.mark.asyncio
    async def test_failing_listener_is_isolated(self, admissions):
        admissions.add_notification_listener(MagicMock(side_effect=RuntimeError("boom")))

        result = await admissions.create_notification({"studentId": "s1"})

        assert result["success"] is True


class TestStreams:
    @pytest.mark.asyncio
    async def test_add_list_delete(self, admissions):
        added = await admissions.add_stream({"name": "Commerce", "code": "COM"})

        streams = await admissions.get_all_streams()
        assert [(s["name"], s["code"]) for s in streams] == [("Commerce", "COM")]

        assert (await admissions.delete_stream(added["id"]))["success"]
        assert await admissions.get_all_streams() == []

    @pytest.mark.asyncio
    async def test_duplicate_stream_name(self, admissions):
        await admissions.add_stream({"name": "Commerce"})
        result = await admissions.add_stream({"name": "Commerce"})
        assert result["errorType"] == "ConstraintViolation"

    @pytest.mark.asyncio
    async def test_delete_unknown_stream(self, admissions):
        assert (await admissions.delete_stream("missing"))["success"] is True

    @pytest.mark.asyncio
    async def test_list_failure_returns_empty(self, admissions):
        with patch.object(
            admissions._store, "get_all", AsyncMock(side_effect=EngineError("down"))
        ):
            assert await admissions.get_all_streams() == []


class TestAnalytics:
    @pytest.mark.asyncio
    async def test_entries_are_appended(self, admissions):
        await admissions.update_analytics("applications", {"count": 1})
        await admissions.update_analytics("applications", {"count": 2})
        await admissions.update_analytics("documents", {"count": 9})

        entries = await admissions.get_analytics_data("applications")

        assert sorted(e["data"]["count"] for e in entries) == [1, 2]

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, admission_db, admissions):
        for entry_id, date in (
            ("e1", "2026-01-01T00:00:00.000Z"),
            ("e2", "2026-01-15T12:00:00.000Z"),
            ("e3", "2026-01-31T00:00:00.000Z"),
            ("e4", "2026-02-01T00:00:00.000Z"),
        ):
            await admission_db.store.add(
                "analytics", {"id": entry_id, "metric": "visits", "date": date}
            )
        await admission_db.store.add(
            "analytics", {"id": "c1", "metric": "clicks", "date": "2026-01-15T12:00:00.000Z"}
        )

        entries = await admissions.get_analytics_data(
            "visits", {"start": "2026-01-01T00:00:00.000Z", "end": "2026-01-31T00:00:00.000Z"}
        )

        assert sorted(e["id"] for e in entries) == ["e1", "e2", "e3"]

    @pytest.mark.asyncio
    async def test_unparsable_dates_are_excluded(self, admission_db, admissions):
        await admission_db.store.add("analytics", {"id": "bad", "metric": "visits", "date": "?"})
        await admission_db.store.add(
            "analytics", {"id": "good", "metric": "visits", "date": "2026-01-02"}
        )

        entries = await admissions.get_analytics_data(
            "visits", {"start": "2026-01-01", "end": "2026-01-03"}
        )

        assert [e["id"] for e in entries] == ["good"]

    @pytest.mark.asyncio
    async def test_invalid_range_returns_empty(self, admissions):
        await admissions.update_analytics("visits", 1)
        assert await admissions.get_analytics_data("visits", {"start": "soon"}) == []

    @pytest.mark.asyncio
    async def test_none_metric(self, admissions):
        await admissions.update_analytics("visits", 1)
        assert await admissions.get_analytics_data(None) == []


class TestUnencodableValues:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, args",
        [
            ("create_application", ({"studentId": "s1", "subjects": {"maths", "physics"}},)),
            ("upload_document", ({"studentId": "s1", "type": "photo", "pages": {1, 2}},)),
            ("register_student", ({"email": "big@example.com", "rollNumber": 2**70},)),
            ("create_notification", ({"studentId": "s1", "priority": 2**64},)),
            ("update_analytics", ("visits", {"n": 2**70})),
        ],
    )
    async def test_becomes_serialization_failure(self, admission_db, admissions, operation, args):
        result = await getattr(admissions, operation)(*args)

        assert result["success"] is False
        assert result["errorType"] == "SerializationError"
        assert "BSON" in result["error"]
        assert await _notifications_for(admission_db, "s1") == []
