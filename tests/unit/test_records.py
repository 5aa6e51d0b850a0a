"""
Unit tests for identifiers, timestamps and the record factory.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from admission_db.records import (build_analytics_entry, build_application,
                                  build_comment, build_document,
                                  build_notification, build_stream,
                                  build_student, generate_college_id,
                                  generate_id, parse_timestamp, to_iso)
from admission_db.records.identifiers import to_base36

ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestIdentifiers:
    def test_to_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"
        assert to_base36(1295) == "zz"

    def test_to_base36_rejects_negative(self):
        with pytest.raises(ValueError):
            to_base36(-1)

    def test_generate_id_shape(self):
        record_id = generate_id()
        assert re.fullmatch(r"[0-9a-z]+", record_id)
        # 8+ clock digits plus the 11-character suffix
        assert len(record_id) >= 19

    def test_generate_id_is_unique_in_practice(self):
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_college_id_format(self):
        college_id = generate_college_id(datetime(2026, 3, 1, tzinfo=timezone.utc))
        assert re.fullmatch(r"IC2026\d{4}", college_id)

    def test_college_id_uses_current_year(self):
        year = datetime.now(timezone.utc).year
        assert generate_college_id().startswith(f"IC{year}")


class TestTimestamps:
    def test_to_iso_format(self):
        value = datetime(2026, 10, 18, 9, 30, 0, 123456, tzinfo=timezone.utc)
        assert to_iso(value) == "2026-10-18T09:30:00.123Z"

    def test_to_iso_converts_offsets(self):
        value = datetime(2026, 10, 18, 11, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso(value) == "2026-10-18T09:30:00.000Z"

    def test_parse_z_suffix(self):
        parsed = parse_timestamp("2026-10-18T09:30:00.123Z")
        assert parsed == datetime(2026, 10, 18, 9, 30, 0, 123000, tzinfo=timezone.utc)

    def test_parse_naive_as_utc(self):
        parsed = parse_timestamp("2026-10-18")
        assert parsed.tzinfo is not None
        assert parsed == datetime(2026, 10, 18, tzinfo=timezone.utc)

    def test_parse_datetime(self):
        value = datetime(2026, 1, 1)
        assert parse_timestamp(value) == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
        with pytest.raises(TypeError):
            parse_timestamp(12345)


class TestFactory:
    def test_application_defaults(self):
        application = build_application({"studentId": "s1", "stream": "Science"})
        assert application["studentId"] == "s1"
        assert application["status"] == "pending"
        assert ISO_PATTERN.match(application["date"])
        assert re.fullmatch(r"IC\d{8}", application["collegeId"])
        assert application["id"]

    def test_stamped_fields_override_caller(self):
        application = build_application({"studentId": "s1", "status": "approved", "id": "x"})
        assert application["status"] == "pending"
        assert application["id"] != "x"

    def test_document_defaults(self):
        document = build_document({"applicationId": "a1", "studentId": "s1", "type": "marksheet"})
        assert document["status"] == "pending"
        assert document["verificationDate"] is None
        assert document["verifiedBy"] is None
        assert document["comments"] == []
        assert ISO_PATTERN.match(document["uploadDate"])

    def test_student_defaults(self):
        student = build_student({"email": "a@example.com"})
        assert student["status"] == "active"
        assert student["lastLogin"] is None
        assert student["preferences"] == {
            "notifications": True,
            "language": "en",
            "theme": "light",
        }

    def test_student_preferences_are_not_shared(self):
        first = build_student({"email": "a@example.com"})
        first["preferences"]["theme"] = "dark"
        second = build_student({"email": "b@example.com"})
        assert second["preferences"]["theme"] == "light"

    def test_notification_read_defaults_false(self):
        assert build_notification({"studentId": "s1"})["read"] is False
        assert build_notification({"studentId": "s1", "read": True})["read"] is True

    def test_stream_keeps_only_name_and_code(self):
        stream = build_stream({"name": "Commerce", "code": "", "extra": 1})
        assert set(stream) == {"id", "name", "code", "createdAt"}
        assert stream["code"] is None

    def test_analytics_entry(self):
        entry = build_analytics_entry("applications_per_day", {"count": 4})
        assert entry["metric"] == "applications_per_day"
        assert entry["data"] == {"count": 4}
        assert ISO_PATTERN.match(entry["date"])

    def test_comment(self):
        comment = build_comment("admin-1", "Looks good")
        assert comment["adminId"] == "admin-1"
        assert comment["comment"] == "Looks good"
        assert ISO_PATTERN.match(comment["date"])
