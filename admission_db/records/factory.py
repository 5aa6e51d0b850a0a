"""
Record Factory

Builds the canonical record for each domain entity. Caller-supplied fields
are copied first; stamped fields (id, timestamps, lifecycle defaults) are
applied last and win over anything the caller passed for them.
"""

import copy
from collections.abc import Mapping
from typing import Any

from ..constants import (
    DEFAULT_STUDENT_PREFERENCES,
    STATUS_ACTIVE,
    STATUS_PENDING,
)
from .identifiers import generate_college_id, generate_id
from .timestamps import now_iso

Record = dict[str, Any]


def build_application(data: Mapping[str, Any]) -> Record:
    return {
        **data,
        "id": generate_id(),
        "date": now_iso(),
        "status": STATUS_PENDING,
        "collegeId": generate_college_id(),
    }


def build_document(data: Mapping[str, Any]) -> Record:
    return {
        **data,
        "id": generate_id(),
        "uploadDate": now_iso(),
        "status": STATUS_PENDING,
        "verificationDate": None,
        "verifiedBy": None,
        "comments": [],
    }


def build_student(data: Mapping[str, Any]) -> Record:
    return {
        **data,
        "id": generate_id(),
        "registrationDate": now_iso(),
        "collegeId": generate_college_id(),
        "status": STATUS_ACTIVE,
        "lastLogin": None,
        "preferences": copy.deepcopy(DEFAULT_STUDENT_PREFERENCES),
    }


def build_notification(data: Mapping[str, Any]) -> Record:
    """``read`` defaults to False but a caller may pass it explicitly."""
    record = {"read": False, **data}
    record["id"] = generate_id()
    record["date"] = now_iso()
    return record


def build_stream(data: Mapping[str, Any]) -> Record:
    """Streams keep only name and code; other caller fields are dropped."""
    return {
        "id": generate_id(),
        "name": data.get("name"),
        "code": data.get("code") or None,
        "createdAt": now_iso(),
    }


def build_analytics_entry(metric: str, data: Any) -> Record:
    return {
        "id": generate_id(),
        "metric": metric,
        "data": data,
        "date": now_iso(),
    }


def build_comment(admin_id: Any, comment: str) -> Record:
    return {"adminId": admin_id, "comment": comment, "date": now_iso()}
