"""
Snapshot format

JSON shape shared by export, import and backup files:

    {
        "applications": [...], "documents": [...],
        "students": [...], "notifications": [...],
        "exportDate": "2026-10-18T09:30:00.000Z",
        "backupDate": "...",   # backups only
        "version": 2           # backups only
    }

Every collection key is optional on import and unknown keys are ignored.
"""

import json
from pathlib import Path
from typing import Any

from jsonschema import ValidationError, validate

from .constants import SNAPSHOT_COLLECTIONS
from .exceptions import SerializationError

SNAPSHOT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        **{
            name: {"type": "array", "items": {"type": "object"}}
            for name in SNAPSHOT_COLLECTIONS
        },
        "exportDate": {"type": "string"},
        "backupDate": {"type": "string"},
        "version": {"type": "integer"},
    },
    "additionalProperties": True,
}


def validate_snapshot(snapshot: Any) -> dict[str, Any]:
    """
    Check that ``snapshot`` has the snapshot shape.

    Returns:
        The snapshot, unchanged

    Raises:
        SerializationError: With the JSON path of the first offending value
    """
    try:
        validate(instance=snapshot, schema=SNAPSHOT_SCHEMA)
    except ValidationError as e:
        path = "/".join(str(part) for part in e.absolute_path) or "<root>"
        raise SerializationError(f"Invalid snapshot: {e.message}", error_path=path) from e
    return snapshot


def dump_snapshot(snapshot: dict[str, Any]) -> bytes:
    """Serialize a snapshot as indented UTF-8 JSON."""
    try:
        return json.dumps(snapshot, indent=2, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Snapshot is not JSON serializable: {e}") from e


def load_snapshot_file(path: Path) -> dict[str, Any]:
    """
    Read and validate a snapshot or backup file.

    Raises:
        SerializationError: If the file is missing, not JSON, or not a snapshot
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SerializationError(f"Snapshot file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON in snapshot file: {e}") from e
    return validate_snapshot(data)
