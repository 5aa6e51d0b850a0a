"""
Uniform operation results.

Domain operations never raise to their callers. They return
``{"success": True, ...payload}`` or
``{"success": False, "error": <message>, "errorType": <exception class>}``.
"""

from typing import Any

from ..exceptions import AdmissionDBError

OPERATION_ERRORS: tuple[type[Exception], ...] = (
    AdmissionDBError,
    TypeError,
    ValueError,
    KeyError,
    AttributeError,
)
"""Faults folded into failure results: store errors plus bad caller input."""


def success(**payload: Any) -> dict[str, Any]:
    return {"success": True, **payload}


def failure(error: Exception) -> dict[str, Any]:
    message = error.message if isinstance(error, AdmissionDBError) else str(error)
    return {"success": False, "error": message, "errorType": type(error).__name__}
