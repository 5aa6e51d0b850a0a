"""
Custom exceptions for ADMISSION_DB.

Storage primitives raise these directly; domain operations catch them and
fold them into ``{"success": False, ...}`` results.
"""

from typing import Any, Dict, Optional


class AdmissionDBError(RuntimeError):
    """
    Base exception for admission store errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection,
                 record_id, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InitializationError(AdmissionDBError):
    """
    Raised when the store cannot be opened.

    Attributes:
        message: Error message
        mongo_uri: MongoDB connection URI (if available)
        db_name: Database name (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if mongo_uri:
            context["mongo_uri"] = mongo_uri
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class NotInitializedError(AdmissionDBError):
    """Raised when an operation is attempted before a successful open."""

    def __init__(self, message: str = "Database not initialized") -> None:
        super().__init__(message)


class ConstraintViolation(AdmissionDBError):
    """
    Raised when a unique index rejects a write (e.g. duplicate student email).

    Attributes:
        collection: Collection the write targeted
        key: Offending key/value pairs reported by the engine (if available)
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        key: Optional[Dict[str, Any]] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if collection:
            context["collection"] = collection
        if key:
            context["key"] = key
        super().__init__(message, context=context)
        self.collection = collection
        self.key = key


class NotFound(AdmissionDBError):
    """Raised when the target of a read-modify-write does not exist."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        record_id: Optional[Any] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if collection:
            context["collection"] = collection
        if record_id is not None:
            context["record_id"] = record_id
        super().__init__(message, context=context)
        self.collection = collection
        self.record_id = record_id


class EngineError(AdmissionDBError):
    """Raised on underlying storage failures or misuse of the storage API."""


class SerializationError(AdmissionDBError):
    """
    Raised when a snapshot cannot be read or does not have the expected shape,
    or when a record value cannot be encoded for storage.

    Attributes:
        error_path: JSON path of the offending value (if available)
    """

    def __init__(self, message: str, error_path: Optional[str] = None) -> None:
        context = {"error_path": error_path} if error_path else None
        super().__init__(message, context=context)
        self.error_path = error_path


class ConfigurationError(AdmissionDBError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value
