"""
Configuration management for ADMISSION_DB.

Every setting can be passed directly or picked up from an environment
variable, so ``AdmissionDatabase`` works both embedded in an application and
from the command line.
"""

import os
from pathlib import Path

from .constants import (
    DEFAULT_DB_NAME,
    DEFAULT_IMPORT_BATCH_DELAY_MS,
    DEFAULT_IMPORT_BATCH_SIZE,
    DEFAULT_MONGO_URI,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    SCHEMA_VERSION,
)
from .exceptions import ConfigurationError


class AdmissionDBConfig:
    """
    Admission store configuration.

    Example:
        # Using environment variables
        config = AdmissionDBConfig()

        # Or explicit values
        config = AdmissionDBConfig(
            mongo_uri="mongodb://localhost:27017",
            db_name="admissions",
            import_batch_size=100,
        )
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_name: str | None = None,
        schema_version: int | None = None,
        import_batch_size: int | None = None,
        import_batch_delay_ms: int | None = None,
        backup_dir: str | Path | None = None,
        server_selection_timeout_ms: int | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to ADMISSION_DB_URI)
            db_name: Database name (defaults to ADMISSION_DB_NAME)
            schema_version: Schema version to open with (defaults to 2)
            import_batch_size: Records per import batch (defaults to 50)
            import_batch_delay_ms: Pause after each import batch (defaults to 100)
            backup_dir: Directory backups are written to (defaults to cwd)
            server_selection_timeout_ms: Server selection timeout (defaults to 5000)
        """
        self.mongo_uri = mongo_uri or os.getenv("ADMISSION_DB_URI", DEFAULT_MONGO_URI)
        self.db_name = db_name or os.getenv("ADMISSION_DB_NAME", DEFAULT_DB_NAME)
        self.schema_version = _pick_int(
            schema_version, "ADMISSION_DB_SCHEMA_VERSION", SCHEMA_VERSION
        )
        self.import_batch_size = _pick_int(
            import_batch_size, "ADMISSION_DB_IMPORT_BATCH_SIZE", DEFAULT_IMPORT_BATCH_SIZE
        )
        self.import_batch_delay_ms = _pick_int(
            import_batch_delay_ms,
            "ADMISSION_DB_IMPORT_BATCH_DELAY_MS",
            DEFAULT_IMPORT_BATCH_DELAY_MS,
        )
        self.backup_dir = Path(backup_dir or os.getenv("ADMISSION_DB_BACKUP_DIR", "."))
        self.server_selection_timeout_ms = _pick_int(
            server_selection_timeout_ms,
            "ADMISSION_DB_SERVER_SELECTION_TIMEOUT_MS",
            DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
        )

    @property
    def import_batch_delay_seconds(self) -> float:
        """Import batch delay as seconds, for ``asyncio.sleep``."""
        return self.import_batch_delay_ms / 1000

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError("mongo_uri is required", config_key="mongo_uri")

        if not self.db_name:
            raise ConfigurationError("db_name is required", config_key="db_name")

        if self.schema_version < 1:
            raise ConfigurationError(
                f"schema_version must be >= 1, got {self.schema_version}",
                config_key="schema_version",
                config_value=self.schema_version,
            )

        if self.import_batch_size < 1:
            raise ConfigurationError(
                f"import_batch_size must be >= 1, got {self.import_batch_size}",
                config_key="import_batch_size",
                config_value=self.import_batch_size,
            )

        if self.import_batch_delay_ms < 0:
            raise ConfigurationError(
                f"import_batch_delay_ms must be >= 0, got {self.import_batch_delay_ms}",
                config_key="import_batch_delay_ms",
                config_value=self.import_batch_delay_ms,
            )

        if self.server_selection_timeout_ms < 1:
            raise ConfigurationError(
                "server_selection_timeout_ms must be >= 1, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )


def _pick_int(value: int | None, env_var: str, default: int) -> int:
    if value is not None:
        return value
    raw = os.getenv(env_var)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{env_var} must be an integer", config_key=env_var, config_value=raw
        ) from e
