"""
Pytest configuration and shared fixtures for ADMISSION_DB tests.

This module provides:
- An in-memory MongoDB (mongomock-motor)
- Opened record stores and admission databases
- Test data factories
"""

from typing import Any, AsyncGenerator, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from admission_db.config import AdmissionDBConfig
from admission_db.core.engine import AdmissionDatabase
from admission_db.core.status import StatusTracker
from admission_db.database.store import RecordStore
from admission_db.observability import get_metrics_collector

# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture
def admission_config(tmp_path) -> AdmissionDBConfig:
    """Configuration for tests: no import delay, backups under tmp_path."""
    return AdmissionDBConfig(
        mongo_uri="mongodb://localhost:27017",
        db_name="test_admissions",
        import_batch_delay_ms=0,
        backup_dir=tmp_path,
    )


@pytest.fixture(autouse=True)
def reset_metrics():
    """Keep the global metrics collector isolated per test."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


# ============================================================================
# MONGODB FIXTURES
# ============================================================================


@pytest.fixture
def mongo_client() -> AsyncMongoMockClient:
    """In-memory MongoDB client that enforces unique indexes."""
    return AsyncMongoMockClient()


@pytest.fixture
def failing_mongo_client() -> MagicMock:
    """A client whose database cannot be reached."""
    from pymongo.errors import ServerSelectionTimeoutError

    db = MagicMock()
    db.list_collection_names = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
    meta = MagicMock()
    meta.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
    db.__getitem__.return_value = meta

    client = MagicMock()
    client.__getitem__.return_value = db
    return client


# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
def status_tracker() -> StatusTracker:
    return StatusTracker()


@pytest_asyncio.fixture
async def record_store(
    admission_config: AdmissionDBConfig,
    mongo_client: AsyncMongoMockClient,
    status_tracker: StatusTracker,
) -> AsyncGenerator[RecordStore, None]:
    """An opened record store on the in-memory engine."""
    store = RecordStore(admission_config, status=status_tracker, client=mongo_client)
    await store.open()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def admission_db(
    admission_config: AdmissionDBConfig, mongo_client: AsyncMongoMockClient
) -> AsyncGenerator[AdmissionDatabase, None]:
    """An initialized AdmissionDatabase on the in-memory engine."""
    db = AdmissionDatabase(admission_config, client=mongo_client)
    await db.initialize()
    yield db
    await db.shutdown()


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


@pytest.fixture
def student_data() -> Dict[str, Any]:
    return {
        "name": "Alice Sharma",
        "email": "alice@example.com",
        "phone": "9876543210",
    }


@pytest.fixture
def make_student():
    """Factory for distinct student payloads."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> Dict[str, Any]:
        counter["n"] += 1
        data = {
            "name": f"Student {counter['n']}",
            "email": f"student{counter['n']}@example.com",
        }
        data.update(overrides)
        return data

    return _make
