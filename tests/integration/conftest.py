"""
Fixtures for integration tests against the Firestore emulator.

The tests only run when ``FIRESTORE_EMULATOR_HOST`` is set, e.g.::

    gcloud emulators firestore start --host-port=localhost:8080
    FIRESTORE_EMULATOR_HOST=localhost:8080 pytest tests/integration
"""

import logging
import os

import httpx
import pytest
import pytest_asyncio

from firestore_catalog import FirestoreDB, init_catalog

logger = logging.getLogger(__name__)

EMULATOR_HOST = os.environ.get("FIRESTORE_EMULATOR_HOST", "").strip()
DATABASE = os.environ.get("FIRESTORE_DATABASE", None) or None
PROJECT_ID = os.environ.get("GOOGLE_CLOUD_PROJECT") or "test-project"

IS_EMULATOR = bool(EMULATOR_HOST)


@pytest.fixture()
def emulator_db():
    """FirestoreDB pointing to the emulator.

    Function-scoped so each test gets a fresh AsyncClient bound to the
    current event loop (avoids 'Event loop is closed' with gRPC).
    """
    return FirestoreDB(project_id=PROJECT_ID, database=DATABASE, emulator_host=EMULATOR_HOST)


@pytest_asyncio.fixture(autouse=True)
async def clean_emulator():
    """Wipe all emulator data before and after each test."""
    if IS_EMULATOR:
        await _reset_emulator()
    yield
    if IS_EMULATOR:
        await _reset_emulator()


async def _reset_emulator():
    db_name = DATABASE or "(default)"
    url = (
        f"http://{EMULATOR_HOST}/emulator/v1/projects/"
        f"{PROJECT_ID}/databases/{db_name}/documents"
    )
    async with httpx.AsyncClient() as client:
        response = await client.delete(url)
        if response.status_code >= 400:
            logger.warning(f"Emulator reset returned {response.status_code}")


@pytest.fixture()
def live_catalog(emulator_db):
    init_catalog(emulator_db)
    return emulator_db
