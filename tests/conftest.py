import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Point the app at a throwaway database before app.config is imported
_DB_DIR = tempfile.mkdtemp(prefix="taskdb-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_DB_DIR) / 'test.sqlite'}"
os.environ.setdefault("APP_ENV", "test")


@pytest.fixture(scope="session")
def client():
    """One app instance (and event loop) for the whole API test run."""
    from app.main import app

    with TestClient(app) as c:
        yield c
