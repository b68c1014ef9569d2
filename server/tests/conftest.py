"""
Simple pytest configuration
"""
import os

os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")
os.environ["SESSION_HTTPS_ONLY"] = "false"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["GEMINI_API_KEY"] = ""
os.environ.pop("GOOGLE_CLIENT_ID", None)

import pytest
from fastapi.testclient import TestClient

from main import app
from database.DB import MemoryStorage
from database.RosterStore import RosterStore


@pytest.fixture
def client():
    """Create a test client backed by a fresh in-memory roster"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    """A roster store seeded with one administrator (u1), one referee (u2) and competition c1"""
    return RosterStore(storage)


@pytest.fixture
def login_as(client):
    """Sign the test client in as the user with the given email"""
    def _login(email):
        response = client.post("/api/login", json={"email": email})
        assert response.status_code == 200, response.text
        return response.json()["user"]
    return _login
