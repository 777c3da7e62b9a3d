"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from health_system_api.app.core.security import create_access_token
from health_system_api.app.core.store import HealthSystemStore
from health_system_api.app.main import create_app


@pytest.fixture
def store():
    """An empty in‑memory store."""
    return HealthSystemStore()


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "nurse@example.org"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def john_data():
    return {
        "first_name": "John",
        "last_name": "Doe",
        "date_of_birth": "1985-05-15",
        "gender": "male",
        "contact_number": "+1234567890",
        "address": "123 Main St",
    }


@pytest.fixture
def jane_data():
    return {
        "first_name": "Jane",
        "last_name": "Smith",
        "date_of_birth": "1990-08-20",
        "gender": "female",
        "contact_number": "+1987654321",
        "email": "jane.smith@example.com",
        "address": "456 Elm St, Othertown",
        "medical_history": "History of asthma",
    }


@pytest.fixture
def hiv_program_data():
    return {
        "name": "HIV Prevention",
        "description": "Program aimed at HIV prevention through education and screening.",
    }
