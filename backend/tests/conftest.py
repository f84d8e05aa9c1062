"""
Shared pytest fixtures for patient and heart-rate tests.
"""
import pytest
from fastapi.testclient import TestClient

from analytics import HeartRateAnalytics
from main import create_app
from models import HeartRateReading, Patient, PatientGender
from stores import PatientStore, ReadingStore

# Scenario readings for patient "1": three valid readings on 2024-03-01
# plus one malformed timestamp that must never be counted.
SCENARIO_READINGS = [
    HeartRateReading(patientId="1", timestamp="2024-03-01T10:00:00Z", heartRate=85),
    HeartRateReading(patientId="1", timestamp="2024-03-01T10:30:00Z", heartRate=101),
    HeartRateReading(patientId="1", timestamp="2024-03-01T11:00:00Z", heartRate=97),
    HeartRateReading(patientId="1", timestamp="not-a-date", heartRate=200),
]

DAY_FROM = "2024-03-01T00:00:00Z"
DAY_TO = "2024-03-01T23:59:59Z"


@pytest.fixture
def patient_store():
    """Patient store with Alice (id 1) and Bob (id 2)."""
    store = PatientStore()
    store.upsert_many([
        Patient(id="1", name="Alice", age=30, gender=PatientGender.FEMALE),
        Patient(id="2", name="Bob", age=52, gender=PatientGender.MALE),
    ])
    return store


@pytest.fixture
def reading_store():
    """Reading store seeded with the scenario readings for patient 1."""
    store = ReadingStore()
    store.upsert_many(SCENARIO_READINGS)
    return store


@pytest.fixture
def analytics(patient_store, reading_store):
    return HeartRateAnalytics(patient_store, reading_store)


@pytest.fixture
def app(patient_store, reading_store):
    """Fresh app wired to the fixture stores (no dataset seeding)."""
    return create_app(patient_store=patient_store, reading_store=reading_store, seed=False)


@pytest.fixture
def client(app):
    """FastAPI TestClient."""
    return TestClient(app)


@pytest.fixture
def seeded_client():
    """Client for an app seeded from the bundled dataset."""
    return TestClient(create_app())


def assert_problem(response, status: int, code: str = None):
    """Helper: assert an RFC 7807 problem response."""
    assert response.status_code == status
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["type"] == "about:blank"
    assert body["status"] == status
    assert "title" in body
    assert "instance" in body
    if code:
        assert body["code"] == code
    return body
