import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient

from config import Settings
from fakes import FakeFirestore
from main import create_app


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        google_client_id="client-id",
        google_client_secret="client-secret",
        token_encryption_key=Fernet.generate_key().decode(),
    )


@pytest.fixture
def firestore_client():
    return FakeFirestore()


@pytest.fixture
def app(settings, firestore_client):
    return create_app(settings, firestore_client=firestore_client)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token_store(app):
    return app.state.token_store


@pytest.fixture
def booking_payload():
    return {
        "seatType": "A1",
        "date": "2024-01-01",
        "startTime": "10:00",
        "endTime": "11:00",
        "phoneNumber": "555",
        "email": "a@b.com",
        "userId": "u1",
    }
