"""
VisiTrack - Test Configuration and Fixtures
"""
import os

import mongomock
import pytest
from fastapi.testclient import TestClient

# Set testing environment
os.environ['ENVIRONMENT'] = 'TEST'
os.environ['MONGODB_URI'] = 'mongodb://localhost:27017'
os.environ['MONGODB_DB'] = 'visitrack_test'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_TO_FILE'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'

from visitrack.main import app
from visitrack.api.dependencies import get_db

PASSWORD = 'secret123'


def bearer(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


def event_payload(**overrides) -> dict:
    payload = {
        'eventName': 'Tech Expo',
        'status': 'Upcoming',
        'eventStartDate': '2026-12-10',
        'eventEndDate': '2026-12-12',
        'eventStartTime': '09:00',
        'eventEndTime': '17:00',
        'eventLocation': 'Hall A',
        'registrationDeadline': '2026-12-01',
        'eventInformation': 'Annual technology exhibition',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db():
    """Fresh in-memory database for each test"""
    mongo = mongomock.MongoClient()
    yield mongo['visitrack_test']
    mongo.close()


@pytest.fixture
def client(db):
    """Test client with the database dependency overridden"""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_admin(client):
    """Sign up a new organization; returns (headers, user)"""
    def _register(name: str = 'alpha', capacity: int = 3000):
        payload = {
            'fullName': f'{name.title()} Admin',
            'phoneNumber': '9876543210',
            'email': f'{name}@example.com',
            'capacity': capacity,
            'username': f'{name}_admin',
            'password': PASSWORD,
        }
        response = client.post('/api/register', json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return bearer(body['token']), body['user']

    return _register


@pytest.fixture
def tenant_a(register_admin):
    return register_admin('alpha')


@pytest.fixture
def tenant_b(register_admin):
    return register_admin('bravo', capacity=6000)


@pytest.fixture
def admin_headers(tenant_a):
    headers, _ = tenant_a
    return headers


@pytest.fixture
def other_admin_headers(tenant_b):
    headers, _ = tenant_b
    return headers


@pytest.fixture
def login(client):
    """Log in and return bearer headers"""
    def _login(email: str, password: str = PASSWORD):
        response = client.post('/api/login', json={'email': email, 'password': password})
        assert response.status_code == 200, response.text
        return bearer(response.json()['token'])

    return _login


@pytest.fixture
def create_member(client, login):
    """Create a team member with the given headers and log them in"""
    def _create(headers: dict, username: str, role: str = 'staff'):
        payload = {
            'fullName': username.title(),
            'phoneNumber': '9123456780',
            'email': f'{username}@example.com',
            'username': username,
            'password': PASSWORD,
            'role': role,
        }
        response = client.post('/api/users', json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return login(payload['email']), response.json()['user']

    return _create


@pytest.fixture
def create_event(client):
    def _create(headers: dict, **overrides):
        response = client.post('/api/events', json=event_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()['event']

    return _create


@pytest.fixture
def register_visitor(client):
    def _register(event_id: str, email: str = 'visitor@example.com', phone: str = '9000000001', **extra):
        payload = {
            'eventId': event_id,
            'fullName': 'Riya Shah',
            'email': email,
            'phoneNumber': phone,
            'company': 'Acme',
            **extra,
        }
        response = client.post('/api/register-visitor', json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register
