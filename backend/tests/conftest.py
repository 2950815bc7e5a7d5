"""
Pytest fixtures for salon backend tests.

Provides test database setup, seeded staff/seats/members, and an
authenticated test client.
"""

import pytest

from salon import create_app
from salon.extensions import db
from salon.models import Member, Seat, Staff
from salon.services import auth_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SALON_TIMEZONE': 'Asia/Seoul',
        'STAMP_GOAL': 10,
        'COMPLETE_LINKED_RESERVATION': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def staff(db_session):
    """Two stylists with fixed ids."""
    owner = Staff(id="s001", name="직원1", position=1)
    assistant = Staff(id="s002", name="직원2", position=2)
    db_session.add_all([owner, assistant])
    db_session.commit()
    return [owner, assistant]


@pytest.fixture(scope='function')
def seats(db_session):
    """Three available seats (ids 1..3)."""
    rows = [Seat(name=f"{n}번 좌석", status="available") for n in range(1, 4)]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture(scope='function')
def member(db_session):
    m = Member(name="홍길동", phone="010-1234-5678", stamps=0, position=1)
    db_session.add(m)
    db_session.commit()
    return m


@pytest.fixture(scope='function')
def admin_user(db_session):
    return auth_service.create_user("admin", "1234")


@pytest.fixture(scope='function')
def auth(client, admin_user):
    """Authorization headers for the admin user."""
    token = get_auth_token(client, "admin", "1234")
    assert token, "login failed"
    return auth_headers(token)


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def cut(price: int = 11000, name: str = "남자컷트") -> dict:
    """One priced service line."""
    return {"name": name, "length": None, "price": price}
