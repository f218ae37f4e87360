"""
Test configuration for the clinic booking backend.
"""
import os

# Settings are read on import, the environment has to be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SEED_SERVICES", "false")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_api.database import Base, get_db
from clinic_api.core.mail import get_mailer
from clinic_api.core.security import hash_password
from clinic_api.auth.models import User
from clinic_api.services.models import Service
from clinic_api.main import app

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "longenough1"


class FakeMailer:
    """
    Records outgoing emails instead of sending them.
    """
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to, subject, html_body):
        if self.fail:
            return False
        self.sent.append({"to": to, "subject": subject, "body": html_body})
        return True


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)
    
    # Create session
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        
    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def mailer():
    return FakeMailer()


@pytest.fixture(scope="function")
def client(db, mailer):
    """
    Create a test client with a test database session and a fake mailer.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass
    
    # Override the get_db and get_mailer dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    
    # Create test client
    with TestClient(app) as client:
        yield client
    
    # Remove dependency override
    app.dependency_overrides = {}


@pytest.fixture
def create_user(db):
    """
    Factory inserting accounts directly in the database.
    """
    def _create_user(email="patient@clinic.com", password=DEFAULT_PASSWORD, name="Patient",
                     verified=True, admin=False, token=None):
        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            verified=verified,
            admin=admin,
            token=token
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _create_user


@pytest.fixture
def verified_user(create_user):
    return create_user()


@pytest.fixture
def auth_headers(client):
    """
    Log in through the API and build the Authorization header.
    """
    def _auth_headers(email="patient@clinic.com", password=DEFAULT_PASSWORD):
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _auth_headers


@pytest.fixture
def services(db):
    """
    A small services catalogue.
    """
    catalogue = [
        Service(name="General consultation", price=40),
        Service(name="Blood test", price=25),
        Service(name="Vaccination", price=20),
    ]
    db.add_all(catalogue)
    db.commit()
    for service in catalogue:
        db.refresh(service)
    return catalogue
