import os
import tempfile

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="bill-uploads-")
os.environ["LOG_FILE"] = ""
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.users import crud as user_crud
from app.users.schemas import UserRegistration


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, email, password="secret123", first_name="Test"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "firstName": first_name},
    )
    assert response.status_code == 201, response.text

    response = client.post("/api/auth/local-login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def login(client):
    def _login(email, password="secret123", first_name="Test"):
        return register_and_login(client, email, password, first_name)
    return _login


@pytest.fixture
def auth_headers(client):
    return register_and_login(client, "alice@example.com", first_name="Alice")


@pytest.fixture
def other_auth_headers(client):
    return register_and_login(client, "bob@example.com", first_name="Bob")


@pytest.fixture
def user(db_session):
    return user_crud.create_local_user(
        db_session,
        UserRegistration(email="owner@example.com", password="secret123", first_name="Owner"),
    )


@pytest.fixture
def other_user(db_session):
    return user_crud.create_local_user(
        db_session,
        UserRegistration(email="stranger@example.com", password="secret123", first_name="Stranger"),
    )
