import os
import tempfile

# Point the app at a throwaway database before anything imports db.database
_TMP_DIR = tempfile.mkdtemp(prefix="healthalert-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient

from db.database import Base, SessionLocal, engine
from db.models import AuthSession, UserRole
from main import app

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def accounts(db_session):
    """One admin and one ordinary signed-in user."""
    db_session.add_all([
        AuthSession(token=ADMIN_TOKEN, user_id="admin-1"),
        AuthSession(token=USER_TOKEN, user_id="user-1"),
        UserRole(user_id="admin-1", role="admin"),
        UserRole(user_id="user-1", role="user"),
    ])
    db_session.commit()
    return {"admin": "admin-1", "user": "user-1"}


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def auth(token):
    return {"Authorization": f"Bearer {token}"}
